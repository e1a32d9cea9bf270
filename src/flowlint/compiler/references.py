"""
Cross-reference queries over a whole project.

Nothing is indexed ahead of time: each query walks every node of every
flow, so results always reflect the project state passed in.
"""

from dataclasses import dataclass
from enum import Enum

from flowlint.exceptions import UnknownReferenceKindError
from flowlint.models import FunctionCallNode, Project, SubFlowNode
from flowlint.structure.registry import VariableTable
from flowlint.templates.variables import node_references


class ReferenceKind(Enum):
    """What a reference query is looking for."""

    SUBFLOW = "subflow"
    FUNCTION_CALL = "functioncall"
    VARIABLE = "variable"


@dataclass(frozen=True)
class ReferenceResult:
    """One node that points at the queried entity."""

    flow_id: str
    flow_name: str
    node_id: str
    node_label: str
    context: ReferenceKind


def _coerce_kind(target_kind: ReferenceKind | str) -> ReferenceKind:
    if isinstance(target_kind, ReferenceKind):
        return target_kind
    try:
        return ReferenceKind(str(target_kind).lower().replace("_", "").replace("-", ""))
    except ValueError:
        raise UnknownReferenceKindError(
            str(target_kind), tuple(kind.value for kind in ReferenceKind)
        ) from None


def find_references(
    target_kind: ReferenceKind | str,
    target_id: str,
    project: Project,
    function_name: str | None = None,
) -> list[ReferenceResult]:
    """
    Find the nodes that call a sub-flow or a code file.

    Params:
        target_kind: ``subflow`` to match sub-flow nodes by target flow id,
            ``functioncall`` to match function-call nodes by code file id
        target_id: Flow id or code file id being looked up
        project: Project to search
        function_name: Optionally narrow ``functioncall`` matches to one
            function of the code file

    Returns:
        One ReferenceResult per matching node, in flow then node order

    Raises:
        UnknownReferenceKindError: If ``target_kind`` is not a supported kind
    """
    kind = _coerce_kind(target_kind)
    if kind is ReferenceKind.VARIABLE:
        return find_variable_usages(target_id, project)

    results = []
    for flow, node in project.iter_nodes():
        if kind is ReferenceKind.SUBFLOW:
            matched = isinstance(node, SubFlowNode) and node.sub_flow_id == target_id
        else:
            matched = (
                isinstance(node, FunctionCallNode)
                and node.code_file_id == target_id
                and (function_name is None or node.function_name == function_name)
            )
        if matched:
            results.append(
                ReferenceResult(
                    flow_id=flow.id,
                    flow_name=flow.name,
                    node_id=node.id,
                    node_label=node.display_label,
                    context=kind,
                )
            )
    return results


def find_variable_usages(
    name: str, project: Project, flow_id: str | None = None
) -> list[ReferenceResult]:
    """
    Find the nodes that reference a variable by name.

    A flow that declares a local variable with this name shadows the global
    one, so its nodes still count as using "a variable named ``name``".

    Params:
        name: Variable name
        project: Project to search
        flow_id: Restrict the search to one flow

    Returns:
        One ReferenceResult per referencing node
    """
    results = []
    for flow, node in project.iter_nodes():
        if flow_id is not None and flow.id != flow_id:
            continue
        table = VariableTable(flow.variables, project.global_variables)
        if name in node_references(node, table):
            results.append(
                ReferenceResult(
                    flow_id=flow.id,
                    flow_name=flow.name,
                    node_id=node.id,
                    node_label=node.display_label,
                    context=ReferenceKind.VARIABLE,
                )
            )
    return results
