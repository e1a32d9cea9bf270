"""
Live validation of a single node.

The host re-runs ``validate_node`` whenever the author edits a node's
configuration, so the work done here is proportional to that node's fields.
The first error found is stored on the node by ``annotate_node``; the
compiler later propagates it without recomputing anything.
"""

import logging

from flowlint.config import DEFAULT_CONFIG, ValidationConfig
from flowlint.core.diagnostics import Diagnostic, IssueCategory
from flowlint.models import (
    DecisionNode,
    Flow,
    FlowNode,
    FunctionCallNode,
    LoopNode,
    Project,
    SubFlowNode,
)
from flowlint.structure.registry import StructRegistry, VariableTable
from flowlint.templates.variables import node_references, scan_member_references
from flowlint.validation.call_sites import validate_function_call
from flowlint.validation.expressions import check_arithmetic_operands, validate_expression

logger = logging.getLogger(__name__)


def validate_node(
    node: FlowNode,
    flow: Flow,
    project: Project,
    config: ValidationConfig | None = None,
) -> list[Diagnostic]:
    """
    Run every live check that applies to one node.

    Params:
        node: Node being edited
        flow: Flow containing the node, whose local variables are in scope
        project: Whole project, for globals, structs, code files and flows
        config: Validation options, defaults when omitted

    Returns:
        Diagnostics located at (flow, node), in check order
    """
    config = config or DEFAULT_CONFIG
    table = VariableTable(flow.variables, project.global_variables)
    structs = project.struct_registry()

    diagnostics = _check_undefined_variables(node, table, config)
    diagnostics.extend(_check_member_references(node, table, structs, config))

    if isinstance(node, (DecisionNode, LoopNode)):
        diagnostics.extend(_check_condition(node.condition, table, config))
    elif isinstance(node, FunctionCallNode):
        # Undefined argument variables were already reported by the scan above
        diagnostics.extend(
            d
            for d in validate_function_call(
                node, project, table, flag_unknown_arguments=config.flag_unknown_arguments
            )
            if d.category is not IssueCategory.UNDEFINED_VARIABLE
        )
    elif isinstance(node, SubFlowNode):
        if node.sub_flow_id and project.get_flow(node.sub_flow_id) is None:
            diagnostics.append(
                Diagnostic.error(
                    IssueCategory.TARGET_NOT_FOUND,
                    f"Sub-flow target '{node.sub_flow_id}' does not exist.",
                )
            )

    logger.debug("Node %s (%s): %d diagnostics", node.id, node.kind, len(diagnostics))
    return [d.located(flow.id, node.id) for d in diagnostics]


def annotate_node(node: FlowNode, diagnostics: list[Diagnostic]) -> FlowNode:
    """Return a copy of ``node`` whose ``error`` holds the first error message."""
    first_error = next((d.message for d in diagnostics if d.is_error), None)
    return node.model_copy(update={"error": first_error})


def validate_flow(
    flow: Flow, project: Project, config: ValidationConfig | None = None
) -> list[Diagnostic]:
    """Run ``validate_node`` over every node of a flow."""
    diagnostics = []
    for node in flow.nodes:
        diagnostics.extend(validate_node(node, flow, project, config))
    return diagnostics


def annotate_project(project: Project, config: ValidationConfig | None = None) -> Project:
    """
    Return a copy of the project with every node's ``error`` refreshed.

    This is what the host does incrementally as nodes are edited; running it
    over the whole project is useful before a compile of imported state.
    """
    flows = {}
    for flow_id, flow in project.flows.items():
        nodes = [
            annotate_node(node, validate_node(node, flow, project, config))
            for node in flow.nodes
        ]
        flows[flow_id] = flow.model_copy(update={"nodes": nodes})
    return project.model_copy(update={"flows": flows})


def _check_undefined_variables(
    node: FlowNode, table: VariableTable, config: ValidationConfig
) -> list[Diagnostic]:
    diagnostics = []
    for name in node_references(node, table):
        if name in table:
            continue
        diagnostics.append(
            Diagnostic(
                severity=config.undefined_variable_severity,
                message=f"Variable '{name}' is not defined.",
                category=IssueCategory.UNDEFINED_VARIABLE,
            )
        )
    return diagnostics


def _check_member_references(
    node: FlowNode,
    table: VariableTable,
    structs: StructRegistry,
    config: ValidationConfig,
) -> list[Diagnostic]:
    fields = {**node.text_fields(), **node.code_fields()}
    diagnostics = []
    seen = set()
    for text in fields.values():
        for reference in scan_member_references(text):
            if reference in seen:
                continue
            seen.add(reference)

            variable = table.resolve(reference.root)
            if variable is None:
                continue
            resolution = structs.resolve_member_path(
                variable.declared_type,
                reference.members,
                root_is_array=variable.is_array,
                max_depth=config.max_member_depth,
            )
            if not resolution.is_resolved:
                diagnostics.append(
                    Diagnostic.warning(
                        IssueCategory.UNKNOWN_MEMBER,
                        f"Struct '{resolution.owner_type}' has no field "
                        f"'{resolution.missing_member}' (in '{{{reference.path}}}').",
                    )
                )
    return diagnostics


def _check_condition(
    condition: str, table: VariableTable, config: ValidationConfig
) -> list[Diagnostic]:
    if not condition.strip():
        if config.check_empty_conditions:
            return [Diagnostic.warning(IssueCategory.EMPTY_CONDITION, "Condition is empty.")]
        return []

    finding = validate_expression(condition, table)
    if finding is None and config.check_arithmetic_operands:
        finding = check_arithmetic_operands(condition, table)
    return [finding] if finding else []
