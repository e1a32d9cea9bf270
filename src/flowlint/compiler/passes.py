"""
The whole-project compile pass.

``compile_project`` is run on demand, not per keystroke. It walks every
node of every flow and every code file and returns all findings as one
flat list; it never stops at the first error.
"""

import logging

from flowlint.config import DEFAULT_CONFIG, ValidationConfig
from flowlint.core.diagnostics import Diagnostic, IssueCategory, Severity, count_by_severity
from flowlint.models import CodeFile, CodeNode, FlowNode, FunctionCallNode, Project, SubFlowNode
from flowlint.parsing.signatures import check_file_structure

logger = logging.getLogger(__name__)


def compile_project(project: Project, config: ValidationConfig | None = None) -> list[Diagnostic]:
    """
    Collect every diagnostic of the project.

    Per node, in flow then node order: an unselected sub-flow target, an
    empty code body, an unconfigured function call and any error stored on
    the node by live validation. Then, per code file, a structural check for
    a namespace and a public type declaration.

    Params:
        project: Project to compile
        config: Validation options, defaults when omitted

    Returns:
        Diagnostics in a stable order
    """
    config = config or DEFAULT_CONFIG
    diagnostics: list[Diagnostic] = []

    for flow, node in project.iter_nodes():
        diagnostics.extend(d.located(flow.id, node.id) for d in _check_node(node))

    for code_file in project.code_files:
        diagnostics.extend(_check_code_file(code_file, config))

    counts = count_by_severity(diagnostics)
    logger.info(
        "Compiled %d flows and %d code files: %d errors, %d warnings",
        len(project.flows),
        len(project.code_files),
        counts[Severity.ERROR],
        counts[Severity.WARNING],
    )
    return diagnostics


def _check_node(node: FlowNode) -> list[Diagnostic]:
    diagnostics = []

    if isinstance(node, SubFlowNode) and not node.sub_flow_id:
        diagnostics.append(
            Diagnostic.error(IssueCategory.MISSING_SUBFLOW_TARGET, "Sub-flow target not selected.")
        )
    elif isinstance(node, CodeNode) and not node.code.strip():
        diagnostics.append(Diagnostic.error(IssueCategory.EMPTY_CODE, "Code block is empty."))
    elif isinstance(node, FunctionCallNode) and not node.is_configured:
        missing = [
            label
            for label, value in (("code file", node.code_file_id), ("function", node.function_name))
            if not value
        ]
        diagnostics.append(
            Diagnostic.error(
                IssueCategory.UNCONFIGURED_FUNCTION_CALL,
                f"Function call is not configured: missing {' and '.join(missing)}.",
            )
        )

    if node.error:
        diagnostics.append(Diagnostic.error(IssueCategory.NODE_ERROR, node.error))

    return diagnostics


def _check_code_file(code_file: CodeFile, config: ValidationConfig) -> list[Diagnostic]:
    # Code files belong to no flow, so these carry code_file_id and no flow_id
    return [
        Diagnostic(
            severity=config.file_structure_severity,
            message=f"{code_file.name} is missing a {missing}.",
            category=IssueCategory.FILE_STRUCTURE,
            code_file_id=code_file.id,
        )
        for missing in check_file_structure(code_file.source_text)
    ]
