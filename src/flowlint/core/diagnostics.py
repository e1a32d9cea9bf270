"""
Diagnostic records produced by the validators and the compiler pass.

A diagnostic is data, never an exception: it carries a severity, a
human-readable message, a machine-readable category and, where a
mechanical repair exists, a suggested replacement for the checked text.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


class IssueCategory(Enum):
    """What kind of authoring mistake a diagnostic reports."""

    ASSIGNMENT_CONFUSION = "assignment_confusion"
    TYPE_MISMATCH = "type_mismatch"
    BOOLEAN_CONTEXT = "boolean_context"
    ARITHMETIC_OPERAND = "arithmetic_operand"
    EMPTY_CONDITION = "empty_condition"
    UNDEFINED_VARIABLE = "undefined_variable"
    UNKNOWN_MEMBER = "unknown_member"
    ARGUMENT_TYPE_MISMATCH = "argument_type_mismatch"
    MISSING_ARGUMENT = "missing_argument"
    UNKNOWN_ARGUMENT = "unknown_argument"
    TARGET_NOT_FOUND = "target_not_found"
    MISSING_SUBFLOW_TARGET = "missing_subflow_target"
    EMPTY_CODE = "empty_code"
    UNCONFIGURED_FUNCTION_CALL = "unconfigured_function_call"
    NODE_ERROR = "node_error"
    FILE_STRUCTURE = "file_structure"


def _new_id() -> str:
    return uuid.uuid4().hex[:8]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Diagnostic:
    """
    A single validation finding.

    Field-level validators return diagnostics without a location; the
    per-node pass and the compiler bind them to a flow and node with
    ``located``.

    Params:
        severity: ERROR or WARNING
        message: User-facing description of the problem
        category: Machine-readable kind of the problem
        suggested_replacement: Full replacement text for the checked field
        flow_id: Flow the finding belongs to
        node_id: Node the finding belongs to, if any
        code_file_id: Code file the finding belongs to, if any
    """

    severity: Severity
    message: str
    category: IssueCategory
    suggested_replacement: str | None = None
    flow_id: str | None = None
    node_id: str | None = None
    code_file_id: str | None = None
    id: str = field(default_factory=_new_id)
    timestamp: str = field(default_factory=_now, compare=False)

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    @property
    def has_fix(self) -> bool:
        return self.suggested_replacement is not None

    def located(self, flow_id: str, node_id: str | None = None) -> "Diagnostic":
        """Return a copy bound to a flow and optionally a node."""
        return replace(self, flow_id=flow_id, node_id=node_id)

    @classmethod
    def error(cls, category: IssueCategory, message: str, **kwargs) -> "Diagnostic":
        return cls(severity=Severity.ERROR, message=message, category=category, **kwargs)

    @classmethod
    def warning(cls, category: IssueCategory, message: str, **kwargs) -> "Diagnostic":
        return cls(severity=Severity.WARNING, message=message, category=category, **kwargs)


def count_by_severity(diagnostics: list[Diagnostic]) -> dict[Severity, int]:
    counts = {Severity.ERROR: 0, Severity.WARNING: 0}
    for diagnostic in diagnostics:
        counts[diagnostic.severity] += 1
    return counts
