"""
Core definitions shared by every flowlint component.
"""

from flowlint.core.diagnostics import Diagnostic, IssueCategory, Severity, count_by_severity
from flowlint.core.types import ArgumentBindings, TypeName

__all__ = [
    "ArgumentBindings",
    "Diagnostic",
    "IssueCategory",
    "Severity",
    "TypeName",
    "count_by_severity",
]
