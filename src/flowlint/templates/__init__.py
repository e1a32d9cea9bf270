"""
Variable reference scanning.

This package finds ``{variable}`` interpolation tokens and direct
identifier usage in node text and code fields.
"""

from flowlint.templates.variables import (
    MemberReference,
    VariableUsage,
    collect_variable_usages,
    is_valid_variable_name,
    node_references,
    scan_code_identifiers,
    scan_member_references,
    scan_references,
    scan_tokens,
    single_token,
)

__all__ = [
    "MemberReference",
    "VariableUsage",
    "collect_variable_usages",
    "is_valid_variable_name",
    "node_references",
    "scan_code_identifiers",
    "scan_member_references",
    "scan_references",
    "scan_tokens",
    "single_token",
]
