"""
flowlint validators.

Field-level validators (expressions, call sites) return unlocated
diagnostics; ``validate_node`` runs them for one node and binds the results
to the node's flow and id.
"""

from flowlint.validation.call_sites import validate_call_site, validate_function_call
from flowlint.validation.expressions import check_arithmetic_operands, validate_expression
from flowlint.validation.nodes import annotate_node, annotate_project, validate_flow, validate_node

__all__ = [
    "annotate_node",
    "annotate_project",
    "check_arithmetic_operands",
    "validate_call_site",
    "validate_expression",
    "validate_flow",
    "validate_function_call",
    "validate_node",
]
