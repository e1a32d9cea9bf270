"""
Whole-project passes: the cross-reference index and the compiler.
"""

from flowlint.compiler.passes import compile_project
from flowlint.compiler.references import (
    ReferenceKind,
    ReferenceResult,
    find_references,
    find_variable_usages,
)

__all__ = [
    "ReferenceKind",
    "ReferenceResult",
    "compile_project",
    "find_references",
    "find_variable_usages",
]
