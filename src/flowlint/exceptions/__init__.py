"""
flowlint exception classes.

This package provides the exception types raised for library misuse.
Problems in the validated project itself are reported as diagnostics.
"""

from flowlint.exceptions.core import (
    ConfigurationError,
    FlowLintError,
    InvalidVariableNameError,
    UnknownReferenceKindError,
)

__all__ = [
    "FlowLintError",
    "ConfigurationError",
    "InvalidVariableNameError",
    "UnknownReferenceKindError",
]
