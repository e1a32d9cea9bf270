"""
Parsing of embedded scripting source files.

``parse_signatures`` is the only entry point downstream components rely on,
so the heuristic line scanner behind it can be replaced by a real parser
without touching the validators.
"""

from flowlint.parsing.signatures import (
    CallableSignature,
    ParameterSignature,
    check_file_structure,
    parse_parameters,
    parse_signatures,
)

__all__ = [
    "CallableSignature",
    "ParameterSignature",
    "check_file_structure",
    "parse_parameters",
    "parse_signatures",
]
