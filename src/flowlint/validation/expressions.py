"""
Heuristic validation of decision and loop conditions.

A condition is free text with ``{variable}`` tokens, written in the
scripting language's expression syntax. The checks below catch the common
authoring slips (assignment instead of comparison, comparing unrelated
types, using a non-boolean as a condition). A condition that passes is not
proven correct; it merely tripped none of the heuristics.
"""

import re
from collections.abc import Iterable
from typing import Any

from flowlint.core.diagnostics import Diagnostic, IssueCategory
from flowlint.structure.registry import VariableTable
from flowlint.structure.type_mapping import BOOLEAN, STRING, compatible, is_numeric, normalize_type_name
from flowlint.templates.variables import IDENTIFIER, TOKEN_PATTERN, scan_tokens, single_token

COMPARISON_OPERATORS = ("===", "!==", "==", "!=", ">=", "<=", ">", "<")

_TOKEN = rf"\{{{IDENTIFIER}\}}"
_OPERAND = rf"(?:{_TOKEN}|\"[^\"]*\"|'[^']*'|[\w.]+)"

# A single "=" that is not part of ==, !=, >=, <=, === or =>
LONE_EQUALS_PATTERN = re.compile(r"(?<![=!<>])=(?![=>])")

QUOTED_PATTERN = re.compile(r"\"[^\"]*\"|'[^']*'")

ASSIGNMENT_PATTERN = re.compile(
    rf"(?P<left>{_OPERAND})\s*(?<![=!<>])(?P<op>=)(?![=>])\s*(?P<right>{_OPERAND})"
)

# The right-hand token sits in a lookahead so chained comparisons all match
BINARY_COMPARISON_PATTERN = re.compile(
    rf"\{{(?P<left>{IDENTIFIER})\}}\s*"
    rf"(?P<op>{'|'.join(re.escape(op) for op in COMPARISON_OPERATORS)})\s*"
    rf"(?=\{{(?P<right>{IDENTIFIER})\}})"
)

ARITHMETIC_OPERATOR_PATTERN = re.compile(r">|<|-|\*|/")

CAST_FUNCTIONS = r"(?:int|long|double|float|decimal|Convert\.\w+|[\w.]*Parse)"


def validate_expression(
    text: str | None, variables: VariableTable | Iterable[Any] | None = None
) -> Diagnostic | None:
    """
    Validate a boolean-context expression from a decision or loop node.

    Checks run in priority order and the first one that fires wins:

    1. assignment confusion (``{x} = 5``), with a fix rewriting ``=`` to ``==``
    2. comparison of two variables whose types are not compatible
    3. a lone non-boolean variable used as the whole condition, with a fix
       that turns it into an explicit test

    Params:
        text: The condition text
        variables: Variables visible to the node (table, models or dicts)

    Returns:
        A Diagnostic for the first heuristic that fired, or None
    """
    if not text or not text.strip():
        return None

    table = VariableTable.coerce(variables)

    return (
        _check_assignment_confusion(text)
        or _check_binary_type_mismatch(text, table)
        or _check_boolean_context(text, table)
    )


def check_arithmetic_operands(
    text: str | None, variables: VariableTable | Iterable[Any] | None = None
) -> Diagnostic | None:
    """
    Warn when a string variable takes part in numeric operators without a cast.

    Params:
        text: Expression text
        variables: Variables visible to the node

    Returns:
        A warning naming the first offending variable, or None
    """
    if not text or not ARITHMETIC_OPERATOR_PATTERN.search(text):
        return None

    table = VariableTable.coerce(variables)
    for name in scan_tokens(text):
        variable = table.resolve(name)
        if variable is None or normalize_type_name(variable.declared_type) != STRING:
            continue
        cast_pattern = rf"{CAST_FUNCTIONS}\s*\(\s*\{{{re.escape(name)}\}}\s*\)"
        if re.search(cast_pattern, text):
            continue
        return Diagnostic.warning(
            IssueCategory.ARITHMETIC_OPERAND,
            f"Variable '{name}' is a string but is used in a numeric operation. "
            f"Convert it first, e.g. int({{{name}}}) or Convert.ToInt32({{{name}}}).",
        )
    return None


def _check_assignment_confusion(text: str) -> Diagnostic | None:
    quoted_spans = [m.span() for m in QUOTED_PATTERN.finditer(text)]
    for match in ASSIGNMENT_PATTERN.finditer(text):
        position = match.start("op")
        if any(start < position < end for start, end in quoted_spans):
            continue
        left, right = match.group("left"), match.group("right")
        if TOKEN_PATTERN.fullmatch(left) or TOKEN_PATTERN.fullmatch(right):
            return Diagnostic.error(
                IssueCategory.ASSIGNMENT_CONFUSION,
                f"'{match.group(0).strip()}' assigns instead of comparing. "
                "Use '==' to test for equality.",
                suggested_replacement=_rewrite_lone_equals(text),
            )
    return None


def _rewrite_lone_equals(text: str) -> str:
    """Replace every lone `=` operator with `==`, leaving quoted literals untouched."""
    parts = []
    last = 0
    for match in QUOTED_PATTERN.finditer(text):
        parts.append(LONE_EQUALS_PATTERN.sub("==", text[last : match.start()]))
        parts.append(match.group(0))
        last = match.end()
    parts.append(LONE_EQUALS_PATTERN.sub("==", text[last:]))
    return "".join(parts)


def _check_binary_type_mismatch(text: str, table: VariableTable) -> Diagnostic | None:
    mismatches = []
    for match in BINARY_COMPARISON_PATTERN.finditer(text):
        left = table.resolve(match.group("left"))
        right = table.resolve(match.group("right"))
        if left is None or right is None:
            continue
        if not compatible(left.declared_type, right.declared_type):
            mismatches.append(
                f"{left.declared_type} '{left.name}' {match.group('op')} "
                f"{right.declared_type} '{right.name}'"
            )

    if not mismatches:
        return None
    return Diagnostic.error(
        IssueCategory.TYPE_MISMATCH,
        f"Comparing values of incompatible types: {'; '.join(mismatches)}.",
    )


def _check_boolean_context(text: str, table: VariableTable) -> Diagnostic | None:
    name = single_token(text)
    if name is None:
        return None
    variable = table.resolve(name)
    if variable is None:
        return None

    declared_type = normalize_type_name(variable.declared_type)
    if declared_type == BOOLEAN and not variable.is_array:
        return None

    token = f"{{{name}}}"
    if variable.is_array:
        replacement = f"{token} != null"
    elif declared_type == STRING:
        replacement = f'{token} != ""'
    elif is_numeric(declared_type):
        replacement = f"{token} != 0"
    else:
        replacement = f"{token} != null"

    return Diagnostic.warning(
        IssueCategory.BOOLEAN_CONTEXT,
        f"Variable '{name}' is of type {variable.declared_type}, not boolean. "
        f"Use an explicit test such as {replacement}.",
        suggested_replacement=replacement,
    )
