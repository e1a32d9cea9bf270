"""
Autocomplete suggestions for node text and code editors.

Given the text before the cursor, ``suggest_completions`` decides what the
author is typing and proposes candidates:

* ``{`` starts a variable token and lists visible variables
* ``@`` starts a system keyword
* ``name.`` lists struct fields of a variable, or the classes / methods of a
  library namespace / class
* a partial word is completed from library namespaces and keywords

Library tables only feed these suggestions; validation never consults them.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from flowlint.models import Library, StructDefinition
from flowlint.structure.registry import StructRegistry, VariableTable

MAX_WORD_SUGGESTIONS = 8

SYSTEM_KEYWORDS = {
    "@TIMESTAMP": "Current time as a millisecond timestamp",
    "@DATE": "Current date as YYYY-MM-DD",
    "@UUID": "A newly generated UUID",
    "@USER_ID": "Id of the user running the flow",
    "@SYS_VERSION": "Current system version",
}

SCRIPT_KEYWORDS = (
    "abstract", "as", "base", "bool", "break", "byte", "case", "catch", "char", "checked",
    "class", "const", "continue", "decimal", "default", "delegate", "do", "double", "else",
    "enum", "event", "explicit", "extern", "false", "finally", "fixed", "float", "for",
    "foreach", "goto", "if", "implicit", "in", "int", "interface", "internal", "is", "lock",
    "long", "namespace", "new", "null", "object", "operator", "out", "override", "params",
    "private", "protected", "public", "readonly", "ref", "return", "sbyte", "sealed", "short",
    "sizeof", "stackalloc", "static", "string", "struct", "switch", "this", "throw", "true",
    "try", "typeof", "uint", "ulong", "unchecked", "unsafe", "ushort", "using", "virtual",
    "void", "volatile", "while", "var", "dynamic", "async", "await",
)

_TRAILING_WORD = re.compile(r"([A-Za-z0-9_]+)$")
_TRAILING_SYSTEM_KEYWORD = re.compile(r"@([A-Za-z0-9_]*)$")


class SuggestionKind(Enum):
    VARIABLE = "variable"
    SYSTEM = "system"
    FIELD = "field"
    LIBRARY = "library"
    KEYWORD = "keyword"


@dataclass(frozen=True)
class Suggestion:
    """Candidates to show and how much of the typed text they replace."""

    kind: SuggestionKind
    items: tuple[str, ...]
    replace_length: int = 0


def suggest_completions(
    text_before_cursor: str,
    variables: VariableTable | Iterable[Any] | None = None,
    structs: Iterable[StructDefinition] = (),
    libraries: Iterable[Library] = (),
) -> Suggestion | None:
    """
    Suggest completions for the text typed so far.

    Params:
        text_before_cursor: Editor content up to the cursor
        variables: Variables visible to the edited node
        structs: Struct definitions, for member completion
        libraries: Library tables, for namespace/class/method completion

    Returns:
        A Suggestion, or None when nothing applies
    """
    if not text_before_cursor:
        return None

    table = VariableTable.coerce(variables)
    libraries = list(libraries)
    last_char = text_before_cursor[-1]

    if last_char == "{":
        names = tuple(v.name for v in table)
        return Suggestion(SuggestionKind.VARIABLE, names) if names else None

    system_match = _TRAILING_SYSTEM_KEYWORD.search(text_before_cursor)
    if system_match:
        prefix = system_match.group(1).upper()
        items = tuple(k for k in SYSTEM_KEYWORDS if k[1:].startswith(prefix))
        if items:
            return Suggestion(SuggestionKind.SYSTEM, items, len(system_match.group(0)))

    if last_char == ".":
        return suggest_members(text_before_cursor[:-1], table, StructRegistry(structs), libraries)

    word_match = _TRAILING_WORD.search(text_before_cursor)
    if word_match:
        word = word_match.group(1)
        namespaces = [ns.name for lib in libraries for ns in lib.namespaces]
        candidates = list(dict.fromkeys([*namespaces, *SCRIPT_KEYWORDS]))
        matches = [
            c for c in candidates if c.lower().startswith(word.lower()) and c != word
        ][:MAX_WORD_SUGGESTIONS]
        if matches:
            kind = SuggestionKind.LIBRARY if matches[0] in namespaces else SuggestionKind.KEYWORD
            return Suggestion(kind, tuple(matches), len(word))

    return None


def suggest_members(
    text_before_dot: str,
    variables: VariableTable,
    structs: StructRegistry,
    libraries: list[Library],
) -> Suggestion | None:
    """
    Suggest members for the word right before a ``.``.

    Struct fields are offered one level deep, for a variable whose declared
    type is a struct. Otherwise the word is looked up as a library namespace
    (offering its classes) or class (offering its methods).
    """
    match = _TRAILING_WORD.search(text_before_dot)
    if not match:
        return None
    token = match.group(1)

    variable = variables.resolve(token)
    if variable is not None:
        fields = structs.field_names(variable.declared_type)
        if fields:
            return Suggestion(SuggestionKind.FIELD, tuple(fields))

    for library in libraries:
        for namespace in library.namespaces:
            if namespace.name == token and namespace.classes:
                return Suggestion(SuggestionKind.LIBRARY, tuple(c.name for c in namespace.classes))
            for library_class in namespace.classes:
                if library_class.name == token and library_class.methods:
                    return Suggestion(
                        SuggestionKind.LIBRARY, tuple(m.name for m in library_class.methods)
                    )
    return None
