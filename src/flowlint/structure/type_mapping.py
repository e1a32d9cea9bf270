"""
Type compatibility lattice for flowlint variable and parameter checks.

The lattice is a linter heuristic, not a type system: it answers "is this
likely to be a mistake" for a small vocabulary of variable types. Callers
must treat a compatible verdict as absence of evidence, never as proof.
"""

import re
from collections.abc import Iterable
from enum import Enum

from flowlint.core.types import TypeName

STRING = "string"
NUMBER = "number"
INTEGER = "integer"
FLOAT = "float"
BOOLEAN = "boolean"
DATETIME = "datetime"
OBJECT = "object"

PRIMITIVE_TYPES = (STRING, NUMBER, INTEGER, FLOAT, BOOLEAN, DATETIME, OBJECT)

NUMERIC_TYPES = frozenset({NUMBER, INTEGER, FLOAT})

# Scripting-language type names mapped onto the variable vocabulary
PARAMETER_TYPE_MAP: dict[str, TypeName] = {
    "int": INTEGER,
    "long": INTEGER,
    "short": INTEGER,
    "byte": INTEGER,
    "sbyte": INTEGER,
    "uint": INTEGER,
    "ulong": INTEGER,
    "ushort": INTEGER,
    "int16": INTEGER,
    "int32": INTEGER,
    "int64": INTEGER,
    "float": FLOAT,
    "double": FLOAT,
    "decimal": FLOAT,
    "single": FLOAT,
    "string": STRING,
    "char": STRING,
    "bool": BOOLEAN,
    "boolean": BOOLEAN,
    "datetime": DATETIME,
    "datetimeoffset": DATETIME,
    "dateonly": DATETIME,
    "timeonly": DATETIME,
    "timespan": DATETIME,
    "object": OBJECT,
    "dynamic": OBJECT,
    "var": OBJECT,
}

COLLECTION_TYPE_PATTERN = re.compile(r"(\[\]$|<.*>$)")


class CompatibilityLevel(Enum):
    """How a source type relates to a target type."""

    IDENTICAL = "identical"  # Same type
    NUMERIC = "numeric"  # Both in the integer/float/number family
    UNIVERSAL = "universal"  # One side is object
    INCOMPATIBLE = "incompatible"


def normalize_type_name(type_name: TypeName | None) -> TypeName:
    """
    Normalize a variable type name.

    Primitive names are matched case-insensitively so ``Number`` and
    ``number`` are the same type; struct names are kept verbatim.
    Missing or blank names are treated as ``object``.
    """
    if not type_name or not type_name.strip():
        return OBJECT
    stripped = type_name.strip()
    lowered = stripped.lower()
    if lowered in PRIMITIVE_TYPES:
        return lowered
    return stripped


def check_compatibility(source_type: TypeName, target_type: TypeName) -> CompatibilityLevel:
    """
    Classify how a value of ``source_type`` fits where ``target_type`` is expected.

    Rules are applied in order: identical types, the numeric family,
    ``object`` on either side, otherwise incompatible.

    Params:
        source_type: Type of the value being supplied
        target_type: Type expected at the use site

    Returns:
        The CompatibilityLevel of the pair
    """
    source = normalize_type_name(source_type)
    target = normalize_type_name(target_type)

    if source == target:
        return CompatibilityLevel.IDENTICAL
    if source in NUMERIC_TYPES and target in NUMERIC_TYPES:
        return CompatibilityLevel.NUMERIC
    if source == OBJECT or target == OBJECT:
        return CompatibilityLevel.UNIVERSAL
    return CompatibilityLevel.INCOMPATIBLE


def compatible(source_type: TypeName, target_type: TypeName) -> bool:
    """Return True when a value of ``source_type`` may be used as ``target_type``."""
    return check_compatibility(source_type, target_type) is not CompatibilityLevel.INCOMPATIBLE


def is_numeric(type_name: TypeName) -> bool:
    return normalize_type_name(type_name) in NUMERIC_TYPES


def map_parameter_type(
    type_name: str | None, known_types: Iterable[TypeName] | None = None
) -> TypeName:
    """
    Translate a scripting-language parameter type into the variable vocabulary.

    Nullable markers are dropped, arrays and generic collections become
    ``object``, and unknown names are returned unchanged so that struct
    names still line up with struct-typed variables. When ``known_types`` is
    given, unknown names outside it are widened to ``object``.

    Params:
        type_name: Declared parameter type, e.g. ``int?`` or ``List<string>``
        known_types: Optional collection of non-primitive type names

    Returns:
        The matching vocabulary type
    """
    if not type_name or not type_name.strip():
        return OBJECT

    cleaned = type_name.strip().rstrip("?")
    if COLLECTION_TYPE_PATTERN.search(cleaned):
        return OBJECT

    # System.DateTime -> DateTime
    simple_name = cleaned.rsplit(".", 1)[-1]
    mapped = PARAMETER_TYPE_MAP.get(simple_name.lower())
    if mapped is not None:
        return mapped
    if known_types is not None and simple_name not in set(known_types):
        return OBJECT
    return simple_name
