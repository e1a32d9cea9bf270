"""
flowlint type structure components.

This package provides the type compatibility lattice and the registries
used to resolve variable names and struct member paths.
"""

from flowlint.structure.registry import (
    GLOBAL_SCOPE,
    LOCAL_SCOPE,
    MemberResolution,
    StructRegistry,
    VariableTable,
)
from flowlint.structure.type_mapping import (
    CompatibilityLevel,
    check_compatibility,
    compatible,
    map_parameter_type,
    normalize_type_name,
)

__all__ = [
    "GLOBAL_SCOPE",
    "LOCAL_SCOPE",
    "MemberResolution",
    "StructRegistry",
    "VariableTable",
    "CompatibilityLevel",
    "check_compatibility",
    "compatible",
    "map_parameter_type",
    "normalize_type_name",
]
