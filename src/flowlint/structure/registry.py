"""
Registries for resolving variable names and struct member paths.

``VariableTable`` answers "which variable does this name mean here", with
flow-local variables shadowing project globals. ``StructRegistry`` is the
struct type graph used to resolve ``{var.field}`` member paths.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from pydantic import ValidationError

from flowlint.structure.type_mapping import OBJECT, normalize_type_name

if TYPE_CHECKING:
    from flowlint.models import StructDefinition, StructField, Variable

logger = logging.getLogger(__name__)

LOCAL_SCOPE = "local"
GLOBAL_SCOPE = "global"


class VariableTable:
    """Variables visible from one flow.

    Lookup order is local first, then global. Within one scope the first
    variable carrying a name wins.
    """

    def __init__(
        self,
        local_variables: Iterable["Variable"] = (),
        global_variables: Iterable["Variable"] = (),
    ):
        self._local: dict[str, "Variable"] = {}
        self._global: dict[str, "Variable"] = {}
        for variable in local_variables:
            self._local.setdefault(variable.name, variable)
        for variable in global_variables:
            self._global.setdefault(variable.name, variable)

    @classmethod
    def coerce(cls, variables: Union["VariableTable", Iterable[Any], None]) -> "VariableTable":
        """
        Build a table from whatever the caller passed as "the variables".

        Params:
            variables: An existing table, or an iterable of Variable models or
                plain dicts; a plain iterable is treated as one local scope.
                Dicts that do not describe a valid variable are skipped.

        Returns:
            A VariableTable (the same object when one was given)
        """
        if isinstance(variables, VariableTable):
            return variables
        if variables is None:
            return cls()

        from flowlint.models import Variable

        models = []
        for variable in variables:
            if isinstance(variable, Variable):
                models.append(variable)
                continue
            try:
                models.append(Variable.model_validate(variable))
            except ValidationError as e:
                logger.debug("Skipping invalid variable %r: %s", variable, e)
        return cls(local_variables=models)

    def resolve(self, name: str) -> "Variable | None":
        variable = self._local.get(name)
        if variable is not None:
            return variable
        return self._global.get(name)

    def scope_of(self, name: str) -> str | None:
        if name in self._local:
            return LOCAL_SCOPE
        if name in self._global:
            return GLOBAL_SCOPE
        return None

    def __contains__(self, name: object) -> bool:
        return name in self._local or name in self._global

    def __iter__(self):
        return iter(self.visible_variables())

    def __len__(self) -> int:
        return len(self.visible_variables())

    def visible_variables(self) -> list["Variable"]:
        """Local variables followed by the globals they do not shadow."""
        visible = list(self._local.values())
        visible.extend(v for name, v in self._global.items() if name not in self._local)
        return visible

    def declared_types(self) -> set[str]:
        return {normalize_type_name(v.declared_type) for v in self.visible_variables()}


@dataclass(frozen=True)
class MemberResolution:
    """
    Outcome of resolving a member path such as ``customer.address.city``.

    Params:
        declared_type: Type reached by the path, ``object`` when the walk
            stopped at something it cannot look into
        is_array: Whether the reached value is an array
        missing_member: First member that does not exist on its struct
        owner_type: Struct that was expected to declare ``missing_member``
    """

    declared_type: str
    is_array: bool = False
    missing_member: str | None = None
    owner_type: str | None = None

    @property
    def is_resolved(self) -> bool:
        return self.missing_member is None


class StructRegistry:
    """Struct definitions indexed by name, forming a type graph.

    Struct fields may name other structs, including themselves, so every
    walk through the graph is bounded by the path being resolved and by
    ``max_depth``; nothing here assumes the graph is acyclic.
    """

    def __init__(self, structs: Iterable["StructDefinition"] = ()):
        self._structs: dict[str, "StructDefinition"] = {}
        for struct in structs:
            self._structs.setdefault(struct.name, struct)

    def __contains__(self, name: object) -> bool:
        return name in self._structs

    @property
    def names(self) -> list[str]:
        return list(self._structs)

    def get(self, name: str) -> "StructDefinition | None":
        return self._structs.get(name)

    def get_field(self, struct_name: str, field_name: str) -> "StructField | None":
        struct = self._structs.get(struct_name)
        if struct is None:
            return None
        return struct.get_field(field_name)

    def field_names(self, struct_name: str) -> list[str]:
        struct = self._structs.get(struct_name)
        return [f.name for f in struct.fields] if struct else []

    def resolve_member_path(
        self,
        root_type: str,
        members: Iterable[str],
        root_is_array: bool = False,
        max_depth: int = 8,
    ) -> MemberResolution:
        """
        Walk a member path starting from a value of ``root_type``.

        The walk only reports a missing member when the current type is a
        known struct. Primitives, ``object`` and arrays stop the walk without
        a verdict, since their members are not modelled.

        Params:
            root_type: Declared type of the root variable
            members: Member names after the root, in order
            root_is_array: Whether the root variable is an array
            max_depth: Maximum number of members followed

        Returns:
            MemberResolution describing where the walk ended
        """
        current_type = normalize_type_name(root_type)
        is_array = root_is_array

        for depth, member in enumerate(members):
            if depth >= max_depth or is_array:
                return MemberResolution(declared_type=OBJECT)

            struct = self._structs.get(current_type)
            if struct is None:
                return MemberResolution(declared_type=OBJECT)

            struct_field = struct.get_field(member)
            if struct_field is None:
                return MemberResolution(
                    declared_type=OBJECT,
                    missing_member=member,
                    owner_type=struct.name,
                )

            current_type = normalize_type_name(struct_field.declared_type)
            is_array = struct_field.is_array

        return MemberResolution(declared_type=current_type, is_array=is_array)
