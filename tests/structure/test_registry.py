"""
Tests for variable scope resolution and the struct type graph.

This module tests:
- VariableTable: local-before-global lookup, coercion from plain data
- StructRegistry: member path resolution, including cyclic structs
"""

from flowlint.models import Variable
from flowlint.structure import GLOBAL_SCOPE, LOCAL_SCOPE, StructRegistry, VariableTable


class TestVariableTable:
    """Test scope resolution."""

    def test_local_shadows_global(self):
        """Test that a local variable wins over a global one with the same name."""
        table = VariableTable(
            [Variable(name="status", type="number")],
            [Variable(name="status", type="string", is_global=True)],
        )

        assert table.resolve("status").declared_type == "number"
        assert table.scope_of("status") == LOCAL_SCOPE
        assert len(table) == 1

    def test_global_fallback(self):
        """Test that names missing locally resolve from the global scope."""
        table = VariableTable([], [Variable(name="region", is_global=True)])

        assert "region" in table
        assert table.scope_of("region") == GLOBAL_SCOPE
        assert table.resolve("missing") is None
        assert table.scope_of("missing") is None

    def test_visible_variables_order(self):
        """Test that locals come first, followed by unshadowed globals."""
        table = VariableTable(
            [Variable(name="b"), Variable(name="a")],
            [Variable(name="a"), Variable(name="c")],
        )
        assert [v.name for v in table] == ["b", "a", "c"]

    def test_first_declaration_wins_within_scope(self):
        """Test that a duplicate name in one scope keeps the first variable."""
        table = VariableTable([Variable(name="x", type="number"), Variable(name="x", type="string")])
        assert table.resolve("x").declared_type == "number"

    def test_coerce_from_dicts(self):
        """Test that plain dicts are accepted as one local scope."""
        table = VariableTable.coerce([{"name": "x", "type": "number"}])

        assert table.resolve("x").declared_type == "number"
        assert table.scope_of("x") == LOCAL_SCOPE

    def test_coerce_skips_invalid_dicts(self):
        """Test that dicts that are not valid variables are dropped."""
        table = VariableTable.coerce([{"name": ""}, {"name": "bad-name"}, {"name": "ok"}])
        assert [v.name for v in table] == ["ok"]

    def test_coerce_passthrough_and_none(self):
        """Test that an existing table is reused and None gives an empty table."""
        table = VariableTable()
        assert VariableTable.coerce(table) is table
        assert len(VariableTable.coerce(None)) == 0

    def test_declared_types(self, variables):
        """Test the set of declared types visible in a table."""
        table = VariableTable(variables)
        assert {"number", "integer", "string", "boolean", "Customer"} == table.declared_types()


class TestStructRegistry:
    """Test struct member path resolution."""

    def test_nested_path(self, structs):
        """Test resolving a two-level member path."""
        resolution = StructRegistry(structs).resolve_member_path("Customer", ["address", "city"])

        assert resolution.is_resolved
        assert resolution.declared_type == "string"

    def test_missing_member(self, structs):
        """Test that a missing field reports the struct that lacks it."""
        resolution = StructRegistry(structs).resolve_member_path("Customer", ["address", "street"])

        assert not resolution.is_resolved
        assert resolution.missing_member == "street"
        assert resolution.owner_type == "Address"

    def test_array_field(self, structs):
        """Test that array fields are reported and not looked into."""
        registry = StructRegistry(structs)

        orders = registry.resolve_member_path("Customer", ["orders"])
        assert orders.declared_type == "number"
        assert orders.is_array

        beyond = registry.resolve_member_path("Customer", ["orders", "length"])
        assert beyond.is_resolved
        assert beyond.declared_type == "object"

    def test_primitive_root_has_no_verdict(self, structs):
        """Test that members of primitives are not reported."""
        resolution = StructRegistry(structs).resolve_member_path("string", ["Length"])
        assert resolution.is_resolved
        assert resolution.declared_type == "object"

    def test_cyclic_struct_is_bounded(self, structs):
        """Test that a self-referencing struct resolves without looping."""
        registry = StructRegistry(structs)

        assert registry.resolve_member_path("Link", ["next"] * 3).declared_type == "Link"
        deep = registry.resolve_member_path("Link", ["next"] * 50, max_depth=8)
        assert deep.is_resolved
        assert deep.declared_type == "object"

    def test_lookups(self, structs):
        """Test name, struct and field lookups."""
        registry = StructRegistry(structs)

        assert registry.names == ["Customer", "Address", "Link"]
        assert "Address" in registry
        assert registry.get("Nope") is None
        assert registry.get_field("Address", "zip").declared_type == "string"
        assert registry.get_field("Nope", "zip") is None
        assert registry.field_names("Customer") == ["name", "address", "orders"]
        assert registry.field_names("string") == []
