"""
Tests for the project data model.

This module tests parsing of host payloads into typed nodes, flows and
projects, and the model-level invariants.
"""

import pytest
from pydantic import TypeAdapter, ValidationError

from flowlint.models import (
    AiTaskNode,
    CodeFile,
    DecisionNode,
    Flow,
    FunctionCallNode,
    HttpNode,
    LoopNode,
    Node,
    Project,
    StructDefinition,
    SubFlowNode,
    Variable,
    normalize_node_kind,
)

node_adapter = TypeAdapter(Node)


class TestVariable:
    """Test the Variable model."""

    def test_camel_case_payload(self):
        """Test that host JSON keys are accepted."""
        variable = Variable.model_validate(
            {"id": "v1", "name": "items", "type": "number", "isArray": True, "isGlobal": True}
        )

        assert variable.declared_type == "number"
        assert variable.is_array
        assert variable.is_global
        assert variable.value == ""

    @pytest.mark.parametrize("key", ["type", "declaredType", "declared_type"])
    def test_declared_type_keys(self, key):
        """Test that every spelling of the declared type is read, and dumped as 'type'."""
        variable = Variable.model_validate({"name": "a", key: "number"})

        assert variable.declared_type == "number"
        assert variable.model_dump(by_alias=True)["type"] == "number"

    def test_struct_field_declared_type(self):
        struct = StructDefinition.model_validate(
            {"name": "Order", "fields": [{"name": "total", "declaredType": "float"}]}
        )
        assert struct.get_field("total").declared_type == "float"

    @pytest.mark.parametrize("name", ["", "1st", "has space", "dash-ed", "dot.ted"])
    def test_invalid_names_rejected(self, name):
        """Test that construction enforces the identifier rule."""
        with pytest.raises(ValidationError, match="Invalid variable name"):
            Variable(name=name)


class TestNodeKinds:
    """Test node kind normalization and the discriminated union."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("aiTask", "ai_task"),
            ("sub-flow", "sub_flow"),
            ("subflow", "sub_flow"),
            ("subFlow", "sub_flow"),
            ("functionCall", "function_call"),
            ("FunctionCall", "function_call"),
            ("script", "code"),
            ("decision", "decision"),
        ],
    )
    def test_normalize_node_kind(self, raw, expected):
        assert normalize_node_kind(raw) == expected

    def test_union_dispatch(self):
        """Test that the kind field selects the node class."""
        node = node_adapter.validate_python({"kind": "http", "url": "https://x/{id}"})
        assert isinstance(node, HttpNode)
        assert node.method == "GET"

    def test_kind_specific_aliases(self):
        """Test host field names that differ from the model field names."""
        loop = node_adapter.validate_python({"kind": "loop", "loopCondition": "{i} < 10"})
        assert isinstance(loop, LoopNode)
        assert loop.condition == "{i} < 10"

        http = node_adapter.validate_python({"kind": "http", "httpBody": "{payload}"})
        assert http.body == "{payload}"

    def test_text_fields(self):
        """Test the fields each node exposes for scanning."""
        decision = DecisionNode(label="Check", condition="{x} > 1")
        assert decision.text_fields() == {"label": "Check", "description": "", "condition": "{x} > 1"}
        assert decision.code_fields() == {}

        call = FunctionCallNode(arguments={"amount": "{total}"})
        assert call.text_fields()["arguments.amount"] == "{total}"

    def test_display_label(self):
        """Test that an unlabeled node falls back to its humanized kind."""
        assert FunctionCallNode().display_label == "Function call"
        assert AiTaskNode(label="Summarize").display_label == "Summarize"

    def test_function_call_configuration(self):
        assert not FunctionCallNode(code_file_id="cf").is_configured
        assert FunctionCallNode(code_file_id="cf", function_name="Run").is_configured


class TestFlowAndProject:
    """Test flow and project containers."""

    def test_host_node_payload_flattened(self):
        """Test that React-Flow style payloads with a data dict are flattened."""
        flow = Flow.model_validate(
            {
                "id": "f1",
                "nodes": [
                    {
                        "id": "n1",
                        "type": "aiTask",
                        "position": {"x": 10, "y": 20},
                        "data": {"label": "Ask", "prompt": "Summarize {doc}"},
                    },
                    {"id": "n2", "type": "subFlow", "data": {"subFlowId": "f2"}},
                ],
            }
        )

        ask, sub = flow.nodes
        assert isinstance(ask, AiTaskNode)
        assert ask.prompt == "Summarize {doc}"
        assert isinstance(sub, SubFlowNode)
        assert sub.sub_flow_id == "f2"
        assert flow.get_node("n2") is sub
        assert flow.get_node("missing") is None

    def test_unknown_node_kind_rejected(self):
        with pytest.raises(ValidationError):
            Flow.model_validate({"nodes": [{"type": "teleport"}]})

    def test_project_flows_from_list(self, sample_project):
        """Test that a list of flows is indexed by id."""
        assert set(sample_project.flows) == {"flow-main", "flow-notify"}
        assert sample_project.get_flow("flow-notify").name == "Notify"
        assert sample_project.get_flow("nope") is None

    def test_project_lookups(self, sample_project):
        """Test code file lookup, node iteration and scope tables."""
        assert sample_project.get_code_file("cf-billing").name == "Billing.cs"
        assert sample_project.get_code_file("nope") is None

        pairs = [(flow.id, node.id) for flow, node in sample_project.iter_nodes()]
        assert pairs[0] == ("flow-main", "n-start")
        assert pairs[-1] == ("flow-notify", "n-log")

        table = sample_project.variable_table("flow-main")
        assert table.scope_of("total") == "local"
        assert table.scope_of("region") == "global"
        assert sample_project.variable_table().scope_of("total") is None

    def test_project_accepts_host_json(self):
        """Test building a project from camelCase JSON."""
        project = Project.model_validate(
            {
                "flows": {"f1": {"id": "f1", "name": "One"}},
                "codeFiles": [{"id": "c1", "sourceText": "public void A() {}"}],
                "globalVariables": [{"name": "g", "type": "number"}],
            }
        )

        assert project.get_code_file("c1").name == "Untitled.cs"
        assert project.global_variables[0].declared_type == "number"


class TestCodeFile:
    """Test code files and their parsed callables."""

    def test_callables_follow_source_text(self, billing_file):
        """Test that callables are recomputed from the current source."""
        assert [c.name for c in billing_file.callables] == ["AddTax", "Greet"]
        assert billing_file.get_callable("Greet").parameters[1].type == "Customer"
        assert billing_file.get_callable("Missing") is None

        edited = billing_file.model_copy(update={"source_text": "public int Other() {}"})
        assert [c.name for c in edited.callables] == ["Other"]

    def test_defaults(self):
        code_file = CodeFile()
        assert code_file.name == "Untitled.cs"
        assert code_file.callables == []
        assert code_file.referenced_file_ids == set()
