"""
Project data model consumed by the validators.

These pydantic models describe the project state owned by the host
application: variables, struct definitions, code files, libraries and the
flows of typed nodes. flowlint only reads them. Every model accepts both
snake_case field names and the camelCase keys of the host's JSON.
"""

import uuid
from collections.abc import Iterator
from typing import TYPE_CHECKING, Annotated, Any, Literal, Union

from inflection import humanize, underscore
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from flowlint.exceptions import InvalidVariableNameError
from flowlint.parsing.signatures import CallableSignature, parse_signatures
from flowlint.templates.variables import is_valid_variable_name

if TYPE_CHECKING:
    from flowlint.structure.registry import StructRegistry, VariableTable


def _short_id() -> str:
    return str(uuid.uuid4())[:8]


class FlowLintModel(BaseModel):
    """Base model: camelCase aliases, snake_case names, unknown keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# ============================================================================
# Variables and structs
# ============================================================================


class Variable(FlowLintModel):
    """A named, typed value in either the project-global or a flow-local scope."""

    id: str = Field(default_factory=_short_id)
    name: str
    declared_type: str = Field(
        default="string",
        validation_alias=AliasChoices("type", "declaredType", "declared_type"),
        serialization_alias="type",
    )
    is_array: bool = False
    is_global: bool = False
    value: str = ""

    @field_validator("name")
    @classmethod
    def _check_name(cls, name: str) -> str:
        if not is_valid_variable_name(name):
            raise InvalidVariableNameError(name)
        return name


class StructField(FlowLintModel):
    name: str
    declared_type: str = Field(
        default="string",
        validation_alias=AliasChoices("type", "declaredType", "declared_type"),
        serialization_alias="type",
    )
    is_array: bool = False


class StructDefinition(FlowLintModel):
    """A named record type usable as a variable's declared type."""

    id: str = Field(default_factory=_short_id)
    name: str
    fields: list[StructField] = Field(default_factory=list)

    def get_field(self, name: str) -> StructField | None:
        for struct_field in self.fields:
            if struct_field.name == name:
                return struct_field
        return None


# ============================================================================
# Code files and libraries
# ============================================================================


class CodeFile(FlowLintModel):
    """A scripting source file owned by the project.

    ``referenced_file_ids`` is author-declared metadata for the host; call
    resolution never needs it because function-call nodes name their file.
    """

    id: str = Field(default_factory=_short_id)
    name: str = "Untitled.cs"
    source_text: str = ""
    referenced_file_ids: set[str] = Field(default_factory=set)

    @property
    def callables(self) -> list[CallableSignature]:
        """Callables declared in the file, re-parsed from the current text."""
        return parse_signatures(self.source_text)

    def get_callable(self, name: str) -> CallableSignature | None:
        for callable_signature in self.callables:
            if callable_signature.name == name:
                return callable_signature
        return None


class LibraryMethod(FlowLintModel):
    name: str
    return_type: str = "void"
    description: str = ""
    parameters: list[str] = Field(default_factory=list)


class LibraryClass(FlowLintModel):
    name: str
    methods: list[LibraryMethod] = Field(default_factory=list)


class LibraryNamespace(FlowLintModel):
    name: str
    classes: list[LibraryClass] = Field(default_factory=list)


class Library(FlowLintModel):
    """An externally declared assembly, used only for autocomplete."""

    id: str = Field(default_factory=_short_id)
    name: str
    namespaces: list[LibraryNamespace] = Field(default_factory=list)


# ============================================================================
# Nodes
# ============================================================================

NODE_KIND_ALIASES = {
    "subflow": "sub_flow",
    "functioncall": "function_call",
    "function": "function_call",
    "aitask": "ai_task",
    "script": "code",
    "scripted_code": "code",
    "database": "db",
    "condition": "decision",
}


def normalize_node_kind(kind: str) -> str:
    """
    Map a host node kind onto its canonical snake_case name.

    Params:
        kind: Kind as sent by the host, e.g. ``aiTask`` or ``sub-flow``

    Returns:
        Canonical kind, e.g. ``ai_task`` or ``sub_flow``
    """
    canonical = underscore(kind.strip())
    if canonical in NODE_KIND_ALIASES:
        return NODE_KIND_ALIASES[canonical]
    return NODE_KIND_ALIASES.get(canonical.replace("_", ""), canonical)


class FlowNode(FlowLintModel):
    """Fields shared by every node kind.

    ``error`` holds the message stored by the last live-validation pass; the
    compiler propagates it without recomputing it.
    """

    id: str = Field(default_factory=_short_id)
    label: str = ""
    description: str = ""
    error: str | None = None

    kind: str

    @property
    def display_label(self) -> str:
        return self.label or humanize(self.kind)

    def text_fields(self) -> dict[str, str]:
        """Free-text fields that may contain ``{variable}`` tokens."""
        return {"label": self.label, "description": self.description}

    def code_fields(self) -> dict[str, str]:
        """Scripted fields, where bare identifiers also count as references."""
        return {}


class StartNode(FlowNode):
    kind: Literal["start"] = "start"


class EndNode(FlowNode):
    kind: Literal["end"] = "end"


class ProcessNode(FlowNode):
    kind: Literal["process"] = "process"


class GroupNode(FlowNode):
    kind: Literal["group"] = "group"


class DelayNode(FlowNode):
    kind: Literal["delay"] = "delay"
    duration: int = 1000


class DecisionNode(FlowNode):
    kind: Literal["decision"] = "decision"
    condition: str = ""

    @model_validator(mode="before")
    @classmethod
    def _condition_from_description(cls, data: Any) -> Any:
        # The host editor keeps a decision's condition in its description
        if isinstance(data, dict) and "condition" not in data and data.get("description"):
            return {**data, "condition": data["description"]}
        return data

    def text_fields(self) -> dict[str, str]:
        return {**super().text_fields(), "condition": self.condition}


class LoopNode(FlowNode):
    kind: Literal["loop"] = "loop"
    condition: str = Field(default="", alias="loopCondition")

    def text_fields(self) -> dict[str, str]:
        return {**super().text_fields(), "condition": self.condition}


class HttpNode(FlowNode):
    kind: Literal["http"] = "http"
    url: str = ""
    method: str = "GET"
    headers: str = ""
    body: str = Field(default="", alias="httpBody")

    def text_fields(self) -> dict[str, str]:
        return {
            **super().text_fields(),
            "url": self.url,
            "headers": self.headers,
            "body": self.body,
        }


class DbNode(FlowNode):
    kind: Literal["db"] = "db"
    operation: str = Field(default="select", alias="dbOperation")
    connection_string: str = ""
    sql: str = ""

    def text_fields(self) -> dict[str, str]:
        return {
            **super().text_fields(),
            "connection_string": self.connection_string,
            "sql": self.sql,
        }


class CodeNode(FlowNode):
    kind: Literal["code"] = "code"
    code: str = ""

    def code_fields(self) -> dict[str, str]:
        return {"code": self.code}


class SubFlowNode(FlowNode):
    kind: Literal["sub_flow"] = "sub_flow"
    sub_flow_id: str = ""


class FunctionCallNode(FlowNode):
    kind: Literal["function_call"] = "function_call"
    code_file_id: str = ""
    function_name: str = ""
    arguments: dict[str, str] = Field(default_factory=dict)

    def text_fields(self) -> dict[str, str]:
        fields = super().text_fields()
        for parameter, argument in self.arguments.items():
            fields[f"arguments.{parameter}"] = argument
        return fields

    @property
    def is_configured(self) -> bool:
        return bool(self.code_file_id and self.function_name)


class LogNode(FlowNode):
    kind: Literal["log"] = "log"
    message: str = ""

    def text_fields(self) -> dict[str, str]:
        return {**super().text_fields(), "message": self.message}


class AiTaskNode(FlowNode):
    kind: Literal["ai_task"] = "ai_task"
    prompt: str = ""

    def text_fields(self) -> dict[str, str]:
        return {**super().text_fields(), "prompt": self.prompt}


Node = Annotated[
    Union[
        StartNode,
        EndNode,
        ProcessNode,
        GroupNode,
        DelayNode,
        DecisionNode,
        LoopNode,
        HttpNode,
        DbNode,
        CodeNode,
        SubFlowNode,
        FunctionCallNode,
        LogNode,
        AiTaskNode,
    ],
    Field(discriminator="kind"),
]


def _prepare_node_payload(raw: Any) -> Any:
    """Flatten a host node payload and normalise its kind."""
    if not isinstance(raw, dict):
        return raw
    payload = {k: v for k, v in raw.items() if k not in ("data", "position", "style")}
    data = raw.get("data")
    if isinstance(data, dict):
        payload.update(data)
    kind = payload.pop("type", None) if "kind" not in payload else payload["kind"]
    if isinstance(kind, str):
        payload["kind"] = normalize_node_kind(kind)
    return payload


# ============================================================================
# Flows and projects
# ============================================================================


class Edge(FlowLintModel):
    id: str = Field(default_factory=_short_id)
    source: str
    target: str
    source_handle: str | None = None
    label: str = ""


class Flow(FlowLintModel):
    """A graph of nodes with its own local variable scope."""

    id: str = Field(default_factory=_short_id)
    name: str = "Untitled Flow"
    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)
    variables: list[Variable] = Field(default_factory=list)

    @field_validator("nodes", mode="before")
    @classmethod
    def _prepare_nodes(cls, nodes: Any) -> Any:
        if isinstance(nodes, list):
            return [_prepare_node_payload(node) for node in nodes]
        return nodes

    def get_node(self, node_id: str) -> FlowNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None


class Project(FlowLintModel):
    """The whole project: flows keyed by id plus project-wide tables."""

    flows: dict[str, Flow] = Field(default_factory=dict)
    code_files: list[CodeFile] = Field(default_factory=list)
    global_variables: list[Variable] = Field(default_factory=list)
    structs: list[StructDefinition] = Field(default_factory=list)
    libraries: list[Library] = Field(default_factory=list)

    @field_validator("flows", mode="before")
    @classmethod
    def _index_flows(cls, flows: Any) -> Any:
        if isinstance(flows, list):
            indexed = {}
            for flow in flows:
                flow_id = flow.id if isinstance(flow, Flow) else flow.get("id")
                indexed[flow_id] = flow
            return indexed
        return flows

    def get_flow(self, flow_id: str) -> Flow | None:
        return self.flows.get(flow_id)

    def get_code_file(self, code_file_id: str) -> CodeFile | None:
        for code_file in self.code_files:
            if code_file.id == code_file_id:
                return code_file
        return None

    def iter_nodes(self) -> Iterator[tuple[Flow, FlowNode]]:
        """Yield every (flow, node) pair in flow then node order."""
        for flow in self.flows.values():
            for node in flow.nodes:
                yield flow, node

    def variable_table(self, flow_id: str | None = None) -> "VariableTable":
        """Variables visible inside a flow, local names shadowing globals."""
        from flowlint.structure.registry import VariableTable

        flow = self.flows.get(flow_id) if flow_id is not None else None
        local_variables = flow.variables if flow else []
        return VariableTable(local_variables, self.global_variables)

    def struct_registry(self) -> "StructRegistry":
        from flowlint.structure.registry import StructRegistry

        return StructRegistry(self.structs)
