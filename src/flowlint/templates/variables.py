"""
Variable reference scanning for flowlint.

This module finds the variables a text field or code blob refers to. Free
text refers to variables through ``{name}`` interpolation tokens; scripted
code may additionally use a variable's name directly as an identifier.
Scanning never decides whether a name exists. Resolution is left to the
caller through a ``VariableTable``.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from flowlint.structure.registry import VariableTable

if TYPE_CHECKING:
    from flowlint.models import FlowNode

IDENTIFIER = r"[A-Za-z_][A-Za-z0-9_]*"

VARIABLE_NAME_PATTERN = re.compile(rf"^{IDENTIFIER}$")

# {name}: a brace opens a token that ends at the next closing brace
TOKEN_PATTERN = re.compile(rf"\{{({IDENTIFIER})\}}")

# {name.member.member}
MEMBER_TOKEN_PATTERN = re.compile(rf"\{{({IDENTIFIER})((?:\.{IDENTIFIER})+)\}}")

SINGLE_TOKEN_PATTERN = re.compile(rf"^\{{({IDENTIFIER})\}}$")


@dataclass(frozen=True)
class MemberReference:
    """A ``{root.member...}`` occurrence in a text field."""

    root: str
    members: tuple[str, ...]

    @property
    def path(self) -> str:
        return ".".join((self.root, *self.members))


@dataclass(frozen=True)
class VariableUsage:
    """
    One variable referenced by a node, as shown in the node's config panel.

    Params:
        name: Referenced name
        is_defined: Whether the name resolves in the node's scope
        declared_type: Resolved type, ``None`` when undefined
        value: Resolved textual value, ``None`` when undefined
        scope: ``local`` or ``global`` when defined
    """

    name: str
    is_defined: bool
    declared_type: str | None = None
    value: str | None = None
    scope: str | None = None


def is_valid_variable_name(name: Any) -> bool:
    """Return True when ``name`` is a legal, non-empty variable name."""
    return isinstance(name, str) and bool(VARIABLE_NAME_PATTERN.match(name))


def scan_tokens(text: str | None) -> list[str]:
    """
    Return the interpolation token names of a text, in first-seen order.

    Params:
        text: Any free-text field

    Returns:
        Token names without braces, duplicates removed
    """
    if not text:
        return []
    return list(dict.fromkeys(TOKEN_PATTERN.findall(text)))


def scan_member_references(text: str | None) -> list[MemberReference]:
    """Return the ``{root.member}`` references of a text, duplicates removed."""
    if not text:
        return []
    references = dict.fromkeys(
        MemberReference(root, tuple(members.lstrip(".").split(".")))
        for root, members in MEMBER_TOKEN_PATTERN.findall(text)
    )
    return list(references)


def single_token(text: str | None) -> str | None:
    """Return the token name when the trimmed text is exactly one token."""
    if not text:
        return None
    match = SINGLE_TOKEN_PATTERN.match(text.strip())
    return match.group(1) if match else None


def scan_code_identifiers(code: str | None, variable_names: Iterable[str]) -> list[str]:
    """
    Return the known variable names used as whole words in a code blob.

    The match is case-sensitive and bounded by word boundaries, so
    ``count`` does not match inside ``counter``.
    """
    if not code:
        return []
    found = []
    for name in dict.fromkeys(variable_names):
        if re.search(rf"\b{re.escape(name)}\b", code):
            found.append(name)
    return found


def scan_references(
    text: str | None,
    variables: Iterable[Any] | VariableTable | None = None,
    is_code: bool = False,
) -> set[str]:
    """
    Collect the variable names a text field refers to.

    Params:
        text: The field content
        variables: Known variables; only consulted when ``is_code`` is set
        is_code: Whether the field holds scripted code, in which case bare
            whole-word uses of known variable names count as references

    Returns:
        De-duplicated set of referenced names, defined or not
    """
    references = set(scan_tokens(text))
    if is_code and variables is not None:
        names = [v.name for v in VariableTable.coerce(variables)]
        references.update(scan_code_identifiers(text, names))
    return references


def node_references(node: "FlowNode", table: VariableTable) -> list[str]:
    """
    Collect every name referenced by a node's text and code fields.

    Params:
        node: Node whose fields are scanned
        table: Variables visible from the node's flow

    Returns:
        Referenced names in first-seen field order
    """
    names: dict[str, None] = {}
    for text in node.text_fields().values():
        names.update(dict.fromkeys(scan_tokens(text)))
        names.update(dict.fromkeys(ref.root for ref in scan_member_references(text)))

    visible_names = [v.name for v in table]
    for code in node.code_fields().values():
        names.update(dict.fromkeys(scan_tokens(code)))
        names.update(dict.fromkeys(ref.root for ref in scan_member_references(code)))
        names.update(dict.fromkeys(scan_code_identifiers(code, visible_names)))
    return list(names)


def collect_variable_usages(node: "FlowNode", table: VariableTable) -> list[VariableUsage]:
    """
    Describe every variable a node refers to and whether it resolves.

    Params:
        node: Node whose fields are scanned
        table: Variables visible from the node's flow

    Returns:
        One VariableUsage per referenced name
    """
    usages = []
    for name in node_references(node, table):
        variable = table.resolve(name)
        if variable is None:
            usages.append(VariableUsage(name=name, is_defined=False))
            continue
        usages.append(
            VariableUsage(
                name=name,
                is_defined=True,
                declared_type=variable.declared_type,
                value=variable.value,
                scope=table.scope_of(name),
            )
        )
    return usages
