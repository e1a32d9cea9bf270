"""
Signature parser for embedded scripting source files.

This module recovers the public method signatures of a code file, together
with the documentation comment written directly above each one. It is a
line-oriented heuristic rather than a real lexer: any line it does not
understand is skipped, so parsing never fails.
"""

import logging
import re

from attrs import field, frozen

logger = logging.getLogger(__name__)

# Type used for parameters whose declaration cannot be understood
FALLBACK_PARAMETER_TYPE = "object"

METHOD_MODIFIERS = (
    "static",
    "virtual",
    "override",
    "async",
    "sealed",
    "abstract",
    "new",
    "extern",
    "unsafe",
    "partial",
)

PARAMETER_MODIFIERS = frozenset({"ref", "out", "in", "params", "this", "scoped"})

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# public [modifiers] <returnType> <name>(<paramList>)
METHOD_DECLARATION_PATTERN = re.compile(
    r"^\s*public\s+"
    rf"(?P<modifiers>(?:(?:{'|'.join(METHOD_MODIFIERS)})\s+)*)"
    r"(?P<return_type>[A-Za-z_][\w.]*(?:\s*<[^()]*>)?(?:\[\])*\??)\s+"
    r"(?P<name>[A-Za-z_]\w*)\s*"
    r"\((?P<params>[^)]*)\)"
)

ATTRIBUTE_PATTERN = re.compile(r"^\s*\[.*\]\s*$")
MARKUP_TAG_PATTERN = re.compile(r"<[^>]+>")

# Lines that neither document nor consume a pending comment block
STRUCTURAL_LINE_PATTERN = re.compile(
    r"^\s*(?:"
    r"using\s+[\w.=\s]+;?"
    r"|namespace\s+[\w.]+"
    r"|#\s*(?:region|endregion)\b.*"
    r"|(?:(?:public|internal|private|protected|static|sealed|abstract|partial|readonly)\s+)*"
    r"(?:class|struct|interface|record|enum)\s+\w+.*"
    r"|[{}]+;?"
    r")\s*$"
)

NAMESPACE_DECLARATION_PATTERN = re.compile(r"^\s*namespace\s+[A-Za-z_][\w.]*", re.MULTILINE)
PUBLIC_TYPE_DECLARATION_PATTERN = re.compile(
    r"^\s*public\s+(?:(?:static|sealed|abstract|partial|readonly)\s+)*"
    r"(?:class|struct|interface|record|enum)\s+[A-Za-z_]\w*",
    re.MULTILINE,
)


@frozen
class ParameterSignature:
    """A single declared parameter of a callable."""

    name: str
    type: str
    required: bool = True
    modifiers: tuple[str, ...] = ()


@frozen
class CallableSignature:
    """A public method recovered from a code file."""

    name: str
    return_type: str
    parameters: tuple[ParameterSignature, ...] = ()
    description: str = ""
    line: int = field(default=0, eq=False)

    def get_parameter(self, name: str) -> ParameterSignature | None:
        for parameter in self.parameters:
            if parameter.name == name:
                return parameter
        return None

    @property
    def display_signature(self) -> str:
        params = ", ".join(f"{p.type} {p.name}" for p in self.parameters)
        return f"{self.return_type} {self.name}({params})"


def parse_signatures(source_text: str | None) -> list[CallableSignature]:
    """
    Parse the public method signatures declared in one source file.

    The scan walks the file once, keeping only the documentation lines seen
    since the last declaration. A comment block attaches to the next public
    method declaration unless ordinary code appears in between.

    Params:
        source_text: Full text of the code file

    Returns:
        Callables in declaration order, each carrying the documentation block
        that immediately precedes it as its description
    """
    if not source_text:
        return []

    callables: list[CallableSignature] = []
    pending_docs: list[str] = []
    in_block_comment = False
    # A structural line closes the current comment block without dropping it;
    # the next comment then starts a fresh block.
    block_closed = False

    for line_number, line in enumerate(source_text.splitlines(), start=1):
        stripped = line.strip()

        if in_block_comment or _is_comment_line(stripped):
            if block_closed:
                pending_docs = []
                block_closed = False
            text, in_block_comment = _strip_comment(stripped, in_block_comment)
            if text:
                pending_docs.append(text)
            continue

        if not stripped or ATTRIBUTE_PATTERN.match(stripped):
            continue

        match = METHOD_DECLARATION_PATTERN.match(line)
        if match:
            callables.append(
                CallableSignature(
                    name=match.group("name"),
                    return_type=_normalize_type(match.group("return_type")),
                    parameters=tuple(parse_parameters(match.group("params"))),
                    description=" ".join(pending_docs),
                    line=line_number,
                )
            )
            pending_docs = []
            block_closed = False
            continue

        if STRUCTURAL_LINE_PATTERN.match(stripped):
            block_closed = True
            continue

        pending_docs = []
        block_closed = False

    return callables


def parse_parameters(param_list: str) -> list[ParameterSignature]:
    """
    Parse the text between the parentheses of a method declaration.

    Params:
        param_list: Raw parameter list, e.g. ``"int a, string b = \\"x\\""``

    Returns:
        One ParameterSignature per non-empty fragment. Fragments that cannot
        be understood degrade to type ``object`` instead of failing.
    """
    parameters = []
    for fragment in _split_top_level(param_list):
        fragment = fragment.strip()
        if not fragment:
            continue
        parameters.append(_parse_parameter(fragment))
    return parameters


def check_file_structure(source_text: str | None) -> list[str]:
    """
    Check that a code file has the declarations needed to compile.

    Params:
        source_text: Full text of the code file

    Returns:
        Names of the missing declarations (empty when the file is complete)
    """
    text = source_text or ""
    missing = []
    if not NAMESPACE_DECLARATION_PATTERN.search(text):
        missing.append("namespace declaration")
    if not PUBLIC_TYPE_DECLARATION_PATTERN.search(text):
        missing.append("public type declaration")
    return missing


def _is_comment_line(stripped: str) -> bool:
    return stripped.startswith("//") or stripped.startswith("/*")


def _strip_comment(stripped: str, in_block_comment: bool) -> tuple[str, bool]:
    """Remove comment markers and markup tags from one comment line."""
    text = stripped
    if in_block_comment:
        if "*/" in text:
            text = text.split("*/", 1)[0]
            in_block_comment = False
        text = text.lstrip("*")
    elif text.startswith("/*"):
        text = text[2:].lstrip("*")
        if "*/" in text:
            text = text.split("*/", 1)[0]
        else:
            in_block_comment = True
    else:
        text = text.lstrip("/")

    text = MARKUP_TAG_PATTERN.sub(" ", text)
    return " ".join(text.split()), in_block_comment


def _split_top_level(param_list: str) -> list[str]:
    """Split on commas that are not nested inside generic brackets or strings."""
    parts = []
    depth = 0
    in_string = False
    current = []
    for char in param_list:
        if char == '"':
            in_string = not in_string
        elif in_string:
            pass
        elif char in "<[(":
            depth += 1
        elif char in ">])":
            depth = max(0, depth - 1)
        elif char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


def _parse_parameter(fragment: str) -> ParameterSignature:
    # Attribute prefixes like [FromBody] carry no type information
    declaration = re.sub(r"^\s*(?:\[[^\]]*\]\s*)+", "", fragment)

    has_default = "=" in declaration
    if has_default:
        declaration = declaration.split("=", 1)[0]

    tokens = _normalize_type(declaration).split()
    if len(tokens) < 2 or not IDENTIFIER_PATTERN.match(tokens[-1]):
        logger.debug("Unparsable parameter fragment %r, falling back to object", fragment)
        name = tokens[-1] if tokens else fragment.strip()
        return ParameterSignature(
            name=name,
            type=FALLBACK_PARAMETER_TYPE,
            required=not has_default,
        )

    modifiers = tuple(token for token in tokens[:-2] if token in PARAMETER_MODIFIERS)
    return ParameterSignature(
        name=tokens[-1],
        type=tokens[-2],
        required=not has_default and "params" not in modifiers,
        modifiers=modifiers,
    )


def _normalize_type(text: str) -> str:
    """Collapse whitespace inside generic type arguments."""
    text = re.sub(r"\s*<\s*", "<", text.strip())
    text = re.sub(r"\s*,\s*", ",", text)
    text = re.sub(r"\s+>", ">", text)
    return text
