"""
flowlint - Static validation for visual workflow projects

flowlint checks the flows, variables and embedded code files of a workflow
authoring tool without executing anything: it parses code file signatures,
scans ``{variable}`` references, validates conditions and function-call
arguments, and runs a whole-project compile pass.
"""

from importlib.metadata import version

from flowlint.compiler import compile_project, find_references, find_variable_usages
from flowlint.config import ValidationConfig
from flowlint.core import Diagnostic, IssueCategory, Severity
from flowlint.models import Flow, Project, Variable
from flowlint.parsing import parse_signatures
from flowlint.structure import compatible
from flowlint.templates import scan_references
from flowlint.validation import validate_call_site, validate_expression, validate_node

__version__ = version("flowlint")

__all__ = [
    "__version__",
    "Diagnostic",
    "Flow",
    "IssueCategory",
    "Project",
    "Severity",
    "ValidationConfig",
    "Variable",
    "compatible",
    "compile_project",
    "find_references",
    "find_variable_usages",
    "parse_signatures",
    "scan_references",
    "validate_call_site",
    "validate_expression",
    "validate_node",
]
