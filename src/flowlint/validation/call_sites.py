"""
Validation of function-call argument bindings.

A function-call node binds each parameter of a parsed callable to argument
text. Arguments that are a single ``{variable}`` token are type-checked
against the parameter; literal arguments are accepted as written, since no
literal type inference is attempted.
"""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from flowlint.core.diagnostics import Diagnostic, IssueCategory
from flowlint.core.types import ArgumentBindings
from flowlint.parsing.signatures import CallableSignature
from flowlint.structure.registry import VariableTable
from flowlint.structure.type_mapping import PRIMITIVE_TYPES, compatible, map_parameter_type
from flowlint.templates.variables import single_token

if TYPE_CHECKING:
    from flowlint.models import FunctionCallNode, Project

logger = logging.getLogger(__name__)


def validate_call_site(
    callable_signature: CallableSignature,
    argument_bindings: ArgumentBindings | None,
    variables: VariableTable | Iterable[Any] | None = None,
    struct_names: Iterable[str] = (),
    flag_unknown_arguments: bool = True,
) -> list[Diagnostic]:
    """
    Check the arguments bound to a callable's parameters.

    Params:
        callable_signature: The callable being invoked
        argument_bindings: Argument text keyed by parameter name
        variables: Variables visible at the call site
        struct_names: Struct names of the project, so struct-typed
            parameters are compared instead of widened to ``object``
        flag_unknown_arguments: Warn about bindings for parameters the
            callable does not declare

    Returns:
        One diagnostic per offending parameter, in parameter order
    """
    bindings = dict(argument_bindings or {})
    table = VariableTable.coerce(variables)
    known_types = set(struct_names) | {
        t for t in table.declared_types() if t not in PRIMITIVE_TYPES
    }

    diagnostics = []
    for parameter in callable_signature.parameters:
        argument = (bindings.get(parameter.name) or "").strip()

        if not argument:
            if parameter.required:
                diagnostics.append(
                    Diagnostic.error(
                        IssueCategory.MISSING_ARGUMENT,
                        f"Missing argument for parameter '{parameter.name}' "
                        f"({parameter.type}) of {callable_signature.name}.",
                    )
                )
            continue

        name = single_token(argument)
        if name is None:
            continue

        variable = table.resolve(name)
        if variable is None:
            diagnostics.append(
                Diagnostic.warning(
                    IssueCategory.UNDEFINED_VARIABLE,
                    f"Argument for parameter '{parameter.name}' refers to undefined "
                    f"variable '{name}'.",
                )
            )
            continue

        expected = map_parameter_type(parameter.type, known_types)
        if not compatible(variable.declared_type, expected):
            diagnostics.append(
                Diagnostic.error(
                    IssueCategory.ARGUMENT_TYPE_MISMATCH,
                    f"Parameter '{parameter.name}' of {callable_signature.name} expects "
                    f"{expected} ({parameter.type}) but variable '{name}' is "
                    f"{variable.declared_type}.",
                )
            )

    if flag_unknown_arguments:
        declared = {p.name for p in callable_signature.parameters}
        for bound_name, argument in bindings.items():
            if bound_name not in declared and (argument or "").strip():
                diagnostics.append(
                    Diagnostic.warning(
                        IssueCategory.UNKNOWN_ARGUMENT,
                        f"{callable_signature.name} has no parameter named '{bound_name}'.",
                    )
                )

    return diagnostics


def validate_function_call(
    node: "FunctionCallNode",
    project: "Project",
    variables: VariableTable | None = None,
    flag_unknown_arguments: bool = True,
) -> list[Diagnostic]:
    """
    Validate a function-call node against the project's code files.

    Inconsistent project state degrades to a ``target_not_found`` diagnostic
    rather than an exception: the node may name a code file that was deleted
    or a function that was renamed.

    Params:
        node: The configured function-call node
        project: Project holding the code files
        variables: Variables visible to the node

    Returns:
        Diagnostics for the node, without location
    """
    if not node.is_configured:
        return []

    code_file = project.get_code_file(node.code_file_id)
    if code_file is None:
        return [
            Diagnostic.error(
                IssueCategory.TARGET_NOT_FOUND,
                f"Target code file '{node.code_file_id}' not found.",
            )
        ]

    callable_signature = code_file.get_callable(node.function_name)
    if callable_signature is None:
        return [
            Diagnostic.error(
                IssueCategory.TARGET_NOT_FOUND,
                f"Function '{node.function_name}' not found in {code_file.name}.",
            )
        ]

    logger.debug("Checking call %s.%s from node %s", code_file.name, callable_signature.name, node.id)
    return validate_call_site(
        callable_signature,
        node.arguments,
        variables,
        struct_names=[s.name for s in project.structs],
        flag_unknown_arguments=flag_unknown_arguments,
    )
