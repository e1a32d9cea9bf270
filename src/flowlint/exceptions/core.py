"""
Exception classes for flowlint.

Authoring mistakes found in a project are never raised: they are returned
as diagnostics. The exceptions here signal misuse of the library itself,
such as an invalid model invariant or an unknown query kind.
"""


class FlowLintError(Exception):
    """Base exception for all flowlint errors."""

    pass


class InvalidVariableNameError(FlowLintError, ValueError):
    """Raised when a variable is constructed with an illegal name."""

    def __init__(self, name: str, reason: str = "must match [A-Za-z_][A-Za-z0-9_]*"):
        """
        Initialize the exception.

        Params:
            name: The rejected variable name
            reason: Why the name is invalid
        """
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid variable name '{name}': {reason}")


class UnknownReferenceKindError(FlowLintError, ValueError):
    """Raised when a reference query names a target kind that does not exist."""

    def __init__(self, kind: str, valid_kinds: tuple[str, ...]):
        """
        Initialize the exception.

        Params:
            kind: The requested target kind
            valid_kinds: Kinds accepted by the reference index
        """
        self.kind = kind
        self.valid_kinds = valid_kinds
        super().__init__(
            f"Unknown reference kind '{kind}'. Valid kinds are: {', '.join(valid_kinds)}"
        )


class ConfigurationError(FlowLintError):
    """Raised when a validation configuration cannot be built."""

    def __init__(self, message: str):
        super().__init__(message)
