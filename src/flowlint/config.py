"""
Configuration for flowlint validation passes.

The defaults reproduce the behaviour of the authoring tool. Hosts that want
stricter or quieter checks build a ValidationConfig from a plain dict.
"""

from dataclasses import dataclass, fields

from flowlint.core.diagnostics import Severity
from flowlint.exceptions import ConfigurationError


@dataclass
class ValidationConfig:
    """Configuration for live node validation and the compile pass."""

    undefined_variable_severity: Severity = Severity.WARNING
    file_structure_severity: Severity = Severity.WARNING
    check_arithmetic_operands: bool = True  # String variables used as numbers
    check_empty_conditions: bool = True
    flag_unknown_arguments: bool = True
    max_member_depth: int = 8

    @classmethod
    def from_dict(cls, config: dict | None = None) -> "ValidationConfig":
        """
        Factory method to create config from dict with defaults.

        Params:
            config: Option values keyed by field name; severities may be
                given as ``"error"`` or ``"warning"``

        Returns:
            A ValidationConfig

        Raises:
            ConfigurationError: If a key is unknown or a severity is invalid
        """
        if config is None:
            config = {}

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(config) - known)
        if unknown:
            raise ConfigurationError(f"Unknown validation options: {', '.join(unknown)}")

        values = dict(config)
        for key in ("undefined_variable_severity", "file_structure_severity"):
            if key in values and not isinstance(values[key], Severity):
                try:
                    values[key] = Severity(str(values[key]).lower())
                except ValueError:
                    raise ConfigurationError(
                        f"Invalid severity for {key}: {values[key]!r}"
                    ) from None
        return cls(**values)


DEFAULT_CONFIG = ValidationConfig()
