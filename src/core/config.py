"""Runtime configuration model for paired arrays.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import (
    ATOMIC_WRITES_ENV,
    DEFAULT_ATOMIC_WRITES,
    DEFAULT_MAX_COERCION_DEPTH,
    FALSE_ENV_VALUES,
    MAX_COERCION_DEPTH_ENV,
    TRUE_ENV_VALUES,
)
from core.errors import ConfigurationError


@dataclass(frozen=True)
class PairedArrayConfig:
    """Validated runtime configuration.

    Attributes:
        atomic_writes: Undo the key half of a set or push when the value
            half fails. Disabled by default, leaving the partial write visible.
        max_coercion_depth: Maximum nesting of pair coercion hooks before
            the conversion is aborted.
    """

    atomic_writes: bool = DEFAULT_ATOMIC_WRITES
    max_coercion_depth: int = DEFAULT_MAX_COERCION_DEPTH

    def __post_init__(self) -> None:
        if self.max_coercion_depth < 1:
            raise ConfigurationError(
                "Invalid max_coercion_depth: "
                f"expected a positive integer, got {self.max_coercion_depth}."
            )

    @classmethod
    def from_env(cls) -> "PairedArrayConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            ConfigurationError: If environment values are invalid.
        """
        atomic_writes_value = os.getenv(ATOMIC_WRITES_ENV, str(DEFAULT_ATOMIC_WRITES))
        depth_value = os.getenv(MAX_COERCION_DEPTH_ENV, str(DEFAULT_MAX_COERCION_DEPTH))
        return cls(
            atomic_writes=_parse_bool(ATOMIC_WRITES_ENV, atomic_writes_value),
            max_coercion_depth=_parse_positive_int(MAX_COERCION_DEPTH_ENV, depth_value),
        )


def _parse_bool(name: str, raw_value: str) -> bool:
    """Parse a boolean environment flag.

    Args:
        name: Environment variable name, used in error messages.
        raw_value: Raw string from environment.

    Returns:
        Parsed flag value.

    Raises:
        ConfigurationError: If value is not a recognized boolean literal.
    """
    normalized = raw_value.strip().lower()
    if normalized in TRUE_ENV_VALUES:
        return True
    if normalized in FALSE_ENV_VALUES:
        return False
    raise ConfigurationError(
        f"Invalid {name} value: expected one of "
        f"{', '.join(TRUE_ENV_VALUES + FALSE_ENV_VALUES[:-1])}, got '{raw_value}'."
    )


def _parse_positive_int(name: str, raw_value: str) -> int:
    """Parse a positive integer environment value.

    Args:
        name: Environment variable name, used in error messages.
        raw_value: Raw string from environment.

    Returns:
        Parsed integer.

    Raises:
        ConfigurationError: If value is not a positive integer.
    """
    try:
        value = int(raw_value)
    except ValueError as error:
        raise ConfigurationError(
            f"Invalid {name} value: expected integer, got '{raw_value}'. "
            f"Set {name} to a positive numeric value."
        ) from error
    if value < 1:
        raise ConfigurationError(f"Invalid {name} value: expected a positive integer, got {value}.")
    return value
