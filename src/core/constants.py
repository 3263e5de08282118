"""Core constants used across paired array modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

ENV_PREFIX = "PAIRED_ARRAYS_"
ATOMIC_WRITES_ENV = f"{ENV_PREFIX}ATOMIC_WRITES"
MAX_COERCION_DEPTH_ENV = f"{ENV_PREFIX}MAX_COERCION_DEPTH"
DEFAULT_ATOMIC_WRITES = False
DEFAULT_MAX_COERCION_DEPTH = 16
TRUE_ENV_VALUES = ("1", "true", "yes", "on")
FALSE_ENV_VALUES = ("0", "false", "no", "off", "")
UNSET_SLOT_VALUE = None
NUMPY_NATIVE_SCALAR_TYPES = (bool, int, float, complex)
