"""Public SDK surface for paired arrays.

This module provides a stable import path for library users.
It re-exports the paired array, its builders and extension points.
"""

from __future__ import annotations

from core.config import PairedArrayConfig
from core.errors import (
    BackingContainerError,
    CoercionRecursionError,
    ConfigurationError,
    ConversionError,
    IndexOutOfRangeError,
    InvalidArgumentError,
    PairedArrayError,
    ShapeMismatchError,
    UnsupportedIndexingError,
)
from core.types import IndexStyle, Pair
from paired.coercion import coerce_pair
from paired.construction import empty_paired_array, paired_array_from_pairs, paired_array_of
from paired.paired_array import PairedArray
from paired.projection import first, map_pairs, second

__all__ = [
    "BackingContainerError",
    "CoercionRecursionError",
    "ConfigurationError",
    "ConversionError",
    "IndexOutOfRangeError",
    "IndexStyle",
    "InvalidArgumentError",
    "Pair",
    "PairedArray",
    "PairedArrayConfig",
    "PairedArrayError",
    "ShapeMismatchError",
    "UnsupportedIndexingError",
    "coerce_pair",
    "empty_paired_array",
    "first",
    "map_pairs",
    "paired_array_from_pairs",
    "paired_array_of",
    "second",
]
