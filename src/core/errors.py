"""Paired array exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each failure mode raises a specific error type for debuggability.
"""

from __future__ import annotations


class PairedArrayError(Exception):
    """Base exception for all paired array failures."""


class ConfigurationError(PairedArrayError):
    """Raised for invalid runtime configuration or missing type parameters."""


class ShapeMismatchError(PairedArrayError):
    """Raised when keys and values do not share the same shape."""


class InvalidArgumentError(PairedArrayError):
    """Raised for invalid operation arguments such as negative lengths."""


class IndexOutOfRangeError(PairedArrayError, IndexError):
    """Raised when an index falls outside the container shape."""


class UnsupportedIndexingError(PairedArrayError):
    """Raised for index forms or source origins the container cannot address."""


class ConversionError(PairedArrayError):
    """Raised when an input cannot be coerced into a typed pair."""


class CoercionRecursionError(ConversionError):
    """Raised when coercion hooks nest deeper than the configured limit."""


class BackingContainerError(PairedArrayError):
    """Raised when a backing container does not support a structural operation."""
