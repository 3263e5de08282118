"""Shared typed models.

This module defines the immutable pair value and the index discipline
enum used by the paired array, its backing adapters and coercion hooks.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, NamedTuple


class Pair(NamedTuple):
    """Ordered key/value pair synthesized from a paired array slot.

    Attributes:
        first: Key member.
        second: Value member.
    """

    first: Any
    second: Any

    def __repr__(self) -> str:
        return f"{self.first!r} => {self.second!r}"


class IndexStyle(Enum):
    """Addressing discipline of an array-like container."""

    LINEAR = "linear"
    CARTESIAN = "cartesian"

    @classmethod
    def combine(cls, *styles: "IndexStyle") -> "IndexStyle":
        """Return the most restrictive of the given styles.

        Args:
            styles: Styles of the containers being combined.

        Returns:
            CARTESIAN when any style is cartesian, LINEAR otherwise.
        """
        if any(style is cls.CARTESIAN for style in styles):
            return cls.CARTESIAN
        return cls.LINEAR
