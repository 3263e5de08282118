"""Index discipline access strategies.

This module resolves user indices into positions on the backing
containers. A paired array picks one strategy at construction time
from its frozen index style and keeps it for its whole lifetime.
"""

from __future__ import annotations

from collections.abc import Iterator
import math
import operator
from typing import Any

import numpy as np

from core.errors import IndexOutOfRangeError, UnsupportedIndexingError
from core.types import IndexStyle

Position = int | tuple[int, ...]


class AccessStrategy:
    """Shared index normalization for both disciplines."""

    style: IndexStyle

    def resolve(self, index: Any, shape: tuple[int, ...]) -> Position:
        """Resolve a user index into a backing container position.

        Args:
            index: Flat integer or coordinate tuple.
            shape: Current shape of the paired array.

        Returns:
            An int for rank-1 shapes, a coordinate tuple otherwise.

        Raises:
            IndexOutOfRangeError: If the index falls outside ``shape``.
            UnsupportedIndexingError: If the index form is not addressable.
            TypeError: If the index is not an integer or tuple of integers.
        """
        if isinstance(index, tuple):
            return self._resolve_coordinates(index, shape)
        return self._resolve_flat(operator.index(index), shape)

    def positions(self, shape: tuple[int, ...]) -> Iterator[Position]:
        """Yield every position of ``shape`` in row-major order."""
        if len(shape) == 1:
            return iter(range(shape[0]))
        return np.ndindex(*shape)

    def _resolve_flat(self, index: int, shape: tuple[int, ...]) -> Position:
        raise NotImplementedError

    def _resolve_coordinates(self, index: tuple[Any, ...], shape: tuple[int, ...]) -> Position:
        if len(index) != len(shape):
            raise UnsupportedIndexingError(
                f"Expected {len(shape)} coordinates for shape {shape}, got {len(index)}."
            )
        coordinates = tuple(
            _normalize_axis(operator.index(value), extent, shape) for value, extent in zip(index, shape)
        )
        if len(coordinates) == 1:
            return coordinates[0]
        return coordinates


class LinearAccess(AccessStrategy):
    """Flat row-major addressing, with coordinate tuples also accepted."""

    style = IndexStyle.LINEAR

    def _resolve_flat(self, index: int, shape: tuple[int, ...]) -> Position:
        flat_index = _normalize_axis(index, math.prod(shape), shape)
        if len(shape) == 1:
            return flat_index
        return tuple(int(coordinate) for coordinate in np.unravel_index(flat_index, shape))


class CartesianAccess(AccessStrategy):
    """Coordinate addressing; flat integers only address rank-1 shapes."""

    style = IndexStyle.CARTESIAN

    def _resolve_flat(self, index: int, shape: tuple[int, ...]) -> Position:
        if len(shape) != 1:
            raise UnsupportedIndexingError(
                f"Cartesian paired array of shape {shape} requires {len(shape)} coordinates, "
                "got a single flat index."
            )
        return _normalize_axis(index, shape[0], shape)


_STRATEGIES: dict[IndexStyle, AccessStrategy] = {
    IndexStyle.LINEAR: LinearAccess(),
    IndexStyle.CARTESIAN: CartesianAccess(),
}


def access_strategy_for(style: IndexStyle) -> AccessStrategy:
    """Return the access strategy implementing ``style``."""
    return _STRATEGIES[style]


def _normalize_axis(index: int, extent: int, shape: tuple[int, ...]) -> int:
    normalized = index + extent if index < 0 else index
    if not 0 <= normalized < extent:
        raise IndexOutOfRangeError(f"Index {index} is out of range for shape {shape}.")
    return normalized
