"""Bulk projections over paired arrays.

Projecting a paired array onto its keys or values returns the backing
container itself rather than a rebuilt collection. Other functions go
through the generic elementwise path.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

import numpy as np

from core.types import Pair
from paired.paired_array import PairedArray


def first(pair: Pair) -> Any:
    """Return the key member of a pair."""
    return pair[0]


def second(pair: Pair) -> Any:
    """Return the value member of a pair."""
    return pair[1]


def map_pairs(func: Callable[[Pair], Any], pairs: Iterable[Pair]) -> Any:
    """Apply ``func`` to every pair.

    Args:
        func: Projection or any function of one pair.
        pairs: Paired array or any iterable of pairs.

    Returns:
        ``pairs.keys`` for ``first`` and ``pairs.vals`` for ``second`` on a
        paired array (same objects). Otherwise a list, or for paired arrays
        of rank above 1 a numpy object array of the same shape.
    """
    if isinstance(pairs, PairedArray):
        if func is first:
            return pairs.keys
        if func is second:
            return pairs.vals
        if pairs.ndim > 1:
            return _map_shaped(func, pairs)
    return [func(pair) for pair in pairs]


def _map_shaped(func: Callable[[Pair], Any], pairs: PairedArray) -> np.ndarray:
    result = np.empty(pairs.shape, dtype=object)
    for position, pair in zip(np.ndindex(*pairs.shape), pairs):
        result[position] = func(pair)
    return result
