"""Paired array construction from shapes and pair collections.

Every builder here allocates fresh backing containers and bottoms out in
the ``PairedArray`` constructor, so the shape check and index style
selection apply uniformly. The fill strategy follows what the source
declares about itself:

- a ``shape`` attribute: shape-indexed fill of a same-shaped array;
- a length (``Sized``): one linear pass into a pre-sized rank-1 array;
- neither: an empty rank-1 array grown one ``push`` at a time.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sized
import operator
from typing import Any

import numpy as np

from core.config import PairedArrayConfig
from core.errors import InvalidArgumentError, UnsupportedIndexingError
from core.types import Pair
from paired.backing import allocate_backing
from paired.coercion import coerce_pair
from paired.paired_array import PairedArray, require_element_types


def empty_paired_array(
    key_type: type | None,
    value_type: type | None,
    shape: int | tuple[int, ...] = 0,
    *,
    config: PairedArrayConfig | None = None,
) -> PairedArray:
    """Allocate a paired array whose slots hold unspecified values.

    Reading a slot before writing it returns whatever the fresh container
    holds (``None`` for lists, uninitialized memory for numpy arrays).

    Args:
        key_type: Key element type.
        value_type: Value element type.
        shape: Length or shape of the array.
        config: Optional runtime configuration.

    Returns:
        Paired array with freshly allocated containers.

    Raises:
        ConfigurationError: If an element type is missing.
        InvalidArgumentError: If the shape has a negative extent.
    """
    require_element_types(key_type, value_type)
    extents = shape if isinstance(shape, Iterable) else (shape,)
    dims = tuple(operator.index(extent) for extent in extents)
    if not dims or any(extent < 0 for extent in dims):
        raise InvalidArgumentError(f"Shape must have nonnegative extents, got {dims}.")
    return PairedArray(
        allocate_backing(key_type, dims),
        allocate_backing(value_type, dims),
        key_type=key_type,
        value_type=value_type,
        config=config,
    )


def paired_array_from_pairs(
    source: Iterable[Any],
    *,
    key_type: type | None = None,
    value_type: type | None = None,
    config: PairedArrayConfig | None = None,
) -> PairedArray:
    """Build a paired array from a collection of pair-like values.

    Element types default to the common type of the source's keys and
    values, or to ``object`` when mixed. One-shot sources of unknown
    length cannot be inspected ahead of time and default to ``object``.

    Args:
        source: Shaped array, sized collection, mapping or iterator of pairs.
        key_type: Optional key type override.
        value_type: Optional value type override.
        config: Optional runtime configuration.

    Returns:
        Paired array owning freshly allocated containers.

    Raises:
        ConversionError: If an element cannot be coerced to a pair.
        UnsupportedIndexingError: If a shaped source does not start at index 0.
    """
    config = config or PairedArrayConfig.from_env()
    if isinstance(source, PairedArray):
        key_type = key_type or source.key_type
        value_type = value_type or source.value_type
    if isinstance(source, Mapping):
        source = source.items()
    if getattr(source, "shape", None) is not None:
        return _from_shaped(source, key_type, value_type, config)
    if isinstance(source, Sized):
        return _from_sized(source, key_type, value_type, config)
    return _from_iterator(source, key_type, value_type, config)


def paired_array_of(
    *pairs: Any,
    key_type: type | None = None,
    value_type: type | None = None,
    config: PairedArrayConfig | None = None,
) -> PairedArray:
    """Build a rank-1 paired array from positional pairs."""
    return paired_array_from_pairs(pairs, key_type=key_type, value_type=value_type, config=config)


def _from_shaped(
    source: Any,
    key_type: type | None,
    value_type: type | None,
    config: PairedArrayConfig,
) -> PairedArray:
    shape = tuple(int(extent) for extent in source.shape)
    origin = getattr(source, "origin", None)
    if origin is not None and any(start != 0 for start in origin):
        raise UnsupportedIndexingError(
            f"Cannot build a paired array from a source with origin {tuple(origin)}: "
            "every axis must start at index 0."
        )
    positions = list(range(shape[0])) if len(shape) == 1 else list(np.ndindex(*shape))
    items = (source[position] for position in positions)
    pairs, key_type, value_type = _stage_pairs(items, key_type, value_type, config)
    keys = allocate_backing(key_type, shape)
    vals = allocate_backing(value_type, shape)
    for position, pair in zip(positions, pairs):
        keys[position] = pair.first
        vals[position] = pair.second
    return PairedArray(keys, vals, key_type=key_type, value_type=value_type, config=config)


def _from_sized(
    source: Any,
    key_type: type | None,
    value_type: type | None,
    config: PairedArrayConfig,
) -> PairedArray:
    length = len(source)
    pairs, key_type, value_type = _stage_pairs(source, key_type, value_type, config)
    keys = allocate_backing(key_type, (length,))
    vals = allocate_backing(value_type, (length,))
    filled = 0
    for index, pair in enumerate(pairs):
        if index >= length:
            raise InvalidArgumentError(f"Source yielded more pairs than its declared length {length}.")
        keys[index] = pair.first
        vals[index] = pair.second
        filled = index + 1
    if filled != length:
        raise InvalidArgumentError(f"Source yielded {filled} pairs but declared length {length}.")
    return PairedArray(keys, vals, key_type=key_type, value_type=value_type, config=config)


def _from_iterator(
    source: Iterable[Any],
    key_type: type | None,
    value_type: type | None,
    config: PairedArrayConfig,
) -> PairedArray:
    paired = PairedArray(key_type=key_type or object, value_type=value_type or object, config=config)
    for item in source:
        paired.push(item)
    return paired


def _stage_pairs(
    items: Iterable[Any],
    key_type: type | None,
    value_type: type | None,
    config: PairedArrayConfig,
) -> tuple[Iterable[Pair], type, type]:
    """Coerce source items into pairs and settle the element types.

    With both types given, items are coerced lazily in a single pass.
    Otherwise they are staged once to infer the missing types.

    Returns:
        Pairs in source order, the key type and the value type.
    """
    depth = config.max_coercion_depth
    if key_type is not None and value_type is not None:
        pairs = (coerce_pair(item, key_type, value_type, max_depth=depth) for item in items)
        return pairs, key_type, value_type
    staged = [coerce_pair(item, key_type or object, value_type or object, max_depth=depth) for item in items]
    key_type = key_type or _common_type(pair.first for pair in staged)
    value_type = value_type or _common_type(pair.second for pair in staged)
    return staged, key_type, value_type


def _common_type(members: Iterable[Any]) -> type:
    member_types = {type(member) for member in members}
    if len(member_types) == 1:
        return member_types.pop()
    return object
