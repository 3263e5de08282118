"""Paired array over separate key and value containers.

A paired array exposes ``keys[i] => vals[i]`` as its element ``i``
without ever storing pair objects. Reads synthesize a ``Pair``; writes
coerce the input into a typed pair and split it across both containers.
Both containers are held by reference, so mutating them directly
bypasses the shape check and can desynchronize the pairing.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from itertools import zip_longest
import math
import operator
from typing import Any

import numpy as np

from core.config import PairedArrayConfig
from core.errors import (
    BackingContainerError,
    ConfigurationError,
    InvalidArgumentError,
    ShapeMismatchError,
)
from core.logging_config import get_logger
from core.types import IndexStyle, Pair
from paired.backing import (
    allocate_backing,
    append_backing,
    copy_backing,
    element_type_of,
    natural_index_style,
    reserve_backing,
    resize_backing,
    shape_of,
)
from paired.coercion import coerce_pair, convert_member
from paired.index_access import access_strategy_for

_LOGGER = get_logger(__name__)
_MISSING = object()


class PairedArray:
    """Array of key/value pairs backed by a keys container and a values container.

    Writes are not atomic by default: when the value half of ``arr[i] = pair``
    or ``push`` fails, the key half stays written. Set ``atomic_writes`` in
    ``PairedArrayConfig`` to undo the key half instead.
    """

    __hash__ = None  # type: ignore[assignment]

    def __init__(
        self,
        keys: Any = None,
        vals: Any = None,
        *,
        key_type: type | None = None,
        value_type: type | None = None,
        config: PairedArrayConfig | None = None,
    ) -> None:
        """Pair two containers of identical shape.

        With no containers, an empty rank-1 paired array is allocated; both
        element types are then required.

        Args:
            keys: Keys container, stored by reference.
            vals: Values container, stored by reference.
            key_type: Key element type; inferred from ``keys`` when omitted.
            value_type: Value element type; inferred from ``vals`` when omitted.
            config: Optional runtime configuration.

        Raises:
            ConfigurationError: If containers or element types are missing.
            ShapeMismatchError: If the containers have different shapes.
        """
        if keys is None and vals is None:
            require_element_types(key_type, value_type)
            keys, vals = [], []
        elif keys is None or vals is None:
            missing = "keys" if keys is None else "vals"
            raise ConfigurationError(
                f"Cannot pair containers: {missing} is missing. "
                "Pass both containers, or neither together with key_type and value_type."
            )
        keys_shape = shape_of(keys)
        vals_shape = shape_of(vals)
        if keys_shape != vals_shape:
            raise ShapeMismatchError(
                f"Keys and values must have the same shape, got {keys_shape} and {vals_shape}."
            )
        self._keys = keys
        self._vals = vals
        self._key_type = key_type or element_type_of(keys)
        self._value_type = value_type or element_type_of(vals)
        self._index_style = IndexStyle.combine(natural_index_style(keys), natural_index_style(vals))
        self._access = access_strategy_for(self._index_style)
        self._config = config or PairedArrayConfig.from_env()

    @property
    def keys(self) -> Any:
        """The keys backing container, by reference."""
        return self._keys

    @property
    def vals(self) -> Any:
        """The values backing container, by reference."""
        return self._vals

    @property
    def key_type(self) -> type:
        return self._key_type

    @property
    def value_type(self) -> type:
        return self._value_type

    @property
    def index_style(self) -> IndexStyle:
        return self._index_style

    @property
    def config(self) -> PairedArrayConfig:
        return self._config

    @property
    def shape(self) -> tuple[int, ...]:
        return shape_of(self._keys)

    @property
    def ndim(self) -> int:
        return len(self.shape)

    @property
    def index_range(self) -> tuple[range, ...]:
        """Valid indices along each axis."""
        return tuple(range(extent) for extent in self.shape)

    def __len__(self) -> int:
        return math.prod(self.shape)

    def __iter__(self) -> Iterator[Pair]:
        for position in self._access.positions(self.shape):
            yield Pair(self._keys[position], self._vals[position])

    def __getitem__(self, index: Any) -> Pair:
        position = self._access.resolve(index, self.shape)
        return Pair(self._keys[position], self._vals[position])

    def __setitem__(self, index: Any, item: Any) -> None:
        position = self._access.resolve(index, self.shape)
        pair = self._coerce(item)
        if not self._config.atomic_writes:
            self._keys[position] = pair.first
            self._vals[position] = pair.second
            return
        previous_key = self._keys[position]
        self._keys[position] = pair.first
        try:
            self._vals[position] = pair.second
        except Exception as error:
            _LOGGER.warning(
                "paired_array_set_rollback",
                position=str(position),
                error=type(error).__name__,
            )
            self._keys[position] = previous_key
            raise

    def __eq__(self, other: object) -> bool:
        other_pairs = _iter_pairs(other)
        if other_pairs is None:
            return NotImplemented
        for mine, theirs in zip_longest(self, other_pairs, fillvalue=_MISSING):
            if mine is _MISSING or theirs is _MISSING:
                return False
            if not _pairs_equal(mine, theirs):
                return False
        return True

    def __repr__(self) -> str:
        return (
            f"PairedArray({list(self)!r}, key_type={self._key_type.__name__}, "
            f"value_type={self._value_type.__name__}, shape={self.shape})"
        )

    def push(self, item: Any) -> "PairedArray":
        """Append one pair to a rank-1 paired array.

        Args:
            item: Pair or any value the coercion hook converts to a pair.

        Returns:
            This paired array.

        Raises:
            BackingContainerError: If the array is not rank-1 or a container cannot grow.
            ConversionError: If ``item`` cannot be coerced; nothing is appended.
        """
        self._require_rank_one("push")
        pair = self._coerce(item)
        append_backing(self._keys, pair.first)
        if not self._config.atomic_writes:
            append_backing(self._vals, pair.second)
            return self
        try:
            append_backing(self._vals, pair.second)
        except Exception as error:
            _LOGGER.warning(
                "paired_array_push_rollback",
                restored_length=_length(self._vals),
                error=type(error).__name__,
            )
            self._restore_keys_length(_length(self._vals))
            raise
        return self

    def resize(self, new_length: int) -> "PairedArray":
        """Resize both containers of a rank-1 paired array.

        Keys are resized first. If resizing the values fails, the keys are
        restored to the current values length and the error is re-raised.
        Slots revealed by growing hold unspecified values.

        Args:
            new_length: Target length.

        Returns:
            This paired array.

        Raises:
            InvalidArgumentError: If ``new_length`` is negative.
            BackingContainerError: If the array is not rank-1 or cannot resize.
        """
        new_length = operator.index(new_length)
        if new_length < 0:
            raise InvalidArgumentError(f"Length must be nonnegative, got {new_length}.")
        self._require_rank_one("resize")
        if new_length != _length(self._keys):
            resize_backing(self._keys, new_length)
        if new_length != _length(self._vals):
            try:
                resize_backing(self._vals, new_length)
            except Exception as error:
                restored_length = _length(self._vals)
                _LOGGER.warning(
                    "paired_array_resize_rollback",
                    requested_length=new_length,
                    restored_length=restored_length,
                    error=type(error).__name__,
                )
                self._restore_keys_length(restored_length)
                raise
        return self

    def reserve(self, capacity: int) -> "PairedArray":
        """Forward a capacity hint to both containers.

        Containers with no capacity notion ignore the hint.

        Raises:
            InvalidArgumentError: If ``capacity`` is negative.
        """
        capacity = operator.index(capacity)
        if capacity < 0:
            raise InvalidArgumentError(f"Capacity must be nonnegative, got {capacity}.")
        reserve_backing(self._keys, capacity)
        reserve_backing(self._vals, capacity)
        return self

    def astype(self, key_type: type | None = None, value_type: type | None = None) -> "PairedArray":
        """Convert to a paired array with other element types.

        Args:
            key_type: Target key type; keeps the current one when omitted.
            value_type: Target value type; keeps the current one when omitted.

        Returns:
            This same instance when both types already match, otherwise an
            independent paired array with freshly allocated containers.

        Raises:
            ConversionError: If an element cannot be converted exactly.
        """
        target_key_type = key_type or self._key_type
        target_value_type = value_type or self._value_type
        if target_key_type is self._key_type and target_value_type is self._value_type:
            return self
        shape = self.shape
        keys = allocate_backing(target_key_type, shape)
        vals = allocate_backing(target_value_type, shape)
        for position in self._access.positions(shape):
            keys[position] = convert_member(self._keys[position], target_key_type)
            vals[position] = convert_member(self._vals[position], target_value_type)
        _LOGGER.debug(
            "paired_array_converted",
            key_type=target_key_type.__name__,
            value_type=target_value_type.__name__,
            shape=list(shape),
        )
        return PairedArray(
            keys,
            vals,
            key_type=target_key_type,
            value_type=target_value_type,
            config=self._config,
        )

    def copy(self) -> "PairedArray":
        """Return an independent paired array with copied containers."""
        return PairedArray(
            copy_backing(self._keys),
            copy_backing(self._vals),
            key_type=self._key_type,
            value_type=self._value_type,
            config=self._config,
        )

    def _restore_keys_length(self, length: int) -> None:
        """Shrink or grow the keys back to ``length`` after a failed values step.

        A failure here is logged only; the caller re-raises the values error.
        """
        try:
            resize_backing(self._keys, length)
        except Exception as rollback_error:
            _LOGGER.error(
                "paired_array_rollback_failed",
                restored_length=length,
                error=type(rollback_error).__name__,
            )

    def _coerce(self, item: Any) -> Pair:
        return coerce_pair(
            item,
            self._key_type,
            self._value_type,
            max_depth=self._config.max_coercion_depth,
        )

    def _require_rank_one(self, operation: str) -> None:
        if self.ndim != 1:
            raise BackingContainerError(
                f"Cannot {operation} a paired array of shape {self.shape}: only rank-1 arrays grow or shrink."
            )


def require_element_types(key_type: type | None, value_type: type | None) -> None:
    """Fail unless both element types are given.

    Raises:
        ConfigurationError: Naming each missing type parameter.
    """
    missing = [name for name, value in (("key_type", key_type), ("value_type", value_type)) if value is None]
    if missing:
        raise ConfigurationError(
            f"Cannot build an empty paired array without {' and '.join(missing)}. "
            "Pass both element types, e.g. PairedArray(key_type=str, value_type=int)."
        )


def _iter_pairs(other: object) -> Iterator[Any] | None:
    if isinstance(other, PairedArray):
        return iter(other)
    if isinstance(other, np.ndarray):
        return iter(other.flat)
    if isinstance(other, Mapping):
        return iter(other.items())
    if isinstance(other, (str, bytes)) or not isinstance(other, Iterable):
        return None
    return iter(other)


def _pairs_equal(mine: Pair, theirs: Any) -> bool:
    if not isinstance(theirs, (tuple, list)) or len(theirs) != 2:
        return False
    return bool(mine.first == theirs[0]) and bool(mine.second == theirs[1])


def _length(container: Any) -> int:
    return shape_of(container)[0]
