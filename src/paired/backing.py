"""Backing container adapters.

This module gives the paired array one structural vocabulary over the
containers it wraps: lists and other mutable sequences, numpy arrays,
immutable sequences and custom containers exposing their own methods.
"""

from __future__ import annotations

import array
import copy
from collections.abc import MutableSequence
from typing import Any

import numpy as np

from core.constants import NUMPY_NATIVE_SCALAR_TYPES, UNSET_SLOT_VALUE
from core.errors import BackingContainerError
from core.types import IndexStyle

_ARRAY_TYPECODE_TYPES = {
    "b": int,
    "B": int,
    "h": int,
    "H": int,
    "i": int,
    "I": int,
    "l": int,
    "L": int,
    "q": int,
    "Q": int,
    "f": float,
    "d": float,
    "u": str,
}


def shape_of(container: Any) -> tuple[int, ...]:
    """Return the shape of a backing container.

    Args:
        container: Array-like container.

    Returns:
        The container's own shape when it declares one, else its length.
    """
    shape = getattr(container, "shape", None)
    if shape is not None:
        return tuple(int(extent) for extent in shape)
    return (len(container),)


def natural_index_style(container: Any) -> IndexStyle:
    """Return the addressing discipline a container prefers.

    Args:
        container: Array-like container.

    Returns:
        LINEAR for flat sequences and contiguous arrays, CARTESIAN otherwise.
    """
    declared = getattr(container, "index_style", None)
    if isinstance(declared, IndexStyle):
        return declared
    if isinstance(container, np.ndarray):
        if container.ndim <= 1 or container.flags.c_contiguous:
            return IndexStyle.LINEAR
        return IndexStyle.CARTESIAN
    if len(shape_of(container)) > 1:
        return IndexStyle.CARTESIAN
    return IndexStyle.LINEAR


def element_type_of(container: Any) -> type:
    """Infer the element type a backing container stores.

    Args:
        container: Array-like container.

    Returns:
        The numpy scalar type or array typecode type when known, else object.
    """
    declared = getattr(container, "element_type", None)
    if isinstance(declared, type):
        return declared
    if isinstance(container, np.ndarray):
        return container.dtype.type if container.dtype != np.dtype(object) else object
    if isinstance(container, array.array):
        return _ARRAY_TYPECODE_TYPES.get(container.typecode, object)
    if isinstance(container, range):
        return int
    return object


def resize_backing(container: Any, new_length: int) -> None:
    """Resize a rank-1 backing container in place.

    Args:
        container: Backing container.
        new_length: Target length, already validated as non-negative.

    Raises:
        BackingContainerError: If the container cannot change size.
    """
    if isinstance(container, np.ndarray):
        raise BackingContainerError(
            f"Cannot resize a numpy array of shape {container.shape}: numpy arrays are fixed-size. "
            "Use a list backing container for resizable paired arrays."
        )
    resize = getattr(container, "resize", None)
    if callable(resize):
        resize(new_length)
        return
    if isinstance(container, (MutableSequence, array.array)):
        current_length = len(container)
        if new_length < current_length:
            del container[new_length:]
        elif isinstance(container, array.array):
            container.frombytes(bytes(container.itemsize * (new_length - current_length)))
        else:
            container.extend([UNSET_SLOT_VALUE] * (new_length - current_length))
        return
    raise BackingContainerError(f"Cannot resize a backing container of type {type(container).__name__}.")


def append_backing(container: Any, item: Any) -> None:
    """Append one element to a rank-1 backing container.

    Args:
        container: Backing container.
        item: Element to append.

    Raises:
        BackingContainerError: If the container cannot grow.
    """
    if isinstance(container, np.ndarray):
        raise BackingContainerError(
            f"Cannot append to a numpy array of shape {container.shape}: numpy arrays are fixed-size."
        )
    append = getattr(container, "append", None)
    if callable(append):
        append(item)
        return
    raise BackingContainerError(f"Cannot append to a backing container of type {type(container).__name__}.")


def reserve_backing(container: Any, capacity: int) -> None:
    """Forward a capacity hint to a backing container when it accepts one."""
    reserve = getattr(container, "reserve", None)
    if callable(reserve):
        reserve(capacity)


def allocate_backing(element_type: type, shape: tuple[int, ...]) -> Any:
    """Allocate a fresh backing container with unspecified contents.

    Args:
        element_type: Element type to store.
        shape: Target shape.

    Returns:
        A list for rank-1 shapes, a numpy array for higher ranks.
    """
    if len(shape) == 1:
        return [UNSET_SLOT_VALUE] * shape[0]
    return np.empty(shape, dtype=_dtype_for(element_type))


def copy_backing(container: Any) -> Any:
    """Return an independent copy of a backing container.

    Immutable sequences are copied into lists so the copy stays writable.
    """
    if isinstance(container, np.ndarray):
        return container.copy()
    if isinstance(container, (range, tuple)):
        return list(container)
    return copy.copy(container)


def _dtype_for(element_type: type) -> np.dtype:
    if isinstance(element_type, type) and issubclass(element_type, np.generic):
        return np.dtype(element_type)
    if element_type in NUMPY_NATIVE_SCALAR_TYPES:
        return np.dtype(element_type)
    return np.dtype(object)
