"""Pair coercion hook.

This module owns the extensible conversion of arbitrary inputs into typed
pairs. Every write into a paired array routes through ``coerce_pair``;
foreign pair-like types plug in with ``coerce_pair.register``:

    @coerce_pair.register(MyRecord)
    def _(record, key_type, value_type):
        return Pair(record.name, record.score)

An extension must return a ``Pair``. Hooks that delegate back into
``coerce_pair`` with a value of their own type recurse; the hook tracks
its nesting depth and aborts with ``CoercionRecursionError`` instead.
"""

from __future__ import annotations

from collections.abc import Sequence
from functools import singledispatch
import numbers
from typing import Any, Callable

import numpy as np

from core.constants import DEFAULT_MAX_COERCION_DEPTH
from core.errors import CoercionRecursionError, ConversionError
from core.logging_config import get_logger
from core.types import Pair

_LOGGER = get_logger(__name__)

CoercionFunction = Callable[[Any, type, type], Pair]


class PairCoercionHook:
    """Depth-guarded single-dispatch conversion into ``Pair`` values."""

    def __init__(self, default: CoercionFunction) -> None:
        self._dispatcher = singledispatch(default)
        self._depth = 0
        self._active_limit = DEFAULT_MAX_COERCION_DEPTH

    def register(self, cls: type, func: CoercionFunction | None = None) -> Any:
        """Register a coercion for inputs of type ``cls``.

        Usable as ``register(cls, func)`` or as a ``@register(cls)`` decorator.
        """
        return self._dispatcher.register(cls, func)

    def __call__(
        self,
        x: Any,
        key_type: type,
        value_type: type,
        *,
        max_depth: int | None = None,
    ) -> Pair:
        """Coerce ``x`` into a pair whose members are of the given types.

        Args:
            x: Pair, 2-sequence or any registered pair-like value.
            key_type: Target key type; ``object`` accepts anything.
            value_type: Target value type; ``object`` accepts anything.
            max_depth: Nesting limit, honored on the outermost call only.

        Returns:
            ``x`` itself when already a pair of the target types, else a new pair.

        Raises:
            ConversionError: If no exact conversion exists.
            CoercionRecursionError: If hooks nest deeper than the limit.
        """
        if type(x) is Pair and _is_member_of(x.first, key_type) and _is_member_of(x.second, value_type):
            return x
        if self._depth == 0:
            self._active_limit = max_depth or DEFAULT_MAX_COERCION_DEPTH
        if self._depth >= self._active_limit:
            _LOGGER.error(
                "pair_coercion_recursion",
                input_type=type(x).__name__,
                max_depth=self._active_limit,
            )
            raise CoercionRecursionError(
                f"Pair coercion of {type(x).__name__} nested deeper than {self._active_limit} hooks. "
                "A registered coercion must return a Pair instead of delegating its own type."
            )
        self._depth += 1
        try:
            result = self._dispatcher.dispatch(type(x))(x, key_type, value_type)
        finally:
            self._depth -= 1
        if not isinstance(result, Pair):
            raise ConversionError(
                f"Coercion for {type(x).__name__} returned {type(result).__name__}, expected Pair."
            )
        if _is_member_of(result.first, key_type) and _is_member_of(result.second, value_type):
            return result
        return Pair(convert_member(result.first, key_type), convert_member(result.second, value_type))


def _coerce_default(x: Any, key_type: type, value_type: type) -> Pair:
    if isinstance(x, (str, bytes)) or not isinstance(x, (Sequence, np.ndarray)):
        raise ConversionError(
            f"Cannot convert {type(x).__name__} to a pair. "
            "Pass a Pair, a 2-tuple or register a coercion with coerce_pair.register."
        )
    if len(x) != 2:
        raise ConversionError(f"Cannot convert a sequence of length {len(x)} to a pair.")
    key, value = x
    return Pair(convert_member(key, key_type), convert_member(value, value_type))


coerce_pair = PairCoercionHook(_coerce_default)


def convert_member(member: Any, target: type) -> Any:
    """Convert one pair member to the target element type.

    Conversions must be exact: numbers must keep their value and text is
    never synthesized from non-text members.

    Args:
        member: Key or value to convert.
        target: Target element type.

    Returns:
        ``member`` unchanged when it already fits, else the converted value.

    Raises:
        ConversionError: If conversion fails or loses information.
    """
    if _is_member_of(member, target):
        return member
    for text_type in (str, bytes):
        if issubclass(target, text_type):
            if not isinstance(member, text_type):
                raise ConversionError(f"Cannot convert {type(member).__name__} to {target.__name__}.")
            return target(member)
    try:
        converted = target(member)
    except (TypeError, ValueError, OverflowError) as error:
        raise ConversionError(
            f"Cannot convert {member!r} of type {type(member).__name__} to {target.__name__}: {error}"
        ) from error
    if _is_number(member) and _is_number(converted) and not _same_number(converted, member):
        raise ConversionError(f"Inexact conversion of {member!r} to {target.__name__}.")
    return converted


def _is_member_of(member: Any, target: type) -> bool:
    return target is object or isinstance(member, target)


def _is_number(value: Any) -> bool:
    return isinstance(value, (numbers.Number, np.generic)) and not isinstance(value, (str, bytes))


def _same_number(left: Any, right: Any) -> bool:
    if left != left and right != right:
        return True
    return bool(left == right)
