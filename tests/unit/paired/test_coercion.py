"""Unit tests for the pair coercion hook."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
import pytest

from core.config import PairedArrayConfig
from core.errors import CoercionRecursionError, ConversionError
from core.types import Pair
from paired.coercion import coerce_pair, convert_member
from paired.paired_array import PairedArray


@dataclass(frozen=True)
class NamedRecord:
    """Foreign pair-like record with named fields."""

    name: str
    score: int


@dataclass(frozen=True)
class SelfDelegatingRecord:
    """Record whose coercion delegates back to its own type."""

    payload: Any


@dataclass(frozen=True)
class BrokenRecord:
    """Record whose coercion returns a plain tuple."""

    payload: Any


@coerce_pair.register(NamedRecord)
def _coerce_named_record(record: NamedRecord, key_type: type, value_type: type) -> Pair:
    return Pair(record.name, record.score)


@coerce_pair.register(SelfDelegatingRecord)
def _coerce_self_delegating(record: SelfDelegatingRecord, key_type: type, value_type: type) -> Pair:
    return coerce_pair(SelfDelegatingRecord(record.payload), key_type, value_type)


@coerce_pair.register(BrokenRecord)
def _coerce_broken(record: BrokenRecord, key_type: type, value_type: type) -> Any:
    return (record.payload, record.payload)


def test_exact_pair_is_returned_unchanged() -> None:
    """A pair already of the target types should pass through by identity."""
    pair = Pair("a", 1)

    assert coerce_pair(pair, str, int) is pair


def test_tuple_members_are_converted() -> None:
    """Two-tuples should be converted member-wise."""
    pair = coerce_pair(("a", 2.0), str, int)

    assert pair == ("a", 2)
    assert type(pair.second) is int


def test_pair_members_are_converted_to_numpy_types() -> None:
    """Pairs with loose members should be narrowed to the target types."""
    pair = coerce_pair(Pair(1, 2), np.int16, np.float32)

    assert type(pair.first) is np.int16
    assert type(pair.second) is np.float32


@pytest.mark.parametrize(
    "item",
    [5, "ab", ("a", 1, 2), None],
)
def test_non_pairs_raise_conversion_error(item: Any) -> None:
    """Inputs that are not pair-like should fail."""
    with pytest.raises(ConversionError):
        coerce_pair(item, object, object)


def test_inexact_numeric_conversion_raises() -> None:
    """Lossy numeric conversions should be rejected."""
    with pytest.raises(ConversionError):
        coerce_pair(("a", 1.5), str, int)


def test_overflowing_numeric_conversion_raises() -> None:
    """Values outside the target range should be rejected."""
    with pytest.raises(ConversionError):
        convert_member(np.int64(70000), np.int16)


def test_text_is_never_synthesized() -> None:
    """Non-text members should not be stringified into text types."""
    with pytest.raises(ConversionError):
        coerce_pair((1, 2), str, int)


def test_text_converts_within_its_own_family() -> None:
    """str and bytes should convert to their numpy scalar types, not across."""
    assert type(convert_member("a", np.str_)) is np.str_
    assert convert_member(b"a", np.bytes_) == b"a"

    with pytest.raises(ConversionError):
        convert_member(1, np.str_)

    with pytest.raises(ConversionError):
        convert_member("a", np.bytes_)


def test_nan_converts_between_float_types() -> None:
    """NaN should survive conversion despite comparing unequal to itself."""
    converted = convert_member(float("nan"), np.float32)

    assert np.isnan(converted)


def test_registered_extension_converts_foreign_records() -> None:
    """Registered coercions should handle foreign pair-like types."""
    pair = coerce_pair(NamedRecord("x", 1), str, int)

    assert pair == ("x", 1)


def test_push_with_foreign_record_matches_explicit_pair() -> None:
    """Pushing a registered record should store the equivalent pair."""
    with_record = PairedArray(key_type=str, value_type=int).push(NamedRecord("x", 1))
    with_pair = PairedArray(key_type=str, value_type=int).push(Pair("x", 1))

    assert with_record == with_pair
    assert with_record[0] == with_pair[0]


def test_setitem_with_foreign_record_on_matrix() -> None:
    """Coordinate writes should route foreign records through the hook."""
    paired = PairedArray(np.full((2, 2), "", dtype=object), np.zeros((2, 2), dtype=np.int64))

    paired[1, 1] = NamedRecord("x", 8)

    assert paired[1, 1] == ("x", 8)
    assert type(paired.vals[1, 1]) is np.int64


def test_self_delegating_extension_raises_recursion_error() -> None:
    """Unbounded delegation should stop at the configured depth."""
    with pytest.raises(CoercionRecursionError):
        coerce_pair(SelfDelegatingRecord(1), object, object, max_depth=3)

    assert coerce_pair(("a", 1), str, int) == ("a", 1)


def test_recursion_limit_follows_array_config() -> None:
    """Paired arrays should pass their configured depth to the hook."""
    paired = PairedArray(key_type=object, value_type=object, config=PairedArrayConfig(max_coercion_depth=2))

    with pytest.raises(CoercionRecursionError):
        paired.push(SelfDelegatingRecord(1))

    assert len(paired) == 0


def test_extension_returning_non_pair_raises() -> None:
    """Extensions must return Pair values."""
    with pytest.raises(ConversionError):
        coerce_pair(BrokenRecord(1), object, object)
