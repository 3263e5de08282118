"""Unit tests for paired array builders."""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np
import pytest

from core.errors import ConfigurationError, InvalidArgumentError, UnsupportedIndexingError
from core.types import Pair
from paired.construction import empty_paired_array, paired_array_from_pairs, paired_array_of
from paired.paired_array import PairedArray

EXPECTED = [("a", 1), ("b", 2), ("c", 3)]


class ShapedPairs:
    """Two-dimensional pair source addressed by coordinates."""

    def __init__(self, rows: list[list[Pair]], origin: tuple[int, int] = (0, 0)) -> None:
        self._rows = rows
        self.shape = (len(rows), len(rows[0]))
        self.origin = origin

    def __getitem__(self, position: tuple[int, int]) -> Pair:
        row, column = position
        return self._rows[row][column]


class MisreportedLength:
    """Sized source whose iteration yields fewer items than its length."""

    def __len__(self) -> int:
        return 3

    def __iter__(self) -> Iterator[tuple[str, int]]:
        return iter(EXPECTED[:2])


def _shaped_rows() -> list[list[Pair]]:
    return [[Pair("a", 1), Pair("b", 2)], [Pair("c", 3), Pair("d", 4)]]


def test_paired_array_of_infers_element_types() -> None:
    """Positional pairs should build a typed vector."""
    paired = paired_array_of(("a", 1), ("b", 2), ("c", 3))

    assert paired == EXPECTED
    assert paired.key_type is str
    assert paired.value_type is int


def test_from_pairs_accepts_list_tuple_and_mapping() -> None:
    """Every sized collection of pairs should yield the same vector."""
    from_list = paired_array_from_pairs(list(EXPECTED))
    from_tuple = paired_array_from_pairs(tuple(EXPECTED))
    from_mapping = paired_array_from_pairs({"a": 1, "b": 2, "c": 3})

    for paired in (from_list, from_tuple, from_mapping):
        assert paired == EXPECTED
        assert paired.shape == (3,)
        assert isinstance(paired.keys, list)


def test_from_pairs_accepts_one_shot_iterator() -> None:
    """Sources of unknown length should be pushed one pair at a time."""
    paired = paired_array_from_pairs(pair for pair in EXPECTED)

    assert paired == EXPECTED
    assert paired.shape == (3,)
    assert paired.key_type is object


def test_from_pairs_honors_explicit_types_for_iterators() -> None:
    """Explicit element types should apply to streamed sources."""
    paired = paired_array_from_pairs(iter(EXPECTED), key_type=str, value_type=float)

    assert paired.value_type is float
    assert paired.vals == [1.0, 2.0, 3.0]
    assert type(paired.vals[0]) is float


def test_from_pairs_falls_back_to_object_for_mixed_types() -> None:
    """Mixed member types should infer object."""
    paired = paired_array_from_pairs([("a", 1), ("b", "two")])

    assert paired.key_type is str
    assert paired.value_type is object


def test_from_pairs_replicates_source_shape() -> None:
    """Shaped sources should produce a paired array of the same shape."""
    paired = paired_array_from_pairs(ShapedPairs(_shaped_rows()))

    assert paired.shape == (2, 2)
    assert paired[1, 0] == ("c", 3)
    assert paired == [("a", 1), ("b", 2), ("c", 3), ("d", 4)]


def test_from_pairs_rejects_non_zero_origin() -> None:
    """Shaped sources must start every axis at index 0."""
    with pytest.raises(UnsupportedIndexingError):
        paired_array_from_pairs(ShapedPairs(_shaped_rows(), origin=(1, 1)))


def test_from_pairs_copies_paired_arrays() -> None:
    """A paired array source should yield an independent copy."""
    source = PairedArray(["a", "b"], [1, 2], key_type=str, value_type=int)

    paired = paired_array_from_pairs(source)

    assert paired == source
    assert paired.keys is not source.keys
    assert paired.key_type is str


def test_from_pairs_reads_numpy_object_arrays() -> None:
    """A rank-1 object array of pairs should be read by position."""
    source = np.empty(2, dtype=object)
    source[0] = Pair("a", 1)
    source[1] = Pair("b", 2)

    paired = paired_array_from_pairs(source)

    assert paired == [("a", 1), ("b", 2)]


def test_from_pairs_raises_when_length_is_misreported() -> None:
    """Sized sources must yield exactly their declared length."""
    with pytest.raises(InvalidArgumentError):
        paired_array_from_pairs(MisreportedLength())


def test_every_construction_path_yields_equal_vectors() -> None:
    """Sized, streamed and pushed construction should agree."""
    pushed = PairedArray(key_type=str, value_type=int)
    for pair in {"a": 1, "b": 2, "c": 3}.items():
        pushed.push(pair)

    streamed = paired_array_from_pairs(iter(EXPECTED), key_type=str, value_type=int)
    sized = paired_array_from_pairs(EXPECTED)

    assert pushed == streamed == sized == EXPECTED


def test_empty_paired_array_allocates_shape() -> None:
    """Uninitialized allocation should honor the requested shape."""
    vector = empty_paired_array(str, int, 3)
    matrix = empty_paired_array(str, float, (2, 3))

    assert len(vector) == 3
    assert vector[0] == (None, None)
    assert matrix.shape == (2, 3)
    assert matrix.vals.dtype == np.float64


def test_empty_paired_array_defaults_to_zero_length() -> None:
    """Without a shape the allocation should be an empty vector."""
    paired = empty_paired_array(str, int)

    assert len(paired) == 0
    assert paired.ndim == 1


def test_empty_paired_array_requires_types() -> None:
    """Allocation without element types should fail."""
    with pytest.raises(ConfigurationError, match="key_type"):
        empty_paired_array(None, int, 2)


def test_empty_paired_array_rejects_negative_extent() -> None:
    """Negative extents should be rejected."""
    with pytest.raises(InvalidArgumentError):
        empty_paired_array(str, int, (2, -1))


def test_empty_paired_array_accepts_numpy_integer_extents() -> None:
    """numpy integers should be valid lengths and shape extents."""
    vector = empty_paired_array(str, int, np.int64(3))
    matrix = empty_paired_array(str, int, (np.int64(2), np.int32(2)))

    assert vector.shape == (3,)
    assert matrix.shape == (2, 2)
