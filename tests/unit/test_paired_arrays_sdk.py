"""Unit tests for the public SDK surface."""

from __future__ import annotations

import paired_arrays


def test_sdk_exports_resolve() -> None:
    """Every advertised name should be importable from the SDK module."""
    missing = [name for name in paired_arrays.__all__ if not hasattr(paired_arrays, name)]

    assert missing == []


def test_sdk_round_trip_through_projections() -> None:
    """SDK builders and projections should work together."""
    paired = paired_arrays.paired_array_of(("a", 1), ("b", 2))

    assert paired_arrays.map_pairs(paired_arrays.first, paired) is paired.keys
    assert paired == {"a": 1, "b": 2}
