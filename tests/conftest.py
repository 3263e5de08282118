"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def _clear_paired_arrays_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test against default configuration values."""
    monkeypatch.delenv("PAIRED_ARRAYS_ATOMIC_WRITES", raising=False)
    monkeypatch.delenv("PAIRED_ARRAYS_MAX_COERCION_DEPTH", raising=False)
