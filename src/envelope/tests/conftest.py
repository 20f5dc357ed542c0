"""Shared fixtures: isolated settings and an in-memory failure sink."""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest

from envelope.config import clear_settings_cache
from envelope.observability import BoundLogger, MemoryRenderer, reset_logging


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop ENVELOPE_* variables and the cached settings around each test."""
    for key in list(os.environ):
        if key.startswith("ENVELOPE_"):
            monkeypatch.delenv(key)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def fresh_logging() -> Iterator[None]:
    """Undo any configure_logging() a test performed."""
    yield
    reset_logging()


@pytest.fixture
def memory() -> MemoryRenderer:
    return MemoryRenderer()


@pytest.fixture
def log(memory: MemoryRenderer) -> BoundLogger:
    return BoundLogger(context={"logger": "test"}, _renderer=memory)
