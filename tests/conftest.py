"""Shared fixtures for stopclock tests."""

from __future__ import annotations

import pytest

from stopclock.core.config import reset_config
from stopclock.core.clock import ManualClock
from stopclock.core.timespec import Instant


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Start every test with no global configuration and no STOPCLOCK_* env."""
    monkeypatch.delenv("STOPCLOCK_MEASURE_ON_STOP", raising=False)
    monkeypatch.delenv("STOPCLOCK_DEBUG", raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def clock():
    """Manual clock starting at 10s."""
    return ManualClock(Instant(10, 0))
