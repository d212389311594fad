"""stopclock - monotonic stopwatch and seconds/nanoseconds arithmetic."""

from __future__ import annotations

from stopclock._version import __version__
from stopclock.core.clock import BaseClock, ManualClock, MonotonicClock
from stopclock.core.config import (
    MeasureOnStop,
    StopclockConfig,
    configure,
    get_config,
    reset_config,
)
from stopclock.core.stopwatch import (
    Stopwatch,
    StopwatchState,
    lap,
    measure,
    reset,
    start,
    stop,
)
from stopclock.core.timespec import (
    Duration,
    Instant,
    add,
    subtract,
    to_micros,
    to_millis,
    to_nanos,
    to_seconds,
)
from stopclock.errors import ClockUnavailable, StopclockError, StopwatchNotReady

__all__ = [
    # Version
    "__version__",
    # Configuration
    "configure",
    "get_config",
    "reset_config",
    "StopclockConfig",
    "MeasureOnStop",
    # Stopwatch
    "Stopwatch",
    "StopwatchState",
    "start",
    "stop",
    "reset",
    "measure",
    "lap",
    # Timespec arithmetic
    "Instant",
    "Duration",
    "subtract",
    "add",
    "to_seconds",
    "to_millis",
    "to_micros",
    "to_nanos",
    # Clock sources
    "BaseClock",
    "MonotonicClock",
    "ManualClock",
    # Errors
    "StopclockError",
    "ClockUnavailable",
    "StopwatchNotReady",
]
