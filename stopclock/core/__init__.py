"""Core timing primitives for stopclock."""

from stopclock.core.clock import BaseClock, ManualClock, MonotonicClock, monotonic_ns
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

__all__ = [
    "Instant",
    "Duration",
    "subtract",
    "add",
    "to_seconds",
    "to_millis",
    "to_micros",
    "to_nanos",
    "BaseClock",
    "MonotonicClock",
    "ManualClock",
    "monotonic_ns",
    "MeasureOnStop",
    "StopclockConfig",
    "configure",
    "get_config",
    "reset_config",
    "Stopwatch",
    "StopwatchState",
    "start",
    "stop",
    "reset",
    "measure",
    "lap",
]
