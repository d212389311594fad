"""Exceptions raised by stopclock.

All library errors derive from StopclockError, which itself is a
RuntimeError so existing ``except RuntimeError`` handlers keep working.
"""

from __future__ import annotations

from typing import Any


class StopclockError(RuntimeError):
    """Base class for stopclock errors."""


class ClockUnavailable(StopclockError):
    """The monotonic clock source could not be read."""


class StopwatchNotReady(StopclockError):
    """A stopwatch operation was invoked out of order.

    Raised when measuring a stopwatch that has not been started and stopped,
    or when reading an instant that has not been recorded yet.
    """

    def __init__(self, message: str, state: Any = None) -> None:
        super().__init__(message)
        self.state = state
