"""Monotonic clock sources.

A clock source exposes a single operation, ``now()``, returning the current
Instant. Readings never decrease within a process and are not affected by
system clock adjustments, which makes them suitable for measuring durations
but meaningless as calendar time.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod

from stopclock.core.timespec import Duration, Instant, to_nanos
from stopclock.errors import ClockUnavailable


def monotonic_ns() -> int:
    """Get monotonic time in nanoseconds.

    Returns:
        Monotonic time in nanoseconds

    Raises:
        ClockUnavailable: If the platform clock cannot be read
    """
    try:
        return time.monotonic_ns()
    except OSError as e:
        raise ClockUnavailable(f"Failed to read monotonic clock: {e}") from e


class BaseClock(ABC):
    """Abstract base class for clock sources."""

    @abstractmethod
    def now(self) -> Instant:
        """Read the current instant.

        Returns:
            Current monotonic instant

        Raises:
            ClockUnavailable: If the clock cannot be read
        """
        pass


class MonotonicClock(BaseClock):
    """Clock backed by the operating system's monotonic clock.

    Example:
        >>> clock = MonotonicClock()
        >>> t1 = clock.now()
        >>> t2 = clock.now()
        >>> (t2 - t1).to_nanos() >= 0
        True
    """

    def now(self) -> Instant:
        return Instant.from_nanos(monotonic_ns())

    def __repr__(self) -> str:
        return "MonotonicClock()"


class ManualClock(BaseClock):
    """Clock that only moves when told to.

    Useful for tests and simulations where elapsed time must be exact.
    The clock refuses to move backwards so it keeps the monotonic guarantee.

    Example:
        >>> clock = ManualClock(Instant(10, 0))
        >>> clock.advance(Duration(1, 0))
        >>> clock.now()
        Instant(seconds=11, nanoseconds=0)
    """

    def __init__(self, start: Instant | None = None) -> None:
        self._now = start if start is not None else Instant(0, 0)

    def now(self) -> Instant:
        return self._now

    def set(self, instant: Instant) -> None:
        """Move the clock to an absolute instant.

        Raises:
            ValueError: If the instant is earlier than the current reading
        """
        if to_nanos(instant) < to_nanos(self._now):
            raise ValueError(f"ManualClock cannot move backwards from {self._now} to {instant}")
        self._now = instant

    def advance(self, delta: Duration) -> None:
        """Move the clock forward by a duration.

        Raises:
            ValueError: If the duration is negative
        """
        if to_nanos(delta) < 0:
            raise ValueError(f"ManualClock cannot advance by a negative duration: {delta}")
        self._now = Instant.from_nanos(to_nanos(self._now) + to_nanos(delta))

    def __repr__(self) -> str:
        return f"ManualClock({self._now!r})"
