"""Seconds + nanoseconds value types and the arithmetic between them.

An Instant is a point on the monotonic clock, a Duration is the signed
interval between two instants. Both carry whole seconds plus a nanosecond
remainder. The functions in this module are pure and never touch the clock.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering
from typing import Any, Union

MSEC_PER_SEC = 1_000
USEC_PER_SEC = 1_000_000
NSEC_PER_SEC = 1_000_000_000


def _trunc_div(value: int, divisor: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(value) // divisor
    return quotient if value >= 0 else -quotient


@dataclass(frozen=True)
class Instant:
    """A point in monotonic time.

    Instants are produced by a clock source and are otherwise opaque: the
    only meaningful thing to do with two of them is subtract one from the
    other.

    Raises:
        ValueError: If nanoseconds is outside [0, 1_000_000_000)
    """

    __slots__ = ("seconds", "nanoseconds")

    seconds: int
    nanoseconds: int

    def __post_init__(self) -> None:
        if not 0 <= self.nanoseconds < NSEC_PER_SEC:
            raise ValueError(
                f"Instant nanoseconds must be in [0, {NSEC_PER_SEC}), got {self.nanoseconds}"
            )

    @classmethod
    def from_nanos(cls, total_ns: int) -> Instant:
        """Build an instant from a nanosecond clock reading.

        Example:
            >>> Instant.from_nanos(1_500_000_000)
            Instant(seconds=1, nanoseconds=500000000)
        """
        seconds, nanoseconds = divmod(total_ns, NSEC_PER_SEC)
        return cls(seconds, nanoseconds)

    def __sub__(self, other: object) -> Duration:
        if not isinstance(other, Instant):
            return NotImplemented
        return subtract(other, self)


@total_ordering
@dataclass(frozen=True)
class Duration:
    """A signed elapsed interval.

    Durations returned by subtract() and add() are normalized: seconds and
    nanoseconds never have opposite signs and abs(nanoseconds) stays below
    one second.
    """

    __slots__ = ("seconds", "nanoseconds")

    seconds: int
    nanoseconds: int

    @classmethod
    def zero(cls) -> Duration:
        """Return the zero-length duration."""
        return cls(0, 0)

    @classmethod
    def from_nanos(cls, total_ns: int) -> Duration:
        """Build a normalized duration from a signed nanosecond count.

        Example:
            >>> Duration.from_nanos(-1_500_000_000)
            Duration(seconds=-1, nanoseconds=-500000000)
        """
        seconds = _trunc_div(total_ns, NSEC_PER_SEC)
        return cls(seconds, total_ns - seconds * NSEC_PER_SEC)

    def __add__(self, other: object) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return add(self, other)

    def __neg__(self) -> Duration:
        return Duration(-self.seconds, -self.nanoseconds)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return to_nanos(self) < to_nanos(other)

    def __bool__(self) -> bool:
        return self.seconds != 0 or self.nanoseconds != 0

    def to_seconds(self) -> float:
        return to_seconds(self)

    def to_millis(self) -> int:
        return to_millis(self)

    def to_micros(self) -> int:
        return to_micros(self)

    def to_nanos(self) -> int:
        return to_nanos(self)

    def to_dict(self) -> dict[str, Any]:
        """Convert duration to dictionary representation."""
        return {
            "seconds": self.seconds,
            "nanoseconds": self.nanoseconds,
            "total_seconds": to_seconds(self),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Duration:
        """Create duration from dictionary representation."""
        return cls(seconds=int(data["seconds"]), nanoseconds=int(data["nanoseconds"]))


Timespec = Union[Instant, Duration]


def _normalize(seconds: int, nanoseconds: int) -> Duration:
    """Carry whole seconds out of the nanosecond field, then make signs agree."""
    if abs(nanoseconds) >= NSEC_PER_SEC:
        carry = _trunc_div(nanoseconds, NSEC_PER_SEC)
        seconds += carry
        nanoseconds -= carry * NSEC_PER_SEC

    if seconds > 0 and nanoseconds < 0:
        nanoseconds += NSEC_PER_SEC
        seconds -= 1
    elif seconds < 0 and nanoseconds > 0:
        nanoseconds -= NSEC_PER_SEC
        seconds += 1

    return Duration(seconds, nanoseconds)


def subtract(t1: Timespec, t2: Timespec) -> Duration:
    """Calculate the time difference ``t2 - t1``.

    The result is positive when t2 is later than t1. A negative nanosecond
    remainder under a positive seconds count (or the reverse) is borrowed
    away so both fields carry the same sign.

    Args:
        t1: Start time
        t2: End time

    Returns:
        Normalized duration from t1 to t2

    Example:
        >>> subtract(Instant(5, 800_000_000), Instant(6, 200_000_000))
        Duration(seconds=0, nanoseconds=400000000)
    """
    return _normalize(t2.seconds - t1.seconds, t2.nanoseconds - t1.nanoseconds)


def add(accumulator: Duration, addend: Duration) -> Duration:
    """Calculate the sum of two durations.

    Durations are immutable, so the accumulated value is returned rather
    than written back into ``accumulator``.

    A nanosecond sum reaching one second carries into the seconds field.
    The carry is applied in both directions: two negative durations whose
    nanoseconds sum to -1s or less borrow from seconds as well, so the
    result is never left in mixed-sign form.

    Args:
        accumulator: Running total
        addend: Duration to add to the total

    Returns:
        Normalized sum

    Example:
        >>> add(Duration(0, 900_000_000), Duration(0, 200_000_000))
        Duration(seconds=1, nanoseconds=100000000)
    """
    return _normalize(
        accumulator.seconds + addend.seconds,
        accumulator.nanoseconds + addend.nanoseconds,
    )


def to_seconds(t: Timespec) -> float:
    """Return the time in seconds as a float."""
    return t.seconds + t.nanoseconds / NSEC_PER_SEC


def to_millis(t: Timespec) -> int:
    """Return the time in whole milliseconds, truncated toward zero.

    Example:
        >>> to_millis(Duration(0, 999_999_999))
        999
    """
    return t.seconds * MSEC_PER_SEC + _trunc_div(t.nanoseconds, USEC_PER_SEC)


def to_micros(t: Timespec) -> int:
    """Return the time in whole microseconds, truncated toward zero."""
    return t.seconds * USEC_PER_SEC + _trunc_div(t.nanoseconds, MSEC_PER_SEC)


def to_nanos(t: Timespec) -> int:
    """Return the time in nanoseconds."""
    return t.seconds * NSEC_PER_SEC + t.nanoseconds
