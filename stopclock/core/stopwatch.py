"""Stopwatch built on a monotonic clock source."""

from __future__ import annotations

import logging
from enum import Enum
from types import TracebackType
from typing import Any, Union

from stopclock.core.clock import BaseClock
from stopclock.core.config import MeasureOnStop, get_config
from stopclock.core.timespec import Duration, Instant, add, subtract
from stopclock.errors import StopwatchNotReady

logger = logging.getLogger(__name__)


class StopwatchState(Enum):
    """Lifecycle state of a stopwatch."""

    UNINITIALIZED = "uninitialized"
    STARTED = "started"
    STOPPED = "stopped"
    MEASURED = "measured"


class Stopwatch:
    """A start instant, a stop instant and the elapsed time between them.

    ``elapsed`` is zero when the stopwatch is created, so lap() can be used
    straight away. The start and stop instants are unset until start() and
    stop() record them; reading them earlier raises StopwatchNotReady, as
    does measuring a stopwatch that has not been started and stopped.

    A stopwatch has no internal locking. Share one between threads only
    with external synchronization.

    Example:
        ```python
        from stopclock import Stopwatch

        sw = Stopwatch()
        sw.start()
        do_work()
        sw.stop()
        sw.measure()
        print(f"Elapsed time: {sw.elapsed.to_seconds():f} s")

        # Accumulate over several intervals
        sw.reset()
        for item in items:
            with sw:
                process(item)
        print(f"Total: {sw.elapsed.to_millis()} ms")
        ```
    """

    __slots__ = (
        "name",
        "measure_on_stop",
        "clock",
        "elapsed",
        "_started_at",
        "_ended_at",
        "_state",
    )

    def __init__(
        self,
        name: str = "",
        measure_on_stop: Union[MeasureOnStop, bool, str, None] = None,
        clock: BaseClock | None = None,
    ) -> None:
        """Initialize a new stopwatch.

        Args:
            name: Label used in log messages and errors
            measure_on_stop: Whether stop() also calls measure()
                (default: the global configuration, "disabled" unless changed)
            clock: Clock source (default: the global configuration's clock)

        Raises:
            ValueError: If measure_on_stop is not a recognized value
        """
        if measure_on_stop is None or clock is None:
            config = get_config()
            if measure_on_stop is None:
                measure_on_stop = config.measure_on_stop
            if clock is None:
                clock = config.clock
        self.name = name
        self.measure_on_stop = MeasureOnStop.parse(measure_on_stop)
        self.clock = clock
        self.elapsed = Duration.zero()
        self._started_at: Instant | None = None
        self._ended_at: Instant | None = None
        self._state = StopwatchState.UNINITIALIZED

    @property
    def state(self) -> StopwatchState:
        return self._state

    @property
    def started_at(self) -> Instant:
        """Instant recorded by the last start().

        Raises:
            StopwatchNotReady: If start() has never been called
        """
        if self._started_at is None:
            raise StopwatchNotReady(
                f"Stopwatch '{self.name}' has not been started", self._state
            )
        return self._started_at

    @property
    def ended_at(self) -> Instant:
        """Instant recorded by the last stop().

        Raises:
            StopwatchNotReady: If stop() has never been called
        """
        if self._ended_at is None:
            raise StopwatchNotReady(
                f"Stopwatch '{self.name}' has not been stopped", self._state
            )
        return self._ended_at

    def _check_stopped(self, operation: str) -> None:
        """Raise error unless the stopwatch holds a completed start/stop pair."""
        if self._state not in (StopwatchState.STOPPED, StopwatchState.MEASURED):
            raise StopwatchNotReady(
                f"Cannot {operation} stopwatch '{self.name}' in state "
                f"'{self._state.value}': call start() and stop() first",
                self._state,
            )

    def start(self) -> None:
        """Start the stopwatch. Calling it again restarts timing.

        Raises:
            ClockUnavailable: If the clock cannot be read
        """
        self._started_at = self.clock.now()
        self._state = StopwatchState.STARTED
        logger.debug(f"Stopwatch '{self.name}' started at {self._started_at}")

    def stop(self) -> None:
        """Stop the stopwatch.

        With measure-on-stop enabled this also measures the elapsed time.

        Raises:
            StopwatchNotReady: If the stopwatch has never been started
            ClockUnavailable: If the clock cannot be read
        """
        if self._state is StopwatchState.UNINITIALIZED:
            raise StopwatchNotReady(
                f"Cannot stop stopwatch '{self.name}': it has not been started",
                self._state,
            )
        self._ended_at = self.clock.now()
        self._state = StopwatchState.STOPPED
        logger.debug(f"Stopwatch '{self.name}' stopped at {self._ended_at}")

        if self.measure_on_stop is MeasureOnStop.ENABLED:
            self.measure()

    def measure(self) -> None:
        """Store the time between start and stop in ``elapsed``.

        Safe to call repeatedly on a stopped stopwatch; the result only
        changes when start() or stop() are called again.

        Raises:
            StopwatchNotReady: If the stopwatch is not stopped
        """
        self._check_stopped("measure")
        self.elapsed = subtract(self._started_at, self._ended_at)  # type: ignore[arg-type]
        self._state = StopwatchState.MEASURED
        logger.debug(f"Stopwatch '{self.name}' measured {self.elapsed}")

    def lap(self) -> None:
        """Add the time between start and stop to ``elapsed``.

        Call reset() first to start a fresh total.

        Raises:
            StopwatchNotReady: If the stopwatch is not stopped
        """
        self._check_stopped("lap")
        interval = subtract(self._started_at, self._ended_at)  # type: ignore[arg-type]
        self.elapsed = add(self.elapsed, interval)
        self._state = StopwatchState.MEASURED
        logger.debug(f"Stopwatch '{self.name}' lap {interval}, total {self.elapsed}")

    def reset(self) -> None:
        """Zero the elapsed time. Start and stop instants are kept."""
        self.elapsed = Duration.zero()

    def __enter__(self) -> Stopwatch:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        # Measure-on-stop overwrites elapsed, so there is nothing left to add
        self.stop()
        if self.measure_on_stop is MeasureOnStop.DISABLED:
            self.lap()

    def to_dict(self) -> dict[str, Any]:
        """Convert stopwatch to dictionary representation.

        Returns:
            Dictionary containing the stopwatch state
        """

        def instant_dict(instant: Instant | None) -> dict[str, int] | None:
            if instant is None:
                return None
            return {"seconds": instant.seconds, "nanoseconds": instant.nanoseconds}

        return {
            "name": self.name,
            "state": self._state.value,
            "measure_on_stop": self.measure_on_stop.value,
            "started_at": instant_dict(self._started_at),
            "ended_at": instant_dict(self._ended_at),
            "elapsed": self.elapsed.to_dict(),
        }

    def __repr__(self) -> str:
        return (
            f"Stopwatch(name={self.name!r}, state={self._state.value!r}, "
            f"elapsed={self.elapsed!r})"
        )


def start(sw: Stopwatch) -> None:
    """Start a stopwatch."""
    sw.start()


def stop(sw: Stopwatch) -> None:
    """Stop a stopwatch."""
    sw.stop()


def reset(sw: Stopwatch) -> None:
    """Zero a stopwatch's elapsed time."""
    sw.reset()


def measure(sw: Stopwatch) -> None:
    """Store a stopwatch's start-to-stop time in its elapsed field."""
    sw.measure()


def lap(sw: Stopwatch) -> None:
    """Add a stopwatch's start-to-stop time to its elapsed field."""
    sw.lap()
