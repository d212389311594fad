"""Tests for the stopwatch state machine."""

from __future__ import annotations

import logging
import time
from unittest.mock import Mock

import pytest

from stopclock.core.clock import BaseClock, ManualClock, MonotonicClock
from stopclock.core.config import MeasureOnStop, configure
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
    to_micros,
    to_millis,
    to_nanos,
    to_seconds,
)
from stopclock.errors import ClockUnavailable, StopwatchNotReady

HALF_SECOND = Duration(0, 500_000_000)


class TestStopwatchCreation:
    """Tests for creating stopwatches."""

    def test_defaults(self) -> None:
        """Test a stopwatch created with default values."""
        sw = Stopwatch()

        assert sw.name == ""
        assert sw.state == StopwatchState.UNINITIALIZED
        assert sw.measure_on_stop == MeasureOnStop.DISABLED
        assert isinstance(sw.clock, MonotonicClock)
        assert sw.elapsed == Duration(0, 0)

    def test_unset_instants_raise(self) -> None:
        """Test that reading unrecorded instants fails fast."""
        sw = Stopwatch(name="fresh")

        with pytest.raises(StopwatchNotReady, match="not been started") as exc_info:
            _ = sw.started_at
        assert exc_info.value.state == StopwatchState.UNINITIALIZED

        with pytest.raises(StopwatchNotReady, match="not been stopped"):
            _ = sw.ended_at

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("enabled", MeasureOnStop.ENABLED),
            ("disabled", MeasureOnStop.DISABLED),
            (True, MeasureOnStop.ENABLED),
            (False, MeasureOnStop.DISABLED),
            (MeasureOnStop.ENABLED, MeasureOnStop.ENABLED),
        ],
    )
    def test_measure_on_stop_values(self, value, expected) -> None:
        """Test the accepted measure_on_stop values."""
        assert Stopwatch(measure_on_stop=value).measure_on_stop == expected

    def test_invalid_measure_on_stop(self) -> None:
        """Test that an unknown measure_on_stop value is rejected."""
        with pytest.raises(ValueError, match="Invalid measure_on_stop"):
            Stopwatch(measure_on_stop="sometimes")

    def test_explicit_arguments_ignore_invalid_env(self, monkeypatch) -> None:
        """Test that explicit arguments skip the environment entirely."""
        monkeypatch.setenv("STOPCLOCK_MEASURE_ON_STOP", "sometimes")
        clock = ManualClock()
        sw = Stopwatch(measure_on_stop="disabled", clock=clock)

        assert sw.measure_on_stop == MeasureOnStop.DISABLED
        assert sw.clock is clock

    def test_uses_global_config(self, clock: ManualClock) -> None:
        """Test that defaults come from the global configuration."""
        configure(measure_on_stop="enabled", clock=clock)
        sw = Stopwatch()

        assert sw.measure_on_stop == MeasureOnStop.ENABLED
        assert sw.clock is clock

    def test_config_fixed_at_construction(self, clock: ManualClock) -> None:
        """Test that later configuration changes do not affect a stopwatch."""
        sw = Stopwatch(clock=clock)
        configure(measure_on_stop="enabled")

        assert sw.measure_on_stop == MeasureOnStop.DISABLED


class TestStartStop:
    """Tests for start() and stop()."""

    def test_start_records_instant(self, clock: ManualClock) -> None:
        """Test that start() reads the clock."""
        sw = Stopwatch(clock=clock)
        sw.start()

        assert sw.started_at == Instant(10, 0)
        assert sw.state == StopwatchState.STARTED

    def test_stop_records_instant(self, clock: ManualClock) -> None:
        """Test that stop() reads the clock."""
        sw = Stopwatch(clock=clock)
        sw.start()
        clock.advance(Duration(1, 0))
        sw.stop()

        assert sw.ended_at == Instant(11, 0)
        assert sw.state == StopwatchState.STOPPED
        # measure-on-stop is disabled, so elapsed is untouched
        assert sw.elapsed == Duration(0, 0)

    def test_stop_before_start_raises(self, clock: ManualClock) -> None:
        """Test that stopping an unstarted stopwatch fails fast."""
        sw = Stopwatch(clock=clock)
        with pytest.raises(StopwatchNotReady, match="has not been started"):
            sw.stop()
        assert sw.state == StopwatchState.UNINITIALIZED

    def test_restart_overwrites_start(self, clock: ManualClock) -> None:
        """Test that calling start() again restarts timing."""
        sw = Stopwatch(clock=clock)
        sw.start()
        clock.advance(Duration(5, 0))
        sw.start()
        clock.advance(Duration(1, 0))
        sw.stop()
        sw.measure()

        assert sw.elapsed == Duration(1, 0)

    def test_measure_on_stop(self, clock: ManualClock) -> None:
        """Test that stop() measures when measure-on-stop is enabled."""
        sw = Stopwatch(measure_on_stop="enabled", clock=clock)
        sw.start()
        clock.advance(Duration(2, 250_000_000))
        sw.stop()

        assert sw.elapsed == Duration(2, 250_000_000)
        assert sw.state == StopwatchState.MEASURED

    def test_clock_failure_propagates(self) -> None:
        """Test that a clock failure surfaces as ClockUnavailable."""
        failing = Mock(spec=BaseClock)
        failing.now.side_effect = ClockUnavailable("clock gone")
        sw = Stopwatch(clock=failing)

        with pytest.raises(ClockUnavailable, match="clock gone"):
            sw.start()
        assert sw.state == StopwatchState.UNINITIALIZED


class TestMeasure:
    """Tests for measure()."""

    def test_end_to_end(self, clock: ManualClock) -> None:
        """Test start at 10s, stop at 11s, measure one second."""
        sw = Stopwatch(clock=clock)
        sw.start()
        clock.set(Instant(11, 0))
        sw.stop()
        sw.measure()

        assert sw.elapsed == Duration(1, 0)
        assert to_seconds(sw.elapsed) == 1.0
        assert to_millis(sw.elapsed) == 1000
        assert to_micros(sw.elapsed) == 1_000_000
        assert to_nanos(sw.elapsed) == 1_000_000_000

    def test_measure_is_idempotent(self, clock: ManualClock) -> None:
        """Test that measuring twice gives the same value."""
        sw = Stopwatch(clock=clock)
        sw.start()
        clock.advance(Duration(0, 750_000_000))
        sw.stop()
        sw.measure()
        first = sw.elapsed
        sw.measure()

        assert sw.elapsed == first == Duration(0, 750_000_000)

    def test_measure_overwrites(self, clock: ManualClock) -> None:
        """Test that measure() replaces accumulated laps."""
        sw = Stopwatch(clock=clock)
        for _ in range(2):
            sw.start()
            clock.advance(HALF_SECOND)
            sw.stop()
            sw.lap()
        sw.measure()

        assert sw.elapsed == HALF_SECOND

    def test_measure_before_start_raises(self) -> None:
        """Test that measuring an unstarted stopwatch fails fast."""
        sw = Stopwatch(name="early")
        with pytest.raises(StopwatchNotReady, match="Cannot measure stopwatch 'early'"):
            sw.measure()

    def test_measure_while_running_raises(self, clock: ManualClock) -> None:
        """Test that measuring a running stopwatch fails fast."""
        sw = Stopwatch(clock=clock)
        sw.start()
        with pytest.raises(StopwatchNotReady) as exc_info:
            sw.measure()
        assert exc_info.value.state == StopwatchState.STARTED

    def test_measure_after_restart_raises(self, clock: ManualClock) -> None:
        """Test that a restarted stopwatch must be stopped again."""
        sw = Stopwatch(clock=clock)
        sw.start()
        sw.stop()
        sw.start()
        with pytest.raises(StopwatchNotReady):
            sw.measure()


class TestLap:
    """Tests for lap() and reset()."""

    def test_three_laps(self, clock: ManualClock) -> None:
        """Test accumulating three half-second laps."""
        sw = Stopwatch(clock=clock)
        sw.reset()
        for _ in range(3):
            sw.start()
            clock.advance(HALF_SECOND)
            sw.stop()
            sw.lap()
            clock.advance(Duration(7, 0))  # time between laps is not counted

        assert sw.elapsed == Duration(1, 500_000_000)
        assert sw.state == StopwatchState.MEASURED

    def test_single_lap_equals_measure(self, clock: ManualClock) -> None:
        """Test that reset + one lap equals measure for the same interval."""
        sw = Stopwatch(clock=clock)
        sw.start()
        clock.advance(Duration(3, 141_592_653))
        sw.stop()

        sw.reset()
        sw.lap()
        lapped = sw.elapsed
        sw.measure()

        assert lapped == sw.elapsed

    def test_lap_before_stop_raises(self, clock: ManualClock) -> None:
        """Test that lap() on a running stopwatch fails fast."""
        sw = Stopwatch(clock=clock)
        sw.start()
        with pytest.raises(StopwatchNotReady, match="Cannot lap"):
            sw.lap()

    def test_reset_keeps_instants(self, clock: ManualClock) -> None:
        """Test that reset() only zeroes elapsed."""
        sw = Stopwatch(clock=clock)
        sw.start()
        clock.advance(Duration(1, 0))
        sw.stop()
        sw.measure()
        sw.reset()

        assert sw.elapsed == Duration(0, 0)
        assert sw.started_at == Instant(10, 0)
        assert sw.ended_at == Instant(11, 0)
        assert sw.state == StopwatchState.MEASURED

    def test_lap_without_reset_on_new_stopwatch(self, clock: ManualClock) -> None:
        """Test that a new stopwatch starts from zero elapsed."""
        sw = Stopwatch(clock=clock)
        sw.start()
        clock.advance(HALF_SECOND)
        sw.stop()
        sw.lap()

        assert sw.elapsed == HALF_SECOND


class TestContextManager:
    """Tests for using a stopwatch as a context manager."""

    def test_with_block_measures(self, clock: ManualClock) -> None:
        """Test that a with block starts, stops and records elapsed time."""
        sw = Stopwatch(clock=clock)
        with sw as entered:
            assert entered is sw
            assert sw.state == StopwatchState.STARTED
            clock.advance(Duration(1, 0))

        assert sw.elapsed == Duration(1, 0)
        assert sw.state == StopwatchState.MEASURED

    def test_with_blocks_accumulate(self, clock: ManualClock) -> None:
        """Test that repeated with blocks accumulate laps."""
        sw = Stopwatch(clock=clock)
        for _ in range(3):
            with sw:
                clock.advance(HALF_SECOND)

        assert sw.elapsed == Duration(1, 500_000_000)

    def test_with_block_measure_on_stop_overwrites(self, clock: ManualClock) -> None:
        """Test that measure-on-stop makes each with block overwrite elapsed."""
        sw = Stopwatch(measure_on_stop="enabled", clock=clock)
        for _ in range(3):
            with sw:
                clock.advance(HALF_SECOND)

        assert sw.elapsed == HALF_SECOND

    def test_exception_propagates_and_time_recorded(self, clock: ManualClock) -> None:
        """Test that errors inside the block are not swallowed."""
        sw = Stopwatch(clock=clock)
        with pytest.raises(KeyError):
            with sw:
                clock.advance(Duration(0, 1_000))
                raise KeyError("boom")

        assert sw.elapsed == Duration(0, 1_000)

    def test_real_clock(self) -> None:
        """Test measuring a real sleep with the monotonic clock."""
        with Stopwatch() as sw:
            time.sleep(0.01)

        assert to_millis(sw.elapsed) >= 10
        assert to_seconds(sw.elapsed) < 1.0


class TestFunctionalApi:
    """Tests for the module-level functions."""

    def test_free_functions(self, clock: ManualClock) -> None:
        """Test start/stop/measure/reset/lap as free functions."""
        sw = Stopwatch(clock=clock)
        start(sw)
        clock.advance(Duration(1, 0))
        stop(sw)
        measure(sw)
        assert sw.elapsed == Duration(1, 0)

        reset(sw)
        assert sw.elapsed == Duration(0, 0)

        lap(sw)
        lap(sw)
        assert sw.elapsed == Duration(2, 0)


class TestSerialization:
    """Tests for to_dict() and repr."""

    def test_to_dict_fresh(self) -> None:
        """Test the dictionary form of a new stopwatch."""
        data = Stopwatch(name="fresh").to_dict()

        assert data["name"] == "fresh"
        assert data["state"] == "uninitialized"
        assert data["measure_on_stop"] == "disabled"
        assert data["started_at"] is None
        assert data["ended_at"] is None
        assert data["elapsed"]["seconds"] == 0

    def test_to_dict_measured(self, clock: ManualClock) -> None:
        """Test the dictionary form after measuring."""
        sw = Stopwatch(name="job", clock=clock)
        sw.start()
        clock.advance(Duration(1, 5))
        sw.stop()
        sw.measure()
        data = sw.to_dict()

        assert data["state"] == "measured"
        assert data["started_at"] == {"seconds": 10, "nanoseconds": 0}
        assert data["ended_at"] == {"seconds": 11, "nanoseconds": 5}
        assert data["elapsed"]["nanoseconds"] == 5

    def test_repr(self) -> None:
        """Test the repr includes name and state."""
        text = repr(Stopwatch(name="job"))
        assert "job" in text
        assert "uninitialized" in text


class TestLogging:
    """Tests for debug logging."""

    def test_debug_messages(self, clock: ManualClock, caplog) -> None:
        """Test that operations log at debug level."""
        sw = Stopwatch(name="logged", clock=clock)
        with caplog.at_level(logging.DEBUG, logger="stopclock"):
            sw.start()
            sw.stop()
            sw.measure()

        messages = [r.getMessage() for r in caplog.records]
        assert any("'logged' started" in m for m in messages)
        assert any("'logged' measured" in m for m in messages)
