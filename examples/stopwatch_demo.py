"""
Demonstration of the stopwatch API.

This example times a sleep with start/stop/measure, accumulates several
intervals with reset/lap, and shows measure-on-stop.

Run with:
    python examples/stopwatch_demo.py
"""

import time

import stopclock


# ============================================================================
# Example 1: Measure a Single Interval
# ============================================================================


def example_1_measure():
    """Start, stop, measure, then print in every unit."""
    print("\n" + "=" * 70)
    print("Example 1: Measure a Single Interval")
    print("=" * 70)

    sw = stopclock.Stopwatch()
    stopclock.start(sw)
    time.sleep(1)
    stopclock.stop(sw)
    stopclock.measure(sw)  # unnecessary with measure_on_stop="enabled"

    print(f"Elapsed time: {stopclock.to_seconds(sw.elapsed):f} s")
    print(f"Elapsed time: {stopclock.to_millis(sw.elapsed)} ms")
    print(f"Elapsed time: {stopclock.to_micros(sw.elapsed)} us")
    print(f"Elapsed time: {stopclock.to_nanos(sw.elapsed)} ns")


# ============================================================================
# Example 2: Accumulate Laps
# ============================================================================


def example_2_laps():
    """Sum several intervals into one total."""
    print("\n" + "=" * 70)
    print("Example 2: Accumulate Laps")
    print("=" * 70)

    sw = stopclock.Stopwatch(name="laps")
    sw.reset()
    for delay in (0.1, 0.2, 0.3):
        sw.start()
        time.sleep(delay)
        sw.stop()
        sw.lap()
        print(f"Lap: {(sw.ended_at - sw.started_at).to_millis()} ms")

    print(f"Total: {sw.elapsed.to_millis()} ms")

    # The context manager form does the same thing
    sw.reset()
    for delay in (0.1, 0.2, 0.3):
        with sw:
            time.sleep(delay)
    print(f"Total (with blocks): {sw.elapsed.to_millis()} ms")


# ============================================================================
# Example 3: Measure on Stop
# ============================================================================


def example_3_measure_on_stop():
    """Let stop() measure automatically."""
    print("\n" + "=" * 70)
    print("Example 3: Measure on Stop")
    print("=" * 70)

    sw = stopclock.Stopwatch(measure_on_stop="enabled")
    sw.start()
    time.sleep(0.25)
    sw.stop()
    print(f"Elapsed time: {sw.elapsed.to_seconds():f} s")


if __name__ == "__main__":
    example_1_measure()
    example_2_laps()
    example_3_measure_on_stop()
