"""Process-wide defaults for new stopwatches.

Stopwatches read these defaults once, at construction. Changing the
configuration afterwards does not affect stopwatches that already exist.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from stopclock.core.clock import BaseClock, MonotonicClock

_TRUTHY = ("enabled", "true", "1", "yes", "on")
_FALSY = ("disabled", "false", "0", "no", "off")


class MeasureOnStop(Enum):
    """Whether stop() also measures the elapsed time."""

    ENABLED = "enabled"
    DISABLED = "disabled"

    @classmethod
    def parse(cls, value: Union[MeasureOnStop, bool, str]) -> MeasureOnStop:
        """Coerce an enum member, bool or string into a MeasureOnStop.

        Raises:
            ValueError: If a string value is not recognized
        """
        if isinstance(value, MeasureOnStop):
            return value
        if isinstance(value, bool):
            return cls.ENABLED if value else cls.DISABLED
        normalized = str(value).strip().lower()
        if normalized in _TRUTHY:
            return cls.ENABLED
        if normalized in _FALSY:
            return cls.DISABLED
        raise ValueError(
            f"Invalid measure_on_stop: {value!r}. Must be 'enabled' or 'disabled'"
        )


@dataclass
class StopclockConfig:
    """Defaults applied to stopwatches created without explicit arguments."""

    measure_on_stop: MeasureOnStop = MeasureOnStop.DISABLED
    clock: BaseClock = field(default_factory=MonotonicClock)
    debug: bool = False


# Global configuration instance
_global_config: StopclockConfig | None = None


def configure(
    measure_on_stop: Union[MeasureOnStop, bool, str, None] = None,
    clock: BaseClock | None = None,
    debug: bool | None = None,
) -> StopclockConfig:
    """
    Set the defaults used by stopwatches created from now on.

    Args:
        measure_on_stop: Default measure-on-stop mode
            (default: $STOPCLOCK_MEASURE_ON_STOP or "disabled")
        clock: Default clock source (default: MonotonicClock)
        debug: Enable debug logging (default: $STOPCLOCK_DEBUG or False)

    Returns:
        The new global configuration

    Raises:
        ValueError: If measure_on_stop is not a recognized value

    Environment Variables:
        STOPCLOCK_MEASURE_ON_STOP: "enabled" or "disabled"
        STOPCLOCK_DEBUG: Enable debug logging ("true" or "false")

    Example:
        ```python
        import stopclock

        stopclock.configure(measure_on_stop="enabled")

        sw = stopclock.Stopwatch()
        sw.start()
        do_work()
        sw.stop()  # elapsed is already measured
        print(sw.elapsed.to_seconds())
        ```
    """
    # Read from environment variables with fallbacks
    if measure_on_stop is None:
        measure_on_stop = os.getenv("STOPCLOCK_MEASURE_ON_STOP", "disabled")
    mode = MeasureOnStop.parse(measure_on_stop)
    if debug is None:
        debug = os.getenv("STOPCLOCK_DEBUG", "false").lower() in ("true", "1", "yes")

    # Configure debug logging if requested
    if debug:
        logging.basicConfig(
            level=logging.DEBUG, format="%(asctime)s - %(name)s - %(message)s"
        )
        logging.getLogger("stopclock").setLevel(logging.DEBUG)

    config = StopclockConfig(
        measure_on_stop=mode,
        clock=clock if clock is not None else MonotonicClock(),
        debug=debug,
    )

    global _global_config
    _global_config = config
    return config


def get_config() -> StopclockConfig:
    """
    Get the global configuration.

    If configure() has not been called, it is called with no arguments on
    first use, so the STOPCLOCK_* environment variables apply, including
    debug logging.
    """
    if _global_config is None:
        return configure()
    return _global_config


def reset_config() -> None:
    """Discard the global configuration so the next read starts fresh."""
    global _global_config
    _global_config = None
