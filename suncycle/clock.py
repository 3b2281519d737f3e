"""
Clock adapters feeding the sun controller.

The controller never reads global time. It asks a clock for the real time
elapsed this tick, the simulation speed multiplier, and the simulated hour.
"""

import time
from abc import ABC, abstractmethod

from suncycle.logger import get_logger

logger = get_logger("clock")

SECONDS_PER_DAY = 24 * 3600


class ClockAdapter(ABC):
    """Time source consumed once per tick."""

    @abstractmethod
    def delta_time_this_tick(self) -> float:
        """Real seconds elapsed since the previous tick."""

    @abstractmethod
    def speed_multiplier(self) -> float:
        """Simulated seconds per real second."""

    @abstractmethod
    def current_hour_of_day(self) -> int:
        """Simulated hour of day (0-23)."""


class SimulatedClock(ClockAdapter):
    """
    Simulated day clock driven by time.perf_counter.

    Each call to delta_time_this_tick() measures real time since the previous
    call and advances simulated time by delta * speed.
    """

    def __init__(self, speed: float = 60.0, start_hour: int = 6):
        if not 0 <= start_hour <= 23:
            raise ValueError(f"start_hour must be 0-23, got {start_hour}")

        self._speed = speed
        self._simulated_seconds = float(start_hour * 3600)
        self._last_tick = time.perf_counter()
        logger.info(f"Simulated clock started at {start_hour:02d}:00, speed={speed}x")

    def delta_time_this_tick(self) -> float:
        now = time.perf_counter()
        delta = max(0.0, now - self._last_tick)
        self._last_tick = now
        self._simulated_seconds = (self._simulated_seconds + delta * self._speed) % SECONDS_PER_DAY
        return delta

    def speed_multiplier(self) -> float:
        return self._speed

    def current_hour_of_day(self) -> int:
        return int(self._simulated_seconds // 3600) % 24

    @property
    def simulated_seconds(self) -> float:
        """Seconds since simulated midnight."""
        return self._simulated_seconds
