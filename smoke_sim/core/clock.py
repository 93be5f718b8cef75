"""
Simulation clock.

The clock owns elapsed simulated time, the running flag and the speed
multiplier. A fixed-period timer outside the core calls ``tick``; the period
never changes with speed, the multiplier only scales per-tick physics and the
reported time increment.
"""

import logging
from typing import Callable

logger = logging.getLogger(__name__)

SPEED_STEPS = (1, 2, 4)


def snap_speed(value: float) -> int:
    """Return the allowed speed multiplier closest to ``value``."""
    return min(SPEED_STEPS, key=lambda step: (abs(step - value), step))


class SimulationClock:
    """Sequences one update per tick while running."""

    def __init__(self, tick_interval_ms: int = 50):
        self.tick_interval_ms = tick_interval_ms
        self.elapsed = 0
        self.running = False
        self.speed = 1
        self.tick_count = 0
        self._in_tick = False

    def start(self):
        if not self.running:
            logger.info("Simulation started")
        self.running = True

    def stop(self):
        if self.running:
            logger.info(f"Simulation paused at t={self.elapsed}")
        self.running = False

    def reset(self):
        """Stop and return to time zero at speed 1."""
        self.running = False
        self.elapsed = 0
        self.speed = 1
        self.tick_count = 0

    def set_speed(self, value: float) -> int:
        speed = snap_speed(value)
        if speed != value:
            logger.warning(f"Speed multiplier {value} not supported, using {speed}")
        self.speed = speed
        return speed

    def cycle_speed(self) -> int:
        """Step through 1x, 2x, 4x and back to 1x."""
        index = SPEED_STEPS.index(self.speed)
        self.speed = SPEED_STEPS[(index + 1) % len(SPEED_STEPS)]
        return self.speed

    def tick(self, pipeline: Callable[[int, int], None]) -> bool:
        """
        Run one tick.

        Args:
            pipeline: Called as ``pipeline(elapsed, speed)`` after time advances

        Returns:
            True if the tick ran, False if paused or a tick is already running
        """
        if not self.running:
            return False
        if self._in_tick:
            logger.debug("Tick requested while previous tick still running; skipped")
            return False

        self._in_tick = True
        try:
            self.elapsed += self.speed
            self.tick_count += 1
            pipeline(self.elapsed, self.speed)
        finally:
            self._in_tick = False
        return True

    def run(self, num_ticks: int, pipeline: Callable[[int, int], None]) -> int:
        """
        Drive several ticks back to back without a timer.

        Returns:
            Number of ticks that actually ran
        """
        ran = 0
        for _ in range(num_ticks):
            if self.tick(pipeline):
                ran += 1
        return ran
