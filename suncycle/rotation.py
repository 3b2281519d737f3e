"""
Rotation accumulator.

The sun turns a small step every tick. The step is added to the unwrapped
rotated angle (the phase clock) and to an update buffer. Orientation is only
pushed to the light once the buffer reaches the update threshold, and only
while the sun is above the western horizon.
"""

import math
from typing import Optional

from suncycle.state import CycleState
from suncycle.logger import get_logger

logger = get_logger("rotation")

# Sunset edge of the visible arc (degrees)
HORIZON_ANGLE = 179.0


def rotation_step(delta_time: float, speed_multiplier: float, day_length: float) -> float:
    """Degrees turned during one tick."""
    return ((delta_time * (speed_multiplier / 60)) / 4) * day_length


class RotationAccumulator:
    """Accumulates rotation into a CycleState and gates visual updates."""

    def __init__(self, state: CycleState, update_threshold: float):
        self.state = state
        self.update_threshold = update_threshold

    def advance(self, delta_time: float, speed_multiplier: float, day_length: float) -> float:
        """
        Add this tick's rotation.

        Returns:
            The step taken, which is also the ramps' progress for this tick.
            A negative or non-finite step (bad speed multiplier) counts as zero.
        """
        step = rotation_step(delta_time, speed_multiplier, day_length)
        if not math.isfinite(step) or step < 0:
            logger.warning(f"Invalid rotation step {step!r} treated as zero")
            step = 0.0

        self.state.rotation_step = step
        self.state.rotated_angle += step
        self.state.update_buffer += step
        return step

    def poll(self) -> Optional[float]:
        """
        Drain the update buffer if a visual rotation is due.

        Returns:
            Angle to apply, or None while buffering or below the horizon
        """
        if self.state.rotated_angle < HORIZON_ANGLE and self.state.update_buffer >= self.update_threshold:
            self.state.update_buffer = 0.0
            logger.debug(f"Applying rotation: {self.state.rotated_angle:.3f}")
            return self.state.rotated_angle
        return None

    def reset(self) -> float:
        """Zero the rotated angle (dawn). Returns the angle to apply immediately."""
        self.state.rotated_angle = 0.0
        return 0.0
