"""
Color and intensity ramps.

A ramp linearly interpolates from a captured start value to a target over a
fixed duration. Progress is fed in by the caller on every tick (the sun's
rotation step, not wall-clock time), so a ramp never blocks: step() just
reports whether it finished.

Restarting a running ramp overwrites it in place from its current value.
"""

from typing import Optional

from suncycle.lighting_math import RGB, clamp, lerp, lerp_color
from suncycle.state import Phase


class Ramp:
    """Base ramp; subclasses supply the interpolation."""

    def __init__(self, duration: float, initial):
        if duration <= 0:
            raise ValueError(f"Ramp duration must be positive, got {duration}")

        self.duration = duration
        self.start_value = initial
        self.target = initial
        self.current = initial
        self.elapsed = 0.0
        self.active = False

        # Phase that started this ramp (used for phase advancement)
        self.owner: Optional[Phase] = None

    def _interpolate(self, a, b, t: float):
        raise NotImplementedError

    def start(self, start_value, target, owner: Optional[Phase] = None) -> None:
        """
        Begin (or restart) the ramp.

        Args:
            start_value: Value at elapsed=0
            target: Value once elapsed reaches duration
            owner: Phase on whose behalf the ramp runs
        """
        self.start_value = start_value
        self.target = target
        self.current = start_value
        self.elapsed = 0.0
        self.active = True
        self.owner = owner

    def step(self, progress: float) -> bool:
        """
        Advance the ramp by one tick of progress.

        Returns:
            True on the tick the ramp completes, False otherwise
            (including when it is not running).
        """
        if not self.active:
            return False

        self.elapsed += max(0.0, progress)

        if self.elapsed >= self.duration:
            # Exact target, no floating-point residue
            self.current = self.target
            self.active = False
            return True

        t = clamp(self.elapsed / self.duration)
        self.current = self._interpolate(self.start_value, self.target, t)
        return False

    @property
    def progress(self) -> float:
        """Completed fraction of the ramp (0.0-1.0)."""
        return clamp(self.elapsed / self.duration)


class ColorRamp(Ramp):
    """Component-wise RGB ramp."""

    def __init__(self, duration: float, initial: RGB = (0.0, 0.0, 0.0)):
        super().__init__(duration, initial)

    def _interpolate(self, a: RGB, b: RGB, t: float) -> RGB:
        return lerp_color(a, b, t)


class IntensityRamp(Ramp):
    """Scalar intensity ramp."""

    def __init__(self, duration: float, initial: float = 0.0):
        super().__init__(duration, initial)

    def _interpolate(self, a: float, b: float, t: float) -> float:
        return lerp(a, b, t)
