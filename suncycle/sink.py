"""
Light sink interface: the consumer of each tick's sun frame.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from suncycle.lighting_math import RGB


@dataclass(frozen=True)
class LightFrame:
    """Final values for one tick. rotation is None when no rotation is due."""
    rotation: Optional[float]
    color: RGB
    intensity: float


class LightSink(ABC):
    """Consumer of per-tick sun frames."""

    @abstractmethod
    def apply(self, frame: LightFrame) -> None:
        """Apply one frame to the light."""

    def off(self) -> None:
        """Switch the light off (shutdown)."""
