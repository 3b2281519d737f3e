"""
Sun cycle state.

CycleState is the controller's working state, mutated once per tick.
SunState is the thread-safe published view read by the REST API and MQTT.
"""

from dataclasses import dataclass, field
from typing import Optional, Any
from datetime import datetime
from enum import Enum
import threading

from suncycle.lighting_math import RGB, to_rgb255


class Phase(str, Enum):
    """Segments of the day/night cycle, in cycle order."""
    DAWN = "dawn"
    DAY = "day"
    DUSK = "dusk"
    NIGHT = "night"


@dataclass
class CycleState:
    """
    Working state of one sun.

    rotated_angle is never wrapped: it doubles as the phase clock and only
    resets to 0 when dawn is triggered.
    """

    rotated_angle: float = 0.0
    rotation_step: float = 0.0
    update_buffer: float = 0.0
    phase: Phase = Phase.DAWN
    initialized: bool = False

    current_color: RGB = (0.0, 0.0, 0.0)
    desired_color: RGB = (0.0, 0.0, 0.0)
    current_intensity: float = 0.0
    desired_intensity: float = 0.0


@dataclass
class SunState:
    """
    Published sun state for REST and MQTT.

    Thread-safe via internal lock. All updates should use the update() method.
    """

    phase: Phase = Phase.DAWN

    # Last frame handed to the light sink
    color: RGB = (0.0, 0.0, 0.0)
    intensity: float = 0.0

    # Last applied orientation (degrees around the sun's axis)
    rotation: Optional[float] = None

    # Unwrapped phase clock
    rotated_angle: float = 0.0

    # Simulated hour reported by the clock
    hour: Optional[int] = None

    # True while dawn waits for the configured hour
    awaiting_dawn_hour: bool = False

    last_updated: datetime = field(default_factory=datetime.now)

    _lock: threading.Lock = field(default_factory=threading.Lock)

    def update(self, **kwargs) -> None:
        """
        Thread-safe state update.

        Example:
            sun_state.update(phase=Phase.DAY, intensity=0.5)
        """
        with self._lock:
            for key, value in kwargs.items():
                if hasattr(self, key) and not key.startswith('_'):
                    setattr(self, key, value)
            self.last_updated = datetime.now()

    def to_mqtt_payload(self) -> dict[str, Any]:
        """
        Convert state to the JSON payload read by the Home Assistant sensors.

        Intensity above 1.0 is reported as full brightness (255).
        """
        with self._lock:
            r, g, b = to_rgb255(self.color)
            return {
                "state": "ON" if self.intensity > 0.0 else "OFF",
                "phase": self.phase.value,
                "brightness": int(min(self.intensity, 1.0) * 255),
                "intensity": round(self.intensity, 4),
                "color": {"r": r, "g": g, "b": b},
                "rotated_angle": round(self.rotated_angle, 2),
            }

    def get_snapshot(self) -> dict[str, Any]:
        """Get thread-safe snapshot of current state."""
        with self._lock:
            return {
                "phase": self.phase.value,
                "color": list(self.color),
                "intensity": self.intensity,
                "rotation": self.rotation,
                "rotated_angle": self.rotated_angle,
                "hour": self.hour,
                "awaiting_dawn_hour": self.awaiting_dawn_hour,
                "last_updated": self.last_updated.isoformat(),
            }


# Global state instance
sun_state = SunState()
