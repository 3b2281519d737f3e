"""Shared pytest fixtures for all tests."""

import pytest
import sys
from unittest.mock import MagicMock, patch

# Mock hardware libraries BEFORE any suncycle imports
# This must happen at module level, before pytest collects tests

# Mock rpi_ws281x
mock_ws281x = MagicMock()
mock_ws281x.PixelStrip = MagicMock
mock_ws281x.Color = MagicMock(side_effect=lambda r, g, b: (r, g, b))
sys.modules['rpi_ws281x'] = mock_ws281x

# Now we can import suncycle modules safely
from suncycle.clock import ClockAdapter
from suncycle.config import PhaseConfig
from suncycle.sink import LightSink


class FakeClock(ClockAdapter):
    """
    Deterministic clock.

    With the default speed of 240 the rotation step of a tick equals its
    delta (delta * 240 / 60 / 4 = delta), which keeps ramp math readable.
    """

    def __init__(self, delta: float = 1.0, speed: float = 240.0, hour: int = 12):
        self.delta = delta
        self.speed = speed
        self.hour = hour
        self.ticks = 0

    def delta_time_this_tick(self) -> float:
        self.ticks += 1
        return self.delta

    def speed_multiplier(self) -> float:
        return self.speed

    def current_hour_of_day(self) -> int:
        return self.hour


class RecordingSink(LightSink):
    """Light sink that keeps every frame it receives."""

    def __init__(self):
        self.frames = []
        self.off_called = False

    def apply(self, frame):
        self.frames.append(frame)

    def off(self):
        self.off_called = True

    @property
    def rotations(self):
        return [f.rotation for f in self.frames if f.rotation is not None]


DAWN_COLOR = (1.0, 0.5, 0.25)
DAY_COLOR = (1.0, 1.0, 1.0)
DUSK_COLOR = (0.5, 0.25, 0.0)


@pytest.fixture
def fake_clock():
    """Clock advancing one rotation degree per tick at noon."""
    return FakeClock()


@pytest.fixture
def recording_sink():
    """Sink capturing frames for assertions."""
    return RecordingSink()


@pytest.fixture
def phase_config():
    """Short, distinct-colored phase configuration."""
    return PhaseConfig(
        dawn_color=DAWN_COLOR,
        day_color=DAY_COLOR,
        dusk_color=DUSK_COLOR,
        day_intensity=0.8,
        dawn_hour=6,
        color_transition_duration=10.0,
        intensity_transition_duration=5.0,
        day_length=1.0,
        rotation_update_threshold=1.0,
    )


@pytest.fixture
def controller(phase_config, fake_clock, recording_sink):
    """SunController wired to the fake clock and recording sink (not started)."""
    from suncycle.controller import SunController
    return SunController(phase_config, fake_clock, recording_sink)


@pytest.fixture
def disable_mqtt():
    """Disable MQTT for tests that don't need it."""
    with patch('suncycle.config.MQTT_ENABLED', False):
        yield


@pytest.fixture
def state_file(tmp_path):
    """Temporary sun state file path."""
    return str(tmp_path / "data" / "sun_state.json")
