"""
Configuration management with environment variable support.

All settings can be overridden via environment variables.
Automatically loads .env file if present.
"""

import os
from pathlib import Path
from typing import Annotated, Literal
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

# Load .env file from project root (one level up from suncycle/)
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Logging configuration
LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = os.getenv("LOG_LEVEL", "INFO")

# Mock hardware mode (for running without a physical light)
MOCK_MODE: bool = os.getenv("MOCK_MODE", "false").lower() == "true"

# LED hardware configuration (the physical "sun")
LED_COUNT: int = int(os.getenv("LED_COUNT", "30"))
LED_PIN: int = int(os.getenv("LED_PIN", "18"))
LED_FREQ_HZ: int = 800000
LED_DMA: int = 10
LED_CHANNEL: int = 0
LED_GAMMA: float = 2.2

# Tick loop configuration
TICK_FPS: int = int(os.getenv("TICK_FPS", "25"))

# Simulated clock: SIM_SPEED simulated seconds pass per real second
SIM_SPEED: float = float(os.getenv("SIM_SPEED", "60"))
SIM_START_HOUR: int = int(os.getenv("SIM_START_HOUR", "6"))

# Persistence
STATE_FILE: str = os.getenv("STATE_FILE", "data/sun_state.json")
STATE_SAVE_INTERVAL: int = int(os.getenv("STATE_SAVE_INTERVAL", "60"))  # seconds, 0 = only on shutdown

# MQTT configuration
MQTT_ENABLED: bool = os.getenv("MQTT_ENABLED", "false").lower() == "true"
MQTT_BROKER: str = os.getenv("MQTT_BROKER", "localhost")
MQTT_PORT: int = int(os.getenv("MQTT_PORT", "1883"))
MQTT_USERNAME: str | None = os.getenv("MQTT_USERNAME")
MQTT_PASSWORD: str | None = os.getenv("MQTT_PASSWORD")
MQTT_CLIENT_ID: str = os.getenv("MQTT_CLIENT_ID", "sun")
MQTT_PUBLISH_INTERVAL: float = float(os.getenv("MQTT_PUBLISH_INTERVAL", "5"))

# Sun cycle configuration
# Colors are "r,g,b" with 0-255 channels
SUN_DAWN_COLOR: str = os.getenv("SUN_DAWN_COLOR", "255,217,208")
SUN_DAY_COLOR: str = os.getenv("SUN_DAY_COLOR", "255,217,208")
SUN_DUSK_COLOR: str = os.getenv("SUN_DUSK_COLOR", "255,217,208")
SUN_DAY_INTENSITY: str = os.getenv("SUN_DAY_INTENSITY", "0.5")
SUN_DAWN_HOUR: str = os.getenv("SUN_DAWN_HOUR", "6")
SUN_COLOR_TRANSITION: str = os.getenv("SUN_COLOR_TRANSITION", "15")
SUN_INTENSITY_TRANSITION: str = os.getenv("SUN_INTENSITY_TRANSITION", "15")
SUN_DAY_LENGTH: str = os.getenv("SUN_DAY_LENGTH", "1")
SUN_UPDATE_THRESHOLD: str = os.getenv("SUN_UPDATE_THRESHOLD", "1")


class ConfigurationError(ValueError):
    """Raised at startup when the sun cycle configuration is unusable."""


Channel = Annotated[float, Field(ge=0.0, le=1.0)]
RGB = tuple[Channel, Channel, Channel]


class PhaseConfig(BaseModel):
    """Per-phase targets and timing for the sun cycle."""
    dawn_color: RGB = Field((1.0, 217 / 255, 208 / 255), description="Color at the start of dawn (0.0-1.0 channels)")
    day_color: RGB = Field((1.0, 217 / 255, 208 / 255), description="Color during daylight hours")
    dusk_color: RGB = Field((1.0, 217 / 255, 208 / 255), description="Color at the end of dusk")
    day_intensity: float = Field(0.5, ge=0.0, allow_inf_nan=False, description="Intensity of midday light")
    dawn_hour: int = Field(6, ge=0, le=23, description="Dawn never starts before this hour (0-23)")
    color_transition_duration: float = Field(15.0, gt=0.0, allow_inf_nan=False, description="Color ramp length in rotation degrees")
    intensity_transition_duration: float = Field(15.0, gt=0.0, allow_inf_nan=False, description="Intensity ramp length in rotation degrees")
    day_length: float = Field(1.0, gt=0.0, allow_inf_nan=False, description="Day length multiplier")
    rotation_update_threshold: float = Field(1.0, ge=0.0, allow_inf_nan=False, description="Minimum buffered rotation before it is applied")

    model_config = {"frozen": True}


def parse_color(value: str) -> tuple[float, float, float]:
    """
    Parse an "r,g,b" string with 0-255 channels into 0.0-1.0 floats.

    Raises:
        ConfigurationError: If the string is not three integers in 0-255
    """
    parts = [p.strip() for p in value.split(",")]
    if len(parts) != 3:
        raise ConfigurationError(f"Invalid color '{value}': expected 'r,g,b'")

    try:
        channels = [int(p) for p in parts]
    except ValueError as e:
        raise ConfigurationError(f"Invalid color '{value}': {e}") from e

    if any(c < 0 or c > 255 for c in channels):
        raise ConfigurationError(f"Invalid color '{value}': channels must be 0-255")

    return tuple(c / 255 for c in channels)


def load_phase_config() -> PhaseConfig:
    """
    Build the sun cycle configuration from SUN_* environment settings.

    Returns:
        Validated PhaseConfig

    Raises:
        ConfigurationError: If any setting is malformed or out of range.
            Values are never clamped, since ramp math divides by the durations.
    """
    try:
        return PhaseConfig(
            dawn_color=parse_color(SUN_DAWN_COLOR),
            day_color=parse_color(SUN_DAY_COLOR),
            dusk_color=parse_color(SUN_DUSK_COLOR),
            day_intensity=SUN_DAY_INTENSITY,
            dawn_hour=SUN_DAWN_HOUR,
            color_transition_duration=SUN_COLOR_TRANSITION,
            intensity_transition_duration=SUN_INTENSITY_TRANSITION,
            day_length=SUN_DAY_LENGTH,
            rotation_update_threshold=SUN_UPDATE_THRESHOLD,
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid sun configuration: {e}") from e
