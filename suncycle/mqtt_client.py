"""
MQTT client for Home Assistant integration.

Features:
- Auto-discovery (HA MQTT Discovery protocol) for the sun's phase,
  brightness and rotation sensors
- Periodic state publishing with change debounce
- Auto-reconnection on connection loss
- Last Will and Testament (LWT) for availability
"""

import asyncio
import json
from typing import Optional
from contextlib import AsyncExitStack

import aiomqtt
from suncycle.config import (
    MQTT_ENABLED,
    MQTT_BROKER,
    MQTT_PORT,
    MQTT_USERNAME,
    MQTT_PASSWORD,
    MQTT_CLIENT_ID,
    MQTT_PUBLISH_INTERVAL,
)
from suncycle.logger import get_logger
from suncycle.state import SunState, sun_state

logger = get_logger("mqtt")


# ============================================================================
# MQTT Topics (unique per device using MQTT_CLIENT_ID)
# ============================================================================

TOPIC_STATE = f"suncycle/{MQTT_CLIENT_ID}/state"
TOPIC_AVAILABILITY = f"suncycle/{MQTT_CLIENT_ID}/availability"

# Sensor key -> (name, value template, unit, icon)
SENSORS = {
    "phase": ("Sun Phase", "{{ value_json.phase }}", None, "mdi:weather-sunset"),
    "brightness": ("Sun Brightness", "{{ value_json.brightness }}", None, "mdi:brightness-6"),
    "rotation": ("Sun Rotation", "{{ value_json.rotated_angle }}", "°", "mdi:rotate-right"),
}


def discovery_topic(sensor_key: str) -> str:
    """Discovery config topic for one sun sensor."""
    return f"homeassistant/sensor/{MQTT_CLIENT_ID}_sun_{sensor_key}/config"


# ============================================================================
# Home Assistant Discovery Config
# ============================================================================

def get_sensor_discovery_config(sensor_key: str) -> dict:
    """
    Generate Home Assistant MQTT Discovery config for one sun sensor.

    Args:
        sensor_key: One of SENSORS ("phase", "brightness", "rotation")

    Returns:
        dict: HA discovery message payload

    Docs: https://www.home-assistant.io/integrations/sensor.mqtt/
    """
    name, template, unit, icon = SENSORS[sensor_key]

    config = {
        "name": name,
        "unique_id": f"sun_{sensor_key}_{MQTT_CLIENT_ID}",
        "state_topic": TOPIC_STATE,
        "availability_topic": TOPIC_AVAILABILITY,
        "value_template": template,
        "json_attributes_topic": TOPIC_STATE,
        "icon": icon,
        "device": {
            "identifiers": [f"suncycle_{MQTT_CLIENT_ID}"],
            "name": f"Sun ({MQTT_CLIENT_ID})",
            "model": "SunCycle",
        },
        "qos": 1,
    }
    if unit:
        config["unit_of_measurement"] = unit
    return config


# ============================================================================
# MQTTService Class
# ============================================================================

class MQTTService:
    """
    MQTT service for Home Assistant integration.

    Runs as FastAPI lifespan background task and publishes the sun state
    every MQTT_PUBLISH_INTERVAL seconds while connected.
    """

    def __init__(self, state: SunState = sun_state, publish_interval: float = MQTT_PUBLISH_INTERVAL):
        self.state = state
        self.publish_interval = publish_interval
        self.client: Optional[aiomqtt.Client] = None
        self.running = False
        self._last_published_state: Optional[dict] = None
        self._state_publish_lock = asyncio.Lock()

    async def start(self):
        """Start MQTT service (runs until cancelled)."""
        if not MQTT_ENABLED:
            logger.info("MQTT is disabled in configuration")
            return

        self.running = True
        logger.info(f"Starting MQTT service: broker={MQTT_BROKER}:{MQTT_PORT}, client_id={MQTT_CLIENT_ID}")

        # Retry connection with exponential backoff
        reconnect_interval = 5  # seconds

        while self.running:
            try:
                async with AsyncExitStack() as stack:
                    will = aiomqtt.Will(
                        topic=TOPIC_AVAILABILITY,
                        payload="offline",
                        qos=1,
                        retain=True,
                    )

                    self.client = aiomqtt.Client(
                        hostname=MQTT_BROKER,
                        port=MQTT_PORT,
                        username=MQTT_USERNAME,
                        password=MQTT_PASSWORD,
                        identifier=MQTT_CLIENT_ID,
                        will=will,
                    )

                    await stack.enter_async_context(self.client)
                    logger.info("Connected to MQTT broker")

                    await self.client.publish(
                        TOPIC_AVAILABILITY,
                        payload="online",
                        qos=1,
                        retain=True,
                    )

                    await self._publish_ha_discovery()

                    # Force a publish after every (re)connect
                    await self.publish_state(force=True)

                    # Reset reconnect interval on successful connection
                    reconnect_interval = 5

                    while self.running:
                        await asyncio.sleep(self.publish_interval)
                        await self.publish_state()

            except aiomqtt.MqttError as e:
                logger.error(f"MQTT connection error: {e}", exc_info=True)
                if self.running:
                    logger.info(f"Reconnecting in {reconnect_interval} seconds...")
                    await asyncio.sleep(reconnect_interval)
                    reconnect_interval = min(reconnect_interval * 2, 60)  # Max 60s

            except asyncio.CancelledError:
                logger.info("MQTT service cancelled")
                break

            except Exception as e:
                logger.error(f"Unexpected error in MQTT service: {e}", exc_info=True)
                if self.running:
                    await asyncio.sleep(reconnect_interval)

        logger.info("MQTT service stopped")

    async def stop(self):
        """Stop MQTT service."""
        logger.info("Stopping MQTT service...")
        self.running = False

    # ------------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------------

    async def _publish_ha_discovery(self):
        """Publish Home Assistant MQTT Discovery configuration."""
        try:
            for sensor_key in SENSORS:
                await self.client.publish(
                    discovery_topic(sensor_key),
                    payload=json.dumps(get_sensor_discovery_config(sensor_key)),
                    qos=1,
                    retain=True,
                )
            logger.info(f"Published Home Assistant discovery config for {len(SENSORS)} sun sensors")

        except Exception as e:
            logger.error(f"Failed to publish HA discovery config: {e}", exc_info=True)

    # ------------------------------------------------------------------------
    # State Publishing
    # ------------------------------------------------------------------------

    async def publish_state(self, force: bool = False):
        """
        Publish current sun state to MQTT.

        Args:
            force: Publish even if state hasn't changed
        """
        if not self.client:
            return

        async with self._state_publish_lock:
            try:
                state_payload = self.state.to_mqtt_payload()

                # Skip if state hasn't changed (debounce)
                if not force and state_payload == self._last_published_state:
                    logger.debug("State unchanged, skipping publish")
                    return

                await self.client.publish(
                    TOPIC_STATE,
                    payload=json.dumps(state_payload),
                    qos=1,
                    retain=True,
                )

                self._last_published_state = state_payload
                logger.debug(f"Published state to MQTT: {state_payload}")

            except Exception as e:
                logger.error(f"Failed to publish state: {e}", exc_info=True)


# ============================================================================
# Global Instance (initialized in main.py)
# ============================================================================

mqtt_service: Optional[MQTTService] = None


def init_mqtt_service(state: SunState = sun_state) -> MQTTService:
    """
    Initialize global MQTT service instance.

    Returns:
        MQTTService instance
    """
    global mqtt_service
    mqtt_service = MQTTService(state)
    return mqtt_service


async def publish_state_to_mqtt(force: bool = False):
    """Publish current sun state to MQTT (convenience function)."""
    if mqtt_service:
        await mqtt_service.publish_state(force=force)
