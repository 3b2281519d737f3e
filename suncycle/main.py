"""
HTTP service driving the sun through its day/night cycle.

IMPORTANT:
- Must run with ONE worker (the tick loop owns the cycle state)
- Must run under sudo (-E) on real hardware because of DMA access
"""

from fastapi import FastAPI, HTTPException, APIRouter
from typing import Literal
from contextlib import asynccontextmanager
import asyncio

from suncycle.clock import SimulatedClock
from suncycle.config import (
    LED_COUNT, LED_PIN, LOG_LEVEL, MOCK_MODE, TICK_FPS,
    SIM_SPEED, SIM_START_HOUR, STATE_FILE, STATE_SAVE_INTERVAL,
    MQTT_ENABLED, load_phase_config,
)
from suncycle.controller import SunController
from suncycle.logger import logger
from suncycle.mqtt_client import init_mqtt_service, publish_state_to_mqtt
from suncycle.persistence import load_state, save_state
from suncycle.state import sun_state

# Conditional imports based on MOCK_MODE
if MOCK_MODE:
    logger.info("🎭 MOCK MODE ENABLED - Using simulated hardware")
    from suncycle.mock_hardware import MockLedStripSink as LedStripSink
else:
    from suncycle.led import LedStripSink


# ============================================================================
# Hardware and state initialization
# ============================================================================

# Invalid sun configuration is fatal here, before anything runs
phase_config = load_phase_config()

light = LedStripSink(count=LED_COUNT)
clock = SimulatedClock(speed=SIM_SPEED, start_hour=SIM_START_HOUR)
controller = SunController(phase_config, clock, light, published=sun_state)


# ============================================================================
# Background tasks
# ============================================================================

async def run_tick_loop():
    """Tick the controller TICK_FPS times per second until cancelled."""
    interval = 1 / TICK_FPS
    logger.info(f"Tick loop started ({TICK_FPS} fps)")

    while True:
        try:
            controller.tick()
        except Exception:
            logger.error("Sun tick failed", exc_info=True)

        await asyncio.sleep(interval)


async def persist_now() -> None:
    """
    Save the controller state to STATE_FILE.

    The snapshot is taken on the event loop, between ticks; only the file
    write runs in a worker thread.
    """
    snapshot = controller.to_persisted()
    await asyncio.to_thread(save_state, snapshot, STATE_FILE)


async def run_periodic_save():
    """Save state every STATE_SAVE_INTERVAL seconds."""
    while True:
        await asyncio.sleep(STATE_SAVE_INTERVAL)
        try:
            await persist_now()
        except Exception:
            logger.error("Periodic state save failed", exc_info=True)


async def _cancel(task: asyncio.Task, name: str):
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        logger.info(f"{name} stopped")


# ============================================================================
# FastAPI Lifespan
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan context manager.

    Startup: restore or start the cycle, then run the tick loop, periodic
    saves and MQTT as background tasks.
    Shutdown: stop tasks, save state, turn the light off.
    """
    logger.info("SunCycle starting up")
    logger.info(f"Configuration: LED_COUNT={LED_COUNT}, LED_PIN={LED_PIN}, LOG_LEVEL={LOG_LEVEL}")
    logger.info(f"Simulation: speed={SIM_SPEED}x, start_hour={SIM_START_HOUR}, state_file={STATE_FILE}")

    controller.start(load_state(STATE_FILE))

    tasks: list[tuple[asyncio.Task, str]] = [
        (asyncio.create_task(run_tick_loop()), "Tick loop"),
    ]

    if STATE_SAVE_INTERVAL > 0:
        tasks.append((asyncio.create_task(run_periodic_save()), "Periodic save"))
        logger.info(f"Periodic state save every {STATE_SAVE_INTERVAL}s")

    if MQTT_ENABLED:
        mqtt_service = init_mqtt_service(sun_state)
        tasks.append((asyncio.create_task(mqtt_service.start()), "MQTT service"))
        logger.info("MQTT service started as background task")

    # App is running
    yield

    logger.info("Starting graceful shutdown...")

    for task, name in reversed(tasks):
        await _cancel(task, name)

    try:
        await persist_now()
        logger.info(f"Sun state saved to {STATE_FILE}")
    except Exception:
        logger.error("Failed to save sun state during shutdown", exc_info=True)

    try:
        logger.info("Turning off light")
        light.off()
    except Exception:
        logger.error("Failed to turn off light during shutdown", exc_info=True)

    logger.info("Shutdown complete")


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="SunCycle API",
    lifespan=lifespan,
    redoc_url=None,
    docs_url="/docs"
)

sun_router = APIRouter(
    prefix="/sun",
    tags=["Sun Cycle"]
)


@sun_router.get("/state")
async def get_state():
    """
    Get current sun state.

    Useful for:
    - Debugging
    - MQTT synchronization
    """
    try:
        return sun_state.get_snapshot()
    except Exception as e:
        logger.error("Failed to get state", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@sun_router.get("/config")
async def get_config():
    """Active phase configuration (read-only)."""
    return phase_config.model_dump()


@sun_router.post("/save")
async def save():
    """Persist the cycle state now."""
    try:
        await persist_now()
        return {"message": "Sun state saved", "path": STATE_FILE}
    except Exception as e:
        logger.error("Failed to save sun state", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@sun_router.post("/trigger/{phase}")
async def trigger(phase: Literal["dawn", "dusk"]):
    """
    Manually trigger dawn or dusk.

    A trigger during a running transition restarts it from the current values.
    """
    logger.info(f"Manual {phase} trigger requested")

    if phase == "dawn":
        controller.trigger_dawn()
    else:
        controller.trigger_dusk()

    # Push the new phase without waiting for the next periodic publish
    controller.publish_now()
    await publish_state_to_mqtt(force=True)

    return {"message": f"{phase.capitalize()} triggered", "phase": controller.phase.value}


app.include_router(sun_router)
