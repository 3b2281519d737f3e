"""
Sun controller: the day/night phase state machine.

Each tick runs, in this order:
1. Rotation accumulation (clock delta -> rotation step)
2. Phase triggers (dusk past 150°, dawn at a full 360° turn)
3. Dawn-hour gate (dawn ramps wait for the configured hour)
4. Ramp stepping (color ramp completion advances the phase)
5. Light sink update

Nothing blocks: ramps and the dawn-hour wait are plain state polled on every
tick by the same driver.
"""

import math
from typing import Optional

from suncycle.clock import ClockAdapter
from suncycle.config import PhaseConfig
from suncycle.sink import LightFrame, LightSink
from suncycle.persistence import PersistedState
from suncycle.ramps import ColorRamp, IntensityRamp
from suncycle.rotation import RotationAccumulator
from suncycle.state import CycleState, Phase, SunState
from suncycle.logger import get_logger

logger = get_logger("controller")

# Day -> Dusk once the sun passes this angle
DUSK_ANGLE = 150.0

# Night -> Dawn once a full turn is complete
FULL_CYCLE_ANGLE = 360.0

# Phase entered when the color ramp started by a phase completes
PHASE_AFTER_COLOR_RAMP = {
    Phase.DAWN: Phase.DAY,
    Phase.DUSK: Phase.NIGHT,
}

# Restored intensities closer than this are treated as settled
INTENSITY_TOLERANCE = 0.001


class SunController:
    """
    Drives one sun through dawn, day, dusk and night.

    Args:
        config: Phase targets and timing
        clock: Time source polled once per tick
        sink: Receives the final frame of every tick
        published: Optional thread-safe state to mirror into (REST/MQTT)
    """

    def __init__(
        self,
        config: PhaseConfig,
        clock: ClockAdapter,
        sink: LightSink,
        published: Optional[SunState] = None,
    ):
        self.config = config
        self.clock = clock
        self.sink = sink
        self.published = published

        self.state = CycleState()
        self.rotation = RotationAccumulator(self.state, config.rotation_update_threshold)
        self.color_ramp = ColorRamp(config.color_transition_duration)
        self.intensity_ramp = IntensityRamp(config.intensity_transition_duration)

        self.awaiting_dawn_hour = False
        self._pending_rotation: Optional[float] = None
        self._last_hour: Optional[int] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self.state.phase

    def start(self, persisted: Optional[PersistedState] = None) -> None:
        """
        Start the cycle, fresh or from a saved state.

        A saved state with initialized=False is ignored and dawn starts fresh.
        """
        if persisted is None or not persisted.initialized:
            logger.info("Starting new sun cycle")
            self.trigger_dawn()
            self.state.initialized = True
            return

        self._restore(persisted)

    def _restore(self, persisted: PersistedState) -> None:
        state = self.state
        state.rotated_angle = persisted.rotated_angle
        state.phase = persisted.phase
        state.current_color = tuple(persisted.current_color)
        state.desired_color = tuple(persisted.desired_color)
        state.current_intensity = persisted.current_intensity
        state.desired_intensity = persisted.desired_intensity
        state.initialized = True

        # Put the sun back where it was
        self._pending_rotation = state.rotated_angle

        logger.info(
            f"Restored sun cycle: phase={state.phase.value}, angle={state.rotated_angle:.2f}"
        )

        # Dawn and dusk only end through their color ramp, so it always resumes there
        if state.current_color != state.desired_color or state.phase in PHASE_AFTER_COLOR_RAMP:
            self.color_ramp.start(state.current_color, state.desired_color, owner=state.phase)
            logger.info("Resuming color transition")

        if abs(state.desired_intensity - state.current_intensity) > INTENSITY_TOLERANCE:
            self.intensity_ramp.start(state.current_intensity, state.desired_intensity, owner=state.phase)
            logger.info(
                f"Resuming intensity transition: {state.current_intensity:.3f} -> {state.desired_intensity:.3f}"
            )

    def to_persisted(self) -> PersistedState:
        """Export the state needed to resume after a restart."""
        state = self.state
        return PersistedState(
            rotated_angle=state.rotated_angle,
            phase=state.phase,
            current_color=state.current_color,
            desired_color=state.desired_color,
            current_intensity=state.current_intensity,
            desired_intensity=state.desired_intensity,
            initialized=state.initialized,
        )

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    def trigger_dawn(self) -> None:
        """
        Reset the sun and begin the dawn -> day transition.

        The ramps start once the clock reaches the dawn hour; until then the
        phase stays DAWN with the dawn color at zero intensity.
        """
        cfg = self.config
        state = self.state

        self._pending_rotation = self.rotation.reset()

        state.current_color = cfg.dawn_color
        state.current_intensity = 0.0
        state.desired_color = cfg.day_color
        state.desired_intensity = cfg.day_intensity
        state.phase = Phase.DAWN

        self.awaiting_dawn_hour = True
        logger.info(f"Dawn triggered, waiting for hour {cfg.dawn_hour:02d}")

    def trigger_dusk(self) -> None:
        """Begin the dusk -> night transition. Supersedes a dawn still waiting for its hour."""
        state = self.state

        state.desired_color = self.config.dusk_color
        state.desired_intensity = 0.0
        state.phase = Phase.DUSK
        self.awaiting_dawn_hour = False

        self.color_ramp.start(state.current_color, state.desired_color, owner=Phase.DUSK)
        self.intensity_ramp.start(state.current_intensity, state.desired_intensity, owner=Phase.DUSK)
        logger.info(f"Dusk triggered at {state.rotated_angle:.2f}°")

    def _start_dawn_ramps(self) -> None:
        state = self.state
        self.awaiting_dawn_hour = False
        self.intensity_ramp.start(state.current_intensity, state.desired_intensity, owner=Phase.DAWN)
        self.color_ramp.start(state.current_color, state.desired_color, owner=Phase.DAWN)
        logger.info("Dawn hour reached, sunrise started")

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def _read_delta(self) -> float:
        delta = self.clock.delta_time_this_tick()
        if not math.isfinite(delta) or delta < 0:
            logger.warning(f"Invalid tick delta {delta!r} treated as zero")
            return 0.0
        return delta

    def tick(self) -> LightFrame:
        """
        Run one cycle update and push the result to the light sink.

        Returns:
            The frame handed to the sink
        """
        state = self.state

        # 1. Rotation
        step = self.rotation.advance(
            self._read_delta(),
            self.clock.speed_multiplier(),
            self.config.day_length,
        )
        rotation = self.rotation.poll()
        if rotation is not None:
            self._pending_rotation = rotation

        # 2. Phase triggers
        if state.rotated_angle > DUSK_ANGLE and state.phase == Phase.DAY:
            self.trigger_dusk()

        if state.rotated_angle >= FULL_CYCLE_ANGLE and state.phase == Phase.NIGHT:
            self.trigger_dawn()

        # 3. Dawn-hour gate
        hour = self.clock.current_hour_of_day()
        self._last_hour = hour
        if self.awaiting_dawn_hour and hour >= self.config.dawn_hour:
            self._start_dawn_ramps()

        # 4. Ramps (held while dawn waits for its hour)
        if not self.awaiting_dawn_hour:
            self._step_ramps(step)

        # 5. Light sink
        frame = LightFrame(
            rotation=self._pending_rotation,
            color=state.current_color,
            intensity=state.current_intensity,
        )
        self._pending_rotation = None
        self.sink.apply(frame)
        self._publish(frame)
        return frame

    def _step_ramps(self, step: float) -> None:
        state = self.state

        if self.intensity_ramp.active:
            self.intensity_ramp.step(step)
            state.current_intensity = self.intensity_ramp.current

        if self.color_ramp.active:
            completed = self.color_ramp.step(step)
            state.current_color = self.color_ramp.current
            if completed:
                self._on_color_ramp_complete(self.color_ramp.owner)

    def _on_color_ramp_complete(self, owner: Optional[Phase]) -> None:
        next_phase = PHASE_AFTER_COLOR_RAMP.get(owner)

        # A ramp superseded by a newer trigger no longer owns the phase
        if next_phase is None or self.state.phase != owner:
            return

        logger.info(f"Phase {owner.value} -> {next_phase.value}")
        self.state.phase = next_phase

    def publish_now(self) -> None:
        """Mirror the current state into the published view outside a tick (manual triggers)."""
        state = self.state
        self._publish(LightFrame(rotation=None, color=state.current_color, intensity=state.current_intensity))

    def _publish(self, frame: LightFrame) -> None:
        if self.published is None:
            return

        update = {
            "phase": self.state.phase,
            "color": frame.color,
            "intensity": frame.intensity,
            "rotated_angle": self.state.rotated_angle,
            "hour": self._last_hour,
            "awaiting_dawn_hour": self.awaiting_dawn_hour,
        }
        if frame.rotation is not None:
            update["rotation"] = frame.rotation
        self.published.update(**update)
