"""Tests for color and intensity ramps."""

import pytest
from suncycle.ramps import ColorRamp, IntensityRamp
from suncycle.state import Phase


class TestIntensityRamp:
    """Tests for the scalar ramp."""

    def test_inactive_until_started(self):
        """Should not move or complete before start()."""
        ramp = IntensityRamp(duration=10.0, initial=0.2)
        assert ramp.step(5.0) is False
        assert ramp.current == 0.2
        assert ramp.active is False

    def test_start_sets_current_to_start_value(self):
        """Should sit at the start value at elapsed=0."""
        ramp = IntensityRamp(duration=10.0)
        ramp.start(0.0, 0.5)
        assert ramp.current == 0.0
        assert ramp.elapsed == 0.0
        assert ramp.active is True

    def test_linear_progress(self):
        """Should equal the linear interpolation at every elapsed value."""
        ramp = IntensityRamp(duration=8.0)
        ramp.start(0.0, 0.8)

        for i in range(1, 8):
            ramp.step(1.0)
            assert ramp.current == pytest.approx(0.8 * i / 8)

    def test_exact_target_on_completion(self):
        """Should land exactly on the target, with no residue."""
        ramp = IntensityRamp(duration=1.0)
        ramp.start(0.1, 0.7)

        for _ in range(9):
            ramp.step(0.1)  # 0.1 * 10 does not sum to exactly 1.0
        completed = ramp.step(0.1) or ramp.step(0.1)

        assert completed is True
        assert ramp.current == 0.7
        assert ramp.active is False

    def test_no_overshoot(self):
        """Should stop at the target when a step jumps past the duration."""
        ramp = IntensityRamp(duration=5.0)
        ramp.start(0.0, 0.5)
        assert ramp.step(50.0) is True
        assert ramp.current == 0.5

    def test_completion_reported_once(self):
        """Should report completion only on the completing tick."""
        ramp = IntensityRamp(duration=2.0)
        ramp.start(1.0, 0.0)
        results = [ramp.step(1.0) for _ in range(4)]
        assert results == [False, True, False, False]

    def test_monotonic_convergence(self):
        """Should approach the target monotonically."""
        ramp = IntensityRamp(duration=7.0)
        ramp.start(0.9, 0.1)

        values = [ramp.current]
        while ramp.active:
            ramp.step(0.7)
            values.append(ramp.current)

        assert all(a >= b for a, b in zip(values, values[1:]))
        assert values[-1] == 0.1

    def test_zero_progress_does_not_advance(self):
        """Should stay put when the tick brings no progress."""
        ramp = IntensityRamp(duration=3.0)
        ramp.start(0.0, 1.0)
        for _ in range(100):
            assert ramp.step(0.0) is False
        assert ramp.current == 0.0

    def test_negative_progress_ignored(self):
        """Should never move backward."""
        ramp = IntensityRamp(duration=4.0)
        ramp.start(0.0, 1.0)
        ramp.step(2.0)
        ramp.step(-1.0)
        assert ramp.elapsed == 2.0
        assert ramp.current == pytest.approx(0.5)

    def test_restart_captures_current(self):
        """Should restart in place from the mid-transition value."""
        ramp = IntensityRamp(duration=4.0)
        ramp.start(0.0, 1.0, owner=Phase.DAWN)
        ramp.step(1.0)

        ramp.start(ramp.current, 0.0, owner=Phase.DUSK)

        assert ramp.start_value == pytest.approx(0.25)
        assert ramp.elapsed == 0.0
        assert ramp.owner == Phase.DUSK
        ramp.step(2.0)
        assert ramp.current == pytest.approx(0.125)

    def test_progress_fraction(self):
        """Should expose completed fraction."""
        ramp = IntensityRamp(duration=4.0)
        ramp.start(0.0, 1.0)
        ramp.step(1.0)
        assert ramp.progress == pytest.approx(0.25)

    def test_invalid_duration(self):
        """Should reject non-positive durations."""
        with pytest.raises(ValueError):
            IntensityRamp(duration=0.0)
        with pytest.raises(ValueError):
            IntensityRamp(duration=-1.0)


class TestColorRamp:
    """Tests for the RGB ramp."""

    def test_component_wise(self):
        """Should interpolate each channel linearly."""
        ramp = ColorRamp(duration=4.0)
        ramp.start((0.0, 1.0, 0.2), (1.0, 0.0, 0.2))
        ramp.step(1.0)
        assert ramp.current == pytest.approx((0.25, 0.75, 0.2))

    def test_exact_color_on_completion(self):
        """Should end on exactly the target triple."""
        target = (0.5, 0.25, 0.0)
        ramp = ColorRamp(duration=3.0)
        ramp.start((1.0, 1.0, 1.0), target, owner=Phase.DUSK)

        while not ramp.step(0.3):
            pass

        assert ramp.current == target
        assert ramp.owner == Phase.DUSK

    def test_same_start_and_target_still_takes_duration(self):
        """Should run the full duration even when colors match."""
        color = (1.0, 217 / 255, 208 / 255)
        ramp = ColorRamp(duration=2.0)
        ramp.start(color, color)
        assert ramp.step(1.0) is False
        assert ramp.step(1.0) is True
        assert ramp.current == color
