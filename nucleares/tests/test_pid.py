import numpy as np
import pytest

from nucleares.core.pid import PID


@pytest.mark.parametrize("seed", [0, 1, 7, 42])
@pytest.mark.parametrize("limits", [(0.0, 100.0), (-50.0, 50.0)])
def test_output_always_within_limits(seed: int, limits):
    rng = np.random.default_rng(seed)
    pid = PID(5.0, 2.0, 3.0, 0.0, True, limits)
    lo, hi = limits
    for t in range(1, 300):
        out = pid.step(t, rng.uniform(-500, 500), rng.uniform(-500, 500))
        assert lo <= out <= hi


def test_stalled_tick_returns_last_output():
    pid = PID(1.0, 0.5, 0.2, 20.0, True, (0.0, 100.0))
    pid.step(1, 10.0, 5.0)
    first = pid.step(2, 10.0, 4.0)
    again = pid.step(2, 80.0, -30.0)
    assert again == first
    assert pid.output == first


@pytest.mark.parametrize("ki", [0.1, 0.0])
@pytest.mark.parametrize("seed_value", [0.0, 12.5, 37.5, 100.0])
def test_reset_then_zero_error_step_returns_seed(seed_value: float, ki: float):
    pid = PID(1.5, ki, 0.2, 60.0, True, (0.0, 100.0))
    for t, meas in enumerate([0.3, -0.1, 0.5, 0.2], start=1):
        pid.step(t, 0.1, meas)
    pid.reset(seed_value, timestamp=10)
    assert pid.step(11, seed_value, seed_value) == pytest.approx(seed_value)


def test_reset_without_timestamp_reanchors_on_next_step():
    pid = PID(2.0, 0.5, 0.0, 0.0, True, (0.0, 100.0))
    pid.step(1, 50.0, 0.0)
    pid.reset(25.0)
    assert pid.step(2, 3.0, 3.0) == pytest.approx(25.0)


def test_initial_output_avoids_startup_kick():
    pid = PID(1.5, 0.1, 0.0, 42.0, True, (0.0, 100.0))
    assert pid.output == pytest.approx(42.0)
    assert pid.step(5, 0.1, 0.1) == pytest.approx(42.0)


def test_proportional_only_loop_starts_from_seed():
    pid = PID(1.5, 0.0, 0.0, 40.0, True, (0.0, 100.0))
    assert pid.step(1, 0.5, 0.5) == pytest.approx(40.0)
    assert pid.step(2, 0.5, 0.1) == pytest.approx(40.6)


def test_integrator_is_clamped():
    pid = PID(0.0, 1.0, 0.0, 0.0, True, (0.0, 10.0))
    for t in range(1, 100):
        pid.step(t, 5.0, 0.0)
    assert pid.integral == pytest.approx(10.0)
    # A single reversed tick leaves saturation immediately
    assert pid.step(100, 0.0, 1.0) == pytest.approx(9.0)


def test_unclamped_integrator_winds_up():
    pid = PID(0.0, 1.0, 0.0, 0.0, True, (0.0, 10.0), clamp_integral=False)
    for t in range(1, 100):
        pid.step(t, 5.0, 0.0)
    assert pid.integral > 100.0
    assert pid.step(100, 0.0, 1.0) == pytest.approx(10.0)


def test_derivative_on_measurement_ignores_setpoint_jump():
    on_meas = PID(0.0, 0.0, 1.0, 0.0, True, (-100.0, 100.0))
    on_err = PID(0.0, 0.0, 1.0, 0.0, False, (-100.0, 100.0))
    for pid in (on_meas, on_err):
        pid.step(1, 0.0, 0.0)
    assert on_meas.step(2, 10.0, 0.0) == pytest.approx(0.0)
    assert on_err.step(2, 10.0, 0.0) == pytest.approx(10.0)


def test_derivative_on_measurement_opposes_rising_measurement():
    pid = PID(0.0, 0.0, 2.0, 0.0, True, (-100.0, 100.0))
    pid.step(1, 0.0, 1.0)
    assert pid.step(3, 0.0, 5.0) == pytest.approx(-4.0)


def test_reverse_acting_flips_error():
    direct = PID(1.0, 0.0, 0.0, 0.0, True, (-10.0, 10.0))
    reverse = PID(1.0, 0.0, 0.0, 0.0, True, (-10.0, 10.0), reverse_acting=True)
    assert direct.step(1, 0.0, 2.0) == pytest.approx(-2.0)
    assert reverse.step(1, 0.0, 2.0) == pytest.approx(2.0)


def test_unordered_limits_rejected():
    with pytest.raises(ValueError):
        PID(1.0, 0.0, 0.0, 0.0, True, (10.0, 0.0))
