import numpy as np
import pytest

from nucleares.core.state import RodActuationState
from nucleares.logic.rods import RodActuator, RodParams


def actuate(eng: RodActuator, state: RodActuationState, **kw):
    args = dict(
        raw=state.last_applied,
        desired=0.10,
        reactivity=0.10,
        avg_reactivity=0.10,
        in_temp_range=False,
        target=0.10,
        bank_positions=(50.0, 50.0, 50.0, 50.0),
        emergency=False,
    )
    args.update(kw)
    return eng.actuate(state, **args)


@pytest.mark.parametrize(
    "error,expected",
    [(0.0, 0.1), (0.45, 0.505), (-0.45, 0.505), (1.0, 1.0), (5.0, 1.0)],
)
def test_step_size_scales_with_error(error: float, expected: float):
    assert RodActuator().step_size(error) == pytest.approx(expected)


@pytest.mark.parametrize("seed", [3, 11, 29])
def test_commanded_position_stays_within_bounds(seed: int):
    rng = np.random.default_rng(seed)
    eng = RodActuator()
    state = RodActuationState.seeded(50.0, [50.0] * 4)
    for _ in range(500):
        raw = float(rng.uniform(-200.0, 300.0))
        _, pos = eng.quantize(state, raw, float(rng.uniform(0.1, 1.0)))
        assert 10.0 <= pos <= 100.0


def test_constant_raw_equal_to_last_applied_writes_nothing():
    eng = RodActuator()
    state = RodActuationState.seeded(50.0, [50.0] * 4)
    for _ in range(5):
        cmd = actuate(eng, state, raw=50.0)
        assert cmd.steps == 0
        assert cmd.writes == {}
    assert state.last_applied == 50.0
    assert state.accumulator == 0.0


def test_small_difference_forces_one_step_and_clears_accumulator():
    eng = RodActuator()
    state = RodActuationState(last_applied=50.0)
    steps, pos = eng.quantize(state, 50.03, 0.1)
    assert steps == 1
    assert pos == pytest.approx(50.1)
    assert state.accumulator == 0.0

    steps, pos = eng.quantize(state, 50.07, 0.1)
    assert steps == -1
    assert pos == pytest.approx(50.0)


def test_residual_is_carried_to_next_tick():
    eng = RodActuator()
    state = RodActuationState(last_applied=50.0)
    steps, pos = eng.quantize(state, 50.25, 0.1)
    assert steps == 2
    assert pos == pytest.approx(50.2)
    assert state.accumulator == pytest.approx(0.05)


def test_floor_clamps_withdrawal():
    eng = RodActuator()
    state = RodActuationState(last_applied=10.5)
    _, pos = eng.quantize(state, 0.0, 1.0)
    assert pos == 10.0


def test_stable_reactor_is_left_alone():
    eng = RodActuator()
    state = RodActuationState.seeded(50.0, [50.0] * 4)
    state.cursor = 2
    state.accumulator = 0.03
    cmd = actuate(eng, state, raw=63.0, reactivity=0.08, avg_reactivity=0.08, in_temp_range=True)
    assert cmd.action == "hold"
    assert cmd.writes == {}
    assert state.cursor == 2
    assert state.accumulator == 0.03
    assert state.last_applied == 50.0


def test_out_of_band_moves_banks_round_robin():
    eng = RodActuator()
    state = RodActuationState.seeded(50.0, [50.0] * 4)
    state.cursor = 3
    cmd = actuate(eng, state, raw=52.0, desired=0.3, reactivity=0.1, avg_reactivity=0.1)
    assert cmd.action == "move"
    assert cmd.position > 50.0
    # error 0.2 -> step 0.28 -> ceil(0.714) = 1 bank
    assert cmd.banks_to_move == 1
    assert list(cmd.writes) == [3]
    assert state.cursor == 0


@pytest.mark.parametrize(
    "error,step,avg,banks,expected",
    [
        (0.05, 0.1, 0.1, 8, 1),
        (0.0, 0.1, 0.1, 8, 1),
        (0.05, 0.1, -0.5, 8, 3),     # 0.5 + 4 * 0.5
        (0.05, 0.1, -0.5, 2, 2),     # capped by bank count
        (5.0, 0.1, -3.0, 20, 9),     # capped at 9
    ],
)
def test_banks_to_move(error, step, avg, banks, expected):
    assert RodActuator().banks_to_move(error, step, avg, banks) == expected


def test_fan_out_wraps_at_nine_banks():
    eng = RodActuator()
    state = RodActuationState.seeded(50.0, [50.0] * 12)
    state.cursor = 8
    writes = eng.fan_out(state, 60.0, 2, 12)
    assert list(writes) == [8, 0]
    assert state.cursor == 1


def test_fan_out_skips_redundant_writes_but_advances():
    eng = RodActuator()
    state = RodActuationState.seeded(50.0, [60.0, 50.0, 60.005, 50.0])
    writes = eng.fan_out(state, 60.0, 3, 4)
    assert writes == {1: 60.0}
    assert state.cursor == 3
    assert state.last_commanded[1] == 60.0


def test_emergency_steps_every_bank_down_to_floor():
    eng = RodActuator()
    state = RodActuationState.seeded(50.0, [50.0] * 4)
    cmd = actuate(eng, state, emergency=True, bank_positions=(50.0, 10.5, 10.0, 80.0), raw=100.0)
    assert cmd.action == "emergency"
    assert cmd.writes == {0: 49.0, 1: 10.0, 2: 10.0, 3: 79.0}
    assert all(v >= 10.0 for v in cmd.writes.values())


def test_emergency_is_capped_at_nine_banks():
    eng = RodActuator()
    state = RodActuationState.seeded(50.0, [])
    cmd = eng.emergency(state, tuple([40.0] * 12))
    assert sorted(cmd.writes) == list(range(9))
    assert set(cmd.writes.values()) == {39.0}


def test_emergency_step_is_configurable():
    eng = RodActuator(RodParams(emergency_step=2.5))
    state = RodActuationState.seeded(50.0, [50.0])
    assert eng.emergency(state, (30.0,)).writes == {0: 27.5}
