from __future__ import annotations

"""
Rod actuation engine.

Turns the continuous reactivity→rods PID output into quantized bank
commands. Small PID movements are held in an accumulator until they add up
to a full step, and the resulting position is fanned out round-robin over
the rod banks, a few banks per tick.

Rod position is insertion in percent: lower values mean withdrawn rods and
more reactivity.
"""

import logging
import math
from dataclasses import dataclass, field

from nucleares.core.params import params_from_yaml
from nucleares.core.state import RodActuationState
from nucleares.errors import ConfigError

log = logging.getLogger(__name__)


@dataclass
class RodParams:
    kp: float = 1.5
    ki: float = 0.1
    kd: float = 0.0
    min_position: float = 10.0
    max_position: float = 100.0
    max_banks: int = 9
    # Step size scales linearly from step_floor (no error) to 1.0 at error_span
    step_floor: float = 0.1
    error_span: float = 1.0
    # Extra banks per unit of negative average reactivity
    extra_bank_gain: float = 4.0
    # Act only outside the band or when |reactivity - target| exceeds this
    reactivity_tolerance: float = 0.05
    # Skip bank writes closer than this to the last commanded value
    write_tolerance: float = 0.01
    emergency_step: float = 1.0
    # Write RODS_ALL_POS_ORDERED once instead of individual banks
    all_banks_command: bool = False

    def __post_init__(self) -> None:
        if not 0.0 < self.step_floor <= 1.0:
            raise ConfigError(f"RodParams.step_floor must be in (0, 1], got {self.step_floor}")
        if self.min_position > self.max_position:
            raise ConfigError("RodParams: min_position above max_position")

    @classmethod
    def from_yaml(cls, data: dict | None) -> "RodParams":
        return params_from_yaml(cls, data)


@dataclass
class RodCommand:
    action: str                         # "hold" | "move" | "emergency"
    position: float
    step_size: float = 0.0
    steps: int = 0
    banks_to_move: int = 0
    writes: dict[int, float] = field(default_factory=dict)


class RodActuator:
    def __init__(self, params: RodParams | None = None) -> None:
        self.params = params or RodParams()

    def bank_cap(self, bank_count: int) -> int:
        return max(0, min(bank_count, self.params.max_banks))

    def step_size(self, error: float) -> float:
        p = self.params
        frac = abs(error) / p.error_span if p.error_span > 0 else 1.0
        return max(p.step_floor, min(1.0, p.step_floor + (1.0 - p.step_floor) * frac))

    def quantize(self, state: RodActuationState, raw: float, step_size: float) -> tuple[int, float]:
        """Fold ``raw - last_applied`` into the accumulator and release whole steps.

        Returns ``(steps, new_position)`` and updates ``state`` in place. A
        non-zero difference too small for a whole step still moves one step
        in its direction and clears the accumulator, so a persistent small
        error cannot stall the rods.
        """
        p = self.params
        diff = raw - state.last_applied
        state.accumulator += diff
        steps = math.trunc(state.accumulator / step_size)
        if steps == 0 and diff != 0:
            steps = 1 if diff > 0 else -1
            state.accumulator = 0.0
        else:
            state.accumulator -= steps * step_size

        position = max(p.min_position, min(p.max_position, state.last_applied + steps * step_size))
        state.last_applied = position
        return steps, position

    def banks_to_move(self, error: float, step_size: float, avg_reactivity: float, bank_count: int) -> int:
        extra = self.params.extra_bank_gain * -avg_reactivity if avg_reactivity < 0 else 0.0
        n = max(1, math.ceil(abs(error) / step_size + extra))
        return min(n, self.bank_cap(bank_count))

    def should_act(self, *, in_temp_range: bool, reactivity: float, target: float) -> bool:
        return not in_temp_range or abs(reactivity - target) > self.params.reactivity_tolerance

    def fan_out(self, state: RodActuationState, position: float, count: int, bank_count: int) -> dict[int, float]:
        """Advance ``count`` banks round-robin from the cursor.

        Banks already within write_tolerance of ``position`` are passed over
        without a write, but the cursor still advances.
        """
        cap = self.bank_cap(bank_count)
        writes: dict[int, float] = {}
        if cap == 0:
            return writes
        _ensure_slots(state, bank_count)
        for _ in range(count):
            if state.cursor >= cap:
                state.cursor = 0
            bank = state.cursor
            last = state.last_commanded[bank]
            if last is None or abs(position - last) > self.params.write_tolerance:
                writes[bank] = position
                state.last_commanded[bank] = position
            state.cursor = (state.cursor + 1) % cap
        return writes

    def emergency(self, state: RodActuationState, bank_positions: tuple[float, ...]) -> RodCommand:
        """Step every bank (up to the cap) down by emergency_step, floored at min_position."""
        p = self.params
        cap = self.bank_cap(len(bank_positions))
        _ensure_slots(state, len(bank_positions))
        writes: dict[int, float] = {}
        for i in range(cap):
            target = max(bank_positions[i] - p.emergency_step, p.min_position)
            writes[i] = target
            state.last_commanded[i] = target
        state.accumulator = 0.0
        if writes:
            state.last_applied = min(writes.values())
        log.warning("Emergency mode: controlled all-bank retraction (%d banks)", cap)
        return RodCommand("emergency", state.last_applied, banks_to_move=cap, writes=writes)

    def actuate(
        self,
        state: RodActuationState,
        *,
        raw: float,
        desired: float,
        reactivity: float,
        avg_reactivity: float,
        in_temp_range: bool,
        target: float,
        bank_positions: tuple[float, ...],
        emergency: bool,
    ) -> RodCommand:
        if emergency:
            return self.emergency(state, bank_positions)

        if not bank_positions or not self.should_act(
            in_temp_range=in_temp_range, reactivity=reactivity, target=target
        ):
            return RodCommand("hold", state.last_applied)

        error = desired - avg_reactivity
        size = self.step_size(error)
        steps, position = self.quantize(state, raw, size)
        n = self.banks_to_move(error, size, avg_reactivity, len(bank_positions))
        log.info(
            "Avg reactivity %.2f, desired %.2f -> rods %.1f%% on %d bank(s)",
            avg_reactivity, desired, position, n,
        )
        writes = self.fan_out(state, position, n, len(bank_positions))
        return RodCommand("move", position, step_size=size, steps=steps, banks_to_move=n, writes=writes)


def _ensure_slots(state: RodActuationState, bank_count: int) -> None:
    if len(state.last_commanded) < bank_count:
        state.last_commanded.extend([None] * (bank_count - len(state.last_commanded)))
