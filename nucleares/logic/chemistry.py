from __future__ import annotations

"""
Boron chemistry rule engine.

Runs every `interval` ticks. Rules are checked in priority order; the boron
ceiling is applied last and overrides anything decided before it. When no
rule fires, a boron PID on reactivity decides: positive output doses,
negative output filters.

Rules:
1. cold_purge     T < 300 and reactivity < 0.01      -> filter at max rate
2. iodine_dose    avg iodine > 1.2, T > 320,
                  boron < 4500 ppm                    -> dose ∝ iodine excess
3. boron_ceiling  boron > 5000 ppm                    -> filter only (always)
4. pid            otherwise                           -> sign split of PID output
"""

import logging
from dataclasses import dataclass
from typing import Protocol

from nucleares.core.params import params_from_yaml
from nucleares.core.pid import PID
from nucleares.core.state import ChemistryState

log = logging.getLogger(__name__)


class _Stepper(Protocol):
    def step(self, timestamp: int, setpoint: float, measurement: float) -> float: ...

    def reset(self, seed: float, timestamp: int | None = None) -> None: ...

@dataclass
class ChemistryParams:
    interval: int = 5
    max_rate: float = 50.0
    iodine_window: int = 10
    cold_temp: float = 300.0
    cold_reactivity: float = 0.01
    iodine_threshold: float = 1.2
    iodine_min_temp: float = 320.0
    iodine_boron_limit: float = 4500.0
    iodine_gain: float = 50.0
    boron_ceiling: float = 5000.0
    kp: float = 20.0
    ki: float = 0.5
    kd: float = 0.0

    @classmethod
    def from_yaml(cls, data: dict | None) -> "ChemistryParams":
        return params_from_yaml(cls, data)


@dataclass(frozen=True)
class ChemistryCommand:
    dose: float
    filter: float
    rule: str


class ChemistryEngine:
    def __init__(self, params: ChemistryParams | None = None) -> None:
        self.params = params or ChemistryParams()

    def make_pid(self, seed: float = 0.0) -> PID:
        p = self.params
        # Too much reactivity -> positive output -> dose boron
        return PID(p.kp, p.ki, p.kd, seed, True, (-p.max_rate, p.max_rate), reverse_acting=True)

    def split(self, output: float) -> tuple[float, float]:
        """PID output → (dose, filter); never both non-zero."""
        m = self.params.max_rate
        return max(0.0, min(m, output)), max(0.0, min(m, -output))

    def rules(
        self, *, temperature: float, reactivity: float, boron_ppm: float, iodine_avg: float
    ) -> ChemistryCommand | None:
        p = self.params
        cmd: ChemistryCommand | None = None
        if temperature < p.cold_temp and reactivity < p.cold_reactivity:
            cmd = ChemistryCommand(0.0, p.max_rate, "cold_purge")
        elif (
            iodine_avg > p.iodine_threshold
            and temperature > p.iodine_min_temp
            and boron_ppm < p.iodine_boron_limit
        ):
            dose = min(p.max_rate, (iodine_avg - p.iodine_threshold) * p.iodine_gain)
            cmd = ChemistryCommand(dose, 0.0, "iodine_dose")

        if boron_ppm > p.boron_ceiling:
            cmd = ChemistryCommand(0.0, p.max_rate, "boron_ceiling")
        return cmd

    def step(
        self,
        state: ChemistryState,
        pid: _Stepper,
        *,
        timestamp: int,
        temperature: float,
        reactivity: float,
        desired_reactivity: float,
        boron_ppm: float,
        iodine: float,
    ) -> ChemistryCommand | None:
        """Record the iodine sample; decide rates once the cooldown has elapsed.

        Returns None on cooldown ticks.
        """
        state.iodine.push(iodine)
        if state.cooldown_left > 0:
            state.cooldown_left -= 1
            return None
        state.cooldown_left = max(0, self.params.interval - 1)

        cmd = self.rules(
            temperature=temperature,
            reactivity=reactivity,
            boron_ppm=boron_ppm,
            iodine_avg=state.iodine.average(),
        )
        if cmd is None:
            dose, filt = self.split(pid.step(timestamp, desired_reactivity, reactivity))
            cmd = ChemistryCommand(dose, filt, "pid")
        else:
            # The loop restarts from zero once the rules hand back control
            pid.reset(0.0)
            if cmd.rule != state.rule:
                log.info("Boron rule %s: dose=%.2f filter=%.2f ppm=%.1f", cmd.rule, cmd.dose, cmd.filter, boron_ppm)

        state.rule = cmd.rule
        return cmd
