from __future__ import annotations

"""
Target planner: core temperature (plus xenon and reactivity) → desired
reactivity set-point.

Layers are applied in order, each may override the previous one:

1. base slope from the temperature band
2. xenon poison boost
3. emergency override (forces maximum requested reactivity)
4. unrecoverable-poisoning warning (log only)
"""

import logging
from dataclasses import dataclass, field

from nucleares.core.params import params_from_yaml

from .interlock import InterlockLogic

log = logging.getLogger(__name__)


def _clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


@dataclass
class PlannerParams:
    temp_min: float = 310.0
    temp_max: float = 360.0
    target_reactivity: float = 0.10
    slope_length: float = 25.0       # degrees over which the slope ramps
    max_extra_reactivity: float = 2.0
    # Negative slope above the band; flat 0 when disabled
    cooling_slope: bool = True
    # Extra heat when inside the band but below its midpoint
    low_band_bias: float = 0.05
    # Minimum request below the band: clamp((temp_min - T)/span, lo, hi)
    cold_floor_enabled: bool = True
    cold_floor_span: float = 30.0
    cold_floor_min: float = 0.05
    cold_floor_max: float = 0.2
    # Poison boost: clamp((xenon - threshold)/span, 0, 1) * gain
    poison_threshold: float = 50.0
    poison_span: float = 10.0
    poison_gain: float = 0.5
    emergency_reactivity: float = 1.0

    @classmethod
    def from_yaml(cls, data: dict | None) -> "PlannerParams":
        return params_from_yaml(cls, data)


@dataclass
class TargetPlan:
    desired_reactivity: float
    emergency: bool
    in_temp_range: bool
    notes: list[str] = field(default_factory=list)


class TargetPlanner:
    def __init__(self, params: PlannerParams | None = None, interlock: InterlockLogic | None = None) -> None:
        self.params = params or PlannerParams()
        self.interlock = interlock or InterlockLogic()

    def in_range(self, temperature: float) -> bool:
        return self.params.temp_min <= temperature <= self.params.temp_max

    def base_target(self, temperature: float) -> tuple[float, str | None]:
        p = self.params
        if temperature < p.temp_min:
            extra = _clamp((p.temp_min - temperature) / p.slope_length * p.max_extra_reactivity, 0.0, 1.0)
            desired = p.target_reactivity + extra
            if p.cold_floor_enabled:
                floor = _clamp((p.temp_min - temperature) / p.cold_floor_span, p.cold_floor_min, p.cold_floor_max)
                if floor > desired:
                    return floor, f"Enforcing reactivity floor {floor:.2f} to recover from cold"
            return desired, None

        if temperature > p.temp_max:
            if not p.cooling_slope:
                return 0.0, None
            return -_clamp((temperature - p.temp_max) / p.slope_length * p.max_extra_reactivity, 0.0, 1.0), None

        midpoint = (p.temp_min + p.temp_max) / 2.0
        if temperature < midpoint:
            return p.target_reactivity + p.low_band_bias, None
        return p.target_reactivity, None

    def poison_boost(self, xenon: float, reactivity: float) -> float:
        p = self.params
        if xenon > p.poison_threshold or reactivity < 0:
            return _clamp((xenon - p.poison_threshold) / p.poison_span, 0.0, 1.0) * p.poison_gain
        return 0.0

    def plan(self, *, temperature: float, xenon: float, reactivity: float) -> TargetPlan:
        desired, note = self.base_target(temperature)
        notes: list[str] = []
        if note:
            log.warning(note)
            notes.append(note)

        desired += self.poison_boost(xenon, reactivity)

        emergency = self.interlock.emergency(temperature=temperature, xenon=xenon, reactivity=reactivity)
        if emergency:
            desired = self.params.emergency_reactivity
            msg = f"Emergency xenon override: xenon={xenon:.1f} temp={temperature:.1f} reactivity={reactivity:.3f}"
            log.warning(msg)
            notes.append(msg)

        if self.interlock.poisoning_unrecoverable(temperature=temperature, xenon=xenon):
            msg = "Xenon poisoning likely: temp too low for suppression"
            log.warning(msg)
            notes.append(msg)

        return TargetPlan(
            desired_reactivity=desired,
            emergency=emergency,
            in_temp_range=self.in_range(temperature),
            notes=notes,
        )
