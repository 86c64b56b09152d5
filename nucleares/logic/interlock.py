from __future__ import annotations

"""
Emergency evaluation for xenon-poisoned cold cores.

The emergency flag is derived fresh every tick; nothing here is persisted.
"""

from dataclasses import dataclass


@dataclass
class EmergencyThresholds:
    xenon_high: float = 60.0
    temp_low: float = 300.0
    reactivity_max: float = 0.0
    # Poisoning deemed unrecoverable (warning only)
    unrecoverable_temp: float = 100.0
    unrecoverable_xenon: float = 200.0


class InterlockLogic:
    def __init__(self, th: EmergencyThresholds | None = None) -> None:
        self.th = th or EmergencyThresholds()

    @classmethod
    def from_yaml(cls, data: dict | None) -> "InterlockLogic":
        d = data or {}
        th = EmergencyThresholds(
            xenon_high=float(d.get("xenon_high", 60.0)),
            temp_low=float(d.get("temp_low", 300.0)),
            reactivity_max=float(d.get("reactivity_max", 0.0)),
            unrecoverable_temp=float(d.get("unrecoverable_temp", 100.0)),
            unrecoverable_xenon=float(d.get("unrecoverable_xenon", 200.0)),
        )
        return cls(th)

    def emergency(self, *, temperature: float, xenon: float, reactivity: float) -> bool:
        """xenon > 60 and temperature < 300 and reactivity < 0 (defaults)."""
        return (
            xenon > self.th.xenon_high
            and temperature < self.th.temp_low
            and reactivity < self.th.reactivity_max
        )

    def poisoning_unrecoverable(self, *, temperature: float, xenon: float) -> bool:
        return temperature < self.th.unrecoverable_temp and xenon > self.th.unrecoverable_xenon
