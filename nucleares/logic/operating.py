from __future__ import annotations

"""
Operating mode tracking.

Derives the effective mode from the external mode signal and core
temperature and reports transitions so the orchestrator can reset its
controllers. No channel I/O happens here; the latched mode lives in
ControllerState.
"""

import logging
from dataclasses import dataclass

from .commands import OperationMode

log = logging.getLogger(__name__)


class OperatingLogic:
    @dataclass
    class Params:
        # External NORMAL below this core temperature is treated as STARTUP
        normal_min_temp: float = 250.0

    def __init__(self, params: "OperatingLogic.Params" | None = None) -> None:
        self.params = params or OperatingLogic.Params()

    @classmethod
    def from_yaml(cls, data: dict | None) -> "OperatingLogic":
        d = data or {}
        p = OperatingLogic.Params(
            normal_min_temp=float(d.get("normal_min_temp", 250.0)),
        )
        return cls(p)

    def derive(self, signal: OperationMode, temperature: float) -> OperationMode:
        if signal is OperationMode.NORMAL and temperature < self.params.normal_min_temp:
            return OperationMode.STARTUP
        return signal

    def update(
        self, prev: OperationMode | None, signal: OperationMode, temperature: float
    ) -> tuple[OperationMode, bool]:
        """Return ``(mode, changed)`` relative to the previously latched mode.

        With no previous mode (first tick after startup) nothing has changed.
        """
        mode = self.derive(signal, temperature)
        changed = prev is not None and prev is not mode
        if changed:
            log.info("operation mode %s -> %s", prev.name, mode.name)
        return mode, changed
