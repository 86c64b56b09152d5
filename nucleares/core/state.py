from __future__ import annotations

"""
Per-tick process snapshot and cross-tick controller state.

`ProcessSample` is populated once per tick by the bridge and passed read-only
to the logic layer. `ControllerState` owns everything that survives between
ticks; it is rebuilt from scratch on every controller restart.
"""

from dataclasses import dataclass, field
from enum import IntEnum

from .history import IodineHistory, ReactivityHistory
from .pid import PID


class OperationMode(IntEnum):
    SHUTDOWN = 0
    STARTUP = 1
    NORMAL = 2


@dataclass(frozen=True)
class ProcessSample:
    timestamp: int
    temperature: float
    reactivity: float
    xenon: float
    iodine: float
    condenser_temp: float
    boron_ppm: float
    mode: OperationMode
    bank_positions: tuple[float, ...]
    # Display-only signals
    xenon_generation: float = 0.0
    iodine_cumulative: float = 0.0

    @property
    def bank_count(self) -> int:
        return len(self.bank_positions)


@dataclass
class RodActuationState:
    last_applied: float
    accumulator: float = 0.0
    cursor: int = 0
    last_commanded: list[float | None] = field(default_factory=list)

    @classmethod
    def seeded(cls, position: float, bank_positions: list[float] | tuple[float, ...]) -> "RodActuationState":
        return cls(last_applied=float(position), last_commanded=[float(p) for p in bank_positions])


@dataclass
class ChemistryState:
    iodine: IodineHistory
    cooldown_left: int = 0
    rule: str = "none"


@dataclass
class ControllerState:
    rods_pid: PID
    condenser_pid: PID
    boron_pid: PID
    rods: RodActuationState
    chemistry: ChemistryState
    reactivity: ReactivityHistory = field(default_factory=ReactivityHistory)
    mode: OperationMode | None = None
    timestamp: int = 0
    condenser_speed: float = 0.0
