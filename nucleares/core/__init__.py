"""Core numeric primitives and state containers for the reactor controller.

Exports:
- PID: tick-based PID with clamped output and anti-windup
- SampleHistory / ReactivityHistory / IodineHistory: bounded FIFO averages
- ProcessSample, ControllerState and friends: per-tick snapshot and cross-tick state
"""

from .pid import PID  # re-export
from .history import SampleHistory, ReactivityHistory, IodineHistory  # re-export
from .state import (  # re-export
    OperationMode,
    ProcessSample,
    RodActuationState,
    ChemistryState,
    ControllerState,
)

__all__ = [
    "PID",
    "SampleHistory",
    "ReactivityHistory",
    "IodineHistory",
    "OperationMode",
    "ProcessSample",
    "RodActuationState",
    "ChemistryState",
    "ControllerState",
]
