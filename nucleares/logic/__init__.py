"""Logic layer exports for the reactor controller.

Provides a stable import surface so callers can do:

  from nucleares.logic import TargetPlanner, RodActuator, CondenserLoop, ChemistryEngine
"""

from .commands import OperationMode, parse_mode  # re-export
from .interlock import InterlockLogic, EmergencyThresholds  # re-export
from .operating import OperatingLogic  # re-export
from .planner import TargetPlanner, PlannerParams, TargetPlan  # re-export
from .rods import RodActuator, RodParams, RodCommand  # re-export
from .condenser import CondenserLoop, CondenserParams  # re-export
from .chemistry import ChemistryEngine, ChemistryParams, ChemistryCommand  # re-export

__all__ = [
    "OperationMode",
    "parse_mode",
    "InterlockLogic",
    "EmergencyThresholds",
    "OperatingLogic",
    "TargetPlanner",
    "PlannerParams",
    "TargetPlan",
    "RodActuator",
    "RodParams",
    "RodCommand",
    "CondenserLoop",
    "CondenserParams",
    "ChemistryEngine",
    "ChemistryParams",
    "ChemistryCommand",
]
