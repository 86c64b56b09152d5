from __future__ import annotations

"""
Controller configuration loaded from YAML.

Format example (tools/controller.yaml):

channel:
  base_url: http://localhost:8785/
planner:
  temp_min: 310
  temp_max: 360
rods:
  emergency_step: 1.0
  all_banks_command: false
supervisor:
  restart_delay: 10

Every section is optional; missing keys keep their defaults.
"""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from nucleares.bridge.channel import ChannelParams
from nucleares.core.params import params_from_yaml
from nucleares.errors import ConfigError
from nucleares.logic.chemistry import ChemistryParams
from nucleares.logic.condenser import CondenserParams
from nucleares.logic.interlock import EmergencyThresholds, InterlockLogic
from nucleares.logic.operating import OperatingLogic
from nucleares.logic.planner import PlannerParams
from nucleares.logic.rods import RodParams

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / "tools" / "controller.yaml"


@dataclass
class SupervisorParams:
    restart_delay: float = 10.0
    tick_poll: float = 0.5
    startup_poll: float = 1.0

    @classmethod
    def from_yaml(cls, data: dict | None) -> "SupervisorParams":
        return params_from_yaml(cls, data)


@dataclass
class ControllerConfig:
    channel: ChannelParams = field(default_factory=ChannelParams)
    planner: PlannerParams = field(default_factory=PlannerParams)
    emergency: EmergencyThresholds = field(default_factory=EmergencyThresholds)
    rods: RodParams = field(default_factory=RodParams)
    condenser: CondenserParams = field(default_factory=CondenserParams)
    chemistry: ChemistryParams = field(default_factory=ChemistryParams)
    operating: OperatingLogic.Params = field(default_factory=OperatingLogic.Params)
    supervisor: SupervisorParams = field(default_factory=SupervisorParams)

    @classmethod
    def from_yaml(cls, data: dict | None) -> "ControllerConfig":
        d = data or {}
        if not isinstance(d, dict):
            raise ConfigError(f"config root must be a mapping, got {type(d).__name__}")
        unknown = sorted(set(d) - {f for f in cls.__dataclass_fields__})
        if unknown:
            raise ConfigError(f"unknown config sections: {', '.join(map(str, unknown))}")
        return cls(
            channel=ChannelParams.from_yaml(d.get("channel")),
            planner=PlannerParams.from_yaml(d.get("planner")),
            emergency=InterlockLogic.from_yaml(d.get("emergency")).th,
            rods=RodParams.from_yaml(d.get("rods")),
            condenser=CondenserParams.from_yaml(d.get("condenser")),
            chemistry=ChemistryParams.from_yaml(d.get("chemistry")),
            operating=OperatingLogic.from_yaml(d.get("operating")).params,
            supervisor=SupervisorParams.from_yaml(d.get("supervisor")),
        )

    @classmethod
    def load(cls, path: str | Path | None = None) -> "ControllerConfig":
        """Load ``path``; with no path, use tools/controller.yaml when present."""
        if path is None:
            if not DEFAULT_CONFIG_PATH.exists():
                return cls()
            path = DEFAULT_CONFIG_PATH
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise ConfigError(f"config file not found: {path}") from None
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
        return cls.from_yaml(data)
