from __future__ import annotations

"""Condenser loop: hold condenser temperature via circulation pump speed."""

from dataclasses import dataclass

from nucleares.core.params import params_from_yaml
from nucleares.core.pid import PID
from nucleares.core.state import OperationMode


@dataclass
class CondenserParams:
    setpoint: float = 65.0
    kp: float = 0.00005
    ki: float = 0.05
    kd: float = 0.01
    min_speed: float = 1.0
    max_speed: float = 100.0

    @classmethod
    def from_yaml(cls, data: dict | None) -> "CondenserParams":
        return params_from_yaml(cls, data)


class CondenserLoop:
    def __init__(self, params: CondenserParams | None = None) -> None:
        self.params = params or CondenserParams()

    def make_pid(self, seed: float) -> PID:
        p = self.params
        # Hotter condenser needs more pump speed
        return PID(p.kp, p.ki, p.kd, seed, True, (0.0, p.max_speed), reverse_acting=True)

    def step(self, pid: PID, *, timestamp: int, condenser_temp: float, mode: OperationMode) -> float:
        speed = pid.step(timestamp, self.params.setpoint, condenser_temp)
        # Keep water circulating whenever the reactor is not shut down
        if mode is not OperationMode.SHUTDOWN and speed < self.params.min_speed:
            speed = self.params.min_speed
        return speed
