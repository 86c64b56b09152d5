from __future__ import annotations

"""
Discrete PID controller driven by the simulation tick counter.

Time is measured in ticks (one in-game minute each), so `dt` is a plain
integer difference between successive timestamps.
"""

from dataclasses import dataclass, field

import numpy as np


@dataclass
class PID:
    """PID with clamped output and integrator clamping anti-windup.

    The integral accumulator is bounded to ``[out_min/ki, out_max/ki]`` so the
    integral contribution alone can never exceed the output range.

    ``reverse_acting`` flips the error sign (``measurement - setpoint``) for
    loops where a higher actuator value lowers the measurement, e.g. rod
    insertion against reactivity or pump speed against condenser temperature.
    """

    kp: float
    ki: float
    kd: float
    initial_output: float = 0.0
    derivative_on_measurement: bool = True
    output_limits: tuple[float, float] = (0.0, 100.0)
    reverse_acting: bool = False
    clamp_integral: bool = True
    _integral: float = field(default=0.0, init=False, repr=False)
    _last_time: int | None = field(default=None, init=False, repr=False)
    _last_error: float = field(default=0.0, init=False, repr=False)
    _last_measurement: float | None = field(default=None, init=False, repr=False)
    _last_output: float = field(default=0.0, init=False, repr=False)
    # Part of the seed the integrator cannot hold (ki == 0 or integral clamped)
    _bias: float = field(default=0.0, init=False, repr=False)

    def __post_init__(self) -> None:
        lo, hi = self.output_limits
        if lo > hi:
            raise ValueError(f"output_limits must be ordered, got {self.output_limits}")
        self.reset(self.initial_output)

    @property
    def output(self) -> float:
        return self._last_output

    @property
    def integral(self) -> float:
        return self._integral

    def _clip(self, v: float) -> float:
        lo, hi = self.output_limits
        return float(np.clip(v, lo, hi))

    def _clip_integral(self, v: float) -> float:
        if not self.clamp_integral or self.ki == 0:
            return v
        lo, hi = sorted((self.output_limits[0] / self.ki, self.output_limits[1] / self.ki))
        return float(np.clip(v, lo, hi))

    def reset(self, seed: float, timestamp: int | None = None) -> None:
        """Drop accumulated history and re-anchor on ``seed``.

        The integrator is reloaded so that a zero-error step returns ``seed``
        (bumpless restart); without an integral term the seed is kept as an
        output bias. The previous measurement is cleared, so the first
        derivative after a reset is zero.
        """
        out = self._clip(seed)
        self._integral = self._clip_integral(out / self.ki) if self.ki else 0.0
        self._bias = out - self.ki * self._integral
        self._last_output = out
        self._last_error = 0.0
        self._last_measurement = None
        self._last_time = timestamp

    def step(self, timestamp: int, setpoint: float, measurement: float) -> float:
        if self._last_time is not None and timestamp == self._last_time:
            return self._last_output

        error = setpoint - measurement
        if self.reverse_acting:
            error = -error

        dt = 0 if self._last_time is None else timestamp - self._last_time
        d_term = 0.0
        if dt > 0:
            self._integral = self._clip_integral(self._integral + error * dt)
            if self.derivative_on_measurement:
                if self._last_measurement is not None:
                    d_meas = (measurement - self._last_measurement) / dt
                    d_term = d_meas if self.reverse_acting else -d_meas
            else:
                d_term = (error - self._last_error) / dt

        u = self._bias + self.kp * error + self.ki * self._integral + self.kd * d_term
        out = self._clip(u)

        self._last_time = timestamp
        self._last_error = error
        self._last_measurement = measurement
        self._last_output = out
        return out
