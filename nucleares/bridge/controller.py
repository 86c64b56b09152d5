from __future__ import annotations

"""
Tick orchestrator and restart supervisor.

Each tick runs the fixed sequence

    wait for TIME_STAMP → sample → plan → rods → condenser → chemistry → summary

against a single ControllerState. Channel errors abort the tick and
propagate; the Supervisor logs them, waits, and starts over from a fresh
state seeded from the live actuator positions.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from nucleares.config import ControllerConfig
from nucleares.core.history import IodineHistory, ReactivityHistory
from nucleares.core.pid import PID
from nucleares.core.state import ChemistryState, ControllerState, OperationMode, ProcessSample, RodActuationState
from nucleares.errors import ChannelError
from nucleares.logic import (
    ChemistryCommand,
    ChemistryEngine,
    CondenserLoop,
    InterlockLogic,
    OperatingLogic,
    RodActuator,
    RodCommand,
    TargetPlanner,
)

from . import variables as pv
from .channel import TypedReads, wait_until_available
from .sampling import take_sample, wait_for_tick

log = logging.getLogger(__name__)


@dataclass
class TickSummary:
    sample: ProcessSample
    mode: OperationMode
    avg_reactivity: float
    desired_reactivity: float
    emergency: bool
    in_temp_range: bool
    rods: RodCommand
    bank_cursor: int
    condenser_speed: float
    chemistry: ChemistryCommand | None
    reactivity_history: list[float] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        s = self.sample
        d: dict[str, Any] = {
            "tick": s.timestamp,
            "mode": self.mode.name,
            "temp": round(s.temperature, 1),
            "reactivity": round(s.reactivity, 3),
            "avg_reactivity": round(self.avg_reactivity, 3),
            "desired_reactivity": round(self.desired_reactivity, 3),
            "emergency": self.emergency,
            "in_temp_range": self.in_temp_range,
            "rods_action": self.rods.action,
            "rods_pos": round(self.rods.position, 1),
            "banks_written": sorted(self.rods.writes),
            "bank_cursor": self.bank_cursor,
            "xenon_generation": round(s.xenon_generation, 2),
            "iodine_generation": round(s.iodine, 2),
            "xenon_total": round(s.xenon, 2),
            "iodine_total": round(s.iodine_cumulative, 2),
            "condenser_temp": round(s.condenser_temp, 1),
            "condenser_speed": round(self.condenser_speed, 2),
            "boron_ppm": round(s.boron_ppm, 1),
            "reactivity_history": [round(r, 2) for r in self.reactivity_history],
        }
        if self.chemistry is not None:
            d["boron_rule"] = self.chemistry.rule
            d["boron_dose"] = round(self.chemistry.dose, 2)
            d["boron_filter"] = round(self.chemistry.filter, 2)
        return d


class Controller:
    def __init__(
        self,
        channel: TypedReads,
        config: ControllerConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.channel = channel
        self.config = config or ControllerConfig()
        self.sleep = sleep
        c = self.config
        self.planner = TargetPlanner(c.planner, InterlockLogic(c.emergency))
        self.rods = RodActuator(c.rods)
        self.condenser = CondenserLoop(c.condenser)
        self.chemistry = ChemistryEngine(c.chemistry)
        self.operating = OperatingLogic(c.operating)
        self.state: ControllerState | None = None
        self.bank_count = 0

    # --- startup ---
    def startup(self) -> ControllerState:
        """Wait for the webserver and build a fresh state from live positions."""
        ch = self.channel
        wait_until_available(ch, poll=self.config.supervisor.startup_poll, sleep=self.sleep)

        self.bank_count = ch.read_int(pv.RODS_QUANTITY)
        rods_pos = ch.read_float(pv.RODS_POS_ACTUAL)
        pump_speed = ch.read_float(pv.CONDENSER_PUMP_SPEED)
        banks = [ch.read_float(pv.rod_bank_actual(i)) for i in range(self.bank_count)]
        ts = ch.read_int(pv.TIME_STAMP)

        self.state = self.new_state(rods_pos, pump_speed, banks, ts)
        log.info(
            "Controller started: %d rod bank(s), rods %.1f%%, condenser pump %.1f%%, tick %d",
            self.bank_count, rods_pos, pump_speed, ts,
        )
        return self.state

    def new_state(self, rods_pos: float, pump_speed: float, banks: list[float], ts: int) -> ControllerState:
        r = self.config.rods
        cap = self.rods.bank_cap(len(banks))
        # Gains shrink with the number of banks sharing the movement
        scale = 1.0 / cap if cap else 1.0
        rods_pid = PID(
            r.kp * scale, r.ki * scale, r.kd, rods_pos, True, (0.0, 100.0), reverse_acting=True,
        )
        return ControllerState(
            rods_pid=rods_pid,
            condenser_pid=self.condenser.make_pid(pump_speed),
            boron_pid=self.chemistry.make_pid(0.0),
            rods=RodActuationState.seeded(rods_pos, banks),
            chemistry=ChemistryState(IodineHistory(self.config.chemistry.iodine_window)),
            reactivity=ReactivityHistory(),
            timestamp=ts,
            condenser_speed=pump_speed,
        )

    # --- tick ---
    def tick(self) -> TickSummary:
        if self.state is None:
            raise RuntimeError("Controller.startup() must run before tick()")
        st = self.state
        st.timestamp = wait_for_tick(self.channel, st.timestamp, self.config.supervisor.tick_poll, self.sleep)
        sample = take_sample(self.channel, st.timestamp, self.bank_count)
        return self.decide(sample)

    def reset_loops(self, timestamp: int) -> None:
        st = self.state
        st.rods_pid.reset(st.rods.last_applied, timestamp)
        st.condenser_pid.reset(st.condenser_speed, timestamp)
        st.boron_pid.reset(0.0, timestamp)
        st.rods.accumulator = 0.0

    def decide(self, sample: ProcessSample) -> TickSummary:
        """Run every decision component on ``sample`` and issue the writes."""
        st = self.state
        ts = sample.timestamp

        st.reactivity.push(sample.reactivity)
        avg = st.reactivity.average()

        mode, changed = self.operating.update(st.mode, sample.mode, sample.temperature)
        st.mode = mode
        if changed:
            self.reset_loops(ts)

        plan = self.planner.plan(temperature=sample.temperature, xenon=sample.xenon, reactivity=sample.reactivity)

        raw = st.rods_pid.step(ts, plan.desired_reactivity, sample.reactivity)
        rods = self.rods.actuate(
            st.rods,
            raw=raw,
            desired=plan.desired_reactivity,
            reactivity=sample.reactivity,
            avg_reactivity=avg,
            in_temp_range=plan.in_temp_range,
            target=self.config.planner.target_reactivity,
            bank_positions=sample.bank_positions,
            emergency=plan.emergency,
        )
        self.write_rods(rods)

        speed = self.condenser.step(st.condenser_pid, timestamp=ts, condenser_temp=sample.condenser_temp, mode=mode)
        self.channel.write(pv.CONDENSER_PUMP_SPEED, speed)
        st.condenser_speed = speed

        chem = self.chemistry.step(
            st.chemistry,
            st.boron_pid,
            timestamp=ts,
            temperature=sample.temperature,
            reactivity=sample.reactivity,
            desired_reactivity=plan.desired_reactivity,
            boron_ppm=sample.boron_ppm,
            iodine=sample.iodine,
        )
        if chem is not None:
            self.channel.write(pv.BORON_DOSAGE, chem.dose)
            self.channel.write(pv.BORON_FILTER, chem.filter)

        return TickSummary(
            sample=sample,
            mode=mode,
            avg_reactivity=avg,
            desired_reactivity=plan.desired_reactivity,
            emergency=plan.emergency,
            in_temp_range=plan.in_temp_range,
            rods=rods,
            bank_cursor=st.rods.cursor,
            condenser_speed=speed,
            chemistry=chem,
            reactivity_history=list(st.reactivity),
            notes=plan.notes,
        )

    def write_rods(self, cmd: RodCommand) -> None:
        if not cmd.writes:
            return
        if self.config.rods.all_banks_command:
            self.channel.write(pv.RODS_ALL_ORDERED, cmd.position)
            slots = self.state.rods.last_commanded
            slots[:] = [cmd.position] * len(slots)
            return
        for bank, position in cmd.writes.items():
            self.channel.write(pv.rod_bank_ordered(bank), position)

    def run(self, on_tick: Callable[[TickSummary], None] | None = None, max_ticks: int | None = None) -> None:
        n = 0
        while max_ticks is None or n < max_ticks:
            summary = self.tick()
            if on_tick is not None:
                on_tick(summary)
            n += 1


class Supervisor:
    """Restart loop around Controller: every failure starts again from startup()."""

    def __init__(
        self,
        channel: TypedReads,
        config: ControllerConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
        on_tick: Callable[[TickSummary], None] | None = None,
    ) -> None:
        self.channel = channel
        self.config = config or ControllerConfig()
        self.sleep = sleep
        self.on_tick = on_tick

    def run(self, max_restarts: int | None = None, max_ticks: int | None = None) -> int:
        """Run until ``max_ticks`` complete on one controller; return the restart count.

        With ``max_restarts`` set, the last error is re-raised once exceeded.
        """
        restarts = 0
        delay = self.config.supervisor.restart_delay
        while True:
            try:
                log.info("Starting controller...")
                controller = Controller(self.channel, self.config, self.sleep)
                controller.startup()
                controller.run(on_tick=self.on_tick, max_ticks=max_ticks)
                return restarts
            except ChannelError as exc:
                if max_restarts is not None and restarts >= max_restarts:
                    raise
                log.warning("Controller failed (%s error): %s; restarting in %.0fs", exc.kind, exc, delay)
            except Exception:
                if max_restarts is not None and restarts >= max_restarts:
                    raise
                log.exception("Controller crashed; restarting in %.0fs", delay)
            restarts += 1
            self.sleep(delay)
