from __future__ import annotations

from typing import Any

import pytest

from nucleares.bridge import variables as pv
from nucleares.bridge.channel import TypedReads


class FakeChannel(TypedReads):
    """In-memory process variable store.

    ``ticks`` feeds successive TIME_STAMP reads (the last value repeats once
    exhausted). ``failures`` maps a variable name to exceptions raised on the
    next reads, one per read.
    """

    def __init__(self, values: dict[str, Any] | None = None, ticks: list[int] | None = None) -> None:
        self.values: dict[str, Any] = dict(values or {})
        self.ticks = list(ticks or [])
        self.failures: dict[str, list[Exception]] = {}
        self.writes: list[tuple[str, Any]] = []
        self.reads: list[str] = []

    def read_raw(self, name: str) -> str:
        self.reads.append(name)
        pending = self.failures.get(name)
        if pending:
            raise pending.pop(0)
        if name == pv.TIME_STAMP and self.ticks:
            v = self.ticks.pop(0) if len(self.ticks) > 1 else self.ticks[0]
            self.values[name] = v
            return str(v)
        return str(self.values[name])

    def write(self, name: str, value: Any) -> None:
        self.writes.append((name, value))
        self.values[name] = value

    def written(self, prefix: str = "") -> dict[str, Any]:
        return {n: v for n, v in self.writes if n.startswith(prefix)}


def plant_values(banks: tuple[float, ...] = (55.0, 55.0, 55.0, 55.0), **over: Any) -> dict[str, Any]:
    v: dict[str, Any] = {
        pv.TIME_STAMP: 100,
        pv.CORE_TEMP: 330.0,
        pv.CORE_REACTIVITY: 0.1,
        pv.CORE_XENON_CUMULATIVE: 10.0,
        pv.CORE_XENON_GENERATION: 0.5,
        pv.CORE_IODINE_CUMULATIVE: 20.0,
        pv.CORE_IODINE_GENERATION: 0.8,
        pv.CORE_OPERATION_MODE: "NORMAL",
        pv.CONDENSER_TEMP: 65.0,
        pv.CONDENSER_PUMP_SPEED: 30.0,
        pv.BORON_PPM: 3000.0,
        pv.RODS_QUANTITY: len(banks),
        pv.RODS_POS_ACTUAL: 55.0,
    }
    for i, p in enumerate(banks):
        v[pv.rod_bank_actual(i)] = p
    v.update(over)
    return v


@pytest.fixture
def plant() -> FakeChannel:
    return FakeChannel(plant_values())


@pytest.fixture
def no_sleep():
    calls: list[float] = []
    return calls, calls.append
