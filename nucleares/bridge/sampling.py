from __future__ import annotations

"""Tick gating and per-tick snapshot sampling."""

import time
from typing import Callable

from nucleares.core.state import ProcessSample

from . import variables as pv
from .channel import TypedReads


def wait_for_tick(
    channel: TypedReads,
    last: int,
    poll_interval: float = 0.5,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Poll TIME_STAMP until it differs from ``last``; return the new value."""
    while True:
        ts = channel.read_int(pv.TIME_STAMP)
        if ts != last:
            return ts
        sleep(poll_interval)


def take_sample(channel: TypedReads, timestamp: int, bank_count: int) -> ProcessSample:
    """Read every signal once. The returned snapshot is all the logic layer sees."""
    return ProcessSample(
        timestamp=timestamp,
        temperature=channel.read_float(pv.CORE_TEMP),
        reactivity=channel.read_float(pv.CORE_REACTIVITY),
        xenon=channel.read_float(pv.CORE_XENON_CUMULATIVE),
        iodine=channel.read_float(pv.CORE_IODINE_GENERATION),
        condenser_temp=channel.read_float(pv.CONDENSER_TEMP),
        boron_ppm=channel.read_float(pv.BORON_PPM),
        mode=channel.read_mode(pv.CORE_OPERATION_MODE),
        bank_positions=tuple(channel.read_float(pv.rod_bank_actual(i)) for i in range(bank_count)),
        xenon_generation=channel.read_float(pv.CORE_XENON_GENERATION),
        iodine_cumulative=channel.read_float(pv.CORE_IODINE_CUMULATIVE),
    )
