#!/usr/bin/env python3
"""
Simple scenario runner against the Nucleares webserver.

Plan YAML example:

steps:
  - set: { var: CONDENSER_CIRCULATION_PUMP_ORDERED_SPEED, value: 40 }
  - wait: { var: CORE_TEMP, min: 310, timeout: 600 }
  - sleep: 5
  - assert: { var: CORE_STATE_CRITICALITY, min: -0.2, max: 0.3 }
"""

from __future__ import annotations

import argparse
import sys
import time
from typing import Any, Callable, Dict

import yaml

from nucleares.bridge.channel import ChannelParams, HttpChannel, TypedReads


def load_plan(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _check(val: float, cond: Dict[str, Any]) -> bool:
    ok = True
    if "equals" in cond:
        ok = ok and (int(val) == int(cond["equals"]))
    if "min" in cond:
        ok = ok and (val >= float(cond["min"]))
    if "max" in cond:
        ok = ok and (val <= float(cond["max"]))
    return ok


def run_step(
    channel: TypedReads,
    step: Dict[str, Any],
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> None:
    if "set" in step:
        s = step["set"]
        channel.write(s["var"], s["value"])
        return
    if "sleep" in step:
        sleep(float(step["sleep"]) or 0.0)
        return
    if "wait" in step:
        w = step["wait"]
        name = w["var"]
        timeout = float(w.get("timeout", 10.0))
        t0 = clock()
        while True:
            val = channel.read_float(name)
            if _check(val, w):
                return
            if (clock() - t0) > timeout:
                raise TimeoutError(f"wait timeout for {name}, last={val}")
            sleep(float(w.get("poll", 0.5)))
    if "assert" in step:
        a = step["assert"]
        val = channel.read_float(a["var"])
        if not _check(val, a):
            raise AssertionError(f"assert failed for {a['var']}: {val} not within {a}")
        return
    raise ValueError(f"Unknown step: {step}")


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Run a Nucleares scenario plan")
    ap.add_argument("--plan", required=True, help="YAML plan path")
    ap.add_argument("--url", default=ChannelParams.base_url, help="Webserver base URL")
    args = ap.parse_args(sys.argv[1:] if argv is None else argv)
    plan = load_plan(args.plan)
    channel = HttpChannel(ChannelParams(base_url=args.url))

    steps = plan.get("steps") or []
    print(f"[scenario] steps={len(steps)} plan={args.plan}")
    for i, step in enumerate(steps, 1):
        print(f"[scenario] step {i}: {list(step.keys())[0]}")
        run_step(channel, step)
    print("[scenario] completed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
