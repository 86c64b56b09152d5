#!/usr/bin/env python3
"""
Run the reactor controller against the Nucleares webserver.

Example:
  python -m nucleares.cli.run --url http://localhost:8785/ --verbose
"""

from __future__ import annotations

import argparse
import logging
import sys

from nucleares.bridge.channel import HttpChannel
from nucleares.bridge.controller import Supervisor, TickSummary
from nucleares.config import ControllerConfig
from nucleares.errors import ConfigError


def parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Closed-loop controller for the Nucleares reactor")
    p.add_argument("--config", type=str, default=None, help="YAML config path (default: tools/controller.yaml)")
    p.add_argument("--url", type=str, default=None, help="Webserver base URL")
    p.add_argument("--poll", type=float, default=None, help="TIME_STAMP poll interval (s)")
    p.add_argument("--restart-delay", type=float, default=None, help="Delay before restarting after an error (s)")
    p.add_argument("--quiet", action="store_true", help="Do not print the per-tick summary")
    p.add_argument("--verbose", action="store_true", help="Debug logging (every channel write)")
    return p.parse_args(argv)


def print_summary(s: TickSummary) -> None:
    d = s.as_dict()
    print("-" * 66)
    print(
        f"Tick {d['tick']} [{d['mode']}] | Temp: {d['temp']:.1f} °C | Reactivity: {d['reactivity']:.2f} "
        f"(avg {d['avg_reactivity']:.2f}, want {d['desired_reactivity']:.2f})"
    )
    print(f"Rods: {d['rods_pos']:.1f}% ({d['rods_action']}, banks {d['banks_written']}) | Bank: {d['bank_cursor']}")
    print(f"Xenon Generation: {d['xenon_generation']:.2f} | Iodine Generation: {d['iodine_generation']:.2f}")
    print(f"Xenon Total: {d['xenon_total']:.2f} | Iodine Total: {d['iodine_total']:.2f}")
    print(f"Condenser Temp: {d['condenser_temp']:.1f} °C | Condenser Speed: {d['condenser_speed']:.2f}%")
    line = f"Boron: {d['boron_ppm']:.1f} ppm"
    if "boron_rule" in d:
        line += f" | {d['boron_rule']}: dose {d['boron_dose']:.2f} filter {d['boron_filter']:.2f}"
    print(line)
    print(f"In temp range: {d['in_temp_range']} | Emergency: {d['emergency']}")
    print(f"Reactivity history: {d['reactivity_history']}")
    for note in s.notes:
        print(f"Note: {note}")


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    # urllib3 logs every request at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def build_config(args: argparse.Namespace) -> ControllerConfig:
    cfg = ControllerConfig.load(args.config)
    if args.url:
        cfg.channel.base_url = args.url
    if args.poll is not None:
        cfg.supervisor.tick_poll = args.poll
    if args.restart_delay is not None:
        cfg.supervisor.restart_delay = args.restart_delay
    return cfg


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging(args.verbose)
    try:
        cfg = build_config(args)
    except ConfigError as exc:
        print(f"[controller] {exc}", file=sys.stderr)
        return 2

    sup = Supervisor(HttpChannel(cfg.channel), cfg, on_tick=None if args.quiet else print_summary)
    try:
        sup.run()
    except KeyboardInterrupt:
        print("\n[controller] stopped by user")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
