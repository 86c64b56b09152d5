from __future__ import annotations

"""
HTTP process variable channel for the Nucleares webserver.

Reads:  GET  {base_url}?variable=NAME           -> value as text
Writes: POST {base_url}?variable=NAME&value=V   -> 2xx on success

All failures surface as ChannelError subclasses; nothing is retried here.
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable

import requests

from nucleares.core.params import params_from_yaml
from nucleares.core.state import OperationMode
from nucleares.errors import ChannelTimeout, ChannelUnavailable, ParseFailure, WriteRejected
from nucleares.logic.commands import parse_mode

from . import variables as pv

log = logging.getLogger(__name__)


@dataclass
class ChannelParams:
    base_url: str = "http://localhost:8785/"
    timeout: float = 2.0
    # The game formats and parses numbers with a decimal comma
    decimal_comma: bool = True
    decimals: int = 2

    @classmethod
    def from_yaml(cls, data: dict | None) -> "ChannelParams":
        return params_from_yaml(cls, data)


def parse_float(name: str, raw: str) -> float:
    try:
        v = float(raw.strip().replace(",", "."))
    except ValueError:
        raise ParseFailure(f"{name}: not a number: {raw!r}") from None
    if not math.isfinite(v):
        raise ParseFailure(f"{name}: not a finite number: {raw!r}")
    return v


def parse_int(name: str, raw: str) -> int:
    v = parse_float(name, raw)
    if not v.is_integer():
        raise ParseFailure(f"{name}: not an integer: {raw!r}")
    return int(v)


class TypedReads:
    """Typed accessors layered over ``read_raw``."""

    def read_raw(self, name: str) -> str:  # pragma: no cover - overridden
        raise NotImplementedError

    def read_float(self, name: str) -> float:
        return parse_float(name, self.read_raw(name))

    def read_int(self, name: str) -> int:
        return parse_int(name, self.read_raw(name))

    def read_str(self, name: str) -> str:
        return self.read_raw(name).strip()

    def read_mode(self, name: str = pv.CORE_OPERATION_MODE) -> OperationMode:
        raw = self.read_str(name)
        try:
            return parse_mode(raw)
        except ParseFailure as exc:
            raise ParseFailure(f"{name}: {exc}") from None


class HttpChannel(TypedReads):
    def __init__(self, params: ChannelParams | None = None, session: requests.Session | None = None) -> None:
        self.params = params or ChannelParams()
        self.session = session or requests.Session()

    def format_value(self, value: float | int | str) -> str:
        if isinstance(value, bool):
            return str(value).lower()
        if isinstance(value, float):
            s = f"{value:.{self.params.decimals}f}"
            return s.replace(".", ",") if self.params.decimal_comma else s
        return str(value)

    def read_raw(self, name: str) -> str:
        try:
            resp = self.session.get(
                self.params.base_url, params={"variable": name}, timeout=self.params.timeout
            )
        except requests.Timeout as exc:
            raise ChannelTimeout(f"read {name}: no answer within {self.params.timeout}s") from exc
        except requests.RequestException as exc:
            raise ChannelUnavailable(f"read {name}: {exc}") from exc
        if not resp.ok:
            raise ChannelUnavailable(f"read {name}: HTTP {resp.status_code}")
        return resp.text

    def write(self, name: str, value: float | int | str) -> None:
        s = self.format_value(value)
        try:
            resp = self.session.post(
                self.params.base_url, params={"variable": name, "value": s}, timeout=self.params.timeout
            )
        except requests.Timeout as exc:
            raise ChannelTimeout(f"write {name}={s}: no answer within {self.params.timeout}s") from exc
        except requests.RequestException as exc:
            raise ChannelUnavailable(f"write {name}={s}: {exc}") from exc
        if not resp.ok:
            raise WriteRejected(f"Non success status code {resp.status_code} for setting variable {name} to {s}")
        log.debug("set %s=%s", name, s)


def wait_until_available(
    channel: TypedReads,
    poll: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
    attempts: int | None = None,
) -> None:
    """Block until CORE_TEMP answers. Gives up after ``attempts`` if given."""
    n = 0
    while True:
        try:
            channel.read_raw(pv.CORE_TEMP)
            return
        except (ChannelTimeout, ChannelUnavailable) as exc:
            n += 1
            log.warning("Waiting for webserver to be online... (%s)", exc)
            if attempts is not None and n >= attempts:
                raise
            sleep(poll)
