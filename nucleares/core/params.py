from __future__ import annotations

"""Helpers for building parameter dataclasses from YAML sections."""

from dataclasses import MISSING, fields
from typing import Any, TypeVar

from nucleares.errors import ConfigError

P = TypeVar("P")


def params_from_yaml(cls: type[P], data: dict | None) -> P:
    """Build ``cls`` from a YAML mapping, keeping defaults for absent keys.

    Values are coerced to the type of the field default; unknown keys raise
    ConfigError so typos in the config file do not go unnoticed.
    """
    d = data or {}
    if not isinstance(d, dict):
        raise ConfigError(f"{cls.__name__}: expected a mapping, got {type(d).__name__}")

    known = {f.name: f for f in fields(cls) if f.init}
    unknown = sorted(set(d) - set(known))
    if unknown:
        raise ConfigError(f"{cls.__name__}: unknown keys {', '.join(map(str, unknown))}")

    kw: dict[str, Any] = {}
    for name, value in d.items():
        f = known[name]
        default = f.default if f.default is not MISSING else None
        try:
            if isinstance(default, bool):
                if not isinstance(value, bool):
                    raise TypeError(f"expected true/false, got {value!r}")
                kw[name] = value
            elif isinstance(default, (int, float)):
                kw[name] = type(default)(value)
            elif isinstance(default, tuple):
                kw[name] = tuple(float(v) for v in value)
            else:
                kw[name] = value
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"{cls.__name__}.{name}: {exc}") from exc
    return cls(**kw)
