from __future__ import annotations

"""
Shared enums and parsing helpers used across logic modules.

Includes:
- OperationMode: reactor operating mode (re-exported from core)
- parse_mode(): external mode signal → OperationMode
"""

from nucleares.core.state import OperationMode
from nucleares.errors import ParseFailure

_ALIASES = {
    "SHUTDOWN": OperationMode.SHUTDOWN,
    "SHUT_DOWN": OperationMode.SHUTDOWN,
    "OFF": OperationMode.SHUTDOWN,
    "STARTUP": OperationMode.STARTUP,
    "START_UP": OperationMode.STARTUP,
    "NORMAL": OperationMode.NORMAL,
}


def parse_mode(raw: str | int) -> OperationMode:
    """Translate the raw mode signal into an OperationMode.

    Accepts enum names in any case (``"Normal"``, ``"start up"``) and the
    integer codes 0/1/2. Anything else raises ParseFailure.
    """
    if isinstance(raw, int):
        try:
            return OperationMode(raw)
        except ValueError:
            raise ParseFailure(f"unknown operation mode code {raw}") from None

    s = str(raw).strip()
    if s.lstrip("-").isdigit():
        return parse_mode(int(s))
    key = s.upper().replace(" ", "_").replace("-", "_")
    try:
        return _ALIASES[key]
    except KeyError:
        raise ParseFailure(f"unknown operation mode {raw!r}") from None
