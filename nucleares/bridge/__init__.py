"""Process variable channel and tick sampling.

Exports:
- HttpChannel: typed reads/writes against the game webserver
- wait_for_tick / take_sample: tick gating and per-tick snapshot

The orchestrator lives in `nucleares.bridge.controller` (it depends on
`nucleares.config`, which in turn needs ChannelParams from here).
"""

from .channel import ChannelParams, HttpChannel, TypedReads, wait_until_available  # re-export
from .sampling import take_sample, wait_for_tick  # re-export

__all__ = [
    "ChannelParams",
    "HttpChannel",
    "TypedReads",
    "wait_until_available",
    "take_sample",
    "wait_for_tick",
]
