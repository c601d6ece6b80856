"""
xhair Replay - Demo acquisition and scanning.

This module contains:
- acquirer: Download + streaming gunzip into a unique temp file
- parser: ReplayParser protocol and the demoparser2 adapter
- scanner: Match-start driven crosshair extraction
"""

from xhair.replay.acquirer import ReplayAcquirer
from xhair.replay.parser import (
    EventKind,
    ReplayDecodeError,
    ReplayEvent,
    crosshair_property_name,
)
from xhair.replay.scanner import ReplayScanner

__all__ = [
    "EventKind",
    "ReplayAcquirer",
    "ReplayDecodeError",
    "ReplayEvent",
    "ReplayScanner",
    "crosshair_property_name",
]
