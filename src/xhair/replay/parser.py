"""
Replay parser interface and its demoparser2 implementation.

The scanner only talks to the ReplayParser protocol: register handlers for a
small closed set of events, drive the parser to the end of the demo, and query
the live participants while a handler runs. Handlers receive an explicit
context object instead of closing over request state.

Demoparser2ReplayParser adapts demoparser2's query-style API to this event
model: it collects the ticks of the requested events, snapshots the players
alive at each tick, and replays the events in tick order on the calling
thread.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

import pandas as pd

if TYPE_CHECKING:
    from demoparser2 import DemoParser as Demoparser2

try:
    from demoparser2 import DemoParser as Demoparser2

    DEMOPARSER2_AVAILABLE = True
except ImportError:
    DEMOPARSER2_AVAILABLE = False

logger = logging.getLogger(__name__)

CROSSHAIR_CODES_PROPERTY = "m_szCrosshairCodes"


def crosshair_property_name(entity_index: int) -> str:
    """Indexed property holding the crosshair code for an entity slot, e.g. m_szCrosshairCodes.007."""
    return f"{CROSSHAIR_CODES_PROPERTY}.{entity_index:03d}"


class ReplayDecodeError(Exception):
    """Raised by parser implementations when the demo stream cannot be decoded."""


class EventKind(Enum):
    MATCH_START = "match_start"


@dataclass(frozen=True)
class ReplayEvent:
    kind: EventKind
    tick: int


class Participant(Protocol):
    steam_id: int
    entity_index: int

    def property_value(self, name: str) -> tuple[Any, bool]: ...


Handler = Callable[[ReplayEvent, Any], None]


class ReplayParser(Protocol):
    def register_handler(self, kind: EventKind, handler: Handler, context: Any) -> None: ...

    def parse_to_end(self) -> None: ...

    def participants(self) -> list[Participant]: ...

    def close(self) -> None: ...


ParserFactory = Callable[[Path], ReplayParser]


@dataclass
class EntityParticipant:
    """A live player at one point in the demo, backed by its entity's properties."""

    steam_id: int
    entity_index: int
    name: str = ""
    properties: dict[str, Any] = field(default_factory=dict)

    def property_value(self, name: str) -> tuple[Any, bool]:
        if name not in self.properties:
            return None, False
        return self.properties[name], True


# =============================================================================
# demoparser2 adapter
# =============================================================================


class Demoparser2ReplayParser:
    """ReplayParser over demoparser2. One instance per demo, single pass."""

    EVENT_SOURCES: dict[EventKind, tuple[str, ...]] = {
        # Warmup end and live start can both announce the match
        EventKind.MATCH_START: ("begin_new_match", "round_announce_match_start"),
    }
    TICK_PROPS = ["crosshair_code"]

    def __init__(self, demo_path: str | Path):
        if not DEMOPARSER2_AVAILABLE:
            raise ImportError("demoparser2 is required. Install with: pip install demoparser2")
        self.demo_path = Path(demo_path)
        self._parser: Demoparser2 | None = self._call(Demoparser2, str(self.demo_path))
        self._handlers: dict[EventKind, list[tuple[Handler, Any]]] = {}
        self._current: list[EntityParticipant] = []
        self._parsed = False

    @staticmethod
    def _call(func, *args, **kwargs):
        """Run a demoparser2 call, turning its faults into ReplayDecodeError."""
        try:
            return func(*args, **kwargs)
        except Exception as e:
            raise ReplayDecodeError(f"{type(e).__name__}: {e}") from e

    def register_handler(self, kind: EventKind, handler: Handler, context: Any) -> None:
        self._handlers.setdefault(kind, []).append((handler, context))

    def participants(self) -> list[EntityParticipant]:
        return list(self._current)

    def parse_to_end(self) -> None:
        if self._parser is None:
            raise ReplayDecodeError("Parser is closed")
        if self._parsed:
            raise RuntimeError("parse_to_end() can only run once per parser")
        self._parsed = True

        self._call(self._parser.parse_header)
        events = self._collect_events()
        if not events:
            logger.debug(f"No handled events in {self.demo_path.name}")
            return

        snapshots = self._snapshot_ticks(sorted({e.tick for e in events}))
        for event in events:
            self._current = snapshots.get(event.tick, [])
            for handler, context in self._handlers.get(event.kind, []):
                handler(event, context)

    def _collect_events(self) -> list[ReplayEvent]:
        wanted = {
            source: kind
            for kind in self._handlers
            for source in self.EVENT_SOURCES.get(kind, ())
        }
        if not wanted:
            return []

        parsed = self._call(self._parser.parse_events, list(wanted)) or []
        seen: set[tuple[EventKind, int]] = set()
        for event_name, df in parsed:
            kind = wanted.get(event_name)
            if kind is None or df is None or df.empty or "tick" not in df.columns:
                continue
            for tick in df["tick"].dropna():
                seen.add((kind, int(tick)))

        events = [ReplayEvent(kind=kind, tick=tick) for kind, tick in seen]
        events.sort(key=lambda e: (e.tick, e.kind.value))
        return events

    def _snapshot_ticks(self, ticks: list[int]) -> dict[int, list[EntityParticipant]]:
        df = self._call(self._parser.parse_ticks, self.TICK_PROPS, ticks=ticks)
        if df is None or df.empty:
            return {}

        snapshots: dict[int, list[EntityParticipant]] = {}
        for tick, group in df.groupby("tick", sort=True):
            snapshots[int(tick)] = self._participants_from_rows(group)
        return snapshots

    @staticmethod
    def _participants_from_rows(rows: pd.DataFrame) -> list[EntityParticipant]:
        participants = []
        # Player controllers occupy entity slots 1..N in row order
        for slot, (_, row) in enumerate(rows.iterrows(), start=1):
            steam_id = row.get("steamid")
            if steam_id is None or pd.isna(steam_id) or int(steam_id) == 0:
                continue

            entity_index = slot
            if "entity_id" in rows.columns and not pd.isna(row["entity_id"]):
                entity_index = int(row["entity_id"])

            properties = {}
            code = row.get("crosshair_code")
            if code is not None and not pd.isna(code):
                properties[crosshair_property_name(entity_index)] = str(code)

            participants.append(
                EntityParticipant(
                    steam_id=int(steam_id),
                    entity_index=entity_index,
                    name=str(row.get("name", "") or ""),
                    properties=properties,
                )
            )
        return participants

    def close(self) -> None:
        self._parser = None
        self._current = []


def open_demoparser2(demo_path: Path) -> Demoparser2ReplayParser:
    return Demoparser2ReplayParser(demo_path)
