"""
Replay scanning: find a player's crosshair code in a decompressed demo.

The scanner registers a match-start handler, drives the parser over the
whole demo once, and on every match-start reads the target player's indexed
crosshair property. Entity indices are only valid for the player's current
life, so the index is re-read at each event. When several match-start
events carry a code, the last one wins.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from dataclasses import dataclass
from pathlib import Path

from xhair.core.errors import ArtifactIOError, ParseError
from xhair.core.models import CancelToken, CrosshairResult
from xhair.replay.parser import (
    EventKind,
    ParserFactory,
    ReplayDecodeError,
    ReplayEvent,
    ReplayParser,
    crosshair_property_name,
    open_demoparser2,
)

logger = logging.getLogger(__name__)


@dataclass
class ScanContext:
    """Per-scan state handed to the match-start handler."""

    steam_id: str
    parser: ReplayParser
    cancel: CancelToken | None = None
    code: str = ""
    match_starts: int = 0


def on_match_start(event: ReplayEvent, ctx: ScanContext) -> None:
    ctx.match_starts += 1
    if ctx.cancel is not None:
        ctx.cancel.raise_if_cancelled("replay scan")

    for participant in ctx.parser.participants():
        if str(participant.steam_id) != ctx.steam_id:
            continue

        prop = crosshair_property_name(participant.entity_index)
        value, present = participant.property_value(prop)
        if present and isinstance(value, str) and value:
            logger.debug(f"tick {event.tick}: {prop} = {value!r}")
            ctx.code = value


class ReplayScanner:
    """Extracts a player's crosshair code from a demo on disk."""

    def __init__(
        self,
        parser_factory: ParserFactory = open_demoparser2,
        timeout_seconds: float | None = None,
    ):
        self.parser_factory = parser_factory
        self.timeout_seconds = timeout_seconds

    def extract_crosshair(
        self, artifact_path: str | Path, steam_id: str, cancel: CancelToken | None = None
    ) -> CrosshairResult:
        """
        Scan the demo for `steam_id`'s crosshair code.

        Returns CrosshairResult(found=False) when the player never shows up
        with a non-empty code; that is not an error.

        Raises:
            ArtifactIOError: the demo file cannot be opened
            ParseError: decode fault or parse timeout
            PipelineCancelled: cancel token fired
        """
        path = Path(artifact_path)
        try:
            with open(path, "rb"):
                pass
        except OSError as e:
            raise ArtifactIOError(f"Cannot open demo {path}: {e}") from e

        if cancel is not None:
            cancel.raise_if_cancelled("replay scan")

        try:
            parser = self.parser_factory(path)
        except (ReplayDecodeError, ImportError) as e:
            raise ParseError(f"Cannot open demo for parsing: {e}") from e

        try:
            ctx = ScanContext(steam_id=steam_id, parser=parser, cancel=cancel)
            parser.register_handler(EventKind.MATCH_START, on_match_start, ctx)
            self._drive(parser)
        finally:
            parser.close()

        logger.info(
            f"Scanned {path.name}: {ctx.match_starts} match start(s), "
            f"crosshair {'found' if ctx.code else 'not found'} for {steam_id}"
        )
        return CrosshairResult(found=bool(ctx.code), code=ctx.code)

    def _drive(self, parser: ReplayParser) -> None:
        if not self.timeout_seconds:
            self._parse(parser)
            return

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="replay-parse")
        try:
            future = executor.submit(self._parse, parser)
            future.result(timeout=self.timeout_seconds)
        except FuturesTimeoutError as e:
            # Worker threads cannot be interrupted; it finishes in the background
            logger.warning(
                f"Demo parsing exceeded {self.timeout_seconds:.0f}s; "
                f"abandoning parse thread (still running: {future.running()})"
            )
            raise ParseError(f"Demo parsing exceeded {self.timeout_seconds:.0f}s") from e
        finally:
            executor.shutdown(wait=False)

    @staticmethod
    def _parse(parser: ReplayParser) -> None:
        try:
            parser.parse_to_end()
        except ReplayDecodeError as e:
            raise ParseError(f"Demo could not be decoded: {e}") from e
