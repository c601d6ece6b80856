"""
Data contracts passed between pipeline stages.

Domain records are plain dataclasses. FACEIT wire envelopes are pydantic
models so a malformed body fails validation instead of silently producing
empty data.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from xhair.core.errors import PipelineCancelled

logger = logging.getLogger(__name__)

CHAMPIONSHIP = "championship"


# =============================================================================
# FACEIT Envelopes
# =============================================================================


class FaceitError(BaseModel):
    """One entry of the `errors` list FACEIT embeds in its responses."""

    message: str = ""
    code: str | None = ""
    http_status: int | None = 0


class FaceitEnvelope(BaseModel):
    errors: list[FaceitError] = Field(default_factory=list)


class PlayerEnvelope(FaceitEnvelope):
    player_id: str = ""
    nickname: str | None = ""


class HistoryItem(BaseModel):
    match_id: str = ""
    competition_type: str | None = ""


class HistoryEnvelope(FaceitEnvelope):
    items: list[HistoryItem] = Field(default_factory=list)


class MatchEnvelope(FaceitEnvelope):
    match_id: str = ""
    demo_url: list[str] | None = Field(default_factory=list)


# =============================================================================
# Domain Records
# =============================================================================


@dataclass(frozen=True)
class MatchSummary:
    """One match history entry, most recent first."""

    match_id: str
    competition_type: str = ""

    @property
    def is_championship(self) -> bool:
        return self.competition_type == CHAMPIONSHIP


@dataclass
class PlatformPlayer:
    """A FACEIT player resolved from a steam identity."""

    player_id: str
    nickname: str = ""
    history: list[MatchSummary] = field(default_factory=list)


@dataclass(frozen=True)
class MatchDetail:
    """Match metadata needed to fetch the demo."""

    match_id: str
    demo_urls: list[str] = field(default_factory=list)

    @property
    def demo_url(self) -> str | None:
        return self.demo_urls[0] if self.demo_urls else None


@dataclass
class ReplayArtifact:
    """
    A decompressed demo on local disk.

    The acquirer creates it; whoever holds it must release it. Used as a
    context manager the file is removed on exit, whatever happened inside.
    """

    match_id: str
    path: Path
    size_bytes: int = 0

    def release(self) -> None:
        """Delete the backing file. Safe to call more than once."""
        try:
            self.path.unlink(missing_ok=True)
            logger.debug(f"Released replay artifact {self.path}")
        except OSError as e:
            logger.warning(f"Failed to delete replay artifact {self.path}: {e}")

    def __enter__(self) -> ReplayArtifact:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
        return False


@dataclass(frozen=True)
class CrosshairResult:
    found: bool = False
    code: str = ""


# =============================================================================
# Pipeline State
# =============================================================================


class PipelineStage(Enum):
    RESOLVING = "resolving"
    ACQUIRING = "acquiring"
    SCANNING = "scanning"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PipelineOutcome:
    """Tagged result of one pipeline run."""

    steam_id: str
    stage: PipelineStage
    result: CrosshairResult | None = None
    message: str = ""
    status_code: int = 200
    match_id: str | None = None
    failed_at: PipelineStage | None = None

    @property
    def ok(self) -> bool:
        return self.stage is PipelineStage.DONE

    @property
    def body(self) -> str:
        """Plain-text response body: the code, or the error message, plus newline."""
        if self.ok and self.result is not None:
            return f"{self.result.code}\n"
        return f"{self.message}\n"


class CancelToken:
    """Best-effort cancellation flag checked between blocking steps."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, where: str = "") -> None:
        if self._event.is_set():
            suffix = f" during {where}" if where else ""
            raise PipelineCancelled(f"Request cancelled{suffix}")
