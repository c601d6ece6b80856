"""
Crosshair Pipeline Orchestrator - resolve, acquire, scan for one request.

Stages run strictly in order (Resolving -> Acquiring -> Scanning -> Done),
and any failure ends the run in Failed with a public message and a status
code. The demo file is released as soon as it exists, whichever later stage
fails. run() never raises.
"""

from __future__ import annotations

import logging

from xhair.core.config import XhairConfig, get_config
from xhair.core.errors import (
    InactivePlayerError,
    NoEligibleMatchError,
    PipelineCancelled,
    XhairError,
)
from xhair.core.models import CancelToken, CrosshairResult, PipelineOutcome, PipelineStage
from xhair.core.utils import PerformanceMonitor
from xhair.integrations.faceit import FaceitClient
from xhair.pipeline.resolver import MatchResolver
from xhair.replay.acquirer import ReplayAcquirer
from xhair.replay.scanner import ReplayScanner

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Internal error while looking up crosshair"


class StageFailure(Exception):
    """A component error paired with the message shown to the caller."""

    def __init__(self, public_message: str, cause: XhairError):
        super().__init__(public_message)
        self.public_message = public_message
        self.cause = cause


class CrosshairOrchestrator:
    """
    Orchestrates one crosshair lookup.

    Each request should get its own orchestrator (and so its own HTTP
    sessions and parser); only the configuration is shared.
    """

    def __init__(
        self,
        config: XhairConfig | None = None,
        *,
        client: FaceitClient | None = None,
        acquirer: ReplayAcquirer | None = None,
        scanner: ReplayScanner | None = None,
    ):
        self.config = config or get_config()
        self.client = client or FaceitClient(self.config.faceit)
        self.resolver = MatchResolver(self.client)
        self.acquirer = acquirer or ReplayAcquirer(self.config.replay)
        self.scanner = scanner or ReplayScanner(
            timeout_seconds=self.config.replay.parse_timeout_seconds
        )

    def run(self, steam_id: str, cancel: CancelToken | None = None) -> PipelineOutcome:
        """Execute the pipeline and return a tagged outcome. Never raises."""
        outcome = PipelineOutcome(steam_id=steam_id, stage=PipelineStage.RESOLVING)
        try:
            outcome.result = self._execute(outcome, cancel)
            outcome.stage = PipelineStage.DONE
            logger.info(
                f"Crosshair lookup for {steam_id} done "
                f"({'found' if outcome.result.found else 'not found'})"
            )
        except StageFailure as e:
            self._fail(outcome, e.public_message, e.cause.status_code)
            logger.warning(f"{outcome.message} [{type(e.cause).__name__}: {e.cause.message}]")
        except PipelineCancelled as e:
            self._fail(outcome, e.message, e.status_code)
            logger.info(f"Crosshair lookup for {steam_id} cancelled at {outcome.failed_at.value}")
        except Exception:
            logger.exception(f"Unexpected failure in crosshair lookup for {steam_id}")
            self._fail(outcome, GENERIC_FAILURE_MESSAGE, 500)
        return outcome

    def _fail(self, outcome: PipelineOutcome, message: str, status_code: int) -> None:
        outcome.message = message
        outcome.status_code = 500 if self.config.service.uniform_error_status else status_code
        outcome.failed_at = outcome.stage
        outcome.stage = PipelineStage.FAILED

    def _execute(self, outcome: PipelineOutcome, cancel: CancelToken | None) -> CrosshairResult:
        steam_id = outcome.steam_id

        # Resolving
        player = self._step(
            f"Resolving player {steam_id}",
            self.resolver.resolve_player,
            steam_id,
            failure=lambda e: (
                f"User {steam_id} has not played for at least 6 months"
                if isinstance(e, InactivePlayerError)
                else f"Could not find user with steam id: {steam_id}"
            ),
        )
        match_id = self._step(
            "Selecting latest match",
            self.resolver.select_latest_eligible_match,
            player,
            failure=lambda e: (
                f"User {steam_id} has no eligible (non-championship) match"
                if isinstance(e, NoEligibleMatchError)
                else f"Error getting user {steam_id} latest match"
            ),
        )
        outcome.match_id = match_id
        match = self._step(
            f"Resolving match {match_id}",
            self.resolver.resolve_match,
            match_id,
            failure=lambda e: f"Error getting user {steam_id} latest match",
        )
        self._checkpoint(cancel, "resolution")

        # Acquiring
        outcome.stage = PipelineStage.ACQUIRING
        artifact = self._step(
            f"Acquiring demo for match {match_id}",
            self.acquirer.acquire,
            match.match_id,
            match.demo_url,
            cancel,
            failure=lambda e: f"Error processing demo for match {match_id}: {e.message}",
        )

        # Scanning
        with artifact:
            self._checkpoint(cancel, "acquisition")
            outcome.stage = PipelineStage.SCANNING
            return self._step(
                f"Scanning demo for match {match_id}",
                self.scanner.extract_crosshair,
                artifact.path,
                steam_id,
                cancel,
                failure=lambda e: f"Error processing demo for match {match_id}: {e.message}",
            )

    @staticmethod
    def _step(label, func, *args, failure):
        try:
            with PerformanceMonitor(label):
                return func(*args)
        except PipelineCancelled:
            raise
        except XhairError as e:
            raise StageFailure(failure(e), e) from e

    @staticmethod
    def _checkpoint(cancel: CancelToken | None, after: str) -> None:
        if cancel is not None:
            cancel.raise_if_cancelled(f"after {after}")

    def close(self) -> None:
        self.client.close()
        self.acquirer.close()

    def __enter__(self) -> CrosshairOrchestrator:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def lookup_crosshair(
    steam_id: str, config: XhairConfig | None = None, cancel: CancelToken | None = None
) -> PipelineOutcome:
    """
    Convenience function for a one-off lookup.

    Args:
        steam_id: Steam64 identity of the player
        config: Configuration (defaults to the global config)
        cancel: Optional cancellation token

    Returns:
        PipelineOutcome for the run
    """
    with CrosshairOrchestrator(config) as orchestrator:
        return orchestrator.run(steam_id, cancel)
