"""
Shared utilities for the xhair API.

Contains the version string, identity validation and the per-request
orchestrator dependency used by the route modules.
"""

import logging
from collections.abc import Iterator

from fastapi.responses import PlainTextResponse

from xhair import __version__
from xhair.core.config import get_config
from xhair.core.utils import is_valid_player_identity
from xhair.pipeline.orchestrator import CrosshairOrchestrator

logger = logging.getLogger(__name__)

__all__ = ["__version__", "get_orchestrator", "invalid_identity_response"]


def get_orchestrator() -> Iterator[CrosshairOrchestrator]:
    """Build a fresh orchestrator for one request and close it afterwards."""
    orchestrator = CrosshairOrchestrator(get_config())
    try:
        yield orchestrator
    finally:
        orchestrator.close()


def invalid_identity_response(player_id: str) -> PlainTextResponse | None:
    """Return a 400 response if player_id is not a numeric steam identity."""
    if is_valid_player_identity(player_id):
        return None
    logger.info(f"Rejected invalid steam id {player_id!r}")
    return PlainTextResponse(
        f"Invalid steam id: {player_id} (expected a numeric Steam64 ID)\n", status_code=400
    )
