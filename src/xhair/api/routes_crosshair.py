"""
Crosshair route handlers.

Endpoints:
- GET /{player_id} - crosshair code of the player's latest FACEIT match, as text/plain
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from xhair.api.shared import get_orchestrator, invalid_identity_response
from xhair.pipeline.orchestrator import CrosshairOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["crosshair"])


# Plain def: FastAPI runs it on the threadpool, one worker per request,
# so the blocking download and parse never stall the event loop.
@router.get("/{player_id}", response_class=PlainTextResponse)
def get_crosshair(
    player_id: str,
    orchestrator: CrosshairOrchestrator = Depends(get_orchestrator),
) -> PlainTextResponse:
    """
    Look up a player's crosshair code.

    Returns the code followed by a newline; an empty line means the demo was
    parsed but held no crosshair code for the player. Failures return an
    error status with a plain-text message.
    """
    invalid = invalid_identity_response(player_id)
    if invalid is not None:
        return invalid

    outcome = orchestrator.run(player_id)
    return PlainTextResponse(outcome.body, status_code=outcome.status_code)
