"""
Miscellaneous route handlers.

Endpoints:
- GET /health - health check
"""

import logging
from typing import Any

from fastapi import APIRouter

from xhair.api.shared import __version__

logger = logging.getLogger(__name__)

router = APIRouter(tags=["misc"])


@router.get("/health")
async def health() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}
