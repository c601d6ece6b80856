"""
xhair Web API

FastAPI application serving FACEIT crosshair lookups.

This package exposes:
- app: The FastAPI application (used by uvicorn, wsgi.py, server.py)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from xhair.api.shared import __version__
from xhair.core.config import get_config, setup_logging

config = get_config()
setup_logging(config.logging)
logger = logging.getLogger(__name__)

# =============================================================================
# FastAPI App Creation
# =============================================================================

app = FastAPI(
    title="xhair API",
    description="Crosshair code of a player's latest FACEIT match, read from the match demo",
    version=__version__,
)

# =============================================================================
# CORS Configuration
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.service.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["content-type"],
)

# =============================================================================
# Global Exception Handler
# =============================================================================


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """Last line of defence: never leak a traceback to the caller."""
    logger.exception(f"Unhandled exception for {request.method} {request.url.path}")
    return PlainTextResponse("Internal server error\n", status_code=500)


# =============================================================================
# Include Route Modules
# =============================================================================

from xhair.api.routes_crosshair import router as crosshair_router  # noqa: E402
from xhair.api.routes_misc import router as misc_router  # noqa: E402

# Static paths first; /{player_id} would swallow them otherwise
app.include_router(misc_router)
app.include_router(crosshair_router)
