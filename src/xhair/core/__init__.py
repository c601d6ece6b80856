"""
xhair Core - Foundation modules shared by every pipeline stage.

This module contains:
- config: Application configuration management
- errors: Failure taxonomy with HTTP status mapping
- models: Data contracts between stages
- utils: Timing, validation and naming helpers
"""

from xhair.core.errors import (
    ArtifactIOError,
    AuthError,
    DecompressError,
    DownloadError,
    InactivePlayerError,
    NetworkError,
    NoEligibleMatchError,
    NotFoundError,
    ParseError,
    PipelineCancelled,
    UpstreamError,
    XhairError,
)
from xhair.core.models import (
    CancelToken,
    CrosshairResult,
    MatchDetail,
    MatchSummary,
    PipelineOutcome,
    PipelineStage,
    PlatformPlayer,
    ReplayArtifact,
)

__all__ = [
    # Errors
    "XhairError",
    "NotFoundError",
    "InactivePlayerError",
    "NoEligibleMatchError",
    "UpstreamError",
    "NetworkError",
    "AuthError",
    "DownloadError",
    "DecompressError",
    "ArtifactIOError",
    "ParseError",
    "PipelineCancelled",
    # Models
    "CancelToken",
    "CrosshairResult",
    "MatchDetail",
    "MatchSummary",
    "PipelineOutcome",
    "PipelineStage",
    "PlatformPlayer",
    "ReplayArtifact",
]
