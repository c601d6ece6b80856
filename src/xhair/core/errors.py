"""
Error taxonomy for the crosshair pipeline.

Every component raises a subclass of XhairError. The orchestrator catches
them at its boundary and turns them into a (message, status_code) pair, so
nothing below the API layer needs to know about HTTP.
"""

from __future__ import annotations


class XhairError(Exception):
    """Base class for every expected pipeline failure."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(XhairError):
    """Identity, match or demo could not be resolved."""

    status_code = 404


class InactivePlayerError(NotFoundError):
    """Player exists but has no matches inside the lookback window."""


class NoEligibleMatchError(XhairError):
    """Match history holds no non-championship entry."""

    status_code = 404


class UpstreamError(XhairError):
    """FACEIT answered, but with an error envelope or an unreadable body."""

    status_code = 502


class NetworkError(XhairError):
    """Transport failure or non-2xx response from FACEIT."""

    status_code = 502

    def __init__(self, message: str, http_status: int | None = None):
        super().__init__(message)
        self.http_status = http_status


class AuthError(NetworkError):
    """Missing or rejected FACEIT credential."""


class DownloadError(XhairError):
    """Demo download failed at the transport level."""

    status_code = 502


class DecompressError(XhairError):
    """Demo payload is not a valid gzip stream."""

    status_code = 502


class ArtifactIOError(XhairError):
    """Local I/O failure while writing or opening the replay artifact."""

    status_code = 500


class ParseError(XhairError):
    """The replay parser hit a decode fault or ran out of time."""

    status_code = 500


class PipelineCancelled(XhairError):
    """The run was cancelled through its CancelToken."""

    status_code = 503
