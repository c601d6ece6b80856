"""
Utility helpers for xhair.

This module provides:
- Stage timing (PerformanceMonitor)
- Identity validation
- Unique temp-file naming for replay artifacts
"""

import logging
import re
import time
import uuid

logger = logging.getLogger(__name__)

PLAYER_IDENTITY_PATTERN = re.compile(r"^\d{1,20}$")
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_-]")


class PerformanceMonitor:
    """
    Context manager for monitoring performance of code blocks.

    Usage:
        with PerformanceMonitor("downloading demo"):
            acquire(...)
    """

    def __init__(self, operation_name: str, log_level: int = logging.INFO):
        self.operation_name = operation_name
        self.log_level = log_level
        self.start_time: float | None = None
        self.elapsed: float = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = time.perf_counter() - (self.start_time or 0)
        if exc_type is not None:
            logger.error(f"{self.operation_name} failed after {self.elapsed:.3f}s: {exc_val}")
        else:
            logger.log(self.log_level, f"{self.operation_name} completed in {self.elapsed:.3f}s")
        return False


def is_valid_player_identity(identity: str) -> bool:
    """Steam-style identities are plain decimal numbers."""
    return bool(identity) and bool(PLAYER_IDENTITY_PATTERN.match(identity))


def unique_artifact_name(match_id: str, suffix: str = ".dem") -> str:
    """
    Build a collision-free file name for a match's demo.

    The match ID keeps the name readable; the uuid4 suffix keeps concurrent
    requests for the same match apart.
    """
    stem = _UNSAFE_FILENAME_CHARS.sub("_", match_id)[:64] or "match"
    return f"{stem}_{uuid.uuid4().hex}{suffix}"
