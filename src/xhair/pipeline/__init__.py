"""
xhair Pipeline - Crosshair lookup orchestration.

This module handles the complete lookup pipeline:
- Match resolution (MatchResolver)
- Demo acquisition and scanning, composed by CrosshairOrchestrator
"""

from xhair.pipeline.orchestrator import CrosshairOrchestrator, lookup_crosshair
from xhair.pipeline.resolver import MatchResolver

__all__ = ["CrosshairOrchestrator", "MatchResolver", "lookup_crosshair"]
