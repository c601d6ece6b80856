"""
xhair Integrations - External service integrations.

This module contains:
- faceit: FACEIT Data API client
"""

from xhair.integrations.faceit import FaceitClient, decode_envelope

__all__ = ["FaceitClient", "decode_envelope"]
