"""
xhair - FACEIT crosshair lookup

Finds a player's latest non-championship FACEIT match, downloads its demo and
reads the player's crosshair code from the match-start game state.

Usage:
    from xhair import lookup_crosshair

    outcome = lookup_crosshair("76561198000000000")
    if outcome.ok:
        print(outcome.result.code)
"""

__version__ = "0.1.0"
__author__ = "xhair Contributors"


def __getattr__(name):
    """Lazy import so `import xhair` stays cheap."""
    if name == "lookup_crosshair":
        from xhair.pipeline.orchestrator import lookup_crosshair
        return lookup_crosshair
    elif name == "CrosshairOrchestrator":
        from xhair.pipeline.orchestrator import CrosshairOrchestrator
        return CrosshairOrchestrator
    elif name == "ReplayScanner":
        from xhair.replay.scanner import ReplayScanner
        return ReplayScanner
    elif name == "FaceitClient":
        from xhair.integrations.faceit import FaceitClient
        return FaceitClient
    raise AttributeError(f"module 'xhair' has no attribute '{name}'")


__all__ = [
    "__version__",
    "lookup_crosshair",
    "CrosshairOrchestrator",
    "ReplayScanner",
    "FaceitClient",
]
