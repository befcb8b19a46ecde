"""
sixmax - 6-max No-Limit Hold'em Hand Recorder

A single-hand betting-round engine with:
- Pure Python state machine (immutable snapshots, command transitions)
- FastAPI + WebSocket server for hand entry clients

Usage:
    from sixmax.core import HandEngine, Seat, ActionType
"""

__version__ = "0.1.0"

from sixmax.core.rules import Seat, Phase, ActionType
from sixmax.core.state import HandState, HandResult, new_hand
from sixmax.core.game import HandEngine

__all__ = [
    "Seat",
    "Phase",
    "ActionType",
    "HandState",
    "HandResult",
    "new_hand",
    "HandEngine",
    "__version__",
]
