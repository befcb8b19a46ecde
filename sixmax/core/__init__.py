"""
sixmax Core - Pure Python 6-max Hold'em Betting Logic

This module contains the hand state machine without any network dependencies.
"""

from sixmax.core.rules import Seat, Phase, ActionType, HandStatus, CompletionType
from sixmax.core.player import Player
from sixmax.core.state import HandState, HandResult, ShowdownHand, ActionRecord, new_hand
from sixmax.core.flow import (
    PreflopAction, PostflopAction, ConfirmBoard, RecordResult,
    Transition, apply_command, replay,
)
from sixmax.core.game import HandEngine
from sixmax.core.exceptions import (
    HandError, IllegalActionError, InvalidAmountError,
    PhaseMismatchError, StateError,
)

__all__ = [
    "Seat",
    "Phase",
    "ActionType",
    "HandStatus",
    "CompletionType",
    "Player",
    "HandState",
    "HandResult",
    "ShowdownHand",
    "ActionRecord",
    "new_hand",
    "PreflopAction",
    "PostflopAction",
    "ConfirmBoard",
    "RecordResult",
    "Transition",
    "apply_command",
    "replay",
    "HandEngine",
    "HandError",
    "IllegalActionError",
    "InvalidAmountError",
    "PhaseMismatchError",
    "StateError",
]
