"""
Hand Engine - one 6-max hand, driven through commands.

This module wraps the pure transitions in `sixmax.core.flow` in an object
that owns the current snapshot for a single hand. It handles:
- Argument parsing (seat/action names, big-blind sizes into units)
- Preflop skip entry and strict postflop turn order
- Board confirmation between streets
- Result entry once the hand is over
- Read-only views for a client to render from

The engine never decides hand strength and never stores hands; a client
renders exclusively from `get_state()` / `get_available_actions()`.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence, Union
import logging

from sixmax.core import betting, flow
from sixmax.core.player import Player
from sixmax.core.state import HandState, HandResult, ActionRecord, new_hand
from sixmax.core.rules import (
    Seat, Phase, ActionType, CompletionType, BBAmount,
    DEFAULT_STARTING_STACK, raise_label, to_units, to_bb,
)


logger = logging.getLogger(__name__)

SeatLike = Union[Seat, str]
ActionLike = Union[ActionType, str]


class HandEngine:
    """
    Betting-round state machine for a single hand.

    Usage:
        engine = HandEngine(hero_seat="BTN", starting_stack=100)
        engine.add_preflop_action("BTN", "Raise", 3)   # UTG, HJ, CO fold
        engine.add_preflop_action("BB", "Call")         # SB folds
        engine.confirm_board(["Ah", "Kd", "7c"])

        while not engine.is_hand_complete():
            state = engine.get_state()
            ...                                         # from UI
            engine.add_action(seat, action, size)

    Not thread-safe: callers must serialise operations on one instance.
    """

    def __init__(
        self,
        hero_seat: Optional[SeatLike] = None,
        starting_stack: BBAmount = DEFAULT_STARTING_STACK,
        hero_cards: Optional[Sequence[str]] = None,
    ):
        """
        Start a new hand with blinds posted.

        Args:
            hero_seat: The recording user's seat, if any
            starting_stack: Each seat's stack in big blinds
            hero_cards: Optional opaque hole-card strings for the hero
        """
        hero = Seat.parse(hero_seat) if hero_seat is not None else None
        self._state = new_hand(hero, starting_stack, hero_cards)

    @classmethod
    def from_state(cls, state: HandState) -> HandEngine:
        """Wrap an existing snapshot, e.g. one produced by `flow.replay`."""
        engine = cls.__new__(cls)
        engine._state = state
        return engine

    @property
    def state(self) -> HandState:
        """The current immutable snapshot."""
        return self._state

    # ============= Commands =============

    def add_preflop_action(
        self,
        seat: SeatLike,
        action_type: ActionLike,
        size: Optional[BBAmount] = None,
    ) -> List[ActionRecord]:
        """
        Record a preflop action, auto-folding any seats skipped over.

        Args:
            seat: Acting seat
            action_type: Fold, Check, Call, Bet or Raise
            size: Big blinds; for Raise the total to raise to

        Returns:
            Records committed, auto-folds first
        """
        command = flow.PreflopAction(
            Seat.parse(seat), ActionType.parse(action_type), _units(size)
        )
        return self._apply(command)

    def add_postflop_action(
        self,
        seat: SeatLike,
        action_type: ActionLike,
        size: Optional[BBAmount] = None,
    ) -> List[ActionRecord]:
        """Record a postflop action by the current actor."""
        command = flow.PostflopAction(
            Seat.parse(seat), ActionType.parse(action_type), _units(size)
        )
        return self._apply(command)

    def add_action(
        self,
        seat: SeatLike,
        action_type: ActionLike,
        size: Optional[BBAmount] = None,
    ) -> List[ActionRecord]:
        """Route to the preflop or postflop entry point by current phase."""
        if self._state.phase is Phase.PREFLOP:
            return self.add_preflop_action(seat, action_type, size)
        return self.add_postflop_action(seat, action_type, size)

    def confirm_board(self, cards: Optional[Sequence[str]] = None) -> None:
        """Signal that the next street's cards are on the board."""
        self._apply(flow.ConfirmBoard(tuple(cards or ())))

    def set_hand_result(self, result: HandResult) -> None:
        self._apply(flow.RecordResult(result))
        logger.debug(f"Result recorded: winner={result.winner}")

    def _apply(self, command: flow.Command) -> List[ActionRecord]:
        step = flow.apply_command(self._state, command)
        self._state = step.state
        for record in step.emitted:
            logger.debug(
                f"{record.phase.value} {record.position.value} "
                f"{record.action_type.value} pot={record.pot_size}"
            )
        return list(step.emitted)

    # ============= Views =============

    def get_state(self) -> Dict[str, Any]:
        """
        Get the current hand state.

        Returns:
            Dictionary with players, pot, phase, current_actor, actions,
            is_complete, current_bet and waiting_for_board (amounts in bb)
        """
        return self._state.to_dict()

    def get_current_actor(self) -> Optional[Seat]:
        return self._state.current_actor

    def get_phase(self) -> Phase:
        return self._state.phase

    def get_pot(self) -> float:
        return to_bb(self._state.pot)

    def get_current_bet(self) -> float:
        return to_bb(self._state.street.current_bet)

    def get_pot_details(self) -> Dict[str, float]:
        street = self._state.street
        return {
            "starting_pot": to_bb(street.starting_pot),
            "added_this_street": to_bb(street.pot - street.starting_pot),
            "total_pot": to_bb(street.pot),
        }

    def get_actions(self) -> List[ActionRecord]:
        return list(self._state.actions)

    def get_active_players(self) -> List[Player]:
        return self._state.active_players

    def can_check(self, seat: SeatLike) -> bool:
        return betting.can_check(self._state, Seat.parse(seat))

    def needs_to_call(self, seat: SeatLike) -> bool:
        return betting.needs_to_call(self._state, Seat.parse(seat))

    def get_available_actions(self, seat: SeatLike) -> List[ActionType]:
        return betting.available_actions(self._state, Seat.parse(seat))

    def get_available_positions(self) -> List[Seat]:
        return betting.available_positions(self._state)

    def get_raise_label(self) -> str:
        """Label for the next aggressive action: Open, 3-bet, Bet, Raise, ..."""
        street = self._state.street
        return raise_label(street.phase, street.raise_count, street.current_bet)

    def get_raise_count(self) -> int:
        return self._state.street.raise_count

    def is_hand_complete(self) -> bool:
        return self._state.is_complete

    def is_waiting_for_board(self) -> bool:
        return self._state.waiting_for_board

    # ============= Result Gate =============

    def get_hand_result(self) -> Optional[HandResult]:
        return self._state.result

    def is_ready_for_result(self) -> bool:
        return flow.is_ready_for_result(self._state)

    def get_completion_type(self) -> CompletionType:
        return betting.completion_type(self._state)

    def export_hand(self) -> Dict[str, Any]:
        """Hand record for a history renderer; amounts in bb."""
        state = self._state
        return {
            "actions": [a.to_dict() for a in state.actions],
            "pot_size": to_bb(state.pot),
            "current_phase": state.phase.value,
            "stack_size": to_bb(state.starting_stack),
            "hero_position": state.hero_seat.value if state.hero_seat else None,
            "hero_cards": list(state.hero_cards),
            "board": list(state.board),
            "result": state.result.to_dict() if state.result else None,
            "is_complete": state.is_complete,
            "completion_type": (
                self.get_completion_type().value if state.is_complete else None
            ),
        }

    def __repr__(self) -> str:
        state = self._state
        actor = state.current_actor.value if state.current_actor else None
        return (
            f"HandEngine(phase={state.phase.value}, status={state.status.value}, "
            f"pot={to_bb(state.pot)}, actor={actor})"
        )


def _units(size: Optional[BBAmount]) -> Optional[int]:
    if size is None:
        return None
    return to_units(size)
