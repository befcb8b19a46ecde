"""
Hand flow: commands, turn order, street transitions and the result gate.

The hand is driven by applying commands to an immutable HandState:

    state = new_hand(hero_seat=Seat.BTN)
    step = apply_command(state, PreflopAction(Seat.BTN, ActionType.RAISE, 300))
    state = step.state          # the new snapshot
    step.emitted                # records committed by this command

Street state machine:

    BETTING(phase) --street complete, phase < River--> AWAITING_BOARD(phase+1)
    AWAITING_BOARD --ConfirmBoard--> BETTING(phase)
    AWAITING_BOARD --ConfirmBoard, nobody can act--> AWAITING_BOARD(phase+1)
    BETTING(River) --street complete--> TERMINAL
    any --one player left--> TERMINAL

A command that fails raises before producing a new state, so the previous
snapshot is still the current one.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple, Union
import time

from sixmax.core.betting import record_action, is_street_complete
from sixmax.core.exceptions import (
    IllegalActionError, PhaseMismatchError, StateError,
)
from sixmax.core.rules import (
    Seat, Phase, ActionType, HandStatus, NUM_SEATS, POSTFLOP_FIRST_SEAT,
)
from sixmax.core.state import HandState, HandResult, ActionRecord, parse_cards


# ============= Commands =============

@dataclass(frozen=True)
class PreflopAction:
    """Preflop action; naming a seat out of turn folds the seats before it."""
    seat: Seat
    action_type: ActionType
    size: Optional[int] = None  # units
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class PostflopAction:
    """Postflop action by exactly the current actor."""
    seat: Seat
    action_type: ActionType
    size: Optional[int] = None  # units
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class ConfirmBoard:
    """The caller has dealt the next street's board cards."""
    cards: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RecordResult:
    result: HandResult


Command = Union[PreflopAction, PostflopAction, ConfirmBoard, RecordResult]


@dataclass(frozen=True)
class Transition:
    """Outcome of applying one command."""
    state: HandState
    emitted: Tuple[ActionRecord, ...] = ()


def apply_command(state: HandState, command: Command) -> Transition:
    """
    Apply a command to a hand.

    Raises:
        HandError subclasses, before any state is produced
    """
    if isinstance(command, PreflopAction):
        return preflop_action(
            state, command.seat, command.action_type, command.size, command.timestamp
        )
    if isinstance(command, PostflopAction):
        return postflop_action(
            state, command.seat, command.action_type, command.size, command.timestamp
        )
    if isinstance(command, ConfirmBoard):
        return Transition(confirm_board(state, command.cards))
    if isinstance(command, RecordResult):
        return Transition(record_result(state, command.result))
    raise TypeError(f"Unknown command: {command!r}")


def replay(state: HandState, commands: Sequence[Command]) -> HandState:
    """Apply commands in order and return the final snapshot."""
    for command in commands:
        state = apply_command(state, command).state
    return state


# ============= Actions =============

def preflop_action(
    state: HandState,
    seat: Seat,
    action_type: ActionType,
    size: Optional[int] = None,
    timestamp: Optional[float] = None,
) -> Transition:
    """
    Record a preflop action, skipping ahead if `seat` is not next to act.

    Every live seat from the current actor up to (not including) `seat` is
    folded first. Those folds are allowed even where a check was possible.
    """
    if state.phase is not Phase.PREFLOP:
        raise PhaseMismatchError(
            f"Preflop action requested during the {state.phase.value}"
        )
    if state.status is HandStatus.TERMINAL or state.current_actor is None:
        raise IllegalActionError("Hand is complete")

    target = state.player(seat)
    if target.folded:
        raise IllegalActionError(f"{seat.value} has already folded")
    if not target.can_act:
        raise IllegalActionError(f"{seat.value} is all-in and cannot act")

    if timestamp is None:
        timestamp = time.time()

    emitted: List[ActionRecord] = []
    if seat is not state.current_actor:
        state, folds = _auto_fold_between(state, state.current_actor, seat, timestamp)
        emitted.extend(folds)

    state = replace(state, current_actor=seat)
    state, record = record_action(state, seat, action_type, size, timestamp=timestamp)
    emitted.append(record)

    return Transition(advance_turn(state), tuple(emitted))


def postflop_action(
    state: HandState,
    seat: Seat,
    action_type: ActionType,
    size: Optional[int] = None,
    timestamp: Optional[float] = None,
) -> Transition:
    """Record a postflop action; only the current actor may act."""
    if state.phase is Phase.PREFLOP:
        raise PhaseMismatchError("Use the preflop action for preflop")
    if seat is not state.current_actor:
        current = state.current_actor.value if state.current_actor else None
        raise IllegalActionError(
            f"It's not {seat.value}'s turn. Current actor: {current}"
        )

    if timestamp is None:
        timestamp = time.time()

    state, record = record_action(state, seat, action_type, size, timestamp=timestamp)
    return Transition(advance_turn(state), (record,))


def _auto_fold_between(
    state: HandState,
    start: Seat,
    end: Seat,
    timestamp: float,
) -> Tuple[HandState, List[ActionRecord]]:
    """Fold `start` and each live seat after it, stopping before `end`."""
    folds: List[ActionRecord] = []
    seat = start

    for _ in range(NUM_SEATS):
        if seat is end:
            break
        if not state.player(seat).folded:
            state, record = record_action(
                state, seat, ActionType.FOLD, timestamp=timestamp, auto=True
            )
            folds.append(record)

        following = state.next_active_seat(seat)
        if following is None or following is seat:
            break
        seat = following

    return state, folds


# ============= Turn Scheduler / Street Transition Gate =============

def advance_turn(state: HandState) -> HandState:
    """Move to the next actor, or close the street if betting is done."""
    if state.active_count <= 1:
        return _terminal(state)

    following = state.next_active_seat(state.current_actor)

    if is_street_complete(state, following):
        if state.phase is Phase.RIVER:
            return _terminal(state)
        return stage_next_street(state)

    return replace(state, current_actor=following)


def stage_next_street(state: HandState) -> HandState:
    """Reset per-street betting and wait for the next board."""
    players = tuple(p.reset_for_new_street() for p in state.players)
    street = state.street.next_street(state.phase.next())
    return replace(
        state,
        players=players,
        street=street,
        status=HandStatus.AWAITING_BOARD,
        current_actor=None,
    )


def first_postflop_actor(state: HandState) -> Optional[Seat]:
    """Small blind if able to act, otherwise the next seat that can."""
    if state.player(POSTFLOP_FIRST_SEAT).can_act:
        return POSTFLOP_FIRST_SEAT
    return state.next_active_seat(POSTFLOP_FIRST_SEAT)


def confirm_board(state: HandState, cards: Sequence[str] = ()) -> HandState:
    """
    Open betting on the staged street.

    A no-op unless the hand is waiting for a board. When nobody can act
    (everyone left is all-in) the following street is staged straight away,
    so each street still takes exactly one confirmation; on the river that
    confirmation ends the hand.
    """
    if state.status is not HandStatus.AWAITING_BOARD:
        return state

    state = replace(state, board=state.board + parse_cards(cards))
    actor = first_postflop_actor(state)

    if actor is not None:
        return replace(state, status=HandStatus.BETTING, current_actor=actor)
    if state.phase is Phase.RIVER:
        return _terminal(state)
    return stage_next_street(state)


def _terminal(state: HandState) -> HandState:
    return replace(state, status=HandStatus.TERMINAL, current_actor=None)


# ============= Result Gate =============

def is_ready_for_result(state: HandState) -> bool:
    return state.is_complete and state.result is None


def record_result(state: HandState, result: HandResult) -> HandState:
    """
    Attach the externally decided outcome.

    Raises:
        StateError: hand still running, or a result was already recorded
    """
    if not state.is_complete:
        raise StateError("Cannot set result for incomplete hand")
    if state.result is not None:
        raise StateError("Hand result already recorded")
    return replace(state, result=result)
