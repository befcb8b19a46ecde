"""
Betting contract: recording actions and deciding when a street is over.

This module holds the two pieces of pure betting logic:
- record_action: validates one action against the street and the seat's
  ledger, moves the chips and appends the history entry
- is_street_complete: the completion oracle used by the turn scheduler

Plus the read-only queries a client renders from (legal actions, seats that
may act, how the hand was decided).

Nothing here mutates; every function returns a new HandState.
"""

from __future__ import annotations
from dataclasses import replace
from typing import List, Optional, Tuple

from sixmax.core.exceptions import IllegalActionError, InvalidAmountError
from sixmax.core.state import HandState, ActionRecord
from sixmax.core.rules import (
    Seat, Phase, ActionType, HandStatus, CompletionType,
)


def can_check(state: HandState, seat: Seat) -> bool:
    """The seat's contribution already matches the bet."""
    player = state.player(seat)
    if player.folded:
        return False
    return player.contributed >= state.street.current_bet


def needs_to_call(state: HandState, seat: Seat) -> bool:
    player = state.player(seat)
    if player.folded:
        return False
    return player.contributed < state.street.current_bet


def record_action(
    state: HandState,
    seat: Seat,
    action_type: ActionType,
    size: Optional[int] = None,
    *,
    timestamp: float,
    auto: bool = False,
) -> Tuple[HandState, ActionRecord]:
    """
    Validate and apply one action for `seat`.

    Turn order is the caller's concern; this only checks the betting
    contract.

    Args:
        state: Hand before the action
        seat: Acting seat
        action_type: FOLD, CHECK, CALL, BET or RAISE
        size: Units for BET (amount) and RAISE (total target contribution)
        timestamp: Wall-clock time stamped on the record
        auto: Skip auto-fold; allowed to fold even when a check is possible

    Returns:
        (new state, the committed record)

    Raises:
        IllegalActionError: folded seat, no chips, fold when a check is
            available, bet into an existing bet
        InvalidAmountError: nothing to call, check facing a bet, bad size
    """
    player = state.player(seat)
    street = state.street

    if player.folded:
        raise IllegalActionError(f"{seat.value} has already folded")
    if not auto and player.stack <= 0:
        raise IllegalActionError(f"{seat.value} is all-in and cannot act")

    current_bet = street.current_bet
    last_aggressor = street.last_aggressor
    raise_count = street.raise_count
    added = 0
    bet_size: Optional[int] = None

    if action_type is ActionType.FOLD:
        if not auto and can_check(state, seat):
            raise IllegalActionError("Cannot fold when you can check")
        player = player.fold()

    elif action_type is ActionType.CHECK:
        if player.contributed < current_bet:
            raise InvalidAmountError(
                f"Cannot check, must call {current_bet - player.contributed} units"
            )
        player = player.mark_acted()

    elif action_type is ActionType.CALL:
        to_call = current_bet - player.contributed
        if to_call <= 0:
            raise InvalidAmountError("Nothing to call, use Check")
        player, added = player.put_in(to_call)
        if added <= 0:
            raise InvalidAmountError("Cannot call with zero stack")
        player = player.mark_acted()
        bet_size = added

    elif action_type is ActionType.BET:
        if current_bet > 0:
            raise IllegalActionError("Cannot bet when there is already a bet, use Raise")
        if size is None or size <= 0:
            raise InvalidAmountError("Bet size must be positive")
        player, added = player.put_in(size)
        player = player.mark_acted()
        bet_size = added
        current_bet = player.contributed
        last_aggressor = seat
        raise_count += 1

    elif action_type is ActionType.RAISE:
        if size is None or size <= 0:
            raise InvalidAmountError("Raise size must be positive")

        # Size is the total contribution wanted, capped at everything the seat has.
        max_total = player.stack + player.contributed
        target = min(size, max_total)
        increment = target - player.contributed
        if increment <= 0:
            raise InvalidAmountError("Raise amount must be greater than current contribution")
        if target <= current_bet and target < max_total:
            raise InvalidAmountError(f"Raise must go above the current bet of {current_bet} units")

        player, added = player.put_in(increment)
        player = player.mark_acted()
        bet_size = added
        # An all-in for no more than the bet only calls; it does not reopen.
        if player.contributed > current_bet:
            current_bet = player.contributed
            last_aggressor = seat
            raise_count += 1

    else:
        raise IllegalActionError(f"Unknown action: {action_type}")

    pot = street.pot + added
    record = ActionRecord(
        id=len(state.actions) + 1,
        position=seat,
        action_type=action_type,
        bet_size=bet_size,
        pot_size=pot,
        phase=street.phase,
        timestamp=timestamp,
        auto=auto,
    )
    street = replace(
        street,
        pot=pot,
        current_bet=current_bet,
        last_aggressor=last_aggressor,
        raise_count=raise_count,
        actions=street.actions + (record,),
    )
    state = replace(
        state.with_player(player),
        street=street,
        actions=state.actions + (record,),
    )
    return state, record


def is_street_complete(state: HandState, next_seat: Optional[Seat]) -> bool:
    """
    Decide whether betting on the current street is finished.

    Args:
        state: Hand after the latest action
        next_seat: The seat that would act next if the street continued

    Returns:
        True when no further action is owed on this street
    """
    street = state.street
    active = state.active_players

    if len(active) <= 1:
        return True

    actable = [p for p in active if p.can_act]
    if not actable:
        return True

    if not all(p.acted_this_street for p in actable):
        return False

    # All-in players count as matched whatever they put in.
    if not all(p.contributed >= street.current_bet or p.is_all_in for p in active):
        return False

    if street.phase is Phase.PREFLOP and street.raise_count == 0:
        big_blind = state.player(Seat.BB)
        if big_blind.folded:
            return True
        # BB option: limped pots wait for the big blind.
        return big_blind.acted_this_street or big_blind.is_all_in

    if street.last_aggressor is None:
        return street.current_bet == 0

    if state.player(street.last_aggressor).is_all_in:
        return True
    return next_seat is street.last_aggressor


# ============= Queries =============

def available_actions(state: HandState, seat: Seat) -> List[ActionType]:
    """
    Actions `seat` may take right now.

    Preflop any live seat may be named (the skip shortcut folds the seats in
    between); postflop only the current actor has options.
    """
    if state.status is not HandStatus.BETTING:
        return []

    player = state.player(seat)
    if not player.can_act:
        return []
    if state.phase is not Phase.PREFLOP and seat is not state.current_actor:
        return []

    if can_check(state, seat):
        if state.phase is not Phase.PREFLOP and state.street.current_bet == 0:
            return [ActionType.CHECK, ActionType.BET]
        return [ActionType.CHECK, ActionType.RAISE]

    return [ActionType.FOLD, ActionType.CALL, ActionType.RAISE]


def available_positions(state: HandState) -> List[Seat]:
    """Seats a client may offer as the next actor."""
    if state.status is not HandStatus.BETTING or state.current_actor is None:
        return []

    if state.phase is not Phase.PREFLOP:
        return [state.current_actor]

    # Current actor first, then the rest of the ring clockwise.
    ring = [state.current_actor] + list(state.current_actor.clockwise_from())[:-1]
    return [seat for seat in ring if state.player(seat).can_act]


def completion_type(state: HandState) -> CompletionType:
    active = state.active_players
    if len(active) == 1:
        return CompletionType.FOLD
    if not any(p.can_act for p in active):
        return CompletionType.ALLIN
    return CompletionType.SHOWDOWN
