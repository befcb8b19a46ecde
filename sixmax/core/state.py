"""
Immutable hand snapshot.

A HandState captures everything about one hand at one moment: the six
player ledgers, the current street context, the committed action history,
the board gate status and the externally supplied result. Transitions in
`sixmax.core.flow` take a HandState and return a new one; nothing here
mutates in place.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sixmax.core.player import Player
from sixmax.core.rules import (
    Seat, Phase, ActionType, HandStatus,
    SEAT_ORDER, SMALL_BLIND, BIG_BLIND, PREFLOP_FIRST_SEAT,
    DEFAULT_STARTING_STACK, BBAmount, to_units, to_bb,
)


@dataclass(frozen=True)
class ActionRecord:
    """One committed action. Append-only; never edited after creation."""
    id: int  # 1-based commit order within the hand
    position: Seat
    action_type: ActionType
    bet_size: Optional[int]  # chips actually moved, post-clamp; None for Fold/Check
    pot_size: int  # pot right after this action
    phase: Phase
    timestamp: float
    auto: bool = False  # auto-fold produced by the preflop skip

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "position": self.position.value,
            "action": self.action_type.value,
            "bet_size": None if self.bet_size is None else to_bb(self.bet_size),
            "pot_size": to_bb(self.pot_size),
            "phase": self.phase.value,
            "timestamp": self.timestamp,
            "auto": self.auto,
        }


@dataclass(frozen=True)
class ShowdownHand:
    """Cards a player showed. Cards are opaque strings chosen by the caller."""
    position: Seat
    cards: Tuple[str, ...] = ()
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": self.position.value,
            "cards": list(self.cards),
            "description": self.description,
        }


@dataclass(frozen=True)
class HandResult:
    """
    Outcome of a finished hand, entered by the caller.

    The engine never evaluates hands; it only checks that the hand is over
    before accepting one of these.
    """
    winner: str
    hero_won: bool
    pot_awarded: float
    showdown_hands: Tuple[ShowdownHand, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "winner": self.winner,
            "hero_won": self.hero_won,
            "pot_awarded": self.pot_awarded,
            "showdown_hands": [h.to_dict() for h in self.showdown_hands],
        }


@dataclass(frozen=True)
class Street:
    """
    Betting context for the current street.

    Invariant: pot == starting_pot + sum of every player's `contributed`.
    """
    phase: Phase
    pot: int
    starting_pot: int
    current_bet: int = 0
    last_aggressor: Optional[Seat] = None
    actions: Tuple[ActionRecord, ...] = ()
    raise_count: int = 0

    def next_street(self, phase: Phase) -> Street:
        """Fresh context for `phase`, carrying the pot forward."""
        return Street(phase=phase, pot=self.pot, starting_pot=self.pot)


@dataclass(frozen=True)
class HandState:
    """Snapshot of a whole hand."""
    players: Tuple[Player, ...]
    street: Street
    starting_stack: int
    hero_seat: Optional[Seat] = None
    status: HandStatus = HandStatus.BETTING
    current_actor: Optional[Seat] = None
    actions: Tuple[ActionRecord, ...] = ()
    board: Tuple[str, ...] = ()
    hero_cards: Tuple[str, ...] = ()
    result: Optional[HandResult] = None

    # ============= Seat Ring =============

    def player(self, seat: Seat) -> Player:
        return self.players[seat.index]

    def with_player(self, player: Player) -> HandState:
        players = list(self.players)
        players[player.position.index] = player
        return replace(self, players=tuple(players))

    def next_active_seat(self, start: Seat) -> Optional[Seat]:
        """
        First seat clockwise after `start` that can still act.

        Folded and all-in seats are skipped. The walk covers the ring once,
        so `start` itself is returned last if it is the only candidate.
        """
        for seat in start.clockwise_from():
            if self.player(seat).can_act:
                return seat
        return None

    @property
    def active_players(self) -> List[Player]:
        """Players who have not folded."""
        return [p for p in self.players if not p.folded]

    @property
    def active_count(self) -> int:
        return len(self.active_players)

    @property
    def actable_players(self) -> List[Player]:
        """Players who have not folded and still have chips."""
        return [p for p in self.players if p.can_act]

    # ============= Derived status =============

    @property
    def phase(self) -> Phase:
        return self.street.phase

    @property
    def pot(self) -> int:
        return self.street.pot

    @property
    def is_complete(self) -> bool:
        return self.status is HandStatus.TERMINAL

    @property
    def waiting_for_board(self) -> bool:
        return self.status is HandStatus.AWAITING_BOARD

    def to_dict(self) -> Dict[str, Any]:
        """Serializable view, amounts in big blinds."""
        return {
            "players": [p.to_dict() for p in self.players],
            "pot": to_bb(self.street.pot),
            "phase": self.street.phase.value,
            "current_actor": self.current_actor.value if self.current_actor else None,
            "actions": [a.to_dict() for a in self.actions],
            "is_complete": self.is_complete,
            "current_bet": to_bb(self.street.current_bet),
            "waiting_for_board": self.waiting_for_board,
            "status": self.status.value,
            "hero_seat": self.hero_seat.value if self.hero_seat else None,
            "board": list(self.board),
        }


def new_hand(
    hero_seat: Optional[Seat] = None,
    starting_stack: BBAmount = DEFAULT_STARTING_STACK,
    hero_cards: Optional[Sequence[str]] = None,
) -> HandState:
    """
    Create a hand with blinds already posted.

    Args:
        hero_seat: The recording user's seat, if any
        starting_stack: Every seat's stack before blinds, in big blinds
        hero_cards: Optional opaque hole-card strings for the hero

    Raises:
        ValueError: if the stack cannot cover the big blind
    """
    stack = to_units(starting_stack)
    if stack < BIG_BLIND:
        raise ValueError("Starting stack must be at least one big blind")

    players = []
    for seat in SEAT_ORDER:
        player = Player(position=seat, stack=stack, is_hero=seat is hero_seat)
        if seat is Seat.SB:
            player, _ = player.put_in(SMALL_BLIND)
        elif seat is Seat.BB:
            player, _ = player.put_in(BIG_BLIND)
        players.append(player)

    # Blinds are preflop contributions; the street starts from an empty pot.
    street = Street(
        phase=Phase.PREFLOP,
        pot=SMALL_BLIND + BIG_BLIND,
        starting_pot=0,
        current_bet=BIG_BLIND,
    )

    return HandState(
        players=tuple(players),
        street=street,
        starting_stack=stack,
        hero_seat=hero_seat,
        current_actor=PREFLOP_FIRST_SEAT,
        hero_cards=parse_cards(hero_cards),
    )


def parse_cards(cards: Optional[Sequence[str]]) -> Tuple[str, ...]:
    """Normalise caller-supplied card strings; contents are not validated."""
    if not cards:
        return ()
    return tuple(str(c).strip() for c in cards if str(c).strip())
