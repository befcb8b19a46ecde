"""
6-max No-Limit Hold'em Rules and Constants.

This module defines the fixed table geometry and the betting vocabulary
shared by the rest of the core:

1. Seats: six canonical positions in clockwise order, starting from the
   small blind. The ring never changes during a hand.

2. Phases: Preflop < Flop < Turn < River, strictly ordered.

3. Chips: every amount is held as an integer number of units, where one
   big blind is 100 units. Callers speak in big blinds; conversion happens
   at the edge with `to_units` / `to_bb`.

4. Preflop action starts with UTG; postflop action starts with the first
   seat from the small blind that can still act.
"""

from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from enum import Enum
from typing import Iterator, Optional, Union


class Seat(Enum):
    """Table positions, in clockwise order."""
    SB = "SB"     # Small Blind
    BB = "BB"     # Big Blind
    UTG = "UTG"   # Under the gun, first to act preflop
    HJ = "HJ"     # Hijack
    CO = "CO"     # Cutoff
    BTN = "BTN"   # Button (Dealer)

    @property
    def index(self) -> int:
        return SEAT_ORDER.index(self)

    def next(self) -> Seat:
        """The seat immediately clockwise."""
        return SEAT_ORDER[(self.index + 1) % NUM_SEATS]

    def previous(self) -> Seat:
        """The seat immediately counter-clockwise."""
        return SEAT_ORDER[(self.index - 1) % NUM_SEATS]

    def clockwise_from(self) -> Iterator[Seat]:
        """
        Walk the ring once, clockwise, starting *after* this seat.

        Yields exactly NUM_SEATS seats; the last one is this seat itself.
        """
        seat = self
        for _ in range(NUM_SEATS):
            seat = seat.next()
            yield seat

    @classmethod
    def parse(cls, value: Union[str, Seat]) -> Seat:
        if isinstance(value, Seat):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown seat: {value!r}") from None


class Phase(Enum):
    """Betting rounds of a hand."""
    PREFLOP = "Preflop"
    FLOP = "Flop"
    TURN = "Turn"
    RIVER = "River"

    @property
    def index(self) -> int:
        return PHASE_ORDER.index(self)

    def next(self) -> Optional[Phase]:
        """The following street, or None after the river."""
        if self is Phase.RIVER:
            return None
        return PHASE_ORDER[self.index + 1]


class ActionType(Enum):
    """Possible player actions."""
    FOLD = "Fold"
    CHECK = "Check"
    CALL = "Call"
    BET = "Bet"
    RAISE = "Raise"

    @classmethod
    def parse(cls, value: Union[str, ActionType]) -> ActionType:
        if isinstance(value, ActionType):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        raise ValueError(f"Unknown action: {value!r}")


class HandStatus(Enum):
    """Where the hand sits in the street state machine."""
    BETTING = "betting"
    AWAITING_BOARD = "awaiting_board"
    TERMINAL = "terminal"


class CompletionType(Enum):
    """How a finished hand was decided."""
    FOLD = "fold"
    ALLIN = "allin"
    SHOWDOWN = "showdown"


SEAT_ORDER = (Seat.SB, Seat.BB, Seat.UTG, Seat.HJ, Seat.CO, Seat.BTN)
PHASE_ORDER = (Phase.PREFLOP, Phase.FLOP, Phase.TURN, Phase.RIVER)
NUM_SEATS = len(SEAT_ORDER)

PREFLOP_FIRST_SEAT = Seat.UTG
POSTFLOP_FIRST_SEAT = Seat.SB

# Chip units
UNITS_PER_BB = 100
SMALL_BLIND = 50     # 0.5 bb
BIG_BLIND = 100      # 1.0 bb
DEFAULT_STARTING_STACK = 100  # in big blinds

BBAmount = Union[int, float, str, Decimal]

_UNIT = Decimal(1) / UNITS_PER_BB


def to_units(amount: BBAmount) -> int:
    """
    Convert a big-blind amount into integer units.

    Amounts are quantised to 0.01 bb, rounding half up.

    Raises:
        ValueError: if the amount is not a finite number
    """
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise ValueError(f"Not a chip amount: {amount!r}") from None
    if not value.is_finite():
        raise ValueError(f"Not a chip amount: {amount!r}")
    return int(value.quantize(_UNIT, rounding=ROUND_HALF_UP) * UNITS_PER_BB)


def to_bb(units: int) -> float:
    """Convert integer units back to big blinds for display."""
    return units / UNITS_PER_BB


def raise_label(phase: Phase, raise_count: int, current_bet: int) -> str:
    """
    Name the next aggressive action for display.

    Preflop the blinds count as the first bet, so the first raise is the
    Open, then 3-bet, 4-bet and so on. Postflop it is Bet when nothing has
    been wagered, Raise over a single bet, Re-raise after that.
    """
    if phase is Phase.PREFLOP:
        if raise_count == 0:
            return "Open"
        return f"{raise_count + 2}-bet"

    if current_bet == 0:
        return "Bet"
    if raise_count == 1:
        return "Raise"
    return "Re-raise"
