"""
Player ledger for one seat.

Tracks, for a single hand:
- Stack (chips behind)
- Contribution on the current street
- Total contribution to the hand
- Folded / acted-this-street flags

Players are immutable; every change returns a new Player.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Dict, Tuple

from sixmax.core.rules import Seat, to_bb


@dataclass(frozen=True)
class Player:
    """
    A seat's ledger entry.

    Attributes:
        position: The seat this player occupies
        stack: Chips behind, in units
        contributed: Chips put in on the current street, in units
        total_contributed: Chips put in during the whole hand, in units
        folded: Whether the player has folded (never reverts)
        is_hero: Whether this is the recording user's seat
        acted_this_street: Whether the player made a voluntary action this street
    """
    position: Seat
    stack: int
    contributed: int = 0
    total_contributed: int = 0
    folded: bool = False
    is_hero: bool = False
    acted_this_street: bool = False

    def put_in(self, amount: int) -> Tuple[Player, int]:
        """
        Move chips from the stack into the pot.

        Args:
            amount: Chips requested, in units

        Returns:
            (updated player, chips actually moved); the move is clamped to
            the stack, so asking for more than is left puts the player all-in
        """
        actual = max(0, min(amount, self.stack))
        updated = replace(
            self,
            stack=self.stack - actual,
            contributed=self.contributed + actual,
            total_contributed=self.total_contributed + actual,
        )
        return updated, actual

    def fold(self) -> Player:
        return replace(self, folded=True, acted_this_street=True)

    def mark_acted(self) -> Player:
        return replace(self, acted_this_street=True)

    def reset_for_new_street(self) -> Player:
        """Clear per-street fields; totals and folded state carry over."""
        return replace(self, contributed=0, acted_this_street=False)

    @property
    def is_all_in(self) -> bool:
        """Still in the hand with nothing left behind."""
        return not self.folded and self.stack <= 0

    @property
    def can_act(self) -> bool:
        """In the hand and holding chips, so able to take further actions."""
        return not self.folded and self.stack > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary in big-blind units for JSON serialization."""
        return {
            "position": self.position.value,
            "stack": to_bb(self.stack),
            "contributed": to_bb(self.contributed),
            "total_contributed": to_bb(self.total_contributed),
            "folded": self.folded,
            "is_hero": self.is_hero,
            "acted_this_street": self.acted_this_street,
        }

    def __repr__(self) -> str:
        return (
            f"Player({self.position.value}, stack={self.stack}, "
            f"bet={self.contributed}, folded={self.folded})"
        )
