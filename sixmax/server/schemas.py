"""
Pydantic schemas for API request/response validation.
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from sixmax.core.rules import Seat
from sixmax.core.state import HandResult, ShowdownHand


# ============= Request Schemas =============

class CreateHandRequest(BaseModel):
    """Request to start recording a new hand."""
    hero_seat: Optional[str] = Field(default=None, description="SB, BB, UTG, HJ, CO or BTN")
    starting_stack: Optional[float] = Field(default=None, gt=0, description="Stack in big blinds")
    hero_cards: List[str] = Field(default_factory=list)


class ActionRequest(BaseModel):
    """Request to record an action."""
    seat: str = Field(..., description="Acting seat")
    action: str = Field(..., description="Action type: Fold, Check, Call, Bet, Raise")
    size: Optional[float] = Field(default=None, description="Big blinds; total for Raise")


class BoardRequest(BaseModel):
    """Board cards for the staged street (opaque strings)."""
    cards: List[str] = Field(default_factory=list)


class ShowdownHandSchema(BaseModel):
    position: str
    cards: List[str] = Field(default_factory=list)
    description: Optional[str] = None


class HandResultSchema(BaseModel):
    """Outcome of a finished hand."""
    winner: str
    hero_won: bool
    pot_awarded: float = Field(ge=0)
    showdown_hands: List[ShowdownHandSchema] = Field(default_factory=list)

    def to_result(self) -> HandResult:
        return HandResult(
            winner=self.winner,
            hero_won=self.hero_won,
            pot_awarded=self.pot_awarded,
            showdown_hands=tuple(
                ShowdownHand(
                    position=Seat.parse(h.position),
                    cards=tuple(h.cards),
                    description=h.description,
                )
                for h in self.showdown_hands
            ),
        )


# ============= Response Schemas =============

class PlayerSchema(BaseModel):
    position: str
    stack: float
    contributed: float
    total_contributed: float
    folded: bool
    is_hero: bool
    acted_this_street: bool


class ActionRecordSchema(BaseModel):
    id: int
    position: str
    action: str
    bet_size: Optional[float] = None
    pot_size: float
    phase: str
    timestamp: float
    auto: bool = False


class HandStateSchema(BaseModel):
    """Snapshot a client renders from."""
    players: List[PlayerSchema]
    pot: float
    phase: str
    current_actor: Optional[str] = None
    actions: List[ActionRecordSchema]
    is_complete: bool
    current_bet: float
    waiting_for_board: bool
    status: str
    hero_seat: Optional[str] = None
    board: List[str] = Field(default_factory=list)


class CreateHandResponse(BaseModel):
    hand_id: str
    state: HandStateSchema


class ActionResultSchema(BaseModel):
    """Records committed by one command plus the resulting state."""
    emitted: List[ActionRecordSchema]
    state: HandStateSchema


class AvailableActionsSchema(BaseModel):
    seat: str
    actions: List[str]
    raise_label: str
    raise_count: int


class PositionsSchema(BaseModel):
    positions: List[str]


class PotDetailsSchema(BaseModel):
    starting_pot: float
    added_this_street: float
    total_pot: float


class ResultStatusSchema(BaseModel):
    ready_for_result: bool
    completion_type: Optional[str] = None
    result: Optional[HandResultSchema] = None


class ErrorSchema(BaseModel):
    """Error response."""
    error: str
    detail: Optional[str] = None
