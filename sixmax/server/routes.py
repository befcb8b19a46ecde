"""
HTTP API Routes for sixmax.

These routes handle hand creation, command entry and state queries.
Live updates for several watching clients are handled via WebSocket.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from sixmax.core.rules import Seat
from sixmax.server.schemas import (
    CreateHandRequest, CreateHandResponse, ActionRequest, ActionResultSchema,
    BoardRequest, HandStateSchema, AvailableActionsSchema, PositionsSchema,
    PotDetailsSchema, HandResultSchema, ResultStatusSchema, ErrorSchema,
)
from sixmax.server.websocket import HandManager, get_hand_manager

router = APIRouter(
    responses={
        404: {"model": ErrorSchema, "description": "Unknown hand"},
        409: {"model": ErrorSchema, "description": "Wrong phase or hand state"},
    },
)


def _parse_seat(value: str) -> Seat:
    try:
        return Seat.parse(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@router.post("/hands", response_model=CreateHandResponse)
async def create_hand(
    req: CreateHandRequest,
    manager: HandManager = Depends(get_hand_manager),
) -> Dict[str, Any]:
    """
    Start a new hand.

    Blinds are posted immediately; UTG is first to act.
    """
    try:
        hand_id = await manager.create_hand(
            hero_seat=req.hero_seat,
            starting_stack=req.starting_stack,
            hero_cards=req.hero_cards,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    state = await manager.run(hand_id, lambda engine: engine.get_state())
    return {"hand_id": hand_id, "state": state}


@router.get("/hands/{hand_id}", response_model=HandStateSchema)
async def get_hand(hand_id: str, manager: HandManager = Depends(get_hand_manager)) -> Dict[str, Any]:
    return await manager.run(hand_id, lambda engine: engine.get_state())


@router.delete("/hands/{hand_id}")
async def delete_hand(hand_id: str, manager: HandManager = Depends(get_hand_manager)) -> Dict[str, Any]:
    await manager.delete_hand(hand_id)
    return {"success": True, "message": f"Hand {hand_id} deleted"}


@router.post("/hands/{hand_id}/actions", response_model=ActionResultSchema)
async def add_action(
    hand_id: str,
    req: ActionRequest,
    manager: HandManager = Depends(get_hand_manager),
) -> Dict[str, Any]:
    """
    Record an action.

    Preflop, naming a seat other than the current actor folds every seat
    in between. Postflop, only the current actor may act.
    """
    seat = _parse_seat(req.seat)

    def apply(engine):
        emitted = engine.add_action(seat, req.action, req.size)
        return emitted, engine.get_state()

    try:
        emitted, state = await manager.command(hand_id, apply)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"emitted": [record.to_dict() for record in emitted], "state": state}


@router.post("/hands/{hand_id}/board", response_model=HandStateSchema)
async def confirm_board(
    hand_id: str,
    req: BoardRequest,
    manager: HandManager = Depends(get_hand_manager),
) -> Dict[str, Any]:
    """Confirm the staged street's board. Does nothing unless a board is awaited."""

    def apply(engine):
        engine.confirm_board(req.cards)
        return engine.get_state()

    return await manager.command(hand_id, apply)


@router.get("/hands/{hand_id}/available_actions", response_model=AvailableActionsSchema)
async def available_actions(
    hand_id: str,
    seat: str,
    manager: HandManager = Depends(get_hand_manager),
) -> Dict[str, Any]:
    parsed = _parse_seat(seat)

    def view(engine):
        return {
            "seat": parsed.value,
            "actions": [a.value for a in engine.get_available_actions(parsed)],
            "raise_label": engine.get_raise_label(),
            "raise_count": engine.get_raise_count(),
        }

    return await manager.run(hand_id, view)


@router.get("/hands/{hand_id}/positions", response_model=PositionsSchema)
async def available_positions(hand_id: str, manager: HandManager = Depends(get_hand_manager)) -> Dict[str, Any]:
    seats = await manager.run(hand_id, lambda engine: engine.get_available_positions())
    return {"positions": [s.value for s in seats]}


@router.get("/hands/{hand_id}/pot", response_model=PotDetailsSchema)
async def pot_details(hand_id: str, manager: HandManager = Depends(get_hand_manager)) -> Dict[str, Any]:
    return await manager.run(hand_id, lambda engine: engine.get_pot_details())


@router.post("/hands/{hand_id}/result", response_model=ResultStatusSchema)
async def set_result(
    hand_id: str,
    req: HandResultSchema,
    manager: HandManager = Depends(get_hand_manager),
) -> Dict[str, Any]:
    """Record the outcome. Only accepted once the hand is over."""
    try:
        result = req.to_result()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    def apply(engine):
        engine.set_hand_result(result)
        return _result_status(engine)

    return await manager.command(hand_id, apply)


@router.get("/hands/{hand_id}/result", response_model=ResultStatusSchema)
async def get_result(hand_id: str, manager: HandManager = Depends(get_hand_manager)) -> Dict[str, Any]:
    return await manager.run(hand_id, _result_status)


@router.get("/hands/{hand_id}/export")
async def export_hand(hand_id: str, manager: HandManager = Depends(get_hand_manager)) -> Dict[str, Any]:
    """Ordered action list plus hand summary, for history rendering."""
    return await manager.run(hand_id, lambda engine: engine.export_hand())


def _result_status(engine) -> Dict[str, Any]:
    result = engine.get_hand_result()
    return {
        "ready_for_result": engine.is_ready_for_result(),
        "completion_type": (
            engine.get_completion_type().value if engine.is_hand_complete() else None
        ),
        "result": result.to_dict() if result else None,
    }
