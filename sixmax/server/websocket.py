"""
WebSocket handling and per-hand bookkeeping.

This module provides:
- HandManager: Owns every in-memory hand and serialises commands per hand
- WebSocket endpoint: Lets clients watch a hand and submit commands live
"""

from __future__ import annotations
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar
import asyncio
import logging
import uuid

from fastapi import WebSocket, WebSocketDisconnect

from sixmax.config import get_settings
from sixmax.core.exceptions import HandError
from sixmax.core.game import HandEngine


logger = logging.getLogger(__name__)

T = TypeVar("T")


class HandNotFoundError(KeyError):
    pass


@dataclass
class HandRoom:
    """A hand with its engine, its lock and the sockets watching it."""
    hand_id: str
    engine: HandEngine
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    connections: Dict[str, WebSocket] = field(default_factory=dict)

    async def broadcast(self, message: Dict[str, Any], exclude: Optional[str] = None):
        """Broadcast a message to all watching sockets."""
        for conn_id, ws in list(self.connections.items()):
            if conn_id != exclude:
                try:
                    await ws.send_json(message)
                except Exception as e:
                    logger.error(f"Error sending to {conn_id}: {e}")

    async def send_state_to_all(self, state: Dict[str, Any]):
        await self.broadcast({"type": "state", "hand_id": self.hand_id, **state})


class HandManager:
    """
    Keeps hands in memory and runs one command at a time per hand.

    Usage:
        manager = HandManager()
        hand_id = await manager.create_hand(hero_seat="BTN")
        await manager.run(hand_id, lambda engine: engine.add_action("BTN", "Raise", 3))
    """

    def __init__(self, max_hands: int = 1000, default_stack: float = 100):
        self.hands: "OrderedDict[str, HandRoom]" = OrderedDict()
        self.max_hands = max_hands
        self.default_stack = default_stack
        self._lock = asyncio.Lock()

    async def create_hand(
        self,
        hero_seat: Optional[str] = None,
        starting_stack: Optional[float] = None,
        hero_cards: Optional[list] = None,
    ) -> str:
        """
        Start a new hand.

        Raises:
            ValueError: unknown seat or unusable stack
        """
        stack = starting_stack if starting_stack is not None else self.default_stack
        engine = HandEngine(hero_seat=hero_seat, starting_stack=stack, hero_cards=hero_cards)

        async with self._lock:
            hand_id = uuid.uuid4().hex[:12]
            self.hands[hand_id] = HandRoom(hand_id=hand_id, engine=engine)
            while len(self.hands) > self.max_hands:
                evicted, _ = self.hands.popitem(last=False)
                logger.info(f"Evicted hand {evicted}")

        logger.info(f"Created hand {hand_id} (hero={hero_seat}, stack={stack})")
        return hand_id

    async def get_room(self, hand_id: str) -> HandRoom:
        async with self._lock:
            room = self.hands.get(hand_id)
        if room is None:
            raise HandNotFoundError(f"Hand not found: {hand_id}")
        return room

    async def delete_hand(self, hand_id: str) -> None:
        async with self._lock:
            if self.hands.pop(hand_id, None) is None:
                raise HandNotFoundError(f"Hand not found: {hand_id}")
        logger.info(f"Deleted hand {hand_id}")

    async def run(self, hand_id: str, operation: Callable[[HandEngine], T]) -> T:
        """
        Run `operation` against the hand's engine while holding its lock.

        State-changing calls should go through here so that two clients can
        never interleave commands on the same hand.
        """
        room = await self.get_room(hand_id)
        async with room.lock:
            return operation(room.engine)

    async def command(self, hand_id: str, operation: Callable[[HandEngine], T]) -> T:
        """
        Like `run`, then push the new state to every watcher.

        The state is captured under the hand lock; sending happens after
        the lock is released.
        """
        room = await self.get_room(hand_id)
        async with room.lock:
            result = operation(room.engine)
            state = room.engine.get_state()
        await room.send_state_to_all(state)
        return result


_hand_manager: Optional[HandManager] = None


async def get_hand_manager() -> HandManager:
    """
    Process-wide manager, built from settings on first use.

    Must stay async: FastAPI then resolves it on the event loop, never in
    a worker thread.
    """
    global _hand_manager
    if _hand_manager is None:
        settings = get_settings()
        _hand_manager = HandManager(
            max_hands=settings.max_hands,
            default_stack=settings.default_stack,
        )
    return _hand_manager


def _error(message: str) -> Dict[str, Any]:
    return {"type": "error", "message": message}


async def handle_message(
    manager: HandManager,
    hand_id: str,
    message: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Handle one message from a watching client.

    Message types:
        {"type": "action", "seat": "BTN", "action": "Raise", "size": 3}
        {"type": "board", "cards": ["Ah", "Kd", "7c"]}
        {"type": "get_state"}
    """
    msg_type = message.get("type", "")

    try:
        if msg_type == "action":
            seat = message.get("seat", "")
            action = message.get("action", "")
            size = message.get("size")
            emitted = await manager.command(
                hand_id, lambda engine: engine.add_action(seat, action, size)
            )
            return {
                "type": "action_result",
                "success": True,
                "emitted": [record.to_dict() for record in emitted],
            }

        if msg_type == "board":
            cards = message.get("cards") or []
            await manager.command(hand_id, lambda engine: engine.confirm_board(cards))
            return {"type": "board_confirmed", "success": True}

        if msg_type == "get_state":
            state = await manager.run(hand_id, lambda engine: engine.get_state())
            return {"type": "state", "hand_id": hand_id, **state}

    except HandNotFoundError as e:
        return _error(str(e.args[0]))
    except (HandError, ValueError) as e:
        logger.info(f"Rejected {msg_type} on {hand_id}: {e}")
        return _error(str(e))

    return _error(f"Unknown message type: {msg_type}")


async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for live hand entry.

    Protocol:
    1. Client connects and sends: {"type": "join", "hand_id": "..."}
    2. Server sends the hand state
    3. Client sends commands: {"type": "action", "seat": "BTN", "action": "Call"}
    4. Server replies to the sender and broadcasts state to every watcher
    """
    manager = await get_hand_manager()
    conn_id = uuid.uuid4().hex[:8]
    room: Optional[HandRoom] = None

    try:
        await websocket.accept()
        join_msg = await websocket.receive_json()

        if join_msg.get("type") != "join" or not join_msg.get("hand_id"):
            await websocket.send_json(_error("First message must be join with a hand_id"))
            await websocket.close()
            return

        try:
            room = await manager.get_room(join_msg["hand_id"])
        except HandNotFoundError as e:
            await websocket.send_json(_error(str(e.args[0])))
            await websocket.close()
            return

        room.connections[conn_id] = websocket
        logger.info(f"Connection {conn_id} watching {room.hand_id}")

        await websocket.send_json({"type": "state", "hand_id": room.hand_id, **room.engine.get_state()})

        # Message loop
        while True:
            message = await websocket.receive_json()
            response = await handle_message(manager, room.hand_id, message)
            await websocket.send_json(response)

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected: {conn_id}")
    except Exception as e:
        logger.error(f"WebSocket error: {e}")
    finally:
        if room is not None:
            room.connections.pop(conn_id, None)
