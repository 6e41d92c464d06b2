"""WebSocket routes for real-time game updates."""
import json
import logging
import uuid
from typing import Any, Awaitable, Callable, Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from core.room_manager import room_manager
from models.requests import GuessWordRequest, JoinRoomRequest, StartGameRequest, VoteRequest
from services.engine import GameEngine, Notification

logger = logging.getLogger(__name__)

router = APIRouter()


class ConnectionManager:
    """Tracks open sockets and which room channel each one listens on."""

    def __init__(self):
        self.connections: dict[str, WebSocket] = {}
        self.channels: dict[str, set[str]] = {}
        self.room_of: dict[str, str] = {}

    async def connect(self, websocket: WebSocket) -> str:
        await websocket.accept()
        connection_id = uuid.uuid4().hex
        self.connections[connection_id] = websocket
        return connection_id

    def subscribe(self, connection_id: str, room_code: str) -> None:
        self.unsubscribe(connection_id)
        self.channels.setdefault(room_code, set()).add(connection_id)
        self.room_of[connection_id] = room_code

    def unsubscribe(self, connection_id: str) -> Optional[str]:
        room_code = self.room_of.pop(connection_id, None)
        if room_code is not None:
            members = self.channels.get(room_code, set())
            members.discard(connection_id)
            if not members:
                self.channels.pop(room_code, None)
        return room_code

    def remove(self, connection_id: str) -> Optional[str]:
        self.connections.pop(connection_id, None)
        return self.unsubscribe(connection_id)

    def room_for(self, connection_id: str) -> Optional[str]:
        return self.room_of.get(connection_id)

    async def send(self, connection_id: str, event: str, data: Any) -> None:
        """Send a private message to a single connection."""
        websocket = self.connections.get(connection_id)
        if websocket is None:
            return
        try:
            await websocket.send_text(json.dumps({"type": event, "data": data}))
        except (WebSocketDisconnect, RuntimeError) as exc:
            logger.warning("Failed to send %s to %s: %s", event, connection_id, exc)

    async def broadcast(self, room_code: str, event: str, data: Any) -> None:
        """Send a message to every connection in a room channel."""
        for connection_id in list(self.channels.get(room_code, ())):
            await self.send(connection_id, event, data)

    async def deliver(self, notifications: list[Notification]) -> None:
        for notification in notifications:
            event = notification.kind.value
            if notification.kind.is_broadcast:
                await self.broadcast(notification.target, event, notification.payload)
            else:
                await self.send(notification.target, event, notification.payload)


manager = ConnectionManager()
engine = GameEngine(room_manager)


async def on_join_room(connection_id: str, data: dict) -> list[Notification]:
    request = JoinRoomRequest(**data)

    notifications = []
    previous = manager.room_for(connection_id)
    if previous is not None and previous != request.room:
        manager.unsubscribe(connection_id)
        notifications.extend(engine.leave_room(connection_id, previous))

    # Listen on the channel first so the joiner receives its own broadcast
    manager.subscribe(connection_id, request.room)
    notifications.extend(engine.join(connection_id, request.room, request.name))

    room = room_manager.get(request.room)
    if room is None or room.get_player(connection_id) is None:
        manager.unsubscribe(connection_id)
    return notifications


async def on_start_game(connection_id: str, data: dict) -> list[Notification]:
    request = StartGameRequest(**data)
    return engine.start_game(connection_id, manager.room_for(connection_id), mode=request.mode)


async def on_start_voting(connection_id: str, data: dict) -> list[Notification]:
    return engine.start_voting(connection_id, manager.room_for(connection_id))


async def on_vote(connection_id: str, data: dict) -> list[Notification]:
    request = VoteRequest(**data)
    return engine.vote(connection_id, manager.room_for(connection_id), request.voted_name)


async def on_submit_guess(connection_id: str, data: dict) -> list[Notification]:
    request = GuessWordRequest(**data)
    return engine.submit_guess(connection_id, manager.room_for(connection_id), request.guess)


async def on_play_again(connection_id: str, data: dict) -> list[Notification]:
    return engine.play_again(connection_id, manager.room_for(connection_id))


async def on_leave_room(connection_id: str, data: dict) -> list[Notification]:
    room_code = manager.unsubscribe(connection_id)
    if room_code is None:
        return []
    return engine.leave_room(connection_id, room_code)


HANDLERS: dict[str, Callable[[str, dict], Awaitable[list[Notification]]]] = {
    "join-room": on_join_room,
    "startGame": on_start_game,
    "start-voting": on_start_voting,
    "vote": on_vote,
    "submitGuess": on_submit_guess,
    "play-again": on_play_again,
    "leaveRoom": on_leave_room,
}


async def handle_message(connection_id: str, raw: str) -> None:
    """Parse one client frame, apply it and deliver the results."""
    try:
        message = json.loads(raw)
        event = message["type"]
        if not isinstance(event, str):
            raise TypeError("type must be a string")
        data = message.get("data") or {}
        if not isinstance(data, dict):
            raise TypeError("data must be an object")
    except (ValueError, KeyError, TypeError, AttributeError):
        await manager.send(connection_id, "error", {"message": "Malformed message"})
        return

    handler = HANDLERS.get(event)
    if handler is None:
        await manager.send(connection_id, "error", {"message": f"Unknown event: {event}"})
        return

    if event != "join-room" and manager.room_for(connection_id) is None:
        logger.debug("Ignoring %s from %s: not in a room", event, connection_id)
        return

    try:
        notifications = await handler(connection_id, data)
    except ValidationError as exc:
        logger.debug("Invalid %s payload from %s: %s", event, connection_id, exc)
        await manager.send(connection_id, "error", {"message": "Invalid payload"})
        return

    await manager.deliver(notifications)


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """WebSocket endpoint for real-time game updates.

    Flow:
        1. Accept the connection and give it a connection id
        2. Dispatch each JSON frame to the game engine
        3. Deliver the engine's notifications to the room or the sender
        4. Mark the player disconnected when the socket closes
    """
    connection_id = await manager.connect(websocket)
    logger.debug("Connection %s opened", connection_id)

    try:
        while True:
            data = await websocket.receive_text()

            # Handle ping/pong
            if data == "ping":
                await websocket.send_text("pong")
                continue

            await handle_message(connection_id, data)

    except WebSocketDisconnect:
        pass

    finally:
        room_code = manager.remove(connection_id)
        if room_code is not None:
            await manager.deliver(engine.disconnect(connection_id, room_code))
            room_manager.cleanup_stale_rooms()
        logger.debug("Connection %s closed", connection_id)
