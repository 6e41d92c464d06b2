"""Game engine: applies player intents to rooms and reports what to send.

Every public method takes the acting connection id, mutates the room in a
single synchronous step and returns the notifications the gateway must
deliver. Nothing here touches the network.
"""

import logging
import random
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from core.constants import MSG_WAITING_FOR_RECONNECT
from core.roles import GameMode, Role, VisibleAssignment, visible_assignment
from core.room import GamePhase, Room, Winner
from core.room_manager import RoomManager
from models.responses import (
    ErrorResponse,
    GuessingStartedResponse,
    RoleResponse,
    RoomStateResponse,
)

from . import guessing, voting
from .game_state import (
    can_join,
    can_start_game,
    can_start_voting,
    reset_to_lobby,
    start_game,
    transition_to_finished,
    transition_to_voting,
)
from .win_conditions import evaluate_round_end

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    """Outbound notification types. Values double as wire event names."""

    BROADCAST_STATE = "state"
    BROADCAST_VOTES = "votes"
    BROADCAST_GUESSING_STARTED = "guessing-started"
    PRIVATE_ROLE = "role"
    PRIVATE_ERROR = "error"

    @property
    def is_broadcast(self) -> bool:
        return self.name.startswith("BROADCAST")


@dataclass(frozen=True)
class Notification:
    """A message for the gateway to deliver.

    ``target`` is a room code for broadcasts and a connection id for
    private messages.
    """

    kind: NotificationKind
    target: str
    payload: dict


def state_notification(room: Room) -> Notification:
    snapshot = RoomStateResponse.model_validate(room.to_dict())
    return Notification(NotificationKind.BROADCAST_STATE, room.code, snapshot.model_dump())


def error_notification(connection_id: str, message: str) -> Notification:
    return Notification(
        NotificationKind.PRIVATE_ERROR, connection_id, ErrorResponse(message=message).model_dump()
    )


class GameEngine:
    """State machine driving every room in a RoomManager."""

    def __init__(self, rooms: RoomManager, rng: Optional[random.Random] = None):
        """Initialize the engine.

        Args:
            rooms: Store of rooms the engine reads and mutates
            rng: Random source for dealing and speaking order
        """
        self.rooms = rooms
        self.rng = rng or random.Random()

    def _member_room(self, connection_id: str, room_code: str) -> Optional[Room]:
        room = self.rooms.get(room_code)
        if room is None or room.get_player(connection_id) is None:
            logger.debug("Ignoring intent from %s for room %s", connection_id, room_code)
            return None
        return room

    # Membership

    def join(self, connection_id: str, room_code: str, name: str) -> list[Notification]:
        """Join a room, creating it if needed. A known name rejoins."""
        room = self.rooms.get(room_code)
        if room is None:
            room = self.rooms.create(room_code, host_id=connection_id)

        current = room.get_player(connection_id)
        if current is not None and current.name != name:
            return [error_notification(connection_id, f"Already in this room as {current.name}")]

        existing = room.get_player_by_name(name)
        if existing is not None:
            room.reconnect_player(existing, connection_id)
            room.abandoned_at = None
            room.message = f"{name} reconnected."
            logger.info("Room %s: %s rejoined as %s", room.code, name, connection_id)

            notifications = [state_notification(room)]
            if room.is_active and existing.role != Role.NONE:
                assignment = visible_assignment(
                    existing.role, room.round.majority_word, room.round.minority_word, room.mode
                )
                notifications.append(self._role_notification(connection_id, assignment))
            return notifications

        allowed, error = can_join(room)
        if not allowed:
            return [error_notification(connection_id, error)]

        room.add_player(connection_id, name)
        room.abandoned_at = None
        room.message = f"{name} joined the room."
        logger.info("Room %s: %s joined as %s", room.code, name, connection_id)
        return [state_notification(room)]

    def disconnect(self, connection_id: str, room_code: str) -> list[Notification]:
        """Mark a player's connection as lost, keeping their slot for a rejoin."""
        room = self.rooms.get(room_code)
        player = room.get_player(connection_id) if room else None
        if player is None:
            return []

        player.connected = False
        room.message = f"{player.name} disconnected."
        logger.info("Room %s: %s disconnected", room.code, player.name)
        if not room.has_connected_players:
            room.abandoned_at = datetime.now()

        if voting.all_votes_submitted(room):
            return self._resolve_votes(room)
        return [state_notification(room)]

    def leave_room(self, connection_id: str, room_code: str) -> list[Notification]:
        """Remove a player for good. An empty room is deleted."""
        room = self.rooms.get(room_code)
        if room is None:
            return []

        was_host = room.host_id == connection_id
        player = room.remove_player(connection_id)
        if player is None:
            return []

        logger.info("Room %s: %s left", room.code, player.name)
        if room.is_empty:
            self.rooms.delete(room.code)
            return []

        if was_host:
            room.message = f"Host left. {room.players[0].name} is now the host."
        else:
            room.message = f"{player.name} left the room."

        if room.is_active and player.role == Role.UNDERCOVER:
            transition_to_finished(room, Winner.CIVILIANS)
            room.message = f"{player.name} was the UNDERCOVER and left. Civilians win!"
            return [state_notification(room)]

        if voting.all_votes_submitted(room):
            return self._resolve_votes(room)
        return [state_notification(room)]

    # Round flow

    def start_game(
        self, connection_id: str, room_code: str, mode: GameMode = GameMode.NORMAL
    ) -> list[Notification]:
        """Deal a round and reveal each player's role privately."""
        room = self._member_room(connection_id, room_code)
        if room is None:
            return []

        allowed, error = can_start_game(room)
        if not allowed:
            return [error_notification(connection_id, error)]

        assignments = start_game(room, mode=mode, rng=self.rng)
        notifications = [
            self._role_notification(player_id, assignment)
            for player_id, assignment in assignments.items()
        ]
        notifications.append(state_notification(room))
        return notifications

    def start_voting(self, connection_id: str, room_code: str) -> list[Notification]:
        """Open voting, or settle the round if too few players can vote."""
        room = self._member_room(connection_id, room_code)
        if room is None:
            return []

        allowed, error = can_start_voting(room)
        if not allowed:
            return [error_notification(connection_id, error)]

        if not voting.has_enough_voters(room):
            room.message = "Not enough players left to vote."
            evaluate_round_end(room, rng=self.rng)
            if room.phase == GamePhase.PLAYING:
                room.message = MSG_WAITING_FOR_RECONNECT
            return [state_notification(room)]

        transition_to_voting(room)
        return [state_notification(room)]

    def vote(self, connection_id: str, room_code: str, target_name: str) -> list[Notification]:
        """Cast a vote. Invalid votes are ignored without an error."""
        room = self.rooms.get(room_code)
        if room is None or not voting.cast_vote(room, connection_id, target_name):
            return []

        notifications = [
            Notification(NotificationKind.BROADCAST_VOTES, room.code, room.vote_count)
        ]
        if voting.all_votes_submitted(room):
            notifications.extend(self._resolve_votes(room))
        return notifications

    def submit_guess(self, connection_id: str, room_code: str, guess: str) -> list[Notification]:
        """Take the eliminated undercover's guess in hard mode."""
        room = self.rooms.get(room_code)
        if room is None or not guessing.submit_guess(room, connection_id, guess):
            return []
        return [state_notification(room)]

    def play_again(self, connection_id: str, room_code: str) -> list[Notification]:
        """Reset the room to the lobby, keeping scores."""
        room = self._member_room(connection_id, room_code)
        if room is None:
            return []

        reset_to_lobby(room)
        return [state_notification(room)]

    def _resolve_votes(self, room: Room) -> list[Notification]:
        result = voting.resolve_votes(room)
        if result.eliminated is None:
            return [state_notification(room)]

        phase = evaluate_round_end(room, result.eliminated, rng=self.rng)
        notifications = [state_notification(room)]
        if phase == GamePhase.GUESSING:
            payload = GuessingStartedResponse(player_id=room.guessing_player_id).model_dump()
            notifications.append(
                Notification(NotificationKind.BROADCAST_GUESSING_STARTED, room.code, payload)
            )
        return notifications

    @staticmethod
    def _role_notification(connection_id: str, assignment: VisibleAssignment) -> Notification:
        payload = RoleResponse(**assignment.to_dict()).model_dump()
        return Notification(NotificationKind.PRIVATE_ROLE, connection_id, payload)
