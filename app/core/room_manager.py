"""Room store shared by the engine and the HTTP routes."""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from .constants import ABANDONED_ROOM_TTL_SECONDS
from .room import Room
from .words import WordDeck

logger = logging.getLogger(__name__)


class RoomManager:
    """In-memory store of all active rooms, keyed by room code."""

    def __init__(self, deck_factory: Callable[[], WordDeck] = WordDeck):
        """Initialize the room manager.

        Args:
            deck_factory: Builds the word deck for each new room
        """
        self.rooms: dict[str, Room] = {}
        self._deck_factory = deck_factory

    def create(self, code: str, host_id: str) -> Room:
        """Create a room owned by the given connection.

        Raises:
            ValueError: If a room with this code already exists
        """
        if code in self.rooms:
            raise ValueError(f"Room {code} already exists")

        room = Room(code=code, host_id=host_id, word_deck=self._deck_factory())
        self.rooms[code] = room
        logger.info("Room %s created by %s", code, host_id)
        return room

    def get(self, code: str) -> Optional[Room]:
        return self.rooms.get(code)

    def delete(self, code: str) -> None:
        if code in self.rooms:
            del self.rooms[code]
            logger.info("Room %s deleted", code)

    def find_by_connection(self, connection_id: str) -> Optional[Room]:
        """Find the room holding a player with this connection id."""
        return next(
            (room for room in self.rooms.values() if room.get_player(connection_id)),
            None,
        )

    def cleanup_stale_rooms(self, now: Optional[datetime] = None) -> int:
        """Remove rooms nobody has been connected to for the grace period.

        Args:
            now: Reference time, the current time by default

        Returns:
            Number of rooms cleaned up
        """
        now = now or datetime.now()
        cutoff_time = now - timedelta(seconds=ABANDONED_ROOM_TTL_SECONDS)

        stale_codes = [
            code
            for code, room in self.rooms.items()
            if not room.has_connected_players
            and room.abandoned_at is not None
            and room.abandoned_at < cutoff_time
        ]

        for code in stale_codes:
            self.delete(code)

        return len(stale_codes)

    def get_stats(self) -> dict:
        """Get statistics about active rooms.

        Returns:
            Dictionary with room statistics
        """
        total_players = sum(len(room.players) for room in self.rooms.values())
        active_rooms = sum(1 for room in self.rooms.values() if room.is_active)

        return {
            "total_rooms": len(self.rooms),
            "active_rooms": active_rooms,
            "total_players": total_players,
        }

    def __len__(self) -> int:
        return len(self.rooms)


# Global instance used by the application
room_manager = RoomManager()
