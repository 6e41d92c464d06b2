"""Player model for the game."""
from datetime import datetime
from typing import Optional

from .roles import Role


class Player:
    """Represents a player in a room."""

    def __init__(self, player_id: str, name: str):
        """Initialize a new player.

        Args:
            player_id: The id of the player's current connection
            name: The player's display name, stable across reconnects
        """
        self.id: str = player_id
        self.name: str = name
        self.role: Role = Role.NONE  # Dealt when a round starts
        self.is_alive: bool = True
        self.score: int = 0
        self.connected: bool = True
        self.speaking_number: Optional[int] = None
        self.joined_at: datetime = datetime.now()

    @property
    def can_vote(self) -> bool:
        return self.is_alive and self.connected

    def add_score(self, points: int) -> None:
        self.score += points

    def reset_for_lobby(self) -> None:
        """Forget round data, keep score."""
        self.role = Role.NONE
        self.is_alive = True
        self.speaking_number = None

    def to_dict(self, host_id: Optional[str] = None) -> dict:
        """Convert player to dictionary for broadcasts.

        The role is never included, all players see the same data.

        Args:
            host_id: Id of the room's host, used to flag the host entry

        Returns:
            Dictionary representation of the player
        """
        return {
            "id": self.id,
            "name": self.name,
            "alive": self.is_alive,
            "score": self.score,
            "connected": self.connected,
            "speaking_number": self.speaking_number,
            "is_host": self.id == host_id,
        }

    def __repr__(self) -> str:
        return f"Player(id={self.id}, name={self.name}, role={self.role.value})"
