"""Inbound payload models for WebSocket events."""

from pydantic import BaseModel, Field, field_validator

from core.roles import GameMode


class JoinRoomRequest(BaseModel):
    """Request to join (or rejoin) a room."""

    room: str = Field(..., min_length=1, max_length=32, description="Room code")
    name: str = Field(..., min_length=1, max_length=20, description="Player's display name")

    @field_validator("room")
    @classmethod
    def room_must_be_clean(cls, v: str) -> str:
        """Validate and clean room code."""
        v = v.strip()
        if not v:
            raise ValueError("Room code cannot be empty")
        return v

    @field_validator("name")
    @classmethod
    def name_must_be_clean(cls, v: str) -> str:
        """Validate and clean display name."""
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        if "<" in v or ">" in v or any(ord(c) < 32 for c in v):
            raise ValueError("Name contains invalid characters")
        return v


class StartGameRequest(BaseModel):
    """Request to deal a new round."""

    mode: GameMode = GameMode.NORMAL


class VoteRequest(BaseModel):
    """Request to vote for a player."""

    voted_name: str = Field(..., min_length=1, description="Name of player to vote for")


class GuessWordRequest(BaseModel):
    """Eliminated undercover's word guess request."""

    guess: str = Field(..., min_length=1, max_length=50, description="The guessed word")

    @field_validator("guess")
    @classmethod
    def clean_guess(cls, v: str) -> str:
        """Clean the guess."""
        return v.strip()
