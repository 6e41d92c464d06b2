"""Outbound payload models."""

from pydantic import BaseModel


class PlayerResponse(BaseModel):
    """Player information as every room member sees it. Never a role."""

    id: str
    name: str
    alive: bool
    score: int
    connected: bool
    speaking_number: int | None = None
    is_host: bool = False


class SpeakingSlotResponse(BaseModel):
    player_id: str
    name: str
    order: int


class RoomStateResponse(BaseModel):
    """Room snapshot broadcast to all members."""

    code: str
    host_id: str
    phase: str
    mode: str
    message: str
    players: list[PlayerResponse]
    vote_count: dict[str, int]
    speaking_order: list[SpeakingSlotResponse]
    is_guessing_phase: bool = False
    guessing_player_id: str | None = None


class RoleResponse(BaseModel):
    """Private role reveal, sent only to its owner."""

    role: str
    word: str | None = None


class ErrorResponse(BaseModel):
    message: str


class GuessingStartedResponse(BaseModel):
    player_id: str


class StatsResponse(BaseModel):
    total_rooms: int
    active_rooms: int
    total_players: int
