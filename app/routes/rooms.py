"""Read-only HTTP routes for rooms."""
from fastapi import APIRouter, HTTPException

from core.room_manager import room_manager
from models.responses import RoomStateResponse, StatsResponse

router = APIRouter(prefix="/api")


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/stats", response_model=StatsResponse)
async def get_stats():
    """Counts of rooms and players across the process."""
    return room_manager.get_stats()


@router.get("/rooms/{room_code}", response_model=RoomStateResponse)
async def get_room(room_code: str):
    """Return the public snapshot of a room.

    Args:
        room_code: The room code

    Returns:
        The same snapshot room members receive

    Raises:
        HTTPException: If room not found
    """
    room = room_manager.get(room_code)

    if not room:
        raise HTTPException(status_code=404, detail="Room not found")

    return room.to_dict()
