"""Win condition checking service."""

import logging
import random
from typing import Optional

from core.constants import UNDERCOVER_SURVIVAL_COUNT, UNDERCOVER_WIN_POINTS
from core.player import Player
from core.roles import GameMode, Role
from core.room import GamePhase, Guessing, Room, Winner

from .game_state import assign_speaking_order, transition_to_finished, transition_to_playing

logger = logging.getLogger(__name__)


def check_undercover_eliminated(room: Room) -> bool:
    """Check if no alive player holds the undercover role.

    Args:
        room: The room

    Returns:
        True if the undercover is dead or gone
    """
    return not any(p.role == Role.UNDERCOVER for p in room.alive_players())


def check_undercover_survived(room: Room) -> bool:
    """Check if the undercover has survived to the win condition.

    Args:
        room: The room

    Returns:
        True if the undercover is alive and only 2 or fewer players remain
    """
    alive_players = room.alive_players()
    undercover_alive = any(p.role == Role.UNDERCOVER for p in alive_players)

    return undercover_alive and len(alive_players) <= UNDERCOVER_SURVIVAL_COUNT


def determine_winner(room: Room) -> Optional[Winner]:
    """Determine the winner of the round.

    Args:
        room: The room

    Returns:
        The winning side, or None if the round should continue
    """
    if check_undercover_eliminated(room):
        return Winner.CIVILIANS

    if check_undercover_survived(room):
        return Winner.UNDERCOVER

    return None


def evaluate_round_end(
    room: Room, eliminated: Optional[Player] = None, rng: random.Random | None = None
) -> GamePhase:
    """Move the room to its next phase after an elimination or a skipped vote.

    Civilians winning in hard mode opens the guessing phase for the
    eliminated undercover instead of ending. An undercover win awards the
    survival bonus. Otherwise discussion resumes with a new speaking order.

    Args:
        room: The room
        eliminated: The player just voted out, if any
        rng: Random source for the speaking order

    Returns:
        The phase the room is now in
    """
    winner = determine_winner(room)

    if winner == Winner.CIVILIANS:
        if room.mode == GameMode.HARD and eliminated and eliminated.role == Role.UNDERCOVER:
            room.state = Guessing(round=room.round, guessing_player_id=eliminated.id)
            room.message = _join(
                room.message, f"{eliminated.name} gets one chance to guess the civilians' word."
            )
            logger.info("Room %s: guessing opened for %s", room.code, eliminated.name)
        else:
            transition_to_finished(room, Winner.CIVILIANS)
            room.message = _join(room.message, "Civilians win!")
        return room.phase

    if winner == Winner.UNDERCOVER:
        undercover = room.undercover()
        undercover.add_score(UNDERCOVER_WIN_POINTS)
        transition_to_finished(room, Winner.UNDERCOVER)
        room.message = _join(room.message, "Undercover wins!")
        return room.phase

    transition_to_playing(room)
    assign_speaking_order(room, rng=rng)
    return room.phase


def _join(*parts: str) -> str:
    return " ".join(part for part in parts if part)
