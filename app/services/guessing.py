"""Hard mode guessing phase."""

import logging

from core.constants import CIVILIAN_WRONG_GUESS_POINTS, UNDERCOVER_CORRECT_GUESS_POINTS
from core.roles import Role
from core.room import GamePhase, Room, Winner

from .game_state import transition_to_finished

logger = logging.getLogger(__name__)


def normalize_guess(text: str) -> str:
    return text.strip().casefold()


def is_correct_guess(guess: str, word: str) -> bool:
    """Compare ignoring case and surrounding whitespace."""
    return normalize_guess(guess) == normalize_guess(word)


def can_guess(room: Room, player_id: str) -> tuple[bool, str | None]:
    """Check if this player may submit the final guess.

    Args:
        room: The room
        player_id: Connection id of the submitting player

    Returns:
        Tuple of (can_guess, error_message)
    """
    if room.phase != GamePhase.GUESSING:
        return False, "Not in guessing phase"

    if player_id != room.guessing_player_id:
        return False, "Only the eliminated undercover may guess"

    return True, None


def submit_guess(room: Room, player_id: str, guess: str) -> bool:
    """Score the undercover's guess of the civilians' word and end the round.

    A correct guess earns the undercover a bonus. A wrong one rewards
    every civilian, eliminated or not.

    Returns:
        True if the guess was accepted
    """
    allowed, error = can_guess(room, player_id)
    if not allowed:
        logger.debug("Room %s: guess from %s ignored: %s", room.code, player_id, error)
        return False

    guesser = room.get_player(player_id)
    word = room.current_word

    if is_correct_guess(guess, word):
        guesser.add_score(UNDERCOVER_CORRECT_GUESS_POINTS)
        room.message = f"{guesser.name} guessed the word '{word}' correctly!"
    else:
        for player in room.players:
            if player.role == Role.CIVILIAN:
                player.add_score(CIVILIAN_WRONG_GUESS_POINTS)
        room.message = f"{guesser.name} guessed wrong. The word was '{word}'. Civilians win!"

    transition_to_finished(room, Winner.CIVILIANS)
    return True
