"""Round lifecycle: dealing, speaking order and phase transitions."""

import logging
import random

from core.constants import (
    MAX_PLAYERS,
    MIN_PLAYERS,
    MSG_GAME_STARTED,
    MSG_GAME_STARTED_HARD,
    MSG_PLAY_AGAIN,
    MSG_VOTING_STARTED,
)
from core.roles import GameMode, VisibleAssignment, assign_roles, visible_assignment
from core.room import Ended, GamePhase, Lobby, Playing, Room, Round, SpeakingSlot, Voting, Winner

logger = logging.getLogger(__name__)


def can_join(room: Room) -> tuple[bool, str]:
    """Check if a new player (not a rejoin) may enter the room.

    Args:
        room: The room being joined

    Returns:
        Tuple of (can_join, error_message)
    """
    if room.phase != GamePhase.LOBBY:
        return False, "Game in progress, join next round"

    if len(room.players) >= MAX_PLAYERS:
        return False, f"Room is full (max {MAX_PLAYERS} players)"

    return True, ""


def can_start_game(room: Room) -> tuple[bool, str]:
    """Check if a round can be dealt.

    Args:
        room: The room

    Returns:
        Tuple of (can_start, error_message)
    """
    if room.is_active:
        return False, "Game has already started"

    if len(room.players) < MIN_PLAYERS:
        return False, f"Minimum {MIN_PLAYERS} players required"

    return True, ""


def can_start_voting(room: Room) -> tuple[bool, str]:
    """Check if the room may move from discussion to voting.

    Args:
        room: The room

    Returns:
        Tuple of (can_start, error_message)
    """
    if room.phase != GamePhase.PLAYING:
        return False, "Can only start voting from playing state"

    return True, ""


def assign_speaking_order(room: Room, rng: random.Random | None = None) -> None:
    """Shuffle alive players into a new speaking order, numbered from 1.

    Dead players lose their speaking number.

    Args:
        room: The room, must be in a round
        rng: Random source, defaults to the module-level generator
    """
    alive = room.alive_players()
    (rng or random).shuffle(alive)

    for player in room.players:
        player.speaking_number = None

    order = []
    for number, player in enumerate(alive, start=1):
        player.speaking_number = number
        order.append(SpeakingSlot(player_id=player.id, name=player.name, order=number))

    room.round.speaking_order = order


def start_game(
    room: Room, mode: GameMode = GameMode.NORMAL, rng: random.Random | None = None
) -> dict[str, VisibleAssignment]:
    """Deal a new round.

    Draws a word pair, picks the undercover, revives everyone and opens
    the discussion. Scores are kept.

    Args:
        room: The room, already checked with can_start_game
        mode: Game mode for this round
        rng: Random source, defaults to the module-level generator

    Returns:
        Mapping of player id to the assignment that player should privately see
    """
    room.mode = mode
    majority_word, minority_word = room.word_deck.draw()

    assign_roles(room.players, rng=rng)

    assignments = {
        player.id: visible_assignment(player.role, majority_word, minority_word, mode)
        for player in room.players
    }

    room.state = Playing(round=Round(majority_word=majority_word, minority_word=minority_word))
    room.message = MSG_GAME_STARTED_HARD if mode == GameMode.HARD else MSG_GAME_STARTED
    assign_speaking_order(room, rng=rng)

    logger.info(
        "Room %s: round started in %s mode with %d players", room.code, mode.value, len(room.players)
    )
    return assignments


def transition_to_voting(room: Room) -> None:
    """Open a fresh ballot."""
    room.state = Voting(round=room.round)
    room.message = MSG_VOTING_STARTED


def transition_to_playing(room: Room) -> None:
    """Return to discussion, discarding any ballot."""
    room.state = Playing(round=room.round)


def transition_to_finished(room: Room, winner: Winner) -> None:
    """End the round. Speaking numbers are cleared."""
    room.state = Ended(round=room.round, winner=winner)
    for player in room.players:
        player.speaking_number = None
    logger.info("Room %s: %s win", room.code, winner.value)


def reset_to_lobby(room: Room) -> None:
    """Send everyone back to the lobby, keeping scores."""
    for player in room.players:
        player.reset_for_lobby()

    room.state = Lobby()
    room.message = MSG_PLAY_AGAIN
