"""Voting service helpers."""

import logging
from dataclasses import dataclass
from typing import Optional

from core.constants import (
    CIVILIAN_CATCH_POINTS,
    MIN_VOTING_PLAYERS,
    MSG_NO_MAJORITY,
    MSG_NO_VOTES,
    UNDERCOVER_SURVIVE_ELIMINATION_POINTS,
)
from core.player import Player
from core.roles import Role
from core.room import GamePhase, Room

from .game_state import transition_to_playing

logger = logging.getLogger(__name__)


@dataclass
class VoteResult:
    """Outcome of resolving a completed ballot."""

    eliminated: Optional[Player]
    vote_counts: dict[str, int]
    was_tie: bool = False


def has_enough_voters(room: Room) -> bool:
    """Check if enough alive, connected players remain to hold a vote."""
    return len(room.voting_players()) >= MIN_VOTING_PLAYERS


def can_vote(room: Room, player_id: str, target_name: str) -> tuple[bool, str | None]:
    """Check if a player can cast this vote.

    Args:
        room: The room
        player_id: Connection id of the player trying to vote
        target_name: Name of the player being voted for

    Returns:
        Tuple of (can_vote, error_message)
    """
    if room.phase != GamePhase.VOTING:
        return False, "Not in voting phase"

    player = room.get_player(player_id)
    if not player or not player.connected:
        return False, "Player not found"

    if not player.is_alive:
        return False, "Dead players cannot vote"

    if player.name == target_name:
        return False, "Cannot vote for yourself"

    if room.ballot.has_voted(player_id):
        return False, "Already voted"

    target = room.get_player_by_name(target_name)
    if not target or not target.is_alive:
        return False, "Target is not an alive player"

    return True, None


def cast_vote(room: Room, player_id: str, target_name: str) -> bool:
    """Record a vote if it is allowed.

    Returns:
        True if the vote was recorded
    """
    allowed, error = can_vote(room, player_id, target_name)
    if not allowed:
        logger.debug("Room %s: vote from %s rejected: %s", room.code, player_id, error)
        return False

    room.ballot.record(player_id, target_name)
    return True


def all_votes_submitted(room: Room) -> bool:
    """Check if every alive, connected player has voted.

    Disconnected and dead players are not waited for.

    Args:
        room: The room

    Returns:
        True if the ballot is complete
    """
    if room.phase != GamePhase.VOTING:
        return False
    # A vote cast before its voter dropped out still counts in the tally
    return all(room.ballot.has_voted(p.id) for p in room.voting_players())


def resolve_votes(room: Room) -> VoteResult:
    """Tally a completed ballot and eliminate the plurality target.

    Ties and empty ballots eliminate no one and return the room to
    discussion. An elimination scores points but leaves the phase alone,
    win detection runs next.

    Args:
        room: The room, in voting phase

    Returns:
        The vote result
    """
    ranking = room.ballot.ranking()
    vote_counts = dict(ranking)

    if not ranking:
        transition_to_playing(room)
        room.message = MSG_NO_VOTES
        return VoteResult(eliminated=None, vote_counts=vote_counts)

    top_name, top_votes = ranking[0]
    second_votes = ranking[1][1] if len(ranking) > 1 else 0

    if top_votes == second_votes:
        transition_to_playing(room)
        room.message = MSG_NO_MAJORITY
        return VoteResult(eliminated=None, vote_counts=vote_counts, was_tie=True)

    eliminated = room.get_player_by_name(top_name)
    if eliminated is None:
        # Target left the room after being voted for
        transition_to_playing(room)
        room.message = MSG_NO_MAJORITY
        return VoteResult(eliminated=None, vote_counts=vote_counts)

    eliminated.is_alive = False
    eliminated.speaking_number = None

    if eliminated.role == Role.UNDERCOVER:
        for player in room.alive_players():
            if player.role == Role.CIVILIAN:
                player.add_score(CIVILIAN_CATCH_POINTS)
        room.message = f"{eliminated.name} was the UNDERCOVER!"
    else:
        undercover = room.undercover()
        if undercover and undercover.is_alive:
            undercover.add_score(UNDERCOVER_SURVIVE_ELIMINATION_POINTS)
        room.message = f"{eliminated.name} was a CIVILIAN and eliminated."

    logger.info("Room %s: %s eliminated (%s)", room.code, eliminated.name, eliminated.role.value)
    return VoteResult(eliminated=eliminated, vote_counts=vote_counts)
