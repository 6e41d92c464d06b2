"""Tests for voting service."""

from conftest import civilians_of, undercover_of
from core.constants import CIVILIAN_CATCH_POINTS, MSG_NO_MAJORITY, MSG_NO_VOTES
from core.room import GamePhase
from services.voting import (
    all_votes_submitted,
    can_vote,
    cast_vote,
    has_enough_voters,
    resolve_votes,
)


class TestCanVote:
    """Tests for can_vote function."""

    def test_can_vote_in_voting_phase(self, voting_room):
        """Test that alive players can vote during voting phase."""
        can, error = can_vote(voting_room, "conn-1", "Player2")
        assert can is True
        assert error is None

    def test_cannot_vote_when_not_in_voting_phase(self, started_room):
        """Test that players cannot vote when not in voting phase."""
        can, error = can_vote(started_room, "conn-1", "Player2")
        assert can is False
        assert error == "Not in voting phase"

    def test_cannot_vote_when_player_not_found(self, voting_room):
        """Test that non-existent players cannot vote."""
        can, error = can_vote(voting_room, "non-existent-id", "Player2")
        assert can is False
        assert error == "Player not found"

    def test_cannot_vote_when_disconnected(self, voting_room):
        voting_room.get_player("conn-1").connected = False
        can, error = can_vote(voting_room, "conn-1", "Player2")
        assert can is False
        assert error == "Player not found"

    def test_cannot_vote_when_player_dead(self, voting_room):
        """Test that dead players cannot vote."""
        voting_room.get_player("conn-1").is_alive = False
        can, error = can_vote(voting_room, "conn-1", "Player2")
        assert can is False
        assert error == "Dead players cannot vote"

    def test_cannot_vote_for_self(self, voting_room):
        can, error = can_vote(voting_room, "conn-1", "Player1")
        assert can is False
        assert error == "Cannot vote for yourself"

    def test_cannot_vote_twice(self, voting_room):
        """Test that players cannot vote twice."""
        assert cast_vote(voting_room, "conn-1", "Player2") is True

        can, error = can_vote(voting_room, "conn-1", "Player3")
        assert can is False
        assert error == "Already voted"

    def test_cannot_vote_for_dead_player(self, voting_room):
        voting_room.get_player_by_name("Player2").is_alive = False
        can, _ = can_vote(voting_room, "conn-1", "Player2")
        assert can is False

    def test_cannot_vote_for_unknown_name(self, voting_room):
        can, _ = can_vote(voting_room, "conn-1", "Nobody")
        assert can is False


class TestCastVote:
    """Tests for cast_vote function."""

    def test_tally_matches_votes(self, voting_room):
        cast_vote(voting_room, "conn-1", "Player3")
        cast_vote(voting_room, "conn-2", "Player3")
        cast_vote(voting_room, "conn-3", "Player1")

        assert voting_room.vote_count == {"Player3": 2, "Player1": 1}
        assert sum(voting_room.vote_count.values()) == len(voting_room.votes_by_player)

    def test_rejected_vote_changes_nothing(self, voting_room):
        cast_vote(voting_room, "conn-1", "Player2")
        assert cast_vote(voting_room, "conn-1", "Player3") is False
        assert cast_vote(voting_room, "conn-2", "Player2") is False

        assert voting_room.vote_count == {"Player2": 1}
        assert voting_room.votes_by_player == {"conn-1": "Player2"}


class TestAllVotesSubmitted:
    """Tests for all_votes_submitted function."""

    def test_no_votes_submitted(self, voting_room):
        """Test when no votes have been submitted."""
        assert all_votes_submitted(voting_room) is False

    def test_partial_votes_submitted(self, voting_room):
        """Test when only some players have voted."""
        cast_vote(voting_room, "conn-1", "Player2")
        cast_vote(voting_room, "conn-2", "Player1")
        # 2 out of 5 votes
        assert all_votes_submitted(voting_room) is False

    def test_all_votes_submitted(self, voting_room):
        """Test when all alive players have voted."""
        for i in range(1, 6):
            cast_vote(voting_room, f"conn-{i}", f"Player{i % 5 + 1}")

        assert all_votes_submitted(voting_room) is True

    def test_all_votes_with_dead_players(self, voting_room):
        """Test that dead players are not counted for vote completion."""
        voting_room.get_player("conn-1").is_alive = False

        for i in range(2, 6):
            cast_vote(voting_room, f"conn-{i}", "Player2" if i != 2 else "Player3")

        assert all_votes_submitted(voting_room) is True

    def test_disconnected_players_not_waited_for(self, voting_room):
        voting_room.get_player("conn-5").connected = False

        for i in range(1, 5):
            cast_vote(voting_room, f"conn-{i}", "Player5")

        assert all_votes_submitted(voting_room) is True

    def test_not_submitted_outside_voting(self, started_room):
        assert all_votes_submitted(started_room) is False


class TestHasEnoughVoters:
    def test_three_connected_players_is_enough(self, started_room):
        started_room.get_player("conn-1").is_alive = False
        started_room.get_player("conn-2").connected = False
        assert has_enough_voters(started_room) is True

    def test_two_connected_players_is_not_enough(self, started_room):
        started_room.get_player("conn-1").is_alive = False
        started_room.get_player("conn-2").is_alive = False
        started_room.get_player("conn-3").connected = False
        assert has_enough_voters(started_room) is False


class TestResolveVotes:
    """Tests for resolve_votes function."""

    def test_plurality_target_eliminated(self, voting_room):
        undercover = undercover_of(voting_room)
        target = civilians_of(voting_room)[0]
        voters = [p for p in voting_room.players if p is not target]

        for voter in voters[:3]:
            cast_vote(voting_room, voter.id, target.name)
        cast_vote(voting_room, voters[3].id, voters[0].name)

        result = resolve_votes(voting_room)

        assert result.eliminated is target
        assert target.is_alive is False
        assert target.speaking_number is None
        assert undercover.score == 2

    def test_undercover_eliminated_rewards_alive_civilians(self, voting_room):
        undercover = undercover_of(voting_room)
        civilians = civilians_of(voting_room)
        civilians[0].is_alive = False

        for civilian in civilians[1:]:
            cast_vote(voting_room, civilian.id, undercover.name)

        result = resolve_votes(voting_room)

        assert result.eliminated is undercover
        assert civilians[0].score == 0
        assert all(c.score == CIVILIAN_CATCH_POINTS for c in civilians[1:])
        assert undercover.score == 0

    def test_tie_eliminates_no_one(self, voting_room):
        cast_vote(voting_room, "conn-1", "Player2")
        cast_vote(voting_room, "conn-2", "Player1")
        cast_vote(voting_room, "conn-3", "Player2")
        cast_vote(voting_room, "conn-4", "Player1")

        result = resolve_votes(voting_room)

        assert result.eliminated is None
        assert result.was_tie is True
        assert all(p.is_alive for p in voting_room.players)
        assert voting_room.phase == GamePhase.PLAYING
        assert voting_room.message == MSG_NO_MAJORITY
        assert voting_room.vote_count == {}
        assert voting_room.votes_by_player == {}

    def test_empty_ballot(self, voting_room):
        result = resolve_votes(voting_room)

        assert result.eliminated is None
        assert result.was_tie is False
        assert voting_room.phase == GamePhase.PLAYING
        assert voting_room.message == MSG_NO_VOTES

    def test_ranking_breaks_ties_by_first_vote(self, voting_room):
        cast_vote(voting_room, "conn-1", "Player3")
        cast_vote(voting_room, "conn-2", "Player1")
        cast_vote(voting_room, "conn-4", "Player1")
        cast_vote(voting_room, "conn-5", "Player3")

        assert voting_room.ballot.ranking() == [("Player3", 2), ("Player1", 2)]
