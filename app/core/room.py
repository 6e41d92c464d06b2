"""Room model: player registry plus phase-tagged game state.

The room's phase is not a bare flag. ``Room.state`` holds one of the phase
classes below, and each carries only the data that phase needs: votes exist
only while ``Voting``, the guessing player only while ``Guessing``. The
flat attributes clients see (``phase``, ``vote_count``, ``current_word``...)
are read-only views over the current state object.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import ClassVar, Optional, Union

from .player import Player
from .roles import GameMode, Role
from .words import WordDeck


class GamePhase(str, Enum):
    """Phases of a room."""

    LOBBY = "lobby"
    PLAYING = "playing"
    VOTING = "voting"
    GUESSING = "guessing"
    ENDED = "ended"


class Winner(str, Enum):
    CIVILIANS = "civilians"
    UNDERCOVER = "undercover"


@dataclass
class SpeakingSlot:
    player_id: str
    name: str
    order: int

    def to_dict(self) -> dict:
        return {"player_id": self.player_id, "name": self.name, "order": self.order}


@dataclass
class Round:
    """Words and speaking order for the round being played."""

    majority_word: str
    minority_word: str
    speaking_order: list[SpeakingSlot] = field(default_factory=list)


class Ballot:
    """Votes for one voting round.

    The only writer of ``votes_by_player`` and ``vote_count``, which keeps
    each tally equal to the number of votes naming that target.
    """

    def __init__(self):
        self.votes_by_player: dict[str, str] = {}
        self.vote_count: dict[str, int] = {}
        self._first_vote: dict[str, int] = {}

    def has_voted(self, voter_id: str) -> bool:
        return voter_id in self.votes_by_player

    def record(self, voter_id: str, target_name: str) -> None:
        self.votes_by_player[voter_id] = target_name
        self.vote_count[target_name] = self.vote_count.get(target_name, 0) + 1
        self._first_vote.setdefault(target_name, len(self._first_vote))

    def move_voter(self, old_id: str, new_id: str) -> None:
        """Re-key a cast vote after its voter reconnected under a new id."""
        if old_id in self.votes_by_player:
            self.votes_by_player[new_id] = self.votes_by_player.pop(old_id)

    def ranking(self) -> list[tuple[str, int]]:
        """Targets ordered by descending tally.

        Equal tallies keep the order in which each target received its
        first vote.
        """
        return sorted(
            self.vote_count.items(),
            key=lambda item: (-item[1], self._first_vote[item[0]]),
        )

    def __len__(self) -> int:
        return len(self.votes_by_player)


@dataclass(frozen=True)
class Lobby:
    phase: ClassVar[GamePhase] = GamePhase.LOBBY


@dataclass(frozen=True)
class Playing:
    round: Round
    phase: ClassVar[GamePhase] = GamePhase.PLAYING


@dataclass(frozen=True)
class Voting:
    round: Round
    ballot: Ballot = field(default_factory=Ballot)
    phase: ClassVar[GamePhase] = GamePhase.VOTING


@dataclass(frozen=True)
class Guessing:
    round: Round
    guessing_player_id: str
    phase: ClassVar[GamePhase] = GamePhase.GUESSING


@dataclass(frozen=True)
class Ended:
    round: Round
    winner: Winner
    phase: ClassVar[GamePhase] = GamePhase.ENDED


PhaseState = Union[Lobby, Playing, Voting, Guessing, Ended]

ACTIVE_PHASES = (GamePhase.PLAYING, GamePhase.VOTING, GamePhase.GUESSING)


class Room:
    """One isolated game session, keyed by its room code."""

    def __init__(self, code: str, host_id: str, word_deck: Optional[WordDeck] = None):
        """Initialize an empty room in the lobby.

        Args:
            code: The room code, also the broadcast channel key
            host_id: Connection id of the creating player
            word_deck: Draw order for this room, a fresh deck by default
        """
        self.code: str = code
        self.host_id: str = host_id
        self.players: list[Player] = []
        self.mode: GameMode = GameMode.NORMAL
        self.state: PhaseState = Lobby()
        self.word_deck: WordDeck = word_deck or WordDeck()
        self.message: str = ""
        self.created_at: datetime = datetime.now()
        self.abandoned_at: Optional[datetime] = None

    # Phase views

    @property
    def phase(self) -> GamePhase:
        return self.state.phase

    @property
    def round(self) -> Optional[Round]:
        return getattr(self.state, "round", None)

    @property
    def is_active(self) -> bool:
        return self.phase in ACTIVE_PHASES

    @property
    def current_word(self) -> Optional[str]:
        return self.round.majority_word if self.round else None

    @property
    def ballot(self) -> Optional[Ballot]:
        return self.state.ballot if isinstance(self.state, Voting) else None

    @property
    def votes_by_player(self) -> dict[str, str]:
        return dict(self.ballot.votes_by_player) if self.ballot else {}

    @property
    def vote_count(self) -> dict[str, int]:
        return dict(self.ballot.vote_count) if self.ballot else {}

    @property
    def guessing_player_id(self) -> Optional[str]:
        return self.state.guessing_player_id if isinstance(self.state, Guessing) else None

    @property
    def is_guessing_phase(self) -> bool:
        return self.phase == GamePhase.GUESSING

    @property
    def speaking_order(self) -> list[SpeakingSlot]:
        if not self.is_active:
            return []
        return list(self.round.speaking_order)

    # Player registry

    def get_player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    def get_player_by_name(self, name: str) -> Optional[Player]:
        return next((p for p in self.players if p.name == name), None)

    def alive_players(self) -> list[Player]:
        return [p for p in self.players if p.is_alive]

    def voting_players(self) -> list[Player]:
        """Players who are both alive and connected."""
        return [p for p in self.players if p.can_vote]

    def undercover(self) -> Optional[Player]:
        return next((p for p in self.players if p.role == Role.UNDERCOVER), None)

    def add_player(self, player_id: str, name: str) -> Player:
        player = Player(player_id, name)
        self.players.append(player)
        return player

    def reconnect_player(self, player: Player, new_id: str) -> None:
        """Move a player to a new connection id, keeping score, role and liveness.

        Every id-keyed reference to the player follows it.
        """
        old_id = player.id
        player.id = new_id
        player.connected = True

        if self.host_id == old_id:
            self.host_id = new_id
        if self.ballot:
            self.ballot.move_voter(old_id, new_id)
        if self.guessing_player_id == old_id:
            self.state = Guessing(round=self.state.round, guessing_player_id=new_id)
        if self.round:
            for slot in self.round.speaking_order:
                if slot.player_id == old_id:
                    slot.player_id = new_id

    def remove_player(self, player_id: str) -> Optional[Player]:
        """Remove a player, handing the host role to the first remaining one.

        Returns:
            The removed player, or None if no player has this id
        """
        player = self.get_player(player_id)
        if player is None:
            return None

        self.players.remove(player)
        if self.host_id == player_id and self.players:
            self.host_id = self.players[0].id
        return player

    @property
    def is_empty(self) -> bool:
        return not self.players

    @property
    def has_connected_players(self) -> bool:
        return any(p.connected for p in self.players)

    def to_dict(self) -> dict:
        """Public snapshot of the room, identical for every member.

        Never contains a role or a secret word.
        """
        return {
            "code": self.code,
            "host_id": self.host_id,
            "phase": self.phase.value,
            "mode": self.mode.value,
            "message": self.message,
            "players": [p.to_dict(host_id=self.host_id) for p in self.players],
            "vote_count": self.vote_count,
            "speaking_order": [slot.to_dict() for slot in self.speaking_order],
            "is_guessing_phase": self.is_guessing_phase,
            "guessing_player_id": self.guessing_player_id,
        }

    def __repr__(self) -> str:
        return f"Room(code={self.code}, phase={self.phase.value}, players={len(self.players)})"
