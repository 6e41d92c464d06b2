"""Pytest configuration and fixtures."""

import random

import pytest

from core.roles import GameMode, Role
from core.room import Room
from core.room_manager import RoomManager
from core.words import WordDeck
from services.engine import GameEngine
from services.game_state import start_game, transition_to_voting

WORDS = [("Coffee", "Tea")]
BLANK_WORDS = [("Island", "")]


def make_room(code: str, player_count: int = 0, pairs=WORDS) -> Room:
    room = Room(code=code, host_id="conn-1", word_deck=WordDeck(pairs, rng=random.Random(0)))
    for i in range(player_count):
        room.add_player(f"conn-{i + 1}", f"Player{i + 1}")
    return room


def undercover_of(room: Room):
    return next(p for p in room.players if p.role == Role.UNDERCOVER)


def civilians_of(room: Room) -> list:
    return [p for p in room.players if p.role == Role.CIVILIAN]


@pytest.fixture
def room():
    """Create an empty room for testing."""
    return make_room("test-room-123")


@pytest.fixture
def room_with_players():
    """Create a room with 5 players (enough to start)."""
    room = make_room("test-room-456", player_count=5)
    return room, list(room.players)


@pytest.fixture
def started_room():
    """Create a room with a round dealt."""
    room = make_room("test-room-789", player_count=5)
    start_game(room, rng=random.Random(1))
    return room


@pytest.fixture
def voting_room():
    """Create a room in voting state."""
    room = make_room("test-room-voting", player_count=5)
    start_game(room, rng=random.Random(2))
    transition_to_voting(room)
    return room


@pytest.fixture
def hard_room():
    """Create a hard mode room with a round dealt."""
    room = make_room("test-room-hard", player_count=4)
    start_game(room, mode=GameMode.HARD, rng=random.Random(3))
    return room


@pytest.fixture
def rooms():
    return RoomManager(deck_factory=lambda: WordDeck(WORDS, rng=random.Random(0)))


@pytest.fixture
def engine(rooms):
    return GameEngine(rooms, rng=random.Random(42))
