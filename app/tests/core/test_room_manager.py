"""Tests for the room store."""

from datetime import datetime, timedelta

import pytest

from core.constants import ABANDONED_ROOM_TTL_SECONDS
from services.game_state import start_game


class TestRoomManager:
    def test_create_and_get(self, rooms):
        room = rooms.create("R1", host_id="c1")

        assert rooms.get("R1") is room
        assert room.host_id == "c1"
        assert len(rooms) == 1

    def test_create_duplicate_rejected(self, rooms):
        rooms.create("R1", host_id="c1")
        with pytest.raises(ValueError):
            rooms.create("R1", host_id="c2")

    def test_each_room_gets_its_own_deck(self, rooms):
        first = rooms.create("R1", host_id="c1")
        second = rooms.create("R2", host_id="c2")
        assert first.word_deck is not second.word_deck

    def test_delete(self, rooms):
        rooms.create("R1", host_id="c1")
        rooms.delete("R1")
        rooms.delete("R1")
        assert rooms.get("R1") is None

    def test_find_by_connection(self, rooms):
        room = rooms.create("R1", host_id="c1")
        room.add_player("c1", "Alice")

        assert rooms.find_by_connection("c1") is room
        assert rooms.find_by_connection("c9") is None

    def test_stats(self, rooms):
        first = rooms.create("R1", host_id="c1")
        for i in range(3):
            first.add_player(f"c{i}", f"P{i}")
        start_game(first)
        second = rooms.create("R2", host_id="d1")
        second.add_player("d1", "Solo")

        assert rooms.get_stats() == {"total_rooms": 2, "active_rooms": 1, "total_players": 4}


class TestCleanupStaleRooms:
    def abandon(self, rooms, code, seconds_ago):
        room = rooms.create(code, host_id="c1")
        room.add_player("c1", "Alice").connected = False
        room.abandoned_at = datetime.now() - timedelta(seconds=seconds_ago)
        return room

    def test_abandoned_room_removed_after_grace_period(self, rooms):
        self.abandon(rooms, "R1", ABANDONED_ROOM_TTL_SECONDS + 1)

        assert rooms.cleanup_stale_rooms() == 1
        assert rooms.get("R1") is None

    def test_recently_abandoned_room_kept(self, rooms):
        self.abandon(rooms, "R1", 1)

        assert rooms.cleanup_stale_rooms() == 0
        assert rooms.get("R1") is not None

    def test_room_with_connected_player_kept(self, rooms):
        room = self.abandon(rooms, "R1", ABANDONED_ROOM_TTL_SECONDS + 1)
        room.add_player("c2", "Bob")

        assert rooms.cleanup_stale_rooms() == 0
        assert rooms.get("R1") is room

    def test_only_stale_rooms_removed(self, rooms):
        self.abandon(rooms, "R1", ABANDONED_ROOM_TTL_SECONDS + 1)
        live = rooms.create("R2", host_id="d1")
        live.add_player("d1", "Dana")

        later = datetime.now() + timedelta(seconds=ABANDONED_ROOM_TTL_SECONDS * 2)
        assert rooms.cleanup_stale_rooms(now=later) == 1
        assert list(rooms.rooms) == ["R2"]
