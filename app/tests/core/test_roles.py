"""Tests for role assignment."""

import random

import pytest

from core.player import Player
from core.roles import GameMode, Role, VisibleAssignment, assign_roles, visible_assignment


def make_players(count):
    return [Player(f"conn-{i}", f"Player{i}") for i in range(count)]


class TestAssignRoles:
    def test_one_undercover(self):
        players = make_players(6)
        assign_roles(players, rng=random.Random(4))

        roles = [p.role for p in players]
        assert roles.count(Role.UNDERCOVER) == 1
        assert roles.count(Role.CIVILIAN) == 5

    def test_revives_players(self):
        players = make_players(3)
        players[0].is_alive = False

        assign_roles(players)

        assert all(p.is_alive for p in players)

    def test_too_few_players(self):
        with pytest.raises(ValueError, match="Minimum 3 players required"):
            assign_roles(make_players(2))


class TestVisibleAssignment:
    def test_civilian_gets_majority_word(self):
        for mode in GameMode:
            assert visible_assignment(Role.CIVILIAN, "Dog", "Cat", mode) == VisibleAssignment(
                Role.CIVILIAN, "Dog"
            )

    def test_undercover_blank_word(self):
        for mode in GameMode:
            assert visible_assignment(Role.UNDERCOVER, "Island", "", mode) == VisibleAssignment(
                Role.UNDERCOVER, None
            )

    def test_undercover_normal_mode(self):
        assignment = visible_assignment(Role.UNDERCOVER, "Dog", "Cat", GameMode.NORMAL)
        assert assignment.to_dict() == {"role": "undercover", "word": "Cat"}

    def test_undercover_hard_mode_is_disguised(self):
        assignment = visible_assignment(Role.UNDERCOVER, "Dog", "Cat", GameMode.HARD)
        assert assignment.to_dict() == {"role": "civilian", "word": "Cat"}
