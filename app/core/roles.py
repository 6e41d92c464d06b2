"""Role definitions and assignment logic."""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import MIN_PLAYERS


class Role(str, Enum):
    """True player roles. Engine-internal, never broadcast."""

    NONE = "none"
    CIVILIAN = "civilian"
    UNDERCOVER = "undercover"


class GameMode(str, Enum):
    """Game modes. Hard mode hides the undercover role from its holder."""

    NORMAL = "normal"
    HARD = "hard"


@dataclass(frozen=True)
class VisibleAssignment:
    """What a player is privately told at round start.

    In hard mode this differs from the player's true role.
    """

    role: Role
    word: Optional[str]

    def to_dict(self) -> dict:
        return {"role": self.role.value, "word": self.word}


def assign_roles(players: list, rng: random.Random | None = None) -> None:
    """Deal exactly one undercover role, everyone else is a civilian.

    Modifies players in-place to set their role and revive them.

    Args:
        players: List of Player objects to assign roles to
        rng: Random source, defaults to the module-level generator

    Raises:
        ValueError: If there are fewer than MIN_PLAYERS players
    """
    if len(players) < MIN_PLAYERS:
        raise ValueError(f"Minimum {MIN_PLAYERS} players required")

    undercover_index = (rng or random).randrange(len(players))
    for index, player in enumerate(players):
        player.role = Role.UNDERCOVER if index == undercover_index else Role.CIVILIAN
        player.is_alive = True


def visible_assignment(
    role: Role, majority_word: str, minority_word: str, mode: GameMode
) -> VisibleAssignment:
    """Compute the role and word disclosed to a player.

    | true role  | minority word | mode   | shown as   | word     |
    |------------|---------------|--------|------------|----------|
    | civilian   | any           | any    | civilian   | majority |
    | undercover | empty         | any    | undercover | none     |
    | undercover | set           | normal | undercover | minority |
    | undercover | set           | hard   | civilian   | minority |

    Args:
        role: The player's true role
        majority_word: Word dealt to civilians
        minority_word: Word dealt to the undercover, may be empty
        mode: The room's game mode

    Returns:
        The assignment to deliver privately
    """
    if role != Role.UNDERCOVER:
        return VisibleAssignment(role=Role.CIVILIAN, word=majority_word)

    if not minority_word:
        return VisibleAssignment(role=Role.UNDERCOVER, word=None)

    if mode == GameMode.HARD:
        return VisibleAssignment(role=Role.CIVILIAN, word=minority_word)

    return VisibleAssignment(role=Role.UNDERCOVER, word=minority_word)
