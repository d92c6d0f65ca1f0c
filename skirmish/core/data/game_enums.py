"""Centralized enums for the battle simulation.

This module contains all core enums that are used across multiple modules,
providing a single source of truth.
"""

from enum import Enum, auto


class Faction(Enum):
    """The two opposing sides of a battle."""
    ELF = 0
    GOBLIN = 1

    @property
    def opponent(self) -> "Faction":
        """The opposing faction."""
        return Faction.GOBLIN if self is Faction.ELF else Faction.ELF


class TerrainType(Enum):
    """Static terrain. Units never alter it."""
    OPEN = 0
    WALL = 1


class BattlePhase(Enum):
    """States of the round/turn state machine."""
    IDLE = auto()               # Round boundary, nothing in progress
    ROUND_IN_PROGRESS = auto()
    ROUND_COMPLETE = auto()
    GAME_OVER = auto()


class SearchStrategy(Enum):
    """How the power-tuning driver walks candidate boosts."""
    LINEAR = "linear"   # 1, 2, 3, ... until the first flawless win
    BISECT = "bisect"   # Double until a flawless win, then bisect the gap


FACTION_NAMES = {
    Faction.ELF: "Elves",
    Faction.GOBLIN: "Goblins",
}

TERRAIN_NAMES = {
    TerrainType.OPEN: "Open",
    TerrainType.WALL: "Wall",
}
