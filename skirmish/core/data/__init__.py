"""Core data structures and definitions.

This package contains fundamental data types and game definitions:
- data_structures.py: Vector2 with reading-order comparisons
- game_enums.py: Centralized enums for factions, terrain and battle phases
- game_info.py: Static terrain/faction data and glyph lookups
"""

from .data_structures import Vector2, ORTHOGONAL_OFFSETS
from .game_enums import Faction, TerrainType, BattlePhase, SearchStrategy, FACTION_NAMES, TERRAIN_NAMES
from .game_info import TerrainInfo, FactionInfo, TERRAIN_DATA, FACTION_DATA, SYMBOL_TO_TERRAIN, SYMBOL_TO_FACTION, faction_from_name, terrain_for_symbol

__all__ = [
    "Vector2",
    "ORTHOGONAL_OFFSETS",
    "Faction",
    "TerrainType",
    "BattlePhase",
    "SearchStrategy",
    "FACTION_NAMES",
    "TERRAIN_NAMES",
    "TerrainInfo",
    "FactionInfo",
    "TERRAIN_DATA",
    "FACTION_DATA",
    "SYMBOL_TO_TERRAIN",
    "SYMBOL_TO_FACTION",
    "faction_from_name",
    "terrain_for_symbol",
]
