"""Static information tables for terrain and factions.

Glyphs are shared by the map parser and the text renderer, so they live
here rather than in either of them.
"""

from dataclasses import dataclass
from typing import Optional

from .game_enums import Faction, TerrainType, FACTION_NAMES, TERRAIN_NAMES


@dataclass(frozen=True)
class TerrainInfo:
    """Static information about a terrain type."""
    name: str
    symbol: str
    blocks_movement: bool


@dataclass(frozen=True)
class FactionInfo:
    """Static information about a faction."""
    name: str
    symbol: str


TERRAIN_DATA: dict[TerrainType, TerrainInfo] = {
    TerrainType.OPEN: TerrainInfo(TERRAIN_NAMES[TerrainType.OPEN], ".", blocks_movement=False),
    TerrainType.WALL: TerrainInfo(TERRAIN_NAMES[TerrainType.WALL], "#", blocks_movement=True),
}

FACTION_DATA: dict[Faction, FactionInfo] = {
    Faction.ELF: FactionInfo(FACTION_NAMES[Faction.ELF], "E"),
    Faction.GOBLIN: FactionInfo(FACTION_NAMES[Faction.GOBLIN], "G"),
}

SYMBOL_TO_TERRAIN: dict[str, TerrainType] = {
    info.symbol: terrain for terrain, info in TERRAIN_DATA.items()
}

SYMBOL_TO_FACTION: dict[str, Faction] = {
    info.symbol: faction for faction, info in FACTION_DATA.items()
}


def faction_from_name(name: str) -> Faction:
    """Resolve a faction from a config-style name ("elf", "Goblins", "E").

    Raises:
        ValueError: If the name matches no faction
    """
    key = name.strip()
    if key.upper() in SYMBOL_TO_FACTION:
        return SYMBOL_TO_FACTION[key.upper()]

    key = key.upper()
    for faction in Faction:
        if key in (faction.name, FACTION_NAMES[faction].upper()):
            return faction

    raise ValueError(f"Unknown faction: {name!r}")


def terrain_for_symbol(symbol: str) -> Optional[TerrainType]:
    """Terrain under a map glyph. Faction start markers stand on open floor."""
    if symbol in SYMBOL_TO_FACTION:
        return TerrainType.OPEN
    return SYMBOL_TO_TERRAIN.get(symbol)
