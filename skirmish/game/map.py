from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from ..core.data.data_structures import Vector2
from ..core.data.game_enums import TerrainType
from ..core.data.game_info import TERRAIN_DATA, terrain_for_symbol


class MapFormatError(ValueError):
    """Raised when a map or a start position cannot be turned into a battlefield."""
    pass


@dataclass(eq=False)
class GameMap:
    """Static terrain of the battlefield.

    Terrain is held in a ``(height, width)`` uint8 array of ``TerrainType``
    values and never changes after construction. Units live in the
    ``Roster``, not here.
    """
    width: int
    height: int
    tiles: np.ndarray = field(init=False)
    _walkable: np.ndarray = field(init=False, repr=False)

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Map dimensions cannot be negative: {self.width}x{self.height}")

        self.tiles = np.full(
            (self.height, self.width), TerrainType.OPEN.value, dtype=np.uint8
        )
        self._refresh_walkable()

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> "GameMap":
        """Build terrain from a rectangular character grid.

        ``#`` is a wall and ``.`` is open floor. Faction start markers
        (``E``/``G``) are read as open floor; placing the units is the
        caller's job.

        Raises:
            MapFormatError: On an empty grid, ragged rows or unknown glyphs
        """
        rows = [row.rstrip("\r\n") for row in rows]
        # Trailing blank lines are common in map files
        while rows and not rows[-1].strip():
            rows.pop()

        if not rows:
            raise MapFormatError("Map has no rows")

        width = len(rows[0])
        if width == 0:
            raise MapFormatError("Map rows are empty")

        for y, row in enumerate(rows):
            if len(row) != width:
                raise MapFormatError(
                    f"Row {y} has length {len(row)}, expected {width}"
                )

        game_map = cls(width, len(rows))
        for y, row in enumerate(rows):
            for x, symbol in enumerate(row):
                terrain_type = terrain_for_symbol(symbol)
                if terrain_type is None:
                    raise MapFormatError(f"Unknown map symbol {symbol!r} at ({y}, {x})")
                game_map.tiles[y, x] = terrain_type.value

        game_map._refresh_walkable()
        return game_map

    @classmethod
    def from_string(cls, text: str) -> "GameMap":
        """Build terrain from newline separated map text."""
        return cls.from_rows(text.splitlines())

    def _refresh_walkable(self) -> None:
        """Recompute the cached walkability mask from the tile array."""
        blocks_movement = np.zeros(max(t.value for t in TerrainType) + 1, dtype=np.bool_)
        for terrain_type, info in TERRAIN_DATA.items():
            blocks_movement[terrain_type.value] = info.blocks_movement
        self._walkable = ~blocks_movement[self.tiles]

    def set_tile(self, position: Vector2, terrain_type: TerrainType) -> None:
        """Set terrain at position. Only meant for building maps."""
        if self.is_valid_position(position):
            self.tiles[position.y, position.x] = terrain_type.value
            self._refresh_walkable()

    def is_valid_position(self, position: Vector2) -> bool:
        return 0 <= position.x < self.width and 0 <= position.y < self.height

    def get_terrain_type(self, position: Vector2) -> Optional[TerrainType]:
        """Terrain at position, or None when out of bounds."""
        if self.is_valid_position(position):
            return TerrainType(int(self.tiles[position.y, position.x]))
        return None

    def is_open(self, position: Vector2) -> bool:
        """True only for in-bounds, non-wall cells."""
        return self.is_valid_position(position) and bool(
            self._walkable[position.y, position.x]
        )

    def neighbors(self, position: Vector2) -> list[Vector2]:
        """In-bounds orthogonal neighbors in reading order (never diagonal)."""
        return [
            neighbor for neighbor in position.orthogonal_neighbors()
            if self.is_valid_position(neighbor)
        ]

    def open_neighbors(self, position: Vector2) -> list[Vector2]:
        """Neighbors that are not walls, in reading order."""
        return [neighbor for neighbor in self.neighbors(position) if self.is_open(neighbor)]

    def get_walkable_mask(self) -> NDArray[np.bool_]:
        """Boolean mask of all non-wall cells. Returns a copy."""
        return self._walkable.copy()

    def get_wall_mask(self) -> NDArray[np.bool_]:
        """Boolean mask of all wall cells."""
        return ~self._walkable

    def iter_cells(self) -> Iterator[tuple[Vector2, TerrainType]]:
        """Read-only iteration of every cell in reading order."""
        for y in range(self.height):
            for x in range(self.width):
                yield Vector2(y, x), TerrainType(int(self.tiles[y, x]))

    def count_open_cells(self) -> int:
        return int(np.count_nonzero(self._walkable))
