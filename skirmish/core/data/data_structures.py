"""Core spatial data structures.

Positions are stored row-major as ``(y, x)``. Because the row comes first,
the natural tuple ordering of a position *is* reading order: top to bottom,
then left to right. Every tie-break in the battle simulation relies on this.
"""

from dataclasses import dataclass
from functools import total_ordering
from typing import Iterator

import numpy as np
from numpy.typing import NDArray


@total_ordering
@dataclass(frozen=True)
class Vector2:
    """2D grid coordinate.

    Uses (y, x) ordering for direct alignment with 2D array access patterns.
    First parameter is row (y-coordinate), second is column (x-coordinate).

    Comparison operators implement reading order, so ``min(positions)`` and
    ``sorted(positions)`` behave the way the combat rules expect.
    """
    y: int
    x: int

    def __add__(self, other: "Vector2") -> "Vector2":
        """Vector addition."""
        return Vector2(self.y + other.y, self.x + other.x)

    def __sub__(self, other: "Vector2") -> "Vector2":
        """Vector subtraction."""
        return Vector2(self.y - other.y, self.x - other.x)

    def __lt__(self, other: "Vector2") -> bool:
        """Reading order comparison."""
        if not isinstance(other, Vector2):
            return NotImplemented
        return (self.y, self.x) < (other.y, other.x)

    def __iter__(self) -> Iterator[int]:
        """Make Vector2 iterable for unpacking (y, x order)."""
        yield self.y
        yield self.x

    def __getitem__(self, key: int) -> int:
        """Enable indexed access like Vector2[0] for y, Vector2[1] for x."""
        if key == 0:
            return self.y
        elif key == 1:
            return self.x
        else:
            raise IndexError("Vector2 index out of range (must be 0 or 1)")

    def __repr__(self) -> str:
        return f"Vector2({self.y}, {self.x})"

    def manhattan_distance_to(self, other: "Vector2") -> int:
        """Calculate Manhattan distance to another vector."""
        return abs(self.y - other.y) + abs(self.x - other.x)

    def is_adjacent_to(self, other: "Vector2") -> bool:
        """Check orthogonal adjacency (Manhattan distance exactly 1)."""
        return self.manhattan_distance_to(other) == 1

    def orthogonal_neighbors(self) -> list["Vector2"]:
        """The four orthogonal neighbors, in reading order.

        No bounds checking is done here; see ``GameMap.neighbors``.
        """
        return [self + offset for offset in ORTHOGONAL_OFFSETS]

    def reading_order_key(self) -> tuple[int, int]:
        """Sort key for reading order."""
        return (self.y, self.x)

    @classmethod
    def from_tuple(cls, coords: tuple[int, int]) -> "Vector2":
        """Create Vector2 from coordinate tuple (y, x order)."""
        return cls(coords[0], coords[1])

    @classmethod
    def from_list(cls, coords: list[int]) -> "Vector2":
        """Create Vector2 from coordinate list (y, x order)."""
        if len(coords) < 2:
            raise ValueError("List must contain at least 2 elements")
        return cls(int(coords[0]), int(coords[1]))

    def to_tuple(self) -> tuple[int, int]:
        """Convert to coordinate tuple (y, x order)."""
        return (self.y, self.x)

    def to_numpy(self) -> NDArray[np.int16]:
        """Convert to numpy array (y, x order). Uses int16 for memory efficiency."""
        return np.array([self.y, self.x], dtype=np.int16)


# Up, left, right, down: already in reading order relative to the center.
ORTHOGONAL_OFFSETS: tuple[Vector2, ...] = (
    Vector2(-1, 0),
    Vector2(0, -1),
    Vector2(0, 1),
    Vector2(1, 0),
)
