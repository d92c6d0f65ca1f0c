"""
Obstacle-aware shortest paths and move selection.

All searches are breadth-first flood fills over a numpy distance array
(uniform step cost, orthogonal steps only). Walls and every square in the
caller's ``occupied`` set are impassable.

Move selection runs two separately named searches:

1. ``choose_destination`` floods outward from the moving unit and picks
   the nearest in-range square, ties broken by reading order of the square.
2. ``choose_step`` floods back from that destination and picks, among the
   unit's free neighbors lying on a shortest path, the first in reading
   order.

The two tie-breaks are not interchangeable: picking the first step in
reading order that leads to *any* nearest square can head for a different
destination than the one the rules select.
"""
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
from numpy.typing import NDArray

from ..core.data.data_structures import Vector2
from .map import GameMap

UNREACHABLE = -1

Occupied = Union[NDArray[np.bool_], Iterable[Vector2]]


@dataclass(frozen=True)
class MovePlan:
    """Outcome of move selection for one unit."""
    destination: Vector2   # in-range square being approached
    step: Optional[Vector2]  # square to move onto this turn; None when already in range
    distance: int          # steps from the unit to destination


class Pathfinder:
    """Breadth-first search over a fixed ``GameMap``."""

    def __init__(self, game_map: GameMap):
        self.game_map = game_map
        self._walls = game_map.get_wall_mask()

    def blocked_mask(self, occupied: Occupied, *passable: Vector2) -> NDArray[np.bool_]:
        """Combine walls and occupied squares into one obstacle mask.

        Args:
            occupied: Boolean mask or collection of occupied positions
            passable: Positions to keep walkable even if occupied
        """
        if isinstance(occupied, np.ndarray):
            blocked = self._walls | occupied
        else:
            blocked = self._walls.copy()
            for position in occupied:
                if self.game_map.is_valid_position(position):
                    blocked[position.y, position.x] = True

        for position in passable:
            if self.game_map.is_open(position):
                blocked[position.y, position.x] = False
        return blocked

    def distance_field(self, start: Vector2, blocked: NDArray[np.bool_]) -> NDArray[np.int32]:
        """Steps from ``start`` to every reachable square; ``UNREACHABLE`` elsewhere.

        ``start`` itself is always distance 0 even if ``blocked`` marks it.
        """
        height, width = self.game_map.height, self.game_map.width
        distances = np.full((height, width), UNREACHABLE, dtype=np.int32)
        if not self.game_map.is_valid_position(start):
            return distances

        distances[start.y, start.x] = 0
        queue = deque([start])

        while queue:
            position = queue.popleft()
            next_distance = distances[position.y, position.x] + 1

            for neighbor in self.game_map.neighbors(position):
                if blocked[neighbor.y, neighbor.x]:
                    continue
                if distances[neighbor.y, neighbor.x] != UNREACHABLE:
                    continue
                distances[neighbor.y, neighbor.x] = next_distance
                queue.append(neighbor)

        return distances

    def shortest_distance(self, occupied: Occupied, start: Vector2, goal: Vector2) -> Optional[int]:
        """Minimum number of orthogonal steps from ``start`` to ``goal``.

        Occupied squares other than ``start`` and ``goal`` are impassable.
        Returns None if ``goal`` is a wall, out of bounds or unreachable.
        """
        if not self.game_map.is_open(goal) or not self.game_map.is_valid_position(start):
            return None
        if start == goal:
            return 0

        blocked = self.blocked_mask(occupied, start, goal)
        distance = int(self.distance_field(start, blocked)[goal.y, goal.x])
        return None if distance == UNREACHABLE else distance

    def in_range_squares(self, origin: Vector2, targets: Iterable[Vector2], occupied: Occupied) -> list[Vector2]:
        """Open squares adjacent to any target, in reading order.

        Occupied squares are excluded, except ``origin`` which counts as
        open for the unit standing on it.
        """
        blocked = self.blocked_mask(occupied, origin)
        squares = set()
        for target in targets:
            for neighbor in self.game_map.neighbors(target):
                if not blocked[neighbor.y, neighbor.x]:
                    squares.add(neighbor)
        return sorted(squares)

    def choose_destination(
        self, origin: Vector2, candidates: Iterable[Vector2], occupied: Occupied
    ) -> Optional[tuple[Vector2, int]]:
        """Nearest reachable candidate from ``origin`` and its distance.

        Ties on distance go to the candidate first in reading order.
        Returns None when no candidate is reachable.
        """
        blocked = self.blocked_mask(occupied, origin)
        distances = self.distance_field(origin, blocked)

        best: Optional[tuple[int, Vector2]] = None
        for candidate in candidates:
            distance = int(distances[candidate.y, candidate.x])
            if distance == UNREACHABLE:
                continue
            if best is None or (distance, candidate) < best:
                best = (distance, candidate)

        if best is None:
            return None
        distance, destination = best
        return destination, distance

    def choose_step(self, origin: Vector2, destination: Vector2, occupied: Occupied) -> Optional[Vector2]:
        """First step from ``origin`` along a shortest path to ``destination``.

        Searches from ``destination`` back toward ``origin``; of the free
        squares next to ``origin`` that are closest to ``destination``, the
        first in reading order wins. Returns None if ``origin`` is already
        there or no route exists.
        """
        if origin == destination:
            return None

        blocked = self.blocked_mask(occupied, destination)
        blocked[origin.y, origin.x] = True
        distances = self.distance_field(destination, blocked)

        best: Optional[tuple[int, Vector2]] = None
        for neighbor in self.game_map.neighbors(origin):
            if blocked[neighbor.y, neighbor.x]:
                continue
            distance = int(distances[neighbor.y, neighbor.x])
            if distance == UNREACHABLE:
                continue
            if best is None or (distance, neighbor) < best:
                best = (distance, neighbor)

        return None if best is None else best[1]

    def plan_move(self, origin: Vector2, targets: Iterable[Vector2], occupied: Occupied) -> Optional[MovePlan]:
        """Full move selection for a unit at ``origin`` hunting ``targets``.

        Returns None when no in-range square is reachable (the unit stays
        put and does not attack). A plan with ``step`` None means the unit
        is already in range.
        """
        candidates = self.in_range_squares(origin, targets, occupied)
        if not candidates:
            return None

        choice = self.choose_destination(origin, candidates, occupied)
        if choice is None:
            return None

        destination, distance = choice
        if distance == 0:
            return MovePlan(destination=destination, step=None, distance=0)

        step = self.choose_step(origin, destination, occupied)
        # A reachable destination always has a first step
        assert step is not None, f"No first step from {origin} towards {destination}"
        return MovePlan(destination=destination, step=step, distance=distance)
