from collections.abc import Iterable, KeysView
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from ..core.data.data_structures import Vector2
from ..core.data.game_enums import Faction
from .entities.unit import Unit
from .map import GameMap, MapFormatError


class Roster:
    """Owns every living unit of one battle.

    Units are indexed by id; an occupancy array (-1 = empty, otherwise the
    unit id) gives O(1) position lookups and guarantees that no two units
    share a square. Removal is immediate and permanent: a removed id is
    never looked up successfully again.
    """

    def __init__(self, game_map: GameMap):
        self.game_map = game_map
        self._units: dict[int, Unit] = {}
        self._next_id = 0
        # int32 leaves room for any id a map of this size can produce
        self.occupancy = np.full((game_map.height, game_map.width), -1, dtype=np.int32)

    def __len__(self) -> int:
        return len(self._units)

    def __contains__(self, unit_id: int) -> bool:
        return unit_id in self._units

    def __iter__(self):
        """Iterate over living units in id order."""
        return iter(list(self._units.values()))

    def keys(self) -> KeysView[int]:
        return self._units.keys()

    # ============== Adding and removing ==============

    def spawn(self, faction: Faction, position: Vector2, hit_points: int, attack_power: int) -> Unit:
        """Create a unit with the next free id and place it.

        Raises:
            MapFormatError: If the position is out of bounds or a wall
            ValueError: If the position is already occupied
        """
        unit = Unit(self._next_id, faction, position, hit_points, attack_power)
        self.add_unit(unit)
        return unit

    def add_unit(self, unit: Unit) -> None:
        """Place an existing unit, keeping its id.

        Raises:
            MapFormatError: If the position is out of bounds or a wall
            ValueError: If the id is taken or the position is occupied
        """
        position = unit.position
        if not self.game_map.is_valid_position(position):
            raise MapFormatError(f"Start position {position} is outside the map")
        if not self.game_map.is_open(position):
            raise MapFormatError(f"Start position {position} is a wall")
        if unit.unit_id in self._units:
            raise ValueError(f"Unit id {unit.unit_id} is already in the roster")
        occupant = self.get_unit_at(position)
        if occupant is not None:
            raise ValueError(f"Position {position} is already occupied by {occupant.name}")

        self._units[unit.unit_id] = unit
        self.occupancy[position.y, position.x] = unit.unit_id
        self._next_id = max(self._next_id, unit.unit_id + 1)

    def remove_unit(self, unit_id: int) -> Optional[Unit]:
        """Remove unit by id and clear its square. Returns the unit, or None if absent."""
        unit = self._units.pop(unit_id, None)
        if unit is None:
            return None

        self.occupancy[unit.position.y, unit.position.x] = -1
        return unit

    # ============== Lookups ==============

    def get_unit(self, unit_id: int) -> Optional[Unit]:
        return self._units.get(unit_id)

    def is_alive(self, unit_id: int) -> bool:
        """Liveness lookup used to skip units that died earlier in a round."""
        return unit_id in self._units

    def get_unit_at(self, position: Vector2) -> Optional[Unit]:
        """Get unit at position using O(1) occupancy array lookup."""
        if not self.game_map.is_valid_position(position):
            return None

        unit_id = int(self.occupancy[position.y, position.x])
        if unit_id < 0:
            return None
        return self._units.get(unit_id)

    def is_occupied(self, position: Vector2) -> bool:
        return self.get_unit_at(position) is not None

    def living_units(self) -> list[Unit]:
        """All living units in reading order of their positions."""
        return sorted(self._units.values(), key=lambda unit: unit.position)

    def units_of(self, faction: Faction) -> list[Unit]:
        """Living units of one faction in reading order."""
        return [unit for unit in self.living_units() if unit.faction == faction]

    def living_enemies(self, of: Faction) -> list[Unit]:
        """Living units opposing ``of``, in reading order."""
        return [unit for unit in self.living_units() if unit.faction != of]

    def adjacent_enemies(self, unit: Unit) -> list[Unit]:
        """Living enemies orthogonally adjacent to ``unit``, in reading order."""
        enemies = []
        for position in self.game_map.neighbors(unit.position):
            other = self.get_unit_at(position)
            if other is not None and other.is_enemy_of(unit):
                enemies.append(other)
        return enemies

    @staticmethod
    def is_adjacent(a: Unit, b: Unit) -> bool:
        """Manhattan distance exactly 1."""
        return a.position.is_adjacent_to(b.position)

    def count(self, faction: Faction) -> int:
        return sum(1 for unit in self._units.values() if unit.faction == faction)

    def faction_counts(self) -> tuple[int, int]:
        """Living counts as ``(elves, goblins)``."""
        return (self.count(Faction.ELF), self.count(Faction.GOBLIN))

    def counts_by_faction(self) -> dict[Faction, int]:
        return {faction: self.count(faction) for faction in Faction}

    def factions_present(self) -> set[Faction]:
        return {unit.faction for unit in self._units.values()}

    def total_hit_points(self) -> int:
        """Sum of hit points over all living units."""
        return sum(unit.hp_current for unit in self._units.values())

    def occupied_mask(self) -> NDArray[np.bool_]:
        """Boolean mask of all occupied squares."""
        return self.occupancy >= 0

    def occupied_positions(self) -> set[Vector2]:
        return {unit.position for unit in self._units.values()}

    def acting_order(self) -> tuple[int, ...]:
        """Snapshot of living unit ids sorted by reading order of their positions."""
        return tuple(unit.unit_id for unit in self.living_units())

    # ============== Mutation ==============

    def move_unit(self, unit_id: int, position: Vector2) -> bool:
        """Move a unit one square and update occupancy.

        Returns False, leaving everything untouched, when the unit is gone
        or the target is a wall, out of bounds, occupied or not adjacent.
        """
        unit = self.get_unit(unit_id)
        if unit is None:
            return False

        if not self.game_map.is_open(position):
            return False

        if self.is_occupied(position):
            return False

        if not unit.position.is_adjacent_to(position):
            return False

        old_position = unit.position
        self.occupancy[old_position.y, old_position.x] = -1
        unit.update_position(position)
        self.occupancy[position.y, position.x] = unit_id

        return True

    def copy(self) -> "Roster":
        """Fully independent copy sharing only the immutable map."""
        clone = Roster(self.game_map)
        for unit in self._units.values():
            clone.add_unit(unit.copy())
        clone._next_id = self._next_id
        return clone

    @classmethod
    def from_units(cls, game_map: GameMap, units: Iterable[Unit]) -> "Roster":
        roster = cls(game_map)
        for unit in units:
            roster.add_unit(unit)
        return roster
