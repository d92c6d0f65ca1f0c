"""
Unit tests for the Roster.

Tests unit placement, the occupancy grid, liveness lookups and the acting
order snapshot.
"""
import pytest

from skirmish.core.data import Faction, Vector2
from skirmish.game.entities.unit import Unit
from skirmish.game.map import GameMap, MapFormatError
from skirmish.game.roster import Roster
from tests.test_utils import ARENA_ROWS, RosterTestBuilder


@pytest.fixture
def arena_roster():
    _, roster = (
        RosterTestBuilder(ARENA_ROWS)
        .with_elf(1, 1)
        .with_elf(1, 3)
        .with_goblin(3, 1)
        .with_goblin(3, 3)
        .build()
    )
    return roster


class TestRosterPlacement:
    """Test adding and removing units."""

    def test_spawn_assigns_sequential_ids(self, arena_roster):
        assert sorted(arena_roster.keys()) == [0, 1, 2, 3]
        assert arena_roster.get_unit(2).faction == Faction.GOBLIN

    def test_occupancy_tracks_units(self, arena_roster):
        assert arena_roster.occupancy[1, 1] == 0
        assert arena_roster.occupancy[3, 3] == 3
        assert arena_roster.occupancy[2, 2] == -1
        assert arena_roster.get_unit_at(Vector2(1, 3)).unit_id == 1

    def test_spawn_on_wall(self, arena_roster):
        with pytest.raises(MapFormatError):
            arena_roster.spawn(Faction.ELF, Vector2(0, 0), 200, 3)

    def test_spawn_outside_map(self, arena_roster):
        with pytest.raises(MapFormatError):
            arena_roster.spawn(Faction.ELF, Vector2(9, 9), 200, 3)

    def test_spawn_on_occupied_square(self, arena_roster):
        with pytest.raises(ValueError, match="occupied"):
            arena_roster.spawn(Faction.GOBLIN, Vector2(1, 1), 200, 3)

    def test_duplicate_id(self, arena_roster):
        with pytest.raises(ValueError, match="already in the roster"):
            arena_roster.add_unit(Unit(0, Faction.ELF, Vector2(2, 2), 200, 3))

    def test_remove_unit(self, arena_roster):
        removed = arena_roster.remove_unit(2)
        assert removed.unit_id == 2
        assert not arena_roster.is_alive(2)
        assert arena_roster.get_unit_at(Vector2(3, 1)) is None
        assert arena_roster.remove_unit(2) is None
        assert len(arena_roster) == 3

    def test_ids_are_never_reused(self, arena_roster):
        arena_roster.remove_unit(3)
        unit = arena_roster.spawn(Faction.GOBLIN, Vector2(2, 2), 200, 3)
        assert unit.unit_id == 4


class TestRosterQueries:
    """Test lookups and aggregates."""

    def test_living_units_in_reading_order(self, arena_roster):
        positions = [unit.position for unit in arena_roster.living_units()]
        assert positions == sorted(positions)

    def test_faction_counts(self, arena_roster):
        assert arena_roster.faction_counts() == (2, 2)
        arena_roster.remove_unit(0)
        assert arena_roster.faction_counts() == (1, 2)
        assert arena_roster.counts_by_faction() == {Faction.ELF: 1, Faction.GOBLIN: 2}
        assert arena_roster.factions_present() == {Faction.ELF, Faction.GOBLIN}

    def test_living_enemies(self, arena_roster):
        enemies = arena_roster.living_enemies(Faction.ELF)
        assert [unit.unit_id for unit in enemies] == [2, 3]

    def test_adjacent_enemies(self):
        _, roster = (
            RosterTestBuilder(ARENA_ROWS)
            .with_elf(2, 2)
            .with_goblin(3, 2)
            .with_goblin(1, 2)
            .with_elf(2, 1)
            .with_goblin(1, 1)
            .build()
        )
        elf = roster.get_unit_at(Vector2(2, 2))
        assert [unit.position for unit in roster.adjacent_enemies(elf)] == [Vector2(1, 2), Vector2(3, 2)]

    def test_is_adjacent(self, arena_roster):
        assert not Roster.is_adjacent(arena_roster.get_unit(0), arena_roster.get_unit(1))
        arena_roster.move_unit(0, Vector2(1, 2))
        assert Roster.is_adjacent(arena_roster.get_unit(0), arena_roster.get_unit(1))

    def test_total_hit_points(self):
        _, roster = RosterTestBuilder(ARENA_ROWS).with_elf(1, 1, hp=20).with_goblin(3, 3, hp=7).build()
        assert roster.total_hit_points() == 27

    def test_occupied_mask(self, arena_roster):
        mask = arena_roster.occupied_mask()
        assert int(mask.sum()) == 4
        assert mask[1, 3]
        assert arena_roster.occupied_positions() == {
            Vector2(1, 1), Vector2(1, 3), Vector2(3, 1), Vector2(3, 3)
        }

    def test_acting_order_follows_positions_not_ids(self):
        game_map = GameMap.from_rows(ARENA_ROWS)
        roster = Roster.from_units(game_map, [
            Unit(0, Faction.GOBLIN, Vector2(3, 3), 200, 3),
            Unit(1, Faction.ELF, Vector2(1, 2), 200, 3),
            Unit(2, Faction.ELF, Vector2(2, 1), 200, 3),
        ])
        assert roster.acting_order() == (1, 2, 0)
        assert isinstance(roster.acting_order(), tuple)


class TestRosterMovement:
    """Test move_unit validation."""

    def test_move_to_adjacent_open_square(self, arena_roster):
        assert arena_roster.move_unit(0, Vector2(1, 2))
        assert arena_roster.get_unit(0).position == Vector2(1, 2)
        assert arena_roster.occupancy[1, 1] == -1
        assert arena_roster.occupancy[1, 2] == 0

    @pytest.mark.parametrize("target", [
        Vector2(0, 1),   # wall
        Vector2(1, 3),   # occupied
        Vector2(2, 2),   # diagonal
        Vector2(1, 1),   # own square
    ])
    def test_invalid_moves_are_rejected(self, arena_roster, target):
        assert not arena_roster.move_unit(0, target)
        assert arena_roster.get_unit(0).position == Vector2(1, 1)
        assert arena_roster.occupancy[1, 1] == 0

    def test_move_missing_unit(self, arena_roster):
        assert not arena_roster.move_unit(99, Vector2(1, 2))


class TestRosterCopy:
    """Test that copies share nothing mutable."""

    def test_copy_is_independent(self, arena_roster):
        clone = arena_roster.copy()
        clone.get_unit(0).take_damage(50)
        clone.move_unit(1, Vector2(2, 3))
        clone.remove_unit(2)

        assert arena_roster.get_unit(0).hp_current == 200
        assert arena_roster.get_unit(1).position == Vector2(1, 3)
        assert arena_roster.is_alive(2)
        assert arena_roster.occupancy[2, 3] == -1
