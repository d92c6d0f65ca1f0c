"""
Unit tests for core data structures.

Tests Vector2 arithmetic, reading-order comparisons and the static
faction/terrain lookups used by the map parser.
"""
import pytest
import numpy as np

from skirmish.core.data import (
    Faction,
    TerrainType,
    Vector2,
    faction_from_name,
    terrain_for_symbol,
)


class TestVector2:
    """Test the Vector2 class."""

    def test_initialization(self):
        """Test Vector2 initialization."""
        v = Vector2(3, 4)  # Vector2(y, x)
        assert v.y == 3
        assert v.x == 4

    def test_equality_and_hash(self):
        """Equal vectors compare equal and collapse in sets."""
        assert Vector2(3, 4) == Vector2(3, 4)
        assert Vector2(3, 4) != Vector2(4, 3)
        assert len({Vector2(3, 4), Vector2(3, 4), Vector2(4, 3)}) == 2

    def test_arithmetic(self):
        assert Vector2(3, 4) + Vector2(1, 2) == Vector2(4, 6)
        assert Vector2(3, 4) - Vector2(1, 2) == Vector2(2, 2)

    def test_unpacking_and_indexing(self):
        y, x = Vector2(5, 7)
        assert (y, x) == (5, 7)
        assert Vector2(5, 7)[0] == 5
        assert Vector2(5, 7)[1] == 7
        with pytest.raises(IndexError):
            Vector2(5, 7)[2]

    def test_string_representation(self):
        assert repr(Vector2(3, 4)) == "Vector2(3, 4)"

    def test_immutable(self):
        v = Vector2(1, 1)
        with pytest.raises(AttributeError):
            v.x = 2


class TestReadingOrder:
    """Positions compare top-to-bottom, then left-to-right."""

    def test_row_dominates_column(self):
        assert Vector2(0, 9) < Vector2(1, 0)

    def test_column_breaks_row_ties(self):
        assert Vector2(2, 1) < Vector2(2, 3)
        assert Vector2(2, 3) > Vector2(2, 1)

    def test_total_ordering_helpers(self):
        assert Vector2(1, 1) <= Vector2(1, 1)
        assert Vector2(1, 2) >= Vector2(1, 1)

    def test_sorting(self, sample_positions):
        shuffled = [sample_positions[3], sample_positions[0], sample_positions[2], sample_positions[1]]
        assert sorted(shuffled) == sample_positions

    def test_min_picks_first_in_reading_order(self):
        assert min([Vector2(3, 0), Vector2(2, 5), Vector2(2, 4)]) == Vector2(2, 4)

    def test_reading_order_key(self):
        assert Vector2(2, 5).reading_order_key() == (2, 5)


class TestNeighbors:
    """Test adjacency helpers."""

    def test_orthogonal_neighbors_in_reading_order(self):
        neighbors = Vector2(2, 2).orthogonal_neighbors()
        assert neighbors == [Vector2(1, 2), Vector2(2, 1), Vector2(2, 3), Vector2(3, 2)]
        assert neighbors == sorted(neighbors)

    def test_manhattan_distance(self):
        assert Vector2(0, 0).manhattan_distance_to(Vector2(3, 4)) == 7

    def test_adjacency_excludes_diagonals(self):
        center = Vector2(2, 2)
        assert center.is_adjacent_to(Vector2(1, 2))
        assert center.is_adjacent_to(Vector2(2, 3))
        assert not center.is_adjacent_to(Vector2(1, 1))
        assert not center.is_adjacent_to(center)


class TestConversions:
    """Test conversions to and from other containers."""

    def test_from_tuple(self):
        assert Vector2.from_tuple((2, 7)) == Vector2(2, 7)

    def test_from_list_casts_to_int(self):
        v = Vector2.from_list([2.0, 7.0])
        assert v == Vector2(2, 7)
        assert isinstance(v.y, int)

    def test_from_short_list_raises(self):
        with pytest.raises(ValueError):
            Vector2.from_list([1])

    def test_to_numpy(self):
        array = Vector2(2, 7).to_numpy()
        assert array.dtype == np.int16
        assert array.tolist() == [2, 7]


class TestFactionLookups:
    """Test faction and terrain glyph lookups."""

    @pytest.mark.parametrize("name,expected", [
        ("E", Faction.ELF),
        ("elf", Faction.ELF),
        ("Elves", Faction.ELF),
        ("g", Faction.GOBLIN),
        ("GOBLIN", Faction.GOBLIN),
        ("goblins", Faction.GOBLIN),
    ])
    def test_faction_from_name(self, name, expected):
        assert faction_from_name(name) == expected

    def test_unknown_faction(self):
        with pytest.raises(ValueError):
            faction_from_name("orc")

    def test_opponent(self):
        assert Faction.ELF.opponent == Faction.GOBLIN
        assert Faction.GOBLIN.opponent == Faction.ELF

    def test_terrain_for_symbol(self):
        assert terrain_for_symbol("#") == TerrainType.WALL
        assert terrain_for_symbol(".") == TerrainType.OPEN
        assert terrain_for_symbol("E") == TerrainType.OPEN
        assert terrain_for_symbol("G") == TerrainType.OPEN
        assert terrain_for_symbol("?") is None
