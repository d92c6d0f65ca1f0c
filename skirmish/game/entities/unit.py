"""Combatant units.

A unit is deliberately small: identity, faction, position, hit points and
attack power. Movement must go through ``Roster.move_unit`` so the roster's
occupancy grid stays in sync.
"""

from ...core.data import Faction, FACTION_DATA, Vector2


class Unit:
    """A single combatant.

    Examples:
        unit.hp_current            # 200
        unit.is_alive              # True while hp_current > 0
        unit.take_damage(3)        # returns remaining hit points
        roster.move_unit(unit.unit_id, Vector2(2, 3))
    """

    def __init__(self, unit_id: int, faction: Faction, position: Vector2, hit_points: int, attack_power: int):
        """Initialize a unit.

        Args:
            unit_id: Stable identity, assigned once by the roster and never reused
            faction: Side the unit fights for
            position: Starting square
            hit_points: Starting hit points
            attack_power: Damage dealt per attack
        """
        if hit_points <= 0:
            raise ValueError(f"Units must start with positive hit points, got {hit_points}")
        if attack_power < 0:
            raise ValueError(f"Attack power cannot be negative, got {attack_power}")

        self._unit_id = unit_id
        self._faction = faction
        self._position = position
        self.hp_max = hit_points
        self.hp_current = hit_points
        self.attack_power = attack_power

    # ============== Core Properties ==============

    @property
    def unit_id(self) -> int:
        return self._unit_id

    @property
    def faction(self) -> Faction:
        return self._faction

    @property
    def position(self) -> Vector2:
        return self._position

    @property
    def symbol(self) -> str:
        """Map glyph for this unit's faction."""
        return FACTION_DATA[self._faction].symbol

    @property
    def name(self) -> str:
        """Display name, e.g. ``G7``."""
        return f"{self.symbol}{self._unit_id}"

    @property
    def is_alive(self) -> bool:
        return self.hp_current > 0

    # ============== Methods ==============

    def is_enemy_of(self, other: "Unit") -> bool:
        return self._faction != other.faction

    def is_adjacent_to(self, other: "Unit") -> bool:
        return self._position.is_adjacent_to(other.position)

    def update_position(self, position: Vector2) -> None:
        """Update position. Does NOT update roster occupancy.

        This method should only be called by the Roster during unit movement.
        External code should use roster.move_unit() instead.
        """
        self._position = position

    def take_damage(self, damage: int) -> int:
        """Apply damage and return the remaining hit points (may go negative)."""
        if damage < 0:
            raise ValueError("Damage amount cannot be negative")
        self.hp_current -= damage
        return self.hp_current

    def copy(self) -> "Unit":
        """Independent copy with the same identity and state."""
        clone = Unit(self._unit_id, self._faction, self._position, self.hp_max, self.attack_power)
        clone.hp_current = self.hp_current
        return clone

    def __repr__(self) -> str:
        return (
            f"Unit({self.name}, {self._faction.name}, {self._position!r}, "
            f"hp={self.hp_current}, power={self.attack_power})"
        )
