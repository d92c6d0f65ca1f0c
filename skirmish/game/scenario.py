"""Battle scenarios: a terrain map plus the starting layout of both factions.

A scenario is the immutable template every battle is built from. Each call
to ``create_roster`` returns brand new units, so power-tuning trials never
observe each other's damage or movement.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from ..core.config_loader import BattleConfig
from ..core.data import Faction, SYMBOL_TO_FACTION, Vector2
from .battle_engine import BattleEngine, BattleResult
from .map import GameMap
from .roster import Roster

if TYPE_CHECKING:
    from ..core.event_manager import EventManager


@dataclass(frozen=True)
class UnitPlacement:
    """Starting square of one unit."""
    faction: Faction
    position: Vector2


@dataclass
class BattleScenario:
    """Map, starting placements and default settings for a battle."""
    game_map: GameMap
    placements: list[UnitPlacement] = field(default_factory=list)
    config: BattleConfig = field(default_factory=BattleConfig)
    name: str = "Unnamed Battle"
    description: str = ""

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[str],
        config: Optional[BattleConfig] = None,
        name: str = "Unnamed Battle",
    ) -> "BattleScenario":
        """Parse a character grid: ``#`` wall, ``.`` floor, ``E``/``G`` unit starts.

        Raises:
            MapFormatError: If the grid is malformed
        """
        game_map = GameMap.from_rows(rows)
        placements = []
        for y, row in enumerate(rows[:game_map.height]):
            for x, symbol in enumerate(row.rstrip("\r\n")):
                faction = SYMBOL_TO_FACTION.get(symbol)
                if faction is not None:
                    placements.append(UnitPlacement(faction, Vector2(y, x)))

        return cls(
            game_map=game_map,
            placements=placements,
            config=config or BattleConfig(),
            name=name,
        )

    @classmethod
    def from_text(
        cls,
        text: str,
        config: Optional[BattleConfig] = None,
        name: str = "Unnamed Battle",
    ) -> "BattleScenario":
        return cls.from_rows(text.splitlines(), config=config, name=name)

    def add_placement(self, faction: Faction, position: Vector2) -> None:
        self.placements.append(UnitPlacement(faction, position))

    def starting_counts(self) -> dict[Faction, int]:
        counts = {faction: 0 for faction in Faction}
        for placement in self.placements:
            counts[placement.faction] += 1
        return counts

    def create_roster(self, config: Optional[BattleConfig] = None) -> Roster:
        """Fresh roster with ids assigned in reading order of the start squares.

        Raises:
            MapFormatError: If a placement is on a wall or off the map
            ValueError: If two placements share a square
        """
        config = config or self.config
        roster = Roster(self.game_map)
        for placement in sorted(self.placements, key=lambda p: p.position):
            roster.spawn(
                placement.faction,
                placement.position,
                hit_points=config.starting_hit_points,
                attack_power=config.power_for(placement.faction),
            )
        return roster

    def create_engine(
        self,
        config: Optional[BattleConfig] = None,
        event_manager: Optional["EventManager"] = None,
    ) -> BattleEngine:
        """Wire map, a fresh roster and a new engine together."""
        config = config or self.config
        return BattleEngine(
            self.game_map,
            self.create_roster(config),
            event_manager=event_manager,
            max_rounds=config.max_rounds,
        )

    def simulate(
        self,
        config: Optional[BattleConfig] = None,
        event_manager: Optional["EventManager"] = None,
    ) -> BattleResult:
        """Run a complete battle from the starting layout."""
        return self.create_engine(config, event_manager).run()
