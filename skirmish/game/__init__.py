"""Battle simulation: map, units, pathfinding, the round engine and power tuning."""

from .battle_engine import BattleEngine, BattleResult, BattleStalledError
from .log_manager import LogCategory, LogLevel, LogManager
from .map import GameMap, MapFormatError
from .pathfinding import MovePlan, Pathfinder, UNREACHABLE
from .power_tuning import PowerTuner, PowerTuningError, TuningResult, find_minimum_boost
from .roster import Roster
from .scenario import BattleScenario, UnitPlacement
from .scenario_loader import ScenarioLoader

__all__ = [
    "BattleEngine",
    "BattleResult",
    "BattleStalledError",
    "LogCategory",
    "LogLevel",
    "LogManager",
    "GameMap",
    "MapFormatError",
    "MovePlan",
    "Pathfinder",
    "UNREACHABLE",
    "PowerTuner",
    "PowerTuningError",
    "TuningResult",
    "find_minimum_boost",
    "Roster",
    "BattleScenario",
    "UnitPlacement",
    "ScenarioLoader",
]
