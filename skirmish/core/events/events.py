"""Battle events and their types.

Event Design Principles:
- Events are immutable dataclasses with rich object payloads
- All events carry the round number they happened in
- Events use proper enums instead of magic strings
- Keep event types focused and avoid over-granular events
"""

from abc import ABC
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

from ..data import Faction

if TYPE_CHECKING:
    from ..data.data_structures import Vector2
    from ...game.entities.unit import Unit
    from ...game.battle_engine import BattleResult


class EventType(Enum):
    """Types of battle events that subscribers can listen to."""
    # Round Events
    ROUND_STARTED = auto()
    ROUND_COMPLETED = auto()

    # Unit Events
    UNIT_MOVED = auto()
    UNIT_ATTACKED = auto()
    UNIT_DEFEATED = auto()

    # Battle Events
    BATTLE_ENDED = auto()
    TRIAL_COMPLETED = auto()

    # Logging Events
    LOG_MESSAGE = auto()


@dataclass(frozen=True)
class GameEvent(ABC):
    """Base class for all battle events."""
    round_number: int
    event_type: EventType = field(init=False)


@dataclass(frozen=True)
class RoundStarted(GameEvent):
    """Event emitted when the acting order for a new round is fixed."""
    acting_order: tuple[int, ...]

    def __post_init__(self):
        # Set event_type since dataclass frozen=True prevents normal assignment
        object.__setattr__(self, 'event_type', EventType.ROUND_STARTED)


@dataclass(frozen=True)
class RoundCompleted(GameEvent):
    """Event emitted when every unit in the acting order had its chance."""
    elves_remaining: int
    goblins_remaining: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ROUND_COMPLETED)


@dataclass(frozen=True)
class UnitMoved(GameEvent):
    """Event emitted when a unit steps to a new square."""
    unit: "Unit"
    from_position: "Vector2"
    to_position: "Vector2"
    destination: "Vector2"  # in-range square the step heads towards

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.UNIT_MOVED)


@dataclass(frozen=True)
class UnitAttacked(GameEvent):
    """Event emitted after damage has been applied to a defender."""
    attacker: "Unit"
    defender: "Unit"
    damage: int
    defender_hp: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.UNIT_ATTACKED)


@dataclass(frozen=True)
class UnitDefeated(GameEvent):
    """Event emitted when a unit is removed from the roster."""
    unit: "Unit"
    defeated_by: Optional["Unit"] = None

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.UNIT_DEFEATED)


@dataclass(frozen=True)
class BattleEnded(GameEvent):
    """Event emitted when a unit finds no enemies left to fight."""
    result: "BattleResult"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.BATTLE_ENDED)


@dataclass(frozen=True)
class TrialCompleted(GameEvent):
    """Event emitted by the power tuner after replaying a battle."""
    faction: Faction
    boost: int
    attack_power: int
    flawless: bool
    result: "BattleResult"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.TRIAL_COMPLETED)


@dataclass(frozen=True)
class LogMessage(GameEvent):
    """Free-form log line routed through the event bus."""
    message: str
    category: str = "SYSTEM"
    level: str = "INFO"
    source: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_MESSAGE)
