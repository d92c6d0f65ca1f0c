"""Event definitions for the battle event bus."""

from .events import (
    EventType,
    GameEvent,
    RoundStarted,
    RoundCompleted,
    UnitMoved,
    UnitAttacked,
    UnitDefeated,
    BattleEnded,
    TrialCompleted,
    LogMessage,
)

__all__ = [
    "EventType",
    "GameEvent",
    "RoundStarted",
    "RoundCompleted",
    "UnitMoved",
    "UnitAttacked",
    "UnitDefeated",
    "BattleEnded",
    "TrialCompleted",
    "LogMessage",
]
