"""
Battle log with categorization, filtering and file export.

The log is fed entirely by events: the engine and the power tuner publish,
the ``LogManager`` subscribes and turns what it hears into categorized
``LogMessage`` records kept in a bounded buffer.
"""
import os
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

from ..core.data import FACTION_NAMES
from ..core.events import (
    BattleEnded,
    EventType,
    LogMessage as LogEvent,
    RoundCompleted,
    TrialCompleted,
    UnitAttacked,
    UnitDefeated,
    UnitMoved,
)

if TYPE_CHECKING:
    from ..core.event_manager import EventManager


class LogCategory(Enum):
    """Categories for log messages."""
    SYSTEM = auto()     # System messages (loading, configuration, etc.)
    ROUND = auto()      # Round boundaries
    MOVEMENT = auto()   # Unit steps
    BATTLE = auto()     # Attacks, defeats and outcomes
    TUNING = auto()     # Power-tuning trials
    DEBUG = auto()      # Debug messages
    WARNING = auto()    # Warning messages
    ERROR = auto()      # Error messages


CATEGORY_TAGS = {
    LogCategory.SYSTEM: "SYS",
    LogCategory.ROUND: "RND",
    LogCategory.MOVEMENT: "MOV",
    LogCategory.BATTLE: "BTL",
    LogCategory.TUNING: "TUN",
    LogCategory.DEBUG: "DBG",
    LogCategory.WARNING: "WRN",
    LogCategory.ERROR: "ERR",
}


@dataclass
class LogMessage:
    """A single log message with metadata."""
    text: str
    category: LogCategory
    round_number: Optional[int] = None
    timestamp: datetime = field(default_factory=datetime.now)

    def format(self, include_timestamp: bool = False, include_category: bool = True) -> str:
        """Format the message for display."""
        parts = []

        if include_timestamp:
            time_str = self.timestamp.strftime("%H:%M:%S")
            parts.append(f"[{time_str}]")

        if include_category:
            parts.append(f"[{CATEGORY_TAGS.get(self.category, '???')}]")

        if self.round_number is not None:
            parts.append(f"R{self.round_number}")

        parts.append(self.text)
        return " ".join(parts)


class LogLevel(Enum):
    """Log levels for filtering."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


class LogManager:
    """Manages the battle log with categorization and filtering."""

    def __init__(
        self,
        event_manager: "EventManager",
        max_messages: int = 1000,
        default_level: LogLevel = LogLevel.INFO
    ):
        """Initialize the log manager.

        Args:
            event_manager: Event manager for event-driven logging (required)
            max_messages: Maximum number of messages to store in the buffer
            default_level: Default log level for filtering
        """
        self.messages: deque[LogMessage] = deque(maxlen=max_messages)
        self.log_level = default_level
        self.event_manager = event_manager

        # Categories not listed here default to INFO
        self.category_levels = {
            LogCategory.DEBUG: LogLevel.DEBUG,
            LogCategory.MOVEMENT: LogLevel.DEBUG,   # One line per step gets noisy
            LogCategory.WARNING: LogLevel.WARNING,
            LogCategory.ERROR: LogLevel.ERROR,
        }

        self._setup_event_subscriptions()

    def _setup_event_subscriptions(self) -> None:
        """Set up event subscriptions for centralized logging."""
        subscriptions = [
            (EventType.LOG_MESSAGE, self._handle_log_message_event, "log_message"),
            (EventType.ROUND_COMPLETED, self._handle_round_completed, "round_completed"),
            (EventType.UNIT_MOVED, self._handle_unit_moved, "unit_moved"),
            (EventType.UNIT_ATTACKED, self._handle_unit_attacked, "unit_attacked"),
            (EventType.UNIT_DEFEATED, self._handle_unit_defeated, "unit_defeated"),
            (EventType.BATTLE_ENDED, self._handle_battle_ended, "battle_ended"),
            (EventType.TRIAL_COMPLETED, self._handle_trial_completed, "trial_completed"),
        ]
        for event_type, handler, name in subscriptions:
            self.event_manager.subscribe(event_type, handler, subscriber_name=f"LogManager.{name}")

    # ============== Event handlers ==============

    def _handle_log_message_event(self, event) -> None:
        if not isinstance(event, LogEvent):
            return
        try:
            category = LogCategory[event.category.upper()]
        except (KeyError, AttributeError):
            category = LogCategory.SYSTEM
        text = f"[{event.source}] {event.message}" if event.source and category == LogCategory.DEBUG else event.message
        self.log(text, category, event.round_number or None)

    def _handle_round_completed(self, event) -> None:
        if isinstance(event, RoundCompleted):
            self.log(
                f"Round complete: {event.elves_remaining} elves, {event.goblins_remaining} goblins standing",
                LogCategory.ROUND,
                event.round_number,
            )

    def _handle_unit_moved(self, event) -> None:
        if isinstance(event, UnitMoved):
            self.log(
                f"{event.unit.name} moves {event.from_position.to_tuple()} -> {event.to_position.to_tuple()} "
                f"towards {event.destination.to_tuple()}",
                LogCategory.MOVEMENT,
                event.round_number,
            )

    def _handle_unit_attacked(self, event) -> None:
        if isinstance(event, UnitAttacked):
            self.log(
                f"{event.attacker.name} hits {event.defender.name} for {event.damage} "
                f"({event.defender_hp} HP left)",
                LogCategory.BATTLE,
                event.round_number,
            )

    def _handle_unit_defeated(self, event) -> None:
        if isinstance(event, UnitDefeated):
            killer = f" by {event.defeated_by.name}" if event.defeated_by else ""
            self.log(f"{event.unit.name} is defeated{killer}", LogCategory.BATTLE, event.round_number)

    def _handle_battle_ended(self, event) -> None:
        if isinstance(event, BattleEnded):
            result = event.result
            self.log(
                f"Battle over: {result.summary()} (score {result.score})",
                LogCategory.BATTLE,
                event.round_number,
            )

    def _handle_trial_completed(self, event) -> None:
        if isinstance(event, TrialCompleted):
            verdict = "flawless win" if event.flawless else "not flawless"
            self.log(
                f"{FACTION_NAMES[event.faction]} +{event.boost} (power {event.attack_power}): "
                f"{verdict}, score {event.result.score}",
                LogCategory.TUNING,
            )

    # ============== Logging API ==============

    def log(self, text: str, category: LogCategory = LogCategory.SYSTEM, round_number: Optional[int] = None) -> None:
        """Add a message to the log.

        Messages are always stored; filtering happens on retrieval.
        """
        self.messages.append(LogMessage(text=text, category=category, round_number=round_number))

    def system(self, text: str) -> None:
        """Log a system message."""
        self.log(text, LogCategory.SYSTEM)

    def debug(self, text: str) -> None:
        """Log a debug message."""
        self.log(text, LogCategory.DEBUG)

    def warning(self, text: str) -> None:
        """Log a warning message."""
        self.log(text, LogCategory.WARNING)

    def error(self, text: str) -> None:
        """Log an error message."""
        self.log(text, LogCategory.ERROR)

    def get_messages(self, count: Optional[int] = None,
                     categories: Optional[set[LogCategory]] = None) -> list[LogMessage]:
        """Get recent messages, optionally filtered by category.

        Args:
            count: Maximum number of messages to return (None for all)
            categories: Set of categories to include regardless of level
                (None for every category at or above the log level)

        Returns:
            List of recent messages
        """
        if categories:
            filtered = [msg for msg in self.messages if msg.category in categories]
        else:
            filtered = [msg for msg in self.messages if self._level_of(msg).value >= self.log_level.value]

        if count is not None and count < len(filtered):
            return filtered[-count:]
        return filtered

    def formatted_messages(self, count: Optional[int] = None) -> list[str]:
        return [msg.format() for msg in self.get_messages(count)]

    def clear(self) -> None:
        """Clear all messages from the log."""
        self.messages.clear()

    def _level_of(self, message: LogMessage) -> LogLevel:
        return self.category_levels.get(message.category, LogLevel.INFO)

    @property
    def debug_enabled(self) -> bool:
        """Movement and debug messages are part of the default view."""
        return self.log_level == LogLevel.DEBUG

    def set_debug(self, enabled: bool = True) -> None:
        self.log_level = LogLevel.DEBUG if enabled else LogLevel.INFO

    def save_log_to_file(self, log_dir: str = "logs") -> bool:
        """Save all messages to a timestamped log file.

        Filters are ignored: every buffered message is written.

        Returns:
            True if the file was written, False otherwise
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        filepath = os.path.join(log_dir, f"battle_{timestamp}.log")

        try:
            os.makedirs(log_dir, exist_ok=True)

            with open(filepath, 'w', encoding='utf-8') as f:
                f.write("Skirmish - Battle Log\n")
                f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
                f.write("=" * 60 + "\n\n")

                if not self.messages:
                    f.write("No messages to save.\n")
                else:
                    for msg in self.messages:
                        timestamp_str = msg.timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]  # milliseconds
                        round_str = f" [R{msg.round_number}]" if msg.round_number is not None else ""
                        f.write(f"[{timestamp_str}] [{msg.category.name}]{round_str} {msg.text}\n")
        except OSError as e:
            self.error(f"Failed to save log file: {e}")
            return False

        self.system(f"Battle log saved to {filepath}")
        return True
