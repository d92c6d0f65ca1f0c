"""
Event bus for decoupled battle reporting.

The battle engine and the power tuner publish events without knowing who is
listening (the log manager, renderers, tests). Events are queued on publish
and delivered in priority order when ``process_events`` drains the queue,
which the engine does at round boundaries.
"""

import threading
from collections import defaultdict, deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .events import GameEvent, EventType


class EventPriority(Enum):
    """Event processing priorities."""
    CRITICAL = auto()
    HIGH = auto()
    NORMAL = auto()
    LOW = auto()


@dataclass
class QueuedEvent:
    """An event waiting in the queue."""
    event: "GameEvent"
    priority: EventPriority = EventPriority.NORMAL
    sequence: int = 0
    source: Optional[str] = None

    def __lt__(self, other: "QueuedEvent") -> bool:
        # Lower enum value = higher priority
        if self.priority.value != other.priority.value:
            return self.priority.value < other.priority.value
        # Same priority keeps publication order
        return self.sequence < other.sequence


EventSubscriber = Callable[["GameEvent"], None]


def _display_name(subscriber: EventSubscriber, name: Optional[str]) -> str:
    return name or getattr(subscriber, "__name__", "anonymous")


class EventManager:
    """Central event bus for battle reporting.

    A subscriber that raises does not stop delivery to the others; the
    failure is counted and a short description kept in ``subscriber_failures``.
    """

    def __init__(self, max_failures_kept: int = 100):
        # (display name, callback) pairs
        self._subscribers: dict["EventType", list[tuple[str, EventSubscriber]]] = defaultdict(list)
        # Receive every event regardless of type
        self._universal_subscribers: list[tuple[str, EventSubscriber]] = []
        self._event_queue: deque[QueuedEvent] = deque()

        self._events_published = 0
        self._events_processed = 0
        self._subscriber_errors = 0
        self.subscriber_failures: deque[str] = deque(maxlen=max_failures_kept)

        self._lock = threading.RLock()

    def subscribe(
        self,
        event_type: "EventType",
        subscriber: EventSubscriber,
        subscriber_name: Optional[str] = None
    ) -> None:
        """Call ``subscriber`` for every processed event of ``event_type``."""
        with self._lock:
            self._subscribers[event_type].append((_display_name(subscriber, subscriber_name), subscriber))

    def subscribe_all(
        self,
        subscriber: EventSubscriber,
        subscriber_name: Optional[str] = None
    ) -> None:
        """Call ``subscriber`` for every processed event."""
        with self._lock:
            self._universal_subscribers.append((_display_name(subscriber, subscriber_name), subscriber))

    def publish(
        self,
        event: "GameEvent",
        priority: EventPriority = EventPriority.NORMAL,
        source: Optional[str] = None
    ) -> None:
        """Queue an event for the next ``process_events`` call."""
        with self._lock:
            self._events_published += 1
            self._event_queue.append(QueuedEvent(
                event=event,
                priority=priority,
                sequence=self._events_published,
                source=source or "unknown"
            ))

    def process_events(self) -> int:
        """Deliver every queued event in priority order.

        Events published by subscribers during delivery wait for the next call.

        Returns:
            Number of events processed
        """
        with self._lock:
            pending = sorted(self._event_queue)
            self._event_queue.clear()

        for queued_event in pending:
            self._deliver(queued_event)
        return len(pending)

    def _deliver(self, queued_event: QueuedEvent) -> None:
        event = queued_event.event
        with self._lock:
            self._events_processed += 1
            subscribers = list(self._subscribers.get(event.event_type, []))
            subscribers.extend(self._universal_subscribers)

        for name, subscriber in subscribers:
            try:
                subscriber(event)
            except Exception as e:
                self._subscriber_errors += 1
                self.subscriber_failures.append(
                    f"{name} failed on {event.__class__.__name__} from {queued_event.source}: {e}"
                )

    def get_statistics(self) -> dict[str, Any]:
        """Event processing statistics."""
        with self._lock:
            return {
                'events_published': self._events_published,
                'events_processed': self._events_processed,
                'events_queued': len(self._event_queue),
                'subscriber_errors': self._subscriber_errors,
                'subscribers_count': sum(len(subs) for subs in self._subscribers.values()),
                'universal_subscribers_count': len(self._universal_subscribers),
            }
