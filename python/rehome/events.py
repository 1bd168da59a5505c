"""
Structured event log for rename operations.

The engine emits events as it works; an observer (a UI pane, a persistent
log) may display them. Emitting never blocks: events go into a bounded ring
of the most recent entries and subscriber callbacks run inline, with their
exceptions logged and dropped.
"""

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

logger = logging.getLogger("rehome.events")


class EventKind(Enum):
    SCAN_STARTED = "ScanStarted"
    OCCURRENCE_FOUND = "OccurrenceFound"
    CONFLICT_DETECTED = "ConflictDetected"
    PLAN_READY = "PlanReady"
    FILE_COMMITTED = "FileCommitted"
    FILE_ROLLED_BACK = "FileRolledBack"
    OPERATION_COMPLETED = "OperationCompleted"
    OPERATION_FAILED = "OperationFailed"


ERROR_KINDS = frozenset({EventKind.CONFLICT_DETECTED, EventKind.FILE_ROLLED_BACK, EventKind.OPERATION_FAILED})


@dataclass(frozen=True)
class Event:
    num: int
    kind: EventKind
    message: str
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)

    @property
    def is_error(self) -> bool:
        return self.kind in ERROR_KINDS


Subscriber = Callable[[Event], None]


class EventLog:
    """
    Bounded, thread-safe event ring.

    Keeps the newest ``capacity`` events; ``num`` keeps counting across
    evictions so observers can tell how many they missed.
    """

    def __init__(self, capacity: int = 20):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._lock = threading.Lock()
        self._events: deque[Event] = deque(maxlen=capacity)
        self._next_num = 0
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback; returns a function that unregisters it."""
        with self._lock:
            self._subscribers.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return _unsubscribe

    def emit(self, kind: EventKind, message: str, **data: Any) -> Event:
        with self._lock:
            event = Event(num=self._next_num, kind=kind, message=message, data=data)
            self._next_num += 1
            self._events.append(event)
            subscribers = list(self._subscribers)

        logger.debug(f"[{kind.value}] {message}")

        for callback in subscribers:
            try:
                callback(event)
            except Exception as e:
                # An observer must never break the operation it observes
                logger.warning(f"Event subscriber failed on {kind.value}: {e}")

        return event

    def recent(self, kind: Optional[EventKind] = None) -> list[Event]:
        """Newest-first list of retained events, optionally filtered by kind."""
        with self._lock:
            events = list(reversed(self._events))
        if kind is not None:
            events = [e for e in events if e.kind is kind]
        return events

    @property
    def total_emitted(self) -> int:
        with self._lock:
            return self._next_num

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
