"""Engine lifecycle events."""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class EventName(str, Enum):
    """Events published by the calculation engine."""

    RESULT_COMPUTED = "result-computed"
    RESULT_FLAGGED_FOR_REVIEW = "result-flagged-for-review"
    CALCULATION_FAILED = "calculation-failed"
    QUALITY_DEGRADED = "quality-degraded"
    PERFORMANCE_SLOW = "performance-slow"


@dataclass(frozen=True)
class EngineEvent:
    """A single published event."""

    name: EventName
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name.value,
            "payload": self.payload,
            "timestamp": self.timestamp.isoformat(),
        }


Listener = Callable[[EngineEvent], None]


class EventBus:
    """Synchronous in-process publish/subscribe.

    Listeners run on the publishing thread in subscription order. A
    listener that raises is logged and skipped; it never breaks the
    calculation that published the event.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener.

        Returns:
            A callable that removes the listener again
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def publish(self, name: EventName, payload: dict[str, Any] | None = None) -> EngineEvent:
        """Deliver an event to every listener."""
        event = EngineEvent(name=name, payload=payload or {})
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Event listener failed for %s", name.value)
        return event
