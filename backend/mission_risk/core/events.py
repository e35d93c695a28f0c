"""
In-process event bus.

Mutation handlers publish named events carrying the refreshed entity or a
status payload. Delivery to subscribers is best effort: a subscriber
that raises is logged and skipped. A bounded history lets clients poll
for events after a known sequence number.
"""
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Deque, Dict, List
import itertools
import logging
import threading


logger = logging.getLogger(__name__)

PASSENGER_CREATED = "passengerCreated"
PASSENGER_UPDATED = "passengerUpdated"
PASSENGER_DELETED = "passengerDeleted"
MISSION_CREATED = "missionCreated"
MISSION_UPDATED = "missionUpdated"
MISSION_DELETED = "missionDeleted"
MISSION_OPTIMIZED = "missionOptimized"
ASSESSMENT_CREATED = "assessmentCreated"
RISK_CREATED = "riskCreated"
RISK_UPDATED = "riskUpdated"
RISK_DELETED = "riskDeleted"
AI_MODEL_RETRAINED = "aiModelRetrained"

Subscriber = Callable[["Event"], None]


@dataclass(frozen=True)
class Event:
    sequence: int
    name: str
    payload: Any
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sequence": self.sequence,
            "name": self.name,
            "payload": self.payload,
            "timestamp": self.timestamp,
        }


class EventBus:
    """
    Publish/subscribe channel with a bounded history.

    Args:
        history_size: Number of recent events retained for polling
    """

    def __init__(self, history_size: int = 500):
        self._subscribers: List[Subscriber] = []
        self._history: Deque[Event] = deque(maxlen=history_size)
        self._sequence = itertools.count(1)
        self._lock = threading.Lock()

    def subscribe(self, callback: Subscriber) -> None:
        with self._lock:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def publish(self, name: str, payload: Any = None) -> Event:
        """
        Record an event and deliver it to every subscriber.

        Args:
            name: Event name (e.g. "missionUpdated")
            payload: JSON-compatible payload

        Returns:
            The recorded Event
        """
        with self._lock:
            event = Event(sequence=next(self._sequence), name=name, payload=payload)
            self._history.append(event)
            subscribers = list(self._subscribers)

        for callback in subscribers:
            try:
                callback(event)
            except Exception:
                logger.exception(f"Event subscriber failed for '{name}'")

        logger.debug(f"Published event {event.sequence} '{name}'")
        return event

    def history(self, after: int = 0, limit: int = 100) -> List[Event]:
        """Retained events with a sequence number greater than `after`."""
        with self._lock:
            events = [e for e in self._history if e.sequence > after]
        return events[:limit]

    def clear(self) -> None:
        with self._lock:
            self._history.clear()
