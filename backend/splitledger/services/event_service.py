"""
In-process publisher for real-time domain events.

Writes publish events after they commit; delivery is best-effort and a
failing subscriber never affects the publishing request.
"""
import logging
import threading
from typing import Any, Callable, Dict, List
from fastapi.encoders import jsonable_encoder
from splitledger.core.utils import utcnow

logger = logging.getLogger(__name__)

Subscriber = Callable[[Dict[str, Any]], None]


class EventPublisher:
    """Fan-out of `{event, data, timestamp}` messages to registered callbacks."""

    def __init__(self):
        self._subscribers: List[Subscriber] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Subscriber) -> None:
        with self._lock:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, event: str, data: Any) -> Dict[str, Any]:
        """
        Deliver an event to every subscriber.

        `data` may hold pydantic models or ORM-derived values; it is encoded
        to JSON-compatible types once, before delivery.
        """
        message = {
            "event": event,
            "data": jsonable_encoder(data, by_alias=True),
            "timestamp": utcnow().isoformat() + "Z",
        }
        with self._lock:
            subscribers = list(self._subscribers)

        for callback in subscribers:
            try:
                callback(message)
            except Exception:
                logger.exception(f"Event subscriber failed while handling '{event}'")
        return message
