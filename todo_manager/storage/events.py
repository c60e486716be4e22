"""
Storage Events - Lifecycle notifications emitted by remote storage

Listeners are plain callables receiving a ``StorageEvent``. A listener that
raises is logged and counted; the remaining listeners still run and the
storage operation that emitted the event is not affected.

Event types:
- sync_start: a request is about to be sent
- sync_success: a request completed (``count`` todos transferred)
- sync_error: a request failed (``error`` holds the StorageError)
- connection_change: connectivity flipped (``connected`` holds the new state)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional

from todo_manager.utils.logger import get_logger
from todo_manager.utils.serialization import utc_now

logger = get_logger(__name__)

SYNC_START = "sync_start"
SYNC_SUCCESS = "sync_success"
SYNC_ERROR = "sync_error"
CONNECTION_CHANGE = "connection_change"

EVENT_TYPES = (SYNC_START, SYNC_SUCCESS, SYNC_ERROR, CONNECTION_CHANGE)


@dataclass(frozen=True)
class StorageEvent:
    """A single storage lifecycle event."""
    type: str
    timestamp: datetime = field(default_factory=utc_now)
    count: Optional[int] = None
    error: Optional[BaseException] = None
    connected: Optional[bool] = None
    source: str = "api"


StorageEventListener = Callable[[StorageEvent], None]


def sync_start_event(source: str = "api") -> StorageEvent:
    return StorageEvent(type=SYNC_START, source=source)


def sync_success_event(count: int, source: str = "api") -> StorageEvent:
    return StorageEvent(type=SYNC_SUCCESS, count=count, source=source)


def sync_error_event(error: BaseException, source: str = "api") -> StorageEvent:
    return StorageEvent(type=SYNC_ERROR, error=error, source=source)


def connection_change_event(connected: bool, source: str = "api") -> StorageEvent:
    return StorageEvent(type=CONNECTION_CHANGE, connected=connected, source=source)


class EventEmitter:
    """
    Minimal synchronous publish/subscribe for storage events.

    Usage:
        emitter = EventEmitter()
        emitter.add_listener(lambda event: print(event.type))
        emitter.emit(sync_success_event(count=3))
    """

    def __init__(self, name: str = "storage"):
        self.name = name
        self._listeners: List[StorageEventListener] = []
        self.stats: Dict[str, int] = {
            "events_emitted": 0,
            "handlers_executed": 0,
            "handlers_failed": 0,
        }

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def add_listener(self, listener: StorageEventListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: StorageEventListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, event: StorageEvent) -> None:
        """Deliver ``event`` to every listener, in registration order."""
        self.stats["events_emitted"] += 1
        for listener in list(self._listeners):
            try:
                listener(event)
                self.stats["handlers_executed"] += 1
            except Exception as e:
                self.stats["handlers_failed"] += 1
                logger.error(
                    f"[EVENTS] Error in {self.name} event listener for '{event.type}': {e}",
                    exc_info=True,
                )
