"""
Storage Service interface shared by every persistence strategy.

A strategy persists the whole todo collection as one snapshot:

- ``get_todos()`` reads the snapshot (empty list when nothing is stored)
- ``save_todos(todos)`` replaces the snapshot
- ``clear_todos()`` removes the snapshot
- ``is_available()`` is a synchronous capability probe without side effects

Every failure is raised as a ``StorageError`` subclass whose ``code`` is one
of the ``StorageErrorCode`` kinds.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from todo_manager.models import Todo
from .events import StorageEventListener


@dataclass
class StorageServiceStatus:
    """Connectivity snapshot of a storage service."""
    available: bool
    connected: bool
    last_sync: Optional[datetime] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "available": self.available,
            "connected": self.connected,
            "last_sync": self.last_sync.isoformat() if self.last_sync else None,
            "error": self.error,
        }


class StorageService(ABC):
    """Read / write / clear contract implemented by every strategy."""

    #: Short name used in logs and error details
    name: str = "storage"

    @abstractmethod
    async def get_todos(self) -> List[Todo]:
        """Return every stored todo, in stored order."""

    @abstractmethod
    async def save_todos(self, todos: List[Todo]) -> None:
        """Replace the stored collection with ``todos``."""

    @abstractmethod
    async def clear_todos(self) -> None:
        """Remove every stored todo."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the strategy can be used right now."""


class ExtendedStorageService(StorageService):
    """Strategy with connectivity status, events, sync and credentials."""

    @abstractmethod
    def get_status(self) -> StorageServiceStatus:
        ...

    @abstractmethod
    def add_event_listener(self, listener: StorageEventListener) -> None:
        ...

    @abstractmethod
    def remove_event_listener(self, listener: StorageEventListener) -> None:
        ...

    @abstractmethod
    async def sync(self) -> None:
        """Round-trip with the backend to refresh connectivity state."""

    @abstractmethod
    def set_auth_token(self, token: str) -> None:
        ...

    @abstractmethod
    def clear_auth_token(self) -> None:
        ...

    @abstractmethod
    def check_connection(self) -> None:
        """Re-probe availability, emitting connection_change on a flip."""
