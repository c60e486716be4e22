"""
Local Storage Service - Todo snapshot persisted as a JSON file on disk.

The whole collection is stored as one JSON array under a fixed key, in
``<directory>/<key>.json``. Timestamps are written as ISO-8601 strings and
parsed back into UTC datetimes on read.
"""

import asyncio
import json
import os
from pathlib import Path
from typing import List, Optional, Union

from todo_manager.models import STORAGE_KEYS, Todo
from todo_manager.utils.exceptions import (
    InvalidDataError,
    QuotaExceededError,
    ServiceUnavailableError,
    StorageError,
    wrap_storage_exception,
)
from todo_manager.utils.logger import get_logger
from todo_manager.utils.serialization import dumps_todos, loads_todo_dicts
from .base import StorageService

logger = get_logger(__name__)

DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024  # 5MB


class LocalStorageService(StorageService):
    """
    File-backed strategy.

    Usage:
        storage = LocalStorageService(directory="./data")
        await storage.save_todos(todos)
        todos = await storage.get_todos()
    """

    name = "local"

    def __init__(
        self,
        directory: Union[str, Path] = "./data",
        key: str = STORAGE_KEYS["todos"],
        quota_bytes: int = DEFAULT_QUOTA_BYTES
    ):
        """
        Args:
            directory: Folder holding the snapshot file (created on first write)
            key: Snapshot name; the file is ``<key>.json``
            quota_bytes: Largest snapshot accepted, in bytes
        """
        self.directory = Path(directory)
        self.key = key
        self.quota_bytes = quota_bytes

    @property
    def path(self) -> Path:
        return self.directory / f"{self.key}.json"

    def is_available(self) -> bool:
        """True when the folder (or its nearest existing parent) is readable and writable."""
        target = self.directory
        while not target.exists():
            if target.parent == target:
                return False
            target = target.parent
        return target.is_dir() and os.access(target, os.R_OK | os.W_OK)

    def _ensure_available(self) -> None:
        if not self.is_available():
            raise ServiceUnavailableError(
                f"Local storage is not available at '{self.directory}'", strategy=self.name
            )

    # ------------------------------------------------------------------
    # Medium access (blocking, run in a worker thread)
    # ------------------------------------------------------------------

    def _read_snapshot(self) -> Optional[str]:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def _write_snapshot(self, payload: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".json.tmp")
        try:
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, self.path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

    def _remove_snapshot(self) -> None:
        if self.path.exists():
            self.path.unlink()

    # ------------------------------------------------------------------
    # StorageService
    # ------------------------------------------------------------------

    async def get_todos(self) -> List[Todo]:
        self._ensure_available()

        try:
            payload = await asyncio.to_thread(self._read_snapshot)
            if payload is None:
                return []
            todos = [Todo.from_dict(item) for item in loads_todo_dicts(payload)]
        except StorageError:
            raise
        except (json.JSONDecodeError, ValueError) as e:
            logger.error(f"[LOCAL] Invalid JSON data in {self.path}: {e}")
            raise InvalidDataError(
                "Invalid JSON data in local storage", cause=e, strategy=self.name
            ) from e
        except Exception as e:
            logger.error(f"[LOCAL] Failed to read {self.path}: {e}")
            raise wrap_storage_exception(e, "read from local storage", self.name) from e

        logger.debug(f"[LOCAL] Loaded {len(todos)} todos from {self.path}")
        return todos

    async def save_todos(self, todos: List[Todo]) -> None:
        self._ensure_available()

        payload = dumps_todos(todos)
        size = len(payload.encode("utf-8"))
        if size > self.quota_bytes:
            logger.warning(f"[LOCAL] Snapshot of {size} bytes exceeds quota of {self.quota_bytes}")
            raise QuotaExceededError("Storage quota exceeded", strategy=self.name)

        try:
            await asyncio.to_thread(self._write_snapshot, payload)
        except Exception as e:
            logger.error(f"[LOCAL] Failed to save to {self.path}: {e}")
            raise wrap_storage_exception(e, "save to local storage", self.name) from e

        logger.debug(f"[LOCAL] Saved {len(todos)} todos to {self.path}")

    async def clear_todos(self) -> None:
        self._ensure_available()

        try:
            await asyncio.to_thread(self._remove_snapshot)
        except Exception as e:
            logger.error(f"[LOCAL] Failed to clear {self.path}: {e}")
            raise wrap_storage_exception(e, "clear local storage", self.name) from e

        logger.info(f"[LOCAL] Cleared {self.path}")

    # ------------------------------------------------------------------
    # Usage reporting
    # ------------------------------------------------------------------

    def get_storage_size(self) -> int:
        """Size of the stored snapshot in bytes (0 when absent)."""
        if not self.is_available():
            return 0
        try:
            return self.path.stat().st_size
        except FileNotFoundError:
            return 0

    def get_available_space(self) -> int:
        """Bytes a snapshot may occupy."""
        if not self.is_available():
            return 0
        return self.quota_bytes

    def get_storage_usage(self) -> int:
        """Snapshot size as a rounded percentage of the quota."""
        available = self.get_available_space()
        if available == 0:
            return 0
        return round(self.get_storage_size() / available * 100)
