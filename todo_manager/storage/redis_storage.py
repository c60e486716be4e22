"""
Redis Storage Service - Todo snapshot kept in Redis

Stores the same JSON array the local strategy writes, as one string value
under ``<key_prefix><key>``. The connection is probed with PING at
construction; when Redis is down the strategy reports itself unavailable
and the storage manager skips it.
"""

import asyncio
import json
from typing import Any, Callable, List, Optional

import redis

from todo_manager.models import STORAGE_KEYS, Todo
from todo_manager.utils.exceptions import (
    InvalidDataError,
    NetworkError,
    QuotaExceededError,
    ServiceUnavailableError,
    StorageError,
    StoragePermissionError,
    UnknownStorageError,
)
from todo_manager.utils.logger import get_logger
from todo_manager.utils.serialization import dumps_todos, loads_todo_dicts
from .base import StorageService

logger = get_logger(__name__)


class RedisStorageService(StorageService):
    """
    Redis-backed strategy.

    Usage:
        storage = RedisStorageService(host="localhost", port=6379)
        if storage.is_available():
            await storage.save_todos(todos)
    """

    name = "redis"

    def __init__(
        self,
        host: str = 'localhost',
        port: int = 6379,
        db: int = 0,
        password: Optional[str] = None,
        key: str = STORAGE_KEYS["todos"],
        key_prefix: str = "todo_manager:",
        client: Optional[redis.Redis] = None
    ):
        """
        Initialize the Redis strategy and probe the connection.

        Args:
            host: Redis server host (default: localhost)
            port: Redis server port (default: 6379)
            db: Redis database number (default: 0)
            password: Redis password if authentication required
            key: Snapshot name
            key_prefix: Namespace prepended to ``key``
            client: Pre-built client (skips connection setup)
        """
        self.key = f"{key_prefix}{key}"
        self.redis_available = False
        self.client: Optional[redis.Redis] = client

        if self.client is None:
            self.client = redis.Redis(
                host=host,
                port=port,
                db=db,
                password=password,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
                health_check_interval=30
            )
            self._location = f"{host}:{port} (db={db})"
        else:
            self._location = "injected client"

        self.reconnect()

    def reconnect(self) -> bool:
        """PING the server and refresh availability."""
        try:
            self.client.ping()
            self.redis_available = True
            logger.info(f"[REDIS] Connected to Redis at {self._location}")
        except redis.RedisError as e:
            self.redis_available = False
            logger.warning(f"[REDIS] Connection failed: {e}")
            logger.warning("[REDIS] Redis storage will report itself unavailable")
        return self.redis_available

    def is_available(self) -> bool:
        return self.redis_available and self.client is not None

    def _map_error(self, error: redis.RedisError, operation: str) -> StorageError:
        message = str(error)
        if isinstance(error, redis.AuthenticationError) or message.startswith(("NOAUTH", "NOPERM", "WRONGPASS")):
            return StoragePermissionError(f"Redis refused {operation}", cause=error, strategy=self.name)
        if isinstance(error, (redis.ConnectionError, redis.TimeoutError)):
            self.redis_available = False
            return NetworkError(f"Redis connection lost during {operation}", cause=error, strategy=self.name)
        if message.startswith("OOM"):
            return QuotaExceededError("Redis memory limit reached", cause=error, strategy=self.name)
        return UnknownStorageError(f"Failed to {operation} Redis", cause=error, strategy=self.name)

    async def _call(self, operation: str, func: Callable[..., Any], *args: Any) -> Any:
        if not self.is_available():
            raise ServiceUnavailableError("Redis is not available", strategy=self.name)
        try:
            return await asyncio.to_thread(func, *args)
        except redis.RedisError as e:
            logger.error(f"[REDIS] Failed to {operation} {self.key}: {e}")
            raise self._map_error(e, operation) from e
        except UnicodeDecodeError as e:
            logger.error(f"[REDIS] Undecodable value under {self.key}: {e}")
            raise InvalidDataError("Invalid data in Redis", cause=e, strategy=self.name) from e

    async def get_todos(self) -> List[Todo]:
        payload = await self._call("read from", self.client.get, self.key)
        if payload is None:
            return []
        try:
            if isinstance(payload, bytes):
                payload = payload.decode("utf-8")
            todos = [Todo.from_dict(item) for item in loads_todo_dicts(payload)]
        except StorageError:
            raise
        except (json.JSONDecodeError, ValueError) as e:
            logger.error(f"[REDIS] Invalid JSON data under {self.key}: {e}")
            raise InvalidDataError("Invalid JSON data in Redis", cause=e, strategy=self.name) from e

        logger.debug(f"[REDIS] Loaded {len(todos)} todos from {self.key}")
        return todos

    async def save_todos(self, todos: List[Todo]) -> None:
        await self._call("write to", self.client.set, self.key, dumps_todos(todos))
        logger.debug(f"[REDIS] Saved {len(todos)} todos to {self.key}")

    async def clear_todos(self) -> None:
        await self._call("clear", self.client.delete, self.key)
        logger.info(f"[REDIS] Cleared {self.key}")

    def close(self):
        """Close Redis connection and cleanup resources."""
        if self.client:
            try:
                self.client.close()
                logger.info("[REDIS] Connection closed")
            except redis.RedisError as e:
                logger.error(f"[REDIS] Error closing connection: {e}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
