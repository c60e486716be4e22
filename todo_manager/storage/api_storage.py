"""
API Storage Service - Todo snapshot kept by a remote todo API (httpx)

Consumed endpoints:
    GET    {base}/todos   -> JSON array of todos
    POST   {base}/todos   -> replace the stored collection with the JSON array body
    DELETE {base}/todos   -> clear the stored collection

Every request carries ``Content-Type: application/json`` and, when a token
is set, ``Authorization: Bearer <token>``.

Failure handling:
- each request is bounded by ``timeout`` seconds; a timeout cancels the
  request and surfaces at once as a network-error
- transport failures are retried ``retry_count`` times, ``retry_delay``
  seconds apart, before surfacing as a network-error
- HTTP errors map onto error kinds: 401/403 -> permission-error,
  404 -> service-unavailable, 5xx -> service-unavailable,
  anything else -> unknown-error (never retried)
"""

import asyncio
import json
from datetime import datetime
from typing import Callable, Dict, List, Optional

import httpx

from todo_manager.models import Todo
from todo_manager.utils.exceptions import (
    InvalidDataError,
    NetworkError,
    ServiceUnavailableError,
    StorageError,
    StorageErrorCode,
    UnknownStorageError,
    storage_error_for,
)
from todo_manager.utils.logger import get_logger
from todo_manager.utils.serialization import dumps_todos, utc_now
from .base import ExtendedStorageService, StorageServiceStatus
from .events import (
    EventEmitter,
    StorageEventListener,
    connection_change_event,
    sync_error_event,
    sync_start_event,
    sync_success_event,
)

logger = get_logger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TIMEOUT = 10.0
DEFAULT_RETRY_COUNT = 3
DEFAULT_RETRY_DELAY = 1.0


class ApiStorageService(ExtendedStorageService):
    """
    Remote strategy talking to the todo API over HTTP.

    Usage:
        storage = ApiStorageService("http://localhost:3000", retry_count=2)
        storage.set_auth_token("secret")
        storage.add_event_listener(lambda event: print(event.type))
        await storage.save_todos(todos)
    """

    name = "api"

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_count: int = DEFAULT_RETRY_COUNT,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        auth_token: Optional[str] = None,
        online_probe: Optional[Callable[[], bool]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Args:
            base_url: API root; a trailing slash is dropped
            timeout: Per-request timeout in seconds
            retry_count: Extra attempts after a transport failure
            retry_delay: Seconds between attempts
            auth_token: Optional bearer token sent with every request
            online_probe: Callable reporting network availability
                (default: a base URL is configured)
            transport: Optional httpx transport (mock or ASGI app in tests)
        """
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout
        self.retry_count = retry_count
        self.retry_delay = retry_delay
        self._auth_token = auth_token
        self._online_probe = online_probe or (lambda: bool(self.base_url))
        self._transport = transport
        self._events = EventEmitter(name=self.name)
        self._last_sync: Optional[datetime] = None
        self._last_error: Optional[str] = None
        self._connected = True

    # ------------------------------------------------------------------
    # Availability, credentials, events
    # ------------------------------------------------------------------

    def is_available(self) -> bool:
        return bool(self._online_probe())

    def set_auth_token(self, token: str) -> None:
        self._auth_token = token

    def clear_auth_token(self) -> None:
        self._auth_token = None

    def add_event_listener(self, listener: StorageEventListener) -> None:
        self._events.add_listener(listener)

    def remove_event_listener(self, listener: StorageEventListener) -> None:
        self._events.remove_listener(listener)

    def get_status(self) -> StorageServiceStatus:
        return StorageServiceStatus(
            available=self.is_available(),
            connected=self._connected,
            last_sync=self._last_sync,
            error=self._last_error,
        )

    def check_connection(self) -> None:
        was_connected = self._connected
        self._connected = self.is_available()

        if was_connected != self._connected:
            logger.info(f"[API] Connection changed: connected={self._connected}")
            self._events.emit(connection_change_event(self._connected, source=self.name))

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------

    @property
    def todos_url(self) -> str:
        return f"{self.base_url}/todos"

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._auth_token:
            headers["Authorization"] = f"Bearer {self._auth_token}"
        return headers

    async def _make_request(self, method: str, content: Optional[str] = None) -> httpx.Response:
        """Send one request with timeout and retry handling."""
        retries_left = self.retry_count

        while True:
            try:
                async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                    return await asyncio.wait_for(
                        client.request(method, self.todos_url, content=content, headers=self._headers()),
                        timeout=self.timeout,
                    )

            except (asyncio.TimeoutError, httpx.TimeoutException) as e:
                logger.warning(f"[API] {method} {self.todos_url} timed out after {self.timeout}s")
                raise NetworkError("Request timeout", cause=e, strategy=self.name) from e

            except httpx.TransportError as e:
                if retries_left > 0:
                    retries_left -= 1
                    logger.warning(
                        f"[API] {method} {self.todos_url} failed ({e}); "
                        f"retrying in {self.retry_delay}s ({retries_left} retries left)"
                    )
                    await asyncio.sleep(self.retry_delay)
                    continue

                logger.error(f"[API] {method} {self.todos_url} failed after {self.retry_count} retries: {e}")
                raise NetworkError("Network request failed", cause=e, strategy=self.name) from e

    def _raise_for_status(self, response: httpx.Response) -> None:
        """Map a non-2xx response onto the storage error kinds."""
        status = response.status_code

        if status == 401:
            code, message = StorageErrorCode.PERMISSION_ERROR, "Authentication required"
        elif status == 403:
            code, message = StorageErrorCode.PERMISSION_ERROR, "Access forbidden"
        elif status == 404:
            code, message = StorageErrorCode.SERVICE_UNAVAILABLE, "API endpoint not found"
        elif 500 <= status < 600:
            code, message = StorageErrorCode.SERVICE_UNAVAILABLE, "Server error"
        else:
            code, message = StorageErrorCode.UNKNOWN_ERROR, f"HTTP {status}: {response.reason_phrase}"

        error = storage_error_for(code, message, strategy=self.name)
        error.details["status_code"] = status
        raise error

    def _decode_todos(self, response: httpx.Response) -> List[Todo]:
        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidDataError("Invalid JSON in API response", cause=e, strategy=self.name) from e
        if not isinstance(body, list):
            raise InvalidDataError("API response is not a JSON array", strategy=self.name)
        return [Todo.from_dict(item) for item in body]

    def _record_failure(self, error: StorageError) -> None:
        self._connected = False
        self._last_error = error.message
        self._events.emit(sync_error_event(error, source=self.name))

    async def _exchange(
        self,
        method: str,
        failure_message: str,
        content: Optional[str] = None,
        count: int = 0
    ) -> Optional[List[Todo]]:
        """
        Run one request with availability check, events and error wrapping.

        Returns the decoded todos for GET, None otherwise.
        """
        if not self.is_available():
            raise ServiceUnavailableError("Network is not available", strategy=self.name)

        self._events.emit(sync_start_event(source=self.name))

        try:
            response = await self._make_request(method, content=content)
            if not response.is_success:
                self._raise_for_status(response)

            todos = None
            if method == "GET":
                todos = self._decode_todos(response)
                count = len(todos)

        except StorageError as e:
            self._record_failure(e)
            raise

        except Exception as e:
            error = UnknownStorageError(failure_message, cause=e, strategy=self.name)
            self._record_failure(error)
            raise error from e

        self._last_sync = utc_now()
        self._last_error = None
        self._connected = True
        self._events.emit(sync_success_event(count, source=self.name))
        return todos

    # ------------------------------------------------------------------
    # StorageService
    # ------------------------------------------------------------------

    async def get_todos(self) -> List[Todo]:
        todos = await self._exchange("GET", "Failed to fetch todos")
        logger.debug(f"[API] Fetched {len(todos)} todos from {self.todos_url}")
        return todos

    async def save_todos(self, todos: List[Todo]) -> None:
        await self._exchange("POST", "Failed to save todos", content=dumps_todos(todos), count=len(todos))
        logger.debug(f"[API] Saved {len(todos)} todos to {self.todos_url}")

    async def clear_todos(self) -> None:
        await self._exchange("DELETE", "Failed to clear todos")
        logger.info(f"[API] Cleared todos at {self.todos_url}")

    async def sync(self) -> None:
        """Fetch the remote collection to refresh connectivity state."""
        await self.get_todos()
