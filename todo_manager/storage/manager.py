"""
Storage Manager - Chooses a storage strategy and falls back on failure

The manager holds the strategies in priority order together with the tag of
the current one. Every read / write / clear runs against the current
strategy first. When it raises a ``StorageError`` and auto-switch is on, the
same operation is retried on every other *available* strategy in priority
order; the first one that succeeds becomes the current strategy. When all of
them fail the last failure is raised. With auto-switch off, or with no other
strategy available, the original error propagates unchanged.

Usage:
    manager = StorageManager(
        [(StorageStrategy.LOCAL, LocalStorageService("./data")),
         (StorageStrategy.API, ApiStorageService("http://localhost:3000"))],
        default_strategy="local",
    )
    manager.initialize()
    await manager.save_todos(todos)
"""

from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, TypeVar, Union

from todo_manager.config.storage_config import StorageConfig
from todo_manager.models import StorageStrategy, Todo
from todo_manager.utils.exceptions import ConfigurationError, ServiceUnavailableError, StorageError
from todo_manager.utils.logger import get_logger
from .api_storage import ApiStorageService
from .base import ExtendedStorageService, StorageService, StorageServiceStatus
from .events import StorageEventListener
from .local_storage import LocalStorageService
from .redis_storage import RedisStorageService

logger = get_logger(__name__)

T = TypeVar("T")

StrategyTag = Union[StorageStrategy, str]
StrategyEntries = Union[Mapping[StrategyTag, StorageService], Iterable[Tuple[StrategyTag, StorageService]]]


def _coerce_tag(tag: StrategyTag) -> Optional[StorageStrategy]:
    try:
        return StorageStrategy(tag)
    except ValueError:
        return None


class StorageManager:
    """
    Coordinates the storage strategies with priority-ordered fallback.

    The first ``ExtendedStorageService`` among the strategies (normally the
    API strategy) is the *remote* one: credentials, events, sync and
    connection checks are forwarded to it.
    """

    def __init__(
        self,
        strategies: StrategyEntries,
        default_strategy: StrategyTag = StorageStrategy.LOCAL,
        auto_switch: bool = True
    ):
        """
        Args:
            strategies: ``(tag, service)`` pairs or a tag -> service mapping, in priority order
            default_strategy: Strategy used until a switch happens
            auto_switch: Fall back to other available strategies on failure
        """
        items = strategies.items() if isinstance(strategies, Mapping) else strategies

        self._services: Dict[StorageStrategy, StorageService] = {}
        for tag, service in items:
            strategy = StorageStrategy(tag)
            if strategy in self._services:
                raise ValueError(f"Storage strategy '{strategy.value}' registered twice")
            self._services[strategy] = service

        if not self._services:
            raise ValueError("At least one storage strategy is required")

        current = _coerce_tag(default_strategy)
        if current not in self._services:
            raise ValueError(
                f"Default strategy '{default_strategy}' is not one of "
                f"{[s.value for s in self._services]}"
            )

        self._current: StorageStrategy = current
        self._auto_switch = auto_switch

        logger.info(
            f"[STORAGE] Manager ready: strategies={[s.value for s in self._services]}, "
            f"current={self._current.value}, auto_switch={self._auto_switch}"
        )

    @classmethod
    def from_config(cls, config: StorageConfig) -> "StorageManager":
        """Build the strategies named by ``config`` in its priority order."""
        services: List[Tuple[StorageStrategy, StorageService]] = []

        for strategy in config.enabled_strategies:
            if strategy == StorageStrategy.LOCAL:
                service: StorageService = LocalStorageService(
                    directory=config.local.directory,
                    key=config.local.key,
                    quota_bytes=config.local.quota_bytes,
                )
            elif strategy == StorageStrategy.API:
                service = ApiStorageService(
                    base_url=config.api.base_url,
                    timeout=config.api.timeout,
                    retry_count=config.api.retry_count,
                    retry_delay=config.api.retry_delay,
                    auth_token=config.api.auth_token,
                )
            else:
                service = RedisStorageService(
                    host=config.redis.host,
                    port=config.redis.port,
                    db=config.redis.db,
                    password=config.redis.password,
                    key=config.local.key,
                    key_prefix=config.redis.key_prefix,
                )
            services.append((strategy, service))

        if not services:
            raise ConfigurationError(
                "strategies",
                "no storage strategy is enabled",
                actual_value=",".join(config.strategies),
            )

        default = StorageStrategy(config.default_strategy)
        if default not in dict(services):
            default = services[0][0]

        return cls(services, default_strategy=default, auto_switch=config.auto_switch)

    # ------------------------------------------------------------------
    # Strategy selection
    # ------------------------------------------------------------------

    @property
    def remote(self) -> Optional[ExtendedStorageService]:
        for service in self._services.values():
            if isinstance(service, ExtendedStorageService):
                return service
        return None

    def get_service(self, strategy: StrategyTag) -> StorageService:
        tag = _coerce_tag(strategy)
        if tag not in self._services:
            raise ServiceUnavailableError(f"Unknown storage strategy '{strategy}'")
        return self._services[tag]

    def get_current_strategy(self) -> StorageStrategy:
        return self._current

    def get_available_strategies(self) -> List[StorageStrategy]:
        """Available strategies, in priority order."""
        return [tag for tag, service in self._services.items() if service.is_available()]

    def is_strategy_available(self, strategy: StrategyTag) -> bool:
        tag = _coerce_tag(strategy)
        service = self._services.get(tag) if tag else None
        return service is not None and service.is_available()

    def switch_to(self, strategy: StrategyTag) -> None:
        """
        Make ``strategy`` the current strategy.

        Raises:
            ServiceUnavailableError: unknown or unavailable strategy
        """
        if not self.is_strategy_available(strategy):
            raise ServiceUnavailableError(
                f"{str(getattr(strategy, 'value', strategy)).capitalize()} storage is not available"
            )

        previous, self._current = self._current, StorageStrategy(strategy)
        if previous != self._current:
            logger.info(f"[STORAGE] Switched {previous.value} -> {self._current.value}")

    def switch_to_local(self) -> None:
        self.switch_to(StorageStrategy.LOCAL)

    def switch_to_api(self) -> None:
        self.switch_to(StorageStrategy.API)

    switch_to_remote = switch_to_api

    def set_auto_switch(self, enabled: bool) -> None:
        self._auto_switch = enabled

    def is_auto_switch_enabled(self) -> bool:
        return self._auto_switch

    # ------------------------------------------------------------------
    # Operations with fallback
    # ------------------------------------------------------------------

    async def _run(self, operation: str, call: Callable[[StorageService], Awaitable[T]]) -> T:
        current = self._current
        try:
            return await call(self._services[current])
        except StorageError as e:
            fallbacks = [tag for tag in self.get_available_strategies() if tag != current]
            if not self._auto_switch or not fallbacks:
                logger.error(f"[STORAGE] {operation} failed on {current.value}: {e.message}")
                raise

            logger.warning(
                f"[STORAGE] {operation} failed on {current.value} ({e.code.value}); "
                f"trying {[tag.value for tag in fallbacks]}"
            )
            last_error: StorageError = e
            for tag in fallbacks:
                try:
                    result = await call(self._services[tag])
                except StorageError as fallback_error:
                    logger.warning(f"[STORAGE] {operation} failed on {tag.value}: {fallback_error.message}")
                    last_error = fallback_error
                    continue

                self._current = tag
                logger.info(f"[STORAGE] {operation} succeeded on {tag.value}; current strategy is now {tag.value}")
                return result

            logger.error(f"[STORAGE] {operation} failed on every available strategy")
            raise last_error

    async def get_todos(self) -> List[Todo]:
        return await self._run("get_todos", lambda service: service.get_todos())

    async def save_todos(self, todos: List[Todo]) -> None:
        await self._run("save_todos", lambda service: service.save_todos(todos))

    async def clear_todos(self) -> None:
        await self._run("clear_todos", lambda service: service.clear_todos())

    async def sync_between_storages(self) -> List[StorageStrategy]:
        """
        Copy the current strategy's todos onto every other available strategy.

        Returns:
            The strategies that received the copy

        Raises:
            StorageError: the read or one of the writes failed
        """
        source = self._current
        try:
            todos = await self._services[source].get_todos()
            targets = [tag for tag in self.get_available_strategies() if tag != source]
            for tag in targets:
                await self._services[tag].save_todos(todos)
        except StorageError as e:
            logger.warning(f"[STORAGE] Failed to sync between storages: {e}")
            raise

        logger.info(f"[STORAGE] Synced {len(todos)} todos from {source.value} to {[t.value for t in targets]}")
        return targets

    def initialize(self) -> None:
        """
        Pick a usable strategy before first use.

        Raises:
            ServiceUnavailableError: no strategy is available
        """
        available = self.get_available_strategies()
        if not available:
            raise ServiceUnavailableError("No storage strategies are available")

        if self._current not in available:
            logger.warning(
                f"[STORAGE] Default strategy {self._current.value} is not available; "
                f"using {available[0].value}"
            )
            self._current = available[0]

        remote = self.remote
        if remote is not None and remote.is_available():
            remote.check_connection()

    # ------------------------------------------------------------------
    # Remote strategy pass-through
    # ------------------------------------------------------------------

    def set_auth_token(self, token: str) -> None:
        if self.remote is not None:
            self.remote.set_auth_token(token)

    def clear_auth_token(self) -> None:
        if self.remote is not None:
            self.remote.clear_auth_token()

    def add_event_listener(self, listener: StorageEventListener) -> None:
        if self.remote is not None:
            self.remote.add_event_listener(listener)

    def remove_event_listener(self, listener: StorageEventListener) -> None:
        if self.remote is not None:
            self.remote.remove_event_listener(listener)

    async def sync(self) -> None:
        if self.remote is None:
            raise ServiceUnavailableError("No remote storage is configured")
        await self.remote.sync()

    def check_connection(self) -> None:
        if self.remote is not None:
            self.remote.check_connection()

    def get_api_status(self) -> StorageServiceStatus:
        if self.remote is None:
            return StorageServiceStatus(available=False, connected=False)
        return self.remote.get_status()

    def get_status(self) -> Dict[str, Any]:
        return {
            "current_strategy": self._current.value,
            "available_strategies": [tag.value for tag in self.get_available_strategies()],
            "auto_switch": self._auto_switch,
            "api_status": self.get_api_status().to_dict(),
        }
