"""
Storage configuration - Settings for the storage strategies and the todo API server
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
from pathlib import Path

from todo_manager.models import STORAGE_KEYS, StorageStrategy
from .env_config import EnvConfig

DEFAULT_STRATEGY_ORDER = [StorageStrategy.LOCAL.value, StorageStrategy.API.value, StorageStrategy.REDIS.value]


@dataclass
class LocalConfig:
    """
    Configuration for the local (file) strategy.

    Attributes:
        directory: Folder holding the snapshot file
        key: Snapshot name; the file is ``<key>.json``
        quota_bytes: Largest snapshot accepted, in bytes
    """
    directory: str = "./data"
    key: str = STORAGE_KEYS["todos"]
    quota_bytes: int = 5 * 1024 * 1024

    def __post_init__(self):
        if not self.key:
            raise ValueError("key cannot be empty")
        if self.quota_bytes < 1:
            raise ValueError(f"quota_bytes must be positive, got {self.quota_bytes}")

    @property
    def path(self) -> Path:
        """Get absolute snapshot folder path."""
        return Path(self.directory).resolve()

    @classmethod
    def from_env(cls, prefix: str = "TODO_") -> "LocalConfig":
        return cls(
            directory=EnvConfig.get(f"{prefix}LOCAL_DIR", "./data"),
            key=EnvConfig.get(f"{prefix}STORAGE_KEY", STORAGE_KEYS["todos"]),
            quota_bytes=EnvConfig.get_int(f"{prefix}LOCAL_QUOTA_BYTES", 5 * 1024 * 1024),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "directory": str(self.path),
            "key": self.key,
            "quota_bytes": self.quota_bytes,
        }


@dataclass
class ApiConfig:
    """
    Configuration for the remote (HTTP API) strategy.

    Attributes:
        base_url: API root; requests go to ``{base_url}/todos``
        timeout: Per-request timeout in seconds
        retry_count: Extra attempts after a transport failure
        retry_delay: Seconds between attempts
        auth_token: Optional bearer token (reads from TODO_API_TOKEN)
    """
    base_url: str = "http://localhost:3000"
    timeout: float = 10.0
    retry_count: int = 3
    retry_delay: float = 1.0
    auth_token: Optional[str] = None

    def __post_init__(self):
        """Validate API configuration."""
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.retry_count < 0:
            raise ValueError("retry_count cannot be negative")
        if self.retry_delay < 0:
            raise ValueError("retry_delay cannot be negative")

    @classmethod
    def from_env(cls, prefix: str = "TODO_") -> "ApiConfig":
        """Create API config from environment variables."""
        return cls(
            base_url=EnvConfig.get(f"{prefix}API_BASE_URL", "http://localhost:3000"),
            timeout=EnvConfig.get_float(f"{prefix}API_TIMEOUT", 10.0),
            retry_count=EnvConfig.get_int(f"{prefix}API_RETRY_COUNT", 3),
            retry_delay=EnvConfig.get_float(f"{prefix}API_RETRY_DELAY", 1.0),
            auth_token=EnvConfig.get(f"{prefix}API_TOKEN") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, excluding the token for security."""
        return {
            "base_url": self.base_url,
            "timeout": self.timeout,
            "retry_count": self.retry_count,
            "retry_delay": self.retry_delay,
            "has_auth_token": bool(self.auth_token),
        }


@dataclass
class RedisConfig:
    """
    Configuration for the Redis strategy.

    Attributes:
        enabled: Whether the Redis strategy is built at all
        host: Redis server host
        port: Redis server port
        db: Redis database number
        password: Redis password if authentication required
        key_prefix: Namespace prepended to the snapshot key
    """
    enabled: bool = False
    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: Optional[str] = None
    key_prefix: str = "todo_manager:"

    def __post_init__(self):
        if not 0 < self.port < 65536:
            raise ValueError(f"port must be between 1 and 65535, got {self.port}")
        if self.db < 0:
            raise ValueError("db cannot be negative")

    @classmethod
    def from_env(cls, prefix: str = "TODO_") -> "RedisConfig":
        return cls(
            enabled=EnvConfig.get_bool(f"{prefix}REDIS_ENABLED", False),
            host=EnvConfig.get(f"{prefix}REDIS_HOST", "localhost"),
            port=EnvConfig.get_int(f"{prefix}REDIS_PORT", 6379),
            db=EnvConfig.get_int(f"{prefix}REDIS_DB", 0),
            password=EnvConfig.get(f"{prefix}REDIS_PASSWORD") or None,
            key_prefix=EnvConfig.get(f"{prefix}REDIS_KEY_PREFIX", "todo_manager:"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "host": self.host,
            "port": self.port,
            "db": self.db,
            "key_prefix": self.key_prefix,
        }


@dataclass
class StorageConfig:
    """
    Configuration for the storage manager.

    Attributes:
        default_strategy: Strategy used first (default: local)
        auto_switch: Fall back to other available strategies on failure
        strategies: Priority order of strategies
        local: Local strategy configuration
        api: Remote strategy configuration
        redis: Redis strategy configuration (disabled by default)
    """

    default_strategy: str = StorageStrategy.LOCAL.value
    auto_switch: bool = True
    strategies: List[str] = field(default_factory=lambda: list(DEFAULT_STRATEGY_ORDER))
    local: LocalConfig = field(default_factory=LocalConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    redis: RedisConfig = field(default_factory=RedisConfig)

    def __post_init__(self):
        """Validate configuration after initialization."""
        valid_strategies = [s.value for s in StorageStrategy]

        self.default_strategy = str(getattr(self.default_strategy, "value", self.default_strategy)).lower()
        if self.default_strategy not in valid_strategies:
            raise ValueError(f"default_strategy must be one of {valid_strategies}, got {self.default_strategy}")

        order = [str(getattr(s, "value", s)).strip().lower() for s in self.strategies]
        unknown = [s for s in order if s not in valid_strategies]
        if unknown:
            raise ValueError(f"Unknown storage strategies: {unknown}")
        if len(set(order)) != len(order):
            raise ValueError(f"Duplicate storage strategies in {order}")
        if self.default_strategy not in order:
            raise ValueError(f"default_strategy '{self.default_strategy}' is not in strategies {order}")
        self.strategies = order

        if isinstance(self.local, dict):
            self.local = LocalConfig(**self.local)
        if isinstance(self.api, dict):
            self.api = ApiConfig(**self.api)
        if isinstance(self.redis, dict):
            self.redis = RedisConfig(**self.redis)

    @property
    def enabled_strategies(self) -> List[StorageStrategy]:
        """Priority order without strategies switched off in configuration."""
        return [
            StorageStrategy(s) for s in self.strategies
            if s != StorageStrategy.REDIS.value or self.redis.enabled
        ]

    @classmethod
    def from_env(cls, prefix: str = "TODO_") -> "StorageConfig":
        """
        Create configuration from environment variables.

        Args:
            prefix: Prefix for environment variables (default: "TODO_")

        Returns:
            Configured StorageConfig instance

        Example:
            export TODO_DEFAULT_STRATEGY=api
            export TODO_STRATEGY_ORDER=api,local
            export TODO_API_BASE_URL=http://localhost:3000
            config = StorageConfig.from_env()
        """
        return cls(
            default_strategy=EnvConfig.get(f"{prefix}DEFAULT_STRATEGY", StorageStrategy.LOCAL.value),
            auto_switch=EnvConfig.get_bool(f"{prefix}AUTO_SWITCH", True),
            strategies=EnvConfig.get_list(f"{prefix}STRATEGY_ORDER", DEFAULT_STRATEGY_ORDER),
            local=LocalConfig.from_env(prefix),
            api=ApiConfig.from_env(prefix),
            redis=RedisConfig.from_env(prefix),
        )

    def to_dict(self, include_secrets: bool = False) -> Dict[str, Any]:
        """
        Convert to dictionary.

        Args:
            include_secrets: Whether to include the API token and Redis password (default: False)
        """
        result = {
            "default_strategy": self.default_strategy,
            "auto_switch": self.auto_switch,
            "strategies": list(self.strategies),
            "local": self.local.to_dict(),
            "api": self.api.to_dict(),
            "redis": self.redis.to_dict(),
        }

        if include_secrets:
            if self.api.auth_token:
                result["api"]["auth_token"] = self.api.auth_token
            if self.redis.password:
                result["redis"]["password"] = self.redis.password

        return result


@dataclass
class ServerConfig:
    """
    Configuration for the todo API server.

    Attributes:
        host: Interface to bind
        port: Port to bind
        data_dir: Folder holding the server's snapshot file
        api_token: Bearer token required on /todos when set
        persist: Keep the collection on disk (False keeps it in memory)
    """
    host: str = "0.0.0.0"
    port: int = 3000
    data_dir: str = "./server_data"
    api_token: Optional[str] = None
    persist: bool = True

    def __post_init__(self):
        if not 0 < self.port < 65536:
            raise ValueError(f"port must be between 1 and 65535, got {self.port}")

    @classmethod
    def from_env(cls, prefix: str = "TODO_") -> "ServerConfig":
        return cls(
            host=EnvConfig.get(f"{prefix}SERVER_HOST", "0.0.0.0"),
            port=EnvConfig.get_int(f"{prefix}SERVER_PORT", 3000),
            data_dir=EnvConfig.get(f"{prefix}SERVER_DATA_DIR", "./server_data"),
            api_token=EnvConfig.get(f"{prefix}API_TOKEN") or None,
            persist=EnvConfig.get_bool(f"{prefix}SERVER_PERSIST", True),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "data_dir": self.data_dir,
            "persist": self.persist,
            "requires_token": bool(self.api_token),
        }
