"""
Configuration module - Settings and configuration management
"""

from .env_config import EnvConfig
from .storage_config import (
    StorageConfig,
    LocalConfig,
    ApiConfig,
    RedisConfig,
    ServerConfig,
    DEFAULT_STRATEGY_ORDER,
)

__all__ = [
    'EnvConfig',
    'StorageConfig',
    'LocalConfig',
    'ApiConfig',
    'RedisConfig',
    'ServerConfig',
    'DEFAULT_STRATEGY_ORDER',
]
