"""
Storage module - Persistence strategies and the storage manager
"""

from .base import StorageService, ExtendedStorageService, StorageServiceStatus
from .events import (
    StorageEvent,
    StorageEventListener,
    EventEmitter,
    SYNC_START,
    SYNC_SUCCESS,
    SYNC_ERROR,
    CONNECTION_CHANGE,
)
from .local_storage import LocalStorageService
from .api_storage import ApiStorageService
from .redis_storage import RedisStorageService
from .manager import StorageManager

__all__ = [
    # Interface
    'StorageService',
    'ExtendedStorageService',
    'StorageServiceStatus',

    # Events
    'StorageEvent',
    'StorageEventListener',
    'EventEmitter',
    'SYNC_START',
    'SYNC_SUCCESS',
    'SYNC_ERROR',
    'CONNECTION_CHANGE',

    # Strategies
    'LocalStorageService',
    'ApiStorageService',
    'RedisStorageService',

    # Coordinator
    'StorageManager',
]
