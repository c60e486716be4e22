"""
Todo Manager - Todo list state layer with pluggable persistence

Create, edit, toggle, delete, filter and sort short todo records, and
persist the collection through interchangeable storage strategies
(local JSON file, remote HTTP API, Redis) with automatic fallback.

Features:
- Immutable todo records with validation
- Pure reducer plus filter / sort / stats queries
- Storage manager with priority-ordered fallback and auto-switch
- Remote strategy with timeout, retries, bearer token and sync events
- FastAPI service implementing the remote todo API (see ``api``)
- Environment-based configuration

Configuration:
    Create a .env file with your storage configuration:

    TODO_DEFAULT_STRATEGY=local
    TODO_LOCAL_DIR=./data
    TODO_API_BASE_URL=http://localhost:3000

Example:
    >>> import asyncio
    >>> from todo_manager import EnvConfig, StorageConfig, StorageManager, TodoStore
    >>>
    >>> EnvConfig.load_env_file()
    >>> manager = StorageManager.from_config(StorageConfig.from_env())
    >>> manager.initialize()
    >>> store = TodoStore(manager)
    >>> asyncio.run(store.load())
    >>> todo = asyncio.run(store.add({"title": "Write report", "priority": "high"}))
"""

__version__ = "1.0.0"
__all__ = [
    'Todo',
    'Priority',
    'TodoStatus',
    'StorageStrategy',
    'EnvConfig',
    'StorageConfig',
    'ServerConfig',
    'StorageManager',
    'TodoStore',
]

from todo_manager.models import Todo, Priority, TodoStatus, StorageStrategy
from todo_manager.config import EnvConfig, StorageConfig, ServerConfig
from todo_manager.storage import StorageManager
from todo_manager.core import TodoStore
