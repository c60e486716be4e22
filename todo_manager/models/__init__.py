"""
Models module - Data structures and enums for TodoManager
"""

from .enums import (
    Priority,
    TodoStatus,
    SortField,
    SortDirection,
    StorageStrategy,
    ALL,
    PRIORITY_RANK,
)
from .types import (
    CreateTodoInput,
    UpdateTodoInput,
    TodoFilter,
    TodoSort,
    TodoStats,
    PriorityInfo,
    StatusInfo,
    PRIORITY_INFO,
    STATUS_INFO,
    DEFAULT_FILTER,
    DEFAULT_SORT,
    STORAGE_KEYS,
)
from .todo import (
    Todo,
    MAX_TITLE_LENGTH,
    create_todo,
    update_todo,
    toggle_todo_status,
    validate_todo,
    validate_create_input,
    validate_update_input,
    generate_todo_id,
)

__all__ = [
    # Enums
    'Priority',
    'TodoStatus',
    'SortField',
    'SortDirection',
    'StorageStrategy',
    'ALL',
    'PRIORITY_RANK',

    # Structures
    'CreateTodoInput',
    'UpdateTodoInput',
    'TodoFilter',
    'TodoSort',
    'TodoStats',
    'PriorityInfo',
    'StatusInfo',
    'PRIORITY_INFO',
    'STATUS_INFO',
    'DEFAULT_FILTER',
    'DEFAULT_SORT',
    'STORAGE_KEYS',

    # Todo record
    'Todo',
    'MAX_TITLE_LENGTH',
    'create_todo',
    'update_todo',
    'toggle_todo_status',
    'validate_todo',
    'validate_create_input',
    'validate_update_input',
    'generate_todo_id',
]
