"""
Enums module - Todo priority, status and other enumeration types
"""

from enum import Enum


class Priority(str, Enum):
    """Priority levels of a todo"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TodoStatus(str, Enum):
    """Completion states of a todo"""
    PENDING = "pending"
    COMPLETED = "completed"


class SortField(str, Enum):
    """Fields a todo list can be sorted by"""
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    PRIORITY = "priority"
    TITLE = "title"


class SortDirection(str, Enum):
    """Sort directions"""
    ASC = "asc"
    DESC = "desc"


class StorageStrategy(str, Enum):
    """Persistence backends known to the storage manager"""
    LOCAL = "local"
    API = "api"
    REDIS = "redis"


# Filter value meaning "do not filter on this field"
ALL = "all"

PRIORITY_RANK = {
    Priority.LOW: 1,
    Priority.MEDIUM: 2,
    Priority.HIGH: 3,
}
