"""
Types module - Input, filter, sort and stats structures plus display constants
"""

from typing import Dict, TypedDict, Union

from .enums import Priority, TodoStatus, SortField, SortDirection, ALL


class CreateTodoInput(TypedDict, total=False):
    """Input for creating a todo. ``title`` is required, priority defaults to medium."""
    title: str
    priority: Union[Priority, str]


class UpdateTodoInput(TypedDict, total=False):
    """Partial changes applied to an existing todo"""
    title: str
    priority: Union[Priority, str]
    status: Union[TodoStatus, str]


class TodoFilter(TypedDict, total=False):
    """View filter. Missing keys or ``"all"`` pass every todo."""
    status: Union[TodoStatus, str]
    priority: Union[Priority, str]
    search: str


class TodoSort(TypedDict):
    """View sort order"""
    field: Union[SortField, str]
    direction: Union[SortDirection, str]


class PriorityCount(TypedDict):
    low: int
    medium: int
    high: int


class TodoStats(TypedDict):
    """Counts over a todo collection"""
    total: int
    completed: int
    pending: int
    priorityCount: PriorityCount


class PriorityInfo(TypedDict):
    value: Priority
    label: str
    color: str
    order: int


class StatusInfo(TypedDict):
    value: TodoStatus
    label: str
    color: str


PRIORITY_INFO: Dict[Priority, PriorityInfo] = {
    Priority.LOW: {"value": Priority.LOW, "label": "Low", "color": "#40c057", "order": 1},
    Priority.MEDIUM: {"value": Priority.MEDIUM, "label": "Medium", "color": "#fab005", "order": 2},
    Priority.HIGH: {"value": Priority.HIGH, "label": "High", "color": "#fa5252", "order": 3},
}

STATUS_INFO: Dict[TodoStatus, StatusInfo] = {
    TodoStatus.PENDING: {"value": TodoStatus.PENDING, "label": "Pending", "color": "#868e96"},
    TodoStatus.COMPLETED: {"value": TodoStatus.COMPLETED, "label": "Completed", "color": "#40c057"},
}

DEFAULT_FILTER: TodoFilter = {
    "status": ALL,
    "priority": ALL,
    "search": "",
}

DEFAULT_SORT: TodoSort = {
    "field": SortField.CREATED_AT,
    "direction": SortDirection.DESC,
}

STORAGE_KEYS = {
    "todos": "todos",
    "filter": "todo_filter",
    "sort": "todo_sort",
}
