"""
Query module - Filtering, sorting and statistics over a todo collection.

All functions are pure: they return new lists and never reorder or mutate
their input.
"""

import locale
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from todo_manager.models import (
    ALL,
    PRIORITY_RANK,
    Priority,
    SortDirection,
    SortField,
    Todo,
    TodoStatus,
    TodoFilter,
    TodoSort,
    TodoStats,
)


def _is_set(value: Any) -> bool:
    return value is not None and value != ALL and value != ""


def filter_todos(todos: Sequence[Todo], criteria: Optional[TodoFilter] = None) -> List[Todo]:
    """
    Keep the todos matching every given criterion, in input order.

    - ``status`` / ``priority``: exact match; missing or ``"all"`` passes.
    - ``search``: case-insensitive substring of the title; blank passes.
    """
    criteria = criteria or {}
    status = criteria.get("status")
    priority = criteria.get("priority")
    search = (criteria.get("search") or "").strip().casefold()

    status = TodoStatus(status) if _is_set(status) else None
    priority = Priority(priority) if _is_set(priority) else None

    def matches(todo: Todo) -> bool:
        if status is not None and todo.status != status:
            return False
        if priority is not None and todo.priority != priority:
            return False
        if search and search not in todo.title.casefold():
            return False
        return True

    return [todo for todo in todos if matches(todo)]


def _title_key(todo: Todo) -> str:
    return locale.strxfrm(todo.title.casefold())


_SORT_KEYS: Dict[SortField, Callable[[Todo], Any]] = {
    SortField.CREATED_AT: lambda todo: todo.created_at,
    SortField.UPDATED_AT: lambda todo: todo.updated_at,
    SortField.PRIORITY: lambda todo: PRIORITY_RANK[todo.priority],
    SortField.TITLE: _title_key,
}


def sort_todos(todos: Sequence[Todo], sort: TodoSort) -> List[Todo]:
    """
    Return a sorted copy of ``todos``.

    Fields: createdAt, updatedAt, priority (low=1 < medium=2 < high=3) and
    title (case-insensitive, locale-aware). The sort is stable in both
    directions; an unknown field yields an unsorted copy.
    """
    try:
        field = SortField(sort.get("field"))
    except ValueError:
        return list(todos)

    descending = SortDirection(sort.get("direction", SortDirection.ASC)) == SortDirection.DESC
    return sorted(todos, key=_SORT_KEYS[field], reverse=descending)


def filter_and_sort(
    todos: Sequence[Todo],
    criteria: Optional[TodoFilter] = None,
    sort: Optional[TodoSort] = None
) -> List[Todo]:
    """Filter, then sort when a sort order is given."""
    filtered = filter_todos(todos, criteria)
    if not sort or not sort.get("field") or not sort.get("direction"):
        return filtered
    return sort_todos(filtered, sort)


def calculate_todo_stats(todos: Sequence[Todo]) -> TodoStats:
    """Totals by status and by priority."""
    stats: TodoStats = {
        "total": len(todos),
        "completed": 0,
        "pending": 0,
        "priorityCount": {"low": 0, "medium": 0, "high": 0},
    }

    for todo in todos:
        if todo.status == TodoStatus.COMPLETED:
            stats["completed"] += 1
        else:
            stats["pending"] += 1
        stats["priorityCount"][todo.priority.value] += 1

    return stats


def active_filter_count(criteria: Optional[Mapping[str, Any]]) -> int:
    """Number of filter fields holding a value."""
    if not criteria:
        return 0
    return sum(1 for value in criteria.values() if value is not None and value != "")


def has_active_filters(criteria: Optional[Mapping[str, Any]]) -> bool:
    return active_filter_count(criteria) > 0
