"""
Core module - Reducer, queries and the todo store
"""

from .actions import (
    AddTodo,
    UpdateTodo,
    DeleteTodo,
    ToggleTodo,
    SetTodos,
    TodoAction,
    add_todo_action,
    update_todo_action,
    delete_todo_action,
    toggle_todo_action,
    set_todos_action,
    reset_todos_action,
)
from .reducer import todo_reducer, INITIAL_TODO_STATE
from .query import (
    filter_todos,
    sort_todos,
    filter_and_sort,
    calculate_todo_stats,
    active_filter_count,
    has_active_filters,
)
from .store import TodoStore

__all__ = [
    # Actions
    'AddTodo',
    'UpdateTodo',
    'DeleteTodo',
    'ToggleTodo',
    'SetTodos',
    'TodoAction',
    'add_todo_action',
    'update_todo_action',
    'delete_todo_action',
    'toggle_todo_action',
    'set_todos_action',
    'reset_todos_action',

    # Reducer
    'todo_reducer',
    'INITIAL_TODO_STATE',

    # Queries
    'filter_todos',
    'sort_todos',
    'filter_and_sort',
    'calculate_todo_stats',
    'active_filter_count',
    'has_active_filters',

    # Store
    'TodoStore',
]
