"""
Reducer module - Pure state transitions over the todo collection.

``todo_reducer(todos, action)`` never mutates ``todos``; it always returns a
list (the same one for unknown actions). Insertion order is preserved by
every action; ADD_TODO appends.
"""

from typing import Any, List, Sequence

from todo_manager.models import Todo, create_todo, toggle_todo_status
from .actions import AddTodo, UpdateTodo, DeleteTodo, ToggleTodo, SetTodos

INITIAL_TODO_STATE: List[Todo] = []


def todo_reducer(todos: Sequence[Todo], action: Any) -> List[Todo]:
    """
    Compute the collection that results from applying ``action``.

    Args:
        todos: Current collection (left untouched)
        action: One of AddTodo, UpdateTodo, DeleteTodo, ToggleTodo, SetTodos

    Returns:
        New collection. Unknown actions return ``todos`` unchanged.

    Raises:
        ValidationError: AddTodo with an empty or too long title
    """
    if isinstance(action, AddTodo):
        return [*todos, create_todo(action.payload)]

    if isinstance(action, UpdateTodo):
        updated = action.payload
        return [updated if todo.id == updated.id else todo for todo in todos]

    if isinstance(action, DeleteTodo):
        return [todo for todo in todos if todo.id != action.payload]

    if isinstance(action, ToggleTodo):
        return [
            toggle_todo_status(todo) if todo.id == action.payload else todo
            for todo in todos
        ]

    if isinstance(action, SetTodos):
        return list(action.payload)

    return todos if isinstance(todos, list) else list(todos)
