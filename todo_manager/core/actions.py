"""
Actions module - The state transitions the todo reducer understands.

Each action is a small frozen dataclass tagged with ``type``.
"""

from dataclasses import dataclass, field
from typing import List, Tuple, Union

from todo_manager.models import CreateTodoInput, Todo

ADD_TODO = "ADD_TODO"
UPDATE_TODO = "UPDATE_TODO"
DELETE_TODO = "DELETE_TODO"
TOGGLE_TODO = "TOGGLE_TODO"
SET_TODOS = "SET_TODOS"


@dataclass(frozen=True)
class AddTodo:
    """Create a todo from ``payload`` and append it"""
    payload: CreateTodoInput
    type: str = field(default=ADD_TODO, init=False)


@dataclass(frozen=True)
class UpdateTodo:
    """Replace the todo with the same id as ``payload``"""
    payload: Todo
    type: str = field(default=UPDATE_TODO, init=False)


@dataclass(frozen=True)
class DeleteTodo:
    """Remove the todo whose id is ``payload``"""
    payload: str
    type: str = field(default=DELETE_TODO, init=False)


@dataclass(frozen=True)
class ToggleTodo:
    """Flip pending/completed for the todo whose id is ``payload``"""
    payload: str
    type: str = field(default=TOGGLE_TODO, init=False)


@dataclass(frozen=True)
class SetTodos:
    """Replace the whole collection"""
    payload: Tuple[Todo, ...]
    type: str = field(default=SET_TODOS, init=False)


TodoAction = Union[AddTodo, UpdateTodo, DeleteTodo, ToggleTodo, SetTodos]


def add_todo_action(payload: CreateTodoInput) -> AddTodo:
    return AddTodo(payload)


def update_todo_action(payload: Todo) -> UpdateTodo:
    return UpdateTodo(payload)


def delete_todo_action(payload: str) -> DeleteTodo:
    return DeleteTodo(payload)


def toggle_todo_action(payload: str) -> ToggleTodo:
    return ToggleTodo(payload)


def set_todos_action(payload: List[Todo]) -> SetTodos:
    return SetTodos(tuple(payload))


def reset_todos_action() -> SetTodos:
    """Action that empties the collection."""
    return SetTodos(())
