"""
Shared fixtures for the todo manager tests.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest

from todo_manager.models import Priority, Todo, TodoStatus
from todo_manager.storage import StorageService

BASE_TIME = datetime(2024, 5, 1, 9, 30, 0, 123000, tzinfo=timezone.utc)


class FakeStorage(StorageService):
    """Scriptable in-memory strategy recording every call."""

    def __init__(self, name: str = "fake", available: bool = True, fail_with: Optional[Exception] = None):
        self.name = name
        self.available = available
        self.fail_with = fail_with
        self.todos: List[Todo] = []
        self.calls: List[str] = []

    def is_available(self) -> bool:
        return self.available

    async def get_todos(self) -> List[Todo]:
        self.calls.append("get")
        if self.fail_with is not None:
            raise self.fail_with
        return list(self.todos)

    async def save_todos(self, todos: List[Todo]) -> None:
        self.calls.append("save")
        if self.fail_with is not None:
            raise self.fail_with
        self.todos = list(todos)

    async def clear_todos(self) -> None:
        self.calls.append("clear")
        if self.fail_with is not None:
            raise self.fail_with
        self.todos = []


def make_todo(
    title: str,
    priority: Priority = Priority.MEDIUM,
    status: TodoStatus = TodoStatus.PENDING,
    minutes: int = 0,
    todo_id: Optional[str] = None
) -> Todo:
    created = BASE_TIME + timedelta(minutes=minutes)
    return Todo(
        id=todo_id or f"todo_{title.lower().replace(' ', '_')}",
        title=title,
        priority=priority,
        status=status,
        created_at=created,
        updated_at=created,
    )


@pytest.fixture
def fake_storage_factory():
    return FakeStorage


@pytest.fixture
def todo_factory():
    return make_todo


@pytest.fixture
def seeded_todos():
    """The four todos used by the search scenario, oldest first."""
    return [
        make_todo("High priority task", Priority.HIGH, minutes=0),
        make_todo("Low priority task", Priority.LOW, minutes=1),
        make_todo("Medium priority task", Priority.MEDIUM, minutes=2),
        make_todo("Completed task", Priority.MEDIUM, TodoStatus.COMPLETED, minutes=3),
    ]
