"""
Todo module - The todo record and its creation / update / validation rules
"""

import time
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Mapping, Union

from todo_manager.utils.exceptions import InvalidDataError, InvalidParameterError, ValidationError
from todo_manager.utils.serialization import format_timestamp, parse_timestamp, utc_now
from .enums import Priority, TodoStatus
from .types import CreateTodoInput, UpdateTodoInput

MAX_TITLE_LENGTH = 100


@dataclass(frozen=True)
class Todo:
    """
    A single todo item.

    Fields:
        id: Opaque unique id assigned at creation, never changes.
        title: Trimmed, non-empty title.
        priority: low / medium / high.
        status: pending / completed.
        created_at: UTC creation time, set once.
        updated_at: UTC time of the last change, never before created_at.
    """
    id: str
    title: str
    priority: Priority = Priority.MEDIUM
    status: TodoStatus = TodoStatus.PENDING
    created_at: datetime = None  # type: ignore[assignment]
    updated_at: datetime = None  # type: ignore[assignment]

    def __post_init__(self):
        now = utc_now()
        if self.created_at is None:
            object.__setattr__(self, "created_at", now)
        if self.updated_at is None:
            object.__setattr__(self, "updated_at", self.created_at)
        object.__setattr__(self, "priority", Priority(self.priority))
        object.__setattr__(self, "status", TodoStatus(self.status))

    @property
    def is_completed(self) -> bool:
        return self.status == TodoStatus.COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        """Wire form used by every storage strategy and the remote API."""
        return {
            "id": self.id,
            "title": self.title,
            "priority": self.priority.value,
            "status": self.status.value,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Todo":
        """
        Rebuild a todo from its wire form.

        Raises:
            InvalidDataError: missing fields, unknown enum values, bad timestamps,
                titles that are untrimmed or too long, updatedAt before createdAt
        """
        try:
            todo_id = data["id"]
            title = data["title"]
            if not isinstance(todo_id, str) or not todo_id:
                raise ValueError("id must be a non-empty string")
            if not isinstance(title, str) or not title.strip():
                raise ValueError("title must be a non-empty string")
            if title != title.strip():
                raise ValueError("title has surrounding whitespace")
            if len(title) > MAX_TITLE_LENGTH:
                raise ValueError(f"title is longer than {MAX_TITLE_LENGTH} characters")
            created_at = parse_timestamp(data["createdAt"])
            updated_at = parse_timestamp(data["updatedAt"])
            if updated_at < created_at:
                raise ValueError("updatedAt is before createdAt")
            return cls(
                id=todo_id,
                title=title,
                priority=Priority(data.get("priority", Priority.MEDIUM)),
                status=TodoStatus(data.get("status", TodoStatus.PENDING)),
                created_at=created_at,
                updated_at=updated_at,
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise InvalidDataError(f"Malformed todo record: {e}", cause=e) from e


def generate_todo_id() -> str:
    """Unique id of the form ``todo_<epoch-ms>_<9 hex chars>``."""
    return f"todo_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def normalize_title(title: Any) -> str:
    """Trim and validate a title."""
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("title", "Todo title is required", actual_value=title)
    title = title.strip()
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(
            "title",
            f"Todo title must be at most {MAX_TITLE_LENGTH} characters",
            actual_value=len(title),
        )
    return title


def coerce_priority(value: Union[Priority, str]) -> Priority:
    try:
        return Priority(value)
    except ValueError:
        raise InvalidParameterError(
            "priority", "unknown priority", expected="low, medium or high", actual_value=value
        ) from None


def coerce_status(value: Union[TodoStatus, str]) -> TodoStatus:
    try:
        return TodoStatus(value)
    except ValueError:
        raise InvalidParameterError(
            "status", "unknown status", expected="pending or completed", actual_value=value
        ) from None


def validate_create_input(input: Mapping[str, Any]) -> None:
    """Raise ValidationError unless ``input`` can create a todo."""
    normalize_title(input.get("title"))
    if input.get("priority") is not None:
        coerce_priority(input["priority"])


def validate_update_input(changes: Mapping[str, Any]) -> None:
    """Raise ValidationError unless every given field is acceptable."""
    if "title" in changes:
        normalize_title(changes["title"])
    if changes.get("priority") is not None:
        coerce_priority(changes["priority"])
    if changes.get("status") is not None:
        coerce_status(changes["status"])


def create_todo(input: CreateTodoInput) -> Todo:
    """
    Create a new pending todo.

    Args:
        input: ``{"title": ..., "priority": ...}``; priority defaults to medium

    Returns:
        New Todo with a fresh id and created_at == updated_at

    Raises:
        ValidationError: empty / whitespace-only / too long title, unknown priority
    """
    title = normalize_title(input.get("title"))
    priority = input.get("priority")
    priority = Priority.MEDIUM if priority is None else coerce_priority(priority)

    now = utc_now()
    return Todo(
        id=generate_todo_id(),
        title=title,
        priority=priority,
        status=TodoStatus.PENDING,
        created_at=now,
        updated_at=now,
    )


def update_todo(existing: Todo, changes: UpdateTodoInput) -> Todo:
    """
    Return ``existing`` with ``changes`` applied and updated_at refreshed.

    Empty changes return ``existing`` itself.

    Raises:
        ValidationError: invalid title, priority or status
    """
    if not changes:
        return existing

    validate_update_input(changes)

    fields: Dict[str, Any] = {}
    if "title" in changes:
        fields["title"] = normalize_title(changes["title"])
    if changes.get("priority") is not None:
        fields["priority"] = coerce_priority(changes["priority"])
    if changes.get("status") is not None:
        fields["status"] = coerce_status(changes["status"])

    fields["updated_at"] = max(utc_now(), existing.created_at)
    return replace(existing, **fields)


def toggle_todo_status(todo: Todo) -> Todo:
    """Flip pending <-> completed."""
    new_status = TodoStatus.COMPLETED if todo.status == TodoStatus.PENDING else TodoStatus.PENDING
    return update_todo(todo, {"status": new_status})


def validate_todo(todo: Any) -> bool:
    """True when ``todo`` is a well-formed Todo value."""
    if not isinstance(todo, Todo):
        return False
    if not isinstance(todo.id, str) or not todo.id:
        return False
    if not isinstance(todo.title, str) or not todo.title.strip():
        return False
    if not isinstance(todo.created_at, datetime) or not isinstance(todo.updated_at, datetime):
        return False
    return todo.updated_at >= todo.created_at
