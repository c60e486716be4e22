"""
Unit tests for the todo record and its creation / update rules.
"""

from datetime import datetime, timezone

import pytest

from todo_manager.models import (
    MAX_TITLE_LENGTH,
    Priority,
    Todo,
    TodoStatus,
    create_todo,
    toggle_todo_status,
    update_todo,
    validate_todo,
)
from todo_manager.utils.exceptions import (
    InvalidDataError,
    InvalidParameterError,
    ValidationError,
    VALIDATION_ERROR_CODE,
)
from todo_manager.utils.serialization import format_timestamp, parse_timestamp


class TestCreateTodo:
    """Tests for create_todo."""

    def test_defaults(self):
        todo = create_todo({"title": "  Buy milk  "})

        assert todo.title == "Buy milk"
        assert todo.priority == Priority.MEDIUM
        assert todo.status == TodoStatus.PENDING
        assert todo.created_at == todo.updated_at
        assert todo.created_at.tzinfo is not None
        assert todo.id.startswith("todo_")

    def test_explicit_priority(self):
        todo = create_todo({"title": "Ship release", "priority": "high"})
        assert todo.priority == Priority.HIGH

    def test_ids_are_unique(self):
        ids = {create_todo({"title": f"Task {i}"}).id for i in range(200)}
        assert len(ids) == 200

    @pytest.mark.parametrize("title", ["", "   ", "\t\n", None])
    def test_blank_title_rejected(self, title):
        with pytest.raises(ValidationError) as exc_info:
            create_todo({"title": title})

        assert exc_info.value.error_code == VALIDATION_ERROR_CODE
        assert exc_info.value.field_name == "title"

    def test_title_length_limit(self):
        assert create_todo({"title": "x" * MAX_TITLE_LENGTH}).title == "x" * MAX_TITLE_LENGTH

        with pytest.raises(ValidationError):
            create_todo({"title": "x" * (MAX_TITLE_LENGTH + 1)})

    def test_unknown_priority_rejected(self):
        with pytest.raises(InvalidParameterError) as exc_info:
            create_todo({"title": "Task", "priority": "urgent"})

        assert isinstance(exc_info.value, ValidationError)
        assert exc_info.value.error_code == VALIDATION_ERROR_CODE


class TestUpdateTodo:
    """Tests for update_todo and toggle_todo_status."""

    def setup_method(self):
        self.todo = create_todo({"title": "Write report", "priority": "low"})

    def test_update_fields(self):
        updated = update_todo(self.todo, {"title": " Write final report ", "priority": "high"})

        assert updated.id == self.todo.id
        assert updated.created_at == self.todo.created_at
        assert updated.title == "Write final report"
        assert updated.priority == Priority.HIGH
        assert updated.updated_at >= updated.created_at
        # Original value untouched
        assert self.todo.title == "Write report"

    def test_empty_changes_return_same_value(self):
        assert update_todo(self.todo, {}) is self.todo

    def test_invalid_changes_rejected(self):
        with pytest.raises(ValidationError):
            update_todo(self.todo, {"title": "   "})
        with pytest.raises(ValidationError):
            update_todo(self.todo, {"status": "archived"})

    def test_updated_at_never_before_created_at(self):
        future = datetime(2999, 1, 1, tzinfo=timezone.utc)
        todo = Todo(id="t1", title="From the future", created_at=future, updated_at=future)

        updated = update_todo(todo, {"priority": "high"})

        assert updated.updated_at >= updated.created_at

    def test_toggle_is_its_own_inverse(self):
        once = toggle_todo_status(self.todo)
        twice = toggle_todo_status(once)

        assert once.status == TodoStatus.COMPLETED
        assert once.is_completed
        assert twice.status == TodoStatus.PENDING


class TestTodoWireFormat:
    """Tests for to_dict / from_dict and timestamp handling."""

    def test_to_dict_uses_camel_case_and_iso_timestamps(self):
        created = datetime(2024, 5, 1, 9, 30, 0, 123000, tzinfo=timezone.utc)
        todo = Todo(id="t1", title="Task", priority=Priority.HIGH, created_at=created, updated_at=created)

        data = todo.to_dict()

        assert data == {
            "id": "t1",
            "title": "Task",
            "priority": "high",
            "status": "pending",
            "createdAt": "2024-05-01T09:30:00.123Z",
            "updatedAt": "2024-05-01T09:30:00.123Z",
        }

    def test_from_dict_restores_equal_value(self):
        todo = create_todo({"title": "Round trip", "priority": "low"})
        assert Todo.from_dict(todo.to_dict()) == todo

    @pytest.mark.parametrize("broken", [
        {"title": "no id", "createdAt": "2024-05-01T09:30:00.000Z", "updatedAt": "2024-05-01T09:30:00.000Z"},
        {"id": "t1", "title": "bad priority", "priority": "urgent",
         "createdAt": "2024-05-01T09:30:00.000Z", "updatedAt": "2024-05-01T09:30:00.000Z"},
        {"id": "t1", "title": "bad date", "createdAt": "yesterday", "updatedAt": "2024-05-01T09:30:00.000Z"},
        {"id": "t1", "title": "", "createdAt": "2024-05-01T09:30:00.000Z", "updatedAt": "2024-05-01T09:30:00.000Z"},
        {"id": "t1", "title": "  padded  ",
         "createdAt": "2024-05-01T09:30:00.000Z", "updatedAt": "2024-05-01T09:30:00.000Z"},
        {"id": "t1", "title": "x" * (MAX_TITLE_LENGTH + 1),
         "createdAt": "2024-05-01T09:30:00.000Z", "updatedAt": "2024-05-01T09:30:00.000Z"},
        {"id": "t1", "title": "time travel",
         "createdAt": "2024-05-02T09:30:00.000Z", "updatedAt": "2024-05-01T09:30:00.000Z"},
    ])
    def test_from_dict_rejects_malformed_records(self, broken):
        with pytest.raises(InvalidDataError):
            Todo.from_dict(broken)

    def test_timestamp_parsing(self):
        assert parse_timestamp("2024-05-01T09:30:00.123Z") == datetime(
            2024, 5, 1, 9, 30, 0, 123000, tzinfo=timezone.utc
        )
        assert parse_timestamp("2024-05-01T11:30:00.000+02:00") == datetime(
            2024, 5, 1, 9, 30, tzinfo=timezone.utc
        )
        # Naive timestamps are read as UTC
        assert parse_timestamp("2024-05-01T09:30:00.000").tzinfo is not None

        with pytest.raises(ValueError):
            parse_timestamp(12345)

    def test_format_timestamp_truncates_to_milliseconds(self):
        value = datetime(2024, 5, 1, 9, 30, 0, 123999, tzinfo=timezone.utc)
        assert format_timestamp(value) == "2024-05-01T09:30:00.123Z"

    def test_validate_todo(self):
        assert validate_todo(create_todo({"title": "Valid"}))
        assert not validate_todo({"id": "t1", "title": "dict"})
