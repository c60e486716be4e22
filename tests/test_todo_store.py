"""
Tests for the todo store: mutations, persistence and batch helpers.
"""

import asyncio

import pytest

from todo_manager.core import TodoStore
from todo_manager.models import Priority, StorageStrategy, TodoStatus
from todo_manager.storage import StorageManager
from todo_manager.utils.exceptions import (
    NetworkError,
    QuotaExceededError,
    TodoNotFoundError,
    ValidationError,
)


class TestTodoStore:
    """Single operations and persistence."""

    @pytest.fixture(autouse=True)
    def _store(self, fake_storage_factory):
        self.storage = fake_storage_factory("local")
        self.manager = StorageManager([(StorageStrategy.LOCAL, self.storage)])
        self.store = TodoStore(self.manager)

    def test_add_persists_collection(self):
        todo = asyncio.run(self.store.add({"title": "Buy milk", "priority": "high"}))

        assert self.store.todos == [todo]
        assert todo.priority == Priority.HIGH
        assert self.storage.todos == [todo]
        assert self.store.error is None

    def test_add_blank_title_is_rejected_before_dispatch(self):
        with pytest.raises(ValidationError):
            asyncio.run(self.store.add({"title": "   "}))

        assert self.store.todos == []
        assert self.store.error == "Todo title is required"
        assert self.storage.calls == []

    def test_todos_property_is_a_copy(self):
        asyncio.run(self.store.add({"title": "One"}))

        self.store.todos.clear()

        assert len(self.store.todos) == 1

    def test_update(self):
        todo = asyncio.run(self.store.add({"title": "Draft"}))

        updated = asyncio.run(self.store.update(todo.id, {"title": "Final", "status": "completed"}))

        assert updated.title == "Final"
        assert updated.status == TodoStatus.COMPLETED
        assert self.storage.todos == [updated]

    def test_update_unknown_id_raises(self):
        with pytest.raises(TodoNotFoundError) as exc_info:
            asyncio.run(self.store.update("todo_missing", {"title": "Nope"}))

        assert exc_info.value.todo_id == "todo_missing"
        assert self.store.error is not None

    def test_toggle_and_delete(self):
        todo = asyncio.run(self.store.add({"title": "Flip me"}))

        toggled = asyncio.run(self.store.toggle(todo.id))
        assert toggled.status == TodoStatus.COMPLETED

        asyncio.run(self.store.delete(todo.id))
        asyncio.run(self.store.delete(todo.id))

        assert self.store.todos == []
        assert self.storage.todos == []
        assert asyncio.run(self.store.toggle("todo_missing")) is None

    def test_unknown_id_does_not_touch_storage(self):
        assert asyncio.run(self.store.toggle("todo_missing")) is None
        asyncio.run(self.store.delete("todo_missing"))

        assert self.storage.calls == []

    def test_load_replaces_collection(self, todo_factory):
        stored = [todo_factory("Stored one"), todo_factory("Stored two", minutes=1)]
        self.storage.todos = list(stored)

        loaded = asyncio.run(self.store.load())

        assert loaded == stored
        assert self.store.todos == stored
        assert self.store.loading is False

    def test_load_failure_records_error(self):
        self.storage.fail_with = NetworkError("offline")

        with pytest.raises(NetworkError):
            asyncio.run(self.store.load())

        assert self.store.error == "offline"
        assert self.store.loading is False

    def test_save_failure_keeps_in_memory_change(self):
        self.storage.fail_with = QuotaExceededError("Storage quota exceeded")

        with pytest.raises(QuotaExceededError):
            asyncio.run(self.store.add({"title": "Too big"}))

        assert [todo.title for todo in self.store.todos] == ["Too big"]
        assert self.store.error == "Storage quota exceeded"

    def test_auto_save_off(self):
        store = TodoStore(self.manager, auto_save=False)

        asyncio.run(store.add({"title": "Not persisted"}))

        assert self.storage.calls == []
        asyncio.run(store.save())
        assert len(self.storage.todos) == 1

    def test_without_manager(self, todo_factory):
        store = TodoStore(initial_todos=[todo_factory("Seed")])

        asyncio.run(store.add({"title": "Local only"}))

        assert [todo.title for todo in asyncio.run(store.load())] == ["Seed", "Local only"]

    def test_quota_failure_falls_back_to_remote(self, fake_storage_factory):
        local = fake_storage_factory("local", fail_with=QuotaExceededError("Storage quota exceeded"))
        remote = fake_storage_factory("api")
        manager = StorageManager([(StorageStrategy.LOCAL, local), (StorageStrategy.API, remote)])
        store = TodoStore(manager)

        todo = asyncio.run(store.add({"title": "Goes remote"}))

        assert remote.todos == [todo]
        assert manager.get_current_strategy() == StorageStrategy.API
        assert store.error is None


class TestBatchOperations:
    """Concurrent batch helpers and views."""

    @pytest.fixture(autouse=True)
    def _store(self, fake_storage_factory):
        self.storage = fake_storage_factory("local")
        self.store = TodoStore(StorageManager([(StorageStrategy.LOCAL, self.storage)]))

    def _add(self, *titles):
        return asyncio.run(self.store.add_many([{"title": title} for title in titles]))

    def test_add_many_keeps_order_and_persists_latest_state(self):
        added = self._add("One", "Two", "Three")

        assert [todo.title for todo in added] == ["One", "Two", "Three"]
        assert self.store.todos == added
        assert self.storage.todos == added

    def test_add_many_propagates_first_failure(self):
        with pytest.raises(ValidationError):
            self._add("Fine", "   ")

    def test_delete_many_and_clear_completed(self):
        one, two, three = self._add("One", "Two", "Three")
        asyncio.run(self.store.update_statuses([one.id, three.id], "completed"))

        removed = asyncio.run(self.store.clear_completed())

        assert removed == 2
        assert [todo.title for todo in self.store.todos] == ["Two"]

        asyncio.run(self.store.delete_many([two.id, "todo_missing"]))
        assert self.store.todos == []
        assert asyncio.run(self.store.clear_completed()) == 0

    def test_update_priorities_skips_unknown_ids(self):
        one, two = self._add("One", "Two")

        updated = asyncio.run(self.store.update_priorities([one.id, "todo_missing", two.id], Priority.HIGH))

        assert [todo.id for todo in updated] == [one.id, two.id]
        assert all(todo.priority == Priority.HIGH for todo in self.store.todos)
        assert all(todo.priority == Priority.HIGH for todo in self.storage.todos)

    def test_clear_all(self):
        self._add("One", "Two")

        asyncio.run(self.store.clear_all())

        assert self.store.todos == []
        assert self.storage.todos == []

    def test_duplicate(self):
        original = asyncio.run(self.store.add({"title": "Report", "priority": "low"}))

        copy = asyncio.run(self.store.duplicate(original.id))

        assert copy.title == "Report (copy)"
        assert copy.priority == Priority.LOW
        assert copy.id != original.id
        assert asyncio.run(self.store.duplicate("todo_missing")) is None

    def test_views(self):
        low = asyncio.run(self.store.add({"title": "Low priority task", "priority": "low"}))
        high = asyncio.run(self.store.add({"title": "High priority task", "priority": "high"}))
        done = asyncio.run(self.store.add({"title": "Completed task"}))
        asyncio.run(self.store.toggle(done.id))

        assert self.store.filtered({"search": "priority"}) == [low, high]
        assert [t.id for t in self.store.sorted({"field": "priority", "direction": "desc"})] == [
            high.id, done.id, low.id
        ]
        assert self.store.view({"status": "pending"}, {"field": "title", "direction": "asc"}) == [high, low]
        assert self.store.stats()["completed"] == 1
        assert self.store.stats()["total"] == 3
