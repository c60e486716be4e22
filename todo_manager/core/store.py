"""
Todo Store - Owner of the in-memory todo collection

The store is constructed once per session with a ``StorageManager`` and
passed to whatever needs the todos. Every mutation goes through the reducer
and, with ``auto_save`` on, the resulting collection is written through the
manager afterwards (write-after-mutate, not transactional: the in-memory
collection keeps the change when the write fails).

Usage:
    manager = StorageManager.from_config(StorageConfig.from_env())
    manager.initialize()
    store = TodoStore(manager)
    await store.load()
    todo = await store.add({"title": "Write report", "priority": "high"})
    await store.toggle(todo.id)
    visible = store.view({"status": "pending"}, {"field": "priority", "direction": "desc"})
"""

import asyncio
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Sequence, Union

from todo_manager.models import (
    CreateTodoInput,
    Priority,
    Todo,
    TodoFilter,
    TodoSort,
    TodoStats,
    TodoStatus,
    UpdateTodoInput,
    update_todo,
    validate_create_input,
)
from todo_manager.utils.exceptions import StorageError, TodoManagerError, TodoNotFoundError, ValidationError
from todo_manager.utils.logger import get_logger
from .actions import (
    TodoAction,
    add_todo_action,
    delete_todo_action,
    reset_todos_action,
    set_todos_action,
    toggle_todo_action,
    update_todo_action,
)
from .query import calculate_todo_stats, filter_and_sort, filter_todos, sort_todos
from .reducer import todo_reducer

if TYPE_CHECKING:
    from todo_manager.storage.manager import StorageManager

logger = get_logger(__name__)

COPY_SUFFIX = " (copy)"


class TodoStore:
    """
    In-memory todo collection with persistence through a storage manager.

    Attributes:
        error: Message of the last failed operation (None after a success)
        loading: True while ``load()`` is running
        auto_save: Persist the collection after every mutation
    """

    def __init__(
        self,
        manager: Optional["StorageManager"] = None,
        initial_todos: Optional[Iterable[Todo]] = None,
        auto_save: bool = True
    ):
        self._manager = manager
        self._todos: List[Todo] = list(initial_todos or [])
        self.auto_save = auto_save
        self.error: Optional[str] = None
        self.loading = False
        self._save_lock: Optional[asyncio.Lock] = None

    @property
    def todos(self) -> List[Todo]:
        """Copy of the current collection, in insertion order."""
        return list(self._todos)

    def get(self, todo_id: str) -> Optional[Todo]:
        return next((todo for todo in self._todos if todo.id == todo_id), None)

    def _require(self, todo_id: str) -> Todo:
        todo = self.get(todo_id)
        if todo is None:
            error = TodoNotFoundError(todo_id)
            self.error = error.message
            raise error
        return todo

    def dispatch(self, action: TodoAction) -> List[Todo]:
        """Run ``action`` through the reducer and keep the result."""
        self._todos = todo_reducer(self._todos, action)
        return self.todos

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def load(self) -> List[Todo]:
        """Replace the collection with what the storage manager holds."""
        if self._manager is None:
            return self.todos

        self.loading = True
        self.error = None
        try:
            todos = await self._manager.get_todos()
        except StorageError as e:
            self.error = e.message
            logger.error(f"[STORE] Failed to load todos: {e}")
            raise
        finally:
            self.loading = False

        self.dispatch(set_todos_action(todos))
        logger.info(f"[STORE] Loaded {len(todos)} todos")
        return self.todos

    async def save(self) -> None:
        """
        Write the current collection through the storage manager.

        Concurrent calls are serialized; each write takes the collection as
        it is when the write starts, so the last write holds the latest state.
        """
        if self._manager is None:
            return

        if self._save_lock is None:
            self._save_lock = asyncio.Lock()

        async with self._save_lock:
            try:
                await self._manager.save_todos(list(self._todos))
            except StorageError as e:
                self.error = e.message
                logger.error(f"[STORE] Failed to save todos: {e}")
                raise

    async def _after_mutation(self) -> None:
        self.error = None
        if self.auto_save:
            await self.save()

    # ------------------------------------------------------------------
    # Single operations
    # ------------------------------------------------------------------

    async def add(self, input: CreateTodoInput) -> Todo:
        """
        Create a todo and append it.

        Raises:
            ValidationError: empty / whitespace-only / too long title, unknown priority
        """
        try:
            validate_create_input(input)
        except ValidationError as e:
            self.error = e.message
            raise

        self.dispatch(add_todo_action(input))
        todo = self._todos[-1]
        logger.debug(f"[STORE] Added {todo.id}")

        await self._after_mutation()
        return todo

    async def update(self, todo_id: str, changes: UpdateTodoInput) -> Todo:
        """
        Apply ``changes`` to the todo with ``todo_id``.

        Raises:
            TodoNotFoundError: no todo has that id
            ValidationError: invalid title, priority or status
        """
        existing = self._require(todo_id)
        try:
            updated = update_todo(existing, changes)
        except ValidationError as e:
            self.error = e.message
            raise

        self.dispatch(update_todo_action(updated))
        await self._after_mutation()
        return updated

    async def delete(self, todo_id: str) -> None:
        """Remove the todo with ``todo_id``; unknown ids are a no-op."""
        if self.get(todo_id) is None:
            return
        self.dispatch(delete_todo_action(todo_id))
        await self._after_mutation()

    async def toggle(self, todo_id: str) -> Optional[Todo]:
        """Flip pending/completed; returns the new value, or None for an unknown id."""
        if self.get(todo_id) is None:
            return None
        self.dispatch(toggle_todo_action(todo_id))
        await self._after_mutation()
        return self.get(todo_id)

    async def set_todos(self, todos: Sequence[Todo]) -> None:
        self.dispatch(set_todos_action(list(todos)))
        await self._after_mutation()

    # ------------------------------------------------------------------
    # Batch operations
    # ------------------------------------------------------------------

    async def _gather(self, operations: List[Any]) -> List[Any]:
        try:
            return list(await asyncio.gather(*operations))
        except TodoManagerError as e:
            self.error = e.message
            raise

    async def add_many(self, inputs: Sequence[CreateTodoInput]) -> List[Todo]:
        """Add several todos concurrently; the first failure propagates."""
        return await self._gather([self.add(input) for input in inputs])

    async def delete_many(self, todo_ids: Sequence[str]) -> None:
        await self._gather([self.delete(todo_id) for todo_id in todo_ids])

    async def _update_existing(self, todo_ids: Sequence[str], changes: UpdateTodoInput) -> List[Todo]:
        present = [todo_id for todo_id in todo_ids if self.get(todo_id) is not None]
        skipped = len(todo_ids) - len(present)
        if skipped:
            logger.debug(f"[STORE] Skipping {skipped} unknown todo ids")
        return await self._gather([self.update(todo_id, changes) for todo_id in present])

    async def update_priorities(self, todo_ids: Sequence[str], priority: Union[Priority, str]) -> List[Todo]:
        """Set ``priority`` on every listed todo; unknown ids are skipped."""
        return await self._update_existing(todo_ids, {"priority": priority})

    async def update_statuses(self, todo_ids: Sequence[str], status: Union[TodoStatus, str]) -> List[Todo]:
        """Set ``status`` on every listed todo; unknown ids are skipped."""
        return await self._update_existing(todo_ids, {"status": status})

    async def clear_completed(self) -> int:
        """Delete every completed todo; returns how many were removed."""
        completed = [todo.id for todo in self._todos if todo.is_completed]
        if completed:
            await self.delete_many(completed)
        return len(completed)

    async def clear_all(self) -> None:
        self.dispatch(reset_todos_action())
        await self._after_mutation()

    async def duplicate(self, todo_id: str) -> Optional[Todo]:
        """Add a copy of a todo with " (copy)" appended to its title; None for an unknown id."""
        original = self.get(todo_id)
        if original is None:
            return None
        return await self.add({"title": f"{original.title}{COPY_SUFFIX}", "priority": original.priority})

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def filtered(self, criteria: Optional[TodoFilter] = None) -> List[Todo]:
        return filter_todos(self._todos, criteria)

    def sorted(self, sort: TodoSort) -> List[Todo]:
        return sort_todos(self._todos, sort)

    def view(self, criteria: Optional[TodoFilter] = None, sort: Optional[TodoSort] = None) -> List[Todo]:
        return filter_and_sort(self._todos, criteria, sort)

    def stats(self) -> TodoStats:
        return calculate_todo_stats(self._todos)
