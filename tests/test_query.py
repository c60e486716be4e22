"""
Unit tests for filtering, sorting and statistics.
"""

from todo_manager.core import (
    active_filter_count,
    calculate_todo_stats,
    filter_and_sort,
    filter_todos,
    has_active_filters,
    sort_todos,
)
from todo_manager.models import DEFAULT_FILTER, DEFAULT_SORT, Priority, TodoStatus


def _titles(todos):
    return [todo.title for todo in todos]


class TestFilterTodos:
    """Tests for filter_todos."""

    def test_no_criteria_returns_equal_sequence(self, seeded_todos):
        result = filter_todos(seeded_todos)

        assert result == seeded_todos
        assert result is not seeded_todos
        assert filter_todos(seeded_todos, {}) == seeded_todos
        assert filter_todos(seeded_todos, DEFAULT_FILTER) == seeded_todos

    def test_search_matches_titles_containing_term(self, seeded_todos):
        result = filter_todos(seeded_todos, {"search": "priority"})

        assert _titles(result) == ["High priority task", "Low priority task", "Medium priority task"]

    def test_search_is_case_insensitive_and_trimmed(self, seeded_todos):
        assert _titles(filter_todos(seeded_todos, {"search": "  HIGH "})) == ["High priority task"]

    def test_blank_search_matches_everything(self, seeded_todos):
        assert filter_todos(seeded_todos, {"search": "   "}) == seeded_todos

    def test_status_and_priority_are_exact_matches(self, seeded_todos):
        assert _titles(filter_todos(seeded_todos, {"status": TodoStatus.COMPLETED})) == ["Completed task"]
        assert _titles(filter_todos(seeded_todos, {"priority": "low"})) == ["Low priority task"]

    def test_all_passes_everything(self, seeded_todos):
        assert filter_todos(seeded_todos, {"status": "all", "priority": "all"}) == seeded_todos

    def test_criteria_combine_with_and(self, seeded_todos):
        result = filter_todos(seeded_todos, {"priority": Priority.MEDIUM, "status": "pending", "search": "task"})

        assert _titles(result) == ["Medium priority task"]


class TestSortTodos:
    """Tests for sort_todos."""

    def test_priority_descending(self, todo_factory):
        todos = [todo_factory("A", Priority.LOW), todo_factory("B", Priority.HIGH)]

        assert _titles(sort_todos(todos, {"field": "priority", "direction": "desc"})) == ["B", "A"]
        assert _titles(sort_todos(todos, {"field": "priority", "direction": "asc"})) == ["A", "B"]

    def test_sort_does_not_mutate_input(self, seeded_todos):
        snapshot = list(seeded_todos)

        result = sort_todos(seeded_todos, {"field": "title", "direction": "asc"})

        assert seeded_todos == snapshot
        assert result is not seeded_todos

    def test_created_at_order(self, seeded_todos):
        newest_first = sort_todos(seeded_todos, DEFAULT_SORT)

        assert _titles(newest_first) == list(reversed(_titles(seeded_todos)))

    def test_title_is_case_insensitive(self, todo_factory):
        todos = [todo_factory("banana"), todo_factory("Cherry"), todo_factory("apple")]

        assert _titles(sort_todos(todos, {"field": "title", "direction": "asc"})) == ["apple", "banana", "Cherry"]
        assert _titles(sort_todos(todos, {"field": "title", "direction": "desc"})) == ["Cherry", "banana", "apple"]

    def test_ties_keep_input_order_in_both_directions(self, todo_factory):
        todos = [
            todo_factory("first", Priority.HIGH),
            todo_factory("second", Priority.HIGH),
            todo_factory("third", Priority.LOW),
        ]

        asc = sort_todos(todos, {"field": "priority", "direction": "asc"})
        desc = sort_todos(todos, {"field": "priority", "direction": "desc"})

        assert _titles(asc) == ["third", "first", "second"]
        assert _titles(desc) == ["first", "second", "third"]

    def test_unknown_field_returns_copy(self, seeded_todos):
        result = sort_todos(seeded_todos, {"field": "color", "direction": "asc"})

        assert result == seeded_todos
        assert result is not seeded_todos

    def test_filter_and_sort(self, seeded_todos):
        result = filter_and_sort(
            seeded_todos,
            {"search": "priority"},
            {"field": "priority", "direction": "desc"},
        )

        assert _titles(result) == ["High priority task", "Medium priority task", "Low priority task"]
        assert filter_and_sort(seeded_todos, {"search": "task"}, None) == seeded_todos


class TestStats:
    """Tests for calculate_todo_stats and active filter helpers."""

    def test_counts(self, seeded_todos):
        stats = calculate_todo_stats(seeded_todos)

        assert stats == {
            "total": 4,
            "completed": 1,
            "pending": 3,
            "priorityCount": {"low": 1, "medium": 2, "high": 1},
        }

    def test_empty_collection(self):
        stats = calculate_todo_stats([])
        assert stats["total"] == 0
        assert stats["priorityCount"] == {"low": 0, "medium": 0, "high": 0}

    def test_active_filters(self):
        assert active_filter_count(None) == 0
        assert active_filter_count({"search": "", "status": None}) == 0
        assert active_filter_count({"search": "milk", "priority": "high"}) == 2
        assert has_active_filters({"search": "milk"})
        assert not has_active_filters({})
