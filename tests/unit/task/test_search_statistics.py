"""Search filters and aggregate statistics."""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from taskledger.core.task import (
    Task,
    TaskComplexity,
    TaskPriority,
    TaskSearchFilters,
    TaskStatus,
    TestStatus,
)
from taskledger.core.task.search import matches_query, search, validate_filters
from taskledger.core.task.statistics import compute_statistics


def _task(task_id: str, **kwargs) -> Task:
    kwargs.setdefault("title", f"Task {task_id}")
    kwargs.setdefault("created_date", "2024-01-01T00:00:00Z")
    kwargs.setdefault("last_modified", "2024-01-01T00:00:00Z")
    return Task(id=task_id, **kwargs)


@pytest.fixture
def tasks():
    return [
        _task("1", title="Parser rewrite", description="Split lines", priority=TaskPriority.HIGH,
              tags=["core"], requirements=["R1"], assignee="alice"),
        _task("2", title="Docs", status=TaskStatus.IN_PROGRESS, complexity=TaskComplexity.LOW,
              tags=["docs"], assignee="bob", last_modified="2024-03-01T00:00:00Z"),
        _task("3", title="Release", status=TaskStatus.COMPLETED, priority=TaskPriority.CRITICAL,
              tags=["core", "ops"], requirements=["R2"], created_date="2024-02-01T00:00:00Z",
              last_modified="2024-02-01T01:00:00Z"),
    ]


class TestSearch:
    def test_empty_query_matches_everything(self, tasks) -> None:
        assert [t.id for t in search(tasks)] == ["1", "2", "3"]

    def test_query_is_case_insensitive_over_id_title_description(self, tasks) -> None:
        assert matches_query(tasks[0], "SPLIT")
        assert matches_query(tasks[0], "rewrite")
        assert matches_query(tasks[1], "2")
        assert not matches_query(tasks[1], "parser")

    def test_status_priority_complexity_sets(self, tasks) -> None:
        f = TaskSearchFilters(status=[TaskStatus.NOT_STARTED, TaskStatus.COMPLETED])
        assert [t.id for t in search(tasks, "", f)] == ["1", "3"]
        f = TaskSearchFilters(priority=[TaskPriority.CRITICAL])
        assert [t.id for t in search(tasks, "", f)] == ["3"]
        f = TaskSearchFilters(complexity=[TaskComplexity.LOW])
        assert [t.id for t in search(tasks, "", f)] == ["2"]

    def test_assignee_equality(self, tasks) -> None:
        assert [t.id for t in search(tasks, "", TaskSearchFilters(assignee="bob"))] == ["2"]

    def test_tag_and_requirement_intersection(self, tasks) -> None:
        assert [t.id for t in search(tasks, "", TaskSearchFilters(tags=["ops", "docs"]))] == ["2", "3"]
        assert [t.id for t in search(tasks, "", TaskSearchFilters(requirements=["R1"]))] == ["1"]

    def test_filters_are_anded_with_query(self, tasks) -> None:
        f = TaskSearchFilters(tags=["core"])
        assert [t.id for t in search(tasks, "release", f)] == ["3"]

    def test_date_ranges(self, tasks) -> None:
        f = TaskSearchFilters(created_after=datetime(2024, 1, 15, tzinfo=timezone.utc))
        assert [t.id for t in search(tasks, "", f)] == ["3"]
        f = TaskSearchFilters(modified_before=datetime(2024, 2, 15))
        assert [t.id for t in search(tasks, "", f)] == ["1", "3"]

    def test_validate_filters(self) -> None:
        bad = TaskSearchFilters(
            created_after=datetime(2024, 2, 1),
            created_before=datetime(2024, 1, 1),
            assignee="  ",
        )
        problems = validate_filters(bad)
        assert "created_after must not be later than created_before" in problems
        assert "assignee must not be blank" in problems
        assert validate_filters(TaskSearchFilters()) == []

    def test_filters_to_dict(self) -> None:
        f = TaskSearchFilters(status=[TaskStatus.BLOCKED], created_after=datetime(2024, 1, 1))
        assert f.to_dict() == {"status": ["blocked"], "createdAfter": "2024-01-01T00:00:00"}


class TestStatistics:
    def test_counts_and_distributions(self, tasks) -> None:
        stats = compute_statistics(tasks)
        assert stats.total_tasks == 3
        assert stats.completed_tasks == 1
        assert stats.in_progress_tasks == 1
        assert stats.not_started_tasks == 1
        assert stats.priority_distribution == {
            TaskPriority.LOW: 0,
            TaskPriority.MEDIUM: 1,
            TaskPriority.HIGH: 1,
            TaskPriority.CRITICAL: 1,
        }
        assert stats.complexity_distribution[TaskComplexity.LOW] == 1
        assert stats.complexity_distribution[TaskComplexity.MEDIUM] == 2

    def test_average_completion_time_in_seconds(self, tasks) -> None:
        assert compute_statistics(tasks).average_completion_time == 3600.0

    def test_test_coverage_averages_reporting_tasks(self, tasks) -> None:
        tasks[0].test_status = TestStatus(total_tests=4, passed_tests=4, coverage=80.0)
        tasks[2].test_status = TestStatus(total_tests=2, passed_tests=1, failed_tests=1, coverage=60.0)
        tasks[1].test_status = TestStatus(total_tests=1)
        assert compute_statistics(tasks).test_coverage == 70.0

    def test_display_only_states_are_counted(self) -> None:
        stats = compute_statistics(
            [_task("1", status=TaskStatus.REVIEW), _task("2", status=TaskStatus.DEPRECATED)]
        )
        assert stats.review_tasks == 1
        assert stats.deprecated_tasks == 1
        assert sum(stats.status_counts.values()) == stats.total_tasks == 2

    def test_empty(self) -> None:
        stats = compute_statistics([])
        assert stats.total_tasks == 0
        assert stats.average_completion_time == 0.0
        assert stats.test_coverage == 0.0

    def test_to_dict_uses_enum_values(self, tasks) -> None:
        data = compute_statistics(tasks).to_dict()
        assert data["priorityDistribution"]["critical"] == 1
        assert data["notStartedTasks"] == 1
