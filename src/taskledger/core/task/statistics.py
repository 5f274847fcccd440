"""Aggregate statistics over a task list."""
from __future__ import annotations

from collections import Counter
from typing import Iterable, List

from taskledger.core.utils.time import try_parse_iso8601

from .models import Task, TaskComplexity, TaskPriority, TaskStatistics, TaskStatus


def _completion_seconds(task: Task) -> float | None:
    created = try_parse_iso8601(task.created_date)
    modified = try_parse_iso8601(task.last_modified)
    if created is None or modified is None:
        return None
    return max((modified - created).total_seconds(), 0.0)


def _average(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def compute_statistics(tasks: Iterable[Task]) -> TaskStatistics:
    """Summarise ``tasks``.

    Every status is counted, so the per-status counts always sum to
    ``total_tasks``. ``average_completion_time`` is in seconds and only covers
    completed tasks with parseable timestamps; ``test_coverage`` averages the
    tasks that report a coverage figure.
    """
    task_list = list(tasks)
    by_status = Counter(t.status for t in task_list)

    spans = [
        span
        for span in (_completion_seconds(t) for t in task_list if t.is_completed)
        if span is not None
    ]
    coverages = [
        float(t.test_status.coverage)
        for t in task_list
        if t.test_status is not None and t.test_status.coverage is not None
    ]

    priorities = Counter(t.priority for t in task_list)
    complexities = Counter(t.complexity for t in task_list)

    return TaskStatistics(
        total_tasks=len(task_list),
        completed_tasks=by_status[TaskStatus.COMPLETED],
        in_progress_tasks=by_status[TaskStatus.IN_PROGRESS],
        blocked_tasks=by_status[TaskStatus.BLOCKED],
        not_started_tasks=by_status[TaskStatus.NOT_STARTED],
        review_tasks=by_status[TaskStatus.REVIEW],
        deprecated_tasks=by_status[TaskStatus.DEPRECATED],
        average_completion_time=_average(spans),
        test_coverage=_average(coverages),
        priority_distribution={p: priorities[p] for p in TaskPriority},
        complexity_distribution={c: complexities[c] for c in TaskComplexity},
    )


__all__ = ["compute_statistics"]
