"""Structural validation of a task set.

Errors make a task set unacceptable as a registry snapshot; warnings are
informational only.
"""
from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Optional, Pattern

from taskledger.core.config.domains import ParserConfig

from .graph import build_adjacency, find_cycles, format_cycle, missing_dependencies
from .models import Task, TaskStatus, ValidationResult


def validate_tasks(
    tasks: Iterable[Task],
    *,
    id_pattern: Optional[Pattern[str]] = None,
    config: Optional[ParserConfig] = None,
) -> ValidationResult:
    """Check ids, titles, dependency references and acyclicity.

    Errors:
        - a task without an id or without a title
        - an id used by more than one task
        - one error per dependency id that is not in the set
        - one error per distinct dependency cycle, naming the full path

    Warnings:
        - a task without a description
        - a completed task without test status
        - an id that does not match ``id_pattern`` (conventional dotted numbers)
    """
    task_list = list(tasks)
    if id_pattern is None:
        id_pattern = (config or ParserConfig()).id_pattern

    errors: List[str] = []
    warnings: List[str] = []

    for index, task in enumerate(task_list, start=1):
        label = task.id or f"#{index}"
        if not task.id:
            errors.append(f"Task {label} is missing an id")
        if not task.title:
            errors.append(f"Task {label} is missing a title")
        if not task.description:
            warnings.append(f"Task {label} has no description")
        if task.status is TaskStatus.COMPLETED and task.test_status is None:
            warnings.append(f"Task {label} is completed but has no test status")
        if task.id and not id_pattern.match(task.id):
            warnings.append(f"Task id '{task.id}' does not follow the dotted numeric format")

    counts = Counter(t.id for t in task_list if t.id)
    for task_id, count in counts.items():
        if count > 1:
            errors.append(f"Duplicate task id '{task_id}' ({count} occurrences)")

    adjacency = build_adjacency(t for t in task_list if t.id)
    for task_id, dep in missing_dependencies(adjacency):
        errors.append(f"Task {task_id} depends on non-existent task '{dep}'")
    for cycle in find_cycles(adjacency):
        errors.append(f"Circular dependency detected: {format_cycle(cycle)}")

    return ValidationResult(errors=errors, warnings=warnings)


__all__ = ["validate_tasks"]
