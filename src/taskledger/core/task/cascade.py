"""Cascade propagation of status changes to dependent tasks.

``propagate`` is pure: it takes a mapping of tasks, returns a new mapping in
which only forced changes are replaced, and never mutates its input.

Rules, for every task ``d`` that lists the changed task as a dependency:

- changed task became ``blocked`` and ``d`` is ``not_started`` or
  ``in_progress``: ``d`` becomes ``blocked``;
- changed task became ``completed`` and ``d`` is ``blocked``: if every
  dependency of ``d`` is now completed, ``d`` returns to ``not_started``.

By default only direct dependents are considered. With ``transitive=True``
each forced change is itself propagated, breadth first.
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, replace
from typing import Deque, Dict, List, Mapping, Optional, Tuple

from .models import CascadeEffect, Task, TaskStatus

logger = logging.getLogger(__name__)

_BLOCKABLE = frozenset({TaskStatus.NOT_STARTED, TaskStatus.IN_PROGRESS})


@dataclass(frozen=True)
class CascadeOutcome:
    tasks: Dict[str, Task]
    effects: List[CascadeEffect]


def _forced_status(
    dependent: Task, new_status: TaskStatus, tasks: Mapping[str, Task]
) -> Optional[TaskStatus]:
    if new_status is TaskStatus.BLOCKED and dependent.status in _BLOCKABLE:
        return TaskStatus.BLOCKED
    if new_status is TaskStatus.COMPLETED and dependent.status is TaskStatus.BLOCKED:
        deps = [tasks.get(dep_id) for dep_id in dependent.dependencies]
        if all(dep is not None and dep.is_completed for dep in deps):
            return TaskStatus.NOT_STARTED
    return None


def propagate(
    tasks: Mapping[str, Task],
    changed_id: str,
    new_status: TaskStatus,
    *,
    timestamp: str,
    transitive: bool = False,
) -> CascadeOutcome:
    """Apply cascade rules for ``changed_id`` having moved to ``new_status``.

    ``tasks`` must already reflect the change to ``changed_id`` itself.
    Forced changes get ``last_modified = timestamp``.
    """
    current: Dict[str, Task] = dict(tasks)
    effects: List[CascadeEffect] = []
    queue: Deque[Tuple[str, TaskStatus]] = deque([(changed_id, TaskStatus.parse(new_status))])

    while queue:
        source_id, source_status = queue.popleft()
        for task_id, dependent in list(current.items()):
            if source_id not in dependent.dependencies:
                continue
            forced = _forced_status(dependent, source_status, current)
            if forced is None:
                continue
            current[task_id] = replace(dependent, status=forced, last_modified=timestamp)
            effects.append(
                CascadeEffect(
                    task_id=task_id,
                    previous_status=dependent.status,
                    new_status=forced,
                    caused_by=source_id,
                )
            )
            logger.debug(
                "Cascade: %s %s -> %s (caused by %s)",
                task_id,
                dependent.status.value,
                forced.value,
                source_id,
            )
            if transitive:
                queue.append((task_id, forced))

    return CascadeOutcome(tasks=current, effects=effects)


__all__ = ["CascadeOutcome", "propagate"]
