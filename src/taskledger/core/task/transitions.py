"""Status transition table.

Edges not listed are illegal. ``completed`` is terminal; ``review`` and
``deprecated`` are display-only and have no edges at all.
"""
from __future__ import annotations

from typing import Dict, FrozenSet

from taskledger.core.exceptions import TransitionError

from .models import TaskStatus

TRANSITIONS: Dict[TaskStatus, FrozenSet[TaskStatus]] = {
    TaskStatus.NOT_STARTED: frozenset({TaskStatus.IN_PROGRESS, TaskStatus.BLOCKED}),
    TaskStatus.IN_PROGRESS: frozenset(
        {TaskStatus.COMPLETED, TaskStatus.BLOCKED, TaskStatus.NOT_STARTED}
    ),
    TaskStatus.BLOCKED: frozenset({TaskStatus.NOT_STARTED, TaskStatus.IN_PROGRESS}),
    TaskStatus.COMPLETED: frozenset(),
}

# Moving into these states requires every dependency to be completed.
GATED_STATUSES: FrozenSet[TaskStatus] = frozenset(
    {TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED}
)


def allowed_transitions(status: TaskStatus) -> FrozenSet[TaskStatus]:
    return TRANSITIONS.get(status, frozenset())


def is_transition_allowed(current: TaskStatus, new: TaskStatus) -> bool:
    return new in allowed_transitions(current)


def validate_transition(task_id: str, current: TaskStatus, new: TaskStatus) -> None:
    """Raise :class:`TransitionError` unless ``current -> new`` is a table edge."""
    if is_transition_allowed(current, new):
        return
    allowed = ", ".join(sorted(s.value for s in allowed_transitions(current))) or "none"
    raise TransitionError(
        f"Invalid status transition for task {task_id}: "
        f"{current.value} -> {new.value} (allowed: {allowed})",
        task_id=task_id,
        from_status=current.value,
        to_status=new.value,
    )


__all__ = [
    "TRANSITIONS",
    "GATED_STATUSES",
    "allowed_transitions",
    "is_transition_allowed",
    "validate_transition",
]
