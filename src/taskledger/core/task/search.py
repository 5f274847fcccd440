"""Text search and filtering over task lists."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from taskledger.core.utils.time import try_parse_iso8601

from .models import Task, TaskSearchFilters


def matches_query(task: Task, query: str) -> bool:
    """Case-insensitive substring match against id, title or description."""
    needle = (query or "").strip().lower()
    if not needle:
        return True
    return any(needle in field.lower() for field in (task.id, task.title, task.description))


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def _in_range(
    stamp: str, after: Optional[datetime], before: Optional[datetime]
) -> bool:
    if after is None and before is None:
        return True
    parsed = try_parse_iso8601(stamp)
    if parsed is None:
        return False
    if after is not None and parsed < _aware(after):
        return False
    if before is not None and parsed > _aware(before):
        return False
    return True


def matches_filters(task: Task, filters: Optional[TaskSearchFilters]) -> bool:
    """Return True when ``task`` satisfies every populated filter."""
    if filters is None:
        return True
    if filters.status and task.status not in filters.status:
        return False
    if filters.complexity and task.complexity not in filters.complexity:
        return False
    if filters.priority and task.priority not in filters.priority:
        return False
    if filters.assignee and task.assignee != filters.assignee:
        return False
    if filters.tags and not set(filters.tags) & set(task.tags):
        return False
    if filters.requirements and not set(filters.requirements) & set(task.requirements):
        return False
    if not _in_range(task.created_date, filters.created_after, filters.created_before):
        return False
    if not _in_range(task.last_modified, filters.modified_after, filters.modified_before):
        return False
    return True


def search(
    tasks: Iterable[Task], query: str = "", filters: Optional[TaskSearchFilters] = None
) -> List[Task]:
    """Return tasks matching ``query`` and ``filters``, in their original order."""
    return [t for t in tasks if matches_query(t, query) and matches_filters(t, filters)]


def validate_filters(filters: Optional[TaskSearchFilters]) -> List[str]:
    """Return human readable problems with ``filters`` (empty when usable)."""
    if filters is None:
        return []
    errors: List[str] = []
    for name in ("created", "modified"):
        after = getattr(filters, f"{name}_after")
        before = getattr(filters, f"{name}_before")
        if after is not None and before is not None and _aware(after) > _aware(before):
            errors.append(f"{name}_after must not be later than {name}_before")
    if filters.assignee is not None and not filters.assignee.strip():
        errors.append("assignee must not be blank")
    return errors


__all__ = ["matches_query", "matches_filters", "search", "validate_filters"]
