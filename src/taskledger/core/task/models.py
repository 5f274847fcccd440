"""Task domain models.

This module defines the Task and Section dataclasses together with the
closed enumerations and result records shared by the parser and the
registry. Timestamps are ISO 8601 strings, as produced by
``taskledger.core.utils.time``.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from taskledger.core.utils.time import utc_timestamp

_E = TypeVar("_E", bound="_ParseableEnum")


class _ParseableEnum(str, Enum):
    """String enum that accepts loosely formatted names on input."""

    @classmethod
    def parse(cls: Type[_E], value: Any) -> _E:
        """Resolve ``value`` leniently.

        Accepts member values (``in_progress``), member names (``IN_PROGRESS``),
        CamelCase (``InProgress``) and spaced/dashed forms (``in progress``).

        Raises:
            ValueError: If no member matches.
        """
        if isinstance(value, cls):
            return value
        raw = str(value or "").strip()
        # CamelCase -> snake_case before lowering.
        snake = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", raw)
        key = re.sub(r"[\s\-]+", "_", snake).lower()
        for member in cls:
            if member.value == key:
                return member
        allowed = ", ".join(m.value for m in cls)
        raise ValueError(f"Invalid {cls.__name__} {value!r}. Allowed: {allowed}")

    def __str__(self) -> str:
        return self.value


class TaskStatus(_ParseableEnum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    COMPLETED = "completed"
    # Display-only states; they have no edges in the transition table.
    REVIEW = "review"
    DEPRECATED = "deprecated"


class TaskComplexity(_ParseableEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"


class TaskPriority(_ParseableEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


STATUS_DISPLAY_NAMES: Dict[TaskStatus, str] = {
    TaskStatus.NOT_STARTED: "not started",
    TaskStatus.IN_PROGRESS: "in progress",
    TaskStatus.BLOCKED: "blocked",
    TaskStatus.COMPLETED: "completed",
    TaskStatus.REVIEW: "review",
    TaskStatus.DEPRECATED: "deprecated",
}


def _pick(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present, non-None value among ``keys``."""
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return default


@dataclass
class TestStatus:
    """Test results attached to a task. Opaque to the workflow rules."""

    __test__ = False  # not a pytest test class

    total_tests: int = 0
    passed_tests: int = 0
    failed_tests: int = 0
    coverage: Optional[float] = None
    test_suite: Optional[str] = None
    last_run_date: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "totalTests": self.total_tests,
            "passedTests": self.passed_tests,
            "failedTests": self.failed_tests,
        }
        if self.coverage is not None:
            data["coverage"] = self.coverage
        if self.test_suite:
            data["testSuite"] = self.test_suite
        if self.last_run_date:
            data["lastRunDate"] = self.last_run_date
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TestStatus":
        coverage = _pick(data, "coverage")
        return cls(
            total_tests=int(_pick(data, "totalTests", "total_tests", default=0)),
            passed_tests=int(_pick(data, "passedTests", "passed_tests", default=0)),
            failed_tests=int(_pick(data, "failedTests", "failed_tests", default=0)),
            coverage=float(coverage) if coverage is not None else None,
            test_suite=_pick(data, "testSuite", "test_suite"),
            last_run_date=_pick(data, "lastRunDate", "last_run_date"),
        )


@dataclass
class Task:
    """A single work item.

    Attributes:
        id: Opaque identifier, conventionally dotted-numeric ("1.2.3")
        title: Task title
        description: Text accumulated from indented bullet lines
        status: Current workflow status
        complexity: Estimated complexity (default: medium)
        priority: Priority (default: medium)
        dependencies: Ids of tasks that must be completed first, in order
        requirements: Free-form requirement tags, in order
        created_date: ISO timestamp of creation (load time for parsed tasks)
        last_modified: ISO timestamp of the last accepted status change
        assignee: Optional owner
        tags: Tag set, kept as an ordered list without duplicates
        estimated_duration: Free-form estimate such as "15-30 min"
        test_status: Optional test results
    """

    id: str
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.NOT_STARTED
    complexity: TaskComplexity = TaskComplexity.MEDIUM
    priority: TaskPriority = TaskPriority.MEDIUM
    dependencies: List[str] = field(default_factory=list)
    requirements: List[str] = field(default_factory=list)
    created_date: str = field(default_factory=utc_timestamp)
    last_modified: str = field(default_factory=utc_timestamp)
    assignee: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    estimated_duration: Optional[str] = None
    test_status: Optional[TestStatus] = None

    @property
    def is_completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED

    @property
    def status_display_name(self) -> str:
        return STATUS_DISPLAY_NAMES[self.status]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-compatible dictionary (camelCase keys)."""
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "complexity": self.complexity.value,
            "priority": self.priority.value,
            "dependencies": list(self.dependencies),
            "requirements": list(self.requirements),
            "createdDate": self.created_date,
            "lastModified": self.last_modified,
        }
        if self.assignee:
            data["assignee"] = self.assignee
        if self.tags:
            data["tags"] = list(self.tags)
        if self.estimated_duration:
            data["estimatedDuration"] = self.estimated_duration
        if self.test_status is not None:
            data["testStatus"] = self.test_status.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """Create a Task from its dictionary form.

        Supports both camelCase and snake_case keys.

        Raises:
            ValueError: If an enum field holds an unknown value.
        """
        now = utc_timestamp()
        test_data = _pick(data, "testStatus", "test_status")
        return cls(
            id=str(data.get("id") or ""),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            status=TaskStatus.parse(data.get("status") or TaskStatus.NOT_STARTED),
            complexity=TaskComplexity.parse(data.get("complexity") or TaskComplexity.MEDIUM),
            priority=TaskPriority.parse(data.get("priority") or TaskPriority.MEDIUM),
            dependencies=[str(d) for d in data.get("dependencies") or []],
            requirements=[str(r) for r in data.get("requirements") or []],
            created_date=_pick(data, "createdDate", "created_date", default=now),
            last_modified=_pick(data, "lastModified", "last_modified", default=now),
            assignee=data.get("assignee"),
            tags=_unique([str(t) for t in data.get("tags") or []]),
            estimated_duration=_pick(data, "estimatedDuration", "estimated_duration"),
            test_status=TestStatus.from_dict(test_data) if test_data else None,
        )


def _unique(items: Sequence[str]) -> List[str]:
    seen: set[str] = set()
    out: List[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


@dataclass
class Section:
    """A heading-delimited group of tasks in document order.

    The implicit section holding tasks that precede any heading has an empty
    heading.
    """

    heading: str
    level: int = 1
    tasks: List[Task] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "heading": self.heading,
            "level": self.level,
            "taskIds": [t.id for t in self.tasks],
        }


@dataclass(frozen=True)
class ParseMetadata:
    total_tasks: int
    completed_tasks: int
    in_progress_tasks: int
    blocked_tasks: int
    parse_time_ms: float
    file_size: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalTasks": self.total_tasks,
            "completedTasks": self.completed_tasks,
            "inProgressTasks": self.in_progress_tasks,
            "blockedTasks": self.blocked_tasks,
            "parseTime": self.parse_time_ms,
            "fileSize": self.file_size,
        }


@dataclass(frozen=True)
class ParseResult:
    sections: List[Section]
    tasks: List[Task]
    metadata: ParseMetadata


@dataclass(frozen=True)
class ValidationResult:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class CascadeEffect:
    """A status change forced on a dependent task."""

    task_id: str
    previous_status: TaskStatus
    new_status: TaskStatus
    caused_by: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "taskId": self.task_id,
            "previousStatus": self.previous_status.value,
            "newStatus": self.new_status.value,
            "causedBy": self.caused_by,
        }


@dataclass(frozen=True)
class StatusUpdateResult:
    task_id: str
    previous_status: TaskStatus
    new_status: TaskStatus
    updated_at: str
    cascaded: List[CascadeEffect] = field(default_factory=list)
    # None when no persistence target was given.
    persisted: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "taskId": self.task_id,
            "previousStatus": self.previous_status.value,
            "newStatus": self.new_status.value,
            "updatedAt": self.updated_at,
            "cascaded": [c.to_dict() for c in self.cascaded],
            "persisted": self.persisted,
        }


@dataclass
class TaskSearchFilters:
    """Optional filters ANDed on top of a text query. Empty fields are ignored."""

    status: List[TaskStatus] = field(default_factory=list)
    complexity: List[TaskComplexity] = field(default_factory=list)
    priority: List[TaskPriority] = field(default_factory=list)
    assignee: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    requirements: List[str] = field(default_factory=list)
    created_after: Optional[datetime] = None
    created_before: Optional[datetime] = None
    modified_after: Optional[datetime] = None
    modified_before: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.status:
            data["status"] = [s.value for s in self.status]
        if self.complexity:
            data["complexity"] = [c.value for c in self.complexity]
        if self.priority:
            data["priority"] = [p.value for p in self.priority]
        if self.assignee:
            data["assignee"] = self.assignee
        if self.tags:
            data["tags"] = list(self.tags)
        if self.requirements:
            data["requirements"] = list(self.requirements)
        for key in ("created_after", "created_before", "modified_after", "modified_before"):
            value = getattr(self, key)
            if value is not None:
                camel = re.sub(r"_(\w)", lambda m: m.group(1).upper(), key)
                data[camel] = value.isoformat()
        return data


@dataclass(frozen=True)
class TaskSearchResult:
    tasks: List[Task]
    total_count: int
    filtered_count: int
    search_time_ms: float
    filters: Optional[TaskSearchFilters] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tasks": [t.to_dict() for t in self.tasks],
            "totalCount": self.total_count,
            "filteredCount": self.filtered_count,
            "searchTime": self.search_time_ms,
            "filters": self.filters.to_dict() if self.filters else {},
        }


@dataclass(frozen=True)
class TaskStatistics:
    total_tasks: int
    completed_tasks: int
    in_progress_tasks: int
    blocked_tasks: int
    not_started_tasks: int
    review_tasks: int
    deprecated_tasks: int
    # Seconds between createdDate and lastModified, averaged over completed tasks.
    average_completion_time: float
    test_coverage: float
    priority_distribution: Dict[TaskPriority, int]
    complexity_distribution: Dict[TaskComplexity, int]

    @property
    def status_counts(self) -> Dict[TaskStatus, int]:
        return {
            TaskStatus.NOT_STARTED: self.not_started_tasks,
            TaskStatus.IN_PROGRESS: self.in_progress_tasks,
            TaskStatus.BLOCKED: self.blocked_tasks,
            TaskStatus.COMPLETED: self.completed_tasks,
            TaskStatus.REVIEW: self.review_tasks,
            TaskStatus.DEPRECATED: self.deprecated_tasks,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalTasks": self.total_tasks,
            "completedTasks": self.completed_tasks,
            "inProgressTasks": self.in_progress_tasks,
            "blockedTasks": self.blocked_tasks,
            "notStartedTasks": self.not_started_tasks,
            "reviewTasks": self.review_tasks,
            "deprecatedTasks": self.deprecated_tasks,
            "averageCompletionTime": self.average_completion_time,
            "testCoverage": self.test_coverage,
            "priorityDistribution": {k.value: v for k, v in self.priority_distribution.items()},
            "complexityDistribution": {k.value: v for k, v in self.complexity_distribution.items()},
        }


@dataclass(frozen=True)
class DependencyInfo:
    """Dependency neighbourhood of one task."""

    task_id: str
    dependencies: List[str]
    dependents: List[str]
    circular_dependencies: List[str]
    is_blocked: bool
    blocking_tasks: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "taskId": self.task_id,
            "dependencies": list(self.dependencies),
            "dependents": list(self.dependents),
            "circularDependencies": list(self.circular_dependencies),
            "isBlocked": self.is_blocked,
            "blockingTasks": list(self.blocking_tasks),
        }


__all__ = [
    "TaskStatus",
    "TaskComplexity",
    "TaskPriority",
    "STATUS_DISPLAY_NAMES",
    "TestStatus",
    "Task",
    "Section",
    "ParseMetadata",
    "ParseResult",
    "ValidationResult",
    "CascadeEffect",
    "StatusUpdateResult",
    "TaskSearchFilters",
    "TaskSearchResult",
    "TaskStatistics",
    "DependencyInfo",
]
