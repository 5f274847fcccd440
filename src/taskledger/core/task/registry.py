"""Task registry: the authoritative in-memory snapshot of a task document.

A registry is constructed explicitly and owns exactly one snapshot. Loads
replace the snapshot as a whole after validation; status changes go through
the transition table, the dependency gate and cascade propagation. Tasks go
into the snapshot as copies and every projection returns copies, so editing a
returned task never changes the registry.

The registry does not serialize concurrent calls. Callers that share an
instance across threads must hold their own lock around every call.
"""
from __future__ import annotations

import copy
import logging
import time
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from taskledger.core.config.domains import ParserConfig, RegistryConfig
from taskledger.core.exceptions import (
    DependencyError,
    TaskIOError,
    TaskNotFoundError,
    TransitionError,
    ValidationError,
)
from taskledger.core.utils.io import PathLike
from taskledger.core.utils.time import utc_timestamp

from . import snapshot as snapshot_io
from .cascade import propagate
from .graph import build_adjacency, cycle_through, dependents_of
from .models import (
    DependencyInfo,
    ParseMetadata,
    ParseResult,
    Section,
    StatusUpdateResult,
    Task,
    TaskSearchFilters,
    TaskSearchResult,
    TaskStatistics,
    TaskStatus,
)
from .parser import (
    CHECKBOX_STATUSES,
    parse_document,
    read_document,
    update_status_char,
    write_document,
)
from .search import search as search_tasks_in
from .search import validate_filters as _validate_filters
from .statistics import compute_statistics
from .transitions import GATED_STATUSES, validate_transition
from .validation import validate_tasks

logger = logging.getLogger(__name__)

StatusLike = Union[TaskStatus, str]


@dataclass(frozen=True)
class _Snapshot:
    tasks: Dict[str, Task] = field(default_factory=dict)
    sections: List[Section] = field(default_factory=list)
    source: Optional[Path] = None
    source_kind: str = ""
    metadata: Optional[ParseMetadata] = None


def _detached(tasks: Iterable[Task]) -> List[Task]:
    """Copies handed to callers; edits to them never reach the snapshot."""
    return [copy.deepcopy(t) for t in tasks]


def _rebind_sections(sections: Sequence[Section], tasks: Mapping[str, Task]) -> List[Section]:
    """Return copies of ``sections`` pointing at the task objects in ``tasks``."""
    return [
        Section(
            heading=s.heading,
            level=s.level,
            tasks=[tasks[t.id] for t in s.tasks if t.id in tasks],
        )
        for s in sections
    ]


class TaskRegistry:
    """Holds one validated task snapshot and mediates every change to it.

    Args:
        repo_root: Project root used to resolve configuration
        config: Explicit configuration mapping (bypasses config files)
    """

    def __init__(
        self,
        repo_root: Optional[Path] = None,
        *,
        config: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.repo_root = repo_root
        self.parser_config = ParserConfig(repo_root=repo_root, config=config)
        self.registry_config = RegistryConfig(repo_root=repo_root, config=config)
        self._snapshot = _Snapshot()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def load(self, path: PathLike) -> ParseResult:
        """Parse and validate the document at ``path`` and make it the snapshot.

        Raises:
            TaskIOError: If the document cannot be read.
            ValidationError: If the document is structurally invalid. The
                previous snapshot is kept.
        """
        source = Path(path)
        text = read_document(source)
        result = parse_document(text, config=self.parser_config)
        self._accept(
            result.sections,
            result.tasks,
            source=source,
            source_kind="document",
            metadata=result.metadata,
        )
        logger.info("Loaded %d tasks from %s", len(result.tasks), source)
        return result

    def load_text(self, text: str, *, source: Optional[PathLike] = None) -> ParseResult:
        """Like :meth:`load` for text already in memory."""
        result = parse_document(text, config=self.parser_config)
        self._accept(
            result.sections,
            result.tasks,
            source=Path(source) if source is not None else None,
            source_kind="document" if source is not None else "",
            metadata=result.metadata,
        )
        logger.info("Loaded %d tasks from text", len(result.tasks))
        return result

    def load_tasks(
        self, tasks: Iterable[Task], sections: Optional[Sequence[Section]] = None
    ) -> None:
        """Validate ``tasks`` and make them the snapshot.

        Without ``sections`` all tasks go into one implicit section.
        """
        task_list = list(tasks)
        if sections is None:
            sections = [Section(heading="", level=1, tasks=list(task_list))] if task_list else []
        self._accept(sections, task_list, source=None, source_kind="", metadata=None)

    def load_snapshot(self, path: PathLike) -> None:
        """Load a JSON snapshot written by :meth:`export_snapshot`."""
        source = Path(path)
        sections, tasks = snapshot_io.read_snapshot(source)
        self._accept(sections, tasks, source=source, source_kind="snapshot", metadata=None)
        logger.info("Loaded %d tasks from snapshot %s", len(tasks), source)

    def reload(self) -> None:
        """Re-read the file the current snapshot was loaded from.

        Raises:
            TaskIOError: If the snapshot did not come from a file.
        """
        snap = self._snapshot
        if snap.source is None or not snap.source_kind:
            raise TaskIOError("No source file to reload from")
        if snap.source_kind == "snapshot":
            self.load_snapshot(snap.source)
        else:
            self.load(snap.source)

    def _accept(
        self,
        sections: Sequence[Section],
        tasks: Sequence[Task],
        *,
        source: Optional[Path],
        source_kind: str,
        metadata: Optional[ParseMetadata],
    ) -> None:
        result = validate_tasks(tasks, config=self.parser_config)
        for warning in result.warnings:
            logger.warning("Task validation warning: %s", warning)
        if not result.is_valid:
            raise ValidationError(
                "Task validation failed: " + "; ".join(result.errors),
                errors=result.errors,
                warnings=result.warnings,
                context={"source": str(source) if source else None},
            )
        by_id = {t.id: copy.deepcopy(t) for t in tasks}
        self._snapshot = _Snapshot(
            tasks=by_id,
            sections=_rebind_sections(sections, by_id),
            source=source,
            source_kind=source_kind,
            metadata=metadata,
        )

    def _commit_tasks(self, tasks: Dict[str, Task]) -> None:
        snap = self._snapshot
        self._snapshot = replace(
            snap, tasks=tasks, sections=_rebind_sections(snap.sections, tasks)
        )

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------
    @property
    def source_path(self) -> Optional[Path]:
        return self._snapshot.source

    @property
    def metadata(self) -> Optional[ParseMetadata]:
        return self._snapshot.metadata

    def __len__(self) -> int:
        return len(self._snapshot.tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._snapshot.tasks

    def get_all_tasks(self) -> List[Task]:
        return _detached(self._snapshot.tasks.values())

    def get_task_by_id(self, task_id: str) -> Optional[Task]:
        task = self._snapshot.tasks.get(task_id)
        return copy.deepcopy(task) if task is not None else None

    def get_tasks_by_status(self, status: StatusLike) -> List[Task]:
        wanted = TaskStatus.parse(status)
        return _detached(t for t in self._snapshot.tasks.values() if t.status is wanted)

    def get_tasks_by_section(self, heading: str) -> List[Task]:
        tasks: List[Task] = []
        for section in self._snapshot.sections:
            if section.heading == heading:
                tasks.extend(section.tasks)
        return _detached(tasks)

    def get_sections(self) -> List[Section]:
        return copy.deepcopy(self._snapshot.sections)

    def get_task_dependencies(self, task_id: str) -> List[str]:
        task = self._snapshot.tasks.get(task_id)
        return list(task.dependencies) if task else []

    def get_dependency_info(self, task_id: str) -> Optional[DependencyInfo]:
        """Return the dependency neighbourhood of ``task_id`` (None if unknown)."""
        task = self._snapshot.tasks.get(task_id)
        if task is None:
            return None
        tasks = self._snapshot.tasks
        blocking = self._incomplete_dependencies(task)
        return DependencyInfo(
            task_id=task_id,
            dependencies=list(task.dependencies),
            dependents=dependents_of(tasks.values(), task_id),
            circular_dependencies=cycle_through(build_adjacency(tasks.values()), task_id),
            is_blocked=bool(blocking),
            blocking_tasks=blocking,
        )

    def get_ready_tasks(self) -> List[Task]:
        """Not-started tasks whose dependencies are all completed."""
        return _detached(
            t
            for t in self._snapshot.tasks.values()
            if t.status is TaskStatus.NOT_STARTED and not self._incomplete_dependencies(t)
        )

    def _incomplete_dependencies(self, task: Task) -> List[str]:
        tasks = self._snapshot.tasks
        return [
            dep
            for dep in task.dependencies
            if dep not in tasks or not tasks[dep].is_completed
        ]

    # ------------------------------------------------------------------
    # Status changes
    # ------------------------------------------------------------------
    def update_status(
        self,
        task_id: str,
        new_status: StatusLike,
        persist_to: Optional[PathLike] = None,
    ) -> StatusUpdateResult:
        """Move ``task_id`` to ``new_status``.

        Checks run before anything is mutated: the task must exist, the
        transition must be a table edge, and moving into ``in_progress`` or
        ``completed`` requires every dependency to be completed. The change is
        then committed in memory, written to ``persist_to`` when given, and
        cascaded to dependent tasks.

        Persistence is best effort: a write failure is logged, reported as
        ``persisted=False`` and does not undo the in-memory change. A status
        a checkbox cannot express (``in_progress``, ``blocked``) is also
        reported as ``persisted=False``; only the open mark is written.

        Raises:
            TaskNotFoundError: Unknown task id.
            TransitionError: Unknown status or illegal edge.
            DependencyError: Incomplete dependencies; ``dependency_ids`` names them.
        """
        task = self._snapshot.tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(f"Task not found: {task_id}", task_id=task_id)

        try:
            target = TaskStatus.parse(new_status)
        except ValueError as exc:
            raise TransitionError(
                f"Invalid status transition for task {task_id}: {exc}",
                task_id=task_id,
                from_status=task.status.value,
                to_status=str(new_status),
            ) from exc

        previous = task.status
        validate_transition(task_id, previous, target)

        if target in GATED_STATUSES:
            incomplete = self._incomplete_dependencies(task)
            if incomplete:
                raise DependencyError(
                    f"Dependency validation failed for task {task_id}: "
                    f"incomplete dependencies: {', '.join(incomplete)}",
                    task_id=task_id,
                    dependency_ids=incomplete,
                )

        now = utc_timestamp(self.registry_config.full_config)
        tasks = dict(self._snapshot.tasks)
        tasks[task_id] = replace(task, status=target, last_modified=now)
        self._commit_tasks(tasks)
        logger.info("Task %s: %s -> %s", task_id, previous.value, target.value)

        persisted: Optional[bool] = None
        if persist_to is not None:
            persisted = self._persist_status(Path(persist_to), task_id, target)

        outcome = propagate(
            self._snapshot.tasks,
            task_id,
            target,
            timestamp=now,
            transitive=self.registry_config.cascade_transitive,
        )
        if outcome.effects:
            self._commit_tasks(outcome.tasks)
            for effect in outcome.effects:
                logger.info(
                    "Task %s: %s -> %s (cascade from %s)",
                    effect.task_id,
                    effect.previous_status.value,
                    effect.new_status.value,
                    effect.caused_by,
                )

        return StatusUpdateResult(
            task_id=task_id,
            previous_status=previous,
            new_status=target,
            updated_at=now,
            cascaded=list(outcome.effects),
            persisted=persisted,
        )

    def _persist_status(self, path: Path, task_id: str, status: TaskStatus) -> bool:
        try:
            text = read_document(path)
            new_text, found = update_status_char(text, task_id, status)
            if not found:
                logger.warning("Task %s has no checkbox line in %s; status not persisted", task_id, path)
                return False
            if new_text != text:
                write_document(path, new_text)
        except TaskIOError as exc:
            logger.warning("Failed to persist status of task %s: %s", task_id, exc)
            return False
        if status not in CHECKBOX_STATUSES:
            logger.warning(
                "Checklist %s only records open or completed; %s of task %s is kept in memory only",
                path,
                status.value,
                task_id,
            )
            return False
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def search_tasks(
        self, query: str = "", filters: Optional[TaskSearchFilters] = None
    ) -> List[Task]:
        """Tasks whose id, title or description contains ``query`` and that pass ``filters``."""
        return _detached(search_tasks_in(self._snapshot.tasks.values(), query, filters))

    def search(
        self, query: str = "", filters: Optional[TaskSearchFilters] = None
    ) -> TaskSearchResult:
        started = time.perf_counter()
        matches = self.search_tasks(query, filters)
        return TaskSearchResult(
            tasks=matches,
            total_count=len(self._snapshot.tasks),
            filtered_count=len(matches),
            search_time_ms=(time.perf_counter() - started) * 1000.0,
            filters=filters,
        )

    @staticmethod
    def validate_filters(filters: Optional[TaskSearchFilters]) -> List[str]:
        return _validate_filters(filters)

    def get_task_statistics(self) -> TaskStatistics:
        return compute_statistics(self._snapshot.tasks.values())

    # ------------------------------------------------------------------
    # Snapshot export
    # ------------------------------------------------------------------
    def export_snapshot(self, path: PathLike) -> None:
        """Write the current snapshot as JSON (see :mod:`.snapshot`)."""
        snap = self._snapshot
        snapshot_io.export_snapshot(
            path,
            snap.sections,
            list(snap.tasks.values()),
            source=str(snap.source) if snap.source else None,
            exported_at=utc_timestamp(self.registry_config.full_config),
        )
        logger.info("Exported %d tasks to %s", len(snap.tasks), path)


__all__ = ["TaskRegistry"]
