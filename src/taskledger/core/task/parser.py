"""Checklist document parser.

Converts markdown checklist text into sections and task records, writes the
reverse direction, and rewrites single checkbox characters in place.

Document format::

    # Section heading
    - [ ] 1.1 Task title
      - Free text appended to the description
      - Depends on: 1.0
      - Assignee: dev-team
      _Requirements: 2.1, 2.2_
    - [x] 1.2 Completed task

Parsing never raises: lines that cannot be interpreted are skipped.
"""
from __future__ import annotations

import logging
import re
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from taskledger.core.config.domains import ParserConfig
from taskledger.core.exceptions import TaskIOError
from taskledger.core.utils.io import PathLike, read_text, write_text
from taskledger.core.utils.time import utc_timestamp

from .lines import LineKind, classify_line, rewrite_mark
from .models import (
    ParseMetadata,
    ParseResult,
    Section,
    Task,
    TaskComplexity,
    TaskPriority,
    TaskStatus,
)

logger = logging.getLogger(__name__)

# Statuses a checkbox can express: "[ ]" and "[x]".
CHECKBOX_STATUSES = frozenset({TaskStatus.NOT_STARTED, TaskStatus.COMPLETED})

_METADATA_RE = re.compile(r"^(?P<key>[A-Za-z][A-Za-z ]*?)\s*:\s*(?P<value>.+)$")


def _split_csv(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


# Placeholder values written where a task has no dependencies.
_NO_DEPENDENCY = frozenset({"none", "-", "n/a"})


def _set_dependencies(task: Task, value: str) -> bool:
    task.dependencies = [d for d in _split_csv(value) if d.lower() not in _NO_DEPENDENCY]
    return True


def _set_assignee(task: Task, value: str) -> bool:
    task.assignee = value.strip()
    return True


def _set_tags(task: Task, value: str) -> bool:
    for tag in _split_csv(value):
        if tag not in task.tags:
            task.tags.append(tag)
    return True


def _set_duration(task: Task, value: str) -> bool:
    task.estimated_duration = value.strip()
    return True


def _set_priority(task: Task, value: str) -> bool:
    try:
        task.priority = TaskPriority.parse(value)
    except ValueError:
        return False
    return True


def _set_complexity(task: Task, value: str) -> bool:
    try:
        task.complexity = TaskComplexity.parse(value)
    except ValueError:
        return False
    return True


# Recognised "Key: value" description bullets. A handler returning False
# leaves the bullet in the description.
_METADATA_HANDLERS: Dict[str, Callable[[Task, str], bool]] = {
    "depends on": _set_dependencies,
    "dependencies": _set_dependencies,
    "assignee": _set_assignee,
    "tags": _set_tags,
    "estimated": _set_duration,
    "estimated duration": _set_duration,
    "duration": _set_duration,
    "priority": _set_priority,
    "complexity": _set_complexity,
}


def _apply_metadata_bullet(task: Task, text: str) -> bool:
    m = _METADATA_RE.match(text)
    if not m:
        return False
    handler = _METADATA_HANDLERS.get(m.group("key").strip().lower())
    if handler is None:
        return False
    return handler(task, m.group("value"))


def parse_requirements(body: str, *, blank_tag_when_empty: bool = False) -> List[str]:
    """Split a ``_Requirements: ..._`` body into tags.

    An empty body yields ``[]``, or ``[""]`` with ``blank_tag_when_empty``.
    """
    tags = _split_csv(body)
    if not tags and blank_tag_when_empty:
        return [""]
    return tags


class _DocumentReducer:
    """Folds a stream of classified lines into sections and tasks."""

    def __init__(self, *, timestamp: str, blank_requirement_tag: bool) -> None:
        self.timestamp = timestamp
        self.blank_requirement_tag = blank_requirement_tag
        self.sections: List[Section] = []
        self.tasks: List[Task] = []
        self._section: Optional[Section] = None
        self._task: Optional[Task] = None
        self._description: List[str] = []

    def _close_task(self) -> None:
        if self._task is not None:
            self._task.description = "\n".join(self._description)
        self._task = None
        self._description = []

    def _current_section(self) -> Section:
        if self._section is None:
            # Tasks before the first heading.
            self._section = Section(heading="", level=1)
            self.sections.append(self._section)
        return self._section

    def feed(self, raw: str) -> None:
        line = classify_line(raw)

        if line.kind is LineKind.HEADING:
            self._close_task()
            self._section = Section(heading=line.text, level=line.level)
            self.sections.append(self._section)
        elif line.kind is LineKind.CHECKBOX:
            self._close_task()
            task = Task(
                id=line.task_id,
                title=line.text,
                status=TaskStatus.COMPLETED if line.checked else TaskStatus.NOT_STARTED,
                created_date=self.timestamp,
                last_modified=self.timestamp,
            )
            self._current_section().tasks.append(task)
            self.tasks.append(task)
            self._task = task
        elif line.kind is LineKind.REQUIREMENTS:
            if self._task is not None:
                self._task.requirements = parse_requirements(
                    line.text, blank_tag_when_empty=self.blank_requirement_tag
                )
        elif line.kind is LineKind.DESCRIPTION:
            if self._task is not None and line.text:
                if not _apply_metadata_bullet(self._task, line.text):
                    self._description.append(line.text)

    def finish(self) -> Tuple[List[Section], List[Task]]:
        self._close_task()
        return self.sections, self.tasks


def _blank_tag_setting(config: Optional[ParserConfig]) -> bool:
    if config is None:
        config = ParserConfig()
    return config.empty_requirements_as_blank_tag


def parse_document(text: str, *, config: Optional[ParserConfig] = None) -> ParseResult:
    """Parse checklist ``text`` into sections, tasks and metadata.

    Args:
        text: Document content
        config: Parser settings (defaults to the project configuration)
    """
    started = time.perf_counter()
    reducer = _DocumentReducer(
        timestamp=utc_timestamp(config.full_config if config is not None else None),
        blank_requirement_tag=_blank_tag_setting(config),
    )
    for raw in (text or "").splitlines():
        reducer.feed(raw)
    sections, tasks = reducer.finish()

    metadata = ParseMetadata(
        total_tasks=len(tasks),
        completed_tasks=sum(1 for t in tasks if t.status is TaskStatus.COMPLETED),
        in_progress_tasks=sum(1 for t in tasks if t.status is TaskStatus.IN_PROGRESS),
        blocked_tasks=sum(1 for t in tasks if t.status is TaskStatus.BLOCKED),
        parse_time_ms=(time.perf_counter() - started) * 1000.0,
        file_size=len((text or "").encode("utf-8")),
    )
    logger.debug(
        "Parsed %d tasks in %d sections (%.2f ms)",
        metadata.total_tasks,
        len(sections),
        metadata.parse_time_ms,
    )
    return ParseResult(sections=sections, tasks=tasks, metadata=metadata)


def _task_lines(task: Task) -> List[str]:
    mark = "x" if task.status is TaskStatus.COMPLETED else " "
    head = " ".join(part for part in (task.id, task.title) if part)
    lines = [f"- [{mark}] {head}".rstrip()]
    for desc in task.description.splitlines():
        if desc.strip():
            lines.append(f"  - {desc.strip()}")
    if task.dependencies:
        lines.append(f"  - Depends on: {', '.join(task.dependencies)}")
    if task.assignee:
        lines.append(f"  - Assignee: {task.assignee}")
    if task.priority is not TaskPriority.MEDIUM:
        lines.append(f"  - Priority: {task.priority.value}")
    if task.complexity is not TaskComplexity.MEDIUM:
        lines.append(f"  - Complexity: {task.complexity.value}")
    if task.tags:
        lines.append(f"  - Tags: {', '.join(task.tags)}")
    if task.estimated_duration:
        lines.append(f"  - Estimated: {task.estimated_duration}")
    if any(task.requirements):
        lines.append(f"  _Requirements: {', '.join(r for r in task.requirements if r)}_")
    return lines


def serialize_sections(sections: List[Section]) -> str:
    """Render sections back to checklist text (inverse of :func:`parse_document`)."""
    blocks: List[str] = []
    for section in sections:
        lines: List[str] = []
        if section.heading:
            level = min(max(int(section.level), 1), 6)
            lines.append(f"{'#' * level} {section.heading}")
            lines.append("")
        for task in section.tasks:
            lines.extend(_task_lines(task))
        blocks.append("\n".join(lines).rstrip("\n"))
    text = "\n\n".join(b for b in blocks if b)
    return f"{text}\n" if text else ""


def update_status_char(text: str, task_id: str, new_status: TaskStatus) -> Tuple[str, bool]:
    """Rewrite the checkbox character of the task ``task_id``.

    Only the first checkbox line whose parsed id equals ``task_id`` is touched;
    every other byte of ``text`` is preserved.

    Returns:
        ``(new_text, found)``; ``found`` is False when no checkbox line has that id.
    """
    checked = TaskStatus.parse(new_status) is TaskStatus.COMPLETED
    lines = (text or "").splitlines(keepends=True)
    for idx, raw in enumerate(lines):
        line = classify_line(raw)
        if line.kind is not LineKind.CHECKBOX or line.task_id != task_id:
            continue
        assert line.mark_span is not None
        start, end = line.mark_span
        body = raw.rstrip("\r\n")
        ending = raw[len(body):]
        lines[idx] = body[:start] + rewrite_mark(body[start:end], checked) + body[end:] + ending
        return "".join(lines), True
    return text, False


def read_document(path: PathLike) -> str:
    """Read a task document.

    Raises:
        TaskIOError: If the file is missing, unreadable or not valid UTF-8.
    """
    try:
        return read_text(path)
    except (OSError, UnicodeDecodeError) as exc:
        raise TaskIOError(
            f"Failed to read task document {path}: {exc}", path=path, cause=exc
        ) from exc


def write_document(path: PathLike, text: str) -> None:
    """Atomically write a task document.

    Raises:
        TaskIOError: If the file cannot be written.
    """
    try:
        write_text(path, text)
    except OSError as exc:
        raise TaskIOError(
            f"Failed to write task document {path}: {exc}", path=path, cause=exc
        ) from exc


def parse_file(path: PathLike, *, config: Optional[ParserConfig] = None) -> ParseResult:
    """Read and parse a task document."""
    return parse_document(read_document(Path(path)), config=config)


__all__ = [
    "CHECKBOX_STATUSES",
    "parse_document",
    "parse_file",
    "parse_requirements",
    "serialize_sections",
    "update_status_char",
    "read_document",
    "write_document",
]
