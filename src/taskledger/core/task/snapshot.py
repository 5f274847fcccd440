"""JSON export/import of a registry snapshot.

File layout::

    {
      "version": 1,
      "source": "/path/to/tasks.md",
      "exportedAt": "2026-01-01T00:00:00Z",
      "sections": [{"heading": "...", "level": 1, "taskIds": ["1.1"]}],
      "tasks": [{...Task.to_dict()...}]
    }
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence, Tuple

from taskledger.core.exceptions import TaskIOError, ValidationError
from taskledger.core.utils.io import PathLike, read_json, write_json_atomic
from taskledger.core.utils.time import utc_timestamp

from .models import Section, Task

SNAPSHOT_VERSION = 1


def snapshot_to_dict(
    sections: Sequence[Section],
    tasks: Sequence[Task],
    *,
    source: Optional[str] = None,
    exported_at: Optional[str] = None,
) -> Dict[str, Any]:
    return {
        "version": SNAPSHOT_VERSION,
        "source": source,
        "exportedAt": exported_at or utc_timestamp(),
        "sections": [s.to_dict() for s in sections],
        "tasks": [t.to_dict() for t in tasks],
    }


def snapshot_from_dict(data: Any) -> Tuple[List[Section], List[Task]]:
    """Rebuild sections and tasks from :func:`snapshot_to_dict` output.

    Sections reference tasks by id; ids without a matching task are dropped.

    Raises:
        ValidationError: If the payload does not have the snapshot shape.
    """
    if not isinstance(data, dict) or not isinstance(data.get("tasks"), list):
        raise ValidationError(
            "Snapshot must be an object with a 'tasks' list",
            errors=["Snapshot must be an object with a 'tasks' list"],
        )
    version = data.get("version", SNAPSHOT_VERSION)
    if version != SNAPSHOT_VERSION:
        msg = f"Unsupported snapshot version: {version}"
        raise ValidationError(msg, errors=[msg])

    try:
        tasks = [Task.from_dict(item) for item in data["tasks"]]
    except (TypeError, ValueError, AttributeError) as exc:
        msg = f"Invalid task entry in snapshot: {exc}"
        raise ValidationError(msg, errors=[msg]) from exc

    by_id = {t.id: t for t in tasks}
    sections: List[Section] = []
    try:
        for raw in data.get("sections") or []:
            if not isinstance(raw, dict):
                continue
            ids = raw.get("taskIds") or raw.get("task_ids") or []
            sections.append(
                Section(
                    heading=str(raw.get("heading") or ""),
                    level=int(raw.get("level") or 1),
                    tasks=[by_id[i] for i in ids if i in by_id],
                )
            )
    except (TypeError, ValueError) as exc:
        msg = f"Invalid section entry in snapshot: {exc}"
        raise ValidationError(msg, errors=[msg]) from exc
    return sections, tasks


def export_snapshot(
    path: PathLike,
    sections: Sequence[Section],
    tasks: Sequence[Task],
    *,
    source: Optional[str] = None,
    exported_at: Optional[str] = None,
) -> None:
    """Atomically write a snapshot file.

    Raises:
        TaskIOError: If the file cannot be written.
    """
    try:
        write_json_atomic(
            path, snapshot_to_dict(sections, tasks, source=source, exported_at=exported_at)
        )
    except OSError as exc:
        raise TaskIOError(
            f"Failed to write snapshot {path}: {exc}", path=path, cause=exc
        ) from exc


def read_snapshot(path: PathLike) -> Tuple[List[Section], List[Task]]:
    """Read a snapshot file.

    Raises:
        TaskIOError: If the file is missing, unreadable or not JSON.
        ValidationError: If the JSON does not have the snapshot shape.
    """
    try:
        data = read_json(path)
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise TaskIOError(
            f"Failed to read snapshot {path}: {exc}", path=path, cause=exc
        ) from exc
    return snapshot_from_dict(data)


__all__ = [
    "SNAPSHOT_VERSION",
    "snapshot_to_dict",
    "snapshot_from_dict",
    "export_snapshot",
    "read_snapshot",
]
