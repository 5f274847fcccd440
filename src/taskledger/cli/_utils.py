"""Shared CLI utility functions."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Tuple

from taskledger.core.config.domains import TasksConfig
from taskledger.core.task import TaskRegistry
from taskledger.core.utils.paths import resolve_project_root


def get_repo_root(args: argparse.Namespace) -> Path:
    """Get repository root from args or auto-detect."""
    if getattr(args, "repo_root", None):
        return Path(args.repo_root).resolve()
    return resolve_project_root()


def get_document_path(args: argparse.Namespace) -> Path:
    """Resolve the task document from ``--file`` or configuration.

    A relative ``--file`` is taken relative to the current directory; the
    configured default is relative to the repository root.
    """
    if getattr(args, "file", None):
        return Path(args.file).expanduser().resolve()
    return TasksConfig(repo_root=get_repo_root(args)).document_path()


def is_snapshot_path(path: Path) -> bool:
    """JSON documents are registry snapshots rather than checklists."""
    return path.suffix.lower() == ".json"


def load_registry(args: argparse.Namespace) -> Tuple[TaskRegistry, Path]:
    """Build a registry for the selected repository and load its document.

    A ``.json`` document is read as a snapshot written by ``task export``.
    """
    repo_root = get_repo_root(args)
    path = get_document_path(args)
    registry = TaskRegistry(repo_root=repo_root)
    if is_snapshot_path(path):
        registry.load_snapshot(path)
    else:
        registry.load(path)
    return registry, path


def task_line(task) -> str:
    """One-line text rendering used by listing commands."""
    mark = "x" if task.is_completed else " "
    return f"  [{mark}] {task.id} {task.title} ({task.status_display_name})"


__all__ = [
    "get_repo_root",
    "get_document_path",
    "is_snapshot_path",
    "load_registry",
    "task_line",
]
