"""Domain-specific configuration for task documents."""
from __future__ import annotations

from pathlib import Path

from ..base import BaseDomainConfig


class TasksConfig(BaseDomainConfig):
    """Provides access to ``tasks.*`` settings."""

    def _config_section(self) -> str:
        return "tasks"

    def document_path(self) -> Path:
        """Absolute path of the default task document."""
        rel = self.section.get("document")
        if not rel:
            raise ValueError("Missing configuration: tasks.document")
        path = Path(str(rel)).expanduser()
        if path.is_absolute():
            return path
        return (self.repo_root / path).resolve()


__all__ = ["TasksConfig"]
