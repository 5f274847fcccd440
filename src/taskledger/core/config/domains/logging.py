"""Domain-specific configuration for logging."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Optional

from ..base import BaseDomainConfig


class LoggingConfig(BaseDomainConfig):
    """Provides access to ``logging.*`` settings."""

    def _config_section(self) -> str:
        return "logging"

    @cached_property
    def level(self) -> str:
        return str(self.section.get("level") or "WARNING").upper()

    @cached_property
    def file_path(self) -> Optional[Path]:
        """Absolute log file path, or None to log to stderr."""
        raw = self.section.get("file")
        if not raw:
            return None
        path = Path(str(raw)).expanduser()
        if path.is_absolute():
            return path
        return (self.repo_root / path).resolve()


__all__ = ["LoggingConfig"]
