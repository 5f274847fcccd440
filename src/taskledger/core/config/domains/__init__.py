"""Domain-specific configuration accessors."""
from __future__ import annotations

from .logging import LoggingConfig
from .parser import ParserConfig
from .registry import RegistryConfig
from .tasks import TasksConfig

__all__ = [
    "LoggingConfig",
    "ParserConfig",
    "RegistryConfig",
    "TasksConfig",
]
