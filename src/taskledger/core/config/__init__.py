"""taskledger configuration system.

Usage:
    from taskledger.core.config import ConfigManager
    from taskledger.core.config.domains import ParserConfig

    # Direct config manager usage
    manager = ConfigManager(repo_root=Path("/path/to/project"))
    config = manager.load_config()

    # Domain-specific accessors (recommended)
    parser_cfg = ParserConfig(repo_root=Path("/path/to/project"))
    pattern = parser_cfg.id_pattern

    # Cached config access
    from taskledger.core.config import get_cached_config, clear_all_caches
    config = get_cached_config(repo_root)
"""
from __future__ import annotations

from .manager import ConfigManager
from .cache import get_cached_config, clear_all_caches, is_cached
from .base import BaseDomainConfig
from .domains import LoggingConfig, ParserConfig, RegistryConfig, TasksConfig

__all__ = [
    # Core
    "ConfigManager",
    "BaseDomainConfig",
    # Caching
    "get_cached_config",
    "clear_all_caches",
    "is_cached",
    # Domain configs
    "LoggingConfig",
    "ParserConfig",
    "RegistryConfig",
    "TasksConfig",
]
