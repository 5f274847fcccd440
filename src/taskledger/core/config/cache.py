"""Centralized configuration caching.

Provides a single source of truth for loaded configuration across all domain
configs. Cache keys include a fingerprint of ``TASKLEDGER_*`` environment
variables and of the YAML files in the user and project config directories,
so edits made by long-running processes or tests are picked up.
"""
from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any, Dict, Optional

_config_cache: Dict[str, Dict[str, Any]] = {}


def _normalize_repo_root(repo_root: Optional[Path]) -> Path:
    """Resolve repo_root to a canonical absolute Path."""
    if repo_root is None:
        from taskledger.core.utils.paths import resolve_project_root

        return resolve_project_root()

    return Path(repo_root).expanduser().resolve()


def _fingerprint_dir(d: Path) -> list[tuple[str, int, int]]:
    from taskledger.core.utils.io import iter_yaml_files

    files: list[tuple[str, int, int]] = []
    for p in iter_yaml_files(d):
        try:
            st = p.stat()
            files.append((p.name, int(st.st_mtime_ns), int(st.st_size)))
        except OSError:
            files.append((p.name, 0, 0))
    return files


def _cache_key(repo_root: Path, validate: bool) -> str:
    from taskledger.core.utils.paths import get_project_config_dir, get_user_config_dir

    env_items = sorted(
        (k, os.environ.get(k, ""))
        for k in os.environ.keys()
        if k.startswith("TASKLEDGER_")
    )
    env_fp = hashlib.sha256(repr(env_items).encode("utf-8")).hexdigest()[:12]

    cfg_files = {
        "project": _fingerprint_dir(get_project_config_dir(repo_root) / "config"),
        "user": _fingerprint_dir(get_user_config_dir() / "config"),
    }
    cfg_fp = hashlib.sha256(repr(cfg_files).encode("utf-8")).hexdigest()[:12]

    mode = "validated" if validate else "raw"
    return f"{repo_root}:{mode}:env={env_fp}:cfg={cfg_fp}"


def get_cached_config(
    repo_root: Optional[Path] = None,
    validate: bool = False,
) -> Dict[str, Any]:
    """Get configuration with caching.

    Returns the same config dict instance for the same repo_root as long as
    environment and config files are unchanged.

    Args:
        repo_root: Repository root path. Uses auto-detection if None.
        validate: Whether to validate against schema.
    """
    normalized_root = _normalize_repo_root(repo_root)
    key = _cache_key(normalized_root, validate)

    if key not in _config_cache:
        from .manager import ConfigManager

        _config_cache[key] = ConfigManager(normalized_root).load_config(validate=validate)
    return _config_cache[key]


def is_cached(repo_root: Optional[Path] = None, validate: bool = False) -> bool:
    """Return True if config for ``repo_root`` is already cached."""
    normalized_root = _normalize_repo_root(repo_root)
    return _cache_key(normalized_root, validate) in _config_cache


def clear_all_caches() -> None:
    """Drop every cached configuration (useful in tests)."""
    _config_cache.clear()


__all__ = ["get_cached_config", "is_cached", "clear_all_caches"]
