"""Project root and config directory resolution."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

PROJECT_CONFIG_DIRNAME = ".taskledger"

# Resolution markers, highest priority first.
_ROOT_MARKERS = (PROJECT_CONFIG_DIRNAME, ".git")


def resolve_project_root(start: Optional[Path] = None) -> Path:
    """Resolve the project root.

    Resolution priority:
    1. TASKLEDGER_PROJECT_ROOT environment variable
    2. Nearest ancestor of ``start`` (default: cwd) containing ``.taskledger/``
    3. Nearest ancestor containing ``.git``
    4. ``start`` itself
    """
    env_root = os.environ.get("TASKLEDGER_PROJECT_ROOT")
    if env_root:
        return Path(env_root).expanduser().resolve()

    origin = Path(start or Path.cwd()).expanduser().resolve()
    for marker in _ROOT_MARKERS:
        for candidate in (origin, *origin.parents):
            if (candidate / marker).exists():
                return candidate
    return origin


def get_project_config_dir(repo_root: Path) -> Path:
    """Return ``<repo_root>/.taskledger``."""
    return Path(repo_root) / PROJECT_CONFIG_DIRNAME


def get_user_config_dir() -> Path:
    """Return the per-user config root (``~/.taskledger`` unless overridden)."""
    override = os.environ.get("TASKLEDGER_USER_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    return Path.home() / PROJECT_CONFIG_DIRNAME


__all__ = [
    "PROJECT_CONFIG_DIRNAME",
    "resolve_project_root",
    "get_project_config_dir",
    "get_user_config_dir",
]
