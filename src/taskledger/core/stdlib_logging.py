from __future__ import annotations

import logging
import sys
from pathlib import Path

from taskledger.core.utils.io import ensure_parent_dir

_CONFIGURED_LOG_PATH: str | None = None
_FILE_HANDLER: logging.Handler | None = None
_STDERR_HANDLER: logging.Handler | None = None

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _level_from_name(name: str) -> int:
    level = getattr(logging, str(name).upper(), None)
    return level if isinstance(level, int) else logging.INFO


def configure_stdlib_logging(*, log_path: Path, level: str = "INFO") -> None:
    """Configure Python stdlib logging to write to `log_path` (no stderr handler).

    Idempotent per-process: if already configured for the same file, no-op.
    """
    global _CONFIGURED_LOG_PATH, _FILE_HANDLER

    resolved = str(Path(log_path).resolve())
    if _CONFIGURED_LOG_PATH == resolved and _FILE_HANDLER is not None:
        return

    ensure_parent_dir(Path(resolved))

    root = logging.getLogger()
    root.setLevel(_level_from_name(level))

    # Remove stdout/stderr stream handlers so --json output stays machine-readable.
    # FileHandler is also a StreamHandler, so only console streams are removed.
    for h in list(root.handlers):
        if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) in (sys.stdout, sys.stderr):
            root.removeHandler(h)
            h.close()

    if _FILE_HANDLER is not None:
        root.removeHandler(_FILE_HANDLER)
        _FILE_HANDLER.close()
        _FILE_HANDLER = None

    fh = logging.FileHandler(resolved, encoding="utf-8")
    fh.setLevel(_level_from_name(level))
    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(fh)

    _FILE_HANDLER = fh
    _CONFIGURED_LOG_PATH = resolved


def configure_stderr_logging(level: str = "WARNING") -> None:
    """Install a single stderr handler on the root logger (idempotent)."""
    global _STDERR_HANDLER

    root = logging.getLogger()
    root.setLevel(_level_from_name(level))
    if _STDERR_HANDLER is not None and _STDERR_HANDLER in root.handlers:
        _STDERR_HANDLER.setLevel(_level_from_name(level))
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)
    _STDERR_HANDLER = handler


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: clear configured handlers."""
    global _CONFIGURED_LOG_PATH, _FILE_HANDLER, _STDERR_HANDLER
    root = logging.getLogger()
    for h in (_FILE_HANDLER, _STDERR_HANDLER):
        if h is not None and h in root.handlers:
            root.removeHandler(h)
            h.close()
    _CONFIGURED_LOG_PATH = None
    _FILE_HANDLER = None
    _STDERR_HANDLER = None


__all__ = [
    "configure_stdlib_logging",
    "configure_stderr_logging",
    "reset_stdlib_logging_for_tests",
]
