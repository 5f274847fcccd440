"""I/O utilities for taskledger.

This package provides safe, atomic file operations:
- Core: atomic writes, text I/O
- JSON: read/write
- YAML: read and deterministic directory iteration
"""
from __future__ import annotations

from .core import (
    PathLike,
    atomic_write,
    ensure_parent_dir,
    read_text,
    write_text,
)
from .json import (
    read_json,
    write_json_atomic,
)
from .yaml import (
    iter_yaml_files,
    read_yaml,
)

__all__ = [
    # core
    "PathLike",
    "ensure_parent_dir",
    "atomic_write",
    "read_text",
    "write_text",
    # json
    "read_json",
    "write_json_atomic",
    # yaml
    "read_yaml",
    "iter_yaml_files",
]
