"""
taskledger CLI package.

Commands are auto-discovered from domain subfolders (``task/``).

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities
"""
from ._output import OutputFormatter, format_json
from ._args import (
    add_file_flag,
    add_json_flag,
    add_repo_root_flag,
    add_standard_flags,
    add_task_id_arg,
)
from ._utils import get_document_path, get_repo_root, is_snapshot_path, load_registry, task_line

__all__ = [
    # Output formatting
    "OutputFormatter",
    "format_json",
    # Argument helpers
    "add_file_flag",
    "add_json_flag",
    "add_repo_root_flag",
    "add_standard_flags",
    "add_task_id_arg",
    # Utilities
    "get_document_path",
    "get_repo_root",
    "is_snapshot_path",
    "load_registry",
    "task_line",
]
