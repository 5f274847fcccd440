"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_repo_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --repo-root flag for repository root override."""
    parser.add_argument(
        "--repo-root",
        type=str,
        help="Override repository root path",
    )


def add_file_flag(parser: argparse.ArgumentParser) -> None:
    """Add --file flag selecting the task document.

    Defaults to ``tasks.document`` from configuration, relative to the
    repository root.
    """
    parser.add_argument(
        "--file",
        "-f",
        dest="file",
        type=str,
        help="Task document (default: tasks.document from config)",
    )


def add_task_id_arg(parser: argparse.ArgumentParser, help_text: str = "Task identifier (e.g., 1.2)") -> None:
    parser.add_argument("task_id", help=help_text)


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Add the flags every task command takes: --file, --json, --repo-root."""
    add_file_flag(parser)
    add_json_flag(parser)
    add_repo_root_flag(parser)


__all__ = [
    "add_json_flag",
    "add_repo_root_flag",
    "add_file_flag",
    "add_task_id_arg",
    "add_standard_flags",
]
