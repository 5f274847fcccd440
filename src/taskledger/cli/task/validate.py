"""
taskledger task validate command.

SUMMARY: Check the task document for structural errors
"""

from __future__ import annotations

import argparse
import sys

from taskledger.cli import (
    OutputFormatter,
    add_standard_flags,
    get_document_path,
    get_repo_root,
    is_snapshot_path,
)
from taskledger.core.config.domains import ParserConfig
from taskledger.core.task import parse_file, validate_tasks
from taskledger.core.task.snapshot import read_snapshot

SUMMARY = "Check the task document for structural errors"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat warnings as failures",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Exit 0 when the document would be accepted by the registry."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        config = ParserConfig(repo_root=get_repo_root(args))
        path = get_document_path(args)
        metadata = None
        if is_snapshot_path(path):
            _sections, tasks = read_snapshot(path)
        else:
            parsed = parse_file(path, config=config)
            tasks, metadata = parsed.tasks, parsed.metadata
        result = validate_tasks(tasks, config=config)
    except Exception as e:
        formatter.error(e, error_code="task_validate_error")
        return 1

    ok = result.is_valid and not (args.strict and result.warnings)
    if formatter.json_mode:
        formatter.json_output(
            {
                "document": str(path),
                "taskCount": len(tasks),
                "metadata": metadata.to_dict() if metadata else None,
                **result.to_dict(),
            }
        )
    else:
        for error in result.errors:
            formatter.text(f"ERROR: {error}")
        for warning in result.warnings:
            formatter.text(f"WARNING: {warning}")
        verdict = "valid" if result.is_valid else "invalid"
        formatter.text(
            f"{path}: {verdict} ({len(tasks)} tasks, "
            f"{len(result.errors)} errors, {len(result.warnings)} warnings)"
        )
    return 0 if ok else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
