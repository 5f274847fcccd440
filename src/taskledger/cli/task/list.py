"""
taskledger task list command.

SUMMARY: List tasks in the task document
"""

from __future__ import annotations

import argparse
import sys

from taskledger.cli import OutputFormatter, add_standard_flags, load_registry, task_line
from taskledger.core.task import TaskStatus

SUMMARY = "List tasks in the task document"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--status",
        choices=[s.value for s in TaskStatus],
        help="Filter by status",
    )
    parser.add_argument(
        "--section",
        help="Only tasks under this exact section heading",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """List tasks, optionally narrowed by status and section."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        registry, path = load_registry(args)

        if args.section is not None:
            tasks = registry.get_tasks_by_section(args.section)
        else:
            tasks = registry.get_all_tasks()
        if args.status:
            wanted = TaskStatus.parse(args.status)
            tasks = [t for t in tasks if t.status is wanted]

        if formatter.json_mode:
            formatter.json_output(
                {
                    "document": str(path),
                    "tasks": [t.to_dict() for t in tasks],
                    "count": len(tasks),
                    "filters": {"status": args.status, "section": args.section},
                }
            )
        elif not tasks:
            formatter.text("No tasks found")
        else:
            formatter.text(f"Found {len(tasks)} task(s):")
            for task in tasks:
                formatter.text(task_line(task))
        return 0
    except Exception as e:
        formatter.error(e, error_code="task_list_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
