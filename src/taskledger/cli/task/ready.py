"""
taskledger task ready command.

SUMMARY: List not-started tasks whose dependencies are complete
"""

from __future__ import annotations

import argparse
import sys

from taskledger.cli import OutputFormatter, add_standard_flags, load_registry, task_line

SUMMARY = "List not-started tasks whose dependencies are complete"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        registry, _path = load_registry(args)
        tasks = registry.get_ready_tasks()
        if formatter.json_mode:
            formatter.json_output({"tasks": [t.to_dict() for t in tasks], "count": len(tasks)})
        elif not tasks:
            formatter.text("No tasks are ready")
        else:
            formatter.text(f"{len(tasks)} task(s) ready:")
            for task in tasks:
                formatter.text(task_line(task))
        return 0
    except Exception as e:
        formatter.error(e, error_code="task_ready_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
