"""
taskledger task search command.

SUMMARY: Search tasks by text and filters
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from taskledger.cli import OutputFormatter, add_standard_flags, load_registry, task_line
from taskledger.core.task import TaskComplexity, TaskPriority, TaskSearchFilters, TaskStatus
from taskledger.core.utils.time import parse_iso8601

SUMMARY = "Search tasks by text and filters"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("query", nargs="?", default="", help="Text matched against id, title and description")
    parser.add_argument("--status", action="append", default=[], help="Status filter (repeatable)")
    parser.add_argument("--priority", action="append", default=[], help="Priority filter (repeatable)")
    parser.add_argument("--complexity", action="append", default=[], help="Complexity filter (repeatable)")
    parser.add_argument("--assignee", help="Exact assignee")
    parser.add_argument("--tag", dest="tags", action="append", default=[], help="Match any of these tags")
    parser.add_argument(
        "--requirement", dest="requirements", action="append", default=[],
        help="Match any of these requirement tags",
    )
    parser.add_argument("--created-after", help="ISO 8601 timestamp")
    parser.add_argument("--created-before", help="ISO 8601 timestamp")
    parser.add_argument("--modified-after", help="ISO 8601 timestamp")
    parser.add_argument("--modified-before", help="ISO 8601 timestamp")
    add_standard_flags(parser)


def _split(values: List[str]) -> List[str]:
    """Accept both repeated flags and comma separated values."""
    return [part.strip() for value in values for part in value.split(",") if part.strip()]


def _when(value: Optional[str]):
    return parse_iso8601(value) if value else None


def build_filters(args: argparse.Namespace) -> TaskSearchFilters:
    """Translate command line flags into search filters.

    Raises:
        ValueError: On unknown enum values or unparseable timestamps.
    """
    return TaskSearchFilters(
        status=[TaskStatus.parse(v) for v in _split(args.status)],
        priority=[TaskPriority.parse(v) for v in _split(args.priority)],
        complexity=[TaskComplexity.parse(v) for v in _split(args.complexity)],
        assignee=args.assignee,
        tags=_split(args.tags),
        requirements=_split(args.requirements),
        created_after=_when(args.created_after),
        created_before=_when(args.created_before),
        modified_after=_when(args.modified_after),
        modified_before=_when(args.modified_before),
    )


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        filters = build_filters(args)
        registry, _path = load_registry(args)
        problems = registry.validate_filters(filters)
        if problems:
            raise ValueError("Invalid search filters: " + "; ".join(problems))

        result = registry.search(args.query, filters)
        if formatter.json_mode:
            formatter.json_output(result.to_dict())
        elif not result.tasks:
            formatter.text(f"No matching tasks (searched {result.total_count})")
        else:
            formatter.text(f"{result.filtered_count} of {result.total_count} task(s) match:")
            for task in result.tasks:
                formatter.text(task_line(task))
        return 0
    except Exception as e:
        formatter.error(e, error_code="task_search_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
