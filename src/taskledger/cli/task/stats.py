"""
taskledger task stats command.

SUMMARY: Show aggregate task statistics
"""

from __future__ import annotations

import argparse
import sys

from taskledger.cli import OutputFormatter, add_standard_flags, load_registry
from taskledger.core.task import STATUS_DISPLAY_NAMES

SUMMARY = "Show aggregate task statistics"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        registry, path = load_registry(args)
        stats = registry.get_task_statistics()
        if formatter.json_mode:
            formatter.json_output({"document": str(path), "statistics": stats.to_dict()})
            return 0

        formatter.text(f"Tasks: {stats.total_tasks}")
        for status, count in stats.status_counts.items():
            formatter.text_kv(STATUS_DISPLAY_NAMES[status].capitalize(), count)
        formatter.text_kv("Average completion time (s)", f"{stats.average_completion_time:.0f}")
        formatter.text_kv("Test coverage (%)", f"{stats.test_coverage:.1f}")
        formatter.text_kv(
            "Priority",
            ", ".join(f"{p.value}={n}" for p, n in stats.priority_distribution.items()),
        )
        formatter.text_kv(
            "Complexity",
            ", ".join(f"{c.value}={n}" for c, n in stats.complexity_distribution.items()),
        )
        return 0
    except Exception as e:
        formatter.error(e, error_code="task_stats_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
