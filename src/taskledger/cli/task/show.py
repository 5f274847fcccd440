"""
taskledger task show command.

SUMMARY: Show one task with its dependency information
"""

from __future__ import annotations

import argparse
import sys

from taskledger.cli import OutputFormatter, add_standard_flags, add_task_id_arg, load_registry
from taskledger.core.exceptions import TaskNotFoundError

SUMMARY = "Show one task with its dependency information"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_task_id_arg(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        registry, _path = load_registry(args)
        task_id = str(args.task_id)
        task = registry.get_task_by_id(task_id)
        info = registry.get_dependency_info(task_id)
        if task is None or info is None:
            raise TaskNotFoundError(f"Task not found: {task_id}", task_id=task_id)

        if formatter.json_mode:
            formatter.json_output({"task": task.to_dict(), "dependencyInfo": info.to_dict()})
            return 0

        formatter.text(f"{task.id} {task.title}")
        formatter.text_kv("Status", task.status_display_name)
        formatter.text_kv("Priority", task.priority.value)
        formatter.text_kv("Complexity", task.complexity.value)
        if task.assignee:
            formatter.text_kv("Assignee", task.assignee)
        if task.tags:
            formatter.text_kv("Tags", ", ".join(task.tags))
        if task.estimated_duration:
            formatter.text_kv("Estimated", task.estimated_duration)
        if task.requirements:
            formatter.text_kv("Requirements", ", ".join(task.requirements))
        formatter.text_kv("Depends on", ", ".join(info.dependencies) or "-")
        formatter.text_kv("Dependents", ", ".join(info.dependents) or "-")
        if info.is_blocked:
            formatter.text_kv("Waiting on", ", ".join(info.blocking_tasks))
        formatter.text_kv("Last modified", task.last_modified)
        if task.description:
            formatter.text("")
            formatter.text(task.description)
        return 0
    except Exception as e:
        formatter.error(e, error_code="task_show_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
