"""
taskledger task status command.

SUMMARY: Change a task's status and write it back to the document
"""

from __future__ import annotations

import argparse
import logging
import sys

from taskledger.cli import (
    OutputFormatter,
    add_standard_flags,
    add_task_id_arg,
    is_snapshot_path,
    load_registry,
)
from taskledger.core.exceptions import TaskIOError
from taskledger.core.task import TaskStatus

SUMMARY = "Change a task's status and write it back to the document"

logger = logging.getLogger(__name__)


def register_args(parser: argparse.ArgumentParser) -> None:
    add_task_id_arg(parser)
    parser.add_argument(
        "status",
        help=f"New status ({', '.join(s.value for s in TaskStatus)})",
    )
    parser.add_argument(
        "--no-persist",
        action="store_true",
        help="Validate and apply in memory only; leave the document unchanged",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Apply one status change.

    Checklists only record completion, so their checkbox is rewritten in
    place. JSON snapshots keep every status and are re-exported whole.
    """
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        registry, path = load_registry(args)
        persist = registry.registry_config.persist_enabled and not getattr(args, "no_persist", False)
        snapshot = is_snapshot_path(path)

        result = registry.update_status(
            str(args.task_id),
            args.status,
            persist_to=path if persist and not snapshot else None,
        )
        data = result.to_dict()
        if persist and snapshot:
            try:
                registry.export_snapshot(path)
                data["persisted"] = True
            except TaskIOError as exc:
                logger.warning("Failed to persist status of task %s: %s", result.task_id, exc)
                data["persisted"] = False

        lines = [
            f"Task {result.task_id}: {result.previous_status.value} -> {result.new_status.value}"
        ]
        for effect in result.cascaded:
            lines.append(
                f"  cascade: {effect.task_id} {effect.previous_status.value} -> "
                f"{effect.new_status.value}"
            )
        if data["persisted"] is False:
            lines.append(f"  warning: status was not written to {path}")
        formatter.success(data, "\n".join(lines))
        return 0
    except Exception as e:
        formatter.error(e, error_code="task_status_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
