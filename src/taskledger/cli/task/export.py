"""
taskledger task export command.

SUMMARY: Write the loaded tasks to a JSON snapshot
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from taskledger.cli import OutputFormatter, add_standard_flags, load_registry

SUMMARY = "Write the loaded tasks to a JSON snapshot"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("output", help="Destination JSON file")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        registry, path = load_registry(args)
        output = Path(args.output).expanduser().resolve()
        registry.export_snapshot(output)
        formatter.success(
            {"document": str(path), "output": str(output), "count": len(registry)},
            f"Exported {len(registry)} task(s) to {output}",
        )
        return 0
    except Exception as e:
        formatter.error(e, error_code="task_export_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
