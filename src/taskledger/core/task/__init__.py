"""Task tracking core.

- ``parser``: checklist text <-> sections/tasks, in-place checkbox rewrites
- ``validation``/``graph``: referential integrity and cycle detection
- ``registry``: the guarded in-memory snapshot and its queries
"""
from __future__ import annotations

from .cascade import CascadeOutcome, propagate
from .graph import build_adjacency, dependents_of, find_cycle, find_cycles
from .lines import ClassifiedLine, LineKind, classify_line
from .models import (
    CascadeEffect,
    DependencyInfo,
    ParseMetadata,
    ParseResult,
    STATUS_DISPLAY_NAMES,
    Section,
    StatusUpdateResult,
    Task,
    TaskComplexity,
    TaskPriority,
    TaskSearchFilters,
    TaskSearchResult,
    TaskStatistics,
    TaskStatus,
    TestStatus,
    ValidationResult,
)
from .parser import (
    parse_document,
    parse_file,
    serialize_sections,
    update_status_char,
)
from .registry import TaskRegistry
from .transitions import TRANSITIONS, is_transition_allowed
from .validation import validate_tasks

__all__ = [
    "CascadeEffect",
    "CascadeOutcome",
    "ClassifiedLine",
    "DependencyInfo",
    "LineKind",
    "ParseMetadata",
    "ParseResult",
    "Section",
    "StatusUpdateResult",
    "STATUS_DISPLAY_NAMES",
    "TRANSITIONS",
    "Task",
    "TaskComplexity",
    "TaskPriority",
    "TaskRegistry",
    "TaskSearchFilters",
    "TaskSearchResult",
    "TaskStatistics",
    "TaskStatus",
    "TestStatus",
    "ValidationResult",
    "build_adjacency",
    "classify_line",
    "dependents_of",
    "find_cycle",
    "find_cycles",
    "is_transition_allowed",
    "parse_document",
    "parse_file",
    "propagate",
    "serialize_sections",
    "update_status_char",
    "validate_tasks",
]
