"""
taskledger - checklist-backed task tracking

Parses markdown checklist documents into typed task records, validates the
dependency graph, and mediates every status change through a guarded
workflow with cascading effects on dependent tasks.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
