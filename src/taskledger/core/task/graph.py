"""Dependency graph helpers.

Pure functions over an adjacency map ``{task_id: [dependency ids]}`` built
from each task's ``dependencies``. Nothing here mutates its input.
"""
from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Set, Tuple

from .models import Task

Adjacency = Dict[str, List[str]]


def build_adjacency(tasks: Iterable[Task]) -> Adjacency:
    """Return ``{task_id: dependencies}`` preserving task and dependency order."""
    adjacency: Adjacency = {}
    for task in tasks:
        adjacency.setdefault(task.id, [])
        adjacency[task.id].extend(task.dependencies)
    return adjacency


def _canonical(cycle: Sequence[str]) -> Tuple[str, ...]:
    """Rotation-independent key for a cycle path (last element repeats the first)."""
    ring = list(cycle[:-1])
    pivot = ring.index(min(ring))
    return tuple(ring[pivot:] + ring[:pivot])


def iter_cycles(adjacency: Mapping[str, Sequence[str]]) -> Iterator[List[str]]:
    """Yield every distinct dependency cycle found by depth-first traversal.

    Each cycle is the full path from its first node back to itself, e.g.
    ``["A", "B", "A"]``. Edges to ids missing from ``adjacency`` are ignored.
    Traversal order follows the mapping order, so results are deterministic.
    """
    visited: Set[str] = set()
    seen_cycles: Set[Tuple[str, ...]] = set()

    for root in adjacency:
        if root in visited:
            continue
        # Explicit stack of (node, iterator over its dependencies) keeps deep
        # chains away from the interpreter recursion limit.
        path: List[str] = [root]
        on_path: Set[str] = {root}
        stack: List[Tuple[str, Iterator[str]]] = [(root, iter(adjacency.get(root, ())))]
        visited.add(root)

        while stack:
            node, deps = stack[-1]
            advanced = False
            for dep in deps:
                if dep not in adjacency:
                    continue
                if dep in on_path:
                    cycle = path[path.index(dep):] + [dep]
                    key = _canonical(cycle)
                    if key not in seen_cycles:
                        seen_cycles.add(key)
                        yield cycle
                    continue
                if dep in visited:
                    continue
                visited.add(dep)
                path.append(dep)
                on_path.add(dep)
                stack.append((dep, iter(adjacency.get(dep, ()))))
                advanced = True
                break
            if not advanced:
                stack.pop()
                on_path.discard(path.pop())


def find_cycles(adjacency: Mapping[str, Sequence[str]]) -> List[List[str]]:
    """Return all distinct cycles (see :func:`iter_cycles`)."""
    return list(iter_cycles(adjacency))


def find_cycle(adjacency: Mapping[str, Sequence[str]]) -> Optional[List[str]]:
    """Return the first cycle found, or None when the graph is acyclic."""
    return next(iter_cycles(adjacency), None)


def missing_dependencies(adjacency: Mapping[str, Sequence[str]]) -> List[Tuple[str, str]]:
    """Return ``(task_id, dependency_id)`` pairs whose dependency is unknown."""
    return [
        (task_id, dep)
        for task_id, deps in adjacency.items()
        for dep in deps
        if dep not in adjacency
    ]


def dependents_of(tasks: Iterable[Task], task_id: str) -> List[str]:
    """Return ids of tasks that list ``task_id`` as a direct dependency."""
    return [t.id for t in tasks if task_id in t.dependencies]


def cycle_through(adjacency: Mapping[str, Sequence[str]], task_id: str) -> List[str]:
    """Return a cycle path that contains ``task_id``, or ``[]``."""
    for cycle in iter_cycles(adjacency):
        if task_id in cycle:
            return cycle
    return []


def format_cycle(cycle: Sequence[str]) -> str:
    return " -> ".join(cycle)


__all__ = [
    "Adjacency",
    "build_adjacency",
    "iter_cycles",
    "find_cycles",
    "find_cycle",
    "missing_dependencies",
    "dependents_of",
    "cycle_through",
    "format_cycle",
]
