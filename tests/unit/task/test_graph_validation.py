"""Dependency graph helpers and structural validation."""
from __future__ import annotations

import re

from taskledger.core.config.domains import ParserConfig
from taskledger.core.task import (
    Task,
    TaskStatus,
    TestStatus,
    build_adjacency,
    dependents_of,
    find_cycle,
    find_cycles,
    validate_tasks,
)
from taskledger.core.task.graph import cycle_through, missing_dependencies


def _task(task_id: str, *deps: str, **kwargs) -> Task:
    kwargs.setdefault("title", f"Task {task_id}")
    kwargs.setdefault("description", "something to do")
    return Task(id=task_id, dependencies=list(deps), **kwargs)


class TestGraph:
    def test_build_adjacency_keeps_order(self) -> None:
        adjacency = build_adjacency([_task("b", "a"), _task("a"), _task("c", "b", "a")])
        assert list(adjacency) == ["b", "a", "c"]
        assert adjacency["c"] == ["b", "a"]

    def test_acyclic_graph(self) -> None:
        adjacency = {"a": [], "b": ["a"], "c": ["a", "b"]}
        assert find_cycle(adjacency) is None
        assert find_cycles(adjacency) == []

    def test_two_node_cycle_reports_full_path(self) -> None:
        assert find_cycle({"A": ["B"], "B": ["A"]}) == ["A", "B", "A"]

    def test_self_dependency(self) -> None:
        assert find_cycle({"A": ["A"]}) == ["A", "A"]

    def test_longer_cycle_after_acyclic_prefix(self) -> None:
        adjacency = {"x": ["a"], "a": ["b"], "b": ["c"], "c": ["a"]}
        assert find_cycle(adjacency) == ["a", "b", "c", "a"]

    def test_each_distinct_cycle_reported_once(self) -> None:
        adjacency = {"a": ["b"], "b": ["a"], "c": ["d"], "d": ["c"], "e": ["a"]}
        cycles = find_cycles(adjacency)
        assert cycles == [["a", "b", "a"], ["c", "d", "c"]]

    def test_missing_nodes_are_ignored_by_cycle_search(self) -> None:
        assert find_cycle({"a": ["ghost"]}) is None
        assert missing_dependencies({"a": ["ghost", "b"], "b": []}) == [("a", "ghost")]

    def test_deep_chain_does_not_hit_recursion_limit(self) -> None:
        adjacency = {str(i): [str(i + 1)] for i in range(5000)}
        adjacency["5000"] = []
        assert find_cycle(adjacency) is None

    def test_dependents_of(self) -> None:
        tasks = [_task("1"), _task("2", "1"), _task("3", "1", "2")]
        assert dependents_of(tasks, "1") == ["2", "3"]
        assert dependents_of(tasks, "3") == []

    def test_cycle_through(self) -> None:
        adjacency = {"a": ["b"], "b": ["a"], "c": []}
        assert cycle_through(adjacency, "b") == ["a", "b", "a"]
        assert cycle_through(adjacency, "c") == []


class TestValidateTasks:
    def test_valid_set(self) -> None:
        result = validate_tasks([_task("1.1"), _task("1.2", "1.1")])
        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    def test_one_error_per_missing_reference(self) -> None:
        result = validate_tasks([_task("1.1", "9.9", "8.8"), _task("1.2", "9.9")])
        assert not result.is_valid
        missing = [e for e in result.errors if "non-existent" in e]
        assert len(missing) == 3
        assert any("'8.8'" in e for e in missing)

    def test_cycle_error_contains_full_path(self) -> None:
        result = validate_tasks([_task("A", "B"), _task("B", "A")])
        assert not result.is_valid
        assert any("A -> B -> A" in e for e in result.errors)

    def test_missing_id_and_title(self) -> None:
        result = validate_tasks([Task(id="", title="No id", description="d"), Task(id="1", title="", description="d")])
        assert "Task #1 is missing an id" in result.errors
        assert "Task 1 is missing a title" in result.errors

    def test_duplicate_ids(self) -> None:
        result = validate_tasks([_task("1.1"), _task("1.1")])
        assert any("Duplicate task id '1.1'" in e for e in result.errors)

    def test_warnings_do_not_invalidate(self) -> None:
        tasks = [
            Task(id="setup", title="No description"),
            _task("1.1", status=TaskStatus.COMPLETED),
            _task("1.2", status=TaskStatus.COMPLETED, test_status=TestStatus(total_tests=1, passed_tests=1)),
        ]
        result = validate_tasks(tasks)
        assert result.is_valid
        assert "Task setup has no description" in result.warnings
        assert "Task 1.1 is completed but has no test status" in result.warnings
        assert any("'setup'" in w and "dotted" in w for w in result.warnings)
        assert not any("1.2" in w for w in result.warnings)

    def test_id_pattern_from_config(self) -> None:
        config = ParserConfig(config={"parser": {"idPattern": r"^T-\d+$"}})
        result = validate_tasks([_task("T-1"), _task("1.1")], config=config)
        assert [w for w in result.warnings if "dotted" in w] == [
            "Task id '1.1' does not follow the dotted numeric format"
        ]

    def test_explicit_pattern_wins(self) -> None:
        result = validate_tasks([_task("abc")], id_pattern=re.compile(r"^[a-z]+$"))
        assert result.warnings == []

    def test_to_dict(self) -> None:
        data = validate_tasks([_task("1", "2")]).to_dict()
        assert data["isValid"] is False
        assert len(data["errors"]) == 1
