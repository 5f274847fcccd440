"""Transition table and pure cascade propagation."""
from __future__ import annotations

import pytest

from taskledger.core.exceptions import TransitionError
from taskledger.core.task import TRANSITIONS, Task, TaskStatus, is_transition_allowed, propagate
from taskledger.core.task.transitions import validate_transition

NS = TaskStatus.NOT_STARTED
IP = TaskStatus.IN_PROGRESS
BL = TaskStatus.BLOCKED
CO = TaskStatus.COMPLETED

LEGAL = {
    (NS, IP), (NS, BL),
    (IP, CO), (IP, BL), (IP, NS),
    (BL, NS), (BL, IP),
}


@pytest.mark.parametrize("current", list(TaskStatus))
@pytest.mark.parametrize("new", list(TaskStatus))
def test_table_matches_documented_edges(current: TaskStatus, new: TaskStatus) -> None:
    assert is_transition_allowed(current, new) is ((current, new) in LEGAL)


def test_completed_is_terminal() -> None:
    assert TRANSITIONS[CO] == frozenset()


def test_display_only_states_have_no_edges() -> None:
    for status in (TaskStatus.REVIEW, TaskStatus.DEPRECATED):
        assert status not in TRANSITIONS
        with pytest.raises(TransitionError):
            validate_transition("1", status, NS)


def test_validate_transition_error_carries_context() -> None:
    with pytest.raises(TransitionError) as excinfo:
        validate_transition("1.1", NS, CO)
    err = excinfo.value
    assert isinstance(err, ValueError)
    assert err.from_status == "not_started"
    assert err.to_status == "completed"
    assert "1.1" in str(err)
    assert err.to_json_error()["code"] == "TransitionError"


def _tasks(*specs) -> dict:
    out = {}
    for task_id, status, deps in specs:
        out[task_id] = Task(
            id=task_id,
            title=task_id,
            status=status,
            dependencies=list(deps),
            created_date="2024-01-01T00:00:00Z",
            last_modified="2024-01-01T00:00:00Z",
        )
    return out


STAMP = "2024-02-02T00:00:00Z"


class TestPropagate:
    def test_block_reaches_direct_dependents(self) -> None:
        tasks = _tasks(("1", BL, []), ("2", IP, ["1"]), ("3", NS, ["1"]), ("4", CO, ["1"]))
        outcome = propagate(tasks, "1", BL, timestamp=STAMP)

        assert outcome.tasks["2"].status is BL
        assert outcome.tasks["3"].status is BL
        assert outcome.tasks["4"].status is CO
        assert outcome.tasks["2"].last_modified == STAMP
        assert [(e.task_id, e.previous_status, e.caused_by) for e in outcome.effects] == [
            ("2", IP, "1"),
            ("3", NS, "1"),
        ]

    def test_input_is_not_mutated(self) -> None:
        tasks = _tasks(("1", BL, []), ("2", IP, ["1"]))
        propagate(tasks, "1", BL, timestamp=STAMP)
        assert tasks["2"].status is IP
        assert tasks["2"].last_modified == "2024-01-01T00:00:00Z"

    def test_completion_unblocks_when_all_dependencies_done(self) -> None:
        tasks = _tasks(("1", CO, []), ("2", BL, ["1"]))
        outcome = propagate(tasks, "1", CO, timestamp=STAMP)
        assert outcome.tasks["2"].status is NS

    def test_completion_keeps_block_while_other_dependency_open(self) -> None:
        tasks = _tasks(("1", CO, []), ("0", IP, []), ("2", BL, ["1", "0"]))
        outcome = propagate(tasks, "1", CO, timestamp=STAMP)
        assert outcome.tasks["2"].status is BL
        assert outcome.effects == []

    def test_completion_does_not_touch_unblocked_dependents(self) -> None:
        tasks = _tasks(("1", CO, []), ("2", IP, ["1"]))
        assert propagate(tasks, "1", CO, timestamp=STAMP).effects == []

    @pytest.mark.parametrize("status", [NS, IP])
    def test_other_changes_do_not_cascade(self, status: TaskStatus) -> None:
        tasks = _tasks(("1", status, []), ("2", BL, ["1"]), ("3", NS, ["1"]))
        assert propagate(tasks, "1", status, timestamp=STAMP).effects == []

    def test_one_hop_by_default(self) -> None:
        tasks = _tasks(("1", BL, []), ("2", NS, ["1"]), ("3", NS, ["2"]))
        outcome = propagate(tasks, "1", BL, timestamp=STAMP)
        assert outcome.tasks["2"].status is BL
        assert outcome.tasks["3"].status is NS

    def test_transitive_mode_follows_the_chain(self) -> None:
        tasks = _tasks(("1", BL, []), ("2", NS, ["1"]), ("3", IP, ["2"]), ("4", NS, ["3"]))
        outcome = propagate(tasks, "1", BL, timestamp=STAMP, transitive=True)
        assert [e.task_id for e in outcome.effects] == ["2", "3", "4"]
        assert [e.caused_by for e in outcome.effects] == ["1", "2", "3"]

    def test_display_only_dependents_are_ignored(self) -> None:
        tasks = _tasks(("1", BL, []), ("2", TaskStatus.REVIEW, ["1"]))
        assert propagate(tasks, "1", BL, timestamp=STAMP).effects == []
