import json
from argparse import Namespace
from pathlib import Path

import pytest

from taskledger.cli.task import export as task_export
from taskledger.cli.task import list as task_list
from taskledger.cli.task import ready as task_ready
from taskledger.cli.task import search as task_search
from taskledger.cli.task import show as task_show
from taskledger.cli.task import stats as task_stats
from taskledger.cli.task import status as task_status
from taskledger.cli.task import validate as task_validate


def _args(project_root: Path, **kwargs) -> Namespace:
    base = {"json": True, "repo_root": str(project_root), "file": None}
    base.update(kwargs)
    return Namespace(**base)


def _search_args(project_root: Path, **kwargs) -> Namespace:
    defaults = {
        "query": "",
        "status": [],
        "priority": [],
        "complexity": [],
        "assignee": None,
        "tags": [],
        "requirements": [],
        "created_after": None,
        "created_before": None,
        "modified_after": None,
        "modified_before": None,
    }
    defaults.update(kwargs)
    return _args(project_root, **defaults)


def test_list_uses_configured_document(project_root, task_file, capsys):
    rc = task_list.main(_args(project_root, status=None, section=None))
    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["count"] == 3
    assert payload["document"] == str(task_file.resolve())
    assert [t["id"] for t in payload["tasks"]] == ["1.1", "1.2", "1.3"]


def test_list_filters_by_status_and_section(project_root, task_file, capsys):
    rc = task_list.main(_args(project_root, status="not_started", section="Setup"))
    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    assert [t["id"] for t in payload["tasks"]] == ["1.2"]


def test_list_text_mode(project_root, task_file, capsys):
    rc = task_list.main(_args(project_root, json=False, status="completed", section=None))
    assert rc == 0
    out = capsys.readouterr().out
    assert "Found 1 task(s):" in out
    assert "[x] 1.1 Create repository (completed)" in out


def test_list_missing_document_reports_error(project_root, capsys):
    rc = task_list.main(_args(project_root, status=None, section=None))
    assert rc == 1
    err = json.loads(capsys.readouterr().err)
    assert err["error"] == "task_list_error"
    assert err["type"] == "TaskIOError"


def test_explicit_file_flag(project_root, tmp_path, capsys):
    doc = tmp_path / "other.md"
    doc.write_text("- [ ] 5.1 Elsewhere\n", encoding="utf-8")
    rc = task_list.main(_args(project_root, file=str(doc), status=None, section=None))
    assert rc == 0
    assert json.loads(capsys.readouterr().out)["tasks"][0]["id"] == "5.1"


def test_show_includes_dependency_info(project_root, task_file, capsys):
    rc = task_show.main(_args(project_root, task_id="1.2"))
    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["task"]["assignee"] == "alice"
    assert payload["dependencyInfo"]["dependents"] == ["1.3"]


def test_show_unknown_task(project_root, task_file, capsys):
    rc = task_show.main(_args(project_root, json=False, task_id="9.9"))
    assert rc == 1
    assert "Task not found: 9.9" in capsys.readouterr().err


def test_status_on_checklist_keeps_open_checkbox(project_root, task_file, capsys):
    before = task_file.read_text(encoding="utf-8")
    rc = task_status.main(_args(project_root, task_id="1.2", status="in_progress", no_persist=False))
    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "success"
    assert payload["newStatus"] == "in_progress"
    # A checkbox cannot hold in_progress; the line stays open and the
    # command says the status was not written.
    assert payload["persisted"] is False
    assert task_file.read_text(encoding="utf-8") == before


def test_status_on_checklist_warns_in_text_mode(project_root, task_file, capsys):
    rc = task_status.main(
        _args(project_root, json=False, task_id="1.2", status="blocked", no_persist=False)
    )
    assert rc == 0
    assert f"warning: status was not written to {task_file.resolve()}" in capsys.readouterr().out


def test_status_on_snapshot_document(project_root, task_file, tmp_path, capsys):
    snapshot = tmp_path / "tasks.json"
    assert task_export.main(_args(project_root, output=str(snapshot))) == 0
    capsys.readouterr()

    rc = task_status.main(
        _args(project_root, file=str(snapshot), task_id="1.2", status="in_progress", no_persist=False)
    )
    assert rc == 0
    assert json.loads(capsys.readouterr().out)["persisted"] is True

    rc = task_status.main(
        _args(project_root, file=str(snapshot), task_id="1.2", status="completed", no_persist=False)
    )
    assert rc == 0
    capsys.readouterr()

    tasks = {t["id"]: t for t in json.loads(snapshot.read_text(encoding="utf-8"))["tasks"]}
    assert tasks["1.2"]["status"] == "completed"
    assert tasks["1.3"]["status"] == "not_started"
    assert "- [ ] 1.2" in task_file.read_text(encoding="utf-8")

    assert task_list.main(_args(project_root, file=str(snapshot), status="completed", section=None)) == 0
    assert [t["id"] for t in json.loads(capsys.readouterr().out)["tasks"]] == ["1.1", "1.2"]


def test_validate_snapshot_document(project_root, task_file, tmp_path, capsys):
    snapshot = tmp_path / "tasks.json"
    task_export.main(_args(project_root, output=str(snapshot)))
    capsys.readouterr()
    assert task_validate.main(_args(project_root, file=str(snapshot), strict=False)) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["taskCount"] == 3
    assert payload["metadata"] is None


def test_status_rejects_illegal_transition(project_root, task_file, capsys):
    before = task_file.read_text(encoding="utf-8")
    rc = task_status.main(_args(project_root, task_id="1.3", status="completed", no_persist=False))
    assert rc == 1
    err = json.loads(capsys.readouterr().err)
    assert err["type"] == "TransitionError"
    assert task_file.read_text(encoding="utf-8") == before


def test_status_reports_dependency_gate(project_root, task_file, capsys):
    rc = task_status.main(_args(project_root, task_id="1.3", status="in_progress", no_persist=False))
    assert rc == 1
    err = json.loads(capsys.readouterr().err)
    assert err["type"] == "DependencyError"
    assert err["context"]["dependencyIds"] == ["1.2"]


def test_status_no_persist(project_root, task_file, capsys):
    before = task_file.read_text(encoding="utf-8")
    rc = task_status.main(_args(project_root, task_id="1.2", status="blocked", no_persist=True))
    assert rc == 0
    assert json.loads(capsys.readouterr().out)["persisted"] is None
    assert task_file.read_text(encoding="utf-8") == before


def test_status_text_mode_lists_cascade(project_root, task_file, capsys):
    rc = task_status.main(
        _args(project_root, json=False, task_id="1.2", status="blocked", no_persist=True)
    )
    assert rc == 0
    out = capsys.readouterr().out
    assert "Task 1.2: not_started -> blocked" in out
    assert "cascade: 1.3 not_started -> blocked" in out


def test_search_with_filters(project_root, task_file, capsys):
    rc = task_search.main(_search_args(project_root, query="", tags=["ci,docs"], status=["not_started"]))
    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    assert [t["id"] for t in payload["tasks"]] == ["1.2"]
    assert payload["totalCount"] == 3
    assert payload["filters"] == {"status": ["not_started"], "tags": ["ci", "docs"]}


def test_search_rejects_inverted_range(project_root, task_file, capsys):
    rc = task_search.main(
        _search_args(
            project_root,
            created_after="2024-02-01T00:00:00Z",
            created_before="2024-01-01T00:00:00Z",
        )
    )
    assert rc == 1
    assert "created_after" in json.loads(capsys.readouterr().err)["message"]


def test_search_rejects_unknown_priority(project_root, task_file, capsys):
    rc = task_search.main(_search_args(project_root, priority=["urgent"]))
    assert rc == 1


def test_stats(project_root, task_file, capsys):
    rc = task_stats.main(_args(project_root))
    assert rc == 0
    stats = json.loads(capsys.readouterr().out)["statistics"]
    assert stats["totalTasks"] == 3
    assert stats["completedTasks"] == 1
    assert stats["notStartedTasks"] == 2


def test_validate_ok_and_strict(project_root, task_file, capsys):
    assert task_validate.main(_args(project_root, strict=False)) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["isValid"] is True
    assert payload["metadata"]["totalTasks"] == 3
    # 1.1 is completed without test status.
    assert task_validate.main(_args(project_root, strict=True)) == 1


def test_validate_reports_errors(project_root, capsys):
    (project_root / "tasks.md").write_text(
        "- [ ] A One\n  - Depends on: B\n- [ ] B Two\n  - Depends on: A\n", encoding="utf-8"
    )
    rc = task_validate.main(_args(project_root, json=False, strict=False))
    assert rc == 1
    out = capsys.readouterr().out
    assert "ERROR: Circular dependency detected: A -> B -> A" in out


def test_ready(project_root, task_file, capsys):
    rc = task_ready.main(_args(project_root))
    assert rc == 0
    assert [t["id"] for t in json.loads(capsys.readouterr().out)["tasks"]] == ["1.2"]


def test_export(project_root, task_file, tmp_path, capsys):
    out = tmp_path / "snapshot.json"
    rc = task_export.main(_args(project_root, output=str(out)))
    assert rc == 0
    assert json.loads(capsys.readouterr().out)["count"] == 3
    assert len(json.loads(out.read_text(encoding="utf-8"))["tasks"]) == 3


def test_document_path_from_project_config(project_root, write_project_config, capsys):
    (project_root / "plan.md").write_text("- [ ] 8.1 Planned\n", encoding="utf-8")
    write_project_config("tasks.yaml", "tasks:\n  document: plan.md\n")
    rc = task_list.main(_args(project_root, status=None, section=None))
    assert rc == 0
    assert json.loads(capsys.readouterr().out)["tasks"][0]["id"] == "8.1"


@pytest.mark.parametrize("module", [task_list, task_show, task_status, task_search, task_stats,
                                    task_validate, task_ready, task_export])
def test_commands_expose_summary(module):
    assert module.SUMMARY
    assert callable(module.register_args)
    assert callable(module.main)
