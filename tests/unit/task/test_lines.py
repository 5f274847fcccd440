"""Line classification for checklist documents."""
from __future__ import annotations

import pytest

from taskledger.core.task.lines import (
    LineKind,
    classify_line,
    rewrite_mark,
    split_checkbox_payload,
)


@pytest.mark.parametrize(
    "line,level,text",
    [
        ("# Title", 1, "Title"),
        ("### Phase 2  ", 3, "Phase 2"),
        ("###### Deep", 6, "Deep"),
    ],
)
def test_headings_report_level_and_text(line: str, level: int, text: str) -> None:
    result = classify_line(line)
    assert result.kind is LineKind.HEADING
    assert result.level == level
    assert result.text == text


def test_seven_hashes_is_not_a_heading() -> None:
    assert classify_line("####### too deep").kind is LineKind.OTHER


def test_hash_without_space_is_not_a_heading() -> None:
    assert classify_line("#hashtag").kind is LineKind.OTHER


@pytest.mark.parametrize(
    "line,checked",
    [
        ("- [ ] 1.1 Open", False),
        ("- [x] 1.1 Done", True),
        ("- [X] 1.1 Done", True),
        ("- [ x] 1.1 Done", True),
        ("  - [ ] 1.1 Nested", False),
        ("-[x] 1.1 Tight", True),
    ],
)
def test_checkbox_variants(line: str, checked: bool) -> None:
    result = classify_line(line)
    assert result.kind is LineKind.CHECKBOX
    assert result.checked is checked
    assert result.task_id == "1.1"


def test_checkbox_splits_id_from_title() -> None:
    result = classify_line("- [ ] 2.3.1 Wire up the parser   ")
    assert result.task_id == "2.3.1"
    assert result.text == "Wire up the parser"


def test_single_word_payload_becomes_title_without_id() -> None:
    result = classify_line("- [ ] Refactor")
    assert result.kind is LineKind.CHECKBOX
    assert result.task_id == ""
    assert result.text == "Refactor"


def test_split_checkbox_payload_empty() -> None:
    assert split_checkbox_payload("   ") == ("", "")


def test_mark_span_points_inside_brackets() -> None:
    line = "- [ x] 1.1 Title"
    result = classify_line(line)
    start, end = result.mark_span
    assert line[start - 1] == "["
    assert line[end] == "]"
    assert line[start:end] == " x"


def test_requirements_annotation() -> None:
    result = classify_line("  _Requirements: 1.1, 2.4_")
    assert result.kind is LineKind.REQUIREMENTS
    assert result.text == "1.1, 2.4"


def test_empty_requirements_annotation() -> None:
    result = classify_line("_Requirements: _")
    assert result.kind is LineKind.REQUIREMENTS
    assert result.text == ""


def test_indented_bullet_is_description() -> None:
    result = classify_line("  - some detail")
    assert result.kind is LineKind.DESCRIPTION
    assert result.text == "some detail"


def test_unindented_bullet_is_other() -> None:
    assert classify_line("- plain bullet").kind is LineKind.OTHER


@pytest.mark.parametrize("line", ["", "   ", "plain text", "> quote"])
def test_other_lines(line: str) -> None:
    assert classify_line(line).kind is LineKind.OTHER


def test_line_terminators_are_ignored() -> None:
    result = classify_line("- [x] 1.1 Done\r\n")
    assert result.kind is LineKind.CHECKBOX
    assert result.text == "Done"


@pytest.mark.parametrize(
    "inner,checked,expected",
    [
        (" ", True, "x"),
        ("x", False, " "),
        ("X", False, " "),
        (" x", False, "  "),
        ("  ", True, " x"),
        ("", True, "x"),
        ("x", True, "x"),
        (" ", False, " "),
    ],
)
def test_rewrite_mark_changes_one_character(inner: str, checked: bool, expected: str) -> None:
    assert rewrite_mark(inner, checked) == expected
