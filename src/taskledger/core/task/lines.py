"""Line classification for checklist documents.

Every line of a task document is mapped to exactly one :class:`LineKind`
by :func:`classify_line`. The parser only reduces the classified stream, so
all pattern matching lives here.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class LineKind(Enum):
    HEADING = "heading"
    CHECKBOX = "checkbox"
    REQUIREMENTS = "requirements"
    DESCRIPTION = "description"
    OTHER = "other"


_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*?)\s*$")
# "- [ ]", "- [x]", "- [X]", "- [ x]" (any indentation, tolerant spacing inside the brackets)
_CHECKBOX_RE = re.compile(r"^(?P<indent>\s*)-\s*\[(?P<inner>\s*[xX]?\s*)\](?P<payload>.*)$")
_REQUIREMENTS_RE = re.compile(r"^\s*_Requirements:(?P<body>.*?)_\s*$")
_DESCRIPTION_RE = re.compile(r"^(?P<indent>\s+)-(?P<text>.*)$")


@dataclass(frozen=True)
class ClassifiedLine:
    """One classified line.

    Only the fields relevant to ``kind`` are populated:
    - HEADING: ``level``, ``text``
    - CHECKBOX: ``checked``, ``task_id``, ``text`` (title), ``mark_span``
    - REQUIREMENTS: ``text`` (raw comma separated body)
    - DESCRIPTION: ``text`` (bullet payload)
    """

    kind: LineKind
    raw: str
    text: str = ""
    level: int = 0
    checked: bool = False
    task_id: str = ""
    # Start/end offsets of the text between "[" and "]" within ``raw``.
    mark_span: Optional[Tuple[int, int]] = None


def split_checkbox_payload(payload: str) -> Tuple[str, str]:
    """Split a checkbox payload into ``(task_id, title)``.

    The first whitespace-delimited token is the id. A payload without any
    whitespace has no id: the whole payload becomes the title.
    """
    parts = payload.strip().split(None, 1)
    if len(parts) == 2:
        return parts[0], parts[1].strip()
    if len(parts) == 1:
        return "", parts[0]
    return "", ""


def classify_line(line: str) -> ClassifiedLine:
    """Classify a single line (without its line terminator)."""
    line = line.rstrip("\r\n")

    m = _HEADING_RE.match(line)
    if m:
        return ClassifiedLine(LineKind.HEADING, line, text=m.group(2), level=len(m.group(1)))

    m = _CHECKBOX_RE.match(line)
    if m:
        inner = m.group("inner")
        task_id, title = split_checkbox_payload(m.group("payload"))
        return ClassifiedLine(
            LineKind.CHECKBOX,
            line,
            text=title,
            checked="x" in inner.lower(),
            task_id=task_id,
            mark_span=m.span("inner"),
        )

    m = _REQUIREMENTS_RE.match(line)
    if m:
        return ClassifiedLine(LineKind.REQUIREMENTS, line, text=m.group("body").strip())

    m = _DESCRIPTION_RE.match(line)
    if m:
        return ClassifiedLine(LineKind.DESCRIPTION, line, text=m.group("text").strip())

    return ClassifiedLine(LineKind.OTHER, line)


def rewrite_mark(inner: str, checked: bool) -> str:
    """Return the bracket content with its checkbox character set or cleared.

    Exactly one character changes (or one is inserted into an empty ``[]``);
    spacing inside the brackets is otherwise preserved.
    """
    has_mark = "x" in inner.lower()
    if checked:
        if has_mark:
            return inner
        idx = max((i for i, ch in enumerate(inner) if ch.isspace()), default=-1)
        if idx < 0:
            return "x"
        return inner[:idx] + "x" + inner[idx + 1:]
    if not has_mark:
        return inner
    idx = next(i for i, ch in enumerate(inner) if ch in "xX")
    return inner[:idx] + " " + inner[idx + 1:]


__all__ = [
    "LineKind",
    "ClassifiedLine",
    "classify_line",
    "split_checkbox_payload",
    "rewrite_mark",
]
