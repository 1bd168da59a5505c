"""
Text edit application.

Edits address (line, column span) pairs. They are applied back-to-front so
that applying one never shifts the offsets of another.
"""

from itertools import groupby
from typing import Iterable

from rehome.refactor.types import LineDiff, TextEdit

# Edit kind that drops its whole line, terminator included
REMOVE_LINE = "remove_line"


def order_edits(edits: Iterable[TextEdit]) -> list[TextEdit]:
    """
    Sort edits into application order (descending line, then column).

    Raises:
        ValueError: if two edits overlap
    """
    ascending = sorted(set(edits), key=lambda e: e.sort_key)

    for prev, nxt in zip(ascending, ascending[1:]):
        if prev.line != nxt.line:
            continue
        same_insert = prev.start == prev.end == nxt.start == nxt.end
        if prev.end > nxt.start or same_insert:
            raise ValueError(
                f"Overlapping edits on line {prev.line}: "
                f"[{prev.start},{prev.end}) and [{nxt.start},{nxt.end})"
            )

    return list(reversed(ascending))


def _apply_to_line(body: str, line_edits: list[TextEdit]) -> str:
    for edit in line_edits:
        if edit.end > len(body) or edit.start < 0:
            raise ValueError(f"Edit [{edit.start},{edit.end}) outside line {edit.line}")
        body = body[: edit.start] + edit.replacement + body[edit.end :]
    return body


def apply_text_edits(content: str, edits: Iterable[TextEdit]) -> str:
    """
    Apply edits to ``content`` and return the new text.

    Line terminators are untouched: a CRLF line keeps its "\\r" after the
    edited text.
    """
    lines = content.split("\n")
    removed: set[int] = set()

    for line_num, group in groupby(order_edits(edits), key=lambda e: e.line):
        idx = line_num - 1
        if idx >= len(lines):
            raise ValueError(f"Edit on line {line_num} past end of file")
        group = list(group)
        if any(e.kind == REMOVE_LINE for e in group):
            removed.add(idx)
            continue
        raw = lines[idx]
        has_cr = raw.endswith("\r")
        body = raw[:-1] if has_cr else raw
        lines[idx] = _apply_to_line(body, group) + ("\r" if has_cr else "")

    return "\n".join(line for idx, line in enumerate(lines) if idx not in removed)


def line_diffs(lines: list[str], edits: Iterable[TextEdit]) -> list[LineDiff]:
    """Old and new text of every edited line, in ascending line order."""
    diffs = []
    for line_num, group in groupby(order_edits(edits), key=lambda e: e.line):
        old = lines[line_num - 1]
        group = list(group)
        if any(e.kind == REMOVE_LINE for e in group):
            diffs.append(LineDiff(line=line_num, old=old, new="", removed=True))
            continue
        new = _apply_to_line(old, group).replace("\r\n", "\n")
        if new != old:
            diffs.append(LineDiff(line=line_num, old=old, new=new))
    return sorted(diffs, key=lambda d: d.line)
