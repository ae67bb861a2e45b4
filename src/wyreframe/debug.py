"""
Debug utilities for wyreframe.

visual_diff compares a wireframe before and after auto-fixing. Changed
lines are shown side by side with a caret under every changed column, and
the fixer's descriptions can be attached by line number.

Usage:
    >>> from wyreframe import fix
    >>> print(fix(text).diff())

    # Or directly, for any two drawings:
    >>> from wyreframe.debug import visual_diff
    >>> print(visual_diff(before, after))
"""

from itertools import zip_longest
from typing import List, Mapping, Optional, Sequence, Set

RULE = "=" * 60
MAX_LISTED_COLUMNS = 5


def changed_columns(before: str, after: str) -> List[int]:
    """Zero-based columns where two lines differ. A missing character counts."""
    return [
        col
        for col, (old, new) in enumerate(zip_longest(before, after, fillvalue=""))
        if old != new
    ]


def _visible_rows(changed: Sequence[int], total: int, context: int) -> List[int]:
    rows: Set[int] = set()
    for row in changed:
        rows.update(range(max(0, row - context), min(total, row + context + 1)))
    return sorted(rows)


def _caret_line(columns: Sequence[int]) -> str:
    # Changed lines are printed behind an 8 character gutter.
    marks = [" "] * (columns[-1] + 1)
    for col in columns:
        marks[col] = "^"
    return " " * 8 + "".join(marks)


def _describe_change(row: int, old: str, new: str) -> List[str]:
    columns = changed_columns(old, new)
    listed = [col + 1 for col in columns[:MAX_LISTED_COLUMNS]]
    more = "..." if len(columns) > MAX_LISTED_COLUMNS else ""
    return [
        f"{row + 1:3d}: - |{old}|",
        f"     + |{new}|",
        _caret_line(columns),
        f"     Diff at col(s): {listed}{more}",
    ]


def visual_diff(
    before: str,
    after: str,
    context_lines: int = 2,
    notes: Optional[Mapping[int, Sequence[str]]] = None,
) -> str:
    """
    Render a line-by-line diff of two ASCII drawings.

    Unchanged lines farther than context_lines from any change are replaced
    by a single "..." line.

    Args:
        before: The drawing before the change (e.g. the wireframe as written)
        after: The drawing after the change (e.g. the auto-fixed wireframe)
        context_lines: Number of unchanged lines to show around each change
        notes: Optional text keyed by one-based line number, listed after
            the diff (FixResult.diff passes the applied fixes here)

    Returns:
        A formatted report

    Example:
        >>> print(visual_diff("| A  |", "| A |"))
    """
    pairs = list(zip_longest(before.split("\n"), after.split("\n"), fillvalue=""))
    changed = [row for row, (old, new) in enumerate(pairs) if old != new]

    output: List[str] = [RULE, "VISUAL DIFF", RULE]
    if not changed:
        output.append("No differences found.")
        return "\n".join(output)

    output.append(f"Found {len(changed)} differing line(s)")
    output.append("")

    previous = -1
    for row in _visible_rows(changed, len(pairs), context_lines):
        if row != previous + 1:
            output.append("...")
        old, new = pairs[row]
        if old == new:
            output.append(f"{row + 1:3d}:   {new}")
        else:
            output.extend(_describe_change(row, old, new))
        previous = row
    if previous < len(pairs) - 1:
        output.append("...")

    if notes:
        output.append("")
        output.append("Notes:")
        for line in sorted(notes):
            for note in notes[line]:
                output.append(f"  line {line}: {note}")

    return "\n".join(output)
