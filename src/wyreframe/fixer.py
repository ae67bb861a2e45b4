"""
Auto-fixing of common wireframe mistakes.

Each strategy rewrites the source text to resolve one diagnostic. The
Fixer applies a single fix, re-parses, and repeats until nothing fixable
remains or the iteration limit is reached. Only one fix is applied per
parse because every edit can shift the positions of later diagnostics.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .debug import visual_diff
from .errors import Diagnostic, DiagnosticKind, FixError
from .parser import WireframeParser, normalize

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 100


@dataclass
class FixedIssue:
    """
    A fix that was applied.

    Attributes:
        original: The diagnostic the fix resolved.
        description: What was changed.
        line: One-based line of the change.
        column: One-based column of the change.
    """

    original: Diagnostic
    description: str
    line: int
    column: int


@dataclass
class FixResult:
    """Fixed text plus a report of what changed and what is left."""

    text: str
    fixed: List[FixedIssue] = field(default_factory=list)
    remaining: List[Diagnostic] = field(default_factory=list)
    original_text: str = ""

    @property
    def changed(self) -> bool:
        return bool(self.fixed)

    def diff(self) -> str:
        """Visual diff of the original and fixed text, with each fix listed by line."""
        notes: Dict[int, List[str]] = {}
        for issue in self.fixed:
            notes.setdefault(issue.line, []).append(issue.description)
        return visual_diff(self.original_text, self.text, notes=notes)


FixOutcome = Optional[Tuple[str, FixedIssue]]


def _set_line(text: str, row: int, new_line: str) -> str:
    lines = text.split("\n")
    lines[row] = new_line
    return "\n".join(lines)


def _get_line(text: str, row: int) -> Optional[str]:
    lines = text.split("\n")
    if 0 <= row < len(lines):
        return lines[row]
    return None


class FixStrategy(ABC):
    """Base class for fix strategies."""

    kinds: Tuple[DiagnosticKind, ...] = ()

    def can_fix(self, kind: DiagnosticKind) -> bool:
        return kind in self.kinds

    @abstractmethod
    def apply(self, text: str, diagnostic: Diagnostic) -> FixOutcome:
        """
        Rewrite text to resolve diagnostic.

        Returns:
            (new_text, issue) or None when this diagnostic cannot be fixed
            safely.
        """
        pass

    @staticmethod
    def issue(diagnostic: Diagnostic, description: str) -> FixedIssue:
        return FixedIssue(
            original=diagnostic,
            description=description,
            line=diagnostic.line,
            column=diagnostic.column,
        )


class TabFix(FixStrategy):
    """Replace tabs with spaces on the offending line."""

    kinds = (DiagnosticKind.UNUSUAL_SPACING,)

    def __init__(self, tab_width: int = 2):
        self.tab_width = tab_width

    def apply(self, text, diagnostic):
        row = diagnostic.position.row
        line = _get_line(text, row)
        if line is None or "\t" not in line:
            return None
        count = line.count("\t")
        new_line = line.replace("\t", " " * self.tab_width)
        return _set_line(text, row, new_line), self.issue(
            diagnostic, f"Replaced {count} tab(s) with spaces on line {row + 1}"
        )


class MisalignedPipeFix(FixStrategy):
    """
    Move a '|' to its expected column.

    Spaces are inserted before a pipe that sits too far left and removed
    before one that sits too far right. Anything other than spaces in the
    way means the fix is declined.
    """

    kinds = (DiagnosticKind.MISALIGNED_PIPE,)

    def apply(self, text, diagnostic):
        row = diagnostic.position.row
        expected = diagnostic.details["expected_col"]
        actual = diagnostic.details["actual_col"]
        line = _get_line(text, row)
        if line is None or actual >= len(line) or line[actual] != "|":
            return None

        if actual < expected:
            new_line = line[:actual] + " " * (expected - actual) + line[actual:]
        elif actual > expected:
            if line[expected:actual].strip(" "):
                return None
            new_line = line[:expected] + line[actual:]
        else:
            return None

        return _set_line(text, row, new_line), self.issue(
            diagnostic,
            f"Moved '|' on line {row + 1} from column {actual + 1} to column {expected + 1}",
        )


class UnclosedBracketFix(FixStrategy):
    """Append the missing ']' after the bracketed text."""

    kinds = (DiagnosticKind.UNCLOSED_BRACKET,)

    def apply(self, text, diagnostic):
        row, col = diagnostic.position.row, diagnostic.position.col
        content = diagnostic.details["content"]
        line = _get_line(text, row)
        if line is None or line[col:col + len(content)] != content:
            return None

        end = col + len(content)
        rest = line[end:]
        # Take the inserted width out of the padding when there is room so
        # the right border stays in place.
        padding = len(rest) - len(rest.lstrip(" "))
        rest = rest[min(padding, 2):]
        new_line = line[:end] + " ]" + rest
        return _set_line(text, row, new_line), self.issue(
            diagnostic, f"Added missing ']' on line {row + 1}"
        )


class MismatchedWidthFix(FixStrategy):
    """Extend the shorter of a box's top and bottom borders with dashes."""

    kinds = (DiagnosticKind.MISMATCHED_WIDTH,)

    def apply(self, text, diagnostic):
        d = diagnostic.details
        top_row, top_left = diagnostic.position.row, diagnostic.position.col
        top_right = d["top_right_col"]
        bottom_row = d["bottom_row"]
        bottom_left = d["bottom_left_col"]
        bottom_right = d["bottom_right_col"]

        lines = text.split("\n")
        if not (0 <= top_row < len(lines) and 0 <= bottom_row < len(lines)):
            return None

        changed = False
        if bottom_left != top_left:
            row, old, new = (
                (bottom_row, bottom_left, top_left)
                if bottom_left > top_left
                else (top_row, top_left, bottom_left)
            )
            extended = self._extend(lines[row], old, new)
            if extended is None:
                return None
            lines[row] = extended
            changed = True

        if bottom_right != top_right:
            row, old, new = (
                (bottom_row, bottom_right, top_right)
                if bottom_right < top_right
                else (top_row, top_right, bottom_right)
            )
            extended = self._extend(lines[row], old, new)
            if extended is None:
                return None
            lines[row] = extended
            changed = True

        if not changed:
            return None
        edge = "bottom" if d["bottom_width"] < d["top_width"] else "top"
        return "\n".join(lines), self.issue(
            diagnostic,
            f"Extended {edge} border of box at line {top_row + 1} to "
            f"{max(d['top_width'], d['bottom_width'])} columns",
        )

    @staticmethod
    def _extend(line: str, old_corner: int, new_corner: int) -> Optional[str]:
        """Move a border corner outward, filling the gap with dashes."""
        padded = list(line.ljust(max(old_corner, new_corner) + 1))
        if padded[old_corner] != "+":
            return None
        if new_corner > old_corner:
            gap = range(old_corner + 1, new_corner + 1)
        else:
            gap = range(new_corner, old_corner)
        if any(padded[i] != " " for i in gap):
            return None
        for i in gap:
            padded[i] = "-"
        padded[old_corner] = "-"
        padded[new_corner] = "+"
        return "".join(padded)


DEFAULT_STRATEGIES = (
    TabFix(),
    MismatchedWidthFix(),
    MisalignedPipeFix(),
    UnclosedBracketFix(),
)


class Fixer:
    """
    Iteratively fix a wireframe until it parses clean or nothing fixable
    remains.

    Example:
        >>> result = Fixer().fix(text)
        >>> print(f"Fixed {len(result.fixed)} issues")
    """

    def __init__(
        self,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        tab_width: int = 2,
        parser: Optional[WireframeParser] = None,
        strategies: Optional[Sequence[FixStrategy]] = None,
    ):
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        if tab_width < 1:
            raise ValueError("tab_width must be at least 1")
        self.max_iterations = max_iterations
        self.parser = parser or WireframeParser()
        if strategies is None:
            strategies = (TabFix(tab_width),) + DEFAULT_STRATEGIES[1:]
        self.strategies = list(strategies)

    def fix(self, text: str) -> FixResult:
        """
        Fix text.

        Tab warnings are fixed before anything else since replacing tabs
        moves every later character on the line. Otherwise the first
        fixable diagnostic in report order is fixed.

        Raises:
            FixError: If the text did not settle within max_iterations.
        """
        original = normalize(text)
        current = original
        fixed: List[FixedIssue] = []
        diagnostics: List[Diagnostic] = []

        for _ in range(self.max_iterations):
            diagnostics = self.parser.parse(current).diagnostics
            outcome = self._apply_first(current, diagnostics)
            if outcome is None:
                return FixResult(
                    text=current, fixed=fixed, remaining=diagnostics, original_text=original
                )
            current, issue = outcome
            fixed.append(issue)
            logger.debug("Applied fix: %s", issue.description)

        raise FixError(
            f"Fixing did not settle after {self.max_iterations} iterations", diagnostics
        )

    def _apply_first(self, text: str, diagnostics: List[Diagnostic]) -> FixOutcome:
        ordered = sorted(
            diagnostics, key=lambda d: d.kind is not DiagnosticKind.UNUSUAL_SPACING
        )
        for diagnostic in ordered:
            for strategy in self.strategies:
                if not strategy.can_fix(diagnostic.kind):
                    continue
                outcome = strategy.apply(text, diagnostic)
                if outcome is not None and outcome[0] != text:
                    return outcome
        return None


def fix(text: str) -> FixResult:
    """Convenience function: fix text with default settings."""
    return Fixer().fix(text)


def fix_only(text: str) -> str:
    """Return the fixed text, or the original text when fixing fails."""
    try:
        return Fixer().fix(text).text
    except FixError:
        return text
