"""
Diagnostics and exceptions for wireframe parsing.

Every stage of the pipeline reports problems as Diagnostic values rather
than raising, so a single parse can surface all structural problems at
once. Exceptions are reserved for the convenience entry points
(parse_or_raise) and for programmer errors.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from .models import Bounds, Position


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


class DiagnosticKind(Enum):
    """Closed set of problems the parser can report."""

    # Structural
    UNCLOSED_BOX = "UnclosedBox"
    MISMATCHED_WIDTH = "MismatchedWidth"
    MISALIGNED_PIPE = "MisalignedPipe"
    OVERLAPPING_BOXES = "OverlappingBoxes"
    # Syntax
    INVALID_ELEMENT = "InvalidElement"
    UNCLOSED_BRACKET = "UnclosedBracket"
    EMPTY_BUTTON = "EmptyButton"
    INVALID_INTERACTION_DSL = "InvalidInteractionDSL"
    UNKNOWN_ELEMENT_ID = "UnknownElementId"
    DUPLICATE_SCENE_ID = "DuplicateSceneId"
    # Style
    UNUSUAL_SPACING = "UnusualSpacing"
    DEEP_NESTING = "DeepNesting"

    @property
    def severity(self) -> Severity:
        if self in (DiagnosticKind.UNUSUAL_SPACING, DiagnosticKind.DEEP_NESTING):
            return Severity.WARNING
        return Severity.ERROR


class Direction(Enum):
    """Box edge on which tracing failed."""

    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"


@dataclass(frozen=True)
class Diagnostic:
    """
    A single problem found while parsing.

    Attributes:
        kind: What went wrong.
        position: Zero-based source position (row is the file line).
        details: Kind-specific context (widths, columns, boxes, ...).
        snippet: Optional source excerpt captured at detection time.
    """

    kind: DiagnosticKind
    position: Position
    details: Dict[str, Any] = field(default_factory=dict)
    snippet: Optional[str] = None

    @property
    def severity(self) -> Severity:
        return self.kind.severity

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    @property
    def line(self) -> int:
        """One-based line number."""
        return self.position.row + 1

    @property
    def column(self) -> int:
        """One-based column number."""
        return self.position.col + 1

    def shifted(self, rows: int) -> "Diagnostic":
        """Return a copy with every stored position moved down by rows."""
        if rows == 0:
            return self
        details = {}
        for key, value in self.details.items():
            if isinstance(value, (Position, Bounds)):
                value = value.shifted(rows)
            elif isinstance(value, int) and key.endswith("_row"):
                value = value + rows
            details[key] = value
        return Diagnostic(self.kind, self.position.shifted(rows), details, self.snippet)

    @property
    def message(self) -> str:
        d = self.details
        kind = self.kind
        if kind is DiagnosticKind.UNCLOSED_BOX:
            return f"Box is not closed on its {d['direction'].value} edge"
        if kind is DiagnosticKind.MISMATCHED_WIDTH:
            return (
                f"Box top edge is {d['top_width']} wide but bottom edge is "
                f"{d['bottom_width']} wide"
            )
        if kind is DiagnosticKind.MISALIGNED_PIPE:
            return (
                f"Vertical border '|' expected at column {d['expected_col'] + 1} "
                f"but found at column {d['actual_col'] + 1}"
            )
        if kind is DiagnosticKind.OVERLAPPING_BOXES:
            return f"Boxes {d['box1']} and {d['box2']} overlap"
        if kind is DiagnosticKind.INVALID_ELEMENT:
            return f"Invalid element: {d['content']!r}"
        if kind is DiagnosticKind.UNCLOSED_BRACKET:
            return f"Missing closing ']' in {d['content']!r}"
        if kind is DiagnosticKind.EMPTY_BUTTON:
            return "Button has no label"
        if kind is DiagnosticKind.INVALID_INTERACTION_DSL:
            return f"Invalid interaction syntax: {d['message']}"
        if kind is DiagnosticKind.UNKNOWN_ELEMENT_ID:
            return f"Interaction references unknown element id {d['element_id']!r}"
        if kind is DiagnosticKind.DUPLICATE_SCENE_ID:
            first = d["first_position"]
            return (
                f"Scene id {d['scene_id']!r} already defined on line {first.row + 1}"
            )
        if kind is DiagnosticKind.UNUSUAL_SPACING:
            return "Tab character found; use spaces for alignment"
        if kind is DiagnosticKind.DEEP_NESTING:
            return (
                f"Boxes are nested {d['depth']} levels deep "
                f"(more than {d['max_depth']})"
            )
        return kind.value

    def format(self, source: Optional[str] = None, context_lines: int = 1) -> str:
        """
        Render the diagnostic for display.

        Args:
            source: Full source text; when given a snippet window around the
                    offending line is included with a line marker and caret.
            context_lines: Lines of context shown above and below.

        Returns:
            Multi-line human-readable description.
        """
        header = (
            f"{self.severity.value}: {self.kind.value} at line {self.line}, "
            f"column {self.column}: {self.message}"
        )
        if source is None:
            if self.snippet is None:
                return header
            return f"{header}\n    {self.snippet}"

        lines = source.replace("\r\n", "\n").split("\n")
        row = self.position.row
        if not 0 <= row < len(lines):
            return header

        out = [header]
        start = max(0, row - context_lines)
        end = min(len(lines), row + context_lines + 1)
        width = len(str(end))
        for idx in range(start, end):
            marker = ">" if idx == row else " "
            out.append(f"{marker} {idx + 1:>{width}} | {lines[idx]}")
            if idx == row:
                out.append(" " * (width + 5 + self.position.col) + "^")
        return "\n".join(out)

    def __str__(self) -> str:
        return self.format()


def split_by_severity(diagnostics: Sequence[Diagnostic]):
    """Return (errors, warnings) preserving order."""
    errors = [d for d in diagnostics if d.is_error]
    warnings = [d for d in diagnostics if not d.is_error]
    return errors, warnings


# Constructors, one per kind


def unclosed_box(direction: Direction, position: Position, start: Position) -> Diagnostic:
    return Diagnostic(
        DiagnosticKind.UNCLOSED_BOX,
        position,
        {"direction": direction, "start": start},
    )


def mismatched_width(
    start: Position,
    top_width: int,
    bottom_width: int,
    top_right_col: int,
    bottom_row: int,
    bottom_left_col: int,
    bottom_right_col: int,
) -> Diagnostic:
    return Diagnostic(
        DiagnosticKind.MISMATCHED_WIDTH,
        start,
        {
            "top_width": top_width,
            "bottom_width": bottom_width,
            "top_right_col": top_right_col,
            "bottom_row": bottom_row,
            "bottom_left_col": bottom_left_col,
            "bottom_right_col": bottom_right_col,
        },
    )


def misaligned_pipe(position: Position, expected_col: int, actual_col: int) -> Diagnostic:
    return Diagnostic(
        DiagnosticKind.MISALIGNED_PIPE,
        position,
        {"expected_col": expected_col, "actual_col": actual_col},
    )


def overlapping_boxes(box1: Bounds, box2: Bounds) -> Diagnostic:
    return Diagnostic(
        DiagnosticKind.OVERLAPPING_BOXES,
        box2.top_left,
        {"box1": box1, "box2": box2},
    )


def deep_nesting(position: Position, depth: int, max_depth: int) -> Diagnostic:
    return Diagnostic(
        DiagnosticKind.DEEP_NESTING,
        position,
        {"depth": depth, "max_depth": max_depth},
    )


def syntax_error(kind: DiagnosticKind, position: Position, content: str) -> Diagnostic:
    return Diagnostic(kind, position, {"content": content}, snippet=content)


def unusual_spacing(position: Position, line: str) -> Diagnostic:
    return Diagnostic(DiagnosticKind.UNUSUAL_SPACING, position, {}, snippet=line)


def duplicate_scene_id(scene_id: str, position: Position, first: Position) -> Diagnostic:
    return Diagnostic(
        DiagnosticKind.DUPLICATE_SCENE_ID,
        position,
        {"scene_id": scene_id, "first_position": first},
    )


def unknown_element_id(element_id: str, position: Position) -> Diagnostic:
    return Diagnostic(
        DiagnosticKind.UNKNOWN_ELEMENT_ID, position, {"element_id": element_id}
    )


def invalid_interaction(message: str, position: Position) -> Diagnostic:
    return Diagnostic(
        DiagnosticKind.INVALID_INTERACTION_DSL, position, {"message": message}
    )


class ParseError(Exception):
    """Raised by parse_or_raise when parsing produced errors."""

    def __init__(self, diagnostics: List[Diagnostic], source: Optional[str] = None):
        self.diagnostics = list(diagnostics)
        body = "\n".join(d.format(source) for d in self.diagnostics)
        super().__init__(f"Parse failed:\n{body}" if body else "Parse failed")


class FixError(Exception):
    """Raised when auto-fixing does not settle within the iteration limit."""

    def __init__(self, message: str, diagnostics: Optional[List[Diagnostic]] = None):
        self.diagnostics = list(diagnostics or [])
        super().__init__(message)


class InteractionSyntaxError(Exception):
    """Raised by an interaction parser when its input is malformed."""

    def __init__(self, message: str, line: int = 1, column: int = 1):
        self.line = line
        self.column = column
        super().__init__(message)
