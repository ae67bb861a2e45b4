"""
Shape detection for wireframe parsing.

BoxTracer walks the four edges of a box from its top-left corner using the
grid's directional scans. ShapeDetector runs the tracer over every
candidate corner and collects the traced boxes together with one set of
diagnostics per failed box.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from .errors import (
    Diagnostic,
    Direction,
    misaligned_pipe,
    mismatched_width,
    unclosed_box,
)
from .grid import CellKind, Grid, is_kind
from .models import Bounds, Box, Position

logger = logging.getLogger(__name__)

TOP_EDGE = is_kind(CellKind.HLINE, CellKind.CHAR, CellKind.SPACE)
BOTTOM_EDGE = is_kind(CellKind.HLINE, CellKind.DIVIDER)
VERTICAL_EDGE = is_kind(CellKind.VLINE)


@dataclass
class TraceResult:
    """
    Outcome of tracing one candidate corner.

    Attributes:
        start: The top-left corner tracing started from.
        box: The traced box, or None when tracing failed.
        errors: Diagnostics for this box, in edge order.
        visited: Corners reached while walking the edges (start excluded).
        edge_rows: Rows of right edge walked below the top-right corner.
    """

    start: Position
    box: Optional[Box] = None
    errors: List[Diagnostic] = field(default_factory=list)
    visited: Set[Position] = field(default_factory=set)
    edge_rows: int = 0

    @property
    def ok(self) -> bool:
        return self.box is not None and not self.errors


class BoxTracer:
    """
    Traces a single box from its top-left corner.

    The walk goes top edge, right edge, bottom edge, left edge. A missing
    terminating corner ends the walk with an UnclosedBox diagnostic for that
    edge. Width mismatches and misaligned pipes are recorded and the walk
    continues so the box is validated in one pass.
    """

    def __init__(self, grid: Grid, pipe_search_radius: int = 3):
        self.grid = grid
        self.pipe_search_radius = pipe_search_radius

    def trace_box(self, start: Position) -> TraceResult:
        result = TraceResult(start=start)
        grid = self.grid

        # Top edge
        top_cells = grid.scan_right(start.right(), TOP_EDGE)
        top_right = start.right(len(top_cells) + 1)
        if not grid.is_kind_at(top_right, CellKind.CORNER):
            result.errors.append(unclosed_box(Direction.TOP, start, start))
            return result
        result.visited.add(top_right)
        name = self._extract_name("".join(cell.char for _, cell in top_cells))

        # Right edge
        right = self._walk_right_edge(start, top_right, result)
        if right is None:
            return result
        bottom_right, bottom_left = right

        # Bottom edge, unless the right-edge walk already resolved it
        if bottom_left is None:
            bottom_cells = grid.scan_left(bottom_right.left(), BOTTOM_EDGE)
            bottom_left = bottom_right.left(len(bottom_cells) + 1)
            if not grid.is_kind_at(bottom_left, CellKind.CORNER):
                result.errors.append(
                    unclosed_box(Direction.BOTTOM, bottom_right, start)
                )
                return result
        result.visited.update((bottom_right, bottom_left))

        top_width = top_right.col - start.col
        bottom_width = bottom_right.col - bottom_left.col
        if top_width != bottom_width or bottom_left.col != start.col:
            result.errors.append(
                mismatched_width(
                    start,
                    top_width,
                    bottom_width,
                    top_right.col,
                    bottom_right.row,
                    bottom_left.col,
                    bottom_right.col,
                )
            )

        # Left edge, always checked against the start column
        self._walk_left_edge(start, top_right, bottom_right.row, result)

        if not result.errors:
            result.box = Box(bounds=Bounds.from_corners(start, bottom_right), name=name)
        return result

    def _walk_right_edge(
        self, start: Position, top_right: Position, result: TraceResult
    ) -> Optional[Tuple[Position, Optional[Position]]]:
        """
        Walk down from the top-right corner to the bottom-right corner.

        Returns (bottom_right, bottom_left) where bottom_left is only set
        when the bottom edge had to be resolved here (a bottom-right corner
        out of column), or None when the edge is unclosed.
        """
        grid = self.grid
        pos = top_right.down()
        while True:
            run = grid.scan_down(pos, VERTICAL_EDGE)
            pos = pos.down(len(run))
            result.edge_rows = pos.row - top_right.row - 1
            cell = grid.get(pos)
            if pos.row == top_right.row + 1 and (
                cell is None or cell.kind is CellKind.CORNER
            ):
                # A box needs at least one interior row.
                result.errors.append(unclosed_box(Direction.RIGHT, top_right, start))
                return None
            if cell is not None and cell.kind is CellKind.CORNER:
                return pos, None
            if cell is None:
                result.errors.append(unclosed_box(Direction.RIGHT, pos.up(), start))
                return None

            actual = self._find_pipe(pos.row, top_right.col, lower=start.col)
            if actual is not None:
                result.errors.append(
                    misaligned_pipe(Position(pos.row, actual), top_right.col, actual)
                )
                pos = pos.down()
                continue

            # The bottom edge exists but its right corner is missing or
            # out of column.
            if grid.is_kind_at(Position(pos.row, start.col), CellKind.CORNER):
                bottom_left = Position(pos.row, start.col)
                run = grid.scan_right(bottom_left.right(), BOTTOM_EDGE)
                corner = bottom_left.right(len(run) + 1)
                if grid.is_kind_at(corner, CellKind.CORNER):
                    return corner, bottom_left
                result.errors.append(unclosed_box(Direction.BOTTOM, corner.left(), start))
                result.visited.add(bottom_left)
                return None

            result.errors.append(unclosed_box(Direction.RIGHT, pos, start))
            return None

    def _walk_left_edge(
        self, start: Position, top_right: Position, bottom_row: int, result: TraceResult
    ) -> None:
        grid = self.grid
        pos = Position(bottom_row - 1, start.col)
        while pos.row > start.row:
            run = grid.scan_up(pos, VERTICAL_EDGE)
            pos = pos.up(len(run))
            if pos.row <= start.row:
                return
            actual = self._find_pipe(pos.row, start.col, upper=top_right.col)
            if actual is None:
                result.errors.append(unclosed_box(Direction.LEFT, pos, start))
                return
            result.errors.append(misaligned_pipe(Position(pos.row, actual), start.col, actual))
            pos = pos.up()

    def _find_pipe(
        self,
        row: int,
        expected_col: int,
        lower: Optional[int] = None,
        upper: Optional[int] = None,
    ) -> Optional[int]:
        """
        Find the column of a '|' near expected_col on a row.

        Candidates must lie strictly between lower and upper (the opposite
        edge of the box). The closest candidate wins; on a tie the one
        further from the box interior is preferred.
        """
        radius = self.pipe_search_radius
        if radius <= 0:
            return None
        window = Bounds(row, max(0, expected_col - radius), row, expected_col + radius)
        best = None
        for pos in self.grid.find_in_range(CellKind.VLINE, window):
            if pos.col == expected_col:
                continue
            if lower is not None and pos.col <= lower:
                continue
            if upper is not None and pos.col >= upper:
                continue
            distance = abs(pos.col - expected_col)
            if best is None or distance < best[0] or (
                distance == best[0] and self._is_outward(pos.col, expected_col, upper)
            ):
                best = (distance, pos.col)
        return best[1] if best else None

    @staticmethod
    def _is_outward(col: int, expected_col: int, upper: Optional[int]) -> bool:
        # Left edges search with an upper limit: outward is to the left.
        if upper is not None:
            return col < expected_col
        return col > expected_col

    @staticmethod
    def _extract_name(top_edge: str) -> Optional[str]:
        name = top_edge.strip("-").strip()
        return name or None


@dataclass
class DetectionResult:
    """All boxes and box-level diagnostics found in one grid."""

    boxes: List[Box] = field(default_factory=list)
    errors: List[Diagnostic] = field(default_factory=list)
    attempts: List[TraceResult] = field(default_factory=list)
    suppressed: Set[Position] = field(default_factory=set)


class ShapeDetector:
    """
    Finds every box in a grid.

    A corner is a candidate top-left when a horizontal line continues to its
    right. A failed trace is not reported when it starts on a corner an
    earlier reported trace walked through and it never got below its own
    first row. Such a candidate is the bottom edge of a box above, not a
    box of its own.
    """

    def __init__(self, pipe_search_radius: int = 3):
        self.pipe_search_radius = pipe_search_radius

    def candidates(self, grid: Grid) -> List[Position]:
        return [
            pos
            for pos in grid.find_all(CellKind.CORNER)
            if grid.has(CellKind.HLINE, pos.right())
        ]

    def detect(self, grid: Grid) -> DetectionResult:
        tracer = BoxTracer(grid, self.pipe_search_radius)
        result = DetectionResult()
        for start in self.candidates(grid):
            result.attempts.append(tracer.trace_box(start))

        # Candidates come in row-major order, so a box is always traced
        # before the corners on its edges are tried as top-left corners.
        claimed: Set[Position] = set()
        for attempt in result.attempts:
            if attempt.ok:
                result.boxes.append(attempt.box)
                claimed.update(attempt.visited)
                continue
            if attempt.start in claimed and attempt.edge_rows == 0:
                result.suppressed.add(attempt.start)
                continue
            claimed.update(attempt.visited)
            for error in attempt.errors:
                if error not in result.errors:
                    result.errors.append(error)

        logger.debug(
            "Traced %d candidate corners: %d boxes, %d errors",
            len(result.attempts),
            len(result.boxes),
            len(result.errors),
        )
        return result
