"""
Character grid for wireframe parsing.

Turns raw input lines into a rectangular array of classified cells and
keeps an index of every structural glyph so later stages can enumerate
corners or borders without rescanning the text.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .models import Bounds, Position


class CellKind(Enum):
    CORNER = "corner"  # +
    HLINE = "hline"  # -
    VLINE = "vline"  # |
    DIVIDER = "divider"  # =
    SPACE = "space"
    CHAR = "char"


STRUCTURAL_CHARS = {
    "+": CellKind.CORNER,
    "-": CellKind.HLINE,
    "|": CellKind.VLINE,
    "=": CellKind.DIVIDER,
}

INDEXED_KINDS = (CellKind.CORNER, CellKind.HLINE, CellKind.VLINE, CellKind.DIVIDER)


@dataclass(frozen=True)
class Cell:
    """A classified grid character."""

    kind: CellKind
    char: str = " "

    @classmethod
    def classify(cls, char: str) -> "Cell":
        kind = STRUCTURAL_CHARS.get(char)
        if kind is not None:
            return cls(kind, char)
        if char in (" ", "\t"):
            return SPACE
        return cls(CellKind.CHAR, char)


SPACE = Cell(CellKind.SPACE, " ")

CellPredicate = Callable[[Cell], bool]
ScanResult = List[Tuple[Position, Cell]]


def is_kind(*kinds: CellKind) -> CellPredicate:
    """Build a predicate matching any of the given kinds."""
    return lambda cell: cell.kind in kinds


class Grid:
    """
    A read-only 2D array of classified cells.

    Rows are padded with spaces to the length of the longest line. Positions
    of corners, horizontal lines, vertical lines and dividers are indexed at
    construction.
    """

    def __init__(self, cells: List[List[Cell]], width: int):
        self.cells = cells
        self.height = len(cells)
        self.width = width
        self._index: Dict[CellKind, List[Position]] = {kind: [] for kind in INDEXED_KINDS}
        self._index_sets: Dict[CellKind, set] = {}

        for row_idx, row in enumerate(cells):
            for col_idx, cell in enumerate(row):
                if cell.kind in self._index:
                    self._index[cell.kind].append(Position(row_idx, col_idx))

        for kind, positions in self._index.items():
            self._index_sets[kind] = set(positions)

    @classmethod
    def from_lines(cls, lines: Sequence[str]) -> "Grid":
        width = max((len(line) for line in lines), default=0)
        cells = []
        for line in lines:
            row = [Cell.classify(char) for char in line]
            row.extend([SPACE] * (width - len(row)))
            cells.append(row)
        return cls(cells, width)

    @classmethod
    def from_text(cls, text: str) -> "Grid":
        if not text:
            return cls.from_lines([])
        return cls.from_lines(text.replace("\r\n", "\n").split("\n"))

    def get(self, pos: Position) -> Optional[Cell]:
        """Return the cell at pos, or None when pos is outside the grid."""
        if 0 <= pos.row < self.height and 0 <= pos.col < self.width:
            return self.cells[pos.row][pos.col]
        return None

    def is_kind_at(self, pos: Position, kind: CellKind) -> bool:
        cell = self.get(pos)
        return cell is not None and cell.kind is kind

    def _scan(
        self, start: Position, d_row: int, d_col: int, predicate: CellPredicate
    ) -> ScanResult:
        result: ScanResult = []
        pos = start
        cell = self.get(pos)
        while cell is not None and predicate(cell):
            result.append((pos, cell))
            pos = Position(pos.row + d_row, pos.col + d_col)
            cell = self.get(pos)
        return result

    def scan_right(self, start: Position, predicate: CellPredicate) -> ScanResult:
        """Walk right from start (inclusive) while predicate holds."""
        return self._scan(start, 0, 1, predicate)

    def scan_left(self, start: Position, predicate: CellPredicate) -> ScanResult:
        return self._scan(start, 0, -1, predicate)

    def scan_down(self, start: Position, predicate: CellPredicate) -> ScanResult:
        return self._scan(start, 1, 0, predicate)

    def scan_up(self, start: Position, predicate: CellPredicate) -> ScanResult:
        return self._scan(start, -1, 0, predicate)

    def find_all(self, kind: CellKind) -> List[Position]:
        """Positions of every cell of an indexed kind, in row-major order."""
        return list(self._index.get(kind, []))

    def find_in_range(self, kind: CellKind, bounds: Bounds) -> List[Position]:
        return [pos for pos in self._index.get(kind, []) if bounds.contains(pos)]

    def has(self, kind: CellKind, pos: Position) -> bool:
        """O(1) membership test against the glyph index."""
        return pos in self._index_sets.get(kind, ())

    def row_text(self, row: int, start: int = 0, end: Optional[int] = None) -> str:
        """Raw characters of a row slice (end exclusive)."""
        if not 0 <= row < self.height:
            return ""
        cells = self.cells[row][start:end]
        return "".join(cell.char for cell in cells)

    def render(self) -> str:
        """Render the grid back to text with trailing spaces removed."""
        return "\n".join(self.row_text(row).rstrip() for row in range(self.height))
