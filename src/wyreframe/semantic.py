"""
Semantic stage: turns the box forest of one scene into typed elements.

For each box the interior rows are visited top to bottom. Rows covered by
a nested box belong to that box; dividers become Divider elements, blank
rows become Spacers, and every other row is handed to the element
registry. Side-by-side sibling boxes are then grouped into Rows.
"""

import logging
import re
from dataclasses import replace
from typing import List, Optional, Sequence, Set, Tuple

from .alignment import span_alignment
from .dividers import find_dividers
from .elements import INPUT_PATTERN, ParserRegistry
from .errors import Diagnostic, DiagnosticKind, syntax_error
from .grid import Grid
from .models import (
    Bounds,
    Box,
    BoxElement,
    Button,
    Divider,
    Element,
    Link,
    Position,
    Row,
    Scene,
    Spacer,
)
from .scenes import SceneBlock

logger = logging.getLogger(__name__)

# Bracketed or quoted tokens, otherwise runs of words separated by single spaces.
SEGMENT_PATTERN = re.compile(r'\[[^\[\]]*\]|"[^"]*"|\S+(?: \S+)*')
CONTROL_OPENERS = ("[", '"')
EMPTY_BUTTON_PATTERN = re.compile(r"^\[\s*\]$")


class SemanticParser:
    """
    Builds scenes from traced boxes.

    Element and box positions are reported in file coordinates: the block's
    line offset is added to every grid row.
    """

    def __init__(self, registry: Optional[ParserRegistry] = None):
        self.registry = registry or ParserRegistry()
        self._grid: Optional[Grid] = None
        self._offset = 0
        self._diagnostics: List[Diagnostic] = []

    def parse_scene(
        self, block: SceneBlock, grid: Grid, roots: Sequence[Box]
    ) -> Tuple[Scene, List[Diagnostic]]:
        """
        Build the scene for one block.

        Args:
            block: The scene block (directives and line offset).
            grid: Grid built from the block's lines.
            roots: Root boxes of the block's hierarchy, in reading order.

        Returns:
            (scene, diagnostics) where diagnostics are syntax problems found
            in box content.
        """
        self._grid = grid
        self._offset = block.line_offset
        self._diagnostics = []

        elements = [self.box_element(root) for root in roots]
        canvas = Bounds(0, -1, max(grid.height - 1, 0), max(grid.width, 0))
        grouped = self.group_rows(elements, canvas)

        scene = Scene(
            id=block.scene_id,
            title=block.title,
            transition=block.transition,
            device=block.device,
            elements=tuple(grouped),
            line=block.scene_line,
        )
        logger.debug(
            "Scene %r: %d top-level elements, %d diagnostics",
            scene.id,
            len(scene.elements),
            len(self._diagnostics),
        )
        return scene, list(self._diagnostics)

    def box_element(self, box: Box) -> BoxElement:
        bounds = box.bounds
        divider_rows = set(find_dividers(self._grid, bounds))
        owned: Set[int] = set()
        for child in box.children:
            owned.update(range(child.bounds.top, child.bounds.bottom + 1))

        elements: List[Element] = []
        for row in range(bounds.top + 1, bounds.bottom):
            starting = [child for child in box.children if child.bounds.top == row]
            for child in sorted(starting, key=lambda c: c.bounds.left):
                elements.append(self.box_element(child))
            if row in owned:
                continue
            if row in divider_rows:
                elements.append(Divider(position=self._pos(row, bounds.left + 1)))
                continue
            elements.extend(self._parse_row(row, bounds))

        if all(isinstance(element, Spacer) for element in elements):
            # Blank interior: an empty box, not a stack of spacers.
            elements = []

        return BoxElement(
            bounds=bounds.shifted(self._offset),
            name=box.name,
            children=tuple(self.group_rows(elements, bounds)),
        )

    def group_rows(self, elements: List[Element], container: Bounds) -> List[Element]:
        """
        Replace runs of side-by-side boxes with Row elements.

        A run is two or more consecutive BoxElements sharing top and bottom
        rows, ordered left to right without overlapping columns.
        """
        grouped: List[Element] = []
        i = 0
        while i < len(elements):
            element = elements[i]
            if isinstance(element, BoxElement):
                run = [element]
                j = i + 1
                while j < len(elements) and self._row_aligned(run[-1], elements[j]):
                    run.append(elements[j])
                    j += 1
                if len(run) >= 2:
                    align = span_alignment(
                        run[0].bounds.left,
                        run[-1].bounds.right,
                        run[0].bounds.top,
                        container,
                    )
                    grouped.append(Row(children=tuple(run), align=align))
                    i = j
                    continue
            grouped.append(element)
            i += 1
        return grouped

    @staticmethod
    def _row_aligned(left: Element, right: Element) -> bool:
        if not isinstance(left, BoxElement) or not isinstance(right, BoxElement):
            return False
        a, b = left.bounds, right.bounds
        return a.top == b.top and a.bottom == b.bottom and a.right <= b.left

    def _parse_row(self, row: int, bounds: Bounds) -> List[Element]:
        text = self._grid.row_text(row, bounds.left + 1, bounds.right)
        if not text.strip():
            return [Spacer(position=self._pos(row, bounds.left + 1))]

        stripped = text.strip()
        col = bounds.left + 1 + (len(text) - len(text.lstrip()))

        segments = [
            (bounds.left + 1 + match.start(), match.group())
            for match in SEGMENT_PATTERN.finditer(text)
        ]
        if len(segments) >= 2 and all(s.startswith(CONTROL_OPENERS) for _, s in segments):
            # A group of inline controls: `[ OK ]  [ Cancel ]`
            for seg_col, segment in segments:
                self._check_syntax(segment, self._pos(row, seg_col))
            parsed = [
                self.registry.parse(segment, Position(row, seg_col), bounds)
                for seg_col, segment in segments
            ]
            if all(isinstance(element, (Button, Link)) for element in parsed):
                end = segments[-1][0] + len(segments[-1][1]) - 1
                children = tuple(self._shift_element(element) for element in parsed)
                return [Row(children=children, align=span_alignment(col, end, row, bounds))]
        else:
            self._check_syntax(stripped, self._pos(row, col))

        element = self.registry.parse(stripped, Position(row, col), bounds)
        return [self._shift_element(element)]

    def _check_syntax(self, content: str, position: Position) -> None:
        if content.startswith("[") and "]" not in content:
            self._diagnostics.append(
                syntax_error(DiagnosticKind.UNCLOSED_BRACKET, position, content)
            )
        elif EMPTY_BUTTON_PATTERN.match(content):
            self._diagnostics.append(
                syntax_error(DiagnosticKind.EMPTY_BUTTON, position, content)
            )
        elif content.startswith("#") and not INPUT_PATTERN.match(content):
            self._diagnostics.append(
                syntax_error(DiagnosticKind.INVALID_ELEMENT, position, content)
            )

    def _pos(self, row: int, col: int) -> Position:
        return Position(row + self._offset, col)

    def _shift_element(self, element: Element) -> Element:
        """Move a recognizer-built element from grid rows to file lines."""
        if self._offset == 0:
            return element
        position = element.position
        return replace(element, position=position.shifted(self._offset))
