"""
Data models for wireframe parsing.

This module contains the value types shared by every stage of the pipeline:
grid geometry (positions and rectangles), traced boxes, the typed UI
elements produced by the semantic stage, and the scene/document containers
that make up the final AST.

Classes:
    Position: Zero-based (row, col) grid coordinate.
    Bounds: Inclusive rectangle in grid coordinates.
    Box: A traced rectangular box, optionally holding nested boxes.
    Alignment: Horizontal alignment of an element inside its container.
    BoxElement, Button, Input, Link, Checkbox, Text, Divider, Row, Spacer:
        The closed set of UI element variants.
    Scene: One screen of the wireframe.
    AST: The parsed document.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union


@dataclass(frozen=True)
class Position:
    """Zero-based grid coordinate."""

    row: int
    col: int

    def right(self, n: int = 1) -> "Position":
        return Position(self.row, self.col + n)

    def left(self, n: int = 1) -> "Position":
        return Position(self.row, self.col - n)

    def down(self, n: int = 1) -> "Position":
        return Position(self.row + n, self.col)

    def up(self, n: int = 1) -> "Position":
        return Position(self.row - n, self.col)

    def shifted(self, rows: int) -> "Position":
        """Return this position moved down by a line offset."""
        return Position(self.row + rows, self.col)

    def __str__(self) -> str:
        return f"({self.row},{self.col})"


@dataclass(frozen=True)
class Bounds:
    """
    Inclusive rectangle in grid coordinates.

    Zero-height or zero-width rectangles are legal and describe a single
    line or column.

    Attributes:
        top: Row of the top edge.
        left: Column of the left edge.
        bottom: Row of the bottom edge.
        right: Column of the right edge.
    """

    top: int
    left: int
    bottom: int
    right: int

    def __post_init__(self):
        if self.top > self.bottom or self.left > self.right:
            raise ValueError(
                f"Invalid bounds: top={self.top} left={self.left} "
                f"bottom={self.bottom} right={self.right}"
            )

    @classmethod
    def from_corners(cls, top_left: Position, bottom_right: Position) -> "Bounds":
        return cls(top_left.row, top_left.col, bottom_right.row, bottom_right.col)

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def top_left(self) -> Position:
        return Position(self.top, self.left)

    def contains(self, pos: Position) -> bool:
        """Inclusive point containment."""
        return self.top <= pos.row <= self.bottom and self.left <= pos.col <= self.right

    def strictly_contains(self, other: "Bounds") -> bool:
        """True if every edge of other lies strictly inside this rectangle."""
        return (
            self.top < other.top
            and self.left < other.left
            and self.bottom > other.bottom
            and self.right > other.right
        )

    def overlaps(self, other: "Bounds") -> bool:
        """
        True if the two rectangles share interior area.

        Rectangles that only touch along an edge (adjacent boxes sharing a
        border column or row) do not overlap.
        """
        return (
            self.left < other.right
            and other.left < self.right
            and self.top < other.bottom
            and other.top < self.bottom
        )

    def shifted(self, rows: int) -> "Bounds":
        return Bounds(self.top + rows, self.left, self.bottom + rows, self.right)

    def __str__(self) -> str:
        return f"[{self.top},{self.left} .. {self.bottom},{self.right}]"


@dataclass(frozen=True)
class Box:
    """
    A rectangular box traced from the grid.

    BoxTracer produces childless boxes; HierarchyBuilder materializes new
    Box values with their nested children attached.
    """

    bounds: Bounds
    name: Optional[str] = None
    children: Tuple["Box", ...] = ()

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def depth(self) -> int:
        """Number of nesting levels below this box (0 for a leaf)."""
        if not self.children:
            return 0
        return 1 + max(child.depth() for child in self.children)


class Alignment(Enum):
    """Horizontal alignment of an element inside its container."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


# UI elements. Box and Row are the only recursive variants.


@dataclass(frozen=True)
class BoxElement:
    bounds: Bounds
    name: Optional[str] = None
    children: Tuple["Element", ...] = ()


@dataclass(frozen=True)
class Button:
    id: str
    text: str
    position: Position
    align: Alignment = Alignment.LEFT
    variant: Optional[str] = None
    properties: Dict[str, Any] = field(default_factory=dict)
    actions: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class Input:
    id: str
    position: Position
    placeholder: Optional[str] = None
    properties: Dict[str, Any] = field(default_factory=dict)
    actions: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class Link:
    id: str
    text: str
    position: Position
    align: Alignment = Alignment.LEFT
    properties: Dict[str, Any] = field(default_factory=dict)
    actions: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class Checkbox:
    checked: bool
    label: str
    position: Position


@dataclass(frozen=True)
class Text:
    content: str
    position: Position
    emphasis: bool = False
    align: Alignment = Alignment.LEFT


@dataclass(frozen=True)
class Divider:
    position: Position


@dataclass(frozen=True)
class Row:
    """Horizontally adjacent elements sharing one alignment."""

    children: Tuple["Element", ...]
    align: Alignment = Alignment.LEFT


@dataclass(frozen=True)
class Spacer:
    """Blank interior line preserved for vertical spacing."""

    position: Position


Element = Union[BoxElement, Button, Input, Link, Checkbox, Text, Divider, Row, Spacer]

# Element kinds that carry an id and can receive interactions.
INTERACTIVE_ELEMENTS = (Button, Input, Link)

DEVICE_TYPES = (
    "desktop",
    "laptop",
    "tablet",
    "tablet-landscape",
    "mobile",
    "mobile-landscape",
)


@dataclass(frozen=True)
class Scene:
    """
    One screen of the wireframe.

    Attributes:
        id: Scene identifier from the @scene directive ("main" by default).
        title: Display title (capitalized id by default).
        transition: Transition effect name ("none" by default).
        device: Target device type ("desktop" by default).
        elements: Top-level elements in reading order.
        line: Zero-based source line where the scene block starts.
    """

    id: str
    title: str
    transition: str = "none"
    device: str = "desktop"
    elements: Tuple[Element, ...] = ()
    line: int = 0


def iter_elements(elements) -> Iterator[Element]:
    """Depth-first walk over elements and all their descendants."""
    for element in elements:
        yield element
        if isinstance(element, (BoxElement, Row)):
            yield from iter_elements(element.children)


@dataclass(frozen=True)
class AST:
    """The parsed wireframe document."""

    scenes: Tuple[Scene, ...] = ()

    @property
    def scene_ids(self) -> List[str]:
        return [scene.id for scene in self.scenes]

    def get_scene(self, scene_id: str) -> Optional[Scene]:
        for scene in self.scenes:
            if scene.id == scene_id:
                return scene
        return None

    def find_element(self, element_id: str) -> Optional[Element]:
        """Return the first interactive element with the given id."""
        for scene in self.scenes:
            for element in iter_elements(scene.elements):
                if isinstance(element, INTERACTIVE_ELEMENTS) and element.id == element_id:
                    return element
        return None

    def element_ids(self) -> List[str]:
        ids = []
        for scene in self.scenes:
            for element in iter_elements(scene.elements):
                if isinstance(element, INTERACTIVE_ELEMENTS):
                    ids.append(element.id)
        return ids
