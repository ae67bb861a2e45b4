"""
Alignment inference from an element's position inside its container.

The ratio of free space on each side of the content decides whether the
element was drawn flush left, flush right or centered.
"""

from enum import Enum

from .models import Alignment, Bounds, Position

LEFT_THRESHOLD = 0.2  # content hugging one side
FAR_THRESHOLD = 0.3  # plenty of room on the other side
CENTER_TOLERANCE = 0.15


class AlignmentStrategy(Enum):
    RESPECT_POSITION = "respect_position"
    ALWAYS_LEFT = "always_left"


def calculate_alignment(
    content: str,
    position: Position,
    box_bounds: Bounds,
    strategy: AlignmentStrategy = AlignmentStrategy.RESPECT_POSITION,
) -> Alignment:
    """
    Infer the alignment of content within the interior of box_bounds.

    Args:
        content: Trimmed content text.
        position: Grid position of the first content character.
        box_bounds: Bounds of the enclosing box, border included.
        strategy: ALWAYS_LEFT skips the computation.

    Returns:
        LEFT, CENTER or RIGHT.
    """
    if strategy is AlignmentStrategy.ALWAYS_LEFT:
        return Alignment.LEFT

    interior_width = box_bounds.right - box_bounds.left - 2
    if interior_width <= 0:
        return Alignment.LEFT

    left_space = position.col - (box_bounds.left + 1)
    content_end = position.col + len(content)
    right_space = (box_bounds.right - 1) - content_end + 1

    left_ratio = left_space / interior_width
    right_ratio = right_space / interior_width

    if left_ratio < LEFT_THRESHOLD and right_ratio > FAR_THRESHOLD:
        return Alignment.LEFT
    if right_ratio < LEFT_THRESHOLD and left_ratio > FAR_THRESHOLD:
        return Alignment.RIGHT
    if abs(left_ratio - right_ratio) < CENTER_TOLERANCE:
        return Alignment.CENTER
    return Alignment.LEFT


def span_alignment(left: int, right: int, row: int, box_bounds: Bounds) -> Alignment:
    """Alignment of an inclusive column span, used for grouped elements."""
    width = right - left + 1
    return calculate_alignment(" " * width, Position(row, left), box_bounds)
