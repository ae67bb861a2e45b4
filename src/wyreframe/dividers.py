"""Detection of full-width '=' separator rows inside a box."""

from typing import List

from .grid import CellKind, Grid, is_kind
from .models import Bounds, Position


def find_dividers(grid: Grid, bounds: Bounds) -> List[int]:
    """
    Return the interior rows of a box that are full-width divider rows.

    A divider row has '=' in every interior column. Shorter runs are left
    to the element parser as ordinary text.

    Args:
        grid: The grid the box was traced from.
        bounds: Bounds of the box (border included).

    Returns:
        Row numbers in top-to-bottom order.
    """
    interior_width = bounds.right - bounds.left - 1
    if interior_width <= 0:
        return []

    rows = []
    for row in range(bounds.top + 1, bounds.bottom):
        run = grid.scan_right(Position(row, bounds.left + 1), is_kind(CellKind.DIVIDER))
        if len(run) >= interior_width:
            rows.append(row)
    return rows
