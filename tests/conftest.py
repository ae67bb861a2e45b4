"""Pytest configuration and shared fixtures for wyreframe tests."""

from typing import List, Optional

import pytest

from wyreframe.grid import Grid
from wyreframe.parser import WireframeParser


def frame(rows: List[str], width: int, name: Optional[str] = None) -> List[str]:
    """Draw a box with the given interior width around rows."""
    if name:
        top = f"+--- {name} ".ljust(width + 1, "-") + "+"
    else:
        top = "+" + "-" * width + "+"
    body = ["|" + row.ljust(width) + "|" for row in rows]
    bottom = "+" + "-" * width + "+"
    return [top] + body + [bottom]


def nested_boxes(levels: int) -> str:
    """Build `levels` concentric boxes, each two columns and one row inside the last."""
    size = levels * 2
    width = size * 2 + 2
    height = size + 2
    canvas = [[" "] * width for _ in range(height)]
    for level in range(levels):
        top, left = level, level * 2
        bottom, right = height - 1 - level, width - 1 - level * 2
        for col in range(left, right + 1):
            canvas[top][col] = "-"
            canvas[bottom][col] = "-"
        for row in range(top, bottom + 1):
            canvas[row][left] = "|"
            canvas[row][right] = "|"
        for row, col in ((top, left), (top, right), (bottom, left), (bottom, right)):
            canvas[row][col] = "+"
    return "\n".join("".join(row).rstrip() for row in canvas)


@pytest.fixture
def parser():
    """Default WireframeParser instance."""
    return WireframeParser()


@pytest.fixture
def simple_box():
    """A single empty box."""
    return "+----+\n|    |\n+----+"


@pytest.fixture
def simple_grid(simple_box):
    """Grid built from the simple box."""
    return Grid.from_text(simple_box)


@pytest.fixture
def login_wireframe():
    """Login scene using every inline element kind."""
    box = frame(
        [
            "",
            "  * Welcome back",
            "  #email",
            "  #password",
            "  [x] Remember me",
            "=" * 27,
            "         [ Login ]",
            '  "Forgot password?"',
        ],
        27,
        name="Login",
    )
    header = ["@scene: login", "@title: Sign In", "@transition: fade", ""]
    return "\n".join(header + box)


@pytest.fixture
def side_by_side():
    """Two evenly spaced boxes holding [ OK ] inside a 25-wide parent."""
    return "\n".join(
        frame(
            [
                " +--------+   +--------+",
                " | [ OK ] |   | [ OK ] |",
                " +--------+   +--------+",
            ],
            25,
        )
    )


@pytest.fixture
def deep_wireframe():
    """Six concentric boxes: nesting depth 5."""
    return nested_boxes(6)


@pytest.fixture
def make_frame():
    """The frame() helper, for tests that draw their own boxes."""
    return frame


@pytest.fixture
def make_nested():
    """The nested_boxes() helper."""
    return nested_boxes
