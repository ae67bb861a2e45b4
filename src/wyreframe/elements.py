"""
Element recognizers for box content lines.

Each recognizer turns one trimmed content line into a typed element. The
registry tries them by descending priority and falls back to plain text.
"""

import re
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from .alignment import AlignmentStrategy, calculate_alignment
from .models import Bounds, Button, Checkbox, Element, Input, Link, Position, Text

BUTTON_PATTERN = re.compile(r"^\[([^\[\]]*)\]$")
INPUT_PATTERN = re.compile(r"^#([A-Za-z_][A-Za-z0-9_-]*)(?:\s+(.+))?$")
CHECKBOX_PATTERN = re.compile(r"^\[([ xX])\]\s+(.*)$")
LINK_PATTERN = re.compile(r'^"([^"]+)"$')
EMPHASIS_PATTERN = re.compile(r"^\*\s+(.+)$")


def slugify(text: str) -> str:
    """Convert element text to an identifier: 'Log In!' -> 'log-in'."""
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower())
    return slug.strip("-")


class ElementRecognizer(ABC):
    """
    Base class for content recognizers.

    Subclasses declare a priority and implement can_parse/parse. parse may
    still return None after can_parse accepted the content, in which case
    the registry moves on to the next recognizer.
    """

    priority: int = 0
    strategy: AlignmentStrategy = AlignmentStrategy.RESPECT_POSITION

    @abstractmethod
    def can_parse(self, content: str) -> bool:
        pass

    @abstractmethod
    def parse(self, content: str, position: Position, bounds: Bounds) -> Optional[Element]:
        """
        Build an element from content.

        Args:
            content: Trimmed content line.
            position: Grid position of the first content character.
            bounds: Bounds of the enclosing box.

        Returns:
            The element, or None to reject the content.
        """
        pass

    def align(self, content: str, position: Position, bounds: Bounds):
        return calculate_alignment(content, position, bounds, self.strategy)


class ButtonRecognizer(ElementRecognizer):
    """`[ Submit ]`"""

    priority = 100

    def can_parse(self, content: str) -> bool:
        return BUTTON_PATTERN.match(content) is not None

    def parse(self, content, position, bounds):
        match = BUTTON_PATTERN.match(content)
        if not match:
            return None
        text = match.group(1).strip()
        if not text:
            return None
        return Button(
            id=slugify(text) or f"button-{position.row}-{position.col}",
            text=text,
            position=position,
            align=self.align(content, position, bounds),
        )


class InputRecognizer(ElementRecognizer):
    """`#email` or `#email Enter your email`"""

    priority = 90
    strategy = AlignmentStrategy.ALWAYS_LEFT

    def can_parse(self, content: str) -> bool:
        return INPUT_PATTERN.match(content) is not None

    def parse(self, content, position, bounds):
        match = INPUT_PATTERN.match(content)
        if not match:
            return None
        return Input(id=match.group(1), position=position, placeholder=match.group(2))


class CheckboxRecognizer(ElementRecognizer):
    """`[x] Remember me` / `[ ] Remember me`"""

    priority = 85
    strategy = AlignmentStrategy.ALWAYS_LEFT

    def can_parse(self, content: str) -> bool:
        return CHECKBOX_PATTERN.match(content) is not None

    def parse(self, content, position, bounds):
        match = CHECKBOX_PATTERN.match(content)
        if not match:
            return None
        label = match.group(2).strip()
        if not label:
            return None
        return Checkbox(checked=match.group(1) in "xX", label=label, position=position)


class LinkRecognizer(ElementRecognizer):
    """`"Forgot password?"`"""

    priority = 80

    def can_parse(self, content: str) -> bool:
        return LINK_PATTERN.match(content) is not None

    def parse(self, content, position, bounds):
        match = LINK_PATTERN.match(content)
        if not match:
            return None
        text = match.group(1).strip()
        if not text:
            return None
        return Link(
            id=slugify(text) or f"link-{position.row}-{position.col}",
            text=text,
            position=position,
            align=self.align(content, position, bounds),
        )


class EmphasisRecognizer(ElementRecognizer):
    """`* Welcome back`"""

    priority = 70

    def can_parse(self, content: str) -> bool:
        return EMPHASIS_PATTERN.match(content) is not None

    def parse(self, content, position, bounds):
        match = EMPHASIS_PATTERN.match(content)
        if not match:
            return None
        return Text(
            content=match.group(1).strip(),
            position=position,
            emphasis=True,
            align=self.align(content, position, bounds),
        )


class TextRecognizer(ElementRecognizer):
    """Fallback: anything else is plain text."""

    priority = 1
    strategy = AlignmentStrategy.ALWAYS_LEFT

    def can_parse(self, content: str) -> bool:
        return True

    def parse(self, content, position, bounds):
        return Text(content=content, position=position, align=self.align(content, position, bounds))


DEFAULT_RECOGNIZERS = (
    ButtonRecognizer(),
    InputRecognizer(),
    CheckboxRecognizer(),
    LinkRecognizer(),
    EmphasisRecognizer(),
    TextRecognizer(),
)


class ParserRegistry:
    """Priority-ordered set of recognizers with a plain text fallback."""

    def __init__(self, recognizers: Sequence[ElementRecognizer] = DEFAULT_RECOGNIZERS):
        self.recognizers: List[ElementRecognizer] = sorted(
            recognizers, key=lambda r: r.priority, reverse=True
        )
        self.fallback = TextRecognizer()

    def parse(self, content: str, position: Position, bounds: Bounds) -> Element:
        for recognizer in self.recognizers:
            if not recognizer.can_parse(content):
                continue
            element = recognizer.parse(content, position, bounds)
            if element is not None:
                return element
        return self.fallback.parse(content, position, bounds)
