"""
Scene block splitting and directive parsing.

A document holds one or more scenes separated by `---` lines or by a new
`@scene:` directive. Directive lines are blanked rather than removed so
grid rows keep their original line numbers within each block.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List

from .models import DEVICE_TYPES

logger = logging.getLogger(__name__)

DIRECTIVE_PATTERN = re.compile(r"^\s*@(scene|title|transition|device)\s*:\s*(.*?)\s*$")
SEPARATOR = "---"

DEFAULT_SCENE_ID = "main"
DEFAULT_TRANSITION = "none"
DEFAULT_DEVICE = "desktop"


@dataclass
class SceneBlock:
    """
    Raw lines of one scene plus its directives.

    Attributes:
        lines: Wireframe lines with directive lines replaced by blanks.
        line_offset: Zero-based file line of lines[0].
        directives: Parsed @key: value pairs.
        directive_lines: Zero-based file line of each directive.
    """

    lines: List[str] = field(default_factory=list)
    line_offset: int = 0
    directives: Dict[str, str] = field(default_factory=dict)
    directive_lines: Dict[str, int] = field(default_factory=dict)

    @property
    def scene_id(self) -> str:
        return self.directives.get("scene") or DEFAULT_SCENE_ID

    @property
    def title(self) -> str:
        title = self.directives.get("title")
        if title:
            return title
        scene_id = self.scene_id
        return scene_id[:1].upper() + scene_id[1:]

    @property
    def transition(self) -> str:
        return self.directives.get("transition") or DEFAULT_TRANSITION

    @property
    def device(self) -> str:
        """Device preset. Known names are matched case-insensitively."""
        device = self.directives.get("device")
        if not device:
            return DEFAULT_DEVICE
        if device.lower() in DEVICE_TYPES:
            return device.lower()
        logger.debug("Unknown device %r kept as written", device)
        return device

    @property
    def scene_line(self) -> int:
        """File line identifying the scene (its @scene directive if any)."""
        return self.directive_lines.get("scene", self.line_offset)

    def is_empty(self) -> bool:
        return not self.directives and not any(line.strip() for line in self.lines)


def split_scenes(text: str) -> List[SceneBlock]:
    """
    Split normalized source text into scene blocks.

    Empty blocks (nothing but blank lines) are dropped; a document with no
    content yields a single empty block so it still produces one scene.
    """
    lines = text.split("\n")
    blocks: List[SceneBlock] = []
    current = SceneBlock(line_offset=0)

    for line_no, line in enumerate(lines):
        if line.strip() == SEPARATOR:
            blocks.append(current)
            current = SceneBlock(line_offset=line_no + 1)
            continue

        match = DIRECTIVE_PATTERN.match(line)
        if match:
            key, value = match.group(1), match.group(2)
            if key == "scene" and (
                "scene" in current.directives or any(row.strip() for row in current.lines)
            ):
                blocks.append(current)
                current = SceneBlock(line_offset=line_no)
            current.directives[key] = value
            current.directive_lines[key] = line_no
            current.lines.append("")
            continue

        current.lines.append(line)

    blocks.append(current)
    non_empty = [block for block in blocks if not block.is_empty()]
    return non_empty or [blocks[0]]
