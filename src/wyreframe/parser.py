"""
Parser module for wireframe documents.

Combines the grid, shape detection, hierarchy and semantic stages into
the public parse entry points. Every stage reports its diagnostics; the
parse fails if and only if at least one of them is an error.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .elements import ParserRegistry
from .errors import (
    Diagnostic,
    ParseError,
    duplicate_scene_id,
    split_by_severity,
    unusual_spacing,
)
from .grid import Grid
from .hierarchy import DEFAULT_MAX_NESTING_DEPTH, HierarchyBuilder
from .interactions import InteractionParser, merge_interactions, parse_interactions
from .models import AST, Position, Scene
from .scenes import split_scenes
from .semantic import SemanticParser
from .shapes import ShapeDetector
from .tracer import ParseTrace

logger = logging.getLogger(__name__)


@dataclass
class ParseResult:
    """
    Result of parsing a wireframe.

    Attributes:
        ast: The document, or None when any error was found.
        errors: Error diagnostics in pipeline order.
        warnings: Warning diagnostics; present on success and failure.
    """

    ast: Optional[AST] = None
    errors: List[Diagnostic] = field(default_factory=list)
    warnings: List[Diagnostic] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return self.errors + self.warnings


def normalize(text: str) -> str:
    return text.replace("\r\n", "\n")


class WireframeParser:
    """
    Parse ASCII wireframes into an AST.

    Example:
        >>> parser = WireframeParser()
        >>> result = parser.parse('''
        ... +--------------+
        ... |  [ Login ]   |
        ... +--------------+
        ... ''')
        >>> result.success
        True
    """

    def __init__(
        self,
        max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH,
        pipe_search_radius: int = 3,
        interaction_parser: Optional[InteractionParser] = None,
        registry: Optional[ParserRegistry] = None,
    ):
        """
        Initialize the parser.

        Args:
            max_nesting_depth: Nesting depth above which DeepNesting is warned
            pipe_search_radius: How far from its expected column a '|' is
                looked for before an edge counts as unclosed
            interaction_parser: Collaborator used for interaction DSL text
            registry: Element recognizers (default set when omitted)
        """
        if max_nesting_depth < 0:
            raise ValueError("max_nesting_depth must be non-negative")
        if pipe_search_radius < 0:
            raise ValueError("pipe_search_radius must be non-negative")

        self.max_nesting_depth = max_nesting_depth
        self.pipe_search_radius = pipe_search_radius
        self.interaction_parser = interaction_parser
        self.registry = registry or ParserRegistry()
        self._trace: Optional[ParseTrace] = None

    def parse(
        self, text: str, interactions: Optional[str] = None, debug: bool = False
    ) -> ParseResult:
        """
        Parse wireframe text and optional interaction DSL text.

        Args:
            text: Wireframe source
            interactions: Interaction DSL source for the configured
                interaction parser
            debug: Record a ParseTrace retrievable with get_trace()

        Returns:
            ParseResult with the AST on success and all diagnostics
        """
        if interactions is not None and self.interaction_parser is None:
            raise ValueError("interactions given but no interaction_parser configured")

        trace = ParseTrace(input_text=text) if debug else None
        self._trace = trace

        source = normalize(text)
        diagnostics: List[Diagnostic] = []

        for row, line in enumerate(source.split("\n")):
            if "\t" in line:
                diagnostics.append(unusual_spacing(Position(row, line.index("\t")), line))
        if trace:
            trace.add_stage(
                "normalize",
                {"lines": source.count("\n") + 1, "tab_lines": len(diagnostics)},
            )

        blocks = split_scenes(source)
        if trace:
            trace.add_stage(
                "split_scenes",
                {
                    "scenes": [block.scene_id for block in blocks],
                    "offsets": [block.line_offset for block in blocks],
                },
            )

        detector = ShapeDetector(self.pipe_search_radius)
        builder = HierarchyBuilder(self.max_nesting_depth)
        semantic = SemanticParser(self.registry)
        scenes: List[Scene] = []

        for block in blocks:
            offset = block.line_offset
            grid = Grid.from_lines(block.lines)
            if trace:
                trace.add_stage(
                    f"grid:{block.scene_id}",
                    {"width": grid.width, "height": grid.height, "line_offset": offset},
                    grid,
                )

            detection = detector.detect(grid)
            diagnostics.extend(d.shifted(offset) for d in detection.errors)
            if trace:
                self._record_attempts(trace, block.scene_id, offset, detection)
                trace.add_stage(
                    f"shapes:{block.scene_id}",
                    {
                        "boxes": [str(b.bounds.shifted(offset)) for b in detection.boxes],
                        "errors": len(detection.errors),
                    },
                )

            hierarchy = builder.build(detection.boxes)
            diagnostics.extend(d.shifted(offset) for d in hierarchy.errors)
            diagnostics.extend(d.shifted(offset) for d in hierarchy.warnings)
            if trace:
                trace.add_stage(
                    f"hierarchy:{block.scene_id}",
                    {
                        "roots": len(hierarchy.roots),
                        "overlaps": len(hierarchy.errors),
                        "warnings": len(hierarchy.warnings),
                    },
                )

            scene, semantic_diagnostics = semantic.parse_scene(block, grid, hierarchy.roots)
            diagnostics.extend(semantic_diagnostics)
            scenes.append(scene)
            if trace:
                trace.add_stage(
                    f"elements:{block.scene_id}",
                    {
                        "elements": len(scene.elements),
                        "title": scene.title,
                        "transition": scene.transition,
                        "device": scene.device,
                    },
                )

        diagnostics.extend(self._check_scene_ids(scenes))
        ast = AST(scenes=tuple(scenes))

        if interactions is not None:
            parsed, interaction_diagnostics = parse_interactions(
                self.interaction_parser, interactions
            )
            ast, merge_diagnostics = merge_interactions(ast, parsed)
            diagnostics.extend(interaction_diagnostics)
            diagnostics.extend(merge_diagnostics)
            if trace:
                trace.add_stage(
                    "interactions",
                    {
                        "interactions": len(parsed),
                        "errors": len(interaction_diagnostics) + len(merge_diagnostics),
                    },
                )

        errors, warnings = split_by_severity(diagnostics)
        logger.debug(
            "Parsed %d scenes: %d errors, %d warnings", len(scenes), len(errors), len(warnings)
        )
        if errors:
            return ParseResult(ast=None, errors=errors, warnings=warnings)
        return ParseResult(ast=ast, errors=[], warnings=warnings)

    def get_trace(self) -> Optional[ParseTrace]:
        """Trace of the last parse run with debug=True, else None."""
        return self._trace

    @staticmethod
    def _check_scene_ids(scenes: List[Scene]) -> List[Diagnostic]:
        first_seen: Dict[str, Position] = {}
        diagnostics = []
        for scene in scenes:
            position = Position(scene.line, 0)
            if scene.id in first_seen:
                diagnostics.append(
                    duplicate_scene_id(scene.id, position, first_seen[scene.id])
                )
            else:
                first_seen[scene.id] = position
        return diagnostics

    @staticmethod
    def _record_attempts(trace: ParseTrace, scene_id: str, offset: int, detection) -> None:
        for attempt in detection.attempts:
            row, col = attempt.start.row + offset, attempt.start.col
            if attempt.ok:
                trace.add_attempt(
                    scene_id, row, col, "box", str(attempt.box.bounds.shifted(offset))
                )
            elif attempt.start in detection.suppressed:
                trace.add_attempt(
                    scene_id, row, col, "suppressed", "corner belongs to another box"
                )
            else:
                kinds = ", ".join(e.kind.value for e in attempt.errors)
                trace.add_attempt(scene_id, row, col, "error", kinds)


def parse(
    text: str,
    interactions: Optional[str] = None,
    interaction_parser: Optional[InteractionParser] = None,
) -> ParseResult:
    """
    Convenience function to parse a wireframe.

    Args:
        text: Wireframe source
        interactions: Optional interaction DSL source
        interaction_parser: Collaborator that parses the DSL

    Returns:
        ParseResult
    """
    return WireframeParser(interaction_parser=interaction_parser).parse(text, interactions)


def parse_wireframe(text: str) -> ParseResult:
    """Parse only the wireframe structure, without interactions."""
    return WireframeParser().parse(text)


def parse_or_raise(
    text: str,
    interactions: Optional[str] = None,
    interaction_parser: Optional[InteractionParser] = None,
) -> AST:
    """
    Parse and return the AST.

    Raises:
        ParseError: If any error diagnostic was produced
    """
    result = parse(text, interactions, interaction_parser)
    if not result.success:
        raise ParseError(result.errors, normalize(text))
    return result.ast
