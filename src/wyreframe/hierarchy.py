"""
Containment hierarchy for traced boxes.

Uses networkx for:
- Parent/child relations between boxes (a forest over arena indices)
- Depth of each box below its root

Boxes are kept in an arena (a plain list) and the forest is built as a
separate DiGraph over their indices. The final immutable Box tree is
materialized bottom-up in one pass.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import networkx as nx

from .errors import Diagnostic, deep_nesting, overlapping_boxes
from .models import Box

logger = logging.getLogger(__name__)

DEFAULT_MAX_NESTING_DEPTH = 4


@dataclass
class HierarchyResult:
    """Roots of the containment forest plus everything found on the way."""

    roots: List[Box] = field(default_factory=list)
    errors: List[Diagnostic] = field(default_factory=list)
    warnings: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class HierarchyBuilder:
    """
    Builds a parent/child forest from a flat list of boxes.

    Each box's parent is the smallest box that strictly contains it.
    Partially overlapping boxes are rejected with one diagnostic per pair.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_NESTING_DEPTH):
        if max_depth < 0:
            raise ValueError("max_depth must be non-negative")
        self.max_depth = max_depth
        self.graph: Optional[nx.DiGraph] = None

    def build(self, boxes: Sequence[Box]) -> HierarchyResult:
        arena = list(boxes)
        result = HierarchyResult()

        # Larger boxes first; sorted() is stable so ties keep trace order.
        order = sorted(range(len(arena)), key=lambda i: -arena[i].bounds.area)

        self.graph = nx.DiGraph()
        self.graph.add_nodes_from(range(len(arena)))

        for idx in order:
            parent = self._smallest_container(arena, idx)
            if parent is not None:
                self.graph.add_edge(parent, idx)

        result.errors = self._find_overlaps(arena)

        roots = [idx for idx in range(len(arena)) if self.graph.in_degree(idx) == 0]
        roots.sort(key=lambda i: (arena[i].bounds.top, arena[i].bounds.left))

        for root in roots:
            depths: Dict[int, int] = nx.shortest_path_length(self.graph, root)
            deepest = max(depths, key=lambda i: (depths[i], -i))
            if depths[deepest] > self.max_depth:
                result.warnings.append(
                    deep_nesting(
                        arena[deepest].bounds.top_left, depths[deepest], self.max_depth
                    )
                )

        if result.errors:
            logger.debug("Hierarchy rejected: %d overlapping pairs", len(result.errors))
            return result

        materialized = self._materialize(arena)
        result.roots = [materialized[idx] for idx in roots]
        logger.debug("Built hierarchy: %d boxes, %d roots", len(arena), len(roots))
        return result

    @staticmethod
    def _smallest_container(arena: List[Box], idx: int) -> Optional[int]:
        bounds = arena[idx].bounds
        best = None
        for other, box in enumerate(arena):
            if other == idx or not box.bounds.strictly_contains(bounds):
                continue
            if best is None or box.bounds.area < arena[best].bounds.area:
                best = other
        return best

    @staticmethod
    def _find_overlaps(arena: List[Box]) -> List[Diagnostic]:
        errors = []
        for i in range(len(arena)):
            for j in range(i + 1, len(arena)):
                a, b = arena[i].bounds, arena[j].bounds
                if a.strictly_contains(b) or b.strictly_contains(a):
                    continue
                if a.overlaps(b):
                    errors.append(overlapping_boxes(a, b))
        return errors

    def _materialize(self, arena: List[Box]) -> Dict[int, Box]:
        """Create the immutable tree, children before parents."""
        built: Dict[int, Box] = {}
        for idx in reversed(list(nx.topological_sort(self.graph))):
            children = sorted(
                (built[child] for child in self.graph.successors(idx)),
                key=lambda box: (box.bounds.top, box.bounds.left),
            )
            built[idx] = Box(
                bounds=arena[idx].bounds, name=arena[idx].name, children=tuple(children)
            )
        return built
