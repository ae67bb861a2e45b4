"""
Interaction layer contract and merge.

The interaction DSL is parsed by an external collaborator that implements
InteractionParser. It hands back one Interaction per referenced element;
merge_interactions attaches them to the matching elements of the AST and
reports ids that do not exist. Elements are never invented.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from .errors import Diagnostic, InteractionSyntaxError, invalid_interaction, unknown_element_id
from .models import AST, INTERACTIVE_ELEMENTS, BoxElement, Button, Position, Row

logger = logging.getLogger(__name__)

BUTTON_VARIANTS = ("primary", "secondary", "ghost")


@dataclass(frozen=True)
class GotoAction:
    target: str
    transition: Optional[str] = None
    condition: Optional[str] = None


@dataclass(frozen=True)
class BackAction:
    pass


@dataclass(frozen=True)
class ForwardAction:
    pass


@dataclass(frozen=True)
class ValidateAction:
    fields: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CallAction:
    function: str
    args: Tuple[str, ...] = ()
    condition: Optional[str] = None


@dataclass(frozen=True)
class Interaction:
    """
    Behavior attached to one element.

    Attributes:
        element_id: Id of the target element (button, link or input).
        properties: Scalar properties, e.g. {"variant": "primary"}.
        actions: Ordered action records.
        line: One-based line in the interaction source, if known.
    """

    element_id: str
    properties: Dict[str, Any] = field(default_factory=dict)
    actions: Tuple[Any, ...] = ()
    line: int = 1


class InteractionParser(Protocol):
    """Protocol for the external interaction DSL parser."""

    def parse(self, text: str) -> List[Interaction]:
        """Parse DSL text; raise InteractionSyntaxError when malformed."""
        ...


def parse_interactions(
    parser: InteractionParser, text: str
) -> Tuple[List[Interaction], List[Diagnostic]]:
    """Run the collaborator and turn its syntax errors into diagnostics."""
    try:
        return list(parser.parse(text)), []
    except InteractionSyntaxError as e:
        position = Position(max(e.line - 1, 0), max(e.column - 1, 0))
        return [], [invalid_interaction(str(e), position)]


def merge_interactions(
    ast: AST, interactions: Sequence[Interaction]
) -> Tuple[AST, List[Diagnostic]]:
    """
    Attach interactions to elements by id.

    Args:
        ast: The parsed wireframe.
        interactions: Interactions produced by the collaborator.

    Returns:
        (new_ast, diagnostics) with one UnknownElementId per interaction
        whose id matches no element.
    """
    known = set(ast.element_ids())
    by_id: Dict[str, List[Interaction]] = {}
    diagnostics: List[Diagnostic] = []

    for interaction in interactions:
        if interaction.element_id not in known:
            diagnostics.append(
                unknown_element_id(
                    interaction.element_id, Position(max(interaction.line - 1, 0), 0)
                )
            )
            continue
        by_id.setdefault(interaction.element_id, []).append(interaction)

    if not by_id:
        return ast, diagnostics

    scenes = tuple(
        replace(scene, elements=_attach_all(scene.elements, by_id)) for scene in ast.scenes
    )
    logger.debug("Merged interactions for %d element ids", len(by_id))
    return AST(scenes=scenes), diagnostics


def _attach_all(elements, by_id):
    return tuple(_attach(element, by_id) for element in elements)


def _attach(element, by_id):
    if isinstance(element, (BoxElement, Row)):
        return replace(element, children=_attach_all(element.children, by_id))
    if not isinstance(element, INTERACTIVE_ELEMENTS) or element.id not in by_id:
        return element

    properties = dict(element.properties)
    actions = list(element.actions)
    for interaction in by_id[element.id]:
        properties.update(interaction.properties)
        actions.extend(interaction.actions)

    changes = {"properties": properties, "actions": tuple(actions)}
    if isinstance(element, Button):
        variant = properties.get("variant")
        if variant in BUTTON_VARIANTS:
            changes["variant"] = variant
    return replace(element, **changes)
