"""
Wyreframe - ASCII Wireframes to Structured UI Documents

A Python library for parsing ASCII wireframe diagrams (boxes drawn with
+ - | = and inline markup for buttons, inputs, links and checkboxes) into
a typed document tree of scenes and UI elements.

Example:
    >>> from wyreframe import parse
    >>> result = parse('''
    ... +-------------------+
    ... |  [ Login ]        |
    ... +-------------------+
    ... ''')
    >>> result.success
    True
    >>> result.ast.scenes[0].id
    'main'

Auto-fix Example:
    >>> from wyreframe import fix
    >>> result = fix(text)
    >>> print(result.diff())

Debug Mode Example:
    >>> parser = WireframeParser()
    >>> result = parser.parse(text, debug=True)
    >>> print(parser.get_trace().summary())
"""

from .alignment import AlignmentStrategy, calculate_alignment
from .debug import visual_diff
from .elements import ElementRecognizer, ParserRegistry, slugify
from .errors import (
    Diagnostic,
    DiagnosticKind,
    Direction,
    FixError,
    InteractionSyntaxError,
    ParseError,
    Severity,
)
from .fixer import FixedIssue, Fixer, FixResult, fix, fix_only
from .grid import Cell, CellKind, Grid
from .hierarchy import HierarchyBuilder, HierarchyResult
from .interactions import (
    BackAction,
    CallAction,
    ForwardAction,
    GotoAction,
    Interaction,
    InteractionParser,
    ValidateAction,
    merge_interactions,
)
from .models import (
    AST,
    Alignment,
    Bounds,
    Box,
    BoxElement,
    Button,
    Checkbox,
    Divider,
    Input,
    Link,
    Position,
    Row,
    Scene,
    Spacer,
    Text,
)
from .parser import ParseResult, WireframeParser, parse, parse_or_raise, parse_wireframe
from .semantic import SemanticParser
from .shapes import BoxTracer, ShapeDetector
from .tracer import ParseTrace, PipelineStage, TraceAttempt

__version__ = "0.1.0"

__all__ = [
    # Main API
    "WireframeParser",
    "ParseResult",
    "parse",
    "parse_wireframe",
    "parse_or_raise",
    # Fixer
    "Fixer",
    "FixResult",
    "FixedIssue",
    "fix",
    "fix_only",
    # Diagnostics
    "Diagnostic",
    "DiagnosticKind",
    "Direction",
    "Severity",
    "ParseError",
    "FixError",
    "InteractionSyntaxError",
    # Pipeline stages
    "Grid",
    "Cell",
    "CellKind",
    "BoxTracer",
    "ShapeDetector",
    "HierarchyBuilder",
    "HierarchyResult",
    "SemanticParser",
    "ParserRegistry",
    "ElementRecognizer",
    "AlignmentStrategy",
    "calculate_alignment",
    "slugify",
    # Model
    "AST",
    "Scene",
    "Position",
    "Bounds",
    "Box",
    "Alignment",
    "BoxElement",
    "Button",
    "Input",
    "Link",
    "Checkbox",
    "Text",
    "Divider",
    "Row",
    "Spacer",
    # Interactions
    "Interaction",
    "InteractionParser",
    "GotoAction",
    "BackAction",
    "ForwardAction",
    "ValidateAction",
    "CallAction",
    "merge_interactions",
    # Debug/Tracing (for development and debugging)
    "ParseTrace",
    "PipelineStage",
    "TraceAttempt",
    "visual_diff",
]
