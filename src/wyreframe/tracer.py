"""
Debug tracing infrastructure for wyreframe.

This module provides data structures for capturing detailed traces of the
parsing pipeline. When debug mode is enabled, the parser records a
snapshot of every pipeline stage and the outcome of every box trace
attempt.

This is primarily useful for:
1. Debugging detection issues (why a box was or was not recognized)
2. Understanding the pipeline flow (seeing intermediate states)
3. Writing targeted tests (verifying specific detection decisions)

Usage:
    >>> parser = WireframeParser()
    >>> result = parser.parse(text, debug=True)
    >>> trace = parser.get_trace()
    >>> print(trace.summary())
    >>> trace.dump_to_file("debug_trace.txt")
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class TraceAttempt:
    """
    Record of tracing one candidate corner.

    Attributes:
        scene: Id of the scene the corner belongs to
        row: File line of the corner (zero-based)
        col: Column of the corner (zero-based)
        outcome: "box", "error" or "suppressed"
        reason: Bounds of the traced box or the diagnostic kinds
    """

    scene: str
    row: int
    col: int
    outcome: str
    reason: str

    def __str__(self) -> str:
        return f"[{self.scene}] ({self.row},{self.col}): {self.outcome} [{self.reason}]"


@dataclass
class PipelineStage:
    """
    Snapshot of state at a pipeline stage.

    The parsing pipeline has these stages:
    1. normalize - Line endings normalized, tab warnings collected
    2. split_scenes - Source split into scene blocks
    3. grid - Grid built for one scene block
    4. shapes - Boxes traced from candidate corners
    5. hierarchy - Containment forest built
    6. elements - Scene elements built
    7. interactions - Interaction layer merged (when provided)

    Attributes:
        name: Name of this pipeline stage
        data: Dictionary of relevant data at this stage
        grid_snapshot: Optional list of grid lines at this point
    """

    name: str
    data: Dict[str, Any]
    grid_snapshot: Optional[List[str]] = None

    def __str__(self) -> str:
        lines = [f"=== Stage: {self.name} ==="]
        for key, value in self.data.items():
            str_val = str(value)
            if len(str_val) > 100:
                str_val = str_val[:100] + "..."
            lines.append(f"  {key}: {str_val}")
        if self.grid_snapshot:
            lines.append("  Grid preview (first 15 rows):")
            for row in self.grid_snapshot[:15]:
                lines.append(f"    |{row}|")
        return "\n".join(lines)


@dataclass
class ParseTrace:
    """
    Complete trace of a parse operation.

    Usage:
        >>> parser = WireframeParser()
        >>> result = parser.parse(text, debug=True)
        >>> trace = parser.get_trace()
        >>>
        >>> # Corners whose trace failed
        >>> for attempt in trace.get_attempts_by_outcome("error"):
        ...     print(attempt)
        >>>
        >>> # Grid of the login scene
        >>> grid = trace.get_grid_at_stage("grid:login")

    Attributes:
        stages: List of pipeline stages with their data
        attempts: One record per candidate corner
        input_text: The original input text
    """

    stages: List[PipelineStage] = field(default_factory=list)
    attempts: List[TraceAttempt] = field(default_factory=list)
    input_text: str = ""

    def add_stage(
        self,
        name: str,
        data: Dict[str, Any],
        grid: Optional[Any] = None,
    ) -> None:
        """
        Add a pipeline stage snapshot.

        Args:
            name: Name of the stage (e.g., "hierarchy:main")
            data: Dictionary of relevant data at this stage
            grid: Optional Grid object to snapshot
        """
        snapshot = None
        if grid is not None:
            rendered = grid.render()
            snapshot = rendered.split("\n") if rendered else []
        self.stages.append(PipelineStage(name, data.copy(), snapshot))

    def add_attempt(self, scene: str, row: int, col: int, outcome: str, reason: str) -> None:
        self.attempts.append(TraceAttempt(scene, row, col, outcome, reason))

    def get_stage(self, name: str) -> Optional[PipelineStage]:
        """Get a specific pipeline stage by name."""
        for stage in self.stages:
            if stage.name == name:
                return stage
        return None

    def get_grid_at_stage(self, name: str) -> Optional[List[str]]:
        stage = self.get_stage(name)
        if stage and stage.grid_snapshot:
            return stage.grid_snapshot
        return None

    def get_attempts_at(self, row: int, col: int) -> List[TraceAttempt]:
        return [a for a in self.attempts if a.row == row and a.col == col]

    def get_attempts_by_outcome(self, outcome: str) -> List[TraceAttempt]:
        return [a for a in self.attempts if a.outcome == outcome]

    def summary(self) -> str:
        """
        Generate a human-readable summary of the trace.

        Returns a string with:
        - Input text
        - Pipeline stages overview
        - Trace attempt statistics
        """
        lines = [
            "=" * 60,
            "PARSE TRACE SUMMARY",
            "=" * 60,
            "",
            f"Input: {repr(self.input_text[:100])}"
            f"{'...' if len(self.input_text) > 100 else ''}",
            "",
            f"Pipeline stages: {len(self.stages)}",
        ]

        for stage in self.stages:
            has_grid = "+" if stage.grid_snapshot else "-"
            lines.append(f"  [{has_grid}] {stage.name}")

        lines.extend(["", f"Corners traced: {len(self.attempts)}", ""])

        outcome_counts: Dict[str, int] = {}
        for attempt in self.attempts:
            outcome_counts[attempt.outcome] = outcome_counts.get(attempt.outcome, 0) + 1

        lines.append("Attempts by outcome:")
        for outcome, count in sorted(outcome_counts.items(), key=lambda x: -x[1]):
            lines.append(f"  {outcome}: {count}")

        return "\n".join(lines)

    def dump(self) -> str:
        """Generate a complete human-readable dump of the trace."""
        lines = [self.summary(), "", "=" * 60, "DETAILED TRACE", "=" * 60, ""]

        lines.append("PIPELINE STAGES:")
        lines.append("-" * 40)
        for stage in self.stages:
            lines.append(str(stage))
            lines.append("")

        lines.append("TRACE ATTEMPTS:")
        lines.append("-" * 40)
        for attempt in self.attempts:
            lines.append(str(attempt))

        return "\n".join(lines)

    def dump_to_file(self, filename: str) -> None:
        """Write the complete trace dump to a file."""
        with open(filename, "w", encoding="utf-8") as f:
            f.write(self.dump())
