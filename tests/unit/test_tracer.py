"""
Tests for the tracer module.

These tests verify the debug tracing infrastructure used to capture
detailed information about the wireframe parsing pipeline.
"""

from wyreframe.grid import Grid
from wyreframe.tracer import ParseTrace, PipelineStage, TraceAttempt


class TestTraceAttempt:
    """Tests for TraceAttempt dataclass."""

    def test_creation(self):
        """Test basic creation of TraceAttempt."""
        attempt = TraceAttempt(scene="main", row=2, col=0, outcome="error", reason="UnclosedBox")
        assert attempt.scene == "main"
        assert attempt.row == 2
        assert attempt.outcome == "error"

    def test_str(self):
        """Test string representation."""
        attempt = TraceAttempt("login", 4, 0, "box", "[4,0 .. 13,28]")
        result = str(attempt)
        assert "[login]" in result
        assert "(4,0)" in result
        assert "box" in result


class TestPipelineStage:
    """Tests for PipelineStage dataclass."""

    def test_creation_basic(self):
        """Test basic creation without grid snapshot."""
        stage = PipelineStage(name="split_scenes", data={"scenes": ["main"]})
        assert stage.name == "split_scenes"
        assert stage.grid_snapshot is None

    def test_str_with_snapshot(self):
        """Test string representation includes the grid preview."""
        stage = PipelineStage(
            name="grid:main", data={"width": 6}, grid_snapshot=["+----+", "+----+"]
        )
        result = str(stage)
        assert "=== Stage: grid:main ===" in result
        assert "width: 6" in result
        assert "|+----+|" in result

    def test_str_truncates_long_values(self):
        """Test long data values are shortened."""
        stage = PipelineStage(name="x", data={"long": "a" * 200})
        assert "..." in str(stage)


class TestParseTrace:
    """Tests for ParseTrace."""

    def test_add_stage_with_grid(self, simple_grid, simple_box):
        """Test stages snapshot the grid."""
        trace = ParseTrace()
        trace.add_stage("grid:main", {"width": 6}, simple_grid)
        assert trace.get_grid_at_stage("grid:main") == simple_box.split("\n")

    def test_add_stage_copies_data(self):
        """Test later changes to the data dict do not leak into the trace."""
        trace = ParseTrace()
        data = {"boxes": 1}
        trace.add_stage("shapes:main", data)
        data["boxes"] = 2
        assert trace.get_stage("shapes:main").data["boxes"] == 1

    def test_empty_grid_snapshot(self):
        """Test an empty grid records no preview."""
        trace = ParseTrace()
        trace.add_stage("grid:main", {}, Grid.from_text(""))
        assert trace.get_grid_at_stage("grid:main") is None

    def test_get_stage_missing(self):
        """Test unknown stage names return None."""
        assert ParseTrace().get_stage("nope") is None

    def test_attempt_queries(self):
        """Test filtering attempts by position and outcome."""
        trace = ParseTrace()
        trace.add_attempt("main", 0, 0, "box", "[0,0 .. 2,5]")
        trace.add_attempt("main", 2, 0, "suppressed", "corner belongs to another box")
        trace.add_attempt("main", 4, 0, "error", "UnclosedBox")
        assert len(trace.get_attempts_at(2, 0)) == 1
        assert [a.row for a in trace.get_attempts_by_outcome("error")] == [4]

    def test_summary(self):
        """Test the summary lists stages and outcome counts."""
        trace = ParseTrace(input_text="+----+")
        trace.add_stage("normalize", {})
        trace.add_attempt("main", 0, 0, "box", "")
        trace.add_attempt("main", 2, 0, "suppressed", "")
        trace.add_attempt("main", 3, 0, "box", "")
        summary = trace.summary()
        assert "PARSE TRACE SUMMARY" in summary
        assert "[-] normalize" in summary
        assert "Corners traced: 3" in summary
        assert "  box: 2" in summary

    def test_dump(self):
        """Test the full dump includes details."""
        trace = ParseTrace()
        trace.add_stage("normalize", {"lines": 3})
        trace.add_attempt("main", 0, 0, "box", "[0,0 .. 2,5]")
        dump = trace.dump()
        assert "DETAILED TRACE" in dump
        assert "TRACE ATTEMPTS:" in dump
        assert "[main] (0,0): box" in dump

    def test_dump_to_file(self, tmp_path):
        """Test writing the dump to disk."""
        trace = ParseTrace()
        trace.add_stage("normalize", {})
        path = tmp_path / "trace.txt"
        trace.dump_to_file(str(path))
        assert "PARSE TRACE SUMMARY" in path.read_text(encoding="utf-8")
