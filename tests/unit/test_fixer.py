"""Unit tests for the fixer module."""

import pytest

from wyreframe.errors import (
    Diagnostic,
    DiagnosticKind,
    FixError,
    misaligned_pipe,
    mismatched_width,
    syntax_error,
    unusual_spacing,
)
from wyreframe.fixer import (
    FixedIssue,
    Fixer,
    FixResult,
    FixStrategy,
    MisalignedPipeFix,
    MismatchedWidthFix,
    TabFix,
    UnclosedBracketFix,
    fix,
    fix_only,
)
from wyreframe.models import Position
from wyreframe.parser import parse

MISALIGNED = "+--------+\n| Hello   |\n+--------+"


class TestStrategies:
    """Tests for individual fix strategies."""

    def test_misaligned_pipe_moves_left(self):
        """Test a pipe one column too far right is pulled back."""
        diag = misaligned_pipe(Position(1, 10), expected_col=9, actual_col=10)
        text, issue = MisalignedPipeFix().apply(MISALIGNED, diag)
        assert text.split("\n")[1] == "| Hello  |"
        assert issue.line == 2
        assert issue.column == 11

    def test_misaligned_pipe_moves_right(self):
        """Test a pipe too far left is pushed out with spaces."""
        text = "+------+\n| ab  |\n+------+"
        diag = misaligned_pipe(Position(1, 6), expected_col=7, actual_col=6)
        fixed, _ = MisalignedPipeFix().apply(text, diag)
        assert fixed.split("\n")[1] == "| ab   |"

    def test_misaligned_pipe_declines_over_content(self):
        """Test content between the columns blocks the fix."""
        text = "+----+\n| abcd|\n+----+"
        diag = misaligned_pipe(Position(1, 6), expected_col=4, actual_col=6)
        assert MisalignedPipeFix().apply(text, diag) is None

    def test_tab_fix(self):
        """Test tabs become spaces."""
        text = "+----+\n|\tab |\n+----+"
        diag = unusual_spacing(Position(1, 1), "|\tab |")
        fixed, issue = TabFix(tab_width=1).apply(text, diag)
        assert fixed.split("\n")[1] == "| ab |"
        assert "1 tab" in issue.description

    def test_unclosed_bracket_keeps_border(self):
        """Test the bracket is added without moving the right border."""
        text = "+------------+\n|  [ Login   |\n+------------+"
        diag = syntax_error(DiagnosticKind.UNCLOSED_BRACKET, Position(1, 3), "[ Login")
        fixed, _ = UnclosedBracketFix().apply(text, diag)
        assert fixed.split("\n")[1] == "|  [ Login ] |"

    def test_unclosed_bracket_content_mismatch(self):
        """Test a stale diagnostic is declined."""
        diag = syntax_error(DiagnosticKind.UNCLOSED_BRACKET, Position(1, 3), "[ Other")
        assert UnclosedBracketFix().apply("+--+\n|  [ Login |\n+--+", diag) is None

    def test_mismatched_width_extends_bottom(self):
        """Test a short bottom edge is extended to the top edge's corner."""
        text = "+------+\n|      |\n+----+"
        diag = mismatched_width(Position(0, 0), 7, 5, 7, 2, 0, 5)
        fixed, issue = MismatchedWidthFix().apply(text, diag)
        assert fixed.split("\n")[2] == "+------+"
        assert "bottom" in issue.description

    def test_mismatched_width_extends_top(self):
        """Test a short top edge is extended to the bottom edge's corner."""
        text = "+----+\n|    |\n+------+"
        diag = mismatched_width(Position(0, 0), 5, 7, 5, 2, 0, 7)
        fixed, _ = MismatchedWidthFix().apply(text, diag)
        assert fixed.split("\n")[0] == "+------+"

    def test_mismatched_width_blocked(self):
        """Test text in the way blocks the extension."""
        text = "+----+ab\n|    |\n+------+"
        diag = mismatched_width(Position(0, 0), 5, 7, 5, 2, 0, 7)
        assert MismatchedWidthFix().apply(text, diag) is None

    def test_can_fix(self):
        """Test strategies declare the kinds they handle."""
        assert TabFix().can_fix(DiagnosticKind.UNUSUAL_SPACING)
        assert not TabFix().can_fix(DiagnosticKind.EMPTY_BUTTON)


class TestFixer:
    """Tests for Fixer."""

    def test_invalid_configuration(self):
        """Test iteration and tab settings are validated."""
        with pytest.raises(ValueError):
            Fixer(max_iterations=0)
        with pytest.raises(ValueError):
            Fixer(tab_width=0)

    def test_clean_text_unchanged(self, simple_box):
        """Test a valid wireframe comes back as is."""
        result = Fixer().fix(simple_box)
        assert result.text == simple_box
        assert result.fixed == []
        assert result.remaining == []
        assert not result.changed

    def test_fix_misaligned_pipe(self):
        """Test the misaligned pipe example is fixed and then parses."""
        result = Fixer().fix(MISALIGNED)
        assert result.text == "+--------+\n| Hello  |\n+--------+"
        assert len(result.fixed) == 1
        assert result.fixed[0].original.kind is DiagnosticKind.MISALIGNED_PIPE
        assert result.remaining == []
        assert parse(result.text).success

    def test_fix_tabs_first(self):
        """Test tab warnings are fixed before anything else."""
        result = Fixer(tab_width=2).fix("+------+\n|\tab  |\n+------+")
        assert result.fixed[0].original.kind is DiagnosticKind.UNUSUAL_SPACING
        assert result.text == "+------+\n|  ab  |\n+------+"
        assert parse(result.text).success

    def test_fix_tab_then_pipe(self):
        """Test a tab that pushes the border out needs a second fix."""
        result = Fixer(tab_width=4).fix("+------+\n|\tab |\n+------+")
        kinds = [issue.original.kind for issue in result.fixed]
        assert kinds == [DiagnosticKind.UNUSUAL_SPACING, DiagnosticKind.MISALIGNED_PIPE]
        assert result.text == "+------+\n|    ab|\n+------+"

    def test_fix_mismatched_width(self):
        """Test a short bottom border is extended."""
        result = fix("+------+\n|      |\n+----+")
        assert result.text == "+------+\n|      |\n+------+"
        assert parse(result.text).success

    def test_fix_unclosed_bracket(self):
        """Test a missing ']' is added."""
        result = fix("+------------+\n|  [ Login   |\n+------------+")
        assert result.text == "+------------+\n|  [ Login ] |\n+------------+"
        assert result.remaining == []

    def test_unfixable_remains(self):
        """Test unfixable problems are returned as remaining."""
        result = fix("+----+\n|    |\n+----")
        assert result.fixed == []
        assert [d.kind for d in result.remaining] == [DiagnosticKind.UNCLOSED_BOX]

    def test_warnings_kept_in_remaining(self, deep_wireframe):
        """Test warnings without a fix are reported as remaining."""
        result = fix(deep_wireframe)
        assert [d.kind for d in result.remaining] == [DiagnosticKind.DEEP_NESTING]

    def test_multiple_fixes(self):
        """Test several problems are fixed one parse at a time."""
        text = "\n".join(
            [
                "+--------+",
                "| Hello   |",
                "+--------+",
                "+------+",
                "|      |",
                "+----+",
            ]
        )
        result = fix(text)
        assert len(result.fixed) == 2
        assert result.remaining == []
        assert parse(result.text).success

    def test_iteration_limit(self):
        """Test a fix loop that never settles raises FixError."""

        class Flip(FixStrategy):
            kinds = (DiagnosticKind.UNCLOSED_BOX,)

            def apply(self, text, diagnostic):
                return text + " ", self.issue(diagnostic, "flip")

        fixer = Fixer(max_iterations=5, strategies=[Flip()])
        with pytest.raises(FixError) as exc_info:
            fixer.fix("+----+\n|    |\n+----")
        assert "5 iterations" in str(exc_info.value)
        assert exc_info.value.diagnostics

    def test_diff(self):
        """Test the result renders a visual diff."""
        result = fix(MISALIGNED)
        diff = result.diff()
        assert "VISUAL DIFF" in diff
        assert "Found 1 differing line(s)" in diff
        assert "  line 2: Moved '|' on line 2 from column 11 to column 10" in diff


class TestConvenienceFunctions:
    """Tests for fix() and fix_only()."""

    def test_fix_returns_result(self, simple_box):
        """Test fix() returns a FixResult."""
        assert isinstance(fix(simple_box), FixResult)

    def test_fix_only(self):
        """Test fix_only() returns just the text."""
        assert fix_only(MISALIGNED) == "+--------+\n| Hello  |\n+--------+"

    def test_fix_only_unfixable(self):
        """Test fix_only() gives back the original when nothing applies."""
        text = "+----+\n|    |\n+----"
        assert fix_only(text) == text

    def test_fixed_issue_fields(self):
        """Test FixedIssue carries the original diagnostic and location."""
        diag = Diagnostic(DiagnosticKind.EMPTY_BUTTON, Position(2, 4))
        issue = FixStrategy.issue(diag, "x")
        assert issue == FixedIssue(original=diag, description="x", line=3, column=5)
