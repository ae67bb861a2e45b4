"""
Tests for the debug module.

These tests verify visual_diff, used to show what the fixer changed.
"""

from wyreframe.debug import changed_columns, visual_diff


class TestVisualDiff:
    """Tests for visual_diff."""

    def test_identical(self):
        """Test identical inputs report no differences."""
        text = "+----+\n|    |\n+----+"
        result = visual_diff(text, text)
        assert "VISUAL DIFF" in result
        assert "No differences found." in result

    def test_single_line_change(self):
        """Test a changed line is shown with both versions."""
        before = "+--------+\n| Hello   |\n+--------+"
        after = "+--------+\n| Hello  |\n+--------+"
        result = visual_diff(before, after)
        assert "Found 1 differing line(s)" in result
        assert "  2: - || Hello   ||" in result
        assert "     + || Hello  ||" in result

    def test_diff_columns_one_based(self):
        """Test differing columns are listed one-based."""
        result = visual_diff("abc", "abd")
        assert "Diff at col(s): [3]" in result

    def test_extra_lines(self):
        """Test a line present in only one input is a difference."""
        result = visual_diff("a", "a\nb")
        assert "Found 1 differing line(s)" in result

    def test_hidden_lines_marked(self):
        """Test unchanged lines away from any change collapse to '...'."""
        before = "\n".join(["x"] * 14)
        after = "\n".join(["x"] * 3 + ["y"] + ["x"] * 6 + ["y"] + ["x"] * 3)
        result = visual_diff(before, after, context_lines=1)
        assert "Found 2 differing line(s)" in result
        # Before the first change, between the two, and after the last.
        assert result.split("\n").count("...") == 3

    def test_no_marker_when_everything_shown(self):
        """Test no '...' appears when all lines are within context."""
        result = visual_diff("a\nb\nc", "a\nB\nc")
        assert "..." not in result.split("\n")

    def test_caret_under_changed_column(self):
        """Test the caret line points at the changed character."""
        result = visual_diff("| ab|", "| ac|")
        lines = result.split("\n")
        caret = lines[lines.index("     + || ac||") + 1]
        assert caret == " " * 8 + "   ^"

    def test_notes_listed(self):
        """Test notes are listed by line after the diff."""
        result = visual_diff("abc", "abd", notes={1: ["changed c to d"]})
        assert result.endswith("Notes:\n  line 1: changed c to d")


class TestChangedColumns:
    """Tests for changed_columns."""

    def test_same_length(self):
        """Test differing characters are found."""
        assert changed_columns("abcd", "abxd") == [2]

    def test_different_length(self):
        """Test extra characters on either side count as changes."""
        assert changed_columns("ab", "abcd") == [2, 3]
        assert changed_columns("abcd", "ab") == [2, 3]
