"""Unit tests for stacked_pr.output."""

from stacked_pr.output import format_stack


class TestFormatStack:
    """Tests for stack text rendering."""

    def test_both_blocks(self, make_pr) -> None:
        """Test the detailed and compact blocks with the current marker."""
        stack = [
            make_pr(10, title="A"),
            make_pr(11, title="B"),
            make_pr(12, title="C", state="MERGED"),
        ]

        text = format_stack(stack, current=10)

        assert text == (
            "\n"
            "stack:\n"
            "- #10 (OPEN): A <-\n"
            "- #11 (OPEN): B\n"
            "- #12 (MERGED): C\n"
            "--------\n"
            "\n"
            "stack:\n"
            "- #10 <-\n"
            "- #11\n"
            "- #12\n"
        )

    def test_marker_on_middle_entry(self, make_pr) -> None:
        """Test only the current PR's lines are marked."""
        text = format_stack([make_pr(1), make_pr(2), make_pr(3)], current=2)

        marked = [line for line in text.splitlines() if line.endswith(" <-")]
        assert marked == ["- #2 (OPEN): PR 2 <-", "- #2 <-"]

    def test_current_not_in_stack(self, make_pr) -> None:
        """Test no marker when the current PR is absent."""
        text = format_stack([make_pr(1), make_pr(2)], current=9)

        assert "<-" not in text

    def test_state_printed_verbatim(self, make_pr) -> None:
        """Test state text is not normalized."""
        text = format_stack([make_pr(4, state="closed")], current=4)

        assert "- #4 (closed): PR 4 <-" in text
