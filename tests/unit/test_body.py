"""Unit tests for stacked_pr.body - stack section and dependency phrase parsing."""

import pytest

from stacked_pr.body import extract_dependencies, extract_stack_info


class TestExtractStackInfo:
    """Tests for the "stack:" section parser."""

    def test_two_entries(self) -> None:
        """Test the basic two-entry section."""
        assert extract_stack_info("Stack:\n- #2 foo\n- #5 bar\n") == [2, 5]

    def test_single_entry_is_not_a_stack(self) -> None:
        """Test that one list line is not enough."""
        assert extract_stack_info("Stack:\n- #2 foo\n") is None

    def test_no_section(self) -> None:
        """Test bodies without a stack section."""
        assert extract_stack_info("Just a description\n- #2 foo\n- #3 bar\n") is None
        assert extract_stack_info("") is None

    def test_header_is_case_insensitive(self) -> None:
        """Test STACK:, stack: and Stack: headers."""
        assert extract_stack_info("STACK:\n- #1\n- #2\n") == [1, 2]
        assert extract_stack_info("stack:\n- #1\n- #2\n") == [1, 2]

    def test_preserves_declared_order(self) -> None:
        """Test that numbers come back in list order, not sorted."""
        body = "Stack:\n- #30 top\n- #12 middle\n- #7 bottom\n"

        assert extract_stack_info(body) == [30, 12, 7]

    def test_section_inside_longer_body(self) -> None:
        """Test a section surrounded by other text."""
        body = "## Summary\nAdds things.\n\nStack:\n- #10 A\n- #11 B <-\n- #12 C\n\nThanks!"

        assert extract_stack_info(body) == [10, 11, 12]

    def test_last_line_without_newline(self) -> None:
        """Test a section at the very end of the body."""
        assert extract_stack_info("Stack:\n- #4 a\n- #9 b") == [4, 9]

    def test_indented_entries_and_crlf(self) -> None:
        """Test indented list lines and Windows line endings."""
        assert extract_stack_info("Stack:\r\n  - #4 a\r\n  - #9 b\r\n") == [4, 9]

    def test_first_number_on_line_wins(self) -> None:
        """Test that later numbers on a list line are ignored."""
        assert extract_stack_info("Stack:\n- #4 follows #3\n- #9\n") == [4, 9]

    def test_stops_at_first_non_list_line(self) -> None:
        """Test that the section ends at the first line not shaped like '- #N'."""
        body = "Stack:\n- #1 a\n- #2 b\nnot a list line\n- #3 c\n"

        assert extract_stack_info(body) == [1, 2]

    def test_only_newline_ends_an_entry(self) -> None:
        """Test that a form feed inside a list line does not start a new entry."""
        assert extract_stack_info("Stack:\n- #4 a\x0c#5\n- #9\n") == [4, 9]

    def test_duplicates_dropped(self) -> None:
        """Test that a repeated number keeps its first position."""
        assert extract_stack_info("Stack:\n- #1\n- #2\n- #1\n") == [1, 2]

    def test_duplicates_do_not_count_towards_minimum(self) -> None:
        """Test that two lines naming the same PR are not a stack."""
        assert extract_stack_info("Stack:\n- #1\n- #1\n") is None

    def test_list_line_without_hash_not_matched(self) -> None:
        """Test that '- 5' is not a stack entry."""
        assert extract_stack_info("Stack:\n- 5\n- 6\n") is None

    def test_non_ascii_digits_not_matched(self) -> None:
        """Test that only ASCII digits form a stack entry."""
        assert extract_stack_info("Stack:\n- #\u0661\n- #\u0662\n") is None
        assert extract_stack_info("Stack:\n- #4 a\n- #\u0669 b\n- #9\n") is None


class TestExtractDependencies:
    """Tests for dependency phrase extraction."""

    def test_left_to_right_order(self) -> None:
        """Test mixed phrases come back in reading order."""
        assert extract_dependencies("Depends on #3 and based on #7") == [3, 7]

    @pytest.mark.parametrize(
        "body",
        [
            "depends on #5",
            "based on #5",
            "stacked on #5",
            "build on #5",
            "builds on #5",
            "require #5",
            "requires #5",
            "follow #5",
            "follows #5",
        ],
    )
    def test_all_phrase_forms(self, body: str) -> None:
        """Test every supported phrase form."""
        assert extract_dependencies(body) == [5]

    def test_case_insensitive(self) -> None:
        """Test upper and mixed case phrases."""
        assert extract_dependencies("DEPENDS ON #1, Stacked On #2") == [1, 2]

    def test_flexible_whitespace(self) -> None:
        """Test multiple spaces and newlines between words."""
        assert extract_dependencies("depends   on\n#8") == [8]

    def test_requires_space_before_hash(self) -> None:
        """Test that '#' must follow whitespace."""
        assert extract_dependencies("depends on#8") == []

    def test_plain_references_ignored(self) -> None:
        """Test that bare '#N' mentions are not dependencies."""
        assert extract_dependencies("Fixes #4, see #5") == []

    def test_repeats_kept(self) -> None:
        """Test that repeated references are all returned."""
        assert extract_dependencies("depends on #2; also requires #2") == [2, 2]

    def test_empty_body(self) -> None:
        """Test an empty description."""
        assert extract_dependencies("") == []

    def test_non_ascii_digits_not_matched(self) -> None:
        """Test that only ASCII digits are read as a reference."""
        assert extract_dependencies("depends on #\u0663") == []
        assert extract_dependencies("depends on #\u0663, requires #2") == [2]
