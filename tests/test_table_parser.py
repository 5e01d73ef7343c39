"""
Tests for table shape detection and extraction.
"""

import io

import pytest

from table_roller.tables.table_parser import (
    DETECTION_WINDOW,
    detect_format,
    extract_list,
    extract_range_rows,
    is_list_item,
    is_range_table_row,
    parse_roll_range,
    split_row,
    split_stream,
)
from table_roller.tables.table_types import MalformedRowError, NotATableError, TableFormat


class TestLineClassification:
    """Tests for is_list_item and is_range_table_row."""

    @pytest.mark.parametrize("line", ["* foo", "1. foo", "12. foo", "- foo", "– foo"])
    def test_list_items(self, line):
        assert is_list_item(line)

    @pytest.mark.parametrize("line", ["foo", "1 foo", "1.foo", "*foo", "", "---", "| 1 | foo |"])
    def test_not_list_items(self, line):
        assert not is_list_item(line)

    @pytest.mark.parametrize("line", [
        "| 1-2 | bar |",
        "|3-5|bar|",
        "|---|---|",
        "  | 2d6 | Reaction |  ",
        "| 1 | a \\| b |",
    ])
    def test_range_table_rows(self, line):
        assert is_range_table_row(line)

    @pytest.mark.parametrize("line", [
        "| foo | bar | baz |",
        "| foo |",
        "foo | bar",
        "| 1-2 | bar",
        "* foo",
        "",
    ])
    def test_not_range_table_rows(self, line):
        assert not is_range_table_row(line)


class TestDetectFormat:
    """Tests for detect_format."""

    def test_list_after_heading(self):
        assert detect_format(["# Title", "", "* a", "* b"]) == (TableFormat.LIST, 2)

    def test_ordered_list(self):
        assert detect_format(["1. one", "2. two"]) == (TableFormat.LIST, 0)

    def test_range_table(self):
        lines = ["| 2d6 | x |", "|---|---|", "| 2-12 | y |"]
        assert detect_format(lines) == (TableFormat.RANGE_TABLE, 0)

    def test_first_shape_wins(self):
        assert detect_format(["| 1 | x |", "* y"]) == (TableFormat.RANGE_TABLE, 0)

    def test_blank_lines_count_toward_window(self):
        lines = [""] * DETECTION_WINDOW + ["* too late"]
        with pytest.raises(NotATableError):
            detect_format(lines)

    def test_last_line_of_window(self):
        lines = ["prose"] * (DETECTION_WINDOW - 1) + ["* just in time"]
        assert detect_format(lines) == (TableFormat.LIST, DETECTION_WINDOW - 1)

    def test_prose_is_not_a_table(self):
        with pytest.raises(NotATableError):
            detect_format(["Just some notes.", "Nothing to roll here."])

    def test_empty_input(self):
        with pytest.raises(NotATableError):
            detect_format([])


class TestExtractList:
    """Tests for extract_list."""

    def test_unordered(self):
        assert extract_list(["* foo", "* bar", "* baz"]) == ["foo", "bar", "baz"]

    def test_ordered(self):
        assert extract_list(["1. foo", "2. bar", "10. baz"]) == ["foo", "bar", "baz"]

    def test_continuation_lines_join_current_entry(self):
        lines = ["* foo", "  more about foo", "", "* bar"]
        assert extract_list(lines) == ["foo\n  more about foo", "bar"]

    def test_text_before_first_item_is_ignored(self):
        assert extract_list(["Intro", "* foo"]) == ["foo"]

    def test_trailing_whitespace_is_dropped(self):
        assert extract_list(["* foo   ", "* bar\t"]) == ["foo", "bar"]

    def test_only_first_prefix_is_removed(self):
        assert extract_list(["* * nested"]) == ["* nested"]


class TestExtractRangeRows:
    """Tests for split_row and extract_range_rows."""

    def test_rows_in_order_including_header(self):
        lines = ["| foo | bar |", "|---|---|", "| 1-3 | A |", "| 4-6 | B |"]
        assert extract_range_rows(lines) == [
            (" foo ", "bar"),
            ("---", "---"),
            (" 1-3 ", "A"),
            (" 4-6 ", "B"),
        ]

    def test_non_row_lines_are_skipped(self):
        lines = ["| 1 | A |", "A note under the table", "| 2 | B |"]
        assert [text for _, text in extract_range_rows(lines)] == ["A", "B"]

    def test_escaped_pipe_stays_in_text(self):
        assert split_row("| 1 | a \\| b |") == (" 1 ", "a | b")


class TestParseRollRange:
    """Tests for parse_roll_range."""

    @pytest.mark.parametrize("column,expected", [
        (" 7-20 ", (7, 20)),
        (" 10 ", (10, 10)),
        ("3–5", (3, 5)),
        ("3 - 5", (3, 5)),
        ("4-4", (4, 4)),
    ])
    def test_valid(self, column, expected):
        assert parse_roll_range(column) == expected

    @pytest.mark.parametrize("column", [" badinput ", "---", "2d6", "", "1-", "-3"])
    def test_malformed(self, column):
        with pytest.raises(MalformedRowError):
            parse_roll_range(column)

    def test_backwards_range_is_malformed(self):
        with pytest.raises(MalformedRowError):
            parse_roll_range("5-3")


class TestSplitStream:
    """Tests for split_stream."""

    def test_reads_file_like_stream(self):
        stream = io.StringIO("# Title\n* a\n* b\n")
        assert split_stream(stream) == (TableFormat.LIST, ["* a", "* b"])

    def test_keeps_lines_beyond_window(self):
        lines = ["| d8 | x |"] + [f"| {n} | item {n} |" for n in range(1, 9)]
        table_format, table_lines = split_stream(lines)
        assert table_format == TableFormat.RANGE_TABLE
        assert table_lines == lines

    def test_not_a_table(self):
        with pytest.raises(NotATableError):
            split_stream(io.StringIO("one\ntwo\nthree\nfour\nfive\n* six\n"))
