"""
Tests for finding, reading and listing table files on disk.
"""

import os

import pytest

from table_roller.content_loader.table_source import TableDirectory, standardize_search
from table_roller.tables.table_types import LookupFailedError, NotATableError
from tests.helpers import write_file


class TestStandardizeSearch:
    """Tests for standardize_search."""

    @pytest.mark.parametrize("search", [
        "TestTable",
        "TestTable.md",
        "testtable",
        "./testtable",
        ".\\TestTable.md",
        "  TestTable  ",
    ])
    def test_plain_names(self, search):
        assert standardize_search(search) == "testtable.md"

    def test_path_components_use_os_separator(self):
        expected = os.path.join("test", "testtable.md")
        assert standardize_search("Test/TestTable") == expected
        assert standardize_search("Test\\TestTable.md") == expected


class TestFindTables:
    """Tests for TableDirectory.find_tables."""

    @pytest.mark.parametrize("query", ["TestTable", "testtable.md", "Test/TestTable", "./TestTable"])
    def test_top_level_table(self, table_directory, table_root, query):
        assert table_directory.find_tables(query) == [table_root / "Test" / "TestTable.md"]

    @pytest.mark.parametrize("query", [
        "SubTestTable",
        "subtesttable",
        "testdir/SubTestTable",
        "Test/testdir/SubTestTable.md",
    ])
    def test_nested_table(self, table_directory, table_root, query):
        expected = [table_root / "Test" / "testdir" / "SubTestTable.md"]
        assert table_directory.find_tables(query) == expected

    def test_name_must_match_whole_file_name(self, table_directory, table_root):
        """'TestTable' does not also match 'SubTestTable' or 'TestTableTable'."""
        assert len(table_directory.find_tables("TestTable")) == 1

    def test_same_name_in_several_directories(self, table_directory, table_root):
        other = write_file(table_root / "Other" / "TestTable.md", "* other\n")
        matches = table_directory.find_tables("TestTable")
        assert matches == sorted([other, table_root / "Test" / "TestTable.md"])
        assert table_directory.find_table("TestTable") == matches[0]

    def test_not_found(self, table_directory):
        with pytest.raises(LookupFailedError, match="i_dont_exist.md"):
            table_directory.find_tables("I_Dont_Exist")

    def test_empty_query(self, table_directory):
        with pytest.raises(LookupFailedError):
            table_directory.find_tables("   ")

    def test_hidden_directories_are_skipped(self, table_directory):
        with pytest.raises(LookupFailedError):
            table_directory.find_tables("Secret")

    def test_non_markdown_files_are_skipped(self, table_directory):
        with pytest.raises(LookupFailedError):
            table_directory.find_tables("notes.txt")

    def test_missing_root(self, tmp_path):
        with pytest.raises(LookupFailedError, match="directory not found"):
            TableDirectory(tmp_path / "nowhere").find_tables("TestTable")


class TestReadAndLoad:
    """Tests for read_table, lookup and load_table."""

    def test_read_table(self, table_directory, table_root):
        source = table_directory.read_table(table_root / "Test" / "testdir" / "SubTestTable.md")
        assert source.name == "SubTestTable"
        assert source.lines == ["* Sub Option1", "* Sub Option2"]

    def test_unreadable_file(self, table_directory, table_root):
        with pytest.raises(LookupFailedError):
            table_directory.read_table(table_root / "Test")

    def test_lookup(self, table_directory, table_root):
        source = table_directory.lookup("testdir/subtesttable")
        assert source.path == table_root / "Test" / "testdir" / "SubTestTable.md"

    def test_load_table(self, table_directory):
        table = table_directory.load_table("SubTestTable")
        assert table.name == "SubTestTable"
        assert table.literals() == ["Sub Option1", "Sub Option2"]

    def test_load_range_table(self, table_directory):
        table = table_directory.load_table("TestTableTable")
        assert table.dice.notation == "2d6"
        assert table.lookup(5) == "Uncertain"

    def test_load_non_table(self, table_directory, table_root):
        write_file(table_root / "Test" / "Prose.md", "Some notes.\nMore notes.\n")
        with pytest.raises(NotATableError):
            table_directory.load_table("Prose")


class TestListTables:
    """Tests for list_tables."""

    def test_listing_with_query(self, table_directory, table_root):
        entries = table_directory.list_tables("testtable")
        test_dir = f"{table_root}{os.sep}Test"
        assert [(e.depth, e.label, e.is_directory) for e in entries] == [
            (0, test_dir, True),
            (1, "TestTable.md", False),
            (1, "TestTableTable.md", False),
            (1, f"{test_dir}{os.sep}testdir", True),
            (2, "SubTestTable.md", False),
        ]

    def test_query_filters_files_but_not_directories(self, table_directory):
        entries = table_directory.list_tables("sub")
        files = [e.label for e in entries if not e.is_directory]
        directories = [e for e in entries if e.is_directory]
        assert files == ["SubTestTable.md"]
        assert len(directories) == 2

    def test_listing_skips_hidden_directories(self, table_directory):
        labels = [e.label for e in table_directory.list_tables()]
        assert not any("Secret" in label or ".hidden" in label for label in labels)
        assert "notes.txt" not in labels
