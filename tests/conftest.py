"""
Pytest fixtures for the table roller test suite.

Provides reusable fixtures for dice, the run log, and a table directory
laid out on disk.
"""

import pytest

from table_roller.content_loader.table_source import TableDirectory
from table_roller.data_models import DiceRoller
from table_roller.observability.run_log import get_run_log, reset_run_log
from tests.helpers import write_file


# =============================================================================
# DICE FIXTURES
# =============================================================================


@pytest.fixture
def seeded_dice():
    """Provide a seeded DiceRoller for reproducible tests."""
    return DiceRoller(seed=42)


@pytest.fixture(autouse=True)
def clean_run_log():
    """Give every test an empty run log."""
    yield reset_run_log()
    reset_run_log()


# =============================================================================
# TABLE DIRECTORY FIXTURES
# =============================================================================


TEST_TABLE = """\
# Test Table

* Option with [SubTestTable](SubTestTable)
"""

SUB_TEST_TABLE = """\
* Sub Option1
* Sub Option2
"""

RANGE_TEST_TABLE = """\
| 2d6 | Reaction |
|-----|----------|
| 2 | Hostile |
| 3-7 | Uncertain |
| 8-11 | Friendly |
| 12 | Helpful |
"""

SECRET_TABLE = """\
* Hidden away
"""

NOTES = "Not a table, and not markdown either.\n"


@pytest.fixture
def table_root(tmp_path):
    """
    Lay out a small table tree:

        Test/TestTable.md           list referencing SubTestTable
        Test/TestTableTable.md      2d6 range table
        Test/notes.txt              ignored
        Test/testdir/SubTestTable.md
        Test/.hidden/Secret.md      ignored
    """
    write_file(tmp_path / "Test" / "TestTable.md", TEST_TABLE)
    write_file(tmp_path / "Test" / "TestTableTable.md", RANGE_TEST_TABLE)
    write_file(tmp_path / "Test" / "notes.txt", NOTES)
    write_file(tmp_path / "Test" / "testdir" / "SubTestTable.md", SUB_TEST_TABLE)
    write_file(tmp_path / "Test" / ".hidden" / "Secret.md", SECRET_TABLE)
    return tmp_path


@pytest.fixture
def table_directory(table_root):
    """Provide a TableDirectory over the sample table tree."""
    return TableDirectory(table_root)


@pytest.fixture
def run_log():
    """Provide the global run log."""
    return get_run_log()
