"""
Table file discovery for the table roller.

Tables are markdown files anywhere under a root directory. A table is
named by its file name or by a path fragment, case-insensitively and with
or without the '.md' extension:

    weapons
    Weapons.md
    items/weapons
    ./Items/Weapons.md
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from table_roller.tables.table_builder import parse_rollable_table
from table_roller.tables.table_types import LookupFailedError, RollableTable


logger = logging.getLogger(__name__)

TABLE_SUFFIX = ".md"


@dataclass
class TableSource:
    """Raw text of one table file plus its display name."""

    name: str
    path: Path
    lines: list[str] = field(default_factory=list)


@dataclass
class ListingEntry:
    """One line of a directory listing."""

    depth: int
    label: str
    is_directory: bool


def standardize_search(search: str) -> str:
    """
    Normalize a table name for matching.

    Strips a leading './' or '.\\', uses the OS path separator, lowercases,
    and appends '.md' when missing.
    """
    search = search.strip()
    for prefix in ("./", ".\\"):
        if search.startswith(prefix):
            search = search[len(prefix):]
    search = search.replace("/", os.sep).replace("\\", os.sep)
    search = search.lower()
    if not search.endswith(TABLE_SUFFIX):
        search = search + TABLE_SUFFIX
    return search


class TableDirectory:
    """
    Finds, reads and lists table files under a root directory.

    This is the lookup collaborator for reference resolution: given a
    target it returns the table's lines and name, or raises
    LookupFailedError.
    """

    def __init__(self, root: Path = Path(".")):
        self.root = Path(root)

    def find_tables(self, query: str) -> list[Path]:
        """
        Find every table file matching a name or path fragment.

        Args:
            query: Table name, optionally with directories and extension

        Returns:
            Sorted list of matching paths

        Raises:
            LookupFailedError: If the query is empty or nothing matches
        """
        if not query or not query.strip():
            raise LookupFailedError(f"Please provide a table name. Directory: {self.root}")
        if not self.root.is_dir():
            raise LookupFailedError(f"Table directory not found: {self.root}")

        search = standardize_search(query)
        matches = []
        for path in self.root.rglob(f"*{TABLE_SUFFIX}"):
            if self._is_hidden(path) or not path.is_file():
                continue
            relative = str(path.relative_to(self.root)).lower()
            if relative == search or relative.endswith(os.sep + search):
                matches.append(path)

        if not matches:
            raise LookupFailedError(f"Table not found: {search}")
        return sorted(matches)

    def find_table(self, query: str) -> Path:
        """Find the first table file matching a name or path fragment."""
        return self.find_tables(query)[0]

    def read_table(self, path: Path) -> TableSource:
        """
        Read a table file's lines.

        Raises:
            LookupFailedError: If the file cannot be read
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                lines = f.read().splitlines()
        except (OSError, UnicodeDecodeError) as e:
            raise LookupFailedError(f"Couldn't read table file {path}: {e}") from e
        return TableSource(name=path.stem, path=path, lines=lines)

    def lookup(self, target: str) -> TableSource:
        """Find and read the table a reference target names."""
        source = self.read_table(self.find_table(target))
        logger.debug(f"Resolved table '{target}' to {source.path}")
        return source

    def load_table(self, target: str) -> RollableTable:
        """
        Find, read and parse the table a target names.

        Raises:
            LookupFailedError: If no readable table matches
            NotATableError: If the file is not a rollable table
        """
        source = self.lookup(target)
        return parse_rollable_table(source.lines, source.name)

    def list_tables(self, query: str = "") -> list[ListingEntry]:
        """
        List directories and table files whose names contain query.

        Directories are always listed (hidden ones skipped) so matching
        files keep their context; files come before subdirectories.
        """
        return self._list_directory(self.root, 0, query.lower())

    def _list_directory(self, directory: Path, depth: int, query: str) -> list[ListingEntry]:
        entries: list[ListingEntry] = []
        try:
            children = sorted(directory.iterdir(), key=lambda p: p.name.lower())
        except OSError as e:
            raise LookupFailedError(f"Error reading directory {directory}: {e}") from e

        subdirectories = []
        for child in children:
            if child.is_dir():
                if not child.name.startswith("."):
                    subdirectories.append(child)
            elif child.name.lower().endswith(TABLE_SUFFIX) and query in child.name.lower():
                entries.append(ListingEntry(depth=depth, label=child.name, is_directory=False))

        for subdirectory in subdirectories:
            label = f"{self._display_path(directory)}{os.sep}{subdirectory.name}"
            entries.append(ListingEntry(depth=depth, label=label, is_directory=True))
            entries.extend(self._list_directory(subdirectory, depth + 1, query))
        return entries

    def _display_path(self, directory: Path) -> str:
        if directory == self.root:
            return str(self.root)
        return f"{self.root}{os.sep}{directory.relative_to(self.root)}"

    def _is_hidden(self, path: Path) -> bool:
        relative = path.relative_to(self.root)
        return any(part.startswith(".") for part in relative.parts[:-1])
