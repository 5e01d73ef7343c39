"""
Table management and resolution for the table roller.

Finds tables on disk, parses them, rolls on them and resolves any
references their outcomes contain. Tables are parsed fresh for each roll
and never cached.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from table_roller.data_models import DiceRoller
from table_roller.tables.reference_resolver import DEFAULT_MAX_DEPTH, ReferenceResolver
from table_roller.tables.table_builder import parse_rollable_table
from table_roller.tables.table_types import RollableTable, TableResult

if TYPE_CHECKING:
    from table_roller.content_loader.table_source import TableDirectory


logger = logging.getLogger(__name__)


class TableManager:
    """
    Central access point for rolling on table files.

    Handles table lookup by name, parsing, rolling, and nested
    reference resolution.
    """

    def __init__(
        self,
        directory: TableDirectory,
        dice_roller: Optional[DiceRoller] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.directory = directory
        self.dice_roller = dice_roller or DiceRoller()
        self.resolver = ReferenceResolver(
            table_factory=self.directory.load_table,
            dice_roller=self.dice_roller,
            max_depth=max_depth,
        )

    def load_tables(self, query: str) -> list[tuple[Path, RollableTable]]:
        """
        Parse every table file matching a name.

        Raises:
            LookupFailedError: If no table matches or a file is unreadable
            NotATableError: If a matching file is not a rollable table
        """
        tables = []
        for path in self.directory.find_tables(query):
            source = self.directory.read_table(path)
            tables.append((path, parse_rollable_table(source.lines, source.name)))
        return tables

    def roll(self, table: RollableTable) -> TableResult:
        """Roll on a parsed table, resolving references in the outcome."""
        return self.resolver.roll(table)

    def roll_table(self, query: str) -> TableResult:
        """Roll on the first table matching a name."""
        return self.roll_tables(query)[0]

    def roll_tables(self, query: str) -> list[TableResult]:
        """
        Roll once on every table matching a name.

        Tables with the same name can live in different directories; each
        gets its own result.
        """
        results = []
        for path, table in self.load_tables(query):
            result = self.roll(table)
            result.source_path = str(path)
            logger.info(f"Rolled {table.dice.notation} on '{table.name}': {result.roll_total}")
            results.append(result)
        return results
