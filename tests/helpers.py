"""
Test helpers for the table roller test suite.

Provides deterministic randomness and in-memory table lookup so tests can
choose exactly which rows get rolled.
"""

from pathlib import Path
from typing import Iterable

from table_roller.data_models import DiceRoller
from table_roller.tables.table_types import LookupFailedError, RollableTable


class ScriptedRandom:
    """
    Stand-in for random.Random whose randint returns preset values in order.

    Each value must fall inside the requested bounds, so a script that no
    longer matches the dice being rolled fails loudly.
    """

    def __init__(self, values: Iterable[int]):
        self._values = list(values)

    def seed(self, value=None) -> None:
        pass

    def randint(self, a: int, b: int) -> int:
        if not self._values:
            raise AssertionError(f"ScriptedRandom ran out of values (randint({a}, {b}))")
        value = self._values.pop(0)
        if not a <= value <= b:
            raise AssertionError(f"Scripted value {value} outside randint({a}, {b})")
        return value

    @property
    def remaining(self) -> list[int]:
        return list(self._values)


def scripted_dice(*values: int) -> DiceRoller:
    """A DiceRoller whose dice come up with the given faces, in order."""
    return DiceRoller(rng=ScriptedRandom(values))


def write_file(path: Path, text: str) -> Path:
    """Write text to path, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class TableRegistry:
    """In-memory table factory keyed by reference target."""

    def __init__(self, *tables: RollableTable):
        self.tables = {table.name: table for table in tables}
        self.requested: list[str] = []

    def __call__(self, target: str) -> RollableTable:
        self.requested.append(target)
        if target not in self.tables:
            raise LookupFailedError(f"Table not found: {target}")
        return self.tables[target]
