"""
Table type definitions for the table roller.

A RollableTable maps every possible roll value to an entry. Ranges are
stored compactly: the lowest key of a range holds the Literal outcome and
the remaining keys hold a Redirect back to it.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Union

from table_roller.data_models import DiceResult, DiceRoller, DiceSpec


# =============================================================================
# ERRORS
# =============================================================================


class TableError(Exception):
    """Base class for table parsing and rolling errors."""
    pass


class NotATableError(TableError):
    """Raised when text has neither list nor range-table shape, or no usable rows."""
    pass


class MalformedRowError(TableError):
    """Raised when a range-table row's roll column is neither a number nor a range."""
    pass


class LookupFailedError(TableError):
    """Raised when a referenced table cannot be found or read."""
    pass


class InvariantViolationError(TableError):
    """Raised when a drawn value has no usable table entry."""
    pass


class CyclicReferenceError(TableError):
    """Raised when nested table references exceed the resolution depth."""

    def __init__(self, chain: list[str], max_depth: int):
        self.chain = list(chain)
        self.max_depth = max_depth
        super().__init__(
            f"Reference depth exceeded {max_depth}: {' -> '.join(self.chain)}"
        )


# =============================================================================
# TABLE ENTRIES
# =============================================================================


class TableFormat(str, Enum):
    """Source shapes a rollable table can be written in."""
    LIST = "list"                  # "* item" / "1. item" lines
    RANGE_TABLE = "range_table"    # "| 1-3 | item |" rows


@dataclass(frozen=True)
class Literal:
    """An outcome stored directly at its key."""
    text: str


@dataclass(frozen=True)
class Redirect:
    """A range key pointing at the key holding the range's Literal."""
    canonical_key: int


TableEntry = Union[Literal, Redirect]


@dataclass(frozen=True)
class RollableTable:
    """
    A weighted random-selection table.

    Invariants (guaranteed by the builder):
    - every Redirect points at a key holding a Literal
    - max is the highest key present
    """
    name: str
    entries: Mapping[int, TableEntry]
    max: int
    dice: DiceSpec

    def __post_init__(self):
        # Freeze the mapping so a built table cannot be altered
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def lookup(self, value: int) -> str:
        """
        Return the outcome text for a roll value.

        Follows at most one redirect hop.

        Raises:
            InvariantViolationError: If the value has no entry, or a redirect
                does not land on a Literal
        """
        entry = self.entries.get(value)
        if entry is None:
            raise InvariantViolationError(
                f"Table '{self.name}' has no entry for roll {value} "
                f"(dice {self.dice.notation}, max {self.max})"
            )
        if isinstance(entry, Redirect):
            target = self.entries.get(entry.canonical_key)
            if not isinstance(target, Literal):
                raise InvariantViolationError(
                    f"Table '{self.name}' redirect at {value} -> {entry.canonical_key} "
                    f"does not resolve to an outcome"
                )
            return target.text
        return entry.text

    def roll(self, dice_roller: DiceRoller) -> tuple[DiceResult, str]:
        """
        Roll on this table and return the result.

        Args:
            dice_roller: Source of randomness

        Returns:
            Tuple of (dice_result, outcome_text)
        """
        dice_result = dice_roller.roll(self.dice, f"table roll: {self.name}")
        return dice_result, self.lookup(dice_result.total)

    def literals(self) -> list[str]:
        """All outcome texts, in key order."""
        return [
            entry.text
            for _, entry in sorted(self.entries.items())
            if isinstance(entry, Literal)
        ]

    def key_spans(self) -> list[tuple[int, int, str]]:
        """Contiguous (min, max, text) spans, in key order."""
        spans: list[tuple[int, int, str]] = []
        for key in sorted(self.entries):
            entry = self.entries[key]
            canonical = key if isinstance(entry, Literal) else entry.canonical_key
            if spans and spans[-1][1] == key - 1 and self._canonical_of(spans[-1][1]) == canonical:
                low, _, text = spans[-1]
                spans[-1] = (low, key, text)
            else:
                spans.append((key, key, self.lookup(key)))
        return spans

    def _canonical_of(self, key: int) -> int:
        entry = self.entries[key]
        return key if isinstance(entry, Literal) else entry.canonical_key

    def as_markdown_table(self) -> str:
        """Render the table back into range-table source form."""
        title = self.name.replace("|", "\\|")
        lines = [f"| {self.dice.notation} | {title} |", "|---|---|"]
        for low, high, text in self.key_spans():
            roll = str(low) if low == high else f"{low}-{high}"
            cell = text.replace("|", "\\|").replace("\n", " ")
            lines.append(f"| {roll} | {cell} |")
        return "\n".join(lines)


@dataclass
class TableResult:
    """
    Complete result of a table roll, including any nested reference rolls.

    Captures the full chain of results for tables that reference others.
    """
    table_name: str
    notation: str
    roll_total: int
    dice_rolled: list[int] = field(default_factory=list)

    # Outcome before and after reference substitution
    result_text: str = ""
    resolved_text: str = ""

    # Nested results, in the order references were resolved
    sub_results: list["TableResult"] = field(default_factory=list)

    # References left in place because their table could not be used
    unresolved: list[str] = field(default_factory=list)

    source_path: Optional[str] = None

    def get_full_description(self) -> str:
        """Get complete description including all sub-results."""
        parts = [f"{self.table_name} [{self.notation} = {self.roll_total}]: {self.result_text}"]
        for sub in self.sub_results:
            for line in sub.get_full_description().splitlines():
                parts.append(f"  -> {line}")
        return "\n".join(parts)
