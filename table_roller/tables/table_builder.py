"""
Weighted table construction.

Turns extracted list entries or range rows into a RollableTable. A range
row "3-7" stores its outcome once at key 3 and a Redirect(3) at keys 4..7,
so every roll value has a constant-time lookup that never needs more than
one redirect hop.
"""

import logging
from itertools import islice
from typing import Iterable, Optional, Sequence

from table_roller.data_models import DiceInterpretation, DiceSpec
from table_roller.tables.dice_notation import parse_dice_spec
from table_roller.tables.table_parser import (
    extract_list,
    extract_range_rows,
    parse_roll_range,
    split_stream,
)
from table_roller.tables.table_types import (
    Literal,
    MalformedRowError,
    NotATableError,
    Redirect,
    RollableTable,
    TableEntry,
    TableFormat,
)


logger = logging.getLogger(__name__)

# Unreachable-entry warnings list at most this many roll values
MAX_MISSING_SHOWN = 10


def build_from_list(entries: Sequence[str], name: str = "") -> RollableTable:
    """
    Build a uniform table from list entries.

    Entry N (1-based) is stored at key N and rolled with a single die
    of len(entries) sides.

    Raises:
        NotATableError: If there are no entries
    """
    if not entries:
        raise NotATableError(f"List table '{name}' has no entries")

    table: dict[int, TableEntry] = {
        key: Literal(text) for key, text in enumerate(entries, start=1)
    }
    return RollableTable(
        name=name,
        entries=table,
        max=len(entries),
        dice=DiceSpec.uniform(len(entries)),
    )


def build_from_rows(rows: Sequence[tuple[str, str]], name: str = "") -> RollableTable:
    """
    Build a weighted table from (roll column, text) rows.

    Rows whose roll column is neither a number nor a range are skipped.
    A dice expression in the first row's roll column (the header, e.g.
    "2d6") sets the table's dice; otherwise a single die of `max` sides
    is used.

    Raises:
        NotATableError: If no row produced an outcome, or none has a
            roll value above 0
    """
    table: dict[int, TableEntry] = {}
    max_roll = 0

    for column, text in rows:
        try:
            low, high = parse_roll_range(column)
        except MalformedRowError as e:
            logger.debug(f"Skipping row in '{name}': {e}")
            continue

        if not _store_row(table, low, high, text, name):
            continue
        max_roll = max(max_roll, high)

    if not table:
        raise NotATableError(f"Table '{name}' has no rows with a roll value or range")
    if max_roll < 1:
        raise NotATableError(f"Table '{name}' has no roll value above 0")

    try:
        dice = _header_dice(rows) or DiceSpec.uniform(max_roll)
    except ValueError as e:
        raise NotATableError(f"Table '{name}' has no usable dice: {e}") from e
    _check_dice_coverage(table, dice, name)

    return RollableTable(name=name, entries=table, max=max_roll, dice=dice)


def _store_row(
    table: dict[int, TableEntry], low: int, high: int, text: str, name: str
) -> bool:
    """
    Store one row's range, leaving keys claimed by earlier rows untouched.

    The outcome goes to the first unclaimed key of the range and the other
    unclaimed keys redirect to it.

    Returns:
        False if every key of the range was already claimed
    """
    free_keys = [key for key in range(low, high + 1) if key not in table]
    if len(free_keys) < high - low + 1:
        logger.warning(
            f"Table '{name}': row {low}-{high} overlaps earlier rows; "
            f"keeping earlier outcomes for the overlap"
        )
    if not free_keys:
        return False

    canonical = free_keys[0]
    table[canonical] = Literal(text)
    for key in free_keys[1:]:
        table[key] = Redirect(canonical)
    return True


def _header_dice(rows: Sequence[tuple[str, str]]) -> Optional[DiceSpec]:
    """Dice expression from the first row's roll column, if any."""
    if not rows:
        return None
    return parse_dice_spec(rows[0][0])


def _check_dice_coverage(table: dict[int, TableEntry], dice: DiceSpec, name: str) -> None:
    """Warn about roll values the dice can produce but the table lacks."""
    if dice.interpretation is DiceInterpretation.SUM:
        candidates = range(dice.min_value, dice.max_value + 1)
    else:
        candidates = sorted(dice.possible_values())

    # Stops after MAX_MISSING_SHOWN + 1 gaps
    unmatched = (value for value in candidates if value not in table)
    missing = list(islice(unmatched, MAX_MISSING_SHOWN + 1))
    if not missing:
        return

    shown = ", ".join(str(value) for value in missing[:MAX_MISSING_SHOWN])
    if len(missing) > MAX_MISSING_SHOWN:
        shown += ", ..."
    logger.warning(
        f"Table '{name}': dice {dice.notation} can roll values with no entry: [{shown}]"
    )


def parse_rollable_table(lines: Iterable[str], name: str = "") -> RollableTable:
    """
    Parse a line stream into a RollableTable.

    Args:
        lines: Source lines (a file object works)
        name: Display name of the table

    Returns:
        The built table

    Raises:
        NotATableError: If the text is not a usable list or range table
    """
    table_format, table_lines = split_stream(lines)
    logger.debug(f"Table '{name}' detected as {table_format.value}")

    if table_format == TableFormat.LIST:
        return build_from_list(extract_list(table_lines), name)
    return build_from_rows(extract_range_rows(table_lines), name)
