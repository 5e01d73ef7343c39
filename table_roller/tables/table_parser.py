"""
Shape detection and extraction for hand-written tables.

Two source shapes are understood:

List form, one outcome per item (unprefixed lines continue the item):

    * Rusty sword
    * Bent spear
      with a note on a second line

Range-table form, a two-column pipe table whose first column is a roll
value or an inclusive range:

    | 2d6  | Reaction  |
    |------|-----------|
    | 2    | Hostile   |
    | 3-7  | Uncertain |

Detection only looks at the first few lines; extraction starts at the line
that fixed the format.
"""

import logging
import re
from itertools import islice
from typing import Iterable, Sequence

from table_roller.tables.table_types import MalformedRowError, NotATableError, TableFormat


logger = logging.getLogger(__name__)

# How many leading lines may be inspected before giving up on a stream
DETECTION_WINDOW = 5

TABLE_DELIMITER = "|"

# identifies a line as a list item, ie. '1. ', '* ', '- ' or '– '
LIST_ITEM_PATTERN = re.compile(r"^(\d+\. |\* |- |– )")

# an unescaped pipe; '\|' is a literal pipe inside a cell
DELIMITER_PATTERN = re.compile(r"(?<!\\)\|")

# roll column values: '7', '5-12', '5–12'
SINGLE_ROLL_PATTERN = re.compile(r"^\s*(\d+)\s*$")
ROLL_RANGE_PATTERN = re.compile(r"^\s*(\d+)\s*[-–]\s*(\d+)\s*$")


def is_list_item(line: str) -> bool:
    """Check whether a line starts a list entry."""
    return bool(LIST_ITEM_PATTERN.match(line))


def is_range_table_row(line: str) -> bool:
    """Check whether a line is a two-column pipe table row."""
    row = line.strip()
    if not (row.startswith(TABLE_DELIMITER) and row.endswith(TABLE_DELIMITER)):
        return False
    return len(DELIMITER_PATTERN.findall(row)) == 3


def detect_format(lines: Sequence[str]) -> tuple[TableFormat, int]:
    """
    Classify a table by inspecting its first few lines.

    Args:
        lines: Leading lines of the source; only the first
            DETECTION_WINDOW are inspected

    Returns:
        Tuple of (format, index of the first matching line)

    Raises:
        NotATableError: If no line in the window looks like a table
    """
    for index, line in enumerate(lines[:DETECTION_WINDOW]):
        if is_list_item(line):
            return TableFormat.LIST, index
        if is_range_table_row(line):
            return TableFormat.RANGE_TABLE, index
    raise NotATableError(
        f"Not a rollable table: no list item or table row in the first {DETECTION_WINDOW} lines"
    )


def extract_list(lines: Iterable[str]) -> list[str]:
    """
    Collect list entries in source order.

    A list-item line starts a new entry with its prefix removed; a
    following non-empty, unprefixed line is appended to the current entry.
    """
    entries: list[str] = []
    for raw in lines:
        line = raw.rstrip()
        if not line.strip():
            continue
        if is_list_item(line):
            entries.append(LIST_ITEM_PATTERN.sub("", line, count=1))
        elif entries:
            entries[-1] = f"{entries[-1]}\n{line}"
        else:
            logger.debug(f"Ignoring text before first list item: {line!r}")
    return entries


def split_row(line: str) -> tuple[str, str]:
    """Split a table row into its (roll column, text column) cells."""
    cells = DELIMITER_PATTERN.split(line.strip())
    return cells[1], cells[2].strip().replace("\\|", "|")


def extract_range_rows(lines: Iterable[str]) -> list[tuple[str, str]]:
    """
    Collect (raw roll column, text) pairs from every table row, in order.

    Header and separator rows are included; they are dropped later when
    their roll column fails to parse.
    """
    rows = []
    for line in lines:
        if is_range_table_row(line):
            rows.append(split_row(line))
    return rows


def parse_roll_range(column: str) -> tuple[int, int]:
    """
    Parse a roll column into an inclusive (min, max) range.

    Raises:
        MalformedRowError: If the column is neither a number nor a range
    """
    single = SINGLE_ROLL_PATTERN.match(column)
    if single:
        value = int(single.group(1))
        return value, value

    ranged = ROLL_RANGE_PATTERN.match(column)
    if ranged:
        low, high = int(ranged.group(1)), int(ranged.group(2))
        if low > high:
            raise MalformedRowError(f"Roll range runs backwards: {column.strip()!r}")
        return low, high

    raise MalformedRowError(f"Bad row range value: {column.strip()!r}")


def split_stream(lines: Iterable[str]) -> tuple[TableFormat, list[str]]:
    """
    Detect the format of a line stream and return the lines to extract from.

    Only DETECTION_WINDOW lines are read before the format is known; the
    rest of the stream is consumed once a format has been fixed.
    """
    iterator = iter(lines)
    window = [line.rstrip("\r\n") for line in islice(iterator, DETECTION_WINDOW)]
    table_format, start = detect_format(window)
    remaining = [line.rstrip("\r\n") for line in iterator]
    return table_format, window[start:] + remaining
