"""
Rollable tables and their resolution.

This module provides:
- Table types (entries, redirects, rollable tables, results, errors)
- Dice expression parsing for table headers
- Shape detection and extraction for list and range tables
- Weighted table construction
- Reference resolution with nested rolls
- Table management (lookup, parse, roll)
"""

from table_roller.tables.table_types import (
    # Enums
    TableFormat,
    # Data classes
    Literal,
    Redirect,
    TableEntry,
    RollableTable,
    TableResult,
    # Errors
    TableError,
    NotATableError,
    MalformedRowError,
    LookupFailedError,
    InvariantViolationError,
    CyclicReferenceError,
)
from table_roller.tables.dice_notation import parse_dice_spec
from table_roller.tables.table_parser import (
    detect_format,
    extract_list,
    extract_range_rows,
    is_list_item,
    is_range_table_row,
    parse_roll_range,
)
from table_roller.tables.table_builder import (
    build_from_list,
    build_from_rows,
    parse_rollable_table,
)
from table_roller.tables.reference_resolver import (
    Reference,
    ReferenceResolver,
    find_reference,
)
from table_roller.tables.table_manager import TableManager

__all__ = [
    "TableFormat",
    "Literal",
    "Redirect",
    "TableEntry",
    "RollableTable",
    "TableResult",
    "TableError",
    "NotATableError",
    "MalformedRowError",
    "LookupFailedError",
    "InvariantViolationError",
    "CyclicReferenceError",
    "parse_dice_spec",
    "detect_format",
    "extract_list",
    "extract_range_rows",
    "is_list_item",
    "is_range_table_row",
    "parse_roll_range",
    "build_from_list",
    "build_from_rows",
    "parse_rollable_table",
    "Reference",
    "ReferenceResolver",
    "find_reference",
    "TableManager",
]
