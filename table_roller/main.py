"""
Table Roller - Main Entry Point

Rolls on a markdown random table found under the table directory and
prints the result, with references to other tables resolved.

    table-roller weapons
    table-roller items/weapons.md --show-table
    table-roller --list weap
"""

import argparse
import logging
import random
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from table_roller.content_loader.table_source import ListingEntry, TableDirectory
from table_roller.data_models import DiceRoller
from table_roller.observability.run_log import get_run_log
from table_roller.tables.reference_resolver import DEFAULT_MAX_DEPTH
from table_roller.tables.table_manager import TableManager
from table_roller.tables.table_types import TableError


# Configure logging
def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class RollerConfig:
    """Configuration for a roll invocation."""

    table: Optional[str] = None
    table_dir: Path = field(default_factory=lambda: Path("."))

    # Randomness
    seed: Optional[int] = None

    # Resolution
    max_depth: int = DEFAULT_MAX_DEPTH

    # Output options
    show_table: bool = False
    show_log: bool = False
    color: bool = True

    # Runtime options
    verbose: bool = False

    def __post_init__(self):
        """Ensure paths are Path objects."""
        if isinstance(self.table_dir, str):
            self.table_dir = Path(self.table_dir)


# =============================================================================
# TERMINAL OUTPUT
# =============================================================================

class Color(str, Enum):
    """ANSI terminal colors."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    PURPLE = "\033[35m"
    CYAN = "\033[36m"


def colorize(color: Color, text: str, enabled: bool = True) -> str:
    """Wrap text in a terminal color."""
    if not enabled:
        return text
    return f"{color.value}{text}{Color.RESET.value}"


def format_listing(entries: list[ListingEntry], color: bool = True) -> str:
    """Format a table directory listing, indented with dashes by depth."""
    lines = []
    for entry in entries:
        text = "-" * entry.depth + entry.label
        lines.append(colorize(Color.PURPLE if entry.is_directory else Color.YELLOW, text, color))
    return "\n".join(lines)


# =============================================================================
# ARGUMENT PARSING
# =============================================================================

HELP_ALIASES = {"-h", "--h", "-help", "--help", "\\h", "\\help"}
LIST_ALIASES = {"-ls", "--ls", "-list", "--list", "\\ls", "\\list"}

USAGE_EPILOG = """
TABLE is the name of the markdown file containing the table. The file must
exist in the table directory or one of its subdirectories. TABLE may or may
not include the '.md' extension and may include path components.

Examples:
  table-roller Weapons
  table-roller weapons.md
  table-roller Items/Weapons.md
  table-roller --list weap
"""


def normalize_arguments(argv: list[str]) -> list[str]:
    """Map the accepted help and list spellings onto the canonical flags."""
    normalized = []
    for arg in argv:
        if arg in HELP_ALIASES:
            normalized.append("--help")
        elif arg in LIST_ALIASES:
            normalized.append("--list")
        else:
            normalized.append(arg)
    return normalized


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="table-roller",
        description="Roll on a markdown random table",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=USAGE_EPILOG,
    )
    parser.add_argument(
        "table",
        nargs="?",
        help="Name or path of the table to roll on",
    )
    parser.add_argument(
        "--list",
        nargs="?",
        const="",
        default=None,
        metavar="QUERY",
        help="List tables whose names contain QUERY, then exit",
    )
    parser.add_argument(
        "--dir",
        type=Path,
        default=Path("."),
        help="Directory to search for tables (default: .)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for reproducible rolls",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Maximum nesting of table references (default: {DEFAULT_MAX_DEPTH})",
    )
    parser.add_argument(
        "--show-table",
        action="store_true",
        help="Print each table before rolling on it",
    )
    parser.add_argument(
        "--show-log",
        action="store_true",
        help="Print the run log of rolls and lookups after the result",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def parse_arguments(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(normalize_arguments(argv))
    if args.list is None and not args.table:
        parser.error("Please provide a table name")
    if args.max_depth < 1:
        parser.error("--max-depth must be at least 1")
    return args


def create_config_from_args(args: argparse.Namespace) -> RollerConfig:
    """Create RollerConfig from parsed arguments."""
    return RollerConfig(
        table=args.table,
        table_dir=args.dir,
        seed=args.seed,
        max_depth=args.max_depth,
        show_table=args.show_table,
        show_log=args.show_log,
        color=not args.no_color,
        verbose=args.verbose,
    )


# =============================================================================
# COMMANDS
# =============================================================================

def list_tables(directory: TableDirectory, query: str, color: bool = True) -> int:
    """Print the tables whose names contain query."""
    try:
        entries = directory.list_tables(query)
    except TableError as e:
        print(f"Error reading directory\n{e}", file=sys.stderr)
        return 1
    listing = format_listing(entries, color)
    if listing:
        print(listing)
    return 0


def roll_tables(config: RollerConfig) -> int:
    """
    Roll on every table matching the configured name and print the results.

    Returns:
        Process exit code
    """
    seed = config.seed if config.seed is not None else random.SystemRandom().randrange(2**32)
    logger.debug(f"Rolling '{config.table}' in {config.table_dir} with seed {seed}")

    manager = TableManager(
        directory=TableDirectory(config.table_dir),
        dice_roller=DiceRoller(seed=seed),
        max_depth=config.max_depth,
    )

    try:
        tables = manager.load_tables(config.table)
        for path, table in tables:
            if len(tables) > 1:
                print(colorize(Color.CYAN, str(path), config.color))
            if config.show_table:
                print(table.as_markdown_table())
                print()
            result = manager.roll(table)
            print(result.resolved_text)
            if config.show_log:
                print()
                print(get_run_log().format_log())
    except TableError as e:
        print(f"Error rolling table '{config.table}'\n{e}", file=sys.stderr)
        return 1
    return 0


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI usage."""
    args = parse_arguments(argv)
    config = create_config_from_args(args)
    setup_logging(config.verbose)

    if args.list is not None:
        return list_tables(TableDirectory(config.table_dir), args.list, config.color)
    return roll_tables(config)


if __name__ == "__main__":
    sys.exit(main())
