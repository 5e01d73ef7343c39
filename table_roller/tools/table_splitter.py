"""
Split a markdown document of many tables into one file per table.

Headings structure the output:

    # Dread              -> directory "Dread/"
    ## Omens             -> file "Dread/Dread - Omens.md"
    ### Minor           -> file "Dread/Dread - Omens - Minor.md"

Every non-blank line under a heading belongs to that heading's table.
"""

import argparse
import logging
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from table_roller.main import setup_logging


logger = logging.getLogger(__name__)

_REMOVED_CHARACTERS = "?'\"&,"


def sanitize_file_name(name: str) -> str:
    """Make a heading-derived name safe and consistent as a file path."""
    for character in _REMOVED_CHARACTERS:
        name = name.replace(character, "")
    name = name.replace(":", "-")
    name = re.sub(r" {2,}", " ", name)
    parts = [part.strip().title() for part in name.split("/") if part.strip()]
    return "/".join(parts)


@dataclass
class Section:
    """A run of table lines under one heading path."""

    h1: str
    h2: str = ""
    h3: str = ""
    lines: list[str] = field(default_factory=list)

    @property
    def relative_path(self) -> str:
        name = self.h1
        if self.h2:
            name = f"{name} - {self.h2}"
        if self.h3:
            name = f"{name} - {self.h3}"
        return sanitize_file_name(f"{self.h1}/{name}") + ".md"


def split_sections(lines: Iterable[str]) -> list[Section]:
    """
    Group document lines into sections by heading.

    Lines before the first '#' heading have no directory to go to and are
    dropped.
    """
    sections: list[Section] = []
    current: Optional[Section] = None

    for raw in lines:
        line = raw.rstrip()
        if not line.strip():
            continue

        if line.startswith("#"):
            level = len(line) - len(line.lstrip("#"))
            title = line.lstrip("#").strip()
            h1 = current.h1 if current else ""
            h2 = current.h2 if current else ""
            if level == 1:
                current = Section(h1=title)
            elif level == 2:
                current = Section(h1=h1, h2=title)
            else:
                current = Section(h1=h1, h2=h2, h3=title)
            continue

        if current is None or not current.h1:
            logger.debug(f"Dropping line outside any top-level heading: {line!r}")
            continue

        if not sections or sections[-1] is not current:
            sections.append(current)
        current.lines.append(line)

    return sections


def split_tables(source: Path, output_dir: Path = Path(".")) -> list[Path]:
    """
    Write each section of a markdown document to its own table file.

    Args:
        source: The markdown document
        output_dir: Directory the heading directories are created in

    Returns:
        Paths of the written table files
    """
    with open(source, "r", encoding="utf-8") as f:
        sections = split_sections(f)

    written = []
    for section in sections:
        path = output_dir / section.relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(section.lines) + "\n", encoding="utf-8")
        logger.info(f"Wrote {len(section.lines)} lines to {path}")
        written.append(path)
    return written


def parse_arguments(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Split a markdown document into one table file per heading",
    )
    parser.add_argument("source", type=Path, help="Markdown document to split")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Directory to write table directories into (default: .)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI usage."""
    args = parse_arguments(argv)
    setup_logging(args.verbose)

    try:
        written = split_tables(args.source, args.output_dir)
    except OSError as e:
        print(f"Error splitting tables\n{e}", file=sys.stderr)
        return 1

    for path in written:
        print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
