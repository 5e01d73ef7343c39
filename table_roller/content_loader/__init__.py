"""Table file discovery and loading."""

from table_roller.content_loader.table_source import (
    TableDirectory,
    TableSource,
    ListingEntry,
    standardize_search,
)

__all__ = [
    "TableDirectory",
    "TableSource",
    "ListingEntry",
    "standardize_search",
]
