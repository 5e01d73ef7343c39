"""
Observability for the table roller.

Provides a run log of every dice roll, table lookup and reference
resolution made while producing a result.
"""

from table_roller.observability.run_log import (
    RunLog,
    LogEvent,
    EventType,
    RollEvent,
    TableLookupEvent,
    ReferenceEvent,
    get_run_log,
    reset_run_log,
)

__all__ = [
    "RunLog",
    "LogEvent",
    "EventType",
    "RollEvent",
    "TableLookupEvent",
    "ReferenceEvent",
    "get_run_log",
    "reset_run_log",
]
