"""
Run log for a single table roll.

Records every dice roll, table lookup and reference resolution made while
producing one top-level result, so the result can be explained afterwards
with `table-roller <table> --show-log`.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Kinds of recorded events."""

    ROLL = "roll"
    TABLE_LOOKUP = "table_lookup"
    REFERENCE = "reference"


@dataclass
class LogEvent:
    """Fields shared by every recorded event."""

    # Set by each subclass in __post_init__
    event_type: EventType = field(init=False)
    timestamp: datetime = field(default_factory=datetime.now, init=False)
    sequence_number: int = field(default=0, init=False)


@dataclass
class RollEvent(LogEvent):
    """Dice thrown for a table."""

    notation: str = ""
    rolls: list[int] = field(default_factory=list)  # Individual die faces
    total: int = 0
    reason: str = ""

    def __post_init__(self):
        self.event_type = EventType.ROLL

    def __str__(self) -> str:
        return f"[{self.sequence_number}] ROLL {self.notation}: {self.rolls} = {self.total} ({self.reason})"


@dataclass
class TableLookupEvent(LogEvent):
    """The raw outcome a roll selected from a table."""

    table_name: str = ""
    notation: str = ""
    roll_total: int = 0
    result_text: str = ""

    def __post_init__(self):
        self.event_type = EventType.TABLE_LOOKUP

    def __str__(self) -> str:
        return f"[{self.sequence_number}] TABLE {self.table_name} [{self.notation} = {self.roll_total}]: {self.result_text}"


@dataclass
class ReferenceEvent(LogEvent):
    """A reference to another table found in outcome text."""

    target: str = ""
    depth: int = 0
    resolved: bool = False
    result_text: str = ""
    error: Optional[str] = None

    def __post_init__(self):
        self.event_type = EventType.REFERENCE

    def __str__(self) -> str:
        if self.resolved:
            return f"[{self.sequence_number}] REF {self.target} (depth {self.depth}) -> {self.result_text}"
        return f"[{self.sequence_number}] REF {self.target} (depth {self.depth}) unresolved: {self.error}"


class RunLog:
    """
    Events of the current top-level roll.

    Singleton pattern - use get_run_log() to access. ReferenceResolver
    resets it at the start of each top-level roll.
    """

    _instance: Optional["RunLog"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self._events: list[LogEvent] = []
        self._sequence: int = 0
        self._seed: Optional[int] = None
        self._started: datetime = datetime.now()

    def reset(self) -> None:
        """Drop all events and the seed."""
        self._events = []
        self._sequence = 0
        self._seed = None
        self._started = datetime.now()
        logger.debug("RunLog reset")

    def set_seed(self, seed: Optional[int]) -> None:
        """Record the seed of the dice used for this roll."""
        self._seed = seed
        logger.debug(f"RunLog seed set: {seed}")

    def get_seed(self) -> Optional[int]:
        return self._seed

    def _append(self, event: LogEvent) -> None:
        self._sequence += 1
        event.sequence_number = self._sequence
        self._events.append(event)

    def log_roll(self, notation: str, rolls: list[int], total: int, reason: str = "") -> RollEvent:
        """Record a dice roll."""
        event = RollEvent(notation=notation, rolls=list(rolls), total=total, reason=reason)
        self._append(event)
        return event

    def log_table_lookup(
        self,
        table_name: str,
        notation: str,
        roll_total: int,
        result_text: str,
    ) -> TableLookupEvent:
        """Record the outcome a roll selected."""
        event = TableLookupEvent(
            table_name=table_name,
            notation=notation,
            roll_total=roll_total,
            result_text=result_text,
        )
        self._append(event)
        return event

    def log_reference(
        self,
        target: str,
        depth: int,
        resolved: bool,
        result_text: str = "",
        error: Optional[str] = None,
    ) -> ReferenceEvent:
        """Record the outcome of resolving one table reference."""
        event = ReferenceEvent(
            target=target,
            depth=depth,
            resolved=resolved,
            result_text=result_text,
            error=error,
        )
        self._append(event)
        return event

    def get_events(
        self,
        event_type: Optional[EventType] = None,
        since_sequence: int = 0,
    ) -> list[LogEvent]:
        """
        Get recorded events.

        Args:
            event_type: Only events of this type (None = all)
            since_sequence: Only events after this sequence number
        """
        events = [e for e in self._events if e.sequence_number > since_sequence]
        if event_type:
            events = [e for e in events if e.event_type == event_type]
        return events

    def get_rolls(self) -> list[RollEvent]:
        return [e for e in self._events if isinstance(e, RollEvent)]

    def get_table_lookups(self) -> list[TableLookupEvent]:
        return [e for e in self._events if isinstance(e, TableLookupEvent)]

    def get_references(self) -> list[ReferenceEvent]:
        return [e for e in self._events if isinstance(e, ReferenceEvent)]

    def get_event_count(self) -> int:
        return len(self._events)

    def format_log(
        self,
        event_types: Optional[list[EventType]] = None,
        max_events: Optional[int] = None,
    ) -> str:
        """
        Format the log for printing after a roll.

        Args:
            event_types: Only these event types (None = all)
            max_events: Keep only the last max_events events
        """
        lines = [
            "=== Run Log ===",
            f"Started: {self._started.isoformat()}",
            f"Seed: {self._seed if self._seed is not None else 'not set'}",
            f"Total Events: {len(self._events)}",
            "",
        ]

        events = self.get_events()
        if event_types:
            events = [e for e in events if e.event_type in event_types]
        if max_events:
            events = events[-max_events:]

        lines.extend(str(event) for event in events)
        return "\n".join(lines)


_run_log: Optional[RunLog] = None


def get_run_log() -> RunLog:
    """Get the global RunLog instance."""
    global _run_log
    if _run_log is None:
        _run_log = RunLog()
    return _run_log


def reset_run_log() -> RunLog:
    """Reset and return the global RunLog instance."""
    log = get_run_log()
    log.reset()
    return log
