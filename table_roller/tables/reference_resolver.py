"""
Resolution of table references embedded in outcome text.

An outcome may point at another table with a markdown link or a wiki link:

    "A [Weapon](items/weapons) of great age"
    "A [[items/weapons]] of great age"
    "A [[items/weapons|Weapon]] of great age"

Each reference is replaced by a roll on the referenced table, whose own
result is resolved the same way before it is substituted.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional

from table_roller.data_models import DiceRoller
from table_roller.observability.run_log import get_run_log, reset_run_log
from table_roller.tables.table_types import (
    CyclicReferenceError,
    LookupFailedError,
    NotATableError,
    RollableTable,
    TableResult,
)


logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 20

# [[target]] or [[target|label]], or [label](target)
REFERENCE_PATTERN = re.compile(
    r"\[\[(?P<wiki_target>[^\[\]|]+?)(?:\|(?P<wiki_label>[^\[\]]*?))?\]\]"
    r"|\[(?P<link_label>[^\[\]]+?)\]\((?P<link_target>[^()]+?)\)"
)

# Produces the table a reference target names; raises LookupFailedError
# or NotATableError when it cannot
TableFactory = Callable[[str], RollableTable]


@dataclass(frozen=True)
class Reference:
    """One reference occurrence inside outcome text."""
    span: str       # The matched text, e.g. "[Weapon](items/weapons)"
    start: int
    end: int
    target: str     # Table name/path to resolve
    label: Optional[str] = None


def find_reference(text: str, start: int = 0) -> Optional[Reference]:
    """Find the first reference at or after `start`."""
    match = REFERENCE_PATTERN.search(text, start)
    if not match:
        return None

    if match.group("wiki_target") is not None:
        target = match.group("wiki_target")
        label = match.group("wiki_label")
    else:
        target = match.group("link_target")
        label = match.group("link_label")

    return Reference(
        span=match.group(0),
        start=match.start(),
        end=match.end(),
        target=target.strip(),
        label=label.strip() if label is not None else None,
    )


class ReferenceResolver:
    """
    Rolls referenced tables and substitutes their results.

    Lookup problems never abort a roll: the reference text is left in
    place and resolution of that string stops. Nesting deeper than
    max_depth raises CyclicReferenceError, since a table that (directly or
    through others) always references itself would otherwise never finish.
    """

    def __init__(
        self,
        table_factory: TableFactory,
        dice_roller: DiceRoller,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self._table_factory = table_factory
        self._dice_roller = dice_roller
        self._max_depth = max_depth

    @property
    def max_depth(self) -> int:
        return self._max_depth

    def _start_run(self) -> None:
        """Begin a fresh run log and roll log for one top-level resolution."""
        reset_run_log().set_seed(self._dice_roller.seed)
        self._dice_roller.clear_roll_log()

    def resolve(self, text: str) -> str:
        """Resolve every reference in text and return the final string."""
        self._start_run()
        return self.resolve_result(text).resolved_text

    def resolve_result(self, text: str, chain: tuple[str, ...] = ()) -> TableResult:
        """
        Resolve references in an outcome, recording nested rolls.

        Args:
            text: Outcome text that may contain references
            chain: Tables rolled above this text, outermost first

        Returns:
            A TableResult holding only the resolution details
            (resolved_text, sub_results, unresolved)
        """
        result = TableResult(table_name="", notation="", roll_total=0, result_text=text)
        position = 0

        while True:
            reference = find_reference(text, position)
            if reference is None:
                break

            depth = max(len(chain), 1)
            if depth > self._max_depth:
                raise CyclicReferenceError(list(chain) + [reference.target], self._max_depth)

            try:
                table = self._table_factory(reference.target)
            except (LookupFailedError, NotATableError) as e:
                logger.warning(f"Leaving reference {reference.span!r} unresolved: {e}")
                get_run_log().log_reference(
                    target=reference.target, depth=depth, resolved=False, error=str(e)
                )
                result.unresolved.append(reference.span)
                break

            sub_result = self.roll(table, chain + (reference.target,))
            get_run_log().log_reference(
                target=reference.target,
                depth=depth,
                resolved=True,
                result_text=sub_result.resolved_text,
            )
            result.sub_results.append(sub_result)
            result.unresolved.extend(sub_result.unresolved)

            replacement = sub_result.resolved_text
            text = text[:reference.start] + replacement + text[reference.end:]
            position = reference.start + len(replacement)

        result.resolved_text = text
        return result

    def roll(self, table: RollableTable, chain: tuple[str, ...] = ()) -> TableResult:
        """
        Roll on a table and resolve any references in the outcome.

        Args:
            table: The table to roll on
            chain: Tables being rolled, outermost first, ending with this
                one. Empty for a top-level roll, which starts a new run log.

        Returns:
            TableResult with the raw and resolved outcome
        """
        if not chain:
            self._start_run()
            chain = (table.name,)
        dice_result, result_text = table.roll(self._dice_roller)

        get_run_log().log_table_lookup(
            table_name=table.name,
            notation=table.dice.notation,
            roll_total=dice_result.total,
            result_text=result_text,
        )

        resolution = self.resolve_result(result_text, chain)
        return TableResult(
            table_name=table.name,
            notation=table.dice.notation,
            roll_total=dice_result.total,
            dice_rolled=dice_result.rolls,
            result_text=result_text,
            resolved_text=resolution.resolved_text,
            sub_results=resolution.sub_results,
            unresolved=resolution.unresolved,
        )
