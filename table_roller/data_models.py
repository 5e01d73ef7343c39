"""
Core data models for the table roller.

Contains the dice specification types and the centralized dice roller.
All randomness flows through DiceRoller so that rolls are reproducible
from a seed and visible in the run log.
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Sequence

from table_roller.observability.run_log import get_run_log


logger = logging.getLogger(__name__)


# =============================================================================
# DICE SPECIFICATION
# =============================================================================


class DiceInterpretation(str, Enum):
    """How the individual faces of a dice roll combine into one value."""
    SUM = "sum"                    # 2d6: 3 + 5 = 8
    DIGIT_CONCAT = "digit_concat"  # d66: 3 then 5 = 35

    def combine(self, faces: Sequence[int]) -> int:
        """Combine die faces into a single roll value."""
        if self is DiceInterpretation.SUM:
            return sum(faces)
        value = 0
        for face in faces:
            value = value * 10 + face
        return value


@dataclass(frozen=True)
class DiceSpec:
    """
    The (count, sides, interpretation) triple that determines a table's roll.

    Immutable once constructed. Digit concatenation only makes sense for
    single-digit dice, so sides above 9 are rejected for that mode.
    """
    count: int
    sides: int
    interpretation: DiceInterpretation = DiceInterpretation.SUM

    def __post_init__(self):
        if self.count < 1:
            raise ValueError(f"Dice count must be positive: {self.count}")
        if self.sides < 1:
            raise ValueError(f"Dice sides must be positive: {self.sides}")
        if self.interpretation is DiceInterpretation.DIGIT_CONCAT and self.sides > 9:
            raise ValueError(f"Digit dice need single-digit faces: d{self.sides}")

    @property
    def notation(self) -> str:
        """Dice notation, e.g. '2d6' or '1d66'."""
        if self.interpretation is DiceInterpretation.DIGIT_CONCAT:
            return f"1d{str(self.sides) * self.count}"
        return f"{self.count}d{self.sides}"

    @property
    def min_value(self) -> int:
        return self.interpretation.combine([1] * self.count)

    @property
    def max_value(self) -> int:
        return self.interpretation.combine([self.sides] * self.count)

    def possible_values(self) -> set[int]:
        """
        Every value these dice can produce.

        Summed dice cover min_value..max_value, which can be huge; compare
        against those bounds instead of calling this for them.
        """
        if self.interpretation is DiceInterpretation.SUM:
            return set(range(self.min_value, self.max_value + 1))
        values = {0}
        for _ in range(self.count):
            values = {v * 10 + face for v in values for face in range(1, self.sides + 1)}
        return values

    @classmethod
    def uniform(cls, sides: int) -> "DiceSpec":
        """A single die with the given number of sides."""
        return cls(count=1, sides=sides, interpretation=DiceInterpretation.SUM)

    def __str__(self) -> str:
        return self.notation


# =============================================================================
# DICE ROLLING
# =============================================================================


@dataclass
class DiceResult:
    """Result of a dice roll with full information."""
    notation: str
    rolls: list[int]
    total: int
    reason: str
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.notation}: {self.rolls} = {self.total}"


class DiceRoller:
    """
    Centralized randomization interface.

    Wraps an explicit random source instead of the module-level one, so a
    roller built with a seed (or a fixed Random) replays the same rolls.
    All table rolls go through this class for reproducibility and logging.
    """

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        self._seed = seed
        self._rng = rng if rng is not None else random.Random(seed)
        self._roll_log: list[DiceResult] = []

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    def set_seed(self, seed: int) -> None:
        """Reseed the random source for reproducibility."""
        self._seed = seed
        self._rng.seed(seed)

    def roll(self, dice: DiceSpec, reason: str = "") -> DiceResult:
        """
        Roll dice according to a specification.

        Args:
            dice: The dice specification to roll
            reason: Why this roll is being made (for logging)

        Returns:
            DiceResult with individual faces and the combined total
        """
        rolls = [self._rng.randint(1, dice.sides) for _ in range(dice.count)]
        total = dice.interpretation.combine(rolls)

        result = DiceResult(
            notation=dice.notation,
            rolls=rolls,
            total=total,
            reason=reason,
        )
        self._roll_log.append(result)
        self._log_roll(result)
        return result

    def _log_roll(self, result: DiceResult) -> None:
        """Record the roll in the observability run log."""
        get_run_log().log_roll(
            notation=result.notation,
            rolls=result.rolls,
            total=result.total,
            reason=result.reason,
        )
        logger.debug(f"Rolled {result} ({result.reason})")

    def get_roll_log(self) -> list[DiceResult]:
        """Get every roll made by this roller."""
        return self._roll_log.copy()

    def clear_roll_log(self) -> None:
        """Clear the roll log."""
        self._roll_log = []
