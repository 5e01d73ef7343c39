"""
Dice expression parsing for table headers.

A range table may name its dice in the first column of its header row,
e.g. "| 2d6 | Reaction |" or "| d66 | Oddities |". Absence of a dice
expression is normal and means the caller picks a default.
"""

import logging
import re
from typing import Optional

from table_roller.data_models import DiceInterpretation, DiceSpec


logger = logging.getLogger(__name__)

# d66 / 1d88: two dice of 6 (or 8) sides read as tens and units digits
DIGIT_DIE_PATTERN = re.compile(r"(?<![\w-])\d*d(66|88)(?!\d)", re.IGNORECASE)

# 2d6, d20: count (optional, defaults to 1) and sides
STANDARD_DIE_PATTERN = re.compile(r"(?<![\w-])(\d*)d(\d+)", re.IGNORECASE)


def parse_dice_spec(text: str) -> Optional[DiceSpec]:
    """
    Parse a dice expression out of a short string.

    Args:
        text: Header cell or line fragment, e.g. " 2d6 " or "| 1d66 | result |"

    Returns:
        DiceSpec, or None when the text holds no usable dice expression
    """
    if not text:
        return None

    digit_match = DIGIT_DIE_PATTERN.search(text)
    if digit_match:
        sides = int(digit_match.group(1)[0])
        return DiceSpec(count=2, sides=sides, interpretation=DiceInterpretation.DIGIT_CONCAT)

    match = STANDARD_DIE_PATTERN.search(text)
    if not match:
        return None

    count_text, sides_text = match.groups()
    try:
        return DiceSpec(
            count=int(count_text) if count_text else 1,
            sides=int(sides_text),
            interpretation=DiceInterpretation.SUM,
        )
    except ValueError as e:
        logger.debug(f"Ignoring dice expression {match.group(0)!r}: {e}")
        return None
