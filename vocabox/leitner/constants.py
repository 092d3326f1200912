"""
Leitner Constants and Parameters

All scheduling parameters for the box system in one place.
"""

from datetime import timedelta
from enum import Enum
from typing import Optional


# ---- Outcomes ----

class Outcome(str, Enum):
    """Result of a recall attempt as seen by the scheduler."""
    CORRECT = "correct"
    INCORRECT = "incorrect"


# ---- Mastery Levels ----

MIN_LEVEL = 0        # Not started
FIRST_BOX = 1        # First active review box
LAST_BOX = 5         # Last active review box
MASTERED_LEVEL = 6   # Retired, never reviewed again


# ---- Interval Table ----
# Review delay per active box, in days (doubling)

BOX_INTERVALS_DAYS = {
    1: 1,
    2: 2,
    3: 4,
    4: 8,
    5: 16,
}


def is_active_box(level: int) -> bool:
    """True for levels that have a pending review (1..5)."""
    return FIRST_BOX <= level <= LAST_BOX


def review_delay(level: int) -> Optional[timedelta]:
    """
    Delay until the next review for an item entering `level`.

    Returns None for level 0 and the mastered level (no pending review).
    """
    if not MIN_LEVEL <= level <= MASTERED_LEVEL:
        raise ValueError(f"Mastery level out of range: {level}")
    if not is_active_box(level):
        return None
    return timedelta(days=BOX_INTERVALS_DAYS[level])


# ---- Sessions ----

MATCH_RETRY_COOLDOWN = 0.6  # Seconds before a wrongly matched item is shown again
