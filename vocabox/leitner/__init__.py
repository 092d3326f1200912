"""
Leitner - Box-based spaced repetition for vocabulary

Items move through seven levels:
- 0: not started
- 1-5: active boxes, reviewed after 1, 2, 4, 8, 16 days
- 6: mastered, never reviewed again

A correct answer moves an item one box up; a wrong answer sends it back to
box 1.

Quick start:
    from vocabox import leitner

    db = leitner.Database("sqlite:///data/vocabox.db")
    db.init_db()

    # Apply an answer (algorithm only, no DB calls)
    updated = leitner.transition(item, leitner.Outcome.CORRECT)
"""

# Core scheduler API (algorithm logic)
from vocabox.leitner.scheduler import (
    Scheduler,
    apply_outcome,
    transition,
    is_due,
    due_items,
    sample_new_items,
)

# Database API
from vocabox.leitner.database import Database

# Constants and parameters
from vocabox.leitner.constants import (
    Outcome,
    MIN_LEVEL,
    FIRST_BOX,
    LAST_BOX,
    MASTERED_LEVEL,
    BOX_INTERVALS_DAYS,
    MATCH_RETRY_COOLDOWN,
    is_active_box,
    review_delay,
)

# Value types
from vocabox.leitner.item_state import (
    VocabularyItem,
    VocabularyList,
    DailyStat,
    utcnow,
    today_key,
    local_day,
)


__all__ = [
    # Core algorithm
    "Scheduler",
    "apply_outcome",
    "transition",
    "is_due",
    "due_items",
    "sample_new_items",

    # Database
    "Database",

    # Enums
    "Outcome",

    # Value types
    "VocabularyItem",
    "VocabularyList",
    "DailyStat",
    "utcnow",
    "today_key",
    "local_day",

    # Parameters
    "MIN_LEVEL",
    "FIRST_BOX",
    "LAST_BOX",
    "MASTERED_LEVEL",
    "BOX_INTERVALS_DAYS",
    "MATCH_RETRY_COOLDOWN",
    "is_active_box",
    "review_delay",
]
