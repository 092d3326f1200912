"""
Item State - Vocabulary records and their scheduling metadata

Defines the value types passed between the stores, the scheduler and the
sessions. All timestamps are timezone-aware UTC.

Key concepts:
- Mastery level: 0 = not started, 1-5 = active boxes, 6 = mastered
- Next review: earliest instant a box 1-5 item may be shown again
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional

from vocabox.leitner.constants import MASTERED_LEVEL, MIN_LEVEL


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


def today_key(day: Optional[date] = None) -> str:
    """Local calendar date as YYYY-MM-DD (the daily stats key)."""
    return (day or date.today()).isoformat()


def local_day(ts: datetime) -> date:
    """Calendar date of a timestamp in local time."""
    return ts.astimezone().date()


@dataclass(frozen=True)
class VocabularyItem:
    """
    One vocabulary pair and its progress.

    source_text is the learner's native-language term, target_text the
    term being learned. Content never changes after creation; only the
    scheduler's transition function produces modified copies.
    """
    id: str
    list_id: str
    source_text: str
    target_text: str
    created_at: datetime

    # Scheduling state
    mastery_level: int = MIN_LEVEL
    next_review: Optional[datetime] = None

    # Review tracking (monotonic)
    correct_count: int = 0
    incorrect_count: int = 0
    last_reviewed_at: Optional[datetime] = None

    def __post_init__(self):
        if not MIN_LEVEL <= self.mastery_level <= MASTERED_LEVEL:
            raise ValueError(f"Mastery level out of range: {self.mastery_level}")
        if self.correct_count < 0 or self.incorrect_count < 0:
            raise ValueError("Review counters cannot be negative")

    @property
    def attempts(self) -> int:
        return self.correct_count + self.incorrect_count

    @classmethod
    def create(
        cls,
        list_id: str,
        source_text: str,
        target_text: str,
        item_id: Optional[str] = None,
        created_at: Optional[datetime] = None
    ) -> VocabularyItem:
        """Create a zero-state (level 0) item."""
        return cls(
            id=item_id or new_id(),
            list_id=list_id,
            source_text=source_text,
            target_text=target_text,
            created_at=created_at or utcnow(),
        )


@dataclass(frozen=True)
class VocabularyList:
    """
    List metadata. is_builtin marks bundled/shared lists (not user-owned).
    """
    id: str
    name: str
    created_at: datetime
    updated_at: datetime
    item_count: int = 0
    is_active: bool = True
    is_builtin: bool = False
    description: Optional[str] = None
    premium_required: bool = False


@dataclass(frozen=True)
class DailyStat:
    """Per-day activity counters (additive)."""
    day: str
    new_learned: int = 0
    reviewed: int = 0
    total_time_seconds: int = 0
