"""
Scheduler - Leitner box transitions and item selection

Main workflow:
1. Select candidate items (new items for learning, due items for review)
2. Caller collects an answer and decides the Outcome
3. transition() computes the new box state
4. Caller persists the returned item

The transition functions are pure (no database calls). The Scheduler class
only reads from the stores it is given.
"""

from __future__ import annotations

import random
from dataclasses import replace
from datetime import datetime
from typing import TYPE_CHECKING, Optional, Sequence

from vocabox.leitner.constants import (
    FIRST_BOX,
    MASTERED_LEVEL,
    MIN_LEVEL,
    Outcome,
    is_active_box,
    review_delay,
)
from vocabox.leitner.item_state import VocabularyItem, utcnow

if TYPE_CHECKING:
    from vocabox.item_repo import ItemRepository
    from vocabox.list_repo import ListRepository


def apply_outcome(
    item: VocabularyItem,
    outcome: Outcome,
    timestamp: Optional[datetime] = None
) -> tuple[int, Optional[datetime]]:
    """
    Compute the next box and review time for an answer.

    - CORRECT: one box up, capped at the mastered level (no further review)
    - INCORRECT: back to box 1 regardless of the current box

    A correct answer at level 0 is the first introduction (0 -> 1).

    Args:
        item: Item being answered
        outcome: CORRECT or INCORRECT
        timestamp: Commit time (defaults to now)

    Returns:
        Tuple of (new_level, next_review)
    """
    if timestamp is None:
        timestamp = utcnow()

    if outcome is Outcome.CORRECT:
        new_level = min(item.mastery_level + 1, MASTERED_LEVEL)
    elif outcome is Outcome.INCORRECT:
        new_level = FIRST_BOX
    else:
        raise ValueError(f"Unknown outcome: {outcome!r}")

    delay = review_delay(new_level)
    next_review = timestamp + delay if delay is not None else None
    return new_level, next_review


def transition(
    item: VocabularyItem,
    outcome: Outcome,
    timestamp: Optional[datetime] = None
) -> VocabularyItem:
    """
    Return a copy of `item` with the outcome applied.

    Updates box, next review, the matching counter and last_reviewed_at.
    The input item is not modified.
    """
    if timestamp is None:
        timestamp = utcnow()

    new_level, next_review = apply_outcome(item, outcome, timestamp)
    correct = outcome is Outcome.CORRECT
    return replace(
        item,
        mastery_level=new_level,
        next_review=next_review,
        correct_count=item.correct_count + (1 if correct else 0),
        incorrect_count=item.incorrect_count + (0 if correct else 1),
        last_reviewed_at=timestamp,
    )


# ---- Selection helpers (no DB calls) ----

def is_due(item: VocabularyItem, now: datetime) -> bool:
    """True for box 1-5 items whose review time is missing or reached."""
    if not is_active_box(item.mastery_level):
        return False
    return item.next_review is None or item.next_review <= now


def due_items(items: Sequence[VocabularyItem], now: datetime) -> list[VocabularyItem]:
    return [item for item in items if is_due(item, now)]


def sample_new_items(
    items: Sequence[VocabularyItem],
    count: int,
    rng: random.Random
) -> list[VocabularyItem]:
    """
    Uniformly sample up to `count` level-0 items without replacement.
    """
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    new_items = [item for item in items if item.mastery_level == MIN_LEVEL]
    if count == 0 or not new_items:
        return []
    return rng.sample(new_items, min(count, len(new_items)))


class Scheduler:
    """
    Selects learnable and due items from the active lists.
    """

    def __init__(
        self,
        items: ItemRepository,
        lists: ListRepository,
        rng: Optional[random.Random] = None
    ):
        self.items = items
        self.lists = lists
        self.rng = rng or random.Random()

    def _active_items(self) -> list[VocabularyItem]:
        active_ids = set(self.lists.get_active_ids())
        if not active_ids:
            return []
        return [item for item in self.items.get_all() if item.list_id in active_ids]

    def select_for_learning(self, count: int) -> list[VocabularyItem]:
        """
        Pick up to `count` not-started items from active lists at random.

        An empty result means there is nothing new to learn.
        """
        return sample_new_items(self._active_items(), count, self.rng)

    def select_for_review(self, now: Optional[datetime] = None) -> list[VocabularyItem]:
        """
        All box 1-5 items from active lists that are due at `now`.

        Order is unspecified.
        """
        if now is None:
            now = utcnow()
        return due_items(self._active_items(), now)

    def items_by_level(self, level: int) -> list[VocabularyItem]:
        """Items of active lists currently at `level` (box overview)."""
        if not MIN_LEVEL <= level <= MASTERED_LEVEL:
            raise ValueError(f"Mastery level out of range: {level}")
        return [item for item in self._active_items() if item.mastery_level == level]

    def group_by_level(self) -> dict[int, list[VocabularyItem]]:
        """Items of active lists keyed by every level 0-6, from one store read."""
        grouped: dict[int, list[VocabularyItem]] = {
            level: [] for level in range(MIN_LEVEL, MASTERED_LEVEL + 1)
        }
        for item in self._active_items():
            grouped[item.mastery_level].append(item)
        return grouped

    def apply_outcome(
        self,
        item: VocabularyItem,
        outcome: Outcome,
        timestamp: Optional[datetime] = None
    ) -> tuple[int, Optional[datetime]]:
        return apply_outcome(item, outcome, timestamp)

    def transition(
        self,
        item: VocabularyItem,
        outcome: Outcome,
        timestamp: Optional[datetime] = None
    ) -> VocabularyItem:
        return transition(item, outcome, timestamp)
