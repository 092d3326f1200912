"""
Shared session plumbing: answer checking, position tracking and
retry-once persistence.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Callable, Optional, Sequence

from vocabox.errors import SessionStateError, StoreError
from vocabox.item_repo import ItemRepository
from vocabox.leitner.item_state import VocabularyItem, local_day, utcnow
from vocabox.leitner.scheduler import Scheduler
from vocabox.sessions.types import CommitResult
from vocabox.stats_repo import StatsRepository

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def normalize_answer(text: str) -> str:
    return text.strip().lower()


def answers_match(given: str, expected: str) -> bool:
    """Exact match after trimming whitespace and ignoring case."""
    return normalize_answer(given) == normalize_answer(expected)


class BaseSession:
    """
    A bounded interaction over a fixed batch of items.

    Subclasses define their phase enum and set `phase`; terminal phases
    are listed in `finished_phases`.
    """

    abandoned_phase = None
    finished_phases: tuple = ()

    def __init__(
        self,
        items: Sequence[VocabularyItem],
        item_store: ItemRepository,
        stats_store: StatsRepository,
        scheduler: Scheduler,
        clock: Optional[Clock] = None
    ):
        if not items:
            raise ValueError(f"{type(self).__name__} requires at least one item")
        ids = [item.id for item in items]
        if len(set(ids)) != len(ids):
            raise ValueError("Session items must be unique")

        self.session_id = str(uuid.uuid4())
        self.items = list(items)
        self.item_store = item_store
        self.stats_store = stats_store
        self.scheduler = scheduler
        self.clock = clock or utcnow
        self.started_at = self.clock()
        self.position = 0
        self.phase = None

    # ---- State ----

    @property
    def is_finished(self) -> bool:
        return self.phase in self.finished_phases

    @property
    def current_item(self) -> Optional[VocabularyItem]:
        if self.is_finished or self.position >= len(self.items):
            return None
        return self.items[self.position]

    def abandon(self) -> None:
        """
        Stop presenting items. Writes already made stay; nothing is rolled back.
        """
        if self.is_finished:
            return
        logger.info(
            "Session %s abandoned at position %d/%d (phase %s)",
            self.session_id, self.position, len(self.items), self.phase
        )
        self.phase = self.abandoned_phase

    def _require_phase(self, *phases) -> None:
        if self.phase not in phases:
            allowed = ", ".join(str(p.value) for p in phases)
            raise SessionStateError(f"Expected phase {allowed}, session is in {self.phase.value}")

    def _require_current(self, item_id: str) -> VocabularyItem:
        item = self.current_item
        if item is None:
            raise SessionStateError("No item is being presented")
        if item.id != item_id:
            raise SessionStateError(f"Item {item_id} is not the current item ({item.id})")
        return item

    # ---- Persistence ----

    def _commit(self, item: VocabularyItem) -> CommitResult:
        """
        Persist one item, retrying once on a store failure.

        Upserts are idempotent so the blind retry is always safe. A second
        failure is returned as a result, not raised.
        """
        for attempt in (1, 2):
            try:
                self.item_store.upsert(item)
                return CommitResult(item_id=item.id, committed=True, item=item)
            except StoreError as exc:
                if attempt == 1:
                    logger.warning("Saving item %s failed, retrying once: %s", item.id, exc)
                    continue
                logger.error("Saving item %s failed twice: %s", item.id, exc)
                return CommitResult(item_id=item.id, committed=False, error=str(exc))

    def _record_stats(self, new_learned: int = 0, reviewed: int = 0) -> Optional[str]:
        """
        Add to the counters of the clock's local day (with the same single retry).

        Returns:
            Error message, or None when the stats were saved
        """
        now = self.clock()
        elapsed = max(0, int((now - self.started_at).total_seconds()))
        for attempt in (1, 2):
            try:
                self.stats_store.increment(
                    new_learned=new_learned,
                    reviewed=reviewed,
                    total_time_seconds=elapsed,
                    day=local_day(now),
                )
                self.started_at = now
                return None
            except StoreError as exc:
                if attempt == 1:
                    logger.warning("Updating daily stats failed, retrying once: %s", exc)
                    continue
                logger.error("Updating daily stats failed twice: %s", exc)
                return str(exc)
