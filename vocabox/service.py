"""
VocabularyService - entry point for the presentation layer.

Builds the stores and the scheduler once around an explicit Database
handle and hands out sessions. All projections are recomputed on every
call.
"""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Iterable, Optional, Union

from vocabox import config
from vocabox.analytics import (
    AppStats,
    StatsHistory,
    StatsRange,
    build_app_stats,
    build_stats_history,
)
from vocabox.errors import ListNotFoundError, ProtectedListError
from vocabox.item_repo import ItemRepository
from vocabox.leitner.database import Database
from vocabox.leitner.item_state import VocabularyItem, VocabularyList, local_day, new_id, utcnow
from vocabox.leitner.scheduler import Scheduler
from vocabox.list_repo import ListRepository
from vocabox.schemas import ImportedPair, ImportRequest
from vocabox.sessions import LearningSession, ReviewSession
from vocabox.sessions.base import Clock
from vocabox.settings_repo import SettingsRepository
from vocabox.stats_repo import StatsRepository

logger = logging.getLogger(__name__)


class VocabularyService:
    """
    Facade over the stores, scheduler and sessions.
    """

    def __init__(
        self,
        db: Database,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None
    ):
        self.db = db
        self.clock = clock or utcnow
        self.items = ItemRepository(db)
        self.lists = ListRepository(db)
        self.stats = StatsRepository(db)
        self.settings = SettingsRepository(db)
        self.scheduler = Scheduler(self.items, self.lists, rng=rng)

    # ---- Sessions ----

    def request_learning_batch(self, n: Optional[int] = None) -> Optional[LearningSession]:
        """
        Start a learning session over up to `n` new items.

        Returns:
            LearningSession, or None when nothing new is left to learn
        """
        count = n if n is not None else config.get_learning_batch_size()
        batch = self.scheduler.select_for_learning(count)
        if not batch:
            logger.info("No new items available in active lists")
            return None
        return LearningSession(
            batch, self.items, self.stats, self.scheduler, clock=self.clock
        )

    def request_review_batch(self, shuffle: bool = True) -> Optional[ReviewSession]:
        """
        Start a review session over every due item.

        Returns:
            ReviewSession, or None when nothing is due
        """
        due = self.scheduler.select_for_review(self.clock())
        if not due:
            logger.info("No items due for review")
            return None
        return ReviewSession(
            due, self.items, self.stats, self.scheduler, shuffle=shuffle, clock=self.clock
        )

    # ---- Lists ----

    def toggle_list(self, list_id: str, active: bool) -> VocabularyList:
        return self.lists.set_active(list_id, active)

    def import_list(
        self,
        name: str,
        pairs: Iterable[Union[ImportedPair, dict]]
    ) -> VocabularyList:
        """
        Create an active user list from parsed source/target pairs.

        Raises:
            pydantic.ValidationError: for a blank name, no pairs or blank terms
            StoreError: if the list could not be written; nothing is kept then
        """
        request = ImportRequest(name=name, pairs=list(pairs))
        now = self.clock()
        vocab_list = VocabularyList(
            id=new_id(),
            name=request.name,
            created_at=now,
            updated_at=now,
            item_count=len(request.pairs),
            is_active=True,
            is_builtin=False,
        )
        items = [
            VocabularyItem.create(
                list_id=vocab_list.id,
                source_text=pair.source_text,
                target_text=pair.target_text,
                created_at=now,
            )
            for pair in request.pairs
        ]

        self.lists.create_with_items(vocab_list, items)
        logger.info("Imported list %r with %d items", vocab_list.name, len(items))
        return vocab_list

    def rename_list(self, list_id: str, name: str) -> VocabularyList:
        vocab_list = self.lists.get(list_id)
        if vocab_list is None:
            raise ListNotFoundError(f"Unknown list: {list_id}")
        if vocab_list.is_builtin:
            raise ProtectedListError(f"Built-in list {vocab_list.name!r} cannot be renamed")
        name = name.strip()
        if not name:
            raise ValueError("List name cannot be empty")
        updated = replace(vocab_list, name=name, updated_at=self.clock())
        self.lists.upsert(updated)
        return updated

    def delete_list(self, list_id: str) -> int:
        """
        Delete a user list and all of its items.

        Returns:
            Number of items removed
        """
        vocab_list = self.lists.get(list_id)
        if vocab_list is None:
            raise ListNotFoundError(f"Unknown list: {list_id}")
        if vocab_list.is_builtin:
            raise ProtectedListError(f"Built-in list {vocab_list.name!r} cannot be deleted")

        removed = self.items.delete_by_list(list_id)
        self.lists.delete(list_id)
        logger.info("Deleted list %r (%d items)", vocab_list.name, removed)
        return removed

    # ---- Projections ----

    def app_stats(self) -> AppStats:
        return build_app_stats(
            self.items.get_all(), self.lists.get_all(), self.stats.get_all(),
            day=local_day(self.clock())
        )

    def stats_history(self, stats_range: StatsRange = "week") -> StatsHistory:
        return build_stats_history(
            self.stats.get_all(), stats_range, end=local_day(self.clock())
        )

    def box_overview(self) -> dict[int, list[VocabularyItem]]:
        """Active-list items grouped by mastery level (0-6)."""
        return self.scheduler.group_by_level()

    # ---- Settings ----

    def daily_goal(self) -> int:
        return self.settings.get_daily_goal()

    def set_daily_goal(self, goal: int) -> None:
        self.settings.set_daily_goal(goal)
