"""
Review session: free recall over due box 1-5 items.

Each item is presented until it exits, either with a correct answer or a
typo override:
- correct on the first attempt -> CORRECT, written on exit
- first wrong answer -> INCORRECT (back to box 1), written immediately;
  later wrong answers and the eventual correct retry write nothing more
- typo override -> CORRECT applied to the item as it was before any miss

Every write happens as soon as the answer is given, so stopping halfway
keeps each miss and every item that already exited.
"""

from __future__ import annotations

import logging
import random
from typing import Optional, Sequence

from vocabox.item_repo import ItemRepository
from vocabox.leitner.constants import Outcome, is_active_box
from vocabox.leitner.item_state import VocabularyItem
from vocabox.leitner.scheduler import Scheduler
from vocabox.sessions.base import BaseSession, Clock, answers_match
from vocabox.sessions.types import AnswerResult, CommitResult, ReviewPhase
from vocabox.stats_repo import StatsRepository

logger = logging.getLogger(__name__)


class ReviewSession(BaseSession):

    abandoned_phase = ReviewPhase.ABANDONED
    finished_phases = (ReviewPhase.COMPLETED, ReviewPhase.ABANDONED)

    def __init__(
        self,
        items: Sequence[VocabularyItem],
        item_store: ItemRepository,
        stats_store: StatsRepository,
        scheduler: Scheduler,
        shuffle: bool = False,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None
    ):
        super().__init__(items, item_store, stats_store, scheduler, clock)
        not_active = [item.id for item in self.items if not is_active_box(item.mastery_level)]
        if not_active:
            raise ValueError(f"Review sessions only take box 1-5 items, got {not_active}")

        if shuffle:
            (rng or scheduler.rng).shuffle(self.items)

        self.phase = ReviewPhase.AWAITING_ANSWER
        self._attempts = 0
        self._missed = False
        # Box-1 copy of the current item once its miss has been saved
        self._demoted: Optional[VocabularyItem] = None

        # item id -> outcome applied on exit
        self.results: dict[str, Outcome] = {}
        self.failed_commits: list[str] = []

    @property
    def reviewed_count(self) -> int:
        return len(self.results)

    @property
    def correct_count(self) -> int:
        return sum(1 for outcome in self.results.values() if outcome is Outcome.CORRECT)

    @property
    def remaining(self) -> int:
        if self.is_finished:
            return 0
        return len(self.items) - self.position

    def submit(self, text: str) -> AnswerResult:
        """
        Check a typed answer for the current item.

        The first wrong answer sends the item back to box 1 and saves it
        at once; the item stays on screen until answered correctly or
        overridden as a typo.
        """
        self._require_phase(ReviewPhase.AWAITING_ANSWER)
        item = self.items[self.position]
        self._attempts += 1

        if answers_match(text, item.target_text):
            outcome = Outcome.INCORRECT if self._missed else Outcome.CORRECT
            return self._finish_item(item, outcome)

        if self._missed:
            return AnswerResult(
                item_id=item.id,
                accepted=False,
                attempts=self._attempts,
                phase=self.phase.value,
                item=self._demoted,
            )

        self._missed = True
        result = self._commit(self.scheduler.transition(item, Outcome.INCORRECT, self.clock()))
        if result.committed:
            self._demoted = result.item
        return AnswerResult(
            item_id=item.id,
            accepted=False,
            attempts=self._attempts,
            phase=self.phase.value,
            committed=result.committed,
            item=result.item,
            error=result.error,
        )

    def mark_typo(self, item_id: Optional[str] = None) -> AnswerResult:
        """
        Accept the current item as correct despite a mismatching answer.

        The correct outcome is applied to the item as it was presented, so
        a miss saved earlier for it is replaced.
        """
        self._require_phase(ReviewPhase.AWAITING_ANSWER)
        if item_id is not None:
            self._require_current(item_id)
        item = self.items[self.position]
        self._attempts = max(self._attempts, 1)
        return self._finish_item(item, Outcome.CORRECT)

    def submit_answer(self, item_id: str, answer: str) -> AnswerResult:
        self._require_current(item_id)
        if not isinstance(answer, str):
            raise TypeError("Review answers are text")
        return self.submit(answer)

    def _finish_item(self, item: VocabularyItem, outcome: Outcome) -> AnswerResult:
        """
        Persist the exit state (unless the saved miss already is it) and
        move to the next item.

        A failed write leaves the stored item unchanged; the item still
        leaves this session and will come back in a later selection.
        """
        attempts = self._attempts
        if outcome is Outcome.INCORRECT and self._demoted is not None:
            result = CommitResult(item_id=item.id, committed=True, item=self._demoted)
        else:
            updated = self.scheduler.transition(item, outcome, self.clock())
            result = self._commit(updated)

        error = result.error
        if result.committed:
            self.results[item.id] = outcome
            stats_error = self._record_stats(reviewed=1)
            if stats_error:
                error = f"daily stats: {stats_error}"
        else:
            self.failed_commits.append(item.id)

        self.position += 1
        self._attempts = 0
        self._missed = False
        self._demoted = None
        if self.position >= len(self.items):
            self.phase = ReviewPhase.COMPLETED
            logger.info(
                "Review session %s completed: %d reviewed, %d correct, %d not saved",
                self.session_id, self.reviewed_count, self.correct_count,
                len(self.failed_commits)
            )

        return AnswerResult(
            item_id=item.id,
            accepted=True,
            attempts=attempts,
            phase=self.phase.value,
            committed=result.committed,
            item=result.item,
            error=error,
        )
