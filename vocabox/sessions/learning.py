"""
Learning session: introduces not-started items.

Phases run in strict order:
1. introduction - show each pair once, no scoring
2. matching - pick the right translation among several; mistakes only
   re-present the item
3. production - type the term being learned; retry until right or
   override as a typo
4. completed - every item promoted from level 0 to box 1

Only the final promotion writes to the store.
"""

from __future__ import annotations

import logging
import random
from typing import Optional, Sequence, Union

from vocabox import config
from vocabox.errors import SessionStateError
from vocabox.item_repo import ItemRepository
from vocabox.leitner.constants import MATCH_RETRY_COOLDOWN, MIN_LEVEL, Outcome
from vocabox.leitner.item_state import VocabularyItem
from vocabox.leitner.scheduler import Scheduler
from vocabox.sessions.base import BaseSession, Clock, answers_match, normalize_answer
from vocabox.sessions.types import (
    AnswerResult,
    BatchCommitResult,
    LearningPhase,
    MatchingPrompt,
)
from vocabox.stats_repo import StatsRepository

logger = logging.getLogger(__name__)


class LearningSession(BaseSession):
    """
    State machine for one batch of new items.
    """

    abandoned_phase = LearningPhase.ABANDONED
    finished_phases = (LearningPhase.COMPLETED, LearningPhase.ABANDONED)

    def __init__(
        self,
        items: Sequence[VocabularyItem],
        item_store: ItemRepository,
        stats_store: StatsRepository,
        scheduler: Scheduler,
        choices: Optional[int] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None
    ):
        super().__init__(items, item_store, stats_store, scheduler, clock)
        started = [item.id for item in self.items if item.mastery_level != MIN_LEVEL]
        if started:
            raise ValueError(f"Learning sessions only take level-0 items, got {started}")

        self.choices = choices if choices is not None else config.get_matching_choices()
        if self.choices < 2:
            raise ValueError(f"Matching needs at least 2 choices, got {self.choices}")

        self.rng = rng or scheduler.rng
        self.phase = LearningPhase.INTRODUCTION

        self.matched: set[str] = set()
        self.mistakes: dict[str, int] = {}
        self._options: dict[str, tuple[str, ...]] = {}
        self._attempts = 0

        # Filled once production is finished
        self.pending_commit: list[VocabularyItem] = []
        self.promoted: list[VocabularyItem] = []

    # ---- Introduction ----

    def advance(self) -> LearningPhase:
        """
        Move to the next introduced pair; after the last one, start matching.
        """
        self._require_phase(LearningPhase.INTRODUCTION)
        if self.position < len(self.items) - 1:
            self.position += 1
        else:
            self._start_matching()
        return self.phase

    def _start_matching(self) -> None:
        self.phase = LearningPhase.MATCHING
        self.position = 0
        self._options = {item.id: self._build_options(item) for item in self.items}

    def _build_options(self, item: VocabularyItem) -> tuple[str, ...]:
        correct = normalize_answer(item.target_text)
        distractors = []
        seen = {correct}
        for other in self.items:
            key = normalize_answer(other.target_text)
            if key not in seen:
                seen.add(key)
                distractors.append(other.target_text)

        picked = self.rng.sample(distractors, min(self.choices - 1, len(distractors)))
        options = [item.target_text, *picked]
        self.rng.shuffle(options)
        return tuple(options)

    # ---- Matching ----

    def matching_prompt(self) -> MatchingPrompt:
        self._require_phase(LearningPhase.MATCHING)
        item = self.items[self.position]
        return MatchingPrompt(
            item_id=item.id,
            prompt=item.source_text,
            options=self._options[item.id],
        )

    def select(self, index: int) -> AnswerResult:
        """
        Choose option `index` for the current matching prompt.

        A wrong choice keeps the same item (after a short cooldown) and
        has no effect on its level.
        """
        self._require_phase(LearningPhase.MATCHING)
        item = self.items[self.position]
        options = self._options[item.id]
        if not 0 <= index < len(options):
            raise ValueError(f"Option index {index} out of range (0..{len(options) - 1})")

        if not answers_match(options[index], item.target_text):
            self.mistakes[item.id] = self.mistakes.get(item.id, 0) + 1
            return AnswerResult(
                item_id=item.id,
                accepted=False,
                attempts=self.mistakes[item.id] + 1,
                phase=self.phase.value,
                cooldown_seconds=MATCH_RETRY_COOLDOWN,
            )

        self.matched.add(item.id)
        attempts = self.mistakes.get(item.id, 0) + 1
        next_index = next(
            (i for i, other in enumerate(self.items) if other.id not in self.matched),
            None
        )
        if next_index is None:
            self.phase = LearningPhase.PRODUCTION
            self.position = 0
            self._attempts = 0
        else:
            self.position = next_index

        return AnswerResult(
            item_id=item.id,
            accepted=True,
            attempts=attempts,
            phase=self.phase.value,
        )

    # ---- Production ----

    def submit(self, text: str) -> AnswerResult:
        """
        Check a typed answer for the current item.

        Wrong answers keep the session on the same item; there is no limit
        on retries.
        """
        self._require_phase(LearningPhase.PRODUCTION)
        self._require_open_production()
        item = self.items[self.position]
        self._attempts += 1

        if not answers_match(text, item.target_text):
            return AnswerResult(
                item_id=item.id,
                accepted=False,
                attempts=self._attempts,
                phase=self.phase.value,
            )
        return self._next_production(item)

    def mark_typo(self, item_id: Optional[str] = None) -> AnswerResult:
        """Accept the current production answer despite the mismatch."""
        self._require_phase(LearningPhase.PRODUCTION)
        self._require_open_production()
        if item_id is not None:
            self._require_current(item_id)
        item = self.items[self.position]
        self._attempts = max(self._attempts, 1)
        return self._next_production(item)

    def _require_open_production(self) -> None:
        if self.pending_commit or self.promoted:
            raise SessionStateError("All items are produced; use retry_commit()")

    def _next_production(self, item: VocabularyItem) -> AnswerResult:
        attempts = self._attempts
        if self.position < len(self.items) - 1:
            self.position += 1
            self._attempts = 0
            return AnswerResult(
                item_id=item.id,
                accepted=True,
                attempts=attempts,
                phase=self.phase.value,
            )

        self.pending_commit = list(self.items)
        batch = self._commit_batch()
        return AnswerResult(
            item_id=item.id,
            accepted=True,
            attempts=attempts,
            phase=self.phase.value,
            committed=batch.success,
            error="; ".join(batch.errors) or None,
        )

    # ---- Promotion ----

    def retry_commit(self) -> BatchCommitResult:
        """
        Promote the items a previous commit could not write.
        """
        self._require_phase(LearningPhase.PRODUCTION)
        if not self.pending_commit:
            raise SessionStateError("Nothing is waiting to be committed")
        return self._commit_batch()

    def _commit_batch(self) -> BatchCommitResult:
        """
        Promote pending items one by one (level 0 -> box 1).

        Stops at the first item that cannot be saved, so a failure leaves
        a committed prefix and an uncommitted remainder.
        """
        timestamp = self.clock()
        promoted_now: list[VocabularyItem] = []
        errors: list[str] = []

        while self.pending_commit:
            item = self.pending_commit[0]
            result = self._commit(self.scheduler.transition(item, Outcome.CORRECT, timestamp))
            if not result.committed:
                errors.append(f"{item.id}: {result.error}")
                break
            self.pending_commit.pop(0)
            promoted_now.append(result.item)

        self.promoted.extend(promoted_now)
        if promoted_now:
            stats_error = self._record_stats(new_learned=len(promoted_now))
            if stats_error:
                errors.append(f"daily stats: {stats_error}")

        if not self.pending_commit:
            self.phase = LearningPhase.COMPLETED
            self.position = len(self.items)

        logger.info(
            "Session %s promoted %d item(s), %d pending",
            self.session_id, len(promoted_now), len(self.pending_commit)
        )
        return BatchCommitResult(
            promoted=tuple(item.id for item in promoted_now),
            pending=tuple(item.id for item in self.pending_commit),
            errors=tuple(errors),
        )

    # ---- Presentation intents ----

    def submit_answer(self, item_id: str, answer: Union[int, str]) -> AnswerResult:
        """
        Route an answer for `item_id` by phase: an option index while
        matching, typed text during production.
        """
        self._require_current(item_id)
        if self.phase is LearningPhase.MATCHING:
            if not isinstance(answer, int) or isinstance(answer, bool):
                raise TypeError("Matching answers are option indexes")
            return self.select(answer)
        if self.phase is LearningPhase.PRODUCTION:
            if not isinstance(answer, str):
                raise TypeError("Production answers are text")
            return self.submit(answer)
        raise SessionStateError(f"No answer expected in phase {self.phase.value}")
