"""
Session phase and result types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from vocabox.leitner.item_state import VocabularyItem


class LearningPhase(str, Enum):
    INTRODUCTION = "introduction"
    MATCHING = "matching"
    PRODUCTION = "production"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class ReviewPhase(str, Enum):
    AWAITING_ANSWER = "awaiting_answer"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class MatchingPrompt:
    """
    A recognition question: the native-language term and the candidate
    translations (one of them correct).
    """
    item_id: str
    prompt: str
    options: tuple[str, ...]


@dataclass(frozen=True)
class CommitResult:
    """
    Outcome of persisting one item.
    """
    item_id: str
    committed: bool
    item: Optional[VocabularyItem] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class BatchCommitResult:
    """
    Outcome of promoting a learning batch.

    promoted items are durable; pending items are still at level 0.
    """
    promoted: tuple[str, ...]
    pending: tuple[str, ...]
    errors: tuple[str, ...] = ()

    @property
    def success(self) -> bool:
        return not self.pending and not self.errors


@dataclass(frozen=True)
class AnswerResult:
    """
    What happened after an answer, a typo override or a match selection.

    accepted: the answer let the session move on
    committed: a durable write was made for this answer
    error: persistence problem to summarize to the user (None when fine)
    cooldown_seconds: delay before re-presenting a wrongly matched item
    """
    item_id: str
    accepted: bool
    attempts: int
    phase: str
    committed: bool = False
    item: Optional[VocabularyItem] = None
    error: Optional[str] = None
    cooldown_seconds: float = 0.0
