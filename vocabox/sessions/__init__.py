"""
Sessions - learning and review interactions over a fixed batch of items.
"""

from vocabox.sessions.base import BaseSession, answers_match, normalize_answer
from vocabox.sessions.learning import LearningSession
from vocabox.sessions.review import ReviewSession
from vocabox.sessions.types import (
    AnswerResult,
    BatchCommitResult,
    CommitResult,
    LearningPhase,
    MatchingPrompt,
    ReviewPhase,
)

__all__ = [
    "BaseSession",
    "LearningSession",
    "ReviewSession",
    "AnswerResult",
    "BatchCommitResult",
    "CommitResult",
    "LearningPhase",
    "MatchingPrompt",
    "ReviewPhase",
    "answers_match",
    "normalize_answer",
]
