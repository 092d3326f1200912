"""
Database - Local store connection and row mapping

Handles the SQLAlchemy engine, sessions and conversion between ORM rows and
the item_state value types.

This module handles ONLY database plumbing.
Query and write operations live in the repository modules.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from vocabox import config
from vocabox.leitner.item_state import DailyStat, VocabularyItem, VocabularyList, utcnow
from vocabox.leitner.models import (
    Base,
    DailyStatRow,
    VocabularyItemRow,
    VocabularyListRow,
)

logger = logging.getLogger(__name__)

REQUIRED_TABLES = {
    "vocabulary_lists",
    "vocabulary_items",
    "daily_stats",
    "list_preferences",
    "settings",
}


class Database:
    """
    Handle on the local durable store.

    Created once at startup and passed to every repository; there is no
    module-level connection.
    """

    def __init__(self, url: Optional[str] = None, echo: bool = False):
        self.url = url or config.get_database_url()
        self.engine = _create_engine(self.url, echo=echo)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    def session(self) -> Session:
        """
        Get a SQLAlchemy session for database operations.

        Callers close it in a finally block.
        """
        return self._session_factory()

    def init_db(self) -> None:
        """
        Initialize database schema if tables don't exist.

        Safe to call multiple times - only creates missing tables.
        """
        existing_tables = set(inspect(self.engine).get_table_names())
        if REQUIRED_TABLES <= existing_tables:
            return
        Base.metadata.create_all(self.engine)
        logger.info("Created local tables: %s", sorted(REQUIRED_TABLES - existing_tables))

    def reset_db(self) -> None:
        """
        DANGEROUS: Delete all data and recreate tables.

        All lists, progress and daily stats will be lost!
        """
        Base.metadata.drop_all(self.engine)
        logger.warning("All local tables dropped")
        self.init_db()

    def dispose(self) -> None:
        self.engine.dispose()


def _create_engine(url: str, echo: bool = False):
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return create_engine(
            url,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,
            echo=echo
        )

    if parsed.database in (None, "", ":memory:"):
        # One shared connection so every session sees the same in-memory db
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo
        )

    Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, echo=echo)


# ---- Timestamp helpers ----

def to_iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def from_iso(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


# ---- Row mapping ----

def item_from_row(row: VocabularyItemRow) -> VocabularyItem:
    return VocabularyItem(
        id=row.id,
        list_id=row.list_id,
        source_text=row.source_text,
        target_text=row.target_text,
        created_at=from_iso(row.created_at),
        mastery_level=row.mastery_level,
        next_review=from_iso(row.next_review),
        correct_count=row.correct_count,
        incorrect_count=row.incorrect_count,
        last_reviewed_at=from_iso(row.last_reviewed_at),
    )


def write_item_row(row: VocabularyItemRow, item: VocabularyItem) -> None:
    """Copy every field of `item` onto `row` (modifies row in place)."""
    row.id = item.id
    row.list_id = item.list_id
    row.source_text = item.source_text
    row.target_text = item.target_text
    row.mastery_level = item.mastery_level
    row.next_review = to_iso(item.next_review)
    row.correct_count = item.correct_count
    row.incorrect_count = item.incorrect_count
    row.last_reviewed_at = to_iso(item.last_reviewed_at)
    row.created_at = to_iso(item.created_at)
    row.updated_at = utcnow().isoformat()


def list_from_row(row: VocabularyListRow, is_active: Optional[bool] = None) -> VocabularyList:
    """
    Build a VocabularyList; `is_active` overrides the stored flag (used for
    built-in lists whose activity lives in list_preferences).
    """
    return VocabularyList(
        id=row.id,
        name=row.name,
        created_at=from_iso(row.created_at),
        updated_at=from_iso(row.updated_at),
        item_count=row.item_count,
        is_active=row.is_active if is_active is None else is_active,
        is_builtin=row.is_builtin,
        description=row.description,
        premium_required=row.premium_required,
    )


def write_list_row(row: VocabularyListRow, vocab_list: VocabularyList) -> None:
    row.id = vocab_list.id
    row.name = vocab_list.name
    row.description = vocab_list.description
    row.item_count = vocab_list.item_count
    row.is_active = vocab_list.is_active
    row.is_builtin = vocab_list.is_builtin
    row.premium_required = vocab_list.premium_required
    row.created_at = to_iso(vocab_list.created_at)
    row.updated_at = to_iso(vocab_list.updated_at)


def stat_from_row(row: DailyStatRow) -> DailyStat:
    return DailyStat(
        day=row.day,
        new_learned=row.new_learned,
        reviewed=row.reviewed,
        total_time_seconds=row.total_time_seconds,
    )
