"""
SQLAlchemy ORM Models for the local store

Defines the five local collections: lists, items, daily stats, built-in
list preferences and settings. Timestamps are stored as ISO-8601 strings.
"""

from sqlalchemy import Boolean, Column, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class VocabularyListRow(Base):
    """
    Metadata for one vocabulary list (built-in or user-authored).
    """
    __tablename__ = 'vocabulary_lists'

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    # Denormalized; recomputed from membership on import
    item_count = Column(Integer, nullable=False, default=0)

    # For built-in lists the effective flag lives in list_preferences
    is_active = Column(Boolean, nullable=False, default=True)
    is_builtin = Column(Boolean, nullable=False, default=False)
    premium_required = Column(Boolean, nullable=False, default=False)

    created_at = Column(String(40), nullable=False)
    updated_at = Column(String(40), nullable=False)

    def __repr__(self):
        return f"<VocabularyListRow({self.id}, {self.name!r}, builtin={self.is_builtin})>"


class VocabularyItemRow(Base):
    """
    One vocabulary pair with its box state.
    """
    __tablename__ = 'vocabulary_items'

    id = Column(String(64), primary_key=True)
    list_id = Column(String(64), nullable=False)

    source_text = Column(Text, nullable=False)
    target_text = Column(Text, nullable=False)

    # Box state
    mastery_level = Column(Integer, nullable=False, default=0)
    next_review = Column(String(40), nullable=True)

    # Review tracking
    correct_count = Column(Integer, nullable=False, default=0)
    incorrect_count = Column(Integer, nullable=False, default=0)
    last_reviewed_at = Column(String(40), nullable=True)

    created_at = Column(String(40), nullable=False)
    updated_at = Column(String(40), nullable=False)

    __table_args__ = (
        Index('idx_items_list', 'list_id'),
        Index('idx_items_level', 'mastery_level'),
    )

    def __repr__(self):
        return f"<VocabularyItemRow({self.id}, level={self.mastery_level})>"


class DailyStatRow(Base):
    """
    Activity counters for one local calendar day.
    """
    __tablename__ = 'daily_stats'

    day = Column(String(10), primary_key=True)  # YYYY-MM-DD
    new_learned = Column(Integer, nullable=False, default=0)
    reviewed = Column(Integer, nullable=False, default=0)
    total_time_seconds = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<DailyStatRow({self.day}, new={self.new_learned}, reviewed={self.reviewed})>"


class ListPreferenceRow(Base):
    """
    User activity flag for a built-in list.
    """
    __tablename__ = 'list_preferences'

    list_id = Column(String(64), primary_key=True)
    is_active = Column(Boolean, nullable=False)

    def __repr__(self):
        return f"<ListPreferenceRow({self.list_id}, active={self.is_active})>"


class SettingRow(Base):
    """
    Free-form key/value app setting (JSON-encoded value).
    """
    __tablename__ = 'settings'

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)

    def __repr__(self):
        return f"<SettingRow({self.key})>"
