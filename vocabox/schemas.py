"""
Pydantic models for data crossing the engine boundary.

- Import payloads handed over by the (out of scope) file parser
- The built-in list catalog used for one-time seeding
- Remote wire records written by the sync reconciler
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from vocabox.leitner.item_state import DailyStat, VocabularyItem, VocabularyList


# ---- Import Data ----

class ImportedPair(BaseModel):
    """One parsed vocabulary pair."""
    source_text: str = Field(..., min_length=1, description="Native-language term")
    target_text: str = Field(..., min_length=1, description="Term being learned")

    @field_validator("source_text", "target_text", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value


class ImportRequest(BaseModel):
    """A named list of parsed pairs to materialize as a user list."""
    name: str = Field(..., min_length=1)
    pairs: list[ImportedPair] = Field(..., min_length=1)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


# ---- Built-in Catalog ----

class BuiltinListRecord(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    premium_required: bool = False
    created_at: Optional[datetime] = None


class BuiltinItemRecord(BaseModel):
    id: str
    list_id: str
    source_text: str
    target_text: str
    created_at: Optional[datetime] = None


class BuiltinCatalog(BaseModel):
    """Bundled (or remotely fetched) built-in lists and their items."""
    lists: list[BuiltinListRecord] = Field(default_factory=list)
    items: list[BuiltinItemRecord] = Field(default_factory=list)


# ---- Remote Records ----

class RemoteRecord(BaseModel):
    """Base for documents upserted by id into the remote store."""
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    updated_at: datetime

    def to_document(self) -> dict:
        return self.model_dump(mode="json")


class RemoteListRecord(RemoteRecord):
    name: str
    is_active: bool
    item_count: int
    created_at: datetime
    uploaded_at: datetime

    @classmethod
    def from_list(cls, vocab_list: VocabularyList, user_id: str, now: datetime) -> RemoteListRecord:
        return cls(
            id=vocab_list.id,
            user_id=user_id,
            name=vocab_list.name,
            is_active=vocab_list.is_active,
            item_count=vocab_list.item_count,
            created_at=vocab_list.created_at,
            updated_at=now,
            uploaded_at=now,
        )


class RemoteItemRecord(RemoteRecord):
    list_id: str
    source_text: str
    target_text: str
    mastery_level: int = Field(..., ge=0, le=6)
    correct_count: int = Field(..., ge=0)
    incorrect_count: int = Field(..., ge=0)
    last_reviewed_at: Optional[datetime] = None
    next_review: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_item(cls, item: VocabularyItem, user_id: str, now: datetime) -> RemoteItemRecord:
        return cls(
            id=item.id,
            user_id=user_id,
            list_id=item.list_id,
            source_text=item.source_text,
            target_text=item.target_text,
            mastery_level=item.mastery_level,
            correct_count=item.correct_count,
            incorrect_count=item.incorrect_count,
            last_reviewed_at=item.last_reviewed_at,
            next_review=item.next_review,
            created_at=item.created_at,
            updated_at=now,
        )


class RemoteStatRecord(RemoteRecord):
    day: str
    new_learned: int = Field(..., ge=0)
    reviewed: int = Field(..., ge=0)
    total_time_seconds: int = Field(0, ge=0)

    @classmethod
    def from_stat(cls, stat: DailyStat, user_id: str, now: datetime) -> RemoteStatRecord:
        return cls(
            id=f"{user_id}:{stat.day}",
            user_id=user_id,
            day=stat.day,
            new_learned=stat.new_learned,
            reviewed=stat.reviewed,
            total_time_seconds=stat.total_time_seconds,
            updated_at=now,
        )
