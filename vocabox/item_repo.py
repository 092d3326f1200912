"""
Repository for vocabulary items.

Dumb persistence boundary: stores and returns VocabularyItem values keyed
by id. No scheduling logic lives here.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from vocabox.errors import StoreError
from vocabox.leitner.database import Database, item_from_row, write_item_row
from vocabox.leitner.item_state import VocabularyItem
from vocabox.leitner.models import VocabularyItemRow

logger = logging.getLogger(__name__)


class ItemRepository:
    """
    Keyed storage for VocabularyItem records.
    """

    def __init__(self, db: Database):
        self.db = db

    # ---- Queries ----

    def _query(self, *criteria) -> list[VocabularyItem]:
        session = self.db.session()
        try:
            rows = session.query(VocabularyItemRow).filter(*criteria).order_by(
                VocabularyItemRow.created_at, VocabularyItemRow.id
            ).all()
            return [item_from_row(row) for row in rows]
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to load items: {exc}") from exc
        finally:
            session.close()

    def get_all(self) -> list[VocabularyItem]:
        """Every known item, regardless of list activity."""
        return self._query()

    def get(self, item_id: str) -> Optional[VocabularyItem]:
        session = self.db.session()
        try:
            row = session.get(VocabularyItemRow, item_id)
            return item_from_row(row) if row is not None else None
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to load item {item_id}: {exc}") from exc
        finally:
            session.close()

    def get_by_list(self, list_id: str) -> list[VocabularyItem]:
        return self._query(VocabularyItemRow.list_id == list_id)

    def get_by_mastery_level(self, level: int) -> list[VocabularyItem]:
        return self._query(VocabularyItemRow.mastery_level == level)

    def count_by_list(self, list_id: str) -> int:
        session = self.db.session()
        try:
            return session.query(func.count(VocabularyItemRow.id)).filter(
                VocabularyItemRow.list_id == list_id
            ).scalar() or 0
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to count items of list {list_id}: {exc}") from exc
        finally:
            session.close()

    # ---- Writes ----

    def upsert(self, item: VocabularyItem) -> None:
        """
        Create or replace an item (idempotent by id).

        On failure the transaction is rolled back and StoreError raised;
        previously committed items are untouched.
        """
        self.upsert_many([item])

    def upsert_many(self, items: Iterable[VocabularyItem]) -> int:
        """
        Create or replace several items in a single transaction.

        Returns:
            Number of items written
        """
        items = list(items)
        if not items:
            return 0

        session = self.db.session()
        try:
            for item in items:
                row = session.get(VocabularyItemRow, item.id)
                if row is None:
                    row = VocabularyItemRow()
                    write_item_row(row, item)
                    session.add(row)
                else:
                    write_item_row(row, item)
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(f"Failed to save {len(items)} item(s): {exc}") from exc
        finally:
            session.close()
        return len(items)

    def delete(self, item_id: str) -> None:
        session = self.db.session()
        try:
            session.query(VocabularyItemRow).filter(
                VocabularyItemRow.id == item_id
            ).delete(synchronize_session=False)
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(f"Failed to delete item {item_id}: {exc}") from exc
        finally:
            session.close()

    def delete_by_list(self, list_id: str) -> int:
        """
        Remove every item of a list.

        Returns:
            Number of items deleted
        """
        session = self.db.session()
        try:
            deleted = session.query(VocabularyItemRow).filter(
                VocabularyItemRow.list_id == list_id
            ).delete(synchronize_session=False)
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(f"Failed to delete items of list {list_id}: {exc}") from exc
        finally:
            session.close()

        logger.info("Deleted %d item(s) of list %s", deleted, list_id)
        return deleted
