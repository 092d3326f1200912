"""
Repository for vocabulary lists and built-in list preferences.

Built-in lists are seeded once and never edited afterwards; the user's
on/off choice for them is kept in list_preferences so the seeded record
itself stays untouched.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError

from vocabox.errors import ListNotFoundError, ProtectedListError, StoreError
from vocabox.leitner.database import Database, list_from_row, write_item_row, write_list_row
from vocabox.leitner.item_state import VocabularyItem, VocabularyList, utcnow
from vocabox.leitner.models import ListPreferenceRow, VocabularyItemRow, VocabularyListRow

logger = logging.getLogger(__name__)

# Built-in lists start switched off until the user activates them
BUILTIN_DEFAULT_ACTIVE = False


class ListRepository:
    """
    Keyed storage for VocabularyList records.
    """

    def __init__(self, db: Database):
        self.db = db

    def _preferences(self, session) -> dict[str, bool]:
        return {
            pref.list_id: pref.is_active
            for pref in session.query(ListPreferenceRow).all()
        }

    def _to_list(self, row: VocabularyListRow, preferences: dict[str, bool]) -> VocabularyList:
        if row.is_builtin:
            return list_from_row(row, is_active=preferences.get(row.id, BUILTIN_DEFAULT_ACTIVE))
        return list_from_row(row)

    # ---- Queries ----

    def get_all(self) -> list[VocabularyList]:
        """
        All lists, with built-in activity resolved from preferences.
        """
        session = self.db.session()
        try:
            preferences = self._preferences(session)
            rows = session.query(VocabularyListRow).order_by(
                VocabularyListRow.created_at, VocabularyListRow.id
            ).all()
            return [self._to_list(row, preferences) for row in rows]
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to load lists: {exc}") from exc
        finally:
            session.close()

    def get(self, list_id: str) -> Optional[VocabularyList]:
        session = self.db.session()
        try:
            row = session.get(VocabularyListRow, list_id)
            if row is None:
                return None
            return self._to_list(row, self._preferences(session))
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to load list {list_id}: {exc}") from exc
        finally:
            session.close()

    def get_active_ids(self) -> list[str]:
        return [vocab_list.id for vocab_list in self.get_all() if vocab_list.is_active]

    def has_data(self) -> bool:
        """True once any list (built-in or user) exists locally."""
        session = self.db.session()
        try:
            return session.query(VocabularyListRow.id).first() is not None
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to inspect lists: {exc}") from exc
        finally:
            session.close()

    # ---- Writes ----

    def upsert(self, vocab_list: VocabularyList) -> None:
        """Create or replace a list record (idempotent by id)."""
        self.upsert_many([vocab_list])

    def upsert_many(self, lists: list[VocabularyList]) -> int:
        if not lists:
            return 0

        session = self.db.session()
        try:
            for vocab_list in lists:
                row = session.get(VocabularyListRow, vocab_list.id)
                if row is None:
                    row = VocabularyListRow()
                    write_list_row(row, vocab_list)
                    session.add(row)
                else:
                    write_list_row(row, vocab_list)
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(f"Failed to save {len(lists)} list(s): {exc}") from exc
        finally:
            session.close()
        return len(lists)

    def create_with_items(self, vocab_list: VocabularyList, items: Iterable[VocabularyItem]) -> int:
        """
        Insert a new list together with its items in one transaction.

        Either everything is written or nothing is.

        Returns:
            Number of items written
        """
        items = list(items)
        session = self.db.session()
        try:
            row = VocabularyListRow()
            write_list_row(row, vocab_list)
            session.add(row)
            for item in items:
                item_row = VocabularyItemRow()
                write_item_row(item_row, item)
                session.add(item_row)
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(f"Failed to create list {vocab_list.name!r}: {exc}") from exc
        finally:
            session.close()
        return len(items)

    def set_active(self, list_id: str, is_active: bool) -> VocabularyList:
        """
        Switch a list on or off.

        Built-in lists get a preference record; user lists are updated
        in place.

        Raises:
            ListNotFoundError: if no list has this id
        """
        session = self.db.session()
        try:
            row = session.get(VocabularyListRow, list_id)
            if row is None:
                raise ListNotFoundError(f"Unknown list: {list_id}")

            if row.is_builtin:
                pref = session.get(ListPreferenceRow, list_id)
                if pref is None:
                    session.add(ListPreferenceRow(list_id=list_id, is_active=is_active))
                else:
                    pref.is_active = is_active
            else:
                row.is_active = is_active
                row.updated_at = utcnow().isoformat()

            session.commit()
            result = self._to_list(row, self._preferences(session))
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(f"Failed to toggle list {list_id}: {exc}") from exc
        finally:
            session.close()

        logger.info("List %s %s", list_id, "activated" if is_active else "deactivated")
        return result

    def refresh_item_count(self, list_id: str, count: int) -> None:
        vocab_list = self.get(list_id)
        if vocab_list is None:
            raise ListNotFoundError(f"Unknown list: {list_id}")
        if vocab_list.item_count == count:
            return
        self.upsert(replace(vocab_list, item_count=count, updated_at=utcnow()))

    def delete(self, list_id: str) -> None:
        """
        Delete a user list record.

        Items are not touched here; see VocabularyService.delete_list.

        Raises:
            ListNotFoundError: if no list has this id
            ProtectedListError: for built-in lists
        """
        session = self.db.session()
        try:
            row = session.get(VocabularyListRow, list_id)
            if row is None:
                raise ListNotFoundError(f"Unknown list: {list_id}")
            if row.is_builtin:
                raise ProtectedListError(f"Built-in list {row.name!r} cannot be deleted")
            session.delete(row)
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(f"Failed to delete list {list_id}: {exc}") from exc
        finally:
            session.close()
