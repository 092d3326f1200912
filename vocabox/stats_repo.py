"""
Repository for daily learning statistics.

One record per local calendar day. Updates are additive merges.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from vocabox.errors import StoreError
from vocabox.leitner.database import Database, stat_from_row
from vocabox.leitner.item_state import DailyStat, today_key
from vocabox.leitner.models import DailyStatRow


class StatsRepository:
    """
    Keyed storage for DailyStat records.
    """

    def __init__(self, db: Database):
        self.db = db

    def get_all(self) -> list[DailyStat]:
        """All daily stats, oldest first."""
        session = self.db.session()
        try:
            rows = session.query(DailyStatRow).order_by(DailyStatRow.day).all()
            return [stat_from_row(row) for row in rows]
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to load daily stats: {exc}") from exc
        finally:
            session.close()

    def get(self, day: Optional[date] = None) -> Optional[DailyStat]:
        key = today_key(day)
        session = self.db.session()
        try:
            row = session.get(DailyStatRow, key)
            return stat_from_row(row) if row is not None else None
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to load daily stat {key}: {exc}") from exc
        finally:
            session.close()

    def increment(
        self,
        new_learned: int = 0,
        reviewed: int = 0,
        total_time_seconds: int = 0,
        day: Optional[date] = None
    ) -> DailyStat:
        """
        Add to the counters of one day, creating the record if needed.

        Args:
            new_learned: Items promoted out of level 0
            reviewed: Items that finished a review
            total_time_seconds: Study time to add
            day: Local date (defaults to today)

        Returns:
            The merged record
        """
        if min(new_learned, reviewed, total_time_seconds) < 0:
            raise ValueError("Daily stat increments must be non-negative")

        key = today_key(day)
        session = self.db.session()
        try:
            row = session.get(DailyStatRow, key)
            if row is None:
                row = DailyStatRow(
                    day=key,
                    new_learned=new_learned,
                    reviewed=reviewed,
                    total_time_seconds=total_time_seconds
                )
                session.add(row)
            else:
                row.new_learned += new_learned
                row.reviewed += reviewed
                row.total_time_seconds += total_time_seconds
            session.commit()
            return stat_from_row(row)
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(f"Failed to update daily stat {key}: {exc}") from exc
        finally:
            session.close()
