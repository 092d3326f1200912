"""
Repository for app settings (JSON values keyed by name).
"""

from __future__ import annotations

import json
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from vocabox.errors import StoreError
from vocabox.leitner.database import Database
from vocabox.leitner.models import SettingRow

DAILY_GOAL_KEY = "daily_goal"
DEFAULT_DAILY_GOAL = 20


class SettingsRepository:

    def __init__(self, db: Database):
        self.db = db

    def get(self, key: str, default: Any = None) -> Any:
        session = self.db.session()
        try:
            row = session.get(SettingRow, key)
            return json.loads(row.value) if row is not None else default
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to load setting {key}: {exc}") from exc
        finally:
            session.close()

    def set(self, key: str, value: Any) -> None:
        encoded = json.dumps(value)
        session = self.db.session()
        try:
            row = session.get(SettingRow, key)
            if row is None:
                session.add(SettingRow(key=key, value=encoded))
            else:
                row.value = encoded
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(f"Failed to save setting {key}: {exc}") from exc
        finally:
            session.close()

    def get_all(self) -> dict[str, Any]:
        session = self.db.session()
        try:
            return {row.key: json.loads(row.value) for row in session.query(SettingRow).all()}
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to load settings: {exc}") from exc
        finally:
            session.close()

    def get_daily_goal(self) -> int:
        return int(self.get(DAILY_GOAL_KEY, DEFAULT_DAILY_GOAL))

    def set_daily_goal(self, goal: int) -> None:
        if goal <= 0:
            raise ValueError(f"Daily goal must be positive, got {goal}")
        self.set(DAILY_GOAL_KEY, goal)
