"""
Types for statistics views.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import pandas as pd


StatsRange = Literal["week", "month", "year", "all"]


@dataclass(frozen=True)
class AppStats:
    """
    Read projection over the item, list and stats stores.

    Item counts cover active lists only.
    """
    total_items: int
    not_started: int
    in_progress: int
    mastered: int
    today_learned: int
    today_reviewed: int
    active_lists: int
    total_lists: int


@dataclass(frozen=True)
class StatsHistory:
    """
    Daily activity over a window, plus its totals.
    """
    range: StatsRange
    daily: pd.DataFrame
    new_learned: int
    reviewed: int
    total_time_seconds: int
    active_days: int
