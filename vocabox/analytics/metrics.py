"""
Metric computations for statistics views.
"""

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import pandas as pd

from vocabox.analytics.constants import STAT_COLUMNS
from vocabox.analytics.queries import items_to_df, stats_to_df
from vocabox.leitner.constants import MASTERED_LEVEL, MIN_LEVEL
from vocabox.leitner.item_state import DailyStat, VocabularyItem


def build_day_index(
    stats_df: pd.DataFrame,
    days: Optional[int] = None,
    end: Optional[date] = None
) -> pd.DatetimeIndex:
    """
    Dense day index ending at `end` (today by default).

    With `days` the index covers exactly that many days; otherwise it starts
    at the first recorded day.
    """
    end_ts = pd.Timestamp(end or date.today()).normalize()
    if days is not None:
        if days <= 0:
            raise ValueError(f"days must be positive, got {days}")
        return pd.date_range(end=end_ts, periods=days, freq="D", name="day")
    if stats_df.empty:
        return pd.DatetimeIndex([], name="day")
    start = min(stats_df.index.min(), end_ts)
    return pd.date_range(start=start, end=end_ts, freq="D", name="day")


def daily_stats_frame(
    stats: Sequence[DailyStat],
    days: Optional[int] = None,
    end: Optional[date] = None
) -> pd.DataFrame:
    """
    Daily counters with missing days filled with zero.

    Columns: new_learned, reviewed, total_time_seconds and the running
    totals cum_new_learned, cum_reviewed.
    """
    stats_df = stats_to_df(stats)
    day_index = build_day_index(stats_df, days=days, end=end)

    frame = stats_df.reindex(day_index, fill_value=0).astype("int64")
    frame.index.name = "day"
    frame["cum_new_learned"] = frame["new_learned"].cumsum()
    frame["cum_reviewed"] = frame["reviewed"].cumsum()
    return frame


def range_totals(frame: pd.DataFrame) -> dict[str, int]:
    """
    Sum a daily frame into window totals.
    """
    if frame.empty:
        totals = {column: 0 for column in STAT_COLUMNS}
        totals["active_days"] = 0
        return totals

    totals = {column: int(frame[column].sum()) for column in STAT_COLUMNS}
    totals["active_days"] = int(((frame["new_learned"] + frame["reviewed"]) > 0).sum())
    return totals


def level_distribution(items: Sequence[VocabularyItem]) -> pd.Series:
    """
    Item count per mastery level, every level 0-6 present.
    """
    levels = pd.RangeIndex(MIN_LEVEL, MASTERED_LEVEL + 1, name="mastery_level")
    items_df = items_to_df(items)
    if items_df.empty:
        return pd.Series(0, index=levels, dtype="int64", name="items")
    counts = items_df["mastery_level"].value_counts()
    return counts.reindex(levels, fill_value=0).astype("int64").rename("items")
