"""
Convert store records into DataFrames for statistics views.
"""

from __future__ import annotations

from typing import Sequence

import pandas as pd

from vocabox.analytics.constants import STAT_COLUMNS
from vocabox.leitner.item_state import DailyStat, VocabularyItem


def stats_to_df(stats: Sequence[DailyStat]) -> pd.DataFrame:
    """
    One row per recorded day, indexed by a normalized DatetimeIndex.
    """
    if not stats:
        return pd.DataFrame(
            columns=STAT_COLUMNS,
            index=pd.DatetimeIndex([], name="day"),
            dtype="int64",
        )

    df = pd.DataFrame(
        [
            {
                "day": stat.day,
                "new_learned": stat.new_learned,
                "reviewed": stat.reviewed,
                "total_time_seconds": stat.total_time_seconds,
            }
            for stat in stats
        ]
    )
    df["day"] = pd.to_datetime(df["day"]).dt.normalize()
    return df.groupby("day")[STAT_COLUMNS].sum().sort_index().astype("int64")


def items_to_df(items: Sequence[VocabularyItem]) -> pd.DataFrame:
    """Scheduling columns of the given items."""
    return pd.DataFrame(
        [
            {
                "item_id": item.id,
                "list_id": item.list_id,
                "mastery_level": item.mastery_level,
                "correct_count": item.correct_count,
                "incorrect_count": item.incorrect_count,
            }
            for item in items
        ],
        columns=["item_id", "list_id", "mastery_level", "correct_count", "incorrect_count"],
    )
