"""
Service layer to assemble statistics views.
"""

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from vocabox.analytics.constants import RANGE_DAYS
from vocabox.analytics.metrics import daily_stats_frame, range_totals
from vocabox.analytics.types import AppStats, StatsHistory, StatsRange
from vocabox.leitner.constants import MASTERED_LEVEL, MIN_LEVEL
from vocabox.leitner.item_state import DailyStat, VocabularyItem, VocabularyList, today_key


def build_app_stats(
    items: Sequence[VocabularyItem],
    lists: Sequence[VocabularyList],
    stats: Sequence[DailyStat],
    day: Optional[date] = None
) -> AppStats:
    """
    Project the current store contents into AppStats.

    Item counts only include items of active lists; the today counters come
    from the daily stat of `day` (today by default).
    """
    active_ids = {vocab_list.id for vocab_list in lists if vocab_list.is_active}
    active_items = [item for item in items if item.list_id in active_ids]

    key = today_key(day)
    today = next((stat for stat in stats if stat.day == key), None)

    return AppStats(
        total_items=len(active_items),
        not_started=sum(1 for item in active_items if item.mastery_level == MIN_LEVEL),
        in_progress=sum(
            1 for item in active_items if MIN_LEVEL < item.mastery_level < MASTERED_LEVEL
        ),
        mastered=sum(1 for item in active_items if item.mastery_level == MASTERED_LEVEL),
        today_learned=today.new_learned if today else 0,
        today_reviewed=today.reviewed if today else 0,
        active_lists=len(active_ids),
        total_lists=len(lists),
    )


def build_stats_history(
    stats: Sequence[DailyStat],
    stats_range: StatsRange = "week",
    end: Optional[date] = None
) -> StatsHistory:
    """
    Daily frame and totals for one of the week/month/year/all windows.
    """
    if stats_range not in RANGE_DAYS:
        raise ValueError(f"Unknown stats range: {stats_range!r}")

    frame = daily_stats_frame(stats, days=RANGE_DAYS[stats_range], end=end)
    totals = range_totals(frame)
    return StatsHistory(
        range=stats_range,
        daily=frame,
        new_learned=totals["new_learned"],
        reviewed=totals["reviewed"],
        total_time_seconds=totals["total_time_seconds"],
        active_days=totals["active_days"],
    )
