"""
Analytics - progress projections and statistics history.
"""

from vocabox.analytics.metrics import daily_stats_frame, level_distribution, range_totals
from vocabox.analytics.service import build_app_stats, build_stats_history
from vocabox.analytics.types import AppStats, StatsHistory, StatsRange

__all__ = [
    "AppStats",
    "StatsHistory",
    "StatsRange",
    "build_app_stats",
    "build_stats_history",
    "daily_stats_frame",
    "level_distribution",
    "range_totals",
]
