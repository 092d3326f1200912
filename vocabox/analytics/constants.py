"""
Constants for statistics views.
"""

from __future__ import annotations

from typing import Optional

from vocabox.analytics.types import StatsRange

# Window length in days; None means the full history
RANGE_DAYS: dict[StatsRange, Optional[int]] = {
    "week": 7,
    "month": 30,
    "year": 365,
    "all": None,
}

STAT_COLUMNS = ["new_learned", "reviewed", "total_time_seconds"]
