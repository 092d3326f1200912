"""
Print learning progress and recent daily activity.

Usage:
    python -m scripts.show_stats [--days N]
"""

from __future__ import annotations

import argparse

from vocabox.analytics import daily_stats_frame, level_distribution, range_totals
from vocabox.leitner import Database
from vocabox.service import VocabularyService

LEVEL_LABELS = {0: "new", 6: "mastered"}


def show(days: int = 7) -> None:
    db = Database()
    db.init_db()
    service = VocabularyService(db)

    stats = service.app_stats()
    print("=" * 60)
    print("Progress")
    print("=" * 60)
    print(f"Lists:        {stats.active_lists} active / {stats.total_lists} total")
    print(f"Items:        {stats.total_items}")
    print(f"  Not started: {stats.not_started}")
    print(f"  In progress: {stats.in_progress}")
    print(f"  Mastered:    {stats.mastered}")
    print(f"Today:        {stats.today_learned} learned, {stats.today_reviewed} reviewed"
          f" (goal {service.daily_goal()})")

    print("\nBoxes (active lists):")
    active_ids = set(service.lists.get_active_ids())
    active_items = [item for item in service.items.get_all() if item.list_id in active_ids]
    for level, count in level_distribution(active_items).items():
        label = LEVEL_LABELS.get(level, f"box {level}")
        print(f"  {level} ({label}): {count}")

    frame = daily_stats_frame(service.stats.get_all(), days=days)
    totals = range_totals(frame)
    print(f"\nLast {days} days:")
    print(frame[["new_learned", "reviewed", "total_time_seconds"]].to_string())
    print(f"\nTotal: {totals['new_learned']} learned, {totals['reviewed']} reviewed,"
          f" {totals['total_time_seconds'] // 60} min on {totals['active_days']} active day(s)")

    db.dispose()


def main():
    parser = argparse.ArgumentParser(description="Show learning progress")
    parser.add_argument(
        "--days",
        type=int,
        default=7,
        help="Number of days of history to show (default: 7)"
    )

    args = parser.parse_args()
    show(days=args.days)


if __name__ == "__main__":
    main()
