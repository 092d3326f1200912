"""
Push local progress to MongoDB.

Uploads user-owned lists, studied items (level > 0) and daily stats in
batches. Failed batches are reported at the end; local data is never
changed.

Usage:
    python -m scripts.sync_to_remote --user-id ID [--batch-size N]
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional

from vocabox import config
from vocabox.item_repo import ItemRepository
from vocabox.leitner import Database
from vocabox.list_repo import ListRepository
from vocabox.stats_repo import StatsRepository
from vocabox.sync import MongoRemoteStore, SyncProgress, SyncReconciler


def print_progress(progress: SyncProgress) -> None:
    if progress.phase == "done":
        print(f"  done: {progress.total} records processed")
        return
    print(f"  {progress.phase}: {progress.current}/{progress.total}")


def sync(user_id: str, batch_size: Optional[int] = None) -> bool:
    print("=" * 60)
    print(f"Syncing local progress for user {user_id}")
    print("=" * 60)

    db = Database()
    db.init_db()
    remote = MongoRemoteStore()

    try:
        reconciler = SyncReconciler(
            ListRepository(db),
            ItemRepository(db),
            StatsRepository(db),
            remote,
            batch_size=batch_size
        )
        result = reconciler.sync_all(user_id, on_progress=print_progress)
    finally:
        remote.close()
        db.dispose()

    print()
    print(f"Lists uploaded: {result.lists_uploaded}")
    print(f"Items uploaded: {result.items_uploaded}")
    print(f"Stats uploaded: {result.stats_uploaded}")

    if result.success:
        print("\n✓ Sync complete")
    else:
        print(f"\n⚠ Sync finished with {len(result.errors)} error(s):")
        for error in result.errors:
            print(f"  - {error}")
    return result.success


def main():
    parser = argparse.ArgumentParser(
        description="Upload local lists, studied items and daily stats to MongoDB"
    )
    parser.add_argument(
        "--user-id",
        default=config.get_default_user_id(),
        help="Owner of the uploaded records (default: DEFAULT_USER_ID)"
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        help="Records per upload batch (default: SYNC_BATCH_SIZE or 100)"
    )

    args = parser.parse_args()
    ok = sync(args.user_id, batch_size=args.batch_size)
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
