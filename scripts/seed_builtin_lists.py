"""
Seed the built-in vocabulary lists into the local database.

This script:
1. Creates the local tables if needed
2. Loads the built-in catalog (bundled JSON, or MongoDB with --from-remote)
3. Stores every list (inactive) and every item not stored yet (level 0)

Seeding is skipped when local lists already exist, unless --force is given.

Usage:
    python -m scripts.seed_builtin_lists [--from-remote] [--force]
"""

from __future__ import annotations

import argparse

from vocabox.item_repo import ItemRepository
from vocabox.leitner import Database
from vocabox.list_repo import ListRepository
from vocabox.seeding import load_bundled_catalog, seed_builtin_lists
from vocabox.sync import MongoRemoteStore


def seed(from_remote: bool = False, force: bool = False) -> None:
    print("=" * 60)
    print("Seeding built-in lists")
    print("=" * 60)

    db = Database()
    db.init_db()
    items = ItemRepository(db)
    lists = ListRepository(db)

    if from_remote:
        print("\nFetching catalog from MongoDB...")
        remote = MongoRemoteStore()
        try:
            catalog = remote.fetch_builtin_catalog()
        finally:
            remote.close()
    else:
        print("\nLoading bundled catalog...")
        catalog = load_bundled_catalog()

    print(f"  Catalog: {len(catalog.lists)} lists, {len(catalog.items)} items")

    list_count, item_count = seed_builtin_lists(lists, items, catalog=catalog, force=force)
    if list_count == 0:
        print("\n⚠ Local lists already exist - nothing seeded (use --force to re-seed)")
    else:
        print(f"\n✓ Seeded {list_count} lists with {item_count} new items")

    db.dispose()


def main():
    parser = argparse.ArgumentParser(
        description="Seed the built-in vocabulary lists into the local database"
    )
    parser.add_argument(
        "--from-remote",
        action="store_true",
        help="Fetch the catalog from MongoDB instead of the bundled file"
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Seed even if local lists exist (adds missing items, keeps progress)"
    )

    args = parser.parse_args()
    seed(from_remote=args.from_remote, force=args.force)


if __name__ == "__main__":
    main()
