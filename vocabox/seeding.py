"""
One-time seeding of the built-in vocabulary lists.

The catalog comes from the bundled JSON file or, optionally, from the
remote store. Seeding only runs on an empty local store unless forced;
a forced run refreshes list metadata and adds missing items but never
touches items that already exist locally.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from importlib import resources
from typing import Optional

from vocabox.item_repo import ItemRepository
from vocabox.leitner.item_state import VocabularyItem, VocabularyList, utcnow
from vocabox.list_repo import BUILTIN_DEFAULT_ACTIVE, ListRepository
from vocabox.schemas import BuiltinCatalog

logger = logging.getLogger(__name__)

BUNDLED_CATALOG = "builtin_lists.json"


def load_bundled_catalog() -> BuiltinCatalog:
    """Read the catalog shipped in vocabox/data."""
    raw = resources.files("vocabox.data").joinpath(BUNDLED_CATALOG).read_text(encoding="utf-8")
    return BuiltinCatalog.model_validate(json.loads(raw))


def seed_builtin_lists(
    lists: ListRepository,
    items: ItemRepository,
    catalog: Optional[BuiltinCatalog] = None,
    force: bool = False
) -> tuple[int, int]:
    """
    Materialize built-in lists and their (level-0) items locally.

    Args:
        lists: List store
        items: Item store
        catalog: Catalog to seed from (bundled one by default)
        force: Seed even if local lists already exist; items already
            stored keep their progress

    Returns:
        Tuple of (lists_seeded, items_added); (0, 0) when skipped
    """
    if not force and lists.has_data():
        logger.info("Local lists already present, skipping built-in seeding")
        return 0, 0

    if catalog is None:
        catalog = load_bundled_catalog()

    known_ids = {record.id for record in catalog.lists}
    orphans = [record.id for record in catalog.items if record.list_id not in known_ids]
    if orphans:
        raise ValueError(f"Catalog items reference unknown lists: {orphans[:5]}")

    now = utcnow()
    stored_lists = {vocab_list.id: vocab_list for vocab_list in lists.get_all()}
    stored_item_ids = {item.id for item in items.get_all()}
    counts = Counter(record.list_id for record in catalog.items)

    vocab_lists = [
        VocabularyList(
            id=record.id,
            name=record.name,
            created_at=_first_created(record.created_at, stored_lists.get(record.id), now),
            updated_at=now,
            item_count=counts[record.id],
            is_active=BUILTIN_DEFAULT_ACTIVE,
            is_builtin=True,
            description=record.description,
            premium_required=record.premium_required,
        )
        for record in catalog.lists
    ]
    vocab_items = [
        VocabularyItem.create(
            list_id=record.list_id,
            source_text=record.source_text,
            target_text=record.target_text,
            item_id=record.id,
            created_at=record.created_at or now,
        )
        for record in catalog.items
        if record.id not in stored_item_ids
    ]

    lists.upsert_many(vocab_lists)
    items.upsert_many(vocab_items)
    for vocab_list in vocab_lists:
        lists.refresh_item_count(vocab_list.id, items.count_by_list(vocab_list.id))

    skipped = len(catalog.items) - len(vocab_items)
    logger.info(
        "Seeded %d built-in lists with %d new items (%d already stored)",
        len(vocab_lists), len(vocab_items), skipped
    )
    return len(vocab_lists), len(vocab_items)


def _first_created(catalog_created, stored: Optional[VocabularyList], now):
    if catalog_created is not None:
        return catalog_created
    if stored is not None:
        return stored.created_at
    return now
