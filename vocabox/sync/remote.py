"""
Remote store for multi-device continuity (MongoDB).

Records are upserted by id and scoped by user_id. Nothing is ever read
back into the local store except the one-time built-in catalog.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence

from pymongo import MongoClient, UpdateOne
from pymongo.database import Database as MongoDatabase
from pymongo.errors import PyMongoError

from vocabox import config
from vocabox.errors import RemoteStoreError
from vocabox.schemas import (
    BuiltinCatalog,
    RemoteItemRecord,
    RemoteListRecord,
    RemoteRecord,
    RemoteStatRecord,
)

logger = logging.getLogger(__name__)

LISTS_COLLECTION = "vocabulary_lists"
ITEMS_COLLECTION = "vocabulary_items"
STATS_COLLECTION = "daily_stats"
BUILTIN_LISTS_COLLECTION = "builtin_lists"
BUILTIN_ITEMS_COLLECTION = "builtin_items"


class RemoteStore(Protocol):
    """Upsert-by-id target for the sync reconciler."""

    def upsert_lists(self, records: Sequence[RemoteListRecord]) -> int: ...

    def upsert_items(self, records: Sequence[RemoteItemRecord]) -> int: ...

    def upsert_stats(self, records: Sequence[RemoteStatRecord]) -> int: ...

    def fetch_builtin_catalog(self) -> BuiltinCatalog: ...


class MongoRemoteStore:
    """
    RemoteStore backed by a MongoDB database.

    Pass `client` to reuse an existing connection (or a test double);
    otherwise one is created from MONGO_URI.
    """

    def __init__(
        self,
        uri: Optional[str] = None,
        db_name: Optional[str] = None,
        client: Optional[MongoClient] = None
    ):
        if client is None:
            client = MongoClient(
                uri or config.get_mongo_uri(),
                maxPoolSize=10,
                minPoolSize=1,
                maxIdleTimeMS=60000
            )
        self.client = client
        self.db: MongoDatabase = client[db_name or config.get_mongo_db_name()]

    def _upsert(self, collection_name: str, records: Sequence[RemoteRecord]) -> int:
        if not records:
            return 0

        operations = [
            UpdateOne({"_id": record.id}, {"$set": record.to_document()}, upsert=True)
            for record in records
        ]
        try:
            result = self.db[collection_name].bulk_write(operations, ordered=False)
        except PyMongoError as exc:
            raise RemoteStoreError(
                f"Upload to {collection_name} failed ({len(records)} records): {exc}"
            ) from exc

        logger.debug(
            "%s: %d upserted, %d modified",
            collection_name, result.upserted_count, result.modified_count
        )
        return len(records)

    def upsert_lists(self, records: Sequence[RemoteListRecord]) -> int:
        return self._upsert(LISTS_COLLECTION, records)

    def upsert_items(self, records: Sequence[RemoteItemRecord]) -> int:
        return self._upsert(ITEMS_COLLECTION, records)

    def upsert_stats(self, records: Sequence[RemoteStatRecord]) -> int:
        return self._upsert(STATS_COLLECTION, records)

    def fetch_builtin_catalog(self) -> BuiltinCatalog:
        """
        Download the shared built-in lists and their items.
        """
        try:
            lists = list(self.db[BUILTIN_LISTS_COLLECTION].find({}, {"_id": 0}))
            items = list(self.db[BUILTIN_ITEMS_COLLECTION].find({}, {"_id": 0}))
        except PyMongoError as exc:
            raise RemoteStoreError(f"Failed to fetch built-in catalog: {exc}") from exc

        logger.info("Fetched built-in catalog: %d lists, %d items", len(lists), len(items))
        return BuiltinCatalog.model_validate({"lists": lists, "items": items})

    def close(self) -> None:
        self.client.close()
