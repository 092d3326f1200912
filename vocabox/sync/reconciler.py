"""
Sync Reconciler - one-way push of local progress to the remote store

Workflow:
1. Lists: user-owned lists only (built-in lists are shared, never uploaded)
2. Items: items of user-owned lists that have been studied (level > 0)
3. Stats: every daily stat record

Each category is uploaded in fixed-size batches. A failed batch is
recorded and skipped; the run always continues with the next batch.
Local data is the source of truth and is never modified here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterator, Optional, Sequence, TypeVar

from vocabox import config
from vocabox.errors import RemoteStoreError, StoreError
from vocabox.item_repo import ItemRepository
from vocabox.leitner.constants import MIN_LEVEL
from vocabox.leitner.item_state import utcnow
from vocabox.list_repo import ListRepository
from vocabox.schemas import RemoteItemRecord, RemoteListRecord, RemoteStatRecord
from vocabox.stats_repo import StatsRepository
from vocabox.sync.remote import RemoteStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

PHASE_LISTS = "lists"
PHASE_ITEMS = "items"
PHASE_STATS = "stats"
PHASE_DONE = "done"


@dataclass(frozen=True)
class SyncProgress:
    """Progress snapshot handed to the on_progress callback."""
    phase: str
    current: int
    total: int


@dataclass
class SyncResult:
    lists_uploaded: int = 0
    items_uploaded: int = 0
    stats_uploaded: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


ProgressCallback = Callable[[SyncProgress], None]


def batch_records(records: Sequence[T], batch_size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of at most `batch_size` records."""
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    for start in range(0, len(records), batch_size):
        yield records[start:start + batch_size]


class SyncReconciler:
    """
    Best-effort replication of local lists, items and stats.
    """

    def __init__(
        self,
        lists: ListRepository,
        items: ItemRepository,
        stats: StatsRepository,
        remote: RemoteStore,
        batch_size: Optional[int] = None
    ):
        self.lists = lists
        self.items = items
        self.stats = stats
        self.remote = remote
        self.batch_size = batch_size if batch_size is not None else config.get_sync_batch_size()
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")

    # ---- Local snapshot ----

    def _collect(self, user_id: str, now: datetime):
        user_lists = [vocab_list for vocab_list in self.lists.get_all() if not vocab_list.is_builtin]
        user_list_ids = {vocab_list.id for vocab_list in user_lists}

        studied = [
            item for item in self.items.get_all()
            if item.list_id in user_list_ids and item.mastery_level > MIN_LEVEL
        ]

        list_records = [RemoteListRecord.from_list(vl, user_id, now) for vl in user_lists]
        item_records = [RemoteItemRecord.from_item(item, user_id, now) for item in studied]
        stat_records = [
            RemoteStatRecord.from_stat(stat, user_id, now) for stat in self.stats.get_all()
        ]
        return list_records, item_records, stat_records

    # ---- Upload ----

    def _upload(
        self,
        phase: str,
        records: Sequence,
        upload: Callable[[Sequence], int],
        result: SyncResult,
        on_progress: Optional[ProgressCallback]
    ) -> int:
        uploaded = 0
        processed = 0
        total = len(records)

        for batch in batch_records(records, self.batch_size):
            if on_progress:
                on_progress(SyncProgress(phase, processed, total))
            try:
                upload(batch)
                uploaded += len(batch)
            except RemoteStoreError as exc:
                message = f"{phase} {processed + 1}-{processed + len(batch)}: {exc}"
                logger.warning("Sync batch failed: %s", message)
                result.errors.append(message)
            processed += len(batch)

        logger.info("Synced %s: %d/%d uploaded", phase, uploaded, total)
        return uploaded

    def sync_all(
        self,
        user_id: str,
        on_progress: Optional[ProgressCallback] = None
    ) -> SyncResult:
        """
        Upload lists, studied items and daily stats for `user_id`.

        Args:
            user_id: Owner of the uploaded records
            on_progress: Called before every batch and once when finished

        Returns:
            SyncResult with per-category counts and batch errors
        """
        if not user_id:
            raise ValueError("user_id is required for sync")

        result = SyncResult()
        now = utcnow()
        try:
            list_records, item_records, stat_records = self._collect(user_id, now)
        except StoreError as exc:
            logger.error("Sync aborted, local store unreadable: %s", exc)
            result.errors.append(f"local store: {exc}")
            return result

        result.lists_uploaded = self._upload(
            PHASE_LISTS, list_records, self.remote.upsert_lists, result, on_progress
        )
        result.items_uploaded = self._upload(
            PHASE_ITEMS, item_records, self.remote.upsert_items, result, on_progress
        )
        result.stats_uploaded = self._upload(
            PHASE_STATS, stat_records, self.remote.upsert_stats, result, on_progress
        )

        total = len(list_records) + len(item_records) + len(stat_records)
        if on_progress:
            on_progress(SyncProgress(PHASE_DONE, total, total))

        if result.success:
            logger.info(
                "Sync complete for %s: %d lists, %d items, %d stats",
                user_id, result.lists_uploaded, result.items_uploaded, result.stats_uploaded
            )
        else:
            logger.warning("Sync for %s finished with %d error(s)", user_id, len(result.errors))
        return result
