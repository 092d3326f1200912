"""
Sync - one-way replication of local progress to a remote store.
"""

from vocabox.sync.reconciler import SyncProgress, SyncReconciler, SyncResult, batch_records
from vocabox.sync.remote import MongoRemoteStore, RemoteStore

__all__ = [
    "SyncReconciler",
    "SyncProgress",
    "SyncResult",
    "batch_records",
    "RemoteStore",
    "MongoRemoteStore",
]
