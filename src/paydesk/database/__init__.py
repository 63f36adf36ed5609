"""Storage layer for paydesk: remote document store and local snapshots."""

from paydesk.database.base import (
    RemoteStore,
    StoreError,
    StoreNotConfiguredError,
    StoreUnavailableError,
)
from paydesk.database.factories import create_remote_store, create_snapshot_store
from paydesk.database.snapshot import SnapshotStore

__all__ = [
    "RemoteStore",
    "StoreError",
    "StoreNotConfiguredError",
    "StoreUnavailableError",
    "SnapshotStore",
    "create_remote_store",
    "create_snapshot_store",
]
