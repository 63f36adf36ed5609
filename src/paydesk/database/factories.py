"""Factory functions for creating store instances."""

from pathlib import Path
from typing import Optional

from paydesk.database.snapshot import SnapshotStore
from paydesk.database.sqlalchemy_store import SQLAlchemyStore


def sqlite_url(database_path: str | Path) -> str:
    """Return an async SQLAlchemy URL for a SQLite file."""
    return f"sqlite+aiosqlite:///{database_path}"


def create_remote_store(database_url: Optional[str]) -> SQLAlchemyStore:
    """Create the remote store.

    Args:
        database_url: Async SQLAlchemy URL. If None or empty the returned
            store reports itself as not configured.

    Returns:
        SQLAlchemyStore instance
    """
    return SQLAlchemyStore(database_url or None)


def create_snapshot_store(data_dir: str | Path) -> SnapshotStore:
    """Create the local snapshot store in ``data_dir``."""
    return SnapshotStore(Path(data_dir).expanduser())
