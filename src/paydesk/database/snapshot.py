"""Local persistence fallback: whole-workspace JSON snapshots."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from paydesk.database.mappers import snapshot_from_dict, snapshot_to_dict
from paydesk.domain.entities import WorkspaceSnapshot

logger = logging.getLogger(__name__)

STORAGE_KEY = "PAYDESK_DB_V1"
VERSION_KEY = "PAYDESK_VERSION"
CURRENT_VERSION = "1.0.0"


class SnapshotError(Exception):
    """A stored snapshot exists but cannot be read."""


class SnapshotStore:
    """Single-slot snapshot storage in a local directory.

    The snapshot lives in ``<directory>/PAYDESK_DB_V1.json`` and the schema
    version marker in ``<directory>/PAYDESK_VERSION``. A present snapshot is
    assumed to be compatible; there is no migration step.
    """

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    @property
    def snapshot_path(self) -> Path:
        return self.directory / f"{STORAGE_KEY}.json"

    @property
    def version_path(self) -> Path:
        return self.directory / VERSION_KEY

    def exists(self) -> bool:
        return self.snapshot_path.exists()

    def save(self, snapshot: WorkspaceSnapshot) -> None:
        """Overwrite the stored snapshot wholesale."""
        self.directory.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(snapshot_to_dict(snapshot), ensure_ascii=False, indent=2)

        # Write to a temp file in the same directory so the replace is atomic
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{STORAGE_KEY}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_path, self.snapshot_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        self.version_path.write_text(CURRENT_VERSION, encoding="utf-8")
        logger.debug(
            "Saved snapshot with %d departments, %d employees, %d expenses",
            len(snapshot.departments),
            len(snapshot.employees),
            len(snapshot.expenses),
        )

    def load(self) -> Optional[WorkspaceSnapshot]:
        """Load the stored snapshot, or None if nothing has been saved.

        Raises:
            SnapshotError: If the snapshot file cannot be parsed
        """
        if not self.exists():
            return None
        try:
            data = json.loads(self.snapshot_path.read_text(encoding="utf-8"))
            return snapshot_from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise SnapshotError(f"Cannot read snapshot {self.snapshot_path}: {e}") from e

    def stored_version(self) -> Optional[str]:
        if not self.version_path.exists():
            return None
        return self.version_path.read_text(encoding="utf-8").strip()
