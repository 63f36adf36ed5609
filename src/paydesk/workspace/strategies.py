"""Strategies that make workspace mutations durable.

One strategy is chosen when the workspace starts and used for every mutation
of the session:

- ``RemoteMirror`` replays each mutation against the remote store in
  background asyncio tasks and reports store-assigned identifiers back.
- ``SnapshotMirror`` rewrites the local snapshot after each operation.

Mirror failures are logged and counted; the local state is never rolled back.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from functools import partial
from typing import Any, Awaitable, Callable, Optional, Sequence

from paydesk.database.base import Collection, RemoteStore
from paydesk.database.snapshot import SnapshotStore
from paydesk.domain.entities import SyncMode, WorkspaceSnapshot
from paydesk.workspace.identifiers import is_temporary

logger = logging.getLogger(__name__)

# Called with (collection name, temporary id, assigned id)
IdAssigned = Callable[[str, str, str], None]


class SyncStrategy(ABC):
    """How local mutations are mirrored."""

    mode: SyncMode

    def __init__(self) -> None:
        self.failures = 0

    def created(self, kind: str, entity: Any, on_assigned: IdAssigned) -> None:
        """An entity was inserted locally under a temporary ID."""

    def updated(self, kind: str, changes: Sequence[tuple[str, dict[str, Any]]]) -> None:
        """Entities were changed locally; ``changes`` holds (id, fields) pairs."""

    def deleted(self, kind: str, entity_ids: Sequence[str]) -> None:
        """Entities were removed locally."""

    def committed(self, snapshot: WorkspaceSnapshot) -> None:
        """A controller operation finished; ``snapshot`` is the new state."""

    def resolve_id(self, kind: str, entity_id: str) -> str:
        """ID the entity is held under now."""
        return entity_id

    async def drain(self) -> None:
        """Wait until every in-flight mirror write has finished."""

    @abstractmethod
    async def close(self) -> None:
        pass


class SnapshotMirror(SyncStrategy):
    """Persist the whole workspace to a local snapshot after each operation."""

    mode = SyncMode.LOCAL

    def __init__(self, snapshots: SnapshotStore):
        super().__init__()
        self.snapshots = snapshots

    def committed(self, snapshot: WorkspaceSnapshot) -> None:
        try:
            self.snapshots.save(snapshot)
        except OSError as e:
            self.failures += 1
            logger.error("Failed to save snapshot to %s: %s", self.snapshots.snapshot_path, e)

    async def close(self) -> None:
        pass


class RemoteMirror(SyncStrategy):
    """Mirror mutations to a remote store without blocking the caller.

    Each write runs in its own task. Writes that target the same entity run
    in submission order, so an update issued while the entity's create is
    still in flight waits for it and is sent to the store-assigned ID.
    Writes to different entities may complete in any order. Bulk updates and
    deletes go out one entity at a time and carry on past failures.

    Must be used from inside a running event loop.
    """

    mode = SyncMode.REMOTE

    def __init__(self, store: RemoteStore):
        super().__init__()
        self.store = store
        self._tasks: set[asyncio.Task] = set()
        self._latest: dict[tuple[str, str], asyncio.Task] = {}
        self._assigned: dict[tuple[str, str], str] = {}

    def _collection(self, kind: str) -> Collection:
        return getattr(self.store, kind)

    def _schedule(
        self,
        key: tuple[str, str],
        work: Callable[[], Awaitable[Any]],
        description: str,
        after: Optional[asyncio.Task] = None,
    ) -> asyncio.Task:
        """Run ``work`` once earlier writes for ``key`` (and ``after``) are done."""
        waits = [t for t in (self._latest.get(key), after) if t is not None]

        async def run() -> Any:
            if waits:
                # Earlier failures are reported by their own tasks
                await asyncio.wait(waits)
            return await work()

        task = asyncio.get_running_loop().create_task(run())
        self._latest[key] = task
        self._tasks.add(task)
        task.add_done_callback(partial(self._finished, key, description))
        return task

    def _finished(self, key: tuple[str, str], description: str, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if self._latest.get(key) is task:
            del self._latest[key]
        if task.cancelled():
            logger.warning("Mirror write cancelled: %s", description)
            return
        error = task.exception()
        if error is not None:
            self.failures += 1
            logger.error("Mirror write failed: %s: %s", description, error)

    def _target_id(self, kind: str, entity_id: str) -> Optional[str]:
        """Store ID for ``entity_id``, or None if its create never succeeded."""
        if not is_temporary(entity_id):
            return entity_id
        return self._assigned.get((kind, entity_id))

    def created(self, kind: str, entity: Any, on_assigned: IdAssigned) -> None:
        temporary_id = entity.id

        async def work() -> str:
            assigned_id = await self._collection(kind).create(entity)
            self._assigned[(kind, temporary_id)] = assigned_id
            on_assigned(kind, temporary_id, assigned_id)
            return assigned_id

        self._schedule((kind, temporary_id), work, f"create {kind} {temporary_id}")

    def updated(self, kind: str, changes: Sequence[tuple[str, dict[str, Any]]]) -> None:
        previous: Optional[asyncio.Task] = None
        for entity_id, fields in changes:
            previous = self._schedule(
                (kind, entity_id),
                partial(self._update, kind, entity_id, dict(fields)),
                f"update {kind} {entity_id}",
                after=previous,
            )

    def deleted(self, kind: str, entity_ids: Sequence[str]) -> None:
        previous: Optional[asyncio.Task] = None
        for entity_id in entity_ids:
            previous = self._schedule(
                (kind, entity_id),
                partial(self._delete, kind, entity_id),
                f"delete {kind} {entity_id}",
                after=previous,
            )

    async def _update(self, kind: str, entity_id: str, fields: dict[str, Any]) -> None:
        target = self._target_id(kind, entity_id)
        if target is None:
            logger.warning("Skipping update of %s %s: it was never stored", kind, entity_id)
            return
        if not await self._collection(kind).update(target, fields):
            logger.warning("Update of %s %s found no stored document", kind, target)

    async def _delete(self, kind: str, entity_id: str) -> None:
        target = self._target_id(kind, entity_id)
        if target is None:
            logger.warning("Skipping delete of %s %s: it was never stored", kind, entity_id)
            return
        if not await self._collection(kind).delete(target):
            logger.warning("Delete of %s %s found no stored document", kind, target)

    def resolve_id(self, kind: str, entity_id: str) -> str:
        return self._assigned.get((kind, entity_id), entity_id)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        await self.drain()
        await self.store.dispose()
