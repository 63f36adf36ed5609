"""Test doubles for the remote store."""

import asyncio
import itertools
from dataclasses import replace
from types import SimpleNamespace

from paydesk.database.base import Collection, RemoteStore, StoreUnavailableError


class MemoryCollection(Collection):
    """In-memory collection with switchable latency and failures."""

    def __init__(self, name: str):
        self.name = name
        self.documents = {}
        self.calls = []
        self.delay = 0.0
        self.fail = set()
        self._ids = itertools.count(1)

    async def _io(self, operation: str, entity_id=None):
        self.calls.append((operation, entity_id))
        if self.delay:
            await asyncio.sleep(self.delay)
        if operation in self.fail:
            raise StoreUnavailableError(f"{operation} on {self.name} failed")

    async def list_all(self):
        await self._io("list")
        return list(self.documents.values())

    async def create(self, entity):
        await self._io("create")
        new_id = f"{self.name}-{next(self._ids)}"
        self.documents[new_id] = replace(entity, id=new_id)
        return new_id

    async def update(self, entity_id, fields):
        await self._io("update", entity_id)
        if entity_id not in self.documents:
            return False
        self.documents[entity_id] = replace(self.documents[entity_id], **fields)
        return True

    async def delete(self, entity_id):
        await self._io("delete", entity_id)
        return self.documents.pop(entity_id, None) is not None


class MemoryStore(RemoteStore):
    """Remote store double keeping documents in dictionaries."""

    def __init__(self, configured: bool = True, reachable: bool = True):
        self.configured = configured
        self.reachable = reachable
        self.disposed = False
        self.departments = MemoryCollection("departments")
        self.employees = MemoryCollection("employees")
        self.expenses = MemoryCollection("expenses")

    def collections(self):
        return (self.departments, self.employees, self.expenses)

    def is_configured(self):
        return self.configured

    async def initialize_schema(self):
        if not self.reachable:
            raise StoreUnavailableError("connection refused")

    async def dispose(self):
        self.disposed = True


def fixed_clock(ms: int = 1_729_425_600_000):
    """Clock that never advances, so IDs differ only by sequence."""
    return lambda: ms * 1_000_000




class FakeCompletions:
    """Stand-in for the chat completions endpoint."""

    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.requests = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(content=None, error=None):
    """Return an AsyncOpenAI look-alike and its completions endpoint."""
    completions = FakeCompletions(content, error)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions
