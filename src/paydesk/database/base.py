"""Abstract remote store interface."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

# Import entities directly to avoid circular import through domain/__init__.py
from paydesk.domain.entities import (
    Department,
    Employee,
    Expense,
    WorkspaceSnapshot,
)

logger = logging.getLogger(__name__)

COLLECTION_DEPARTMENTS = "departments"
COLLECTION_EMPLOYEES = "employees"
COLLECTION_EXPENSES = "expenses"

T = TypeVar("T")


class StoreError(Exception):
    """Base class for remote store failures."""


class StoreNotConfiguredError(StoreError):
    """No store endpoint or credentials are configured. Never retried."""


class StoreUnavailableError(StoreError):
    """The store could not be reached or rejected the operation."""


class Collection(ABC, Generic[T]):
    """One entity kind in the remote store.

    Identifiers are assigned by the store in ``create``; callers must not
    assume an identifier before that call returns.
    """

    name: str

    @abstractmethod
    async def list_all(self) -> list[T]:
        """List every entity with its store-assigned identifier."""
        pass

    @abstractmethod
    async def create(self, entity: T) -> str:
        """Insert ``entity`` (its ``id`` is ignored). Returns the assigned ID."""
        pass

    @abstractmethod
    async def update(self, entity_id: str, fields: dict[str, Any]) -> bool:
        """Apply a partial update by domain field name.

        Returns:
            False if no entity has ``entity_id``
        """
        pass

    @abstractmethod
    async def delete(self, entity_id: str) -> bool:
        """Delete an entity. Returns False if it did not exist."""
        pass

    async def is_empty(self) -> bool:
        """Check whether the collection holds no entities."""
        return not await self.list_all()


class RemoteStore(ABC):
    """Multi-collection document store for departments, employees and expenses."""

    departments: Collection[Department]
    employees: Collection[Employee]
    expenses: Collection[Expense]

    @abstractmethod
    def is_configured(self) -> bool:
        """Check whether an endpoint is configured. Queried once at startup."""
        pass

    @abstractmethod
    async def initialize_schema(self) -> None:
        """Create the underlying collections if needed."""
        pass

    @abstractmethod
    async def dispose(self) -> None:
        """Release connections held by the store."""
        pass

    async def seed(self, snapshot: WorkspaceSnapshot) -> dict[str, int]:
        """Populate empty collections with default data.

        Emptiness is checked for each collection separately, so a store where
        only some collections hold data still gets the others backfilled. A
        non-empty collection is never written to.

        Args:
            snapshot: Default entities to insert

        Returns:
            Number of entities inserted per collection name
        """
        plan: list[tuple[Collection, tuple]] = [
            (self.departments, snapshot.departments),
            (self.employees, snapshot.employees),
            (self.expenses, snapshot.expenses),
        ]
        inserted: dict[str, int] = {}
        for collection, entities in plan:
            if not await collection.is_empty():
                logger.info("Collection '%s' already has data, skipping seed", collection.name)
                inserted[collection.name] = 0
                continue

            logger.info("Seeding %d entities into '%s'", len(entities), collection.name)
            for entity in entities:
                await collection.create(entity)
            inserted[collection.name] = len(entities)
        return inserted
