"""Canonical in-memory workspace state."""

from dataclasses import replace
from typing import Any, Optional

from paydesk.database.base import (
    COLLECTION_DEPARTMENTS,
    COLLECTION_EMPLOYEES,
    COLLECTION_EXPENSES,
)
from paydesk.domain.entities import WorkspaceSnapshot


class WorkspaceState:
    """Ordered collections of departments, employees and expenses.

    Entities are immutable; a change swaps the entity at its position so the
    collection order (insertion order) is preserved.
    """

    def __init__(self, snapshot: WorkspaceSnapshot):
        self.departments = list(snapshot.departments)
        self.employees = list(snapshot.employees)
        self.expenses = list(snapshot.expenses)

    def collection(self, kind: str) -> list:
        if kind == COLLECTION_DEPARTMENTS:
            return self.departments
        if kind == COLLECTION_EMPLOYEES:
            return self.employees
        if kind == COLLECTION_EXPENSES:
            return self.expenses
        raise ValueError(f"Unknown collection '{kind}'")

    def index_of(self, kind: str, entity_id: str) -> Optional[int]:
        for index, entity in enumerate(self.collection(kind)):
            if entity.id == entity_id:
                return index
        return None

    def get(self, kind: str, entity_id: str) -> Optional[Any]:
        index = self.index_of(kind, entity_id)
        return self.collection(kind)[index] if index is not None else None

    def put(self, kind: str, entity: Any) -> None:
        """Replace the entity with the same ID, or append a new one."""
        items = self.collection(kind)
        index = self.index_of(kind, entity.id)
        if index is None:
            items.append(entity)
        else:
            items[index] = entity

    def remove(self, kind: str, entity_id: str) -> bool:
        index = self.index_of(kind, entity_id)
        if index is None:
            return False
        del self.collection(kind)[index]
        return True

    def replace_id(self, kind: str, temporary_id: str, assigned_id: str) -> bool:
        """Rewrite the key of the entity holding ``temporary_id``.

        Only the ``id`` field changes. Returns False when no entity holds the
        temporary ID any more (for example, it was deleted meanwhile).
        """
        index = self.index_of(kind, temporary_id)
        if index is None:
            return False
        items = self.collection(kind)
        items[index] = replace(items[index], id=assigned_id)
        return True

    def snapshot(self) -> WorkspaceSnapshot:
        return WorkspaceSnapshot(
            departments=tuple(self.departments),
            employees=tuple(self.employees),
            expenses=tuple(self.expenses),
        )
