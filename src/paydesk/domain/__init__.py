"""Domain layer for paydesk application."""

from paydesk.domain.errors import (
    ConflictError,
    DependencyError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from paydesk.domain.summary import SummaryService

__all__ = [
    "SummaryService",
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "DependencyError",
]
