"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


def department_not_found(name: str) -> str:
    """Return message for missing department."""
    return f"Department '{name}' not found"


def employee_not_found(employee_id: str) -> str:
    """Return message for missing employee."""
    return f"Employee {employee_id} not found"


def duplicate_department(name: str) -> str:
    """Return message for a department name that is already taken."""
    return f"Department '{name}' already exists"


def department_delete_blocked(name: str, employee_count: int) -> str:
    """Return message when active employees still reference a department."""
    return (
        f"Cannot delete department '{name}': it is referenced by "
        f"{employee_count} active employee{'s' if employee_count != 1 else ''}. "
        "Please reassign them first."
    )


def employee_terminated(employee_id: str) -> str:
    """Return message when a terminated employee would be modified."""
    return f"Employee {employee_id} is terminated; only the termination date can change"
