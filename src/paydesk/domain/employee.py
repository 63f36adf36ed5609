"""Employee construction and validation rules."""

from dataclasses import replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Sequence

from paydesk.domain.entities import (
    Allocation,
    DocumentRecord,
    Employee,
    EmployeeStatus,
)
from paydesk.domain.errors import ValidationError, department_not_found

MONTHS_PER_YEAR = 12


def build_allocations(
    monthly_allocations: Sequence[tuple[str, Decimal]],
    known_departments: Iterable[str],
) -> tuple[Allocation, ...]:
    """Turn (department, monthly salary) pairs into annual allocations.

    Args:
        monthly_allocations: Ordered pairs; the first one is the primary department
        known_departments: Names of existing departments

    Returns:
        Tuple of allocations with annual salaries

    Raises:
        ValidationError: If no allocation is given, a department is unknown or
            repeated, or a salary is not positive
    """
    if not monthly_allocations:
        raise ValidationError("At least one department allocation is required")

    known = set(known_departments)
    seen: set[str] = set()
    allocations = []
    for department, monthly_salary in monthly_allocations:
        department = (department or "").strip()
        if not department:
            raise ValidationError("Allocation department is required")
        if department not in known:
            raise ValidationError(department_not_found(department))
        if department in seen:
            raise ValidationError(f"Department '{department}' is allocated more than once")
        if monthly_salary is None or monthly_salary <= 0:
            raise ValidationError(f"Monthly salary for '{department}' must be positive")
        seen.add(department)
        allocations.append(
            Allocation(department=department, annual_salary=monthly_salary * MONTHS_PER_YEAR)
        )
    return tuple(allocations)


def with_allocations(employee: Employee, allocations: tuple[Allocation, ...]) -> Employee:
    """Return a copy of ``employee`` whose salary fields follow ``allocations``."""
    return replace(
        employee,
        allocations=allocations,
        total_annual_salary=sum((a.annual_salary for a in allocations), Decimal("0")),
        primary_department=allocations[0].department if allocations else employee.primary_department,
    )


def build_employee(
    employee_id: str,
    name: str,
    role: str,
    monthly_allocations: Sequence[tuple[str, Decimal]],
    known_departments: Iterable[str],
    start_date: Optional[date] = None,
    email: Optional[str] = None,
    phone: Optional[str] = None,
    upi_id: Optional[str] = None,
    date_of_birth: Optional[date] = None,
    documents: Sequence[DocumentRecord] = (),
) -> Employee:
    """Create a new active employee.

    Raises:
        ValidationError: If required fields are missing or allocations are invalid
    """
    name = (name or "").strip()
    if not name:
        raise ValidationError("Employee name is required")

    allocations = build_allocations(monthly_allocations, known_departments)
    employee = Employee(
        id=employee_id,
        name=name,
        role=(role or "").strip(),
        primary_department=None,
        total_annual_salary=Decimal("0"),
        allocations=(),
        status=EmployeeStatus.ACTIVE,
        start_date=start_date,
        documents=tuple(documents),
        email=email,
        phone=phone,
        upi_id=upi_id,
        date_of_birth=date_of_birth,
    )
    return with_allocations(employee, allocations)


def check_invariants(employee: Employee) -> None:
    """Raise ValidationError if the derived salary fields are inconsistent."""
    total = sum((a.annual_salary for a in employee.allocations), Decimal("0"))
    if employee.allocations and total != employee.total_annual_salary:
        raise ValidationError(
            f"Employee {employee.id}: total salary {employee.total_annual_salary} "
            f"does not match allocations {total}"
        )
    if employee.allocations and employee.primary_department != employee.allocations[0].department:
        raise ValidationError(
            f"Employee {employee.id}: primary department must be the first allocation"
        )
    if employee.is_active and not employee.allocations:
        raise ValidationError(f"Employee {employee.id}: active employees need an allocation")


def suggested_monthly_payment(employee: Employee) -> Decimal:
    """Default monthly salary payout, rounded to whole rupees."""
    return (employee.total_annual_salary / MONTHS_PER_YEAR).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
