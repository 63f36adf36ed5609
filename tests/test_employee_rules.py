"""Tests for employee construction rules."""

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from paydesk.domain.employee import (
    build_allocations,
    build_employee,
    check_invariants,
    suggested_monthly_payment,
    with_allocations,
)
from paydesk.domain.entities import Allocation, EmployeeStatus
from paydesk.domain.errors import DomainError, ValidationError
from paydesk.domain.seed import default_employees, default_snapshot

DEPARTMENTS = ["Dept A", "Dept B", "Tech"]


def test_split_allocation_totals_and_primary():
    """Test 50,000/mo + 30,000/mo gives 960,000 a year with the first as primary."""
    employee = build_employee(
        employee_id="tmp-1",
        name="Asha Rao",
        role="Editor",
        monthly_allocations=[("Dept A", Decimal("50000")), ("Dept B", Decimal("30000"))],
        known_departments=DEPARTMENTS,
    )

    assert employee.total_annual_salary == Decimal("960000")
    assert employee.primary_department == "Dept A"
    assert employee.allocations == (
        Allocation("Dept A", Decimal("600000")),
        Allocation("Dept B", Decimal("360000")),
    )
    assert employee.status is EmployeeStatus.ACTIVE
    check_invariants(employee)


def test_build_employee_strips_name_and_keeps_contact_fields():
    employee = build_employee(
        employee_id="tmp-1",
        name="  Dev Kumar ",
        role=" Engineer ",
        monthly_allocations=[("Tech", Decimal("100000"))],
        known_departments=DEPARTMENTS,
        start_date=date(2025, 1, 6),
        email="dev@example.com",
        upi_id="dev@upi",
    )

    assert employee.name == "Dev Kumar"
    assert employee.role == "Engineer"
    assert employee.start_date == date(2025, 1, 6)
    assert employee.email == "dev@example.com"
    assert employee.upi_id == "dev@upi"


def test_build_employee_requires_name():
    with pytest.raises(ValidationError, match="name is required"):
        build_employee("tmp-1", "   ", "Editor", [("Tech", Decimal("1"))], DEPARTMENTS)


@pytest.mark.parametrize(
    "allocations, message",
    [
        ([], "At least one"),
        ([("Unknown", Decimal("100"))], "not found"),
        ([("Tech", Decimal("100")), ("Tech", Decimal("200"))], "more than once"),
        ([("Tech", Decimal("0"))], "must be positive"),
        ([("Tech", Decimal("-5"))], "must be positive"),
        ([("", Decimal("5"))], "department is required"),
    ],
)
def test_build_allocations_rejects_invalid_input(allocations, message):
    """Test invalid allocations raise ValidationError."""
    with pytest.raises(ValidationError, match=message):
        build_allocations(allocations, DEPARTMENTS)


def test_domain_errors_are_value_errors():
    with pytest.raises(ValueError):
        build_allocations([], DEPARTMENTS)
    assert issubclass(ValidationError, DomainError)


def test_with_allocations_recomputes_derived_fields():
    employee = build_employee("tmp-1", "Asha", "Editor", [("Tech", Decimal("10000"))], DEPARTMENTS)

    moved = with_allocations(employee, build_allocations([("Dept B", Decimal("20000"))], DEPARTMENTS))

    assert moved.primary_department == "Dept B"
    assert moved.total_annual_salary == Decimal("240000")
    assert moved.name == "Asha"


def test_check_invariants_detects_mismatched_total():
    employee = build_employee("tmp-1", "Asha", "Editor", [("Tech", Decimal("10000"))], DEPARTMENTS)

    with pytest.raises(ValidationError, match="does not match"):
        check_invariants(replace(employee, total_annual_salary=Decimal("1")))


def test_suggested_monthly_payment_rounds_to_rupee():
    employee = build_employee("tmp-1", "Asha", "Editor", [("Tech", Decimal("10000"))], DEPARTMENTS)
    employee = replace(
        employee,
        allocations=(Allocation("Tech", Decimal("2000000")),),
        total_annual_salary=Decimal("2000000"),
    )

    assert suggested_monthly_payment(employee) == Decimal("166667")


def test_default_data_is_consistent():
    """Test seeded employees satisfy the salary invariants."""
    snapshot = default_snapshot()

    assert len(snapshot.departments) == 9
    assert len(snapshot.employees) == 9
    assert len(snapshot.expenses) == 9
    assert all(d.monthly_budget == Decimal("2500000") for d in snapshot.departments)
    names = {d.name for d in snapshot.departments}
    for employee in default_employees():
        check_invariants(employee)
        assert employee.primary_department in names
    assert all(e.department in names for e in snapshot.expenses)


def test_references_department_and_allocated_salary():
    employee = build_employee(
        "tmp-1", "Asha", "Editor", [("Dept A", Decimal("50000")), ("Dept B", Decimal("30000"))], DEPARTMENTS
    )

    assert employee.references_department("Dept B")
    assert not employee.references_department("Tech")
    assert employee.allocated_salary("Dept B") == Decimal("360000")
    assert employee.allocated_salary("Tech") == Decimal("0")
