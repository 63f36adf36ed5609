"""Tests for budget aggregation views."""

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from paydesk.domain.employee import build_employee
from paydesk.domain.entities import (
    Department,
    EmployeeStatus,
    Expense,
    ExpenseCategory,
    WorkspaceSnapshot,
)
from paydesk.domain.seed import default_snapshot
from paydesk.domain.summary import SummaryService, period_label, utilization


def _expense(expense_id, amount, department, spent_on, category=ExpenseCategory.SOFTWARE, description="x"):
    return Expense(
        id=expense_id,
        description=description,
        amount=Decimal(amount),
        department=department,
        date=spent_on,
        category=category,
    )


def test_budget_overview_month_example(small_snapshot):
    """Test three departments at 25 lakh and one 85,000 expense."""
    overview = SummaryService(small_snapshot).budget_overview(2025, 10)

    assert overview.total_budget == Decimal("7500000")
    assert overview.total_spend == Decimal("85000")
    assert overview.remaining_budget == Decimal("7415000")
    assert overview.label == "October 2025"


def test_budget_overview_full_year_example(small_snapshot):
    """Test the full-year budget is twelve times the monthly total."""
    overview = SummaryService(small_snapshot).budget_overview(2025)

    assert overview.total_budget == Decimal("90000000")
    assert overview.total_spend == Decimal("85000")
    assert round(overview.utilization, 3) == Decimal("0.094")
    assert overview.label == "2025"


def test_budget_overview_counts_spend_without_department_match():
    """Test spend sums all of the year's expenses, whatever the department."""
    snapshot = WorkspaceSnapshot(
        departments=(Department("d1", "Tech", Decimal("100")),),
        expenses=(
            _expense("1", "40", "Tech", date(2025, 3, 1)),
            _expense("2", "60", "Deleted Dept", date(2025, 4, 1)),
            _expense("3", "999", "Tech", date(2024, 4, 1)),
        ),
    )

    overview = SummaryService(snapshot).budget_overview(2025)

    assert overview.total_spend == Decimal("100")
    assert overview.departments[0].total == Decimal("40")


def test_breakdown_splits_payroll_and_sorts_by_total():
    snapshot = WorkspaceSnapshot(
        departments=(
            Department("d1", "Tech", Decimal("1000")),
            Department("d2", "Sales", Decimal("1000")),
        ),
        expenses=(
            _expense("1", "100", "Tech", date(2025, 10, 1)),
            _expense("2", "300", "Sales", date(2025, 10, 2), ExpenseCategory.SALARY),
            _expense("3", "50", "Sales", date(2025, 10, 3), ExpenseCategory.TRAVEL),
        ),
    )

    overview = SummaryService(snapshot).budget_overview(2025, 10)

    assert [d.name for d in overview.departments] == ["Sales", "Tech"]
    sales = overview.departments[0]
    assert sales.payroll == Decimal("300")
    assert sales.operational == Decimal("50")
    assert sales.budget == Decimal("1000")


def test_zero_budget_gives_zero_utilization():
    assert utilization(Decimal("500"), Decimal("0")) == 0
    overview = SummaryService(WorkspaceSnapshot()).budget_overview(2025)
    assert overview.total_budget == 0
    assert overview.utilization == 0
    assert overview.departments == ()


def test_active_headcount_ignores_terminated():
    snapshot = default_snapshot()
    employees = list(snapshot.employees)
    employees[0] = replace(employees[0], status=EmployeeStatus.TERMINATED)
    snapshot = replace(snapshot, employees=tuple(employees))

    assert SummaryService(snapshot).budget_overview(2025, 10).active_headcount == 8


def test_department_overview_members_and_expense_order():
    departments = (Department("d1", "Dept A", Decimal("100000")), Department("d2", "Dept B", Decimal("0")))
    employee = build_employee(
        "e1", "Asha", "Editor", [("Dept A", Decimal("50000")), ("Dept B", Decimal("30000"))], ["Dept A", "Dept B"]
    )
    snapshot = WorkspaceSnapshot(
        departments=departments,
        employees=(employee,),
        expenses=(
            _expense("1", "10", "Dept B", date(2025, 10, 5)),
            _expense("3", "20", "Dept B", date(2025, 10, 9), ExpenseCategory.SALARY),
            _expense("2", "30", "Dept B", date(2025, 10, 9), ExpenseCategory.TRAVEL),
            _expense("4", "40", "Dept A", date(2025, 10, 9)),
        ),
    )

    overview = SummaryService(snapshot).department_overview("Dept B", 2025, 10)

    assert [e.id for e in overview.expenses] == ["3", "2", "1"]
    assert overview.payroll == Decimal("20")
    assert overview.operational == Decimal("40")
    assert overview.utilization == 0
    assert overview.category_totals == {
        ExpenseCategory.SOFTWARE: Decimal("10"),
        ExpenseCategory.TRAVEL: Decimal("30"),
        ExpenseCategory.SALARY: Decimal("20"),
    }
    assert len(overview.members) == 1
    assert overview.members[0].allocated_annual_salary == Decimal("360000")


def test_department_overview_unknown_department_is_empty():
    overview = SummaryService(default_snapshot()).department_overview("Nope", 2025)

    assert overview.budget == 0
    assert overview.members == ()
    assert overview.expenses == ()


def test_monthly_trend_has_twelve_points():
    trend = SummaryService(default_snapshot()).monthly_trend(2025)

    assert [p.month for p in trend] == list(range(1, 13))
    assert trend[0].label == "Jan"
    october = trend[9]
    assert october.payroll == 0
    assert october.total == Decimal("1900000")
    assert sum(p.total for p in trend) == october.total


def test_monthly_trend_for_department():
    trend = SummaryService(default_snapshot()).monthly_trend(2025, "Tech")

    assert trend[9].operational == Decimal("85000")


def test_filter_expenses_search_and_category():
    service = SummaryService(default_snapshot())

    assert [e.id for e in service.filter_expenses(search="cloud")] == ["107", "101"]
    software = service.filter_expenses(year=2025, month=10, category=ExpenseCategory.SOFTWARE)
    assert [e.id for e in software] == ["108", "107", "105", "101"]
    assert service.filter_expenses(year=2024) == []
    assert [e.id for e in service.filter_expenses(department="Sales")] == ["104"]


def test_period_label():
    assert period_label(2025, 10) == "October 2025"
    assert period_label(2025) == "2025"


def test_out_of_range_month_is_rejected(small_snapshot):
    service = SummaryService(small_snapshot)

    with pytest.raises(ValueError, match="between 1 and 12"):
        service.budget_overview(2025, 13)
    with pytest.raises(ValueError):
        service.department_overview("Tech", 2025, 0)
    with pytest.raises(ValueError):
        service.filter_expenses(year=2025, month=13)
    with pytest.raises(ValueError):
        period_label(2025, 13)
