"""Budget and spend aggregation over a workspace snapshot.

Every view here is a pure function of the snapshot it was built with. Views
are recomputed on each call and never fail on the data: empty input produces
zero totals. Months are numbered 1-12; ``month=None`` means the whole year.
Any other month is a caller error and raises ValueError.
"""

import calendar
from decimal import Decimal
from typing import Iterable, Optional

from paydesk.domain.entities import (
    BudgetOverview,
    DepartmentBreakdown,
    DepartmentMember,
    DepartmentOverview,
    Expense,
    ExpenseCategory,
    MonthlyTrendPoint,
    WorkspaceSnapshot,
)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def check_month(month: Optional[int]) -> None:
    if month is not None and not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")


def period_label(year: int, month: Optional[int] = None) -> str:
    """Human-readable label for a reporting period (e.g. 'October 2025')."""
    check_month(month)
    if month is None:
        return str(year)
    return f"{calendar.month_name[month]} {year}"


def budget_multiplier(month: Optional[int]) -> int:
    """Monthly budgets count once for a month and twelve times for a year."""
    return 1 if month is not None else 12


def utilization(spend: Decimal, budget: Decimal) -> Decimal:
    """Spend as a percentage of budget; zero when there is no budget."""
    if budget <= 0:
        return ZERO
    return spend / budget * HUNDRED


def in_period(expense: Expense, year: int, month: Optional[int] = None) -> bool:
    if expense.date.year != year:
        return False
    return month is None or expense.date.month == month


def split_payroll(expenses: Iterable[Expense]) -> tuple[Decimal, Decimal]:
    """Return (payroll, operational) totals for ``expenses``."""
    payroll = ZERO
    operational = ZERO
    for expense in expenses:
        if expense.category is ExpenseCategory.SALARY:
            payroll += expense.amount
        else:
            operational += expense.amount
    return payroll, operational


def newest_first(expenses: Iterable[Expense]) -> list[Expense]:
    """Sort by date descending, ties broken by ID descending."""
    return sorted(expenses, key=lambda e: (e.date, e.id), reverse=True)


class SummaryService:
    """Service for building budget and spend views."""

    def __init__(self, snapshot: WorkspaceSnapshot):
        """Initialize summary service.

        Args:
            snapshot: Workspace state to aggregate
        """
        self.snapshot = snapshot

    def expenses_in_period(
        self, year: int, month: Optional[int] = None, department: Optional[str] = None
    ) -> list[Expense]:
        return [
            expense
            for expense in self.snapshot.expenses
            if in_period(expense, year, month)
            and (department is None or expense.department == department)
        ]

    def budget_overview(self, year: int, month: Optional[int] = None) -> BudgetOverview:
        """Organization-wide budget position for a year or a single month.

        Args:
            year: Calendar year
            month: Optional month (1-12); None for the full year

        Returns:
            BudgetOverview with per-department breakdown sorted by total spend
        """
        check_month(month)
        multiplier = budget_multiplier(month)
        expenses = self.expenses_in_period(year, month)

        total_spend = sum((e.amount for e in expenses), ZERO)
        total_budget = sum((d.monthly_budget * multiplier for d in self.snapshot.departments), ZERO)

        breakdown = []
        for department in self.snapshot.departments:
            payroll, operational = split_payroll(
                e for e in expenses if e.department == department.name
            )
            breakdown.append(
                DepartmentBreakdown(
                    name=department.name,
                    payroll=payroll,
                    operational=operational,
                    budget=department.monthly_budget * multiplier,
                )
            )
        breakdown.sort(key=lambda item: item.total, reverse=True)

        return BudgetOverview(
            year=year,
            month=month,
            label=period_label(year, month),
            total_spend=total_spend,
            total_budget=total_budget,
            remaining_budget=total_budget - total_spend,
            utilization=utilization(total_spend, total_budget),
            active_headcount=sum(1 for e in self.snapshot.employees if e.is_active),
            departments=tuple(breakdown),
        )

    def department_overview(
        self, department: str, year: int, month: Optional[int] = None
    ) -> DepartmentOverview:
        """Budget position, members and expenses of one department."""
        check_month(month)
        monthly_budget = ZERO
        for dept in self.snapshot.departments:
            if dept.name == department:
                monthly_budget = dept.monthly_budget
                break
        budget = monthly_budget * budget_multiplier(month)

        expenses = newest_first(self.expenses_in_period(year, month, department))
        payroll, operational = split_payroll(expenses)

        category_totals: dict[ExpenseCategory, Decimal] = {}
        for category in ExpenseCategory:
            total = sum((e.amount for e in expenses if e.category is category), ZERO)
            if total:
                category_totals[category] = total

        members = tuple(
            DepartmentMember(employee=e, allocated_annual_salary=e.allocated_salary(department))
            for e in self.snapshot.employees
            if e.is_active and e.references_department(department)
        )

        return DepartmentOverview(
            department=department,
            year=year,
            month=month,
            label=period_label(year, month),
            budget=budget,
            payroll=payroll,
            operational=operational,
            remaining_budget=budget - payroll - operational,
            utilization=utilization(payroll + operational, budget),
            members=members,
            expenses=tuple(expenses),
            category_totals=category_totals,
        )

    def monthly_trend(self, year: int, department: Optional[str] = None) -> list[MonthlyTrendPoint]:
        """Twelve monthly spend points for ``year``, optionally for one department."""
        points = []
        for month in range(1, 13):
            payroll, operational = split_payroll(self.expenses_in_period(year, month, department))
            points.append(
                MonthlyTrendPoint(
                    month=month,
                    label=calendar.month_abbr[month],
                    payroll=payroll,
                    operational=operational,
                )
            )
        return points

    def filter_expenses(
        self,
        year: Optional[int] = None,
        month: Optional[int] = None,
        department: Optional[str] = None,
        category: Optional[ExpenseCategory] = None,
        search: Optional[str] = None,
    ) -> list[Expense]:
        """Filter the expense ledger.

        Args:
            year: Optional year filter
            month: Optional month filter (only applied together with a year)
            department: Optional department name
            category: Optional category
            search: Optional case-insensitive substring of the description

        Returns:
            Matching expenses, newest first
        """
        check_month(month)
        needle = search.strip().lower() if search else ""
        matches = []
        for expense in self.snapshot.expenses:
            if year is not None and not in_period(expense, year, month):
                continue
            if department is not None and expense.department != department:
                continue
            if category is not None and expense.category is not category:
                continue
            if needle and needle not in expense.description.lower():
                continue
            matches.append(expense)
        return newest_first(matches)
