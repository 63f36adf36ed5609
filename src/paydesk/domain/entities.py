"""Domain model entities for paydesk.

These are pure data classes representing business concepts, independent of
the storage schema. The remote store and the local snapshot both map to and
from these types, so the workspace logic stays the same whichever one is in
use.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


class EmployeeStatus(str, Enum):
    """Employment status."""

    ACTIVE = "Active"
    TERMINATED = "Terminated"


class PayoutType(str, Enum):
    """Kind of payment made to an employee."""

    SALARY = "Salary"
    BONUS = "Bonus"
    REIMBURSEMENT = "Reimbursement"


class PayoutStatus(str, Enum):
    """Payout settlement status."""

    PAID = "Paid"


class ExpenseCategory(str, Enum):
    """Closed set of expense categories."""

    SOFTWARE = "Software"
    EQUIPMENT = "Equipment"
    TRAVEL = "Travel"
    EVENTS = "Events"
    MISCELLANEOUS = "Miscellaneous"
    CONTRACTOR = "Contractor"
    SALARY = "Salary"


# Salary expenses are only generated by payouts.
USER_EXPENSE_CATEGORIES: tuple[ExpenseCategory, ...] = tuple(
    category for category in ExpenseCategory if category is not ExpenseCategory.SALARY
)


class DocumentType(str, Enum):
    """Employee documents collected by HR."""

    PHOTO = "Employee Photo"
    AADHAR_CARD = "Aadhar Card"
    PAN_CARD = "PAN Card"
    BANK_PASSBOOK = "Bank Passbook"
    EMPLOYMENT_AGREEMENT = "Employment Agreement"


class DocumentStatus(str, Enum):
    """Document verification status."""

    UPLOADED = "Uploaded"
    VERIFIED = "Verified"


class RiskLevel(str, Enum):
    """Risk rating returned by financial analysis."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class SyncMode(str, Enum):
    """Where workspace mutations are made durable."""

    REMOTE = "remote"
    LOCAL = "local"


@dataclass(frozen=True)
class Department:
    """Department domain entity with its monthly budget."""

    id: str
    name: str
    monthly_budget: Decimal


@dataclass(frozen=True)
class Allocation:
    """Share of an employee's annual salary charged to one department."""

    department: str
    annual_salary: Decimal


@dataclass(frozen=True)
class Payout:
    """Payment made to an employee."""

    id: str
    date: date
    amount: Decimal
    type: PayoutType
    status: PayoutStatus = PayoutStatus.PAID
    note: Optional[str] = None


@dataclass(frozen=True)
class DocumentRecord:
    """Uploaded or linked employee document."""

    type: DocumentType
    status: DocumentStatus
    last_updated: date
    file_name: Optional[str] = None
    inline_data: Optional[str] = None
    external_url: Optional[str] = None


@dataclass(frozen=True)
class Employee:
    """Employee domain entity.

    ``total_annual_salary`` and ``primary_department`` are derived from
    ``allocations``; use :func:`paydesk.domain.employee.build_employee` or
    :func:`paydesk.domain.employee.with_allocations` to keep them in sync.
    """

    id: str
    name: str
    role: str
    primary_department: Optional[str]
    total_annual_salary: Decimal
    allocations: tuple[Allocation, ...]
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    start_date: Optional[date] = None
    termination_date: Optional[date] = None
    documents: tuple[DocumentRecord, ...] = ()
    payouts: tuple[Payout, ...] = ()
    email: Optional[str] = None
    phone: Optional[str] = None
    upi_id: Optional[str] = None
    date_of_birth: Optional[date] = None

    @property
    def is_active(self) -> bool:
        return self.status is EmployeeStatus.ACTIVE

    def references_department(self, name: str) -> bool:
        """Return True if the employee is attributed to ``name`` in any way."""
        if self.primary_department == name:
            return True
        return any(allocation.department == name for allocation in self.allocations)

    def allocated_salary(self, department: str) -> Decimal:
        """Annual salary charged to ``department``."""
        for allocation in self.allocations:
            if allocation.department == department:
                return allocation.annual_salary
        if self.primary_department == department:
            return self.total_annual_salary
        return Decimal("0")


@dataclass(frozen=True)
class Expense:
    """Expense domain entity."""

    id: str
    description: str
    amount: Decimal
    department: str
    date: date
    category: ExpenseCategory


@dataclass(frozen=True)
class WorkspaceSnapshot:
    """Complete workspace state, as persisted by the local fallback."""

    departments: tuple[Department, ...] = ()
    employees: tuple[Employee, ...] = ()
    expenses: tuple[Expense, ...] = ()


@dataclass(frozen=True)
class DepartmentBreakdown:
    """Spend of one department within a reporting period."""

    name: str
    payroll: Decimal
    operational: Decimal
    budget: Decimal

    @property
    def total(self) -> Decimal:
        return self.payroll + self.operational


@dataclass(frozen=True)
class BudgetOverview:
    """Organization-wide budget position for a period."""

    year: int
    month: Optional[int]
    label: str
    total_spend: Decimal
    total_budget: Decimal
    remaining_budget: Decimal
    utilization: Decimal
    active_headcount: int
    departments: tuple[DepartmentBreakdown, ...]


@dataclass(frozen=True)
class DepartmentMember:
    """Active employee of a department with the salary charged to it."""

    employee: Employee
    allocated_annual_salary: Decimal


@dataclass(frozen=True)
class DepartmentOverview:
    """Budget position and activity of a single department for a period."""

    department: str
    year: int
    month: Optional[int]
    label: str
    budget: Decimal
    payroll: Decimal
    operational: Decimal
    remaining_budget: Decimal
    utilization: Decimal
    members: tuple[DepartmentMember, ...]
    expenses: tuple[Expense, ...]
    category_totals: dict[ExpenseCategory, Decimal] = field(default_factory=dict)

    @property
    def total_spend(self) -> Decimal:
        return self.payroll + self.operational


@dataclass(frozen=True)
class MonthlyTrendPoint:
    """Spend for one calendar month."""

    month: int
    label: str
    payroll: Decimal
    operational: Decimal

    @property
    def total(self) -> Decimal:
        return self.payroll + self.operational


@dataclass(frozen=True)
class AnalysisResult:
    """Financial commentary produced by the analysis service."""

    summary: str
    recommendations: tuple[str, ...]
    risk_level: RiskLevel
