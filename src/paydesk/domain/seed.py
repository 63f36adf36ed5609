"""Default workspace data.

Used to seed an empty remote store and to materialize the local snapshot on
first run, so a fresh workspace is never blank.
"""

from datetime import date
from decimal import Decimal

from paydesk.domain.entities import (
    Allocation,
    Department,
    DocumentRecord,
    DocumentStatus,
    DocumentType,
    Employee,
    EmployeeStatus,
    Expense,
    ExpenseCategory,
    Payout,
    PayoutType,
    WorkspaceSnapshot,
)

INITIAL_DEPARTMENTS = [
    "Academics",
    "Sales",
    "Content",
    "Editing",
    "Designing",
    "Softwares",
    "Creators",
    "Tech",
    "Marketing & Social Media",
]

# Monthly, in INR (25 lakh per department)
DEFAULT_MONTHLY_BUDGET = Decimal("2500000")

DEFAULT_DOCUMENTS = (
    DocumentRecord(DocumentType.AADHAR_CARD, DocumentStatus.VERIFIED, date(2023, 1, 10)),
    DocumentRecord(DocumentType.PAN_CARD, DocumentStatus.VERIFIED, date(2023, 1, 10)),
    DocumentRecord(DocumentType.BANK_PASSBOOK, DocumentStatus.UPLOADED, date(2023, 1, 12)),
    DocumentRecord(DocumentType.PHOTO, DocumentStatus.UPLOADED, date(2023, 1, 10)),
    DocumentRecord(DocumentType.EMPLOYMENT_AGREEMENT, DocumentStatus.VERIFIED, date(2023, 1, 15)),
)

# (id, name, role, department, annual salary, start date, last payout)
INITIAL_EMPLOYEES = [
    ("1", "Arjun Sharma", "Head of Academics", "Academics", "2400000", date(2022, 1, 15), "200000"),
    ("2", "Priya Verma", "Sales Lead", "Sales", "1800000", date(2023, 3, 1), "150000"),
    ("3", "Rohan Gupta", "Senior Editor", "Editing", "1200000", date(2021, 11, 20), "100000"),
    ("4", "Ananya Singh", "Lead Designer", "Designing", "1500000", date(2022, 6, 10), "125000"),
    ("5", "Vikram Malhotra", "Software Engineer", "Softwares", "2000000", date(2023, 1, 5), "166666"),
    ("6", "Sneha Patel", "Content Creator", "Creators", "900000", date(2023, 7, 22), "75000"),
    ("7", "Karan Mehra", "CTO", "Tech", "4500000", date(2020, 5, 15), "375000"),
    ("8", "Meera Iyer", "Marketing Manager", "Marketing & Social Media", "1600000", date(2021, 2, 14), "133333"),
    ("9", "Rahul Nair", "Content Strategist", "Content", "1400000", date(2022, 9, 1), "116666"),
]

INITIAL_EXPENSES = [
    ("101", "AWS Cloud Hosting", "85000", "Tech", date(2025, 10, 1), ExpenseCategory.SOFTWARE),
    ("102", "Diwali Marketing Campaign", "500000", "Marketing & Social Media", date(2025, 10, 3), ExpenseCategory.EVENTS),
    ("103", "New MacBook Pros (x3)", "650000", "Designing", date(2025, 10, 5), ExpenseCategory.EQUIPMENT),
    ("104", "Sales Team Offsite - Goa", "250000", "Sales", date(2025, 10, 7), ExpenseCategory.TRAVEL),
    ("105", "Research Journals", "15000", "Academics", date(2025, 10, 10), ExpenseCategory.SOFTWARE),
    ("106", "Freelance Writers", "45000", "Content", date(2025, 10, 12), ExpenseCategory.CONTRACTOR),
    ("107", "Adobe Creative Cloud", "85000", "Editing", date(2025, 10, 15), ExpenseCategory.SOFTWARE),
    ("108", "Jira Enterprise License", "120000", "Softwares", date(2025, 10, 16), ExpenseCategory.SOFTWARE),
    ("109", "Creator Collabs", "150000", "Creators", date(2025, 10, 18), ExpenseCategory.EVENTS),
]


def default_departments() -> tuple[Department, ...]:
    return tuple(
        Department(id=f"dept-{index}", name=name, monthly_budget=DEFAULT_MONTHLY_BUDGET)
        for index, name in enumerate(INITIAL_DEPARTMENTS)
    )


def default_employees() -> tuple[Employee, ...]:
    employees = []
    for index, (emp_id, name, role, department, salary, start, payout) in enumerate(
        INITIAL_EMPLOYEES, start=1
    ):
        annual = Decimal(salary)
        employees.append(
            Employee(
                id=emp_id,
                name=name,
                role=role,
                primary_department=department,
                total_annual_salary=annual,
                allocations=(Allocation(department=department, annual_salary=annual),),
                status=EmployeeStatus.ACTIVE,
                start_date=start,
                documents=DEFAULT_DOCUMENTS,
                payouts=(
                    Payout(
                        id=f"p{index}",
                        date=date(2025, 9, 30),
                        amount=Decimal(payout),
                        type=PayoutType.SALARY,
                    ),
                ),
            )
        )
    return tuple(employees)


def default_expenses() -> tuple[Expense, ...]:
    return tuple(
        Expense(
            id=exp_id,
            description=description,
            amount=Decimal(amount),
            department=department,
            date=spent_on,
            category=category,
        )
        for exp_id, description, amount, department, spent_on, category in INITIAL_EXPENSES
    )


def default_snapshot() -> WorkspaceSnapshot:
    """Deterministic workspace used when nothing has been persisted yet."""
    return WorkspaceSnapshot(
        departments=default_departments(),
        employees=default_employees(),
        expenses=default_expenses(),
    )
