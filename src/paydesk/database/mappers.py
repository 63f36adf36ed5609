"""Mapper functions to convert between domain models and stored documents.

Two representations are covered: SQLAlchemy rows for the remote store and
plain JSON-compatible dicts, used both for the nested JSON columns of an
employee and for the local snapshot file. Money is kept as a decimal string
in JSON so no precision is lost.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Callable, Optional

from paydesk.domain import entities as domain
from paydesk.database.models import (
    Department as ORMDepartment,
    Employee as ORMEmployee,
    Expense as ORMExpense,
)


def _date_to_json(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _date_from_json(value: Optional[str]) -> Optional[date]:
    return date.fromisoformat(value) if value else None


def _decimal(value: Any) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


# Nested employee records


def allocation_to_dict(allocation: domain.Allocation) -> dict[str, Any]:
    return {
        "department": allocation.department,
        "annual_salary": str(allocation.annual_salary),
    }


def allocation_from_dict(data: dict[str, Any]) -> domain.Allocation:
    return domain.Allocation(
        department=data["department"],
        annual_salary=_decimal(data["annual_salary"]),
    )


def payout_to_dict(payout: domain.Payout) -> dict[str, Any]:
    return {
        "id": payout.id,
        "date": _date_to_json(payout.date),
        "amount": str(payout.amount),
        "type": payout.type.value,
        "status": payout.status.value,
        "note": payout.note,
    }


def payout_from_dict(data: dict[str, Any]) -> domain.Payout:
    return domain.Payout(
        id=data["id"],
        date=_date_from_json(data["date"]),
        amount=_decimal(data["amount"]),
        type=domain.PayoutType(data.get("type") or domain.PayoutType.SALARY.value),
        status=domain.PayoutStatus(data.get("status") or domain.PayoutStatus.PAID.value),
        note=data.get("note"),
    )


def document_to_dict(document: domain.DocumentRecord) -> dict[str, Any]:
    return {
        "type": document.type.value,
        "status": document.status.value,
        "last_updated": _date_to_json(document.last_updated),
        "file_name": document.file_name,
        "inline_data": document.inline_data,
        "external_url": document.external_url,
    }


def document_from_dict(data: dict[str, Any]) -> domain.DocumentRecord:
    return domain.DocumentRecord(
        type=domain.DocumentType(data["type"]),
        status=domain.DocumentStatus(data["status"]),
        last_updated=_date_from_json(data["last_updated"]),
        file_name=data.get("file_name"),
        inline_data=data.get("inline_data"),
        external_url=data.get("external_url"),
    )


# Field converters used for partial updates. Keys are domain field names,
# values turn a domain value into its stored (JSON-compatible) form.

_EMPLOYEE_FIELD_CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "name": str,
    "role": str,
    "primary_department": lambda v: v,
    "total_annual_salary": _decimal,
    "allocations": lambda v: [allocation_to_dict(a) for a in v],
    "status": lambda v: domain.EmployeeStatus(v).value,
    "start_date": lambda v: v,
    "termination_date": lambda v: v,
    "documents": lambda v: [document_to_dict(d) for d in v],
    "payouts": lambda v: [payout_to_dict(p) for p in v],
    "email": lambda v: v,
    "phone": lambda v: v,
    "upi_id": lambda v: v,
    "date_of_birth": lambda v: v,
}

_DEPARTMENT_FIELD_CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "name": str,
    "monthly_budget": _decimal,
}

_EXPENSE_FIELD_CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "description": str,
    "amount": _decimal,
    "department": str,
    "date": lambda v: v,
    "category": lambda v: domain.ExpenseCategory(v).value,
}


def _convert_fields(
    fields: dict[str, Any], converters: dict[str, Callable[[Any], Any]], kind: str
) -> dict[str, Any]:
    values = {}
    for name, value in fields.items():
        if name not in converters:
            raise ValueError(f"Unknown {kind} field '{name}'")
        values[name] = converters[name](value) if value is not None else None
    return values


def department_fields_to_columns(fields: dict[str, Any]) -> dict[str, Any]:
    """Convert a partial department update to column values."""
    return _convert_fields(fields, _DEPARTMENT_FIELD_CONVERTERS, "department")


def employee_fields_to_columns(fields: dict[str, Any]) -> dict[str, Any]:
    """Convert a partial employee update to column values."""
    return _convert_fields(fields, _EMPLOYEE_FIELD_CONVERTERS, "employee")


def expense_fields_to_columns(fields: dict[str, Any]) -> dict[str, Any]:
    """Convert a partial expense update to column values."""
    return _convert_fields(fields, _EXPENSE_FIELD_CONVERTERS, "expense")


# SQLAlchemy rows


def department_to_domain(orm_department: ORMDepartment) -> domain.Department:
    """Convert SQLAlchemy Department model to domain Department entity."""
    return domain.Department(
        id=orm_department.id,
        name=orm_department.name,
        monthly_budget=_decimal(orm_department.monthly_budget),
    )


def department_to_columns(department: domain.Department) -> dict[str, Any]:
    """Column values for inserting a department (without its ID)."""
    return department_fields_to_columns(
        {"name": department.name, "monthly_budget": department.monthly_budget}
    )


def employee_to_domain(orm_employee: ORMEmployee) -> domain.Employee:
    """Convert SQLAlchemy Employee model to domain Employee entity."""
    return domain.Employee(
        id=orm_employee.id,
        name=orm_employee.name,
        role=orm_employee.role or "",
        primary_department=orm_employee.primary_department,
        total_annual_salary=_decimal(orm_employee.total_annual_salary),
        allocations=tuple(allocation_from_dict(a) for a in orm_employee.allocations or []),
        status=domain.EmployeeStatus(orm_employee.status),
        start_date=orm_employee.start_date,
        termination_date=orm_employee.termination_date,
        documents=tuple(document_from_dict(d) for d in orm_employee.documents or []),
        payouts=tuple(payout_from_dict(p) for p in orm_employee.payouts or []),
        email=orm_employee.email,
        phone=orm_employee.phone,
        upi_id=orm_employee.upi_id,
        date_of_birth=orm_employee.date_of_birth,
    )


def employee_to_columns(employee: domain.Employee) -> dict[str, Any]:
    """Column values for inserting an employee (without its ID)."""
    return employee_fields_to_columns(
        {name: getattr(employee, name) for name in _EMPLOYEE_FIELD_CONVERTERS}
    )


def expense_to_domain(orm_expense: ORMExpense) -> domain.Expense:
    """Convert SQLAlchemy Expense model to domain Expense entity."""
    return domain.Expense(
        id=orm_expense.id,
        description=orm_expense.description or "",
        amount=_decimal(orm_expense.amount),
        department=orm_expense.department,
        date=orm_expense.date,
        category=domain.ExpenseCategory(orm_expense.category),
    )


def expense_to_columns(expense: domain.Expense) -> dict[str, Any]:
    """Column values for inserting an expense (without its ID)."""
    return expense_fields_to_columns(
        {name: getattr(expense, name) for name in _EXPENSE_FIELD_CONVERTERS}
    )


# Snapshot documents


def department_to_dict(department: domain.Department) -> dict[str, Any]:
    return {
        "id": department.id,
        "name": department.name,
        "monthly_budget": str(department.monthly_budget),
    }


def department_from_dict(data: dict[str, Any]) -> domain.Department:
    return domain.Department(
        id=data["id"],
        name=data["name"],
        monthly_budget=_decimal(data["monthly_budget"]),
    )


def employee_to_dict(employee: domain.Employee) -> dict[str, Any]:
    return {
        "id": employee.id,
        "name": employee.name,
        "role": employee.role,
        "primary_department": employee.primary_department,
        "total_annual_salary": str(employee.total_annual_salary),
        "allocations": [allocation_to_dict(a) for a in employee.allocations],
        "status": employee.status.value,
        "start_date": _date_to_json(employee.start_date),
        "termination_date": _date_to_json(employee.termination_date),
        "documents": [document_to_dict(d) for d in employee.documents],
        "payouts": [payout_to_dict(p) for p in employee.payouts],
        "email": employee.email,
        "phone": employee.phone,
        "upi_id": employee.upi_id,
        "date_of_birth": _date_to_json(employee.date_of_birth),
    }


def employee_from_dict(data: dict[str, Any]) -> domain.Employee:
    return domain.Employee(
        id=data["id"],
        name=data["name"],
        role=data.get("role") or "",
        primary_department=data.get("primary_department"),
        total_annual_salary=_decimal(data.get("total_annual_salary", "0")),
        allocations=tuple(allocation_from_dict(a) for a in data.get("allocations", [])),
        status=domain.EmployeeStatus(data.get("status") or domain.EmployeeStatus.ACTIVE.value),
        start_date=_date_from_json(data.get("start_date")),
        termination_date=_date_from_json(data.get("termination_date")),
        documents=tuple(document_from_dict(d) for d in data.get("documents", [])),
        payouts=tuple(payout_from_dict(p) for p in data.get("payouts", [])),
        email=data.get("email"),
        phone=data.get("phone"),
        upi_id=data.get("upi_id"),
        date_of_birth=_date_from_json(data.get("date_of_birth")),
    )


def expense_to_dict(expense: domain.Expense) -> dict[str, Any]:
    return {
        "id": expense.id,
        "description": expense.description,
        "amount": str(expense.amount),
        "department": expense.department,
        "date": _date_to_json(expense.date),
        "category": expense.category.value,
    }


def expense_from_dict(data: dict[str, Any]) -> domain.Expense:
    return domain.Expense(
        id=data["id"],
        description=data.get("description") or "",
        amount=_decimal(data["amount"]),
        department=data["department"],
        date=_date_from_json(data["date"]),
        category=domain.ExpenseCategory(data["category"]),
    )


def snapshot_to_dict(snapshot: domain.WorkspaceSnapshot) -> dict[str, Any]:
    """Convert a workspace snapshot to a JSON-compatible dict."""
    return {
        "departments": [department_to_dict(d) for d in snapshot.departments],
        "employees": [employee_to_dict(e) for e in snapshot.employees],
        "expenses": [expense_to_dict(e) for e in snapshot.expenses],
    }


def snapshot_from_dict(data: dict[str, Any]) -> domain.WorkspaceSnapshot:
    """Rebuild a workspace snapshot from its JSON-compatible dict."""
    return domain.WorkspaceSnapshot(
        departments=tuple(department_from_dict(d) for d in data.get("departments", [])),
        employees=tuple(employee_from_dict(e) for e in data.get("employees", [])),
        expenses=tuple(expense_from_dict(e) for e in data.get("expenses", [])),
    )
