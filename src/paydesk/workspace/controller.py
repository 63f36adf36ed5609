"""Workspace controller: optimistic mutations over the canonical state.

Every operation validates its input, applies the change to the in-memory
state immediately and then hands the change to the session's sync strategy.
Validation failures raise a ``DomainError`` before anything is changed.
Mirror failures never reach the caller.
"""

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional, Sequence

from paydesk.database.base import (
    COLLECTION_DEPARTMENTS,
    COLLECTION_EMPLOYEES,
    COLLECTION_EXPENSES,
    RemoteStore,
    StoreError,
)
from paydesk.database.snapshot import SnapshotStore
from paydesk.domain.employee import build_allocations, build_employee, check_invariants, with_allocations
from paydesk.domain.entities import (
    Department,
    DocumentRecord,
    Employee,
    EmployeeStatus,
    Expense,
    ExpenseCategory,
    Payout,
    PayoutType,
    SyncMode,
    WorkspaceSnapshot,
)
from paydesk.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    department_delete_blocked,
    department_not_found,
    duplicate_department,
    employee_not_found,
    employee_terminated,
)
from paydesk.domain.seed import default_snapshot
from paydesk.domain.summary import SummaryService
from paydesk.workspace.identifiers import TemporaryIdFactory
from paydesk.workspace.state import WorkspaceState
from paydesk.workspace.strategies import RemoteMirror, SnapshotMirror, SyncStrategy

logger = logging.getLogger(__name__)

# Employee fields a caller may change through update_employee
EDITABLE_EMPLOYEE_FIELDS = frozenset(
    {
        "name",
        "role",
        "allocations",
        "start_date",
        "termination_date",
        "email",
        "phone",
        "upi_id",
        "date_of_birth",
    }
)


def _positive_amount(amount: Any, what: str) -> Decimal:
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except ArithmeticError:
        raise ValidationError(f"{what} must be a number, got {amount!r}")
    if not value.is_finite() or value <= 0:
        raise ValidationError(f"{what} must be positive")
    return value


def _budget_amount(amount: Any) -> Decimal:
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except ArithmeticError:
        raise ValidationError(f"Budget must be a number, got {amount!r}")
    if not value.is_finite() or value < 0:
        raise ValidationError("Budget cannot be negative")
    return value


class WorkspaceController:
    """Owns departments, employees and expenses for one session."""

    def __init__(
        self,
        snapshot: WorkspaceSnapshot,
        strategy: SyncStrategy,
        id_factory: Optional[Callable[..., str]] = None,
    ):
        """Initialize the controller.

        Args:
            snapshot: Initial state
            strategy: Mirror used for every mutation
            id_factory: Source of temporary identifiers
        """
        self.state = WorkspaceState(snapshot)
        self.strategy = strategy
        self._new_id = id_factory or TemporaryIdFactory()

    @classmethod
    async def start(
        cls,
        remote: Optional[RemoteStore],
        snapshots: SnapshotStore,
        seed: Optional[WorkspaceSnapshot] = None,
        id_factory: Optional[Callable[..., str]] = None,
    ) -> "WorkspaceController":
        """Choose the sync mode and load the initial state.

        The remote store is used if it is configured and can be initialized,
        seeded and read. Otherwise the session runs in local mode for good,
        starting from the stored snapshot or from the default data.

        Raises:
            SnapshotError: If a stored snapshot exists but cannot be read
        """
        seed = seed if seed is not None else default_snapshot()

        if remote is not None and remote.is_configured():
            try:
                await remote.initialize_schema()
                await remote.seed(seed)
                snapshot = WorkspaceSnapshot(
                    departments=tuple(await remote.departments.list_all()),
                    employees=tuple(await remote.employees.list_all()),
                    expenses=tuple(await remote.expenses.list_all()),
                )
            except StoreError as e:
                logger.warning("Remote store unavailable, falling back to local mode: %s", e)
                await remote.dispose()
            else:
                logger.info(
                    "Loaded %d departments, %d employees, %d expenses from remote store",
                    len(snapshot.departments),
                    len(snapshot.employees),
                    len(snapshot.expenses),
                )
                return cls(snapshot, RemoteMirror(remote), id_factory)
        else:
            logger.info("No remote store configured, using local snapshots")

        snapshot = snapshots.load()
        strategy = SnapshotMirror(snapshots)
        if snapshot is None:
            logger.info("No snapshot found in %s, starting from default data", snapshots.directory)
            snapshot = seed
            strategy.committed(snapshot)
        return cls(snapshot, strategy, id_factory)

    @property
    def mode(self) -> SyncMode:
        return self.strategy.mode

    async def drain(self) -> None:
        """Wait for in-flight mirror writes."""
        await self.strategy.drain()

    async def settle(self, kind: str, entity_id: str) -> Optional[Any]:
        """Wait for mirror writes, then return the entity under its current ID.

        A temporary ID given here is followed to the store-assigned one once
        the create has succeeded.
        """
        await self.drain()
        return self.state.get(kind, self.strategy.resolve_id(kind, entity_id))

    async def close(self) -> None:
        await self.strategy.close()

    # Read access

    @property
    def departments(self) -> tuple[Department, ...]:
        return tuple(self.state.departments)

    @property
    def employees(self) -> tuple[Employee, ...]:
        return tuple(self.state.employees)

    @property
    def expenses(self) -> tuple[Expense, ...]:
        return tuple(self.state.expenses)

    def snapshot(self) -> WorkspaceSnapshot:
        return self.state.snapshot()

    def summary(self) -> SummaryService:
        """Aggregation views over the current state."""
        return SummaryService(self.state.snapshot())

    def department_names(self) -> list[str]:
        return [d.name for d in self.state.departments]

    def get_department(self, name: str) -> Optional[Department]:
        for department in self.state.departments:
            if department.name == name:
                return department
        return None

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        return self.state.get(COLLECTION_EMPLOYEES, employee_id)

    def get_expense(self, expense_id: str) -> Optional[Expense]:
        return self.state.get(COLLECTION_EXPENSES, expense_id)

    def _require_employee(self, employee_id: str) -> Employee:
        employee = self.get_employee(employee_id)
        if employee is None:
            raise NotFoundError(employee_not_found(employee_id))
        return employee

    def _require_department(self, name: str) -> Department:
        department = self.get_department(name)
        if department is None:
            raise NotFoundError(department_not_found(name))
        return department

    # Internal mutation helpers

    def _commit(self) -> None:
        self.strategy.committed(self.state.snapshot())

    def _reconcile(self, kind: str, temporary_id: str, assigned_id: str) -> None:
        if self.state.replace_id(kind, temporary_id, assigned_id):
            logger.debug("%s %s is now %s", kind, temporary_id, assigned_id)
        else:
            logger.debug("%s %s was removed before it got ID %s", kind, temporary_id, assigned_id)

    def _insert(self, kind: str, entity: Any) -> None:
        self.state.put(kind, entity)
        self.strategy.created(kind, entity, self._reconcile)

    # Departments

    def add_department(self, name: str, monthly_budget: Decimal | int | str) -> Department:
        """Create a department.

        Args:
            name: Department name, unique ignoring case
            monthly_budget: Monthly budget in INR

        Returns:
            The new department, under a temporary ID

        Raises:
            ValidationError: If the name is empty or the budget negative
            ConflictError: If the name is already taken
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Department name is required")
        budget = _budget_amount(monthly_budget)
        if any(d.name.lower() == name.lower() for d in self.state.departments):
            raise ConflictError(duplicate_department(name))

        department = Department(id=self._new_id(), name=name, monthly_budget=budget)
        self._insert(COLLECTION_DEPARTMENTS, department)
        self._commit()
        logger.info("Added department '%s'", name)
        return department

    def update_department(
        self,
        old_name: str,
        new_name: Optional[str] = None,
        monthly_budget: Optional[Decimal | int | str] = None,
    ) -> Department:
        """Rename a department and/or change its budget.

        A rename is applied to every employee's primary department and
        allocations, and to the department of every expense, in the same
        operation. Renaming to the current name only updates the budget.

        Raises:
            NotFoundError: If ``old_name`` does not exist
            ValidationError: If the new name is empty or the budget negative
            ConflictError: If another department already uses the new name
        """
        department = self._require_department(old_name)
        target = department.name if new_name is None else new_name.strip()
        if not target:
            raise ValidationError("Department name is required")
        budget = department.monthly_budget if monthly_budget is None else _budget_amount(monthly_budget)
        for other in self.state.departments:
            if other.id != department.id and other.name.lower() == target.lower():
                raise ConflictError(duplicate_department(target))

        updated = replace(department, name=target, monthly_budget=budget)
        self.state.put(COLLECTION_DEPARTMENTS, updated)
        self.strategy.updated(
            COLLECTION_DEPARTMENTS,
            [(department.id, {"name": target, "monthly_budget": budget})],
        )

        if target != old_name:
            self._cascade_rename(old_name, target)
            logger.info("Renamed department '%s' to '%s'", old_name, target)

        self._commit()
        return updated

    def _cascade_rename(self, old_name: str, new_name: str) -> None:
        employee_changes = []
        for employee in list(self.state.employees):
            if not employee.references_department(old_name):
                continue
            allocations = tuple(
                replace(a, department=new_name) if a.department == old_name else a
                for a in employee.allocations
            )
            primary = new_name if employee.primary_department == old_name else employee.primary_department
            renamed = replace(employee, allocations=allocations, primary_department=primary)
            self.state.put(COLLECTION_EMPLOYEES, renamed)
            employee_changes.append(
                (employee.id, {"allocations": allocations, "primary_department": primary})
            )

        expense_changes = []
        for expense in list(self.state.expenses):
            if expense.department == old_name:
                self.state.put(COLLECTION_EXPENSES, replace(expense, department=new_name))
                expense_changes.append((expense.id, {"department": new_name}))

        if employee_changes:
            self.strategy.updated(COLLECTION_EMPLOYEES, employee_changes)
        if expense_changes:
            self.strategy.updated(COLLECTION_EXPENSES, expense_changes)

    def delete_department(self, name: str) -> None:
        """Delete a department no active employee references.

        Raises:
            NotFoundError: If the department does not exist
            DependencyError: If an active employee still references it
        """
        department = self._require_department(name)
        users = [e for e in self.state.employees if e.is_active and e.references_department(name)]
        if users:
            raise DependencyError(department_delete_blocked(name, len(users)))

        self.state.remove(COLLECTION_DEPARTMENTS, department.id)
        self.strategy.deleted(COLLECTION_DEPARTMENTS, [department.id])
        self._commit()
        logger.info("Deleted department '%s'", name)

    # Employees

    def add_employee(
        self,
        name: str,
        role: str,
        allocations: Sequence[tuple[str, Decimal]],
        start_date: Optional[date] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        upi_id: Optional[str] = None,
        date_of_birth: Optional[date] = None,
        documents: Sequence[DocumentRecord] = (),
    ) -> Employee:
        """Hire an employee.

        Args:
            name: Full name
            role: Job title
            allocations: (department, monthly salary) pairs; the first is the
                primary department
            start_date: Optional joining date
            email: Optional email address
            phone: Optional phone number
            upi_id: Optional UPI payment ID
            date_of_birth: Optional date of birth
            documents: Initial documents

        Returns:
            The new employee, under a temporary ID

        Raises:
            ValidationError: If the name is missing or allocations are invalid
        """
        employee = build_employee(
            employee_id=self._new_id(),
            name=name,
            role=role,
            monthly_allocations=allocations,
            known_departments=self.department_names(),
            start_date=start_date,
            email=email,
            phone=phone,
            upi_id=upi_id,
            date_of_birth=date_of_birth,
            documents=documents,
        )
        check_invariants(employee)
        self._insert(COLLECTION_EMPLOYEES, employee)
        self._commit()
        logger.info("Added employee '%s' (%s)", employee.name, employee.id)
        return employee

    def update_employee(self, employee_id: str, **fields: Any) -> Employee:
        """Change employee details.

        ``allocations`` is given as (department, monthly salary) pairs and
        recomputes the total salary and primary department. A terminated
        employee only accepts a new ``termination_date``.

        Raises:
            NotFoundError: If the employee does not exist
            ValidationError: If a field is unknown or invalid
        """
        employee = self._require_employee(employee_id)
        unknown = set(fields) - EDITABLE_EMPLOYEE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update employee field(s): {', '.join(sorted(unknown))}")
        if not employee.is_active and set(fields) - {"termination_date"}:
            raise ValidationError(employee_terminated(employee_id))

        updated = employee
        changes: dict[str, Any] = {}
        for field_name, value in fields.items():
            if field_name == "allocations":
                allocations = build_allocations(value, self.department_names())
                updated = with_allocations(updated, allocations)
                changes["allocations"] = updated.allocations
                changes["total_annual_salary"] = updated.total_annual_salary
                changes["primary_department"] = updated.primary_department
                continue
            if field_name == "name":
                value = (value or "").strip()
                if not value:
                    raise ValidationError("Employee name is required")
            updated = replace(updated, **{field_name: value})
            changes[field_name] = value

        check_invariants(updated)
        self.state.put(COLLECTION_EMPLOYEES, updated)
        self.strategy.updated(COLLECTION_EMPLOYEES, [(employee_id, changes)])
        self._commit()
        return updated

    def add_documents(self, employee_id: str, documents: Iterable[DocumentRecord]) -> Employee:
        """Append documents to an employee's file. Existing ones are kept."""
        employee = self._require_employee(employee_id)
        new_documents = tuple(documents)
        if not new_documents:
            return employee

        updated = replace(employee, documents=employee.documents + new_documents)
        self.state.put(COLLECTION_EMPLOYEES, updated)
        self.strategy.updated(COLLECTION_EMPLOYEES, [(employee_id, {"documents": updated.documents})])
        self._commit()
        return updated

    def terminate_employee(self, employee_id: str, termination_date: date) -> Employee:
        return self.terminate_employees([employee_id], termination_date)[0]

    def terminate_employees(self, employee_ids: Sequence[str], termination_date: date) -> list[Employee]:
        """Terminate employees. Already terminated ones get the new date.

        Raises:
            NotFoundError: If any ID is unknown (nothing is changed)
        """
        employees = [self._require_employee(employee_id) for employee_id in employee_ids]

        terminated = []
        changes = []
        for employee in employees:
            updated = replace(employee, status=EmployeeStatus.TERMINATED, termination_date=termination_date)
            self.state.put(COLLECTION_EMPLOYEES, updated)
            terminated.append(updated)
            changes.append(
                (employee.id, {"status": EmployeeStatus.TERMINATED, "termination_date": termination_date})
            )
        self.strategy.updated(COLLECTION_EMPLOYEES, changes)
        self._commit()
        logger.info("Terminated %d employee(s) as of %s", len(terminated), termination_date)
        return terminated

    def delete_employee(self, employee_id: str) -> None:
        self.delete_employees([employee_id])

    def delete_employees(self, employee_ids: Sequence[str]) -> None:
        """Permanently remove employees.

        Raises:
            NotFoundError: If any ID is unknown (nothing is changed)
        """
        for employee_id in employee_ids:
            self._require_employee(employee_id)
        for employee_id in employee_ids:
            self.state.remove(COLLECTION_EMPLOYEES, employee_id)
        self.strategy.deleted(COLLECTION_EMPLOYEES, list(employee_ids))
        self._commit()
        logger.info("Deleted %d employee(s)", len(employee_ids))

    # Expenses

    def add_expense(
        self,
        description: str,
        amount: Decimal | int | str,
        department: str,
        spent_on: date,
        category: ExpenseCategory | str = ExpenseCategory.MISCELLANEOUS,
    ) -> Expense:
        """Log an operational expense.

        Raises:
            ValidationError: If the amount is not positive, the department is
                unknown or the category is Salary (salary expenses come from
                payouts only)
        """
        try:
            category = ExpenseCategory(category)
        except ValueError:
            raise ValidationError(f"Unknown expense category '{category}'")
        if category is ExpenseCategory.SALARY:
            raise ValidationError("Salary expenses are recorded through payroll")
        value = _positive_amount(amount, "Expense amount")
        if self.get_department(department) is None:
            raise ValidationError(department_not_found(department))

        expense = self._new_expense(description, value, department, spent_on, category)
        self._commit()
        return expense

    def _new_expense(
        self,
        description: str,
        amount: Decimal,
        department: str,
        spent_on: date,
        category: ExpenseCategory,
    ) -> Expense:
        expense = Expense(
            id=self._new_id(),
            description=(description or "").strip(),
            amount=amount,
            department=department,
            date=spent_on,
            category=category,
        )
        self._insert(COLLECTION_EXPENSES, expense)
        return expense

    def delete_expenses(self, expense_ids: Sequence[str]) -> int:
        """Delete expenses; unknown IDs are ignored. Returns the number removed."""
        removed = [
            expense_id for expense_id in dict.fromkeys(expense_ids)
            if self.state.remove(COLLECTION_EXPENSES, expense_id)
        ]
        if removed:
            self.strategy.deleted(COLLECTION_EXPENSES, removed)
            self._commit()
        return len(removed)

    # Payroll

    def _check_payable(self, employee_id: str, amount: Any) -> tuple[Employee, Decimal]:
        employee = self._require_employee(employee_id)
        if not employee.is_active:
            raise ValidationError(employee_terminated(employee_id))
        if not employee.primary_department:
            raise ValidationError(f"Employee {employee_id} has no primary department")
        return employee, _positive_amount(amount, "Payment amount")

    def record_payment(
        self,
        employee_id: str,
        amount: Decimal | int | str,
        payout_type: PayoutType | str = PayoutType.SALARY,
        paid_on: Optional[date] = None,
        note: Optional[str] = None,
    ) -> tuple[Payout, Expense]:
        """Pay an employee.

        Appends a payout to the employee and logs a matching Salary expense
        against the employee's primary department, dated the same day. The two
        are mirrored as separate writes.

        Returns:
            The new payout and expense

        Raises:
            NotFoundError: If the employee does not exist
            ValidationError: If the employee is terminated or the amount invalid
        """
        try:
            payout_type = PayoutType(payout_type)
        except ValueError:
            raise ValidationError(f"Unknown payout type '{payout_type}'")
        employee, value = self._check_payable(employee_id, amount)
        paid_on = paid_on or date.today()

        payout = Payout(id=self._new_id("pay"), date=paid_on, amount=value, type=payout_type, note=note)
        updated = replace(employee, payouts=employee.payouts + (payout,))
        self.state.put(COLLECTION_EMPLOYEES, updated)
        self.strategy.updated(COLLECTION_EMPLOYEES, [(employee_id, {"payouts": updated.payouts})])

        expense = self._new_expense(
            description=f"{payout_type.value} - {employee.name}",
            amount=value,
            department=employee.primary_department,
            spent_on=paid_on,
            category=ExpenseCategory.SALARY,
        )
        self._commit()
        logger.info("Recorded %s payout of %s for %s", payout_type.value, value, employee.name)
        return payout, expense

    async def process_bulk_payment(
        self,
        payments: Sequence[tuple[str, Decimal]],
        paid_on: date,
        payout_type: PayoutType | str = PayoutType.SALARY,
    ) -> list[tuple[Payout, Expense]]:
        """Run payroll for several employees, one after another.

        Every payment is validated before any is recorded. Each payout and
        expense pair is fully mirrored before the next one starts.

        Args:
            payments: (employee ID, amount) pairs
            paid_on: Payment date
            payout_type: Payout type for every payment
        """
        for employee_id, amount in payments:
            self._check_payable(employee_id, amount)

        results = []
        for employee_id, amount in payments:
            results.append(self.record_payment(employee_id, amount, payout_type, paid_on))
            await self.strategy.drain()
        return results
