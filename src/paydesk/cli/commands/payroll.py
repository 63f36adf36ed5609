"""Payroll commands."""

from datetime import date

import click

from paydesk.cli.error_handling import handle_domain_error
from paydesk.cli.params import amount_option, date_option, payment_option
from paydesk.cli.session import run_with_workspace
from paydesk.domain.employee import suggested_monthly_payment
from paydesk.domain.entities import PayoutType
from paydesk.domain.errors import DomainError
from paydesk.utils.money import format_inr

PAYOUT_TYPES = [t.value for t in PayoutType]


def _payout_type(value: str) -> PayoutType:
    return next(t for t in PayoutType if t.value.lower() == value.lower())


@click.group()
def payroll_group():
    """Pay employees."""
    pass


@payroll_group.command("pay")
@click.argument("employee_id", metavar="EMPLOYEE_ID")
@click.option("--amount", required=True, callback=amount_option, help="Amount in INR")
@click.option(
    "--type",
    "payout_type",
    type=click.Choice(PAYOUT_TYPES, case_sensitive=False),
    default=PayoutType.SALARY.value,
    show_default=True,
    help="Payout type",
)
@click.option("--date", "paid_on", callback=date_option, help="Payment date (defaults to today)")
@click.option("--note", help="Note stored with the payout")
@click.pass_context
def pay(ctx, employee_id: str, amount, payout_type: str, paid_on: date | None, note: str | None):
    """Record a single payment.

    The payment is also logged as a Salary expense of the employee's primary
    department.
    """
    paid_on = paid_on or date.today()
    try:
        payout, expense = run_with_workspace(
            ctx,
            lambda controller: controller.record_payment(
                employee_id, amount, _payout_type(payout_type), paid_on, note
            ),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Paid {format_inr(payout.amount)} ({payout.type.value}) on {payout.date}: "
        f"logged as '{expense.description}' in {expense.department}"
    )


@payroll_group.command("run")
@click.option(
    "--employee",
    "payments",
    multiple=True,
    callback=payment_option,
    help="EMPLOYEE_ID=AMOUNT; repeat for each employee. Defaults to every active employee",
)
@click.option(
    "--type",
    "payout_type",
    type=click.Choice(PAYOUT_TYPES, case_sensitive=False),
    default=PayoutType.SALARY.value,
    show_default=True,
    help="Payout type",
)
@click.option("--date", "paid_on", callback=date_option, help="Payment date (defaults to today)")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def run_payroll(ctx, payments, payout_type: str, paid_on: date | None, yes: bool):
    """Pay several employees in one go.

    Without --employee every active employee is paid one twelfth of their
    annual salary, rounded to the rupee.

    Examples:
        paydesk payroll run --date 2025-10-31
        paydesk payroll run --type Bonus --employee 1=50000 --employee 7=75000
    """
    paid_on = paid_on or date.today()
    kind = _payout_type(payout_type)

    batch = list(payments)
    if not batch:
        employees = run_with_workspace(ctx, lambda controller: controller.employees)
        batch = [(emp.id, suggested_monthly_payment(emp)) for emp in employees if emp.is_active]
    if not batch:
        click.echo("No active employees to pay.")
        return

    total = sum(amount for _, amount in batch)
    if not yes and not click.confirm(
        f"Pay {len(batch)} employee{'s' if len(batch) != 1 else ''} a total of {format_inr(total)}?"
    ):
        click.echo("Payroll cancelled.")
        return

    try:
        results = run_with_workspace(
            ctx, lambda controller: controller.process_bulk_payment(batch, paid_on, kind)
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    for payout, expense in results:
        click.echo(f"  {expense.description:40s} {format_inr(payout.amount):>14s}")
    total = sum(payout.amount for payout, _ in results)
    click.echo(f"Paid {len(results)} employee{'s' if len(results) != 1 else ''}, total {format_inr(total)}")


def register_commands(cli):
    """Register payroll commands with main CLI."""
    cli.add_command(payroll_group, name="payroll")
