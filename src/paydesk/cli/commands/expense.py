"""Expense ledger commands."""

from datetime import date

import click

from paydesk.cli.error_handling import handle_domain_error
from paydesk.cli.params import amount_option, date_option
from paydesk.cli.session import run_with_workspace
from paydesk.database.base import COLLECTION_EXPENSES
from paydesk.domain.entities import USER_EXPENSE_CATEGORIES, ExpenseCategory
from paydesk.domain.errors import DomainError
from paydesk.utils.date_parser import parse_month
from paydesk.utils.money import format_inr


@click.group()
def expense_group():
    """Manage operational expenses."""
    pass


@expense_group.command("list")
@click.option("--year", type=int, help="Only expenses in this year")
@click.option("--month", help="Only expenses in this month (needs --year)")
@click.option("--department", help="Only expenses of this department")
@click.option(
    "--category",
    type=click.Choice([c.value for c in ExpenseCategory], case_sensitive=False),
    help="Only expenses in this category",
)
@click.option("--search", help="Text to look for in the description")
@click.pass_context
def list_expenses(ctx, year: int | None, month: str | None, department, category, search):
    """List expenses, newest first."""
    month_number = None
    if month is not None:
        if year is None:
            click.echo("Error: --month requires --year.", err=True)
            ctx.exit(1)
        try:
            month_number = parse_month(month)
        except ValueError as e:
            handle_domain_error(ctx, e)
    category_value = (
        next(c for c in ExpenseCategory if c.value.lower() == category.lower()) if category else None
    )

    expenses = run_with_workspace(
        ctx,
        lambda controller: controller.summary().filter_expenses(
            year=year,
            month=month_number,
            department=department,
            category=category_value,
            search=search,
        ),
    )
    if not expenses:
        click.echo("No expenses found.")
        return

    click.echo("\nExpenses:")
    click.echo("-" * 110)
    for exp in expenses:
        click.echo(
            f"ID: {exp.id:>8s} | {exp.date} | {exp.description:35s} | {exp.department:22s} | "
            f"{exp.category.value:13s} | {format_inr(exp.amount):>14s}"
        )
    total = sum(exp.amount for exp in expenses)
    click.echo("-" * 110)
    click.echo(f"{len(expenses)} expense{'s' if len(expenses) != 1 else ''}, total {format_inr(total)}")


@expense_group.command("add")
@click.argument("description", metavar="DESCRIPTION")
@click.option("--amount", required=True, callback=amount_option, help="Amount in INR")
@click.option("--department", required=True, help="Department charged")
@click.option(
    "--category",
    type=click.Choice([c.value for c in USER_EXPENSE_CATEGORIES], case_sensitive=False),
    default=ExpenseCategory.MISCELLANEOUS.value,
    show_default=True,
    help="Expense category",
)
@click.option("--date", "spent_on", callback=date_option, help="Expense date (defaults to today)")
@click.pass_context
def add_expense(ctx, description: str, amount, department: str, category: str, spent_on: date | None):
    """Log an operational expense.

    Salary expenses are created by 'payroll pay' and 'payroll run'.

    Examples:
        paydesk expense add "AWS Cloud Hosting" --amount 85,000 --department Tech --category Software
    """
    category_value = next(c for c in ExpenseCategory if c.value.lower() == category.lower())
    spent_on = spent_on or date.today()
    async def log_expense(controller):
        exp = controller.add_expense(description, amount, department, spent_on, category_value)
        return await controller.settle(COLLECTION_EXPENSES, exp.id)

    try:
        exp = run_with_workspace(ctx, log_expense)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added expense '{exp.description}' of {format_inr(exp.amount)} to {exp.department} (ID: {exp.id})")


@expense_group.command("delete")
@click.argument("expense_ids", nargs=-1, required=True, metavar="EXPENSE_ID...")
@click.pass_context
def delete_expenses(ctx, expense_ids: tuple[str, ...]):
    """Delete one or more expenses."""
    removed = run_with_workspace(ctx, lambda controller: controller.delete_expenses(list(expense_ids)))
    click.echo(f"Deleted {removed} expense{'s' if removed != 1 else ''}")
    if removed < len(set(expense_ids)):
        click.echo(f"{len(set(expense_ids)) - removed} ID(s) not found", err=True)


def register_commands(cli):
    """Register expense commands with main CLI."""
    cli.add_command(expense_group, name="expense")
