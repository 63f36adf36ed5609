"""Department management commands."""

import click

from paydesk.cli.error_handling import handle_domain_error
from paydesk.cli.params import amount_option
from paydesk.cli.session import run_with_workspace
from paydesk.domain.errors import DomainError
from paydesk.utils.date_parser import resolve_period
from paydesk.utils.money import format_inr, format_percent


@click.group()
def department_group():
    """Manage departments and their budgets."""
    pass


@department_group.command("list")
@click.pass_context
def list_departments(ctx):
    """List all departments with their monthly budgets."""
    departments = run_with_workspace(ctx, lambda controller: controller.departments)
    if not departments:
        click.echo("No departments found.")
        return

    click.echo("\nDepartments:")
    click.echo("-" * 60)
    for dept in departments:
        click.echo(f"{dept.name:30s} | Monthly budget: {format_inr(dept.monthly_budget):>14s}")


@department_group.command("add")
@click.argument("name", metavar="NAME")
@click.option("--budget", required=True, callback=amount_option, help="Monthly budget in INR")
@click.pass_context
def add_department(ctx, name: str, budget):
    """Create a new department.

    Examples:
        paydesk department add "Research" --budget 25,00,000
    """
    try:
        dept = run_with_workspace(ctx, lambda controller: controller.add_department(name, budget))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created department '{dept.name}' with monthly budget {format_inr(dept.monthly_budget)}")


@department_group.command("update")
@click.argument("name", metavar="NAME")
@click.option("--name", "new_name", help="New department name")
@click.option("--budget", callback=amount_option, help="New monthly budget in INR")
@click.pass_context
def update_department(ctx, name: str, new_name: str | None, budget):
    """Rename a department or change its budget.

    Renaming also moves every employee allocation and expense to the new name.

    Examples:
        paydesk department update "Tech" --name "Engineering"
        paydesk department update "Sales" --budget 30,00,000
    """
    if new_name is None and budget is None:
        click.echo("Error: Nothing to update. Use --name and/or --budget.", err=True)
        ctx.exit(1)

    try:
        dept = run_with_workspace(
            ctx, lambda controller: controller.update_department(name, new_name, budget)
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated department '{dept.name}' (monthly budget {format_inr(dept.monthly_budget)})")


@department_group.command("delete")
@click.argument("name", metavar="NAME")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_department(ctx, name: str, yes: bool):
    """Delete a department.

    The department can only be deleted if no active employee is allocated to
    it. Reassign them first with 'employee update --allocation'.
    """
    if not yes and not click.confirm(f"Are you sure you want to delete department '{name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        run_with_workspace(ctx, lambda controller: controller.delete_department(name))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted department '{name}'")


@department_group.command("show")
@click.argument("name", metavar="NAME")
@click.option("--year", type=int, help="Year (defaults to the current year)")
@click.option("--month", help="Month number or name (defaults to the current month)")
@click.option("--all-months", is_flag=True, help="Show the whole year")
@click.pass_context
def show_department(ctx, name: str, year: int | None, month: str | None, all_months: bool):
    """Show a department's budget, members and expenses for a period."""
    try:
        year, month_number = resolve_period(year, month, all_months)
    except ValueError as e:
        handle_domain_error(ctx, e)

    def build(controller):
        if controller.get_department(name) is None:
            return None
        return controller.summary().department_overview(name, year, month_number)

    overview = run_with_workspace(ctx, build)
    if overview is None:
        click.echo(f"Error: Department '{name}' not found", err=True)
        ctx.exit(1)

    click.echo(f"\n{overview.department} - {overview.label}")
    click.echo("-" * 60)
    click.echo(f"Budget:       {format_inr(overview.budget):>16s}")
    click.echo(f"Payroll:      {format_inr(overview.payroll):>16s}")
    click.echo(f"Operational:  {format_inr(overview.operational):>16s}")
    click.echo(f"Remaining:    {format_inr(overview.remaining_budget):>16s}")
    click.echo(f"Utilization:  {format_percent(overview.utilization):>16s}")

    click.echo(f"\nMembers ({len(overview.members)}):")
    for member in overview.members:
        employee = member.employee
        click.echo(
            f"  {employee.id:>8s} | {employee.name:25s} | {employee.role:25s} | "
            f"{format_inr(member.allocated_annual_salary)}/yr"
        )

    if overview.category_totals:
        click.echo("\nBy category:")
        for category, total in sorted(overview.category_totals.items(), key=lambda item: -item[1]):
            click.echo(f"  {category.value:20s} {format_inr(total):>16s}")

    click.echo(f"\nExpenses ({len(overview.expenses)}):")
    for expense in overview.expenses:
        click.echo(
            f"  {expense.date} | {expense.description:35s} | {expense.category.value:13s} | "
            f"{format_inr(expense.amount):>14s}"
        )


def register_commands(cli):
    """Register department commands with main CLI."""
    cli.add_command(department_group, name="department")
