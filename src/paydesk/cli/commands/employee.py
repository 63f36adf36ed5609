"""Employee management commands."""

import base64
from datetime import date
from pathlib import Path

import click

from paydesk.cli.error_handling import handle_domain_error
from paydesk.cli.params import allocation_option, date_option
from paydesk.cli.session import run_with_workspace
from paydesk.database.base import COLLECTION_EMPLOYEES
from paydesk.domain.entities import DocumentRecord, DocumentStatus, DocumentType, EmployeeStatus
from paydesk.domain.errors import DomainError
from paydesk.utils.money import format_inr


@click.group()
def employee_group():
    """Manage employees."""
    pass


@employee_group.command("list")
@click.option("--department", help="Only employees allocated to this department")
@click.option(
    "--status",
    type=click.Choice([s.value for s in EmployeeStatus], case_sensitive=False),
    help="Only employees with this status",
)
@click.pass_context
def list_employees(ctx, department: str | None, status: str | None):
    """List employees."""
    employees = run_with_workspace(ctx, lambda controller: controller.employees)
    if department:
        employees = [e for e in employees if e.references_department(department)]
    if status:
        employees = [e for e in employees if e.status.value.lower() == status.lower()]

    if not employees:
        click.echo("No employees found.")
        return

    click.echo("\nEmployees:")
    click.echo("-" * 100)
    for emp in employees:
        click.echo(
            f"ID: {emp.id:>8s} | {emp.name:22s} | {emp.role:22s} | {emp.primary_department or '-':20s} | "
            f"{format_inr(emp.total_annual_salary):>14s}/yr | {emp.status.value}"
        )


@employee_group.command("add")
@click.argument("name", metavar="NAME")
@click.option("--role", required=True, help="Job title")
@click.option(
    "--allocation",
    "allocations",
    multiple=True,
    required=True,
    callback=allocation_option,
    help="DEPARTMENT=MONTHLY_SALARY; repeat for split roles, primary department first",
)
@click.option("--start-date", callback=date_option, help="Joining date")
@click.option("--email", help="Email address")
@click.option("--phone", help="Phone number")
@click.option("--upi-id", help="UPI ID for payouts")
@click.option("--dob", "date_of_birth", callback=date_option, help="Date of birth")
@click.pass_context
def add_employee(ctx, name: str, role: str, allocations, start_date, email, phone, upi_id, date_of_birth):
    """Hire an employee.

    Examples:
        paydesk employee add "Asha Rao" --role "Editor" --allocation Editing=80,000
        paydesk employee add "Dev Kumar" --role "Engineer" \\
            --allocation Tech=50000 --allocation Softwares=30000
    """
    async def hire(controller):
        emp = controller.add_employee(
            name,
            role,
            allocations,
            start_date=start_date,
            email=email,
            phone=phone,
            upi_id=upi_id,
            date_of_birth=date_of_birth,
        )
        return await controller.settle(COLLECTION_EMPLOYEES, emp.id)

    try:
        emp = run_with_workspace(ctx, hire)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Added employee '{emp.name}' (ID: {emp.id}) in {emp.primary_department}, "
        f"{format_inr(emp.total_annual_salary)}/yr"
    )


@employee_group.command("show")
@click.argument("employee_id", metavar="EMPLOYEE_ID")
@click.pass_context
def show_employee(ctx, employee_id: str):
    """Show an employee's profile, allocations, documents and payouts."""
    emp = run_with_workspace(ctx, lambda controller: controller.get_employee(employee_id))
    if emp is None:
        click.echo(f"Error: Employee {employee_id} not found", err=True)
        ctx.exit(1)

    click.echo(f"\n{emp.name} ({emp.id})")
    click.echo("-" * 60)
    click.echo(f"Role:          {emp.role}")
    click.echo(f"Status:        {emp.status.value}")
    click.echo(f"Department:    {emp.primary_department or '-'}")
    click.echo(f"Annual salary: {format_inr(emp.total_annual_salary)}")
    if emp.start_date:
        click.echo(f"Start date:    {emp.start_date}")
    if emp.termination_date:
        click.echo(f"Terminated:    {emp.termination_date}")
    for label, value in (("Email", emp.email), ("Phone", emp.phone), ("UPI ID", emp.upi_id)):
        if value:
            click.echo(f"{label + ':':15s}{value}")
    if emp.date_of_birth:
        click.echo(f"Date of birth: {emp.date_of_birth}")

    click.echo("\nAllocations:")
    for allocation in emp.allocations:
        click.echo(f"  {allocation.department:30s} {format_inr(allocation.annual_salary):>14s}/yr")

    click.echo(f"\nDocuments ({len(emp.documents)}):")
    for doc in emp.documents:
        source = doc.file_name or doc.external_url or ""
        click.echo(f"  {doc.type.value:22s} | {doc.status.value:9s} | {doc.last_updated} {source}")

    click.echo(f"\nPayouts ({len(emp.payouts)}):")
    for payout in sorted(emp.payouts, key=lambda p: p.date, reverse=True):
        note = f" | {payout.note}" if payout.note else ""
        click.echo(f"  {payout.date} | {payout.type.value:13s} | {format_inr(payout.amount):>14s}{note}")


@employee_group.command("update")
@click.argument("employee_id", metavar="EMPLOYEE_ID")
@click.option("--name", help="New name")
@click.option("--role", help="New job title")
@click.option(
    "--allocation",
    "allocations",
    multiple=True,
    callback=allocation_option,
    help="DEPARTMENT=MONTHLY_SALARY; replaces all allocations, primary first",
)
@click.option("--start-date", callback=date_option, help="Joining date")
@click.option("--termination-date", callback=date_option, help="Termination date")
@click.option("--email", help="Email address")
@click.option("--phone", help="Phone number")
@click.option("--upi-id", help="UPI ID")
@click.option("--dob", "date_of_birth", callback=date_option, help="Date of birth")
@click.pass_context
def update_employee(ctx, employee_id: str, allocations, **options):
    """Update employee details.

    Terminated employees only accept a new --termination-date.
    """
    fields = {key: value for key, value in options.items() if value is not None}
    if allocations:
        fields["allocations"] = allocations
    if not fields:
        click.echo("Error: Nothing to update.", err=True)
        ctx.exit(1)

    try:
        emp = run_with_workspace(ctx, lambda controller: controller.update_employee(employee_id, **fields))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated employee '{emp.name}' (ID: {emp.id})")


@employee_group.command("terminate")
@click.argument("employee_ids", nargs=-1, required=True, metavar="EMPLOYEE_ID...")
@click.option("--date", "termination_date", callback=date_option, help="Termination date (defaults to today)")
@click.pass_context
def terminate_employees(ctx, employee_ids: tuple[str, ...], termination_date: date | None):
    """Terminate one or more employees."""
    termination_date = termination_date or date.today()
    try:
        terminated = run_with_workspace(
            ctx, lambda controller: controller.terminate_employees(list(employee_ids), termination_date)
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    for emp in terminated:
        click.echo(f"Terminated '{emp.name}' (ID: {emp.id}) as of {termination_date}")


@employee_group.command("delete")
@click.argument("employee_ids", nargs=-1, required=True, metavar="EMPLOYEE_ID...")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_employees(ctx, employee_ids: tuple[str, ...], yes: bool):
    """Permanently delete one or more employees.

    Their past salary expenses stay in the ledger.
    """
    count = len(employee_ids)
    if not yes and not click.confirm(
        f"Are you sure you want to delete {count} employee{'s' if count != 1 else ''}?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        run_with_workspace(ctx, lambda controller: controller.delete_employees(list(employee_ids)))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted {count} employee{'s' if count != 1 else ''}")


@employee_group.command("add-document")
@click.argument("employee_id", metavar="EMPLOYEE_ID")
@click.option(
    "--type",
    "document_type",
    required=True,
    type=click.Choice([t.value for t in DocumentType], case_sensitive=False),
    help="Document type",
)
@click.option("--file", "file_path", type=click.Path(exists=True, dir_okay=False), help="File to attach")
@click.option("--url", help="Link to a shared document instead of a file")
@click.option("--verified", is_flag=True, help="Mark the document as verified")
@click.pass_context
def add_document(ctx, employee_id: str, document_type: str, file_path: str | None, url: str | None, verified: bool):
    """Attach a document to an employee's file."""
    if (file_path is None) == (url is None):
        click.echo("Error: Provide exactly one of --file or --url.", err=True)
        ctx.exit(1)

    doc_type = next(t for t in DocumentType if t.value.lower() == document_type.lower())
    inline_data = None
    file_name = None
    if file_path is not None:
        path = Path(file_path)
        inline_data = base64.b64encode(path.read_bytes()).decode("ascii")
        file_name = path.name

    record = DocumentRecord(
        type=doc_type,
        status=DocumentStatus.VERIFIED if verified else DocumentStatus.UPLOADED,
        last_updated=date.today(),
        file_name=file_name,
        inline_data=inline_data,
        external_url=url,
    )
    try:
        emp = run_with_workspace(ctx, lambda controller: controller.add_documents(employee_id, [record]))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added {doc_type.value} for '{emp.name}'")


def register_commands(cli):
    """Register employee commands with main CLI."""
    cli.add_command(employee_group, name="employee")
