"""Dashboard, trend and analysis commands."""

import click

from paydesk.cli.error_handling import handle_domain_error
from paydesk.cli.session import get_analyst, run_with_workspace
from paydesk.domain.entities import AnalysisResult
from paydesk.utils.date_parser import resolve_period
from paydesk.utils.money import format_inr, format_percent


def _period_options(func):
    func = click.option("--all-months", is_flag=True, help="Cover the whole year")(func)
    func = click.option("--month", help="Month number or name (defaults to the current month)")(func)
    func = click.option("--year", type=int, help="Year (defaults to the current year)")(func)
    return func


def _resolve(ctx, year, month, all_months):
    try:
        return resolve_period(year, month, all_months)
    except ValueError as e:
        handle_domain_error(ctx, e)


def _echo_analysis(result: AnalysisResult | None) -> None:
    if result is None:
        click.echo("\nAnalysis unavailable (check OPENAI_API_KEY and the log).", err=True)
        return
    click.echo(f"\nAI analysis (risk: {result.risk_level.value})")
    click.echo("-" * 60)
    click.echo(result.summary)
    for recommendation in result.recommendations:
        click.echo(f"  * {recommendation}")


def _analysis_inputs(controller, year, month, department=None):
    """Employees, period expenses, departments and a context line."""
    summary = controller.summary()
    expenses = summary.expenses_in_period(year, month, department)
    employees = list(controller.employees)
    departments = list(controller.departments)
    if department is not None:
        employees = [e for e in employees if e.references_department(department)]
        departments = [d for d in departments if d.name == department]
    label = summary.budget_overview(year, month).label
    context = f"Department '{department}' for {label}" if department else f"Organization overview for {label}"
    return employees, expenses, departments, context


@click.command("dashboard")
@_period_options
@click.option("--analyze", is_flag=True, help="Add an AI assessment of the period")
@click.pass_context
def dashboard(ctx, year, month, all_months, analyze: bool):
    """Show the organization-wide budget position."""
    year, month = _resolve(ctx, year, month, all_months)
    analyst = get_analyst(ctx) if analyze else None

    async def build(controller):
        overview = controller.summary().budget_overview(year, month)
        analysis = None
        if analyst is not None:
            analysis = await analyst.analyze(*_analysis_inputs(controller, year, month))
        return overview, analysis

    overview, analysis = run_with_workspace(ctx, build)

    click.echo(f"\nDashboard - {overview.label}")
    click.echo("-" * 72)
    click.echo(f"Total spend:       {format_inr(overview.total_spend):>18s}")
    click.echo(f"Total budget:      {format_inr(overview.total_budget):>18s}")
    click.echo(f"Remaining:         {format_inr(overview.remaining_budget):>18s}")
    click.echo(f"Utilization:       {format_percent(overview.utilization, 3):>18s}")
    click.echo(f"Active headcount:  {overview.active_headcount:>18d}")

    click.echo("\nBy department:")
    click.echo(f"  {'Department':28s} {'Payroll':>14s} {'Operational':>14s} {'Total':>14s} {'Budget':>14s}")
    for item in overview.departments:
        click.echo(
            f"  {item.name:28s} {format_inr(item.payroll):>14s} {format_inr(item.operational):>14s} "
            f"{format_inr(item.total):>14s} {format_inr(item.budget):>14s}"
        )

    if analyze:
        _echo_analysis(analysis)


@click.command("trend")
@click.option("--year", type=int, help="Year (defaults to the current year)")
@click.option("--department", help="Only this department")
@click.pass_context
def trend(ctx, year: int | None, department: str | None):
    """Show monthly payroll and operational spend for a year."""
    year, _ = _resolve(ctx, year, None, True)
    points = run_with_workspace(ctx, lambda controller: controller.summary().monthly_trend(year, department))

    scope = f" - {department}" if department else ""
    click.echo(f"\nMonthly spend {year}{scope}")
    click.echo("-" * 60)
    click.echo(f"  {'Month':6s} {'Payroll':>14s} {'Operational':>14s} {'Total':>14s}")
    for point in points:
        click.echo(
            f"  {point.label:6s} {format_inr(point.payroll):>14s} "
            f"{format_inr(point.operational):>14s} {format_inr(point.total):>14s}"
        )


@click.command("analyze")
@_period_options
@click.option("--department", help="Analyze a single department")
@click.pass_context
def analyze(ctx, year, month, all_months, department: str | None):
    """Ask the AI analyst for a summary, recommendations and a risk level."""
    year, month = _resolve(ctx, year, month, all_months)
    analyst = get_analyst(ctx)

    async def run(controller):
        if department is not None and controller.get_department(department) is None:
            return False, None
        return True, await analyst.analyze(*_analysis_inputs(controller, year, month, department))

    found, result = run_with_workspace(ctx, run)
    if not found:
        click.echo(f"Error: Department '{department}' not found", err=True)
        ctx.exit(1)
    _echo_analysis(result)
    if result is None:
        ctx.exit(1)


def register_commands(cli):
    """Register dashboard commands with main CLI."""
    cli.add_command(dashboard)
    cli.add_command(trend)
    cli.add_command(analyze)
