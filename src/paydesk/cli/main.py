"""Main CLI entry point."""

import logging

import click

from paydesk.config import load_settings

# Import and register all commands at module level
from paydesk.cli.commands import (
    dashboard,
    department,
    employee,
    expense,
    payroll,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--database-url",
    help="Async SQLAlchemy URL of the remote store (overrides PAYDESK_DATABASE_URL)",
)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    help="Directory for local snapshots (overrides PAYDESK_DATA_DIR)",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging level (overrides PAYDESK_LOG_LEVEL)",
)
@click.pass_context
def cli(ctx, database_url: str | None, data_dir: str | None, log_level: str | None):
    """Paydesk - HR, payroll and budget console.

    Manage departments, employees, expenses and payroll. Changes are saved to
    the remote store when one is configured, and to a local snapshot
    otherwise.
    """
    ctx.ensure_object(dict)
    settings = load_settings(database_url=database_url, data_dir=data_dir, log_level=log_level)
    ctx.obj["settings"] = settings

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register all commands
department.register_commands(cli)
employee.register_commands(cli)
expense.register_commands(cli)
payroll.register_commands(cli)
dashboard.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
