"""Per-command workspace sessions."""

import asyncio
import inspect
import logging
from typing import Any, Callable

import click

from paydesk.config import Settings
from paydesk.database.factories import create_remote_store, create_snapshot_store
from paydesk.database.snapshot import SnapshotError
from paydesk.domain.analysis import FinancialAnalyst
from paydesk.workspace.controller import WorkspaceController

logger = logging.getLogger(__name__)


def run_with_workspace(ctx: click.Context, action: Callable[[WorkspaceController], Any]) -> Any:
    """Start a workspace, run ``action`` against it and close it.

    ``action`` may be a plain function or a coroutine function. Mirror writes
    it triggers are drained before the command returns.
    """
    settings: Settings = ctx.obj["settings"]

    async def session() -> Any:
        controller = await WorkspaceController.start(
            create_remote_store(settings.database_url),
            create_snapshot_store(settings.data_dir),
        )
        try:
            result = action(controller)
            if inspect.isawaitable(result):
                result = await result
            return result
        finally:
            await controller.close()
            if controller.strategy.failures:
                click.echo(
                    f"Warning: {controller.strategy.failures} change(s) could not be saved "
                    f"({controller.mode.value} mode); see the log for details.",
                    err=True,
                )

    try:
        return asyncio.run(session())
    except SnapshotError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


def get_analyst(ctx: click.Context) -> FinancialAnalyst:
    """Analyst for this invocation, created from settings on first use."""
    if "analyst" not in ctx.obj:
        settings: Settings = ctx.obj["settings"]
        ctx.obj["analyst"] = FinancialAnalyst(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            organization=settings.organization,
        )
    return ctx.obj["analyst"]
