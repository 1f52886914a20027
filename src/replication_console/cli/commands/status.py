"""Status command: poll once and print the cluster state."""

from __future__ import annotations

import asyncio

import structlog
import typer

from replication_console.cli.commands.base import (
    ClusterOption,
    ConfigOption,
    console,
    handle_api_error,
    open_controller,
)
from replication_console.cli.output.render import DEFAULT_LOG_LINES, render_state, render_statuses
from replication_console.integrations.repman.exceptions import ReplicationManagerError
from replication_console.services.console.aggregator import CycleReport
from replication_console.services.console.controller import ConsoleController

logger = structlog.get_logger()


async def poll_once(controller: ConsoleController) -> CycleReport | None:
    """Authenticate if needed, run a single cycle and release the controller."""
    try:
        if not await controller.authenticate():
            return None
        return await controller.refresh()
    finally:
        await controller.stop()


def status(
    cluster: ClusterOption = None,
    config_path: ConfigOption = None,
    logs: int = typer.Option(
        DEFAULT_LOG_LINES,
        "--logs",
        "-n",
        help="Number of backend log lines to show (0 hides them).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show the outcome of every resource fetch.",
    ),
) -> None:
    """Poll replication-manager once and show the selected cluster.

    Examples:
        repcon status
        repcon status --cluster prod1 --verbose
    """
    controller = open_controller(config_path, cluster=cluster)
    logger.info("Checking cluster status", cluster=controller.state.selected_cluster)

    try:
        report = asyncio.run(poll_once(controller))
    except ReplicationManagerError as e:
        handle_api_error(e)
        return

    if report is None:
        console.print("[yellow]Not logged in.[/yellow] Run [bold]repcon login[/bold] first.")
        raise typer.Exit(code=1)

    state = controller.state
    console.print(render_state(state, log_lines=logs))
    if verbose:
        console.print(render_statuses(state))

    logger.info(
        "Status check complete",
        succeeded=report.succeeded,
        failed=report.failed,
    )
    if state.unreachable:
        console.print("\n[red]replication-manager did not answer any request.[/red]")
        raise typer.Exit(code=1)
