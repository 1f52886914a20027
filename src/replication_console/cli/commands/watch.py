"""Watch command: live-updating cluster view in the terminal."""

from __future__ import annotations

import asyncio

import structlog
import typer
from rich.live import Live

from replication_console.cli.commands.base import (
    ClusterOption,
    ConfigOption,
    console,
    handle_api_error,
    open_controller,
)
from replication_console.cli.output.render import DEFAULT_LOG_LINES, render_state
from replication_console.integrations.repman.exceptions import ReplicationManagerError
from replication_console.services.console.controller import ConsoleController
from replication_console.services.console.state import ConsoleState

logger = structlog.get_logger()


async def watch_cluster(
    controller: ConsoleController,
    *,
    cycles: int | None = None,
    log_lines: int = DEFAULT_LOG_LINES,
) -> bool:
    """Poll and redraw until interrupted, or for ``cycles`` cycles.

    Returns:
        False if the session is not authenticated (nothing was polled).
    """
    try:
        if not await controller.authenticate():
            return False

        with Live(
            render_state(controller.state, log_lines=log_lines),
            console=console,
            refresh_per_second=4,
        ) as live:

            def redraw(state: ConsoleState) -> None:
                live.update(render_state(state, log_lines=log_lines))

            controller.state.add_listener(redraw)
            try:
                if cycles is None:
                    await controller.start()
                    while True:
                        await asyncio.sleep(controller.scheduler.interval)
                else:
                    for remaining in range(cycles, 0, -1):
                        await controller.refresh()
                        if remaining > 1:
                            await asyncio.sleep(controller.scheduler.interval)
            finally:
                controller.state.remove_listener(redraw)
        return True
    finally:
        await controller.stop()


def watch(
    cluster: ClusterOption = None,
    config_path: ConfigOption = None,
    cycles: int | None = typer.Option(
        None,
        "--cycles",
        min=1,
        help="Stop after this many polling cycles (default: run until Ctrl-C).",
    ),
    logs: int = typer.Option(
        DEFAULT_LOG_LINES,
        "--logs",
        "-n",
        help="Number of backend log lines to show (0 hides them).",
    ),
) -> None:
    """Continuously poll the selected cluster and redraw the view.

    Examples:
        repcon watch --cluster prod1
        repcon watch -c prod1 --cycles 5 --logs 0
    """
    controller = open_controller(config_path, cluster=cluster)
    logger.info(
        "Watching cluster",
        cluster=controller.state.selected_cluster,
        interval=controller.scheduler.interval,
    )
    try:
        authenticated = asyncio.run(watch_cluster(controller, cycles=cycles, log_lines=logs))
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped.[/dim]")
        return
    except ReplicationManagerError as e:
        handle_api_error(e)
        return

    if not authenticated:
        console.print("[yellow]Not logged in.[/yellow] Run [bold]repcon login[/bold] first.")
        raise typer.Exit(code=1)
