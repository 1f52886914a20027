"""Operator action commands.

Every command goes through the CommandDispatcher, so the terminal prompt
shows the same confirmation text as the dashboard. ``--force`` answers yes.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path

import structlog
import typer

from replication_console.cli.commands.base import (
    ClusterOption,
    ConfigOption,
    ForceOption,
    console,
    handle_api_error,
    make_confirmer,
    open_controller,
)
from replication_console.integrations.repman.exceptions import ReplicationManagerError
from replication_console.services.console.controller import ConsoleController
from replication_console.services.console.dispatcher import CommandDispatcher, CommandOutcome

logger = structlog.get_logger()

app = typer.Typer(
    name="action",
    help="Run administrative actions against a cluster.",
    no_args_is_help=True,
)

ActionCall = Callable[[CommandDispatcher], Awaitable[asyncio.Task[CommandOutcome] | None]]

_NOT_LOGGED_IN = object()


async def execute_action(
    controller: ConsoleController,
    call: ActionCall,
) -> CommandOutcome | object | None:
    """Authenticate, dispatch one command and wait for its outcome.

    Returns:
        The outcome, None if the operator declined, or a sentinel when no
        session is available.
    """
    try:
        if not await controller.authenticate():
            return _NOT_LOGGED_IN
        task = await call(controller.dispatcher)
        if task is None:
            return None
        return await task
    finally:
        await controller.stop()


def _run(
    call: ActionCall,
    *,
    cluster: str | None,
    config_path: Path | None,
    force: bool,
    cluster_scoped: bool = True,
) -> None:
    controller = open_controller(config_path, cluster=cluster, confirm=make_confirmer(force))
    if cluster_scoped and not controller.state.selected_cluster:
        console.print("[red]Error:[/red] No cluster selected")
        console.print("\n[dim]Hint: Pass --cluster or set default_cluster in the config.[/dim]")
        raise typer.Exit(1)

    try:
        outcome = asyncio.run(execute_action(controller, call))
    except ReplicationManagerError as e:
        handle_api_error(e)
        return

    if outcome is _NOT_LOGGED_IN:
        console.print("[yellow]Not logged in.[/yellow] Run [bold]repcon login[/bold] first.")
        raise typer.Exit(1)
    if outcome is None:
        raise typer.Abort()
    assert isinstance(outcome, CommandOutcome)
    if not outcome.ok:
        console.print(f"[red]Error:[/red] {outcome.error}")
        raise typer.Exit(1)
    console.print(f"[green]Sent[/green] {outcome.path} (HTTP {outcome.status_code})")


# =============================================================================
# Cluster-wide actions
# =============================================================================


@app.command("failover")
def failover(
    cluster: ClusterOption = None,
    config_path: ConfigOption = None,
    force: ForceOption = False,
) -> None:
    """Fail over to a new master.

    Examples:
        repcon action failover --cluster prod1
    """
    _run(lambda d: d.failover(), cluster=cluster, config_path=config_path, force=force)


@app.command("switchover")
def switchover(
    cluster: ClusterOption = None,
    config_path: ConfigOption = None,
    force: ForceOption = False,
) -> None:
    """Switch the master role to another server."""
    _run(lambda d: d.switchover(), cluster=cluster, config_path=config_path, force=force)


@app.command("reset-failover-counter")
def reset_failover_counter(
    cluster: ClusterOption = None,
    config_path: ConfigOption = None,
    force: ForceOption = False,
) -> None:
    """Reset the failover counter of the cluster."""
    _run(
        lambda d: d.reset_failover_counter(),
        cluster=cluster,
        config_path=config_path,
        force=force,
    )


@app.command("rolling-restart")
def rolling_restart(
    cluster: ClusterOption = None,
    config_path: ConfigOption = None,
    force: ForceOption = False,
) -> None:
    """Restart every server one after the other."""
    _run(lambda d: d.rolling_restart(), cluster=cluster, config_path=config_path, force=force)


@app.command("optimize-all")
def optimize_all(
    cluster: ClusterOption = None,
    config_path: ConfigOption = None,
    force: ForceOption = False,
) -> None:
    """Optimize tables on every server."""
    _run(lambda d: d.optimize_all(), cluster=cluster, config_path=config_path, force=force)


@app.command("sysbench")
def sysbench(
    cluster: ClusterOption = None,
    config_path: ConfigOption = None,
    force: ForceOption = False,
) -> None:
    """Start a sysbench load run."""
    _run(lambda d: d.sysbench(), cluster=cluster, config_path=config_path, force=force)


@app.command("toggle-traffic")
def toggle_traffic(
    cluster: ClusterOption = None,
    config_path: ConfigOption = None,
    force: ForceOption = False,
) -> None:
    """Toggle the database heartbeat traffic."""
    _run(lambda d: d.toggle_traffic(), cluster=cluster, config_path=config_path, force=force)


@app.command("bootstrap")
def bootstrap(
    cluster: ClusterOption = None,
    config_path: ConfigOption = None,
    force: ForceOption = False,
) -> None:
    """Bootstrap replication (destroys the existing replication setup)."""
    _run(lambda d: d.bootstrap(), cluster=cluster, config_path=config_path, force=force)


@app.command("provision")
def provision(
    cluster: ClusterOption = None,
    config_path: ConfigOption = None,
    force: ForceOption = False,
) -> None:
    """Provision the cluster services."""
    _run(lambda d: d.provision(), cluster=cluster, config_path=config_path, force=force)


@app.command("unprovision")
def unprovision(
    cluster: ClusterOption = None,
    config_path: ConfigOption = None,
    force: ForceOption = False,
) -> None:
    """Unprovision the cluster services (destroys data)."""
    _run(lambda d: d.unprovision(), cluster=cluster, config_path=config_path, force=force)


# =============================================================================
# Server actions
# =============================================================================


@app.command("maintenance")
def maintenance(
    server_id: str = typer.Argument(help="Server id"),
    cluster: ClusterOption = None,
    config_path: ConfigOption = None,
    force: ForceOption = False,
) -> None:
    """Toggle maintenance mode on a server.

    Examples:
        repcon action maintenance 2714025366 --cluster prod1
    """
    _run(
        lambda d: d.maintenance(server_id),
        cluster=cluster,
        config_path=config_path,
        force=force,
    )


@app.command("start")
def start(
    server_id: str = typer.Argument(help="Server id"),
    cluster: ClusterOption = None,
    config_path: ConfigOption = None,
    force: ForceOption = False,
) -> None:
    """Start a database server."""
    _run(
        lambda d: d.start_server(server_id),
        cluster=cluster,
        config_path=config_path,
        force=force,
    )


@app.command("stop")
def stop(
    server_id: str = typer.Argument(help="Server id"),
    cluster: ClusterOption = None,
    config_path: ConfigOption = None,
    force: ForceOption = False,
) -> None:
    """Stop a database server."""
    _run(
        lambda d: d.stop_server(server_id),
        cluster=cluster,
        config_path=config_path,
        force=force,
    )


@app.command("optimize")
def optimize(
    server_id: str = typer.Argument(help="Server id"),
    cluster: ClusterOption = None,
    config_path: ConfigOption = None,
    force: ForceOption = False,
) -> None:
    """Optimize tables on one server."""
    _run(
        lambda d: d.optimize(server_id),
        cluster=cluster,
        config_path=config_path,
        force=force,
    )


@app.command("backup")
def backup(
    server_id: str = typer.Argument(help="Server id the backup was requested from"),
    cluster: ClusterOption = None,
    config_path: ConfigOption = None,
    force: ForceOption = False,
) -> None:
    """Take a physical backup of the master."""
    _run(
        lambda d: d.physical_backup(server_id),
        cluster=cluster,
        config_path=config_path,
        force=force,
    )


# =============================================================================
# Tests and settings
# =============================================================================


@app.command("run-tests")
def run_tests(
    config_path: ConfigOption = None,
    force: ForceOption = False,
) -> None:
    """Run the whole regression test suite (may break replication)."""
    _run(
        lambda d: d.run_all_tests(),
        cluster=None,
        config_path=config_path,
        force=force,
        cluster_scoped=False,
    )


@app.command("run-test")
def run_test(
    name: str = typer.Argument(help="Test name"),
    cluster: ClusterOption = None,
    config_path: ConfigOption = None,
    force: ForceOption = False,
) -> None:
    """Run one named regression test."""
    _run(
        lambda d: d.run_named_test(name),
        cluster=cluster,
        config_path=config_path,
        force=force,
    )


@app.command("set-active")
def set_active(
    config_path: ConfigOption = None,
    force: ForceOption = False,
) -> None:
    """Mark this replication-manager as the active one."""
    _run(
        lambda d: d.set_active(),
        cluster=None,
        config_path=config_path,
        force=force,
        cluster_scoped=False,
    )


@app.command("switch-setting")
def switch_setting(
    setting: str = typer.Argument(help="Boolean setting to toggle"),
    cluster: ClusterOption = None,
    config_path: ConfigOption = None,
    force: ForceOption = False,
) -> None:
    """Toggle a boolean cluster setting."""
    _run(
        lambda d: d.switch_setting(setting),
        cluster=cluster,
        config_path=config_path,
        force=force,
    )


@app.command("set-setting")
def set_setting(
    setting: str = typer.Argument(help="Setting name"),
    value: str = typer.Argument(help="New value"),
    cluster: ClusterOption = None,
    config_path: ConfigOption = None,
    force: ForceOption = False,
) -> None:
    """Set a cluster setting to a value.

    Examples:
        repcon action set-setting failover-max-slave-delay 30 -c prod1
    """
    _run(
        lambda d: d.set_setting(setting, value),
        cluster=cluster,
        config_path=config_path,
        force=force,
    )
