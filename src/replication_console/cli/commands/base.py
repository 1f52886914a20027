"""Base utilities for console CLI commands.

Provides common Typer options, error handling and the controller factory
shared by every command that talks to replication-manager.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from replication_console.core.config.models import ConsoleConfig, load_config
from replication_console.integrations.repman.auth import AuthSession
from replication_console.integrations.repman.client import ReplicationManagerClient
from replication_console.integrations.repman.exceptions import (
    ConsoleConfigError,
    ReplicationManagerAuthError,
    ReplicationManagerConnectionError,
    ReplicationManagerError,
    ReplicationManagerNotFoundError,
    ReplicationManagerResponseError,
)
from replication_console.services.console.controller import ConsoleController
from replication_console.services.console.dispatcher import Confirmer

# Shared console instance
console = Console()


# =============================================================================
# Common Typer Option Annotations
# =============================================================================

ClusterOption = Annotated[
    str | None,
    typer.Option(
        "--cluster",
        "-c",
        help="Cluster to act on (defaults to config or REPCON_CLUSTER)",
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        help="Path to config file (defaults to ~/.config/repcon/config.yaml)",
        exists=False,
        dir_okay=False,
    ),
]

ForceOption = Annotated[
    bool,
    typer.Option(
        "--force",
        "-f",
        help="Skip confirmation prompts",
    ),
]


# =============================================================================
# Error Handling
# =============================================================================


def handle_api_error(error: ReplicationManagerError) -> None:
    """Handle replication-manager errors with user-friendly output.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    if isinstance(error, ReplicationManagerConnectionError):
        console.print("[red]Error:[/red] Cannot reach replication-manager")
        console.print(f"  {error.message}")
        if error.original_error:
            console.print(f"  Cause: {error.original_error}")
        console.print("\n[dim]Hint: Check connection.base_url or REPCON_BASE_URL.[/dim]")

    elif isinstance(error, ReplicationManagerAuthError):
        console.print("[red]Error:[/red] Authentication failed")
        console.print(f"  {error.message}")
        console.print("\n[dim]Hint: Run [bold]repcon login[/bold] again.[/dim]")

    elif isinstance(error, ReplicationManagerNotFoundError):
        console.print("[red]Error:[/red] Resource not found")
        console.print(f"  {error.message}")

    elif isinstance(error, ReplicationManagerResponseError):
        console.print("[red]Error:[/red] Unexpected response from replication-manager")
        console.print(f"  {error.message}")

    else:
        console.print(f"[red]Error:[/red] {error.message}")
        if error.status_code:
            console.print(f"  HTTP Status: {error.status_code}")

    raise typer.Exit(1)


def handle_config_error(error: ConsoleConfigError) -> None:
    """Print a configuration problem and exit.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    console.print(f"[red]Configuration error:[/red] {error.message}")
    if error.details:
        console.print(f"  {error.details}")
    raise typer.Exit(1)


# =============================================================================
# Confirmation Utilities
# =============================================================================


def confirm_action(message: str, default: bool = False) -> bool:
    """Prompt the operator to confirm an action."""
    return typer.confirm(message, default=default)


def make_confirmer(force: bool) -> Confirmer:
    """Confirmer that prompts on the terminal, or accepts everything with --force."""
    if force:
        return lambda _prompt: True
    return confirm_action


# =============================================================================
# Controller Factory
# =============================================================================


def load_cli_config(config_path: Path | None) -> ConsoleConfig:
    """Load configuration, turning failures into a clean CLI exit."""
    try:
        return load_config(config_path)
    except ConsoleConfigError as e:
        handle_config_error(e)
        raise


def make_client(config: ConsoleConfig, session: AuthSession) -> ReplicationManagerClient:
    """Client for one-shot commands that do not need the polling engine."""
    return ReplicationManagerClient(config.connection, session)


def open_controller(
    config_path: Path | None = None,
    *,
    cluster: str | None = None,
    confirm: Confirmer | None = None,
) -> ConsoleController:
    """Build a controller from config, persisted session and CLI overrides."""
    config = load_cli_config(config_path)
    try:
        session = AuthSession.load()
    except ConsoleConfigError as e:
        handle_config_error(e)
        raise
    controller = ConsoleController(config, session=session, confirm=confirm)
    if cluster:
        controller.select_cluster(cluster)
    return controller
