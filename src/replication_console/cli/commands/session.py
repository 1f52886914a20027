"""Login and logout commands."""

from __future__ import annotations

import asyncio

import structlog
import typer

from replication_console.cli.commands.base import (
    ConfigOption,
    console,
    handle_api_error,
    handle_config_error,
    load_cli_config,
    make_client,
)
from replication_console.core.config.models import ConsoleConfig
from replication_console.integrations.repman.auth import AuthSession
from replication_console.integrations.repman.exceptions import (
    ConsoleConfigError,
    ReplicationManagerError,
)

logger = structlog.get_logger()


async def _login(config: ConsoleConfig, session: AuthSession, username: str, password: str) -> None:
    async with make_client(config, session) as client:
        await client.login(username, password)


def login(
    username: str | None = typer.Option(
        None,
        "--username",
        "-u",
        help="User name (defaults to auth.username or a prompt).",
    ),
    password: str | None = typer.Option(
        None,
        "--password",
        "-p",
        help="Password (defaults to auth.password or a hidden prompt).",
    ),
    config_path: ConfigOption = None,
) -> None:
    """Log in and keep the issued token for later commands.

    Examples:
        repcon login -u admin
    """
    config = load_cli_config(config_path)
    user = username or config.auth.username or typer.prompt("Username")
    if password is None and config.auth.password is not None:
        password = config.auth.password.get_secret_value()
    if password is None:
        password = typer.prompt("Password", hide_input=True)

    session = AuthSession()
    try:
        asyncio.run(_login(config, session, user, password))
    except ReplicationManagerError as e:
        handle_api_error(e)
        return

    session.save()
    logger.info("Logged in", username=user)
    console.print(f"[green]Logged in[/green] as {user}")


def logout() -> None:
    """Forget the stored token. Polling stops until the next login."""
    try:
        session = AuthSession.load()
    except ConsoleConfigError as e:
        handle_config_error(e)
        return
    was_authenticated = session.has_auth_headers()
    session.logout()
    if was_authenticated:
        console.print("[green]Logged out[/green]")
    else:
        console.print("[dim]No active session[/dim]")
