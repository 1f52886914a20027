"""Main CLI entry point using Typer."""

from __future__ import annotations

import typer
from rich.console import Console

from replication_console import __version__
from replication_console.cli.commands import actions, dashboard, init, session, status, watch
from replication_console.logging.config import configure_logging

app = typer.Typer(
    name="repcon",
    help="Replication Console - monitor and operate replication-manager clusters.",
    add_completion=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"repcon version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Emit console logs as JSON.",
    ),
) -> None:
    """Replication Console - watch clusters and run confirmed operator actions."""
    configure_logging(verbose=verbose, debug=debug, json_output=json_logs)


# Register subcommands
app.add_typer(init.app, name="init")
app.add_typer(actions.app, name="action")
app.command()(status.status)
app.command()(watch.watch)
app.command()(session.login)
app.command()(session.logout)
app.command()(dashboard.dashboard)


if __name__ == "__main__":
    app()
