"""Init command writing a default configuration file."""

from __future__ import annotations

import structlog
import typer
from rich.console import Console
from rich.panel import Panel

from replication_console.core.config.models import (
    CONFIG_DIR,
    CONFIG_FILE,
    ConsoleConfig,
)
from replication_console.integrations.repman.config import ConnectionConfig

app = typer.Typer(help="Initialize the console configuration.")
console = Console()
logger = structlog.get_logger()


@app.callback(invoke_without_command=True)
def init(
    ctx: typer.Context,
    base_url: str = typer.Option(
        ConnectionConfig.model_fields["base_url"].default,
        "--base-url",
        "-u",
        help="replication-manager API URL.",
    ),
    cluster: str | None = typer.Option(
        None,
        "--cluster",
        "-c",
        help="Cluster selected when the console starts.",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing configuration.",
    ),
) -> None:
    """Write a default configuration to ~/.config/repcon/."""
    if ctx.invoked_subcommand is not None:
        return

    logger.info("Initializing config", path=str(CONFIG_FILE), base_url=base_url)

    CONFIG_DIR.mkdir(parents=True, exist_ok=True)

    if CONFIG_FILE.exists() and not force:
        console.print(f"[yellow]Configuration already exists at {CONFIG_FILE}[/yellow]")
        console.print("Use --force to overwrite.")
        raise typer.Exit(code=1)

    try:
        config = ConsoleConfig(
            connection=ConnectionConfig(base_url=base_url),
            default_cluster=cluster,
        )
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from e
    CONFIG_FILE.write_text(config.to_yaml())

    console.print(
        Panel(
            f"[green]Configuration initialized successfully![/green]\n\n"
            f"Configuration created at: {CONFIG_FILE}\n\n"
            f"Next steps:\n"
            f"  1. Run [bold]repcon login[/bold] to authenticate\n"
            f"  2. Run [bold]repcon status --cluster <name>[/bold] to poll a cluster",
            title="repcon init",
            border_style="green",
        )
    )

    logger.info("Configuration initialized", config_file=str(CONFIG_FILE))
