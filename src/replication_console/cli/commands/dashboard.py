"""Dashboard command launching the terminal UI."""

from __future__ import annotations

import structlog

from replication_console.cli.commands.base import (
    ClusterOption,
    ConfigOption,
    load_cli_config,
)
from replication_console.logging.config import configure_logging

logger = structlog.get_logger()


def dashboard(
    cluster: ClusterOption = None,
    config_path: ConfigOption = None,
) -> None:
    """Open the interactive cluster dashboard.

    Examples:
        repcon dashboard --cluster prod1
    """
    from replication_console.tui.apps.dashboard import DashboardApp

    config = load_cli_config(config_path)
    if cluster:
        config = config.model_copy(update={"default_cluster": cluster})

    # Console output would corrupt the screen
    configure_logging(verbose=True, console_output=False)
    logger.info("Launching dashboard", cluster=config.default_cluster)

    DashboardApp(config).run()
