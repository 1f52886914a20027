"""Centralized CLI output utilities.

Usage:
    from replication_console.cli.output import Table, render_state

    console.print(render_state(controller.state))
"""

from replication_console.cli.output.render import (
    render_alerts,
    render_connectivity,
    render_logs,
    render_proxies,
    render_servers,
    render_state,
    render_statuses,
)
from replication_console.cli.output.table import Table

__all__ = [
    "Table",
    "render_alerts",
    "render_connectivity",
    "render_logs",
    "render_proxies",
    "render_servers",
    "render_state",
    "render_statuses",
]
