"""Rich renderables for the console view model."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from rich.console import Group, RenderableType
from rich.text import Text

from replication_console.cli.output.table import Table
from replication_console.services.console.gtid import format_gtid

if TYPE_CHECKING:
    from replication_console.integrations.repman.models import (
        AlertsPayload,
        ProxyInfo,
        ServerInfo,
    )
    from replication_console.services.console.state import ConsoleState

DEFAULT_LOG_LINES = 20


def describe_entry(item: Any) -> str:
    """One-line description of an alert or log entry of unknown shape."""
    if isinstance(item, dict):
        text = item.get("desc") or item.get("message") or item.get("text")
        number = item.get("number") or item.get("level")
        if text and number:
            return f"{number} {text}"
        if text:
            return str(text)
    return str(item)


def render_connectivity(state: ConsoleState) -> Text:
    """Headline with the selected cluster and connectivity indicator."""
    cluster = state.selected_cluster or "(no cluster selected)"
    text = Text(f"Cluster: {cluster}  ")
    if state.unreachable:
        text.append("UNREACHABLE", style="bold red")
    elif state.result_error:
        text.append("ERRORS", style="bold yellow")
    elif state.last_cycle_successes is None:
        text.append("waiting for first poll", style="dim")
    else:
        text.append("OK", style="bold green")
    return text


def render_servers(
    servers: Sequence[ServerInfo] | None,
    *,
    title: str = "Servers",
    selected_index: int | None = None,
) -> Table:
    """Server table including both GTID positions."""
    table = Table(title=title)
    table.add_column("Id", no_wrap=True)
    table.add_column("Address")
    table.add_column("State")
    table.add_column("Maint", justify="center")
    table.add_column("Current GTID")
    table.add_column("Slave GTID")
    for index, server in enumerate(servers or []):
        table.add_row(
            server.id,
            server.address,
            server.state or "",
            "yes" if server.is_maintenance else "",
            format_gtid(server.current_gtid),
            format_gtid(server.slave_gtid),
            style="reverse" if index == selected_index else None,
        )
    return table


def render_alerts(alerts: AlertsPayload | None) -> Table:
    table = Table(title="Alerts")
    table.add_column("Level", no_wrap=True)
    table.add_column("Message")
    if alerts is not None:
        for error in alerts.errors or []:
            table.add_row(Text("error", style="red"), Text(describe_entry(error)))
        for warning in alerts.warnings or []:
            table.add_row(Text("warning", style="yellow"), Text(describe_entry(warning)))
    return table


def render_proxies(proxies: Sequence[ProxyInfo] | None) -> Table:
    table = Table(title="Proxies")
    table.add_column("Id", no_wrap=True)
    table.add_column("Type")
    table.add_column("Address")
    table.add_column("State")
    for proxy in proxies or []:
        address = f"{proxy.host or ''}:{proxy.port}" if proxy.port else proxy.host or ""
        table.add_row(proxy.id or "", proxy.type or "", address, proxy.state or "")
    return table


def render_logs(logs: Sequence[Any], *, limit: int = DEFAULT_LOG_LINES) -> Table:
    """Most recent ``limit`` backend log lines."""
    table = Table(title="Logs", show_header=False)
    table.add_column("Line")
    for line in list(logs)[-limit:]:
        table.add_row(Text(describe_entry(line)))
    return table


def render_statuses(state: ConsoleState) -> Table:
    """Outcome of the last fetch of every resource kind."""
    table = Table(title="Resources")
    table.add_column("Resource", no_wrap=True)
    table.add_column("Result")
    table.add_column("Updated", no_wrap=True)
    table.add_column("Error")
    for kind, status in sorted(state.statuses.items()):
        table.add_row(
            kind.value,
            Text("ok", style="green") if status.ok else Text("failed", style="red"),
            status.updated_at.strftime("%H:%M:%S"),
            Text(status.error or ""),
        )
    return table


def render_state(state: ConsoleState, *, log_lines: int = DEFAULT_LOG_LINES) -> RenderableType:
    """Full console snapshot: connectivity, topology, alerts, proxies, logs."""
    view = state.view
    parts: list[RenderableType] = [render_connectivity(state)]
    if state.selected_cluster:
        master = view.master.id if view.master is not None else "-"
        parts.append(Text(f"Master: {master}"))
        parts.append(render_servers(view.servers, selected_index=state.selected_user_index))
        parts.append(render_servers(view.slaves, title="Slaves"))
        parts.append(render_alerts(view.alerts))
        parts.append(render_proxies(view.proxies))
    elif view.settings is not None and view.settings.clusters:
        parts.append(Text("Clusters: " + ", ".join(view.settings.clusters)))
    if log_lines > 0:
        parts.append(render_logs(view.logs, limit=log_lines))
    return Group(*parts)
