"""Main dashboard screen.

Renders the console state in DataTables and routes every operator key
binding through the CommandDispatcher. Commands run in Textual workers so
the confirmation modal can be awaited without blocking polling.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog
from rich.markup import escape
from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import DataTable, Label

from replication_console.cli.output.render import describe_entry
from replication_console.services.console.gtid import format_gtid
from replication_console.tui.apps.dashboard.widgets import (
    ConnectivityIndicator,
    SelectorPopup,
)
from replication_console.tui.base import BaseScreen
from replication_console.tui.components.modal import PromptModal
from replication_console.tui.theme import Styles

if TYPE_CHECKING:
    from replication_console.integrations.repman.models import ServerInfo
    from replication_console.services.console.controller import ConsoleController
    from replication_console.services.console.dispatcher import CommandDispatcher
    from replication_console.services.console.state import ConsoleState

logger = structlog.get_logger()

RENDER_INTERVAL = 0.25
MAX_LOG_ROWS = 50

SERVER_COLUMNS: list[tuple[str, int | None]] = [
    ("Id", 14),
    ("Address", 22),
    ("State", 12),
    ("Maint", 6),
    ("Current GTID", None),
    ("Slave GTID", None),
]
PROXY_COLUMNS: list[tuple[str, int | None]] = [
    ("Id", 14),
    ("Type", 10),
    ("Address", 22),
    ("State", 12),
]
ALERT_COLUMNS: list[tuple[str, int | None]] = [
    ("Level", 8),
    ("Message", None),
]


@dataclass(frozen=True)
class DashboardAction:
    """An operator action offered in the action picker."""

    label: str
    call: Callable[[CommandDispatcher, str | None], Awaitable[Any]]
    needs_server: bool = False
    needs_cluster: bool = True


ACTIONS: dict[str, DashboardAction] = {
    "failover": DashboardAction("Failover", lambda d, _: d.failover()),
    "switchover": DashboardAction("Switchover", lambda d, _: d.switchover()),
    "maintenance": DashboardAction(
        "Toggle maintenance (server)", lambda d, s: d.maintenance(s), needs_server=True
    ),
    "start": DashboardAction("Start server", lambda d, s: d.start_server(s), needs_server=True),
    "stop": DashboardAction("Stop server", lambda d, s: d.stop_server(s), needs_server=True),
    "optimize": DashboardAction(
        "Optimize server", lambda d, s: d.optimize(s), needs_server=True
    ),
    "backup": DashboardAction(
        "Master physical backup", lambda d, s: d.physical_backup(s), needs_server=True
    ),
    "optimize-all": DashboardAction("Optimize all servers", lambda d, _: d.optimize_all()),
    "rolling-restart": DashboardAction("Rolling restart", lambda d, _: d.rolling_restart()),
    "toggle-traffic": DashboardAction("Toggle traffic", lambda d, _: d.toggle_traffic()),
    "reset-failover-counter": DashboardAction(
        "Reset failover counter", lambda d, _: d.reset_failover_counter()
    ),
    "sysbench": DashboardAction("Sysbench", lambda d, _: d.sysbench()),
    "bootstrap": DashboardAction("Bootstrap replication", lambda d, _: d.bootstrap()),
    "provision": DashboardAction("Provision cluster", lambda d, _: d.provision()),
    "unprovision": DashboardAction("Unprovision cluster", lambda d, _: d.unprovision()),
    "run-tests": DashboardAction(
        "Run all regression tests", lambda d, _: d.run_all_tests(), needs_cluster=False
    ),
    "set-active": DashboardAction(
        "Set active", lambda d, _: d.set_active(), needs_cluster=False
    ),
}

# Actions asking for a setting name (and value) before dispatch
SETTING_ACTIONS: dict[str, str] = {
    "switch-setting": "Toggle a setting",
    "set-setting": "Set a setting value",
}


class DashboardScreen(BaseScreen[None]):
    """Live view of the selected cluster with operator key bindings."""

    DEFAULT_CSS = """
    DashboardScreen #tables {
        height: 1fr;
    }

    DashboardScreen .panel-title {
        text-style: bold;
        padding: 0 1;
    }

    DashboardScreen #servers-table {
        height: 2fr;
    }

    DashboardScreen #lower {
        height: 1fr;
    }

    DashboardScreen #logs-table {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("c", "cycle_cluster", "Next cluster"),
        Binding("C", "pick_cluster", "Pick cluster"),
        Binding("a", "pick_action", "Actions"),
        Binding("f", "failover", "Failover"),
        Binding("s", "switchover", "Switchover"),
        Binding("m", "maintenance", "Maintenance"),
        Binding("space", "toggle_select", "Select", show=False),
        Binding("t", "run_test", "Run test"),
        Binding("o", "switch_setting", "Toggle setting"),
        Binding("v", "set_setting", "Set setting"),
        Binding("r", "refresh", "Refresh"),
    ]

    def __init__(self, controller: ConsoleController) -> None:
        super().__init__(controller)
        self._dirty = True

    # =========================================================================
    # Layout
    # =========================================================================

    def compose(self) -> ComposeResult:
        yield ConnectivityIndicator(id="connectivity")
        yield Label("", id="master-line")
        with Vertical(id="tables"):
            yield Label("Servers", classes="panel-title")
            yield DataTable(id="servers-table")
            with Horizontal(id="lower"):
                with Vertical():
                    yield Label("Proxies", classes="panel-title")
                    yield DataTable(id="proxies-table")
                with Vertical():
                    yield Label("Alerts", classes="panel-title")
                    yield DataTable(id="alerts-table")
            yield Label("Logs", classes="panel-title")
            yield DataTable(id="logs-table", show_header=False)

    def on_mount(self) -> None:
        self._setup_tables()
        self.state.add_listener(self._mark_dirty)
        self.set_interval(RENDER_INTERVAL, self._flush)
        self._flush()

    def on_unmount(self) -> None:
        self.state.remove_listener(self._mark_dirty)

    def _setup_tables(self) -> None:
        for table_id, columns in (
            ("#servers-table", SERVER_COLUMNS),
            ("#proxies-table", PROXY_COLUMNS),
            ("#alerts-table", ALERT_COLUMNS),
        ):
            table = self.query_one(table_id, DataTable)
            table.cursor_type = "row"
            table.zebra_stripes = True
            for label, width in columns:
                table.add_column(label, width=width)
        self.query_one("#logs-table", DataTable).add_column("Line")

    # =========================================================================
    # Rendering
    # =========================================================================

    def _mark_dirty(self, _state: ConsoleState) -> None:
        self._dirty = True

    def _flush(self) -> None:
        if not self._dirty:
            return
        self._dirty = False
        state = self.state
        view = state.view

        self.query_one(ConnectivityIndicator).update_from(state)
        master = view.master.id if view.master is not None else "-"
        self.query_one("#master-line", Label).update(f"[bold]Master:[/bold] {escape(master)}")

        self._fill_servers(view.servers or [], state.selected_user_index)

        proxies = self.query_one("#proxies-table", DataTable)
        proxies.clear()
        for proxy in view.proxies or []:
            address = f"{proxy.host or ''}:{proxy.port}" if proxy.port else proxy.host or ""
            proxies.add_row(
                Text(proxy.id or ""),
                Text(proxy.type or ""),
                Text(address),
                Styles.server_state(proxy.state),
            )

        alerts = self.query_one("#alerts-table", DataTable)
        alerts.clear()
        if view.alerts is not None:
            for error in view.alerts.errors or []:
                alerts.add_row(Styles.error("error"), Text(describe_entry(error)))
            for warning in view.alerts.warnings or []:
                alerts.add_row(Styles.warning("warning"), Text(describe_entry(warning)))

        logs = self.query_one("#logs-table", DataTable)
        logs.clear()
        for line in view.logs[-MAX_LOG_ROWS:]:
            logs.add_row(Text(describe_entry(line)))

    def _fill_servers(self, servers: list[ServerInfo], selected: int | None) -> None:
        table = self.query_one("#servers-table", DataTable)
        cursor = table.cursor_row
        table.clear()
        for index, server in enumerate(servers):
            table.add_row(
                Text(server.id, style="reverse" if index == selected else ""),
                Text(server.address),
                Styles.server_state(server.state),
                "yes" if server.is_maintenance else "",
                format_gtid(server.current_gtid),
                format_gtid(server.slave_gtid),
            )
        if servers:
            table.move_cursor(row=min(cursor, len(servers) - 1))

    # =========================================================================
    # Selection
    # =========================================================================

    def _selected_server(self) -> str | None:
        servers = self.state.view.servers or []
        index = self.state.selected_user_index
        if index is None:
            index = self.query_one("#servers-table", DataTable).cursor_row
        if 0 <= index < len(servers):
            return servers[index].id
        return None

    def _cluster_options(self) -> list[str]:
        settings = self.state.view.settings
        return list(settings.clusters) if settings is not None else []

    def _select_cluster(self, name: str | None) -> None:
        if name is None:
            return
        self.controller.select_cluster(name)
        self._dirty = True
        self.notify_user(f"Cluster: {name}")

    def action_cycle_cluster(self) -> None:
        clusters = self._cluster_options()
        if not clusters:
            self.notify_user("No clusters reported yet", severity="warning")
            return
        current = self.state.selected_cluster
        index = clusters.index(current) + 1 if current in clusters else 0
        self._select_cluster(clusters[index % len(clusters)])

    def action_pick_cluster(self) -> None:
        clusters = self._cluster_options()
        if not clusters:
            self.notify_user("No clusters reported yet", severity="warning")
            return
        self.app.push_screen(
            SelectorPopup(
                "Select cluster",
                [(name, name) for name in clusters],
                current=self.state.selected_cluster,
            ),
            callback=self._select_cluster,
        )

    def action_toggle_select(self) -> None:
        row = self.query_one("#servers-table", DataTable).cursor_row
        self.controller.select_user_index(row)

    def action_refresh(self) -> None:
        self.run_worker(self.controller.refresh(), group="refresh", exclusive=True)

    # =========================================================================
    # Commands
    # =========================================================================

    def run_action(self, action_id: str) -> None:
        """Run one entry of ACTIONS after the usual checks."""
        action = ACTIONS[action_id]
        if action.needs_cluster and not self.require_cluster():
            return
        server_id: str | None = None
        if action.needs_server:
            server_id = self._selected_server()
            if server_id is None:
                self.notify_user("Select a server first", severity="warning")
                return
        self.run_command(lambda d: action.call(d, server_id))

    def action_pick_action(self) -> None:
        self.app.push_screen(
            SelectorPopup(
                "Run action",
                [(action_id, action.label) for action_id, action in ACTIONS.items()]
                + list(SETTING_ACTIONS.items()),
            ),
            callback=self._handle_action_picked,
        )

    def _handle_action_picked(self, action_id: str | None) -> None:
        if action_id == "switch-setting":
            self.action_switch_setting()
        elif action_id == "set-setting":
            self.action_set_setting()
        elif action_id is not None:
            self.run_action(action_id)

    def action_failover(self) -> None:
        self.run_action("failover")

    def action_switchover(self) -> None:
        self.run_action("switchover")

    def action_maintenance(self) -> None:
        self.run_action("maintenance")

    def action_run_test(self) -> None:
        if not self.require_cluster():
            return
        self.app.push_screen(
            PromptModal(
                "Run regression test",
                placeholder="test name",
                value=self.state.pending_test_name,
            ),
            callback=self._handle_test_name,
        )

    def _handle_test_name(self, name: str | None) -> None:
        if name is None:
            return
        self.state.pending_test_name = name
        self.run_command(lambda d: d.run_named_test())


    # =========================================================================
    # Settings
    # =========================================================================

    def action_switch_setting(self) -> None:
        if not self.require_cluster():
            return
        self.app.push_screen(
            PromptModal("Toggle setting", placeholder="setting name"),
            callback=self._handle_switch_setting,
        )

    def _handle_switch_setting(self, setting: str | None) -> None:
        if setting is None:
            return
        self.run_command(lambda d: d.switch_setting(setting))

    def action_set_setting(self) -> None:
        if not self.require_cluster():
            return
        self.app.push_screen(
            PromptModal("Set setting", placeholder="setting name"),
            callback=self._handle_setting_name,
        )

    def _handle_setting_name(self, setting: str | None) -> None:
        if setting is None:
            return
        self.app.push_screen(
            PromptModal(f"Value for {escape(setting)}", placeholder="value"),
            callback=lambda value: self._handle_setting_value(setting, value),
        )

    def _handle_setting_value(self, setting: str, value: str | None) -> None:
        if value is None:
            return
        self.run_command(lambda d: d.set_setting(setting, value))
