"""Main Textual application for the cluster dashboard.

The polling scheduler runs on Textual's own asyncio loop, so fetch results,
state listeners and widget updates all happen on one thread.
"""

from __future__ import annotations

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from replication_console.core.config.models import ConsoleConfig
from replication_console.integrations.repman.exceptions import ReplicationManagerError
from replication_console.services.console.controller import ConsoleController
from replication_console.tui.apps.dashboard.screens import DashboardScreen
from replication_console.tui.components.modal import ConfirmModal


class DashboardApp(App[None]):
    """Live replication-manager dashboard.

    Every command confirmation is shown as a ConfirmModal; the dispatcher
    awaits the operator's answer inside the worker running the command.

    Args:
        config: Console configuration.
        controller: Pre-built controller (tests inject one with a fake
            transport). Its confirmer is replaced by the modal.
    """

    TITLE = "Replication Console"

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("question_mark", "help", "Help", show=True),
    ]

    def __init__(
        self,
        config: ConsoleConfig,
        *,
        controller: ConsoleController | None = None,
    ) -> None:
        super().__init__()
        self.config = config
        if controller is None:
            controller = ConsoleController(config, confirm=self.confirm)
        else:
            controller.dispatcher.confirm = self.confirm
        self.controller = controller

    def compose(self) -> ComposeResult:
        yield Header()
        yield Footer()

    def on_mount(self) -> None:
        self.push_screen(DashboardScreen(self.controller))
        self.run_worker(self._start_polling(), name="polling", exit_on_error=False)

    async def _start_polling(self) -> None:
        try:
            authenticated = await self.controller.authenticate()
        except ReplicationManagerError as e:
            self.notify(f"Login failed: {escape(str(e))}", severity="error")
            authenticated = False
        if not authenticated:
            self.notify(
                "Not logged in, run 'repcon login'. Polling is suspended.",
                severity="warning",
                timeout=10,
            )
        await self.controller.start()

    async def on_unmount(self) -> None:
        await self.controller.stop()

    async def confirm(self, prompt: str) -> bool:
        """Confirmer backed by a modal. Must be awaited from a worker."""
        result = await self.push_screen(ConfirmModal(prompt), wait_for_dismiss=True)
        return bool(result)

    def action_help(self) -> None:
        self.notify(
            "c/C: cluster | a: actions | f: failover | s: switchover | "
            "m: maintenance | space: select row | t: run test | r: refresh | q: quit"
        )
