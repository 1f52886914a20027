"""Base classes for console screens and widgets.

Screens are bound to a ConsoleController; widgets render from its
ConsoleState. Commands started from a screen run in a worker so that the
confirmation modal can be awaited without blocking polling.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

import structlog
from rich.markup import escape
from textual.screen import Screen
from textual.widget import Widget

if TYPE_CHECKING:
    import asyncio

    from textual.notifications import SeverityLevel

    from replication_console.services.console.controller import ConsoleController
    from replication_console.services.console.dispatcher import (
        CommandDispatcher,
        CommandOutcome,
    )
    from replication_console.services.console.state import ConsoleState

T = TypeVar("T")

logger = structlog.get_logger()

CommandCall = Callable[["CommandDispatcher"], Awaitable["asyncio.Task[CommandOutcome] | None"]]


class BaseWidget(Widget):
    """Widget redrawn from the console state by its screen."""

    def update_from(self, state: ConsoleState) -> None:
        raise NotImplementedError("Subclasses must implement update_from()")

    def notify_user(
        self,
        message: str,
        severity: SeverityLevel = "information",
    ) -> None:
        self.app.notify(message, severity=severity)


class BaseScreen(Screen[T]):
    """Screen operating on one ConsoleController.

    Type Parameters:
        T: The type returned when the screen is dismissed.
    """

    def __init__(
        self,
        controller: ConsoleController,
        *,
        name: str | None = None,
        id: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id)
        self.controller = controller

    @property
    def state(self) -> ConsoleState:
        return self.controller.state

    def notify_user(
        self,
        message: str,
        severity: SeverityLevel = "information",
    ) -> None:
        self.app.notify(message, severity=severity)

    def require_cluster(self) -> bool:
        """Warn and return False when no cluster is selected."""
        if self.state.selected_cluster:
            return True
        self.notify_user("Select a cluster first", severity="warning")
        return False

    def run_command(self, call: CommandCall) -> None:
        """Run a dispatcher call in a worker and report its outcome."""
        self.run_worker(self._command(call), group="commands", exit_on_error=False)

    async def _command(self, call: CommandCall) -> None:
        task = await call(self.controller.dispatcher)
        if task is None:
            return
        outcome = await task
        if outcome.ok:
            self.notify_user(f"Sent {escape(outcome.path)}")
        else:
            logger.debug("Command reported failure", path=outcome.path)
            self.notify_user(f"Command failed: {escape(outcome.error or '')}", severity="error")
