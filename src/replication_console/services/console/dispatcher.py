"""Confirmation-gated administrative commands.

Every command is a single one-way GET. The response body is ignored and the
outcome is only logged: the operator sees the effect of a command on the
next polling cycle, never through the dispatcher.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol

import structlog

from replication_console.integrations.repman.exceptions import ReplicationManagerError
from replication_console.services.console.types import cluster_base_path

if TYPE_CHECKING:
    from replication_console.services.console.state import ConsoleState

logger = structlog.get_logger()

Confirmer = Callable[[str], bool | Awaitable[bool]]

TRAFFIC_SETTING = "database-hearbeat"  # sic, the backend's setting name
SET_ACTIVE_PATH = "/api/setactive"
RUN_ALL_TESTS_PATH = "/api/tests"


class ActionScope(StrEnum):
    """Whether an action path is relative to the selected cluster."""

    CLUSTER = "cluster"
    GLOBAL = "global"


@dataclass(frozen=True)
class CommandOutcome:
    """Result of one dispatched command."""

    path: str
    ok: bool
    status_code: int | None = None
    error: str | None = None


class CommandSender(Protocol):
    """The slice of ReplicationManagerClient the dispatcher needs."""

    async def fire(self, endpoint: str) -> int: ...


def format_setting_value(value: Any) -> str:
    """Render a setting value the way the API expects it in a path segment."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class CommandDispatcher:
    """Builds action URLs, asks for confirmation and fires the request.

    Declining a prompt has no side effect at all. A confirmed command is sent
    exactly once as a background task; the task's CommandOutcome is logged
    and returned to callers that want to await it, but it never touches the
    view model or the connectivity flag.
    """

    def __init__(
        self,
        client: CommandSender,
        state: ConsoleState,
        confirm: Confirmer,
    ) -> None:
        self._client = client
        self._state = state
        self._confirm = confirm
        self._pending: set[asyncio.Task[CommandOutcome]] = set()

    @property
    def confirm(self) -> Confirmer:
        return self._confirm

    @confirm.setter
    def confirm(self, confirm: Confirmer) -> None:
        self._confirm = confirm

    async def _ask(self, prompt: str) -> bool:
        answer = self._confirm(prompt)
        if inspect.isawaitable(answer):
            answer = await answer
        return bool(answer)

    async def invoke(
        self,
        action_path: str,
        prompt: str,
        *,
        scope: ActionScope = ActionScope.CLUSTER,
        confirm: bool = True,
    ) -> asyncio.Task[CommandOutcome] | None:
        """Confirm and fire one command.

        Args:
            action_path: Path relative to the cluster base URL (or absolute
                for global actions), starting with ``/``.
            prompt: Literal question shown to the operator.
            scope: Cluster-relative or global path.
            confirm: False only for automatic, non-operator commands.

        Returns:
            The task sending the request, or None if nothing was sent
            (declined, or no cluster selected for a cluster action).
        """
        if scope is ActionScope.CLUSTER:
            cluster = self._state.selected_cluster
            if not cluster:
                logger.warning("No cluster selected, command ignored", path=action_path)
                return None
            url = cluster_base_path(cluster) + action_path
        else:
            url = action_path

        if confirm and not await self._ask(prompt):
            logger.debug("Command declined", path=url)
            return None

        return self._dispatch(url)

    def _dispatch(self, url: str) -> asyncio.Task[CommandOutcome]:
        task = asyncio.create_task(self._send(url), name=f"command:{url}")
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _send(self, url: str) -> CommandOutcome:
        log = logger.bind(path=url)
        try:
            status = await self._client.fire(url)
        except ReplicationManagerError as e:
            log.warning("command_failed", error=str(e), status=e.status_code)
            return CommandOutcome(path=url, ok=False, status_code=e.status_code, error=str(e))
        log.info("command_succeeded", status=status)
        return CommandOutcome(path=url, ok=True, status_code=status)

    async def drain(self) -> list[CommandOutcome]:
        """Wait for every command still in flight."""
        if not self._pending:
            return []
        return list(await asyncio.gather(*self._pending))

    # -- cluster topology ------------------------------------------------

    async def failover(self) -> asyncio.Task[CommandOutcome] | None:
        return await self.invoke("/actions/failover", "Confirm failover")

    async def switchover(self) -> asyncio.Task[CommandOutcome] | None:
        return await self.invoke("/actions/switchover", "Confirm switchover")

    async def switch(self, fail: bool) -> asyncio.Task[CommandOutcome] | None:
        """Failover when ``fail`` is true, switchover otherwise."""
        return await (self.failover() if fail else self.switchover())

    async def reset_failover_counter(self) -> asyncio.Task[CommandOutcome] | None:
        return await self.invoke("/actions/reset-failover-counter", "Reset Failover counter?")

    async def rolling_restart(self) -> asyncio.Task[CommandOutcome] | None:
        return await self.invoke("/actions/rolling", "Confirm rolling restart")

    async def optimize_all(self) -> asyncio.Task[CommandOutcome] | None:
        return await self.invoke("/actions/optimize", "Confirm optimize all servers")

    async def sysbench(self) -> asyncio.Task[CommandOutcome] | None:
        return await self.invoke("/actions/sysbench", "Confirm sysbench run !")

    async def toggle_traffic(self) -> asyncio.Task[CommandOutcome] | None:
        return await self.invoke(
            f"/settings/actions/switch/{TRAFFIC_SETTING}", "Confirm toggle traffic"
        )

    async def set_active(self) -> asyncio.Task[CommandOutcome] | None:
        return await self.invoke(
            SET_ACTIVE_PATH, "Confirm Active Status?", scope=ActionScope.GLOBAL
        )

    # -- per server ------------------------------------------------------

    async def maintenance(self, server_id: str) -> asyncio.Task[CommandOutcome] | None:
        return await self.invoke(
            f"/servers/{server_id}/actions/maintenance",
            f"Confirm maintenance for server-id: {server_id}",
        )

    async def start_server(self, server_id: str) -> asyncio.Task[CommandOutcome] | None:
        return await self.invoke(
            f"/servers/{server_id}/actions/start",
            f"Confirm start for server-id: {server_id}",
        )

    async def stop_server(self, server_id: str) -> asyncio.Task[CommandOutcome] | None:
        return await self.invoke(
            f"/servers/{server_id}/actions/stop",
            f"Confirm stop for server-id: {server_id}",
        )

    async def optimize(self, server_id: str) -> asyncio.Task[CommandOutcome] | None:
        return await self.invoke(
            f"/servers/{server_id}/actions/optimize",
            f"Confirm optimize for server-id: {server_id}",
        )

    async def physical_backup(self, server_id: str) -> asyncio.Task[CommandOutcome] | None:
        """Physical backup, always taken on the master whichever row was picked."""
        logger.debug("Physical backup requested", server_id=server_id)
        return await self.invoke(
            "/actions/master-physical-backup", "Confirm master physical backup"
        )

    # -- services --------------------------------------------------------

    async def bootstrap(self) -> asyncio.Task[CommandOutcome] | None:
        return await self.invoke(
            "/services/actions/bootstrap",
            "Bootstrap operation will destroy your existing replication setup. \n"
            " Are you really sure?",
        )

    async def provision(self) -> asyncio.Task[CommandOutcome] | None:
        return await self.invoke(
            "/services/actions/provision", "Provision Cluster. \n Are you really sure?"
        )

    async def unprovision(self) -> asyncio.Task[CommandOutcome] | None:
        return await self.invoke(
            "/services/actions/unprovision",
            "Unprovision operation will destroy your existing data. \n Are you really sure?",
        )

    # -- tests -----------------------------------------------------------

    async def run_all_tests(self) -> asyncio.Task[CommandOutcome] | None:
        return await self.invoke(
            RUN_ALL_TESTS_PATH,
            "Confirm test run, this could cause replication to break!",
            scope=ActionScope.GLOBAL,
        )

    async def run_named_test(self, name: str | None = None) -> asyncio.Task[CommandOutcome] | None:
        """Run one regression test.

        Uses ``name`` or, if omitted, the pending test name held in the
        console state. The pending name is cleared once the command has been
        dispatched, whatever its outcome.
        """
        test_name = name if name is not None else self._state.pending_test_name
        task = await self.invoke(f"/tests/actions/run/{test_name}", "Confirm run one test !")
        if task is not None:
            self._state.pending_test_name = ""
        return task

    # -- settings --------------------------------------------------------

    async def switch_setting(self, setting: str) -> asyncio.Task[CommandOutcome] | None:
        return await self.invoke(
            f"/settings/actions/switch/{setting}", f"Confirm toggle setting {setting}"
        )

    async def set_setting(
        self,
        setting: str,
        value: Any,
        *,
        confirm: bool = True,
    ) -> asyncio.Task[CommandOutcome] | None:
        rendered = format_setting_value(value)
        return await self.invoke(
            f"/settings/actions/set/{setting}/{rendered}",
            f"Confirm set {setting} to {rendered}",
            confirm=confirm,
        )
