"""Shared mutable console state: view model, selection and connectivity.

Every view model field has exactly one writer (the fetch of its resource
kind). The connectivity flag ``result_error`` has many writers and is last
write wins; ``statuses`` keeps the per-resource outcome next to it so an
aggregate ``unreachable`` indicator can be derived without the race.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import structlog

from replication_console.integrations.repman.models import (
    AlertsPayload,
    ClusterSummary,
    MonitorPayload,
    ProxyInfo,
    ServerInfo,
)
from replication_console.services.console.types import ResourceKind

logger = structlog.get_logger()

StateListener = Callable[["ConsoleState"], None]


@dataclass
class ViewModel:
    """Latest successfully fetched data, one field per resource kind.

    Fields start as None ("never loaded") and are only ever overwritten by a
    successful fetch; a failed fetch leaves the previous value in place.
    """

    settings: MonitorPayload | None = None
    logs: list[Any] = field(default_factory=list)
    agents: list[Any] = field(default_factory=list)
    cluster_summary: ClusterSummary | None = None
    servers: list[ServerInfo] | None = None
    alerts: AlertsPayload | None = None
    master: ServerInfo | None = None
    proxies: list[ProxyInfo] | None = None
    slaves: list[ServerInfo] | None = None

    def apply(self, kind: ResourceKind, payload: Any) -> None:
        """Overwrite the field(s) owned by ``kind``."""
        if kind is ResourceKind.MONITOR:
            self.settings = payload
            self.logs = list(payload.logs.buffer)
            self.agents = list(payload.agents)
        else:
            setattr(self, FIELD_BY_KIND[kind], payload)


FIELD_BY_KIND: dict[ResourceKind, str] = {
    ResourceKind.CLUSTER: "cluster_summary",
    ResourceKind.SERVERS: "servers",
    ResourceKind.ALERTS: "alerts",
    ResourceKind.MASTER: "master",
    ResourceKind.PROXIES: "proxies",
    ResourceKind.SLAVES: "slaves",
}


@dataclass(frozen=True)
class ResourceStatus:
    """Outcome of the most recent fetch of one resource kind."""

    kind: ResourceKind
    ok: bool
    updated_at: datetime
    cluster: str | None = None
    error: str | None = None


class ConsoleState:
    """Everything the console shows, plus operator-local selections."""

    def __init__(self, selected_cluster: str | None = None) -> None:
        self.view = ViewModel()
        self.selected_cluster: str | None = selected_cluster or None
        self.selected_user_index: int | None = None
        self.pending_test_name: str = ""
        # Connectivity flag, last writer wins
        self.result_error: bool = False
        self.statuses: dict[ResourceKind, ResourceStatus] = {}
        self.last_cycle_successes: int | None = None
        self._listeners: list[StateListener] = []

    # -- selection -------------------------------------------------------

    def select_cluster(self, name: str | None) -> None:
        """Change the cluster that polling and commands are scoped to."""
        name = name or None
        if name == self.selected_cluster:
            return
        logger.info("Cluster selected", cluster=name, previous=self.selected_cluster)
        self.selected_cluster = name
        self.notify()

    def select_user_index(self, index: int) -> None:
        """Toggle the highlighted row: same index clears, another replaces."""
        if self.selected_user_index != index:
            self.selected_user_index = index
        else:
            self.selected_user_index = None
        self.notify()

    # -- fetch outcomes --------------------------------------------------

    def record_success(
        self,
        kind: ResourceKind,
        payload: Any,
        *,
        cluster: str | None,
        resets_error: bool,
    ) -> None:
        self.view.apply(kind, payload)
        if resets_error:
            self.result_error = False
        self.statuses[kind] = ResourceStatus(
            kind=kind, ok=True, updated_at=datetime.now(UTC), cluster=cluster
        )
        self.notify()

    def record_failure(self, kind: ResourceKind, error: str, *, cluster: str | None) -> None:
        self.result_error = True
        self.statuses[kind] = ResourceStatus(
            kind=kind,
            ok=False,
            updated_at=datetime.now(UTC),
            cluster=cluster,
            error=error,
        )
        self.notify()

    def record_cycle(self, successes: int) -> None:
        """Remember how many fetches of the last completed cycle succeeded."""
        self.last_cycle_successes = successes
        self.notify()

    @property
    def unreachable(self) -> bool:
        """True iff the most recently completed cycle had no successful fetch."""
        return self.last_cycle_successes == 0

    # -- listeners -------------------------------------------------------

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("State listener failed")
