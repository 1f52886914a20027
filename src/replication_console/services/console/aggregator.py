"""One polling cycle: fetch every tracked resource and merge the results."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from replication_console.integrations.repman.exceptions import ReplicationManagerError
from replication_console.services.console.types import (
    CLUSTER_SCOPED_KINDS,
    ERROR_RESETTING_KINDS,
    ResourceKind,
)

if TYPE_CHECKING:
    from replication_console.integrations.repman.auth import AuthSession
    from replication_console.integrations.repman.models import MonitorPayload
    from replication_console.services.console.fetcher import ResourceFetcher
    from replication_console.services.console.state import ConsoleState

logger = structlog.get_logger()

MonitorObserver = Callable[["MonitorPayload"], Any]


@dataclass(frozen=True)
class CycleReport:
    """Summary of a completed cycle."""

    cycle: int
    cluster: str | None
    attempted: int
    succeeded: int

    @property
    def failed(self) -> int:
        return self.attempted - self.succeeded


class ClusterStateAggregator:
    """Runs polling cycles against the currently selected cluster.

    All fetches of a cycle are in flight at once and each one is merged into
    the state the moment it settles, so the final value of the shared
    connectivity flag depends on completion order. Cycles never wait for or
    cancel each other.
    """

    def __init__(
        self,
        fetcher: ResourceFetcher,
        state: ConsoleState,
        auth: AuthSession,
        *,
        on_monitor: MonitorObserver | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._state = state
        self._auth = auth
        self._on_monitor = on_monitor
        self._cycle = 0

    @property
    def cycles_started(self) -> int:
        return self._cycle

    async def run_cycle(self) -> CycleReport | None:
        """Run one cycle.

        Returns:
            A report once every fetch of the cycle has settled, or None when
            the session is not authenticated (nothing is fetched).
        """
        if not self._auth.has_auth_headers():
            logger.debug("Not authenticated, skipping polling cycle")
            return None

        self._cycle += 1
        cycle = self._cycle
        # Captured once, every fetch of this cycle uses the same cluster
        cluster = self._state.selected_cluster
        log = logger.bind(cycle=cycle, cluster=cluster)
        log.debug("Polling cycle started")

        fetches = [self._fetch_one(ResourceKind.MONITOR, None, cycle)]
        if cluster:
            fetches.extend(self._fetch_one(kind, cluster, cycle) for kind in CLUSTER_SCOPED_KINDS)

        outcomes = await asyncio.gather(*fetches)
        succeeded = sum(1 for ok in outcomes if ok)
        self._state.record_cycle(succeeded)

        report = CycleReport(
            cycle=cycle, cluster=cluster, attempted=len(outcomes), succeeded=succeeded
        )
        log.debug("Polling cycle settled", succeeded=succeeded, failed=report.failed)
        return report

    async def _fetch_one(self, kind: ResourceKind, cluster: str | None, cycle: int) -> bool | None:
        """Fetch one resource and merge the outcome.

        Returns:
            True on success, False on failure, None if the result was dropped
            because the cluster selection changed while it was in flight.
        """
        log = logger.bind(resource=kind.value, cluster=cluster, cycle=cycle)
        try:
            payload = await self._fetcher.fetch(kind, cluster)
        except ReplicationManagerError as e:
            if self._is_stale(kind, cluster):
                log.debug("Dropping failure for deselected cluster")
                return None
            log.info("Fetch failed", error=str(e))
            self._state.record_failure(kind, str(e), cluster=cluster)
            return False

        if self._is_stale(kind, cluster):
            log.debug("Dropping result for deselected cluster")
            return None

        self._state.record_success(
            kind,
            payload,
            cluster=cluster,
            resets_error=kind in ERROR_RESETTING_KINDS,
        )
        if kind is ResourceKind.MONITOR and self._on_monitor is not None:
            result = self._on_monitor(payload)
            if inspect.isawaitable(result):
                await result
        return True

    def _is_stale(self, kind: ResourceKind, cluster: str | None) -> bool:
        return kind.cluster_scoped and cluster != self._state.selected_cluster
