"""Composition root for the console engine."""

from __future__ import annotations

from typing import Any

import structlog

from replication_console.core.config.models import ConsoleConfig
from replication_console.integrations.repman.auth import AuthSession
from replication_console.integrations.repman.client import ReplicationManagerClient
from replication_console.services.console.aggregator import ClusterStateAggregator, CycleReport
from replication_console.services.console.dispatcher import CommandDispatcher, Confirmer
from replication_console.services.console.fetcher import ResourceFetcher
from replication_console.services.console.scheduler import PollingScheduler
from replication_console.services.console.settings_watch import SettingPropagator
from replication_console.services.console.state import ConsoleState

logger = structlog.get_logger()


def decline_all(prompt: str) -> bool:
    """Confirmer used when no confirmation surface is attached."""
    logger.warning("No confirmation surface attached, declining", prompt=prompt)
    return False


class ConsoleController:
    """Wires session, client, polling and command dispatch for one config.

    Example:
        ```python
        config = load_config()
        async with ConsoleController(config, confirm=ask_operator) as console:
            console.select_cluster("prod1")
            await console.start()
            ...
            await console.dispatcher.failover()
        ```
    """

    def __init__(
        self,
        config: ConsoleConfig,
        *,
        session: AuthSession | None = None,
        client: ReplicationManagerClient | None = None,
        confirm: Confirmer | None = None,
    ) -> None:
        self.config = config
        self.session = session or AuthSession.load()
        if config.auth.token is not None and not self.session.has_auth_headers():
            self.session.set_token(config.auth.token.get_secret_value())

        self._owns_client = client is None
        self.client = client or ReplicationManagerClient(config.connection, self.session)

        self.state = ConsoleState(selected_cluster=config.default_cluster)
        self.fetcher = ResourceFetcher(self.client)
        self.dispatcher = CommandDispatcher(self.client, self.state, confirm or decline_all)
        self.propagator = SettingPropagator(self.dispatcher, self.state, config.watched_setting)
        self.aggregator = ClusterStateAggregator(
            self.fetcher,
            self.state,
            self.session,
            on_monitor=self.propagator.observe,
        )
        self.scheduler = PollingScheduler(
            self.aggregator.run_cycle,
            config.polling.interval_seconds,
        )

    async def authenticate(self) -> bool:
        """Make sure the session carries a token.

        Logs in with the configured credentials when no token is present.

        Returns:
            True if the session is authenticated afterwards.

        Raises:
            ReplicationManagerError: If the login request fails.
        """
        if self.session.has_auth_headers():
            return True
        auth = self.config.auth
        if not auth.has_credentials:
            logger.info("No credentials configured, polling stays suspended")
            return False
        assert auth.username is not None and auth.password is not None
        await self.client.login(auth.username, auth.password.get_secret_value())
        return True

    async def refresh(self) -> CycleReport | None:
        """Run one polling cycle now."""
        return await self.aggregator.run_cycle()

    async def start(self, *, immediate: bool = True) -> None:
        """Start periodic polling, optionally running a first cycle right away."""
        if immediate:
            await self.refresh()
        self.scheduler.start()

    async def stop(self) -> None:
        """Stop polling, wait for commands in flight and release the client."""
        await self.scheduler.stop()
        await self.dispatcher.drain()
        if self._owns_client:
            await self.client.aclose()

    def select_cluster(self, name: str | None) -> None:
        self.state.select_cluster(name)

    def select_user_index(self, index: int) -> None:
        self.state.select_user_index(index)

    def logout(self) -> None:
        """Drop the session; polling is suspended until the next login."""
        self.session.logout()

    async def __aenter__(self) -> ConsoleController:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.stop()
