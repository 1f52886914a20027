"""Shared fixtures for dashboard integration tests."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

import pytest
from textual.pilot import Pilot

from replication_console.core.config.models import ConsoleConfig
from replication_console.tui.apps.dashboard.app import DashboardApp


class AppFactory(Protocol):
    """Protocol for the app_factory fixture."""

    def __call__(self, *, logged_in: bool = True) -> DashboardApp: ...


WaitFor = Callable[[Pilot[Any], Callable[[], bool]], Awaitable[None]]


@pytest.fixture
def app_factory(
    console_config: ConsoleConfig,
    controller_factory: Callable[..., Any],
    fake_repman: Any,
) -> AppFactory:
    """Dashboard wired to the fake backend.

    The watched monitor setting is removed from the canned payload so only
    operator commands show up as actions.
    """
    fake_repman.routes["/api/monitor"].pop("maxdelay", None)

    def factory(*, logged_in: bool = True) -> DashboardApp:
        controller = controller_factory()
        if not logged_in:
            controller.logout()
        return DashboardApp(console_config, controller=controller)

    return factory


@pytest.fixture
def wait_for() -> WaitFor:
    """Pause the pilot until ``predicate`` holds (fails after ~3s)."""

    async def waiter(pilot: Pilot[Any], predicate: Callable[[], bool]) -> None:
        for _ in range(60):
            if predicate():
                return
            await pilot.pause(0.05)
        pytest.fail("condition not reached")

    return waiter
