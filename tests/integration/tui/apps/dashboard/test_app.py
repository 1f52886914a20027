"""Integration tests for the cluster dashboard."""

from __future__ import annotations

from typing import Any

import pytest
from textual.widgets import DataTable, Input

from replication_console.tui.apps.dashboard.screens import DashboardScreen
from replication_console.tui.apps.dashboard.widgets import ConnectivityIndicator
from replication_console.tui.components.modal import ConfirmModal, PromptModal


def server_rows(app: Any) -> int:
    screen = app.screen
    if not isinstance(screen, DashboardScreen):
        return -1
    return screen.query_one("#servers-table", DataTable).row_count


@pytest.mark.integration
class TestDashboardPolling:
    """The dashboard polls on start and renders the view model."""

    @pytest.mark.asyncio
    async def test_renders_topology(self, app_factory: Any, wait_for: Any) -> None:
        app = app_factory()

        async with app.run_test() as pilot:
            await wait_for(pilot, lambda: server_rows(app) == 2)
            screen = app.screen
            assert screen.query_one("#proxies-table", DataTable).row_count == 1
            assert screen.query_one("#alerts-table", DataTable).row_count == 1
            assert screen.query_one("#logs-table", DataTable).row_count == 2
            await wait_for(pilot, lambda: screen.query_one(ConnectivityIndicator).status == "ok")
            assert screen.query_one(ConnectivityIndicator).cluster == "prod1"

    @pytest.mark.asyncio
    async def test_backend_values_are_not_markup(
        self, app_factory: Any, fake_repman: Any, wait_for: Any
    ) -> None:
        base = "/api/clusters/prod1"
        fake_repman.routes[f"{base}/topology/servers"] = [
            {"id": "db[1]", "host": "10.0.0.1", "port": "3306", "state": "[/Slave]"},
            {"id": "[bold]db2", "host": "10.0.0.2", "port": "3306", "state": "Slave"},
        ]
        fake_repman.routes[f"{base}/topology/master"] = {"id": "[red]db1"}
        fake_repman.routes[f"{base}/topology/proxies"] = [
            {"id": "px[1]", "type": "[maxscale]", "host": "10.0.0.9", "state": "[/]"}
        ]
        app = app_factory()

        async with app.run_test() as pilot:
            await wait_for(pilot, lambda: server_rows(app) == 2)
            screen = app.screen
            servers = screen.query_one("#servers-table", DataTable)
            proxies = screen.query_one("#proxies-table", DataTable)

            assert [str(servers.get_row_at(i)[0]) for i in range(2)] == ["db[1]", "[bold]db2"]
            assert str(proxies.get_row_at(0)[0]) == "px[1]"
            assert str(proxies.get_row_at(0)[1]) == "[maxscale]"
            assert app.controller.state.view.master is not None
            assert app.controller.state.view.master.id == "[red]db1"

    @pytest.mark.asyncio
    async def test_unreachable_indicator(
        self, app_factory: Any, fake_repman: Any, wait_for: Any
    ) -> None:
        fake_repman.failing = set(fake_repman.routes)
        app = app_factory()

        async with app.run_test() as pilot:
            await pilot.pause()
            indicator = app.screen.query_one(ConnectivityIndicator)
            await wait_for(pilot, lambda: indicator.status == "unreachable")
            assert indicator.has_class("-unreachable")

    @pytest.mark.asyncio
    async def test_not_logged_in_does_not_poll(
        self, app_factory: Any, fake_repman: Any
    ) -> None:
        app = app_factory(logged_in=False)

        async with app.run_test() as pilot:
            await pilot.pause(0.3)

        assert fake_repman.requests == []

    @pytest.mark.asyncio
    async def test_cycle_cluster(self, app_factory: Any, wait_for: Any) -> None:
        app = app_factory()

        async with app.run_test() as pilot:
            await wait_for(pilot, lambda: server_rows(app) == 2)
            await pilot.press("c")
            await pilot.pause()

            assert app.controller.state.selected_cluster == "prod2"


@pytest.mark.integration
class TestDashboardCommands:
    """Key bindings go through the confirmation modal."""

    @pytest.mark.asyncio
    async def test_failover_confirmed(
        self, app_factory: Any, fake_repman: Any, wait_for: Any
    ) -> None:
        app = app_factory()

        async with app.run_test() as pilot:
            await wait_for(pilot, lambda: server_rows(app) == 2)
            await pilot.press("f")
            await wait_for(pilot, lambda: isinstance(app.screen, ConfirmModal))
            assert app.screen.prompt == "Confirm failover"
            await pilot.press("y")
            await wait_for(pilot, lambda: bool(fake_repman.action_paths()))

        assert fake_repman.action_paths() == ["/api/clusters/prod1/actions/failover"]

    @pytest.mark.asyncio
    async def test_switchover_declined(
        self, app_factory: Any, fake_repman: Any, wait_for: Any
    ) -> None:
        app = app_factory()

        async with app.run_test() as pilot:
            await wait_for(pilot, lambda: server_rows(app) == 2)
            await pilot.press("s")
            await wait_for(pilot, lambda: isinstance(app.screen, ConfirmModal))
            await pilot.press("n")
            await wait_for(pilot, lambda: isinstance(app.screen, DashboardScreen))
            await pilot.pause(0.1)

        assert fake_repman.action_paths() == []

    @pytest.mark.asyncio
    async def test_maintenance_uses_highlighted_server(
        self, app_factory: Any, fake_repman: Any, wait_for: Any
    ) -> None:
        app = app_factory()

        async with app.run_test() as pilot:
            await wait_for(pilot, lambda: server_rows(app) == 2)
            app.controller.select_user_index(1)
            await pilot.press("m")
            await wait_for(pilot, lambda: isinstance(app.screen, ConfirmModal))
            assert app.screen.prompt == "Confirm maintenance for server-id: db2"
            await pilot.press("y")
            await wait_for(pilot, lambda: bool(fake_repman.action_paths()))

        assert fake_repman.action_paths() == ["/api/clusters/prod1/servers/db2/actions/maintenance"]

    @pytest.mark.asyncio
    async def test_run_named_test(
        self, app_factory: Any, fake_repman: Any, wait_for: Any
    ) -> None:
        app = app_factory()

        async with app.run_test() as pilot:
            await wait_for(pilot, lambda: server_rows(app) == 2)
            await pilot.press("t")
            await wait_for(pilot, lambda: isinstance(app.screen, PromptModal))
            await pilot.press(*"testSwitchover")
            await pilot.press("enter")
            await wait_for(pilot, lambda: isinstance(app.screen, ConfirmModal))
            assert app.screen.prompt == "Confirm run one test !"
            await pilot.press("y")
            await wait_for(pilot, lambda: bool(fake_repman.action_paths()))

            assert app.controller.state.pending_test_name == ""

        assert fake_repman.action_paths() == [
            "/api/clusters/prod1/tests/actions/run/testSwitchover"
        ]

    @pytest.mark.asyncio
    async def test_switch_setting(
        self, app_factory: Any, fake_repman: Any, wait_for: Any
    ) -> None:
        app = app_factory()

        async with app.run_test() as pilot:
            await wait_for(pilot, lambda: server_rows(app) == 2)
            await pilot.press("o")
            await wait_for(pilot, lambda: isinstance(app.screen, PromptModal))
            await pilot.press(*"autorejoin")
            await pilot.press("enter")
            await wait_for(pilot, lambda: isinstance(app.screen, ConfirmModal))
            assert app.screen.prompt == "Confirm toggle setting autorejoin"
            await pilot.press("y")
            await wait_for(pilot, lambda: bool(fake_repman.action_paths()))

        assert fake_repman.action_paths() == [
            "/api/clusters/prod1/settings/actions/switch/autorejoin"
        ]

    @pytest.mark.asyncio
    async def test_set_setting_asks_name_then_value(
        self, app_factory: Any, fake_repman: Any, wait_for: Any
    ) -> None:
        app = app_factory()

        def value_prompt_shown() -> bool:
            screen = app.screen
            return (
                isinstance(screen, PromptModal)
                and screen.query_one("#prompt-input", Input).placeholder == "value"
            )

        async with app.run_test() as pilot:
            await wait_for(pilot, lambda: server_rows(app) == 2)
            await pilot.press("v")
            await wait_for(pilot, lambda: isinstance(app.screen, PromptModal))
            await pilot.press(*"maxrpo")
            await pilot.press("enter")
            await wait_for(pilot, value_prompt_shown)
            await pilot.press(*"45")
            await pilot.press("enter")
            await wait_for(pilot, lambda: isinstance(app.screen, ConfirmModal))
            assert app.screen.prompt == "Confirm set maxrpo to 45"
            await pilot.press("y")
            await wait_for(pilot, lambda: bool(fake_repman.action_paths()))

        assert fake_repman.action_paths() == [
            "/api/clusters/prod1/settings/actions/set/maxrpo/45"
        ]

    @pytest.mark.asyncio
    async def test_set_setting_cancelled(
        self, app_factory: Any, fake_repman: Any, wait_for: Any
    ) -> None:
        app = app_factory()

        async with app.run_test() as pilot:
            await wait_for(pilot, lambda: server_rows(app) == 2)
            await pilot.press("v")
            await wait_for(pilot, lambda: isinstance(app.screen, PromptModal))
            await pilot.press("escape")
            await wait_for(pilot, lambda: isinstance(app.screen, DashboardScreen))
            await pilot.pause(0.1)

        assert fake_repman.action_paths() == []

    @pytest.mark.asyncio
    async def test_server_action_without_cluster(
        self, app_factory: Any, fake_repman: Any, mocker: Any
    ) -> None:
        app = app_factory()
        app.controller.select_cluster(None)

        async with app.run_test() as pilot:
            await pilot.pause()
            notify = mocker.patch.object(app, "notify")
            await pilot.press("f")
            await pilot.pause()

            notify.assert_called_with("Select a cluster first", severity="warning")
            assert not isinstance(app.screen, ConfirmModal)

        assert fake_repman.action_paths() == []
