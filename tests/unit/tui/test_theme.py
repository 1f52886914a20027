"""Unit tests for TUI theme module."""

from __future__ import annotations

import pytest

from replication_console.tui.theme import SERVER_STATE_STYLES, Colors, Styles


class TestColors:
    """Tests for Colors class constants."""

    @pytest.mark.unit
    def test_css_variables(self) -> None:
        assert Colors.SUCCESS == "$success"
        assert Colors.WARNING == "$warning"
        assert Colors.ERROR == "$error"
        assert Colors.PRIMARY == "$primary"
        assert Colors.SURFACE == "$surface"


class TestStyles:
    """Tests for Styles markup helpers."""

    @pytest.mark.unit
    def test_basic_helpers(self) -> None:
        assert Styles.success("ok") == "[green]ok[/green]"
        assert Styles.warning("late") == "[yellow]late[/yellow]"
        assert Styles.error("failed") == "[red]failed[/red]"
        assert Styles.muted("n/a") == "[dim]n/a[/dim]"

    @pytest.mark.unit
    @pytest.mark.parametrize("state", sorted(SERVER_STATE_STYLES))
    def test_known_server_states(self, state: str) -> None:
        style = SERVER_STATE_STYLES[state]
        assert Styles.server_state(state) == f"[{style}]{state}[/{style}]"

    @pytest.mark.unit
    def test_unknown_state_is_escaped(self) -> None:
        assert Styles.server_state("Unknown") == "Unknown"
        assert Styles.server_state("[weird]") == "\\[weird]"

    @pytest.mark.unit
    @pytest.mark.parametrize("state", [None, ""])
    def test_empty_state(self, state: str | None) -> None:
        assert Styles.server_state(state) == ""
