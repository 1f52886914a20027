"""Unit tests for the confirmation and prompt modals."""

from __future__ import annotations

from typing import Any

import pytest
from textual.app import App, ComposeResult
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label

from replication_console.tui.components.modal import ConfirmModal, PromptModal


class ModalTestApp(App[Any]):
    """Test app pushing one modal and recording its result."""

    def __init__(self, modal: ModalScreen[Any]) -> None:
        super().__init__()
        self.modal = modal
        self.result: Any = "unset"

    def compose(self) -> ComposeResult:
        yield Label("Test App")

    def on_mount(self) -> None:
        self.push_screen(self.modal, self._handle_result)

    def _handle_result(self, result: Any) -> None:
        self.result = result
        self.exit(result)


class TestConfirmModalInit:
    """Tests for ConfirmModal initialization."""

    @pytest.mark.unit
    def test_defaults(self) -> None:
        modal = ConfirmModal("Confirm failover")
        assert modal.prompt == "Confirm failover"
        assert modal._title == "Confirm"
        assert modal._confirm_variant == "error"

    @pytest.mark.unit
    def test_css_is_scoped_to_class(self) -> None:
        assert "ConfirmModal > Container" in ConfirmModal.DEFAULT_CSS
        assert "PromptModal > Container" in PromptModal.DEFAULT_CSS
        assert "{{" not in ConfirmModal.DEFAULT_CSS


class TestConfirmModalAsync:
    """Async tests for ConfirmModal interaction."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_confirm_button_returns_true(self) -> None:
        app = ModalTestApp(ConfirmModal("Confirm failover"))

        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.click(app.screen.query_one("#modal-btn-confirm", Button))

        assert app.result is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cancel_button_returns_false(self) -> None:
        app = ModalTestApp(ConfirmModal("Confirm failover"))

        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.click(app.screen.query_one("#modal-btn-cancel", Button))

        assert app.result is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize(("key", "expected"), [("y", True), ("n", False), ("escape", False)])
    async def test_keys(self, key: str, expected: bool) -> None:
        app = ModalTestApp(ConfirmModal("Confirm switchover"))

        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press(key)

        assert app.result is expected

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_enter_on_initial_focus_cancels(self) -> None:
        app = ModalTestApp(ConfirmModal("Unprovision operation will destroy your existing data."))

        async with app.run_test() as pilot:
            await pilot.pause()
            assert app.focused is app.screen.query_one("#modal-btn-cancel", Button)
            await pilot.press("enter")

        assert app.result is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_prompt_with_brackets_renders(self) -> None:
        app = ModalTestApp(ConfirmModal("Confirm maintenance for server-id: [db1]"))

        async with app.run_test() as pilot:
            await pilot.pause()
            assert app.screen.query(".modal-body")
            await pilot.press("n")

        assert app.result is False


class TestPromptModalAsync:
    """Async tests for PromptModal."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_submit_returns_stripped_text(self) -> None:
        app = ModalTestApp(PromptModal("Run regression test"))

        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press(*" testSwitchover ")
            await pilot.press("enter")

        assert app.result == "testSwitchover"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_prefilled_value(self) -> None:
        app = ModalTestApp(PromptModal("Run regression test", value="testFailover"))

        async with app.run_test() as pilot:
            await pilot.pause()
            assert app.screen.query_one("#prompt-input", Input).value == "testFailover"
            await pilot.click(app.screen.query_one("#modal-btn-ok", Button))

        assert app.result == "testFailover"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_submit_returns_none(self) -> None:
        app = ModalTestApp(PromptModal("Run regression test"))

        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("enter")

        assert app.result is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_escape_returns_none(self) -> None:
        app = ModalTestApp(PromptModal("Run regression test", value="x"))

        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("escape")

        assert app.result is None
