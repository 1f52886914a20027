"""Modal dialogs used as the console's confirmation surface.

Usage:
    from replication_console.tui.components import ConfirmModal

    # From inside a worker
    confirmed = await app.push_screen(ConfirmModal("Confirm failover"), wait_for_dismiss=True)
"""

from __future__ import annotations

from typing import Literal

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Static

from replication_console.tui.theme import Colors

ButtonVariant = Literal["default", "primary", "success", "warning", "error"]


def _dialog_css(name: str) -> str:
    """Shared dialog styling for the modal screen class ``name``."""
    return f"""
    {name} {{
        align: center middle;
        background: {Colors.MODAL_BACKGROUND};
    }}

    {name} > Container {{
        width: auto;
        max-width: 80%;
        min-width: 40;
        height: auto;
        background: {Colors.SURFACE};
        border: thick {Colors.PRIMARY};
        padding: 1 2;
    }}

    {name} .modal-title {{
        text-style: bold;
        text-align: center;
        width: 100%;
        margin-bottom: 1;
    }}

    {name} .modal-body {{
        width: 100%;
        height: auto;
        padding: 1;
    }}

    {name} .modal-buttons {{
        width: 100%;
        height: auto;
        align: center middle;
        margin-top: 1;
    }}

    {name} .modal-buttons Button {{
        margin: 0 1;
        min-width: 10;
    }}
"""


class ConfirmModal(ModalScreen[bool]):
    """Yes/no dialog showing an operator prompt verbatim.

    Dismisses with True on confirm and False on cancel, Escape or ``n``.

    Keyboard:
    - y: confirm
    - n / Escape: cancel
    - Tab / Shift+Tab: move between buttons
    """

    DEFAULT_CSS = _dialog_css("ConfirmModal")

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
        Binding("n", "cancel", "No", show=False),
        Binding("y", "confirm", "Yes", show=False),
        Binding("tab", "focus_next", "Next", show=False),
        Binding("shift+tab", "focus_previous", "Previous", show=False),
    ]

    def __init__(
        self,
        prompt: str,
        *,
        title: str = "Confirm",
        confirm_label: str = "Confirm",
        confirm_variant: ButtonVariant = "error",
        cancel_label: str = "Cancel",
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self.prompt = prompt
        self._title = title
        self._confirm_label = confirm_label
        self._confirm_variant = confirm_variant
        self._cancel_label = cancel_label

    def compose(self) -> ComposeResult:
        with Container():
            yield Label(self._title, classes="modal-title")
            yield Static(self.prompt, classes="modal-body", markup=False)
            with Horizontal(classes="modal-buttons"):
                yield Button(
                    self._confirm_label, id="modal-btn-confirm", variant=self._confirm_variant
                )
                yield Button(self._cancel_label, id="modal-btn-cancel", variant="default")

    def on_mount(self) -> None:
        """Focus Cancel so Enter never confirms by accident."""
        self.query_one("#modal-btn-cancel", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "modal-btn-confirm")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)


class PromptModal(ModalScreen[str | None]):
    """Single-line text input dialog.

    Dismisses with the entered text, or None when cancelled or left empty.
    """

    DEFAULT_CSS = _dialog_css("PromptModal")

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    def __init__(
        self,
        title: str,
        *,
        placeholder: str = "",
        value: str = "",
    ) -> None:
        super().__init__()
        self._title = title
        self._placeholder = placeholder
        self._value = value

    def compose(self) -> ComposeResult:
        with Container():
            yield Label(self._title, classes="modal-title")
            yield Input(
                value=self._value,
                placeholder=self._placeholder,
                id="prompt-input",
                classes="modal-body",
            )
            with Horizontal(classes="modal-buttons"):
                yield Button("OK", id="modal-btn-ok", variant="primary")
                yield Button("Cancel", id="modal-btn-cancel", variant="default")

    def on_mount(self) -> None:
        self.query_one("#prompt-input", Input).focus()

    def _submit(self) -> None:
        text = self.query_one("#prompt-input", Input).value.strip()
        self.dismiss(text or None)

    def on_input_submitted(self, _event: Input.Submitted) -> None:
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "modal-btn-ok":
            self._submit()
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)
