"""Widgets for the cluster dashboard.

Provides the connectivity indicator shown in the header and the popup
selector used to pick a cluster or an operator action.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Label, OptionList
from textual.widgets.option_list import Option

from replication_console.tui.base import BaseWidget
from replication_console.tui.theme import Colors, Styles

if TYPE_CHECKING:
    from replication_console.services.console.state import ConsoleState

NO_CLUSTER_LABEL = "(no cluster)"


class SelectorPopup(ModalScreen[str | None]):
    """Modal popup for picking one entry of a list.

    Options are ``(id, label)`` pairs; the popup dismisses with the id of
    the chosen option, or None when closed with Escape.
    """

    DEFAULT_CSS = f"""
    SelectorPopup {{
        align: center middle;
    }}

    SelectorPopup #popup-container {{
        width: 60;
        max-height: 70%;
        border: thick {Colors.PRIMARY};
        background: {Colors.SURFACE};
        padding: 1;
    }}

    SelectorPopup #popup-title {{
        text-style: bold;
        margin-bottom: 1;
    }}

    SelectorPopup OptionList {{
        height: auto;
        max-height: 20;
    }}
    """

    BINDINGS = [
        ("escape", "dismiss_popup", "Close"),
    ]

    def __init__(
        self,
        title: str,
        options: list[tuple[str, str]],
        current: str | None = None,
    ) -> None:
        super().__init__()
        self._title = title
        self._options = options
        self._current = current

    def compose(self) -> ComposeResult:
        with Vertical(id="popup-container"):
            yield Label(self._title, id="popup-title")
            yield OptionList(
                *[Option(label, id=option_id) for option_id, label in self._options],
                id="popup-options",
            )

    def on_mount(self) -> None:
        """Highlight the current entry."""
        ids = [option_id for option_id, _ in self._options]
        if self._current in ids:
            self.query_one("#popup-options", OptionList).highlighted = ids.index(self._current)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(event.option.id)

    def action_dismiss_popup(self) -> None:
        self.dismiss(None)


class ConnectivityIndicator(BaseWidget):
    """Header line with the selected cluster and the connectivity status.

    ``status`` is one of ``waiting``, ``ok``, ``errors`` (the last poll
    flagged an error) or ``unreachable`` (the last completed cycle had no
    successful fetch at all).
    """

    DEFAULT_CSS = f"""
    ConnectivityIndicator {{
        height: 1;
        width: 100%;
        padding: 0 1;
        background: {Colors.SURFACE};
    }}

    ConnectivityIndicator.-unreachable {{
        background: {Colors.ERROR};
    }}
    """

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.status = "waiting"
        self.cluster: str | None = None

    def compose(self) -> ComposeResult:
        yield Label(self._render_text(), id="connectivity-text")

    def _render_text(self) -> str:
        cluster = escape(self.cluster) if self.cluster else NO_CLUSTER_LABEL
        badge = {
            "waiting": Styles.muted("waiting for first poll"),
            "ok": Styles.success("connected"),
            "errors": Styles.warning("poll errors"),
            "unreachable": Styles.error("[bold]replication-manager unreachable[/bold]"),
        }[self.status]
        return f"[bold]Cluster:[/bold] {cluster}   {badge}"

    def update_from(self, state: ConsoleState) -> None:
        """Refresh from the console state."""
        if state.unreachable:
            self.status = "unreachable"
        elif state.last_cycle_successes is None and not state.statuses:
            self.status = "waiting"
        elif state.result_error:
            self.status = "errors"
        else:
            self.status = "ok"
        self.cluster = state.selected_cluster
        self.set_class(self.status == "unreachable", "-unreachable")
        self.query_one("#connectivity-text", Label).update(self._render_text())
