"""Theme constants and Rich markup helpers for the dashboard.

Usage:
    from replication_console.tui.theme import Colors, Styles

    label.update(Styles.server_state(server.state))
"""

from __future__ import annotations

from rich.markup import escape


class Colors:
    """Color constants (Textual CSS variables where possible)."""

    SUCCESS = "$success"
    WARNING = "$warning"
    ERROR = "$error"
    PRIMARY = "$primary"
    SURFACE = "$surface"
    TEXT_MUTED = "$text-muted"

    MODAL_BACKGROUND = "rgba(0, 0, 0, 0.6)"


# Server states as reported by replication-manager, by severity
SERVER_STATE_STYLES: dict[str, str] = {
    "Master": "bold green",
    "Slave": "green",
    "StandAlone": "cyan",
    "Maintenance": "yellow",
    "SlaveLate": "yellow",
    "SlaveErr": "red",
    "Suspect": "red",
    "Failed": "bold red",
}


class Styles:
    """Helpers wrapping text in Rich markup."""

    @staticmethod
    def success(text: str) -> str:
        return f"[green]{text}[/green]"

    @staticmethod
    def warning(text: str) -> str:
        return f"[yellow]{text}[/yellow]"

    @staticmethod
    def error(text: str) -> str:
        return f"[red]{text}[/red]"

    @staticmethod
    def muted(text: str) -> str:
        return f"[dim]{text}[/dim]"

    @staticmethod
    def server_state(state: str | None) -> str:
        """Color a server state; unknown states render unstyled."""
        if not state:
            return ""
        style = SERVER_STATE_STYLES.get(state)
        if style is None:
            return escape(state)
        return f"[{style}]{state}[/{style}]"
