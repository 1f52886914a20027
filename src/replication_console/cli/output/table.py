"""Rich table with console-wide defaults."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from rich.table import Table as RichTable

if TYPE_CHECKING:
    from rich.console import ConsoleRenderable, RichCast

OverflowMethod = Literal["fold", "crop", "ellipsis", "ignore"]


class Table(RichTable):
    """Rich Table whose columns wrap long values instead of truncating them.

    GTID strings and alert messages are routinely wider than the terminal,
    so every column defaults to ``overflow="fold"``.

    Usage:
        from replication_console.cli.output import Table

        table = Table(title="Servers")
        table.add_column("Id", no_wrap=True)
        table.add_column("Current GTID")
        table.add_row("db1", "0-1-42")
    """

    def __init__(self, *headers: Any, **kwargs: Any) -> None:
        kwargs.setdefault("show_lines", False)
        kwargs.setdefault("header_style", "bold cyan")
        super().__init__(*headers, **kwargs)

    def add_column(
        self,
        header: ConsoleRenderable | RichCast | str = "",
        footer: ConsoleRenderable | RichCast | str = "",
        *,
        overflow: OverflowMethod = "fold",
        **kwargs: Any,
    ) -> None:
        """Add a column, folding overflowing text unless told otherwise."""
        super().add_column(header, footer, overflow=overflow, **kwargs)
