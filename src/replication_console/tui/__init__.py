"""Terminal user interface for the replication console.

Usage:
    from replication_console.tui import BaseScreen, BaseWidget, Colors, Styles
    from replication_console.tui.components import ConfirmModal
    from replication_console.tui.apps.dashboard import DashboardApp
"""

from replication_console.tui.base import BaseScreen, BaseWidget
from replication_console.tui.theme import Colors, Styles

__all__ = [
    "BaseScreen",
    "BaseWidget",
    "Colors",
    "Styles",
]
