"""Cluster dashboard TUI application.

Usage:
    from replication_console.tui.apps.dashboard import DashboardApp

    DashboardApp(load_config()).run()
"""

from replication_console.tui.apps.dashboard.app import DashboardApp

__all__ = ["DashboardApp"]
