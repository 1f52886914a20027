"""Version information for replication_console."""

__version__ = "0.3.0"
