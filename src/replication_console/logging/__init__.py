"""Logging configuration for replication_console."""

from replication_console.logging.config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
