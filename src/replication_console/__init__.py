"""Operator console for replication-manager database clusters.

Polls cluster health endpoints, keeps an aggregated view model in sync and
dispatches confirmed administrative commands against the selected cluster.
"""

from replication_console.__version__ import __version__

__all__ = ["__version__"]
