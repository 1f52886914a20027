"""Replication-manager API integration.

Usage:
    from replication_console.integrations.repman import (
        AuthSession,
        ConnectionConfig,
        ReplicationManagerClient,
    )
"""

from replication_console.integrations.repman.auth import AuthSession
from replication_console.integrations.repman.client import ReplicationManagerClient
from replication_console.integrations.repman.config import AuthConfig, ConnectionConfig
from replication_console.integrations.repman.exceptions import (
    ConsoleConfigError,
    ReplicationManagerAuthError,
    ReplicationManagerConnectionError,
    ReplicationManagerError,
    ReplicationManagerNotFoundError,
    ReplicationManagerResponseError,
)

__all__ = [
    "AuthConfig",
    "AuthSession",
    "ConnectionConfig",
    "ConsoleConfigError",
    "ReplicationManagerAuthError",
    "ReplicationManagerClient",
    "ReplicationManagerConnectionError",
    "ReplicationManagerError",
    "ReplicationManagerNotFoundError",
    "ReplicationManagerResponseError",
]
