"""Replication-manager API exceptions."""

from __future__ import annotations

from typing import Any


class ReplicationManagerError(Exception):
    """Base exception for replication-manager API errors.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code (if the server answered).
        endpoint: The API endpoint that was called.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.endpoint = endpoint

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code:
            parts.append(f"(status: {self.status_code})")
        if self.endpoint:
            parts.append(f"[endpoint: {self.endpoint}]")
        return " ".join(parts)


class ReplicationManagerConnectionError(ReplicationManagerError):
    """Raised when the API cannot be reached.

    Covers refused connections, DNS failures and timeouts.
    """

    def __init__(
        self,
        message: str = "Failed to connect to replication-manager",
        endpoint: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message=message, endpoint=endpoint)
        self.original_error = original_error


class ReplicationManagerAuthError(ReplicationManagerError):
    """Raised on 401/403 responses or a rejected login."""

    def __init__(
        self,
        message: str = "Authentication to replication-manager failed",
        status_code: int | None = 401,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(message=message, status_code=status_code, endpoint=endpoint)


class ReplicationManagerNotFoundError(ReplicationManagerError):
    """Raised on 404 responses, usually an unknown cluster or server id."""

    def __init__(
        self,
        message: str = "Resource not found",
        endpoint: str | None = None,
    ) -> None:
        super().__init__(message=message, status_code=404, endpoint=endpoint)


class ReplicationManagerResponseError(ReplicationManagerError):
    """Raised when a response body cannot be decoded or fails validation."""

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message=message, endpoint=endpoint)
        self.details = details


class ConsoleConfigError(Exception):
    """Raised when the console configuration is missing or invalid."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details
