"""Authentication session for the replication-manager API.

Holds the bearer token issued by ``POST /api/login``. The token can be
persisted between CLI invocations in ``~/.config/repcon/session.yaml``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml

from replication_console.integrations.repman.exceptions import ConsoleConfigError

logger = structlog.get_logger()

SESSION_FILE = Path.home() / ".config" / "repcon" / "session.yaml"


class AuthSession:
    """Process-wide authentication state.

    Example:
        ```python
        session = AuthSession()
        async with ReplicationManagerClient(connection, session) as client:
            await client.login("admin", "repman")
            assert session.has_auth_headers()
        ```
    """

    def __init__(self, token: str | None = None, session_file: Path | None = None) -> None:
        self._token = token or None
        self._session_file = session_file or SESSION_FILE

    @property
    def token(self) -> str | None:
        """Current bearer token, if any."""
        return self._token

    def has_auth_headers(self) -> bool:
        """Return True when requests will carry an Authorization header."""
        return self._token is not None

    def headers(self) -> dict[str, str]:
        """Headers to attach to every API request."""
        if self._token is None:
            return {}
        return {"Authorization": f"Bearer {self._token}"}

    def set_token(self, token: str) -> None:
        """Store a freshly issued token."""
        if not token:
            raise ValueError("token must not be empty")
        self._token = token
        logger.info("Authenticated session established")

    def logout(self) -> None:
        """Drop the token and any persisted copy of it."""
        self._token = None
        if self._session_file.exists():
            self._session_file.unlink()
        logger.info("Session logged out")

    def save(self) -> None:
        """Persist the token (owner read/write only)."""
        if self._token is None:
            return
        self._session_file.parent.mkdir(parents=True, exist_ok=True)
        with self._session_file.open("w") as f:
            yaml.safe_dump({"token": self._token}, f, default_flow_style=False)
        self._session_file.chmod(0o600)

    @classmethod
    def load(cls, session_file: Path | None = None) -> AuthSession:
        """Restore a persisted session, or return an anonymous one.

        Raises:
            ConsoleConfigError: If the session file exists but is unreadable.
        """
        path = session_file or SESSION_FILE
        if not path.exists():
            return cls(session_file=path)
        try:
            with path.open() as f:
                data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConsoleConfigError("Invalid session file format", details=str(e)) from e
        token = data.get("token") if isinstance(data, dict) else None
        return cls(token=token, session_file=path)
