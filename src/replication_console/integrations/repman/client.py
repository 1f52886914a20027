"""Async HTTP client for the replication-manager REST API."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from replication_console.integrations.repman.auth import AuthSession
from replication_console.integrations.repman.config import ConnectionConfig
from replication_console.integrations.repman.exceptions import (
    ReplicationManagerAuthError,
    ReplicationManagerConnectionError,
    ReplicationManagerError,
    ReplicationManagerNotFoundError,
    ReplicationManagerResponseError,
)

logger = structlog.get_logger()

LOGIN_ENDPOINT = "/api/login"


class ReplicationManagerClient:
    """HTTP client for the replication-manager API.

    Every request carries the session's Authorization header. No request is
    retried: the polling cadence is the only retry mechanism the console has.

    Example:
        ```python
        from replication_console.integrations.repman import (
            AuthSession,
            ConnectionConfig,
            ReplicationManagerClient,
        )

        connection = ConnectionConfig(base_url="https://repman:10005", verify_ssl=False)
        async with ReplicationManagerClient(connection, AuthSession()) as client:
            await client.login("admin", "repman")
            servers = await client.get("api/clusters/prod1/topology/servers")
        ```
    """

    def __init__(
        self,
        connection_config: ConnectionConfig,
        session: AuthSession | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            connection_config: URL, timeout and TLS settings.
            session: Authentication state shared with the rest of the console.
            transport: Optional transport override (tests use httpx.MockTransport).
        """
        self.connection_config = connection_config
        self.session = session or AuthSession()

        client_kwargs: dict[str, Any] = {
            "base_url": connection_config.base_url,
            "timeout": httpx.Timeout(connection_config.timeout),
            "verify": connection_config.verify_ssl,
        }
        if transport is not None:
            client_kwargs["transport"] = transport

        self._client = httpx.AsyncClient(**client_kwargs)

        logger.info(
            "Replication-manager client initialized",
            base_url=connection_config.base_url,
            authenticated=self.session.has_auth_headers(),
        )

    @staticmethod
    def _decode(response: httpx.Response, endpoint: str) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ReplicationManagerResponseError(
                message="Response body is not valid JSON",
                endpoint=endpoint,
                details=response.text[:200],
            ) from e

    def _raise_for_status(self, response: httpx.Response, endpoint: str) -> None:
        """Raise the matching exception for a non-2xx response.

        Raises:
            ReplicationManagerAuthError: 401/403.
            ReplicationManagerNotFoundError: 404.
            ReplicationManagerError: any other error status.
        """
        if response.is_success:
            return

        status = response.status_code
        if status in (401, 403):
            raise ReplicationManagerAuthError(status_code=status, endpoint=endpoint)
        if status == 404:
            raise ReplicationManagerNotFoundError(endpoint=endpoint)
        raise ReplicationManagerError(
            message=f"Replication-manager API error: {status}",
            status_code=status,
            endpoint=endpoint,
        )

    async def _send(
        self,
        method: str,
        endpoint: str,
        **kwargs: Any,
    ) -> httpx.Response:
        url = f"/{endpoint.lstrip('/')}"
        log = logger.bind(method=method, endpoint=url)

        try:
            log.debug("API request")
            response = await self._client.request(
                method, url, headers=self.session.headers(), **kwargs
            )
            log.debug("API response", status=response.status_code)
        except httpx.TimeoutException as e:
            log.warning("API request timeout", error=str(e))
            raise ReplicationManagerConnectionError(
                message=f"Request timed out: {e}",
                endpoint=url,
                original_error=e,
            ) from e
        except httpx.TransportError as e:
            log.warning("API connection error", error=str(e))
            raise ReplicationManagerConnectionError(
                message=f"Failed to connect to replication-manager: {e}",
                endpoint=url,
                original_error=e,
            ) from e
        except httpx.DecodingError as e:
            log.warning("API response could not be decoded", error=str(e))
            raise ReplicationManagerResponseError(
                message=f"Response body could not be decoded: {e}",
                endpoint=url,
            ) from e
        except httpx.HTTPError as e:
            log.warning("API request failed", error=str(e))
            raise ReplicationManagerConnectionError(
                message=f"Request to replication-manager failed: {e}",
                endpoint=url,
                original_error=e,
            ) from e

        self._raise_for_status(response, url)
        return response

    async def get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """GET a JSON resource.

        Args:
            endpoint: API path, e.g. ``api/monitor``.
            params: Query parameters.

        Returns:
            The decoded JSON body (None for an empty body).
        """
        response = await self._send("GET", endpoint, params=params)
        return self._decode(response, response.request.url.path)

    async def fire(self, endpoint: str) -> int:
        """Issue a one-way GET whose body is discarded.

        Returns:
            The HTTP status code of the (successful) response.
        """
        response = await self._send("GET", endpoint)
        return response.status_code

    async def login(self, username: str, password: str) -> str:
        """Exchange credentials for a bearer token and store it in the session.

        Returns:
            The issued token.

        Raises:
            ReplicationManagerAuthError: Credentials rejected.
            ReplicationManagerResponseError: No token in the response.
        """
        response = await self._send(
            "POST",
            LOGIN_ENDPOINT,
            json={"username": username, "password": password},
        )
        body = self._decode(response, LOGIN_ENDPOINT)
        token = body.get("token") if isinstance(body, dict) else None
        if not token:
            raise ReplicationManagerResponseError(
                message="Login response did not contain a token",
                endpoint=LOGIN_ENDPOINT,
            )
        self.session.set_token(token)
        return str(token)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
        logger.debug("Replication-manager client closed")

    async def __aenter__(self) -> ReplicationManagerClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
