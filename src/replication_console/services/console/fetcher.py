"""Fetch and validate one resource collection."""

from __future__ import annotations

from typing import Any, Protocol

import structlog
from pydantic import TypeAdapter, ValidationError

from replication_console.integrations.repman.exceptions import ReplicationManagerResponseError
from replication_console.integrations.repman.models import (
    AlertsPayload,
    ClusterSummary,
    MonitorPayload,
    ProxyInfo,
    ServerInfo,
)
from replication_console.services.console.types import ResourceKind, resource_endpoint

logger = structlog.get_logger()

SCHEMAS: dict[ResourceKind, TypeAdapter[Any]] = {
    ResourceKind.MONITOR: TypeAdapter(MonitorPayload),
    ResourceKind.CLUSTER: TypeAdapter(ClusterSummary),
    ResourceKind.SERVERS: TypeAdapter(list[ServerInfo]),
    ResourceKind.ALERTS: TypeAdapter(AlertsPayload),
    ResourceKind.MASTER: TypeAdapter(ServerInfo | None),
    ResourceKind.PROXIES: TypeAdapter(list[ProxyInfo]),
    ResourceKind.SLAVES: TypeAdapter(list[ServerInfo]),
}


class JsonGetter(Protocol):
    """The slice of ReplicationManagerClient a fetcher needs."""

    async def get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any: ...


class ResourceFetcher:
    """Retrieves one named resource collection for a cluster.

    The raw JSON is validated against the schema registered for its kind, so
    a payload of the wrong shape fails that fetch like a network error would.
    """

    def __init__(self, client: JsonGetter) -> None:
        self._client = client

    async def fetch(self, kind: ResourceKind, cluster: str | None = None) -> Any:
        """Fetch and validate ``kind``.

        Args:
            kind: Resource collection to fetch.
            cluster: Cluster name, required for cluster-scoped kinds.

        Returns:
            The validated payload (model, list of models, or None for an
            absent master).

        Raises:
            ReplicationManagerError: Transport, HTTP or validation failure.
        """
        endpoint = resource_endpoint(kind, cluster)
        params = {"clusterName": cluster} if kind.cluster_scoped else None
        raw = await self._client.get(endpoint, params=params)
        return self.validate(kind, raw, endpoint=endpoint)

    @staticmethod
    def validate(kind: ResourceKind, raw: Any, *, endpoint: str | None = None) -> Any:
        """Validate a raw payload against the schema for ``kind``.

        Raises:
            ReplicationManagerResponseError: On schema mismatch.
        """
        if kind is ResourceKind.MASTER and raw == {}:
            raw = None
        try:
            return SCHEMAS[kind].validate_python(raw)
        except ValidationError as e:
            logger.debug("Payload failed validation", resource=kind.value, errors=e.error_count())
            raise ReplicationManagerResponseError(
                message=f"Unexpected {kind.value} payload",
                endpoint=endpoint,
                details=e.errors(include_url=False),
            ) from e
