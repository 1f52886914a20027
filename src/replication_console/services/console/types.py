"""Resource kinds polled by the console and their API endpoints."""

from __future__ import annotations

from enum import StrEnum


class ResourceKind(StrEnum):
    """Resource collections fetched on every polling cycle."""

    MONITOR = "monitor"
    CLUSTER = "cluster"
    SERVERS = "servers"
    ALERTS = "alerts"
    MASTER = "master"
    PROXIES = "proxies"
    SLAVES = "slaves"

    @property
    def cluster_scoped(self) -> bool:
        """True for everything except the global monitor."""
        return self is not ResourceKind.MONITOR


# Cluster-scoped kinds, in the order their fetches are issued
CLUSTER_SCOPED_KINDS: tuple[ResourceKind, ...] = (
    ResourceKind.CLUSTER,
    ResourceKind.SERVERS,
    ResourceKind.ALERTS,
    ResourceKind.MASTER,
    ResourceKind.PROXIES,
    ResourceKind.SLAVES,
)

# Successful fetches of these kinds clear the connectivity error flag.
# The others only ever set it.
ERROR_RESETTING_KINDS = frozenset({ResourceKind.CLUSTER, ResourceKind.SERVERS})

MONITOR_ENDPOINT = "api/monitor"
CLUSTERS_ENDPOINT = "api/clusters"

_TOPOLOGY_SUFFIX: dict[ResourceKind, str] = {
    ResourceKind.CLUSTER: "",
    ResourceKind.SERVERS: "/topology/servers",
    ResourceKind.ALERTS: "/topology/alerts",
    ResourceKind.MASTER: "/topology/master",
    ResourceKind.PROXIES: "/topology/proxies",
    ResourceKind.SLAVES: "/topology/slaves",
}


def cluster_base_path(cluster: str) -> str:
    """Base path for everything scoped to one cluster."""
    return f"{CLUSTERS_ENDPOINT}/{cluster}"


def resource_endpoint(kind: ResourceKind, cluster: str | None = None) -> str:
    """Build the GET endpoint for a resource kind.

    Raises:
        ValueError: If a cluster-scoped kind is requested without a cluster.
    """
    if kind is ResourceKind.MONITOR:
        return MONITOR_ENDPOINT
    if not cluster:
        raise ValueError(f"{kind.value} requires a cluster name")
    return cluster_base_path(cluster) + _TOPOLOGY_SUFFIX[kind]
