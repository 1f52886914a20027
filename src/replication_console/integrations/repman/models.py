"""Pydantic schemas for replication-manager API payloads.

The API returns loosely structured JSON. Each schema only pins down the
fields the console reads; everything else is kept as extra attributes so
newer backend versions do not break polling.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RepmanModel(BaseModel):
    """Base for all payload models."""

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
    )


class GtidRecord(BaseModel):
    """One GTID position triplet.

    Attributes:
        domain_id: Replication domain.
        server_id: Originating server id.
        seq_no: Sequence number within the domain.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    domain_id: int = Field(alias="domainId")
    server_id: int = Field(alias="serverId")
    seq_no: int = Field(alias="seqNo")


class LogBuffer(RepmanModel):
    """Ring buffer of backend log lines."""

    buffer: list[Any] = Field(default_factory=list)


class MonitorPayload(RepmanModel):
    """Global monitor settings (cluster independent)."""

    clusters: list[str] = Field(default_factory=list)
    logs: LogBuffer = Field(default_factory=LogBuffer)
    agents: list[Any] = Field(default_factory=list)


class ClusterSummary(RepmanModel):
    """Top level cluster document."""

    name: str | None = None


class ServerInfo(RepmanModel):
    """A database server as reported by the topology endpoints."""

    id: str
    host: str | None = None
    port: str | int | None = None
    state: str | None = None
    is_maintenance: bool = Field(default=False, alias="isMaintenance")
    current_gtid: list[GtidRecord] | None = Field(default=None, alias="currentGtid")
    slave_gtid: list[GtidRecord] | None = Field(default=None, alias="slaveGtid")

    @property
    def address(self) -> str:
        """host:port for display."""
        if self.port in (None, ""):
            return self.host or ""
        return f"{self.host}:{self.port}"


class AlertsPayload(RepmanModel):
    """Current error and warning states of the cluster."""

    errors: list[Any] | None = None
    warnings: list[Any] | None = None


class ProxyInfo(RepmanModel):
    """A proxy in front of the cluster (MaxScale, ProxySQL, HAProxy...)."""

    id: str | None = None
    type: str | None = None
    host: str | None = None
    port: str | int | None = None
    state: str | None = None
