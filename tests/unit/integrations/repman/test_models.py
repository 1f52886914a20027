"""Unit tests for replication-manager payload models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from replication_console.integrations.repman.config import AuthConfig, ConnectionConfig
from replication_console.integrations.repman.models import (
    GtidRecord,
    MonitorPayload,
    ServerInfo,
)


@pytest.mark.unit
class TestServerInfo:
    def test_parses_api_aliases(self) -> None:
        server = ServerInfo.model_validate(
            {
                "id": "db1",
                "host": "10.0.0.1",
                "port": "3306",
                "isMaintenance": True,
                "currentGtid": [{"domainId": 0, "serverId": 1, "seqNo": 5}],
                "replicationHealth": "",
            }
        )

        assert server.is_maintenance is True
        assert server.current_gtid == [GtidRecord(domain_id=0, server_id=1, seq_no=5)]
        assert server.slave_gtid is None
        assert server.model_extra == {"replicationHealth": ""}

    @pytest.mark.parametrize(
        ("host", "port", "expected"),
        [("h", "3306", "h:3306"), ("h", None, "h"), ("h", "", "h"), (None, None, "")],
    )
    def test_address(self, host: str | None, port: str | None, expected: str) -> None:
        assert ServerInfo(id="x", host=host, port=port).address == expected

    def test_id_required(self) -> None:
        with pytest.raises(ValidationError):
            ServerInfo.model_validate({"host": "h"})


@pytest.mark.unit
class TestMonitorPayload:
    def test_defaults(self) -> None:
        payload = MonitorPayload.model_validate({})
        assert payload.clusters == []
        assert payload.logs.buffer == []

    def test_keeps_unknown_settings(self) -> None:
        payload = MonitorPayload.model_validate({"maxdelay": 30, "logs": {"buffer": ["x"]}})
        assert payload.model_extra == {"maxdelay": 30}
        assert payload.logs.buffer == ["x"]


@pytest.mark.unit
class TestConnectionConfig:
    def test_strips_trailing_slash(self) -> None:
        assert ConnectionConfig(base_url="https://repman:10005/").base_url == "https://repman:10005"

    def test_rejects_bad_scheme(self) -> None:
        with pytest.raises(ValidationError, match="http"):
            ConnectionConfig(base_url="repman:10005")

    def test_rejects_non_positive_timeout(self) -> None:
        with pytest.raises(ValidationError, match="positive"):
            ConnectionConfig(timeout=0)

    def test_has_credentials(self) -> None:
        assert AuthConfig().has_credentials is False
        assert AuthConfig(username="admin").has_credentials is False
        assert AuthConfig.model_validate(
            {"username": "admin", "password": "repman"}
        ).has_credentials is True
