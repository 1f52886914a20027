"""Shared pytest fixtures for replication_console tests."""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import httpx
import pytest
import typer
from typer.testing import CliRunner

from replication_console.cli.main import app
from replication_console.core.config.models import ConsoleConfig
from replication_console.integrations.repman.auth import AuthSession
from replication_console.integrations.repman.client import ReplicationManagerClient
from replication_console.services.console.controller import ConsoleController
from replication_console.services.console.dispatcher import Confirmer

BASE_URL = "http://repman.test"
CLUSTER = "prod1"
TOKEN = "test-token"

DB1: dict[str, Any] = {
    "id": "db1",
    "host": "10.0.0.1",
    "port": "3306",
    "state": "Master",
    "isMaintenance": False,
    "currentGtid": [{"domainId": 0, "serverId": 1, "seqNo": 42}],
    "slaveGtid": None,
}
DB2: dict[str, Any] = {
    "id": "db2",
    "host": "10.0.0.2",
    "port": "3306",
    "state": "Slave",
    "isMaintenance": False,
    "currentGtid": [{"domainId": 0, "serverId": 1, "seqNo": 41}],
    "slaveGtid": [{"domainId": 0, "serverId": 1, "seqNo": 41}],
}


def default_routes(cluster: str = CLUSTER) -> dict[str, Any]:
    """Canned payloads of a healthy two-node cluster."""
    base = f"/api/clusters/{cluster}"
    return {
        "/api/monitor": {
            "clusters": [cluster, "prod2"],
            "logs": {"buffer": ["monitor started", "[prod1] topology discovered"]},
            "agents": [],
            "maxdelay": 30,
        },
        base: {"name": cluster},
        f"{base}/topology/servers": [DB1, DB2],
        f"{base}/topology/alerts": {
            "errors": [],
            "warnings": [{"number": "WARN0023", "desc": "Failover not possible"}],
        },
        f"{base}/topology/master": DB1,
        f"{base}/topology/proxies": [
            {"id": "px1", "type": "maxscale", "host": "10.0.0.9", "port": "4006", "state": "ProxyRunning"}
        ],
        f"{base}/topology/slaves": [DB2],
    }


class FakeReplicationManager:
    """In-process replication-manager served through httpx.MockTransport.

    Records every request. Paths listed in ``failing`` answer 500, paths
    without a route answer 200 with an empty JSON object (like actions).
    Paths listed in ``corrupt`` answer 200 with a body that does not match
    its declared gzip encoding.
    """

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes: dict[str, Any] = default_routes() if routes is None else routes
        self.failing: set[str] = set()
        self.corrupt: set[str] = set()
        self.requests: list[httpx.Request] = []
        self.credentials = ("admin", "repman")

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path in self.failing:
            return httpx.Response(500, json={"error": "boom"})
        if path in self.corrupt:
            return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not gzip")
        if path == "/api/login":
            body = json.loads(request.content)
            if (body.get("username"), body.get("password")) == self.credentials:
                return httpx.Response(200, json={"token": TOKEN})
            return httpx.Response(401)
        return httpx.Response(200, json=self.routes.get(path, {}))

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]

    def action_paths(self) -> list[str]:
        """Paths of requests that were commands rather than polls or login."""
        return [p for p in self.paths if "/actions/" in p or p in ("/api/setactive", "/api/tests")]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_dir() -> Generator[Path]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fake_repman() -> FakeReplicationManager:
    return FakeReplicationManager()


@pytest.fixture
def console_config() -> ConsoleConfig:
    """Config pointing at the fake backend with prod1 preselected."""
    return ConsoleConfig.model_validate(
        {
            "connection": {"base_url": BASE_URL},
            "polling": {"poll_interval_ms": 100},
            "default_cluster": CLUSTER,
        }
    )


@pytest.fixture
def auth_session(temp_dir: Path) -> AuthSession:
    """Authenticated session persisted under the temp dir."""
    return AuthSession(token=TOKEN, session_file=temp_dir / "session.yaml")


@pytest.fixture
def make_client(
    console_config: ConsoleConfig,
    fake_repman: FakeReplicationManager,
) -> Callable[[AuthSession], ReplicationManagerClient]:
    """Factory for clients wired to the fake backend."""

    def factory(session: AuthSession) -> ReplicationManagerClient:
        return ReplicationManagerClient(
            console_config.connection, session, transport=fake_repman.transport()
        )

    return factory


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset environment variables for each test."""
    # Clear any REPCON_ prefixed environment variables
    for key in list(os.environ.keys()):
        if key.startswith("REPCON_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def isolate_user_files(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep config, session and log files out of the real home directory."""
    config_dir = temp_dir / "config"
    monkeypatch.setattr("replication_console.core.config.models.CONFIG_DIR", config_dir)
    monkeypatch.setattr(
        "replication_console.core.config.models.CONFIG_FILE", config_dir / "config.yaml"
    )
    monkeypatch.setattr(
        "replication_console.integrations.repman.auth.SESSION_FILE", config_dir / "session.yaml"
    )
    monkeypatch.setattr("replication_console.logging.config.LOG_DIR", temp_dir / "logs")
    monkeypatch.setattr(
        "replication_console.logging.config.LOG_FILE", temp_dir / "logs" / "repcon.log"
    )


@pytest.fixture
def cli_app() -> typer.Typer:
    """Return the CLI app for testing."""
    return app


@pytest.fixture
def controller_factory(
    console_config: ConsoleConfig,
    auth_session: AuthSession,
    make_client: Callable[[AuthSession], ReplicationManagerClient],
) -> Callable[..., ConsoleController]:
    """Drop-in replacement for ``open_controller`` backed by the fake backend."""

    def factory(
        config_path: Path | None = None,
        *,
        cluster: str | None = None,
        confirm: Confirmer | None = None,
    ) -> ConsoleController:
        controller = ConsoleController(
            console_config,
            session=auth_session,
            client=make_client(auth_session),
            confirm=confirm,
        )
        if cluster:
            controller.select_cluster(cluster)
        return controller

    return factory
