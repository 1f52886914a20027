"""Console configuration with Pydantic validation.

Configuration is read from ``~/.config/repcon/config.yaml`` (or an explicit
path) and then overridden by ``REPCON_*`` environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from replication_console.integrations.repman.config import AuthConfig, ConnectionConfig
from replication_console.integrations.repman.exceptions import ConsoleConfigError

# XDG-compliant config location
CONFIG_DIR = Path.home() / ".config" / "repcon"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

DEFAULT_POLL_INTERVAL_MS = 2000
MIN_POLL_INTERVAL_MS = 100


class PollingConfig(BaseModel):
    """Polling cadence."""

    model_config = ConfigDict(extra="forbid")

    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS

    @field_validator("poll_interval_ms")
    @classmethod
    def validate_interval(cls, v: int) -> int:
        """Reject intervals that would hammer the API."""
        if v < MIN_POLL_INTERVAL_MS:
            raise ValueError(f"poll_interval_ms must be >= {MIN_POLL_INTERVAL_MS}")
        return v

    @property
    def interval_seconds(self) -> float:
        """Interval expressed in seconds for asyncio."""
        return self.poll_interval_ms / 1000


class WatchedSettingConfig(BaseModel):
    """Monitor setting that is pushed back to the cluster whenever it changes."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    source_key: str = "maxdelay"
    setting_name: str = "failover-max-slave-delay"


class ConsoleConfig(BaseModel):
    """Complete console configuration."""

    model_config = ConfigDict(extra="forbid")

    connection: ConnectionConfig = Field(default_factory=ConnectionConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    polling: PollingConfig = Field(default_factory=PollingConfig)
    watched_setting: WatchedSettingConfig = Field(default_factory=WatchedSettingConfig)
    default_cluster: str | None = None

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> ConsoleConfig:
        """Create configuration with environment variable overrides.

        Environment variables take precedence over base_config values.

        Supported environment variables:
            REPCON_BASE_URL: replication-manager API base URL
            REPCON_VERIFY_SSL: "0"/"false" disables certificate checks
            REPCON_USERNAME: login user
            REPCON_PASSWORD: login password
            REPCON_TOKEN: pre-issued bearer token (skips login)
            REPCON_CLUSTER: cluster selected at startup
            REPCON_POLL_INTERVAL_MS: polling interval in milliseconds
        """
        config_dict: dict[str, Any] = dict(base_config) if base_config else {}
        connection = dict(config_dict.get("connection") or {})
        auth = dict(config_dict.get("auth") or {})
        polling = dict(config_dict.get("polling") or {})

        if base_url := os.environ.get("REPCON_BASE_URL"):
            connection["base_url"] = base_url
        if verify := os.environ.get("REPCON_VERIFY_SSL"):
            connection["verify_ssl"] = verify.lower() not in ("0", "false", "no")

        if username := os.environ.get("REPCON_USERNAME"):
            auth["username"] = username
        if password := os.environ.get("REPCON_PASSWORD"):
            auth["password"] = password
        if token := os.environ.get("REPCON_TOKEN"):
            auth["token"] = token

        if interval := os.environ.get("REPCON_POLL_INTERVAL_MS"):
            polling["poll_interval_ms"] = interval

        if cluster := os.environ.get("REPCON_CLUSTER"):
            config_dict["default_cluster"] = cluster

        config_dict["connection"] = connection
        config_dict["auth"] = auth
        config_dict["polling"] = polling
        return cls.model_validate(config_dict)

    def to_yaml(self) -> str:
        """Serialize to YAML, leaving secrets out."""
        data = self.model_dump(mode="json", exclude={"auth": {"password", "token"}})
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)


def load_raw_config(path: Path | None = None) -> dict[str, Any]:
    """Read the YAML file into a dictionary.

    Returns an empty dictionary when the file does not exist.

    Raises:
        ConsoleConfigError: If the file is not valid YAML or not a mapping.
    """
    config_path = path or CONFIG_FILE
    if not config_path.exists():
        return {}
    try:
        with config_path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConsoleConfigError("Invalid config file format", details=str(e)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConsoleConfigError(
            "Invalid config file", details=f"Expected a mapping in {config_path}"
        )
    return data


def load_config(path: Path | None = None) -> ConsoleConfig:
    """Load the console configuration from file and environment.

    Raises:
        ConsoleConfigError: If the merged configuration does not validate.
    """
    raw = load_raw_config(path)
    try:
        return ConsoleConfig.from_env(raw)
    except ValidationError as e:
        raise ConsoleConfigError("Invalid configuration", details=str(e)) from e
