"""Replication-manager connection configuration models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, SecretStr, field_validator


class ConnectionConfig(BaseModel):
    """Replication-manager API connection configuration."""

    model_config = ConfigDict(extra="forbid")

    base_url: str = "https://localhost:10005"
    timeout: float = 10.0
    verify_ssl: bool = True

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate base URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v


class AuthConfig(BaseModel):
    """Credentials used to obtain (or directly supply) a bearer token."""

    model_config = ConfigDict(extra="forbid")

    username: str | None = None
    password: SecretStr | None = None
    token: SecretStr | None = None

    @property
    def has_credentials(self) -> bool:
        """True when a username/password pair is configured."""
        return bool(self.username) and self.password is not None
