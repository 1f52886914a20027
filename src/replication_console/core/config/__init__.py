"""Configuration management with Pydantic validation."""

from replication_console.core.config.models import (
    CONFIG_DIR,
    CONFIG_FILE,
    ConsoleConfig,
    PollingConfig,
    WatchedSettingConfig,
    load_config,
)

__all__ = [
    "CONFIG_DIR",
    "CONFIG_FILE",
    "ConsoleConfig",
    "PollingConfig",
    "WatchedSettingConfig",
    "load_config",
]
