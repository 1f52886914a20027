"""Shared fixtures for CLI command tests."""

from __future__ import annotations

from collections.abc import Generator
from unittest.mock import MagicMock, patch

import pytest


@pytest.fixture(autouse=True)
def mock_configure_logging() -> Generator[MagicMock]:
    """Keep the root callback from attaching handlers to the runner's streams."""
    with patch("replication_console.cli.main.configure_logging") as mock:
        yield mock
