"""Tests for package version metadata."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

import pytest

import replication_console
from replication_console.__version__ import __version__


@pytest.mark.unit
def test_package_exports_version() -> None:
    assert replication_console.__version__ == __version__
    assert replication_console.__all__ == ["__version__"]


@pytest.mark.unit
def test_version_matches_distribution() -> None:
    try:
        installed = version("replication-console")
    except PackageNotFoundError:
        pytest.skip("replication-console is not installed")
    assert installed == __version__


@pytest.mark.unit
def test_version_is_semver() -> None:
    major, minor, patch = __version__.split(".")
    assert all(part.isdigit() for part in (major, minor, patch))
