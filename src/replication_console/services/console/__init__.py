"""Polling and command-dispatch engine of the console.

Usage:
    from replication_console.services.console import ConsoleController
"""

from replication_console.services.console.aggregator import ClusterStateAggregator, CycleReport
from replication_console.services.console.controller import ConsoleController
from replication_console.services.console.dispatcher import (
    ActionScope,
    CommandDispatcher,
    CommandOutcome,
    Confirmer,
)
from replication_console.services.console.fetcher import ResourceFetcher
from replication_console.services.console.gtid import format_gtid
from replication_console.services.console.scheduler import PollingScheduler
from replication_console.services.console.settings_watch import SettingPropagator
from replication_console.services.console.state import ConsoleState, ResourceStatus, ViewModel
from replication_console.services.console.types import ResourceKind

__all__ = [
    "ActionScope",
    "ClusterStateAggregator",
    "CommandDispatcher",
    "CommandOutcome",
    "Confirmer",
    "ConsoleController",
    "ConsoleState",
    "CycleReport",
    "PollingScheduler",
    "ResourceFetcher",
    "ResourceKind",
    "ResourceStatus",
    "SettingPropagator",
    "ViewModel",
    "format_gtid",
]
