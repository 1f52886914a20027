"""Push a monitor setting back to the selected cluster when it changes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from replication_console.core.config.models import WatchedSettingConfig
    from replication_console.integrations.repman.models import MonitorPayload
    from replication_console.services.console.dispatcher import CommandDispatcher
    from replication_console.services.console.state import ConsoleState

logger = structlog.get_logger()

_UNSET = object()


def read_setting(payload: MonitorPayload, key: str) -> Any:
    """Read ``key`` from a monitor payload, declared field or extra."""
    extra = payload.model_extra or {}
    if key in extra:
        return extra[key]
    return getattr(payload, key, None)


class SettingPropagator:
    """Observes monitor payloads and propagates one setting.

    Each change of the watched key to a defined value sends exactly one
    unconfirmed ``set`` command. Repeating the same value sends nothing. A
    change observed while no cluster is selected is held back and sent on the
    first observation after a cluster has been selected.
    """

    def __init__(
        self,
        dispatcher: CommandDispatcher,
        state: ConsoleState,
        config: WatchedSettingConfig,
    ) -> None:
        self._dispatcher = dispatcher
        self._state = state
        self._config = config
        self._last: Any = _UNSET

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    async def observe(self, payload: MonitorPayload) -> bool:
        """Inspect one monitor payload.

        Returns:
            True if a set command was dispatched.
        """
        if not self._config.enabled:
            return False

        value = read_setting(payload, self._config.source_key)
        if self._last is not _UNSET and value == self._last:
            return False
        if value is None:
            self._last = None
            return False
        if not self._state.selected_cluster:
            logger.debug(
                "Setting change pending cluster selection",
                setting=self._config.setting_name,
                value=value,
            )
            return False

        self._last = value
        logger.info(
            "Propagating setting change",
            setting=self._config.setting_name,
            value=value,
            cluster=self._state.selected_cluster,
        )
        task = await self._dispatcher.set_setting(
            self._config.setting_name, value, confirm=False
        )
        return task is not None
