"""Fixed-cadence polling scheduler."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

logger = structlog.get_logger()

TickCallback = Callable[[], Awaitable[Any]]


class PollingScheduler:
    """Invokes an async callback every ``interval`` seconds.

    Each tick spawns the callback as its own task and the ticker moves on
    immediately, so a slow cycle never delays the next one. Ticks are
    anchored to the start time; ticks missed while the event loop was busy
    are skipped rather than replayed. A failing callback is logged and the
    ticker keeps going.

    Example:
        ```python
        scheduler = PollingScheduler(aggregator.run_cycle, interval=2.0)
        scheduler.start()
        ...
        await scheduler.stop()
        ```
    """

    def __init__(self, callback: TickCallback, interval: float, *, name: str = "poll") -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._callback = callback
        self._interval = interval
        self._name = name
        self._ticker: asyncio.Task[None] | None = None
        self._in_flight: set[asyncio.Task[None]] = set()
        self._tick_count = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._ticker is not None and not self._ticker.done()

    @property
    def tick_count(self) -> int:
        """Number of ticks fired since construction."""
        return self._tick_count

    @property
    def in_flight(self) -> int:
        """Ticks whose callback has not finished yet."""
        return len(self._in_flight)

    def start(self) -> None:
        """Start ticking. Must be called from a running event loop."""
        if self.running:
            return
        self._ticker = asyncio.create_task(self._run(), name=f"{self._name}-ticker")
        logger.info("Polling scheduler started", scheduler=self._name, interval=self._interval)

    async def stop(self) -> None:
        """Stop ticking and cancel callbacks still in flight."""
        tasks: list[asyncio.Task[None]] = list(self._in_flight)
        if self._ticker is not None:
            tasks.append(self._ticker)
            self._ticker = None
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._in_flight.clear()
        logger.info("Polling scheduler stopped", scheduler=self._name, ticks=self._tick_count)

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time() + self._interval
        while True:
            await asyncio.sleep(max(0.0, next_tick - loop.time()))
            self._spawn_tick()
            next_tick += self._interval
            now = loop.time()
            if next_tick <= now:
                skipped = int((now - next_tick) // self._interval) + 1
                logger.debug("Skipping missed ticks", scheduler=self._name, skipped=skipped)
                next_tick += skipped * self._interval

    def _spawn_tick(self) -> None:
        self._tick_count += 1
        task = asyncio.create_task(
            self._invoke(self._tick_count), name=f"{self._name}-tick-{self._tick_count}"
        )
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _invoke(self, tick: int) -> None:
        try:
            await self._callback()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Polling tick failed", scheduler=self._name, tick=tick)
