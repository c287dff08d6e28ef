"""Repeating, non-overlapping refresh timer."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable

from loadlink.config import DEFAULT_POLL_INTERVAL

logger = logging.getLogger(__name__)

Tick = Callable[[], Awaitable[None]]


class RefreshCoordinator:
    """Fire ``tick`` every ``interval`` seconds on the running event loop.

    A tick that comes due while the previous one is still running is skipped,
    never queued. :meth:`stop` cancels both the timer and any in-flight tick.
    """

    def __init__(self, tick: Tick, interval: float = DEFAULT_POLL_INTERVAL) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._tick = tick
        self._interval = interval
        self._busy = False
        self._timer: asyncio.Task[None] | None = None
        self._inflight: asyncio.Task[bool] | None = None
        self.ticks_run = 0
        self.ticks_skipped = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def busy(self) -> bool:
        return self._busy

    def start(self) -> None:
        if self.running:
            return
        logger.debug("Starting refresh every %.3fs", self._interval)
        self._timer = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        timer, self._timer = self._timer, None
        inflight, self._inflight = self._inflight, None
        for task in (timer, inflight):
            if task is not None and not task.done():
                task.cancel()
        for task in (timer, inflight):
            if task is not None:
                with contextlib.suppress(asyncio.CancelledError):
                    await task
        self._busy = False
        logger.debug(
            "Refresh stopped after %d ticks (%d skipped)",
            self.ticks_run,
            self.ticks_skipped,
        )

    async def tick_once(self) -> bool:
        """Run one tick unless one is already running; report whether it ran."""
        if self._busy:
            self.ticks_skipped += 1
            logger.debug("Previous refresh still running, skipping tick")
            return False

        self._busy = True
        try:
            await self._tick()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Refresh tick failed")
        finally:
            self._busy = False
        self.ticks_run += 1
        return True

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            if not self._busy:
                self._inflight = loop.create_task(self.tick_once())
            else:
                self.ticks_skipped += 1
            await asyncio.sleep(self._interval)
