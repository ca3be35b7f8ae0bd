"""Fixed-interval poll scheduler."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

LOGGER = logging.getLogger(__name__)

CycleFn = Callable[[], Awaitable[object]]


class PollScheduler:
    """Fire a poll cycle immediately and then every interval seconds.

    Each cycle runs in its own task so stop() only halts future ticks; an
    in-flight cycle finishes its sends. A tick that fires while the previous
    cycle is still running is skipped instead of racing the generation swap.
    """

    def __init__(self, run_cycle: CycleFn, interval: float) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._run_cycle = run_cycle
        self._interval = interval
        self._ticker: Optional[asyncio.Task] = None
        self._cycle: Optional[asyncio.Task] = None
        self.skipped_ticks = 0

    @property
    def is_running(self) -> bool:
        return self._ticker is not None and not self._ticker.done()

    @property
    def cycle_in_progress(self) -> bool:
        return self._cycle is not None and not self._cycle.done()

    def start(self) -> None:
        """Start ticking; calling it again while running is a no-op."""

        if self.is_running:
            return
        self._ticker = asyncio.get_running_loop().create_task(self._tick_forever())
        LOGGER.info("Polling every %ss", self._interval)

    def stop(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None
            LOGGER.info("Polling stopped")

    async def wait_idle(self) -> None:
        """Wait for an in-flight cycle, if any, to complete."""

        if self._cycle is not None:
            await asyncio.wait({self._cycle})

    async def _tick_forever(self) -> None:
        while True:
            self.tick()
            await asyncio.sleep(self._interval)

    def tick(self) -> None:
        if self.cycle_in_progress:
            self.skipped_ticks += 1
            LOGGER.warning("Previous poll cycle still running, skipping this tick")
            return
        self._cycle = asyncio.get_running_loop().create_task(self._guarded_cycle())

    async def _guarded_cycle(self) -> None:
        # Nothing raised by a cycle may take the process down.
        try:
            await self._run_cycle()
        except Exception:
            LOGGER.exception("Poll cycle failed")
