"""Repeating timer on the asyncio event loop."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from beacon_monitor.core.interfaces import RepeatingTimer

logger = logging.getLogger(__name__)


class AsyncioRepeatingTimer(RepeatingTimer):
    """Run a coroutine after an initial delay, then periodically."""

    def __init__(self, name: str = "timer") -> None:
        self.name = name
        self._task: Optional[asyncio.Task] = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(
        self,
        initial_delay: float,
        period: float,
        callback: Callable[[], Awaitable[None]],
    ) -> None:
        self.cancel()
        self._task = asyncio.create_task(self._run(initial_delay, period, callback))

    def cancel(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(
        self,
        initial_delay: float,
        period: float,
        callback: Callable[[], Awaitable[None]],
    ) -> None:
        await asyncio.sleep(initial_delay)
        while True:
            logger.debug("Timer %s fired", self.name)
            try:
                await callback()
            except Exception as e:
                logger.error("Timer %s callback failed: %s", self.name, e)
            await asyncio.sleep(period)
