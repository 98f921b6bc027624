import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Optional, Union

logger = logging.getLogger(__name__)

TickCallback = Callable[[], Union[None, Awaitable[None]]]


class PeriodicTask:
    """
    Runs a callback on a fixed period as an asyncio task.

    The period is measured from the loop clock, independent of how long the
    callback takes, so a slow tick delays the next one but does not shift the
    whole schedule. An exception raised by the callback is logged and the
    schedule continues; cancellation always ends it.

    Use as an async context manager to guarantee the task is cancelled on
    every exit path.
    """

    def __init__(self, name: str, interval_s: float, callback: TickCallback):
        if interval_s <= 0:
            raise ValueError("interval_s must be positive.")
        self.name = name
        self._interval_s = interval_s
        self._callback = callback
        self._task: Optional[asyncio.Task] = None
        self._ticks = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def ticks(self) -> int:
        return self._ticks

    async def start(self) -> None:
        if self.is_running:
            logger.warning("%s is already running.", self.name)
            return
        self._task = asyncio.create_task(self._run(), name=self.name)
        logger.debug("%s scheduled every %.3fs.", self.name, self._interval_s)

    async def stop(self) -> None:
        """Cancels the task and waits for it. Safe to call repeatedly."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("%s stopped after %d ticks.", self.name, self._ticks)

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time() + self._interval_s

        while True:
            delay = next_tick - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)
            else:
                # Fell behind; restart the schedule from now
                next_tick = loop.time()
            next_tick += self._interval_s

            try:
                result = self._callback()
                if inspect.isawaitable(result):
                    await result
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("%s tick failed.", self.name)
            self._ticks += 1

    async def __aenter__(self) -> "PeriodicTask":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
