import asyncio
import logging
import time
from typing import Any, Optional

from ..models import Sample
from ..utils.logging import ThrottledLogger
from .base import GazeSource

logger = logging.getLogger(__name__)


class CallbackGazeSource(GazeSource):
    """
    A GazeSource fed by an external estimator's gaze listener.

    The estimator calls `push()` once per prediction, from any thread. A
    prediction may be a mapping with `x`/`y` keys, an `(x, y)` pair, or None
    when no face is detected.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._rejected_logger = ThrottledLogger(logger, interval_sec=5.0)
        self.pushed = 0

    @staticmethod
    def to_sample(data: Any, timestamp: float) -> Optional[Sample]:
        """Converts a raw prediction. Returns None for tracking loss."""
        if data is None:
            return None
        if isinstance(data, dict):
            x, y = data.get("x"), data.get("y")
        else:
            x, y = data
        if x is None or y is None:
            return None
        return Sample(float(x), float(y), timestamp)

    def push(self, data: Any) -> None:
        """
        Thread-safe entry point for the estimator callback.

        Predictions arriving before `run()` or after `stop()` are discarded.
        """
        loop = self._loop
        if loop is None or self._stop_event.is_set():
            return

        try:
            item = self.to_sample(data, time.monotonic())
        except (TypeError, ValueError):
            self._rejected_logger.log("Discarding malformed gaze prediction: %r", data)
            return

        try:
            loop.call_soon_threadsafe(self._output_queue.put_nowait, item)
            self.pushed += 1
        except RuntimeError:
            # Loop already closed during shutdown
            pass

    async def run(self) -> None:
        """Accepts pushes until the stop event is set."""
        self._loop = asyncio.get_running_loop()
        logger.info("Callback gaze source accepting predictions.")
        try:
            await self._stop_event.wait()
        finally:
            self._loop = None
            logger.info("Callback gaze source stopped after %d predictions.", self.pushed)
