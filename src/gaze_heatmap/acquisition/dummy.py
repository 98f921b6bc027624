import asyncio
import logging
import math
import random
import time
from typing import Optional

from ..models import Sample
from .base import GazeSource

logger = logging.getLogger(__name__)


class DummyGazeSource(GazeSource):
    """
    A GazeSource that simulates gaze data for development and testing.

    This class generates a continuous stream of `Sample` objects at a
    specified frequency, following a circular path around the viewport
    center. A fraction of frames can be reported as tracking loss to
    exercise the consumer's handling of missing points.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *args,
        frequency: int = 60,
        radius_fraction: float = 0.25,
        speed: float = 0.1,
        dropout_rate: float = 0.0,
        seed: Optional[int] = None,
        **kwargs,
    ):
        """
        Initializes the DummyGazeSource.

        Args:
            width: Viewport width in pixels.
            height: Viewport height in pixels.
            frequency: The frequency in Hz to emit gaze data.
            radius_fraction: Circle radius relative to the smaller viewport side.
            speed: The speed of the gaze point's movement along the circle
                   (in revolutions per second).
            dropout_rate: Fraction of frames emitted as tracking loss.
            seed: Seed for the dropout generator.
        """
        super().__init__(*args, **kwargs)
        if frequency <= 0:
            raise ValueError("Frequency must be positive.")

        self._frequency = frequency
        self._interval_s = 1.0 / self._frequency
        self._radius = min(width, height) * radius_fraction
        self._center_x, self._center_y = width / 2, height / 2
        self._speed = speed  # Revolutions per second
        self._dropout_rate = dropout_rate
        self._rng = random.Random(seed)

        logger.info(
            f"DummyGazeSource initialized to run at {self._frequency} Hz on {width}x{height}."
        )

    async def run(self) -> None:
        """
        Main execution loop for the dummy source.

        Generates and queues samples at the configured frequency until the
        stop event is set.
        """
        start_time = time.monotonic()
        frame_counter = 0

        logger.info("Starting dummy gaze data stream...")
        try:
            while not self._stop_event.is_set():
                # --- Calculate precise timing for this frame ---
                target_time = start_time + (frame_counter * self._interval_s)

                now = time.monotonic()
                if self._rng.random() < self._dropout_rate:
                    # Face lost for this frame
                    await self._output_queue.put(None)
                else:
                    angle = (now - start_time) * self._speed * 2 * math.pi
                    await self._output_queue.put(Sample(
                        x=self._center_x + self._radius * math.cos(angle),
                        y=self._center_y + self._radius * math.sin(angle),
                        timestamp=now,
                    ))

                # Sleep until the next frame's target time
                sleep_duration = target_time + self._interval_s - time.monotonic()
                if sleep_duration > 0:
                    await asyncio.sleep(sleep_duration)
                else:
                    await asyncio.sleep(0)

                frame_counter += 1

        except asyncio.CancelledError:
            logger.info("Dummy source run task was cancelled.")
            raise
        finally:
            logger.info("DummyGazeSource has stopped.")
