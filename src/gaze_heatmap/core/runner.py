import asyncio
import logging
from typing import Optional, Sequence

from .scheduler import PeriodicTask
from ..acquisition import END_OF_STREAM, GazeSource
from ..heatmap import AccumulationStore
from ..models import Sample
from ..sinks import RenderSurface
from ..utils.logging import ThrottledLogger

logger = logging.getLogger(__name__)

class HeatmapRunner:
    """
    Orchestrates the flow Source -> AccumulationStore -> RenderSurfaces.
    Created fresh for every tracking run.

    Ingest is event driven (one store update per sample). Decay and render
    are time driven and run as periodic tasks on the same loop, so the store
    is never touched from two places at once.
    """
    def __init__(
        self,
        source: GazeSource,
        store: AccumulationStore,
        surfaces: Sequence[RenderSurface] = (),
        decay_interval_s: float = 10.0,
        render_interval_s: float = 0.05,
    ):
        self.source = source
        self.store = store
        self.surfaces = list(surfaces)
        self.samples: list[Sample] = []
        self.tracking_losses = 0
        self.dropped = 0

        self._running = False
        self._decay = PeriodicTask("decay-scheduler", decay_interval_s, self.store.decay)
        self._render = PeriodicTask("render-sampler", render_interval_s, self.render)
        self._loop_task: Optional[asyncio.Task] = None
        self._source_task: Optional[asyncio.Task] = None
        self._drop_logger = ThrottledLogger(logger, interval_sec=5.0, level=logging.DEBUG)

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        if self._running:
            return

        logger.info("Starting HeatmapRunner...")
        self._running = True

        try:
            # Start surfaces
            await asyncio.gather(*(s.start() for s in self.surfaces))

            # Start data loop before the source so nothing waits on a full queue
            self._loop_task = asyncio.create_task(self._process_loop())
            self._source_task = asyncio.create_task(self.source.run())

            # Start timers
            await self._decay.start()
            await self._render.start()
        except Exception:
            logger.exception("HeatmapRunner failed to start, unwinding.")
            await self.stop()
            raise

        logger.info("HeatmapRunner active.")

    async def stop(self) -> None:
        """
        Stops timers first, then the source, then drains the ingest loop.
        When this returns the store and `samples` are no longer mutated.
        """
        if not self._running:
            return

        logger.info("Stopping HeatmapRunner...")
        self._running = False

        # Stop timers
        await self._decay.stop()
        await self._render.stop()

        # Stop source
        await self.source.stop()
        if self._source_task:
            try:
                await self._source_task
            except asyncio.CancelledError:
                pass
            except Exception:
                logger.exception("Gaze source ended with an error.")
            self._source_task = None

        # Stop data loop once everything already queued is ingested
        if self._loop_task:
            self.source.output_queue.put_nowait(END_OF_STREAM)
            await self._loop_task
            self._loop_task = None

        # Close surfaces
        results = await asyncio.gather(*(s.close() for s in self.surfaces), return_exceptions=True)
        for surface, result in zip(self.surfaces, results):
            if isinstance(result, Exception):
                logger.error("Failed to close %s: %s", type(surface).__name__, result)

        logger.info(
            "HeatmapRunner stopped. Samples: %d, tracking losses: %d, dropped: %d, bins: %d.",
            len(self.samples), self.tracking_losses, self.dropped, len(self.store),
        )

    def ingest(self, item: Optional[Sample]) -> bool:
        """
        Validates one queue item and feeds it to the store.
        Returns True if it was accumulated.
        """
        if item is None:
            self.tracking_losses += 1
            return False
        if not item.is_valid():
            self.dropped += 1
            self._drop_logger.log("Dropped sample with invalid coordinates: %r", item)
            return False

        self.samples.append(item)
        self.store.ingest(item)
        return True

    async def render(self) -> None:
        """Hands the current frame to every surface and repaints it."""
        frame = self.store.frame()
        for surface in self.surfaces:
            try:
                await surface.set_data(frame)
                await surface.repaint()
            except Exception:
                logger.exception("Render surface %s failed.", type(surface).__name__)

    async def _process_loop(self) -> None:
        """Hot loop."""
        queue = self.source.output_queue

        try:
            while True:
                item = await queue.get()

                if item is END_OF_STREAM:
                    break

                self.ingest(item)

        except asyncio.CancelledError:
            logger.info("Runner loop cancelled unexpectedly.")

    async def __aenter__(self) -> "HeatmapRunner":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
