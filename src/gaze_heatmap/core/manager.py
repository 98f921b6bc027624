import asyncio
import logging
import time
from pathlib import Path
from typing import Callable, List, Optional

from .protocols import ViewportProvider
from .runner import HeatmapRunner
from .state import SessionState, can_transition
from ..acquisition import GazeSource
from ..analysis import AnalysisResult, RegionAnalyzer
from ..configs import AppSettings
from ..factories import create_render_surfaces, create_snapshot_writer, create_source, create_viewport
from ..heatmap import AccumulationStore
from ..models import Snapshot
from ..sinks import RenderSurface


logger = logging.getLogger(__name__)

class SessionManager:
    """
    The Headless Core of the heatmap application.

    Owns the session state machine, the accumulation store and the terminal
    snapshot, so a UI (or the CLI) only has to call actions and read state.
    Invalid actions are logged and rejected instead of raised.
    """
    def __init__(
        self,
        settings: AppSettings,
        viewport: Optional[ViewportProvider] = None,
        source_factory: Optional[Callable[[], GazeSource]] = None,
        surface_factory: Optional[Callable[[], List[RenderSurface]]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = settings
        self.viewport: ViewportProvider = viewport or create_viewport(settings)
        self._source_factory = source_factory or (lambda: create_source(settings, self.viewport))
        self._surface_factory = surface_factory or (lambda: create_render_surfaces(settings))
        self._clock = clock

        self.analyzer = RegionAnalyzer(
            cell_size=settings.analysis.hotspot_cell_px,
            top_n=settings.analysis.top_hotspots,
        )
        self.writer = create_snapshot_writer(settings)

        self.state: SessionState = SessionState.IDLE
        self.store: Optional[AccumulationStore] = None
        self.runner: Optional[HeatmapRunner] = None
        self.snapshot: Optional[Snapshot] = None
        # Held across every action so overlapping calls run one after another.
        self._lock = asyncio.Lock()

    @property
    def is_tracking(self) -> bool:
        return self.state is SessionState.TRACKING

    @property
    def source(self) -> Optional[GazeSource]:
        """The live source, e.g. to push predictions into a callback source."""
        return self.runner.source if self.runner else None

    def _transition(self, target: SessionState) -> None:
        logger.info("Session state: %s -> %s", self.state.name, target.name)
        self.state = target

    # --- Actions ---

    async def begin_calibration(self) -> bool:
        async with self._lock:
            if not can_transition(self.state, SessionState.CALIBRATING):
                logger.warning("Cannot calibrate while %s.", self.state.name)
                return False
            self._transition(SessionState.CALIBRATING)
            return True

    async def start_tracking(self) -> bool:
        """
        Logic: Prepares store, source, surfaces and runner, then starts tracking.
        Returns: True if tracking started successfully.
        """
        async with self._lock:
            allowed = can_transition(self.state, SessionState.TRACKING) or (
                self.state is SessionState.IDLE and not self.settings.calibration.required
            )
            if not allowed:
                logger.warning("Start tracking aborted: not allowed while %s.", self.state.name)
                return False

            if self.store is None:
                self.store = AccumulationStore.from_settings(self.settings.heatmap, clock=self._clock)
            else:
                self.store.reset()
            self.snapshot = None

            if not await self._start_runner():
                return False

            self._transition(SessionState.TRACKING)
            return True

    async def stop_tracking(self) -> Optional[Snapshot]:
        """
        Logic: Stops the runner and freezes its samples into a snapshot.
        Calling it again, also while the first call is still stopping,
        returns the same snapshot.
        """
        async with self._lock:
            if self.state is SessionState.REVIEWING:
                return self.snapshot
            if self.state is not SessionState.TRACKING:
                logger.warning("Stop tracking ignored: not tracking (%s).", self.state.name)
                return None

            runner, self.runner = self.runner, None
            try:
                await runner.stop()
            finally:
                self.snapshot = Snapshot(samples=tuple(runner.samples), frame=self.store.frame())
                self._transition(SessionState.REVIEWING)

            logger.info(f"Tracking stopped with {len(self.snapshot):,} samples in {len(self.store)} bins.")
            return self.snapshot

    async def reset(self) -> bool:
        """
        Logic: Discards all samples and bins and starts tracking again.
        """
        async with self._lock:
            if self.state not in (SessionState.TRACKING, SessionState.REVIEWING):
                logger.warning("Reset ignored while %s.", self.state.name)
                return False

            if self.runner:
                runner, self.runner = self.runner, None
                await runner.stop()

            self.store.reset()
            self.snapshot = None

            if not await self._start_runner():
                self._transition(SessionState.REVIEWING)
                return False

            self._transition(SessionState.TRACKING)
            return True

    def analyze(self) -> Optional[AnalysisResult]:
        """
        Logic: Runs the region analysis on the snapshot with the viewport
        size as it is right now.
        """
        if self.snapshot is None:
            logger.warning("Nothing to analyze: no snapshot taken.")
            return None
        width, height = self.viewport.size()
        return self.analyzer.analyze(self.snapshot.samples, width, height)

    async def export(self, analysis: Optional[AnalysisResult] = None) -> Optional[Path]:
        if self.writer is None or self.snapshot is None:
            return None
        if analysis is None:
            analysis = self.analyze()
        return await self.writer.write(self.snapshot, analysis)

    async def shutdown(self) -> None:
        """
        Logic: Stops anything still running and disposes the session.
        """
        async with self._lock:
            if self.runner:
                runner, self.runner = self.runner, None
                await runner.stop()
            self.store = None
            self.snapshot = None
            if self.state is not SessionState.IDLE:
                self._transition(SessionState.IDLE)

    async def _start_runner(self) -> bool:
        try:
            runner = HeatmapRunner(
                self._source_factory(),
                self.store,
                self._surface_factory(),
                decay_interval_s=self.settings.heatmap.decay_interval_s,
                render_interval_s=self.settings.render.interval_s,
            )
            await runner.start()
        except Exception:
            logger.exception("Failed to initialize tracking session")
            return False

        self.runner = runner
        return True

    async def __aenter__(self) -> "SessionManager":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.shutdown()
