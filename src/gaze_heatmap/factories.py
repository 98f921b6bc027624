from typing import List, Optional

from .acquisition import CallbackGazeSource, DummyGazeSource, GazeSource
from .configs import AppSettings
from .core.protocols import ViewportProvider
from .sinks import RenderSurface, SnapshotWriter, ZMQRenderSurface
from .viewport import FixedViewport, ScreenViewport

def create_viewport(settings: AppSettings) -> ViewportProvider:
    fixed = FixedViewport(settings.viewport.width_px, settings.viewport.height_px)
    if settings.viewport.use_screen:
        return ScreenViewport(fallback=fixed)
    return fixed

def create_source(settings: AppSettings, viewport: ViewportProvider) -> GazeSource:
    """
    Creates a fresh gaze source for a tracking run.
    """
    if settings.use_dummy_mode:
        width, height = viewport.size()
        return DummyGazeSource(
            width,
            height,
            frequency=settings.dummy.frequency_hz,
            radius_fraction=settings.dummy.radius_fraction,
            speed=settings.dummy.speed_rps,
            dropout_rate=settings.dummy.dropout_rate,
        )
    return CallbackGazeSource()

def create_render_surfaces(settings: AppSettings) -> List[RenderSurface]:
    """
    Creates fresh surface instances for a tracking run.
    """
    surfaces = []

    # ZMQ
    if settings.zmq.enabled:
        surfaces.append(ZMQRenderSurface(host=settings.zmq.host, send_hwm=settings.zmq.send_hwm))

    return surfaces

def create_snapshot_writer(settings: AppSettings) -> Optional[SnapshotWriter]:
    if not settings.export.enabled:
        return None
    return SnapshotWriter(
        output_dir=settings.export.output_dir,
        radius=settings.heatmap.proximity_radius_px,
    )
