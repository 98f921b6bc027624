# src/gaze_heatmap/sinks/base.py

from abc import ABC, abstractmethod

from ..models import RenderFrame


class RenderSurface(ABC):
    """
    Abstract Base Class for anything that draws the heatmap.

    A surface is a pure sink: the render sampler hands it a frame with
    `set_data()` and then asks it to `repaint()`. Nothing flows back into
    the engine.
    """

    async def start(self) -> None:
        """Acquire resources before the first frame. Optional."""

    @abstractmethod
    async def set_data(self, frame: RenderFrame) -> None:
        """Replaces the surface's data with `frame`."""
        raise NotImplementedError

    @abstractmethod
    async def repaint(self) -> None:
        """Redraws (or republishes) the current data."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release resources. Optional."""
