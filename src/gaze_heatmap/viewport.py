import logging

from screeninfo import get_monitors

logger = logging.getLogger(__name__)


class FixedViewport:
    """Viewport with a size known up front (configuration, tests)."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height

    def size(self) -> tuple[int, int]:
        return self.width, self.height


class ScreenViewport:
    """
    Reads the primary monitor's resolution each time it is asked, so a
    resolution change between tracking and analysis is picked up.
    """

    def __init__(self, fallback: FixedViewport):
        self._fallback = fallback

    def size(self) -> tuple[int, int]:
        try:
            monitors = get_monitors()
        except Exception as e:
            logger.warning(f"Monitor query failed, using fallback viewport: {e}")
            return self._fallback.size()

        if not monitors:
            return self._fallback.size()

        primary = next((m for m in monitors if m.is_primary), monitors[0])
        return primary.width, primary.height
