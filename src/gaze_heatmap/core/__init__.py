from .state import SessionState, can_transition
from .protocols import ViewportProvider
from .scheduler import PeriodicTask
from .runner import HeatmapRunner

__all__ = ["SessionState", "can_transition", "ViewportProvider", "PeriodicTask", "HeatmapRunner"]
