from .clock import TimeProbe
from .logging import ThrottledLogger

__all__ = ["TimeProbe", "ThrottledLogger"]
