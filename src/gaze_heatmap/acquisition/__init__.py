from .base import GazeSource, EndOfStream, END_OF_STREAM, QueueItem
from .dummy import DummyGazeSource
from .callback import CallbackGazeSource

__all__ = ["GazeSource", "EndOfStream", "END_OF_STREAM", "QueueItem", "DummyGazeSource", "CallbackGazeSource"]
