from abc import ABC, abstractmethod
from asyncio import Queue, Event
from typing import Optional, Union, final

from ..models import Sample


class EndOfStream:
    """Sentinel queued after the last sample so consumers can finish draining."""
    __slots__ = ()

    def __repr__(self) -> str:
        return "<EndOfStream>"

END_OF_STREAM = EndOfStream()

QueueItem = Union[Sample, None, EndOfStream]


class GazeSource(ABC):
    """
    Abstract Base Class for all gaze data sources.

    A GazeSource is a runnable component that acquires gaze points from a
    specific origin (an estimator or a simulation) and puts `Sample`
    objects into an output queue. A `None` item marks a momentary tracking
    loss; consumers skip it rather than treating it as a point.
    """

    def __init__(self, output_queue: Optional[Queue[QueueItem]] = None, stop_event: Optional[Event] = None):
        self._output_queue: Queue[QueueItem] = output_queue if output_queue is not None else Queue()
        self._stop_event = stop_event if stop_event is not None else Event()

    @property
    def output_queue(self) -> Queue[QueueItem]:
        return self._output_queue

    @abstractmethod
    async def run(self) -> None:
        """
        Starts the data acquisition process.

        This method should run continuously, acquiring data and placing it
        into the output queue until the `stop_event` is set. It must be
        implemented by all concrete subclasses.
        """
        raise NotImplementedError

    @final
    async def stop(self) -> None:
        """
        Signals the source to stop acquiring data.

        This is a final method and should not be overridden. Subclasses can
        perform cleanup in their 'run' method's finally block.
        """
        self._stop_event.set()
