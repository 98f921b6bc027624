import time
from enum import Enum, auto
from typing import Callable, Optional

from ..models import BinKey


class SpotState(Enum):
    IDLE = auto() # No bin is being looked at.
    ACTIVE = auto() # A bin received a sample within the gaze timeout.


class ActiveSpotTracker:
    """
    Remembers which bin most recently received a sample.

    Any ingest makes the tracker ACTIVE on that bin. Only a decay tick can
    move it back to IDLE, and only once no sample has arrived for longer than
    `timeout_s`.
    """

    def __init__(self, timeout_s: float = 0.2, clock: Callable[[], float] = time.monotonic):
        self._timeout_s = timeout_s
        self._clock = clock
        self._key: Optional[BinKey] = None
        self._last_sample_at: Optional[float] = None

    @property
    def state(self) -> SpotState:
        return SpotState.IDLE if self._key is None else SpotState.ACTIVE

    @property
    def key(self) -> Optional[BinKey]:
        return self._key

    @property
    def last_sample_at(self) -> Optional[float]:
        return self._last_sample_at

    def mark(self, key: BinKey) -> None:
        self._key = key
        self._last_sample_at = self._clock()

    def expire(self) -> bool:
        """
        Releases the active spot if the last sample is older than the timeout.
        Returns True when a release happened.
        """
        if self._key is None or self._last_sample_at is None:
            return False
        if self._clock() - self._last_sample_at > self._timeout_s:
            self._key = None
            return True
        return False

    def reset(self) -> None:
        self._key = None
        self._last_sample_at = None
