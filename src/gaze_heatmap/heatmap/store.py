import logging
import time
from typing import Callable, Iterator, Optional

from ..models import BinKey, HeatPoint, IntensityRecord, RenderFrame, Sample
from .active import ActiveSpotTracker
from .binner import SpatialBinner

logger = logging.getLogger(__name__)


class AccumulationStore:
    """
    Decaying spatial density map of gaze samples.

    Each sample is binned by proximity radius; a new bin starts at 1.0 and
    every further sample in it adds `accumulation_rate` and moves the bin's
    representative point to the sample. A decay tick multiplies every bin
    except the active one by `decay_rate` and evicts bins that drop below
    `min_value`.

    The store is owned by one session. It is not thread-safe: ingest, decay
    and snapshots must all run on the same event loop.
    """

    def __init__(
        self,
        radius: float = 40.0,
        accumulation_rate: float = 0.3,
        decay_rate: float = 0.9,
        min_value: float = 0.1,
        gaze_timeout_s: float = 0.2,
        clock: Callable[[], float] = time.monotonic,
    ):
        if not 0 < decay_rate <= 1:
            raise ValueError("decay_rate must be in (0, 1].")
        if accumulation_rate <= 0:
            raise ValueError("accumulation_rate must be positive.")

        self.binner = SpatialBinner(radius)
        self.accumulation_rate = accumulation_rate
        self.decay_rate = decay_rate
        self.min_value = min_value
        self.tracker = ActiveSpotTracker(gaze_timeout_s, clock)

        self._records: dict[BinKey, IntensityRecord] = {}
        self._global_max = 0.0
        self._ticks = 0

    @classmethod
    def from_settings(cls, settings, clock: Callable[[], float] = time.monotonic) -> "AccumulationStore":
        """Builds a store from a `HeatmapSettings` instance."""
        return cls(
            radius=settings.proximity_radius_px,
            accumulation_rate=settings.accumulation_rate,
            decay_rate=settings.decay_rate,
            min_value=settings.min_value,
            gaze_timeout_s=settings.gaze_timeout_s,
            clock=clock,
        )

    # --- Read access ---

    @property
    def global_max(self) -> float:
        return self._global_max

    @property
    def active_key(self) -> Optional[BinKey]:
        return self.tracker.key

    @property
    def ticks(self) -> int:
        return self._ticks

    def get(self, key: BinKey) -> Optional[IntensityRecord]:
        return self._records.get(key)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __iter__(self) -> Iterator[BinKey]:
        return iter(self._records)

    # --- Mutation ---

    def ingest(self, sample: Sample) -> IntensityRecord:
        """Adds one validated sample to its bin and marks the bin active."""
        key = self.binner(sample.x, sample.y)
        record = self._records.get(key)

        if record is None:
            record = IntensityRecord(sample.x, sample.y, 1.0)
            self._records[key] = record
        else:
            record.value += self.accumulation_rate
            record.x = sample.x
            record.y = sample.y

        if record.value > self._global_max:
            self._global_max = record.value

        self.tracker.mark(key)
        return record

    def decay(self) -> int:
        """
        Runs one decay tick. Returns the number of evicted bins.
        """
        self._ticks += 1
        if self.tracker.expire():
            logger.debug("Active spot released after gaze timeout.")

        active = self.tracker.key
        evicted = []
        for key, record in self._records.items():
            if key == active:
                continue
            record.value *= self.decay_rate
            if record.value < self.min_value:
                evicted.append(key)

        for key in evicted:
            del self._records[key]

        if evicted:
            logger.debug("Decay tick %d evicted %d bins, %d remain.", self._ticks, len(evicted), len(self._records))
        return len(evicted)

    def frame(self) -> RenderFrame:
        """Read-only projection for render surfaces. `max` is never below 1."""
        return RenderFrame(
            max=max(self._global_max, 1.0),
            data=tuple(HeatPoint(r.x, r.y, r.value) for r in self._records.values()),
        )

    def reset(self) -> None:
        """Clears every bin, the active spot and the global maximum."""
        self._records.clear()
        self._global_max = 0.0
        self._ticks = 0
        self.tracker.reset()
        logger.info("Accumulation store reset.")
