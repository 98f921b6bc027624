import math
from dataclasses import dataclass, field
from datetime import datetime, timezone

BinKey = tuple[float, float]


@dataclass(slots=True, frozen=True)
class Sample:
    """
    A single raw gaze point in viewport pixels.

    `timestamp` is a monotonic time in seconds, as produced by the source.
    Samples are immutable so they can be shared between the live stream and
    a snapshot without copying.
    """
    x: float
    y: float
    timestamp: float

    def is_valid(self) -> bool:
        """True when both coordinates are finite numbers."""
        try:
            return math.isfinite(self.x) and math.isfinite(self.y)
        except TypeError:
            return False


@dataclass(slots=True)
class IntensityRecord:
    """
    Accumulated weight of one bin.

    x/y hold the last raw coordinates seen in the bin, not an average.
    """
    x: float
    y: float
    value: float = 1.0


@dataclass(slots=True, frozen=True)
class HeatPoint:
    x: float
    y: float
    value: float


@dataclass(slots=True, frozen=True)
class RenderFrame:
    """Display-ready projection of the store handed to render surfaces."""
    max: float
    data: tuple[HeatPoint, ...] = ()


@dataclass(slots=True, frozen=True)
class Snapshot:
    """
    Immutable copy of the raw samples taken when tracking stops, together
    with the last render frame so the heatmap can be redrawn for review.
    """
    samples: tuple[Sample, ...]
    frame: RenderFrame
    taken_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __len__(self) -> int:
        return len(self.samples)
