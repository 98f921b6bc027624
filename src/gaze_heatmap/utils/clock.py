import time
from typing import Callable

class TimeProbe:
    """
    Pairs a reading of a monotonic clock with a reading of the wall clock so
    monotonic timestamps can be mapped to UTC.
    """
    __slots__ = ("latency", "offset")

    def __init__(self, now_s_func: Callable[[], float] = time.monotonic):
        before: int = int(now_s_func() * 1_000_000_000)
        utc: int = time.time_ns()
        after: int = int(now_s_func() * 1_000_000_000)

        # Midpoint of the two monotonic readings, in ns
        monotonic_at_utc: int = (before + after) // 2

        # Latency in ns
        self.latency: int = after - before
        # Offset is wall ns - monotonic ns
        self.offset: int = utc - monotonic_at_utc

    def to_utc_ms(self, monotonic_s: float) -> int:
        return (int(monotonic_s * 1_000_000_000) + self.offset) // 1_000_000

    @classmethod
    def best_of(cls, n: int = 5, now_s_func: Callable[[], float] = time.monotonic) -> "TimeProbe":
        """Takes `n` probes and keeps the one with the lowest latency."""
        return min(cls(now_s_func) for _ in range(max(n, 1)))

    # Sort by latency, lower is better
    def __lt__(self, other: "TimeProbe") -> bool:
        return self.latency < other.latency

    def __eq__(self, other: "TimeProbe") -> bool:
        return self.latency == other.latency
