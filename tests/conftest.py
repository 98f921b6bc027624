import asyncio
from typing import Iterable, Optional

import pytest

from gaze_heatmap.acquisition import GazeSource
from gaze_heatmap.configs import AppSettings
from gaze_heatmap.models import RenderFrame, Sample
from gaze_heatmap.sinks import RenderSurface


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


class ListSource(GazeSource):
    """Queues a fixed list of items, then idles until stopped."""

    def __init__(self, items: Iterable[Optional[Sample]]):
        super().__init__()
        self.items = list(items)

    async def run(self) -> None:
        for item in self.items:
            self._output_queue.put_nowait(item)
        await self._stop_event.wait()


class RecordingSurface(RenderSurface):
    def __init__(self):
        self.frames: list[RenderFrame] = []
        self.repaints = 0
        self.started = False
        self.closed = False

    async def start(self) -> None:
        self.started = True

    async def set_data(self, frame: RenderFrame) -> None:
        self.frames.append(frame)

    async def repaint(self) -> None:
        self.repaints += 1

    async def close(self) -> None:
        self.closed = True


async def wait_until(predicate, timeout: float = 1.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.005)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(start=100.0)


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    return AppSettings(
        heatmap={"decay_interval_s": 10.0},
        render={"interval_s": 0.01},
        viewport={"width_px": 900, "height_px": 900},
        export={"enabled": True, "output_dir": tmp_path / "recordings"},
        _env_file=None,
    )


def samples_at(x: float, y: float, n: int, t0: float = 0.0) -> list[Sample]:
    return [Sample(x, y, t0 + i * 0.02) for i in range(n)]
