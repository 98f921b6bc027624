import json

import pytest

from gaze_heatmap.analysis import analyze_regions
from gaze_heatmap.models import HeatPoint, RenderFrame, Snapshot
from gaze_heatmap.sinks import SnapshotWriter, ZMQRenderSurface, decode_frame, encode_frame

from conftest import samples_at


def test_frame_encoding_layout():
    frame = RenderFrame(max=2.5, data=(HeatPoint(10.0, 20.0, 1.5), HeatPoint(30.0, 40.0, 0.25)))
    payload = encode_frame(frame)

    assert len(payload) == 12 + 2 * 12
    max_value, points = decode_frame(payload)
    assert max_value == 2.5
    assert points == [(10.0, 20.0, 1.5), (30.0, 40.0, 0.25)]


def test_empty_frame_encoding():
    assert decode_frame(encode_frame(RenderFrame(max=1.0))) == (1.0, [])


async def test_zmq_surface_publishes_frames():
    surface = ZMQRenderSurface(host="inproc://heatmap-test")
    await surface.start()
    try:
        await surface.repaint()
        assert surface.frames_sent == 0

        await surface.set_data(RenderFrame(max=1.0, data=(HeatPoint(1.0, 2.0, 1.0),)))
        await surface.repaint()
        assert surface.frames_sent == 1
    finally:
        await surface.close()


async def test_snapshot_writer_round_trip(tmp_path):
    samples = tuple(samples_at(450, 450, 5, t0=10.0))
    snapshot = Snapshot(samples=samples, frame=RenderFrame(max=2.2))
    analysis = analyze_regions(samples, 900, 900)

    writer = SnapshotWriter(tmp_path, radius=40)
    path = await writer.write(snapshot, analysis)

    table = SnapshotWriter.read(path)
    assert table.column_names == ["timestamp", "monotonic_s", "x", "y", "bin_x", "bin_y"]
    assert table.column("monotonic_s").to_pylist() == pytest.approx([s.timestamp for s in samples])
    assert table.column("bin_y").to_pylist() == [440.0] * 5

    insights = json.loads(writer.paths_for(snapshot)[1].read_text(encoding="utf-8"))
    assert insights["total_points"] == 5
    assert insights["regions"]["middle_center"]["count"] == 5


async def test_snapshot_writer_reports_failure(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")
    writer = SnapshotWriter(blocker / "sub")

    snapshot = Snapshot(samples=tuple(samples_at(1, 1, 1)), frame=RenderFrame(max=1.0))
    assert await writer.write(snapshot) is None
