import pytest

from gaze_heatmap.heatmap import AccumulationStore
from gaze_heatmap.models import Sample

from conftest import samples_at


@pytest.fixture
def store(clock):
    return AccumulationStore(clock=clock)


def test_first_sample_creates_bin_with_unit_value(store):
    record = store.ingest(Sample(101, 99, 0.0))
    assert len(store) == 1
    assert record.value == 1.0
    assert (record.x, record.y) == (101, 99)
    assert store.global_max == 1.0


def test_repeated_samples_accumulate_in_one_bin(store):
    for sample in samples_at(500, 500, 100):
        store.ingest(sample)

    assert len(store) == 1
    record = store.get((520, 520))
    assert record.value == pytest.approx(30.7)
    assert store.global_max == pytest.approx(30.7)


def test_samples_within_radius_merge_and_last_point_wins(store):
    points = [(505, 505), (515, 510), (510, 520), (520, 518)]
    for i, (x, y) in enumerate(points):
        store.ingest(Sample(x, y, i * 0.01))

    assert len(store) == 1
    record = store.get((520, 520))
    assert record.value == pytest.approx(1 + 0.3 * (len(points) - 1))
    assert (record.x, record.y) == (520, 518)


def test_distant_samples_get_separate_bins(store):
    store.ingest(Sample(120, 120, 0.0))
    store.ingest(Sample(400, 120, 0.1))
    assert len(store) == 2
    assert store.active_key == (400, 120)


def test_decay_multiplies_inactive_bins(store, clock):
    store.ingest(Sample(200, 200, 0.0))
    clock.advance(1.0)

    for _ in range(10):
        store.decay()

    record = store.get((200, 200))
    assert record is not None
    assert record.value == pytest.approx(0.9 ** 10)
    assert record.value == pytest.approx(0.3487, abs=1e-4)


def test_decay_evicts_bins_below_min_value(store, clock):
    store.ingest(Sample(200, 200, 0.0))
    clock.advance(1.0)

    for _ in range(21):
        store.decay()
    assert (200, 200) in store

    assert store.decay() == 1
    assert (200, 200) not in store
    assert len(store) == 0


def test_active_bin_is_exempt_from_decay(store, clock):
    store.ingest(Sample(300, 300, 0.0))
    store.ingest(Sample(600, 600, 0.0))

    clock.advance(0.1)
    store.decay()

    assert store.get((600, 600)).value == 1.0
    assert store.get((320, 320)).value == pytest.approx(0.9)


def test_active_bin_decays_once_gaze_times_out(store, clock):
    store.ingest(Sample(300, 300, 0.0))

    # Samples keep arriving within the timeout: never decayed
    for _ in range(5):
        clock.advance(0.15)
        store.ingest(Sample(300, 300, 0.0))
        store.decay()
    assert store.get((320, 320)).value == pytest.approx(1 + 5 * 0.3)

    clock.advance(0.25)
    store.decay()
    assert store.active_key is None
    assert store.get((320, 320)).value == pytest.approx((1 + 5 * 0.3) * 0.9)


def test_global_max_survives_decay(store, clock):
    for sample in samples_at(50, 50, 11):
        store.ingest(sample)
    peak = store.global_max
    clock.advance(1.0)

    for _ in range(50):
        store.decay()

    assert len(store) == 0
    assert store.global_max == peak


def test_frame_floors_max_at_one(store):
    frame = store.frame()
    assert frame.max == 1.0
    assert frame.data == ()

    store.ingest(Sample(10, 10, 0.0))
    assert store.frame().max == 1.0


def test_frame_is_a_copy(store):
    for sample in samples_at(500, 500, 4):
        store.ingest(sample)

    frame = store.frame()
    store.ingest(Sample(500, 500, 1.0))

    assert frame.max == pytest.approx(1.9)
    assert frame.data[0].value == pytest.approx(1.9)
    assert store.get((520, 520)).value == pytest.approx(2.2)


def test_reset_clears_everything(store):
    for sample in samples_at(500, 500, 4):
        store.ingest(sample)
    store.reset()

    assert len(store) == 0
    assert store.global_max == 0.0
    assert store.active_key is None
    assert store.frame().max == 1.0


def test_invalid_rates_are_rejected():
    with pytest.raises(ValueError):
        AccumulationStore(decay_rate=1.5)
    with pytest.raises(ValueError):
        AccumulationStore(accumulation_rate=0)
