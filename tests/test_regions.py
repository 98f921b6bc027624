import pytest

from gaze_heatmap.analysis import REGION_NAMES, RegionAnalyzer, analyze_regions, find_hotspots
from gaze_heatmap.analysis.regions import percent
from gaze_heatmap.models import Sample


def pts(*coords):
    return [Sample(x, y, 0.0) for x, y in coords]


def titles(result):
    return [i.title for i in result.insights]


@pytest.mark.parametrize("points", [None, []])
def test_no_points_means_no_analysis(points):
    assert analyze_regions(points, 900, 900) is None


def test_one_point_per_region():
    centers = [(150 + 300 * col, 150 + 300 * row) for row in range(3) for col in range(3)]
    result = analyze_regions(pts(*centers), 900, 900)

    assert result.total_points == 9
    assert list(result.regions) == list(REGION_NAMES)
    for region in result.regions.values():
        assert region.count == 1
        assert region.percentage == 11
    assert "Primary Attention Hotspot" not in titles(result)
    assert "Low Engagement Area" not in titles(result)


def test_grid_counts_sum_to_total():
    coords = [(15 + 30 * i, 15 + 30 * j) for i in range(10) for j in range(10)]
    result = analyze_regions(pts(*coords), 300, 300)

    counts = {name: r.count for name, r in result.regions.items()}
    assert sum(counts.values()) == 100
    assert counts["top_left"] == 9
    assert counts["top_center"] == 12
    assert counts["middle_center"] == 16
    assert abs(sum(r.percentage for r in result.regions.values()) - 100) <= 9


def test_bounds_are_half_open_except_viewport_edge():
    result = analyze_regions(pts((300, 300), (900, 900), (0, 0), (899.9, 0)), 900, 900)

    assert result.regions["middle_center"].count == 1
    assert result.regions["bottom_right"].count == 1
    assert result.regions["top_left"].count == 1
    assert result.regions["top_right"].count == 1


def test_points_outside_viewport_count_only_toward_total():
    result = analyze_regions(pts((-5, 10), (450, 450)), 900, 900)

    assert result.total_points == 2
    assert sum(r.count for r in result.regions.values()) == 1
    assert result.regions["middle_center"].percentage == 50


def test_hottest_defaults_to_center_when_no_point_is_inside():
    result = analyze_regions(pts((-10, -10), (950, 20)), 900, 900)

    assert result.metrics.hottest_region == "middle_center"
    assert result.metrics.coldest_region == "top_left"
    assert "Primary hotspot: Middle center (0%)" in result.summary
    assert all(i.type != "primary" for i in result.insights)


def test_center_stare():
    result = analyze_regions(pts(*[(450, 450)] * 20), 900, 900)

    assert result.metrics.hottest_region == "middle_center"
    assert result.metrics.coldest_region == "top_left"
    assert result.metrics.center_periphery == {"center": 100, "periphery": 0}
    assert result.metrics.quadrants == {"top_left": 100, "top_right": 100, "bottom_left": 100, "bottom_right": 100}
    assert result.metrics.top_bottom == {"top": 100, "bottom": 0}
    assert result.metrics.left_right == {"left": 0, "right": 0}

    found = titles(result)
    assert found[0] == "Primary Attention Hotspot"
    assert "Center-Focused Pattern" in found
    assert "Top-Heavy Attention" in found
    assert "Dominant Quadrant" in found
    assert "Top Gaze Hotspots" in found
    assert found.count("Low Engagement Area") == 8
    assert not any("Side Dominance" in t for t in found)

    dominant = next(i for i in result.insights if i.title == "Dominant Quadrant")
    assert dominant.data == {"quadrant": "top_left", "percentage": 100}
    assert result.summary == (
        "Analyzed 20 gaze points. Primary hotspot: Middle center (100%). Top region: Top left (100%)."
    )


def test_left_side_dominance():
    result = analyze_regions(pts(*[(100, 450)] * 7, (800, 450)), 900, 900)

    insight = next(i for i in result.insights if i.title == "Left Side Dominance")
    assert insight.description == "88% left side, 13% right side."
    assert insight.data == {"left": 88, "right": 13}


def test_bottom_heavy_is_not_top_heavy():
    result = analyze_regions(pts(*[(450, 850)] * 5), 900, 900)
    assert result.metrics.top_bottom == {"top": 0, "bottom": 100}
    assert "Top-Heavy Attention" not in titles(result)


def test_hotspots_rank_by_count_then_first_seen():
    points = pts((10, 10), (120, 10), (120, 20), (260, 260), (260, 270), (499, 0))
    hotspots = find_hotspots(points, cell_size=50, top_n=3)

    assert [(h.x, h.y, h.count) for h in hotspots] == [(100, 0, 2), (250, 250, 2), (0, 0, 1)]
    assert hotspots[0].percentage == 33


def test_analyzer_uses_configured_grid():
    analyzer = RegionAnalyzer(cell_size=100, top_n=1)
    result = analyzer.analyze(pts((10, 10), (60, 60)), 900, 900)
    assert len(result.metrics.hotspots) == 1
    assert result.metrics.hotspots[0].count == 2


def test_degenerate_viewport():
    assert analyze_regions(pts((1, 1)), 0, 900) is None


def test_percent_rounds_half_up():
    assert percent(1, 8) == 13
    assert percent(1, 3) == 33
    assert percent(2, 3) == 67
