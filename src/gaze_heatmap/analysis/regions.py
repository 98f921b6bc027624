import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Sequence

logger = logging.getLogger(__name__)

# Declaration order doubles as the tie-break order for hottest/coldest.
REGION_NAMES: tuple[str, ...] = (
    "top_left", "top_center", "top_right",
    "middle_left", "middle_center", "middle_right",
    "bottom_left", "bottom_center", "bottom_right",
)

PRIMARY_HOTSPOT_SHARE = 0.15
DOMINANT_QUADRANT_PCT = 30
CENTER_FOCUS_PCT = 40
TOP_HEAVY_PCT = 60
SIDE_DOMINANCE_PCT = 15
HOTSPOT_PCT = 5
LOW_ENGAGEMENT_SHARE = 0.05


class Point(Protocol):
    x: float
    y: float


@dataclass(slots=True)
class RegionStats:
    x0: float
    x1: float
    y0: float
    y1: float
    count: int = 0
    percentage: int = 0


@dataclass(slots=True, frozen=True)
class Hotspot:
    x: int
    y: int
    count: int
    percentage: int


@dataclass(slots=True, frozen=True)
class Insight:
    type: str  # "primary", "pattern" or "warning"
    title: str
    description: str
    recommendation: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class AnalysisMetrics:
    hottest_region: str
    coldest_region: str
    quadrants: dict[str, int]
    top_bottom: dict[str, int]
    left_right: dict[str, int]
    center_periphery: dict[str, int]
    hotspots: list[Hotspot]


@dataclass(slots=True, frozen=True)
class AnalysisResult:
    total_points: int
    regions: dict[str, RegionStats]
    insights: list[Insight]
    summary: str
    metrics: AnalysisMetrics


def percent(count: float, total: float) -> int:
    """Share of `total` as a whole percentage, rounding halves up."""
    return math.floor(count / total * 100 + 0.5)


def display_name(region: str) -> str:
    """'middle_center' -> 'Middle center'."""
    return region.replace("_", " ").capitalize()


def _contains(region: RegionStats, x: float, y: float, width: float, height: float) -> bool:
    # Half-open on the right/bottom, closed at the viewport edge.
    in_x = region.x0 <= x < region.x1 or (region.x1 == width and x == width)
    in_y = region.y0 <= y < region.y1 or (region.y1 == height and y == height)
    return in_x and in_y


def build_regions(width: float, height: float) -> dict[str, RegionStats]:
    """Splits the viewport into a 3x3 grid of equal regions."""
    xs = (0.0, width / 3, width / 3 * 2, float(width))
    ys = (0.0, height / 3, height / 3 * 2, float(height))
    regions = {}
    for i, name in enumerate(REGION_NAMES):
        row, col = divmod(i, 3)
        regions[name] = RegionStats(xs[col], xs[col + 1], ys[row], ys[row + 1])
    return regions


def find_hotspots(points: Sequence[Point], cell_size: int = 50, top_n: int = 3) -> list[Hotspot]:
    """
    Ranks cells of a `cell_size` grid by how many points fall in them.
    Cells with equal counts keep the order in which they were first hit.
    """
    total = len(points)
    if not total:
        return []

    cells = Counter(
        (math.floor(p.x / cell_size) * cell_size, math.floor(p.y / cell_size) * cell_size)
        for p in points
    )
    return [
        Hotspot(x=cx, y=cy, count=count, percentage=percent(count, total))
        for (cx, cy), count in cells.most_common(top_n)
    ]


def analyze_regions(
    points: Optional[Sequence[Point]],
    width: float,
    height: float,
    cell_size: int = 50,
    top_n: int = 3,
) -> Optional[AnalysisResult]:
    """
    Summarises how gaze points are spread over the viewport.

    Points are counted into a 3x3 grid of regions and aggregated into
    quadrants, halves and center/periphery shares. A separate grid of
    `cell_size` pixels yields the `top_n` hotspots. Insights are emitted
    only where a share crosses its threshold, except for the region
    distribution which is always reported.

    Points outside the viewport count toward the total but toward no region.

    Returns None for empty input.
    """
    if not points:
        return None
    if width <= 0 or height <= 0:
        logger.warning("Cannot analyze gaze points on a %sx%s viewport.", width, height)
        return None

    total = len(points)
    regions = build_regions(width, height)

    for p in points:
        for region in regions.values():
            if _contains(region, p.x, p.y, width, height):
                region.count += 1
                break

    for region in regions.values():
        region.percentage = percent(region.count, total)

    # max/min return the first extreme in declaration order.
    # With nothing inside the viewport the hottest region defaults to the center.
    hottest = max(REGION_NAMES, key=lambda n: regions[n].count)
    if regions[hottest].count == 0:
        hottest = "middle_center"
    coldest = min(REGION_NAMES, key=lambda n: regions[n].count)
    c = {name: r.count for name, r in regions.items()}

    # The middle row and column are shared between quadrants.
    quadrants = {
        "top_left": percent(c["top_left"] + c["top_center"] + c["middle_left"] + c["middle_center"], total),
        "top_right": percent(c["top_right"] + c["top_center"] + c["middle_right"] + c["middle_center"], total),
        "bottom_left": percent(c["bottom_left"] + c["bottom_center"] + c["middle_left"] + c["middle_center"], total),
        "bottom_right": percent(c["bottom_right"] + c["bottom_center"] + c["middle_right"] + c["middle_center"], total),
    }

    center_pct = percent(c["middle_center"], total)
    periphery_pct = 100 - center_pct

    top_half = sum(c[n] for n in REGION_NAMES[:6])
    bottom_half = sum(c[n] for n in REGION_NAMES[6:])
    top_pct, bottom_pct = percent(top_half, total), percent(bottom_half, total)

    left_side = c["top_left"] + c["middle_left"] + c["bottom_left"]
    right_side = c["top_right"] + c["middle_right"] + c["bottom_right"]
    left_pct, right_pct = percent(left_side, total), percent(right_side, total)

    hotspots = find_hotspots(points, cell_size, top_n)

    insights: list[Insight] = []

    if regions[hottest].count > total * PRIMARY_HOTSPOT_SHARE:
        insights.append(Insight(
            type="primary",
            title="Primary Attention Hotspot",
            description=(
                f"{regions[hottest].percentage}% of gaze time spent in {display_name(hottest)} "
                f"region ({regions[hottest].count} points)."
            ),
            recommendation="This is your highest engagement area. Place critical content, CTAs, or key information here.",
            data={"region": hottest, "percentage": regions[hottest].percentage, "count": regions[hottest].count},
        ))

    ranked = sorted(REGION_NAMES, key=lambda n: regions[n].count, reverse=True)
    insights.append(Insight(
        type="pattern",
        title="Screen Region Distribution",
        description="Top regions: " + ", ".join(
            f"{display_name(n)} ({regions[n].percentage}%)" for n in ranked[:3]
        ),
        recommendation="Use this distribution to optimize content placement across screen regions.",
        data={"regions": {n: {"percentage": r.percentage, "count": r.count} for n, r in regions.items()}},
    ))

    # sorted() is stable, so ties go to the first quadrant declared
    dominant_quadrant = sorted(quadrants, key=quadrants.get, reverse=True)[0]
    if quadrants[dominant_quadrant] > DOMINANT_QUADRANT_PCT:
        insights.append(Insight(
            type="pattern",
            title="Dominant Quadrant",
            description=f"{quadrants[dominant_quadrant]}% of attention in {display_name(dominant_quadrant)} quadrant.",
            recommendation="Users are primarily focused in this area. Consider this when designing layout hierarchy.",
            data={"quadrant": dominant_quadrant, "percentage": quadrants[dominant_quadrant]},
        ))

    if center_pct > CENTER_FOCUS_PCT:
        insights.append(Insight(
            type="pattern",
            title="Center-Focused Pattern",
            description=f"{center_pct}% center, {periphery_pct}% periphery. Users follow natural reading patterns.",
            recommendation="Center content receives most attention. Place primary information in the center region.",
            data={"center": center_pct, "periphery": periphery_pct},
        ))

    if top_pct > TOP_HEAVY_PCT:
        insights.append(Insight(
            type="pattern",
            title="Top-Heavy Attention",
            description=f"{top_pct}% top half, {bottom_pct}% bottom half.",
            recommendation="Users scan top-to-bottom. Place navigation and primary content in the upper section.",
            data={"top": top_pct, "bottom": bottom_pct},
        ))

    if abs(left_pct - right_pct) > SIDE_DOMINANCE_PCT:
        dominant, other = ("left", "right") if left_pct > right_pct else ("right", "left")
        dominant_pct, other_pct = max(left_pct, right_pct), min(left_pct, right_pct)
        insights.append(Insight(
            type="pattern",
            title=f"{dominant.capitalize()} Side Dominance",
            description=f"{dominant_pct}% {dominant} side, {other_pct}% {other} side.",
            recommendation=f"Users favor the {dominant} side. Consider this for content layout and navigation.",
            data={"left": left_pct, "right": right_pct},
        ))

    if hotspots and hotspots[0].percentage > HOTSPOT_PCT:
        insights.append(Insight(
            type="primary",
            title="Top Gaze Hotspots",
            description="Most viewed coordinates: " + ", ".join(
                f"({h.x}, {h.y}) - {h.percentage}%" for h in hotspots
            ),
            recommendation="These specific coordinates receive the most attention. Consider placing important elements near these points.",
            data={"hotspots": [{"x": h.x, "y": h.y, "count": h.count, "percentage": h.percentage} for h in hotspots]},
        ))

    # One warning per under-viewed region
    for name in REGION_NAMES:
        region = regions[name]
        if region.count < total * LOW_ENGAGEMENT_SHARE:
            insights.append(Insight(
                type="warning",
                title="Low Engagement Area",
                description=f"{display_name(name)} region: {region.percentage}% attention ({region.count} points).",
                recommendation="This area receives minimal attention. Consider repositioning important content or improving visual hierarchy.",
                data={"region": name, "percentage": region.percentage, "count": region.count},
            ))

    summary = (
        f"Analyzed {total} gaze points. Primary hotspot: {display_name(hottest)} "
        f"({regions[hottest].percentage}%). Top region: {display_name(dominant_quadrant)} "
        f"({quadrants[dominant_quadrant]}%)."
    )
    logger.info(summary)

    return AnalysisResult(
        total_points=total,
        regions=regions,
        insights=insights,
        summary=summary,
        metrics=AnalysisMetrics(
            hottest_region=hottest,
            coldest_region=coldest,
            quadrants=quadrants,
            top_bottom={"top": top_pct, "bottom": bottom_pct},
            left_right={"left": left_pct, "right": right_pct},
            center_periphery={"center": center_pct, "periphery": periphery_pct},
            hotspots=hotspots,
        ),
    )


class RegionAnalyzer:
    """Stateless wrapper binding the hotspot grid settings."""

    def __init__(self, cell_size: int = 50, top_n: int = 3):
        self.cell_size = cell_size
        self.top_n = top_n

    def analyze(self, points: Optional[Sequence[Point]], width: float, height: float) -> Optional[AnalysisResult]:
        return analyze_regions(points, width, height, self.cell_size, self.top_n)
