from .regions import (
    REGION_NAMES,
    AnalysisMetrics,
    AnalysisResult,
    Hotspot,
    Insight,
    RegionAnalyzer,
    RegionStats,
    analyze_regions,
    find_hotspots,
)

__all__ = [
    "REGION_NAMES",
    "AnalysisMetrics",
    "AnalysisResult",
    "Hotspot",
    "Insight",
    "RegionAnalyzer",
    "RegionStats",
    "analyze_regions",
    "find_hotspots",
]
