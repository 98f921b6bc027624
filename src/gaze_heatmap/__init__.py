from .core.manager import SessionManager
from .core.state import SessionState
from .heatmap import AccumulationStore
from .analysis import RegionAnalyzer, analyze_regions
from .models import Sample, Snapshot, RenderFrame

__all__ = [
    "SessionManager",
    "SessionState",
    "AccumulationStore",
    "RegionAnalyzer",
    "analyze_regions",
    "Sample",
    "Snapshot",
    "RenderFrame",
]
