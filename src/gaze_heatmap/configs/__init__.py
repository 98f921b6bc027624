from .app import (
    AppSettings,
    HeatmapSettings,
    RenderSettings,
    AnalysisSettings,
    ViewportSettings,
    CalibrationSettings,
    DummySourceSettings,
    ZmqSurfaceConfig,
    ExportConfig,
)
from .utils import LoggingConfig

__all__ = [
    "AppSettings",
    "HeatmapSettings",
    "RenderSettings",
    "AnalysisSettings",
    "ViewportSettings",
    "CalibrationSettings",
    "DummySourceSettings",
    "ZmqSurfaceConfig",
    "ExportConfig",
    "LoggingConfig",
]
