import logging
from pathlib import Path
from importlib.metadata import version

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, PositiveInt, PositiveFloat, model_validator, Field

from .utils import LoggingConfig

logger = logging.getLogger(__name__)

class HeatmapSettings(BaseModel):
    """
    Tuning of the accumulation/decay engine.
    Distances are in screen pixels, times in seconds.
    """
    proximity_radius_px: PositiveFloat = Field(40.0, description="Samples rounding to the same multiple of this radius share a bin.")
    accumulation_rate: PositiveFloat = Field(0.3, description="Weight added to an existing bin per sample.")
    decay_rate: float = Field(0.9, gt=0, le=1, description="Multiplier applied to inactive bins on each decay tick.")
    min_value: PositiveFloat = Field(0.1, description="Bins decaying below this value are evicted.")
    decay_interval_s: PositiveFloat = Field(10.0, description="Period of the decay scheduler.")
    gaze_timeout_s: PositiveFloat = Field(0.2, description="Silence after which the active spot is released.")

    @model_validator(mode='after')
    def validate_min_value(self) -> "HeatmapSettings":
        if self.min_value >= 1.0:
            raise ValueError('min_value must be below the initial bin value (1.0).')
        return self

class RenderSettings(BaseModel):
    interval_s: PositiveFloat = Field(0.05, description="Period of the render sampler.")

class AnalysisSettings(BaseModel):
    hotspot_cell_px: PositiveInt = Field(50, description="Cell size of the hotspot grid.")
    top_hotspots: PositiveInt = Field(3, description="Number of hotspot cells reported.")

class ViewportSettings(BaseModel):
    """
    Viewport used by the region analysis.
    When `use_screen` is set the primary monitor is queried at analysis time
    and these values are only a fallback.
    """
    width_px: PositiveInt = 1920
    height_px: PositiveInt = 1080
    use_screen: bool = False

class CalibrationSettings(BaseModel):
    """Settings for the calibration step that precedes tracking."""
    required: bool = Field(True, description="Tracking may only start after a calibration pass.")

class DummySourceSettings(BaseModel):
    frequency_hz: PositiveInt = 60
    radius_fraction: float = Field(0.25, gt=0, le=0.5, description="Circle radius relative to the smaller viewport side.")
    speed_rps: PositiveFloat = Field(0.1, description="Revolutions per second along the circle.")
    dropout_rate: float = Field(0.0, ge=0, lt=1, description="Fraction of frames reported as tracking loss.")

class ZmqSurfaceConfig(BaseModel):
    enabled: bool = False
    host: str = "tcp://*:5556"
    send_hwm: PositiveInt = 20 * 10 # 10 seconds of frames at 20 Hz

class ExportConfig(BaseModel):
    enabled: bool = True
    output_dir: Path = Path("./recordings")

class AppSettings(BaseSettings):
    """
    Main application settings, loaded from environment variables and defaults.
    """
    # Source
    use_dummy_mode: bool = True
    dummy: DummySourceSettings = Field(default_factory=DummySourceSettings)

    # Engine
    heatmap: HeatmapSettings = Field(default_factory=HeatmapSettings)
    render: RenderSettings = Field(default_factory=RenderSettings)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)

    # Screen
    viewport: ViewportSettings = Field(default_factory=ViewportSettings)
    calibration: CalibrationSettings = Field(default_factory=CalibrationSettings)

    # Outputs
    zmq: ZmqSurfaceConfig = Field(default_factory=ZmqSurfaceConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)

    # Logging
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    __version__: str = version("gaze-heatmap")

    model_config = SettingsConfigDict(
        env_prefix="GAZE__",
        env_file=".env",
        env_nested_delimiter='__',
        case_sensitive=False
    )
