from .gaze import BinKey, Sample, IntensityRecord, HeatPoint, RenderFrame, Snapshot

__all__ = ["BinKey", "Sample", "IntensityRecord", "HeatPoint", "RenderFrame", "Snapshot"]
