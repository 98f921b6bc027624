from .binner import SpatialBinner, bin_key
from .active import ActiveSpotTracker, SpotState
from .store import AccumulationStore

__all__ = ["SpatialBinner", "bin_key", "ActiveSpotTracker", "SpotState", "AccumulationStore"]
