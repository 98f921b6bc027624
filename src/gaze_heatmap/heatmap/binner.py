import math

from ..models import BinKey


def _round_half_up(value: float) -> float:
    return math.floor(value + 0.5)


def bin_key(x: float, y: float, radius: float) -> BinKey:
    """
    Maps a point to its bin by rounding each axis to the nearest multiple of
    `radius`. Halves round up, so 20 and 60 with a radius of 40 land in
    bins 40 and 80.
    """
    return (_round_half_up(x / radius) * radius, _round_half_up(y / radius) * radius)


class SpatialBinner:
    """
    Fixed-radius binner. The radius is bound at construction because changing
    it mid-session would split existing bins.
    """
    __slots__ = ("_radius",)

    def __init__(self, radius: float = 40.0):
        if not radius > 0:
            raise ValueError("radius must be positive.")
        self._radius = float(radius)

    @property
    def radius(self) -> float:
        return self._radius

    def __call__(self, x: float, y: float) -> BinKey:
        return bin_key(x, y, self._radius)

    def __repr__(self) -> str:
        return f"SpatialBinner(radius={self._radius:g})"
