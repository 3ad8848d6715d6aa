from __future__ import annotations

from typing import Optional

from branca.colormap import LinearColormap, linear

from data_pipeline.models import try_float
from data_pipeline.statistics import js_round

NEUTRAL_COLOR = "#d3d3d3"  # lightgray, same as the bare county layer


def _divisor(max_v) -> Optional[float]:
    m = try_float(max_v)
    if m is None:
        return None
    d = js_round(m)
    return d if d != 0 else None


def forward(v, max_v) -> Optional[float]:
    """1 - v/round(max_v): high values land at the bottom of the palette."""
    d = _divisor(max_v)
    x = try_float(v)
    if d is None or x is None:
        return None
    return 1 - x / d


def reverse(v, max_v) -> Optional[float]:
    d = _divisor(max_v)
    x = try_float(v)
    if d is None or x is None:
        return None
    return x / d


class Palette:
    """A fixed continuous palette on [0, 1] returning '#rrggbb' strings."""

    def __init__(self, name: str, colormap: LinearColormap, neutral: str = NEUTRAL_COLOR):
        self.name = name
        self.colormap = colormap.scale(0, 1)
        self.neutral = neutral

    def __call__(self, t: Optional[float]) -> str:
        if t is None:
            return self.neutral
        t = min(1.0, max(0.0, t))
        return self.colormap.rgb_hex_str(t)

    def __repr__(self) -> str:
        return f"Palette({self.name!r})"


# red (0) -> yellow -> blue (1)
RDYLBU = Palette("RdYlBu", linear.RdYlBu_11)
# pale orange (0) -> dark red (1)
ORRD = Palette("OrRd", linear.OrRd_09)
