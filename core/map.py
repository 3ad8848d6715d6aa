from __future__ import annotations

from typing import Optional, Sequence

import folium

from core.config import RenderConfig

USA_SW = [24.0, -130.0]
USA_NE = [50.0, -67.79]
USA_CENTER = [39.5, -98.35]


def base_map(
    render: Optional[RenderConfig] = None,
    *,
    projected: bool = False,
    bounds: Optional[Sequence[float]] = None,
) -> folium.Map:
    """
    Empty map to draw the county layers onto.

    Pre-projected geography (screen coordinates) goes on a flat "Simple"
    plane without tiles; lon/lat geography goes on the usual web map
    centred on the USA. `bounds` is (minx, miny, maxx, maxy).
    """
    render = render or RenderConfig()

    if projected:
        m = folium.Map(
            location=[0, 0],
            zoom_start=0,
            crs="Simple",
            tiles=None,
            width=render.width,
            height=render.height,
        )
    else:
        m = folium.Map(
            location=USA_CENTER,
            zoom_start=4,
            tiles=render.tiles,
            control_scale=True,
            max_bounds=True,
            width=render.width,
            height=render.height,
        )

    if bounds is not None:
        minx, miny, maxx, maxy = bounds
        m.fit_bounds([[miny, minx], [maxy, maxx]])
    elif not projected:
        m.fit_bounds([USA_SW, USA_NE])

    return m
