from __future__ import annotations

import json
import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import geopandas as gpd
from shapely.geometry import shape
from shapely.ops import unary_union

from data_pipeline.models import GeographicUnit

log = logging.getLogger(__name__)

COUNTIES_LAYER = "counties"
STATES_LAYER = "states"


@dataclass
class Geography:
    units: gpd.GeoDataFrame
    states: Optional[gpd.GeoSeries]  # borders between states, drawn over the units
    projected: bool

    def bounds(self):
        return tuple(float(v) for v in self.units.total_bounds)


def _frame_from_features(features: List[Dict[str, Any]]) -> gpd.GeoDataFrame:
    ids, geoms = [], []
    for feat in features:
        if not isinstance(feat, dict):
            continue
        props = feat.get("properties") or {}
        unit_id = feat.get("id", props.get("id", props.get("GEOID")))
        try:
            geom = shape(feat["geometry"]) if feat.get("geometry") else None
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            log.warning("Bad geometry for unit=%r: %s", unit_id, exc)
            geom = None
        ids.append(unit_id)
        geoms.append(geom)
    return gpd.GeoDataFrame({"unit_id": ids}, geometry=geoms)


def _frame_from_topology(topology: Dict[str, Any], layer: str) -> Optional[gpd.GeoDataFrame]:
    objects = topology.get("objects") or {}
    if layer not in objects:
        return None
    # GDAL's TopoJSON driver exposes each object as a layer
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "geography.topojson"
        path.write_text(json.dumps(topology), encoding="utf-8")
        gdf = gpd.read_file(path, layer=layer, engine="fiona")
    gdf["unit_id"] = gdf["id"] if "id" in gdf.columns else None
    return gdf


def read_layer(geo: Dict[str, Any], layer: str = COUNTIES_LAYER) -> Optional[gpd.GeoDataFrame]:
    """
    GeoDataFrame (with a `unit_id` column) for one layer of the geography.
    TopoJSON is split by object name; a GeoJSON FeatureCollection is a
    single layer and is returned whatever `layer` asks for.
    """
    kind = geo.get("type") if isinstance(geo, dict) else None
    if kind == "Topology":
        return _frame_from_topology(geo, layer)
    if kind == "FeatureCollection":
        return _frame_from_features(geo.get("features") or [])
    if kind == "Feature":
        return _frame_from_features([geo])
    log.warning("Unsupported geography type=%r", kind)
    return None


def is_projected(gdf: gpd.GeoDataFrame) -> bool:
    """True for pre-projected screen coordinates rather than lon/lat."""
    if gdf.empty or gdf.geometry.isna().all():
        return False
    minx, miny, maxx, maxy = gdf.total_bounds
    return minx < -180 or maxx > 180 or miny < -90 or maxy > 90


def interior_borders(frame: gpd.GeoDataFrame) -> gpd.GeoSeries:
    """
    Lines shared by two neighbouring shapes. Coastlines and the national
    border belong to one shape only and are left out.
    """
    geoms = [g for g in frame.geometry if g is not None and not g.is_empty]
    if not geoms:
        return gpd.GeoSeries([], crs=frame.crs)
    every_edge = unary_union([g.boundary for g in geoms])
    outline = unary_union(geoms).boundary
    mesh = every_edge.difference(outline)
    return gpd.GeoSeries([] if mesh.is_empty else [mesh], crs=frame.crs)


def _flip_y(geoms: gpd.GeoSeries) -> gpd.GeoSeries:
    # screen y grows downwards, map y grows upwards
    return geoms.scale(xfact=1.0, yfact=-1.0, origin=(0, 0))


def read_geography(
    geo: Dict[str, Any],
    *,
    units_layer: str = COUNTIES_LAYER,
    states_layer: str = STATES_LAYER,
) -> Geography:
    units = read_layer(geo, units_layer)
    if units is None:
        log.warning("Geography has no %r layer; drawing nothing", units_layer)
        units = _frame_from_features([])

    states = None
    if geo.get("type") == "Topology":
        frame = read_layer(geo, states_layer)
        if frame is not None:
            states = interior_borders(frame)

    projected = is_projected(units)
    if projected:
        units = units.set_geometry(_flip_y(units.geometry))
        if states is not None:
            states = _flip_y(states)

    log.info("Read geography: units=%d states=%s projected=%s",
             len(units), "yes" if states is not None else "no", projected)
    return Geography(units=units, states=states, projected=projected)


def _plain_id(v: Any) -> Any:
    # numpy scalars and NaN out of pandas columns are not JSON friendly
    if v is None:
        return None
    try:
        if v != v:
            return None
    except (TypeError, ValueError):
        pass
    return v.item() if hasattr(v, "item") else v


def to_units(gdf: gpd.GeoDataFrame) -> List[GeographicUnit]:
    out: List[GeographicUnit] = []
    skipped = 0
    for unit_id, geom in zip(gdf["unit_id"], gdf.geometry):
        if geom is None or geom.is_empty:
            skipped += 1
            continue
        out.append(GeographicUnit(key=_plain_id(unit_id), geometry=geom))
    if skipped:
        log.warning("Skipped %d units without geometry", skipped)
    return out
