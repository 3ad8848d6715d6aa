# mapcore/map.py
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import folium
import requests
from shapely.geometry import mapping

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from core.config import AtlasConfig, RenderConfig
from core.map import base_map
from data_pipeline.joiner import classify_all, compare_candidates, index_education
from data_pipeline.loader import DataLoadError, load_datasets
from data_pipeline.models import MergedUnitView
from data_pipeline.statistics import Range
from mapcore.charts import ChartSpec, build_legend, chart_names, chart_range, get_chart
from mapcore.geography import read_geography, to_units
from mapcore.pages import index_html, legend_html, write_text
from mapcore.tooltip import styled_tooltip

log = logging.getLogger(__name__)


def feature_collection(
    spec: ChartSpec,
    views: Sequence[MergedUnitView],
    rng: Optional[Range],
    render: Optional[RenderConfig] = None,
) -> Dict[str, Any]:
    """One GeoJSON feature per unit, carrying its fill, stroke and tooltip."""
    render = render or RenderConfig()
    features: List[Dict[str, Any]] = []
    for view in views:
        geom = view.unit.geometry
        features.append(
            {
                "type": "Feature",
                "id": view.unit.key,
                "geometry": mapping(geom) if geom is not None else None,
                "properties": {
                    "unit_id": view.unit.key,
                    "fill": spec.fill(view, rng, render),
                    "stroke": spec.stroke(view, rng, render),
                    "tooltip": styled_tooltip(spec, view, rng, render),
                },
            }
        )
    return {"type": "FeatureCollection", "features": features}


def render_choropleth(
    spec: ChartSpec,
    views: Sequence[MergedUnitView],
    rng: Optional[Range],
    *,
    states=None,
    projected: bool = False,
    bounds: Optional[Sequence[float]] = None,
    render: Optional[RenderConfig] = None,
) -> folium.Map:
    render = render or RenderConfig()
    m = base_map(render, projected=projected, bounds=bounds)

    if views:
        counties = folium.GeoJson(
            feature_collection(spec, views, rng, render),
            name=spec.title,
            style_function=lambda feature: {
                "fillColor": feature["properties"]["fill"],
                "color": feature["properties"]["stroke"],
                "weight": render.stroke_width,
                "fillOpacity": render.fill_opacity,
            },
        )
        counties.add_child(
            folium.GeoJsonTooltip(
                fields=["tooltip"],
                labels=False,
                sticky=True,
                style="padding:0;border:0;background:transparent;box-shadow:none;",
            )
        )
        counties.add_to(m)
    else:
        log.warning("No units to draw for chart=%s", spec.name)

    if states is not None and len(states):
        folium.GeoJson(
            states.to_json(),
            name="States",
            style_function=lambda feature: {
                "fill": False,
                "color": "black",
                "weight": 1,
                "lineJoin": "round",
            },
        ).add_to(m)

    legend = build_legend(spec, rng, render)
    if legend is not None:
        m.get_root().html.add_child(folium.Element(legend_html(legend)))

    folium.LayerControl().add_to(m)
    return m


def build_maps(
    config: Optional[AtlasConfig] = None,
    *,
    session: Optional[requests.Session] = None,
) -> List[Path]:
    """
    Load every dataset, join them per county and write one HTML map per
    chart plus an index page. Raises DataLoadError if any source fails.
    """
    config = config or AtlasConfig()
    render = config.render

    data = load_datasets(config, session=session)
    geography = read_geography(data.geo)
    units = to_units(geography.units)

    views = classify_all(units, index_education(data.education), data.election, data.crime)
    summaries = compare_candidates(render.winner_colors, data.education, data.crime, data.election)

    out_dir = Path(config.out_dir)
    written: List[Path] = []
    pages = []
    for name in config.charts:
        spec = get_chart(name)
        rng = chart_range(spec, data.education, data.crime)
        m = render_choropleth(
            spec,
            views,
            rng,
            states=geography.states,
            projected=geography.projected,
            bounds=geography.bounds() if units else None,
            render=render,
        )
        path = out_dir / f"{spec.name}.html"
        path.parent.mkdir(parents=True, exist_ok=True)
        m.save(str(path))
        log.info("Saved %s (range=%s)", path, rng)
        written.append(path)
        pages.append((spec.title, path.name))

    written.append(write_text(out_dir / "index.html", index_html(pages, summaries)))
    return written


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Render the county choropleth maps.")
    parser.add_argument("--data-dir", type=Path, help="directory holding geo/education/election/crime json")
    parser.add_argument("--out-dir", type=Path, help="where the html files go")
    parser.add_argument("--charts", nargs="+", choices=chart_names(), help="subset of charts to render")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(message)s")

    config = AtlasConfig.from_env()
    if args.data_dir:
        config = replace(config, sources=replace(config.sources, data_dir=args.data_dir))
    if args.out_dir:
        config = replace(config, out_dir=args.out_dir)
    if args.charts:
        config = replace(config, charts=tuple(args.charts))

    try:
        written = build_maps(config)
    except DataLoadError as exc:
        log.error("Aborting, nothing rendered: %s", exc)
        return 1

    for path in written:
        print("Saved:", path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
