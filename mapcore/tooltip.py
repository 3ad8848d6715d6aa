from __future__ import annotations

from html import escape
from typing import Optional, Tuple

from core.config import RenderConfig
from data_pipeline.models import GdpQuarter, MergedUnitView
from data_pipeline.statistics import Range, format_number
from mapcore.charts import ChartSpec

UNKNOWN = "unknown"
NO_DATA = "no data"


def tooltip_html(view: MergedUnitView) -> str:
    edu = view.education
    winner = escape(view.election_result) if view.election_result is not None else UNKNOWN
    crime = f"{format_number(view.crime_rate)}/100,000 people" if view.crime_rate is not None else NO_DATA
    return (
        f"{escape(edu.area_name)}, {escape(edu.state)}"
        "<br />"
        f"Education: {format_number(edu.bachelors_or_higher)}%"
        "<br />"
        f"Voted for: {winner}"
        "<br />"
        f"Crime rate: {crime}"
    )


def tooltip_style(
    spec: ChartSpec,
    view: MergedUnitView,
    rng: Optional[Range],
    render: Optional[RenderConfig] = None,
) -> Tuple[str, str]:
    """(background, text color) for the hover box of one unit."""
    render = render or RenderConfig()
    return spec.fill(view, rng, render), spec.text_color


def styled_tooltip(spec: ChartSpec, view: MergedUnitView, rng: Optional[Range], render: Optional[RenderConfig] = None) -> str:
    background, color = tooltip_style(spec, view, rng, render)
    return (
        f'<div style="background:{background};color:{color};padding:6px 8px;opacity:0.9;">'
        f"{tooltip_html(view)}</div>"
    )


def gdp_tooltip(quarter: GdpQuarter) -> str:
    return f"{quarter.label}<br>${quarter.value:,.1f} Billion"
