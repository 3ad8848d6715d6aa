from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from core.config import RenderConfig
from data_pipeline.models import MergedUnitView
from data_pipeline.statistics import LEGEND_BUCKETS, Range, legend_labels, min_max
from mapcore.colors import NEUTRAL_COLOR, ORRD, RDYLBU, forward, reverse

STROKE_GREY = "grey"

# view, chart range, render config -> css color
ColorFn = Callable[[MergedUnitView, Optional[Range], RenderConfig], str]


@dataclass(frozen=True)
class Legend:
    title: str
    # (left color, right color, caption) per block
    blocks: Tuple[Tuple[str, str, str], ...]
    labels: Tuple[float, ...] = ()


@dataclass(frozen=True)
class ChartSpec:
    name: str
    title: str
    metric: str  # "education" | "election" | "crime"
    value: Callable[[MergedUnitView], Any]
    fill: ColorFn
    stroke: ColorFn
    text_color: str
    legend: Optional[Callable[[Optional[Range], RenderConfig], Optional[Legend]]] = None


def _education_value(view: MergedUnitView) -> Optional[float]:
    return view.education.bachelors_or_higher if view.matched else None


def _crime_value(view: MergedUnitView) -> Optional[float]:
    return view.crime_rate


def _election_value(view: MergedUnitView) -> Optional[str]:
    return view.election_result


def _education_fill(view, rng, render) -> str:
    v = _education_value(view)
    if v is None or rng is None:
        return NEUTRAL_COLOR
    return RDYLBU(forward(v, rng.max))


def _crime_fill(view, rng, render) -> str:
    v = _crime_value(view)
    if v is None or rng is None:
        return NEUTRAL_COLOR
    return ORRD(reverse(v, rng.max))


def _winner_color(view, rng, render) -> str:
    return render.winner_colors.get(view.election_result or "", NEUTRAL_COLOR)


def _grey_stroke(view, rng, render) -> str:
    return STROKE_GREY


def _gradient_legend(palette, position: Callable[[float], float], title: str):
    def build(rng: Optional[Range], render: RenderConfig) -> Optional[Legend]:
        if rng is None:
            return None
        blocks = []
        for n in range(LEGEND_BUCKETS):
            left = palette(position(n * 0.1))
            right = palette(position((n + 1) * 0.1))
            blocks.append((left, right, ""))
        return Legend(title=title, blocks=tuple(blocks), labels=tuple(legend_labels(rng)))

    return build


def _winner_legend(rng: Optional[Range], render: RenderConfig) -> Legend:
    blocks = tuple((color, color, label) for label, color in render.winner_colors.items())
    return Legend(title="Voted for", blocks=blocks)


CHARTS: Dict[str, ChartSpec] = {
    spec.name: spec
    for spec in (
        ChartSpec(
            name="education-graph",
            title="Adults 25+ with a bachelor's degree or higher (%)",
            metric="education",
            value=_education_value,
            fill=_education_fill,
            stroke=_grey_stroke,
            text_color="black",
            # low values sit at the blue end of the palette
            legend=_gradient_legend(RDYLBU, lambda t: 1 - t, "Bachelor's degree or higher (%)"),
        ),
        ChartSpec(
            name="election-graph",
            title="2020 presidential election winner by state",
            metric="election",
            value=_election_value,
            fill=_winner_color,
            stroke=_winner_color,
            text_color="white",
            legend=_winner_legend,
        ),
        ChartSpec(
            name="crime-graph",
            title="Violent crime rate per 100,000 population",
            metric="crime",
            value=_crime_value,
            fill=_crime_fill,
            stroke=_grey_stroke,
            text_color="black",
            legend=_gradient_legend(ORRD, lambda t: t, "Violent crime per 100,000"),
        ),
    )
}


def get_chart(name: str) -> ChartSpec:
    try:
        return CHARTS[name]
    except KeyError:
        raise KeyError(f"unknown chart {name!r}; expected one of {sorted(CHARTS)}") from None


def chart_range(
    spec: ChartSpec,
    education: Sequence[Mapping[str, Any]],
    crime: Mapping[str, Any],
) -> Optional[Range]:
    """Dataset-wide range for the chart's metric; None for categorical charts."""
    if spec.metric == "education":
        return min_max(row.get("bachelorsOrHigher") for row in education if isinstance(row, Mapping))
    if spec.metric == "crime":
        return min_max(crime.values())
    return None


def build_legend(spec: ChartSpec, rng: Optional[Range], render: Optional[RenderConfig] = None) -> Optional[Legend]:
    if spec.legend is None:
        return None
    return spec.legend(rng, render or RenderConfig())


def chart_names() -> List[str]:
    return list(CHARTS)
