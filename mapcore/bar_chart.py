from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

import plotly.graph_objects as go

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from core.config import GDP_INFO_URL, AtlasConfig
from data_pipeline.gdp import parse_gdp, x_domain
from data_pipeline.loader import DataLoadError, DataSource, FetchConfig, load_all
from data_pipeline.models import GdpQuarter
from mapcore.tooltip import gdp_tooltip

log = logging.getLogger(__name__)

BAR_COLOR = "#123242"


def render_gdp_chart(
    quarters: Sequence[GdpQuarter],
    *,
    width: int = 900,
    height: int = 460,
    source_note: str = GDP_INFO_URL,
) -> go.Figure:
    """One bar per quarter, hover shows '1947 Q1 / $243.1 Billion'."""
    fig = go.Figure(
        go.Bar(
            x=[q.date for q in quarters],
            y=[q.value for q in quarters],
            customdata=[[gdp_tooltip(q)] for q in quarters],
            hovertemplate="%{customdata[0]}<extra></extra>",
            marker_color=BAR_COLOR,
        )
    )

    domain = x_domain(quarters)
    fig.update_layout(
        width=width,
        height=height,
        bargap=0,
        plot_bgcolor="white",
        yaxis_title="Gross Domestic Product",
        margin=dict(l=80, r=20, t=20, b=70),
        annotations=[
            dict(
                text=f"More Information: {source_note}",
                xref="paper",
                yref="paper",
                x=1,
                y=-0.15,
                showarrow=False,
                xanchor="right",
            )
        ],
    )
    if domain is not None:
        fig.update_xaxes(range=[domain[0].isoformat(), domain[1].isoformat()])
    fig.update_yaxes(rangemode="tozero")
    return fig


def build_gdp_chart(config: Optional[AtlasConfig] = None) -> Path:
    config = config or AtlasConfig()
    source = DataSource("gdp", config.sources.resolve(config.sources.gdp))
    (payload,) = load_all([source], cfg=FetchConfig(timeout_s=config.timeout_s))

    quarters = parse_gdp(payload)
    log.info("Parsed %d GDP quarters", len(quarters))

    out = Path(config.out_dir) / "gdp.html"
    out.parent.mkdir(parents=True, exist_ok=True)
    render_gdp_chart(quarters, width=config.render.width - 100).write_html(str(out), include_plotlyjs="cdn")
    return out


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Render the quarterly GDP bar chart.")
    parser.add_argument("--out-dir", type=Path)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    config = AtlasConfig.from_env()
    if args.out_dir:
        config = replace(config, out_dir=args.out_dir)

    try:
        out = build_gdp_chart(config)
    except DataLoadError as exc:
        log.error("Aborting: %s", exc)
        return 1

    print("Saved:", out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
