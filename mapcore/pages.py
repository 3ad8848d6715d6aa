from __future__ import annotations

from html import escape
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple

from data_pipeline.models import CandidateSummary
from data_pipeline.statistics import format_number
from mapcore.charts import Legend

LEGEND_CSS = """
.atlas-legend{position:absolute;z-index:9999;left:10%;bottom:24px;background:rgba(255,255,255,0.95);
  border:1px solid #999;border-radius:6px;padding:6px 8px;font:11px/1.3 Helvetica,Arial,sans-serif}
.atlas-legend .legend-title{font-weight:700;margin-bottom:4px}
.atlas-legend .legend-bar{display:flex}
.atlas-legend .legend-block{width:41px;height:10px;border:1.5px solid black;margin-right:-1.5px}
.atlas-legend .legend-labels{display:flex}
.atlas-legend .legend-labels span{width:41px;margin-right:-1.5px;transform:translateX(-50%)}
.atlas-legend .legend-item{display:inline-flex;align-items:center;gap:4px;margin-right:10px}
.atlas-legend .legend-swatch{width:14px;height:10px;border:1px solid black}
"""

INDEX_CSS = """
body{margin:0;padding:16px;font:16px/1.5 system-ui,-apple-system,Segoe UI,Roboto,Arial;background:#f7f7f7;color:#111}
.container{max-width:1100px;margin:0 auto}
.card{background:#fff;border:1px solid #ddd;border-radius:10px;padding:16px;margin-bottom:16px}
iframe{width:100%;height:720px;border:0}
"""


def legend_html(legend: Optional[Legend]) -> str:
    if legend is None:
        return ""

    if legend.labels:
        blocks = "".join(
            f"<div class='legend-block' style='background:linear-gradient(to right, {left}, {right});'></div>"
            for left, right, _ in legend.blocks
        )
        labels = "".join(f"<span>{escape(format_number(v))}</span>" for v in legend.labels)
        body = (
            f"<div class='legend-labels'>{labels}</div>"
            f"<div class='legend-bar'>{blocks}</div>"
        )
    else:
        body = "".join(
            f"<span class='legend-item'><span class='legend-swatch' style='background:{left};'></span>"
            f"{escape(caption)}</span>"
            for left, _, caption in legend.blocks
        )

    return (
        f"<style>{LEGEND_CSS}</style>"
        f"<div class='atlas-legend'><div class='legend-title'>{escape(legend.title)}</div>{body}</div>"
    )


def _fmt_mean(v: Optional[float], suffix: str = "") -> str:
    return f"{v:.2f}{suffix}" if v is not None else "no data"


def comparison_html(summaries: Sequence[CandidateSummary]) -> str:
    education = " | ".join(f"{escape(s.label)}: {_fmt_mean(s.mean_education, '%')}" for s in summaries)
    crime = " | ".join(f"{escape(s.label)}: {_fmt_mean(s.mean_crime)}" for s in summaries)
    return (
        "<h2>Percentage of adults age 25 and older with a bachelor's degree or higher:</h2>\n"
        f"<h3>{education}</h3>\n"
        "<br />\n"
        "<h2>Reported violent crime rate per 100,000 population:</h2>\n"
        f"<h3>{crime}</h3>\n"
    )


def index_html(charts: Iterable[Tuple[str, str]], summaries: Sequence[CandidateSummary]) -> str:
    """charts: (title, relative html file) pairs, embedded in order."""
    sections = "\n".join(
        f"<div class='card'><h2>{escape(title)}</h2>"
        f"<iframe src='{escape(href)}' title='{escape(title)}'></iframe></div>"
        for title, href in charts
    )
    return (
        "<!doctype html>\n<html lang='en'>\n<head>\n<meta charset='utf-8' />\n"
        "<title>US county atlas</title>\n"
        f"<style>{INDEX_CSS}</style>\n</head>\n<body>\n<div class='container'>\n"
        f"<div class='card' id='comparison'>\n{comparison_html(summaries)}</div>\n"
        f"{sections}\n</div>\n</body>\n</html>\n"
    )


def write_text(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path
