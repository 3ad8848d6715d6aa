from __future__ import annotations

import datetime as dt
import logging
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from data_pipeline.models import GdpQuarter, try_float

log = logging.getLogger(__name__)

QUARTERS = {"01": "Q1", "04": "Q2", "07": "Q3", "10": "Q4"}


def quarter_label(date_str: str) -> str:
    """'1947-04-01' -> '1947 Q2'. Months outside 01/04/07/10 get the year only."""
    year = date_str[0:4]
    quarter = QUARTERS.get(date_str[5:7])
    return f"{year} {quarter}" if quarter else year


def _parse_date(v: Any) -> Optional[dt.date]:
    try:
        return dt.date.fromisoformat(str(v)[:10])
    except ValueError:
        return None


def parse_gdp(payload: Mapping[str, Any]) -> List[GdpQuarter]:
    """
    Expects the BEA-style payload used by the bar chart:
      {"data": [["1947-01-01", 243.1], ...], ...}
    Rows with a bad date or value are skipped.
    """
    rows = payload.get("data") if isinstance(payload, Mapping) else None
    if not isinstance(rows, list):
        log.warning("GDP payload has no 'data' list")
        return []

    out: List[GdpQuarter] = []
    for row in rows:
        if not isinstance(row, (list, tuple)) or len(row) < 2:
            continue
        date = _parse_date(row[0])
        value = try_float(row[1])
        if date is None or value is None:
            log.debug("Skipping GDP row %r", row)
            continue
        out.append(GdpQuarter(date=date, label=quarter_label(str(row[0])), value=value))
    return out


def _add_months(d: dt.date, months: int) -> dt.date:
    month = d.month - 1 + months
    year = d.year + month // 12
    month = month % 12 + 1
    return dt.date(year, month, min(d.day, 28))


def x_domain(quarters: Sequence[GdpQuarter]) -> Optional[Tuple[dt.date, dt.date]]:
    # the last bar gets a full quarter of width
    if not quarters:
        return None
    dates = [q.date for q in quarters]
    return min(dates), _add_months(max(dates), 3)
