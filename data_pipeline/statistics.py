from __future__ import annotations

import logging
import math
from typing import Any, Iterable, List, NamedTuple, Optional

from data_pipeline.models import try_float

log = logging.getLogger(__name__)

LEGEND_BUCKETS = 10


class Range(NamedTuple):
    min: float
    max: float


def js_round(x: float) -> float:
    """Round half up (2.5 -> 3, -2.5 -> -2), unlike Python's round()."""
    return float(math.floor(x + 0.5))


def _numbers(values: Iterable[Any]) -> List[float]:
    out: List[float] = []
    for v in values:
        f = try_float(v)
        if f is not None:
            out.append(f)
    return out


def min_max(values: Iterable[Any]) -> Optional[Range]:
    """Range of the numeric values, or None when there are none."""
    nums = _numbers(values)
    if not nums:
        log.warning("min_max called with no numeric values")
        return None
    return Range(min(nums), max(nums))


def mean(values: Iterable[Any]) -> Optional[float]:
    nums = _numbers(values)
    if not nums:
        return None
    return sum(nums) / len(nums)


def legend_step(rng: Range, buckets: int = LEGEND_BUCKETS) -> float:
    # label spacing for the legend, not a statistical variance
    return (abs(rng.max) - abs(rng.min)) / buckets


def legend_labels(rng: Optional[Range], buckets: int = LEGEND_BUCKETS) -> List[float]:
    if rng is None:
        return []
    step = legend_step(rng, buckets)
    return [js_round((rng.min + j * step) * 100) / 100 for j in range(buckets + 1)]


def format_number(v: float) -> str:
    """Shortest display form: 21.0 -> "21", 21.5 -> "21.5"."""
    return str(int(v)) if float(v).is_integer() else str(v)
