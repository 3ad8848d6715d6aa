from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional


def try_float(v: Any) -> Optional[float]:
    if v is None or isinstance(v, bool):
        return None
    try:
        f = float(v)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


def _as_str(v: Any) -> str:
    return "" if v is None else str(v).strip()


@dataclass(frozen=True)
class GeographicUnit:
    key: Any  # county FIPS code or state name
    geometry: Any = None  # shapely geometry, never inspected by the joiner


@dataclass(frozen=True)
class EducationRecord:
    fips: Any
    area_name: str
    state: str
    bachelors_or_higher: float

    @classmethod
    def empty(cls) -> "EducationRecord":
        return cls(fips=None, area_name="", state="", bachelors_or_higher=0.0)

    @classmethod
    def from_raw(cls, row: Mapping[str, Any]) -> "EducationRecord":
        """
        Build from a raw education.json entry:
          {"fips": 1001, "state": "AL", "area_name": "Autauga County", "bachelorsOrHigher": 21.9}
        Bad or missing values fall back to the empty defaults.
        """
        b = try_float(row.get("bachelorsOrHigher"))
        return cls(
            fips=row.get("fips"),
            area_name=_as_str(row.get("area_name")),
            state=_as_str(row.get("state")),
            bachelors_or_higher=b if b is not None else 0.0,
        )


@dataclass(frozen=True)
class MergedUnitView:
    unit: GeographicUnit
    education: EducationRecord
    election_result: Optional[str] = None
    crime_rate: Optional[float] = None
    matched: bool = False

    @property
    def state(self) -> str:
        return self.education.state


@dataclass(frozen=True)
class CandidateSummary:
    label: str
    mean_education: Optional[float]
    mean_crime: Optional[float]


@dataclass(frozen=True)
class GdpQuarter:
    date: dt.date
    label: str
    value: float
