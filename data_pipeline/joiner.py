# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from data_pipeline.models import (
    CandidateSummary,
    EducationRecord,
    GeographicUnit,
    MergedUnitView,
    try_float,
)
from data_pipeline.statistics import mean

log = logging.getLogger(__name__)

EducationIndex = Dict[str, EducationRecord]
EducationInput = Union[EducationIndex, Iterable[Union[EducationRecord, Mapping[str, Any]]]]


def fips_key(value: Any) -> Optional[str]:
    """
    Loose key for FIPS matching: 1001, "1001" and "01001" all give "1001".
    Non-numeric keys (state names) compare as stripped strings.
    """
    if value is None or isinstance(value, bool):
        return None
    s = str(value).strip()
    if not s:
        return None
    try:
        return str(int(s))
    except ValueError:
        pass
    f = try_float(s)
    if f is not None and f.is_integer():
        return str(int(f))
    return s


def _as_record(row: Union[EducationRecord, Mapping[str, Any]]) -> EducationRecord:
    if isinstance(row, EducationRecord):
        return row
    return EducationRecord.from_raw(row)


def index_education(records: Iterable[Union[EducationRecord, Mapping[str, Any]]]) -> EducationIndex:
    index: EducationIndex = {}
    skipped = 0
    for row in records:
        if not isinstance(row, (EducationRecord, Mapping)):
            skipped += 1
            continue
        rec = _as_record(row)
        key = fips_key(rec.fips)
        if key is None:
            skipped += 1
            continue
        # first record wins, same as a linear find()
        index.setdefault(key, rec)
    if skipped:
        log.warning("Skipped %d education rows without a usable fips", skipped)
    return index


def _ensure_index(education: EducationInput) -> EducationIndex:
    if isinstance(education, dict):
        return education
    return index_education(education)


def classify(
    unit: GeographicUnit,
    education: EducationInput,
    election: Mapping[str, str],
    crime: Mapping[str, Any],
) -> MergedUnitView:
    """
    Join one geographic unit with its education record (by fips) and the
    election winner and crime rate of its state. Misses never raise: the
    education record falls back to EducationRecord.empty() and the
    election/crime values stay None.
    """
    index = _ensure_index(education)
    key = fips_key(unit.key)
    rec = index.get(key) if key is not None else None

    if rec is None:
        log.debug("No education record for unit=%r", unit.key)
        return MergedUnitView(unit=unit, education=EducationRecord.empty(), matched=False)

    state = rec.state
    winner = election.get(state) if state else None
    return MergedUnitView(
        unit=unit,
        education=rec,
        election_result=str(winner) if winner is not None else None,
        crime_rate=try_float(crime.get(state)) if state else None,
        matched=True,
    )


def classify_all(
    units: Sequence[GeographicUnit],
    education: EducationInput,
    election: Mapping[str, str],
    crime: Mapping[str, Any],
) -> List[MergedUnitView]:
    index = _ensure_index(education)
    views = [classify(u, index, election, crime) for u in units]
    misses = sum(1 for v in views if not v.matched)
    log.info("Classified %d units (%d without education data)", len(views), misses)
    return views


def states_won_by(label: str, election: Mapping[str, str]) -> List[str]:
    return [state for state, winner in election.items() if winner == label]


def mean_education_for(
    label: str,
    education: Iterable[Union[EducationRecord, Mapping[str, Any]]],
    election: Mapping[str, str],
) -> Optional[float]:
    """Mean bachelorsOrHigher over counties in states won by `label`; None if there are none."""
    won = set(states_won_by(label, election))
    values = []
    for row in education:
        if isinstance(row, EducationRecord):
            if row.state in won:
                values.append(row.bachelors_or_higher)
        elif isinstance(row, Mapping):
            # raw rows: a missing or bad value is skipped, not counted as 0
            state = str(row.get("state") or "").strip()
            if state in won:
                values.append(try_float(row.get("bachelorsOrHigher")))
    return mean(values)


def mean_crime_for(label: str, crime: Mapping[str, Any], election: Mapping[str, str]) -> Optional[float]:
    won = set(states_won_by(label, election))
    return mean(v for state, v in crime.items() if state in won)


def compare_candidates(
    labels: Iterable[str],
    education: Sequence[Union[EducationRecord, Mapping[str, Any]]],
    crime: Mapping[str, Any],
    election: Mapping[str, str],
) -> List[CandidateSummary]:
    out: List[CandidateSummary] = []
    for label in labels:
        summary = CandidateSummary(
            label=label,
            mean_education=mean_education_for(label, education, election),
            mean_crime=mean_crime_for(label, crime, election),
        )
        if summary.mean_education is None or summary.mean_crime is None:
            log.warning("No data for some means of label=%s: %s", label, summary)
        out.append(summary)
    return out
