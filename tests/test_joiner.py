import pytest

from data_pipeline.joiner import (
    classify,
    classify_all,
    compare_candidates,
    fips_key,
    index_education,
    mean_crime_for,
    mean_education_for,
    states_won_by,
)
from data_pipeline.models import EducationRecord, GeographicUnit


@pytest.mark.parametrize("value,expected", [
    (1001, "1001"),
    ("1001", "1001"),
    ("01001", "1001"),
    (1001.0, "1001"),
    (" Alabama ", "Alabama"),
    (None, None),
    ("", None),
])
def test_fips_key(value, expected):
    assert fips_key(value) == expected


def test_classify_joins_education_election_and_crime(education, election, crime):
    view = classify(GeographicUnit(key="01001"), education, election, crime)

    assert view.matched
    assert view.education.area_name == "Autauga County"
    assert view.education.bachelors_or_higher == 50
    assert view.state == "AL"
    assert view.election_result == "Trump"
    assert view.crime_rate == 510.8


def test_classify_miss_defaults_without_raising(education, election, crime):
    view = classify(GeographicUnit(key=99999), education, election, crime)

    assert not view.matched
    assert view.education.bachelors_or_higher == 0
    assert view.education.area_name == ""
    assert view.education.state == ""
    assert view.election_result is None
    assert view.crime_rate is None


def test_classify_state_missing_from_election_and_crime():
    edu = [{"fips": 6037, "state": "CA", "area_name": "Los Angeles County", "bachelorsOrHigher": 31.2}]
    view = classify(GeographicUnit(key=6037), edu, {}, {"CA": "n/a"})
    assert view.matched
    assert view.election_result is None
    assert view.crime_rate is None


def test_malformed_education_row_degrades():
    rec = EducationRecord.from_raw({"fips": 1, "bachelorsOrHigher": "lots", "state": None})
    assert rec.bachelors_or_higher == 0.0
    assert rec.state == ""
    assert rec.area_name == ""


def test_index_keeps_first_record_and_skips_junk():
    index = index_education([
        {"fips": 1001, "state": "AL", "bachelorsOrHigher": 10},
        {"fips": "01001", "state": "AL", "bachelorsOrHigher": 99},
        {"state": "AL"},
        "not a row",
    ])
    assert list(index) == ["1001"]
    assert index["1001"].bachelors_or_higher == 10


def test_classify_all(education, election, crime):
    units = [GeographicUnit(key=1001), GeographicUnit(key=1003)]
    views = classify_all(units, education, election, crime)
    assert [v.matched for v in views] == [True, False]


def test_group_means():
    election = {"A": "Biden", "B": "Trump"}
    education = [
        {"state": "A", "bachelorsOrHigher": 40},
        {"state": "B", "bachelorsOrHigher": 20},
    ]
    assert states_won_by("Biden", election) == ["A"]
    assert mean_education_for("Biden", education, election) == 40
    assert mean_education_for("Trump", education, election) == 20


def test_mean_education_skips_missing_values():
    election = {"A": "Biden"}
    education = [
        {"state": "A", "bachelorsOrHigher": 40},
        {"state": "A", "bachelorsOrHigher": None},
        {"state": "A", "bachelorsOrHigher": "n/a"},
        {"state": "A"},
    ]
    assert mean_education_for("Biden", education, election) == 40
    assert mean_education_for("Biden", education[1:], election) is None


def test_group_means_empty_is_no_data():
    election = {"A": "Biden"}
    assert mean_education_for("Trump", [{"state": "A", "bachelorsOrHigher": 40}], election) is None
    assert mean_crime_for("Trump", {"A": 300}, election) is None


def test_mean_crime_for():
    election = {"A": "Biden", "B": "Biden", "C": "Trump"}
    crime = {"A": 300, "B": 500, "C": 100}
    assert mean_crime_for("Biden", crime, election) == 400
    assert mean_crime_for("Trump", crime, election) == 100


def test_compare_candidates(education, election, crime):
    summaries = compare_candidates(["Biden", "Trump"], education, crime, election)
    biden, trump = summaries
    assert biden.mean_education is None  # no CA counties in the fixture
    assert biden.mean_crime == 441.2
    assert trump.mean_education == 50
    assert trump.mean_crime == 510.8
