import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))


def _square(x, y, size=1.0):
    return {
        "type": "Polygon",
        "coordinates": [[[x, y], [x + size, y], [x + size, y + size], [x, y + size], [x, y]]],
    }


@pytest.fixture
def two_county_geo():
    """Two lon/lat squares; 1001 has education data, 1003 does not."""
    return {
        "type": "FeatureCollection",
        "features": [
            {"type": "Feature", "id": 1001, "properties": {}, "geometry": _square(-87.0, 32.0)},
            {"type": "Feature", "id": 1003, "properties": {}, "geometry": _square(-86.0, 32.0)},
        ],
    }


@pytest.fixture
def education():
    return [
        {"fips": 1001, "state": "AL", "area_name": "Autauga County", "bachelorsOrHigher": 50},
    ]


@pytest.fixture
def election():
    return {"AL": "Trump", "CA": "Biden"}


@pytest.fixture
def crime():
    return {"AL": 510.8, "CA": 441.2}


@pytest.fixture
def data_dir(tmp_path, two_county_geo, education, election, crime):
    d = tmp_path / "data"
    d.mkdir()
    (d / "geo.json").write_text(json.dumps(two_county_geo), encoding="utf-8")
    (d / "education.json").write_text(json.dumps(education), encoding="utf-8")
    (d / "election.json").write_text(json.dumps(election), encoding="utf-8")
    (d / "crime.json").write_text(json.dumps(crime), encoding="utf-8")
    return d


@pytest.fixture
def county_topology():
    """
    Quantized TopoJSON in screen coordinates: counties 1001 and 1003 side
    by side, each also its own state. Arc 0 is the edge they share.
    """
    return {
        "type": "Topology",
        "transform": {"scale": [1, 1], "translate": [100, 100]},
        "arcs": [
            [[100, 0], [0, 100]],
            [[100, 100], [-100, 0], [0, -100], [100, 0]],
            [[100, 0], [100, 0], [0, 100], [-100, 0]],
        ],
        "objects": {
            "counties": {
                "type": "GeometryCollection",
                "geometries": [
                    {"type": "Polygon", "id": "1001", "arcs": [[1, 0]]},
                    {"type": "Polygon", "id": "1003", "arcs": [[2, -1]]},
                ],
            },
            "states": {
                "type": "GeometryCollection",
                "geometries": [
                    {"type": "Polygon", "id": "01", "arcs": [[1, 0]]},
                    {"type": "Polygon", "id": "02", "arcs": [[2, -1]]},
                ],
            },
        },
    }
