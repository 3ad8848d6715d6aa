"""Loader: concurrent all-or-nothing fetch of the json sources."""
import json
import threading
from dataclasses import replace

import pytest
import requests

from core.config import AtlasConfig, DataSources
from data_pipeline.loader import (
    DataLoadError,
    DataSource,
    Datasets,
    FetchConfig,
    fetch_json,
    load_all,
    load_datasets,
)


class FakeResponse:
    def __init__(self, payload=None, status=200, text=None):
        self._payload = payload
        self.status_code = status
        self._text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self._text is not None:
            return json.loads(self._text)
        return self._payload


class FakeSession:
    def __init__(self, responses):
        self.responses = responses
        self.calls = []
        self._lock = threading.Lock()

    def get(self, url, timeout=None):
        with self._lock:
            self.calls.append((url, timeout))
        result = self.responses[url]
        if isinstance(result, Exception):
            raise result
        return result


def test_load_all_keeps_source_order():
    session = FakeSession({
        "https://x/a.json": FakeResponse({"a": 1}),
        "https://x/b.json": FakeResponse([1, 2]),
        "https://x/c.json": FakeResponse("c"),
    })
    sources = [DataSource(n, f"https://x/{n}.json") for n in ("a", "b", "c")]

    assert load_all(sources, session=session, cfg=FetchConfig(timeout_s=3)) == ({"a": 1}, [1, 2], "c")
    assert {t for _, t in session.calls} == {3}


def test_load_all_fails_whole_pipeline_on_one_error():
    session = FakeSession({
        "https://x/a.json": FakeResponse({"a": 1}),
        "https://x/b.json": requests.ConnectionError("boom"),
    })
    sources = [DataSource("a", "https://x/a.json"), DataSource("b", "https://x/b.json")]

    with pytest.raises(DataLoadError) as excinfo:
        load_all(sources, session=session)
    assert excinfo.value.source == "b"
    assert "boom" in str(excinfo.value)


def test_http_status_error_is_load_failure():
    session = FakeSession({"https://x/a.json": FakeResponse(status=404)})
    with pytest.raises(DataLoadError, match="a"):
        fetch_json(DataSource("a", "https://x/a.json"), session=session, cfg=FetchConfig())


def test_bad_json_is_load_failure():
    session = FakeSession({"https://x/a.json": FakeResponse(text="{not json")})
    with pytest.raises(DataLoadError) as excinfo:
        fetch_json(DataSource("a", "https://x/a.json"), session=session, cfg=FetchConfig())
    assert "invalid JSON" in excinfo.value.reason


def test_local_files(tmp_path):
    (tmp_path / "one.json").write_text('{"ok": true}', encoding="utf-8")
    (tmp_path / "bad.json").write_text("nope", encoding="utf-8")

    (payload,) = load_all([DataSource("one", str(tmp_path / "one.json"))])
    assert payload == {"ok": True}

    with pytest.raises(DataLoadError) as excinfo:
        load_all([DataSource("bad", str(tmp_path / "bad.json"))])
    assert excinfo.value.source == "bad"

    with pytest.raises(DataLoadError) as excinfo:
        load_all([DataSource("missing", str(tmp_path / "missing.json"))])
    assert excinfo.value.source == "missing"


def test_load_all_empty():
    assert load_all([]) == ()


def test_load_datasets(data_dir, education, election, crime):
    config = AtlasConfig(sources=DataSources(data_dir=data_dir))
    data = load_datasets(config)

    assert isinstance(data, Datasets)
    assert data.geo["type"] == "FeatureCollection"
    assert data.education == education
    assert data.election == election
    assert data.crime == crime


def test_load_datasets_rejects_wrong_shape(data_dir):
    (data_dir / "election.json").write_text("[1, 2, 3]", encoding="utf-8")
    config = AtlasConfig(sources=DataSources(data_dir=data_dir))

    with pytest.raises(DataLoadError) as excinfo:
        load_datasets(config)
    assert excinfo.value.source == "election"


def test_load_datasets_missing_source(data_dir):
    config = AtlasConfig(sources=replace(DataSources(data_dir=data_dir), crime="nowhere.json"))
    with pytest.raises(DataLoadError) as excinfo:
        load_datasets(config)
    assert excinfo.value.source == "crime"
