# -*- coding: utf-8 -*-
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple
import json
import logging

import requests

from core.config import AtlasConfig

log = logging.getLogger(__name__)


class DataLoadError(RuntimeError):
    def __init__(self, source: str, reason: str):
        super().__init__(f"failed to load {source}: {reason}")
        self.source = source
        self.reason = reason


@dataclass(frozen=True)
class FetchConfig:
    timeout_s: int = 15
    max_workers: int = 4
    user_agent: str = "county-atlas/0.1"


@dataclass(frozen=True)
class DataSource:
    name: str
    location: str  # http(s) URL or local file path

    @property
    def is_remote(self) -> bool:
        return self.location.startswith(("http://", "https://"))


class Datasets(NamedTuple):
    geo: Dict[str, Any]
    education: List[Dict[str, Any]]
    election: Dict[str, str]
    crime: Dict[str, Any]


def _make_session(cfg: FetchConfig) -> requests.Session:
    session = requests.Session()
    session.headers.setdefault("User-Agent", cfg.user_agent)
    return session


def fetch_json(source: DataSource, *, session: requests.Session, cfg: FetchConfig) -> Any:
    """
    Fetch and parse one source. Any failure is raised as DataLoadError
    naming the source; nothing is retried.
    """
    if not source.is_remote:
        path = Path(source.location)
        try:
            with path.open("r", encoding="utf-8-sig") as f:
                return json.load(f)
        except OSError as exc:
            log.error("Read failed source=%s path=%s err=%s", source.name, path, exc)
            raise DataLoadError(source.name, str(exc)) from exc
        except ValueError as exc:
            log.error("JSON decode failed source=%s path=%s err=%s", source.name, path, exc)
            raise DataLoadError(source.name, f"invalid JSON: {exc}") from exc

    try:
        resp = session.get(source.location, timeout=cfg.timeout_s)
        resp.raise_for_status()
        return resp.json()
    except requests.RequestException as exc:
        log.error("Request failed source=%s url=%s err=%s", source.name, source.location, exc)
        raise DataLoadError(source.name, str(exc)) from exc
    except ValueError as exc:
        log.error("JSON decode failed source=%s url=%s err=%s", source.name, source.location, exc)
        raise DataLoadError(source.name, f"invalid JSON: {exc}") from exc


def load_all(
    sources: Sequence[DataSource],
    *,
    cfg: Optional[FetchConfig] = None,
    session: Optional[requests.Session] = None,
) -> Tuple[Any, ...]:
    """
    Fetch every source concurrently and return the payloads in the order
    given. All-or-nothing: if any source fails, the first failing source
    (in that order) is raised once every fetch has finished.
    """
    cfg = cfg or FetchConfig()
    if not sources:
        return ()

    own_session = session is None
    session = session or _make_session(cfg)

    try:
        workers = max(1, min(cfg.max_workers, len(sources)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="atlas-fetch") as pool:
            futures = [pool.submit(fetch_json, src, session=session, cfg=cfg) for src in sources]

        results: List[Any] = []
        for src, fut in zip(sources, futures):
            exc = fut.exception()
            if exc is not None:
                raise exc
            results.append(fut.result())
            log.debug("Loaded source=%s from %s", src.name, src.location)
    finally:
        if own_session:
            session.close()

    return tuple(results)


def _expect(name: str, payload: Any, kind: type) -> Any:
    if not isinstance(payload, kind):
        log.error("Unexpected payload source=%s got=%s", name, type(payload).__name__)
        raise DataLoadError(name, f"expected {kind.__name__}, got {type(payload).__name__}")
    return payload


def load_datasets(
    config: Optional[AtlasConfig] = None,
    *,
    session: Optional[requests.Session] = None,
) -> Datasets:
    """Load geography, education, election and crime in that order."""
    config = config or AtlasConfig()
    sources = [DataSource(name, loc) for name, loc in config.sources.named()]
    cfg = FetchConfig(timeout_s=config.timeout_s)

    geo, education, election, crime = load_all(sources, cfg=cfg, session=session)
    log.info(
        "Loaded datasets: education=%d election=%d crime=%d",
        len(_expect("education", education, list)),
        len(_expect("election", election, dict)),
        len(_expect("crime", crime, dict)),
    )
    return Datasets(
        geo=_expect("geo", geo, dict),
        education=education,
        election=election,
        crime=crime,
    )
