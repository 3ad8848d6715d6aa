from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Optional, Tuple

from core.paths import DATA_DIR_ENV, OUT_DIR_ENV, default_data_dir, default_out_dir, env_dir

GDP_URL = "https://raw.githubusercontent.com/FreeCodeCamp/ProjectReferenceData/master/GDP-data.json"
GDP_INFO_URL = "http://www.bea.gov/national/pdf/nipaguid.pdf"

log = logging.getLogger(__name__)

ELECTION_BLUE = "rgb(10, 106, 166)"
ELECTION_RED = "rgb(205, 24, 28)"


@dataclass(frozen=True)
class DataSources:
    """Where each dataset lives. Relative paths resolve against data_dir."""
    geo: str = "geo.json"
    education: str = "education.json"
    election: str = "election.json"
    crime: str = "crime.json"
    gdp: str = GDP_URL
    data_dir: Path = field(default_factory=default_data_dir)

    def resolve(self, location: str) -> str:
        if location.startswith(("http://", "https://")):
            return location
        p = Path(location).expanduser()
        if not p.is_absolute():
            p = self.data_dir / p
        return str(p)

    def named(self) -> Tuple[Tuple[str, str], ...]:
        # fixed order: geography, education, election, crime
        return (
            ("geo", self.resolve(self.geo)),
            ("education", self.resolve(self.education)),
            ("election", self.resolve(self.election)),
            ("crime", self.resolve(self.crime)),
        )


@dataclass(frozen=True)
class RenderConfig:
    width: int = 1000
    height: int = 700
    padding: int = 24
    tiles: Optional[str] = "CartoDB positron"
    stroke_width: float = 0.5
    fill_opacity: float = 0.9
    winner_colors: Dict[str, str] = field(
        default_factory=lambda: {"Biden": ELECTION_BLUE, "Trump": ELECTION_RED}
    )


@dataclass(frozen=True)
class AtlasConfig:
    sources: DataSources = field(default_factory=DataSources)
    render: RenderConfig = field(default_factory=RenderConfig)
    out_dir: Path = field(default_factory=default_out_dir)
    timeout_s: int = 15
    charts: Tuple[str, ...] = ("education-graph", "election-graph", "crime-graph")

    @classmethod
    def from_env(cls, env: Optional[Dict[str, str]] = None) -> "AtlasConfig":
        env = os.environ if env is None else env
        cfg = cls()

        overrides = {}
        for name in ("geo", "education", "election", "crime", "gdp"):
            value = env.get(f"COUNTY_ATLAS_{name.upper()}_URL")
            if value:
                overrides[name] = value
        data_dir = env_dir(DATA_DIR_ENV, env)
        if data_dir:
            overrides["data_dir"] = data_dir
        sources = replace(cfg.sources, **overrides)

        timeout_s = cfg.timeout_s
        if env.get("COUNTY_ATLAS_TIMEOUT"):
            try:
                timeout_s = int(env["COUNTY_ATLAS_TIMEOUT"])
            except ValueError:
                log.warning("Ignoring COUNTY_ATLAS_TIMEOUT=%r; using %ds",
                            env["COUNTY_ATLAS_TIMEOUT"], timeout_s)

        out_dir = env_dir(OUT_DIR_ENV, env) or cfg.out_dir

        return replace(cfg, sources=sources, timeout_s=timeout_s, out_dir=out_dir)
