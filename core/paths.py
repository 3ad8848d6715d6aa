from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Mapping, Optional

APP_NAME = "county-atlas"

DATA_DIR_ENV = "COUNTY_ATLAS_DATA_DIR"
OUT_DIR_ENV = "COUNTY_ATLAS_OUT_DIR"


def project_root() -> Path:
    # core/paths.py lives at <repo_root>/core/paths.py
    return Path(__file__).resolve().parents[1]


def env_dir(var: str, env: Optional[Mapping[str, str]] = None) -> Optional[Path]:
    """Directory named by an environment variable, or None when unset or blank."""
    env = os.environ if env is None else env
    value = (env.get(var) or "").strip()
    return Path(value).expanduser().resolve() if value else None


def user_data_home(env: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if env is None else env
    if sys.platform.startswith("win"):
        base = env.get("LOCALAPPDATA") or env.get("APPDATA")
        return Path(base) if base else Path.home()
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    return Path(env.get("XDG_DATA_HOME") or Path.home() / ".local" / "share")


def default_data_dir(env: Optional[Mapping[str, str]] = None) -> Path:
    """Input datasets: $COUNTY_ATLAS_DATA_DIR, else <repo>/data."""
    return env_dir(DATA_DIR_ENV, env) or project_root() / "data"


def default_out_dir(env: Optional[Mapping[str, str]] = None) -> Path:
    """Rendered pages: $COUNTY_ATLAS_OUT_DIR, else <user data home>/county-atlas/maps."""
    return env_dir(OUT_DIR_ENV, env) or user_data_home(env) / APP_NAME / "maps"
