"""Load environment and optional YAML settings."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from jobmatch.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
SETTINGS_PATH: Path = CONFIG_DIR / "settings.yaml"

DEFAULT_SETTINGS: dict[str, Any] = {
    "workers": 1,
    "max_queries": 5,
    "results_per_query": 10,
    "lexicon_path": None,
    "remotive": True,
}


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def load_settings(path: Path | None = None) -> dict[str, Any]:
    """Merge settings.yaml over the defaults; a missing file means defaults."""
    path = path or Path(get_env("JOBMATCH_SETTINGS") or SETTINGS_PATH)
    settings = dict(DEFAULT_SETTINGS)
    if not path.exists():
        log.debug("No settings file at %s, using defaults", path)
        return settings

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a mapping")

    unknown = set(data) - set(DEFAULT_SETTINGS)
    if unknown:
        log.warning("Ignoring unknown settings: %s", ", ".join(sorted(unknown)))
    for key in DEFAULT_SETTINGS:
        if key in data and data[key] is not None:
            settings[key] = data[key]

    settings["workers"] = max(1, int(settings["workers"]))
    settings["max_queries"] = max(1, int(settings["max_queries"]))
    settings["results_per_query"] = max(1, int(settings["results_per_query"]))
    return settings
