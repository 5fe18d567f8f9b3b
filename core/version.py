# -*- coding: utf-8 -*-
"""Project / data version helpers (conf/version.json)."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Dict

VERSION_FILE = Path(__file__).resolve().parents[1] / "conf" / "version.json"


@lru_cache(maxsize=1)
def _load_version_file() -> Dict[str, str]:
    if not VERSION_FILE.exists():
        return {}
    try:
        data = json.loads(VERSION_FILE.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    if not isinstance(data, dict):
        return {}
    return {k: v.strip() for k, v in data.items() if isinstance(v, str) and v.strip()}


def project_version() -> str:
    return _load_version_file().get("project_version", "unknown")


def data_version() -> str:
    """Scrape snapshot the bundled data corresponds to (falls back to project version)."""
    return _load_version_file().get("index_version") or project_version()


def versions() -> Dict[str, str]:
    return {
        "project_version": project_version(),
        "data_version": data_version(),
    }
