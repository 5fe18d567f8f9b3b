# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class CookbookSettings:
    """Runtime settings for the cookbook server.

    Notes
    - recipes_path / ingredients_path point at the scraped JSON documents.
    - root_path is for reverse-proxy mount (e.g. '/cookbook')
    - page_size caps the default page length of /recipes.
    """

    recipes_path: Path
    ingredients_path: Path
    root_path: str = ""
    cors_allow_origins: Optional[List[str]] = None
    gzip_minimum_size: int = 800
    page_size: int = 10
    unify_effect_filter: bool = False

    @staticmethod
    def normalize_root_path(root_path: str) -> str:
        rp = (root_path or "").strip()
        if not rp:
            return ""
        if not rp.startswith("/"):
            rp = "/" + rp
        rp = rp.rstrip("/")
        return rp
