#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Shared helpers for CLI tools."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from apps.cookbook.catalog_store import CatalogStore
from core.config import CookbookConfig, load_config
from core.dataset import RecipeDataset
from core.images import ImageResolver, load_known_urls

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DATA_DIR = PROJECT_ROOT / "data"
CONF_DIR = PROJECT_ROOT / "conf"


def resolver_for(cfg: CookbookConfig) -> ImageResolver:
    resolver = ImageResolver(base_url=cfg.image_base_url)
    if cfg.known_urls_path and cfg.known_urls_path.exists():
        resolver = resolver.with_overrides(load_known_urls(cfg.known_urls_path))
    return resolver


def load_dataset(
    cfg: CookbookConfig,
    recipes_path: Optional[Path] = None,
    ingredients_path: Optional[Path] = None,
) -> RecipeDataset:
    store = CatalogStore(
        recipes_path or cfg.recipes_path,
        ingredients_path or cfg.ingredients_path,
        resolver=resolver_for(cfg),
    )
    return store.dataset


def load_cli_config(path: Optional[str]) -> CookbookConfig:
    return load_config(Path(path).expanduser() if path else None)


def split_multi(values: Optional[List[str]]) -> List[str]:
    """Flatten repeatable, comma-separated options: ["a,b", "c"] -> ["a", "b", "c"]."""
    out: List[str] = []
    for v in values or []:
        for part in str(v).split(","):
            part = part.strip()
            if part and part not in out:
                out.append(part)
    return out


def human_count(counts: Dict[str, int]) -> str:
    return ", ".join(f"{k}={v}" for k, v in counts.items()) or "-"
