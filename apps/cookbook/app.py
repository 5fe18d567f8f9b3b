# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from core.images import ImageResolver, load_known_urls

from .api import router as api_router
from .catalog_store import CatalogStore
from .settings import CookbookSettings

logger = logging.getLogger(__name__)


def create_app(
    recipes_path: Path,
    ingredients_path: Path,
    *,
    root_path: str = "",
    cors_allow_origins: Optional[Sequence[str]] = None,
    gzip_minimum_size: int = 800,
    auto_reload_catalog: bool = False,
    page_size: int = 10,
    unify_effect_filter: bool = False,
    image_base_url: Optional[str] = None,
    known_urls_path: Optional[Path] = None,
) -> FastAPI:
    """FastAPI app factory."""

    settings = CookbookSettings(
        recipes_path=Path(recipes_path),
        ingredients_path=Path(ingredients_path),
        root_path=CookbookSettings.normalize_root_path(root_path),
        cors_allow_origins=list(cors_allow_origins) if cors_allow_origins else None,
        gzip_minimum_size=int(gzip_minimum_size or 0),
        page_size=max(1, int(page_size or 10)),
        unify_effect_filter=bool(unify_effect_filter),
    )

    app = FastAPI(
        title="Sulfur Cookbook API",
        version="1.0",
        root_path=settings.root_path,
        docs_url="/docs",
        redoc_url=None,
    )

    # image table (built-in, optionally extended from JSON)
    resolver = ImageResolver(base_url=image_base_url) if image_base_url else ImageResolver()
    if known_urls_path:
        p = Path(known_urls_path)
        if p.exists():
            resolver = resolver.with_overrides(load_known_urls(p))
        else:
            logger.warning("Image table not found: %s (using built-in table)", p)

    # state
    app.state.settings = settings
    app.state.store = CatalogStore(settings.recipes_path, settings.ingredients_path, resolver=resolver)
    app.state.auto_reload_catalog = bool(auto_reload_catalog)
    app.state.page_size = settings.page_size
    app.state.unify_effect_filter = settings.unify_effect_filter

    # middleware
    if settings.gzip_minimum_size > 0:
        app.add_middleware(GZipMiddleware, minimum_size=settings.gzip_minimum_size)

    if settings.cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.cors_allow_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # routes
    app.include_router(api_router)

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    return app
