#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Run the cookbook API server (FastAPI + Uvicorn).

Usage:
  python3 devtools/serve_cookbook.py --host 0.0.0.0 --port 20000
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import uvicorn  # type: ignore

from apps.cookbook.app import create_app  # noqa: E402
from apps.cookbook.catalog_store import CatalogError  # noqa: E402
from core.config import load_config  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description="Sulfur Cookbook (FastAPI) server.")
    parser.add_argument("--config", default="", help="settings.ini path (default: conf/settings.ini)")
    parser.add_argument("--recipes", default="", help="Scraped recipes JSON (overrides config)")
    parser.add_argument("--ingredients", default="", help="Scraped ingredients JSON (overrides config)")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--root-path", default="", help="Reverse proxy mount path, e.g. /cookbook")
    parser.add_argument("--reload-catalog", action="store_true", help="Auto-reload data when files change")
    parser.add_argument("--unify-effect-filter", action="store_true", help="Match effect filters on any variation")
    parser.add_argument("--log-level", default="info", choices=["critical", "error", "warning", "info", "debug", "trace"])
    parser.add_argument("--cors-allow-origin", action="append", default=[], help="CORS allow origin (repeatable)")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.log_level in ("debug", "trace") else getattr(logging, args.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = load_config(Path(args.config).expanduser() if args.config else None)
    recipes_path = Path(args.recipes).expanduser().resolve() if args.recipes else cfg.recipes_path
    ingredients_path = Path(args.ingredients).expanduser().resolve() if args.ingredients else cfg.ingredients_path

    for p in (recipes_path, ingredients_path):
        if not p.exists():
            print(f"❌ Data file not found: {p}")
            sys.exit(2)

    try:
        app = create_app(
            recipes_path,
            ingredients_path,
            root_path=args.root_path,
            cors_allow_origins=(args.cors_allow_origin or None),
            gzip_minimum_size=800,
            auto_reload_catalog=bool(args.reload_catalog),
            page_size=cfg.page_size,
            unify_effect_filter=bool(args.unify_effect_filter or cfg.unify_effect_filter),
            image_base_url=cfg.image_base_url,
            known_urls_path=cfg.known_urls_path,
        )
    except CatalogError as e:
        print(f"❌ {e}")
        sys.exit(2)

    rp = (args.root_path or "").rstrip("/")
    print(f"Sulfur Cookbook: http://{args.host}:{int(args.port)}{rp}/docs")
    print(f"Recipes: {recipes_path}")
    print(f"Ingredients: {ingredients_path}")

    uvicorn.run(
        app,
        host=str(args.host),
        port=int(args.port),
        log_level=args.log_level,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )


if __name__ == "__main__":
    main()
