# -*- coding: utf-8 -*-
from __future__ import annotations

import hashlib
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from core.dataset import RecipeDataset
from core.indexers.vocabulary import effect_item_count, filter_vocabulary
from core.query import (
    HEALTH_SORT_MODES,
    SORT_FIELDS,
    QueryOptions,
    SortSpec,
    duration_display,
    health_display,
    hps_display,
    type_display,
)
from core.schemas.meta import build_meta
from core.schemas.recipes import GroupedItem
from core.state import ViewState

from .catalog_store import CatalogError, CatalogStore

logger = logging.getLogger(__name__)


def get_store(request: Request) -> CatalogStore:
    """Resolve the catalog store from app state (with optional auto-reload)."""

    store: CatalogStore = request.app.state.store  # type: ignore[attr-defined]
    if bool(getattr(request.app.state, "auto_reload_catalog", False)):
        try:
            store.load(force=False)
        except CatalogError as e:
            # keep serving the previous dataset
            logger.warning("Catalog reload failed: %s", e)
    return store


def get_dataset(store: CatalogStore = Depends(get_store)) -> RecipeDataset:
    return store.dataset


def _cache_headers(request: Request, *, max_age: int, etag: Optional[str] = None) -> Dict[str, str]:
    if max_age <= 0:
        return {}
    if bool(getattr(request.app.state, "auto_reload_catalog", False)):
        return {}
    headers = {"Cache-Control": f"public, max-age={int(max_age)}"}
    if etag:
        headers["ETag"] = str(etag)
    return headers


def _json(data: Dict[str, Any], *, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(content=data, headers=headers or {})


def _sig(*parts: Any) -> str:
    return hashlib.sha1(repr(parts).encode("utf-8")).hexdigest()[:8]


router = APIRouter(prefix="/api/v1")


# ----------------- response models -----------------


class PageInfo(BaseModel):
    page: int
    total_pages: int
    total: int
    page_size: int


class GroupRow(BaseModel):
    """One table row: the grouped item plus display strings of its primary recipe."""

    name: str
    type: str
    type_label: str
    image_url: str
    health_label: str
    duration_label: str
    hps_label: str
    difficulty: int
    total_variations: int
    primary_recipe: Dict[str, Any]
    recipes: List[Dict[str, Any]] = Field(default_factory=list)


class RecipePage(BaseModel):
    items: List[GroupRow]
    info: PageInfo
    filters: Dict[str, Any] = Field(default_factory=dict)


class VocabEntry(BaseModel):
    name: str
    count: int
    image: Optional[str] = None


class VocabResponse(BaseModel):
    items: List[VocabEntry]
    count: int


class OptionEntry(BaseModel):
    name: str
    active: bool
    valid: bool
    projected_count: int
    enabled: bool


class CombinationResponse(BaseModel):
    active: List[str]
    options: List[OptionEntry]
    matching: int


def _row(group: GroupedItem) -> GroupRow:
    primary = group.primary_recipe
    return GroupRow(
        name=group.name,
        type=primary.type,
        type_label=type_display(primary.type),
        image_url=primary.image_url,
        health_label=health_display(primary),
        duration_label=duration_display(primary.duration),
        hps_label=hps_display(primary),
        difficulty=len(primary.ingredients),
        total_variations=group.total_variations,
        primary_recipe=primary.to_dict(),
        recipes=[r.to_dict() for r in group.recipes],
    )


# ----------------- meta -----------------


@router.get("/meta")
def meta(request: Request, store: CatalogStore = Depends(get_store)):
    ds = store.dataset
    m = build_meta(
        ds.meta,
        counts={
            "recipes": len(ds.recipes),
            "groups": len(ds.groups),
            "ingredients": len(ds.ingredients),
            "effects": len(ds.effect_counts),
        },
        sources=store.sources(),
        extra={
            "sort_fields": list(SORT_FIELDS),
            "health_modes": list(HEALTH_SORT_MODES),
            "page_size": int(getattr(request.app.state, "page_size", 10)),
        },
    )
    etag = f'W/"meta-{int(store.mtime())}"'
    return _json(m, headers=_cache_headers(request, max_age=60, etag=etag))


# ----------------- recipes -----------------


@router.get("/recipes", response_model=RecipePage)
def recipes(
    request: Request,
    ds: RecipeDataset = Depends(get_dataset),
    q: str = Query("", max_length=200),
    category: List[str] = Query([]),
    ingredient: List[str] = Query([]),
    effect: List[str] = Query([]),
    sort: str = Query("name"),
    direction: str = Query("asc"),
    health_mode: str = Query("hp_desc"),
    page: int = Query(1),
    page_size: Optional[int] = Query(None, ge=1, le=500),
):
    """Filtered + sorted + paginated group list (out-of-range pages are clamped)."""
    state = ViewState(
        search_text=q,
        category_filters=tuple(category),
        ingredient_filters=tuple(ingredient),
        effect_filters=tuple(effect),
        sort=SortSpec(field=sort, direction=direction, health_mode=health_mode).normalized(),
        page=page,
    )
    opts = state.to_options(unify_effect_filter=bool(getattr(request.app.state, "unify_effect_filter", False)))
    size = int(page_size or getattr(request.app.state, "page_size", 10))
    result = ds.page(opts, page=state.page, page_size=size)
    return RecipePage(
        items=[_row(g) for g in result.items],
        info=PageInfo(page=result.page, total_pages=result.total_pages, total=result.total, page_size=result.page_size),
        filters={
            "q": q,
            "category": list(opts.category_filters),
            "ingredient": list(opts.ingredient_filters),
            "effect": list(opts.effect_filters),
            "sort": opts.sort.field,
            "direction": opts.sort.direction,
            "health_mode": opts.sort.health_mode,
        },
    )


@router.get("/recipes/{name}", response_model=GroupRow)
def recipe_group(name: str, ds: RecipeDataset = Depends(get_dataset)):
    group = ds.group(name)
    if group is None:
        raise HTTPException(status_code=404, detail=f"Recipe not found: {name}")
    return _row(group)


# ----------------- ingredients -----------------


@router.get("/ingredients")
def ingredients(
    request: Request,
    store: CatalogStore = Depends(get_store),
    q: str = Query("", max_length=200),
):
    ds = store.dataset
    needle = q.strip().lower()
    # documented ingredients first, then names only seen in recipes
    rows = []
    for name in ds.known_ingredient_names():
        ing = ds.ingredient(name)
        if not needle or needle in name.lower() or needle in ing.description.lower():
            rows.append(ing.to_dict())
    etag = f'W/"ingredients-{int(store.mtime())}-{_sig(needle)}-{len(rows)}"'
    return _json({"items": rows, "count": len(rows)}, headers=_cache_headers(request, max_age=300, etag=etag))


@router.get("/ingredients/{name}")
def ingredient_detail(name: str, ds: RecipeDataset = Depends(get_dataset)):
    used = ds.recipes_using(name)
    if name not in ds.ingredients and not used:
        raise HTTPException(status_code=404, detail=f"Ingredient not found: {name}")
    crafted = ds.crafting_recipe_for(name)
    return {
        "ingredient": ds.ingredient(name).to_dict(),
        "used_in_recipes": [r.to_dict() for r in used],
        "crafted_by": crafted.to_dict() if crafted else None,
        "any_of": ds.any_of(name),
    }


# ----------------- vocabularies / combinations -----------------


@router.get("/vocab/ingredients", response_model=VocabResponse)
def vocab_ingredients(
    ds: RecipeDataset = Depends(get_dataset),
    q: str = Query("", max_length=200),
    active: List[str] = Query([]),
    limit: Optional[int] = Query(None, ge=1, le=5000),
):
    """Ingredient vocabulary, restricted to names still valid next to `active`."""
    counts = dict(ds.ingredient_counts)
    names = filter_vocabulary(ds.ingredient_vocabulary, q, allowed=ds.validator.valid(active))
    if limit:
        names = names[:limit]
    items = [VocabEntry(name=n, count=counts.get(n, 0), image=ds.ingredient_image(n)) for n in names]
    return VocabResponse(items=items, count=len(items))


@router.get("/vocab/effects", response_model=VocabResponse)
def vocab_effects(
    ds: RecipeDataset = Depends(get_dataset),
    q: str = Query("", max_length=200),
    limit: Optional[int] = Query(None, ge=1, le=5000),
):
    names = filter_vocabulary(ds.effect_vocabulary, q)
    if limit:
        names = names[:limit]
    items = [VocabEntry(name=n, count=effect_item_count(ds.groups, n)) for n in names]
    return VocabResponse(items=items, count=len(items))


@router.get("/combinations", response_model=CombinationResponse)
def combinations(
    ds: RecipeDataset = Depends(get_dataset),
    ingredient: List[str] = Query([]),
):
    active = [i for i in ingredient if i]
    options = [OptionEntry(**opt.to_dict()) for opt in ds.validator.options(active)]
    matching = len(ds.query(QueryOptions(ingredient_filters=tuple(active))))
    return CombinationResponse(active=active, options=options, matching=matching)


@router.get("/image")
def image(name: str = Query(..., min_length=1), ds: RecipeDataset = Depends(get_dataset)):
    return {"name": name, "url": ds.ingredient_image(name)}
