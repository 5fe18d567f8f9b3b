# -*- coding: utf-8 -*-
"""core/query.py

Search / filter / sort / paginate over grouped recipes.

Filter semantics
- search      : case-insensitive substring on name, primary description,
                primary ingredient + effect names, and ingredient names of
                every variation
- categories  : OR across the selected categories (primary recipe type)
- ingredients : AND across filters, each satisfied by ANY variation
- effects     : AND across filters, checked on the PRIMARY recipe only
                (unify_effect_filter=True switches to the any-variation rule)

Sort modes
- name / type      : string compare (case-insensitive first)
- duration         : primary duration
- difficulty       : primary ingredient count
- hps              : health per second; damage items always after healing items
- health           : 4-state cycle hp_desc -> hp_asc -> dmg_desc -> dmg_asc;
                     the mode's primary type always comes first
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from core.schemas.recipes import GroupedItem, Recipe

__all__ = [
    "CATEGORY_FILTERS",
    "HEALTH_SORT_MODES",
    "SORT_FIELDS",
    "Page",
    "QueryOptions",
    "SortSpec",
    "duration_display",
    "health_display",
    "hps_display",
    "matches_categories",
    "matches_effects",
    "matches_ingredients",
    "matches_search",
    "paginate",
    "query",
    "resolve_categories",
    "sort_groups",
    "type_display",
]

DEFAULT_PAGE_SIZE = 10

SORT_FIELDS = ("name", "type", "health", "duration", "difficulty", "hps")
SORT_DIRECTIONS = ("asc", "desc")
HEALTH_SORT_MODES = ("hp_desc", "hp_asc", "dmg_desc", "dmg_asc")

# filter button label -> scraped category key
CATEGORY_FILTERS: Dict[str, str] = {
    "Consumables": "cooked_consumables",
    "Throwables": "cooked_throwables",
    "Equipment": "cooked_equipment",
}

TYPE_DISPLAY_NAMES: Dict[str, str] = {
    "cooked_consumables": "Consumable",
    "cooked_throwables": "Throwable",
    "cooked_equipment": "Equipment",
}


@dataclass(frozen=True)
class SortSpec:
    field: str = "name"
    direction: str = "asc"
    health_mode: str = "hp_desc"

    def normalized(self) -> "SortSpec":
        f = self.field if self.field in SORT_FIELDS else "name"
        d = self.direction if self.direction in SORT_DIRECTIONS else "asc"
        m = self.health_mode if self.health_mode in HEALTH_SORT_MODES else "hp_desc"
        return SortSpec(field=f, direction=d, health_mode=m)


@dataclass(frozen=True)
class QueryOptions:
    search_text: str = ""
    category_filters: Tuple[str, ...] = ()
    ingredient_filters: Tuple[str, ...] = ()
    effect_filters: Tuple[str, ...] = ()
    sort: SortSpec = field(default_factory=SortSpec)
    unify_effect_filter: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "category_filters", tuple(self.category_filters or ()))
        object.__setattr__(self, "ingredient_filters", tuple(self.ingredient_filters or ()))
        object.__setattr__(self, "effect_filters", tuple(self.effect_filters or ()))


# =========================================================
# Predicates
# =========================================================

def matches_search(group: GroupedItem, text: str) -> bool:
    needle = (text or "").lower()
    if not needle:
        return True
    primary = group.primary_recipe
    if needle in group.name.lower():
        return True
    if needle in primary.description.lower():
        return True
    if any(needle in ing.lower() for ing in primary.ingredients):
        return True
    if any(needle in eff.lower() for eff in primary.effect_names):
        return True
    return any(needle in ing.lower() for r in group.recipes for ing in r.ingredients)


def resolve_categories(filters: Iterable[str]) -> List[str]:
    """Map filter labels ("Consumables") to category keys; raw keys pass through."""
    return [CATEGORY_FILTERS.get(f, f) for f in filters if f]


def matches_categories(group: GroupedItem, categories: Sequence[str]) -> bool:
    if not categories:
        return True
    return group.primary_recipe.type in set(resolve_categories(categories))


def matches_ingredients(group: GroupedItem, ingredients: Iterable[str]) -> bool:
    return all(group.has_ingredient(ing) for ing in ingredients)


def matches_effects(group: GroupedItem, effects: Iterable[str], any_variation: bool = False) -> bool:
    if any_variation:
        return all(group.has_effect(eff) for eff in effects)
    names = group.primary_recipe.effect_names
    return all(eff in names for eff in effects)


# =========================================================
# Sorting
# =========================================================

def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def _cmp_str(a: str, b: str) -> int:
    return _cmp(a.casefold(), b.casefold()) or _cmp(a, b)


def _directed(result: int, direction: str) -> int:
    return result if direction == "asc" else -result


def _health_cmp(a: Recipe, b: Recipe, mode: str) -> int:
    damage_first = mode.startswith("dmg")
    a_primary = a.is_damage == damage_first
    b_primary = b.is_damage == damage_first
    if a_primary != b_primary:
        return -1 if a_primary else 1
    if a.is_damage:
        av, bv = a.damage or 0.0, b.damage or 0.0
    else:
        av, bv = a.health or 0.0, b.health or 0.0
    return _directed(_cmp(av, bv), "asc" if mode.endswith("asc") else "desc")


def _hps_cmp(a: Recipe, b: Recipe, direction: str) -> int:
    if a.is_damage != b.is_damage:
        return 1 if a.is_damage else -1
    if a.is_damage:
        return _directed(_cmp(a.damage or 0.0, b.damage or 0.0), direction)
    return _directed(_cmp(a.health_per_second, b.health_per_second), direction)


def _group_cmp(spec: SortSpec):
    def compare(ga: GroupedItem, gb: GroupedItem) -> int:
        a, b = ga.primary_recipe, gb.primary_recipe
        if spec.field == "health":
            return _health_cmp(a, b, spec.health_mode)
        if spec.field == "hps":
            return _hps_cmp(a, b, spec.direction)
        if spec.field == "type":
            return _directed(_cmp_str(a.type or "", b.type or ""), spec.direction)
        if spec.field == "duration":
            return _directed(_cmp(a.duration or 0.0, b.duration or 0.0), spec.direction)
        if spec.field == "difficulty":
            return _directed(_cmp(len(a.ingredients), len(b.ingredients)), spec.direction)
        return _directed(_cmp_str(ga.name, gb.name), spec.direction)

    return compare


def sort_groups(groups: Iterable[GroupedItem], spec: Optional[SortSpec] = None) -> List[GroupedItem]:
    """Stable sort; returns a new list."""
    s = (spec or SortSpec()).normalized()
    return sorted(groups, key=cmp_to_key(_group_cmp(s)))


# =========================================================
# Query + pagination
# =========================================================

def query(groups: Iterable[GroupedItem], options: Optional[QueryOptions] = None) -> List[GroupedItem]:
    opts = options or QueryOptions()
    out: List[GroupedItem] = []
    for g in groups:
        if not matches_search(g, opts.search_text):
            continue
        if not matches_categories(g, opts.category_filters):
            continue
        if not matches_ingredients(g, opts.ingredient_filters):
            continue
        if not matches_effects(g, opts.effect_filters, any_variation=opts.unify_effect_filter):
            continue
        out.append(g)
    return sort_groups(out, opts.sort)


@dataclass(frozen=True)
class Page:
    items: Tuple[GroupedItem, ...]
    page: int
    total_pages: int
    total: int
    page_size: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [g.to_dict() for g in self.items],
            "page": self.page,
            "total_pages": self.total_pages,
            "total": self.total,
            "page_size": self.page_size,
        }


def paginate(items: Sequence[GroupedItem], page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> Page:
    size = max(1, int(page_size or DEFAULT_PAGE_SIZE))
    total = len(items)
    total_pages = max(1, math.ceil(total / size))
    try:
        current = int(page)
    except (TypeError, ValueError):
        current = 1
    current = min(max(current, 1), total_pages)
    start = (current - 1) * size
    return Page(
        items=tuple(items[start : start + size]),
        page=current,
        total_pages=total_pages,
        total=total,
        page_size=size,
    )


# =========================================================
# Display helpers
# =========================================================

def _fmt_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def health_display(recipe: Recipe) -> str:
    if recipe.is_damage and recipe.damage is not None and recipe.damage > 0:
        return f"{_fmt_number(recipe.damage)} DMG"
    if not recipe.health:
        return "0 HP"
    return f"{_fmt_number(recipe.health)} HP"


def duration_display(duration: float) -> str:
    if not duration:
        return "Instant"
    return f"{_fmt_number(duration)}s"


def hps_display(recipe: Recipe) -> str:
    if not recipe.health:
        return "0"
    if recipe.is_damage:
        return "-"
    return f"{recipe.health / recipe.effective_duration:.1f}"


def type_display(category: str) -> str:
    return TYPE_DISPLAY_NAMES.get(category, category)
