# -*- coding: utf-8 -*-
"""Ingredient / effect vocabularies for the filter bars.

Frequency is counted once per grouped item, not per variation: an
ingredient used by three variations of the same dish counts as 1.
Ordering is by descending count; ties keep first-seen order.
"""

from __future__ import annotations

from typing import Callable, Container, Dict, Iterable, List, Optional, Sequence, Tuple

from core.schemas.recipes import GroupedItem, Recipe

__all__ = [
    "build_effect_vocabulary",
    "build_ingredient_vocabulary",
    "effect_frequency",
    "effect_item_count",
    "filter_vocabulary",
    "ingredient_frequency",
    "popular",
]

DEFAULT_POPULAR_LIMIT = 12


def _frequency(groups: Iterable[GroupedItem], names_of: Callable[[Recipe], Iterable[str]]) -> List[Tuple[str, int]]:
    counts: Dict[str, int] = {}
    for group in groups:
        seen: Dict[str, None] = {}
        for rec in group.recipes:
            for name in names_of(rec):
                if name:
                    seen.setdefault(name, None)
        for name in seen:
            counts[name] = counts.get(name, 0) + 1
    # dict preserves first-seen order and sorted() is stable
    return sorted(counts.items(), key=lambda kv: -kv[1])


def ingredient_frequency(groups: Iterable[GroupedItem]) -> List[Tuple[str, int]]:
    return _frequency(groups, lambda r: r.ingredients.keys())


def effect_frequency(groups: Iterable[GroupedItem]) -> List[Tuple[str, int]]:
    return _frequency(groups, lambda r: r.effect_names)


def build_ingredient_vocabulary(groups: Iterable[GroupedItem]) -> List[str]:
    return [name for name, _ in ingredient_frequency(groups)]


def build_effect_vocabulary(groups: Iterable[GroupedItem]) -> List[str]:
    return [name for name, _ in effect_frequency(groups)]


def filter_vocabulary(
    names: Sequence[str],
    text: str = "",
    allowed: Optional[Container[str]] = None,
) -> List[str]:
    """Restrict a vocabulary to `allowed` names, then to a substring match."""
    out = [n for n in names if allowed is None or n in allowed]
    needle = (text or "").lower()
    if needle:
        out = [n for n in out if needle in n.lower()]
    return out


def popular(names: Sequence[str], show_all: bool = False, limit: int = DEFAULT_POPULAR_LIMIT) -> List[str]:
    return list(names) if show_all else list(names[: max(0, int(limit))])


def effect_item_count(groups: Iterable[GroupedItem], effect: str) -> int:
    """Number of groups with `effect` in any variation."""
    return sum(1 for g in groups if g.has_effect(effect))
