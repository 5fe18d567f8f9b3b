# -*- coding: utf-8 -*-
"""Browse-view state as immutable transitions.

Each UI event maps to one method returning a new ViewState; the old state
is never modified. Filter changes reset the page to 1.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from typing import Generic, Optional, Tuple, TypeVar

from core.query import CATEGORY_FILTERS, HEALTH_SORT_MODES, QueryOptions, SortSpec

__all__ = ["LatestResult", "ViewState"]

T = TypeVar("T")


def _toggled(items: Tuple[str, ...], value: str) -> Tuple[str, ...]:
    if value in items:
        return tuple(x for x in items if x != value)
    return items + (value,)


def next_health_mode(mode: str) -> str:
    try:
        idx = HEALTH_SORT_MODES.index(mode)
    except ValueError:
        idx = -1
    return HEALTH_SORT_MODES[(idx + 1) % len(HEALTH_SORT_MODES)]


@dataclass(frozen=True)
class ViewState:
    search_text: str = ""
    category_filters: Tuple[str, ...] = ()
    ingredient_filters: Tuple[str, ...] = ()
    effect_filters: Tuple[str, ...] = ()
    sort: SortSpec = field(default_factory=SortSpec)
    page: int = 1
    expanded: Tuple[str, ...] = ()

    def with_search(self, text: str) -> "ViewState":
        return replace(self, search_text=str(text or ""))

    def toggle_category(self, label: str) -> "ViewState":
        return replace(self, category_filters=_toggled(self.category_filters, label), page=1)

    def click_type(self, category: str) -> "ViewState":
        """Type badge click: add the matching category filter if absent."""
        label = next((k for k, v in CATEGORY_FILTERS.items() if v == category), None)
        if label is None or label in self.category_filters:
            return self
        return replace(self, category_filters=self.category_filters + (label,), page=1)

    def toggle_ingredient(self, name: str) -> "ViewState":
        return replace(self, ingredient_filters=_toggled(self.ingredient_filters, name), page=1)

    def clear_ingredients(self) -> "ViewState":
        return replace(self, ingredient_filters=(), page=1)

    def toggle_effect(self, name: str) -> "ViewState":
        return replace(self, effect_filters=_toggled(self.effect_filters, name), page=1)

    def clear_effects(self) -> "ViewState":
        return replace(self, effect_filters=(), page=1)

    def sort_by(self, sort_field: str) -> "ViewState":
        """Header click.

        health cycles hp_desc -> hp_asc -> dmg_desc -> dmg_asc; other fields
        flip direction when already active. A newly chosen field starts
        ascending, except hps which starts with the fastest healing first.
        """
        cur = self.sort
        if sort_field == "health":
            spec = SortSpec(field="health", direction=cur.direction, health_mode=next_health_mode(cur.health_mode))
        elif cur.field == sort_field:
            spec = replace(cur, direction="desc" if cur.direction == "asc" else "asc")
        else:
            spec = replace(cur, field=sort_field, direction="desc" if sort_field == "hps" else "asc")
        return replace(self, sort=spec)

    def go_to_page(self, page: int, total_pages: int) -> "ViewState":
        return replace(self, page=min(max(int(page), 1), max(1, int(total_pages))))

    def toggle_expanded(self, group_name: str) -> "ViewState":
        return replace(self, expanded=_toggled(self.expanded, group_name))

    def is_expanded(self, group_name: str) -> bool:
        return group_name in self.expanded

    def to_options(self, unify_effect_filter: bool = False) -> QueryOptions:
        return QueryOptions(
            search_text=self.search_text,
            category_filters=self.category_filters,
            ingredient_filters=self.ingredient_filters,
            effect_filters=self.effect_filters,
            sort=self.sort,
            unify_effect_filter=unify_effect_filter,
        )


class LatestResult(Generic[T]):
    """Holds the result of the newest computation.

    Callers take a generation number before computing and offer the result
    afterwards; results older than the current one are dropped.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._issued = 0
        self._generation = 0
        self._value: Optional[T] = None

    def next_generation(self) -> int:
        with self._lock:
            self._issued += 1
            return self._issued

    def offer(self, generation: int, value: T) -> bool:
        with self._lock:
            if generation <= self._generation:
                return False
            self._generation = generation
            self._value = value
            return True

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def get(self) -> Optional[T]:
        with self._lock:
            return self._value
