# -*- coding: utf-8 -*-
"""Ingredient combination validity for the filter bar.

valid_options
  With no active filters every known ingredient is selectable. Otherwise an
  ingredient is selectable if it appears in some single variation whose
  ingredient set contains all active filters.

projected_count
  How many groups would remain if the candidate button were toggled: the
  group must use the candidate in some variation and match the ingredient
  rule (AND across filters, OR across variations) for
  active + candidate (not active) or active - candidate (active).
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple

from core.indexers.vocabulary import build_ingredient_vocabulary
from core.query import matches_ingredients
from core.schemas.recipes import GroupedItem

__all__ = [
    "CombinationValidator",
    "IngredientOption",
    "projected_count",
    "valid_options",
]


def valid_options(groups: Sequence[GroupedItem], active: Iterable[str]) -> Set[str]:
    wanted = [a for a in active if a]
    if not wanted:
        return set(build_ingredient_vocabulary(groups))
    out: Set[str] = set()
    for g in groups:
        for rec in g.recipes:
            if all(a in rec.ingredients for a in wanted):
                out.update(rec.ingredients.keys())
    return out


def _potential_filters(active: Sequence[str], candidate: str) -> List[str]:
    if candidate in active:
        return [a for a in active if a != candidate]
    return list(active) + [candidate]


def projected_count(groups: Sequence[GroupedItem], active: Iterable[str], candidate: str) -> int:
    potential = _potential_filters([a for a in active if a], candidate)
    return sum(1 for g in groups if g.has_ingredient(candidate) and matches_ingredients(g, potential))


@dataclass(frozen=True)
class IngredientOption:
    name: str
    active: bool
    valid: bool
    projected_count: int

    @property
    def enabled(self) -> bool:
        return self.active or self.projected_count > 0

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "active": self.active,
            "valid": self.valid,
            "projected_count": self.projected_count,
            "enabled": self.enabled,
        }


class CombinationValidator:
    """Memoized validity/projection over one immutable group list.

    Cache key is the frozen active-filter set, so toggle order does not matter.
    Names that no recipe uses short-circuit to "nothing valid" / 0 and are never
    cached; both caches evict least-recently-used entries past their limit.
    """

    def __init__(
        self,
        groups: Sequence[GroupedItem],
        vocabulary: Optional[Sequence[str]] = None,
        *,
        max_valid_entries: int = 256,
        max_count_entries: int = 4096,
    ):
        self._groups: Tuple[GroupedItem, ...] = tuple(groups)
        known = build_ingredient_vocabulary(self._groups)
        self._known: FrozenSet[str] = frozenset(known)
        self._vocabulary: Tuple[str, ...] = tuple(vocabulary) if vocabulary is not None else tuple(known)
        self._lock = threading.RLock()
        self._valid_cache: "OrderedDict[FrozenSet[str], FrozenSet[str]]" = OrderedDict()
        self._count_cache: "OrderedDict[Tuple[FrozenSet[str], str], int]" = OrderedDict()
        self._valid_cache_max = max(1, int(max_valid_entries))
        self._count_cache_max = max(1, int(max_count_entries))

    @property
    def vocabulary(self) -> Tuple[str, ...]:
        return self._vocabulary

    def cache_sizes(self) -> Tuple[int, int]:
        with self._lock:
            return len(self._valid_cache), len(self._count_cache)

    def _key(self, active: Iterable[str]) -> Optional[FrozenSet[str]]:
        """Frozen active set, or None when it holds a name no recipe uses."""
        key = frozenset(a for a in active if a)
        return key if key <= self._known else None

    @staticmethod
    def _remember(cache: "OrderedDict[Any, Any]", key: Any, value: Any, limit: int) -> None:
        cache[key] = value
        cache.move_to_end(key)
        while len(cache) > limit:
            cache.popitem(last=False)

    def valid(self, active: Iterable[str]) -> FrozenSet[str]:
        key = self._key(active)
        if key is None:
            return frozenset()
        with self._lock:
            hit = self._valid_cache.get(key)
            if hit is None:
                hit = frozenset(valid_options(self._groups, sorted(key)))
                self._remember(self._valid_cache, key, hit, self._valid_cache_max)
            else:
                self._valid_cache.move_to_end(key)
            return hit

    def projected(self, active: Iterable[str], candidate: str) -> int:
        active_key = self._key(active)
        if active_key is None or candidate not in self._known:
            return 0
        key = (active_key, candidate)
        with self._lock:
            hit = self._count_cache.get(key)
            if hit is None:
                hit = projected_count(self._groups, sorted(active_key), candidate)
                self._remember(self._count_cache, key, hit, self._count_cache_max)
            else:
                self._count_cache.move_to_end(key)
            return hit

    def options(self, active: Sequence[str], names: Optional[Iterable[str]] = None) -> List[IngredientOption]:
        """Ordered option list (vocabulary order unless `names` is given)."""
        valid = self.valid(active)
        active_set = set(active)
        out: List[IngredientOption] = []
        for name in (self._vocabulary if names is None else names):
            out.append(
                IngredientOption(
                    name=name,
                    active=name in active_set,
                    valid=name in valid,
                    projected_count=self.projected(active, name),
                )
            )
        return out
