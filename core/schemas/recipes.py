#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Canonical recipe/ingredient data model.

Notes
- Records are built once at load time and never mutated afterwards.
- Mappings are exposed read-only; sequences are tuples.
- `Recipe.name` is the grouping key (variations share it), `Recipe.id` is unique.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

DAMAGE_TYPE_HEALTH = "health"
DAMAGE_TYPE_DAMAGE = "damage"


def _frozen_map(value: Optional[Mapping[str, int]]) -> Mapping[str, int]:
    return MappingProxyType(dict(value or {}))


@dataclass(frozen=True)
class SpecialEffect:
    effect: str
    value: str = ""
    duration: float = 0.0
    unit: str = "seconds"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "effect": self.effect,
            "value": self.value,
            "duration": self.duration,
            "unit": self.unit,
        }


@dataclass(frozen=True)
class Recipe:
    """One craftable variation.

    health holds the effective value: the damage when the recipe deals damage,
    the healing amount otherwise.
    """

    id: str
    name: str
    ingredients: Mapping[str, int] = field(hash=False)
    health: Optional[float]
    damage: Optional[float]
    damage_type: str
    duration: float
    description: str = ""
    special_effects: Tuple[SpecialEffect, ...] = ()
    selling_value: Optional[float] = None
    buying_value: Optional[float] = None
    grid_size: str = ""
    type: str = ""
    image_url: str = ""
    output_amount: int = 1
    variation: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "ingredients", _frozen_map(self.ingredients))
        object.__setattr__(self, "special_effects", tuple(self.special_effects or ()))

    @property
    def is_damage(self) -> bool:
        return self.damage_type == DAMAGE_TYPE_DAMAGE

    @property
    def effective_value(self) -> Optional[float]:
        return self.damage if self.damage is not None else self.health

    @property
    def effective_duration(self) -> float:
        # 0 means instant; treated as one second for rates
        return self.duration if self.duration else 1.0

    @property
    def health_per_second(self) -> float:
        if self.is_damage:
            return 0.0
        hp = self.health or 0.0
        if hp <= 0:
            return 0.0
        return hp / self.effective_duration

    @property
    def ingredient_names(self) -> Tuple[str, ...]:
        return tuple(self.ingredients.keys())

    @property
    def effect_names(self) -> Tuple[str, ...]:
        return tuple(e.effect for e in self.special_effects)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "ingredients": dict(self.ingredients),
            "health": self.health,
            "damage": self.damage,
            "damage_type": self.damage_type,
            "duration": self.duration,
            "description": self.description,
            "special_effects": [e.to_dict() for e in self.special_effects],
            "selling_value": self.selling_value,
            "buying_value": self.buying_value,
            "grid_size": self.grid_size,
            "type": self.type,
            "image_url": self.image_url,
            "output_amount": self.output_amount,
            "variation": self.variation,
        }


@dataclass(frozen=True)
class Ingredient:
    name: str
    description: str
    type: str
    image: str
    grid_size: str = ""
    selling_value: Optional[float] = None
    buying_value: Optional[float] = None
    sellers: Optional[Tuple[str, ...]] = None
    used_in: Optional[Tuple[str, ...]] = None
    recipe_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "type": self.type,
            "image": self.image,
            "grid_size": self.grid_size,
            "selling_value": self.selling_value,
            "buying_value": self.buying_value,
            "sellers": list(self.sellers) if self.sellers is not None else None,
            "used_in": list(self.used_in) if self.used_in is not None else None,
            "recipe_id": self.recipe_id,
        }


@dataclass(frozen=True)
class GroupedItem:
    """All variations sharing one output name.

    primary_recipe is the first variation in scrape order.
    """

    name: str
    recipes: Tuple[Recipe, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "recipes", tuple(self.recipes))

    @property
    def primary_recipe(self) -> Recipe:
        return self.recipes[0]

    @property
    def total_variations(self) -> int:
        return len(self.recipes)

    def has_ingredient(self, name: str) -> bool:
        return any(name in r.ingredients for r in self.recipes)

    def has_effect(self, name: str) -> bool:
        return any(name in r.effect_names for r in self.recipes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "primary_recipe": self.primary_recipe.to_dict(),
            "recipes": [r.to_dict() for r in self.recipes],
            "total_variations": self.total_variations,
        }


@dataclass(frozen=True)
class DatasetMeta:
    """`metadata` block of the scraped documents."""

    name: str = ""
    description: str = ""
    source: str = ""
    base_url: str = ""
    scraped_at: str = ""
    total_recipes: int = 0
    total_ingredients: int = 0
    categories: Mapping[str, int] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "categories", _frozen_map(self.categories))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "source": self.source,
            "base_url": self.base_url,
            "scraped_at": self.scraped_at,
            "total_recipes": self.total_recipes,
            "total_ingredients": self.total_ingredients,
            "categories": dict(self.categories),
        }
