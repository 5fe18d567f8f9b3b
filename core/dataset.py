# -*- coding: utf-8 -*-
"""core/dataset.py

One loaded, normalized dataset plus its derived views.

Responsibilities
- Normalize the two scraped documents once (recipes + ingredients).
- Hold groups, vocabularies and a memoized combination validator.
- Answer the lookups the ingredient/recipe detail views need.

This module is UI-agnostic and does no file I/O; loading lives in the
store layer (apps/cookbook/catalog_store.py) and the CLI.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from core.combinations import CombinationValidator
from core.images import ImageResolver, any_item_members
from core.indexers.vocabulary import effect_frequency, ingredient_frequency
from core.normalizer import group_recipes, normalize_ingredients, normalize_recipes
from core.query import Page, QueryOptions, paginate, query
from core.schemas.recipes import DatasetMeta, GroupedItem, Ingredient, Recipe

logger = logging.getLogger(__name__)


def _int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def parse_meta(recipes_doc: Any, ingredients_doc: Any = None) -> DatasetMeta:
    rmeta = recipes_doc.get("metadata") if isinstance(recipes_doc, Mapping) else None
    imeta = ingredients_doc.get("metadata") if isinstance(ingredients_doc, Mapping) else None
    rmeta = rmeta if isinstance(rmeta, Mapping) else {}
    imeta = imeta if isinstance(imeta, Mapping) else {}
    cats = rmeta.get("categories")
    return DatasetMeta(
        name=str(rmeta.get("name") or ""),
        description=str(rmeta.get("description") or ""),
        source=str(rmeta.get("source") or imeta.get("source") or ""),
        base_url=str(rmeta.get("baseUrl") or imeta.get("baseUrl") or ""),
        scraped_at=str(rmeta.get("scrapedAt") or imeta.get("scrapedAt") or ""),
        total_recipes=_int(rmeta.get("totalRecipes")),
        total_ingredients=_int(imeta.get("totalIngredients")),
        categories={str(k): _int(v) for k, v in cats.items()} if isinstance(cats, Mapping) else {},
    )


@dataclass(frozen=True)
class RecipeDataset:
    recipes: Tuple[Recipe, ...]
    groups: Tuple[GroupedItem, ...]
    ingredients: Mapping[str, Ingredient]
    meta: DatasetMeta = field(default_factory=DatasetMeta)
    resolver: ImageResolver = field(default_factory=ImageResolver)
    ingredient_counts: Tuple[Tuple[str, int], ...] = ()
    effect_counts: Tuple[Tuple[str, int], ...] = ()

    @classmethod
    def from_documents(
        cls,
        recipes_doc: Any,
        ingredients_doc: Any = None,
        resolver: Optional[ImageResolver] = None,
    ) -> "RecipeDataset":
        res = resolver or ImageResolver()
        recipes = normalize_recipes(recipes_doc, res)
        groups = group_recipes(recipes)
        ingredients = normalize_ingredients(ingredients_doc, res) if ingredients_doc is not None else {}
        ds = cls(
            recipes=tuple(recipes),
            groups=tuple(groups),
            ingredients=MappingProxyType(dict(ingredients)),
            meta=parse_meta(recipes_doc, ingredients_doc),
            resolver=res,
            ingredient_counts=tuple(ingredient_frequency(groups)),
            effect_counts=tuple(effect_frequency(groups)),
        )
        logger.debug(
            "Dataset ready: %d variations, %d groups, %d ingredients",
            len(ds.recipes),
            len(ds.groups),
            len(ds.ingredients),
        )
        return ds

    def __post_init__(self) -> None:
        object.__setattr__(self, "_validator", CombinationValidator(self.groups, self.ingredient_vocabulary))
        object.__setattr__(self, "_by_name", {g.name: g for g in self.groups})
        object.__setattr__(self, "_by_id", {r.id: r for r in self.recipes})

    # ----------------- vocabularies -----------------

    @property
    def ingredient_vocabulary(self) -> List[str]:
        return [name for name, _ in self.ingredient_counts]

    @property
    def effect_vocabulary(self) -> List[str]:
        return [name for name, _ in self.effect_counts]

    @property
    def validator(self) -> CombinationValidator:
        return self._validator  # type: ignore[attr-defined]

    # ----------------- queries -----------------

    def query(self, options: Optional[QueryOptions] = None) -> List[GroupedItem]:
        return query(self.groups, options)

    def page(self, options: Optional[QueryOptions] = None, page: int = 1, page_size: int = 10) -> Page:
        return paginate(self.query(options), page=page, page_size=page_size)

    # ----------------- lookups -----------------

    def group(self, name: str) -> Optional[GroupedItem]:
        return self._by_name.get(name)  # type: ignore[attr-defined]

    def recipe(self, recipe_id: str) -> Optional[Recipe]:
        return self._by_id.get(recipe_id)  # type: ignore[attr-defined]

    def ingredient(self, name: str) -> Ingredient:
        """Known ingredient record, or a synthesized one with a resolved image."""
        hit = self.ingredients.get(name)
        if hit is not None:
            return hit
        return Ingredient(name=name, description="", type="", image=self.resolver.resolve(name))

    def ingredient_image(self, name: str) -> str:
        hit = self.ingredients.get(name)
        return self.resolver.image_url_for(name, hit.image if hit else None)

    def recipes_using(self, ingredient: str) -> List[Recipe]:
        return [r for r in self.recipes if ingredient in r.ingredients]

    def crafting_recipe_for(self, ingredient: str) -> Optional[Recipe]:
        hit = self.ingredients.get(ingredient)
        if hit is None or not hit.recipe_id:
            return None
        return self.recipe(hit.recipe_id)

    def any_of(self, ingredient: str) -> List[str]:
        return any_item_members(ingredient)

    def known_ingredient_names(self) -> Sequence[str]:
        """Ingredients from the ingredient document, then any only seen in recipes."""
        names: Dict[str, None] = dict.fromkeys(sorted(self.ingredients))
        for name in self.ingredient_vocabulary:
            names.setdefault(name, None)
        return list(names)
