# -*- coding: utf-8 -*-
import json
import sys
from pathlib import Path
from typing import Dict, Optional, Sequence

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from core.dataset import RecipeDataset  # noqa: E402
from core.schemas.recipes import (  # noqa: E402
    DAMAGE_TYPE_DAMAGE,
    DAMAGE_TYPE_HEALTH,
    GroupedItem,
    Recipe,
    SpecialEffect,
)


def _recipe(
    name: str,
    ingredients: Optional[Dict[str, int]] = None,
    *,
    rid: str = "",
    health: Optional[float] = None,
    damage: Optional[float] = None,
    duration: float = 0.0,
    effects: Sequence[str] = (),
    type: str = "cooked_consumables",
    description: str = "",
) -> Recipe:
    return Recipe(
        id=rid or name.lower().replace(" ", "-"),
        name=name,
        ingredients=dict(ingredients or {}),
        health=damage if damage is not None else health,
        damage=damage,
        damage_type=DAMAGE_TYPE_DAMAGE if damage is not None else DAMAGE_TYPE_HEALTH,
        duration=duration,
        description=description,
        special_effects=tuple(SpecialEffect(effect=e) for e in effects),
        type=type,
    )


def _group(*recipes: Recipe) -> GroupedItem:
    return GroupedItem(name=recipes[0].name, recipes=tuple(recipes))


@pytest.fixture
def make_recipe():
    return _recipe


@pytest.fixture
def make_group():
    return _group


@pytest.fixture
def recipes_doc():
    return {
        "metadata": {
            "name": "Test Recipes",
            "scrapedAt": "2025-01-01T00:00:00Z",
            "totalRecipes": 5,
            "source": "https://example.test/wiki/Cooking",
            "categories": {"cooked_consumables": 3, "cooked_throwables": 1, "cooked_equipment": 1},
        },
        "recipes": {
            "cooked_consumables": [
                {
                    "name": "Omelette",
                    "gridSize": "1x1",
                    "imageUrl": "https://img.test/Omelette.png",
                    "description": "Fluffy.",
                    "healing": {"amount": 40, "duration": 8},
                    "economic": {"sellingValue": 24},
                    "recipes": [
                        {"ingredients": [{"item": "Egg", "quantity": 2}, {"item": "Any Milk", "quantity": 1}]},
                        {"ingredients": [{"item": "Egg", "quantity": 2}, {"item": "Salt", "quantity": 1}]},
                    ],
                },
                {
                    "name": "Milkshake",
                    "description": "Cold.",
                    "healing": {"amount": 30, "duration": 0},
                    "effects": ["Cold Resistance"],
                    "recipes": [
                        {
                            "ingredients": [{"item": "Any Milk", "quantity": 2}, {"item": "Sugar", "quantity": 1}],
                            "output": {"item": "Milkshake", "quantity": 2},
                        },
                    ],
                },
                {
                    "name": "Purified Water",
                    "description": "Safe.",
                    "healing": {"amount": 10},
                    "recipes": [{"ingredients": [{"item": "Water", "quantity": 1}, {"item": "Salt", "quantity": 1}]}],
                },
            ],
            "cooked_throwables": [
                {
                    "name": "Sulfur Bomb",
                    "description": "Hurts.",
                    "damage": "≥600",
                    "effects": [{"type": "Burning", "value": "15/s", "duration": "6"}],
                    "recipes": [{"ingredients": [{"item": "Sulfur", "quantity": 3}, {"item": "Egg", "quantity": 1}]}],
                },
            ],
            "cooked_equipment": [
                {
                    "name": "Hide Vest",
                    "description": "Warm.",
                    "economicData": {"sellingValue": 150},
                    "recipes": [{"ingredients": [{"item": "Any Skin", "quantity": 4}]}],
                },
            ],
        },
    }


@pytest.fixture
def ingredients_doc():
    return {
        "metadata": {"name": "Test Ingredients", "totalIngredients": 3, "scrapedAt": "2025-01-02T00:00:00Z"},
        "ingredients": {
            "Egg": {"name": "Egg", "description": "Laid.", "type": "Ingredient", "sellers": ["Chef"]},
            "Salt": {"name": "Salt", "description": "Salty.", "type": ["Ingredient", "Mineral"]},
            "Purified Water": {
                "name": "Purified Water",
                "description": "Boiled.",
                "type": "Consumable",
                "imageUrl": "https://img.test/Purified_Water.png",
                "recipeId": "purified-water-v0",
            },
        },
    }


@pytest.fixture
def dataset(recipes_doc, ingredients_doc):
    return RecipeDataset.from_documents(recipes_doc, ingredients_doc)


@pytest.fixture
def data_files(tmp_path, recipes_doc, ingredients_doc):
    recipes_path = tmp_path / "recipes.json"
    ingredients_path = tmp_path / "ingredients.json"
    recipes_path.write_text(json.dumps(recipes_doc), encoding="utf-8")
    ingredients_path.write_text(json.dumps(ingredients_doc), encoding="utf-8")
    return recipes_path, ingredients_path
