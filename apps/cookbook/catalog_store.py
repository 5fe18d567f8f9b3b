# -*- coding: utf-8 -*-
from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from core.dataset import RecipeDataset
from core.images import ImageResolver
from core.state import LatestResult

logger = logging.getLogger(__name__)


class CatalogError(RuntimeError):
    pass


def _mtime(path: Path) -> float:
    try:
        return path.stat().st_mtime
    except FileNotFoundError as e:
        raise CatalogError(f"Data file not found: {path}") from e
    except OSError as e:
        raise CatalogError(f"Cannot stat {path}: {e}") from e


class CatalogStore:
    """Load + normalize the scraped documents for fast queries (thread-safe).

    Data source:
      - data/recipes.json      (ScrapedRecipesData)
      - data/ingredients.json  (ScrapedIngredientsData)

    The normalized dataset is immutable; a reload swaps in a new one. Safe to
    reuse from the CLI and the web app.
    """

    def __init__(self, recipes_path: Path, ingredients_path: Path, resolver: Optional[ImageResolver] = None):
        self._recipes_path = Path(recipes_path)
        self._ingredients_path = Path(ingredients_path)
        self._resolver = resolver or ImageResolver()
        self._lock = threading.RLock()
        self._mtimes: Tuple[float, float] = (-1.0, -1.0)
        self._latest: LatestResult[RecipeDataset] = LatestResult()

        self.load(force=True)

    @property
    def recipes_path(self) -> Path:
        return self._recipes_path

    @property
    def ingredients_path(self) -> Path:
        return self._ingredients_path

    def mtime(self) -> float:
        with self._lock:
            return float(max(self._mtimes))

    @property
    def dataset(self) -> RecipeDataset:
        dataset = self._latest.get()
        if dataset is None:
            raise CatalogError("Catalog not loaded")
        return dataset

    # ----------------- load / reload -----------------

    def load(self, force: bool = False) -> bool:
        """Load documents if changed.

        Reading and normalizing run outside the lock; each load takes a
        generation number and a slower, older load never replaces a newer one.

        Returns True if reload occurred.
        """
        with self._lock:
            mtimes = (_mtime(self._recipes_path), _mtime(self._ingredients_path))
            if (not force) and self._latest.get() is not None and self._mtimes == mtimes:
                return False
            generation = self._latest.next_generation()

        recipes_doc = self._read(self._recipes_path)
        ingredients_doc = self._read(self._ingredients_path)
        self._validate(recipes_doc, ingredients_doc)
        dataset = RecipeDataset.from_documents(recipes_doc, ingredients_doc, self._resolver)

        with self._lock:
            if not self._latest.offer(generation, dataset):
                logger.debug("Dropped stale catalog load (generation %d)", generation)
                return False
            self._mtimes = mtimes
        logger.info(
            "Loaded %d recipes (%d items), %d ingredients",
            len(dataset.recipes),
            len(dataset.groups),
            len(dataset.ingredients),
        )
        return True

    @staticmethod
    def _read(path: Path) -> Any:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise CatalogError(f"Invalid JSON in {path}: {e}") from e
        except UnicodeDecodeError as e:
            raise CatalogError(f"Data file is not UTF-8: {path}") from e
        except OSError as e:
            raise CatalogError(f"Cannot read {path}: {e}") from e

    @staticmethod
    def _validate(recipes_doc: Any, ingredients_doc: Any) -> None:
        if not isinstance(recipes_doc, dict):
            raise CatalogError("Recipes root must be a JSON object")
        if not isinstance(recipes_doc.get("recipes"), dict):
            raise CatalogError("Recipes document missing object: recipes")
        if not isinstance(ingredients_doc, dict):
            raise CatalogError("Ingredients root must be a JSON object")
        if not isinstance(ingredients_doc.get("ingredients"), dict):
            raise CatalogError("Ingredients document missing object: ingredients")

    def sources(self) -> Dict[str, str]:
        return {"recipes": str(self._recipes_path), "ingredients": str(self._ingredients_path)}
