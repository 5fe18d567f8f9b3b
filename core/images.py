# -*- coding: utf-8 -*-
"""Image URL resolution for recipes and ingredients.

The known-URL table is data, not code: `ImageResolver` takes it as a
constructor argument so callers (and tests) can swap it. The built-in table
below is the default.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://sulfur.wiki.gg/images"

_FLESH = "https://sulfur.wiki.gg/images/4/49/Craw_Flesh.png?f76748"
_WHOLE_MILK = "https://sulfur.wiki.gg/images/0/0f/Whole_Milk.png?4df06b"
_LOW_FAT_MILK = "https://sulfur.wiki.gg/images/e/ef/Low_Fat_Milk.png?be88f5"
_SULFCAP = "https://sulfur.wiki.gg/images/4/41/False_Sulfcap.png?ef15fc"
_SKIN = "https://sulfur.wiki.gg/images/b/bd/Shav%27Wa_Skin.png?8cf32d"
_WATER = "https://sulfur.wiki.gg/images/4/41/Scroll_of_Water.png?164167"

KNOWN_IMAGE_URLS: Dict[str, str] = {
    "Dynamite": "https://sulfur.wiki.gg/images/f/fc/Dynamite.png?f05a78",
    "Flour": "https://sulfur.wiki.gg/images/e/e8/Flour.png?2047f8",
    "Butter": "https://sulfur.wiki.gg/images/f/f1/Butter.png?2d78e6",
    "Whole Milk": _WHOLE_MILK,
    "Used Rubber": "https://sulfur.wiki.gg/images/7/73/Used_Rubber.png?ae1964",
    "Low Fat Milk": _LOW_FAT_MILK,
    "Skimmed Milk": "https://sulfur.wiki.gg/images/d/d2/Skimmed_Milk.png?ca4cfe",
    "Hot Sauce": "https://sulfur.wiki.gg/images/0/02/Hot_Sauce.png?a776ff",
    "False Sulfcap": _SULFCAP,
    "Velvet Bell": "https://sulfur.wiki.gg/images/5/50/Velvet_Bell.png?3617b4",
    "Potato Salad": "https://sulfur.wiki.gg/images/2/24/Potato_Salad.png?f78e45",
    "Stick Grenade": "https://sulfur.wiki.gg/images/c/c7/Stick_Grenade.png?227fad",
    "Sashimi": "https://sulfur.wiki.gg/images/4/41/Sashimi.png?cb4a45",
    "Shoe": "https://sulfur.wiki.gg/images/6/66/Shoe.png?7bbfb0",
    "Ramen": "https://sulfur.wiki.gg/images/f/f8/Ramen.png?c50742",
    "Broth": "https://sulfur.wiki.gg/images/9/9c/Broth.png?37f671",
    # wildcard ingredients
    "Any Flesh": _FLESH,
    "Flesh": _FLESH,
    "Various Flesh": _FLESH,
    "Any Milk": _WHOLE_MILK,
    "Milk": _WHOLE_MILK,
    "Any Milk (except buttermilk)": _WHOLE_MILK,
    "Milk (any except buttermilk & whole milk)": _LOW_FAT_MILK,
    "Any Milk (except Whole Milk)": _LOW_FAT_MILK,
    "Any mulk (except buttermilk)": _WHOLE_MILK,
    "Any 1x1 mushroom": _SULFCAP,
    "Mushroom": _SULFCAP,
    "any mushroom": _SULFCAP,
    "any other 1x1 mushroom": _SULFCAP,
    "different mushrooms": _SULFCAP,
    "mushrooms": _SULFCAP,
    "Any Skin": _SKIN,
    "any skin": _SKIN,
    # lowercase spellings seen in scraped ingredient lists
    "bladder": _FLESH,
    "Bladder": _FLESH,
    "shav'wa bladder": _FLESH,
    "Shav'Wa Bladder": _FLESH,
    "water": _WATER,
    "any water": _WATER,
    "shoe": "https://sulfur.wiki.gg/images/6/66/Shoe.png?7bbfb0",
    "velvet bell": "https://sulfur.wiki.gg/images/5/50/Velvet_Bell.png?3617b4",
    "potato salad": "https://sulfur.wiki.gg/images/2/24/Potato_Salad.png?f78e45",
    "stick grenade": "https://sulfur.wiki.gg/images/c/c7/Stick_Grenade.png?227fad",
    "sashimi": "https://sulfur.wiki.gg/images/4/41/Sashimi.png?cb4a45",
    "hot sauce": "https://sulfur.wiki.gg/images/0/02/Hot_Sauce.png?a776ff",
}

_MILKS = ["Whole Milk", "Low Fat Milk", "Skimmed Milk"]
_FLESHES = ["Craw Flesh", "Dog Flesh", "Goblin Flesh", "Human Flesh", "Shav'Wa Flesh"]
_MUSHROOMS = ["False Sulfcap", "Rödsopp"]
_SKINS = ["Craw Skin", "Dog Skin", "Goblin Skin", "Human Skin", "Shav'Wa Skin"]
_WATERS = ["Water", "Purified Water", "Bottle of Water"]

# wildcard ingredient -> concrete items it accepts
ANY_ITEM_CATEGORIES: Dict[str, List[str]] = {
    "Any Milk": _MILKS,
    "Any Milk (except buttermilk)": _MILKS,
    "Milk (any except buttermilk & whole milk)": ["Low Fat Milk", "Skimmed Milk"],
    "Any Milk (except Whole Milk)": ["Low Fat Milk", "Skimmed Milk"],
    "Milk": _MILKS,
    "Any Flesh": _FLESHES,
    "Flesh": _FLESHES,
    "Various Flesh": _FLESHES,
    "Any 1x1 mushroom": _MUSHROOMS,
    "Mushroom": _MUSHROOMS,
    "any mushroom": _MUSHROOMS,
    "any other 1x1 mushroom": _MUSHROOMS,
    "different mushrooms": _MUSHROOMS,
    "mushrooms": _MUSHROOMS,
    "Any Skin": _SKINS,
    "any skin": _SKINS,
    "any water": _WATERS,
    "water": _WATERS,
}

_WS_RE = re.compile(r"\s+")
_ANY_PREFIX = "Any "


def is_usable_url(value: Any) -> bool:
    """True for a non-blank string other than the literal 'undefined'."""
    return isinstance(value, str) and bool(value.strip()) and value != "undefined"


def any_item_members(name: str, table: Optional[Mapping[str, List[str]]] = None) -> List[str]:
    mp = ANY_ITEM_CATEGORIES if table is None else table
    return list(mp.get(str(name or ""), []))


@dataclass(frozen=True)
class ImageResolver:
    """Deterministic name -> image URL lookup.

    resolve() order:
      1) exact name in known_urls
      2) lowercase name in known_urls
      3) "Any X": known_urls[X], else synthesized from X
      4) synthesized `{base_url}/{Name_With_Underscores}.png`
    """

    known_urls: Mapping[str, str] = field(default_factory=lambda: dict(KNOWN_IMAGE_URLS))
    base_url: str = DEFAULT_BASE_URL

    def synthesize(self, name: str) -> str:
        base = (self.base_url or DEFAULT_BASE_URL).rstrip("/")
        return f"{base}/{_WS_RE.sub('_', str(name or ''))}.png"

    def resolve(self, name: str) -> str:
        key = str(name or "")
        hit = self.known_urls.get(key)
        if hit:
            return hit
        hit = self.known_urls.get(key.lower())
        if hit:
            return hit
        if key.startswith(_ANY_PREFIX):
            stripped = key.replace(_ANY_PREFIX, "", 1)
            hit = self.known_urls.get(stripped)
            if hit:
                return hit
            return self.synthesize(stripped)
        return self.synthesize(key)

    def resolve_recipe(self, name: str) -> str:
        key = str(name or "")
        return self.known_urls.get(key) or self.synthesize(key)

    def image_url_for(self, name: str, original: Any = None) -> str:
        if is_usable_url(original):
            return str(original)
        return self.resolve(name)

    def with_overrides(self, extra: Mapping[str, str]) -> "ImageResolver":
        merged = dict(self.known_urls)
        merged.update({str(k): str(v) for k, v in (extra or {}).items() if k and v})
        return ImageResolver(known_urls=merged, base_url=self.base_url)


def load_known_urls(path: Path) -> Dict[str, str]:
    """Read an extra name -> URL table (JSON object).

    Entries that are not non-empty strings are dropped.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Image table must be a JSON object: {path}")
    out: Dict[str, str] = {}
    for k, v in data.items():
        if isinstance(k, str) and k and is_usable_url(v):
            out[k] = v
    logger.debug("Loaded %d image overrides from %s", len(out), path)
    return out
