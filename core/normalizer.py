# -*- coding: utf-8 -*-
"""core/normalizer.py

Scraped wiki JSON -> canonical `Recipe` / `Ingredient` records.

Why this module exists
- The scraper emits loosely-typed records: effects are either bare strings or
  {type, value, duration} objects, healing/economic data live under two
  alternative keys, damage may be a number, a glyph-prefixed string ("≥600")
  or the literal "Unknown".
- Everything downstream (indexes, query, validator) expects one flat shape,
  one record per recipe variation.

Error policy
- Never raise on malformed input. Missing fields become typed defaults,
  unparsable numbers become 0 / None, non-object records are skipped.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple, Union

from core.images import ImageResolver, is_usable_url
from core.schemas.recipes import (
    DAMAGE_TYPE_DAMAGE,
    DAMAGE_TYPE_HEALTH,
    GroupedItem,
    Ingredient,
    Recipe,
    SpecialEffect,
)

__all__ = [
    "group_recipes",
    "normalize_effect",
    "normalize_ingredients",
    "normalize_recipes",
    "parse_numeric",
    "slugify",
]

logger = logging.getLogger(__name__)

# Scraped effect entries: bare name or {type, value, duration}
RawEffect = Union[str, Mapping[str, Any]]

_NON_NUMERIC_RE = re.compile(r"[^\d.]")
_LEADING_FLOAT_RE = re.compile(r"^(?:\d+\.?\d*|\.\d+)")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_WS_RE = re.compile(r"\s+")
_SLUG_STRIP_RE = re.compile(r"[^a-z0-9-]")

UNKNOWN_DAMAGE = "Unknown"


# =========================================================
# Scalar coercion
# =========================================================

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_numeric(value: Any) -> float:
    """Strip everything but digits and dots, then read the leading float.

    "12s" -> 12.0, "≥600" -> 600.0, "1.5.2" -> 1.5, "" / None / "abc" -> 0.0
    """
    if _is_number(value):
        num = float(value)
        return num if math.isfinite(num) else 0.0
    if value is None:
        return 0.0
    cleaned = _NON_NUMERIC_RE.sub("", str(value))
    m = _LEADING_FLOAT_RE.match(cleaned)
    if not m:
        return 0.0
    try:
        return float(m.group(0))
    except ValueError:
        return 0.0


def _to_number(value: Any) -> Optional[float]:
    """Loose numeric coercion: numbers and numeric strings, else None."""
    if _is_number(value):
        num = float(value)
        return num if math.isfinite(num) else None
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            num = float(s)
        except ValueError:
            return None
        return num if math.isfinite(num) else None
    return None


def _nonzero_number(value: Any) -> Optional[float]:
    num = _to_number(value)
    return num if num else None


def _display_str(value: Any) -> str:
    if value is None or value is False or value == "" or (_is_number(value) and value == 0):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def slugify(name: str) -> str:
    s = _WS_RE.sub("-", str(name or "").lower())
    return _SLUG_STRIP_RE.sub("", s)


# =========================================================
# Field resolution
# =========================================================

def normalize_effect(raw: RawEffect) -> Optional[SpecialEffect]:
    if isinstance(raw, str):
        return SpecialEffect(effect=raw, value="", duration=0.0)
    if isinstance(raw, Mapping):
        return SpecialEffect(
            effect=_display_str(raw.get("type")),
            value=_display_str(raw.get("value")),
            duration=parse_numeric(raw.get("duration") or ""),
        )
    return None


def _effects(raw_effects: Any) -> Tuple[SpecialEffect, ...]:
    if not isinstance(raw_effects, list):
        return ()
    out: List[SpecialEffect] = []
    for entry in raw_effects:
        eff = normalize_effect(entry)
        if eff is not None:
            out.append(eff)
    return tuple(out)


def _healing_block(raw: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    block = raw.get("healing") or raw.get("healingEffects")
    return block if isinstance(block, Mapping) else None


def _economic_block(raw: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    block = raw.get("economic") or raw.get("economicData")
    return block if isinstance(block, Mapping) else None


def _resolve_damage(value: Any) -> Optional[float]:
    if value is None:
        return None
    if _is_number(value):
        num = float(value)
        return num if math.isfinite(num) else None
    if isinstance(value, str) and value != UNKNOWN_DAMAGE:
        cleaned = _NON_NUMERIC_RE.sub("", value)
        if not _LEADING_FLOAT_RE.match(cleaned):
            return None
        num = parse_numeric(cleaned)
        return num if num > 0 else None
    return None


def _resolve_duration(healing: Optional[Mapping[str, Any]], raw_effects: Any) -> float:
    if healing is not None and healing.get("duration"):
        dv = healing.get("duration")
        if _is_number(dv):
            duration = float(dv)
        elif isinstance(dv, str):
            duration = parse_numeric(dv)
        else:
            duration = 0.0
        if duration:
            return duration

    if isinstance(raw_effects, list) and raw_effects:
        found: List[float] = []
        for entry in raw_effects:
            dv = entry.get("duration") if isinstance(entry, Mapping) else None
            if _is_number(dv):
                found.append(float(dv))
            elif isinstance(dv, str):
                found.append(parse_numeric(dv))
        positive = [d for d in found if d > 0]
        return max(positive) if positive else 0.0
    return 0.0


def _quantity(value: Any) -> int:
    if isinstance(value, str):
        m = _LEADING_INT_RE.match(value)
        qty = int(m.group(1)) if m else 0
    else:
        num = _to_number(value)
        qty = int(num) if num is not None else 0
    return qty if qty >= 1 else 1


def _ingredients(raw_list: Any) -> Dict[str, int]:
    out: Dict[str, int] = {}
    if not isinstance(raw_list, list):
        return out
    for entry in raw_list:
        if not isinstance(entry, Mapping):
            continue
        name = entry.get("item") or entry.get("name") or ""
        name = str(name)
        if not name.strip():
            continue
        out[name] = _quantity(entry.get("quantity"))
    return out


def _output_amount(variation: Mapping[str, Any]) -> int:
    output = variation.get("output")
    if not isinstance(output, Mapping):
        return 1
    num = _to_number(output.get("quantity"))
    if num is None or num < 1:
        return 1
    return int(num)


def _image(raw: Mapping[str, Any], keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        val = raw.get(key)
        if val:
            return str(val) if is_usable_url(val) else None
    return None


# =========================================================
# Recipes
# =========================================================

def _recipe_common(raw: Mapping[str, Any], category: str, resolver: ImageResolver) -> Dict[str, Any]:
    name = str(raw.get("name") or "")
    raw_effects = raw.get("effects")
    healing = _healing_block(raw)

    health: Optional[float] = None
    damage_type = DAMAGE_TYPE_HEALTH
    if healing is not None:
        health = _nonzero_number(healing.get("health")) or _nonzero_number(healing.get("amount"))

    damage = _resolve_damage(raw.get("damage"))
    if damage is not None:
        damage_type = DAMAGE_TYPE_DAMAGE

    economic = _economic_block(raw)
    selling = _nonzero_number(economic.get("sellingValue")) if economic else None
    buying = _nonzero_number(economic.get("buyingValue")) if economic else None

    image = _image(raw, ("imageUrl", "image_url")) or resolver.resolve_recipe(name)

    return {
        "name": name,
        "health": damage if damage is not None else health,
        "damage": damage,
        "damage_type": damage_type,
        "duration": _resolve_duration(healing, raw_effects),
        "description": str(raw.get("description") or ""),
        "special_effects": _effects(raw_effects),
        "selling_value": selling,
        "buying_value": buying,
        "grid_size": str(raw.get("gridSize") or ""),
        "type": category,
        "image_url": image,
    }


def _unique_id(base: str, seen: Set[str]) -> str:
    rid = base or "recipe"
    if rid not in seen:
        seen.add(rid)
        return rid
    n = 2
    while f"{rid}-{n}" in seen:
        n += 1
    rid = f"{rid}-{n}"
    seen.add(rid)
    return rid


def _iter_raw_recipes(doc: Any) -> Iterable[Tuple[str, Mapping[str, Any]]]:
    if not isinstance(doc, Mapping):
        return
    categories = doc.get("recipes")
    if not isinstance(categories, Mapping):
        return
    for category, rows in categories.items():
        if not isinstance(rows, list):
            logger.debug("Skipping recipe category %r: not a list", category)
            continue
        for row in rows:
            if not isinstance(row, Mapping):
                logger.debug("Skipping non-object recipe in %r", category)
                continue
            yield str(category), row


def normalize_recipes(doc: Any, resolver: Optional[ImageResolver] = None) -> List[Recipe]:
    """Flatten a scraped recipes document into one Recipe per variation.

    Category = key of the document's `recipes` object.
    """
    res = resolver or ImageResolver()
    out: List[Recipe] = []
    seen: Set[str] = set()

    for category, raw in _iter_raw_recipes(doc):
        common = _recipe_common(raw, category, res)
        slug = slugify(common["name"])
        variations = raw.get("recipes")

        if isinstance(variations, list) and variations:
            for idx, variation in enumerate(variations):
                var = variation if isinstance(variation, Mapping) else {}
                out.append(
                    Recipe(
                        id=_unique_id(f"{slug}-v{idx}", seen),
                        ingredients=_ingredients(var.get("ingredients")),
                        output_amount=_output_amount(var),
                        variation=idx,
                        **common,
                    )
                )
        else:
            out.append(
                Recipe(
                    id=_unique_id(slug, seen),
                    ingredients={},
                    output_amount=1,
                    variation=None,
                    **common,
                )
            )

    logger.debug("Normalized %d recipe variations", len(out))
    return out


def group_recipes(recipes: Iterable[Recipe]) -> List[GroupedItem]:
    """Group variations by name, keeping first-seen order."""
    buckets: Dict[str, List[Recipe]] = {}
    for rec in recipes:
        buckets.setdefault(rec.name, []).append(rec)
    return [GroupedItem(name=name, recipes=tuple(rows)) for name, rows in buckets.items()]


# =========================================================
# Ingredients
# =========================================================

def _str_tuple(value: Any) -> Optional[Tuple[str, ...]]:
    if not isinstance(value, list):
        return None
    return tuple(str(x) for x in value if x is not None)


def normalize_ingredients(doc: Any, resolver: Optional[ImageResolver] = None) -> Dict[str, Ingredient]:
    res = resolver or ImageResolver()
    out: Dict[str, Ingredient] = {}
    rows = doc.get("ingredients") if isinstance(doc, Mapping) else None
    if not isinstance(rows, Mapping):
        return out

    for key, raw in rows.items():
        if not isinstance(raw, Mapping):
            logger.debug("Skipping non-object ingredient %r", key)
            continue
        key = str(key)
        itype = raw.get("type")
        if isinstance(itype, list):
            type_text = ", ".join(str(x) for x in itype)
        else:
            type_text = str(itype or "")

        recipe_id = raw.get("recipeId")
        out[key] = Ingredient(
            name=str(raw.get("name") or key),
            description=str(raw.get("description") or ""),
            type=type_text,
            image=_image(raw, ("imageUrl", "image_url", "image")) or res.resolve(key),
            grid_size=str(raw.get("gridSize") or ""),
            selling_value=_nonzero_number(raw.get("sellingValue")),
            buying_value=_nonzero_number(raw.get("buyingValue")),
            sellers=_str_tuple(raw.get("sellers")),
            used_in=_str_tuple(raw.get("usedIn")),
            recipe_id=str(recipe_id) if recipe_id else None,
        )

    logger.debug("Normalized %d ingredients", len(out))
    return out
