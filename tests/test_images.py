# -*- coding: utf-8 -*-
import json

import pytest

from core.images import (
    ANY_ITEM_CATEGORIES,
    DEFAULT_BASE_URL,
    KNOWN_IMAGE_URLS,
    ImageResolver,
    any_item_members,
    is_usable_url,
    load_known_urls,
)


def test_any_prefix_resolves_like_base_name():
    resolver = ImageResolver()
    assert resolver.resolve("Any Milk") == resolver.resolve("Milk")
    assert resolver.resolve("Milk") == KNOWN_IMAGE_URLS["Milk"]


def test_resolution_order():
    resolver = ImageResolver(known_urls={"Egg": "https://img.test/egg.png", "salt": "https://img.test/salt.png"}, base_url="https://img.test/")
    assert resolver.resolve("Egg") == "https://img.test/egg.png"
    assert resolver.resolve("Salt") == "https://img.test/salt.png"
    assert resolver.resolve("Any Egg") == "https://img.test/egg.png"
    assert resolver.resolve("Any Weird Thing") == "https://img.test/Weird_Thing.png"
    assert resolver.resolve("Rotten  Egg") == "https://img.test/Rotten_Egg.png"


def test_default_base_url():
    assert ImageResolver(known_urls={}).synthesize("Craw Skin") == f"{DEFAULT_BASE_URL}/Craw_Skin.png"


def test_recipe_resolution_skips_lowercase_lookup():
    resolver = ImageResolver(known_urls={"milk": "https://img.test/milk.png"}, base_url="https://img.test")
    assert resolver.resolve("Milk") == "https://img.test/milk.png"
    assert resolver.resolve_recipe("Milk") == "https://img.test/Milk.png"


def test_image_url_for_prefers_usable_original():
    resolver = ImageResolver(known_urls={}, base_url="https://img.test")
    assert resolver.image_url_for("Egg", "https://cdn.test/egg.png") == "https://cdn.test/egg.png"
    assert resolver.image_url_for("Egg", "undefined") == "https://img.test/Egg.png"
    assert resolver.image_url_for("Egg", "  ") == "https://img.test/Egg.png"
    assert resolver.image_url_for("Egg") == "https://img.test/Egg.png"


def test_is_usable_url():
    assert is_usable_url("https://x")
    assert not is_usable_url("undefined")
    assert not is_usable_url("")
    assert not is_usable_url(None)


def test_with_overrides_does_not_touch_original():
    base = ImageResolver(known_urls={"Egg": "a"})
    extended = base.with_overrides({"Egg": "b", "Salt": "c", "": "d"})
    assert base.resolve("Egg") == "a"
    assert extended.resolve("Egg") == "b"
    assert extended.resolve("Salt") == "c"
    assert "" not in extended.known_urls


def test_load_known_urls(tmp_path):
    p = tmp_path / "urls.json"
    p.write_text(json.dumps({"Egg": "https://img.test/egg.png", "Bad": "undefined", "Num": 3}), encoding="utf-8")
    assert load_known_urls(p) == {"Egg": "https://img.test/egg.png"}

    p.write_text("[]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_known_urls(p)


def test_any_item_members():
    assert any_item_members("Any Milk") == ANY_ITEM_CATEGORIES["Any Milk"]
    assert "Whole Milk" in any_item_members("Any Milk")
    assert any_item_members("Egg") == []
    assert any_item_members("Thing", {"Thing": ["A", "B"]}) == ["A", "B"]
