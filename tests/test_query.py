# -*- coding: utf-8 -*-
import pytest

from core.query import (
    QueryOptions,
    SortSpec,
    duration_display,
    health_display,
    hps_display,
    matches_categories,
    matches_effects,
    matches_ingredients,
    matches_search,
    paginate,
    query,
    sort_groups,
    type_display,
)


def _names(groups):
    return [g.name for g in groups]


@pytest.fixture
def mixed(make_recipe, make_group):
    return [
        make_group(make_recipe("Soup", {"Water": 1}, health=20, duration=10)),
        make_group(make_recipe("Bomb", {"Sulfur": 2}, damage=600, type="cooked_throwables")),
        make_group(make_recipe("Steak", {"Meat": 1, "Salt": 1}, health=60, duration=0)),
        make_group(make_recipe("Dart", {"Stick": 1}, damage=50, type="cooked_throwables")),
        make_group(make_recipe("Vest", {"Skin": 4}, type="cooked_equipment")),
    ]


def test_search_fields(make_recipe, make_group):
    g = make_group(
        make_recipe("Omelette", {"Egg": 2}, description="Fluffy", effects=["Warmth"]),
        make_recipe("Omelette", {"Egg": 2, "Truffle": 1}, rid="o1"),
    )
    assert matches_search(g, "")
    assert matches_search(g, "OMEL")
    assert matches_search(g, "fluff")
    assert matches_search(g, "egg")
    assert matches_search(g, "warm")
    assert matches_search(g, "truffle")
    assert not matches_search(g, "salt")


def test_categories_or(mixed):
    assert _names(g for g in mixed if matches_categories(g, ["Throwables"])) == ["Bomb", "Dart"]
    both = [g for g in mixed if matches_categories(g, ["Throwables", "Equipment"])]
    assert _names(both) == ["Bomb", "Dart", "Vest"]
    assert all(matches_categories(g, []) for g in mixed)


def test_ingredient_filter_is_conjunctive_across_variations(make_recipe, make_group):
    g = make_group(
        make_recipe("Stew", {"Meat": 1}, rid="s0"),
        make_recipe("Stew", {"Potato": 1}, rid="s1"),
    )
    assert matches_ingredients(g, ["Meat", "Potato"])
    assert matches_ingredients(g, [])
    assert not matches_ingredients(g, ["Meat", "Salt"])


def test_query_every_result_has_every_filter(mixed, make_recipe, make_group):
    groups = mixed + [make_group(make_recipe("Salted Meat", {"Meat": 1, "Salt": 2}))]
    result = query(groups, QueryOptions(ingredient_filters=("Meat", "Salt")))
    assert _names(result) == ["Salted Meat", "Steak"]
    for g in result:
        for ing in ("Meat", "Salt"):
            assert any(ing in r.ingredients for r in g.recipes)


def test_effect_filter_primary_only_unless_unified(make_recipe, make_group):
    g = make_group(
        make_recipe("Tea", {"Leaf": 1}, rid="t0"),
        make_recipe("Tea", {"Leaf": 1}, rid="t1", effects=["Calm"]),
    )
    assert not matches_effects(g, ["Calm"])
    assert matches_effects(g, ["Calm"], any_variation=True)
    assert query([g], QueryOptions(effect_filters=("Calm",))) == []
    assert _names(query([g], QueryOptions(effect_filters=("Calm",), unify_effect_filter=True))) == ["Tea"]


def test_health_sort_healing_first(mixed):
    out = sort_groups(mixed, SortSpec(field="health", health_mode="hp_desc"))
    assert _names(out) == ["Steak", "Soup", "Vest", "Bomb", "Dart"]
    healing = [g for g in out if not g.primary_recipe.is_damage]
    assert out[: len(healing)] == healing


def test_small_heal_outranks_big_damage(make_recipe, make_group):
    heal = make_group(make_recipe("Broth", {"Water": 1}, health=50, duration=10))
    hit = make_group(make_recipe("Grenade", {"Sulfur": 1}, damage=100, type="cooked_throwables"))
    assert _names(sort_groups([hit, heal], SortSpec(field="health", health_mode="hp_desc"))) == ["Broth", "Grenade"]


def test_health_sort_modes(mixed):
    assert _names(sort_groups(mixed, SortSpec(field="health", health_mode="hp_asc"))) == [
        "Vest",
        "Soup",
        "Steak",
        "Dart",
        "Bomb",
    ]
    assert _names(sort_groups(mixed, SortSpec(field="health", health_mode="dmg_desc")))[:2] == ["Bomb", "Dart"]
    assert _names(sort_groups(mixed, SortSpec(field="health", health_mode="dmg_asc")))[:2] == ["Dart", "Bomb"]


def test_hps_sort_puts_damage_last(mixed):
    asc = sort_groups(mixed, SortSpec(field="hps", direction="asc"))
    desc = sort_groups(mixed, SortSpec(field="hps", direction="desc"))
    assert _names(asc)[:3] == ["Vest", "Soup", "Steak"]
    assert _names(desc)[:3] == ["Steak", "Soup", "Vest"]
    assert {g.name for g in desc[3:]} == {"Bomb", "Dart"}


def test_name_sort_case_insensitive_and_stable(make_recipe, make_group):
    groups = [make_group(make_recipe(n)) for n in ("banana", "Apple", "cherry")]
    assert _names(sort_groups(groups)) == ["Apple", "banana", "cherry"]
    assert _names(sort_groups(groups, SortSpec(direction="desc"))) == ["cherry", "banana", "Apple"]

    ties = [make_group(make_recipe(n, {"A": 1})) for n in ("x", "y", "z")]
    assert _names(sort_groups(ties, SortSpec(field="difficulty"))) == ["x", "y", "z"]


def test_other_sort_fields(mixed):
    assert _names(sort_groups(mixed, SortSpec(field="difficulty", direction="desc")))[0] == "Steak"
    assert _names(sort_groups(mixed, SortSpec(field="duration", direction="desc")))[0] == "Soup"
    assert _names(sort_groups(mixed, SortSpec(field="type"))) == ["Soup", "Steak", "Vest", "Bomb", "Dart"]


def test_sort_spec_normalized():
    spec = SortSpec(field="bogus", direction="sideways", health_mode="??").normalized()
    assert spec == SortSpec()


def test_paginate_clamps(make_recipe, make_group):
    items = [make_group(make_recipe(f"r{n:02d}")) for n in range(23)]
    first = paginate(items, page=0, page_size=10)
    assert (first.page, first.total_pages, first.total) == (1, 3, 23)
    last = paginate(items, page=99, page_size=10)
    assert last.page == 3
    assert len(last.items) == 3
    assert _names(last.items) == ["r20", "r21", "r22"]


def test_paginate_empty():
    page = paginate([], page=5)
    assert (page.page, page.total_pages, page.total, page.items) == (1, 1, 0, ())


def test_health_display(make_recipe):
    assert health_display(make_recipe("B", damage=600)) == "600 DMG"
    assert health_display(make_recipe("S", health=30)) == "30 HP"
    assert health_display(make_recipe("S", health=12.5)) == "12.5 HP"
    assert health_display(make_recipe("V")) == "0 HP"


def test_duration_display():
    assert duration_display(0) == "Instant"
    assert duration_display(12.0) == "12s"
    assert duration_display(2.5) == "2.5s"


def test_hps_display(make_recipe):
    assert hps_display(make_recipe("B", damage=600)) == "-"
    assert hps_display(make_recipe("V")) == "0"
    assert hps_display(make_recipe("S", health=90, duration=30)) == "3.0"


def test_instant_heal_counts_as_one_second(make_recipe):
    r = make_recipe("Shake", health=30, duration=0)
    assert r.health_per_second == 30.0
    assert hps_display(r) == "30.0"


def test_type_display():
    assert type_display("cooked_throwables") == "Throwable"
    assert type_display("something_else") == "something_else"
