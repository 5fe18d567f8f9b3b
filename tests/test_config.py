# -*- coding: utf-8 -*-
import pytest

from core.config import ConfigLoader, load_config
from core.config.loader import PROJECT_ROOT


def _ini(tmp_path, text):
    p = tmp_path / "settings.ini"
    p.write_text(text, encoding="utf-8")
    return p


def test_explicit_missing_config_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigLoader(tmp_path / "nope.ini")


def test_defaults_without_sections(tmp_path, monkeypatch):
    monkeypatch.delenv("COOKBOOK_RECIPES", raising=False)
    monkeypatch.delenv("COOKBOOK_INGREDIENTS", raising=False)
    cfg = load_config(_ini(tmp_path, ""))
    assert cfg.recipes_path == PROJECT_ROOT / "data" / "recipes.json"
    assert cfg.ingredients_path == PROJECT_ROOT / "data" / "ingredients.json"
    assert cfg.page_size == 10
    assert cfg.popular_limit == 12
    assert cfg.unify_effect_filter is False
    assert cfg.known_urls_path is None


def test_values_and_relative_paths(tmp_path, monkeypatch):
    monkeypatch.delenv("COOKBOOK_RECIPES", raising=False)
    monkeypatch.delenv("COOKBOOK_INGREDIENTS", raising=False)
    abs_ingredients = tmp_path / "ing.json"
    cfg = load_config(
        _ini(
            tmp_path,
            "[data]\n"
            "recipes_path = snapshots/r.json\n"
            f"ingredients_path = {abs_ingredients}\n"
            "[images]\n"
            "base_url = https://img.test\n"
            "known_urls_path = conf/urls.json\n"
            "[query]\n"
            "page_size = 25\n"
            "unify_effect_filter = yes\n",
        )
    )
    assert cfg.recipes_path == PROJECT_ROOT / "snapshots" / "r.json"
    assert cfg.ingredients_path == abs_ingredients
    assert cfg.image_base_url == "https://img.test"
    assert cfg.known_urls_path == PROJECT_ROOT / "conf" / "urls.json"
    assert cfg.page_size == 25
    assert cfg.unify_effect_filter is True


def test_env_overrides_paths(tmp_path, monkeypatch):
    monkeypatch.setenv("COOKBOOK_RECIPES", str(tmp_path / "env_r.json"))
    monkeypatch.setenv("COOKBOOK_INGREDIENTS", str(tmp_path / "env_i.json"))
    cfg = load_config(_ini(tmp_path, "[data]\nrecipes_path = data/other.json\n"))
    assert cfg.recipes_path == tmp_path / "env_r.json"
    assert cfg.ingredients_path == tmp_path / "env_i.json"


def test_bundled_settings_load(monkeypatch):
    monkeypatch.delenv("COOKBOOK_RECIPES", raising=False)
    monkeypatch.delenv("COOKBOOK_INGREDIENTS", raising=False)
    cfg = load_config()
    assert cfg.recipes_path.name == "recipes.json"
    assert cfg.recipes_path.exists()
