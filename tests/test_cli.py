# -*- coding: utf-8 -*-
from types import SimpleNamespace

from apps.cli.cli_common import split_multi
from apps.cli.commands.cookbook import CookbookCLI, main


def _run(capsys, data_files, *argv):
    recipes_path, ingredients_path = data_files
    code = main(["--recipes", str(recipes_path), "--ingredients", str(ingredients_path), *argv])
    return code, capsys.readouterr().out


def test_split_multi():
    assert split_multi(["Egg,Salt", " Egg ", "Milk"]) == ["Egg", "Salt", "Milk"]
    assert split_multi(None) == []


def test_list(capsys, data_files):
    code, out = _run(capsys, data_files, "list", "-i", "Egg", "--sort", "health")
    assert code == 0
    assert "Omelette" in out
    assert "Sulfur" in out
    assert "Milkshake" not in out


def test_list_no_match(capsys, data_files):
    _, out = _run(capsys, data_files, "list", "zzz")
    assert "No recipes match" in out


def test_show(capsys, data_files):
    _, out = _run(capsys, data_files, "show", "Omelette")
    assert "Variation" in out
    assert "Salt" in out


def test_ingredient_and_meta(capsys, data_files):
    _, out = _run(capsys, data_files, "ingredient", "Egg")
    assert "Chef" in out
    _, out = _run(capsys, data_files, "meta")
    assert "Test Recipes" in out


def test_missing_data_file(capsys, tmp_path):
    code = main(["--recipes", str(tmp_path / "none.json"), "--ingredients", str(tmp_path / "none.json"), "meta"])
    assert code == 2


def test_list_category_and_page_clamp(capsys, data_files):
    code, out = _run(capsys, data_files, "list", "-c", "Throwables", "--page", "7")
    assert code == 0
    assert "page 1/1" in out
    assert "Sulfur" in out
    assert "Omelette" not in out


def test_undecodable_data_file(capsys, data_files):
    recipes_path, ingredients_path = data_files
    recipes_path.write_bytes(b"\xff\xfe")
    code = main(["--recipes", str(recipes_path), "--ingredients", str(ingredients_path), "meta"])
    assert code == 2
    assert "Failed to load data" in capsys.readouterr().out


def test_show_partial_name(capsys, data_files):
    _, out = _run(capsys, data_files, "show", "omel")
    assert "Variation" in out


def test_show_vanished_group(capsys):
    # name index and group lookup disagree, e.g. mid-reload
    ds = SimpleNamespace(groups=[SimpleNamespace(name="Omelette")], group=lambda name: None)
    CookbookCLI(ds).show_recipe("omel")
    assert "Recipe not found: omel" in capsys.readouterr().out
