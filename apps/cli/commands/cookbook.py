#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""apps/cli/commands/cookbook.py

CLI-oriented cookbook browser.

Notes
- This module is intentionally a thin UI layer.
- Normalization / query / validity logic lives in `core/`.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from apps.cli.cli_common import human_count, load_cli_config, load_dataset, split_multi
from apps.cookbook.catalog_store import CatalogError
from core.dataset import RecipeDataset
from core.indexers.vocabulary import filter_vocabulary, popular
from core.query import (
    HEALTH_SORT_MODES,
    SORT_FIELDS,
    SortSpec,
    duration_display,
    health_display,
    hps_display,
    type_display,
)
from core.schemas.recipes import GroupedItem
from core.state import ViewState

console = Console()


def _ingredients_text(group: GroupedItem, limit: int = 3) -> str:
    items = list(group.primary_recipe.ingredients.items())
    if not items:
        return "None"
    text = ", ".join(f"{name} ({qty})" for name, qty in items[:limit])
    return text + ("..." if len(items) > limit else "")


class CookbookCLI:
    def __init__(self, dataset: RecipeDataset, *, page_size: int = 10, popular_limit: int = 12, unify_effect_filter: bool = False):
        self.ds = dataset
        self.page_size = page_size
        self.popular_limit = popular_limit
        self.unify_effect_filter = unify_effect_filter

    # ---------- recipe list ----------

    def list_recipes(self, args: argparse.Namespace) -> None:
        state = ViewState(sort=SortSpec(field=args.sort, direction=args.direction, health_mode=args.health_mode).normalized())
        state = state.with_search(args.query or "")
        for label in split_multi(args.category):
            state = state.toggle_category(label)
        for name in split_multi(args.ingredient):
            state = state.toggle_ingredient(name)
        for name in split_multi(args.effect):
            state = state.toggle_effect(name)
        state = replace(state, page=args.page)
        opts = state.to_options(self.unify_effect_filter)
        page = self.ds.page(opts, page=state.page, page_size=self.page_size)
        if not page.total:
            console.print("[yellow]No recipes match the current filters.[/yellow]")
            return

        table = Table(
            title=f"Recipes (page {page.page}/{page.total_pages}, {page.total} items)",
            box=None,
            show_header=True,
            header_style="bold dim",
        )
        table.add_column("Recipe", style="cyan")
        table.add_column("Type", style="dim")
        table.add_column("HP/DMG", justify="right")
        table.add_column("Duration", justify="right")
        table.add_column("HP/s", justify="right")
        table.add_column("Ingredients")
        table.add_column("Var.", justify="right", style="dim")

        for group in page.items:
            r = group.primary_recipe
            value = health_display(r)
            style = "red" if r.is_damage else "green"
            table.add_row(
                group.name,
                type_display(r.type),
                f"[{style}]{value}[/{style}]",
                duration_display(r.duration),
                hps_display(r),
                _ingredients_text(group),
                str(group.total_variations),
            )

        console.print(Panel(table, border_style="blue"))
        if opts.ingredient_filters:
            valid = self.ds.validator.valid(opts.ingredient_filters)
            console.print(
                f"[dim]Showing recipes with: {' + '.join(opts.ingredient_filters)} • "
                f"{page.total} recipes found • {len(valid)} compatible ingredients[/dim]"
            )

    # ---------- recipe detail ----------

    def show_recipe(self, name: str) -> None:
        group = self.ds.group(name)
        if group is None:
            candidates = [g.name for g in self.ds.groups if name.lower() in g.name.lower()]
            if len(candidates) != 1:
                if candidates:
                    console.print(f"[yellow]Possible matches: {', '.join(candidates[:8])}[/yellow]")
                else:
                    console.print(f"[red]Recipe not found: {name}[/red]")
                return
            group = self.ds.group(candidates[0])
            if group is None:
                console.print(f"[red]Recipe not found: {name}[/red]")
                return

        r = group.primary_recipe
        grid = Table.grid(expand=True)
        grid.add_column()
        grid.add_column(justify="right")
        grid.add_row(f"[bold gold1]{group.name}[/bold gold1]", f"[dim]{type_display(r.type)}[/dim]")
        if r.description:
            grid.add_row(f"[italic]{r.description}[/italic]", "")
        grid.add_row(f"[bold]Value:[/bold] {health_display(r)}", f"[bold]HP/s:[/bold] {hps_display(r)}")
        grid.add_row(f"[bold]Duration:[/bold] {duration_display(r.duration)}", f"[dim]{r.grid_size}[/dim]")
        if r.selling_value or r.buying_value:
            grid.add_row(f"[bold]Sell/Buy:[/bold] {r.selling_value or '-'} / {r.buying_value or '-'}", "")
        for eff in r.special_effects:
            detail = f" {eff.value}" if eff.value else ""
            dur = f" ({duration_display(eff.duration)})" if eff.duration else ""
            grid.add_row(f"  ✦ [magenta]{eff.effect}[/magenta]{detail}{dur}", "")

        for idx, rec in enumerate(group.recipes, start=1):
            out = f" → x{rec.output_amount}" if rec.output_amount > 1 else ""
            grid.add_row(f"\n[bold]Variation {idx}{out}:[/bold]", "")
            if not rec.ingredients:
                grid.add_row("  [dim]no ingredients recorded[/dim]", "")
            for ing, qty in rec.ingredients.items():
                hint = " [dim]*[/dim]" if self.ds.any_of(ing) else ""
                grid.add_row(f"  • [cyan]{ing}[/cyan]{hint}", f"[yellow]x{qty}[/yellow]")

        console.print(Panel(grid, title="Recipe", border_style="gold1"))

    # ---------- ingredients ----------

    def show_ingredient(self, name: str) -> None:
        ing = self.ds.ingredient(name)
        used = self.ds.recipes_using(name)
        crafted = self.ds.crafting_recipe_for(name)

        grid = Table.grid(expand=True)
        grid.add_column()
        title = f"[bold gold1]{ing.name}[/bold gold1]" + ("  [green]Craftable[/green]" if crafted else "")
        grid.add_row(title)
        if ing.type:
            grid.add_row(f"[dim]{ing.type}[/dim]")
        if ing.description:
            grid.add_row(f"[italic]{ing.description}[/italic]")
        grid.add_row(f"[bold]Image:[/bold] {ing.image}")
        if ing.sellers:
            grid.add_row(f"[bold]Sold by:[/bold] {', '.join(ing.sellers)}")
        members = self.ds.any_of(name)
        if members:
            grid.add_row(f"[bold]Can use:[/bold] {', '.join(members)}")
        if crafted:
            grid.add_row(f"[bold]Made by:[/bold] {crafted.name}")
        grid.add_row(f"\n[bold]Used in ({len(used)}):[/bold]")
        for rec in used:
            grid.add_row(f"  • [cyan]{rec.name}[/cyan] [dim]x{rec.ingredients[name]}[/dim]")

        console.print(Panel(grid, title="Ingredient", border_style="green"))

    # ---------- vocab / combos ----------

    def show_vocab(self, kind: str, text: str, show_all: bool) -> None:
        if kind == "effects":
            counts = dict(self.ds.effect_counts)
            names = filter_vocabulary(self.ds.effect_vocabulary, text)
        else:
            counts = dict(self.ds.ingredient_counts)
            names = filter_vocabulary(self.ds.ingredient_vocabulary, text)

        shown = popular(names, show_all=show_all, limit=self.popular_limit)
        table = Table(title=f"{kind.title()} by item count", box=None, header_style="bold dim")
        table.add_column("No.", justify="right", style="dim", width=4)
        table.add_column("Name", style="cyan")
        table.add_column("Items", justify="right")
        for i, n in enumerate(shown, start=1):
            table.add_row(str(i), n, str(counts.get(n, 0)))
        console.print(table)
        if len(names) > len(shown):
            console.print(f"[dim]... {len(names) - len(shown)} more (use --all)[/dim]")

    def show_combos(self, active: List[str], show_all: bool) -> None:
        options = self.ds.validator.options(active)
        if not show_all:
            options = [o for o in options if o.active or o.valid]

        table = Table(title=f"Ingredient options for: {' + '.join(active) or '(none)'}", box=None, header_style="bold dim")
        table.add_column("Ingredient", style="cyan")
        table.add_column("State")
        table.add_column("Items", justify="right")
        for opt in options:
            if opt.active:
                state = "[bold green]active[/bold green]"
            elif opt.enabled:
                state = "selectable"
            else:
                state = "[dim]disabled[/dim]"
            table.add_row(opt.name, state, str(opt.projected_count))
        console.print(table)

    def show_meta(self) -> None:
        m = self.ds.meta
        grid = Table.grid()
        grid.add_column()
        grid.add_row(f"[bold]{m.name or 'Scraped recipes'}[/bold]")
        if m.source:
            grid.add_row(f"Source: {m.source}")
        if m.scraped_at:
            grid.add_row(f"Scraped: {m.scraped_at}")
        grid.add_row(f"Categories: {human_count(dict(m.categories))}")
        grid.add_row(
            f"Variations: {len(self.ds.recipes)} • Items: {len(self.ds.groups)} • "
            f"Ingredients: {len(self.ds.ingredients)} • Effects: {len(self.ds.effect_counts)}"
        )
        console.print(Panel(grid, title="Dataset", border_style="blue"))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cookbook", description="Browse scraped crafting recipes.")
    parser.add_argument("--config", default="", help="settings.ini path (default: conf/settings.ini)")
    parser.add_argument("--recipes", default="", help="Scraped recipes JSON (overrides config)")
    parser.add_argument("--ingredients", default="", help="Scraped ingredients JSON (overrides config)")
    sub = parser.add_subparsers(dest="command")

    p_list = sub.add_parser("list", help="Filtered / sorted recipe table")
    p_list.add_argument("query", nargs="?", default="")
    p_list.add_argument("-c", "--category", action="append", help="Consumables|Throwables|Equipment (repeatable)")
    p_list.add_argument("-i", "--ingredient", action="append", help="Required ingredient (repeatable, AND)")
    p_list.add_argument("-e", "--effect", action="append", help="Required effect (repeatable, AND)")
    p_list.add_argument("--sort", default="name", choices=list(SORT_FIELDS))
    p_list.add_argument("--direction", default="asc", choices=["asc", "desc"])
    p_list.add_argument("--health-mode", default="hp_desc", choices=list(HEALTH_SORT_MODES))
    p_list.add_argument("--page", type=int, default=1)

    p_show = sub.add_parser("show", help="Recipe detail with all variations")
    p_show.add_argument("name")

    p_ing = sub.add_parser("ingredient", help="Ingredient detail")
    p_ing.add_argument("name")

    p_vocab = sub.add_parser("vocab", help="Ingredient / effect vocabulary")
    p_vocab.add_argument("kind", choices=["ingredients", "effects"])
    p_vocab.add_argument("text", nargs="?", default="")
    p_vocab.add_argument("--all", action="store_true")

    p_combo = sub.add_parser("combos", help="Which ingredients can still be combined")
    p_combo.add_argument("ingredients", nargs="*")
    p_combo.add_argument("--all", action="store_true", help="Include disabled options")

    sub.add_parser("meta", help="Dataset summary")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    cfg = load_cli_config(args.config or None)
    try:
        ds = load_dataset(
            cfg,
            recipes_path=None if not args.recipes else Path(args.recipes).expanduser(),
            ingredients_path=None if not args.ingredients else Path(args.ingredients).expanduser(),
        )
    except CatalogError as e:
        console.print(f"[red]Failed to load data: {e}[/red]")
        return 2

    cli = CookbookCLI(ds, page_size=cfg.page_size, popular_limit=cfg.popular_limit, unify_effect_filter=cfg.unify_effect_filter)
    if args.command == "list":
        cli.list_recipes(args)
    elif args.command == "show":
        cli.show_recipe(args.name)
    elif args.command == "ingredient":
        cli.show_ingredient(args.name)
    elif args.command == "vocab":
        cli.show_vocab(args.kind, args.text, args.all)
    elif args.command == "combos":
        cli.show_combos(split_multi(args.ingredients), args.all)
    elif args.command == "meta":
        cli.show_meta()
    return 0


if __name__ == "__main__":
    sys.exit(main())
