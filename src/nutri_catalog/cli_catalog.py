#!/usr/bin/env python3
"""
CLI for the scientific food catalog.

Usage:
    # Load the catalog and show what was indexed
    nutri-catalog --data-dir data/catalog

    # Search foods by name
    nutri-catalog arroz

    # List foods of a category
    nutri-catalog --category frutas

    # Calorically equivalent substitutes for 256 kcal of a food
    nutri-catalog --substitutes f1 --kcal 256
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List

from rich.console import Console
from rich.table import Table

from nutri_catalog import config
from nutri_catalog.exceptions import CatalogSourceError
from nutri_catalog.models import FoodItemCanonical, LoadResult, SubstitutionSuggestion
from nutri_catalog.services import FoodLookup, SubstitutionEngine, load_catalog_dir

console = Console()


def _fmt(value, unit: str = "") -> str:
    if value is None:
        return "[dim]-[/dim]"
    return f"{value:g}{unit}"


def _print_load_report(results: Dict[str, LoadResult]) -> None:
    """Pretty-print one row per table that was found."""
    if not results:
        console.print("[yellow]No catalog tables found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold", padding=(0, 1))
    table.add_column("Table", min_width=10)
    table.add_column("Status", min_width=8)
    table.add_column("Records", justify="right")
    table.add_column("Skipped", justify="right")

    for name, result in results.items():
        status = "[green]ok[/green]" if result.success else "[red]rejected[/red]"
        table.add_row(name, status, str(result.record_count), str(len(result.warnings)))

    console.print(table)

    for name, result in results.items():
        for error in result.errors:
            console.print(f"  [red]x[/red] {name}: {error}")


def _print_foods(foods: List[FoodItemCanonical]) -> None:
    if not foods:
        console.print("[yellow]No foods found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold", padding=(0, 1))
    table.add_column("ID")
    table.add_column("Name", min_width=30)
    table.add_column("Category")
    table.add_column("kcal/100g", justify="right")
    table.add_column("Portions")

    for food in foods:
        portions = ", ".join(p.label for p in food.portions[:3])
        table.add_row(
            food.id,
            food.name,
            food.category,
            _fmt(food.nutrients_per_100g.kcal),
            f"[dim]{portions}[/dim]",
        )

    console.print(table)


def _print_substitutes(suggestions: List[SubstitutionSuggestion]) -> None:
    if not suggestions:
        console.print("[yellow]No substitutes found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold", padding=(0, 1))
    table.add_column("Food", min_width=30)
    table.add_column("Amount", min_width=20)
    table.add_column("Weight", justify="right")
    table.add_column("Fit error", justify="right")

    for s in suggestions:
        if s.is_manual_weight:
            amount = "[dim]manual weight[/dim]"
        else:
            portion = s.food.portions[s.portion_index]
            amount = f"{s.quantity:g} x {portion.label}"
        color = "green" if s.fit_error_pct <= 5 else "yellow"
        table.add_row(
            s.food.name,
            amount,
            f"{s.weight_grams}g",
            f"[{color}]{s.fit_error_pct}%[/{color}]",
        )

    console.print(table)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Scientific food catalog: search foods and find calorically equivalent substitutes",
    )
    parser.add_argument(
        "query", nargs="?", type=str,
        help="Food name to search for",
    )
    parser.add_argument(
        "--data-dir", type=str, default=None,
        help=f"Directory holding the catalog CSV tables (default: {config.DATA_DIR})",
    )
    parser.add_argument(
        "--category", "-c", type=str, default=None,
        help="List foods whose category contains this text",
    )
    parser.add_argument(
        "--substitutes", "-s", type=str, default=None, metavar="FOOD_ID",
        help="List substitutes for this food id (requires --kcal)",
    )
    parser.add_argument(
        "--kcal", type=float, default=None,
        help="Calories the substitute should provide",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    if args.substitutes and args.kcal is None:
        console.print("[red]--substitutes requires --kcal[/red]")
        return 1

    data_dir = Path(args.data_dir) if args.data_dir else config.DATA_DIR
    lookup = FoodLookup()

    if data_dir.is_dir():
        try:
            results = load_catalog_dir(lookup.store, data_dir)
        except CatalogSourceError as e:
            console.print(f"[red]{e}[/red]")
            return 1
        console.print(f"[bold]Catalog[/bold]  ({data_dir})\n")
        _print_load_report(results)
    elif args.data_dir:
        console.print(f"[red]Catalog directory not found: {data_dir}[/red]")
        return 1
    else:
        console.print(f"[dim]No catalog at {data_dir}, using legacy foods only[/dim]")

    if args.substitutes:
        original = lookup.get_by_id(args.substitutes)
        if original is None:
            console.print(f"[red]Food not found: {args.substitutes}[/red]")
            return 1
        console.print(f"\n[bold]Substitutes for {original.name}[/bold]  ({args.kcal:g} kcal)")
        _print_substitutes(SubstitutionEngine(lookup).find_substitutes(original.id, args.kcal))
    elif args.category:
        console.print(f"\n[bold]Category:[/bold] {args.category}")
        _print_foods(lookup.search_by_category(args.category))
    elif args.query:
        console.print(f"\n[bold]Search:[/bold] {args.query}")
        _print_foods(lookup.search(args.query))

    return 0


if __name__ == "__main__":
    sys.exit(main())
