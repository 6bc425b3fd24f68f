"""CLI entry point for kitchen."""

import logging
from collections import Counter
from pathlib import Path

import click

from . import __version__
from .config import ConfigError, get_home, get_log_level
from .export import export_shopping_list, format_duration, format_recipe, format_shopping_list
from .models import Recipe
from .planner import build_shopping_list
from .quantity import ArithmeticDomainError
from .recipe_parser import ParseError, parse_categories, parse_measure
from .store import RecipeNotFoundError, RecipeStore, is_url, load_recipe, read_text
from .units import UnitConversionError, convert_measure

# Errors reported as "✗ ..." instead of a traceback
USER_ERRORS = (
    ParseError,
    UnitConversionError,
    ArithmeticDomainError,
    RecipeNotFoundError,
    ConfigError,
)


def display_recipe(recipe: Recipe) -> None:
    """Display a parsed recipe."""
    click.echo()
    click.echo("=" * 60)
    click.echo(f"RECIPE: {recipe.title}")
    click.echo("=" * 60)

    if recipe.desc:
        click.echo(recipe.desc)

    for i, step in enumerate(recipe.steps, 1):
        header = f"\nStep {i}"
        if step.prep_time is not None:
            header += f" ({format_duration(step.prep_time)})"
        click.echo(header)
        for ing in step.ingredients:
            click.echo(f"  - {ing}")
        if step.instructions:
            click.echo()
            click.echo(step.instructions)

    click.echo()


def _source_id(source: str) -> str:
    if is_url(source):
        return source
    return Path(source).stem


# ============================================================================
# Main CLI Group
# ============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="kitchen")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """Recipe parsing and shopping list tool.

    Parse plain-text recipes, convert measures, and build consolidated
    shopping lists from several recipes.
    """
    try:
        level = "DEBUG" if verbose else get_log_level()
    except ConfigError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ============================================================================
# Recipe Commands
# ============================================================================


@cli.command("recipe")
@click.argument("source")
@click.option("--ingredients", "-i", is_flag=True, help="Only list the combined ingredients")
@click.option("--canonical", "-c", is_flag=True, help="Print the recipe in canonical recipe text")
def recipe_cmd(source: str, ingredients: bool, canonical: bool):
    """Parse a recipe from a file or URL and show it.

    Examples:

    \b
        kitchen recipe pancakes.txt
        kitchen recipe pancakes.txt --ingredients
        kitchen recipe https://example.com/pancakes.txt --canonical
    """
    try:
        recipe = load_recipe(source)
    except USER_ERRORS as e:
        click.echo(f"✗ Failed to parse recipe: {e}", err=True)
        raise SystemExit(1) from None

    if canonical:
        click.echo(format_recipe(recipe), nl=False)
    elif ingredients:
        for ing in recipe.get_ingredients().values():
            click.echo(str(ing))
    else:
        display_recipe(recipe)


# ============================================================================
# Shopping List Commands
# ============================================================================


@cli.command("shop")
@click.argument("sources", nargs=-1)
@click.option("--menu", "-m", "use_menu", is_flag=True, help="Plan the recipes in the menu file")
@click.option(
    "--home",
    type=click.Path(file_okay=False, path_type=Path),
    help="Recipe store directory (default: KITCHEN_HOME or ~/.kitchen)",
)
@click.option("--categories", "categories_file", help="Category file (default: store categories)")
@click.option("--staples", "staples_file", help="Staples recipe (default: store staples)")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Export to file")
@click.option(
    "--format", "-f", type=click.Choice(["text", "json", "md"]), help="Export format for --output"
)
def shop(
    sources: tuple[str, ...],
    use_menu: bool,
    home: Path | None,
    categories_file: str | None,
    staples_file: str | None,
    output: Path | None,
    format: str | None,
):
    """Build a shopping list from several recipes.

    A recipe given more than once is planned that many times.

    Examples:

    \b
        kitchen shop pancakes.txt chili.txt chili.txt
        kitchen shop --menu
        kitchen shop pancakes.txt --output list.md
    """
    if not sources and not use_menu:
        click.echo("✗ Provide recipe files or URLs, or use --menu.", err=True)
        raise SystemExit(1)

    store = RecipeStore(home or get_home())

    try:
        plan_entries = []
        if use_menu:
            plan = store.get_meal_plan()
            plan_entries.extend(
                (recipe_id, entry.recipe, count) for recipe_id, (entry, count) in plan.entries.items()
            )
        for source, count in Counter(sources).items():
            plan_entries.append((_source_id(source), load_recipe(source), count))

        if categories_file:
            categories = parse_categories(read_text(categories_file))
        else:
            categories = store.get_categories()
        staples = load_recipe(staples_file) if staples_file else store.get_staples()

        shopping_list = build_shopping_list(plan_entries, categories=categories, staples=staples)
    except USER_ERRORS as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None

    if not shopping_list:
        click.echo("Shopping list is empty.")
        return

    if output:
        used_format = export_shopping_list(shopping_list, output, format=format)
        click.echo(f"✓ Exported to {output} ({used_format} format)")
    else:
        click.echo(format_shopping_list(shopping_list))


@cli.command("categories")
@click.argument("file")
def categories_cmd(file: str):
    """Check a category file and show its categories."""
    try:
        mapping = parse_categories(read_text(file))
    except ParseError as e:
        click.echo(f"✗ Invalid category file: {e}", err=True)
        raise SystemExit(1) from None

    grouped: dict[str, list[str]] = {}
    for name, category in mapping.items():
        grouped.setdefault(category, []).append(name)

    for category in sorted(grouped):
        click.echo(f"{category}: {', '.join(sorted(grouped[category]))}")
    click.echo(f"✓ {len(mapping)} ingredients in {len(grouped)} categories")


# ============================================================================
# Unit Commands
# ============================================================================


@cli.command("convert")
@click.argument("measure")
@click.argument("unit", required=False)
def convert(measure: str, unit: str | None):
    """Convert a measure to another unit, or normalize it.

    Examples:

    \b
        kitchen convert "3 tsp" tbsp
        kitchen convert "48 tsp"
    """
    try:
        amount = parse_measure(measure)
        result = convert_measure(amount, unit) if unit else amount.normalize()
    except USER_ERRORS as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None

    click.echo(str(result))


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
