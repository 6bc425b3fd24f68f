"""Recipe rendering and shopping list export in various formats."""

import json
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from .models import Ingredient, Recipe
from .planner import ShoppingListItem
from .units import UNIT_ALIASES, Count

ShoppingList = dict[str, list[ShoppingListItem]]

# Largest first
DURATION_DISPLAY_UNITS = (
    ("h", timedelta(hours=1)),
    ("min", timedelta(minutes=1)),
    ("s", timedelta(seconds=1)),
)


def format_duration(duration: timedelta) -> str:
    """Render a duration in the largest unit that divides it exactly, e.g. "90 min"."""
    for unit, size in DURATION_DISPLAY_UNITS:
        if duration and duration % size == timedelta(0):
            return f"{duration // size} {unit}"
    if not duration:
        return "0 s"
    return f"{duration // timedelta(milliseconds=1)} ms"


def format_ingredient(ingredient: Ingredient) -> str:
    """Render an ingredient as a recipe line, e.g. "1 1/2 cups flour (sifted)"."""
    amount = str(ingredient.amt)
    first_word = ingredient.name.split(" ", 1)[0].lower()
    if isinstance(ingredient.amt, Count) and first_word in UNIT_ALIASES:
        # "2 cup holders" would read back as two cups of "holders"
        amount += " cnt"
    line = f"{amount} {ingredient.name}"
    if ingredient.form:
        line += f" ({ingredient.form})"
    return line


def format_recipe(recipe: Recipe) -> str:
    """
    Render a recipe back into recipe text.

    The output parses back into an equal recipe.
    """
    parts = [f"title: {recipe.title}"]
    if recipe.desc:
        parts.append(recipe.desc)
    for step in recipe.steps:
        header = "step:"
        if step.prep_time is not None:
            header += f" {format_duration(step.prep_time)}"
        parts.append(header)
        parts.append("\n".join(format_ingredient(ing) for ing in step.ingredients))
        if step.instructions:
            parts.append(step.instructions)
    return "\n\n".join(parts) + "\n"


def format_shopping_list(shopping_list: ShoppingList, *, show_recipes: bool = True) -> str:
    """
    Render a shopping list as plain text, one category heading per group.

    Args:
        shopping_list: Output of build_shopping_list
        show_recipes: Append the contributing recipe ids to every row
    """
    lines: list[str] = []
    for category, items in shopping_list.items():
        if lines:
            lines.append("")
        lines.append(category)
        for item in items:
            line = f"  {item.ingredient}"
            if show_recipes and item.recipes:
                line += f"  [{', '.join(sorted(item.recipes))}]"
            lines.append(line)
    return "\n".join(lines)


def _item_to_dict(item: ShoppingListItem) -> dict[str, Any]:
    data = item.ingredient.to_dict()
    data["recipes"] = sorted(item.recipes)
    return data


def export_to_json(
    shopping_list: ShoppingList,
    filepath: str | Path,
    *,
    title: str | None = None,
) -> None:
    """
    Export shopping list to JSON format.

    Args:
        shopping_list: Output of build_shopping_list
        filepath: Output file path
        title: Optional list title
    """
    items = [item for group in shopping_list.values() for item in group]
    data: dict[str, Any] = {
        "exported_at": datetime.now().isoformat(),
        "title": title,
        "categories": {
            category: [_item_to_dict(item) for item in group]
            for category, group in shopping_list.items()
        },
        "summary": {
            "total_items": len(items),
            "recipes": sorted({recipe_id for item in items for recipe_id in item.recipes}),
        },
    }

    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def export_to_markdown(
    shopping_list: ShoppingList,
    filepath: str | Path,
    *,
    title: str | None = None,
) -> None:
    """
    Export shopping list to Markdown format as a checklist per category.

    Args:
        shopping_list: Output of build_shopping_list
        filepath: Output file path
        title: Optional list title
    """
    lines: list[str] = []

    lines.append(f"# {title or 'Shopping List'}")
    lines.append("")
    lines.append(f"*Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}*")
    lines.append("")

    for category, items in shopping_list.items():
        lines.append(f"## {category.capitalize()}")
        lines.append("")
        for item in items:
            recipes = ", ".join(sorted(item.recipes))
            lines.append(f"- [ ] **{item.ingredient}** ({recipes})")
        lines.append("")

    with open(filepath, "w", encoding="utf-8") as f:
        f.write("\n".join(lines))


def export_to_text(
    shopping_list: ShoppingList,
    filepath: str | Path,
    *,
    title: str | None = None,
) -> None:
    """Export shopping list as plain text."""
    text = format_shopping_list(shopping_list)
    if title:
        text = f"{title}\n\n{text}"
    with open(filepath, "w", encoding="utf-8") as f:
        f.write(text + "\n")


def export_shopping_list(
    shopping_list: ShoppingList,
    filepath: str | Path,
    *,
    title: str | None = None,
    format: str | None = None,
) -> str:
    """
    Export shopping list to file.

    Format is auto-detected from file extension if not specified.

    Args:
        shopping_list: Output of build_shopping_list
        filepath: Output file path
        title: Optional list title
        format: Output format (json, md, text) - auto-detected if None

    Returns:
        The format used for export

    Raises:
        ValueError: If the format is not supported
    """
    path = Path(filepath)

    # Auto-detect format from extension
    if format is None:
        ext = path.suffix.lower()
        format_map = {
            ".json": "json",
            ".md": "md",
            ".markdown": "md",
            ".txt": "text",
        }
        format = format_map.get(ext, "md")

    if format == "json":
        export_to_json(shopping_list, path, title=title)
    elif format in ("md", "markdown"):
        export_to_markdown(shopping_list, path, title=title)
    elif format in ("text", "txt"):
        export_to_text(shopping_list, path, title=title)
    else:
        raise ValueError(f"Unsupported format: {format}")

    return format
