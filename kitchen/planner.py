"""Meal planning: consolidate ingredients from several recipes into a shopping list."""

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import date

from .models import Form, Ingredient, IngredientKey, Recipe, RecipeEntry, normalize_ingredient_name

logger = logging.getLogger(__name__)

OTHER_CATEGORY = "other"
STAPLES_ID = "staples"


@dataclass(frozen=True)
class ShoppingListItem:
    """A consolidated ingredient and the ids of the recipes that need it."""

    ingredient: Ingredient
    recipes: frozenset[str]

    def __str__(self) -> str:
        return str(self.ingredient)


@dataclass
class _Entry:
    ingredient: Ingredient
    recipes: set[str] = field(default_factory=set)
    categories: set[str] = field(default_factory=set)


class IngredientAccumulator:
    """
    Merges ingredient mentions across recipes.

    Mentions with the same ``IngredientKey`` are summed. The key includes the
    measure kind, so "2 eggs" and "100 grams egg" stay separate rows instead
    of failing to add up. Every row remembers which recipes contributed to it.
    """

    def __init__(self) -> None:
        self._entries: dict[IngredientKey, _Entry] = {}

    def accumulate_from(self, recipe: Recipe, recipe_id: str) -> None:
        """Add every ingredient of every step of ``recipe``."""
        for ingredient in recipe.iter_ingredients():
            key = ingredient.key()
            entry = self._entries.get(key)
            if entry is None:
                # Display under the normalized name so input order never matters
                form = Form(key.form) if ingredient.form else None
                entry = _Entry(replace(ingredient, name=key.name, form=form, category=""))
                self._entries[key] = entry
            else:
                entry.ingredient = entry.ingredient.combine(ingredient)
            entry.recipes.add(recipe_id)
            if ingredient.category:
                entry.categories.add(ingredient.category)
        logger.debug("Accumulated %r as %s, %d distinct ingredients", recipe.title, recipe_id, len(self))

    def ingredients(self) -> dict[IngredientKey, tuple[Ingredient, frozenset[str]]]:
        """
        Accumulated ingredients ordered by key.

        An ingredient carries its own category if any recipe gave it one. When
        recipes disagree the alphabetically first category is used.
        """
        result = {}
        for key in sorted(self._entries):
            entry = self._entries[key]
            ingredient = entry.ingredient
            if entry.categories:
                ingredient = ingredient.with_category(min(entry.categories))
            result[key] = (ingredient, frozenset(entry.recipes))
        return result

    def __len__(self) -> int:
        return len(self._entries)


def build_shopping_list(
    plan_entries: Iterable[tuple[str, Recipe, int]],
    categories: Mapping[str, str] | None = None,
    staples: Recipe | None = None,
) -> dict[str, list[ShoppingListItem]]:
    """
    Build a shopping list grouped by category.

    Args:
        plan_entries: (recipe id, recipe, count) triples. Each recipe is
                      accumulated ``count`` times, a count of 0 skips it
        categories: Optional ingredient name -> category overrides
        staples: Optional recipe of staples, added once under the id "staples"

    Returns:
        Mapping of category to shopping list rows. Categories are sorted and
        rows are sorted by ingredient, so the same inputs in any order give
        the same list. Uncategorized ingredients go under "other".

    Raises:
        ValueError: If a count is negative
        ArithmeticDomainError: If two measures of one ingredient cannot be added
    """
    accumulator = IngredientAccumulator()
    for recipe_id, recipe, count in plan_entries:
        if count < 0:
            raise ValueError(f"Recipe count for '{recipe_id}' cannot be negative: {count}")
        for _ in range(count):
            accumulator.accumulate_from(recipe, recipe_id)
    if staples is not None:
        accumulator.accumulate_from(staples, STAPLES_ID)

    overrides = {normalize_ingredient_name(name): cat for name, cat in (categories or {}).items()}

    grouped: dict[str, list[ShoppingListItem]] = defaultdict(list)
    for key, (ingredient, recipe_ids) in accumulator.ingredients().items():
        category = overrides.get(key.name) or ingredient.category or OTHER_CATEGORY
        grouped[category].append(ShoppingListItem(ingredient.with_category(category), recipe_ids))

    return {
        category: sorted(grouped[category], key=lambda item: item.ingredient.key())
        for category in sorted(grouped)
    }


@dataclass
class MealPlan:
    """A meal plan: recipes to cook, how many times each, and when the plan starts."""

    start_date: date | None = None
    entries: dict[str, tuple[RecipeEntry, int]] = field(default_factory=dict)

    def add(self, entry: RecipeEntry, count: int = 1) -> None:
        """Plan ``entry`` ``count`` more times."""
        if count < 0:
            raise ValueError(f"Recipe count cannot be negative: {count}")
        _, current = self.entries.get(entry.id, (entry, 0))
        self.entries[entry.id] = (entry, current + count)

    def remove(self, recipe_id: str) -> None:
        self.entries.pop(recipe_id, None)

    @property
    def counts(self) -> dict[str, int]:
        return {recipe_id: count for recipe_id, (_, count) in self.entries.items()}

    @property
    def recipe_count(self) -> int:
        return sum(self.counts.values())

    def shopping_list(
        self,
        categories: Mapping[str, str] | None = None,
        staples: Recipe | None = None,
    ) -> dict[str, list[ShoppingListItem]]:
        """
        Build the shopping list for every planned recipe.

        Raises:
            ParseSyntaxError: If a planned recipe's text does not parse
        """
        return build_shopping_list(
            ((recipe_id, entry.recipe, count) for recipe_id, (entry, count) in self.entries.items()),
            categories=categories,
            staples=staples,
        )
