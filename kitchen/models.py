"""Recipe domain model: ingredients, steps, recipes and stored recipe entries."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import timedelta
from functools import cached_property
from typing import Any, NamedTuple

from .units import Measure

KNOWN_FORMS = ("whole", "chopped", "minced", "sliced", "ground")

# Words whose last letter "s" is not a plural
UNCOUNTABLE_WORDS = {
    "asparagus",
    "couscous",
    "hummus",
    "molasses",
    "swiss",
    "grits",
    "series",
    "species",
    "mass",
    "glass",
    "bass",
}

# Irregular plural -> singular mappings
IRREGULAR_PLURALS = {
    "leaves": "leaf",
    "loaves": "loaf",
    "halves": "half",
    "knives": "knife",
    "tomatoes": "tomato",
    "potatoes": "potato",
    "mangoes": "mango",
    "cloves": "clove",
    "olives": "olive",
    "chives": "chive",
    "anchovies": "anchovy",
    "radishes": "radish",
    "peaches": "peach",
    "dishes": "dish",
    "sandwiches": "sandwich",
}

# Plurals of words whose singular ends in "ie"
IE_PLURALS = {
    "cookies",
    "brownies",
    "smoothies",
    "veggies",
    "calories",
    "hoagies",
}


def singularize(word: str) -> str:
    """Best-effort singular form of an English word."""
    if word in IRREGULAR_PLURALS:
        return IRREGULAR_PLURALS[word]
    if word in UNCOUNTABLE_WORDS or len(word) < 3:
        return word
    if word.endswith("ies"):
        if word in IE_PLURALS or len(word) == 4:  # pies, ties
            return word[:-1]
        return word[:-3] + "y"
    if word.endswith(("ss", "us", "is")):
        return word
    if word.endswith("s"):
        return word[:-1]
    return word


def normalize_ingredient_name(name: str) -> str:
    """
    Normalize ingredient name for grouping.

    Lowercases, collapses whitespace and singularizes the last word, so
    "Red  Onions" and "red onion" are the same ingredient.
    """
    words = re.sub(r"\s+", " ", name.strip().lower()).split(" ")
    if not words[-1]:
        return ""
    words[-1] = singularize(words[-1])
    return " ".join(words)


@dataclass(frozen=True)
class Form:
    """How an ingredient is prepared: whole, chopped, minced, sliced, ground or custom."""

    text: str

    @classmethod
    def parse(cls, text: str) -> Form:
        text = re.sub(r"\s+", " ", text.strip())
        if text.lower() in KNOWN_FORMS:
            return cls(text.lower())
        return cls(text)

    @property
    def is_custom(self) -> bool:
        return self.text not in KNOWN_FORMS

    def __str__(self) -> str:
        return self.text


class IngredientKey(NamedTuple):
    """Identity used to merge ingredient mentions: normalized name, form and measure kind."""

    name: str
    form: str
    kind: str


@dataclass(frozen=True)
class Ingredient:
    """Represents a parsed ingredient."""

    name: str
    amt: Measure
    form: Form | None = None
    category: str = ""  # empty means uncategorized

    def key(self) -> IngredientKey:
        """Unique identifier for merging this ingredient with its duplicates."""
        return IngredientKey(
            normalize_ingredient_name(self.name),
            self.form.text.casefold() if self.form else "",
            self.amt.kind,
        )

    def with_amount(self, amt: Measure) -> Ingredient:
        return replace(self, amt=amt)

    def with_category(self, category: str) -> Ingredient:
        return replace(self, category=category)

    def combine(self, other: Ingredient) -> Ingredient:
        """
        Add another mention of the same ingredient to this one.

        Raises:
            ArithmeticDomainError: If the two amounts are different kinds of measure
        """
        return self.with_amount(self.amt + other.amt)

    def to_dict(self) -> dict[str, Any]:
        """Convert ingredient to dictionary for serialization."""
        return {
            "name": self.name,
            "amount": str(self.amt),
            "form": self.form.text if self.form else None,
            "category": self.category,
        }

    def __str__(self) -> str:
        text = f"{self.amt} {self.name}"
        if self.form:
            text += f" ({self.form})"
        return text


@dataclass(frozen=True)
class Step:
    """A recipe step: optional prep time, instructions and the ingredients it uses."""

    prep_time: timedelta | None
    instructions: str
    ingredients: tuple[Ingredient, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "ingredients", tuple(self.ingredients))


@dataclass(frozen=True)
class Recipe:
    """A recipe with a title, an optional description and a series of steps."""

    title: str
    desc: str | None = None
    steps: tuple[Step, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "steps", tuple(self.steps))

    def iter_ingredients(self) -> Iterable[Ingredient]:
        for step in self.steps:
            yield from step.ingredients

    def get_ingredients(self) -> dict[IngredientKey, Ingredient]:
        """Entire ingredient list of the recipe with duplicate ingredients added together."""
        merged: dict[IngredientKey, Ingredient] = {}
        for ingredient in self.iter_ingredients():
            key = ingredient.key()
            if key in merged:
                merged[key] = merged[key].combine(ingredient)
            else:
                merged[key] = ingredient
        return dict(sorted(merged.items()))


@dataclass
class RecipeEntry:
    """
    A stored recipe: an id and its raw text.

    The parsed recipe is derived from the text on first access and cached.
    The text stays the source of truth.
    """

    id: str
    text: str

    @cached_property
    def recipe(self) -> Recipe:
        """
        The parsed recipe.

        Raises:
            ParseSyntaxError: If the text is not a valid recipe
        """
        from .recipe_parser import parse_recipe

        return parse_recipe(self.text)

    @property
    def title(self) -> str:
        return self.recipe.title
