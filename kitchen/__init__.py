"""Kitchen - recipe text parsing, exact unit arithmetic and shopping lists."""

__version__ = "1.0.0"

from .models import Form, Ingredient, IngredientKey, Recipe, RecipeEntry, Step
from .planner import IngredientAccumulator, MealPlan, ShoppingListItem, build_shopping_list
from .quantity import ArithmeticDomainError, Frac, Quantity, Whole
from .recipe_parser import (
    ParseError,
    ParseIOError,
    ParseSyntaxError,
    parse_categories,
    parse_ingredient,
    parse_measure,
    parse_recipe,
)
from .units import Count, Gram, Measure, UnitConversionError, Volume, VolumeMeasure, VolumeUnit

__all__ = [
    "Quantity",
    "Whole",
    "Frac",
    "ArithmeticDomainError",
    "Measure",
    "Volume",
    "Count",
    "Gram",
    "VolumeMeasure",
    "VolumeUnit",
    "UnitConversionError",
    "Form",
    "Ingredient",
    "IngredientKey",
    "Step",
    "Recipe",
    "RecipeEntry",
    "parse_recipe",
    "parse_ingredient",
    "parse_measure",
    "parse_categories",
    "ParseError",
    "ParseIOError",
    "ParseSyntaxError",
    "IngredientAccumulator",
    "ShoppingListItem",
    "MealPlan",
    "build_shopping_list",
]
