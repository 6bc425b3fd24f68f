"""Tests for the recipe domain model."""

from datetime import timedelta

import pytest

from kitchen.models import (
    Form,
    Ingredient,
    IngredientKey,
    Recipe,
    RecipeEntry,
    Step,
    normalize_ingredient_name,
    singularize,
)
from kitchen.quantity import Whole
from kitchen.recipe_parser import ParseSyntaxError
from kitchen.units import Measure


class TestNormalizeIngredientName:
    """Tests for ingredient name normalization."""

    def test_lowercase_and_whitespace(self):
        assert normalize_ingredient_name("  Red   Onions ") == "red onion"

    def test_only_last_word_singularized(self):
        assert normalize_ingredient_name("eggs whites") == "eggs white"

    @pytest.mark.parametrize(
        ("word", "expected"),
        [
            ("eggs", "egg"),
            ("berries", "berry"),
            ("cherries", "cherry"),
            ("pies", "pie"),
            ("cookies", "cookie"),
            ("brownies", "brownie"),
            ("tomatoes", "tomato"),
            ("leaves", "leaf"),
            ("asparagus", "asparagus"),
            ("molasses", "molasses"),
            ("glass", "glass"),
            ("flour", "flour"),
        ],
    )
    def test_singularize(self, word, expected):
        assert singularize(word) == expected

    def test_empty(self):
        assert normalize_ingredient_name("   ") == ""


class TestForm:
    """Tests for ingredient forms."""

    def test_known_forms_case_insensitive(self):
        assert Form.parse("Chopped") == Form("chopped")
        assert not Form.parse("Chopped").is_custom

    def test_custom_form(self):
        form = Form.parse("finely  diced")
        assert form.text == "finely diced"
        assert form.is_custom


class TestIngredient:
    """Tests for Ingredient."""

    def test_key_ignores_category_and_amount(self):
        a = Ingredient("Onions", Measure.count(2), Form("chopped"), category="Produce")
        b = Ingredient("onion", Measure.count(5), Form("chopped"))
        assert a.key() == b.key() == IngredientKey("onion", "chopped", "Count")

    def test_key_ignores_custom_form_case(self):
        a = Ingredient("flour", Measure.count(1), Form("Sifted"))
        b = Ingredient("flour", Measure.count(1), Form("sifted"))
        assert a.key() == b.key()

    def test_key_includes_measure_kind(self):
        a = Ingredient("egg", Measure.count(2))
        b = Ingredient("egg", Measure.gram(100))
        assert a.key() != b.key()

    def test_with_category_returns_copy(self):
        ing = Ingredient("salt", Measure.volume("tsp", Whole(1)))
        moved = ing.with_category("Pantry")
        assert moved.category == "Pantry"
        assert ing.category == ""

    def test_combine(self):
        a = Ingredient("milk", Measure.volume("cup", Whole(1)))
        b = Ingredient("milk", Measure.volume("cup", Whole(2)))
        assert a.combine(b).amt == Measure.volume("cup", Whole(3))

    def test_str(self):
        ing = Ingredient("butter", Measure.volume("tbsp", Whole(2)), Form("melted"))
        assert str(ing) == "2 tbsps butter (melted)"

    def test_to_dict(self):
        ing = Ingredient("flour", Measure.gram(200), category="Pantry")
        assert ing.to_dict() == {
            "name": "flour",
            "amount": "200 grams",
            "form": None,
            "category": "Pantry",
        }


class TestRecipe:
    """Tests for Recipe and Step."""

    def test_steps_and_ingredients_are_tuples(self):
        step = Step(None, "Mix.", [Ingredient("salt", Measure.count(1))])
        recipe = Recipe("Salt", None, [step])
        assert isinstance(step.ingredients, tuple)
        assert isinstance(recipe.steps, tuple)

    def test_get_ingredients_merges_duplicates(self):
        recipe = Recipe(
            "Cake",
            steps=[
                Step(timedelta(minutes=5), "Mix.", (Ingredient("sugar", Measure.gram(100)),)),
                Step(
                    None,
                    "Top.",
                    (
                        Ingredient("Sugar", Measure.gram(50)),
                        Ingredient("egg", Measure.count(2)),
                    ),
                ),
            ],
        )
        ingredients = recipe.get_ingredients()
        assert list(ingredients) == [
            IngredientKey("egg", "", "Count"),
            IngredientKey("sugar", "", "Weight"),
        ]
        assert ingredients[IngredientKey("sugar", "", "Weight")].amt == Measure.gram(150)


class TestRecipeEntry:
    """Tests for RecipeEntry lazy parsing."""

    def test_recipe_is_parsed_and_cached(self, pancakes_text):
        entry = RecipeEntry("pancakes", pancakes_text)
        assert entry.title == "Pancakes"
        assert entry.recipe is entry.recipe

    def test_invalid_text_raises_on_access(self):
        entry = RecipeEntry("broken", "not a recipe")
        with pytest.raises(ParseSyntaxError):
            entry.recipe
