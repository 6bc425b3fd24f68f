"""Tests for the CLI module."""

import json

import httpx
import pytest
from click.testing import CliRunner

from kitchen.cli import cli


@pytest.fixture
def runner():
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture(autouse=True)
def empty_home(tmp_path, monkeypatch):
    """Point KITCHEN_HOME at an empty directory so no real store is read."""
    home = tmp_path / "empty-home"
    monkeypatch.setenv("KITCHEN_HOME", str(home))
    return home


@pytest.fixture
def pancakes_file(tmp_path, pancakes_text):
    path = tmp_path / "pancakes.txt"
    path.write_text(pancakes_text, encoding="utf-8")
    return path


class TestRecipeCommand:
    """Tests for the recipe command."""

    def test_display(self, runner, pancakes_file):
        result = runner.invoke(cli, ["recipe", str(pancakes_file)])
        assert result.exit_code == 0
        assert "RECIPE: Pancakes" in result.output
        assert "  - 1 1/2 cups flour" in result.output
        assert "Mix and cook." in result.output

    def test_ingredients(self, runner, pancakes_file):
        result = runner.invoke(cli, ["recipe", str(pancakes_file), "--ingredients"])
        assert result.exit_code == 0
        assert result.output.splitlines() == ["1 1/2 cups flour", "1 tsp salt"]

    def test_canonical(self, runner, pancakes_file):
        result = runner.invoke(cli, ["recipe", str(pancakes_file), "--canonical"])
        assert result.exit_code == 0
        assert result.output.startswith("title: Pancakes\n\nFluffy.\n\nstep:\n\n")

    def test_from_url(self, runner, mock_httpx, pancakes_text):
        url = "https://recipes.example.com/pancakes.txt"
        mock_httpx.get(url).mock(return_value=httpx.Response(200, text=pancakes_text))
        result = runner.invoke(cli, ["recipe", url])
        assert result.exit_code == 0
        assert "RECIPE: Pancakes" in result.output

    def test_invalid_recipe(self, runner, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_text("title: Bad\n\nstep:\n\nflour\n", encoding="utf-8")
        result = runner.invoke(cli, ["recipe", str(path)])
        assert result.exit_code == 1
        assert "✗ Failed to parse recipe" in result.output
        assert "line 5" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["recipe", str(tmp_path / "missing.txt")])
        assert result.exit_code == 1
        assert "✗" in result.output


class TestShopCommand:
    """Tests for the shop command."""

    def test_requires_sources_or_menu(self, runner):
        result = runner.invoke(cli, ["shop"])
        assert result.exit_code == 1
        assert "✗ Provide recipe files" in result.output

    def test_repeated_source_is_planned_twice(self, runner, pancakes_file):
        result = runner.invoke(cli, ["shop", str(pancakes_file), str(pancakes_file)])
        assert result.exit_code == 0
        assert "other" in result.output
        assert "  3 cups flour  [pancakes]" in result.output
        assert "  2 tsps salt  [pancakes]" in result.output

    def test_uses_store_categories_and_staples(self, runner, kitchen_home):
        pancakes = kitchen_home / "recipes" / "pancakes.txt"
        result = runner.invoke(cli, ["shop", str(pancakes), "--home", str(kitchen_home)])
        assert result.exit_code == 0
        assert "Pantry" in result.output
        assert "  1 1/2 cups flour  [pancakes]" in result.output
        assert "  1 gal milk  [staples]" in result.output

    def test_menu(self, runner, kitchen_home):
        result = runner.invoke(cli, ["shop", "--menu", "--home", str(kitchen_home)])
        assert result.exit_code == 0
        assert "  3 cups flour  [pancakes]" in result.output
        assert "  500 grams ground beef  [chili]" in result.output

    def test_categories_file_option(self, runner, pancakes_file, tmp_path):
        categories = tmp_path / "cats.txt"
        categories.write_text("Baking: flour|salt\n", encoding="utf-8")
        result = runner.invoke(cli, ["shop", str(pancakes_file), "--categories", str(categories)])
        assert result.exit_code == 0
        assert result.output.startswith("Baking\n")

    def test_export(self, runner, pancakes_file, tmp_path):
        output = tmp_path / "list.json"
        result = runner.invoke(cli, ["shop", str(pancakes_file), "--output", str(output)])
        assert result.exit_code == 0
        assert "✓ Exported to" in result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["summary"]["total_items"] == 2

    def test_invalid_recipe(self, runner, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_text("not a recipe", encoding="utf-8")
        result = runner.invoke(cli, ["shop", str(path)])
        assert result.exit_code == 1
        assert "✗" in result.output


class TestCategoriesCommand:
    """Tests for the categories command."""

    def test_valid(self, runner, tmp_path, categories_text):
        path = tmp_path / "categories.txt"
        path.write_text(categories_text, encoding="utf-8")
        result = runner.invoke(cli, ["categories", str(path)])
        assert result.exit_code == 0
        assert "Dairy: butter, milk" in result.output
        assert "✓ 7 ingredients in 3 categories" in result.output

    def test_invalid(self, runner, tmp_path):
        path = tmp_path / "categories.txt"
        path.write_text("Dairy:\n", encoding="utf-8")
        result = runner.invoke(cli, ["categories", str(path)])
        assert result.exit_code == 1
        assert "✗ Invalid category file" in result.output


class TestConvertCommand:
    """Tests for the convert command."""

    def test_convert(self, runner):
        result = runner.invoke(cli, ["convert", "3 tsp", "tbsp"])
        assert result.exit_code == 0
        assert result.output.strip() == "1 tbsp"

    def test_normalize(self, runner):
        result = runner.invoke(cli, ["convert", "48 tsp"])
        assert result.exit_code == 0
        assert result.output.strip() == "1 cup"

    def test_kilograms(self, runner):
        result = runner.invoke(cli, ["convert", "2 kg"])
        assert result.output.strip() == "2000 grams"

    def test_cross_kind(self, runner):
        result = runner.invoke(cli, ["convert", "1 cup", "grams"])
        assert result.exit_code == 1
        assert "✗ Cannot convert" in result.output

    def test_invalid_measure(self, runner):
        result = runner.invoke(cli, ["convert", "a pinch"])
        assert result.exit_code == 1


def test_invalid_log_level(runner, monkeypatch):
    monkeypatch.setenv("KITCHEN_LOG_LEVEL", "loud")
    result = runner.invoke(cli, ["convert", "3 tsp", "tbsp"])
    assert result.exit_code == 1
    assert "✗ KITCHEN_LOG_LEVEL must be a log level name" in result.output


def test_invalid_http_timeout(runner, monkeypatch, mock_httpx):
    monkeypatch.setenv("KITCHEN_HTTP_TIMEOUT", "soon")
    result = runner.invoke(cli, ["recipe", "https://recipes.example.com/pancakes.txt"])
    assert result.exit_code == 1
    assert "✗ Failed to parse recipe: KITCHEN_HTTP_TIMEOUT" in result.output


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "kitchen" in result.output
