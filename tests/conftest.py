"""Shared fixtures for kitchen tests."""

import pytest
import respx

PANCAKES = """title: Pancakes

Fluffy.

step:

1 1/2 cup flour
1 tsp salt

Mix and cook.
"""

WAFFLES = """title: Waffles

step: 5 min

1 cup flour
2 eggs
1 cup milk

Whisk everything together.

step: 10 min

1 tbsp butter (melted)

Brush the iron and bake.
"""

CHILI = """title: Chili

A slow weeknight chili.

It gets better the next day.

step: 1 hr

500 g ground beef
2 onions (chopped)
1 tbsp cumin
2 cups beans

Brown the beef with the onions.

Add everything else and simmer.
"""

STAPLES = """title: Staples

step:

1 gal milk
12 eggs
"""

CATEGORIES = """Dairy: milk|butter
Produce: onion|garlic
Pantry: flour|salt|cumin
"""


@pytest.fixture
def mock_httpx():
    """Activate respx mock for HTTP requests."""
    with respx.mock(assert_all_called=False) as respx_mock:
        yield respx_mock


@pytest.fixture
def pancakes_text():
    return PANCAKES


@pytest.fixture
def waffles_text():
    return WAFFLES


@pytest.fixture
def chili_text():
    return CHILI


@pytest.fixture
def categories_text():
    return CATEGORIES


@pytest.fixture
def staples_text():
    return STAPLES


@pytest.fixture
def kitchen_home(tmp_path):
    """A recipe store directory with a few recipes, categories, staples and a menu."""
    recipes = tmp_path / "recipes"
    recipes.mkdir()
    (recipes / "pancakes.txt").write_text(PANCAKES, encoding="utf-8")
    (recipes / "waffles.txt").write_text(WAFFLES, encoding="utf-8")
    (recipes / "chili.txt").write_text(CHILI, encoding="utf-8")
    (tmp_path / "categories.txt").write_text(CATEGORIES, encoding="utf-8")
    (tmp_path / "staples.txt").write_text(STAPLES, encoding="utf-8")
    (tmp_path / "menu.txt").write_text("# this week\npancakes: 2\nchili\n", encoding="utf-8")
    return tmp_path
