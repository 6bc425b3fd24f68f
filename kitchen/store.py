"""Reading raw recipe text from files, URLs and a recipe directory."""

import logging
from pathlib import Path

import httpx

from .config import CATEGORIES_FILE, MENU_FILE, RECIPES_DIR, STAPLES_FILE, get_http_timeout
from .models import Recipe, RecipeEntry
from .planner import MealPlan
from .recipe_parser import ParseIOError, ParseSyntaxError, parse_categories, parse_recipe

logger = logging.getLogger(__name__)


class RecipeNotFoundError(LookupError):
    """Raised when a recipe id is not in the store."""

    pass


def is_url(source: str | Path) -> bool:
    return isinstance(source, str) and source.startswith(("http://", "https://"))


def fetch_text(url: str, timeout: float | None = None) -> str:
    """
    Fetch recipe text from a URL.

    Raises:
        ParseIOError: If the request fails or returns an error status
    """
    try:
        response = httpx.get(
            url,
            follow_redirects=True,
            timeout=timeout if timeout is not None else get_http_timeout(),
        )
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise ParseIOError(f"Failed to fetch {url}: {e}") from e
    return response.text


def read_text(source: str | Path) -> str:
    """
    Read raw text from a file path or an http(s) URL.

    Raises:
        ParseIOError: If the text cannot be read
    """
    if is_url(source):
        return fetch_text(str(source))

    path = Path(source)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseIOError(f"Failed to read {path}: {e}") from e


def load_recipe(source: str | Path) -> Recipe:
    """
    Read and parse a recipe from a file path or URL.

    Raises:
        ParseIOError: If the text cannot be read
        ParseSyntaxError: If the text is not a valid recipe
    """
    return parse_recipe(read_text(source))


def parse_menu(text: str) -> list[tuple[str, int]]:
    """
    Parse a menu: one recipe id per line, optionally followed by a count.

    ::

        # this week
        pancakes: 2
        chili

    Blank lines and text after "#" are ignored. A recipe without a count is
    planned once.

    Raises:
        ParseSyntaxError: If a count is not a non-negative whole number
    """
    menu: list[tuple[str, int]] = []
    for line_number, raw_line in enumerate(text.splitlines(), 1):
        line = raw_line.split("#", 1)[0].strip()
        if not line:
            continue

        recipe_id, sep, count_text = line.partition(":")
        recipe_id = recipe_id.strip()
        count_text = count_text.strip()
        if not recipe_id:
            raise ParseSyntaxError("Missing recipe id", line_number, 1, raw_line.strip())
        if not sep:
            menu.append((recipe_id, 1))
            continue
        if not count_text.isdigit():
            raise ParseSyntaxError(
                "Recipe count must be a whole number",
                line_number,
                raw_line.index(":") + 2,
                raw_line.strip(),
            )
        menu.append((recipe_id, int(count_text)))
    return menu


class RecipeStore:
    """
    A directory of recipes and shopping list settings.

    Layout::

        <root>/recipes/<id>.txt   one recipe per file, id is the file stem
        <root>/categories.txt     ingredient categories
        <root>/staples.txt        staples recipe, added to every shopping list
        <root>/menu.txt           recipes to plan
    """

    def __init__(self, root: str | Path):
        self.root = Path(root)

    @property
    def recipes_dir(self) -> Path:
        return self.root / RECIPES_DIR

    def _read_optional(self, name: str) -> str | None:
        path = self.root / name
        if not path.exists():
            return None
        return read_text(path)

    def get_recipes(self) -> list[RecipeEntry]:
        """All stored recipe entries, sorted by id. Unreadable files are skipped."""
        if not self.recipes_dir.is_dir():
            return []

        entries = []
        for path in sorted(self.recipes_dir.iterdir()):
            if not path.is_file() or path.name.startswith(".") or path.name == MENU_FILE:
                continue
            try:
                entries.append(RecipeEntry(path.stem, read_text(path)))
            except ParseIOError as e:
                logger.warning("Skipping recipe file %s: %s", path, e)
        return entries

    def get_recipe(self, recipe_id: str) -> RecipeEntry:
        """
        Get a stored recipe by id.

        Raises:
            RecipeNotFoundError: If there is no recipe with that id
        """
        for entry in self.get_recipes():
            if entry.id == recipe_id:
                return entry
        raise RecipeNotFoundError(f"No recipe '{recipe_id}' in {self.recipes_dir}")

    def get_categories(self) -> dict[str, str]:
        """Ingredient name -> category mapping. Empty when there is no category file."""
        text = self._read_optional(CATEGORIES_FILE)
        if text is None:
            return {}
        return parse_categories(text)

    def get_staples(self) -> Recipe | None:
        text = self._read_optional(STAPLES_FILE)
        if text is None:
            return None
        return parse_recipe(text)

    def get_menu(self) -> list[tuple[str, int]]:
        text = self._read_optional(MENU_FILE)
        if text is None:
            return []
        return parse_menu(text)

    def get_meal_plan(self) -> MealPlan:
        """
        The meal plan described by the menu file.

        Raises:
            RecipeNotFoundError: If the menu names an unknown recipe
        """
        recipes = {entry.id: entry for entry in self.get_recipes()}
        plan = MealPlan()
        for recipe_id, count in self.get_menu():
            if recipe_id not in recipes:
                raise RecipeNotFoundError(f"Menu recipe '{recipe_id}' not found in {self.recipes_dir}")
            plan.add(recipes[recipe_id], count)
        return plan
