"""Recipe text parsing module.

Recipes are plain text::

    title: Pancakes

    Fluffy.

    step: 10 min

    1 1/2 cup flour
    2 eggs (whole)

    Mix and cook.

A title line, an optional description, then one or more steps. Each step
has an optional duration, a list of ingredient lines (a measure followed by
a name and an optional form in parentheses) and free-text instructions.
"""

import logging
import re
from datetime import timedelta

from .grammar import (
    Complete,
    Cursor,
    ParseAbort,
    Result,
    either,
    eoi,
    must,
    optional,
    pattern,
    peek,
    peek_not,
    repeat,
    run,
    separated,
    sequence,
    text_token,
    transform,
    until,
)
from .models import Form, Ingredient, Recipe, Step, normalize_ingredient_name
from .quantity import Frac, Quantity, Whole
from .units import UNIT_ALIASES, Measure, UnitConversionError, measure_from_unit

logger = logging.getLogger(__name__)


class ParseError(Exception):
    """Base class for recipe parsing errors."""

    pass


class ParseIOError(ParseError):
    """Raised when raw recipe text cannot be read."""

    pass


class ParseSyntaxError(ParseError):
    """Raised when text does not follow the recipe grammar."""

    def __init__(self, message: str, line: int = 1, column: int = 1, fragment: str = ""):
        self.message = message
        self.line = line
        self.column = column
        self.fragment = fragment
        super().__init__(str(self))

    def __str__(self) -> str:
        text = f"{self.message} (line {self.line}, column {self.column})"
        if self.fragment:
            text += f": '{self.fragment}'"
        return text


# Seconds per duration unit
DURATION_UNITS = {
    "ms": timedelta(milliseconds=1),
    "s": timedelta(seconds=1),
    "sec": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "min": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "hr": timedelta(hours=1),
    "hrs": timedelta(hours=1),
}

# Longest alias first so "tbsp" is never read as "tbs" + "p"
UNIT_PATTERN = re.compile(
    r"({})(?=[ \t\n]|\Z)[ \t]*".format(
        "|".join(re.escape(unit) for unit in sorted(UNIT_ALIASES, key=len, reverse=True))
    ),
    re.IGNORECASE,
)

# Basic tokens
ws = pattern(r"[ \t]+", "whitespace")
newline = text_token("\n")
line_end = pattern(r"(?=\n|\Z)", "end of line")
blank_line = pattern(r"[ \t]*(?:\n|\Z)", "blank line")
blank_lines = pattern(r"(?:[ \t]*\n)+", "blank lines")
paragraph_break = pattern(r"\n[ \t]*\n(?:[ \t]*\n)*", "blank line")
end_of_text = pattern(r"\s*\Z", "end of text")
number = transform(pattern(r"\d+", "a number"), int)
step_marker = text_token("step:")

# Free text runs until the next step or the end of the recipe
text_end = either(sequence(paragraph_break, peek(step_marker)), end_of_text)
description = transform(until(text_end), str.strip)


def ratio(cursor: Cursor) -> Result:
    """A fraction like ``1/2``. A zero denominator is a committed error."""
    result = pattern(r"(\d+)/(\d+)", "a fraction")(cursor)
    if not isinstance(result, Complete):
        return result
    numer, denom = (int(part) for part in result.value)
    if denom == 0:
        raise ParseAbort(cursor, "Fraction with a zero denominator")
    return Complete(result.cursor, Quantity.frac(0, numer, denom))


quantity = either(
    transform(sequence(number, ws, ratio), lambda v: Frac(v[0] + v[2].as_fraction())),
    ratio,
    transform(number, Whole),
)

unit_token = transform(pattern(UNIT_PATTERN, "a unit"), lambda groups: groups[0])


def measure(cursor: Cursor) -> Result:
    """A quantity with an optional unit. Without a unit the measure is a count."""
    result = sequence(
        quantity,
        either(transform(sequence(ws, optional(unit_token)), lambda v: v[1]), line_end),
    )(cursor)
    if not isinstance(result, Complete):
        return result
    qty, unit = result.value
    try:
        amt = measure_from_unit(unit or None, qty)
    except UnitConversionError as e:
        raise ParseAbort(cursor, str(e)) from e
    return Complete(result.cursor, amt)


name = transform(
    pattern(r"[ \t]*([^\s(][^\n(]*)", "an ingredient name"),
    lambda groups: " ".join(groups[0].split()),
)

modifier = transform(
    sequence(
        text_token("("),
        must(
            sequence(until(either(text_token(")"), newline, eoi)), text_token(")")),
            "Unterminated ingredient form, expected ')'",
        ),
    ),
    lambda v: v[1][0],
)


def _build_ingredient(values: tuple) -> Ingredient:
    _, amt, ingredient_name, form_text, _, _ = values
    form = Form.parse(form_text) if form_text and form_text.strip() else None
    return Ingredient(ingredient_name, amt, form)


ingredient = transform(
    sequence(
        optional(ws),
        measure,
        must(name, "Missing ingredient name"),
        optional(modifier),
        optional(ws),
        must(line_end, "Unexpected text after ingredient"),
    ),
    _build_ingredient,
)

# Every non-blank line after an ingredient must be another ingredient
next_ingredient = transform(
    sequence(newline, peek_not(blank_line), must(ingredient, "Invalid ingredient line")),
    lambda v: v[2],
)

ingredient_list = transform(
    sequence(ingredient, repeat(next_ingredient)),
    lambda v: (v[0], *v[1]),
)


def _to_duration(groups: tuple[str, str]) -> timedelta:
    amount, unit = groups
    return int(amount) * DURATION_UNITS[unit]


duration = transform(
    pattern(r"(\d+)[ \t]*(ms|sec|s|min|m|hrs|hr|h)\b", "a duration"),
    _to_duration,
)

step_header = transform(
    sequence(
        step_marker,
        must(
            sequence(
                optional(transform(sequence(ws, duration), lambda v: v[1])),
                optional(ws),
                paragraph_break,
            ),
            "Invalid step header, expected 'step:' with an optional duration and a blank line",
        ),
    ),
    lambda v: v[1][0],
)

instructions = either(
    transform(sequence(paragraph_break, peek_not(step_marker), description), lambda v: v[2]),
    transform(sequence(optional(blank_lines), either(peek(step_marker), end_of_text)), lambda _: ""),
)

step = transform(
    sequence(
        step_header,
        must(ingredient_list, "Missing ingredient list"),
        instructions,
        optional(blank_lines),
    ),
    lambda v: Step(prep_time=v[0], instructions=v[2], ingredients=v[1]),
)

title = transform(
    sequence(
        text_token("title:"),
        optional(ws),
        pattern(r"[^\n]*", "a title"),
        either(newline, eoi),
    ),
    lambda v: v[2].strip(),
)


def _build_recipe(values: tuple) -> Recipe:
    recipe_title, _, desc, _, first, rest, _ = values
    return Recipe(
        title=recipe_title,
        desc=desc[1] if desc and desc[1] else None,
        steps=(first, *rest),
    )


recipe = transform(
    sequence(
        must(title, "Missing recipe title, expected 'title: ...'"),
        optional(blank_lines),
        optional(sequence(peek_not(step_marker), description)),
        optional(blank_lines),
        must(step, "Missing recipe steps, expected 'step:'"),
        repeat(step),
        must(end_of_text, "Unexpected content after the last step"),
    ),
    _build_recipe,
)

# Category file lines: "Category: ingredient one|ingredient two"
category_item = transform(
    pattern(r"[ \t]*([^|\n]*[^|\s])[ \t]*", "an ingredient name"),
    lambda groups: groups[0],
)

category_line = transform(
    sequence(
        pattern(r"[ \t]*([^:\n]*[^:\s])[ \t]*:", "a category name"),
        must(separated(category_item, text_token("|")), "Missing ingredients for category"),
        must(line_end, "Unexpected text in category line"),
    ),
    lambda v: (v[0][0], v[1]),
)

categories = transform(
    sequence(
        optional(blank_lines),
        repeat(transform(sequence(category_line, optional(blank_lines)), lambda v: v[0])),
        must(end_of_text, "Invalid category line, expected 'Category: ingredient|ingredient'"),
    ),
    lambda v: v[1],
)


def _syntax_error(abort: ParseAbort) -> ParseSyntaxError:
    line, column = abort.cursor.line_col()
    return ParseSyntaxError(abort.message, line, column, abort.cursor.fragment())


def _prepare(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def parse_recipe(text: str) -> Recipe:
    """
    Parse recipe text into a Recipe.

    Args:
        text: Recipe text in the grammar described in this module

    Returns:
        Parsed recipe

    Raises:
        ParseSyntaxError: If the text is not a valid recipe
    """
    try:
        parsed = run(recipe, _prepare(text))
    except ParseAbort as e:
        error = _syntax_error(e)
        logger.debug("Recipe parse failed: %s", error)
        raise error from e
    logger.debug("Parsed recipe %r with %d step(s)", parsed.title, len(parsed.steps))
    return parsed


def parse_ingredient(line: str) -> Ingredient:
    """
    Parse a single ingredient line, e.g. "2 cups flour (sifted)".

    Raises:
        ParseSyntaxError: If the line is not a valid ingredient
    """
    try:
        return run(
            transform(sequence(must(ingredient, "Invalid ingredient line"), end_of_text), lambda v: v[0]),
            _prepare(line).strip("\n"),
        )
    except ParseAbort as e:
        raise _syntax_error(e) from e


def parse_measure(text: str) -> Measure:
    """
    Parse the display form of a measure, e.g. "1 1/2 cups", "2 ml" or "3".

    Raises:
        ParseSyntaxError: If the text is not a valid measure
    """
    try:
        return run(
            transform(
                sequence(must(measure, "Invalid measure"), must(end_of_text, "Unexpected text after measure")),
                lambda v: v[0],
            ),
            text.strip(),
        )
    except ParseAbort as e:
        raise _syntax_error(e) from e


def parse_categories(text: str) -> dict[str, str]:
    """
    Parse a category file into a mapping of ingredient name to category.

    Each line names a category and the ingredients in it::

        Dairy: milk|butter|cheddar cheese
        Produce: onion|garlic

    Keys are normalized ingredient names. An ingredient listed under several
    categories ends up in the last one.

    Raises:
        ParseSyntaxError: If a line is malformed
    """
    try:
        lines = run(categories, _prepare(text))
    except ParseAbort as e:
        raise _syntax_error(e) from e

    mapping: dict[str, str] = {}
    for category, items in lines:
        for item in items:
            key = normalize_ingredient_name(item)
            if key in mapping and mapping[key] != category:
                logger.debug("Ingredient %r moved from %r to %r", key, mapping[key], category)
            mapping[key] = category
    return mapping
