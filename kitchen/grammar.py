"""
Small parser combinator library used by the recipe grammar.

A parser is a callable taking a ``Cursor`` and returning one of three
results:

- ``Complete``: the parser matched and produced a value.
- ``Fail``: this alternative did not match. Ordered choice (``either``)
  recovers from it and tries the next alternative.
- ``Incomplete``: input ended before the parser could decide.

A committed abort is different: once a rule has consumed a distinguishing
prefix, ``must()`` turns any further failure into a raised ``ParseAbort``
that skips every remaining alternative. Only the public parse functions
catch it.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, cast

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Cursor:
    """A position in a fully buffered input text."""

    text: str
    pos: int = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def rest(self) -> str:
        return self.text[self.pos :]

    def advance(self, n: int) -> Cursor:
        return Cursor(self.text, self.pos + n)

    def line_col(self) -> tuple[int, int]:
        """1-based line and column of this position."""
        before = self.text[: self.pos]
        line = before.count("\n") + 1
        column = self.pos - (before.rfind("\n") + 1) + 1
        return line, column

    def fragment(self, width: int = 30) -> str:
        """The rest of the current line, cut to ``width`` characters."""
        end = self.text.find("\n", self.pos)
        line = self.text[self.pos : end if end != -1 else len(self.text)]
        if len(line) > width:
            return line[:width] + "..."
        return line


@dataclass(frozen=True)
class Complete(Generic[T]):
    cursor: Cursor
    value: T


@dataclass(frozen=True)
class Fail:
    cursor: Cursor
    message: str


@dataclass(frozen=True)
class Incomplete:
    cursor: Cursor


Result = Complete[Any] | Fail | Incomplete
Parser = Callable[[Cursor], Result]


class ParseAbort(Exception):
    """A committed parse failure. Carries the position and a readable message."""

    def __init__(self, cursor: Cursor, message: str):
        self.cursor = cursor
        self.message = message
        super().__init__(message)


def text_token(token: str) -> Parser:
    """Match ``token`` literally."""

    def parse(cursor: Cursor) -> Result:
        if cursor.text.startswith(token, cursor.pos):
            return Complete(cursor.advance(len(token)), token)
        remaining = len(cursor.text) - cursor.pos
        if remaining < len(token) and token.startswith(cursor.text[cursor.pos :]):
            return Incomplete(cursor)
        return Fail(cursor, f"Expected '{token}'")

    return parse


def pattern(regex: str | re.Pattern[str], expected: str | None = None, flags: int = 0) -> Parser:
    """
    Match a regular expression at the cursor.

    The value is the matched text, or the tuple of groups if the pattern
    has any.
    """
    compiled = re.compile(regex, flags) if isinstance(regex, str) else regex
    label = expected or compiled.pattern

    def parse(cursor: Cursor) -> Result:
        match = compiled.match(cursor.text, cursor.pos)
        if match is None:
            if cursor.at_end():
                return Incomplete(cursor)
            return Fail(cursor, f"Expected {label}")
        value = match.groups() if compiled.groups else match.group(0)
        return Complete(cursor.advance(match.end() - cursor.pos), value)

    return parse


def eoi(cursor: Cursor) -> Result:
    """Match the end of input."""
    if cursor.at_end():
        return Complete(cursor, None)
    return Fail(cursor, "Expected end of input")


def sequence(*parsers: Parser) -> Parser:
    """Run parsers one after another. The value is the tuple of their values."""

    def parse(cursor: Cursor) -> Result:
        values = []
        current = cursor
        for parser in parsers:
            result = parser(current)
            if not isinstance(result, Complete):
                return result
            values.append(result.value)
            current = result.cursor
        return Complete(current, tuple(values))

    return parse


def either(*parsers: Parser) -> Parser:
    """
    Ordered choice: the first alternative that completes wins.

    If none completes, the result is ``Incomplete`` when any alternative ran
    out of input, otherwise the failure that got furthest.
    """

    def parse(cursor: Cursor) -> Result:
        failure: Fail | None = None
        incomplete: Incomplete | None = None
        for parser in parsers:
            result = parser(cursor)
            if isinstance(result, Complete):
                return result
            if isinstance(result, Incomplete):
                incomplete = incomplete or result
            elif failure is None or result.cursor.pos > failure.cursor.pos:
                failure = result
        if incomplete is not None:
            return incomplete
        return cast(Fail, failure)

    return parse


def optional(parser: Parser) -> Parser:
    """Match ``parser`` or nothing. The value is None when nothing matched."""

    def parse(cursor: Cursor) -> Result:
        result = parser(cursor)
        if isinstance(result, Complete):
            return result
        return Complete(cursor, None)

    return parse


def repeat(parser: Parser, min_count: int = 0) -> Parser:
    """Match ``parser`` as many times as possible. The value is a list."""

    def parse(cursor: Cursor) -> Result:
        values = []
        current = cursor
        while True:
            result = parser(current)
            if not isinstance(result, Complete):
                if len(values) < min_count:
                    return result
                return Complete(current, values)
            values.append(result.value)
            if result.cursor.pos == current.pos:
                # Zero width match, stop before looping forever
                return Complete(current, values)
            current = result.cursor

    return parse


def separated(item: Parser, separator: Parser) -> Parser:
    """One or more ``item`` separated by ``separator``. The value is a list of items."""

    def parse(cursor: Cursor) -> Result:
        first = item(cursor)
        if not isinstance(first, Complete):
            return first
        # repeat with no minimum always completes
        more = repeat(transform(sequence(separator, item), lambda pair: pair[1]))
        rest = cast(Complete[list], more(first.cursor))
        return Complete(rest.cursor, [first.value, *rest.value])

    return parse


def peek(parser: Parser) -> Parser:
    """Positive lookahead: match without consuming input."""

    def parse(cursor: Cursor) -> Result:
        result = parser(cursor)
        if isinstance(result, Complete):
            return Complete(cursor, result.value)
        return result

    return parse


def peek_not(parser: Parser) -> Parser:
    """Negative lookahead: succeed, consuming nothing, only if ``parser`` does not match."""

    def parse(cursor: Cursor) -> Result:
        result = parser(cursor)
        if isinstance(result, Complete):
            return Fail(cursor, "Unexpected input")
        return Complete(cursor, None)

    return parse


def until(stop: Parser) -> Parser:
    """
    Consume text up to the first position where ``stop`` matches.

    ``stop`` itself is not consumed. The value is the consumed text.
    Returns ``Incomplete`` if input ends before ``stop`` ever matches.
    """

    def parse(cursor: Cursor) -> Result:
        current = cursor
        while True:
            if isinstance(stop(current), Complete):
                return Complete(current, cursor.text[cursor.pos : current.pos])
            if current.at_end():
                return Incomplete(current)
            current = current.advance(1)

    return parse


def transform(parser: Parser, func: Callable[[Any], Any]) -> Parser:
    """Map the value of a completed parse through ``func``."""

    def parse(cursor: Cursor) -> Result:
        result = parser(cursor)
        if isinstance(result, Complete):
            return Complete(result.cursor, func(result.value))
        return result

    return parse


def must(parser: Parser, message: str) -> Parser:
    """
    Commit to ``parser``: any failure raises ``ParseAbort`` with ``message``.

    Use after a distinguishing prefix has matched, so sibling alternatives
    are never tried for input that is already known to be malformed.
    """

    def parse(cursor: Cursor) -> Result:
        result = parser(cursor)
        if isinstance(result, Complete):
            return result
        raise ParseAbort(result.cursor, message)

    return parse


def run(parser: Parser, text: str) -> Any:
    """
    Run ``parser`` over the whole of ``text`` and return its value.

    Raises:
        ParseAbort: On a committed abort, a soft failure or incomplete input
    """
    result = parser(Cursor(text))
    if isinstance(result, Fail):
        raise ParseAbort(result.cursor, result.message)
    if isinstance(result, Incomplete):
        raise ParseAbort(result.cursor, "Unexpected end of input")
    if not result.cursor.at_end():
        raise ParseAbort(result.cursor, "Unexpected trailing input")
    return result.value
