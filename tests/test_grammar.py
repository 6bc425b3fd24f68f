"""Tests for the parser combinators."""

import pytest

from kitchen.grammar import (
    Complete,
    Cursor,
    Fail,
    Incomplete,
    ParseAbort,
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


def parse(parser, text):
    return parser(Cursor(text))


class TestCursor:
    """Tests for Cursor positions."""

    def test_line_col(self):
        cursor = Cursor("ab\ncd\nef", 4)
        assert cursor.line_col() == (2, 2)

    def test_fragment_is_cut_at_line_end(self):
        assert Cursor("hello world\nnext", 6).fragment() == "world"

    def test_fragment_is_truncated(self):
        assert Cursor("x" * 40).fragment(width=5) == "xxxxx..."


class TestResults:
    """Tests for the three result kinds."""

    def test_text_token_complete(self):
        result = parse(text_token("step:"), "step: 5 min")
        assert isinstance(result, Complete)
        assert result.cursor.pos == 5

    def test_text_token_fail(self):
        assert isinstance(parse(text_token("step:"), "title:"), Fail)

    def test_text_token_incomplete_on_prefix(self):
        assert isinstance(parse(text_token("step:"), "ste"), Incomplete)

    def test_text_token_from_middle_of_input(self):
        result = text_token("step:")(Cursor("xx\nstep: 5 min", 3))
        assert isinstance(result, Complete)
        assert result.cursor.pos == 8

    def test_text_token_short_tail_that_is_not_a_prefix(self):
        assert isinstance(text_token("step:")(Cursor("abcxy", 3)), Fail)

    def test_pattern_groups(self):
        result = parse(pattern(r"(\d+)/(\d+)"), "1/2 cup")
        assert result.value == ("1", "2")

    def test_pattern_incomplete_at_end(self):
        assert isinstance(parse(pattern(r"\d+"), ""), Incomplete)

    def test_eoi(self):
        assert isinstance(parse(eoi, ""), Complete)
        assert isinstance(parse(eoi, "x"), Fail)


class TestCombinators:
    """Tests for sequencing, choice and repetition."""

    def test_sequence_values(self):
        result = parse(sequence(text_token("a"), text_token("b")), "abc")
        assert result.value == ("a", "b")
        assert result.cursor.pos == 2

    def test_sequence_stops_at_first_failure(self):
        result = parse(sequence(text_token("a"), text_token("b")), "ac")
        assert isinstance(result, Fail)
        assert result.cursor.pos == 1

    def test_either_is_ordered(self):
        result = parse(either(text_token("ab"), text_token("a")), "abc")
        assert result.value == "ab"

    def test_either_backtracks_on_soft_failure(self):
        parser = either(sequence(text_token("a"), text_token("x")), text_token("ab"))
        assert parse(parser, "ab").value == "ab"

    def test_either_reports_incomplete(self):
        assert isinstance(parse(either(text_token("abc"), text_token("x")), "ab"), Incomplete)

    def test_optional(self):
        result = parse(optional(text_token("a")), "b")
        assert isinstance(result, Complete)
        assert result.value is None
        assert result.cursor.pos == 0

    def test_repeat(self):
        result = parse(repeat(text_token("a")), "aaab")
        assert result.value == ["a", "a", "a"]
        assert result.cursor.pos == 3

    def test_repeat_minimum(self):
        assert isinstance(parse(repeat(text_token("a"), min_count=1), "b"), Fail)

    def test_repeat_stops_on_zero_width(self):
        result = parse(repeat(optional(text_token("a"))), "b")
        assert isinstance(result, Complete)

    def test_separated(self):
        result = parse(separated(pattern(r"\w+"), text_token("|")), "a|b|c")
        assert result.value == ["a", "b", "c"]

    def test_peek_consumes_nothing(self):
        result = parse(peek(text_token("a")), "a")
        assert isinstance(result, Complete)
        assert result.cursor.pos == 0

    def test_peek_not(self):
        assert isinstance(parse(peek_not(text_token("step:")), "step:"), Fail)
        assert isinstance(parse(peek_not(text_token("step:")), "flour"), Complete)

    def test_until(self):
        result = parse(until(text_token(")")), "chopped) rest")
        assert result.value == "chopped"
        assert result.cursor.rest() == ") rest"

    def test_until_incomplete_without_stop(self):
        assert isinstance(parse(until(text_token(")")), "chopped"), Incomplete)

    def test_transform(self):
        assert parse(transform(pattern(r"\d+"), int), "42").value == 42


class TestCommittedAbort:
    """Tests for must() and run()."""

    def test_must_raises_on_fail(self):
        with pytest.raises(ParseAbort, match="Missing number"):
            parse(must(pattern(r"\d+"), "Missing number"), "x")

    def test_must_raises_on_incomplete(self):
        with pytest.raises(ParseAbort):
            parse(must(text_token("step:"), "Missing step"), "st")

    def test_abort_is_not_caught_by_either(self):
        parser = either(
            sequence(text_token("("), must(text_token(")"), "Unclosed")),
            pattern(r".*"),
        )
        with pytest.raises(ParseAbort, match="Unclosed"):
            parse(parser, "(x")

    def test_run_requires_full_input(self):
        with pytest.raises(ParseAbort, match="trailing"):
            run(text_token("a"), "ab")

    def test_run_incomplete(self):
        with pytest.raises(ParseAbort, match="end of input"):
            run(text_token("abc"), "ab")

    def test_run_value(self):
        assert run(sequence(text_token("a"), eoi), "a") == ("a", None)
