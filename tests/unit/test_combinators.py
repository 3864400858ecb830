#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for spans and parser combinators."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from vimwiki_ast.ast.location import Position, Region
from vimwiki_ast.parsers.combinators import (
    ParseFailure,
    all_consuming,
    alt,
    blank_line,
    capture,
    context,
    delimited,
    key_value_pairs,
    locate,
    many0,
    many1,
    not_,
    not_contains,
    opt,
    recognize,
    seq,
    surround_in_line1,
    tag,
    take_line_until_one_of,
    take_until_end_of_line_or_input,
)
from vimwiki_ast.parsers.span import SourceText, Span


@pytest.mark.unit
class TestSpan:
    """Test the span view over source text."""

    def test_string_is_wrapped(self) -> None:
        """Test that a plain string becomes a SourceText."""
        span = Span("hello")
        assert isinstance(span.source, SourceText)
        assert span.remaining == "hello"
        assert len(span) == 5

    def test_advance_keeps_global_offset(self) -> None:
        """Test that advancing moves the offset within the same source."""
        span = Span("hello").advance(2)
        assert span.offset == 2
        assert span.remaining == "llo"

    def test_advance_is_clamped(self) -> None:
        """Test advancing past the end stops at the end."""
        span = Span("abc").advance(10)
        assert span.at_end
        assert span.remaining == ""

    def test_bounded_limits_view(self) -> None:
        """Test a bounded span only sees the requested characters."""
        span = Span("hello world").advance(6).bounded(3)
        assert span.remaining == "wor"
        assert span.offset == 6
        assert span.end == 9

    def test_find_is_relative(self) -> None:
        """Test find returns indexes relative to the span start."""
        span = Span("abc|def").advance(1)
        assert span.find("|") == 2
        assert span.find("x") == -1

    def test_line_start_detection(self) -> None:
        """Test is_line_start at the start and after a newline."""
        span = Span("ab\ncd")
        assert span.is_line_start
        assert not span.advance(1).is_line_start
        assert span.advance(3).is_line_start

    def test_positions_are_one_based(self) -> None:
        """Test line/column positions computed from offsets."""
        source = SourceText("ab\ncd\n\nef")
        assert source.position(0) == Position(1, 1)
        assert source.position(1) == Position(1, 2)
        assert source.position(3) == Position(2, 1)
        assert source.position(7) == Position(4, 1)

    def test_equality_with_string(self) -> None:
        """Test a span compares equal to its remaining text."""
        assert Span("abc").advance(1) == "bc"

    @given(st.text(alphabet="ab\n", max_size=40))
    def test_position_inverts_line_starts(self, text: str) -> None:
        """Test every offset maps to the line whose start precedes it."""
        source = SourceText(text)
        for offset in range(len(text)):
            position = source.position(offset)
            line_start = source.line_starts[position.line - 1]
            assert line_start + position.column - 1 == offset
            assert "\n" not in text[line_start:offset]


@pytest.mark.unit
class TestBasicCombinators:
    """Test the structural combinators."""

    def test_tag_matches_literal(self) -> None:
        """Test tag consumes the literal."""
        rest, value = tag("ab")(Span("abc"))
        assert value == "ab"
        assert rest.remaining == "c"

    def test_tag_failure_reports_offset(self) -> None:
        """Test a failed tag reports where it was applied."""
        with pytest.raises(ParseFailure) as excinfo:
            tag("x")(Span("abc").advance(1))
        assert excinfo.value.offset == 1
        assert excinfo.value.expected == "'x'"

    def test_alt_first_match_wins(self) -> None:
        """Test ordered choice picks the first matching parser."""
        _, value = alt(tag("a"), tag("ab"))(Span("abc"))
        assert value == "a"

    def test_alt_raises_furthest_failure(self) -> None:
        """Test the failure that got furthest is reported."""
        parser = alt(seq(tag("a"), tag("b")), tag("x"))
        with pytest.raises(ParseFailure) as excinfo:
            parser(Span("ac"))
        assert excinfo.value.offset == 1

    def test_context_builds_breadcrumbs(self) -> None:
        """Test nested contexts are recorded outermost first."""
        parser = context("Outer", context("Inner", tag("x")))
        with pytest.raises(ParseFailure) as excinfo:
            parser(Span("y"))
        assert excinfo.value.contexts == ["Outer", "Inner"]
        assert str(excinfo.value) == "Outer > Inner: expected 'x' at offset 0"

    def test_many0_stops_on_failure(self) -> None:
        """Test many0 returns what matched before the first failure."""
        rest, values = many0(tag("a"))(Span("aab"))
        assert values == ["a", "a"]
        assert rest.remaining == "b"

    def test_many0_stops_without_progress(self) -> None:
        """Test many0 does not loop on a parser that consumes nothing."""
        rest, values = many0(opt(tag("x")))(Span("abc"))
        assert values == []
        assert rest.offset == 0

    def test_many1_requires_one(self) -> None:
        """Test many1 fails when nothing matches."""
        with pytest.raises(ParseFailure):
            many1(tag("a"))(Span("b"))

    def test_not_succeeds_without_consuming(self) -> None:
        """Test negative lookahead."""
        rest, _ = not_(tag("x"))(Span("abc"))
        assert rest.offset == 0
        with pytest.raises(ParseFailure):
            not_(tag("a"))(Span("abc"))

    def test_delimited_and_recognize(self) -> None:
        """Test delimited returns the middle value and recognize the consumed text."""
        _, middle = delimited(tag("("), tag("x"), tag(")"))(Span("(x)"))
        assert middle == "x"
        _, text = recognize(seq(tag("a"), tag("b")))(Span("abc"))
        assert text == "ab"

    def test_all_consuming_rejects_leftovers(self) -> None:
        """Test all_consuming fails at the first unconsumed character."""
        with pytest.raises(ParseFailure) as excinfo:
            all_consuming(tag("a"))(Span("ab"))
        assert excinfo.value.offset == 1
        assert excinfo.value.expected == "end of input"


@pytest.mark.unit
class TestLocationCapture:
    """Test locate and capture."""

    def test_locate_records_offset_and_length(self) -> None:
        """Test locate produces a region without positions."""
        _, located = locate(tag("cd"))(Span("abcd").advance(2))
        assert located.element == "cd"
        assert located.region == Region(2, 2)
        assert not located.region.has_position

    def test_capture_records_positions(self) -> None:
        """Test capture records the first and last consumed character."""
        _, located = capture(tag("ab\nc"))(Span("ab\ncd"))
        assert located.region == Region(0, 4, Position(1, 1), Position(2, 1))

    def test_capture_empty_match(self) -> None:
        """Test an empty match ends where it starts."""
        _, located = capture(opt(tag("x")))(Span("abc"))
        assert located.region == Region(0, 0, Position(1, 1), Position(1, 1))

    def test_capture_without_position_tracking(self) -> None:
        """Test capture falls back to offsets only."""
        span = Span(SourceText("abc", track_positions=False))
        _, located = capture(tag("ab"))(span)
        assert located.region == Region(0, 2)


@pytest.mark.unit
class TestLinePrimitives:
    """Test the line oriented primitives."""

    def test_blank_line_with_spaces(self) -> None:
        """Test a whitespace-only line is consumed with its newline."""
        rest, spaces = blank_line(Span("  \nx"))
        assert spaces == "  "
        assert rest.remaining == "x"

    def test_blank_line_empty_line(self) -> None:
        """Test an empty line is a blank line."""
        rest, _ = blank_line(Span("\nx"))
        assert rest.remaining == "x"

    def test_blank_line_not_at_end_of_input(self) -> None:
        """Test empty input is not a blank line."""
        with pytest.raises(ParseFailure):
            blank_line(Span(""))

    def test_blank_line_requires_line_start(self) -> None:
        """Test a blank line must begin at the beginning of a line."""
        with pytest.raises(ParseFailure):
            blank_line(Span("a \n").advance(1))

    def test_take_until_end_of_line_excludes_crlf(self) -> None:
        """Test the carriage return of a CRLF line ending is not taken."""
        rest, line = take_until_end_of_line_or_input(Span("ab\r\ncd"))
        assert line == "ab"
        assert rest.remaining == "\r\ncd"

    def test_take_line_until_one_of_stops_at_first_needle(self) -> None:
        """Test the earliest needle wins."""
        rest, text = take_line_until_one_of("|", "]]")(Span("page]]|x"))
        assert text == "page"
        assert rest.remaining == "]]|x"

    def test_surround_in_line(self) -> None:
        """Test content between delimiters on one line."""
        rest, inner = surround_in_line1("*", "*")(Span("*a*b"))
        assert inner.remaining == "a"
        assert rest.remaining == "b"

    def test_surround_in_line_skips_partial_closers(self) -> None:
        """Test a partial closing delimiter does not end the content."""
        rest, inner = surround_in_line1("~~", "~~")(Span("~~a~b~~"))
        assert inner.remaining == "a~b"
        assert rest.at_end

    def test_surround_in_line_does_not_cross_lines(self) -> None:
        """Test the closing delimiter must be on the same line."""
        with pytest.raises(ParseFailure):
            surround_in_line1("*", "*")(Span("*a\nb*"))

    def test_surround_in_line_rejects_empty(self) -> None:
        """Test empty content never matches."""
        with pytest.raises(ParseFailure):
            surround_in_line1("*", "*")(Span("**"))

    def test_not_contains(self) -> None:
        """Test content holding the needle is rejected."""
        parser = not_contains("%%", surround_in_line1("`", "`"))
        with pytest.raises(ParseFailure):
            parser(Span("`a %% b`"))

    def test_key_value_pairs(self) -> None:
        """Test space separated key="value" pairs."""
        rest, pairs = key_value_pairs(Span('a="1" b="" c'))
        assert pairs == {"a": "1", "b": ""}
        assert rest.remaining == " c"
