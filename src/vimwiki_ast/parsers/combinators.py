#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/parsers/combinators.py
"""Parser combinators over :class:`~vimwiki_ast.parsers.span.Span`.

A parser is any callable taking a span and returning ``(rest, value)``,
where ``rest`` is the span left after the consumed input. A parser that
does not match raises :class:`ParseFailure`. Since spans are immutable,
a failed attempt leaves nothing to undo: ordered choice (:func:`alt`) just
tries the next alternative on the same span.

Scanning primitives never cross a line ending unless they say so. The
``*_line_*`` helpers check for ``\\n`` / ``\\r\\n`` before every character
they consume.

"""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence, Tuple, TypeVar

from vimwiki_ast.ast.location import Located, Region
from vimwiki_ast.parsers.span import Span

T = TypeVar("T")
U = TypeVar("U")

Parser = Callable[[Span], Tuple[Span, T]]


class ParseFailure(Exception):
    """A parser did not match at ``span``.

    This is the local, recoverable failure consumed by ordered choice. It is
    only turned into a user-facing :class:`~vimwiki_ast.exceptions.ParsingError`
    when a whole page fails.

    Parameters
    ----------
    span : Span
        Where the parser was applied
    expected : str
        What the parser was looking for
    contexts : sequence of str, optional
        Labels of enclosing :func:`context` wrappers, outermost first

    """

    def __init__(self, span: Span, expected: str, contexts: Optional[Sequence[str]] = None):
        super().__init__(expected)
        self.span = span
        self.expected = expected
        self.contexts = list(contexts or [])

    @property
    def offset(self) -> int:
        return self.span.offset

    def __str__(self) -> str:
        trail = " > ".join(self.contexts)
        prefix = f"{trail}: " if trail else ""
        return f"{prefix}expected {self.expected} at offset {self.span.offset}"


# ============================================================================
# Structural combinators
# ============================================================================


def context(label: str, parser: Parser[T]) -> Parser[T]:
    """Name a parser so failures carry a breadcrumb trail."""

    def _context(span: Span) -> tuple[Span, T]:
        try:
            return parser(span)
        except ParseFailure as failure:
            failure.contexts.insert(0, label)
            raise

    return _context


def tag(literal: str) -> Parser[str]:
    def _tag(span: Span) -> tuple[Span, str]:
        if span.startswith(literal):
            return span.advance(len(literal)), literal
        raise ParseFailure(span, repr(literal))

    return _tag


def one_of(chars: str) -> Parser[str]:
    def _one_of(span: Span) -> tuple[Span, str]:
        char = span.char()
        if char and char in chars:
            return span.advance(1), char
        raise ParseFailure(span, f"one of {chars!r}")

    return _one_of


def take_while1(predicate: Callable[[str], bool], expected: str = "characters") -> Parser[str]:
    """Consume at least one character satisfying ``predicate``."""

    def _take_while1(span: Span) -> tuple[Span, str]:
        text = span.text
        idx = span.offset
        while idx < span.end and predicate(text[idx]):
            idx += 1
        if idx == span.offset:
            raise ParseFailure(span, expected)
        return span.advance(idx - span.offset), text[span.offset : idx]

    return _take_while1


def not_(parser: Parser[Any]) -> Parser[None]:
    """Succeed without consuming when ``parser`` fails at this point."""

    def _not(span: Span) -> tuple[Span, None]:
        try:
            parser(span)
        except ParseFailure:
            return span, None
        raise ParseFailure(span, "no match")

    return _not


def peek(parser: Parser[T]) -> Parser[T]:
    """Run ``parser`` without consuming input."""

    def _peek(span: Span) -> tuple[Span, T]:
        _, value = parser(span)
        return span, value

    return _peek


def opt(parser: Parser[T]) -> Parser[Optional[T]]:
    def _opt(span: Span) -> tuple[Span, Optional[T]]:
        try:
            return parser(span)
        except ParseFailure:
            return span, None

    return _opt


def alt(*parsers: Parser[Any]) -> Parser[Any]:
    """Ordered choice: the first alternative that matches wins.

    When every alternative fails, the failure that got furthest into the
    input is raised (the last one on ties).
    """

    def _alt(span: Span) -> tuple[Span, Any]:
        best: Optional[ParseFailure] = None
        for parser in parsers:
            try:
                return parser(span)
            except ParseFailure as failure:
                if best is None or failure.offset >= best.offset:
                    best = failure
        raise best if best is not None else ParseFailure(span, "an alternative")

    return _alt


def many0(parser: Parser[T]) -> Parser[list[T]]:
    """Apply ``parser`` until it fails (or stops consuming input)."""

    def _many0(span: Span) -> tuple[Span, list[T]]:
        values: list[T] = []
        while True:
            try:
                rest, value = parser(span)
            except ParseFailure:
                return span, values
            if rest.offset == span.offset:
                return span, values
            values.append(value)
            span = rest

    return _many0


def many1(parser: Parser[T]) -> Parser[list[T]]:
    def _many1(span: Span) -> tuple[Span, list[T]]:
        rest, first = parser(span)
        rest, others = many0(parser)(rest)
        return rest, [first, *others]

    return _many1


def map_(parser: Parser[T], func: Callable[[T], U]) -> Parser[U]:
    def _map(span: Span) -> tuple[Span, U]:
        rest, value = parser(span)
        return rest, func(value)

    return _map


def value(result: U, parser: Parser[Any]) -> Parser[U]:
    def _value(span: Span) -> tuple[Span, U]:
        rest, _ = parser(span)
        return rest, result

    return _value


def preceded(first: Parser[Any], second: Parser[T]) -> Parser[T]:
    def _preceded(span: Span) -> tuple[Span, T]:
        rest, _ = first(span)
        return second(rest)

    return _preceded


def terminated(first: Parser[T], second: Parser[Any]) -> Parser[T]:
    def _terminated(span: Span) -> tuple[Span, T]:
        rest, result = first(span)
        rest, _ = second(rest)
        return rest, result

    return _terminated


def delimited(left: Parser[Any], middle: Parser[T], right: Parser[Any]) -> Parser[T]:
    return preceded(left, terminated(middle, right))


def pair(first: Parser[T], second: Parser[U]) -> Parser[tuple[T, U]]:
    def _pair(span: Span) -> tuple[Span, tuple[T, U]]:
        rest, a = first(span)
        rest, b = second(rest)
        return rest, (a, b)

    return _pair


def seq(*parsers: Parser[Any]) -> Parser[tuple[Any, ...]]:
    def _seq(span: Span) -> tuple[Span, tuple[Any, ...]]:
        values = []
        for parser in parsers:
            span, result = parser(span)
            values.append(result)
        return span, tuple(values)

    return _seq


def verify(parser: Parser[T], predicate: Callable[[T], bool], expected: str = "a valid value") -> Parser[T]:
    def _verify(span: Span) -> tuple[Span, T]:
        rest, result = parser(span)
        if not predicate(result):
            raise ParseFailure(span, expected)
        return rest, result

    return _verify


def recognize(parser: Parser[Any]) -> Parser[str]:
    """Return the text consumed by ``parser`` instead of its value."""

    def _recognize(span: Span) -> tuple[Span, str]:
        rest, _ = parser(span)
        return rest, rest.consumed_since(span)

    return _recognize


def map_parser(first: Parser[Span], second: Parser[T]) -> Parser[T]:
    """Run ``second`` over the span produced by ``first``.

    ``second`` does not have to consume all of it.
    """

    def _map_parser(span: Span) -> tuple[Span, T]:
        rest, inner = first(span)
        _, result = second(inner)
        return rest, result

    return _map_parser


def not_contains(needle: str, parser: Parser[Span]) -> Parser[Span]:
    """Fail when the span produced by ``parser`` contains ``needle``."""

    def _not_contains(span: Span) -> tuple[Span, Span]:
        rest, inner = parser(span)
        if inner.find(needle) != -1:
            raise ParseFailure(span, f"content without {needle!r}")
        return rest, inner

    return _not_contains


def all_consuming(parser: Parser[T]) -> Parser[T]:
    def _all_consuming(span: Span) -> tuple[Span, T]:
        rest, result = parser(span)
        if not rest.at_end:
            raise ParseFailure(rest, "end of input")
        return rest, result

    return _all_consuming


# ============================================================================
# Location capture
# ============================================================================


def locate(parser: Parser[T]) -> Parser[Located[T]]:
    """Wrap the result with a region holding offset and length only."""

    def _locate(span: Span) -> tuple[Span, Located[T]]:
        rest, result = parser(span)
        return rest, Located(result, Region(span.offset, rest.offset - span.offset))

    return _locate


def capture(parser: Parser[T]) -> Parser[Located[T]]:
    """Wrap the result with a region including line/column positions.

    Positions are derived from the source line index, so they are correct
    for the whole document even inside nested sub-spans. When the source
    was created with ``track_positions=False`` this behaves like
    :func:`locate`.
    """

    def _capture(span: Span) -> tuple[Span, Located[T]]:
        rest, result = parser(span)
        length = rest.offset - span.offset
        if not span.source.track_positions:
            return rest, Located(result, Region(span.offset, length))

        start = span.source.position(span.offset)
        end = span.source.position(rest.offset - 1) if length > 0 else start
        return rest, Located(result, Region(span.offset, length, start, end))

    return _capture


# ============================================================================
# Line and whitespace primitives
# ============================================================================


def _is_line_end(span: Span) -> bool:
    return span.at_end or span.startswith("\n") or span.startswith("\r\n")


def space0(span: Span) -> tuple[Span, str]:
    text = span.text
    idx = span.offset
    while idx < span.end and text[idx] in " \t":
        idx += 1
    return span.advance(idx - span.offset), text[span.offset : idx]


def space1(span: Span) -> tuple[Span, str]:
    rest, spaces = space0(span)
    if not spaces:
        raise ParseFailure(span, "whitespace")
    return rest, spaces


def line_ending(span: Span) -> tuple[Span, str]:
    if span.startswith("\n"):
        return span.advance(1), "\n"
    if span.startswith("\r\n"):
        return span.advance(2), "\r\n"
    raise ParseFailure(span, "line ending")


def end_of_line_or_input(span: Span) -> tuple[Span, None]:
    if span.at_end:
        return span, None
    try:
        rest, _ = line_ending(span)
    except ParseFailure as failure:
        raise ParseFailure(span, "end of line or input") from failure
    return rest, None


def beginning_of_line(span: Span) -> tuple[Span, None]:
    if span.is_line_start:
        return span, None
    raise ParseFailure(span, "beginning of line")


def blank_line(span: Span) -> tuple[Span, str]:
    """Consume a line holding nothing but spaces and tabs.

    An empty input at the beginning of a line is not a blank line.
    """
    beginning_of_line(span)
    rest, spaces = space0(span)
    if spaces:
        rest, _ = end_of_line_or_input(rest)
        return rest, spaces
    rest, _ = line_ending(rest)
    return rest, spaces


def take_until_end_of_line_or_input(span: Span) -> tuple[Span, str]:
    """Take the rest of the line, excluding the ``\\n`` or ``\\r\\n``."""
    end = span.line_end()
    if end > span.offset and end < span.end and span.text[end - 1] == "\r":
        end -= 1
    return span.advance(end - span.offset), span.text[span.offset : end]


def any_line(span: Span) -> tuple[Span, str]:
    """Consume a full line (from its beginning), returning its content."""
    beginning_of_line(span)
    rest, content = take_until_end_of_line_or_input(span)
    rest, _ = end_of_line_or_input(rest)
    return rest, content


def take_line_while(parser: Parser[Any]) -> Parser[str]:
    """Consume single characters while ``parser`` matches at each of them.

    Stops before a line ending or the end of input; the line ending is not
    consumed. ``parser`` is only peeked, never used to consume.
    """

    def _take_line_while(span: Span) -> tuple[Span, str]:
        current = span
        while not _is_line_end(current):
            try:
                parser(current)
            except ParseFailure:
                break
            current = current.advance(1)
        return current, current.consumed_since(span)

    return _take_line_while


def take_line_while1(parser: Parser[Any]) -> Parser[str]:
    inner = take_line_while(parser)

    def _take_line_while1(span: Span) -> tuple[Span, str]:
        rest, taken = inner(span)
        if not taken:
            raise ParseFailure(span, "at least one character on this line")
        return rest, taken

    return _take_line_while1


def take_line_until_one_of(*needles: str) -> Parser[str]:
    """Consume until one of ``needles`` or the end of the line (exclusive)."""

    def _take_line_until_one_of(span: Span) -> tuple[Span, str]:
        limit = span.line_end()
        if limit > span.offset and limit < span.end and span.text[limit - 1] == "\r":
            limit -= 1
        stop = limit
        for needle in needles:
            idx = span.text.find(needle, span.offset, limit)
            if idx != -1 and idx < stop:
                stop = idx
        return span.advance(stop - span.offset), span.text[span.offset : stop]

    return _take_line_until_one_of


def take_line_until(needle: str) -> Parser[str]:
    return take_line_until_one_of(needle)


def take_line_until1(needle: str) -> Parser[str]:
    return verify(take_line_until(needle), bool, f"text before {needle!r}")


def take_line_until_one_of1(*needles: str) -> Parser[str]:
    return verify(take_line_until_one_of(*needles), bool, "text before " + " or ".join(map(repr, needles)))


def surround_in_line1(left: str, right: str) -> Parser[Span]:
    """Match ``left content right`` on one line, returning the content span.

    Candidates for ``right`` are located by its first character and then
    checked in full; a partial match moves the search along instead of
    failing. An empty content is never matched.
    """
    first = right[0]

    def _surround(span: Span) -> tuple[Span, Span]:
        if not span.startswith(left):
            raise ParseFailure(span, repr(left))
        inner = span.advance(len(left))
        newline = inner.find("\n")

        pos = inner.find(first)
        while pos != -1:
            if newline != -1 and pos >= newline:
                raise ParseFailure(inner, f"{right!r} before end of line")
            if pos > 0 and inner.find(right, pos) == pos:
                rest = inner.advance(pos + len(right))
                return rest, inner.bounded(pos)
            pos = inner.find(first, pos + 1)

        raise ParseFailure(inner, repr(right))

    return context("Surround in Line", _surround)


def key_value_pair(span: Span) -> tuple[Span, tuple[str, str]]:
    """``key="value"`` on one line (the value may be empty)."""
    rest, key = take_line_until1("=")(span)
    rest, _ = tag('="')(rest)
    rest, val = take_line_until('"')(rest)
    rest, _ = tag('"')(rest)
    return rest, (key, val)


def key_value_pairs(span: Span) -> tuple[Span, dict[str, str]]:
    """One or more :func:`key_value_pair` separated by spaces or tabs."""
    rest, (key, val) = key_value_pair(span)
    pairs = {key: val}
    while True:
        try:
            after, _ = space1(rest)
            after, (key, val) = key_value_pair(after)
        except ParseFailure:
            return rest, pairs
        pairs[key] = val
        rest = after


__all__ = [
    "Parser",
    "ParseFailure",
    "context",
    "tag",
    "one_of",
    "take_while1",
    "not_",
    "peek",
    "opt",
    "alt",
    "many0",
    "many1",
    "map_",
    "value",
    "preceded",
    "terminated",
    "delimited",
    "pair",
    "seq",
    "verify",
    "recognize",
    "map_parser",
    "not_contains",
    "all_consuming",
    "locate",
    "capture",
    "space0",
    "space1",
    "line_ending",
    "end_of_line_or_input",
    "beginning_of_line",
    "blank_line",
    "take_until_end_of_line_or_input",
    "any_line",
    "take_line_while",
    "take_line_while1",
    "take_line_until",
    "take_line_until1",
    "take_line_until_one_of",
    "take_line_until_one_of1",
    "surround_in_line1",
    "key_value_pair",
    "key_value_pairs",
]
