#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/parsers/inline.py
"""Parsers for inline elements.

Inline elements never cross a line ending, with one exception: a
``%%+ ... +%%`` comment may span several lines. Alternatives are tried in
this order, the first match wins:

    comment, math, code, tags, link, decorated text, keyword, text

Text is the fallback. It is the longest run of characters at which none of
the other elements would start, so every character of a line ends up in
exactly one element.
"""

from __future__ import annotations

from typing import Optional

from vimwiki_ast.ast.location import Located
from vimwiki_ast.ast.nodes import (
    CodeInline,
    CommentInline,
    CommentKind,
    DecoratedText,
    Decoration,
    InlineElement,
    InlineElementContainer,
    Keyword,
    KeywordKind,
    MathInline,
    Tags,
    Text,
)
from vimwiki_ast.constants import DECORATION_START_CHARS
from vimwiki_ast.parsers.combinators import (
    Parser,
    ParseFailure,
    all_consuming,
    alt,
    capture,
    context,
    locate,
    many1,
    map_,
    not_contains,
    surround_in_line1,
    tag,
    take_line_until1,
    take_line_until_one_of1,
    take_until_end_of_line_or_input,
    terminated,
    value,
)
from vimwiki_ast.parsers.links import link, raw_link
from vimwiki_ast.parsers.span import Span


# ============================================================================
# Comments
# ============================================================================


def _line_comment(span: Span) -> tuple[Span, CommentInline]:
    rest, _ = tag("%%")(span)
    rest, text = take_until_end_of_line_or_input(rest)
    return rest, CommentInline(CommentKind.LINE, [text])


def _multi_line_comment(span: Span) -> tuple[Span, CommentInline]:
    rest, _ = tag("%%+")(span)
    end = rest.find("+%%")
    if end == -1:
        raise ParseFailure(rest, "'+%%' closing the comment")

    lines = [line[:-1] if line.endswith("\r") else line for line in rest.remaining[:end].split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return rest.advance(end + 3), CommentInline(CommentKind.MULTI_LINE, lines)


def comment_inline(span: Span) -> tuple[Span, Located[CommentInline]]:
    """``%%+ ... +%%`` (tried first) or ``%%`` to the end of the line."""
    return context("Comment", capture(alt(_multi_line_comment, _line_comment)))(span)


# ============================================================================
# Math, code and tags
# ============================================================================


def _math_inline(span: Span) -> tuple[Span, MathInline]:
    rest, _ = tag("$")(span)
    rest, formula = take_line_until1("$")(rest)
    if "%%" in formula:
        raise ParseFailure(span, "formula without '%%'")
    rest, _ = tag("$")(rest)
    return rest, MathInline(formula)


def math_inline(span: Span) -> tuple[Span, Located[MathInline]]:
    return context("Math Inline", capture(_math_inline))(span)


def _code_inline(span: Span) -> tuple[Span, CodeInline]:
    rest, inner = not_contains("%%", surround_in_line1("`", "`"))(span)
    return rest, CodeInline(inner.remaining)


def code_inline(span: Span) -> tuple[Span, Located[CodeInline]]:
    return context("Code Inline", capture(_code_inline))(span)


_tag_name = take_line_until_one_of1(":", " ", "\t")


def _tags(span: Span) -> tuple[Span, Tags]:
    rest, _ = tag(":")(span)
    rest, names = many1(terminated(_tag_name, tag(":")))(rest)
    return rest, Tags(names)


def tags(span: Span) -> tuple[Span, Located[Tags]]:
    """``:one:two:`` where a name runs until ``:``, space or tab."""
    return context("Tags", capture(_tags))(span)


# ============================================================================
# Keywords and decorated text
# ============================================================================

_keyword = alt(*(value(kind, tag(kind.value)) for kind in KeywordKind))


def keyword(span: Span) -> tuple[Span, Located[Keyword]]:
    return context("Keyword", capture(map_(_keyword, Keyword)))(span)


def _decorated(delimiter: str, kind: Decoration) -> Parser[DecoratedText]:
    surround = not_contains("%%", surround_in_line1(delimiter, delimiter))

    def _inner(span: Span) -> tuple[Span, DecoratedText]:
        rest, inner = surround(span)
        _, contents = all_consuming(decorated_text_contents)(inner)
        return rest, DecoratedText(kind, contents)

    return context(f"{kind.value.title()} Decorated Text", _inner)


_decorations = alt(
    _decorated("*", Decoration.BOLD),
    _decorated("_", Decoration.ITALIC),
    _decorated("~~", Decoration.STRIKEOUT),
    _decorated("^", Decoration.SUPERSCRIPT),
    _decorated(",,", Decoration.SUBSCRIPT),
)


def decorated_text(span: Span) -> tuple[Span, Located[DecoratedText]]:
    """Text between matching decoration delimiters on a single line.

    The enclosed content is parsed as links, keywords, nested decorated
    text and text, and must be consumed completely; otherwise the opening
    delimiter is left to be read as plain text.
    """
    return context("Decorated Text", capture(_decorations))(span)


def decorated_text_contents(span: Span) -> tuple[Span, list[Located[InlineElement]]]:
    return context(
        "Decorated Text Contents",
        many1(alt(link, keyword, decorated_text, text)),
    )(span)


# ============================================================================
# Text
# ============================================================================

_PEEKED_NON_TEXT: tuple[tuple[str, Parser[Located[InlineElement]]], ...] = (
    ("%", comment_inline),
    ("`", code_inline),
    ("$", math_inline),
    (":", tags),
    ("[{", link),
    (DECORATION_START_CHARS, decorated_text),
)


def _non_text_start(span: Span, run_start: int) -> Optional[int]:
    """Offset where another inline element starts, if one starts here.

    A raw link is only noticed at its ``:``, so from there the scheme is
    searched backwards to the previous whitespace (never before
    ``run_start``), which can put the start before ``span``.
    """
    char = span.char()
    for chars, parser in _PEEKED_NON_TEXT:
        if char and char in chars:
            try:
                parser(span)
            except ParseFailure:
                continue
            return span.offset

    try:
        _keyword(span)
    except ParseFailure:
        pass
    else:
        return span.offset

    if char == ":":
        source = span.text
        start = span.offset
        while start > run_start and not source[start - 1].isspace():
            start -= 1
        try:
            raw_link(Span(span.source, start, span.end))
        except ParseFailure:
            return None
        return start

    return None


def _text(span: Span) -> tuple[Span, Text]:
    current = span
    stop: Optional[int] = None
    while not current.at_end and not current.startswith("\n") and not current.startswith("\r\n"):
        stop = _non_text_start(current, span.offset)
        if stop is not None:
            break
        current = current.advance(1)

    end = current.offset if stop is None else stop
    if end <= span.offset:
        raise ParseFailure(span, "text")
    return span.advance(end - span.offset), Text(span.text[span.offset : end])


def text(span: Span) -> tuple[Span, Located[Text]]:
    return context("Text", capture(_text))(span)


# ============================================================================
# Inline elements and containers
# ============================================================================

inline_element = context(
    "Inline Element",
    alt(
        comment_inline,
        math_inline,
        code_inline,
        tags,
        link,
        decorated_text,
        keyword,
        text,
    ),
)


def inline_element_container(span: Span) -> tuple[Span, InlineElementContainer]:
    """One or more inline elements; the line ending is not consumed."""
    return context(
        "Inline Element Container",
        map_(many1(inline_element), InlineElementContainer),
    )(span)


located_inline_element_container = locate(inline_element_container)


__all__ = [
    "comment_inline",
    "math_inline",
    "code_inline",
    "tags",
    "keyword",
    "decorated_text",
    "decorated_text_contents",
    "text",
    "inline_element",
    "inline_element_container",
    "located_inline_element_container",
]
