#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/parsers/links.py
"""Parsers for the link family.

Forms recognized, in the order they are tried:

    [[diary:2024-01-31|description]]
    [[wiki1:Some Page#anchor]]
    [[wn.Work Notes:Some Page]]
    [[Some Page#anchor|description|class="x" style="y"]]
    https://example.com/path
    {{image.png|alt text|style="width:100%"}}

Diary and interwiki links are wiki links whose uri carries a recognizable
prefix; the prefix is removed from the stored uri and kept on the
:class:`~vimwiki_ast.ast.nodes.Link` instead.
"""

from __future__ import annotations

import datetime
from typing import Optional, Union

from vimwiki_ast.ast.links import LinkData, LinkKind, encode_uri
from vimwiki_ast.ast.location import Located
from vimwiki_ast.ast.nodes import Link
from vimwiki_ast.constants import (
    DIARY_LINK_PREFIX,
    INDEXED_INTERWIKI_PREFIX,
    NAMED_INTERWIKI_PREFIX,
    RAW_LINK_SCHEMES,
)
from vimwiki_ast.parsers.combinators import (
    Parser,
    ParseFailure,
    alt,
    capture,
    context,
    key_value_pairs,
    not_contains,
    surround_in_line1,
    tag,
    take_line_until,
    take_line_until_one_of1,
    take_while1,
)
from vimwiki_ast.parsers.span import Span


# ============================================================================
# Link data: uri | description | properties
# ============================================================================


def _link_uri(span: Span) -> tuple[Span, str]:
    rest, raw = take_line_until_one_of1("|", "]]", "}}")(span)
    return rest, encode_uri(raw)


def _link_description(span: Span) -> tuple[Span, Union[str, LinkData]]:
    """Description after ``|``: a nested transclusion or plain text."""
    rest, _ = tag("|")(span)
    if rest.startswith("{{"):
        try:
            after, located = transclusion_link(rest)
        except ParseFailure:
            pass
        else:
            if after.at_end or after.startswith("|"):
                return after, located.element.data

    return take_line_until("|")(rest)


def _link_properties(span: Span) -> tuple[Span, dict[str, str]]:
    rest, _ = tag("|")(span)
    return key_value_pairs(rest)


def link_data(span: Span) -> tuple[Span, LinkData]:
    """Parse ``uri[|description][|key="value" ...]`` inside link delimiters.

    The description ends at the next ``|``; when what follows that ``|`` is
    not a list of ``key="value"`` pairs, the properties are left out.
    """
    rest, uri = _link_uri(span)

    description: Optional[Union[str, LinkData]] = None
    properties: Optional[dict[str, str]] = None
    try:
        rest, description = _link_description(rest)
    except ParseFailure:
        pass
    try:
        rest, properties = _link_properties(rest)
    except ParseFailure:
        pass

    return rest, LinkData(uri, description, properties)


# ============================================================================
# Link forms
# ============================================================================


def _bracketed(left: str, right: str, kind: LinkKind) -> Parser[Link]:
    def _inner(span: Span) -> tuple[Span, Link]:
        rest, inner = not_contains("%%", surround_in_line1(left, right))(span)
        _, data = link_data(inner)
        return rest, Link(kind=kind, data=data)

    return _inner


_wiki_link = _bracketed("[[", "]]", LinkKind.WIKI)
_transclusion_link = _bracketed("{{", "}}", LinkKind.TRANSCLUSION)


def wiki_link(span: Span) -> tuple[Span, Located[Link]]:
    return context("Wiki Link", capture(_wiki_link))(span)


def transclusion_link(span: Span) -> tuple[Span, Located[Link]]:
    return context("Transclusion Link", capture(_transclusion_link))(span)


def _strip_uri_prefix(data: LinkData, length: int) -> LinkData:
    return LinkData(data.uri[length:], data.description, data.properties)


def _diary_link(span: Span) -> tuple[Span, Link]:
    rest, link = _wiki_link(span)
    uri = link.data.uri
    if not uri.startswith(DIARY_LINK_PREFIX):
        raise ParseFailure(span, "diary link")

    data = _strip_uri_prefix(link.data, len(DIARY_LINK_PREFIX))
    date_text = data.uri.split("#", 1)[0]
    try:
        date = datetime.datetime.strptime(date_text, "%Y-%m-%d").date()
    except ValueError as e:
        raise ParseFailure(span, "diary date as YYYY-MM-DD") from e
    return rest, Link(kind=LinkKind.DIARY, data=data, date=date)


def diary_link(span: Span) -> tuple[Span, Located[Link]]:
    return context("Diary Link", capture(_diary_link))(span)


def _indexed_interwiki_link(span: Span) -> tuple[Span, Link]:
    rest, link = _wiki_link(span)
    uri = link.data.uri
    if not uri.startswith(INDEXED_INTERWIKI_PREFIX):
        raise ParseFailure(span, "indexed interwiki link")

    index_text, sep, _ = uri[len(INDEXED_INTERWIKI_PREFIX) :].partition(":")
    if not sep or not index_text.isdigit():
        raise ParseFailure(span, "wiki index followed by ':'")

    data = _strip_uri_prefix(link.data, len(INDEXED_INTERWIKI_PREFIX) + len(index_text) + 1)
    return rest, Link(kind=LinkKind.INDEXED_INTERWIKI, data=data, index=int(index_text))


def indexed_interwiki_link(span: Span) -> tuple[Span, Located[Link]]:
    return context("Indexed Interwiki Link", capture(_indexed_interwiki_link))(span)


def _named_interwiki_link(span: Span) -> tuple[Span, Link]:
    rest, link = _wiki_link(span)
    uri = link.data.uri
    if not uri.startswith(NAMED_INTERWIKI_PREFIX):
        raise ParseFailure(span, "named interwiki link")

    encoded_name, sep, _ = uri[len(NAMED_INTERWIKI_PREFIX) :].partition(":")
    if not sep or not encoded_name:
        raise ParseFailure(span, "wiki name followed by ':'")

    data = _strip_uri_prefix(link.data, len(NAMED_INTERWIKI_PREFIX) + len(encoded_name) + 1)
    name = LinkData(encoded_name).to_decoded_uri_string()
    return rest, Link(kind=LinkKind.NAMED_INTERWIKI, data=data, name=name)


def named_interwiki_link(span: Span) -> tuple[Span, Located[Link]]:
    return context("Named Interwiki Link", capture(_named_interwiki_link))(span)


def _is_scheme_char(char: str) -> bool:
    return (char.isascii() and char.isalnum()) or char in "+.-"


_scheme = take_while1(_is_scheme_char, "uri scheme")
_non_whitespace = take_while1(lambda c: not c.isspace(), "uri")


def _raw_link(span: Span) -> tuple[Span, Link]:
    rest, scheme = _scheme(span)
    if scheme.lower() not in RAW_LINK_SCHEMES:
        raise ParseFailure(span, "one of " + ", ".join(sorted(RAW_LINK_SCHEMES)))
    rest, _ = tag(":")(rest)
    rest, remainder = _non_whitespace(rest)
    return rest, Link(kind=LinkKind.RAW, data=LinkData(f"{scheme}:{remainder}"))


def raw_link(span: Span) -> tuple[Span, Located[Link]]:
    """Bare uri with a known scheme, taken verbatim up to whitespace."""
    return context("Raw Link", capture(_raw_link))(span)


link = context(
    "Link",
    alt(
        diary_link,
        indexed_interwiki_link,
        named_interwiki_link,
        wiki_link,
        raw_link,
        transclusion_link,
    ),
)


__all__ = [
    "link",
    "link_data",
    "wiki_link",
    "diary_link",
    "indexed_interwiki_link",
    "named_interwiki_link",
    "raw_link",
    "transclusion_link",
]
