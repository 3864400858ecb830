#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/parsers/lists.py
"""List parser.

A list is a run of items that share the indentation of its first item::

    - item 1
      more content for item 1
      - sub item 1
    - item 2

Lines indented deeper than an item belong to it, either as a nested list
or as another line of inline content. A line at exactly the list's
indentation that starts with a list marker is a sibling. Anything else,
including a blank line, ends the list.

Alphabetic and roman markers cannot be told apart one item at a time
(``i.`` is both), so they are classified once the whole list is known.
"""

from __future__ import annotations

from vimwiki_ast.ast.location import Located
from vimwiki_ast.ast.lists import (
    List,
    ListItem,
    ListItemAttributes,
    ListItemContent,
    ListItemSuffix,
    ListItemTodoStatus,
    ListItemType,
    OrderedListItemType,
    UnorderedListItemType,
    pos_to_roman,
)
from vimwiki_ast.constants import ROMAN_CHARS
from vimwiki_ast.parsers.combinators import (
    ParseFailure,
    beginning_of_line,
    blank_line,
    capture,
    context,
    end_of_line_or_input,
    one_of,
    space0,
    tag,
    take_while1,
)
from vimwiki_ast.parsers.inline import located_inline_element_container
from vimwiki_ast.parsers.span import Span

_ALPHABETIC_TYPES = (
    OrderedListItemType.LOWERCASE_ALPHABET,
    OrderedListItemType.UPPERCASE_ALPHABET,
    OrderedListItemType.LOWERCASE_ROMAN,
    OrderedListItemType.UPPERCASE_ROMAN,
)
_UPPERCASE_TYPES = (OrderedListItemType.UPPERCASE_ALPHABET, OrderedListItemType.UPPERCASE_ROMAN)


# ============================================================================
# Prefixes
# ============================================================================

_ORDERED_MARKERS = (
    (OrderedListItemType.NUMBER, take_while1(lambda c: c.isascii() and c.isdigit(), "digits")),
    (OrderedListItemType.LOWERCASE_ROMAN, take_while1(lambda c: c in ROMAN_CHARS, "roman numeral")),
    (OrderedListItemType.UPPERCASE_ROMAN, take_while1(lambda c: c in ROMAN_CHARS.upper(), "roman numeral")),
    (
        OrderedListItemType.LOWERCASE_ALPHABET,
        take_while1(lambda c: c.isascii() and c.islower(), "lowercase letters"),
    ),
    (
        OrderedListItemType.UPPERCASE_ALPHABET,
        take_while1(lambda c: c.isascii() and c.isupper(), "uppercase letters"),
    ),
)

_ORDERED_SUFFIXES = ((". ", ListItemSuffix.PERIOD), (") ", ListItemSuffix.PAREN))


def list_item_prefix(span: Span) -> tuple[Span, tuple[ListItemType, ListItemSuffix, str]]:
    """Parse a marker and its required trailing separator.

    Returns the item type, the suffix and the marker as written.
    """
    for literal, unordered in (("- ", UnorderedListItemType.HYPHEN), ("* ", UnorderedListItemType.ASTERISK)):
        if span.startswith(literal):
            return span.advance(2), (unordered, ListItemSuffix.NONE, literal[0])

    for item_type, marker_parser in _ORDERED_MARKERS:
        try:
            rest, marker = marker_parser(span)
        except ParseFailure:
            continue
        for literal, suffix in _ORDERED_SUFFIXES:
            if rest.startswith(literal):
                return rest.advance(2), (item_type, suffix, marker)

    if span.startswith("# "):
        return span.advance(2), (OrderedListItemType.POUND, ListItemSuffix.NONE, "#")

    raise ParseFailure(span, "list item marker")


def todo_status(span: Span) -> tuple[Span, ListItemTodoStatus]:
    """``[ ]``, ``[.]``, ``[o]``, ``[O]``, ``[X]`` or ``[-]`` plus a space."""
    rest, _ = tag("[")(span)
    rest, char = one_of("".join(status.value for status in ListItemTodoStatus))(rest)
    rest, _ = tag("] ")(rest)
    return rest, ListItemTodoStatus(char)


# ============================================================================
# Items and lists
# ============================================================================


def _indentation(span: Span) -> int:
    _, spaces = space0(span)
    return len(spaces)


def _item_contents(span: Span, indentation: int) -> tuple[Span, list[Located[ListItemContent]]]:
    """First line of content plus every deeper-indented non-blank line."""
    rest, first = located_inline_element_container(span)
    rest, _ = end_of_line_or_input(rest)
    contents: list[Located[ListItemContent]] = [first]  # type: ignore[list-item]

    while not rest.at_end:
        try:
            blank_line(rest)
        except ParseFailure:
            pass
        else:
            break
        if _indentation(rest) <= indentation:
            break

        try:
            rest, sublist = list_(rest)
        except ParseFailure:
            line_start, _ = space0(rest)
            rest, line = located_inline_element_container(line_start)
            rest, _ = end_of_line_or_input(rest)
            contents.append(line)  # type: ignore[arg-type]
        else:
            contents.append(sublist)  # type: ignore[arg-type]

    return rest, contents


def _list_item(span: Span) -> tuple[Span, tuple[int, str, Located[ListItem]]]:
    beginning_of_line(span)
    start, spaces = space0(span)
    indentation = len(spaces)
    marker = ""

    def _item(item_span: Span) -> tuple[Span, ListItem]:
        nonlocal marker
        rest, (item_type, suffix, marker) = list_item_prefix(item_span)
        try:
            rest, status = todo_status(rest)
        except ParseFailure:
            status = None
        rest, contents = _item_contents(rest, indentation)
        return rest, ListItem(
            item_type=item_type,
            suffix=suffix,
            contents=contents,
            attributes=ListItemAttributes(todo_status=status),
        )

    rest, item = capture(_item)(start)
    return rest, (indentation, marker, item)


def list_item(span: Span) -> tuple[Span, Located[ListItem]]:
    """A single item, without its position among siblings."""
    rest, (_, _, item) = context("List Item", _list_item)(span)
    return rest, item


def _normalize(items: list[tuple[str, ListItem]]) -> None:
    """Assign positions and make every item share the head item's marker.

    A head item with a letter marker makes the list roman when every
    marker is the roman numeral of its position (in the head's case), and
    alphabetic otherwise.
    """
    for pos, (_, item) in enumerate(items):
        item.pos = pos

    head = items[0][1]
    if head.item_type in _ALPHABETIC_TYPES:
        uppercase = head.item_type in _UPPERCASE_TYPES
        roman = all(
            marker == (pos_to_roman(pos).upper() if uppercase else pos_to_roman(pos))
            for pos, (marker, _) in enumerate(items)
        )
        if roman:
            head.item_type = OrderedListItemType.UPPERCASE_ROMAN if uppercase else OrderedListItemType.LOWERCASE_ROMAN
        else:
            head.item_type = (
                OrderedListItemType.UPPERCASE_ALPHABET if uppercase else OrderedListItemType.LOWERCASE_ALPHABET
            )

    for _, item in items[1:]:
        item.item_type = head.item_type
        item.suffix = head.suffix


def _list(span: Span) -> tuple[Span, List]:
    rest, (indentation, marker, first) = _list_item(span)
    items: list[tuple[str, ListItem]] = [(marker, first.element)]
    located_items = [first]

    while not rest.at_end and _indentation(rest) == indentation:
        try:
            after, (_, marker, item) = _list_item(rest)
        except ParseFailure:
            break
        items.append((marker, item.element))
        located_items.append(item)
        rest = after

    _normalize(items)
    return rest, List(located_items)


def list_(span: Span) -> tuple[Span, Located[List]]:
    return context("List", capture(_list))(span)


__all__ = ["list_", "list_item", "list_item_prefix", "todo_status"]
