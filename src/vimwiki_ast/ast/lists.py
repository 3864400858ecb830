#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/ast/lists.py
"""Lists, list items and list marker arithmetic.

A :class:`List` owns located :class:`ListItem` values. Each item owns
located contents that are either a line of inline content or a nested
:class:`List`, so lists nest to any depth.

An item's ``pos`` is its zero-based index among its siblings. Ordered
markers are derived from it: ``pos_to_alphabet`` uses the bijective base-26
numbering of spreadsheet columns (``z`` is followed by ``aa``), and
``pos_to_roman`` renders ``pos + 1`` as a roman numeral.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional, Union

from vimwiki_ast.ast.location import Located
from vimwiki_ast.ast.nodes import BlockElement, Element, InlineBlockElement, InlineElementContainer
from vimwiki_ast.constants import ROMAN_NUMERALS

_ROMAN_VALUES = {"i": 1, "v": 5, "x": 10, "l": 50, "c": 100, "d": 500, "m": 1000}


def pos_to_alphabet(pos: int) -> str:
    """Convert a zero-based position to lowercase bijective base-26.

    Examples
    --------
        >>> [pos_to_alphabet(p) for p in (0, 25, 26, 701, 702)]
        ['a', 'z', 'aa', 'zz', 'aaa']

    """
    if pos < 0:
        raise ValueError(f"Position must be non-negative, got {pos}")

    letters = []
    i = pos
    while True:
        offset = i % 26
        letters.append(chr(ord("a") + offset))
        i -= offset
        if i <= 0:
            break
        i = i // 26 - 1
    return "".join(reversed(letters))


def alphabet_to_pos(marker: str) -> int:
    """Inverse of :func:`pos_to_alphabet` (case-insensitive)."""
    if not marker or not marker.isalpha() or not marker.isascii():
        raise ValueError(f"Not an alphabetic marker: {marker!r}")
    value = 0
    for char in marker.lower():
        value = value * 26 + (ord(char) - ord("a") + 1)
    return value - 1


def pos_to_roman(pos: int) -> str:
    """Render ``pos + 1`` as a lowercase roman numeral.

    Examples
    --------
        >>> pos_to_roman(0), pos_to_roman(24), pos_to_roman(704)
        ('i', 'xxv', 'dccv')

    """
    if pos < 0:
        raise ValueError(f"Position must be non-negative, got {pos}")
    number = pos + 1
    out = []
    for value, numeral in ROMAN_NUMERALS:
        count, number = divmod(number, value)
        out.append(numeral * count)
    return "".join(out)


def roman_to_pos(marker: str) -> int:
    """Inverse of :func:`pos_to_roman` (case-insensitive, not validating form)."""
    lowered = marker.lower()
    if not lowered or any(c not in _ROMAN_VALUES for c in lowered):
        raise ValueError(f"Not a roman numeral: {marker!r}")
    total = 0
    for idx, char in enumerate(lowered):
        value = _ROMAN_VALUES[char]
        if idx + 1 < len(lowered) and _ROMAN_VALUES[lowered[idx + 1]] > value:
            total -= value
        else:
            total += value
    return total - 1


class OrderedListItemType(Enum):
    NUMBER = "number"
    POUND = "pound"
    LOWERCASE_ALPHABET = "lowercase_alphabet"
    UPPERCASE_ALPHABET = "uppercase_alphabet"
    LOWERCASE_ROMAN = "lowercase_roman"
    UPPERCASE_ROMAN = "uppercase_roman"


class UnorderedListItemType(Enum):
    HYPHEN = "-"
    ASTERISK = "*"


ListItemType = Union[OrderedListItemType, UnorderedListItemType]


class ListItemSuffix(Enum):
    NONE = ""
    PERIOD = "."
    PAREN = ")"


class ListItemTodoStatus(Enum):
    """Todo state written as ``[ ]``, ``[.]``, ``[o]``, ``[O]``, ``[X]`` or ``[-]``."""

    INCOMPLETE = " "
    PARTIALLY_COMPLETE_1 = "."
    PARTIALLY_COMPLETE_2 = "o"
    PARTIALLY_COMPLETE_3 = "O"
    COMPLETE = "X"
    REJECTED = "-"

    @property
    def progress(self) -> Optional[float]:
        """Completion fraction, or None for rejected items."""
        return _TODO_PROGRESS[self]


_TODO_PROGRESS: dict[ListItemTodoStatus, Optional[float]] = {
    ListItemTodoStatus.INCOMPLETE: 0.0,
    ListItemTodoStatus.PARTIALLY_COMPLETE_1: 0.25,
    ListItemTodoStatus.PARTIALLY_COMPLETE_2: 0.5,
    ListItemTodoStatus.PARTIALLY_COMPLETE_3: 0.75,
    ListItemTodoStatus.COMPLETE: 1.0,
    ListItemTodoStatus.REJECTED: None,
}


@dataclass
class ListItemAttributes:
    todo_status: Optional[ListItemTodoStatus] = None


ListItemContent = Union[InlineElementContainer, "List"]


@dataclass
class ListItem(InlineBlockElement):
    """One item of a list.

    Parameters
    ----------
    item_type : OrderedListItemType or UnorderedListItemType
        Marker family of the item
    suffix : ListItemSuffix
        Punctuation after an ordered marker
    pos : int
        Zero-based index among siblings, assigned once the list is parsed
    contents : list of Located content
        Lines of inline content and nested lists, in source order
    attributes : ListItemAttributes
        Optional todo status

    """

    item_type: ListItemType
    suffix: ListItemSuffix = ListItemSuffix.NONE
    pos: int = 0
    contents: list[Located[ListItemContent]] = field(default_factory=list)
    attributes: ListItemAttributes = field(default_factory=ListItemAttributes)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_list_item(self)

    def into_children(self) -> list[Located[Element]]:
        children: list[Located[Element]] = []
        for content in self.contents:
            if isinstance(content.element, List):
                children.append(content)  # type: ignore[arg-type]
            else:
                children.extend(content.element.into_children())
        return children

    def is_ordered(self) -> bool:
        return isinstance(self.item_type, OrderedListItemType)

    def is_unordered(self) -> bool:
        return isinstance(self.item_type, UnorderedListItemType)

    @property
    def todo_status(self) -> Optional[ListItemTodoStatus]:
        return self.attributes.todo_status

    def is_todo(self) -> bool:
        return self.attributes.todo_status is not None

    def sublists(self) -> list[List]:
        return [c.element for c in self.contents if isinstance(c.element, List)]

    def inline_contents(self) -> list[InlineElementContainer]:
        return [c.element for c in self.contents if isinstance(c.element, InlineElementContainer)]

    def to_prefix(self) -> str:
        """Render the marker for this item's type, position and suffix."""
        item_type = self.item_type
        if isinstance(item_type, UnorderedListItemType):
            return item_type.value

        if item_type is OrderedListItemType.NUMBER:
            marker = str(self.pos + 1)
        elif item_type is OrderedListItemType.POUND:
            marker = "#"
        elif item_type is OrderedListItemType.LOWERCASE_ALPHABET:
            marker = pos_to_alphabet(self.pos)
        elif item_type is OrderedListItemType.UPPERCASE_ALPHABET:
            marker = pos_to_alphabet(self.pos).upper()
        elif item_type is OrderedListItemType.LOWERCASE_ROMAN:
            marker = pos_to_roman(self.pos)
        else:
            marker = pos_to_roman(self.pos).upper()
        return marker + self.suffix.value

    def compute_todo_progress(self) -> Optional[float]:
        """Completion of this item in [0.0, 1.0], or None.

        Items with sublists average the progress of every sublist item that
        has one (recursively); rejected and status-less items do not count.
        Without any such contribution the item's own status decides.
        """
        total = 0.0
        count = 0
        for sublist in self.sublists():
            for item in sublist.items:
                progress = item.element.compute_todo_progress()
                if progress is not None:
                    total += progress
                    count += 1

        if count > 0:
            return total / count
        if self.attributes.todo_status is None:
            return None
        return self.attributes.todo_status.progress


@dataclass
class List(BlockElement):
    """Sibling list items sharing one indentation.

    Parameters
    ----------
    items : list of Located[ListItem]
        Items in source order, ``pos`` matching their index

    """

    items: list[Located[ListItem]] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_list(self)

    def into_children(self) -> list[Located[Element]]:
        return list(self.items)  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[Located[ListItem]]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def is_ordered(self) -> bool:
        return bool(self.items) and self.items[0].element.is_ordered()

    def is_unordered(self) -> bool:
        return bool(self.items) and self.items[0].element.is_unordered()


__all__ = [
    "pos_to_alphabet",
    "alphabet_to_pos",
    "pos_to_roman",
    "roman_to_pos",
    "OrderedListItemType",
    "UnorderedListItemType",
    "ListItemType",
    "ListItemSuffix",
    "ListItemTodoStatus",
    "ListItemAttributes",
    "ListItemContent",
    "ListItem",
    "List",
]
