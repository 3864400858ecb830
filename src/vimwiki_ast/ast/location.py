#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/ast/location.py
"""Source location types shared by every element in the document model.

A parsed element never lives on its own: it is wrapped in :class:`Located`,
which pairs the element with the :class:`Region` of source text it was
parsed from. Regions always carry a character offset and length; line and
column :class:`Position` values are only filled in when the parser was asked
to track them (see ``VimwikiParserOptions.track_positions``).

Offsets index the source ``str`` directly (code points), so
``text[region.offset:region.end_offset]`` is the exact source of an element.
Lines and columns are 1-based.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Generic, Optional, TypeVar

if TYPE_CHECKING:
    from vimwiki_ast.ast.nodes import Element

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, order=True)
class Position:
    """A 1-based line and column within a source document.

    Positions order by line first and column second.

    Parameters
    ----------
    line : int
        Line number, starting at 1
    column : int
        Column number, starting at 1

    """

    line: int = 1
    column: int = 1

    def to_dict(self) -> dict[str, int]:
        return {"line": self.line, "column": self.column}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Position:
        return cls(line=int(data["line"]), column=int(data["column"]))


@dataclass(frozen=True)
class Region:
    """Span of source text covered by an element.

    Parameters
    ----------
    offset : int
        Offset of the first character of the region
    length : int
        Number of characters in the region
    start : Position or None, default = None
        Line/column of the first character, when positions are tracked
    end : Position or None, default = None
        Line/column of the last character (equal to ``start`` when empty)

    Raises
    ------
    ValueError
        If offset or length is negative, or ``end`` precedes ``start``

    """

    offset: int = 0
    length: int = 0
    start: Optional[Position] = None
    end: Optional[Position] = None

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError(f"Region offset must be non-negative, got {self.offset}")
        if self.length < 0:
            raise ValueError(f"Region length must be non-negative, got {self.length}")
        if self.start is not None and self.end is not None and self.end < self.start:
            raise ValueError(f"Region end {self.end} precedes start {self.start}")

    @property
    def end_offset(self) -> int:
        """Offset one past the last character of the region."""
        return self.offset + self.length

    @property
    def is_empty(self) -> bool:
        return self.length == 0

    @property
    def has_position(self) -> bool:
        return self.start is not None and self.end is not None

    def contains(self, offset: int) -> bool:
        """Return True if ``offset`` falls within this region.

        An empty region contains nothing.

        """
        return self.offset <= offset < self.offset + self.length

    def contains_region(self, other: Region) -> bool:
        return self.offset <= other.offset and other.end_offset <= self.end_offset

    def shift(self, amount: int) -> Region:
        """Return a copy moved ``amount`` characters (positions are dropped)."""
        return Region(offset=self.offset + amount, length=self.length)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"offset": self.offset, "length": self.length}
        if self.start is not None:
            data["start"] = self.start.to_dict()
        if self.end is not None:
            data["end"] = self.end.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Region:
        start = data.get("start")
        end = data.get("end")
        return cls(
            offset=int(data.get("offset", 0)),
            length=int(data.get("length", 0)),
            start=Position.from_dict(start) if start else None,
            end=Position.from_dict(end) if end else None,
        )

    def __str__(self) -> str:
        if self.start is not None and self.end is not None:
            return f"{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"[{self.offset}, {self.end_offset})"


@dataclass(eq=False)
class Located(Generic[T]):
    """A value paired with the region of source it was parsed from.

    Equality is "loose": two located values are equal when their elements
    are equal, whatever their regions. Use :meth:`strict_eq` to compare the
    regions as well (golden-file style comparisons).

    Parameters
    ----------
    element : T
        The wrapped value
    region : Region, default = Region()
        Where ``element`` came from

    Examples
    --------
        >>> from vimwiki_ast.ast.nodes import Text
        >>> a = Located(Text("abc"), Region(0, 3))
        >>> b = Located(Text("abc"), Region(10, 3))
        >>> a == b, a.strict_eq(b)
        (True, False)

    """

    element: T
    region: Region = field(default_factory=Region)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Located):
            return NotImplemented
        return bool(self.element == other.element)

    __hash__ = None  # type: ignore[assignment]

    def strict_eq(self, other: Located[Any]) -> bool:
        """Compare both element and region.

        Nested located values are compared strictly as well, so a strict
        match means every region in the subtree matches.

        """
        if not isinstance(other, Located) or self.region != other.region:
            return False
        mine = self.element
        theirs = other.element
        if type(mine) is not type(theirs):
            return False
        into_children = getattr(mine, "into_children", None)
        if into_children is None:
            return bool(mine == theirs)
        if mine != theirs:
            return False
        my_children = mine.into_children()
        their_children = theirs.into_children()  # type: ignore[attr-defined]
        return len(my_children) == len(their_children) and all(
            a.strict_eq(b) for a, b in zip(my_children, their_children)
        )

    def map(self, func: Callable[[T], U]) -> Located[U]:
        """Transform the element, keeping the region."""
        return Located(func(self.element), self.region)

    def accept(self, visitor: Any) -> Any:
        """Dispatch ``visitor`` to the wrapped element."""
        return self.element.accept(visitor)  # type: ignore[attr-defined]

    def into_children(self) -> list[Located[Element]]:
        into_children = getattr(self.element, "into_children", None)
        return into_children() if into_children is not None else []

    def __repr__(self) -> str:
        return f"Located({self.element!r}, {self.region})"


__all__ = ["Position", "Region", "Located"]
