#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/parsers/span.py
"""Immutable cursor over the text being parsed.

A :class:`Span` is a view into a shared :class:`SourceText`: a start offset
and an exclusive end offset. Consuming input returns a new span; nothing is
ever mutated, so backtracking just means reusing an older span.

Sub-spans created with :meth:`Span.bounded` keep global offsets, which lets
nested parsers (decorated text contents, link descriptions) report regions
relative to the whole document.

"""

from __future__ import annotations

from bisect import bisect_right
from typing import Optional

from vimwiki_ast.ast.location import Position


class SourceText:
    """Text being parsed plus a lazily built index of line starts."""

    __slots__ = ("text", "track_positions", "_line_starts")

    def __init__(self, text: str, track_positions: bool = True):
        self.text = text
        self.track_positions = track_positions
        self._line_starts: Optional[list[int]] = None

    def __len__(self) -> int:
        return len(self.text)

    @property
    def line_starts(self) -> list[int]:
        if self._line_starts is None:
            starts = [0]
            find = self.text.find
            idx = find("\n")
            while idx != -1:
                starts.append(idx + 1)
                idx = find("\n", idx + 1)
            self._line_starts = starts
        return self._line_starts

    def position(self, offset: int) -> Position:
        """1-based line and column of ``offset``."""
        line_idx = bisect_right(self.line_starts, offset) - 1
        return Position(line=line_idx + 1, column=offset - self.line_starts[line_idx] + 1)


class Span:
    """View of ``source.text[offset:end]``.

    Parameters
    ----------
    source : SourceText or str
        Text being parsed (a ``str`` is wrapped automatically)
    offset : int, default = 0
        Start of the view
    end : int or None, default = None
        Exclusive end of the view, defaults to the end of the text

    """

    __slots__ = ("source", "offset", "end")

    def __init__(self, source: SourceText | str, offset: int = 0, end: Optional[int] = None):
        if isinstance(source, str):
            source = SourceText(source)
        self.source = source
        self.offset = offset
        self.end = len(source.text) if end is None else end

    @property
    def text(self) -> str:
        """Full source text (not just this view)."""
        return self.source.text

    @property
    def remaining(self) -> str:
        return self.source.text[self.offset : self.end]

    def __len__(self) -> int:
        return self.end - self.offset

    def __bool__(self) -> bool:
        return True

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            return self.remaining == other
        if isinstance(other, Span):
            return self.source is other.source and self.offset == other.offset and self.end == other.end
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        preview = self.remaining[:20]
        return f"Span(offset={self.offset}, end={self.end}, remaining={preview!r})"

    @property
    def at_end(self) -> bool:
        return self.offset >= self.end

    def peek(self, count: int = 1) -> str:
        return self.source.text[self.offset : min(self.offset + count, self.end)]

    def char(self) -> str:
        """Next character, or ``""`` at the end of the view."""
        if self.offset >= self.end:
            return ""
        return self.source.text[self.offset]

    def startswith(self, prefix: str) -> bool:
        return self.source.text.startswith(prefix, self.offset, self.end)

    def find(self, needle: str, start: int = 0) -> int:
        """Index of ``needle`` relative to this span's start, or -1."""
        idx = self.source.text.find(needle, self.offset + start, self.end)
        return -1 if idx == -1 else idx - self.offset

    def advance(self, count: int) -> Span:
        return Span(self.source, min(self.offset + count, self.end), self.end)

    def take(self, count: int) -> tuple[Span, Span]:
        """Split into (rest, first ``count`` characters)."""
        split = min(self.offset + count, self.end)
        return Span(self.source, split, self.end), Span(self.source, self.offset, split)

    def bounded(self, count: int) -> Span:
        """Sub-span of the next ``count`` characters, keeping global offsets."""
        return Span(self.source, self.offset, min(self.offset + count, self.end))

    def until(self, other: Span) -> Span:
        """Span from this span's start up to ``other``'s start."""
        return Span(self.source, self.offset, other.offset)

    def backtrack(self, count: int) -> Span:
        return Span(self.source, max(self.offset - count, 0), self.end)

    def consumed_since(self, earlier: Span) -> str:
        return self.source.text[earlier.offset : self.offset]

    @property
    def is_line_start(self) -> bool:
        return self.offset == 0 or self.source.text[self.offset - 1] == "\n"

    def line_end(self) -> int:
        """Offset of the next ``\\n`` within the view, or the view's end."""
        idx = self.source.text.find("\n", self.offset, self.end)
        return self.end if idx == -1 else idx

    def position(self) -> Position:
        return self.source.position(self.offset)


__all__ = ["SourceText", "Span"]
