#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/options/vimwiki.py
"""Configuration options for parsing vimwiki pages and writing them back out."""

from __future__ import annotations

from dataclasses import dataclass, field

from vimwiki_ast.constants import (
    DEFAULT_HEADER_PADDING,
    DEFAULT_INDENT_STR,
    DEFAULT_KEEP_COMMENTS,
    DEFAULT_PAD_TABLE_CELLS,
    DEFAULT_PREFER_INDENTED_BLOCKQUOTE,
    DEFAULT_TERM_ON_LINE_BY_ITSELF,
    DEFAULT_TRACK_POSITIONS,
    DEFAULT_TRIM_LINES,
)
from vimwiki_ast.options.base import BaseParserOptions, BaseRendererOptions


@dataclass(frozen=True)
class VimwikiParserOptions(BaseParserOptions):
    """Configuration options for the vimwiki parser.

    Parameters
    ----------
    track_positions : bool, default True
        Record line/column start and end positions on every element region.
        When False, regions carry only an offset and a length, which is
        cheaper for large pages.
    keep_comments : bool, default True
        Keep comment blocks and inline comments in the parsed page.

    """

    track_positions: bool = field(
        default=DEFAULT_TRACK_POSITIONS,
        metadata={"help": "Record line/column positions for every element"},
    )
    keep_comments: bool = field(
        default=DEFAULT_KEEP_COMMENTS,
        metadata={"help": "Keep comments in the parsed page"},
    )


@dataclass(frozen=True)
class VimwikiRendererOptions(BaseRendererOptions):
    """Configuration options for writing a page back as vimwiki text.

    Parameters
    ----------
    indent_str : str, default four spaces
        Whitespace written once per nesting level: for sublists, list item
        continuation lines, indented blockquotes, and centered headers and
        tables
    header_padding : bool, default True
        Put a space between the ``=`` runs and the header text
    prefer_indented_blockquote : bool, default False
        Write blockquotes as indented lines instead of ``> `` lines. A
        blockquote holding blank lines is always written with ``> ``.
    term_on_line_by_itself : bool, default False
        Write every definition on its own ``::`` line, leaving the term
        line without a definition
    trim_lines : bool, default True
        Strip surrounding whitespace from paragraph, list item, definition
        and blockquote lines
    pad_table_cells : bool, default True
        Pad every cell with a space on each side and widen the cells of a
        column to a common width. When False, cell text is written exactly
        as it was parsed.

    """

    indent_str: str = field(
        default=DEFAULT_INDENT_STR,
        metadata={"help": "Whitespace written once per indentation level"},
    )
    header_padding: bool = field(
        default=DEFAULT_HEADER_PADDING,
        metadata={"help": "Put a space between the '=' runs and the header text"},
    )
    prefer_indented_blockquote: bool = field(
        default=DEFAULT_PREFER_INDENTED_BLOCKQUOTE,
        metadata={"help": "Write blockquotes as indented lines instead of '> ' lines"},
    )
    term_on_line_by_itself: bool = field(
        default=DEFAULT_TERM_ON_LINE_BY_ITSELF,
        metadata={"help": "Write every definition on its own '::' line"},
    )
    trim_lines: bool = field(
        default=DEFAULT_TRIM_LINES,
        metadata={"help": "Strip surrounding whitespace from each line of text"},
    )
    pad_table_cells: bool = field(
        default=DEFAULT_PAD_TABLE_CELLS,
        metadata={"help": "Pad table cells and align the columns"},
    )

    def __post_init__(self) -> None:
        """Validate formatting options.

        Raises
        ------
        ValueError
            If ``indent_str`` is empty or holds anything but spaces and tabs

        """
        super().__post_init__()
        if not self.indent_str or self.indent_str.strip(" \t"):
            raise ValueError(f"indent_str must be made of spaces or tabs, got {self.indent_str!r}")
