#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/renderers/vimwiki.py
"""Vimwiki rendering from a parsed vimwiki page.

This module provides :class:`VimwikiRenderer`, a visitor that writes a
:class:`~vimwiki_ast.ast.nodes.Page` back out as vimwiki text in a
normalized layout: one blank line between blocks, list items renumbered
from their positions, sublists indented by ``indent_str`` and table
columns padded to a common width.

Parsing the output again yields the same page, up to the whitespace the
layout normalizes (trimmed lines and padded table cells).

Examples
--------
    >>> from vimwiki_ast.parsers.page import parse_page
    >>> VimwikiRenderer().render_to_string(parse_page("=Title=\\n* one\\n* two\\n"))
    '= Title =\\n\\n* one\\n* two\\n'

"""

from __future__ import annotations

import re
from pathlib import Path
from typing import IO, Optional, Union

from vimwiki_ast.ast.links import LinkData, LinkKind, decode_uri, encode_uri
from vimwiki_ast.ast.lists import List, ListItem
from vimwiki_ast.ast.nodes import (
    Blockquote,
    CodeBlock,
    CodeInline,
    Comment,
    CommentInline,
    CommentKind,
    DecoratedText,
    Decoration,
    Definition,
    DefinitionList,
    Divider,
    Header,
    InlineElementContainer,
    Keyword,
    Link,
    MathBlock,
    MathInline,
    Page,
    Paragraph,
    Placeholder,
    PlaceholderKind,
    Tags,
    Term,
    Text,
)
from vimwiki_ast.ast.tables import Cell, CellKind, ColumnAlign, Table
from vimwiki_ast.ast.visitors import NodeVisitor
from vimwiki_ast.constants import (
    DIARY_LINK_PREFIX,
    INDEXED_INTERWIKI_PREFIX,
    MIN_INDENTED_BLOCKQUOTE,
    NAMED_INTERWIKI_PREFIX,
)
from vimwiki_ast.exceptions import RenderingError
from vimwiki_ast.options.vimwiki import VimwikiRendererOptions
from vimwiki_ast.renderers.base import BaseRenderer

_DECORATION_DELIMITERS = {
    Decoration.BOLD: "*",
    Decoration.ITALIC: "_",
    Decoration.STRIKEOUT: "~~",
    Decoration.SUPERSCRIPT: "^",
    Decoration.SUBSCRIPT: ",,",
}

# A paragraph line reading like a divider or a placeholder would start that
# block at the beginning of a line, but not when indented
_UNSAFE_CONTINUATION = re.compile(r"-{4,}\s*$|%[^\s%]")


def _display_uri(uri: str) -> str:
    """Decoded uri when encoding it again gives back ``uri``, else ``uri`` as stored."""
    decoded = decode_uri(uri)
    return decoded if encode_uri(decoded) == uri else uri


def _align_marker(align: Optional[ColumnAlign], width: int) -> str:
    if align is ColumnAlign.CENTER:
        return ":" + "-" * max(width - 2, 1) + ":"
    if align is ColumnAlign.LEFT:
        return ":" + "-" * max(width - 1, 1)
    if align is ColumnAlign.RIGHT:
        return "-" * max(width - 1, 1) + ":"
    return "-" * max(width, 1)


class VimwikiRenderer(NodeVisitor, BaseRenderer):
    """Render a vimwiki page to vimwiki text.

    Parameters
    ----------
    options : VimwikiRendererOptions or None, default = None
        Formatting options

    Examples
    --------
    Keeping table cells as written:

        >>> renderer = VimwikiRenderer(VimwikiRendererOptions(pad_table_cells=False))
        >>> renderer.render_to_string(parse_page("|a  |b|\\n|---|-|\\n"))
        '|a  |b|\\n|---|---|\\n'

    """

    def __init__(self, options: VimwikiRendererOptions | None = None):
        BaseRenderer._validate_options_type(options, VimwikiRendererOptions, "vimwiki")
        options = options or VimwikiRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: VimwikiRendererOptions = options
        self._reset()

    def _reset(self) -> None:
        self._output: list[str] = []
        self._level = 0

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def render_to_string(self, page: Page) -> str:
        """Render a page to vimwiki text.

        Raises
        ------
        RenderingError
            If an interwiki link carries neither a wiki index nor a wiki name

        """
        self._reset()
        page.accept(self)
        return "".join(self._output)

    def render(self, page: Page, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Render a page and write the text to ``output``."""
        self.write_text_output(self.render_to_string(page), output)

    def _render_container(self, container: InlineElementContainer) -> str:
        saved_output = self._output
        self._output = []
        for element in container.elements:
            element.accept(self)
        result = "".join(self._output)
        self._output = saved_output
        return result

    def _line(self, container: InlineElementContainer) -> str:
        text = self._render_container(container)
        return text.strip() if self.options.trim_lines else text

    def _indent(self) -> str:
        return self.options.indent_str * self._level

    # ------------------------------------------------------------------
    # Block elements
    # ------------------------------------------------------------------

    def visit_page(self, node: Page) -> None:
        """Render every block, separating blocks with a blank line.

        Placeholders sit on the line directly above the next block.
        """
        previous = None
        for block in node.elements:
            if previous is not None and not isinstance(previous, Placeholder):
                self._output.append("\n")
            block.accept(self)
            previous = block.element

    def visit_header(self, node: Header) -> None:
        equals = "=" * node.level
        padding = " " if self.options.header_padding else ""
        indent = self.options.indent_str if node.centered else ""
        text = self._render_container(node.content).strip()
        self._output.append(f"{indent}{equals}{padding}{text}{padding}{equals}\n")

    def visit_paragraph(self, node: Paragraph) -> None:
        for idx, line in enumerate(node.lines):
            text = self._line(line)
            if idx > 0 and _UNSAFE_CONTINUATION.match(text):
                text = self.options.indent_str + text
            self._output.append(f"{text}\n")

    def visit_definition_list(self, node: DefinitionList) -> None:
        """Render ``term:: definition`` lines, extra definitions on ``::`` lines."""
        for item in node.items:
            item.term.accept(self)
            self._output.append("::")
            for idx, definition in enumerate(item.definitions):
                if idx == 0 and not self.options.term_on_line_by_itself:
                    self._output.append(" ")
                else:
                    self._output.append("\n:: ")
                definition.accept(self)
            self._output.append("\n")

    def visit_term(self, node: Term) -> None:
        self._output.append(self._line(node.content))

    def visit_definition(self, node: Definition) -> None:
        self._output.append(self._line(node.content))

    def visit_list(self, node: List) -> None:
        for item in node.items:
            item.accept(self)

    def visit_list_item(self, node: ListItem) -> None:
        """Render an item's marker line, then its deeper-indented lines and sublists."""
        marker = node.to_prefix()
        if node.todo_status is not None:
            marker += f" [{node.todo_status.value}]"
        self._output.append(self._indent() + marker)

        self._level += 1
        try:
            for idx, content in enumerate(node.contents):
                element = content.element
                if isinstance(element, List):
                    if idx == 0:
                        self._output.append("\n")
                    element.accept(self)
                elif idx == 0:
                    self._output.append(f" {self._line(element)}\n")
                else:
                    self._output.append(f"{self._indent()}{self._line(element)}\n")
        finally:
            self._level -= 1

    def _cell_text(self, cell: Cell) -> Optional[str]:
        """Text of a content or span cell; None for alignment cells."""
        if cell.kind is CellKind.SPAN_ABOVE:
            return "\\/"
        if cell.kind is CellKind.SPAN_LEFT:
            return ">"
        if cell.kind is CellKind.ALIGN:
            return None
        text = self._render_container(cell.content) if cell.content is not None else ""
        return text.strip() if self.options.pad_table_cells else text

    def visit_table(self, node: Table) -> None:
        """Render every row, padding cells to their column width when enabled.

        Divider rows are rebuilt from the column alignment of each cell, so
        their dashes always span the padded column.
        """
        rows: list[list[tuple[Cell, Optional[str]]]] = []
        for row in range(node.row_count):
            cells = [(cell, self._cell_text(cell)) for cell in node.row(row)]
            rows.append(cells)

        widths = [1] * node.column_count
        for cells in rows:
            for col, (_, text) in enumerate(cells):
                if text is not None:
                    widths[col] = max(widths[col], len(text))

        for idx, cells in enumerate(rows):
            segments = []
            for col, (cell, text) in enumerate(cells):
                if not self.options.pad_table_cells:
                    segments.append(text if text is not None else _align_marker(cell.align, 3))
                elif text is None:
                    segments.append(_align_marker(cell.align, widths[col] + 2))
                else:
                    segments.append(f" {text.ljust(widths[col])} ")
            indent = self.options.indent_str if node.centered and idx == 0 else ""
            self._output.append(f"{indent}|{'|'.join(segments)}|\n")

    def visit_code_block(self, node: CodeBlock) -> None:
        opening = "{{{" + (node.language or "")
        if node.properties:
            opening += " " + " ".join(f'{key}="{value}"' for key, value in node.properties.items())
        body = "".join(f"{line}\n" for line in node.lines)
        self._output.append(f"{opening}\n{body}}}}}}}\n")

    def visit_math_block(self, node: MathBlock) -> None:
        environment = f"%{node.environment}%" if node.environment else ""
        body = "".join(f"{line}\n" for line in node.lines)
        self._output.append(f"{{{{${environment}\n{body}}}}}$\n")

    def visit_blockquote(self, node: Blockquote) -> None:
        """Render ``> `` lines, or indented lines when preferred and possible.

        Blank lines inside an arrow blockquote are written as empty lines,
        which still join the surrounding ``> `` lines into one blockquote.
        """
        lines = [line.strip() for line in node.lines] if self.options.trim_lines else list(node.lines)

        if self.options.prefer_indented_blockquote and all(line.strip() for line in lines):
            indent = self.options.indent_str
            while len(indent) < MIN_INDENTED_BLOCKQUOTE:
                indent += self.options.indent_str
            self._output.extend(f"{indent}{line.lstrip()}\n" for line in lines)
            return

        last = len(lines) - 1
        for idx, line in enumerate(lines):
            if not line and 0 < idx < last:
                self._output.append("\n")
            else:
                self._output.append(f"> {line}\n")

    def visit_divider(self, node: Divider) -> None:
        self._output.append("----\n")

    def visit_placeholder(self, node: Placeholder) -> None:
        if node.kind is PlaceholderKind.NO_HTML:
            self._output.append("%nohtml\n")
        elif node.kind is PlaceholderKind.DATE:
            date = node.date.isoformat() if node.date is not None else ""
            self._output.append(f"%date {date}\n")
        elif node.kind is PlaceholderKind.OTHER:
            self._output.append(f"%{node.name} {node.value}\n")
        else:
            self._output.append(f"%{node.kind.value} {node.value}\n")

    def visit_comment(self, node: Comment) -> None:
        self._output.append(self._comment(node.kind, node.lines) + "\n")

    # ------------------------------------------------------------------
    # Inline elements
    # ------------------------------------------------------------------

    def visit_text(self, node: Text) -> None:
        self._output.append(node.content)

    def visit_decorated_text(self, node: DecoratedText) -> None:
        delimiter = _DECORATION_DELIMITERS[node.kind]
        self._output.append(delimiter)
        for element in node.contents:
            element.accept(self)
        self._output.append(delimiter)

    def visit_keyword(self, node: Keyword) -> None:
        self._output.append(node.kind.value)

    def visit_tags(self, node: Tags) -> None:
        self._output.append(":" + "".join(f"{name}:" for name in node.names))

    def visit_code_inline(self, node: CodeInline) -> None:
        self._output.append(f"`{node.code}`")

    def visit_math_inline(self, node: MathInline) -> None:
        self._output.append(f"${node.formula}$")

    def visit_comment_inline(self, node: CommentInline) -> None:
        self._output.append(self._comment(node.kind, node.lines))

    @staticmethod
    def _comment(kind: CommentKind, lines: list[str]) -> str:
        if kind is CommentKind.LINE:
            return "%%" + (lines[0] if lines else "")
        return "%%+" + "\n".join(lines) + "+%%"

    def visit_link(self, node: Link) -> None:
        data = node.data
        if node.kind is LinkKind.RAW:
            self._output.append(data.uri)
        elif node.kind is LinkKind.TRANSCLUSION:
            self._output.append(self._transclusion(data))
        else:
            self._output.append(f"[[{self._target_prefix(node)}{self._link_body(data)}]]")

    def _target_prefix(self, link: Link) -> str:
        if link.kind is LinkKind.DIARY:
            return DIARY_LINK_PREFIX
        if link.kind is LinkKind.INDEXED_INTERWIKI:
            if link.index is None:
                raise RenderingError(f"Indexed interwiki link {link.data.uri!r} has no wiki index", rendering_stage="links")
            return f"{INDEXED_INTERWIKI_PREFIX}{link.index}:"
        if link.kind is LinkKind.NAMED_INTERWIKI:
            if link.name is None:
                raise RenderingError(f"Named interwiki link {link.data.uri!r} has no wiki name", rendering_stage="links")
            return f"{NAMED_INTERWIKI_PREFIX}{link.name}:"
        return ""

    def _link_body(self, data: LinkData) -> str:
        """``uri|description|key="value"`` as written between link delimiters."""
        parts = [_display_uri(data.uri)]
        description = data.description
        if isinstance(description, LinkData):
            parts.append(self._transclusion(description))
        elif description is not None:
            parts.append(description)
        if data.properties:
            if description is None:
                parts.append("")
            parts.append(" ".join(f'{key}="{value}"' for key, value in data.properties.items()))
        return "|".join(parts)

    def _transclusion(self, data: LinkData) -> str:
        return "{{" + self._link_body(data) + "}}"


__all__ = ["VimwikiRenderer"]
