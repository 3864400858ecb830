#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/parsers/blocks.py
"""Parsers for block elements.

Every block starts at the beginning of a line and consumes its trailing
line ending (or the end of input). :data:`block_element` tries the blocks
in a fixed order:

    header, definition list, list, table, code block, math block,
    blockquote, divider, placeholder, comment, paragraph

Paragraph is the fallback. A paragraph line is only taken while none of
the structural blocks could start on it, which is what ends a paragraph
directly above a header or a list without a blank line in between.
"""

from __future__ import annotations

import datetime
import re
from typing import Optional

from vimwiki_ast.ast.location import Located
from vimwiki_ast.ast.nodes import (
    BlockElement,
    Blockquote,
    CodeBlock,
    Comment,
    Definition,
    DefinitionList,
    DefinitionListItem,
    Divider,
    Header,
    InlineElementContainer,
    MathBlock,
    Paragraph,
    Placeholder,
    PlaceholderKind,
    Term,
)
from vimwiki_ast.ast.tables import Cell, CellKind, CellPos, ColumnAlign, Table
from vimwiki_ast.constants import MAX_HEADER_LEVEL, MIN_DIVIDER_LENGTH, MIN_INDENTED_BLOCKQUOTE
from vimwiki_ast.parsers.combinators import (
    ParseFailure,
    alt,
    any_line,
    beginning_of_line,
    blank_line,
    capture,
    context,
    end_of_line_or_input,
    key_value_pairs,
    line_ending,
    many1,
    not_,
    space0,
    space1,
    tag,
    take_line_until1,
    take_until_end_of_line_or_input,
    take_while1,
)
from vimwiki_ast.parsers.inline import comment_inline, inline_element_container
from vimwiki_ast.parsers.lists import list_
from vimwiki_ast.parsers.span import Span

_ALIGN_PATTERN = re.compile(r"(:?)-+(:?)")


def _inline_within(span: Span, length: int) -> InlineElementContainer:
    """Inline content of the next ``length`` characters."""
    _, content = inline_element_container(span.bounded(length))
    return content


# ============================================================================
# Header
# ============================================================================


def _header(span: Span) -> tuple[Span, Header]:
    beginning_of_line(span)
    rest, leading = space0(span)
    rest, equals = take_while1(lambda c: c == "=", "'='")(rest)
    level = len(equals)
    if level > MAX_HEADER_LEVEL:
        raise ParseFailure(span, f"at most {MAX_HEADER_LEVEL} '='")

    after, line = take_until_end_of_line_or_input(rest)
    closing = "=" * level
    body = line.rstrip()
    if not body.endswith(closing) or body[:-level].endswith("="):
        raise ParseFailure(rest, f"header closed by {closing!r}")

    body = body[:-level]
    content = body.strip()
    if not content:
        raise ParseFailure(rest, "header text")

    content_start = rest.advance(len(body) - len(body.lstrip()))
    rest, _ = end_of_line_or_input(after)
    return rest, Header(level=level, content=_inline_within(content_start, len(content)), centered=bool(leading))


def header(span: Span) -> tuple[Span, Located[Header]]:
    """``= text =`` through ``====== text ======``, centered when indented."""
    return context("Header", capture(_header))(span)


# ============================================================================
# Definition list
# ============================================================================


def _term(span: Span) -> tuple[Span, Term]:
    rest, raw = take_line_until1("::")(span)
    content = _inline_within(span, len(raw))
    rest, _ = tag("::")(rest)
    return rest, Term(content)


def _inline_definition(span: Span) -> tuple[Span, Definition]:
    start, _ = space1(span)
    rest, raw = take_until_end_of_line_or_input(start)
    if not raw.strip():
        raise ParseFailure(start, "definition text")
    return rest, Definition(_inline_within(start, len(raw)))


def _definition_line(span: Span) -> tuple[Span, Definition]:
    beginning_of_line(span)
    rest, _ = tag("::")(span)
    rest, _ = space1(rest)
    start = rest
    rest, raw = take_until_end_of_line_or_input(rest)
    if not raw:
        raise ParseFailure(start, "definition text")
    definition = Definition(_inline_within(start, len(raw)))
    rest, _ = end_of_line_or_input(rest)
    return rest, definition


definition_line = context("Definition Line", capture(_definition_line))


def _term_and_definitions(span: Span) -> tuple[Span, DefinitionListItem]:
    beginning_of_line(span)
    rest, term = capture(_term)(span)

    definitions: list[Located[Definition]] = []
    try:
        rest, inline = capture(_inline_definition)(rest)
    except ParseFailure:
        pass
    else:
        definitions.append(inline)
    rest, _ = space0(rest)
    rest, _ = end_of_line_or_input(rest)

    while not rest.at_end:
        try:
            rest, definition = definition_line(rest)
        except ParseFailure:
            break
        definitions.append(definition)

    if not definitions:
        raise ParseFailure(rest, "at least one definition for the term")
    return rest, DefinitionListItem(term, definitions)


def _definition_list(span: Span) -> tuple[Span, DefinitionList]:
    rest, items = many1(_term_and_definitions)(span)
    return rest, DefinitionList(items)


def definition_list(span: Span) -> tuple[Span, Located[DefinitionList]]:
    """``term:: definition`` lines, optionally followed by ``:: more`` lines."""
    return context("Definition List", capture(_definition_list))(span)


# ============================================================================
# Table
# ============================================================================


def _classify_cell(raw: str) -> tuple[CellKind, Optional[ColumnAlign]]:
    stripped = raw.strip()
    if stripped == "\\/":
        return CellKind.SPAN_ABOVE, None
    if stripped == ">":
        return CellKind.SPAN_LEFT, None

    match = _ALIGN_PATTERN.fullmatch(stripped)
    if match is None:
        return CellKind.CONTENT, None

    leading, trailing = bool(match.group(1)), bool(match.group(2))
    if leading and trailing:
        align = ColumnAlign.CENTER
    elif trailing:
        align = ColumnAlign.RIGHT
    elif leading:
        align = ColumnAlign.LEFT
    else:
        align = ColumnAlign.NONE
    return CellKind.ALIGN, align


def _cell(span: Span) -> tuple[Span, Cell]:
    rest, raw = take_line_until1("|")(span)
    kind, align = _classify_cell(raw)
    if kind is CellKind.CONTENT:
        return rest, Cell(kind, content=_inline_within(span, len(raw)))
    return rest, Cell(kind, align=align)


cell = context("Cell", capture(_cell))


def _row(span: Span) -> tuple[Span, list[Located[Cell]]]:
    rest, _ = tag("|")(span)
    rest, first = cell(rest)
    cells = [first]
    rest, _ = tag("|")(rest)
    while not rest.at_end and not rest.startswith("\n") and not rest.startswith("\r\n"):
        rest, next_cell = cell(rest)
        cells.append(next_cell)
        rest, _ = tag("|")(rest)
    rest, _ = end_of_line_or_input(rest)
    return rest, cells


row = context("Row", _row)


def _table(span: Span) -> tuple[Span, Table]:
    beginning_of_line(span)
    rest, leading = space0(span)
    rest, first = row(rest)
    rows = [first]

    while not rest.at_end:
        try:
            after, _ = space0(rest)
            after, cells = row(after)
        except ParseFailure:
            break
        rows.append(cells)
        rest = after

    cells_by_pos = {
        CellPos(row_idx, col_idx): located for row_idx, cells in enumerate(rows) for col_idx, located in enumerate(cells)
    }
    table = Table(cells_by_pos, centered=bool(leading))
    if all(table.is_divider_row(idx) for idx in range(table.row_count)):
        raise ParseFailure(span, "a table row that is not a divider")
    return rest, table


def table(span: Span) -> tuple[Span, Located[Table]]:
    """Rows of ``|cell|cell|``; leading spaces on the first row center it."""
    return context("Table", capture(_table))(span)


# ============================================================================
# Code and math blocks
# ============================================================================


def _strip_indentation(lines: list[str], indentation: int) -> list[str]:
    """Remove up to ``indentation`` leading whitespace characters from each line."""
    stripped = []
    for line in lines:
        leading = len(line) - len(line.lstrip())
        stripped.append(line[min(leading, indentation) :])
    return stripped


def _fenced_lines(span: Span, closing: str) -> tuple[Span, list[str], int]:
    """Body lines up to a ``closing`` fence line, and that fence's indentation."""

    def _fence(fence_span: Span) -> tuple[Span, int]:
        beginning_of_line(fence_span)
        rest, spaces = space0(fence_span)
        rest, _ = tag(closing)(rest)
        rest, _ = space0(rest)
        rest, _ = end_of_line_or_input(rest)
        return rest, len(spaces)

    lines: list[str] = []
    rest = span
    while True:
        try:
            rest, indentation = _fence(rest)
        except ParseFailure:
            pass
        else:
            return rest, lines, indentation

        if rest.at_end:
            raise ParseFailure(rest, f"{closing!r} closing the block")
        rest, line = any_line(rest)
        lines.append(line)


def _code_language(span: Span) -> tuple[Span, str]:
    rest, language = take_line_until1(" ")(span)
    if "=" in language:
        raise ParseFailure(span, "language name")
    return rest, language


def _code_block(span: Span) -> tuple[Span, CodeBlock]:
    beginning_of_line(span)
    rest, spaces = space0(span)
    rest, _ = tag("{{{")(rest)

    language: Optional[str] = None
    try:
        rest, language = _code_language(rest)
    except ParseFailure:
        pass
    rest, _ = space0(rest)
    properties: dict[str, str] = {}
    try:
        rest, properties = key_value_pairs(rest)
    except ParseFailure:
        pass
    rest, _ = space0(rest)
    rest, _ = end_of_line_or_input(rest)

    rest, lines, end_indentation = _fenced_lines(rest, "}}}")
    lines = _strip_indentation(lines, min(len(spaces), end_indentation))
    return rest, CodeBlock(language=language, properties=properties, lines=lines)


def code_block(span: Span) -> tuple[Span, Located[CodeBlock]]:
    """``{{{lang key="value"`` ... ``}}}`` preformatted text."""
    return context("Code Block", capture(_code_block))(span)


def _math_environment(span: Span) -> tuple[Span, str]:
    rest, _ = tag("%")(span)
    rest, environment = take_line_until1("%")(rest)
    rest, _ = tag("%")(rest)
    return rest, environment


def _math_block(span: Span) -> tuple[Span, MathBlock]:
    beginning_of_line(span)
    rest, spaces = space0(span)
    rest, _ = tag("{{$")(rest)

    environment: Optional[str] = None
    try:
        rest, environment = _math_environment(rest)
    except ParseFailure:
        pass
    rest, _ = space0(rest)
    rest, _ = line_ending(rest)

    rest, lines, end_indentation = _fenced_lines(rest, "}}$")
    lines = _strip_indentation(lines, min(len(spaces), end_indentation))
    return rest, MathBlock(lines=lines, environment=environment)


def math_block(span: Span) -> tuple[Span, Located[MathBlock]]:
    """``{{$`` or ``{{$%environment%`` ... ``}}$`` display math."""
    return context("Math Block", capture(_math_block))(span)


# ============================================================================
# Blockquotes
# ============================================================================


def _indented_blockquote_line(span: Span) -> tuple[Span, str]:
    beginning_of_line(span)
    rest, spaces = space0(span)
    if len(spaces) < MIN_INDENTED_BLOCKQUOTE:
        raise ParseFailure(span, f"at least {MIN_INDENTED_BLOCKQUOTE} leading spaces")
    rest, line = take_until_end_of_line_or_input(rest)
    if not line.strip():
        raise ParseFailure(rest, "blockquote text")
    rest, _ = end_of_line_or_input(rest)
    return rest, line


def _indented_blockquote(span: Span) -> tuple[Span, Blockquote]:
    rest, lines = many1(_indented_blockquote_line)(span)
    return rest, Blockquote(lines)


indented_blockquote = context("Indented Blockquote", capture(_indented_blockquote))


def _arrow_blockquote_line(span: Span) -> tuple[Span, str]:
    beginning_of_line(span)
    rest, _ = space0(span)
    rest, _ = tag("> ")(rest)
    rest, line = take_until_end_of_line_or_input(rest)
    rest, _ = end_of_line_or_input(rest)
    return rest, line


def _arrow_blockquote(span: Span) -> tuple[Span, Blockquote]:
    rest, lines = many1(_arrow_blockquote_line)(span)

    # Blank lines only belong to the quote when another arrow line follows
    while not rest.at_end:
        after = rest
        blanks: list[str] = []
        while True:
            try:
                after, _ = blank_line(after)
            except ParseFailure:
                break
            blanks.append("")
        try:
            after, line = _arrow_blockquote_line(after)
        except ParseFailure:
            break
        lines.extend(blanks)
        lines.append(line)
        rest = after

    return rest, Blockquote(lines)


arrow_blockquote = context("Arrow Blockquote", capture(_arrow_blockquote))


def blockquote(span: Span) -> tuple[Span, Located[Blockquote]]:
    """Lines indented by four or more spaces, or lines starting with ``> ``."""
    return context("Blockquote", alt(indented_blockquote, arrow_blockquote))(span)


# ============================================================================
# Divider, placeholders and comments
# ============================================================================


def _divider(span: Span) -> tuple[Span, Divider]:
    beginning_of_line(span)
    rest, dashes = take_while1(lambda c: c == "-", "'-'")(span)
    if len(dashes) < MIN_DIVIDER_LENGTH:
        raise ParseFailure(span, f"at least {MIN_DIVIDER_LENGTH} '-'")
    rest, _ = end_of_line_or_input(rest)
    return rest, Divider()


def divider(span: Span) -> tuple[Span, Located[Divider]]:
    return context("Divider", capture(_divider))(span)


def _placeholder_text(span: Span) -> tuple[Span, str]:
    rest, _ = space1(span)
    rest, value = take_until_end_of_line_or_input(rest)
    if not value.strip():
        raise ParseFailure(rest, "placeholder value")
    return rest, value


def _placeholder_title(span: Span) -> tuple[Span, Placeholder]:
    rest, _ = tag("%title")(span)
    rest, value = _placeholder_text(rest)
    return rest, Placeholder(PlaceholderKind.TITLE, value=value)


def _placeholder_nohtml(span: Span) -> tuple[Span, Placeholder]:
    rest, _ = tag("%nohtml")(span)
    rest, _ = space0(rest)
    return rest, Placeholder(PlaceholderKind.NO_HTML)


def _placeholder_template(span: Span) -> tuple[Span, Placeholder]:
    rest, _ = tag("%template")(span)
    rest, value = _placeholder_text(rest)
    return rest, Placeholder(PlaceholderKind.TEMPLATE, value=value)


def _placeholder_date(span: Span) -> tuple[Span, Placeholder]:
    rest, _ = tag("%date")(span)
    rest, _ = space1(rest)
    rest, value = take_until_end_of_line_or_input(rest)
    try:
        date = datetime.datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        raise ParseFailure(span, "date as YYYY-MM-DD") from e
    return rest, Placeholder(PlaceholderKind.DATE, date=date)


_RESERVED_PLACEHOLDERS = ("%title", "%nohtml", "%template", "%date")


def _placeholder_other(span: Span) -> tuple[Span, Placeholder]:
    for reserved in _RESERVED_PLACEHOLDERS:
        not_(tag(reserved))(span)
    rest, _ = tag("%")(span)
    rest, name = take_while1(lambda c: c not in " \t%\r\n", "placeholder name")(rest)
    rest, value = _placeholder_text(rest)
    return rest, Placeholder(PlaceholderKind.OTHER, value=value, name=name)


def _placeholder(span: Span) -> tuple[Span, Placeholder]:
    beginning_of_line(span)
    rest, result = alt(
        context("Placeholder Title", _placeholder_title),
        context("Placeholder NoHtml", _placeholder_nohtml),
        context("Placeholder Template", _placeholder_template),
        context("Placeholder Date", _placeholder_date),
        context("Placeholder Other", _placeholder_other),
    )(span)
    rest, _ = end_of_line_or_input(rest)
    return rest, result


def placeholder(span: Span) -> tuple[Span, Located[Placeholder]]:
    """``%title``, ``%nohtml``, ``%template``, ``%date`` or any ``%name value``."""
    return context("Placeholder", capture(_placeholder))(span)


def _comment(span: Span) -> tuple[Span, Comment]:
    beginning_of_line(span)
    rest, _ = space0(span)
    rest, located = comment_inline(rest)
    rest, _ = space0(rest)
    rest, _ = end_of_line_or_input(rest)
    inline = located.element
    return rest, Comment(inline.kind, list(inline.lines))


def comment(span: Span) -> tuple[Span, Located[Comment]]:
    """A comment with nothing but whitespace around it on its lines."""
    return context("Comment", capture(_comment))(span)


# ============================================================================
# Paragraph
# ============================================================================


def _continue_paragraph(span: Span) -> tuple[Span, None]:
    for parser in (
        header,
        definition_list,
        list_,
        table,
        code_block,
        math_block,
        blank_line,
        arrow_blockquote,
        divider,
        placeholder,
    ):
        not_(parser)(span)
    return span, None


def _paragraph_line(span: Span) -> tuple[Span, InlineElementContainer]:
    rest, _ = _continue_paragraph(span)
    rest, _ = space0(rest)
    rest, line = inline_element_container(rest)
    rest, _ = end_of_line_or_input(rest)
    return rest, line


def _paragraph(span: Span) -> tuple[Span, Paragraph]:
    rest, lines = many1(_paragraph_line)(span)
    return rest, Paragraph(lines)


def paragraph(span: Span) -> tuple[Span, Located[Paragraph]]:
    return context("Paragraph", capture(_paragraph))(span)


# ============================================================================
# Block elements
# ============================================================================


def _block_element(span: Span) -> tuple[Span, Located[BlockElement]]:
    return alt(
        header,
        definition_list,
        list_,
        table,
        code_block,
        math_block,
        blockquote,
        divider,
        placeholder,
        comment,
        paragraph,
    )(span)


block_element = context("Block Element", _block_element)


__all__ = [
    "header",
    "definition_list",
    "table",
    "code_block",
    "math_block",
    "blockquote",
    "indented_blockquote",
    "arrow_blockquote",
    "divider",
    "placeholder",
    "comment",
    "paragraph",
    "block_element",
]
