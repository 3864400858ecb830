#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/parsers/page.py
"""Vimwiki page parser.

A page is a sequence of block elements separated by any number of blank
lines. Parsing is all-or-nothing: a page either parses completely or
raises :class:`~vimwiki_ast.exceptions.ParsingError` positioned at the
furthest point any grammar rule reached, together with the trail of rule
names that were active there.

Examples
--------
    >>> from vimwiki_ast.parsers.page import parse_page
    >>> page = parse_page("= Title =\\n\\nSome *bold* text\\n")
    >>> [type(block.element).__name__ for block in page]
    ['Header', 'Paragraph']

"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from vimwiki_ast.ast.location import Region
from vimwiki_ast.ast.nodes import Page
from vimwiki_ast.ast.transforms import strip_comments
from vimwiki_ast.exceptions import ParsingError, ValidationError
from vimwiki_ast.options.vimwiki import VimwikiParserOptions
from vimwiki_ast.parsers import blocks, inline, links, lists
from vimwiki_ast.parsers.base import BaseParser, ParserInput
from vimwiki_ast.parsers.combinators import ParseFailure, all_consuming, blank_line, context
from vimwiki_ast.parsers.span import SourceText, Span

logger = logging.getLogger(__name__)


def _page(span: Span) -> tuple[Span, Page]:
    elements = []
    rest = span
    while not rest.at_end:
        try:
            rest, _ = blank_line(rest)
            continue
        except ParseFailure:
            pass

        after, block = blocks.block_element(rest)
        if after.offset == rest.offset:
            raise ParseFailure(rest, "a block element that consumes input")
        elements.append(block)
        rest = after
    return rest, Page(elements)


page = context("Page", _page)

# Parsers that can be applied on their own through parse_element()
ELEMENT_PARSERS: dict[str, Callable[[Span], tuple[Span, Any]]] = {
    "page": page,
    "block_element": blocks.block_element,
    "header": blocks.header,
    "paragraph": blocks.paragraph,
    "definition_list": blocks.definition_list,
    "list": lists.list_,
    "list_item": lists.list_item,
    "table": blocks.table,
    "code_block": blocks.code_block,
    "math_block": blocks.math_block,
    "blockquote": blocks.blockquote,
    "divider": blocks.divider,
    "placeholder": blocks.placeholder,
    "comment": blocks.comment,
    "inline_element_container": inline.located_inline_element_container,
    "inline_element": inline.inline_element,
    "text": inline.text,
    "decorated_text": inline.decorated_text,
    "keyword": inline.keyword,
    "tags": inline.tags,
    "code_inline": inline.code_inline,
    "math_inline": inline.math_inline,
    "comment_inline": inline.comment_inline,
    "link": links.link,
    "wiki_link": links.wiki_link,
    "diary_link": links.diary_link,
    "indexed_interwiki_link": links.indexed_interwiki_link,
    "named_interwiki_link": links.named_interwiki_link,
    "raw_link": links.raw_link,
    "transclusion_link": links.transclusion_link,
}


def _to_parsing_error(failure: ParseFailure) -> ParsingError:
    span = failure.span
    source = span.source
    offset = min(span.offset, len(source))
    if source.track_positions:
        position = source.position(offset)
        region = Region(offset, 0, position, position)
        where = f"line {position.line}, column {position.column}"
    else:
        region = Region(offset, 0)
        where = f"offset {offset}"

    line_end = source.text.find("\n", offset)
    excerpt = source.text[offset:] if line_end == -1 else source.text[offset:line_end]
    message = f"Expected {failure.expected} at {where}"
    if excerpt:
        message += f": {excerpt[:40]!r}"
    return ParsingError(message, region=region, contexts=failure.contexts, parsing_stage="page")


def _run(parser: Callable[[Span], tuple[Span, Any]], text: str, track_positions: bool, stage: str) -> Any:
    span = Span(SourceText(text, track_positions=track_positions))
    try:
        _, result = all_consuming(parser)(span)
    except ParseFailure as failure:
        error = _to_parsing_error(failure)
        error.parsing_stage = stage
        raise error from None
    except RecursionError as e:
        raise ParsingError("Input is nested too deeply to parse", parsing_stage=stage, original_error=e) from e
    except Exception as e:
        raise ParsingError(f"Failed to parse vimwiki markup: {e}", parsing_stage=stage, original_error=e) from e
    return result


class VimwikiParser(BaseParser):
    """Convert vimwiki markup to a :class:`~vimwiki_ast.ast.nodes.Page`.

    Parameters
    ----------
    options : VimwikiParserOptions or None, default = None
        Parser configuration options

    Examples
    --------
    Basic parsing:

        >>> parser = VimwikiParser()
        >>> page = parser.parse("= Heading =\\n\\nThis is *bold*.")

    Parse a file without line/column positions:

        >>> parser = VimwikiParser(VimwikiParserOptions(track_positions=False))
        >>> page = parser.parse(Path("index.wiki"))

    """

    def __init__(self, options: VimwikiParserOptions | None = None):
        BaseParser._validate_options_type(options, VimwikiParserOptions, "vimwiki")
        options = options or VimwikiParserOptions()
        super().__init__(options)
        self.options: VimwikiParserOptions = options

    def parse(self, input_data: ParserInput) -> Page:
        """Parse vimwiki input into a Page.

        Parameters
        ----------
        input_data : str, Path, IO[bytes], IO[str] or bytes
            Markup to parse. A string naming an existing file is read from
            disk, any other string is parsed as markup.

        Returns
        -------
        Page
            The parsed page

        Raises
        ------
        ParsingError
            If the markup cannot be parsed as a page

        """
        text = self._load_text_content(input_data)
        return self.parse_text(text)

    def parse_text(self, text: str) -> Page:
        """Parse markup already held in memory."""
        start = time.perf_counter()
        result: Page = _run(page, text, self.options.track_positions, "page")
        if not self.options.keep_comments:
            result = strip_comments(result)

        elapsed = time.perf_counter() - start
        logger.debug(f"Parsed {len(text)} characters into {len(result.elements)} blocks in {elapsed * 1000:.1f}ms")
        return result


def parse_page(text: str, options: VimwikiParserOptions | None = None) -> Page:
    """Parse ``text`` as a vimwiki page.

    Raises
    ------
    ParsingError
        If the text cannot be parsed

    """
    return VimwikiParser(options).parse_text(text)


def parse_element(text: str, parser: str, track_positions: bool = True) -> Any:
    """Apply a single named parser to the whole of ``text``.

    Parameters
    ----------
    text : str
        Markup to parse; every character must be consumed
    parser : str
        Key of :data:`ELEMENT_PARSERS`, e.g. ``"header"`` or ``"link"``
    track_positions : bool, default True
        Record line/column positions on regions

    Returns
    -------
    Any
        What the parser produces, usually a ``Located`` element

    Raises
    ------
    ValidationError
        If ``parser`` is not a known parser name
    ParsingError
        If the parser does not match the whole text

    """
    try:
        element_parser = ELEMENT_PARSERS[parser]
    except KeyError:
        raise ValidationError(
            f"Unknown parser {parser!r}; expected one of: {', '.join(sorted(ELEMENT_PARSERS))}",
            parameter_name="parser",
            parameter_value=parser,
        ) from None
    return _run(element_parser, text, track_positions, parser)


__all__ = ["VimwikiParser", "parse_page", "parse_element", "ELEMENT_PARSERS", "page"]
