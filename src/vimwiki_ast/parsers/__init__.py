#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/parsers/__init__.py
"""Parsers turning vimwiki markup into located elements.

Every grammar rule is a function ``span -> (rest, value)`` that raises
:class:`~vimwiki_ast.parsers.combinators.ParseFailure` when it does not
match. :class:`VimwikiParser` and :func:`parse_page` wrap the page rule
and turn failures into :class:`~vimwiki_ast.exceptions.ParsingError`.
"""

from __future__ import annotations

from vimwiki_ast.parsers.base import BaseParser
from vimwiki_ast.parsers.combinators import ParseFailure
from vimwiki_ast.parsers.page import ELEMENT_PARSERS, VimwikiParser, parse_element, parse_page
from vimwiki_ast.parsers.span import SourceText, Span

__all__ = [
    "BaseParser",
    "ELEMENT_PARSERS",
    "ParseFailure",
    "SourceText",
    "Span",
    "VimwikiParser",
    "parse_element",
    "parse_page",
]
