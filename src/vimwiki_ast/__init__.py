"""vimwiki_ast - parse vimwiki markup into a located syntax tree.

vimwiki_ast reads vimwiki pages into a tree of block and inline elements.
Every element carries the region of the source it was parsed from (a
character offset and length, plus 1-based line/column positions), so
editors and language servers can map between the tree and the text.

Key Features
------------
- Full block grammar: headers, paragraphs, lists with todo progress,
  definition lists, tables with row/column spans, code and math blocks,
  blockquotes, dividers, placeholders and comments
- Inline grammar: decorations, wiki/interwiki/diary/raw/transclusion
  links, inline code and math, tags and keywords
- Id-indexed element trees with offset lookup and ancestor navigation
- JSON serialization with regions preserved
- HTML rendering with templates, interwiki link resolution and pygments
  highlighting
- Formatting back to normalized vimwiki text
- A file loader with a checksum-keyed parse cache, and a CLI

Requirements
------------
- Python 3.10+

Examples
--------
Parse a page:

    >>> from vimwiki_ast import parse_page
    >>> page = parse_page("= Title =\\n\\n- [X] done\\n- [ ] todo\\n")
    >>> page.elements[0].region.start.line
    1

Render it to HTML:

    >>> from vimwiki_ast import HtmlRenderer, HtmlRendererOptions
    >>> html = HtmlRenderer(HtmlRendererOptions(standalone=False)).render_to_string(page)

See Also
--------
vimwiki_ast.ast : element definitions, trees and serialization
vimwiki_ast.parsers : the grammar

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "vimwiki_ast requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("vimwiki-ast")
except PackageNotFoundError:
    __version__ = "0.0.0"

from vimwiki_ast.ast.location import Located, Position, Region
from vimwiki_ast.ast.nodes import Page
from vimwiki_ast.ast.serialization import page_from_json, page_to_json
from vimwiki_ast.ast.tree import ElementForest
from vimwiki_ast.exceptions import ParsingError, RenderingError, ValidationError, VimwikiAstError
from vimwiki_ast.loader import LoadedPage, WikiFileLoader
from vimwiki_ast.options.html import HtmlRendererOptions, WikiConfig
from vimwiki_ast.options.vimwiki import VimwikiParserOptions, VimwikiRendererOptions
from vimwiki_ast.parsers.page import VimwikiParser, parse_element, parse_page
from vimwiki_ast.renderers.html import HtmlRenderer
from vimwiki_ast.renderers.vimwiki import VimwikiRenderer

__all__ = [
    "__version__",
    "parse_page",
    "parse_element",
    "VimwikiParser",
    "VimwikiParserOptions",
    "HtmlRenderer",
    "HtmlRendererOptions",
    "VimwikiRenderer",
    "VimwikiRendererOptions",
    "WikiConfig",
    "WikiFileLoader",
    "LoadedPage",
    "Page",
    "Located",
    "Position",
    "Region",
    "ElementForest",
    "page_to_json",
    "page_from_json",
    "VimwikiAstError",
    "ParsingError",
    "RenderingError",
    "ValidationError",
]
