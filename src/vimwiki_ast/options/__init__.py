#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/options/__init__.py
"""Option dataclasses for the parser and the renderers."""

from __future__ import annotations

from vimwiki_ast.options.base import BaseParserOptions, BaseRendererOptions, CloneFrozenMixin
from vimwiki_ast.options.html import HtmlRendererOptions, WikiConfig
from vimwiki_ast.options.vimwiki import VimwikiParserOptions, VimwikiRendererOptions

__all__ = [
    "BaseParserOptions",
    "BaseRendererOptions",
    "CloneFrozenMixin",
    "HtmlRendererOptions",
    "VimwikiParserOptions",
    "VimwikiRendererOptions",
    "WikiConfig",
]
