#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/renderers/__init__.py
"""Renderers that turn a parsed page into an output format."""

from __future__ import annotations

from vimwiki_ast.renderers.base import BaseRenderer
from vimwiki_ast.renderers.html import HtmlRenderer
from vimwiki_ast.renderers.vimwiki import VimwikiRenderer

__all__ = ["BaseRenderer", "HtmlRenderer", "VimwikiRenderer"]
