#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/utils/__init__.py
"""Utility helpers shared by the parser, loader and CLI."""
