#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the vimwiki_ast library.

This module centralizes the fixed vocabularies of the markup language and
the default values of every configurable option.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Markup Vocabulary - delimiters, keywords and markers of the language
3. Element Ids - id allocation defaults
4. Parser Defaults
5. HTML Rendering Defaults
6. Vimwiki Formatting Defaults
7. Loader and CLI Defaults
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

OutputFormat = Literal["json", "tree"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# =============================================================================
# Markup Vocabulary
# =============================================================================

MAX_HEADER_LEVEL = 6
MIN_DIVIDER_LENGTH = 4
MIN_INDENTED_BLOCKQUOTE = 4

# Schemes accepted for links written without [[ ]] brackets
RAW_LINK_SCHEMES = frozenset({"http", "https", "ftp", "file", "local", "mailto"})

DIARY_LINK_PREFIX = "diary:"
INDEXED_INTERWIKI_PREFIX = "wiki"
NAMED_INTERWIKI_PREFIX = "wn."

# Characters that may open a decorated text span
DECORATION_START_CHARS = "*_~^,"

ROMAN_NUMERALS = (
    (1000, "m"),
    (900, "cm"),
    (500, "d"),
    (400, "cd"),
    (100, "c"),
    (90, "xc"),
    (50, "l"),
    (40, "xl"),
    (10, "x"),
    (9, "ix"),
    (5, "v"),
    (4, "iv"),
    (1, "i"),
)
ROMAN_CHARS = "ivxlcdm"

# =============================================================================
# Element Ids
# =============================================================================

DEFAULT_ID_RANGE_SIZE = 10
MAX_ELEMENT_ID = 2**64 - 1

# =============================================================================
# Parser Defaults
# =============================================================================

DEFAULT_TRACK_POSITIONS = True
DEFAULT_KEEP_COMMENTS = True
DEFAULT_ENCODING = "utf-8"

# =============================================================================
# HTML Rendering Defaults
# =============================================================================

DEFAULT_LIST_IGNORE_NEWLINE = True
DEFAULT_PARAGRAPH_IGNORE_NEWLINE = True
DEFAULT_LINK_BASE_URL = "https://localhost"
DEFAULT_LINK_CANONICALIZE = False
DEFAULT_TOC_HEADER_TEXT = "Contents"
DEFAULT_CODE_THEME = "default"
DEFAULT_CODE_SERVER_SIDE = False
DEFAULT_INCLUDE_COMMENTS = False
DEFAULT_TEMPLATE_NAME = "default"
DEFAULT_TEMPLATE_EXT = "tpl"
DEFAULT_CSS_NAME = "style.css"
DEFAULT_WIKI_EXT = "wiki"
DEFAULT_DIARY_REL_PATH = "diary"
DEFAULT_HTML_EXT = "html"
DEFAULT_DIRECTORY_INDEX = "index"

DEFAULT_TEMPLATE_TEXT = """<!DOCTYPE html>
<html>
<head>
<link rel="Stylesheet" type="text/css" href="%root_path%%css%">
<title>%title%</title>
<meta http-equiv="Content-Type" content="text/html; charset=%encoding%">
<meta name="viewport" content="width=device-width, initial-scale=1">
</head>
<body>
%content%
</body>
</html>
"""

# CSS classes for todo list items, indexed by completion state
TODO_CSS_CLASSES = ("done0", "done1", "done2", "done3", "done4")
TODO_REJECTED_CSS_CLASS = "rejected"

# =============================================================================
# Vimwiki Formatting Defaults
# =============================================================================

DEFAULT_INDENT_STR = "    "
DEFAULT_HEADER_PADDING = True
DEFAULT_PREFER_INDENTED_BLOCKQUOTE = False
DEFAULT_TERM_ON_LINE_BY_ITSELF = False
DEFAULT_TRIM_LINES = True
DEFAULT_PAD_TABLE_CELLS = True

# =============================================================================
# Loader and CLI Defaults
# =============================================================================

CACHE_FILE_SUFFIX = ".json"
DEFAULT_CACHE_DIR_NAME = "vimwiki-ast"
ENV_PREFIX = "VIMWIKI_AST_"
CONFIG_FILE_NAMES = (".vimwiki-ast.toml", ".vimwiki-ast.yaml", ".vimwiki-ast.yml", ".vimwiki-ast.json")
PYPROJECT_TOOL_SECTION = "vimwiki-ast"
