#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/ast/__init__.py
"""Located syntax tree for vimwiki pages.

The module consists of several components:

- location: positions, regions and the ``Located`` wrapper every element
  is carried in
- nodes: block and inline element classes
- links, lists, tables: the richer element families
- visitors and transforms: traversal and rewriting of a page
- tree: id-indexed views of a page for offset lookups and navigation
- serialization: JSON encoding of pages, including regions

Examples
--------
    >>> from vimwiki_ast import parse_page
    >>> from vimwiki_ast.ast import Header
    >>> page = parse_page("= Title =\\n")
    >>> isinstance(page.elements[0].element, Header)
    True

"""

from __future__ import annotations

from vimwiki_ast.ast.ids import IdAllocator, IdPool
from vimwiki_ast.ast.links import LinkData, LinkKind
from vimwiki_ast.ast.lists import (
    List,
    ListItem,
    ListItemAttributes,
    ListItemContent,
    ListItemSuffix,
    ListItemTodoStatus,
    ListItemType,
    OrderedListItemType,
    UnorderedListItemType,
)
from vimwiki_ast.ast.location import Located, Position, Region
from vimwiki_ast.ast.nodes import (
    BlockElement,
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
    DefinitionListItem,
    Divider,
    Element,
    Header,
    InlineBlockElement,
    InlineElement,
    InlineElementContainer,
    Keyword,
    KeywordKind,
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
from vimwiki_ast.ast.serialization import page_from_json, page_to_json
from vimwiki_ast.ast.tables import Cell, CellKind, CellPos, ColumnAlign, Table
from vimwiki_ast.ast.transforms import NodeTransformer, strip_comments
from vimwiki_ast.ast.tree import ElementForest, ElementNode, ElementTree
from vimwiki_ast.ast.utils import collect, count_element_types, walk
from vimwiki_ast.ast.visitors import NodeVisitor

__all__ = [
    # Location
    "Position",
    "Region",
    "Located",
    # Elements
    "Element",
    "BlockElement",
    "InlineElement",
    "InlineBlockElement",
    "Page",
    "Header",
    "Paragraph",
    "DefinitionList",
    "DefinitionListItem",
    "Term",
    "Definition",
    "List",
    "ListItem",
    "ListItemAttributes",
    "ListItemContent",
    "ListItemSuffix",
    "ListItemTodoStatus",
    "ListItemType",
    "OrderedListItemType",
    "UnorderedListItemType",
    "Table",
    "Cell",
    "CellKind",
    "CellPos",
    "ColumnAlign",
    "CodeBlock",
    "MathBlock",
    "Blockquote",
    "Divider",
    "Placeholder",
    "PlaceholderKind",
    "Comment",
    "CommentKind",
    "InlineElementContainer",
    "Text",
    "DecoratedText",
    "Decoration",
    "Link",
    "LinkData",
    "LinkKind",
    "CodeInline",
    "MathInline",
    "Tags",
    "Keyword",
    "KeywordKind",
    "CommentInline",
    # Traversal
    "NodeVisitor",
    "NodeTransformer",
    "strip_comments",
    "walk",
    "collect",
    "count_element_types",
    # Trees
    "IdAllocator",
    "IdPool",
    "ElementNode",
    "ElementTree",
    "ElementForest",
    # Serialization
    "page_to_json",
    "page_from_json",
]
