#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/ast/visitors.py
"""Visitor pattern base class for the element model.

Every element implements ``accept(visitor)``, which dispatches to the
matching ``visit_*`` method. Renderers and transformers subclass
:class:`NodeVisitor` and implement one method per element type, which
keeps each algorithm in one place instead of spread across the node
classes.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from vimwiki_ast.ast.lists import List, ListItem
from vimwiki_ast.ast.nodes import (
    Blockquote,
    CodeBlock,
    CodeInline,
    Comment,
    CommentInline,
    DecoratedText,
    Definition,
    DefinitionList,
    Divider,
    Header,
    Keyword,
    Link,
    MathBlock,
    MathInline,
    Page,
    Paragraph,
    Placeholder,
    Tags,
    Term,
    Text,
)
from vimwiki_ast.ast.tables import Table


class NodeVisitor(ABC):
    """Abstract base class for element visitors.

    Subclasses implement a ``visit_*`` method for every element type. The
    return value is up to the visitor: renderers return None and write to
    an internal buffer, transformers return the replacement element.

    Examples
    --------
    Counting headers:

        >>> class HeaderCounter(NodeVisitor):
        ...     def __init__(self):
        ...         self.count = 0
        ...
        ...     def visit_page(self, node):
        ...         for block in node.elements:
        ...             block.accept(self)
        ...
        ...     def visit_header(self, node):
        ...         self.count += 1
        ...
        ...     # remaining visit_* methods do nothing

    """

    @abstractmethod
    def visit_page(self, node: Page) -> Any:
        """Visit a Page, the root of a parsed document.

        Parameters
        ----------
        node : Page
            The page to visit

        Returns
        -------
        Any
            Result of processing this node

        """
        pass

    # Block elements

    @abstractmethod
    def visit_header(self, node: Header) -> Any:
        pass

    @abstractmethod
    def visit_paragraph(self, node: Paragraph) -> Any:
        pass

    @abstractmethod
    def visit_definition_list(self, node: DefinitionList) -> Any:
        """Visit a DefinitionList; its terms and definitions are reached via ``items``."""
        pass

    @abstractmethod
    def visit_term(self, node: Term) -> Any:
        pass

    @abstractmethod
    def visit_definition(self, node: Definition) -> Any:
        pass

    @abstractmethod
    def visit_list(self, node: List) -> Any:
        pass

    @abstractmethod
    def visit_list_item(self, node: ListItem) -> Any:
        """Visit a ListItem, whose contents mix inline lines and nested lists."""
        pass

    @abstractmethod
    def visit_table(self, node: Table) -> Any:
        pass

    @abstractmethod
    def visit_code_block(self, node: CodeBlock) -> Any:
        pass

    @abstractmethod
    def visit_math_block(self, node: MathBlock) -> Any:
        pass

    @abstractmethod
    def visit_blockquote(self, node: Blockquote) -> Any:
        pass

    @abstractmethod
    def visit_divider(self, node: Divider) -> Any:
        pass

    @abstractmethod
    def visit_placeholder(self, node: Placeholder) -> Any:
        pass

    @abstractmethod
    def visit_comment(self, node: Comment) -> Any:
        pass

    # Inline elements

    @abstractmethod
    def visit_text(self, node: Text) -> Any:
        pass

    @abstractmethod
    def visit_decorated_text(self, node: DecoratedText) -> Any:
        pass

    @abstractmethod
    def visit_link(self, node: Link) -> Any:
        """Visit a Link of any kind (wiki, interwiki, diary, raw or transclusion)."""
        pass

    @abstractmethod
    def visit_code_inline(self, node: CodeInline) -> Any:
        pass

    @abstractmethod
    def visit_math_inline(self, node: MathInline) -> Any:
        pass

    @abstractmethod
    def visit_tags(self, node: Tags) -> Any:
        pass

    @abstractmethod
    def visit_keyword(self, node: Keyword) -> Any:
        pass

    @abstractmethod
    def visit_comment_inline(self, node: CommentInline) -> Any:
        pass
