#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/ast/transforms.py
"""Element transformers.

A :class:`NodeTransformer` rebuilds a page bottom-up. Each ``visit_*``
method returns the replacement element, or None to drop it; containers
drop children that were removed and are themselves dropped when nothing
is left in them. Regions of kept elements are preserved.

Examples
--------
Upper-casing all text:

    >>> class UpperCase(NodeTransformer):
    ...     def visit_text(self, node):
    ...         return Text(node.content.upper())
    >>> page = UpperCase().transform_page(page)

"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Optional

from vimwiki_ast.ast.lists import List, ListItem
from vimwiki_ast.ast.location import Located
from vimwiki_ast.ast.nodes import (
    Blockquote,
    CodeBlock,
    CodeInline,
    Comment,
    CommentInline,
    DecoratedText,
    Definition,
    DefinitionList,
    DefinitionListItem,
    Divider,
    Header,
    InlineElementContainer,
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
from vimwiki_ast.ast.visitors import NodeVisitor


class NodeTransformer(NodeVisitor):
    """Visitor returning a rebuilt copy of each element.

    Leaf elements are returned unchanged; override their ``visit_*``
    method to replace or drop them.
    """

    def transform_page(self, page: Page) -> Page:
        return self.visit_page(page)

    def _transform_located(self, located: Located[Any]) -> Optional[Located[Any]]:
        result = located.element.accept(self)
        if result is None:
            return None
        return Located(result, located.region)

    def _transform_all(self, items: list[Located[Any]]) -> list[Located[Any]]:
        results = []
        for located in items:
            transformed = self._transform_located(located)
            if transformed is not None:
                results.append(transformed)
        return results

    def transform_container(self, container: InlineElementContainer) -> InlineElementContainer:
        return InlineElementContainer(self._transform_all(container.elements))

    def visit_page(self, node: Page) -> Page:
        return Page(self._transform_all(node.elements))

    def visit_header(self, node: Header) -> Header:
        return replace(node, content=self.transform_container(node.content))

    def visit_paragraph(self, node: Paragraph) -> Optional[Paragraph]:
        lines = [self.transform_container(line) for line in node.lines]
        lines = [line for line in lines if line.elements]
        return Paragraph(lines) if lines else None

    def visit_definition_list(self, node: DefinitionList) -> Optional[DefinitionList]:
        items = []
        for item in node.items:
            term = self._transform_located(item.term)
            definitions = self._transform_all(item.definitions)
            if term is not None and definitions:
                items.append(DefinitionListItem(term, definitions))
        return DefinitionList(items) if items else None

    def visit_term(self, node: Term) -> Optional[Term]:
        content = self.transform_container(node.content)
        return Term(content) if content.elements else None

    def visit_definition(self, node: Definition) -> Optional[Definition]:
        content = self.transform_container(node.content)
        return Definition(content) if content.elements else None

    def visit_list(self, node: List) -> Optional[List]:
        items = self._transform_all(node.items)
        return List(items) if items else None

    def visit_list_item(self, node: ListItem) -> ListItem:
        contents = []
        for located in node.contents:
            if isinstance(located.element, InlineElementContainer):
                container = self.transform_container(located.element)
                if container.elements:
                    contents.append(Located(container, located.region))
            else:
                transformed = self._transform_located(located)
                if transformed is not None:
                    contents.append(transformed)
        return replace(node, contents=contents)

    def visit_table(self, node: Table) -> Table:
        cells = {}
        for pos, located in node.cells.items():
            cell = located.element
            if cell.content is not None:
                cell = replace(cell, content=self.transform_container(cell.content))
            cells[pos] = Located(cell, located.region)
        return replace(node, cells=cells)

    def visit_decorated_text(self, node: DecoratedText) -> Optional[DecoratedText]:
        contents = self._transform_all(node.contents)
        return DecoratedText(node.kind, contents) if contents else None

    def visit_code_block(self, node: CodeBlock) -> Optional[CodeBlock]:
        return node

    def visit_math_block(self, node: MathBlock) -> Optional[MathBlock]:
        return node

    def visit_blockquote(self, node: Blockquote) -> Optional[Blockquote]:
        return node

    def visit_divider(self, node: Divider) -> Optional[Divider]:
        return node

    def visit_placeholder(self, node: Placeholder) -> Optional[Placeholder]:
        return node

    def visit_comment(self, node: Comment) -> Optional[Comment]:
        return node

    def visit_text(self, node: Text) -> Optional[Text]:
        return node

    def visit_link(self, node: Link) -> Optional[Link]:
        return node

    def visit_code_inline(self, node: CodeInline) -> Optional[CodeInline]:
        return node

    def visit_math_inline(self, node: MathInline) -> Optional[MathInline]:
        return node

    def visit_tags(self, node: Tags) -> Optional[Tags]:
        return node

    def visit_keyword(self, node: Keyword) -> Optional[Keyword]:
        return node

    def visit_comment_inline(self, node: CommentInline) -> Optional[CommentInline]:
        return node


class CommentStripper(NodeTransformer):
    """Remove comment blocks and inline comments."""

    def visit_comment(self, node: Comment) -> None:
        return None

    def visit_comment_inline(self, node: CommentInline) -> None:
        return None


def strip_comments(page: Page) -> Page:
    """Return a copy of ``page`` without any comments.

    Paragraphs and other containers that held nothing but comments are
    removed along with them.
    """
    return CommentStripper().transform_page(page)


__all__ = ["NodeTransformer", "CommentStripper", "strip_comments"]
