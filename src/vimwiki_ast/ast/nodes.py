#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/ast/nodes.py
"""Element classes for the vimwiki document model.

A parsed document is a :class:`Page` holding a sequence of located block
elements. Each element class supports the visitor pattern through
:meth:`Element.accept` and enumerates its nested located elements, in
reading order, through :meth:`Element.into_children`. The tree indexer
relies on that order.

Element Hierarchy
-----------------
All elements inherit from :class:`Element`, through one of three branches.

Block elements start at the beginning of a line:
    - Header, Paragraph, List, DefinitionList, Table
    - CodeBlock, MathBlock, Blockquote, Divider, Placeholder, Comment

Inline elements live inside a line of a block:
    - Text, DecoratedText, Link, CodeInline, MathInline
    - Tags, Keyword, CommentInline

Inline-block elements sit between the two:
    - ListItem, Term, Definition

Lists live in :mod:`vimwiki_ast.ast.lists` and tables in
:mod:`vimwiki_ast.ast.tables`.

"""

from __future__ import annotations

import datetime
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional

from vimwiki_ast.ast.links import LinkData, LinkKind
from vimwiki_ast.ast.location import Located


class Element(ABC):
    """Base class for every element of the document model."""

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this element.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """

    def into_children(self) -> list[Located[Element]]:
        """Return nested located elements in reading order."""
        return []


class BlockElement(Element, ABC):
    """Element that starts at the beginning of a line."""


class InlineElement(Element, ABC):
    """Element that lives within a single line of a block."""

    def to_text(self) -> str:
        """Return the plain text this element displays."""
        return ""


class InlineBlockElement(Element, ABC):
    """Element owned by a block that itself owns inline content."""


# ============================================================================
# Inline Elements
# ============================================================================


class Decoration(Enum):
    """Kind of decorated text, in the order decorations are tried."""

    BOLD = "bold"
    ITALIC = "italic"
    STRIKEOUT = "strikeout"
    SUPERSCRIPT = "superscript"
    SUBSCRIPT = "subscript"


class KeywordKind(Enum):
    DONE = "DONE"
    FIXED = "FIXED"
    FIXME = "FIXME"
    STARTED = "STARTED"
    TODO = "TODO"
    XXX = "XXX"


class CommentKind(Enum):
    LINE = "line"
    MULTI_LINE = "multi_line"


@dataclass
class Text(InlineElement):
    """Plain run of text.

    Parameters
    ----------
    content : str
        The text, never spanning a line break

    """

    content: str

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_text(self)

    def to_text(self) -> str:
        return self.content


@dataclass
class DecoratedText(InlineElement):
    """Bold, italic, strikeout, superscript or subscript text.

    Parameters
    ----------
    kind : Decoration
        Which decoration surrounds the contents
    contents : list of Located[InlineElement]
        Text, links, keywords and nested decorated text

    """

    kind: Decoration
    contents: list[Located[InlineElement]] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_decorated_text(self)

    def into_children(self) -> list[Located[Element]]:
        return list(self.contents)  # type: ignore[arg-type]

    def to_text(self) -> str:
        return "".join(c.element.to_text() for c in self.contents)


@dataclass
class Link(InlineElement):
    """A link of any kind.

    Parameters
    ----------
    kind : LinkKind
        Syntactic family of the link
    data : LinkData
        Target uri, description and properties
    index : int or None, default = None
        Wiki index for indexed interwiki links (``wiki1:``)
    name : str or None, default = None
        Wiki name for named interwiki links (``wn.Name:``)
    date : datetime.date or None, default = None
        Entry date for diary links

    """

    kind: LinkKind
    data: LinkData
    index: Optional[int] = None
    name: Optional[str] = None
    date: Optional[datetime.date] = None

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_link(self)

    def to_text(self) -> str:
        description = self.data.to_description_or_fallback()
        if isinstance(description, LinkData):
            return description.to_decoded_uri_string()
        return description


@dataclass
class CodeInline(InlineElement):
    code: str

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_code_inline(self)

    def to_text(self) -> str:
        return self.code


@dataclass
class MathInline(InlineElement):
    formula: str

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_math_inline(self)

    def to_text(self) -> str:
        return self.formula


@dataclass
class Tags(InlineElement):
    """A ``:tag1:tag2:`` group.

    Parameters
    ----------
    names : list of str
        Tag names in written order

    """

    names: list[str] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_tags(self)

    def to_text(self) -> str:
        return ":" + ":".join(self.names) + ":"


@dataclass
class Keyword(InlineElement):
    kind: KeywordKind

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_keyword(self)

    def to_text(self) -> str:
        return self.kind.value


@dataclass
class CommentInline(InlineElement):
    """Comment embedded in a line.

    Parameters
    ----------
    kind : CommentKind
        ``%%`` line comment or ``%%+ ... +%%`` multi-line comment
    lines : list of str
        Comment text, one entry per source line

    """

    kind: CommentKind
    lines: list[str] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_comment_inline(self)


@dataclass
class InlineElementContainer:
    """Ordered inline elements forming one line (or cell) of content.

    This is a container, not a tree node: the tree sees its elements
    directly.
    """

    elements: list[Located[InlineElement]] = field(default_factory=list)

    def __iter__(self) -> Iterator[Located[InlineElement]]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    def to_text(self) -> str:
        return "".join(e.element.to_text() for e in self.elements)

    def is_only_comments(self) -> bool:
        return all(isinstance(e.element, CommentInline) for e in self.elements)

    def into_children(self) -> list[Located[Element]]:
        return list(self.elements)  # type: ignore[arg-type]


# ============================================================================
# Block Elements
# ============================================================================


@dataclass
class Header(BlockElement):
    """Section header written as ``== text ==``.

    Parameters
    ----------
    level : int
        Header level, 1 through 6
    content : InlineElementContainer
        Header text
    centered : bool, default = False
        True when the header line started with whitespace

    """

    level: int
    content: InlineElementContainer = field(default_factory=InlineElementContainer)
    centered: bool = False

    def __post_init__(self) -> None:
        if not 1 <= self.level <= 6:
            raise ValueError(f"Header level must be 1-6, got {self.level}")

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_header(self)

    def into_children(self) -> list[Located[Element]]:
        return self.content.into_children()


@dataclass
class Paragraph(BlockElement):
    """Consecutive lines of inline content.

    Parameters
    ----------
    lines : list of InlineElementContainer
        One container per source line

    """

    lines: list[InlineElementContainer] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_paragraph(self)

    def into_children(self) -> list[Located[Element]]:
        return [element for line in self.lines for element in line.into_children()]

    def is_blank(self) -> bool:
        """True when the paragraph holds nothing but comments."""
        return all(line.is_only_comments() for line in self.lines)


@dataclass
class Term(InlineBlockElement):
    content: InlineElementContainer = field(default_factory=InlineElementContainer)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_term(self)

    def into_children(self) -> list[Located[Element]]:
        return self.content.into_children()


@dataclass
class Definition(InlineBlockElement):
    content: InlineElementContainer = field(default_factory=InlineElementContainer)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_definition(self)

    def into_children(self) -> list[Located[Element]]:
        return self.content.into_children()


@dataclass
class DefinitionListItem:
    """A term with its definitions (not itself a tree node)."""

    term: Located[Term]
    definitions: list[Located[Definition]] = field(default_factory=list)


@dataclass
class DefinitionList(BlockElement):
    """Terms written as ``term::`` followed by ``:: definition`` lines.

    Parameters
    ----------
    items : list of DefinitionListItem
        Terms in written order, each with at least one definition overall

    """

    items: list[DefinitionListItem] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_definition_list(self)

    def into_children(self) -> list[Located[Element]]:
        children: list[Located[Element]] = []
        for item in self.items:
            children.append(item.term)  # type: ignore[arg-type]
            children.extend(item.definitions)  # type: ignore[arg-type]
        return children

    def terms(self) -> list[str]:
        return [item.term.element.content.to_text() for item in self.items]

    def get(self, term: str) -> Optional[list[Located[Definition]]]:
        """Definitions of the first term whose text equals ``term``."""
        for item in self.items:
            if item.term.element.content.to_text() == term:
                return item.definitions
        return None


@dataclass
class CodeBlock(BlockElement):
    """Preformatted text fenced by ``{{{`` and ``}}}``.

    Parameters
    ----------
    language : str or None, default = None
        Language written after the opening fence
    properties : dict, default = empty dict
        ``key="value"`` pairs written after the opening fence
    lines : list of str, default = empty list
        Body lines with the common fence indentation removed

    """

    language: Optional[str] = None
    properties: dict[str, str] = field(default_factory=dict)
    lines: list[str] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_code_block(self)


@dataclass
class MathBlock(BlockElement):
    """Display math fenced by ``{{$`` and ``}}$``.

    Parameters
    ----------
    lines : list of str
        Formula lines
    environment : str or None, default = None
        Environment named as ``{{$%env%``

    """

    lines: list[str] = field(default_factory=list)
    environment: Optional[str] = None

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_math_block(self)


@dataclass
class Blockquote(BlockElement):
    """Quoted lines, written indented or with ``> `` prefixes.

    Blank lines between ``> `` lines are kept as empty strings.
    """

    lines: list[str] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_blockquote(self)


@dataclass
class Divider(BlockElement):
    """Horizontal rule, four or more ``-`` on a line."""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_divider(self)


class PlaceholderKind(Enum):
    TITLE = "title"
    NO_HTML = "nohtml"
    TEMPLATE = "template"
    DATE = "date"
    OTHER = "other"


@dataclass
class Placeholder(BlockElement):
    """A ``%name value`` directive line.

    Parameters
    ----------
    kind : PlaceholderKind
        Which directive this is
    value : str or None, default = None
        Title text, template name, or the value of an unknown directive
    name : str or None, default = None
        Directive name for ``PlaceholderKind.OTHER``
    date : datetime.date or None, default = None
        Date for ``%date``

    """

    kind: PlaceholderKind
    value: Optional[str] = None
    name: Optional[str] = None
    date: Optional[datetime.date] = None

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_placeholder(self)


@dataclass
class Comment(BlockElement):
    """Comment occupying whole lines on its own.

    Parameters
    ----------
    kind : CommentKind
        Line or multi-line comment
    lines : list of str
        Comment text, one entry per source line

    """

    kind: CommentKind
    lines: list[str] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_comment(self)


# ============================================================================
# Page
# ============================================================================


@dataclass
class Page:
    """A parsed wiki page.

    Parameters
    ----------
    elements : list of Located[BlockElement]
        Top-level block elements in source order

    """

    elements: list[Located[BlockElement]] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_page(self)

    def into_children(self) -> list[Located[Element]]:
        return list(self.elements)  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[Located[BlockElement]]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    def placeholders(self) -> list[Placeholder]:
        return [e.element for e in self.elements if isinstance(e.element, Placeholder)]

    @property
    def title(self) -> Optional[str]:
        """Text of the first ``%title`` placeholder, if any."""
        for placeholder in self.placeholders():
            if placeholder.kind is PlaceholderKind.TITLE:
                return placeholder.value
        return None


__all__ = [
    "Element",
    "BlockElement",
    "InlineElement",
    "InlineBlockElement",
    "Decoration",
    "KeywordKind",
    "CommentKind",
    "Text",
    "DecoratedText",
    "Link",
    "CodeInline",
    "MathInline",
    "Tags",
    "Keyword",
    "CommentInline",
    "InlineElementContainer",
    "Header",
    "Paragraph",
    "Term",
    "Definition",
    "DefinitionListItem",
    "DefinitionList",
    "CodeBlock",
    "MathBlock",
    "Blockquote",
    "Divider",
    "PlaceholderKind",
    "Placeholder",
    "Comment",
    "Page",
]
