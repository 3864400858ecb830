#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the inline element parsers."""

import pytest

from vimwiki_ast.ast.links import LinkKind
from vimwiki_ast.ast.location import Located, Position, Region
from vimwiki_ast.ast.nodes import (
    CodeInline,
    CommentInline,
    CommentKind,
    DecoratedText,
    Decoration,
    Keyword,
    KeywordKind,
    Link,
    MathInline,
    Tags,
    Text,
)
from vimwiki_ast.exceptions import ParsingError
from vimwiki_ast.parsers.page import parse_element


def _inline(text: str) -> list:
    """Elements of an inline container parsed from ``text``."""
    return [located.element for located in parse_element(text, "inline_element_container").element.elements]


@pytest.mark.unit
class TestText:
    """Test plain text runs."""

    def test_plain_text(self) -> None:
        """Test a line without markup is a single text element."""
        assert _inline("just some words") == [Text("just some words")]

    def test_text_stops_before_other_elements(self) -> None:
        """Test text ends where a decorated element starts."""
        assert _inline("abc*bold*def") == [
            Text("abc"),
            DecoratedText(Decoration.BOLD, [Located(Text("bold"))]),
            Text("def"),
        ]

    def test_unmatched_delimiter_is_text(self) -> None:
        """Test an unclosed delimiter is read as plain text."""
        assert _inline("2 * 3 is six") == [Text("2 * 3 is six")]

    def test_text_does_not_cross_lines(self) -> None:
        """Test the container stops at the line ending."""
        with pytest.raises(ParsingError):
            parse_element("one\ntwo", "inline_element_container")

    def test_text_before_raw_link(self) -> None:
        """Test text ends where a raw link's scheme begins."""
        elements = _inline("see https://example.com now")
        assert elements[0] == Text("see ")
        assert isinstance(elements[1], Link)
        assert elements[1].kind is LinkKind.RAW
        assert elements[1].data.uri == "https://example.com"
        assert elements[2] == Text(" now")


@pytest.mark.unit
class TestDecoratedText:
    """Test decorated text parsing."""

    @pytest.mark.parametrize(
        "markup,kind",
        [
            ("*word*", Decoration.BOLD),
            ("_word_", Decoration.ITALIC),
            ("~~word~~", Decoration.STRIKEOUT),
            ("^word^", Decoration.SUPERSCRIPT),
            (",,word,,", Decoration.SUBSCRIPT),
        ],
    )
    def test_decorations(self, markup: str, kind: Decoration) -> None:
        """Test every decoration delimiter."""
        located = parse_element(markup, "decorated_text")
        assert located.element.kind is kind
        assert located.element.to_text() == "word"

    def test_nested_decorations(self) -> None:
        """Test decorated text nested in decorated text."""
        located = parse_element("*_both_*", "decorated_text")
        outer = located.element
        assert outer.kind is Decoration.BOLD
        inner = outer.contents[0].element
        assert isinstance(inner, DecoratedText)
        assert inner.kind is Decoration.ITALIC
        assert inner.contents[0].element == Text("both")

    def test_bold_containing_link_and_keyword(self) -> None:
        """Test decorated contents may hold links and keywords."""
        located = parse_element("*TODO see [[Page]]*", "decorated_text")
        kinds = [type(c.element) for c in located.element.contents]
        assert kinds == [Keyword, Text, Link]

    def test_regions_are_absolute(self) -> None:
        """Test nested content regions use offsets within the whole text."""
        container = parse_element("abc*bold*def", "inline_element_container").element
        decorated = container.elements[1]
        assert decorated.region == Region(3, 6, Position(1, 4), Position(1, 9))
        inner = decorated.element.contents[0]
        assert inner.region.offset == 4
        assert inner.region.length == 4

    def test_decoration_with_comment_is_not_decorated(self) -> None:
        """Test content holding a comment marker is not decorated."""
        elements = _inline("*a %% b*")
        assert not any(isinstance(e, DecoratedText) for e in elements)


@pytest.mark.unit
class TestSimpleInlineElements:
    """Test keywords, tags, code, math and comments."""

    @pytest.mark.parametrize("kind", list(KeywordKind))
    def test_keywords(self, kind: KeywordKind) -> None:
        """Test every keyword."""
        assert parse_element(kind.value, "keyword").element == Keyword(kind)

    def test_keyword_in_text(self) -> None:
        """Test a keyword splits surrounding text."""
        assert _inline("a TODO b") == [Text("a "), Keyword(KeywordKind.TODO), Text(" b")]

    def test_tags(self) -> None:
        """Test a run of tag names."""
        assert parse_element(":one:two:", "tags").element == Tags(["one", "two"])

    def test_tag_name_cannot_contain_space(self) -> None:
        """Test a space ends a tag name without closing it."""
        with pytest.raises(ParsingError):
            parse_element(":one two:", "tags")

    def test_code_inline(self) -> None:
        """Test code between backticks."""
        assert parse_element("`x = 1`", "code_inline").element == CodeInline("x = 1")

    def test_math_inline(self) -> None:
        """Test math between dollar signs."""
        assert parse_element("$a+b$", "math_inline").element == MathInline("a+b")

    def test_line_comment(self) -> None:
        """Test a line comment runs to the end of the line."""
        located = parse_element("%% note", "comment_inline")
        assert located.element == CommentInline(CommentKind.LINE, [" note"])

    def test_multi_line_comment(self) -> None:
        """Test a multi-line comment keeps one entry per line."""
        located = parse_element("%%+ a\nb +%%", "comment_inline")
        assert located.element == CommentInline(CommentKind.MULTI_LINE, [" a", "b "])
        assert located.region.end == Position(2, 5)

    def test_comment_after_text(self) -> None:
        """Test a comment ends the text run before it."""
        elements = _inline("text %% note")
        assert elements[0] == Text("text ")
        assert isinstance(elements[1], CommentInline)
