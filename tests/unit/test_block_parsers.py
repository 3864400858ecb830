#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the block element parsers."""

import datetime

import pytest

from vimwiki_ast.ast.location import Position, Region
from vimwiki_ast.ast.nodes import (
    Blockquote,
    CodeBlock,
    Comment,
    CommentKind,
    DecoratedText,
    DefinitionList,
    Divider,
    Header,
    MathBlock,
    Paragraph,
    Placeholder,
    PlaceholderKind,
    Text,
)
from vimwiki_ast.ast.lists import List
from vimwiki_ast.ast.tables import CellKind, ColumnAlign, Table
from vimwiki_ast.exceptions import ParsingError
from vimwiki_ast.parsers.page import parse_element, parse_page


def _block(text: str, parser: str):
    return parse_element(text, parser).element


def _types(text: str) -> list:
    return [type(block.element) for block in parse_page(text).elements]


@pytest.mark.unit
class TestHeader:
    """Test header parsing."""

    def test_level_one(self) -> None:
        """Test a level one header and its region."""
        located = parse_element("= Title =\n", "header")
        assert located.element.level == 1
        assert located.element.content.to_text() == "Title"
        assert located.region == Region(0, 10, Position(1, 1), Position(1, 10))

    def test_content_region(self) -> None:
        """Test the header text keeps its own offset."""
        header = _block("== Title ==", "header")
        text = header.content.elements[0]
        assert text.element == Text("Title")
        assert text.region.offset == 3
        assert text.region.length == 5

    @pytest.mark.parametrize("level", range(1, 7))
    def test_levels(self, level: int) -> None:
        """Test levels one through six."""
        marks = "=" * level
        assert _block(f"{marks} Title {marks}", "header").level == level

    def test_level_seven_rejected(self) -> None:
        """Test more than six equals signs is not a header."""
        with pytest.raises(ParsingError):
            parse_element("======= Title =======", "header")

    def test_mismatched_closing_rejected(self) -> None:
        """Test the closing run must match the opening run."""
        with pytest.raises(ParsingError):
            parse_element("== Title =", "header")
        with pytest.raises(ParsingError):
            parse_element("= Title ==", "header")

    def test_empty_header_rejected(self) -> None:
        """Test a header needs text."""
        with pytest.raises(ParsingError):
            parse_element("==  ==", "header")

    def test_centered(self) -> None:
        """Test leading spaces center the header."""
        header = _block("   == Centered ==", "header")
        assert header.centered
        assert header.level == 2

    def test_inline_content(self) -> None:
        """Test header text is parsed as inline elements."""
        header = _block("= *Bold* title =", "header")
        assert isinstance(header.content.elements[0].element, DecoratedText)


@pytest.mark.unit
class TestDefinitionList:
    """Test definition list parsing."""

    def test_inline_definition(self) -> None:
        """Test a term and definition on one line."""
        dl = _block("Term:: Definition", "definition_list")
        assert len(dl.items) == 1
        assert dl.items[0].term.element.content.to_text() == "Term"
        assert dl.items[0].definitions[0].element.content.to_text() == "Definition"

    def test_definition_lines(self) -> None:
        """Test definitions on the following lines."""
        dl = _block("Term::\n:: one\n:: two\n", "definition_list")
        assert [d.element.content.to_text() for d in dl.items[0].definitions] == ["one", "two"]

    def test_several_terms(self) -> None:
        """Test consecutive terms form one list."""
        dl = _block("a:: 1\nb:: 2\n:: 3\n", "definition_list")
        assert [item.term.element.content.to_text() for item in dl.items] == ["a", "b"]
        assert len(dl.items[1].definitions) == 2

    def test_term_without_definition_rejected(self) -> None:
        """Test a term alone is not a definition list."""
        with pytest.raises(ParsingError):
            parse_element("Term::", "definition_list")


@pytest.mark.unit
class TestTable:
    """Test table parsing."""

    def test_header_and_body_rows(self) -> None:
        """Test rows before the divider are header rows."""
        table = _block("|a|b|\n|-|-|\n|1|2|\n", "table")
        assert table.row_count == 3
        assert table.column_count == 2
        assert table.header_rows() == [0]
        assert table.body_rows() == [2]
        assert table.get_cell(2, 1).content.to_text() == "2"

    def test_without_divider_all_rows_are_body(self) -> None:
        """Test a table without a divider has no header."""
        table = _block("|a|b|\n|1|2|", "table")
        assert table.header_rows() == []
        assert table.body_rows() == [0, 1]

    def test_alignment(self) -> None:
        """Test colons in the divider row set column alignment."""
        table = _block("|a|b|c|d|\n|:--|--:|:-:|---|", "table")
        assert table.column_alignments() == [
            ColumnAlign.LEFT,
            ColumnAlign.RIGHT,
            ColumnAlign.CENTER,
            ColumnAlign.NONE,
        ]

    def test_span_cells(self) -> None:
        """Test span markers and the spans they produce."""
        table = _block("|a|>|\n|\\/|b|", "table")
        assert table.get_cell(0, 1).kind is CellKind.SPAN_LEFT
        assert table.get_cell(1, 0).kind is CellKind.SPAN_ABOVE
        assert table.get_cell_colspan(0, 0) == 2
        assert table.get_cell_rowspan(0, 0) == 2
        assert table.get_cell_rowspan(1, 1) == 1
        assert table.get_cell_colspan(0, 1) == 0

    def test_centered(self) -> None:
        """Test an indented first row centers the table."""
        assert _block("  |a|b|", "table").centered

    def test_divider_only_rejected(self) -> None:
        """Test a table needs a row that is not a divider."""
        with pytest.raises(ParsingError):
            parse_element("|---|---|", "table")

    def test_cell_content_is_stripped_of_kind(self) -> None:
        """Test cells with text are content cells whatever their spacing."""
        table = _block("| a  | *b* |", "table")
        assert table.get_cell(0, 0).is_content()
        assert table.get_cell(0, 1).content.to_text().strip() == "b"


@pytest.mark.unit
class TestPreformattedBlocks:
    """Test code and math blocks."""

    def test_code_block(self) -> None:
        """Test language, properties and lines."""
        code = _block('{{{python class="x"\nprint(1)\n  indented\n}}}\n', "code_block")
        assert code == CodeBlock(language="python", properties={"class": "x"}, lines=["print(1)", "  indented"])

    def test_code_block_without_language(self) -> None:
        """Test a bare fence."""
        code = _block("{{{\nraw\n}}}", "code_block")
        assert code.language is None
        assert code.lines == ["raw"]

    def test_code_block_properties_only(self) -> None:
        """Test properties without a language."""
        code = _block('{{{class="x"\nraw\n}}}', "code_block")
        assert code.language is None
        assert code.properties == {"class": "x"}

    def test_indented_code_block(self) -> None:
        """Test the fence indentation is removed from each line."""
        code = _block("  {{{\n  a\n    b\n  }}}", "code_block")
        assert code.lines == ["a", "  b"]

    def test_unclosed_code_block_rejected(self) -> None:
        """Test a code block needs its closing fence."""
        with pytest.raises(ParsingError):
            parse_element("{{{\nabc\n", "code_block")

    def test_math_block(self) -> None:
        """Test a math block with an environment."""
        math = _block("{{$%align%\na &= b\n}}$", "math_block")
        assert math == MathBlock(lines=["a &= b"], environment="align")

    def test_math_block_without_environment(self) -> None:
        """Test a plain math block."""
        assert _block("{{$\nx^2\n}}$\n", "math_block").environment is None


@pytest.mark.unit
class TestSimpleBlocks:
    """Test blockquotes, dividers, placeholders and comments."""

    def test_indented_blockquote(self) -> None:
        """Test lines indented by four spaces."""
        assert _block("    quoted\n    more\n", "blockquote") == Blockquote(["quoted", "more"])

    def test_arrow_blockquote(self) -> None:
        """Test lines starting with an arrow."""
        assert _block("> a\n> b\n", "blockquote") == Blockquote(["a", "b"])

    def test_arrow_blockquote_keeps_inner_blank_lines(self) -> None:
        """Test blank lines between arrow lines belong to the quote."""
        assert _block("> a\n\n> b\n", "blockquote") == Blockquote(["a", "", "b"])

    def test_arrow_blockquote_trailing_blank_not_consumed(self) -> None:
        """Test a blank line after the last arrow line is left alone."""
        page = parse_page("> a\n\ntext\n")
        assert [type(b.element) for b in page.elements] == [Blockquote, Paragraph]
        assert page.elements[0].region.length == 4

    def test_divider(self) -> None:
        """Test four or more dashes."""
        assert _block("-----", "divider") == Divider()
        with pytest.raises(ParsingError):
            parse_element("---", "divider")

    def test_placeholder_title(self) -> None:
        """Test %title."""
        placeholder = _block("%title My Title", "placeholder")
        assert placeholder == Placeholder(PlaceholderKind.TITLE, value="My Title")

    def test_placeholder_nohtml(self) -> None:
        """Test %nohtml."""
        assert _block("%nohtml", "placeholder").kind is PlaceholderKind.NO_HTML

    def test_placeholder_template(self) -> None:
        """Test %template."""
        assert _block("%template wide", "placeholder").value == "wide"

    def test_placeholder_date(self) -> None:
        """Test %date."""
        placeholder = _block("%date 2024-01-31", "placeholder")
        assert placeholder.date == datetime.date(2024, 1, 31)

    def test_placeholder_invalid_date_rejected(self) -> None:
        """Test %date needs a valid date."""
        with pytest.raises(ParsingError):
            parse_element("%date someday", "placeholder")

    def test_placeholder_other(self) -> None:
        """Test unknown directives keep their name and raw value."""
        placeholder = _block("%author Jo Smith", "placeholder")
        assert placeholder == Placeholder(PlaceholderKind.OTHER, value="Jo Smith", name="author")

    def test_line_comment_block(self) -> None:
        """Test a comment alone on its line."""
        assert _block("%% note\n", "comment") == Comment(CommentKind.LINE, [" note"])

    def test_multi_line_comment_block(self) -> None:
        """Test a multi-line comment spanning lines."""
        comment = _block("%%+\nhidden\n+%%\n", "comment")
        assert comment.kind is CommentKind.MULTI_LINE
        assert comment.lines == ["", "hidden"]


@pytest.mark.unit
class TestParagraph:
    """Test paragraphs and block boundaries."""

    def test_lines(self) -> None:
        """Test consecutive lines form one paragraph."""
        paragraph = _block("line one\nline two\n", "paragraph")
        assert [line.to_text() for line in paragraph.lines] == ["line one", "line two"]

    def test_leading_spaces_dropped(self) -> None:
        """Test indentation before paragraph text is not content."""
        paragraph = _block("  text", "paragraph")
        assert paragraph.lines[0].to_text() == "text"

    def test_blank_line_ends_paragraph(self) -> None:
        """Test two paragraphs separated by a blank line."""
        assert _types("one\n\ntwo\n") == [Paragraph, Paragraph]

    @pytest.mark.parametrize(
        "text,second",
        [
            ("text\n= Header =\n", Header),
            ("text\n- item\n", List),
            ("text\n|a|b|\n", Table),
            ("text\n----\n", Divider),
            ("text\n%title T\n", Placeholder),
            ("text\nterm:: def\n", DefinitionList),
            ("text\n{{{\ncode\n}}}\n", CodeBlock),
            ("text\n{{$\nx\n}}$\n", MathBlock),
            ("text\n> quoted\n", Blockquote),
        ],
    )
    def test_structural_block_ends_paragraph(self, text: str, second: type) -> None:
        """Test a structural block directly below a paragraph starts a new block."""
        assert _types(text) == [Paragraph, second]

    def test_indented_line_continues_paragraph(self) -> None:
        """Test a line indented like a blockquote stays in the paragraph."""
        assert _types("text\n    indented more\n") == [Paragraph]
        paragraph = _block("text\n    indented more\n", "paragraph")
        assert [line.to_text() for line in paragraph.lines] == ["text", "indented more"]

    def test_indented_blockquote_after_blank_line(self) -> None:
        """Test the same indentation after a blank line is a blockquote."""
        assert _types("text\n\n    quoted\n") == [Paragraph, Blockquote]
