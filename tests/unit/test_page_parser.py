#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for page parsing entry points and error reporting."""

import io
from pathlib import Path

import pytest

from vimwiki_ast.ast.lists import List
from vimwiki_ast.ast.nodes import (
    CodeBlock,
    Comment,
    DefinitionList,
    Divider,
    Header,
    Page,
    Paragraph,
    Placeholder,
)
from vimwiki_ast.ast.tables import Table
from vimwiki_ast.exceptions import (
    FileNotFoundError as VimwikiFileNotFoundError,
    InvalidOptionsError,
    ParsingError,
    ValidationError,
)
from vimwiki_ast.options.html import HtmlRendererOptions
from vimwiki_ast.options.vimwiki import VimwikiParserOptions
from vimwiki_ast.parsers.page import ELEMENT_PARSERS, VimwikiParser, parse_element, parse_page


@pytest.mark.unit
class TestParsePage:
    """Test parsing whole pages."""

    def test_empty_page(self) -> None:
        """Test empty input gives an empty page."""
        assert parse_page("") == Page([])

    def test_blank_lines_only(self) -> None:
        """Test blank lines produce no blocks."""
        assert parse_page("\n  \n\n").elements == []

    def test_sample_page_structure(self, sample_wiki_text: str) -> None:
        """Test the block sequence of a realistic page."""
        page = parse_page(sample_wiki_text)
        assert [type(block.element) for block in page.elements] == [
            Placeholder,
            Header,
            Paragraph,
            Header,
            List,
            List,
            DefinitionList,
            Table,
            CodeBlock,
            Divider,
        ]
        assert page.title == "Sample Page"

    def test_crlf_line_endings(self) -> None:
        """Test Windows line endings are accepted."""
        page = parse_page("= Title =\r\n\r\nsome text\r\n")
        assert [type(block.element) for block in page.elements] == [Header, Paragraph]
        assert page.elements[1].element.lines[0].to_text() == "some text"

    def test_block_regions_are_ordered(self, sample_wiki_text: str) -> None:
        """Test top-level blocks appear in source order without overlap."""
        page = parse_page(sample_wiki_text)
        regions = [block.region for block in page.elements]
        for before, after in zip(regions, regions[1:]):
            assert before.end_offset <= after.offset

    def test_second_block_position(self) -> None:
        """Test positions of a block after blank lines."""
        page = parse_page("first\n\n= Second =\n")
        header = page.elements[1]
        assert header.region.offset == 7
        assert header.region.start.line == 3
        assert header.region.start.column == 1


@pytest.mark.unit
class TestVimwikiParser:
    """Test the parser class and its options."""

    def test_keep_comments_by_default(self) -> None:
        """Test comments are part of the page unless stripped."""
        page = VimwikiParser().parse("%% note\ntext\n")
        assert isinstance(page.elements[0].element, Comment)

    def test_strip_comments(self) -> None:
        """Test keep_comments=False removes comments."""
        parser = VimwikiParser(VimwikiParserOptions(keep_comments=False))
        page = parser.parse("%% note\ntext %% inline\n")
        assert [type(block.element) for block in page.elements] == [Paragraph]
        assert page.elements[0].element.lines[0].to_text() == "text "

    def test_without_positions(self) -> None:
        """Test track_positions=False leaves regions without positions."""
        parser = VimwikiParser(VimwikiParserOptions(track_positions=False))
        page = parser.parse("= Title =\n")
        region = page.elements[0].region
        assert region.offset == 0
        assert region.length == 10
        assert not region.has_position

    def test_parse_path(self, temp_dir: Path) -> None:
        """Test parsing a file given as a Path."""
        path = temp_dir / "page.wiki"
        path.write_text("= From File =\n", encoding="utf-8")
        page = VimwikiParser().parse(path)
        assert page.elements[0].element.content.to_text() == "From File"

    def test_parse_bytes_and_stream(self) -> None:
        """Test bytes and binary streams are decoded."""
        assert VimwikiParser().parse("= Café =\n".encode("utf-8")).elements[0].element.level == 1
        stream = io.BytesIO(b"plain text\n")
        assert isinstance(VimwikiParser().parse(stream).elements[0].element, Paragraph)

    def test_missing_file(self, temp_dir: Path) -> None:
        """Test a missing Path raises the library's FileNotFoundError."""
        with pytest.raises(VimwikiFileNotFoundError):
            VimwikiParser().parse(temp_dir / "missing.wiki")

    def test_wrong_options_type(self) -> None:
        """Test options of another component are rejected."""
        with pytest.raises(InvalidOptionsError):
            VimwikiParser(HtmlRendererOptions())


@pytest.mark.unit
class TestParseElement:
    """Test applying a single named parser."""

    def test_known_parsers(self) -> None:
        """Test the registry holds the main entry points."""
        for name in ("page", "header", "list", "table", "link", "inline_element_container"):
            assert name in ELEMENT_PARSERS

    def test_unknown_parser(self) -> None:
        """Test an unknown parser name is a validation error."""
        with pytest.raises(ValidationError) as excinfo:
            parse_element("x", "no_such_parser")
        assert excinfo.value.parameter_name == "parser"

    def test_failure_reports_location(self) -> None:
        """Test a failed parse carries a region, stage and breadcrumbs."""
        with pytest.raises(ParsingError) as excinfo:
            parse_element("= Title", "header")
        error = excinfo.value
        assert error.parsing_stage == "header"
        assert error.region is not None
        assert error.region.start is not None
        assert error.contexts[0] == "Header"
        assert "line 1" in error.message

    def test_leftover_input_is_an_error(self) -> None:
        """Test the parser must consume the whole text."""
        with pytest.raises(ParsingError) as excinfo:
            parse_element("----\nmore", "divider")
        assert excinfo.value.region.offset == 5

    def test_table_element(self) -> None:
        """Test parse_element returns the located element."""
        located = parse_element("|a|", "table")
        assert isinstance(located.element, Table)
        assert located.region.length == 3
