#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the vimwiki renderer used to format pages."""

from pathlib import Path

import pytest

from vimwiki_ast.ast.links import LinkData, LinkKind
from vimwiki_ast.ast.location import Located, Region
from vimwiki_ast.ast.nodes import InlineElementContainer, Link, Page, Paragraph
from vimwiki_ast.exceptions import InvalidOptionsError, RenderingError
from vimwiki_ast.options.html import HtmlRendererOptions
from vimwiki_ast.options.vimwiki import VimwikiRendererOptions
from vimwiki_ast.parsers.page import parse_page
from vimwiki_ast.renderers.vimwiki import VimwikiRenderer

# sample_wiki_text as the renderer lays it out with default options
FORMATTED_SAMPLE = """%title Sample Page
= Sample Page =

This is a *sample page* with _italic text_ and some `inline code`.
It links to [[Other Page|another page]] and https://example.com too.

== Tasks ==

- [X] write the parser
- [ ] write the renderer
    - [.] templates
    - [ ] highlighting

1. First item
2. Second item

Term:: Definition

| Name | Value |
|------|-------|
| a    | 1     |

{{{python
print("hello")
}}}

----
"""


def _format(text: str, **options) -> str:
    return VimwikiRenderer(VimwikiRendererOptions(**options)).render_to_string(parse_page(text))


@pytest.mark.unit
class TestRoundTrip:
    """Test formatted text parses back to the same page."""

    def test_sample_page_layout(self, sample_wiki_text: str) -> None:
        """Test the normalized layout of a realistic page."""
        assert _format(sample_wiki_text) == FORMATTED_SAMPLE

    def test_formatting_is_stable(self) -> None:
        """Test formatting already formatted text changes nothing."""
        assert _format(FORMATTED_SAMPLE) == FORMATTED_SAMPLE

    def test_reparse_gives_same_page(self, sample_wiki_text: str) -> None:
        """Test the formatted page equals the original, regions aside."""
        page = parse_page(sample_wiki_text)
        text = VimwikiRenderer(VimwikiRendererOptions(pad_table_cells=False)).render_to_string(page)
        assert parse_page(text) == page

    @pytest.mark.parametrize(
        "text",
        [
            "- a\n    continued\n    - b\n        - c\n- d\n",
            "a. x\nb. y\n",
            "i) x\nii) y\n",
            "* [o] half done\n* [-] dropped\n",
            "> a\n\n> b\n",
            "Term:: one\n:: two\n",
            "{{$%align%\nx &= 1\n}}$\n",
            "text [[Page|desc]] %% trailing note\n",
            "%%+ a\nb +%%\n",
            "%date 2024-01-31\n%template tpl\n%nohtml\n%author me\n",
        ],
    )
    def test_formatted_text_is_unchanged(self, text: str) -> None:
        """Test text already in the normalized layout is written back as is."""
        assert _format(text) == text


@pytest.mark.unit
class TestBlocks:
    """Test the layout of block elements."""

    def test_blocks_are_separated_by_blank_lines(self) -> None:
        """Test a blank line goes between blocks, but not after placeholders."""
        assert _format("%title T\n= A =\ntext\n----\n") == "%title T\n= A =\n\ntext\n\n----\n"

    def test_header_padding(self) -> None:
        """Test header text is padded unless disabled."""
        assert _format("==Tasks==\n") == "== Tasks ==\n"
        assert _format("== Tasks ==\n", header_padding=False) == "==Tasks==\n"

    def test_centered_header(self) -> None:
        """Test centered headers are indented once."""
        assert _format("   = Mid =\n") == "    = Mid =\n"
        assert parse_page(_format("   = Mid =\n")).elements[0].element.centered

    def test_paragraph_lines_are_trimmed(self) -> None:
        """Test surrounding whitespace is removed unless disabled."""
        assert _format("first   \n   second\n") == "first\nsecond\n"
        assert _format("first   \n   second\n", trim_lines=False) == "first   \nsecond\n"

    @pytest.mark.parametrize("line", ["----", "%title nope"])
    def test_continuation_kept_inside_paragraph(self, line: str) -> None:
        """Test a continuation line that would start another block stays indented."""
        text = _format(f"text\n    {line}\n")
        assert text == f"text\n    {line}\n"
        assert len(parse_page(text).elements) == 1

    def test_lists_are_renumbered(self) -> None:
        """Test ordered markers are rebuilt from item positions."""
        assert _format("1. a\n1. b\n7. c\n") == "1. a\n2. b\n3. c\n"

    def test_list_continuation_line(self) -> None:
        """Test continuation lines are indented one level below the item."""
        assert _format("- first\n  continued\n") == "- first\n    continued\n"

    def test_custom_indent(self) -> None:
        """Test sublists use the configured indentation."""
        assert _format("- a\n    - b\n", indent_str="  ") == "- a\n  - b\n"
        assert _format("- a\n    - b\n", indent_str="\t") == "- a\n\t- b\n"

    def test_definition_list(self) -> None:
        """Test the first definition shares the term line unless disabled."""
        assert _format("Term :: def one\n:: def two\n") == "Term:: def one\n:: def two\n"
        assert _format("Term:: def one\n:: def two\n", term_on_line_by_itself=True) == (
            "Term::\n:: def one\n:: def two\n"
        )

    def test_blockquote_styles(self) -> None:
        """Test indented blockquotes become arrow lines unless preferred."""
        assert _format("    quoted line\n") == "> quoted line\n"
        assert _format("> a\n> b\n", prefer_indented_blockquote=True) == "    a\n    b\n"
        assert _format("> a\n> b\n", prefer_indented_blockquote=True, indent_str="  ") == "    a\n    b\n"

    def test_blockquote_with_blank_line_keeps_arrows(self) -> None:
        """Test blank lines force the arrow form."""
        assert _format("> a\n\n> b\n", prefer_indented_blockquote=True) == "> a\n\n> b\n"

    def test_code_block_properties(self) -> None:
        """Test the opening line carries the language and properties."""
        assert _format('{{{class="x"\ncode\n}}}\n') == '{{{ class="x"\ncode\n}}}\n'
        assert _format('{{{py   class="x"\ncode\n}}}\n') == '{{{py class="x"\ncode\n}}}\n'


@pytest.mark.unit
class TestTables:
    """Test table layout."""

    def test_columns_are_padded(self) -> None:
        """Test cells share their column width and dividers keep alignment."""
        assert _format("|a|bb|\n|:--|--:|\n|ccc|>|\n") == "| a   | bb |\n|:----|---:|\n| ccc | >  |\n"

    def test_span_above(self) -> None:
        """Test span cells count toward the column width."""
        assert _format("|a|\n|\\/|\n") == "| a  |\n| \\/ |\n"

    def test_centered_table(self) -> None:
        """Test the first row of a centered table is indented."""
        text = _format("  |a|\n")
        assert text == "    | a |\n"
        assert parse_page(text).elements[0].element.centered

    def test_cells_kept_as_written(self) -> None:
        """Test cell text is untouched without padding."""
        assert _format("|a  |b|\n|---|:-:|\n", pad_table_cells=False) == "|a  |b|\n|---|:-:|\n"


@pytest.mark.unit
class TestInline:
    """Test inline elements are written in their source syntax."""

    def test_decorations_and_markers(self) -> None:
        """Test decorations, code, math, tags and keywords."""
        text = "*b* _i_ ~~s~~ ^sup^ ,,sub,, `c` $m$ :t1:t2: TODO\n"
        assert _format(text) == text

    @pytest.mark.parametrize(
        "text",
        [
            "[[My Page#Section|desc]]\n",
            "[[a%2Fb]]\n",
            "[[wiki1:Page]]\n",
            "[[wn.Work:Page|d]]\n",
            "[[diary:2024-01-31]]\n",
            '{{img.png|alt|style="w"}}\n',
            "[[Page|{{thumb.png}}]]\n",
            "https://example.com/a\n",
        ],
    )
    def test_links(self, text: str) -> None:
        """Test every link form is written back as it was read."""
        assert _format(text) == text

    @pytest.mark.parametrize(
        "kind",
        [LinkKind.INDEXED_INTERWIKI, LinkKind.NAMED_INTERWIKI],
    )
    def test_interwiki_without_target_wiki(self, kind: LinkKind) -> None:
        """Test interwiki links built without an index or name are rendering errors."""
        link = Located(Link(kind=kind, data=LinkData("Page")), Region())
        page = Page([Located(Paragraph([InlineElementContainer([link])]), Region())])
        with pytest.raises(RenderingError) as excinfo:
            VimwikiRenderer().render_to_string(page)
        assert excinfo.value.rendering_stage == "links"


@pytest.mark.unit
class TestOptions:
    """Test renderer options and output targets."""

    @pytest.mark.parametrize("indent_str", ["", "ab", " x "])
    def test_invalid_indent(self, indent_str: str) -> None:
        """Test indentation must be made of spaces or tabs."""
        with pytest.raises(ValueError):
            VimwikiRendererOptions(indent_str=indent_str)

    def test_wrong_options_type(self) -> None:
        """Test options of another renderer are rejected."""
        with pytest.raises(InvalidOptionsError):
            VimwikiRenderer(HtmlRendererOptions())

    def test_render_to_path(self, temp_dir: Path) -> None:
        """Test output can be written to a file."""
        target = temp_dir / "out.wiki"
        VimwikiRenderer().render(parse_page("=A=\n"), target)
        assert target.read_text(encoding="utf-8") == "= A =\n"
