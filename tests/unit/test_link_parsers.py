#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for link parsing and link data."""

import datetime
from pathlib import PurePosixPath

import pytest

from vimwiki_ast.ast.links import LinkData, LinkKind, decode_uri, encode_uri
from vimwiki_ast.exceptions import ParsingError
from vimwiki_ast.parsers.page import parse_element


def _link(text: str):
    return parse_element(text, "link").element


@pytest.mark.unit
class TestUriEncoding:
    """Test percent-encoding of hand written uris."""

    def test_spaces_are_encoded(self) -> None:
        """Test spaces become %20."""
        assert encode_uri("My Page") == "My%20Page"

    def test_first_hash_is_kept(self) -> None:
        """Test only the first # introduces the fragment."""
        assert encode_uri("My Page#one#two") == "My%20Page#one%23two"

    def test_non_ascii_is_encoded(self) -> None:
        """Test non-ASCII characters are encoded as UTF-8 bytes."""
        assert encode_uri("café") == "caf%C3%A9"

    def test_decode(self) -> None:
        """Test decoding reverses the encoding."""
        assert decode_uri("My%20Page#one%23two") == "My Page#one#two"


@pytest.mark.unit
class TestWikiLinks:
    """Test [[...]] links."""

    def test_plain_wiki_link(self) -> None:
        """Test a link with only a uri."""
        link = _link("[[Page]]")
        assert link.kind is LinkKind.WIKI
        assert link.data == LinkData("Page")
        assert link.to_text() == "Page"

    def test_description(self) -> None:
        """Test the description after the first bar."""
        link = _link("[[My Page|some words]]")
        assert link.data.uri == "My%20Page"
        assert link.data.description == "some words"
        assert link.to_text() == "some words"

    def test_properties(self) -> None:
        """Test key="value" properties after the description."""
        link = _link('[[Page|desc|class="big" id="x"]]')
        assert link.data.properties == {"class": "big", "id": "x"}
        assert link.data.get_property_str("class") == "big"
        assert link.data.get_property_str("missing") is None

    def test_transclusion_description(self) -> None:
        """Test a description that is itself a transclusion."""
        link = _link("[[Page|{{thumb.png}}]]")
        assert link.data.description == LinkData("thumb.png")
        assert link.to_text() == "thumb.png"

    def test_anchor(self) -> None:
        """Test anchors are decoded into segments."""
        data = _link("[[Page#sec one#sub]]").data
        assert data.path == "Page"
        assert data.anchor == ["sec one", "sub"]
        assert not data.is_local_anchor()

    def test_local_anchor(self) -> None:
        """Test a link to an anchor of the current page."""
        data = _link("[[#Tasks]]").data
        assert data.is_local_anchor()
        assert data.anchor == ["Tasks"]

    def test_empty_link_is_rejected(self) -> None:
        """Test [[]] is not a link."""
        with pytest.raises(ParsingError):
            parse_element("[[]]", "link")

    def test_link_does_not_cross_lines(self) -> None:
        """Test the closing brackets must be on the same line."""
        with pytest.raises(ParsingError):
            parse_element("[[Page\n]]", "link")


@pytest.mark.unit
class TestSpecialLinks:
    """Test diary, interwiki, raw and transclusion links."""

    def test_diary_link(self) -> None:
        """Test the diary prefix is stripped and the date parsed."""
        link = _link("[[diary:2024-01-31]]")
        assert link.kind is LinkKind.DIARY
        assert link.date == datetime.date(2024, 1, 31)
        assert link.data.uri == "2024-01-31"

    def test_diary_link_with_anchor(self) -> None:
        """Test a diary link keeps its anchor."""
        link = _link("[[diary:2024-01-31#Notes]]")
        assert link.date == datetime.date(2024, 1, 31)
        assert link.data.anchor == ["Notes"]

    def test_invalid_diary_date_is_wiki_link(self) -> None:
        """Test an impossible date falls back to a wiki link."""
        link = _link("[[diary:2024-13-01]]")
        assert link.kind is LinkKind.WIKI
        assert link.data.uri == "diary:2024-13-01"

    def test_indexed_interwiki(self) -> None:
        """Test wiki<N>: links."""
        link = _link("[[wiki1:Some Page]]")
        assert link.kind is LinkKind.INDEXED_INTERWIKI
        assert link.index == 1
        assert link.data.uri == "Some%20Page"

    def test_indexed_prefix_without_number(self) -> None:
        """Test wiki followed by letters is an ordinary link."""
        link = _link("[[wikipedia:Page]]")
        assert link.kind is LinkKind.WIKI

    def test_named_interwiki(self) -> None:
        """Test wn.<name>: links with a decoded name."""
        link = _link("[[wn.My Wiki:Page|desc]]")
        assert link.kind is LinkKind.NAMED_INTERWIKI
        assert link.name == "My Wiki"
        assert link.data.uri == "Page"
        assert link.data.description == "desc"

    @pytest.mark.parametrize(
        "uri",
        [
            "https://example.com/a?b=c",
            "http://example.com",
            "ftp://files.example.com/x",
            "mailto:someone@example.com",
            "file:/tmp/notes.txt",
            "local:../notes.txt",
        ],
    )
    def test_raw_links(self, uri: str) -> None:
        """Test bare uris with a known scheme."""
        link = _link(uri)
        assert link.kind is LinkKind.RAW
        assert link.data.uri == uri

    def test_unknown_scheme_is_not_raw_link(self) -> None:
        """Test schemes outside the known set are rejected."""
        with pytest.raises(ParsingError):
            parse_element("gopher://example.com", "raw_link")

    def test_transclusion(self) -> None:
        """Test {{...}} links with description and properties."""
        link = _link('{{img.png|alt text|style="width:10px"}}')
        assert link.kind is LinkKind.TRANSCLUSION
        assert link.data == LinkData("img.png", "alt text", {"style": "width:10px"})


@pytest.mark.unit
class TestLinkData:
    """Test the link data accessors."""

    def test_remote_and_local(self) -> None:
        """Test classification by scheme."""
        assert LinkData("https://example.com").is_remote()
        assert LinkData("Page").is_local()
        assert LinkData("file:/tmp/x").is_local()

    def test_scheme_and_authority(self) -> None:
        """Test the uri components."""
        data = LinkData("https://example.com/a/b?q=1#top")
        assert data.scheme == "https"
        assert data.authority == "example.com"
        assert data.path_segments == ["", "a", "b"]
        assert data.query == "q=1"
        assert data.fragment == "top"

    def test_directory_link(self) -> None:
        """Test a trailing slash marks a directory."""
        assert LinkData("notes/").is_path_dir()
        assert not LinkData("notes").is_path_dir()

    def test_to_path(self) -> None:
        """Test the decoded path."""
        assert LinkData("sub/My%20Page").to_path() == PurePosixPath("sub/My Page")

    def test_description_fallback(self) -> None:
        """Test the decoded uri stands in for a missing description."""
        assert LinkData("My%20Page").to_description_or_fallback() == "My Page"
        assert LinkData("x", "label").to_description_or_fallback() == "label"
