#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/ast/links.py
"""Link data shared by every kind of link element.

Links keep enough structure (scheme, path segments, anchor, description
and ``key="value"`` properties) for a renderer to resolve them against the
location of the page that contains them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath
from typing import Optional, Union
from urllib.parse import SplitResult, unquote, urlsplit

# https://url.spec.whatwg.org/#fragment-percent-encode-set plus "#", which is
# encoded so that stacked anchors (#a#b) survive as a single fragment
_FRAGMENT_ENCODE_SET = frozenset(' "<>`#')


class LinkKind(Enum):
    """The syntactic family a link was written in."""

    WIKI = "wiki"
    INDEXED_INTERWIKI = "indexed_interwiki"
    NAMED_INTERWIKI = "named_interwiki"
    DIARY = "diary"
    RAW = "raw"
    TRANSCLUSION = "transclusion"


def _encode_char(char: str) -> str:
    if char in _FRAGMENT_ENCODE_SET or ord(char) < 0x20 or ord(char) == 0x7F or ord(char) > 0x7E:
        return "".join(f"%{byte:02X}" for byte in char.encode("utf-8"))
    return char


def encode_uri(uri: str) -> str:
    """Percent-encode a uri written by hand inside a link.

    Spaces, quotes, angle brackets, backticks, control and non-ASCII
    characters are encoded. Every ``#`` is encoded too, except the first,
    which still introduces the fragment.

    Examples
    --------
        >>> encode_uri("My Page#one#two")
        'My%20Page#one%23two'

    """
    encoded = "".join(_encode_char(c) for c in uri)
    return encoded.replace("%23", "#", 1)


def decode_uri(uri: str) -> str:
    """Reverse :func:`encode_uri` (lossy for invalid UTF-8 sequences)."""
    return unquote(uri, errors="replace")


@dataclass
class LinkData:
    """Target, description and properties of a link.

    Parameters
    ----------
    uri : str
        Percent-encoded uri reference
    description : str, LinkData or None, default = None
        Text shown for the link, or a transclusion shown in its place
    properties : dict or None, default = None
        ``key="value"`` pairs written after the description

    """

    uri: str
    description: Optional[Union[str, LinkData]] = None
    properties: Optional[dict[str, str]] = field(default=None)

    @property
    def _parts(self) -> SplitResult:
        return urlsplit(self.uri, allow_fragments=True)

    @property
    def scheme(self) -> Optional[str]:
        return self._parts.scheme or None

    @property
    def authority(self) -> Optional[str]:
        return self._parts.netloc or None

    @property
    def path(self) -> str:
        return self._parts.path

    @property
    def query(self) -> Optional[str]:
        return self._parts.query or None

    @property
    def fragment(self) -> Optional[str]:
        # urlsplit drops an empty fragment, "#" alone still counts as one
        if "#" not in self.uri:
            return None
        return self._parts.fragment

    @property
    def path_segments(self) -> list[str]:
        return self.path.split("/") if self.path else []

    def has_anchor(self) -> bool:
        return self.fragment is not None

    @property
    def anchor(self) -> Optional[list[str]]:
        """Decoded anchor segments, e.g. ``["a", "b"]`` for ``page#a#b``."""
        fragment = self.fragment
        if fragment is None:
            return None
        return [decode_uri(part) for part in fragment.split("%23")]

    def is_local_anchor(self) -> bool:
        """True when the link only points at an anchor of the current page."""
        return (
            self.scheme is None
            and self.authority is None
            and all(segment == "" for segment in self.path_segments)
            and self.query is None
            and self.has_anchor()
        )

    def is_path_dir(self) -> bool:
        """True when the path ends with ``/`` (checked textually)."""
        segments = self.path_segments
        return bool(segments) and segments[-1] == ""

    def is_local(self) -> bool:
        """True for scheme-less, ``file:`` and ``local:`` uris."""
        scheme = self.scheme
        return scheme is None or scheme in ("file", "local")

    def is_remote(self) -> bool:
        return not self.is_local()

    def to_path(self) -> PurePosixPath:
        """Decoded uri path as a posix path (absolute if the uri path is)."""
        return PurePosixPath(decode_uri(self.path)) if self.path else PurePosixPath()

    def get_property_str(self, name: str) -> Optional[str]:
        if not self.properties:
            return None
        return self.properties.get(name)

    def to_decoded_uri_string(self) -> str:
        return decode_uri(self.uri)

    def to_description_or_fallback(self) -> Union[str, LinkData]:
        """Description if one was written, otherwise the decoded uri."""
        if self.description is not None:
            return self.description
        return self.to_decoded_uri_string()


__all__ = ["LinkKind", "LinkData", "encode_uri", "decode_uri"]
