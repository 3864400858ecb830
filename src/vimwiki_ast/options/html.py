#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/options/html.py
"""Configuration options for rendering vimwiki pages to HTML.

This module defines :class:`HtmlRendererOptions` together with
:class:`WikiConfig`, which describes one wiki of a multi-wiki site so
interwiki links (``[[wiki1:Page]]``, ``[[wn.Work:Page]]``) can be resolved
to relative output paths.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Optional

from vimwiki_ast.constants import (
    DEFAULT_CODE_SERVER_SIDE,
    DEFAULT_CODE_THEME,
    DEFAULT_CSS_NAME,
    DEFAULT_DIARY_REL_PATH,
    DEFAULT_INCLUDE_COMMENTS,
    DEFAULT_LINK_BASE_URL,
    DEFAULT_LINK_CANONICALIZE,
    DEFAULT_LIST_IGNORE_NEWLINE,
    DEFAULT_PARAGRAPH_IGNORE_NEWLINE,
    DEFAULT_TEMPLATE_EXT,
    DEFAULT_TEMPLATE_NAME,
    DEFAULT_TEMPLATE_TEXT,
    DEFAULT_TOC_HEADER_TEXT,
)
from vimwiki_ast.options.base import BaseRendererOptions, CloneFrozenMixin


@dataclass(frozen=True)
class WikiConfig(CloneFrozenMixin):
    """One wiki of a site.

    Parameters
    ----------
    path : Path
        Root directory of the wiki sources
    path_html : Path or None, default = None
        Root directory of the generated HTML; defaults to ``path`` with an
        ``_html`` suffix
    name : str or None, default = None
        Name used by named interwiki links
    diary_rel_path : str, default "diary"
        Diary directory relative to the wiki root

    """

    path: Path = field(metadata={"help": "Root directory of the wiki sources"})
    path_html: Optional[Path] = field(default=None, metadata={"help": "Root directory of the generated HTML"})
    name: Optional[str] = field(default=None, metadata={"help": "Name used by named interwiki links"})
    diary_rel_path: str = field(
        default=DEFAULT_DIARY_REL_PATH,
        metadata={"help": "Diary directory relative to the wiki root"},
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path).expanduser())
        if self.path_html is not None:
            object.__setattr__(self, "path_html", Path(self.path_html).expanduser())

    @property
    def html_root(self) -> Path:
        if self.path_html is not None:
            return self.path_html
        return self.path.with_name(self.path.name + "_html")

    @classmethod
    def from_mapping(cls, values: dict[str, Any]) -> WikiConfig:
        if "path" not in values:
            raise ValueError("wiki configuration requires a 'path'")
        return super().from_mapping(values)


@dataclass(frozen=True)
class HtmlRendererOptions(BaseRendererOptions):
    """Configuration options for HTML rendering.

    Parameters
    ----------
    wiki_root : Path or None, default = None
        Root directory of the wiki the rendered page belongs to
    page_path : Path or None, default = None
        Path of the rendered page; relative paths are taken within
        ``wiki_root``. Used to compute the path back to the wiki root for
        diary links and the ``%root_path%`` template variable.
    output_root : Path or None, default = None
        Directory HTML output is written to by the CLI
    wikis : tuple of WikiConfig, default ()
        Every wiki of the site, for interwiki link resolution by index or
        by name
    list_ignore_newline : bool, default True
        Join the lines of a list item with a space rather than ``<br />``
    paragraph_ignore_newline : bool, default True
        Join the lines of a paragraph with a space rather than ``<br />``
    link_base_url : str, default "https://localhost"
        Base url used when links are canonicalized
    link_canonicalize : bool, default False
        Emit absolute links joined onto ``link_base_url``
    toc_header_text : str, default "Contents"
        Header text marking the table of contents header
    code_theme : str, default "default"
        Pygments style used for server-side highlighting
    code_server_side : bool, default False
        Highlight code blocks with pygments instead of emitting
        ``<code class="lang">`` for a client-side highlighter
    include_comments : bool, default False
        Emit comments as ``<!-- -->``
    template_name : str, default "default"
        Template file name (without extension) looked up in ``template_dir``
    template_ext : str, default "tpl"
        Template file extension
    template_dir : Path or None, default = None
        Directory holding templates; when None ``template_text`` is used
    template_text : str
        Fallback template text with ``%title%``, ``%date%``,
        ``%root_path%``, ``%wiki_path%``, ``%css%``, ``%encoding%`` and
        ``%content%`` variables
    use_jinja : bool, default False
        Render the template with jinja2 (``{{ title }}``, ``{{ content }}``)
        instead of ``%variable%`` substitution
    standalone : bool, default True
        Wrap the rendered content in the template
    css_name : str, default "style.css"
        Stylesheet referenced by the template

    Examples
    --------
    Fragment output with visible line breaks:

        >>> options = HtmlRendererOptions(standalone=False, paragraph_ignore_newline=False)

    """

    wiki_root: Optional[Path] = field(default=None, metadata={"help": "Root directory of the current wiki"})
    page_path: Optional[Path] = field(default=None, metadata={"help": "Path of the page being rendered"})
    output_root: Optional[Path] = field(default=None, metadata={"help": "Directory HTML output is written to"})
    wikis: tuple[WikiConfig, ...] = field(
        default=(),
        metadata={"help": "Wikis of the site, used to resolve interwiki links"},
    )
    list_ignore_newline: bool = field(
        default=DEFAULT_LIST_IGNORE_NEWLINE,
        metadata={"help": "Join list item lines with spaces instead of <br />"},
    )
    paragraph_ignore_newline: bool = field(
        default=DEFAULT_PARAGRAPH_IGNORE_NEWLINE,
        metadata={"help": "Join paragraph lines with spaces instead of <br />"},
    )
    link_base_url: str = field(
        default=DEFAULT_LINK_BASE_URL,
        metadata={"help": "Base url for canonicalized links"},
    )
    link_canonicalize: bool = field(
        default=DEFAULT_LINK_CANONICALIZE,
        metadata={"help": "Emit absolute links based on link_base_url"},
    )
    toc_header_text: str = field(
        default=DEFAULT_TOC_HEADER_TEXT,
        metadata={"help": "Header text identifying the table of contents"},
    )
    code_theme: str = field(
        default=DEFAULT_CODE_THEME,
        metadata={"help": "Pygments style for server-side code highlighting"},
    )
    code_server_side: bool = field(
        default=DEFAULT_CODE_SERVER_SIDE,
        metadata={"help": "Highlight code blocks with pygments"},
    )
    include_comments: bool = field(
        default=DEFAULT_INCLUDE_COMMENTS,
        metadata={"help": "Emit comments as HTML comments"},
    )
    template_name: str = field(
        default=DEFAULT_TEMPLATE_NAME,
        metadata={"help": "Template name, without extension"},
    )
    template_ext: str = field(default=DEFAULT_TEMPLATE_EXT, metadata={"help": "Template file extension"})
    template_dir: Optional[Path] = field(default=None, metadata={"help": "Directory holding page templates"})
    template_text: str = field(
        default=DEFAULT_TEMPLATE_TEXT,
        metadata={"help": "Template used when no template file is found"},
    )
    use_jinja: bool = field(default=False, metadata={"help": "Render templates with jinja2"})
    standalone: bool = field(default=True, metadata={"help": "Wrap content in the page template"})
    css_name: str = field(default=DEFAULT_CSS_NAME, metadata={"help": "Stylesheet referenced by the template"})

    def __post_init__(self) -> None:
        """Validate and normalize options.

        Raises
        ------
        ValueError
            If the base url lacks a scheme, or the template settings are
            incomplete.

        """
        super().__post_init__()

        for name in ("wiki_root", "page_path", "output_root", "template_dir"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, Path):
                object.__setattr__(self, name, Path(value))

        wikis = tuple(w if isinstance(w, WikiConfig) else WikiConfig.from_mapping(w) for w in self.wikis)
        object.__setattr__(self, "wikis", wikis)

        if self.link_canonicalize and "://" not in self.link_base_url:
            raise ValueError(f"link_base_url must be an absolute url, got {self.link_base_url!r}")
        if not self.template_name:
            raise ValueError("template_name must not be empty")

    def find_wiki_by_index(self, index: int) -> Optional[WikiConfig]:
        if 0 <= index < len(self.wikis):
            return self.wikis[index]
        return None

    def find_wiki_by_name(self, name: str) -> Optional[WikiConfig]:
        for wiki in self.wikis:
            if wiki.name == name:
                return wiki
        return None

    def find_wiki_by_path(self, path: Path) -> Optional[WikiConfig]:
        """Wiki whose source root contains ``path``, preferring the deepest root."""
        candidates = [wiki for wiki in self.wikis if path.is_relative_to(wiki.path)]
        if not candidates:
            return None
        return max(candidates, key=lambda wiki: len(wiki.path.parts))

    def page_relative_path(self) -> PurePosixPath:
        """Path of the page within its wiki, as a posix path."""
        if self.page_path is None:
            return PurePosixPath()
        page = self.page_path
        if self.wiki_root is not None and page.is_absolute() and page.is_relative_to(self.wiki_root):
            page = page.relative_to(self.wiki_root)
        return PurePosixPath(page.as_posix())

    def path_to_root(self) -> str:
        """Relative path from the page's directory back to the wiki root.

        ``""`` for a page at the root, ``"../"`` one directory deep, and so on.
        """
        depth = len(self.page_relative_path().parts) - 1
        return "../" * max(depth, 0)

    def template_path(self, name: Optional[str] = None) -> Optional[Path]:
        if self.template_dir is None:
            return None
        return self.template_dir / f"{name or self.template_name}.{self.template_ext}"


__all__ = ["HtmlRendererOptions", "WikiConfig"]
