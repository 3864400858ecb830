#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/renderers/html.py
"""HTML rendering from a parsed vimwiki page.

This module provides :class:`HtmlRenderer`, a visitor that converts a
:class:`~vimwiki_ast.ast.nodes.Page` into HTML following the vimwiki
plugin's conventions: header ids built from the enclosing headers, todo
classes ``done0`` to ``done4``, ``rejected`` on list items, and links
resolved to relative ``.html`` paths.

Placeholders do not emit markup. ``%title``, ``%date`` and ``%template``
are collected while rendering and fill the page template when the
renderer runs in standalone mode.

Examples
--------
    >>> from vimwiki_ast.parsers.page import parse_page
    >>> from vimwiki_ast.options.html import HtmlRendererOptions
    >>> renderer = HtmlRenderer(HtmlRendererOptions(standalone=False))
    >>> renderer.render_to_string(parse_page("*bold* and [[Page]]\\n"))
    '<p><span id="bold"></span><strong>bold</strong> and <a href="Page.html">Page</a></p>\\n'

"""

from __future__ import annotations

import datetime
import html
import logging
import posixpath
import re
from pathlib import Path, PurePosixPath
from typing import IO, Optional, Union
from urllib.parse import urljoin

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape
from markupsafe import Markup
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from vimwiki_ast.ast.links import LinkData, LinkKind
from vimwiki_ast.ast.lists import List, ListItem, ListItemTodoStatus
from vimwiki_ast.ast.nodes import (
    Blockquote,
    CodeBlock,
    CodeInline,
    Comment,
    CommentInline,
    CommentKind,
    DecoratedText,
    Decoration,
    Definition,
    DefinitionList,
    Divider,
    Header,
    InlineElementContainer,
    Keyword,
    KeywordKind,
    Link,
    MathBlock,
    MathInline,
    Page,
    Paragraph,
    Placeholder,
    PlaceholderKind,
    Tags,
    Term,
    Text,
)
from vimwiki_ast.ast.tables import Table
from vimwiki_ast.ast.visitors import NodeVisitor
from vimwiki_ast.constants import (
    DEFAULT_DIARY_REL_PATH,
    DEFAULT_DIRECTORY_INDEX,
    DEFAULT_HTML_EXT,
    TODO_CSS_CLASSES,
    TODO_REJECTED_CSS_CLASS,
)
from vimwiki_ast.exceptions import RenderingError
from vimwiki_ast.options.html import HtmlRendererOptions, WikiConfig
from vimwiki_ast.renderers.base import BaseRenderer

logger = logging.getLogger(__name__)

_DECORATION_TAGS = {
    Decoration.ITALIC: ("<em>", "</em>"),
    Decoration.STRIKEOUT: ("<del>", "</del>"),
    Decoration.SUPERSCRIPT: ("<sup><small>", "</small></sup>"),
    Decoration.SUBSCRIPT: ("<sub><small>", "</small></sub>"),
}


def _escape(text: str) -> str:
    return html.escape(text, quote=True)


def _comment_text(text: str) -> str:
    """Break up every ``--`` so the text cannot close an HTML comment."""
    return re.sub(r"-(?=-)", "- ", text)


def todo_css_class(item: ListItem) -> Optional[str]:
    """CSS class for a todo list item, or None for a plain item.

    Rejected items get ``rejected``; otherwise the item's progress (its
    own status, or the average over its sublists) picks one of ``done0``
    (nothing done) to ``done4`` (complete).
    """
    if item.todo_status is ListItemTodoStatus.REJECTED:
        return TODO_REJECTED_CSS_CLASS

    progress = item.compute_todo_progress()
    if progress is None:
        return None
    if progress <= 0.0:
        return TODO_CSS_CLASSES[0]
    if progress >= 1.0:
        return TODO_CSS_CLASSES[-1]
    return TODO_CSS_CLASSES[min(max(round(progress * 4), 1), 3)]


class HtmlRenderer(NodeVisitor, BaseRenderer):
    """Render a vimwiki page to HTML.

    Parameters
    ----------
    options : HtmlRendererOptions or None, default = None
        HTML rendering options

    Attributes
    ----------
    title : str or None
        Title set by a ``%title`` placeholder during the last render
    date : datetime.date or None
        Date set by a ``%date`` placeholder during the last render
    template : str or None
        Template name set by a ``%template`` placeholder during the last render
    nohtml : bool
        True when the last rendered page carried ``%nohtml``

    Examples
    --------
    Standalone page with a custom template text:

        >>> options = HtmlRendererOptions(template_text="<title>%title%</title>%content%")
        >>> HtmlRenderer(options).render_to_string(parse_page("%title Notes\\n"))
        '<title>Notes</title>'

    """

    def __init__(self, options: HtmlRendererOptions | None = None):
        BaseRenderer._validate_options_type(options, HtmlRendererOptions, "html")
        options = options or HtmlRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: HtmlRendererOptions = options
        self._reset()

    def _reset(self) -> None:
        self._output: list[str] = []
        self._header_ids: dict[int, str] = {}
        self._used_ids: dict[str, int] = {}
        self.title: Optional[str] = None
        self.date: Optional[datetime.date] = None
        self.template: Optional[str] = None
        self.nohtml = False

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def render_to_string(self, page: Page) -> str:
        """Render a page to an HTML string.

        Returns the bare content when ``standalone`` is False, otherwise the
        content placed in the page template.

        Raises
        ------
        RenderingError
            If a link cannot be resolved, the code theme is unknown or the
            template cannot be loaded or rendered

        """
        self._reset()
        page.accept(self)
        content = "".join(self._output)
        if not self.options.standalone:
            return content
        return self._apply_template(content)

    def render(self, page: Page, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Render a page and write the HTML to ``output``."""
        self.write_text_output(self.render_to_string(page), output)

    def _render_container(self, container: InlineElementContainer) -> str:
        saved_output = self._output
        self._output = []
        for element in container.elements:
            element.accept(self)
        result = "".join(self._output)
        self._output = saved_output
        return result

    # ------------------------------------------------------------------
    # Header ids
    # ------------------------------------------------------------------

    def _build_complete_id(self, max_level: int, element_id: str) -> str:
        parts = [self._header_ids[level] for level in range(1, max_level) if level in self._header_ids]
        parts.append(element_id)
        return "-".join(parts)

    def _unique_id(self, element_id: str) -> str:
        count = self._used_ids.get(element_id, 0) + 1
        self._used_ids[element_id] = count
        return element_id if count == 1 else f"{element_id}-{count}"

    def _max_header_level(self) -> int:
        return max(self._header_ids, default=0)

    # ------------------------------------------------------------------
    # Template
    # ------------------------------------------------------------------

    def _load_template(self) -> str:
        if self.template is not None:
            path = self.options.template_path(self.template)
            if path is None:
                raise RenderingError(
                    f"Page requests template {self.template!r} but no template directory is configured",
                    rendering_stage="template",
                )
        else:
            path = self.options.template_path()
            if path is None or not path.is_file():
                return self.options.template_text

        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise RenderingError(f"Failed to read template {path}: {e}", rendering_stage="template", original_error=e) from e

    def _template_context(self, content: str) -> dict[str, str]:
        page_path = self.options.page_relative_path()
        title = self.title if self.title is not None else page_path.stem
        date = self.date or datetime.date.today()
        return {
            "title": title,
            "date": date.isoformat(),
            "root_path": self.options.path_to_root(),
            "wiki_path": str(page_path) if page_path.parts else "",
            "css": self.options.css_name,
            "encoding": self.options.encoding,
            "content": content,
        }

    def _apply_template(self, content: str) -> str:
        source = self._load_template()
        context = self._template_context(content)

        if self.options.use_jinja:
            loader = FileSystemLoader(str(self.options.template_dir)) if self.options.template_dir else None
            env = Environment(
                loader=loader,
                autoescape=select_autoescape(["html", "xml", self.options.template_ext], default_for_string=True),
            )
            try:
                template = env.from_string(source)
                return template.render(**{**context, "content": Markup(content)})
            except TemplateError as e:
                raise RenderingError(f"Failed to render template: {e}", rendering_stage="template", original_error=e) from e

        result = source
        for name, value in context.items():
            if name != "content":
                result = result.replace(f"%{name}%", _escape(value) if name == "title" else value)
        return result.replace("%content%", content)

    # ------------------------------------------------------------------
    # Block elements
    # ------------------------------------------------------------------

    def visit_page(self, node: Page) -> None:
        for block in node.elements:
            block.accept(self)

    def visit_header(self, node: Header) -> None:
        """Render a header wrapped in a div carrying its complete id.

        The complete id joins the ids of the nearest enclosing header of
        every higher level, so ``[[#Parent#Child]]`` links resolve.
        """
        text = node.content.to_text().strip()
        header_id = _escape(text)
        for level in [lvl for lvl in self._header_ids if lvl > node.level]:
            del self._header_ids[level]
        self._header_ids[node.level] = header_id

        content = self._render_container(node.content)
        level = node.level
        center = ' style="text-align:center"' if node.centered else ""

        if text == self.options.toc_header_text:
            div_id = self._unique_id(header_id)
            self._output.append(
                f'<div id="{div_id}" class="toc"><h{level} id="{header_id}" class="header"{center}>'
                f"{content}</h{level}></div>\n"
            )
            return

        complete_id = self._unique_id(self._build_complete_id(level, header_id))
        self._output.append(
            f'<div id="{complete_id}"><h{level} id="{header_id}" class="header"{center}>'
            f'<a href="#{complete_id}">{content}</a></h{level}></div>\n'
        )

    def visit_paragraph(self, node: Paragraph) -> None:
        separator = " " if self.options.paragraph_ignore_newline else "<br />\n"
        lines = [self._render_container(line).strip() for line in node.lines]
        self._output.append(f"<p>{separator.join(line for line in lines if line)}</p>\n")

    def visit_definition_list(self, node: DefinitionList) -> None:
        self._output.append("<dl>\n")
        for item in node.items:
            item.term.accept(self)
            for definition in item.definitions:
                definition.accept(self)
        self._output.append("</dl>\n")

    def visit_term(self, node: Term) -> None:
        self._output.append(f"<dt>{self._render_container(node.content)}</dt>\n")

    def visit_definition(self, node: Definition) -> None:
        self._output.append(f"<dd>{self._render_container(node.content)}</dd>\n")

    def visit_list(self, node: List) -> None:
        tag = "ol" if node.is_ordered() else "ul"
        self._output.append(f"<{tag}>\n")
        for item in node.items:
            item.accept(self)
        self._output.append(f"</{tag}>\n")

    def visit_list_item(self, node: ListItem) -> None:
        css_class = todo_css_class(node)
        self._output.append(f'<li class="{css_class}">' if css_class else "<li>")

        separator = " " if self.options.list_ignore_newline else "<br />\n"
        pending: list[str] = []
        for content in node.contents:
            if isinstance(content.element, List):
                if pending:
                    self._output.append(separator.join(pending))
                    pending = []
                self._output.append("\n")
                content.accept(self)
            else:
                pending.append(self._render_container(content.element))
        if pending:
            self._output.append(separator.join(pending))
        self._output.append("</li>\n")

    def visit_table(self, node: Table) -> None:
        """Render a table, emitting rowspan/colspan for ``\\/`` and ``>`` cells."""
        self._output.append('<table class="center">\n' if node.centered else "<table>\n")

        for section, cell_tag, rows in (("thead", "th", node.header_rows()), ("tbody", "td", node.body_rows())):
            if not rows:
                continue
            self._output.append(f"<{section}>\n")
            for row in rows:
                self._output.append("<tr>\n")
                for col in range(node.column_count):
                    cell = node.get_cell(row, col)
                    if cell is None or cell.content is None:
                        continue
                    attrs = ""
                    rowspan = node.get_cell_rowspan(row, col)
                    if rowspan > 1:
                        attrs += f' rowspan="{rowspan}"'
                    colspan = node.get_cell_colspan(row, col)
                    if colspan > 1:
                        attrs += f' colspan="{colspan}"'
                    text = self._render_container(cell.content).strip()
                    self._output.append(f"<{cell_tag}{attrs}>{text}</{cell_tag}>\n")
                self._output.append("</tr>\n")
            self._output.append(f"</{section}>\n")

        self._output.append("</table>\n")

    def visit_code_block(self, node: CodeBlock) -> None:
        if self.options.code_server_side:
            self._output.append(self._highlight(node))
            return

        attrs = ""
        if node.language:
            attrs += f' class="{_escape(node.language)}"'
        for key, value in node.properties.items():
            attrs += f' {_escape(key)}="{_escape(value)}"'
        code = "\n".join(_escape(line) for line in node.lines)
        self._output.append(f"<pre><code{attrs}>{code}\n</code></pre>\n")

    def _highlight(self, node: CodeBlock) -> str:
        try:
            style = get_style_by_name(self.options.code_theme)
        except ClassNotFound as e:
            raise RenderingError(
                f"Unknown code theme: {self.options.code_theme}", rendering_stage="code", original_error=e
            ) from e

        try:
            lexer = get_lexer_by_name(node.language) if node.language else TextLexer()
        except ClassNotFound:
            logger.debug(f"No lexer for language {node.language!r}, highlighting as plain text")
            lexer = TextLexer()

        formatter = HtmlFormatter(style=style, noclasses=True, cssclass="code")
        return highlight("\n".join(node.lines) + "\n", lexer, formatter)

    def visit_math_block(self, node: MathBlock) -> None:
        body = "".join(f"{_escape(line)}\n" for line in node.lines)
        if node.environment:
            environment = _escape(node.environment)
            self._output.append(f"\\begin{{{environment}}}\n{body}\\end{{{environment}}}\n")
        else:
            self._output.append(f"\\[\n{body}\\]\n")

    def visit_blockquote(self, node: Blockquote) -> None:
        """Render a blockquote, one paragraph per run of non-blank lines."""
        paragraphs: list[list[str]] = [[]]
        for line in node.lines:
            if line.strip():
                paragraphs[-1].append(_escape(line.strip()))
            elif paragraphs[-1]:
                paragraphs.append([])

        self._output.append("<blockquote>\n")
        for lines in paragraphs:
            if lines:
                self._output.append(f"<p>{' '.join(lines)}</p>\n")
        self._output.append("</blockquote>\n")

    def visit_divider(self, node: Divider) -> None:
        self._output.append("<hr />\n")

    def visit_placeholder(self, node: Placeholder) -> None:
        if node.kind is PlaceholderKind.TITLE:
            self.title = node.value
        elif node.kind is PlaceholderKind.DATE:
            self.date = node.date
        elif node.kind is PlaceholderKind.TEMPLATE:
            self.template = node.value
        elif node.kind is PlaceholderKind.NO_HTML:
            self.nohtml = True

    def visit_comment(self, node: Comment) -> None:
        if not self.options.include_comments:
            return
        if node.kind is CommentKind.LINE:
            self._output.append(f"<!-- {_comment_text(node.lines[0]) if node.lines else ''} -->\n")
        else:
            self._output.append("<!--\n" + "".join(f"{_comment_text(line)}\n" for line in node.lines) + "-->\n")

    # ------------------------------------------------------------------
    # Inline elements
    # ------------------------------------------------------------------

    def visit_text(self, node: Text) -> None:
        self._output.append(_escape(node.content))

    def visit_decorated_text(self, node: DecoratedText) -> None:
        saved_output = self._output
        self._output = []
        for element in node.contents:
            element.accept(self)
        inner = "".join(self._output)
        self._output = saved_output

        if node.kind is Decoration.BOLD:
            # Bold text doubles as an anchor target
            anchor = _escape(node.to_text())
            complete_id = self._build_complete_id(self._max_header_level() + 1, anchor)
            self._output.append(f'<span id="{complete_id}"></span><strong>{inner}</strong>')
            return

        start, end = _DECORATION_TAGS[node.kind]
        self._output.append(f"{start}{inner}{end}")

    def visit_keyword(self, node: Keyword) -> None:
        if node.kind is KeywordKind.TODO:
            self._output.append('<span class="todo">TODO</span>')
        else:
            self._output.append(node.kind.value)

    def visit_tags(self, node: Tags) -> None:
        for name in node.names:
            tag_id = _escape(name)
            complete_id = self._build_complete_id(self._max_header_level() + 1, tag_id)
            self._output.append(f'<span id="{complete_id}"></span><span class="tag" id="{tag_id}">{tag_id}</span>')

    def visit_code_inline(self, node: CodeInline) -> None:
        self._output.append(f"<code>{_escape(node.code)}</code>")

    def visit_math_inline(self, node: MathInline) -> None:
        self._output.append(f"\\({_escape(node.formula)}\\)")

    def visit_comment_inline(self, node: CommentInline) -> None:
        if self.options.include_comments:
            self._output.append(f"<!-- {_comment_text(' '.join(node.lines))} -->")

    def visit_link(self, node: Link) -> None:
        if node.kind is LinkKind.TRANSCLUSION:
            self._output.append(self._render_transclusion(node.data))
            return

        href = self._resolve_href(node)
        description = node.data.description
        if isinstance(description, LinkData):
            text = self._render_transclusion(description)
        elif description is not None:
            text = _escape(description)
        elif node.kind is LinkKind.DIARY:
            text = _escape(f"diary:{node.data.to_decoded_uri_string()}")
        else:
            text = _escape(node.data.to_decoded_uri_string())
        self._output.append(f'<a href="{_escape(href)}">{text}</a>')

    def _render_transclusion(self, data: LinkData) -> str:
        attrs = f' src="{_escape(data.uri)}"'
        if data.description is not None:
            alt = data.description if isinstance(data.description, str) else data.description.uri
            attrs += f' alt="{_escape(alt)}"'
        for key, value in (data.properties or {}).items():
            attrs += f' {_escape(key)}="{_escape(value)}"'
        return f"<img{attrs} />"

    # ------------------------------------------------------------------
    # Link resolution
    # ------------------------------------------------------------------

    def _resolve_href(self, link: Link) -> str:
        """Compute the href for any non-transclusion link."""
        data = link.data
        if link.kind is LinkKind.RAW:
            return data.uri
        if data.is_remote():
            return data.uri

        anchor = "#" + "-".join(data.anchor) if data.anchor else ""
        if link.kind is LinkKind.WIKI and data.is_local_anchor():
            return anchor

        if data.scheme in ("file", "local"):
            return self._canonicalize(self._page_href(data, html_ext=False, wiki=None)) + anchor

        wiki: Optional[WikiConfig] = None
        if link.kind is LinkKind.INDEXED_INTERWIKI:
            wiki = self.options.find_wiki_by_index(link.index) if link.index is not None else None
            if wiki is None:
                raise RenderingError(f"No wiki with index {link.index} for link {data.uri!r}", rendering_stage="links")
        elif link.kind is LinkKind.NAMED_INTERWIKI:
            wiki = self.options.find_wiki_by_name(link.name) if link.name is not None else None
            if wiki is None:
                raise RenderingError(f"No wiki named {link.name!r} for link {data.uri!r}", rendering_stage="links")

        if link.kind is LinkKind.DIARY:
            current = self._current_wiki()
            diary_dir = current.diary_rel_path if current is not None else DEFAULT_DIARY_REL_PATH
            date = link.date.isoformat() if link.date else data.path
            href = f"{self.options.path_to_root()}{diary_dir}/{date}.{DEFAULT_HTML_EXT}"
            return self._canonicalize(href) + anchor

        return self._canonicalize(self._page_href(data, html_ext=True, wiki=wiki)) + anchor

    def _current_wiki(self) -> Optional[WikiConfig]:
        if self.options.wiki_root is None:
            return None
        return self.options.find_wiki_by_path(self.options.wiki_root)

    def _page_href(self, data: LinkData, html_ext: bool, wiki: Optional[WikiConfig]) -> str:
        path = data.path
        is_dir = data.is_path_dir()
        if html_ext:
            if is_dir:
                path = f"{path}{DEFAULT_DIRECTORY_INDEX}.{DEFAULT_HTML_EXT}"
            elif path:
                path = f"{path}.{DEFAULT_HTML_EXT}"

        if wiki is not None:
            return self._interwiki_prefix(wiki) + path.lstrip("/")
        if path.startswith("/"):
            return self.options.path_to_root() + path.lstrip("/")
        return path

    def _interwiki_prefix(self, wiki: WikiConfig) -> str:
        """Relative path from the current page's output directory to another wiki's root."""
        current = self._current_wiki()
        page_dir = self.options.page_relative_path().parent
        if current is None:
            return wiki.html_root.as_posix().rstrip("/") + "/"

        source_dir = PurePosixPath(current.html_root.as_posix()) / page_dir
        relative = posixpath.relpath(wiki.html_root.as_posix(), source_dir.as_posix())
        return "" if relative == "." else relative + "/"

    def _canonicalize(self, href: str) -> str:
        if not self.options.link_canonicalize or "://" in href:
            return href
        page_dir = self.options.page_relative_path().parent.as_posix()
        base = self.options.link_base_url.rstrip("/") + "/"
        if page_dir not in ("", "."):
            base += page_dir + "/"
        return urljoin(base, href)


__all__ = ["HtmlRenderer", "todo_css_class"]
