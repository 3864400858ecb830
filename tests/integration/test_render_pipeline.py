#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Integration tests running pages through loading, indexing and rendering."""

from pathlib import Path

import pytest
from utils import write_wiki

from vimwiki_ast import parse_page
from vimwiki_ast.ast.ids import IdAllocator
from vimwiki_ast.ast.nodes import Text
from vimwiki_ast.ast.tree import ElementForest
from vimwiki_ast.loader import WikiFileLoader
from vimwiki_ast.options.html import HtmlRendererOptions
from vimwiki_ast.renderers.html import HtmlRenderer


@pytest.mark.integration
class TestSamplePage:
    """Render the shared sample page."""

    def test_fragment(self, sample_wiki_text: str) -> None:
        """Test the main pieces of the sample page's markup."""
        html = HtmlRenderer(HtmlRendererOptions(standalone=False)).render_to_string(parse_page(sample_wiki_text))
        assert html.startswith('<div id="Sample Page"><h1 id="Sample Page" class="header">')
        assert '<span id="Sample Page-sample page"></span><strong>sample page</strong>' in html
        assert "<em>italic text</em>" in html
        assert '<a href="Other%20Page.html">another page</a>' in html
        assert '<a href="https://example.com">https://example.com</a>' in html
        assert '<div id="Sample Page-Tasks"><h2 id="Tasks" class="header">' in html
        assert '<li class="done4">write the parser</li>' in html
        assert '<li class="done1">write the renderer\n<ul>\n<li class="done1">templates</li>' in html
        assert "<ol>\n<li>First item</li>\n<li>Second item</li>\n</ol>\n" in html
        assert "<dl>\n<dt>Term</dt>\n<dd>Definition</dd>\n</dl>\n" in html
        assert "<thead>\n<tr>\n<th>Name</th>\n<th>Value</th>\n</tr>\n</thead>\n" in html
        assert '<pre><code class="python">print(&quot;hello&quot;)\n</code></pre>\n' in html
        assert html.endswith("<hr />\n")

    def test_standalone(self, sample_wiki_text: str) -> None:
        """Test the page title reaches the template."""
        html = HtmlRenderer().render_to_string(parse_page(sample_wiki_text))
        assert "<title>Sample Page</title>" in html
        assert "<body>\n<div" in html

    def test_forest_lookup_on_sample(self, sample_wiki_text: str) -> None:
        """Test an offset inside the bold text finds it."""
        page = parse_page(sample_wiki_text)
        offset = sample_wiki_text.index("sample page*") + 2
        forest = ElementForest.from_page(page, IdAllocator())
        node = forest.find_at_offset(offset)
        assert node.element == Text("sample page")
        assert [type(a.element).__name__ for a in forest.ancestors(node.id)] == ["DecoratedText", "Paragraph"]
        assert sample_wiki_text[node.region.offset : node.region.end_offset] == "sample page"


@pytest.mark.integration
class TestWikiSite:
    """Load a small wiki and render each page."""

    def test_load_and_render(self, temp_dir: Path) -> None:
        """Test cached pages render identically to fresh ones."""
        wiki = temp_dir / "wiki"
        write_wiki(wiki, "index.wiki", "= Home =\n[[diary/2024-01-31|yesterday]]\n")
        write_wiki(wiki, "diary/2024-01-31.wiki", "%date 2024-01-31\n[[diary:2024-01-30]]\n")
        loader = WikiFileLoader(cache_dir=temp_dir / "cache")

        def render_all() -> dict:
            rendered = {}
            for loaded in loader.load_dir(wiki):
                options = HtmlRendererOptions(wiki_root=wiki, page_path=loaded.path, standalone=False)
                rendered[loaded.path.name] = HtmlRenderer(options).render_to_string(loaded.page)
            return rendered

        fresh = render_all()
        cached = render_all()
        assert fresh == cached
        assert '<a href="diary/2024-01-31.html">yesterday</a>' in fresh["index.wiki"]
        assert '<a href="../diary/2024-01-30.html">diary:2024-01-30</a>' in fresh["2024-01-31.wiki"]
