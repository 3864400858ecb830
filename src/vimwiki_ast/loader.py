#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/loader.py
"""Load wiki files into parsed pages, with an on-disk parse cache.

Each file's text is hashed with SHA-256. When a cache directory is in use,
the parsed page is stored there as JSON under a name derived from the
checksum and the parser options, so an unchanged file is never parsed
twice. A cache entry that cannot be read back is logged, deleted and
rebuilt; the cache never makes a load fail.

Examples
--------
    >>> loader = WikiFileLoader(cache_dir=Path(".cache"))
    >>> loaded = loader.load(Path("wiki/index.wiki"))
    >>> loaded.from_cache
    False
    >>> loader.load(Path("wiki/index.wiki")).from_cache
    True

"""

from __future__ import annotations

import hashlib
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional

from vimwiki_ast.ast.ids import IdAllocator
from vimwiki_ast.ast.nodes import Page
from vimwiki_ast.ast.serialization import page_from_json, page_to_json
from vimwiki_ast.ast.tree import ElementForest
from vimwiki_ast.constants import CACHE_FILE_SUFFIX, DEFAULT_CACHE_DIR_NAME, DEFAULT_WIKI_EXT
from vimwiki_ast.exceptions import CacheError, ValidationError
from vimwiki_ast.options.vimwiki import VimwikiParserOptions
from vimwiki_ast.parsers.page import VimwikiParser

logger = logging.getLogger(__name__)


def default_cache_dir() -> Path:
    """``$XDG_CACHE_HOME/vimwiki-ast``, or ``~/.cache/vimwiki-ast``."""
    base = os.environ.get("XDG_CACHE_HOME")
    root = Path(base) if base else Path.home() / ".cache"
    return root / DEFAULT_CACHE_DIR_NAME


def compute_checksum(text: str) -> str:
    """SHA-256 hex digest of ``text`` encoded as UTF-8."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


@dataclass
class LoadedPage:
    """A wiki file and its parsed page.

    Parameters
    ----------
    path : Path
        File the page was read from
    checksum : str
        SHA-256 of the file's text
    page : Page
        Parsed page
    from_cache : bool
        True when the page was read from the cache instead of parsed

    """

    path: Path
    checksum: str
    page: Page
    from_cache: bool = False

    def to_forest(self, allocator: Optional[IdAllocator] = None) -> ElementForest:
        """Index the page for offset lookups and navigation."""
        return ElementForest.from_page(self.page, allocator or IdAllocator())


class WikiFileLoader:
    """Read and parse wiki files, caching parsed pages on disk.

    Parameters
    ----------
    cache_dir : Path or None, default = None
        Directory for cache entries; :func:`default_cache_dir` when None
    use_cache : bool, default True
        Read and write cache entries at all
    parser_options : VimwikiParserOptions or None, default = None
        Options for parsing; part of the cache key

    """

    def __init__(
        self,
        cache_dir: Optional[Path] = None,
        use_cache: bool = True,
        parser_options: Optional[VimwikiParserOptions] = None,
    ):
        self.parser_options = parser_options or VimwikiParserOptions()
        self.parser = VimwikiParser(self.parser_options)
        self.use_cache = use_cache
        self.cache_dir = Path(cache_dir) if cache_dir is not None else default_cache_dir()

    # ------------------------------------------------------------------
    # Cache entries
    # ------------------------------------------------------------------

    def _options_tag(self) -> str:
        options = self.parser_options
        return f"p{int(options.track_positions)}c{int(options.keep_comments)}"

    def cache_path(self, checksum: str) -> Path:
        return self.cache_dir / f"{checksum}-{self._options_tag()}{CACHE_FILE_SUFFIX}"

    def _read_cache(self, checksum: str) -> Optional[Page]:
        path = self.cache_path(checksum)
        if not path.is_file():
            return None
        try:
            return page_from_json(path.read_text(encoding="utf-8"))
        except (OSError, ValueError, ValidationError, AttributeError, TypeError) as e:
            raise CacheError(f"Corrupt cache entry {path}: {e}", cache_path=str(path), original_error=e) from e

    def _write_cache(self, checksum: str, page: Page) -> None:
        path = self.cache_path(checksum)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_name(path.name + ".tmp")
            tmp_path.write_text(page_to_json(page), encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            logger.warning(f"Could not write cache entry {path}: {e}")

    def _discard_cache(self, checksum: str) -> None:
        try:
            self.cache_path(checksum).unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not delete cache entry {self.cache_path(checksum)}: {e}")

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_text(self, text: str, path: Optional[Path] = None) -> LoadedPage:
        """Parse (or fetch from cache) text that was already read."""
        checksum = compute_checksum(text)
        source = Path(path) if path is not None else Path("<string>")

        if self.use_cache:
            try:
                cached = self._read_cache(checksum)
            except CacheError as e:
                logger.warning(f"{e.message}; re-parsing {source}")
                self._discard_cache(checksum)
            else:
                if cached is not None:
                    logger.debug(f"Cache hit for {source} ({checksum[:12]})")
                    return LoadedPage(path=source, checksum=checksum, page=cached, from_cache=True)
            logger.debug(f"Cache miss for {source} ({checksum[:12]})")

        page = self.parser.parse_text(text)
        if self.use_cache:
            self._write_cache(checksum, page)
        return LoadedPage(path=source, checksum=checksum, page=page, from_cache=False)

    def load(self, path: Path) -> LoadedPage:
        """Load one wiki file.

        Raises
        ------
        FileNotFoundError
            If ``path`` does not exist
        FileAccessError
            If ``path`` cannot be read
        ParsingError
            If the file is not a valid vimwiki page

        """
        path = Path(path)
        return self.load_text(self.parser._read_path(path), path)

    def iter_dir(self, path: Path, extensions: Iterable[str] = (DEFAULT_WIKI_EXT,)) -> Iterator[Path]:
        """Wiki files below ``path`` with one of ``extensions``, in sorted order."""
        suffixes = {f".{ext.lstrip('.')}" for ext in extensions}
        for file_path in sorted(Path(path).rglob("*")):
            if file_path.is_file() and file_path.suffix in suffixes:
                yield file_path

    def load_dir(self, path: Path, extensions: Iterable[str] = (DEFAULT_WIKI_EXT,)) -> list[LoadedPage]:
        """Load every wiki file below ``path``."""
        extensions = tuple(extensions)
        pages = [self.load(file_path) for file_path in self.iter_dir(path, extensions)]
        hits = sum(1 for page in pages if page.from_cache)
        logger.info(f"Loaded {len(pages)} page(s) from {path} ({hits} from cache)")
        return pages

    def prune_cache(self, keep: Iterable[str]) -> int:
        """Delete cache entries whose checksum is not in ``keep``.

        Returns the number of entries removed.
        """
        if not self.cache_dir.is_dir():
            return 0

        keep_set = set(keep)
        removed = 0
        for entry in self.cache_dir.glob(f"*{CACHE_FILE_SUFFIX}"):
            checksum = entry.name.split("-", 1)[0]
            if checksum in keep_set:
                continue
            try:
                entry.unlink()
            except OSError as e:
                logger.warning(f"Could not delete cache entry {entry}: {e}")
            else:
                removed += 1
        logger.debug(f"Pruned {removed} cache entr{'y' if removed == 1 else 'ies'} from {self.cache_dir}")
        return removed


__all__ = ["LoadedPage", "WikiFileLoader", "compute_checksum", "default_cache_dir"]
