#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/cli/commands.py
"""Subcommand implementations for the vimwiki-ast CLI.

Each ``run_*`` function takes the parsed arguments and the loaded
configuration and returns a process exit code. Library errors propagate to
:func:`vimwiki_ast.cli.main`, which maps them to exit codes.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from vimwiki_ast.ast.serialization import page_to_json
from vimwiki_ast.ast.utils import count_element_types
from vimwiki_ast.cli.actions import was_provided
from vimwiki_ast.cli.builder import EXIT_FILE_ERROR, EXIT_SUCCESS, EXIT_VALIDATION_ERROR
from vimwiki_ast.cli.config import config_section
from vimwiki_ast.cli.output import describe_element, print_element_counts, print_tree, should_use_rich_output
from vimwiki_ast.constants import DEFAULT_HTML_EXT, DEFAULT_WIKI_EXT
from vimwiki_ast.loader import LoadedPage, WikiFileLoader, compute_checksum
from vimwiki_ast.options.html import HtmlRendererOptions, WikiConfig
from vimwiki_ast.options.vimwiki import VimwikiParserOptions, VimwikiRendererOptions
from vimwiki_ast.renderers.html import HtmlRenderer
from vimwiki_ast.renderers.vimwiki import VimwikiRenderer
from vimwiki_ast.utils.encoding import normalize_stream_to_text
from vimwiki_ast.utils.io_utils import write_content

logger = logging.getLogger(__name__)

STDIN_MARKER = "-"

# CLI dest -> html option field, for flags that map one-to-one
_HTML_FLAG_FIELDS = {
    "wiki_root": "wiki_root",
    "template_dir": "template_dir",
    "template_name": "template_name",
    "use_jinja": "use_jinja",
    "code_server_side": "code_server_side",
    "code_theme": "code_theme",
    "include_comments": "include_comments",
    "link_base_url": "link_base_url",
    "link_canonicalize": "link_canonicalize",
}

# CLI dest -> format option field; "no_*" flags switch the option off
_FORMAT_FLAG_FIELDS = {
    "indent_str": "indent_str",
    "no_header_padding": "header_padding",
    "prefer_indented_blockquote": "prefer_indented_blockquote",
    "term_on_line_by_itself": "term_on_line_by_itself",
    "no_trim": "trim_lines",
    "no_pad_tables": "pad_table_cells",
}

# ----------------------------------------------------------------------
# Options
# ----------------------------------------------------------------------


def build_parser_options(args: argparse.Namespace, config: Dict[str, Any]) -> VimwikiParserOptions:
    """Parser options from the ``[parser]`` config table, overridden by flags.

    Raises
    ------
    ValueError
        If the configuration holds invalid option values

    """
    options = VimwikiParserOptions.from_mapping(config_section(config, "parser"))
    if getattr(args, "no_positions", False):
        options = options.create_updated(track_positions=False)
    if getattr(args, "strip_comments", False):
        options = options.create_updated(keep_comments=False)
    return options


def build_html_options(args: argparse.Namespace, config: Dict[str, Any]) -> HtmlRendererOptions:
    """Renderer options from the ``[html]`` config table, overridden by flags.

    Raises
    ------
    ValueError
        If the configuration holds invalid option values

    """
    values = config_section(config, "html")
    for dest, name in _HTML_FLAG_FIELDS.items():
        if was_provided(args, dest) or (name not in values and getattr(args, dest, None) not in (None, False)):
            values[name] = getattr(args, dest)
    if getattr(args, "fragment", False):
        values["standalone"] = False
    return HtmlRendererOptions.from_mapping(values)


def build_format_options(args: argparse.Namespace, config: Dict[str, Any]) -> VimwikiRendererOptions:
    """Formatting options from the ``[format]`` config table, overridden by flags.

    Raises
    ------
    ValueError
        If the configuration holds invalid option values

    """
    values = config_section(config, "format")
    for dest, name in _FORMAT_FLAG_FIELDS.items():
        value = getattr(args, dest, None)
        if value in (None, False):
            continue
        values[name] = False if dest.startswith("no_") else value
    return VimwikiRendererOptions.from_mapping(values)


def build_loader(
    args: argparse.Namespace, config: Dict[str, Any], parser_options: VimwikiParserOptions
) -> WikiFileLoader:
    cache = config_section(config, "cache")
    cache_dir = args.cache_dir or cache.get("dir")
    use_cache = not args.no_cache and bool(cache.get("enabled", True))
    return WikiFileLoader(
        cache_dir=Path(cache_dir).expanduser() if cache_dir else None,
        use_cache=use_cache,
        parser_options=parser_options,
    )


def load_input(loader: WikiFileLoader, input_path: str) -> LoadedPage:
    """Load a file, or standard input for ``-``."""
    if input_path == STDIN_MARKER:
        return loader.load_text(normalize_stream_to_text(sys.stdin))
    return loader.load(Path(input_path))


# ----------------------------------------------------------------------
# parse
# ----------------------------------------------------------------------


def run_parse(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    """Print the parsed page as JSON or as an outline tree."""
    loader = build_loader(args, config, build_parser_options(args, config))
    loaded = load_input(loader, args.input)

    if args.output_format == "tree":
        if args.out:
            with open(args.out, "w", encoding="utf-8") as f:
                print_tree(loaded.page, use_rich=False, stream=f)
        else:
            print_tree(loaded.page, use_rich=should_use_rich_output(args), title=str(loaded.path))
        return EXIT_SUCCESS

    text = page_to_json(loaded.page, indent=args.indent or None) + "\n"
    write_content(text, args.out if args.out else sys.stdout)
    return EXIT_SUCCESS


# ----------------------------------------------------------------------
# inspect
# ----------------------------------------------------------------------


def run_inspect(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    """Print the page title and a count of its elements by type."""
    loader = build_loader(args, config, build_parser_options(args, config))
    loaded = load_input(loader, args.input)
    page = loaded.page

    title = page.title
    header = f"{loaded.path}: {len(page.elements)} block(s)"
    if title:
        header += f", title {title!r}"
    if loaded.from_cache:
        header += " (cached)"
    print(header)
    print_element_counts(count_element_types(page), use_rich=should_use_rich_output(args))
    return EXIT_SUCCESS


# ----------------------------------------------------------------------
# find
# ----------------------------------------------------------------------


def run_find(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    """Print the deepest element containing an offset, then its ancestors."""
    loader = build_loader(args, config, build_parser_options(args, config))
    loaded = load_input(loader, args.input)
    forest = loaded.to_forest()
    try:
        node = forest.find_at_offset(args.offset)
        if node is None:
            print(f"No element at offset {args.offset}", file=sys.stderr)
            return EXIT_VALIDATION_ERROR

        print(f"[{node.id}] {describe_element(node.data)}")
        for ancestor in forest.ancestors(node.id):
            print(f"  in [{ancestor.id}] {describe_element(ancestor.data)}")
    finally:
        forest.release()
    return EXIT_SUCCESS


# ----------------------------------------------------------------------
# convert
# ----------------------------------------------------------------------


def _collect_inputs(inputs: list[str], loader: WikiFileLoader, extensions: tuple[str, ...]) -> list[tuple[Path, Path]]:
    """``(file, wiki_root)`` pairs; a directory argument is the root of its files."""
    items = []
    for raw in inputs:
        path = Path(raw)
        if path.is_dir():
            items.extend((file_path, path) for file_path in loader.iter_dir(path, extensions))
        else:
            items.append((path, path.parent))
    return items


def _page_options(
    base: HtmlRendererOptions, file_path: Path, default_root: Path
) -> tuple[HtmlRendererOptions, Optional[WikiConfig]]:
    absolute = file_path.resolve()
    wiki = base.find_wiki_by_path(absolute)
    if base.wiki_root is not None:
        root = base.wiki_root.resolve()
    elif wiki is not None:
        root = wiki.path.resolve()
    else:
        root = default_root.resolve()
    return base.create_updated(wiki_root=root, page_path=absolute), wiki


def _output_path(options: HtmlRendererOptions, out_dir: Optional[Path], wiki: Optional[WikiConfig]) -> Path:
    relative = Path(options.page_relative_path()).with_suffix(f".{DEFAULT_HTML_EXT}")
    if out_dir is not None:
        return out_dir / relative
    if options.output_root is not None:
        return options.output_root / relative
    if wiki is not None:
        return wiki.html_root / relative
    root = options.wiki_root or Path.cwd()
    return root.with_name(root.name + "_html") / relative


def run_convert(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    """Render each input page to an HTML file (or stdout for ``--stdout``)."""
    loader = build_loader(args, config, build_parser_options(args, config))
    base_options = build_html_options(args, config)
    extensions = tuple(args.extensions or (DEFAULT_WIKI_EXT,))

    items = _collect_inputs(args.input, loader, extensions)
    if not items:
        print("Error: No wiki files found", file=sys.stderr)
        return EXIT_FILE_ERROR
    if args.stdout and len(items) > 1:
        print("Error: --stdout requires exactly one input page", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    out_dir = Path(args.out) if args.out else None
    written = skipped = 0
    for file_path, default_root in items:
        options, wiki = _page_options(base_options, file_path, default_root)
        loaded = loader.load(file_path)
        renderer = HtmlRenderer(options)
        html = renderer.render_to_string(loaded.page)

        if renderer.nohtml:
            logger.info(f"Skipping {file_path}: page is marked %nohtml")
            skipped += 1
            continue

        if args.stdout:
            sys.stdout.write(html)
        else:
            target = _output_path(options, out_dir, wiki)
            renderer.write_text_output(html, target)
            logger.info(f"Wrote {target}")
        written += 1

    logger.info(f"Converted {written} page(s), skipped {skipped}")
    return EXIT_SUCCESS


# ----------------------------------------------------------------------
# format
# ----------------------------------------------------------------------


def run_format(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    """Print each input page as normalized vimwiki text, or rewrite it in place.

    Comments are always kept, whatever the parser configuration says, so
    rewriting a file never drops them.
    """
    parser_options = build_parser_options(args, config).create_updated(keep_comments=True)
    loader = build_loader(args, config, parser_options)
    renderer = VimwikiRenderer(build_format_options(args, config))
    extensions = tuple(args.extensions or (DEFAULT_WIKI_EXT,))

    items = _collect_inputs(args.input, loader, extensions)
    if not items:
        print("Error: No wiki files found", file=sys.stderr)
        return EXIT_FILE_ERROR

    changed = 0
    for file_path, _ in items:
        loaded = loader.load(file_path)
        text = renderer.render_to_string(loaded.page)

        if not args.inline:
            sys.stdout.write(text)
        elif compute_checksum(text) == loaded.checksum:
            logger.debug(f"{file_path} is already formatted")
        else:
            renderer.write_text_output(text, file_path)
            logger.info(f"Formatted {file_path}")
            changed += 1

    if args.inline:
        logger.info(f"Formatted {changed} of {len(items)} page(s)")
    return EXIT_SUCCESS


COMMANDS = {
    "parse": run_parse,
    "convert": run_convert,
    "format": run_format,
    "inspect": run_inspect,
    "find": run_find,
}
