#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/cli/builder.py
"""Argument parser construction for the vimwiki-ast CLI.

Option help texts for parser and renderer options are taken from the
``help`` metadata of the option dataclass fields, so the CLI and the
library document each option once.
"""

from __future__ import annotations

import argparse
from dataclasses import fields
from importlib.metadata import PackageNotFoundError, version

from vimwiki_ast.cli.actions import TrackingStoreAction, TrackingStoreTrueAction
from vimwiki_ast.options.html import HtmlRendererOptions
from vimwiki_ast.options.vimwiki import VimwikiParserOptions, VimwikiRendererOptions

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_PARSING_ERROR = 6
EXIT_RENDERING_ERROR = 7


def _field_help(options_class: type, name: str) -> str:
    for f in fields(options_class):
        if f.name == name:
            return str(f.metadata.get("help", ""))
    raise KeyError(name)


def _package_version() -> str:
    try:
        return version("vimwiki-ast")
    except PackageNotFoundError:
        return "unknown"


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from e
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {number}")
    return number


def _add_parser_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("parser options")
    group.add_argument(
        "--no-positions",
        action=TrackingStoreTrueAction,
        help=f"Do not {_field_help(VimwikiParserOptions, 'track_positions').lower()}",
    )
    group.add_argument(
        "--strip-comments",
        action=TrackingStoreTrueAction,
        help=f"Do not {_field_help(VimwikiParserOptions, 'keep_comments').lower()}",
    )


def _add_rich_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--rich", action=TrackingStoreTrueAction, help="Use rich formatting on a terminal")
    parser.add_argument(
        "--force-rich",
        action=TrackingStoreTrueAction,
        help="Use rich formatting even when output is not a terminal",
    )


def _add_html_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("html options")
    group.add_argument("--wiki-root", action=TrackingStoreAction, help=_field_help(HtmlRendererOptions, "wiki_root"))
    group.add_argument(
        "--template-dir", action=TrackingStoreAction, help=_field_help(HtmlRendererOptions, "template_dir")
    )
    group.add_argument(
        "--template-name", action=TrackingStoreAction, help=_field_help(HtmlRendererOptions, "template_name")
    )
    group.add_argument(
        "--jinja", dest="use_jinja", action=TrackingStoreTrueAction, help=_field_help(HtmlRendererOptions, "use_jinja")
    )
    group.add_argument(
        "--fragment",
        action=TrackingStoreTrueAction,
        help="Emit the page body only, without the page template",
    )
    group.add_argument(
        "--code-server-side",
        action=TrackingStoreTrueAction,
        help=_field_help(HtmlRendererOptions, "code_server_side"),
    )
    group.add_argument("--code-theme", action=TrackingStoreAction, help=_field_help(HtmlRendererOptions, "code_theme"))
    group.add_argument(
        "--include-comments",
        action=TrackingStoreTrueAction,
        help=_field_help(HtmlRendererOptions, "include_comments"),
    )
    group.add_argument(
        "--link-base-url", action=TrackingStoreAction, help=_field_help(HtmlRendererOptions, "link_base_url")
    )
    group.add_argument(
        "--link-canonicalize",
        action=TrackingStoreTrueAction,
        help=_field_help(HtmlRendererOptions, "link_canonicalize"),
    )


def _add_format_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("format options")
    group.add_argument(
        "--indent-str", action=TrackingStoreAction, help=_field_help(VimwikiRendererOptions, "indent_str")
    )
    group.add_argument(
        "--no-header-padding",
        action=TrackingStoreTrueAction,
        help="Write headers as ==text== without spaces",
    )
    group.add_argument(
        "--indented-blockquotes",
        dest="prefer_indented_blockquote",
        action=TrackingStoreTrueAction,
        help=_field_help(VimwikiRendererOptions, "prefer_indented_blockquote"),
    )
    group.add_argument(
        "--term-on-own-line",
        dest="term_on_line_by_itself",
        action=TrackingStoreTrueAction,
        help=_field_help(VimwikiRendererOptions, "term_on_line_by_itself"),
    )
    group.add_argument("--no-trim", action=TrackingStoreTrueAction, help="Keep whitespace around each line of text")
    group.add_argument(
        "--no-pad-tables",
        action=TrackingStoreTrueAction,
        help="Write table cells exactly as parsed, without padding or aligning columns",
    )


def create_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser with its subcommands."""
    parser = argparse.ArgumentParser(
        prog="vimwiki-ast",
        description="Parse vimwiki pages into a located syntax tree, render them to HTML or format them.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")
    parser.add_argument(
        "--log-level",
        action=TrackingStoreAction,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", action=TrackingStoreAction, help="Also write log records to this file")
    parser.add_argument(
        "--trace",
        action=TrackingStoreTrueAction,
        help="Verbose timestamped logging; implies --log-level DEBUG",
    )
    parser.add_argument(
        "--config",
        action=TrackingStoreAction,
        help="Configuration file (.toml, .yaml, .json or pyproject.toml); "
        "defaults to VIMWIKI_AST_CONFIG or an auto-discovered .vimwiki-ast.* file",
    )
    parser.add_argument("--no-config", action=TrackingStoreTrueAction, help="Ignore configuration files")
    parser.add_argument("--cache-dir", action=TrackingStoreAction, help="Directory for the parse cache")
    parser.add_argument("--no-cache", action=TrackingStoreTrueAction, help="Neither read nor write the parse cache")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    parse_cmd = subparsers.add_parser("parse", help="Parse a page and print its syntax tree")
    parse_cmd.add_argument("input", help="Wiki file to parse, or - for standard input")
    parse_cmd.add_argument(
        "--format",
        dest="output_format",
        action=TrackingStoreAction,
        default="json",
        choices=["json", "tree"],
        help="Output format (default: json)",
    )
    parse_cmd.add_argument("--indent", action=TrackingStoreAction, type=_non_negative_int, default=2)
    parse_cmd.add_argument("--out", "-o", action=TrackingStoreAction, help="Write output to this file")
    _add_parser_arguments(parse_cmd)
    _add_rich_arguments(parse_cmd)

    convert_cmd = subparsers.add_parser("convert", help="Render pages to HTML")
    convert_cmd.add_argument("input", nargs="+", help="Wiki files or directories")
    convert_cmd.add_argument("--out", "-o", action=TrackingStoreAction, help="Output directory for HTML files")
    convert_cmd.add_argument("--stdout", action=TrackingStoreTrueAction, help="Write a single page to stdout")
    convert_cmd.add_argument(
        "--ext",
        dest="extensions",
        action="append",
        help="Wiki file extension searched in directories (repeatable, default: wiki)",
    )
    _add_parser_arguments(convert_cmd)
    _add_html_arguments(convert_cmd)

    inspect_cmd = subparsers.add_parser("inspect", help="Summarize the elements of a page")
    inspect_cmd.add_argument("input", help="Wiki file to inspect, or - for standard input")
    _add_parser_arguments(inspect_cmd)
    _add_rich_arguments(inspect_cmd)

    format_cmd = subparsers.add_parser("format", help="Rewrite pages as normalized vimwiki text")
    format_cmd.add_argument("input", nargs="+", help="Wiki files or directories")
    format_cmd.add_argument(
        "--inline",
        "-i",
        action=TrackingStoreTrueAction,
        help="Replace each file with its formatted text instead of printing it",
    )
    format_cmd.add_argument(
        "--ext",
        dest="extensions",
        action="append",
        help="Wiki file extension searched in directories (repeatable, default: wiki)",
    )
    _add_format_arguments(format_cmd)

    find_cmd = subparsers.add_parser("find", help="Show the element at a character offset")
    find_cmd.add_argument("input", help="Wiki file, or - for standard input")
    find_cmd.add_argument("offset", type=_non_negative_int, help="Character offset into the page")
    _add_parser_arguments(find_cmd)

    return parser


__all__ = [
    "EXIT_SUCCESS",
    "EXIT_ERROR",
    "EXIT_VALIDATION_ERROR",
    "EXIT_FILE_ERROR",
    "EXIT_PARSING_ERROR",
    "EXIT_RENDERING_ERROR",
    "create_parser",
]
