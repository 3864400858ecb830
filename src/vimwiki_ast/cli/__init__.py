"""Command-line interface for the vimwiki_ast library.

Environment Variable Support
----------------------------
Every option takes its default from an environment variable named
VIMWIKI_AST_<OPTION_NAME>, with the option name upper-cased and hyphens
replaced by underscores. Configuration files override environment
defaults; options given on the command line override both.

Examples
--------
Print the syntax tree of a page as JSON::

    $ vimwiki-ast parse index.wiki

Print an outline of the page::

    $ vimwiki-ast parse index.wiki --format tree --rich

Render a wiki to HTML::

    $ vimwiki-ast convert ~/vimwiki --out ~/vimwiki_html

Show the element under a cursor offset::

    $ vimwiki-ast find index.wiki 120

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import argparse
import logging
import sys

from vimwiki_ast.cli.builder import (
    EXIT_ERROR,
    EXIT_FILE_ERROR,
    EXIT_PARSING_ERROR,
    EXIT_RENDERING_ERROR,
    EXIT_VALIDATION_ERROR,
    create_parser,
)
from vimwiki_ast.cli.commands import COMMANDS
from vimwiki_ast.cli.config import load_config_with_priority
from vimwiki_ast.exceptions import FileError, ParsingError, RenderingError, ValidationError, VimwikiAstError
from vimwiki_ast.logging_utils import configure_logging

logger = logging.getLogger(__name__)

__all__ = ["main", "create_parser"]


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    log_level = logging.DEBUG if parsed_args.trace else getattr(logging, parsed_args.log_level.upper())
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def _report_parsing_error(error: ParsingError) -> None:
    print(f"Error: {error.message}", file=sys.stderr)
    if error.contexts:
        print(f"  while parsing: {error.breadcrumbs}", file=sys.stderr)


def main(args: list[str] | None = None) -> int:
    """Execute the CLI and return its exit code."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help(sys.stderr)
        return EXIT_VALIDATION_ERROR

    _setup_logging_level(parsed_args)

    try:
        config = {} if parsed_args.no_config else load_config_with_priority(explicit_path=parsed_args.config)
    except argparse.ArgumentTypeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    command = COMMANDS[parsed_args.command]
    try:
        return command(parsed_args, config)
    except ParsingError as e:
        _report_parsing_error(e)
        return EXIT_PARSING_ERROR
    except FileError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_FILE_ERROR
    except RenderingError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RENDERING_ERROR
    except (ValidationError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR
    except VimwikiAstError as e:
        logger.debug("Unhandled library error", exc_info=True)
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
