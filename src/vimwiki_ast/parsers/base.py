#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/parsers/base.py
"""Base class for page parsers.

Parsers accept a path, raw bytes, a text string or a file-like object and
return a :class:`~vimwiki_ast.ast.nodes.Page`.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Union

from vimwiki_ast.ast.nodes import Page
from vimwiki_ast.exceptions import FileAccessError, FileNotFoundError, InvalidOptionsError
from vimwiki_ast.options.base import BaseParserOptions
from vimwiki_ast.utils.encoding import normalize_stream_to_text, read_text_with_encoding_detection

logger = logging.getLogger(__name__)

ParserInput = Union[str, Path, IO[bytes], IO[str], bytes]


class BaseParser(ABC):
    """Abstract base class for page parsers.

    Parameters
    ----------
    options : BaseParserOptions or None, default = None
        Parser-specific options

    Notes
    -----
    The parse() method should handle all supported input types:
    - Path: File path to read
    - str: File path when it names an existing file, otherwise the text itself
    - IO[bytes] or IO[str]: File-like object
    - bytes: Raw page bytes

    """

    def __init__(self, options: BaseParserOptions | None = None):
        self.options: BaseParserOptions | None = options

    @staticmethod
    def _validate_options_type(options: BaseParserOptions | None, expected_type: type, parser_name: str) -> None:
        """Validate that options are of the correct type for this parser.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                component_name=parser_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @abstractmethod
    def parse(self, input_data: ParserInput) -> Page:
        """Parse the input into a page.

        Raises
        ------
        ParsingError
            If the text is not a valid page
        FileNotFoundError
            If a path is given that does not exist
        FileAccessError
            If a path is given that cannot be read

        """
        raise NotImplementedError

    @staticmethod
    def _read_path(path: Path) -> str:
        if not path.exists():
            raise FileNotFoundError(str(path))
        try:
            data = path.read_bytes()
        except OSError as e:
            raise FileAccessError(str(path), original_error=e) from e
        return read_text_with_encoding_detection(data)

    @staticmethod
    def _load_text_content(input_data: ParserInput) -> str:
        """Load content from various input types with encoding detection."""
        if isinstance(input_data, bytes):
            return read_text_with_encoding_detection(input_data)
        elif isinstance(input_data, Path):
            return BaseParser._read_path(input_data)
        elif isinstance(input_data, str):
            # Could be file path or content; very long strings raise OSError on exists()
            if input_data and len(input_data) <= 260 and "\n" not in input_data:
                try:
                    path = Path(input_data)
                    is_file = path.is_file()
                except OSError:
                    is_file = False
                if is_file:
                    logger.debug(f"Reading page from {input_data}")
                    return BaseParser._read_path(path)
            return input_data
        else:
            if input_data.seekable():
                input_data.seek(0)
            return normalize_stream_to_text(input_data)
