#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/renderers/base.py
"""Base classes for page renderers.

This module defines the abstract base class that renderers inherit from,
giving every output format the same ``render`` / ``render_to_string``
interface over a parsed :class:`~vimwiki_ast.ast.nodes.Page`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Union

from vimwiki_ast.ast.nodes import Page
from vimwiki_ast.exceptions import InvalidOptionsError
from vimwiki_ast.options.base import BaseRendererOptions
from vimwiki_ast.utils.io_utils import write_content


class BaseRenderer(ABC):
    """Abstract base class for page renderers.

    Parameters
    ----------
    options : BaseRendererOptions or None, default = None
        Format-specific rendering options

    """

    def __init__(self, options: BaseRendererOptions | None = None):
        self.options = options or BaseRendererOptions()

    @abstractmethod
    def render(self, page: Page, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Render ``page`` and write the result to ``output``.

        Raises
        ------
        RenderingError
            If rendering fails
        OutputWriteError
            If a path output cannot be written

        """

    def render_to_string(self, page: Page) -> str:
        """Render the page to a string.

        Raises
        ------
        NotImplementedError
            If the renderer does not support string output

        """
        raise NotImplementedError(f"{self.__class__.__name__} does not support rendering to a string.")

    @staticmethod
    def _validate_options_type(
        options: BaseRendererOptions | None, expected_type: type, renderer_name: str
    ) -> None:
        """Raise InvalidOptionsError unless ``options`` is None or an ``expected_type``."""
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                component_name=renderer_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    def write_text_output(self, text: str, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Write rendered text to a path or stream using the configured encoding."""
        write_content(text, output, encoding=self.options.encoding)
