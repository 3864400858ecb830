#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the vimwiki_ast library.

This module defines the exception classes raised while parsing wiki
markup, indexing element trees, rendering and loading pages. They carry more
specific information than generic built-ins.

Exception Hierarchy
-------------------
- VimwikiAstError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class for parser or renderer)

  - FileError (file access and I/O)
    - FileNotFoundError (file doesn't exist)
    - FileAccessError (permissions, unreadable files)

  - ParsingError (markup could not be parsed into a page)

  - RenderingError (output generation failures)
    - OutputWriteError (file write failures)

  - CacheError (unreadable or corrupt cache entries)

  - IdSpaceExhaustedError (element id allocator ran dry)

Parse failures inside the grammar are not exceptions of this hierarchy:
they are :class:`vimwiki_ast.parsers.combinators.ParseFailure` values that
ordered choice consumes. Only a failure of the whole page surfaces, as
:class:`ParsingError`.

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

if TYPE_CHECKING:
    from vimwiki_ast.ast.location import Region


class VimwikiAstError(Exception):
    """Root of every error raised by vimwiki_ast.

    Wraps the underlying exception, when there is one, in ``original_error``.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(VimwikiAstError):
    """Raised when an option value or a serialized page is invalid.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """Exception raised when an options object of the wrong class is provided.

    Parameters
    ----------
    component_name : str
        Name of the parser or renderer that received the options
    expected_type : type
        The expected options class
    received_type : type
        The options class that was received
    message : str, optional
        Custom error message. If not provided, one is generated

    """

    def __init__(
        self,
        component_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"{component_name} expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(
            message, parameter_name="options", parameter_value=received_type, original_error=original_error
        )
        self.component_name = component_name
        self.expected_type = expected_type
        self.received_type = received_type


class FileError(VimwikiAstError):
    """Raised when a wiki file or input path cannot be used.

    Parameters
    ----------
    message : str
        Description of the file error
    file_path : str, optional
        Path to the problematic file

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the file error with path and message."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class FileNotFoundError(FileError):
    """Exception raised when a wiki file cannot be found."""

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the file not found error."""
        if message is None:
            message = f"File not found: {file_path}"
        super().__init__(message, file_path=file_path, original_error=original_error)


class FileAccessError(FileError):
    """Exception raised when a wiki file exists but cannot be read."""

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the file access error."""
        if message is None:
            message = f"Cannot access file: {file_path}"
        super().__init__(message, file_path=file_path, original_error=original_error)


class ParsingError(VimwikiAstError):
    """Exception raised when a page cannot be parsed.

    The message is positioned ("what was expected, where") and the context
    labels of the grammar rules that were active at the failure point are
    kept as a breadcrumb trail, outermost first.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    region : Region, optional
        Location of the failure in the source
    contexts : sequence of str, optional
        Grammar rule labels active at the failure, outermost first
    parsing_stage : str, optional
        The stage of parsing where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the parsing failure

    """

    def __init__(
        self,
        message: str,
        region: Region | None = None,
        contexts: Sequence[str] | None = None,
        parsing_stage: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the parsing error."""
        super().__init__(message, original_error)
        self.region = region
        self.contexts = list(contexts or [])
        self.parsing_stage = parsing_stage

    @property
    def breadcrumbs(self) -> str:
        """Context trail joined for display, e.g. ``Page > Paragraph > Text``."""
        return " > ".join(self.contexts)


class RenderingError(VimwikiAstError):
    """Raised when a page cannot be turned into HTML.

    Parameters
    ----------
    message : str
        Description of the rendering failure
    rendering_stage : str, optional
        Which part of rendering failed, such as ``template`` or ``link``

    """

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error."""
        super().__init__(message, original_error)
        self.rendering_stage = rendering_stage


class OutputWriteError(RenderingError):
    """Exception raised when writing an output file fails."""

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the output write error."""
        if message is None:
            message = f"Failed to write output file: {file_path}"
        super().__init__(message, rendering_stage="file_write", original_error=original_error)
        self.file_path = file_path


class CacheError(VimwikiAstError):
    """Exception raised for a cache entry that cannot be read back.

    The loader treats this as a cache miss: the entry is discarded and the
    page is parsed again.

    Parameters
    ----------
    message : str
        Description of the cache problem
    cache_path : str, optional
        Path of the offending cache entry

    """

    def __init__(self, message: str, cache_path: str | None = None, original_error: Exception | None = None):
        """Initialize the cache error."""
        super().__init__(message, original_error)
        self.cache_path = cache_path


class IdSpaceExhaustedError(VimwikiAstError):
    """Exception raised when an id allocator has no ids left to hand out.

    This is not a recoverable condition; callers should let it propagate.
    """
