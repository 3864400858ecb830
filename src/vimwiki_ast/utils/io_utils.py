#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/utils/io_utils.py
"""I/O utilities for handling output destinations."""

from __future__ import annotations

import io
from io import BytesIO, StringIO
from pathlib import Path
from typing import IO, Union, cast

from vimwiki_ast.exceptions import OutputWriteError


def _is_binary_stream(output: object) -> bool:
    if isinstance(output, BytesIO):
        return True
    if isinstance(output, StringIO):
        return False
    if isinstance(output, io.TextIOBase):
        return False
    if isinstance(output, (io.BufferedIOBase, io.RawIOBase)):
        return True
    mode = getattr(output, "mode", "")
    return isinstance(mode, str) and "b" in mode


def write_content(content: str, output: Union[str, Path, IO[bytes], IO[str]], encoding: str = "utf-8") -> None:
    """Write text to a path or a file-like object.

    Parameters
    ----------
    content : str
        Text to write
    output : str, Path, IO[bytes] or IO[str]
        Destination. Paths are created (parent directories included) and
        overwritten; binary streams receive ``content`` encoded with
        ``encoding``.
    encoding : str, default "utf-8"
        Encoding for paths and binary streams

    Raises
    ------
    OutputWriteError
        If a path cannot be written
    TypeError
        If ``output`` is neither a path nor writable

    """
    if isinstance(output, (str, Path)):
        output_path = Path(output)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(content, encoding=encoding)
        except OSError as e:
            raise OutputWriteError(str(output_path), original_error=e) from e
        return

    if not hasattr(output, "write"):
        raise TypeError(f"Output must be a path or a writable file-like object, got {type(output)}")

    if _is_binary_stream(output):
        cast(IO[bytes], output).write(content.encode(encoding))
    else:
        cast(IO[str], output).write(content)
