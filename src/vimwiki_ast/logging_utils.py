#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/logging_utils.py
"""Logging setup shared by the CLI and library entry points."""

from __future__ import annotations

import logging
import sys
from typing import Optional

_SIMPLE_FORMAT = "%(levelname)s: %(message)s"
_TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
_TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_log_level(log_level: int | str) -> int:
    """Turn ``"debug"``, ``"DEBUG"`` or ``10`` into a numeric level (WARNING when unknown)."""
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Install stderr (and optional file) handlers on the root logger.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name (e.g. ``"INFO"``)
    log_file : str, optional
        Also append log records to this file
    trace_mode : bool, default False
        Use a timestamped format that includes logger names; implies DEBUG
        when no lower level was requested

    Returns
    -------
    logging.Logger
        The configured root logger

    """
    resolved_level = resolve_log_level(log_level)
    if trace_mode:
        resolved_level = min(resolved_level, logging.DEBUG)

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved_level)
    root_logger.handlers.clear()

    if trace_mode:
        formatter = logging.Formatter(_TRACE_FORMAT, datefmt=_TRACE_DATE_FORMAT)
    else:
        formatter = logging.Formatter(_SIMPLE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(resolved_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            root_logger.warning("Could not create log file %s: %s", log_file, exc)
        else:
            file_handler.setLevel(resolved_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            root_logger.info("Logging to file: %s", log_file)

    return root_logger
