"""Test utilities for the vimwiki_ast test suite.

This module provides helpers for creating wiki files on disk.
"""

import shutil
import tempfile
from pathlib import Path


def create_test_temp_dir() -> Path:
    """Create a temporary directory for test files."""
    return Path(tempfile.mkdtemp())


def cleanup_test_dir(temp_dir: Path) -> None:
    """Clean up test directory and files."""
    if temp_dir.exists():
        shutil.rmtree(temp_dir)


def write_wiki(root: Path, relative: str, text: str) -> Path:
    """Write ``text`` to ``root/relative``, creating parent directories."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


