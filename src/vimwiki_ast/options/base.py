#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/options/base.py
"""Base classes for parser and renderer options.

Options are frozen dataclasses. Every field carries a ``help`` entry in its
metadata, which the CLI reuses for its argument help text.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from vimwiki_ast.constants import DEFAULT_ENCODING


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)

    @classmethod
    def from_mapping(cls, values: dict[str, Any]) -> Self:
        """Build options from a config mapping, ignoring unknown keys.

        Keys may use dashes in place of underscores (``list-ignore-newline``).
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in values.items():
            name = key.replace("-", "_")
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)


@dataclass(frozen=True)
class BaseRendererOptions(CloneFrozenMixin):
    """Base class for all renderer options.

    Parameters
    ----------
    encoding : str, default "utf-8"
        Character encoding of written output

    """

    encoding: str = field(
        default=DEFAULT_ENCODING,
        metadata={"help": "Character encoding used when writing rendered output"},
    )

    def __post_init__(self) -> None:
        """Validate base renderer options.

        Raises
        ------
        ValueError
            If the encoding is empty.

        """
        if not self.encoding:
            raise ValueError("encoding must not be empty")


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Base class for all parser options.

    Notes
    -----
    Subclasses define their parsing options as frozen dataclass fields.

    """

    def __post_init__(self) -> None:
        pass
