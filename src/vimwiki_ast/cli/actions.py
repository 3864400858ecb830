"""Custom argparse actions for environment defaults and argument tracking.

Every option added with one of these actions takes its default from a
``VIMWIKI_AST_<DEST>`` environment variable when one is set, and records
in ``namespace._provided_args`` that it was given explicitly on the
command line so configuration files never override it.
"""

from __future__ import annotations

#  Copyright (c) 2025 Tom Villani, Ph.D.
import argparse
import logging
import os
from typing import Any, Callable, Optional, Sequence, Union

from vimwiki_ast.constants import ENV_PREFIX

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def env_key(dest: str) -> str:
    """Environment variable consulted for ``dest``, e.g. ``VIMWIKI_AST_CACHE_DIR``."""
    return f"{ENV_PREFIX}{dest.upper().replace('-', '_').replace('.', '_')}"


def parse_env_bool(value: str) -> bool:
    """Interpret an environment variable as a boolean.

    Raises
    ------
    ValueError
        If the value is not a recognized boolean spelling

    """
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"expected a boolean, got {value!r}")


def _mark_provided(namespace: argparse.Namespace, dest: str) -> None:
    if not hasattr(namespace, "_provided_args"):
        namespace._provided_args = set()
    namespace._provided_args.add(dest)


def was_provided(namespace: argparse.Namespace, dest: str) -> bool:
    """True when ``dest`` was given on the command line."""
    return dest in getattr(namespace, "_provided_args", set())


class TrackingStoreAction(argparse.Action):
    """Store action that tracks explicit use and reads an environment default."""

    def __init__(
        self,
        option_strings: Sequence[str],
        dest: str,
        nargs: Optional[Union[int, str]] = None,
        const: Optional[Any] = None,
        default: Optional[Any] = None,
        type: Optional[Callable[[str], Any]] = None,
        choices: Optional[Sequence[Any]] = None,
        required: bool = False,
        help: Optional[str] = None,
        metavar: Optional[Union[str, tuple[str, ...]]] = None,
    ) -> None:
        key = env_key(dest)
        env_value = os.environ.get(key)
        if env_value is not None:
            try:
                default = type(env_value) if type is not None else env_value
            except (ValueError, TypeError) as e:
                logging.warning(f"Invalid environment variable {key}={env_value}: {e}")

        super().__init__(
            option_strings=option_strings,
            dest=dest,
            nargs=nargs,
            const=const,
            default=default,
            type=type,
            choices=choices,
            required=required,
            help=help,
            metavar=metavar,
        )

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Union[str, Sequence[Any], None],
        option_string: Optional[str] = None,
    ) -> None:
        setattr(namespace, self.dest, values)
        _mark_provided(namespace, self.dest)


class TrackingStoreTrueAction(argparse.Action):
    """``store_true`` that tracks explicit use and reads an environment default."""

    def __init__(
        self,
        option_strings: Sequence[str],
        dest: str,
        default: bool = False,
        required: bool = False,
        help: Optional[str] = None,
    ) -> None:
        key = env_key(dest)
        env_value = os.environ.get(key)
        if env_value is not None:
            try:
                default = parse_env_bool(env_value)
            except ValueError as e:
                logging.warning(f"Invalid environment variable {key}={env_value}: {e}")

        super().__init__(
            option_strings=option_strings,
            dest=dest,
            nargs=0,
            const=True,
            default=default,
            required=required,
            help=help,
        )

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Union[str, Sequence[Any], None],
        option_string: Optional[str] = None,
    ) -> None:
        setattr(namespace, self.dest, True)
        _mark_provided(namespace, self.dest)
