#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/ast/utils.py
"""Helpers for walking a parsed page."""

from __future__ import annotations

from collections import Counter
from typing import Callable, Iterator, Optional, Type

from vimwiki_ast.ast.location import Located
from vimwiki_ast.ast.nodes import Element, Page


def walk(page: Page) -> Iterator[Located[Element]]:
    """Yield every located element of ``page`` in pre-order.

    The order matches the one used to assign ids in
    :class:`~vimwiki_ast.ast.tree.ElementForest`.
    """
    stack: list[Located[Element]] = list(reversed(page.elements))  # type: ignore[arg-type]
    while stack:
        located = stack.pop()
        yield located
        stack.extend(reversed(located.into_children()))


def collect(
    page: Page,
    element_type: Optional[Type[Element]] = None,
    predicate: Optional[Callable[[Element], bool]] = None,
) -> list[Located[Element]]:
    """Located elements matching a type and/or a predicate, in pre-order."""
    results = []
    for located in walk(page):
        if element_type is not None and not isinstance(located.element, element_type):
            continue
        if predicate is not None and not predicate(located.element):
            continue
        results.append(located)
    return results


def count_element_types(page: Page) -> Counter[str]:
    """Number of elements per class name, e.g. ``{"Text": 12, "Header": 2}``."""
    return Counter(type(located.element).__name__ for located in walk(page))


__all__ = ["walk", "collect", "count_element_types"]
