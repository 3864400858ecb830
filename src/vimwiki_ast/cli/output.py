"""Utility functions for cli output."""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/vimwiki_ast/cli/output.py
from __future__ import annotations

import argparse
import sys
from collections import Counter
from typing import IO, Any, Optional

from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from vimwiki_ast.ast.location import Located
from vimwiki_ast.ast.nodes import InlineElement, Page

_PREVIEW_LENGTH = 40


def should_use_rich_output(args: argparse.Namespace, stream: Optional[IO[str]] = None) -> bool:
    """Determine if Rich output should be used based on TTY and args.

    Rich output is used when the ``--rich`` flag is set and either
    ``--force-rich`` is set or the output stream is a TTY.
    """
    if not getattr(args, "rich", False):
        return False
    if getattr(args, "force_rich", False):
        return True

    target = stream or sys.stdout
    isatty = getattr(target, "isatty", None)
    return bool(callable(isatty) and isatty())


def describe_element(located: Located[Any]) -> str:
    """One-line label for a located element: type, region and a text preview."""
    element = located.element
    label = f"{type(element).__name__} {located.region}"
    if isinstance(element, InlineElement):
        text = element.to_text()
        if len(text) > _PREVIEW_LENGTH:
            text = text[: _PREVIEW_LENGTH - 3] + "..."
        label += f" {text!r}"
    return label


def format_plain_tree(page: Page) -> str:
    """Indented outline of the page, one element per line."""
    lines = ["Page"]

    def _add(located: Located[Any], depth: int) -> None:
        lines.append("  " * depth + describe_element(located))
        for child in located.into_children():
            _add(child, depth + 1)

    for block in page.elements:
        _add(block, 1)
    return "\n".join(lines) + "\n"


def build_rich_tree(page: Page, title: str = "Page") -> Tree:
    """The page outline as a :class:`rich.tree.Tree`."""
    tree = Tree(f"[bold]{title}[/bold]")

    def _add(parent: Tree, located: Located[Any]) -> None:
        branch = parent.add(describe_element(located), highlight=True)
        for child in located.into_children():
            _add(branch, child)

    for block in page.elements:
        _add(tree, block)
    return tree


def print_tree(page: Page, use_rich: bool, title: str = "Page", stream: Optional[IO[str]] = None) -> None:
    target = stream or sys.stdout
    if use_rich:
        Console(file=target).print(build_rich_tree(page, title))
    else:
        target.write(format_plain_tree(page))


def print_element_counts(
    counts: Counter[str], use_rich: bool, title: str = "Elements", stream: Optional[IO[str]] = None
) -> None:
    """Print element type counts, most common first."""
    target = stream or sys.stdout
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))

    if use_rich:
        table = Table(title=title)
        table.add_column("Element", style="cyan")
        table.add_column("Count", justify="right", style="green")
        for name, count in ordered:
            table.add_row(name, str(count))
        table.add_section()
        table.add_row("[bold]Total[/bold]", f"[bold]{sum(counts.values())}[/bold]")
        Console(file=target).print(table)
        return

    width = max((len(name) for name in counts), default=len("Total"))
    width = max(width, len("Total"))
    target.write(f"{title}\n")
    for name, count in ordered:
        target.write(f"  {name:<{width}}  {count}\n")
    target.write(f"  {'Total':<{width}}  {sum(counts.values())}\n")
