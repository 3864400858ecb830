#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/ast/tables.py
"""Tables made of ``|cell|cell|`` rows.

Cells are stored sparsely, keyed by :class:`CellPos`. A cell is content,
an alignment marker of a divider row, or a span marker merging it into the
cell above (``\\/``) or to the left (``>``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple, Optional

from vimwiki_ast.ast.location import Located
from vimwiki_ast.ast.nodes import BlockElement, Element, InlineElementContainer


class CellPos(NamedTuple):
    row: int
    col: int


class ColumnAlign(Enum):
    NONE = "none"
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class CellKind(Enum):
    CONTENT = "content"
    SPAN_ABOVE = "span_above"
    SPAN_LEFT = "span_left"
    ALIGN = "align"


@dataclass
class Cell:
    """One table cell.

    Parameters
    ----------
    kind : CellKind
        What the cell holds
    content : InlineElementContainer or None, default = None
        Inline content for ``CellKind.CONTENT``
    align : ColumnAlign or None, default = None
        Alignment for ``CellKind.ALIGN``

    """

    kind: CellKind
    content: Optional[InlineElementContainer] = None
    align: Optional[ColumnAlign] = None

    def is_content(self) -> bool:
        return self.kind is CellKind.CONTENT

    def is_span(self) -> bool:
        return self.kind in (CellKind.SPAN_ABOVE, CellKind.SPAN_LEFT)

    def is_align(self) -> bool:
        return self.kind is CellKind.ALIGN


@dataclass
class Table(BlockElement):
    """A table.

    Parameters
    ----------
    cells : dict of CellPos to Located[Cell]
        Every parsed cell
    centered : bool, default = False
        True when the first row was indented

    Notes
    -----
    Rows made only of alignment cells are divider rows. Non-divider rows
    before the first divider row are header rows; when there is no divider
    row every row is a body row.

    """

    cells: dict[CellPos, Located[Cell]] = field(default_factory=dict)
    centered: bool = False

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_table(self)

    def into_children(self) -> list[Located[Element]]:
        children: list[Located[Element]] = []
        for pos in sorted(self.cells):
            cell = self.cells[pos].element
            if cell.content is not None:
                children.extend(cell.content.into_children())
        return children

    @property
    def row_count(self) -> int:
        return max((pos.row for pos in self.cells), default=-1) + 1

    @property
    def column_count(self) -> int:
        return max((pos.col for pos in self.cells), default=-1) + 1

    def get_cell(self, row: int, col: int) -> Optional[Cell]:
        located = self.cells.get(CellPos(row, col))
        return located.element if located is not None else None

    def row(self, idx: int) -> list[Cell]:
        """Cells of a row, left to right (missing cells skipped)."""
        return [self.cells[CellPos(idx, c)].element for c in range(self.column_count) if CellPos(idx, c) in self.cells]

    def column(self, idx: int) -> list[Cell]:
        return [self.cells[CellPos(r, idx)].element for r in range(self.row_count) if CellPos(r, idx) in self.cells]

    def is_divider_row(self, idx: int) -> bool:
        cells = self.row(idx)
        return bool(cells) and all(cell.is_align() for cell in cells)

    def divider_row_index(self) -> Optional[int]:
        for idx in range(self.row_count):
            if self.is_divider_row(idx):
                return idx
        return None

    def header_rows(self) -> list[int]:
        divider = self.divider_row_index()
        if divider is None:
            return []
        return [idx for idx in range(divider) if not self.is_divider_row(idx)]

    def body_rows(self) -> list[int]:
        divider = self.divider_row_index()
        start = 0 if divider is None else divider + 1
        return [idx for idx in range(start, self.row_count) if not self.is_divider_row(idx)]

    def column_alignments(self) -> list[ColumnAlign]:
        """Alignment of each column as declared by the divider row."""
        divider = self.divider_row_index()
        alignments = [ColumnAlign.NONE] * self.column_count
        if divider is None:
            return alignments
        for col in range(self.column_count):
            cell = self.get_cell(divider, col)
            if cell is not None and cell.align is not None:
                alignments[col] = cell.align
        return alignments

    def get_cell_rowspan(self, row: int, col: int) -> int:
        """Rows covered by a content cell (0 for anything else)."""
        cell = self.get_cell(row, col)
        if cell is None or not cell.is_content():
            return 0
        span = 1
        for below in range(row + 1, self.row_count):
            other = self.get_cell(below, col)
            if other is None or other.kind is not CellKind.SPAN_ABOVE:
                break
            span += 1
        return span

    def get_cell_colspan(self, row: int, col: int) -> int:
        """Columns covered by a content cell (0 for anything else)."""
        cell = self.get_cell(row, col)
        if cell is None or not cell.is_content():
            return 0
        span = 1
        for right in range(col + 1, self.column_count):
            other = self.get_cell(row, right)
            if other is None or other.kind is not CellKind.SPAN_LEFT:
                break
            span += 1
        return span


__all__ = ["CellPos", "ColumnAlign", "CellKind", "Cell", "Table"]
