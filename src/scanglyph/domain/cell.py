"""Grid cell types.

This module defines where each cell of the handwriting sheet lies on a
particular scan, and the per-cell slice handed to ink detection.
"""

from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np

from scanglyph.domain.rect import Rect


@dataclass(frozen=True, slots=True)
class Cell:
    """One grid square on the scan.

    Attributes:
        row: Row index, counted from the top
        col: Column index, counted from the left
        rect: Pixel rectangle inside the scan, grid lines excluded
    """

    row: int
    col: int
    rect: Rect

    @property
    def label(self) -> str:
        """Short human-readable identifier, e.g. ``r02c03``."""
        return f"r{self.row:02d}c{self.col:02d}"


@dataclass(frozen=True)
class GridLayout:
    """Cell rectangles for a scan of a given size.

    Attributes:
        width: Scan width in pixels
        height: Scan height in pixels
        scale_x: Scan pixels per reference pixel, horizontally
        scale_y: Scan pixels per reference pixel, vertically
        rows: Number of rows
        columns: Number of columns
        cells: All cells in row-major order
    """

    width: int
    height: int
    scale_x: float
    scale_y: float
    rows: int
    columns: int
    cells: tuple[Cell, ...]

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def get(self, row: int, col: int) -> Cell:
        """Get the cell at (row, col).

        Raises:
            IndexError: If the position is outside the grid
        """
        if not (0 <= row < self.rows and 0 <= col < self.columns):
            raise IndexError(f"Cell ({row}, {col}) outside {self.rows}x{self.columns} grid")
        return self.cells[row * self.columns + col]


@dataclass(frozen=True)
class CellImage:
    """A cell together with its slice of the scan.

    ``pixels`` is normally a view into the shared scan buffer and must not
    be modified.
    """

    cell: Cell
    pixels: np.ndarray

    @property
    def row(self) -> int:
        return self.cell.row

    @property
    def col(self) -> int:
        return self.cell.col
