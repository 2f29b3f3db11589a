"""Slicing a scan into per-cell images."""

from collections.abc import Iterator

from scanglyph.domain import Cell, CellImage, GridLayout, ScannedImage


class CellExtractor:
    """Restartable sequence of cell slices over one scan.

    Iterating yields one CellImage per cell in row-major order. The slices
    are numpy views into the scan buffer, so no pixels are copied here.

    Example:
        extractor = CellExtractor(image, layout)
        for cell_image in extractor:
            print(cell_image.cell.label, cell_image.pixels.shape)
    """

    def __init__(self, image: ScannedImage, layout: GridLayout) -> None:
        self.image = image
        self.layout = layout

    def __len__(self) -> int:
        return len(self.layout)

    def __iter__(self) -> Iterator[CellImage]:
        for cell in self.layout:
            yield self.extract(cell)

    def extract(self, cell: Cell) -> CellImage:
        """Slice the pixels of a single cell."""
        rect = cell.rect
        pixels = self.image.pixels[rect.y : rect.bottom, rect.x : rect.right]
        return CellImage(cell=cell, pixels=pixels)
