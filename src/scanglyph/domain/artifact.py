"""Detection results and output artifacts."""

from dataclasses import dataclass
from pathlib import Path

import numpy as np

from scanglyph.domain.rect import Rect


@dataclass(frozen=True, slots=True)
class Detection:
    """Outcome of classifying one cell.

    Attributes:
        ink_pixels: Number of pixels darker than the threshold
        bbox: Padded ink bounding box in cell-local coordinates,
            None when the cell is empty
    """

    ink_pixels: int
    bbox: Rect | None = None

    @property
    def is_empty(self) -> bool:
        return self.bbox is None


@dataclass(frozen=True)
class OutputArtifact:
    """A cropped glyph ready to be written.

    Attributes:
        row: Grid row of the source cell
        col: Grid column of the source cell
        path: Destination file path
        region: Cropped area in scan coordinates
        pixels: Cropped pixel data, owned by this artifact
    """

    row: int
    col: int
    path: Path
    region: Rect
    pixels: np.ndarray

    @property
    def filename(self) -> str:
        return self.path.name
