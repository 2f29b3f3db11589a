"""Ink detection inside grid cells.

This module decides whether a cell holds a handwritten glyph and, if so,
where the ink is. The approach is a global luminance threshold:

1. Convert each pixel to luminance (ITU-R 601-2 luma for colour scans)
2. Mark pixels strictly darker than the threshold as ink
3. Treat cells with fewer than ``min_ink_pixels`` ink pixels as empty, so
   dust and scanner noise do not produce spurious crops
4. Enclose all ink in the smallest rectangle, pad it, and clamp it to the cell
"""

import numpy as np

from scanglyph.config import DetectionConfig
from scanglyph.domain import CellImage, Detection, Rect
from scanglyph.exceptions import CellCorruptError

# ITU-R 601-2 luma weights, as used by Pillow's convert("L")
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)


def luminance(pixels: np.ndarray) -> np.ndarray:
    """Convert pixels to luminance on the 0-255 scale.

    Args:
        pixels: Array shaped (h, w), (h, w, 1), (h, w, 3) or (h, w, 4).
            A fourth (alpha) channel is ignored.

    Returns:
        Float array shaped (h, w)

    Raises:
        ValueError: If the channel layout is not supported
    """
    if pixels.ndim == 2:
        return pixels.astype(np.float64)

    if pixels.ndim != 3:
        raise ValueError(f"expected a 2D or 3D array, got {pixels.ndim}D")

    channels = pixels.shape[2]
    if channels == 1:
        return pixels[:, :, 0].astype(np.float64)
    if channels in (3, 4):
        return pixels[:, :, :3].astype(np.float64) @ LUMA_WEIGHTS

    raise ValueError(f"unsupported channel count {channels}")


class ContentDetector:
    """Classifies cell images as empty or inked.

    Stateless apart from its configuration, so one instance can be shared
    by all worker threads.

    Example:
        detector = ContentDetector(DetectionConfig(threshold=180))
        detection = detector.detect(cell_image)
        if not detection.is_empty:
            print(detection.bbox)
    """

    def __init__(self, config: DetectionConfig | None = None) -> None:
        self.config = config or DetectionConfig()

    def ink_mask(self, cell_image: CellImage) -> np.ndarray:
        """Compute the boolean ink mask of a cell.

        Raises:
            CellCorruptError: If the pixel data is malformed
        """
        self._validate(cell_image)
        try:
            luma = luminance(cell_image.pixels)
        except ValueError as e:
            raise CellCorruptError(cell_image.row, cell_image.col, str(e)) from e

        return luma < self.config.threshold

    def detect(self, cell_image: CellImage) -> Detection:
        """Classify a cell and locate its ink.

        Args:
            cell_image: Cell and its pixel slice

        Returns:
            Detection with a cell-local bounding box, or without one if the
            cell is empty

        Raises:
            CellCorruptError: If the pixel data is malformed
        """
        mask = self.ink_mask(cell_image)
        ink_pixels = int(np.count_nonzero(mask))

        if ink_pixels < self.config.min_ink_pixels:
            return Detection(ink_pixels=ink_pixels)

        return Detection(ink_pixels=ink_pixels, bbox=self._padded_bbox(mask))

    def _padded_bbox(self, mask: np.ndarray) -> Rect:
        """Bounding box of the ink, padded and clamped to the mask."""
        height, width = mask.shape
        rows = np.flatnonzero(mask.any(axis=1))
        cols = np.flatnonzero(mask.any(axis=0))

        pad = self.config.padding
        top = max(0, int(rows[0]) - pad)
        left = max(0, int(cols[0]) - pad)
        bottom = min(height, int(rows[-1]) + 1 + pad)
        right = min(width, int(cols[-1]) + 1 + pad)

        return Rect(left, top, right - left, bottom - top)

    @staticmethod
    def _validate(cell_image: CellImage) -> None:
        """Check the slice matches its cell rectangle and pixel format."""
        pixels = cell_image.pixels
        rect = cell_image.cell.rect
        row, col = cell_image.row, cell_image.col

        if not isinstance(pixels, np.ndarray):
            raise CellCorruptError(row, col, f"expected a pixel array, got {type(pixels).__name__}")
        if pixels.dtype != np.uint8:
            raise CellCorruptError(row, col, f"expected 8-bit pixels, got {pixels.dtype}")
        if pixels.size == 0:
            raise CellCorruptError(row, col, "no pixel data")
        if pixels.shape[:2] != (rect.height, rect.width):
            raise CellCorruptError(
                row,
                col,
                f"pixel data is {pixels.shape[1]}x{pixels.shape[0]}, "
                f"expected {rect.width}x{rect.height}",
            )
