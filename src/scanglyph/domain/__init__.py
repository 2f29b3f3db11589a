"""Domain models for scanglyph.

This module contains the core domain models representing the scan, the
grid cells laid over it, and the glyph crops cut out of it. All models are
designed to be:

- Immutable where possible (using frozen dataclasses)
- Safe to share between worker threads
- Independent of Pillow implementation details

Key classes:
- Rect: An axis-aligned pixel rectangle
- ScannedImage: The decoded, read-only scan
- Cell: One grid square and its pixel rectangle
- GridLayout: All cells of a scan
- CellImage: A cell with its slice of pixels
- Detection: Ink count and bounding box of a cell
- OutputArtifact: A cropped glyph and its destination path
"""

from scanglyph.domain.artifact import Detection, OutputArtifact
from scanglyph.domain.cell import Cell, CellImage, GridLayout
from scanglyph.domain.image import ScannedImage
from scanglyph.domain.rect import Rect

__all__: list[str] = [
    "Cell",
    "CellImage",
    "Detection",
    "GridLayout",
    "OutputArtifact",
    "Rect",
    "ScannedImage",
]
