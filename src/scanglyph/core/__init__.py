"""Core processing algorithms for scanglyph.

This module contains the grid segmentation engine:

- Grid geometry (scaling the template onto a scan, grid-line exclusion)
- Cell extraction (slicing the scan per cell)
- Ink detection (thresholding, minimum ink, padded bounding boxes)
- Output composition (cropping and deterministic naming)
- Orchestration (parallel per-cell processing and writing)

All per-cell services are designed to be:
- Stateless apart from immutable configuration
- Free of I/O (only the processor touches the filesystem)
- Safe to share between worker threads

Key classes:
- GridModel: Computes cell rectangles for a scan
- CellExtractor: Slices a scan into cell images
- ContentDetector: Classifies cells and locates ink
- OutputComposer: Crops glyphs and names output files
- SheetProcessor: Runs the full pipeline
"""

from scanglyph.core.composer import OutputComposer
from scanglyph.core.detector import ContentDetector, luminance
from scanglyph.core.extractor import CellExtractor
from scanglyph.core.grid import GridModel
from scanglyph.core.processor import CellResult, SheetProcessor, process_cell

__all__ = [
    "CellExtractor",
    "CellResult",
    "ContentDetector",
    "GridModel",
    "OutputComposer",
    "SheetProcessor",
    "luminance",
    "process_cell",
]
