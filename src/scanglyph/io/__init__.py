"""Image I/O layer for scanglyph.

This module handles reading scans and writing glyph crops using Pillow.
It provides a clean abstraction layer between Pillow and the domain
models.

Key responsibilities:
- Decode scans into read-only pixel buffers
- Normalise pixel modes and apply optional pre-processing
- Create the output directory
- Encode glyph crops in the requested format

Key classes:
- ScanReader: Load a scanned sheet
- ArtifactWriter: Save glyph crops
"""

from scanglyph.io.reader import ScanReader
from scanglyph.io.writer import ArtifactWriter

__all__ = [
    "ArtifactWriter",
    "ScanReader",
]
