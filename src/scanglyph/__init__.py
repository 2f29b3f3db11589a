"""Scanglyph - Cut a scanned handwriting sheet into per-glyph images.

Scanglyph is a CLI tool for font designers. It takes a scan of the printed
handwriting template (a fixed grid of cells, one letterform per cell), finds
the cells that contain ink, and writes each one out as a tightly cropped image.

Example:
    $ scanglyph scan handwriting-scan.png glyphs/

This will create files like glyphs/glyph-r00-c00.png for every filled cell.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
