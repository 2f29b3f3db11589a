"""Exception hierarchy for Scanglyph."""


class ScanGlyphError(Exception):
    """Base exception for all Scanglyph errors."""

    pass


class ImageError(ScanGlyphError):
    """Errors related to loading the scanned image."""

    pass


class DecodeError(ImageError):
    """Input file is unreadable or in an unsupported format."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to decode image '{path}': {reason}")


class GeometryError(ScanGlyphError):
    """Errors mapping the grid template onto an image."""

    pass


class InvalidGeometryError(GeometryError):
    """Image size or aspect ratio does not fit the grid template."""

    def __init__(self, width: int, height: int, reason: str) -> None:
        self.width = width
        self.height = height
        self.reason = reason
        super().__init__(f"Image of {width}x{height} px does not match the template: {reason}")


class CellError(ScanGlyphError):
    """Errors related to a single grid cell."""

    pass


class CellCorruptError(CellError):
    """A cell's pixel data is malformed."""

    def __init__(self, row: int, col: int, reason: str) -> None:
        self.row = row
        self.col = col
        self.reason = reason
        super().__init__(f"Cell ({row}, {col}) is corrupt: {reason}")


class OutputError(ScanGlyphError):
    """Errors related to writing output images."""

    pass


class OutputDirectoryError(OutputError):
    """Output directory cannot be used."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot use output directory '{path}': {reason}")


class OutputWriteError(OutputError):
    """An output image could not be written."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write '{path}': {reason}")
