"""Configuration settings for Scanglyph."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ImageFormat(str, Enum):
    """Output image encoding."""

    PNG = "png"
    JPEG = "jpeg"
    BMP = "bmp"
    TIFF = "tiff"

    @property
    def extension(self) -> str:
        """File extension (without dot) used for this format."""
        return {"jpeg": "jpg", "tiff": "tif"}.get(self.value, self.value)


class GridTemplate(BaseModel):
    """Geometry of the printed handwriting sheet at its reference resolution.

    All lengths are in pixels of the reference image. A template is an
    immutable value: build a new one rather than editing it.

    The rows and columns must tile the reference image exactly::

        2 * margin_x + columns * cell_width + (columns - 1) * cell_gap == reference_width
        2 * margin_y + rows * cell_height + (rows - 1) * cell_gap == reference_height
    """

    model_config = ConfigDict(frozen=True)

    rows: int = Field(default=9, ge=1, description="Number of cell rows")
    columns: int = Field(default=12, ge=1, description="Number of cell columns")
    reference_width: int = Field(default=3300, gt=0, description="Reference sheet width (px)")
    reference_height: int = Field(default=2550, gt=0, description="Reference sheet height (px)")
    cell_width: int = Field(default=238, gt=0, description="Cell width (px)")
    cell_height: int = Field(default=238, gt=0, description="Cell height (px)")
    cell_gap: int = Field(default=0, ge=0, description="Space between adjacent cells (px)")
    margin_x: int = Field(default=222, ge=0, description="Left and right sheet margin (px)")
    margin_y: int = Field(default=204, ge=0, description="Top and bottom sheet margin (px)")
    line_thickness: int = Field(
        default=4,
        ge=0,
        description="Grid-line band trimmed from every cell edge (px)",
    )

    @model_validator(mode="after")
    def _check_tiling(self) -> "GridTemplate":
        width = 2 * self.margin_x + self.columns * self.cell_width + (self.columns - 1) * self.cell_gap
        if width != self.reference_width:
            raise ValueError(
                f"columns, cell_width, cell_gap and margin_x span {width} px, "
                f"expected reference_width={self.reference_width}"
            )
        height = 2 * self.margin_y + self.rows * self.cell_height + (self.rows - 1) * self.cell_gap
        if height != self.reference_height:
            raise ValueError(
                f"rows, cell_height, cell_gap and margin_y span {height} px, "
                f"expected reference_height={self.reference_height}"
            )
        if 2 * self.line_thickness >= min(self.cell_width, self.cell_height):
            raise ValueError("line_thickness leaves no room inside a cell")
        return self

    @property
    def cell_count(self) -> int:
        """Total number of cells on the sheet."""
        return self.rows * self.columns

    @property
    def aspect_ratio(self) -> float:
        """Reference width divided by reference height."""
        return self.reference_width / self.reference_height

    def cell_origin(self, row: int, col: int) -> tuple[int, int]:
        """Top-left corner of a cell in reference pixels."""
        x = self.margin_x + col * (self.cell_width + self.cell_gap)
        y = self.margin_y + row * (self.cell_height + self.cell_gap)
        return x, y


class GeometryConfig(BaseModel):
    """Configuration for matching a scan against the template."""

    aspect_tolerance: float = Field(
        default=0.05,
        gt=0.0,
        le=0.5,
        description="Allowed relative deviation of the scan's aspect ratio from the template's",
    )


class DetectionConfig(BaseModel):
    """Configuration for ink detection inside a cell.

    These trade dropped light strokes against spurious crops from dust, so
    they are exposed on the CLI.
    """

    threshold: int = Field(
        default=190,
        ge=0,
        le=255,
        description="Luminance (0-255) below which a pixel counts as ink",
    )
    min_ink_pixels: int = Field(
        default=20,
        ge=1,
        description="Ink pixel count below which a cell is treated as empty",
    )
    padding: int = Field(
        default=8,
        ge=0,
        description="Pixels added around the ink bounding box, clamped to the cell",
    )


class PreprocessConfig(BaseModel):
    """Image adjustments applied right after decoding."""

    auto_rotate: bool = Field(
        default=False,
        description="Rotate portrait scans 90 degrees counter-clockwise into landscape",
    )
    sharpen: bool = Field(
        default=False,
        description="Apply a 3x3 sharpening filter before detection",
    )


class OutputConfig(BaseModel):
    """Configuration for output file naming and encoding."""

    prefix: str = Field(
        default="glyph",
        min_length=1,
        pattern=r"^[A-Za-z0-9_.-]+$",
        description="File name prefix for extracted glyphs",
    )
    image_format: ImageFormat = Field(
        default=ImageFormat.PNG,
        description="Encoding of extracted glyph images",
    )


class ProcessingConfig(BaseModel):
    """Configuration for cell processing."""

    max_workers: int | None = Field(
        default=None,
        description="Max worker threads (None = auto)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class ScanSettings(BaseModel):
    """Main application settings."""

    template: GridTemplate = Field(default_factory=GridTemplate)
    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    detection: DetectionConfig = Field(default_factory=DetectionConfig)
    preprocess: PreprocessConfig = Field(default_factory=PreprocessConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def default_template() -> GridTemplate:
    """Get the template for the bundled 12x9 handwriting sheet at 300 DPI."""
    return GridTemplate()


def get_default_settings() -> ScanSettings:
    """Get default application settings."""
    return ScanSettings()
