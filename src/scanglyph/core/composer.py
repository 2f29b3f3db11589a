"""Turning detected glyphs into output artifacts."""

from pathlib import Path

from scanglyph.config import OutputConfig
from scanglyph.domain import CellImage, Detection, OutputArtifact


class OutputComposer:
    """Crops inked cells and names the resulting files.

    The composer performs no I/O; artifacts are handed to a writer.

    Example:
        composer = OutputComposer(Path("glyphs"))
        artifact = composer.compose(cell_image, detection)
        # artifact.path == Path("glyphs/glyph-r02-c03.png")
    """

    def __init__(self, output_dir: Path, config: OutputConfig | None = None) -> None:
        """Initialize the composer.

        Args:
            output_dir: Directory the artifact paths point into
            config: Naming and format settings (defaults if None)
        """
        self.output_dir = output_dir
        self.config = config or OutputConfig()

    def filename(self, row: int, col: int) -> str:
        """Deterministic file name for the cell at (row, col).

        Example: ``glyph-r02-c03.png``
        """
        extension = self.config.image_format.extension
        return f"{self.config.prefix}-r{row:02d}-c{col:02d}.{extension}"

    def compose(self, cell_image: CellImage, detection: Detection) -> OutputArtifact | None:
        """Crop the original cell pixels to the detected ink.

        Args:
            cell_image: Cell and its unmodified pixel slice
            detection: Result of ContentDetector.detect for the same cell

        Returns:
            OutputArtifact, or None if the cell is empty
        """
        if detection.bbox is None:
            return None

        bbox = detection.bbox
        crop = cell_image.pixels[bbox.y : bbox.bottom, bbox.x : bbox.right].copy()
        cell_rect = cell_image.cell.rect

        return OutputArtifact(
            row=cell_image.row,
            col=cell_image.col,
            path=self.output_dir / self.filename(cell_image.row, cell_image.col),
            region=bbox.translate(cell_rect.x, cell_rect.y),
            pixels=crop,
        )
