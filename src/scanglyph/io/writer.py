"""Artifact writer for saving glyph crops.

This module provides the ArtifactWriter class, which owns the output
directory and encodes each OutputArtifact with Pillow.
"""

from pathlib import Path

from PIL import Image

from scanglyph.config import ImageFormat
from scanglyph.domain import OutputArtifact
from scanglyph.exceptions import OutputDirectoryError, OutputWriteError

# Pillow format names
_PIL_FORMATS = {
    ImageFormat.PNG: "PNG",
    ImageFormat.JPEG: "JPEG",
    ImageFormat.BMP: "BMP",
    ImageFormat.TIFF: "TIFF",
}


class ArtifactWriter:
    """Writes glyph crops into an output directory.

    Every artifact has a unique path, so ``write`` may be called for
    different artifacts from several threads.

    Example:
        writer = ArtifactWriter(Path("glyphs"))
        writer.ensure_directory()
        writer.write(artifact)
    """

    def __init__(self, output_dir: Path, image_format: ImageFormat = ImageFormat.PNG) -> None:
        """Initialize the artifact writer.

        Args:
            output_dir: Directory that receives the images
            image_format: Encoding used for every image
        """
        self._output_dir = output_dir
        self._image_format = image_format

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def ensure_directory(self) -> None:
        """Create the output directory if it does not exist.

        Raises:
            OutputDirectoryError: If the path is a file or cannot be created
        """
        if self._output_dir.exists() and not self._output_dir.is_dir():
            raise OutputDirectoryError(str(self._output_dir), "path exists and is not a directory")

        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputDirectoryError(str(self._output_dir), e.strerror or str(e)) from e

    def write(self, artifact: OutputArtifact) -> Path:
        """Encode and save one artifact.

        Args:
            artifact: Cropped glyph with its destination path

        Returns:
            The path written

        Raises:
            OutputWriteError: If the image cannot be encoded or saved
        """
        pixels = artifact.pixels
        if self._image_format == ImageFormat.JPEG and pixels.ndim == 3 and pixels.shape[2] == 4:
            # JPEG has no alpha channel
            pixels = pixels[:, :, :3]

        try:
            image = Image.fromarray(pixels)
            image.save(artifact.path, format=_PIL_FORMATS[self._image_format])
        except (OSError, ValueError, TypeError) as e:
            reason = e.strerror if isinstance(e, OSError) and e.strerror else str(e)
            raise OutputWriteError(str(artifact.path), reason) from e

        return artifact.path
