"""Scan reader for loading handwriting sheets.

This module provides the ScanReader class for decoding image files with
Pillow into the read-only ScannedImage domain model.
"""

from pathlib import Path

import numpy as np
from PIL import Image, ImageFilter, UnidentifiedImageError

from scanglyph.config import PreprocessConfig
from scanglyph.domain import ScannedImage
from scanglyph.exceptions import DecodeError

# Pillow modes decoded to grayscale; anything not listed here or kept as-is
# is decoded to RGB.
_GRAYSCALE_MODES = frozenset({"1", "I", "I;16", "I;16B", "I;16L", "F"})
_KEPT_MODES = frozenset({"L", "RGB", "RGBA"})

# Generic 3x3 sharpening kernel
SHARPEN_KERNEL = (0, -1, 0, -1, 5, -1, 0, -1, 0)


def normalize_mode(image: Image.Image) -> Image.Image:
    """Convert an image to L, RGB or RGBA.

    Args:
        image: Decoded Pillow image in any mode

    Returns:
        Image in one of the modes the detector understands
    """
    if image.mode in _KEPT_MODES:
        return image
    if image.mode in _GRAYSCALE_MODES:
        if image.mode.startswith("I;16"):
            # 16-bit samples would clip when converted straight to L
            samples = np.asarray(image.convert("I"), dtype=np.int32) >> 8
            return Image.fromarray(samples.astype(np.uint8))
        return image.convert("L")
    if image.mode == "LA" or (image.mode == "P" and "transparency" in image.info):
        return image.convert("RGBA")
    return image.convert("RGB")


def preprocess(image: Image.Image, config: PreprocessConfig) -> Image.Image:
    """Apply the optional rotation and sharpening steps.

    Args:
        image: Image in L, RGB or RGBA mode
        config: Which steps to apply

    Returns:
        Processed image (the input if no step applies)
    """
    if config.auto_rotate and image.height > image.width:
        image = image.transpose(Image.Transpose.ROTATE_90)
    if config.sharpen:
        image = image.filter(ImageFilter.Kernel((3, 3), SHARPEN_KERNEL, scale=1))
    return image


class ScanReader:
    """Loads a scanned sheet from disk.

    Example:
        reader = ScanReader(Path("scan.png"))
        image = reader.load()
        print(image.width, image.height)
    """

    def __init__(self, scan_path: Path, config: PreprocessConfig | None = None) -> None:
        """Initialize the scan reader.

        Args:
            scan_path: Path to the scanned image file
            config: Pre-processing options (defaults if None)
        """
        self._scan_path = scan_path
        self._config = config or PreprocessConfig()

    @property
    def path(self) -> Path:
        return self._scan_path

    def load(self) -> ScannedImage:
        """Decode the scan.

        Returns:
            ScannedImage with a read-only pixel buffer

        Raises:
            FileNotFoundError: If the scan file does not exist
            DecodeError: If the file cannot be decoded as an image
        """
        if not self._scan_path.exists():
            raise FileNotFoundError(f"Scan file not found: {self._scan_path}")
        if not self._scan_path.is_file():
            raise DecodeError(str(self._scan_path), "not a regular file")

        try:
            with Image.open(self._scan_path) as source:
                source.load()
                image = preprocess(normalize_mode(source), self._config)
                pixels = np.asarray(image, dtype=np.uint8)
        except UnidentifiedImageError as e:
            raise DecodeError(str(self._scan_path), "unsupported or unrecognised image format") from e
        except (OSError, ValueError, SyntaxError, EOFError) as e:
            raise DecodeError(str(self._scan_path), str(e) or type(e).__name__) from e

        return ScannedImage(pixels=pixels.copy(), source=str(self._scan_path))
