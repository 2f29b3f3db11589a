"""Decoded scan representation."""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class ScannedImage:
    """A decoded scan, shared read-only by every cell computation.

    Attributes:
        pixels: ``uint8`` array shaped (height, width) for grayscale or
            (height, width, channels) for colour
        source: Where the image was loaded from, for messages
    """

    pixels: np.ndarray
    source: str = "<memory>"

    def __post_init__(self) -> None:
        if self.pixels.ndim not in (2, 3):
            raise ValueError(f"Expected a 2D or 3D pixel array, got {self.pixels.ndim}D")
        self.pixels.flags.writeable = False

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def channels(self) -> int:
        """Number of channels per pixel (1 for grayscale)."""
        return 1 if self.pixels.ndim == 2 else int(self.pixels.shape[2])

    @classmethod
    def from_array(cls, pixels: np.ndarray, source: str = "<memory>") -> "ScannedImage":
        """Wrap a copy of ``pixels`` so the caller's array stays writable."""
        return cls(pixels=np.array(pixels, dtype=np.uint8, copy=True), source=source)
