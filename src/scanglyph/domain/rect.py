"""Axis-aligned pixel rectangles.

Rectangles use image coordinates: x grows to the right, y grows downward,
and extents are half-open, so ``right`` and ``bottom`` are the first pixel
column and row *outside* the rectangle.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Rect:
    """A rectangle of pixels.

    Attributes:
        x: Left column
        y: Top row
        width: Width in pixels
        height: Height in pixels
    """

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    def is_empty(self) -> bool:
        """Check if the rectangle covers no pixels."""
        return self.width <= 0 or self.height <= 0

    def contains(self, other: "Rect") -> bool:
        """Check if ``other`` lies entirely inside this rectangle."""
        return (
            self.x <= other.x
            and self.y <= other.y
            and other.right <= self.right
            and other.bottom <= self.bottom
        )

    def intersects(self, other: "Rect") -> bool:
        """Check if the two rectangles share at least one pixel."""
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )

    def translate(self, dx: int, dy: int) -> "Rect":
        """Return the rectangle moved by (dx, dy)."""
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    def to_tuple(self) -> tuple[int, int, int, int]:
        """Convert to an (x, y, width, height) tuple."""
        return (self.x, self.y, self.width, self.height)
