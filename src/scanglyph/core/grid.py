"""Grid geometry for scanned sheets.

This module maps the reference grid template onto the pixel dimensions of
an actual scan. The scan is assumed to be cropped to the sheet and not
skewed; only resolution differences are corrected.
"""

import math

from scanglyph.config import GeometryConfig, GridTemplate
from scanglyph.domain import Cell, GridLayout, Rect
from scanglyph.exceptions import InvalidGeometryError


def _scale(value: float, scale: float) -> int:
    """Scale a reference coordinate and round half up to a pixel index."""
    return int(math.floor(value * scale + 0.5))


class GridModel:
    """Computes cell rectangles for scans of a given template.

    Example:
        model = GridModel(default_template())
        layout = model.layout(width=1650, height=1275)
        cell = layout.get(2, 3)
    """

    def __init__(self, template: GridTemplate, config: GeometryConfig | None = None) -> None:
        """Initialize the grid model.

        Args:
            template: Reference geometry of the sheet
            config: Geometry tolerances (defaults if None)
        """
        self.template = template
        self.config = config or GeometryConfig()

    def check_aspect(self, width: int, height: int) -> None:
        """Verify the scan has the template's proportions.

        Args:
            width: Scan width in pixels
            height: Scan height in pixels

        Raises:
            InvalidGeometryError: If the aspect ratio deviates beyond tolerance
        """
        if width <= 0 or height <= 0:
            raise InvalidGeometryError(width, height, "image has no pixels")

        actual = width / height
        expected = self.template.aspect_ratio
        deviation = abs(actual / expected - 1.0)
        if deviation > self.config.aspect_tolerance:
            raise InvalidGeometryError(
                width,
                height,
                f"aspect ratio {actual:.3f} differs from the template's {expected:.3f} "
                f"by {deviation:.1%} (tolerance {self.config.aspect_tolerance:.1%}); "
                "wrong template, rotated or badly cropped scan?",
            )

    def layout(self, width: int, height: int) -> GridLayout:
        """Compute the rectangle of every cell for a scan.

        Each axis is scaled independently (the two factors agree within the
        aspect tolerance) so the grid always ends exactly at the scanned
        sheet's edges. Cell edges are rounded the same way for neighbouring
        cells, so rectangles never overlap. The grid-line band is then
        trimmed from all four sides.

        Args:
            width: Scan width in pixels
            height: Scan height in pixels

        Returns:
            GridLayout with cells in row-major order

        Raises:
            InvalidGeometryError: If the scan does not fit the template
        """
        self.check_aspect(width, height)

        template = self.template
        scale_x = width / template.reference_width
        scale_y = height / template.reference_height
        trim_x = math.ceil(template.line_thickness * scale_x)
        trim_y = math.ceil(template.line_thickness * scale_y)

        cells: list[Cell] = []
        for row in range(template.rows):
            for col in range(template.columns):
                ref_x, ref_y = template.cell_origin(row, col)
                left = _scale(ref_x, scale_x) + trim_x
                top = _scale(ref_y, scale_y) + trim_y
                right = _scale(ref_x + template.cell_width, scale_x) - trim_x
                bottom = _scale(ref_y + template.cell_height, scale_y) - trim_y

                rect = Rect(left, top, right - left, bottom - top)
                if rect.is_empty():
                    raise InvalidGeometryError(
                        width,
                        height,
                        f"image is too small: cell ({row}, {col}) has no pixels left "
                        "after removing grid lines",
                    )
                cells.append(Cell(row=row, col=col, rect=rect))

        return GridLayout(
            width=width,
            height=height,
            scale_x=scale_x,
            scale_y=scale_y,
            rows=template.rows,
            columns=template.columns,
            cells=tuple(cells),
        )
