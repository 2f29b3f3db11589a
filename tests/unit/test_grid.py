"""Tests for grid geometry and cell extraction."""

import itertools

import numpy as np
import pytest
from pydantic import ValidationError

from scanglyph.config import GeometryConfig, GridTemplate, default_template
from scanglyph.core.extractor import CellExtractor
from scanglyph.core.grid import GridModel
from scanglyph.domain import Rect, ScannedImage
from scanglyph.exceptions import InvalidGeometryError


class TestGridTemplate:
    """Tests for GridTemplate validation."""

    def test_default_template_tiles_reference(self) -> None:
        """Test the bundled sheet geometry is consistent."""
        template = default_template()
        assert template.rows == 9
        assert template.columns == 12
        assert template.cell_count == 108
        assert template.aspect_ratio == pytest.approx(3300 / 2550)

    def test_rejects_inconsistent_width(self) -> None:
        """Test columns and margins must span the reference width."""
        with pytest.raises(ValidationError, match="reference_width"):
            GridTemplate(
                rows=1,
                columns=2,
                reference_width=250,
                reference_height=120,
                cell_width=100,
                cell_height=100,
                margin_x=10,
                margin_y=10,
            )

    def test_rejects_inconsistent_height(self) -> None:
        """Test rows and margins must span the reference height."""
        with pytest.raises(ValidationError, match="reference_height"):
            GridTemplate(
                rows=2,
                columns=1,
                reference_width=120,
                reference_height=200,
                cell_width=100,
                cell_height=100,
                margin_x=10,
                margin_y=10,
            )

    def test_rejects_oversized_line_thickness(self) -> None:
        """Test grid lines cannot swallow a whole cell."""
        with pytest.raises(ValidationError, match="line_thickness"):
            GridTemplate(
                rows=1,
                columns=1,
                reference_width=120,
                reference_height=120,
                cell_width=100,
                cell_height=100,
                margin_x=10,
                margin_y=10,
                line_thickness=50,
            )

    def test_template_frozen(self, small_template: GridTemplate) -> None:
        """Test a template cannot be edited in place."""
        with pytest.raises(ValidationError):
            small_template.rows = 3  # type: ignore[misc]

    def test_gap_counts_towards_width(self) -> None:
        """Test inter-cell gaps are part of the tiling equation."""
        template = GridTemplate(
            rows=1,
            columns=3,
            reference_width=340,
            reference_height=120,
            cell_width=100,
            cell_height=100,
            cell_gap=10,
            margin_x=10,
            margin_y=10,
            line_thickness=0,
        )
        assert template.cell_origin(0, 2) == (230, 10)


class TestGridModel:
    """Tests for GridModel class."""

    def test_reference_size_layout(self, small_template: GridTemplate) -> None:
        """Test cells at scale 1 sit at template offsets minus grid lines."""
        layout = GridModel(small_template).layout(520, 520)

        assert len(layout) == 25
        assert layout.scale_x == pytest.approx(1.0)
        assert layout.get(0, 0).rect == Rect(12, 12, 96, 96)
        assert layout.get(2, 3).rect == Rect(312, 212, 96, 96)

    def test_row_major_order(self, small_template: GridTemplate) -> None:
        """Test cells are ordered row by row."""
        layout = GridModel(small_template).layout(520, 520)
        positions = [(cell.row, cell.col) for cell in layout]
        assert positions == [(r, c) for r in range(5) for c in range(5)]

    def test_scaled_layout(self, small_template: GridTemplate) -> None:
        """Test doubling the resolution doubles offsets and grid-line trim."""
        layout = GridModel(small_template).layout(1040, 1040)

        assert layout.scale_x == pytest.approx(2.0)
        assert layout.get(0, 0).rect == Rect(24, 24, 192, 192)

    def test_grid_lines_round_up(self, small_template: GridTemplate) -> None:
        """Test a fractional grid-line trim is rounded up, never down."""
        layout = GridModel(small_template).layout(390, 390)
        # scale 0.75: cell 0 spans 7.5..82.5 -> 8..83, trim ceil(1.5) = 2
        assert layout.get(0, 0).rect == Rect(10, 10, 71, 71)

    @pytest.mark.parametrize(
        ("width", "height"),
        [
            (520, 520),
            (521, 517),
            (333, 340),
            (1234, 1200),
            (3300, 3300),
            (97, 99),
        ],
    )
    def test_cells_disjoint_and_in_bounds(
        self, small_template: GridTemplate, width: int, height: int
    ) -> None:
        """Test no two cells overlap and all lie inside the image."""
        layout = GridModel(small_template).layout(width, height)
        bounds = Rect(0, 0, width, height)

        for cell in layout:
            assert not cell.rect.is_empty()
            assert bounds.contains(cell.rect)

        for a, b in itertools.combinations(layout.cells, 2):
            assert not a.rect.intersects(b.rect), (a, b)

    @pytest.mark.parametrize(("width", "height"), [(3300, 2550), (1650, 1275), (2480, 1910)])
    def test_default_template_in_bounds(self, width: int, height: int) -> None:
        """Test common scan sizes of the bundled sheet."""
        layout = GridModel(default_template()).layout(width, height)
        bounds = Rect(0, 0, width, height)

        assert len(layout) == 108
        assert all(bounds.contains(cell.rect) for cell in layout)
        for a, b in itertools.combinations(layout.cells, 2):
            assert not a.rect.intersects(b.rect)

    def test_rotated_scan_rejected(self) -> None:
        """Test a portrait scan of a landscape sheet is rejected."""
        model = GridModel(default_template())
        with pytest.raises(InvalidGeometryError) as excinfo:
            model.layout(2550, 3300)

        assert excinfo.value.width == 2550
        assert excinfo.value.height == 3300
        assert "aspect ratio" in excinfo.value.reason

    def test_aspect_within_tolerance(self, small_template: GridTemplate) -> None:
        """Test a slightly off aspect ratio is accepted."""
        GridModel(small_template).layout(540, 520)

    def test_aspect_beyond_tolerance(self, small_template: GridTemplate) -> None:
        """Test the tolerance is configurable."""
        model = GridModel(small_template, GeometryConfig(aspect_tolerance=0.01))
        with pytest.raises(InvalidGeometryError):
            model.layout(540, 520)

    def test_zero_size_rejected(self, small_template: GridTemplate) -> None:
        """Test an image without pixels is rejected."""
        with pytest.raises(InvalidGeometryError, match="no pixels"):
            GridModel(small_template).layout(0, 0)

    def test_tiny_image_rejected(self, small_template: GridTemplate) -> None:
        """Test an image too small to hold the cells is rejected."""
        with pytest.raises(InvalidGeometryError, match="too small"):
            GridModel(small_template).layout(10, 10)


class TestCellExtractor:
    """Tests for CellExtractor class."""

    @pytest.fixture
    def image(self) -> ScannedImage:
        pixels = np.arange(520 * 520, dtype=np.uint32).reshape(520, 520) % 251
        return ScannedImage.from_array(pixels.astype(np.uint8))

    def test_one_slice_per_cell(self, small_template: GridTemplate, image: ScannedImage) -> None:
        """Test the extractor yields every cell once."""
        layout = GridModel(small_template).layout(image.width, image.height)
        extractor = CellExtractor(image, layout)

        cell_images = list(extractor)
        assert len(extractor) == 25
        assert [ci.cell for ci in cell_images] == list(layout.cells)

    def test_restartable(self, small_template: GridTemplate, image: ScannedImage) -> None:
        """Test iterating twice gives the same cells."""
        layout = GridModel(small_template).layout(image.width, image.height)
        extractor = CellExtractor(image, layout)

        first = [ci.cell for ci in extractor]
        second = [ci.cell for ci in extractor]
        assert first == second

    def test_slice_matches_rect(self, small_template: GridTemplate, image: ScannedImage) -> None:
        """Test each slice holds the pixels of its rectangle."""
        layout = GridModel(small_template).layout(image.width, image.height)
        cell = layout.get(2, 3)

        cell_image = CellExtractor(image, layout).extract(cell)

        assert cell_image.pixels.shape == (96, 96)
        np.testing.assert_array_equal(cell_image.pixels, image.pixels[212:308, 312:408])

    def test_slice_is_view(self, small_template: GridTemplate, image: ScannedImage) -> None:
        """Test slices share the scan buffer and stay read-only."""
        layout = GridModel(small_template).layout(image.width, image.height)
        cell_image = CellExtractor(image, layout).extract(layout.get(0, 0))

        assert np.shares_memory(cell_image.pixels, image.pixels)
        assert not cell_image.pixels.flags.writeable
