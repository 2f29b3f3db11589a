"""End-to-end tests for the scan command."""

from pathlib import Path
from unittest.mock import patch

import numpy as np
import pytest
from PIL import Image
from typer.testing import CliRunner

from scanglyph import __version__
from scanglyph.cli.app import app
from scanglyph.exceptions import CellCorruptError

PAPER = 245
INK = 20

runner = CliRunner()


@pytest.fixture
def sheet() -> np.ndarray:
    """Blank sheet with the bundled template's proportions at 1/10 scale."""
    return np.full((255, 330), PAPER, dtype=np.uint8)


@pytest.fixture
def glyph_scan(tmp_path: Path, sheet: np.ndarray) -> Path:
    """Scan with ink in cells (0, 0) and (2, 3) only."""
    pixels = sheet.copy()
    pixels[28:36, 28:36] = INK  # cell (0, 0): x 23..45, y 21..43
    pixels[75:83, 100:108] = INK  # cell (2, 3): x 95..116, y 69..91
    path = tmp_path / "scan.png"
    Image.fromarray(pixels).save(path)
    return path


class TestScanCommand:
    """Tests for `scanglyph scan`."""

    def test_scan_writes_glyphs(self, glyph_scan: Path, tmp_path: Path) -> None:
        """Test a scan writes one file per filled cell and exits 0."""
        output_dir = tmp_path / "glyphs"

        result = runner.invoke(app, ["scan", str(glyph_scan), str(output_dir)])

        assert result.exit_code == 0, result.output
        assert sorted(p.name for p in output_dir.iterdir()) == [
            "glyph-r00-c00.png",
            "glyph-r02-c03.png",
        ]
        assert "2 glyphs saved" in result.output

    def test_blank_sheet_succeeds(self, tmp_path: Path, sheet: np.ndarray) -> None:
        """Test zero glyphs found is still a success."""
        scan = tmp_path / "blank.png"
        Image.fromarray(sheet).save(scan)
        output_dir = tmp_path / "glyphs"

        result = runner.invoke(app, ["scan", str(scan), str(output_dir)])

        assert result.exit_code == 0, result.output
        assert list(output_dir.iterdir()) == []
        assert "0 glyphs saved" in result.output

    def test_rotated_scan_fails(self, tmp_path: Path, sheet: np.ndarray) -> None:
        """Test a rotated scan exits non-zero without writing anything."""
        scan = tmp_path / "rotated.png"
        Image.fromarray(np.ascontiguousarray(sheet.T)).save(scan)
        output_dir = tmp_path / "glyphs"

        result = runner.invoke(app, ["scan", str(scan), str(output_dir)])

        assert result.exit_code == 1
        assert "does not match the template" in result.output
        assert not output_dir.exists()

    def test_rotated_scan_auto_rotate(self, tmp_path: Path, sheet: np.ndarray) -> None:
        """Test --auto-rotate accepts portrait scans."""
        scan = tmp_path / "rotated.png"
        Image.fromarray(np.ascontiguousarray(np.rot90(sheet, k=-1))).save(scan)

        result = runner.invoke(app, ["scan", str(scan), str(tmp_path / "out"), "--auto-rotate"])

        assert result.exit_code == 0, result.output

    def test_missing_input(self, tmp_path: Path) -> None:
        """Test a missing input file exits non-zero."""
        result = runner.invoke(app, ["scan", str(tmp_path / "nope.png"), str(tmp_path)])

        assert result.exit_code == 1
        assert "Input file not found" in result.output

    def test_unreadable_input(self, tmp_path: Path) -> None:
        """Test an undecodable input file exits non-zero."""
        scan = tmp_path / "scan.png"
        scan.write_text("not an image")

        result = runner.invoke(app, ["scan", str(scan), str(tmp_path / "out")])

        assert result.exit_code == 1
        assert "Could not read scan" in result.output

    def test_output_dir_is_file(self, glyph_scan: Path, tmp_path: Path) -> None:
        """Test an unusable output directory exits non-zero."""
        target = tmp_path / "taken"
        target.write_text("x")

        result = runner.invoke(app, ["scan", str(glyph_scan), str(target)])

        assert result.exit_code == 1
        assert "Could not use output directory" in result.output

    def test_invalid_format(self, glyph_scan: Path, tmp_path: Path) -> None:
        """Test an unknown output format is rejected."""
        result = runner.invoke(app, ["scan", str(glyph_scan), str(tmp_path), "--format", "gif"])

        assert result.exit_code == 1
        assert "Invalid format" in result.output

    def test_invalid_prefix(self, glyph_scan: Path, tmp_path: Path) -> None:
        """Test a prefix that is not a safe file name is rejected."""
        result = runner.invoke(app, ["scan", str(glyph_scan), str(tmp_path), "--prefix", "a/b"])

        assert result.exit_code == 1
        assert "Invalid option" in result.output

    def test_threshold_out_of_range(self, glyph_scan: Path, tmp_path: Path) -> None:
        """Test Typer enforces the threshold range."""
        result = runner.invoke(app, ["scan", str(glyph_scan), str(tmp_path), "-t", "300"])

        assert result.exit_code != 0

    def test_low_threshold_finds_nothing(self, glyph_scan: Path, tmp_path: Path) -> None:
        """Test the threshold option reaches the detector."""
        output_dir = tmp_path / "glyphs"

        result = runner.invoke(app, ["scan", str(glyph_scan), str(output_dir), "-t", "10"])

        assert result.exit_code == 0, result.output
        assert list(output_dir.iterdir()) == []

    def test_min_ink_option(self, glyph_scan: Path, tmp_path: Path) -> None:
        """Test cells with less ink than --min-ink count as empty."""
        output_dir = tmp_path / "glyphs"

        result = runner.invoke(app, ["scan", str(glyph_scan), str(output_dir), "-m", "65"])

        assert result.exit_code == 0, result.output
        assert list(output_dir.iterdir()) == []

    def test_format_and_prefix(self, glyph_scan: Path, tmp_path: Path) -> None:
        """Test naming options reach the composer and writer."""
        output_dir = tmp_path / "glyphs"

        result = runner.invoke(
            app,
            ["scan", str(glyph_scan), str(output_dir), "-f", "jpeg", "--prefix", "zelda", "-q"],
        )

        assert result.exit_code == 0, result.output
        assert sorted(p.name for p in output_dir.iterdir()) == [
            "zelda-r00-c00.jpg",
            "zelda-r02-c03.jpg",
        ]

    def test_dry_run(self, glyph_scan: Path, tmp_path: Path) -> None:
        """Test --dry-run writes nothing."""
        output_dir = tmp_path / "glyphs"

        result = runner.invoke(app, ["scan", str(glyph_scan), str(output_dir), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "2 glyphs found" in result.output
        assert not output_dir.exists()

    def test_skipped_cells_reported(self, glyph_scan: Path, tmp_path: Path) -> None:
        """Test partial failures exit 0 with a warning summary."""
        from scanglyph.core.detector import ContentDetector

        real_detect = ContentDetector.detect

        def flaky_detect(self, cell_image):
            if (cell_image.row, cell_image.col) == (2, 3):
                raise CellCorruptError(2, 3, "truncated pixel data")
            return real_detect(self, cell_image)

        output_dir = tmp_path / "glyphs"
        with patch.object(ContentDetector, "detect", flaky_detect):
            result = runner.invoke(app, ["scan", str(glyph_scan), str(output_dir)])

        assert result.exit_code == 0, result.output
        assert "1 cells skipped" in result.output
        assert [p.name for p in output_dir.iterdir()] == ["glyph-r00-c00.png"]

    def test_verbose_and_quiet(self, glyph_scan: Path, tmp_path: Path) -> None:
        """Test --verbose and --quiet are mutually exclusive."""
        result = runner.invoke(app, ["scan", str(glyph_scan), str(tmp_path), "-v", "-q"])

        assert result.exit_code == 1

    def test_verbose_lists_files(self, glyph_scan: Path, tmp_path: Path) -> None:
        """Test --verbose lists written file names."""
        result = runner.invoke(app, ["scan", str(glyph_scan), str(tmp_path / "out"), "-v"])

        assert result.exit_code == 0, result.output
        assert "glyph-r02-c03.png" in result.output

    def test_log_file(self, glyph_scan: Path, tmp_path: Path) -> None:
        """Test --log-file receives structured records."""
        log_file = tmp_path / "scan.log"

        result = runner.invoke(
            app,
            ["scan", str(glyph_scan), str(tmp_path / "out"), "-q", "--log-file", str(log_file)],
        )

        assert result.exit_code == 0, result.output
        assert "Scan complete" in log_file.read_text(encoding="utf-8")


class TestVersion:
    """Tests for --version."""

    def test_version(self) -> None:
        """Test the version flag prints the version and exits 0."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output
