"""Parallel processing orchestration for the scan pipeline.

This module coordinates the full workflow: decode the scan, lay the grid
over it, then detect, crop and write every cell using a ThreadPoolExecutor.
Cells only share the read-only scan buffer and the immutable layout, so
they need no synchronization.

Key components:
- CellResult: Outcome of processing a single cell
- process_cell: Per-cell pipeline, never raises
- SheetProcessor: Main orchestrator class
"""

import time
import traceback
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path

from scanglyph.config import ScanSettings
from scanglyph.core.composer import OutputComposer
from scanglyph.core.detector import ContentDetector
from scanglyph.core.extractor import CellExtractor
from scanglyph.core.grid import GridModel
from scanglyph.domain import CellImage, OutputArtifact
from scanglyph.exceptions import OutputWriteError
from scanglyph.io import ArtifactWriter, ScanReader
from scanglyph.utils import ScanLogger, ScanStats, configure_logging


@dataclass
class CellResult:
    """Outcome of processing one cell.

    Exactly one of three cases holds: ``error`` is set (cell skipped),
    ``artifact`` is set (glyph found), or neither (cell empty).
    """

    row: int
    col: int
    label: str
    ink_pixels: int = 0
    artifact: OutputArtifact | None = None
    error: str | None = None
    error_type: str | None = None
    traceback: str | None = None
    duration_ms: float = 0.0

    @property
    def is_empty(self) -> bool:
        return self.error is None and self.artifact is None


def process_cell(
    cell_image: CellImage,
    detector: ContentDetector,
    composer: OutputComposer,
) -> CellResult:
    """Classify one cell and compose its artifact.

    Failures are captured in the result rather than raised, so a damaged
    cell never takes the rest of the sheet down with it.

    Args:
        cell_image: Cell and its pixel slice
        detector: Ink detector
        composer: Artifact composer

    Returns:
        CellResult describing the outcome
    """
    start_time = time.time()
    cell = cell_image.cell

    try:
        detection = detector.detect(cell_image)
        artifact = composer.compose(cell_image, detection)

        return CellResult(
            row=cell.row,
            col=cell.col,
            label=cell.label,
            ink_pixels=detection.ink_pixels,
            artifact=artifact,
            duration_ms=(time.time() - start_time) * 1000,
        )

    except Exception as e:
        return CellResult(
            row=cell.row,
            col=cell.col,
            label=cell.label,
            error=str(e),
            error_type=type(e).__name__,
            traceback=traceback.format_exc(),
            duration_ms=(time.time() - start_time) * 1000,
        )


class SheetProcessor:
    """Orchestrates cutting a scanned sheet into glyph images.

    Manages the complete workflow:
    1. Decode the scan (fatal on failure)
    2. Lay the template grid over it (fatal on a geometry mismatch)
    3. Prepare the output directory (fatal if unusable)
    4. Process cells in parallel using worker threads
    5. Write every glyph found, recording per-cell failures

    Example:
        settings = ScanSettings()
        processor = SheetProcessor(settings)
        stats = processor.process(
            input_path=Path("scan.png"),
            output_dir=Path("glyphs"),
            max_workers=4,
        )
    """

    def __init__(self, config: ScanSettings) -> None:
        """Initialize sheet processor with configuration.

        Args:
            config: Scan settings containing template, detection and output config
        """
        self.config = config
        self.logger = configure_logging(
            log_file=config.logging.log_file,
            console_level=config.logging.log_level,
            file_level=config.logging.file_log_level,
            quiet=False,
        )
        self.grid_model = GridModel(config.template, config.geometry)
        self.detector = ContentDetector(config.detection)

    def process(
        self,
        input_path: Path,
        output_dir: Path,
        max_workers: int | None = None,
        dry_run: bool = False,
        progress_callback: Callable[[int, int, str, bool], None] | None = None,
    ) -> ScanStats:
        """Process a scanned sheet.

        Args:
            input_path: Path to the scanned image
            output_dir: Directory for glyph images
            max_workers: Maximum worker threads (None = config default / auto)
            dry_run: Detect and crop, but write nothing
            progress_callback: Optional callback(completed, total, cell_label, success)
                for progress updates

        Returns:
            ScanStats with counts, timing, and error details

        Raises:
            FileNotFoundError: If the scan file does not exist
            DecodeError: If the scan cannot be decoded
            InvalidGeometryError: If the scan does not match the template
            OutputDirectoryError: If the output directory cannot be used
            KeyboardInterrupt: If processing is cancelled by user
        """
        scan_logger = ScanLogger(self.logger)
        stats = scan_logger.stats
        stats.start_time = time.time()

        if max_workers is None:
            max_workers = self.config.processing.max_workers

        self.logger.info(
            "Starting scan",
            input=str(input_path),
            output=str(output_dir),
            max_workers=max_workers,
            dry_run=dry_run,
        )

        reader = ScanReader(input_path, self.config.preprocess)
        image = reader.load()

        self.logger.info(
            "Scan loaded",
            width=image.width,
            height=image.height,
            channels=image.channels,
        )

        layout = self.grid_model.layout(image.width, image.height)
        stats.cell_count = len(layout)

        self.logger.info(
            "Grid laid out",
            rows=layout.rows,
            columns=layout.columns,
            scale_x=round(layout.scale_x, 4),
            scale_y=round(layout.scale_y, 4),
        )

        writer = ArtifactWriter(output_dir, self.config.output.image_format)
        if not dry_run:
            writer.ensure_directory()

        composer = OutputComposer(output_dir, self.config.output)
        extractor = CellExtractor(image, layout)

        self._process_cells_parallel(
            extractor=extractor,
            composer=composer,
            writer=None if dry_run else writer,
            max_workers=max_workers,
            scan_logger=scan_logger,
            progress_callback=progress_callback,
        )

        stats.written.sort()
        stats.skipped.sort()
        stats.write_errors.sort()
        stats.end_time = time.time()

        self.logger.info(
            "Scan complete",
            cells=stats.cell_count,
            extracted=stats.extracted_count,
            empty=stats.empty_count,
            skipped=stats.skipped_count,
            write_errors=stats.write_error_count,
            duration_seconds=round(stats.duration_seconds, 2),
        )
        if stats.skipped_count:
            self.logger.warning("Cells skipped", count=stats.skipped_count)

        return stats

    def _process_cells_parallel(
        self,
        extractor: CellExtractor,
        composer: OutputComposer,
        writer: ArtifactWriter | None,
        max_workers: int | None,
        scan_logger: ScanLogger,
        progress_callback: Callable[[int, int, str, bool], None] | None = None,
    ) -> None:
        """Process cells in parallel using ThreadPoolExecutor.

        Args:
            extractor: Source of cell slices
            composer: Artifact composer
            writer: Artifact writer, or None for a dry run
            max_workers: Maximum worker threads
            scan_logger: Logger that accumulates statistics
            progress_callback: Optional callback(completed, total, cell_label, success)
                for progress updates
        """
        total = len(extractor)
        completed = 0
        pending_futures: dict = {}

        self.logger.info(
            "Starting parallel processing",
            cell_count=total,
            max_workers=max_workers,
        )

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            for cell_image in extractor:
                future = executor.submit(process_cell, cell_image, self.detector, composer)
                pending_futures[future] = cell_image.cell.label

            try:
                for future in as_completed(pending_futures):
                    label = pending_futures.pop(future)
                    success = False

                    try:
                        result = future.result()
                        success = self._handle_result(result, writer, scan_logger)
                    except Exception as e:
                        # Executor-level error
                        scan_logger.log_cell_skipped(
                            cell_label=label,
                            error=str(e),
                            error_type=type(e).__name__,
                            traceback=traceback.format_exc(),
                        )

                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total, label, success)

            except KeyboardInterrupt:
                self.logger.info("Cancellation requested by user")
                executor.shutdown(wait=True, cancel_futures=True)
                raise

    def _handle_result(
        self,
        result: CellResult,
        writer: ArtifactWriter | None,
        scan_logger: ScanLogger,
    ) -> bool:
        """Record a cell result and write its artifact.

        Returns:
            False if the cell was skipped or its image could not be written
        """
        if result.error is not None:
            scan_logger.log_cell_skipped(
                cell_label=result.label,
                error=result.error,
                error_type=result.error_type or "Exception",
                traceback=result.traceback,
            )
            return False

        if result.artifact is None:
            scan_logger.log_cell_empty(result.label, result.ink_pixels)
            return True

        artifact = result.artifact
        scan_logger.log_cell_extracted(
            cell_label=result.label,
            ink_pixels=result.ink_pixels,
            region=artifact.region.to_tuple(),
            duration_ms=result.duration_ms,
        )

        if writer is None:
            return True

        try:
            scan_logger.log_written(writer.write(artifact))
        except OutputWriteError as e:
            scan_logger.log_write_error(e.path, e.reason)
            return False

        return True
