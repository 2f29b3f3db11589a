"""Logging utilities for Scanglyph."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog

# Marks handlers installed by configure_logging so repeated calls replace them
_HANDLER_MARK = "_scanglyph_handler"


@dataclass
class ScanStats:
    """Statistics from a scan run."""

    cell_count: int = 0
    empty_count: int = 0
    extracted_count: int = 0
    skipped_count: int = 0
    write_error_count: int = 0
    skipped: list[tuple[str, str]] = field(default_factory=list)
    write_errors: list[tuple[str, str]] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    cell_timings_ms: list[float] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def has_failures(self) -> bool:
        """Whether any cell was skipped or any image failed to write."""
        return self.skipped_count > 0 or self.write_error_count > 0

    @property
    def avg_cell_time_ms(self) -> float | None:
        if not self.cell_timings_ms:
            return None
        return sum(self.cell_timings_ms) / len(self.cell_timings_ms)


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (no file logging if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            root_logger.removeHandler(handler)
            handler.close()

    handlers: list[logging.Handler] = []

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        handlers.append(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(console_handler)

    for handler in handlers:
        setattr(handler, _HANDLER_MARK, True)
        root_logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("scanglyph")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level if log_file else console_level,
    )

    return logger


class ScanLogger:
    """Logger for tracking per-cell progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = ScanStats()

    def log_cell_empty(self, cell_label: str, ink_pixels: int) -> None:
        """Log a cell without enough ink."""
        self._logger.debug("Cell empty", cell=cell_label, ink_pixels=ink_pixels)
        self._stats.empty_count += 1

    def log_cell_extracted(
        self,
        cell_label: str,
        ink_pixels: int,
        region: tuple[int, int, int, int],
        duration_ms: float,
    ) -> None:
        """Log a glyph found in a cell."""
        self._logger.info(
            "Glyph extracted",
            cell=cell_label,
            ink_pixels=ink_pixels,
            region=region,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.extracted_count += 1
        self._stats.cell_timings_ms.append(duration_ms)

    def log_cell_skipped(
        self,
        cell_label: str,
        error: str,
        error_type: str,
        traceback: str | None = None,
    ) -> None:
        """Log a cell that failed and was skipped."""
        self._logger.error(
            "Cell processing failed",
            cell=cell_label,
            error=error,
            error_type=error_type,
            traceback=traceback,
        )
        self._stats.skipped_count += 1
        self._stats.skipped.append((cell_label, error))

    def log_write_error(self, path: str, reason: str) -> None:
        """Log an artifact that could not be written."""
        self._logger.error("Write failed", path=path, reason=reason)
        self._stats.write_error_count += 1
        self._stats.write_errors.append((path, reason))

    def log_written(self, path: Path) -> None:
        """Log an artifact written to disk."""
        self._logger.debug("Glyph written", path=str(path))
        self._stats.written.append(path)

    @property
    def stats(self) -> ScanStats:
        """Get current scan statistics."""
        return self._stats
