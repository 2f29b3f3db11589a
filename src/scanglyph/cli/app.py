"""CLI application entry point for scanglyph.

This module provides the main CLI interface using Typer.
"""

import os
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from scanglyph import __version__
from scanglyph.cli.output import (
    console,
    create_progress,
    print_cancellation_notice,
    print_error,
    print_failure_summary,
    print_glyph_list,
    print_header,
    print_processing_info,
    print_scan_info,
    print_step,
    print_success,
)
from scanglyph.config import (
    DetectionConfig,
    ImageFormat,
    LoggingConfig,
    OutputConfig,
    PreprocessConfig,
    ProcessingConfig,
    ScanSettings,
)
from scanglyph.core import SheetProcessor
from scanglyph.exceptions import (
    DecodeError,
    InvalidGeometryError,
    OutputDirectoryError,
    ScanGlyphError,
)

# Create the Typer app
app = typer.Typer(
    name="scanglyph",
    help="Cut a scanned handwriting template sheet into one image per filled cell.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Scanglyph[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Cut a scanned handwriting template sheet into one image per filled cell."""


@app.command()
def scan(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="Scanned image of the handwriting sheet (PNG, JPEG, TIFF, ...)",
            show_default=False,
        ),
    ],
    output_dir: Annotated[
        Path,
        typer.Argument(
            help="Directory for the glyph images (created if missing)",
        ),
    ] = Path("."),
    threshold: Annotated[
        int,
        typer.Option(
            "--threshold",
            "-t",
            help="Luminance (0-255) below which a pixel counts as ink",
            min=0,
            max=255,
        ),
    ] = 190,
    min_ink: Annotated[
        int,
        typer.Option(
            "--min-ink",
            "-m",
            help="Ink pixels needed before a cell counts as filled",
            min=1,
        ),
    ] = 20,
    padding: Annotated[
        int,
        typer.Option(
            "--padding",
            "-p",
            help="Pixels of margin kept around each glyph",
            min=0,
        ),
    ] = 8,
    prefix: Annotated[
        str,
        typer.Option(
            "--prefix",
            help="File name prefix for glyph images",
        ),
    ] = "glyph",
    image_format: Annotated[
        str,
        typer.Option(
            "--format",
            "-f",
            help="Output image format (png|jpeg|bmp|tiff)",
        ),
    ] = "png",
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of parallel workers (default: auto)",
            min=1,
        ),
    ] = None,
    sharpen: Annotated[
        bool,
        typer.Option(
            "--sharpen",
            help="Sharpen the scan before looking for ink",
        ),
    ] = False,
    auto_rotate: Annotated[
        bool,
        typer.Option(
            "--auto-rotate",
            help="Rotate portrait scans into landscape before matching the grid",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Detect glyphs and report what would be saved without writing files",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
) -> None:
    """Scan a sheet of handwriting and save each filled cell as its own image.

    Print the handwriting template, write one letterform or symbol per cell
    (empty cells are fine), and scan the sheet, preferably at 300 DPI. The
    scan must be cropped to the sheet and straight; skew is not corrected.

    Example:
        scanglyph scan handwriting-scan.png glyphs/

    This will create glyphs/glyph-r00-c00.png and so on, one file per
    filled cell, named by row and column.
    """
    # Validate mutually exclusive options
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    # Validate input file exists
    if not input_file.exists():
        print_error(
            f"Input file not found: {input_file}",
            details=f"The file '{input_file}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not input_file.is_file():
        print_error(
            f"Input path is not a file: {input_file}",
            details="Please provide a path to a scanned image file.",
        )
        raise typer.Exit(code=1)

    # Validate format argument
    try:
        output_format = ImageFormat(image_format.lower())
    except ValueError:
        print_error(
            f"Invalid format: {image_format}",
            details="Valid values: png, jpeg, bmp, tiff",
        )
        raise typer.Exit(code=1)

    # Create settings from CLI arguments
    try:
        settings = ScanSettings(
            detection=DetectionConfig(
                threshold=threshold,
                min_ink_pixels=min_ink,
                padding=padding,
            ),
            preprocess=PreprocessConfig(
                auto_rotate=auto_rotate,
                sharpen=sharpen,
            ),
            output=OutputConfig(
                prefix=prefix,
                image_format=output_format,
            ),
            processing=ProcessingConfig(
                max_workers=workers,
            ),
            logging=LoggingConfig(
                log_file=log_file,
                log_level=log_level if not quiet else "WARNING",
            ),
        )
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        print_error(f"Invalid option {field}: {first['msg']}")
        raise typer.Exit(code=1)

    if not quiet:
        print_header(__version__)
        print_step("Loading scan")
        print_scan_info(
            scan_path=str(input_file),
            rows=settings.template.rows,
            columns=settings.template.columns,
            threshold=threshold,
        )

    try:
        processor = SheetProcessor(settings)

        if not quiet:
            actual_workers = workers if workers else min(32, (os.cpu_count() or 1) + 4)
            print_step("Scanning cells")
            print_processing_info(actual_workers, is_auto=(workers is None))

        try:
            if not quiet:
                with create_progress() as progress:
                    task_id = progress.add_task(
                        f"Scanning {settings.template.cell_count} cells",
                        total=settings.template.cell_count,
                    )

                    def update_progress(completed: int, *_: object) -> None:
                        progress.update(task_id, completed=completed)

                    stats = processor.process(
                        input_path=input_file,
                        output_dir=output_dir,
                        max_workers=workers,
                        dry_run=dry_run,
                        progress_callback=update_progress,
                    )
            else:
                stats = processor.process(
                    input_path=input_file,
                    output_dir=output_dir,
                    max_workers=workers,
                    dry_run=dry_run,
                )
        except KeyboardInterrupt:
            if not quiet:
                print_cancellation_notice()
            raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code

        if not quiet:
            print_success(
                output_dir=str(output_dir),
                total_time_s=stats.duration_seconds,
                cells=stats.cell_count,
                extracted=stats.extracted_count,
                empty=stats.empty_count,
                dry_run=dry_run,
            )
            if verbose and stats.written:
                print_glyph_list([path.name for path in stats.written])

        # Partial failures are reported even in quiet mode, but never fail the run
        print_failure_summary(
            skipped=stats.skipped,
            write_errors=stats.write_errors,
            verbose=verbose,
        )

    except DecodeError as e:
        print_error(f"Could not read scan: {e.reason}")
        raise typer.Exit(code=1)
    except InvalidGeometryError as e:
        print_error(
            f"Scan does not match the template: {e.reason}",
            details="Crop the scan to the sheet, or try --auto-rotate for portrait scans.",
        )
        raise typer.Exit(code=1)
    except OutputDirectoryError as e:
        print_error(f"Could not use output directory: {e.reason}")
        raise typer.Exit(code=1)
    except ScanGlyphError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
