"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars and formatted messages.
"""


from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.text import Text

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_WARN = "!"  # Warning
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for cell processing.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Scanglyph[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_scan_info(scan_path: str, rows: int, columns: int, threshold: int) -> None:
    """Print what is about to be scanned.

    Args:
        scan_path: Path to the scanned image
        rows: Template rows
        columns: Template columns
        threshold: Ink luminance threshold
    """
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    line.append(scan_path)
    console.print(line)
    console.print(f"  {columns}x{rows} grid {SYM_DOT} ink below luminance {threshold}")


def print_processing_info(workers: int, is_auto: bool = False) -> None:
    """Print processing configuration.

    Args:
        workers: Number of parallel workers
        is_auto: Whether the count was auto-detected
    """
    auto_suffix = " (auto)" if is_auto else ""
    console.print(f"  {workers} workers{auto_suffix} {SYM_DOT} Ctrl+C to cancel")


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_success(
    output_dir: str,
    total_time_s: float,
    cells: int,
    extracted: int,
    empty: int,
    dry_run: bool = False,
) -> None:
    """Print success message with summary.

    Args:
        output_dir: Directory the glyphs were written to
        total_time_s: Total processing time in seconds
        cells: Number of cells on the sheet
        extracted: Number of glyphs found
        empty: Number of empty cells
        dry_run: Whether nothing was written
    """
    time_str = _format_time(total_time_s)
    title = "Dry run complete" if dry_run else "Complete"

    console.print(f"\n[bold green]{SYM_OK} {title}[/bold green] in {time_str}")

    if not dry_run:
        line = Text("  ")
        line.append(output_dir, style="bold")
        console.print(line)

    verb = "found" if dry_run else "saved"
    console.print(
        f"  {cells} cells {SYM_DOT} [green]{extracted} glyphs {verb}[/green] {SYM_DOT} {empty} empty"
    )


def print_glyph_list(paths: list[str], limit: int = 20) -> None:
    """Print the written file names.

    Args:
        paths: File names of written glyphs
        limit: Maximum number of names to print
    """
    for path in paths[:limit]:
        console.print(f"  {path}")
    if len(paths) > limit:
        console.print(f"  {SYM_DOT}{SYM_DOT}{SYM_DOT} (+{len(paths) - limit} more)")


def print_failure_summary(
    skipped: list[tuple[str, str]],
    write_errors: list[tuple[str, str]],
    verbose: bool,
) -> None:
    """Print the warning summary for partial failures.

    Args:
        skipped: (cell label, error) for every skipped cell
        write_errors: (path, reason) for every image that failed to write
        verbose: Whether to list each failure
    """
    if skipped:
        console.print(f"\n[bold yellow]{SYM_WARN} {len(skipped)} cells skipped[/bold yellow]")
        if verbose:
            for label, error in skipped:
                console.print(f"  {label}: {error}")
    if write_errors:
        console.print(
            f"\n[bold yellow]{SYM_WARN} {len(write_errors)} images not written[/bold yellow]"
        )
        for path, reason in write_errors:
            line = Text("  ")
            line.append(path)
            line.append(f": {reason}")
            console.print(line)


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")


def print_cancellation_notice() -> None:
    """Print cancellation acknowledgment."""
    console.print(f"\n{SYM_DOT} Cancelled {SYM_DOT} images already written were kept")
