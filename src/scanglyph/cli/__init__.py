"""Command-line interface for scanglyph.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Progress bar for cell processing
- Verbose/quiet output modes
- Dry-run mode for tuning thresholds
- Summary of skipped cells and failed writes
"""

from scanglyph.cli.app import cli, main

__all__ = ["cli", "main"]
