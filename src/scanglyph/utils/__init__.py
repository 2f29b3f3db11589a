"""Utility functions for scanglyph.

This module provides utility functions including:

- Logging setup and configuration
- Per-cell progress and statistics tracking
"""

from scanglyph.utils.logging import (
    ScanLogger,
    ScanStats,
    configure_logging,
)

__all__ = [
    "ScanLogger",
    "ScanStats",
    "configure_logging",
]
