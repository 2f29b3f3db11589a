"""Configuration management for scanglyph.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- GridTemplate: Geometry of the printed handwriting sheet
- DetectionConfig: Ink threshold, minimum ink and padding
- OutputConfig: Output naming and encoding
- ScanSettings: Main application settings
"""

from scanglyph.config.settings import (
    DetectionConfig,
    GeometryConfig,
    GridTemplate,
    ImageFormat,
    LoggingConfig,
    OutputConfig,
    PreprocessConfig,
    ProcessingConfig,
    ScanSettings,
    default_template,
    get_default_settings,
)

__all__ = [
    "DetectionConfig",
    "GeometryConfig",
    "GridTemplate",
    "ImageFormat",
    "LoggingConfig",
    "OutputConfig",
    "PreprocessConfig",
    "ProcessingConfig",
    "ScanSettings",
    "default_template",
    "get_default_settings",
]
