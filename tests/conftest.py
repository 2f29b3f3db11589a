"""Shared fixtures for scanglyph tests."""

import numpy as np
import pytest

from scanglyph.config import GridTemplate

PAPER = 245
INK = 20


@pytest.fixture
def small_template() -> GridTemplate:
    """A 5x5 template with 100 px cells and 10 px margins at 520x520."""
    return GridTemplate(
        rows=5,
        columns=5,
        reference_width=520,
        reference_height=520,
        cell_width=100,
        cell_height=100,
        cell_gap=0,
        margin_x=10,
        margin_y=10,
        line_thickness=2,
    )


@pytest.fixture
def blank_sheet() -> np.ndarray:
    """A blank 520x520 grayscale sheet."""
    return np.full((520, 520), PAPER, dtype=np.uint8)
