"""Pytest configuration and shared fixtures for the resistor band pipeline.

Provides synthetic model outputs and pixel buffers so the pipeline can be
exercised without real model files.
"""
import logging
import sys
import tempfile
from pathlib import Path

import numpy as np
import pytest

# Add the project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from resistorvision.core.colors import ColorLabel
from resistorvision.core.entities import PixelBuffer
from tests.helpers import class_id_of, make_output


# Configure logging for tests
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def gradient_buffer():
    """8x8 buffer where pixel (x, y) holds (x/10, y/10, 0.5)."""
    side = 8
    data = np.zeros((side, side, 3), dtype=np.float32)
    xs = np.arange(side, dtype=np.float32) / 10.0
    data[:, :, 0] = xs[np.newaxis, :]
    data[:, :, 1] = xs[:, np.newaxis]
    data[:, :, 2] = 0.5
    return PixelBuffer(data)


@pytest.fixture
def photo_buffer():
    """32px buffer standing in for a normalized photo."""
    return PixelBuffer(np.full((32, 32, 3), 0.4, dtype=np.float32))


@pytest.fixture
def four_band_output():
    """Band model output for brown-black-red-gold, plus a duplicate red box."""
    return make_output(20, 12, [
        (0.2, 0.5, 0.05, 0.5, class_id_of(ColorLabel.BROWN), 0.9),
        (0.4, 0.5, 0.05, 0.5, class_id_of(ColorLabel.BLACK), 0.8),
        (0.6, 0.5, 0.05, 0.5, class_id_of(ColorLabel.RED), 0.85),
        (0.61, 0.5, 0.05, 0.5, class_id_of(ColorLabel.RED), 0.5),
        (0.8, 0.5, 0.05, 0.5, class_id_of(ColorLabel.GOLD), 0.7),
    ])


@pytest.fixture
def resistor_output():
    """Localization output with one confident resistor and one weak duplicate."""
    return make_output(20, 0, [
        (0.5, 0.5, 0.5, 0.25, None, 0.92),
        (0.51, 0.5, 0.5, 0.25, None, 0.45),
        (0.1, 0.1, 0.1, 0.1, None, 0.2),
    ])

