"""
Conftest: shared fixtures for all Hoversort test modules.

1. Synthetic RGBA frames (gradients and random noise, never blank)
2. Image files on disk for loader / gallery / CLI tests
3. Engine factory with a headless recording surface
"""

import logging
import os
import sys

import numpy as np
import pytest
from PIL import Image

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.engine import ColumnSortEngine
from core.pixel import PixelBuffer
from core.surface import ArraySurface


def _make_test_frame(width=32, height=24, seed=0):
    """Random RGBA frame with varied (not all-opaque) alpha."""
    rng = np.random.default_rng(seed)
    frame = rng.integers(0, 256, (height, width, 4), dtype=np.uint8)
    frame[:, :, 3] = rng.integers(0, 256, (height, width), dtype=np.uint8)
    return frame


def _make_gradient_frame(width=32, height=24):
    """Vertical gradient, bright at the top, so every column starts reverse-sorted."""
    frame = np.zeros((height, width, 4), dtype=np.uint8)
    ramp = np.linspace(255, 0, height, dtype=np.uint8)
    frame[:, :, 0] = ramp[:, None]
    frame[:, :, 1] = ramp[:, None]
    frame[:, :, 2] = np.linspace(0, 255, width, dtype=np.uint8)[None, :] // 4
    frame[:, :, 3] = 128
    return frame


def _write_image(path, width=40, height=30, mode="RGB"):
    frame = _make_test_frame(width, height)
    channels = 4 if mode == "RGBA" else 3
    Image.fromarray(np.ascontiguousarray(frame[:, :, :channels])).save(path)
    return path


@pytest.fixture
def small_frame():
    return _make_test_frame()


@pytest.fixture
def small_buffer(small_frame):
    return PixelBuffer(small_frame)


@pytest.fixture
def make_engine():
    """Factory: make_engine(frame=None, step_size=4, sort_by='brightness')."""
    def _factory(frame=None, step_size=4, sort_by="brightness"):
        if frame is None:
            frame = _make_test_frame()
        engine = ColumnSortEngine(step_size=step_size, sort_by=sort_by,
                                  surface=ArraySurface(record=True))
        engine.initialize(PixelBuffer(frame))
        return engine
    return _factory


@pytest.fixture
def image_file(tmp_path):
    return _write_image(tmp_path / "sample.png")


@pytest.fixture
def image_dir(tmp_path):
    """Directory with three images and one non-image file."""
    d = tmp_path / "images"
    d.mkdir()
    _write_image(d / "b.png", 20, 10)
    _write_image(d / "a.jpg", 16, 12)
    _write_image(d / "c.png", 12, 16, mode="RGBA")
    (d / "notes.txt").write_text("not an image")
    return d


@pytest.fixture
def gradient_frame():
    return _make_gradient_frame()


# ---------------------------------------------------------------------------
# Logging reset — CLI tests install handlers on project loggers
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers setup_logging() added so they never outlive a test."""
    from core.log import PROJECT_LOGGERS

    yield

    for name in PROJECT_LOGGERS:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)
