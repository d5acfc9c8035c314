"""
Hoversort — Image Source
Decodes image files into PixelBuffers, downscaling wide images.
"""

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from core.pixel import PixelBuffer
from core.safety import preflight, SafetyError, MAX_IMAGE_WIDTH, ALLOWED_EXTENSIONS

logger = logging.getLogger(__name__)


class LoadFailure(Exception):
    """An image could not be turned into a pixel buffer.

    Attributes:
        path: The requested image path.
        reason: Human-readable cause.
    """

    def __init__(self, path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Could not load {self.path}: {reason}")


def _target_size(width: int, height: int, max_width: int) -> tuple[int, int]:
    """Size after capping width at max_width, keeping aspect ratio."""
    if width <= max_width:
        return (width, height)
    new_height = max(1, round(height * max_width / width))
    return (max_width, new_height)


def load_image(path, max_width: int = MAX_IMAGE_WIDTH) -> PixelBuffer:
    """Load an image file as an RGBA PixelBuffer.

    Args:
        path: Image file path.
        max_width: Images wider than this are resized down (aspect kept).

    Returns:
        PixelBuffer with the decoded (and possibly downscaled) pixels.

    Raises:
        LoadFailure: Missing, disallowed, oversized or undecodable file.
    """
    try:
        info = preflight(path)
    except (FileNotFoundError, SafetyError) as e:
        raise LoadFailure(path, str(e)) from e

    try:
        with Image.open(info["path"]) as img:
            img.load()
            rgba = img.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise LoadFailure(path, f"decode failed ({e})") from e

    size = _target_size(rgba.width, rgba.height, max_width)
    if size != rgba.size:
        logger.debug("Downscaling %s from %dx%d to %dx%d", path, *rgba.size, *size)
        rgba = rgba.resize(size, Image.LANCZOS)

    return PixelBuffer.from_image(rgba)


def find_images(directory) -> list[Path]:
    """Image files directly inside a directory, sorted by name."""
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Image directory not found: {directory}")
    return sorted(
        p for p in directory.iterdir()
        if p.is_file() and p.suffix.lower() in ALLOWED_EXTENSIONS
    )
