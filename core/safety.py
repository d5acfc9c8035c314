"""
Hoversort — Safety & Resource Guards
Preflight checks run before any image is decoded.
Prevents oversized files, unsupported formats and runaway step sizes.
"""

import os
from pathlib import Path

# --- Configurable Limits ---
MAX_FILE_MB = 50           # Maximum input image size on disk
MAX_IMAGE_WIDTH = 800      # Images wider than this are downscaled
MAX_STEP_SIZE = 4096       # Maximum columns processed per tick
ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp", ".tif", ".tiff"}


class SafetyError(Exception):
    """Raised when a preflight check fails."""
    pass


def preflight(input_path: str) -> dict:
    """Run all safety checks before loading an image.

    Args:
        input_path: Path to the input image.

    Returns:
        dict with file metadata (path, size_mb, extension).

    Raises:
        SafetyError: If any check fails.
        FileNotFoundError: If input doesn't exist.
    """
    input_path = str(input_path)
    real_path = os.path.realpath(input_path)

    # 1. File exists
    if not os.path.isfile(real_path):
        raise FileNotFoundError(f"Image not found: {input_path}")

    # 2. File extension check
    ext = Path(real_path).suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise SafetyError(
            f"File type '{ext}' not allowed. "
            f"Supported: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )

    # 3. File size check
    size_mb = os.path.getsize(real_path) / (1024 * 1024)
    if size_mb > MAX_FILE_MB:
        raise SafetyError(
            f"Image is {size_mb:.0f}MB, exceeds {MAX_FILE_MB}MB limit."
        )

    return {
        "path": real_path,
        "size_mb": size_mb,
        "extension": ext,
    }


def validate_step_size(step_size) -> int:
    """Check that a columns-per-tick value is a usable positive integer.

    Raises:
        SafetyError: If the value is not an int in [1, MAX_STEP_SIZE].
    """
    if isinstance(step_size, bool) or not isinstance(step_size, int):
        raise SafetyError(f"Step size must be an integer, got {step_size!r}")
    if step_size < 1 or step_size > MAX_STEP_SIZE:
        raise SafetyError(f"Step size must be 1-{MAX_STEP_SIZE}, got {step_size}")
    return step_size


def validate_max_width(max_width) -> int:
    """Check a downscale width.

    Raises:
        SafetyError: If the value is not a positive integer.
    """
    if isinstance(max_width, bool) or not isinstance(max_width, int) or max_width < 1:
        raise SafetyError(f"Max width must be a positive integer, got {max_width!r}")
    return max_width
