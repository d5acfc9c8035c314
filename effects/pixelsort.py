"""
Hoversort — Column Pixel Sort
Sorts the pixels of individual image columns by brightness.
Each column is sorted on its own; pixels never move between columns.
"""

import numpy as np


def _brightness(pixels):
    """HSB brightness: max(R, G, B) scaled to 0-100."""
    return pixels[..., :3].max(axis=-1).astype(float) * (100.0 / 255.0)


def _luminance(pixels):
    """Luminance: 0.299R + 0.587G + 0.114B"""
    rgb = pixels[..., :3].astype(float)
    return 0.299 * rgb[..., 0] + 0.587 * rgb[..., 1] + 0.114 * rgb[..., 2]


SORT_KEYS = {
    "brightness": _brightness,
    "luminance": _luminance,
}

DEFAULT_SORT_KEY = "brightness"


def get_sort_key(sort_by: str):
    """Look up a key function by name.

    Raises:
        ValueError: If the name is not in SORT_KEYS.
    """
    try:
        return SORT_KEYS[sort_by]
    except KeyError:
        raise ValueError(
            f"Unknown sort key: '{sort_by}'. Available: {', '.join(sorted(SORT_KEYS))}"
        ) from None


def brightness_of(pixel, sort_by: str = DEFAULT_SORT_KEY) -> float:
    """Scalar sort key for a single pixel. Alpha is ignored."""
    rgb = np.asarray(tuple(pixel)[:3], dtype=np.uint8)
    return float(get_sort_key(sort_by)(rgb))


def sort_column(column: np.ndarray, sort_by: str = DEFAULT_SORT_KEY) -> np.ndarray:
    """Sort one column of RGBA pixels ascending by brightness.

    Args:
        column: (H, 4) uint8 RGBA array.
        sort_by: Key name from SORT_KEYS.

    Returns:
        New (H, 4) array, darkest pixel first, alpha forced to 255.
    """
    keys = get_sort_key(sort_by)(column)
    order = np.argsort(keys, kind="stable")
    result = column[order].copy()
    result[:, 3] = 255
    return result


def sort_columns(frame: np.ndarray, start: int, end: int, sort_by: str = DEFAULT_SORT_KEY):
    """Yield (x, sorted_column) for x in [start, end), left to right.

    Only reads from `frame`, so the source must not be the buffer being written.
    """
    get_sort_key(sort_by)
    for x in range(start, end):
        yield x, sort_column(frame[:, x], sort_by)
