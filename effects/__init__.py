"""
Hoversort — Sort Key Registry
Every sort key is a function: (pixels: np.ndarray[..., 3+]) -> np.ndarray of scalars.
"""

from effects.pixelsort import (
    SORT_KEYS,
    DEFAULT_SORT_KEY,
    get_sort_key,
    brightness_of,
    sort_column,
    sort_columns,
)

SORT_KEY_INFO = {
    "brightness": {
        "description": "HSB brightness, max(R, G, B) on a 0-100 scale",
        "range": (0.0, 100.0),
    },
    "luminance": {
        "description": "Perceptual luminance, 0.299R + 0.587G + 0.114B",
        "range": (0.0, 255.0),
    },
}


def list_sort_keys() -> list[dict]:
    """List all available sort keys with descriptions."""
    return [
        {
            "name": name,
            "description": SORT_KEY_INFO[name]["description"],
            "range": SORT_KEY_INFO[name]["range"],
            "default": name == DEFAULT_SORT_KEY,
        }
        for name in SORT_KEYS
    ]


__all__ = [
    "SORT_KEYS",
    "SORT_KEY_INFO",
    "DEFAULT_SORT_KEY",
    "get_sort_key",
    "brightness_of",
    "sort_column",
    "sort_columns",
    "list_sort_keys",
]
