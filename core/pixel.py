"""
Hoversort — Pixel Buffers
RGBA8 pixel grids backed by (H, W, 4) uint8 numpy arrays.

Two buffers live in every engine: a frozen `original` and a mutable
`display`. They must always share the same width and height.
"""

from typing import NamedTuple

import numpy as np


class DimensionMismatch(AssertionError):
    """Two buffers that must share W x H do not."""
    pass


class Pixel(NamedTuple):
    """One RGBA8 color."""
    r: int
    g: int
    b: int
    a: int = 255

    @property
    def rgb(self):
        return (self.r, self.g, self.b)

    def opaque(self):
        """Same color with alpha forced to 255."""
        return self._replace(a=255)


class PixelBuffer:
    """A width x height grid of RGBA8 pixels.

    Args:
        array: (H, W, 4) RGBA or (H, W, 3) RGB uint8 array. RGB input gets
               alpha 255. The array is copied.
    """

    def __init__(self, array):
        arr = np.asarray(array)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise ValueError(f"Expected (H, W, 3) or (H, W, 4) array, got shape {arr.shape}")
        if arr.shape[0] == 0 or arr.shape[1] == 0:
            raise ValueError(f"Buffer must be at least 1x1, got {arr.shape[1]}x{arr.shape[0]}")
        if arr.dtype != np.uint8:
            if arr.dtype.kind == "f" and not np.isfinite(arr).all():
                raise ValueError("Pixel values must be finite")
            if arr.min() < 0 or arr.max() > 255:
                raise ValueError("Pixel values must be in 0-255")
            arr = arr.astype(np.uint8)

        if arr.shape[2] == 3:
            rgba = np.empty((arr.shape[0], arr.shape[1], 4), dtype=np.uint8)
            rgba[:, :, :3] = arr
            rgba[:, :, 3] = 255
            self._data = rgba
        else:
            self._data = np.array(arr, dtype=np.uint8, copy=True)

    @classmethod
    def blank(cls, width: int, height: int, color=(0, 0, 0, 0)):
        arr = np.empty((height, width, 4), dtype=np.uint8)
        arr[:, :] = color
        return cls(arr)

    @classmethod
    def from_image(cls, image):
        """Build from a PIL image (converted to RGBA)."""
        return cls(np.asarray(image.convert("RGBA")))

    def to_image(self):
        from PIL import Image
        return Image.fromarray(self._data)

    # --- Geometry ---

    @property
    def width(self) -> int:
        return self._data.shape[1]

    @property
    def height(self) -> int:
        return self._data.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def array(self) -> np.ndarray:
        """Backing (H, W, 4) array. Read-only when the buffer is frozen."""
        return self._data

    @property
    def frozen(self) -> bool:
        return not self._data.flags.writeable

    def freeze(self):
        """Make the buffer immutable. Returns self."""
        self._data.setflags(write=False)
        return self

    def copy(self):
        """Deep, writable copy."""
        return PixelBuffer(self._data)

    def _check_same_size(self, other):
        if self.size != other.size:
            raise DimensionMismatch(
                f"Buffer size {self.width}x{self.height} does not match "
                f"{other.width}x{other.height}"
            )

    # --- Reads ---

    def pixel(self, x: int, y: int) -> Pixel:
        r, g, b, a = self._data[y, x]
        return Pixel(int(r), int(g), int(b), int(a))

    def column_array(self, x: int) -> np.ndarray:
        """Copy of column x as an (H, 4) array."""
        return self._data[:, x].copy()

    def column(self, x: int) -> list[Pixel]:
        return [Pixel(*map(int, px)) for px in self._data[:, x]]

    def same_pixels(self, other) -> bool:
        return self.size == other.size and np.array_equal(self._data, other._data)

    # --- Writes ---

    def write_column(self, x: int, pixels):
        """Overwrite column x with H pixels (array or Pixel sequence)."""
        col = np.asarray(pixels, dtype=np.uint8)
        if col.shape != (self.height, 4):
            raise ValueError(f"Column must be ({self.height}, 4), got {col.shape}")
        self._data[:, x] = col

    def copy_columns_from(self, src, start: int, end: int):
        """Copy columns [start, end) of src into the same columns here.

        The range is clamped to [0, width], so a block near either edge copies
        only the columns that exist.
        """
        self._check_same_size(src)
        start = max(0, start)
        end = min(self.width, end)
        if end > start:
            self._data[:, start:end] = src._data[:, start:end]

    def copy_from(self, src):
        self._check_same_size(src)
        self._data[:] = src._data

    def __repr__(self):
        state = " frozen" if self.frozen else ""
        return f"<PixelBuffer {self.width}x{self.height}{state}>"
